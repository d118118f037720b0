# File: const.py
"""Constants for the HabitQuest integration.

This file centralizes configuration keys, defaults, storage keys, event names,
rule constants and platform identifiers for consistency across the integration.
Display strings are NOT defined here - they live in translations/en.json and are
looked up through the translation keys below.
"""

import logging

import homeassistant.util.dt as dt_util
from homeassistant.const import Platform

from .utils import dt_utils


def set_default_timezone(hass):
    """Set the default timezone based on the Home Assistant configuration.

    The pure dt_utils module keeps its own copy, so it is updated as well.
    """
    global DEFAULT_TIME_ZONE
    DEFAULT_TIME_ZONE = dt_util.get_time_zone(hass.config.time_zone)
    if DEFAULT_TIME_ZONE is not None:
        dt_utils.set_default_timezone(DEFAULT_TIME_ZONE)


# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
HABITQUEST_TITLE = "HabitQuest"

# Integration Domain
DOMAIN = "habitquest"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.BUTTON,
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORE = "store"
STORAGE_KEY = "habitquest_data"
STORAGE_VERSION = 1
SCHEMA_VERSION = 1

# Default timezone: initially None, to be set once hass is available.
DEFAULT_TIME_ZONE = None

# ------------------------------------------------------------------------------------------------
# Configuration Keys (config entry options)
# ------------------------------------------------------------------------------------------------

CONF_XP_HISTORY_SIZE = "xp_history_size"

DEFAULT_XP_HISTORY_SIZE = 50
MIN_XP_HISTORY_SIZE = 1
MAX_XP_HISTORY_SIZE = 200

# ConfigFlow / OptionsFlow steps
CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

# ------------------------------------------------------------------------------------------------
# Storage Keys
# ------------------------------------------------------------------------------------------------

DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"
DATA_META_LAST_RESET = "last_reset"

DATA_PROFILE = "profile"
DATA_ACHIEVEMENTS = "achievements"
DATA_TROPHIES = "trophies"
DATA_XP_EVENTS = "xp_events"
DATA_CLAIMED_REWARDS = "claimed_rewards"

# Profile fields
DATA_PROFILE_TOTAL_XP = "total_xp"
DATA_PROFILE_TOTAL_COMPLETIONS = "total_completions"
DATA_PROFILE_MAX_STREAK = "max_streak"
DATA_PROFILE_CURRENT_STREAK = "current_streak"
DATA_PROFILE_UNLOCKED_ACHIEVEMENT_IDS = "unlocked_achievement_ids"
DATA_PROFILE_UNLOCKED_TROPHY_IDS = "unlocked_trophy_ids"
DATA_PROFILE_DAILY_LOGIN_STREAK = "daily_login_streak"
DATA_PROFILE_LAST_LOGIN_DATE = "last_login_date"
DATA_PROFILE_JOIN_DATE = "join_date"
DATA_PROFILE_PERFECT_MONTHS = "perfect_months"
DATA_PROFILE_PHOTOS_ADDED = "photos_added"
DATA_PROFILE_MODELS_3D_CREATED = "models_3d_created"
DATA_PROFILE_AI_HABITS_CREATED = "ai_habits_created"
DATA_PROFILE_HABITS_CREATED = "habits_created"
DATA_PROFILE_CATEGORIES_USED = "categories_used"
DATA_PROFILE_EARLY_COMPLETIONS = "early_completions"
DATA_PROFILE_LATE_COMPLETIONS = "late_completions"
DATA_PROFILE_NEW_YEAR_COMPLETIONS = "new_year_completions"
DATA_PROFILE_COMEBACKS = "comebacks"

# Plain integer counters on the profile (all clamped to >= 0)
PROFILE_COUNTER_FIELDS = (
    DATA_PROFILE_TOTAL_XP,
    DATA_PROFILE_TOTAL_COMPLETIONS,
    DATA_PROFILE_MAX_STREAK,
    DATA_PROFILE_CURRENT_STREAK,
    DATA_PROFILE_DAILY_LOGIN_STREAK,
    DATA_PROFILE_PERFECT_MONTHS,
    DATA_PROFILE_PHOTOS_ADDED,
    DATA_PROFILE_MODELS_3D_CREATED,
    DATA_PROFILE_AI_HABITS_CREATED,
    DATA_PROFILE_HABITS_CREATED,
    DATA_PROFILE_EARLY_COMPLETIONS,
    DATA_PROFILE_LATE_COMPLETIONS,
    DATA_PROFILE_NEW_YEAR_COMPLETIONS,
    DATA_PROFILE_COMEBACKS,
)

# Per-item unlock state (achievements and trophies)
DATA_UNLOCK_UNLOCKED = "unlocked"
DATA_UNLOCK_UNLOCKED_AT = "unlocked_at"

# XP event fields
DATA_XP_EVENT_AMOUNT = "amount"
DATA_XP_EVENT_REASON = "reason"
DATA_XP_EVENT_REFERENCE = "reference"
DATA_XP_EVENT_TIMESTAMP = "timestamp"
DATA_XP_EVENT_IS_BONUS = "is_bonus"

# Claimed daily reward fields
DATA_CLAIM_DATE = "date"
DATA_CLAIM_DAY = "day"
DATA_CLAIM_XP_EARNED = "xp_earned"
DATA_CLAIM_MULTIPLIER = "multiplier"
DATA_CLAIM_BONUS_TYPE = "bonus_type"

# ------------------------------------------------------------------------------------------------
# Catalog Enumerations
# ------------------------------------------------------------------------------------------------

# Achievement categories
ACHIEVEMENT_CATEGORY_STREAK = "streak"
ACHIEVEMENT_CATEGORY_COMPLETION = "completion"
ACHIEVEMENT_CATEGORY_CONSISTENCY = "consistency"
ACHIEVEMENT_CATEGORY_EXPLORER = "explorer"
ACHIEVEMENT_CATEGORY_SOCIAL = "social"
ACHIEVEMENT_CATEGORY_SPECIAL = "special"

ACHIEVEMENT_CATEGORIES = [
    ACHIEVEMENT_CATEGORY_STREAK,
    ACHIEVEMENT_CATEGORY_COMPLETION,
    ACHIEVEMENT_CATEGORY_CONSISTENCY,
    ACHIEVEMENT_CATEGORY_EXPLORER,
    ACHIEVEMENT_CATEGORY_SOCIAL,
    ACHIEVEMENT_CATEGORY_SPECIAL,
]

# Achievement rarities and their base XP reward
RARITY_COMMON = "common"
RARITY_UNCOMMON = "uncommon"
RARITY_RARE = "rare"
RARITY_EPIC = "epic"
RARITY_LEGENDARY = "legendary"

RARITY_XP_REWARDS = {
    RARITY_COMMON: 10,
    RARITY_UNCOMMON: 25,
    RARITY_RARE: 50,
    RARITY_EPIC: 100,
    RARITY_LEGENDARY: 250,
}

# Trophy tiers and their XP bonus
TROPHY_TIER_BRONZE = "bronze"
TROPHY_TIER_SILVER = "silver"
TROPHY_TIER_GOLD = "gold"
TROPHY_TIER_PLATINUM = "platinum"
TROPHY_TIER_DIAMOND = "diamond"

TROPHY_TIER_XP_BONUS = {
    TROPHY_TIER_BRONZE: 50,
    TROPHY_TIER_SILVER: 100,
    TROPHY_TIER_GOLD: 200,
    TROPHY_TIER_PLATINUM: 400,
    TROPHY_TIER_DIAMOND: 1000,
}

# Trophy requirement types
TROPHY_REQUIREMENT_TOTAL_COMPLETIONS = "total_completions"
TROPHY_REQUIREMENT_MAX_STREAK = "max_streak"
TROPHY_REQUIREMENT_MONTHLY_PERFECT = "monthly_perfect"
TROPHY_REQUIREMENT_TOTAL_XP = "total_xp"
TROPHY_REQUIREMENT_LEVEL = "level"
TROPHY_REQUIREMENT_ACHIEVEMENTS_UNLOCKED = "achievements_unlocked"

# Achievement metrics (which profile aggregate feeds an achievement's progress)
METRIC_MAX_STREAK = "max_streak"
METRIC_TOTAL_COMPLETIONS = "total_completions"
METRIC_PHOTOS_ADDED = "photos_added"
METRIC_MODELS_3D_CREATED = "models_3d_created"
METRIC_AI_HABITS_CREATED = "ai_habits_created"
METRIC_HABITS_CREATED = "habits_created"
METRIC_CATEGORIES_USED = "categories_used"
METRIC_LEVEL = "level"
METRIC_EARLY_COMPLETIONS = "early_completions"
METRIC_LATE_COMPLETIONS = "late_completions"
METRIC_NEW_YEAR_COMPLETIONS = "new_year_completions"
METRIC_COMEBACKS = "comebacks"
# Catalogued without an upstream feed; progress stays at zero
METRIC_PERFECT_WEEKS = "perfect_weeks"
METRIC_PRODUCTIVE_MONTHS = "productive_months"

# Daily reward bonus types
BONUS_TYPE_DOUBLE_XP = "double_xp"
BONUS_TYPE_BADGE = "badge"
BONUS_TYPE_SPECIAL_ITEM = "special_item"

# ------------------------------------------------------------------------------------------------
# Progression Rules
# ------------------------------------------------------------------------------------------------

XP_PER_COMPLETION = 5
XP_PER_STREAK_DAY = 2
STREAK_BONUS_DAY_CAP = 10  # min(streak, 10) * 2 -> max 20 XP

# Completion time-of-day windows (local hour)
EARLY_BIRD_BEFORE_HOUR = 7
NIGHT_OWL_FROM_HOUR = 23

# Daily login
DAILY_REWARD_CYCLE_DAYS = 7
COMEBACK_GAP_DAYS = 7

# Local time at which daily reward eligibility rolls over
DAY_ROLLOVER_TIME = {"hour": 0, "minute": 0, "second": 0}
CLAIMED_REWARD_RETENTION_MONTHS = 1

# XP event reasons (stable machine keys)
XP_REASON_HABIT_COMPLETED = "habit_completed"
XP_REASON_STREAK_BONUS = "streak_bonus"
XP_REASON_ACHIEVEMENT = "achievement"
XP_REASON_TROPHY = "trophy"
XP_REASON_DAILY_REWARD = "daily_reward"

# Operation outcomes
OUTCOME_APPLIED = "applied"
OUTCOME_NOT_ELIGIBLE = "not_eligible"

# ------------------------------------------------------------------------------------------------
# Event Signals (Manager Communication)
# ------------------------------------------------------------------------------------------------

SIGNAL_SUFFIX_XP_GAINED = "xp_gained"
SIGNAL_SUFFIX_LEVEL_UP = "level_up"
SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
SIGNAL_SUFFIX_TROPHY_UNLOCKED = "trophy_unlocked"
SIGNAL_SUFFIX_DAILY_REWARD_CLAIMED = "daily_reward_claimed"
SIGNAL_SUFFIX_PROGRESS_RESET = "progress_reset"

# Signals forwarded to the Home Assistant event bus as "habitquest_<suffix>"
BUS_EVENT_SIGNAL_SUFFIXES = (
    SIGNAL_SUFFIX_LEVEL_UP,
    SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED,
    SIGNAL_SUFFIX_TROPHY_UNLOCKED,
    SIGNAL_SUFFIX_DAILY_REWARD_CLAIMED,
    SIGNAL_SUFFIX_PROGRESS_RESET,
)

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------

SERVICE_HABIT_COMPLETED = "habit_completed"
SERVICE_PHOTO_ADDED = "photo_added"
SERVICE_MODEL_3D_CREATED = "model_3d_created"
SERVICE_AI_HABIT_CREATED = "ai_habit_created"
SERVICE_HABIT_CREATED = "habit_created"
SERVICE_CLAIM_DAILY_REWARD = "claim_daily_reward"
SERVICE_RESET_ALL_DATA = "reset_all_data"

FIELD_STREAK = "streak"
FIELD_CATEGORY = "category"
FIELD_COMPLETED_AT = "completed_at"

MSG_NO_ENTRY_FOUND = "No HabitQuest entry found"

# ------------------------------------------------------------------------------------------------
# Entities
# ------------------------------------------------------------------------------------------------

SENSOR_UID_SUFFIX_LEVEL = "_level"
SENSOR_UID_SUFFIX_TOTAL_XP = "_total_xp"
SENSOR_UID_SUFFIX_LOGIN_STREAK = "_login_streak"
SENSOR_UID_SUFFIX_ACHIEVEMENTS = "_achievements"
SENSOR_UID_SUFFIX_TROPHIES = "_trophies"
BUTTON_UID_SUFFIX_CLAIM_DAILY_REWARD = "_claim_daily_reward"

UNIT_XP = "XP"

ATTR_LEVEL_ID = "level_id"
ATTR_MIN_XP = "min_xp"
ATTR_MAX_XP = "max_xp"
ATTR_XP_TO_NEXT_LEVEL = "xp_to_next_level"
ATTR_XP_PROGRESS = "xp_progress"
ATTR_TOTAL_COMPLETIONS = "total_completions"
ATTR_CURRENT_STREAK = "current_streak"
ATTR_MAX_STREAK = "max_streak"
ATTR_RECENT_XP_EVENTS = "recent_xp_events"
ATTR_LAST_LOGIN_DATE = "last_login_date"
ATTR_CAN_CLAIM = "can_claim_daily_reward"
ATTR_NEXT_REWARD_XP = "next_reward_xp"
ATTR_RECENT_REWARDS = "recent_rewards"
ATTR_TOTAL = "total"
ATTR_UNLOCKED = "unlocked"
ATTR_ITEMS = "items"

SENSOR_ATTR_RECENT_XP_EVENTS_LIMIT = 10

# ------------------------------------------------------------------------------------------------
# Translation Keys
# ------------------------------------------------------------------------------------------------

TRANS_KEY_SENSOR_LEVEL = "level"
TRANS_KEY_SENSOR_TOTAL_XP = "total_xp"
TRANS_KEY_SENSOR_LOGIN_STREAK = "login_streak"
TRANS_KEY_SENSOR_ACHIEVEMENTS = "achievements"
TRANS_KEY_SENSOR_TROPHIES = "trophies"
TRANS_KEY_BUTTON_CLAIM_DAILY_REWARD = "claim_daily_reward"

TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_NOT_ELIGIBLE = "daily_reward_not_eligible"
TRANS_KEY_ERROR_NOT_LOADED = "not_loaded"
