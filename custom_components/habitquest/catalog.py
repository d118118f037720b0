# File: catalog.py
"""Static progression catalog: levels, achievements, trophies, daily rewards.

Every table here is immutable and ordered. The order matters: unlock scans walk
achievements then trophies in the order they appear below.

Display names and descriptions are NOT stored here. Each id doubles as a
translation key under ``entity.sensor.*.state_attributes`` in translations/en.json.
"""

from types import MappingProxyType

from . import const
from .type_defs import AchievementDef, DailyRewardDef, LevelDef, TrophyDef

# =============================================================================
# Levels
# =============================================================================

LEVELS: tuple[LevelDef, ...] = (
    {"id": 1, "key": "novice", "min_xp": 0, "max_xp": 100, "icon": "mdi:leaf", "color": "grey"},
    {"id": 2, "key": "apprentice", "min_xp": 100, "max_xp": 300, "icon": "mdi:sprout", "color": "green"},
    {"id": 3, "key": "dedicated", "min_xp": 300, "max_xp": 600, "icon": "mdi:star", "color": "blue"},
    {"id": 4, "key": "consistent", "min_xp": 600, "max_xp": 1000, "icon": "mdi:fire", "color": "purple"},
    {"id": 5, "key": "expert", "min_xp": 1000, "max_xp": 1500, "icon": "mdi:lightning-bolt", "color": "orange"},
    {"id": 6, "key": "master", "min_xp": 1500, "max_xp": 2200, "icon": "mdi:crown", "color": "red"},
    {"id": 7, "key": "legend", "min_xp": 2200, "max_xp": 3000, "icon": "mdi:star-shooting", "color": "pink"},
    {"id": 8, "key": "hero", "min_xp": 3000, "max_xp": 4000, "icon": "mdi:shield-star", "color": "indigo"},
    {"id": 9, "key": "champion", "min_xp": 4000, "max_xp": 5500, "icon": "mdi:trophy", "color": "yellow"},
    {"id": 10, "key": "immortal", "min_xp": 5500, "max_xp": None, "icon": "mdi:infinity", "color": "cyan"},
)

LEVEL_KEYS: list[str] = [level["key"] for level in LEVELS]


# =============================================================================
# Achievements
# =============================================================================


def _achievement(
    achievement_id: str,
    category: str,
    rarity: str,
    metric: str,
    requirement: int,
    xp_reward: int,
    icon: str,
) -> AchievementDef:
    return {
        "id": achievement_id,
        "category": category,
        "rarity": rarity,
        "metric": metric,
        "requirement": requirement,
        "xp_reward": xp_reward,
        "icon": icon,
    }


_STREAK = const.ACHIEVEMENT_CATEGORY_STREAK
_COMPLETION = const.ACHIEVEMENT_CATEGORY_COMPLETION
_CONSISTENCY = const.ACHIEVEMENT_CATEGORY_CONSISTENCY
_EXPLORER = const.ACHIEVEMENT_CATEGORY_EXPLORER
_SPECIAL = const.ACHIEVEMENT_CATEGORY_SPECIAL

ACHIEVEMENTS: tuple[AchievementDef, ...] = (
    # Streak
    _achievement("streak_3", _STREAK, const.RARITY_COMMON, const.METRIC_MAX_STREAK, 3, 10, "mdi:fire"),
    _achievement("streak_7", _STREAK, const.RARITY_UNCOMMON, const.METRIC_MAX_STREAK, 7, 30, "mdi:fire-circle"),
    _achievement("streak_14", _STREAK, const.RARITY_RARE, const.METRIC_MAX_STREAK, 14, 60, "mdi:flash"),
    _achievement("streak_30", _STREAK, const.RARITY_EPIC, const.METRIC_MAX_STREAK, 30, 150, "mdi:weather-sunny"),
    _achievement("streak_100", _STREAK, const.RARITY_LEGENDARY, const.METRIC_MAX_STREAK, 100, 500, "mdi:crown"),
    _achievement("streak_365", _STREAK, const.RARITY_LEGENDARY, const.METRIC_MAX_STREAK, 365, 1000, "mdi:infinity"),
    # Completion
    _achievement("complete_1", _COMPLETION, const.RARITY_COMMON, const.METRIC_TOTAL_COMPLETIONS, 1, 5, "mdi:check-circle"),
    _achievement("complete_10", _COMPLETION, const.RARITY_COMMON, const.METRIC_TOTAL_COMPLETIONS, 10, 15, "mdi:check-all"),
    _achievement("complete_50", _COMPLETION, const.RARITY_UNCOMMON, const.METRIC_TOTAL_COMPLETIONS, 50, 40, "mdi:star-circle"),
    _achievement("complete_100", _COMPLETION, const.RARITY_RARE, const.METRIC_TOTAL_COMPLETIONS, 100, 75, "mdi:star-four-points"),
    _achievement("complete_500", _COMPLETION, const.RARITY_EPIC, const.METRIC_TOTAL_COMPLETIONS, 500, 200, "mdi:medal"),
    _achievement("complete_1000", _COMPLETION, const.RARITY_LEGENDARY, const.METRIC_TOTAL_COMPLETIONS, 1000, 500, "mdi:trophy"),
    # Consistency
    _achievement("weekly_perfect", _CONSISTENCY, const.RARITY_RARE, const.METRIC_PERFECT_WEEKS, 1, 75, "mdi:calendar-check"),
    _achievement("monthly_80", _CONSISTENCY, const.RARITY_EPIC, const.METRIC_PRODUCTIVE_MONTHS, 1, 150, "mdi:calendar-star"),
    _achievement("early_bird", _CONSISTENCY, const.RARITY_UNCOMMON, const.METRIC_EARLY_COMPLETIONS, 1, 25, "mdi:weather-sunset-up"),
    _achievement("night_owl", _CONSISTENCY, const.RARITY_UNCOMMON, const.METRIC_LATE_COMPLETIONS, 1, 25, "mdi:weather-night"),
    # Explorer
    _achievement("first_photo", _EXPLORER, const.RARITY_COMMON, const.METRIC_PHOTOS_ADDED, 1, 15, "mdi:camera"),
    _achievement("first_3d", _EXPLORER, const.RARITY_RARE, const.METRIC_MODELS_3D_CREATED, 1, 50, "mdi:cube-outline"),
    _achievement("ai_habit", _EXPLORER, const.RARITY_RARE, const.METRIC_AI_HABITS_CREATED, 1, 50, "mdi:creation"),
    _achievement("five_habits", _EXPLORER, const.RARITY_UNCOMMON, const.METRIC_HABITS_CREATED, 5, 30, "mdi:format-list-checks"),
    _achievement("all_categories", _EXPLORER, const.RARITY_EPIC, const.METRIC_CATEGORIES_USED, 11, 100, "mdi:view-grid"),
    # Special
    _achievement("first_day", _SPECIAL, const.RARITY_COMMON, const.METRIC_TOTAL_COMPLETIONS, 1, 10, "mdi:flag"),
    _achievement("comeback", _SPECIAL, const.RARITY_RARE, const.METRIC_COMEBACKS, 1, 40, "mdi:restore"),
    _achievement("new_year", _SPECIAL, const.RARITY_EPIC, const.METRIC_NEW_YEAR_COMPLETIONS, 1, 100, "mdi:party-popper"),
    _achievement("level_5", _SPECIAL, const.RARITY_RARE, const.METRIC_LEVEL, 5, 75, "mdi:numeric-5-circle"),
    _achievement("level_10", _SPECIAL, const.RARITY_LEGENDARY, const.METRIC_LEVEL, 10, 500, "mdi:numeric-10-circle"),
)

ACHIEVEMENTS_BY_ID: MappingProxyType[str, AchievementDef] = MappingProxyType(
    {achievement["id"]: achievement for achievement in ACHIEVEMENTS}
)


# =============================================================================
# Trophies
# =============================================================================


def _trophy(trophy_id: str, tier: str, requirement_type: str, value: int, icon: str) -> TrophyDef:
    return {
        "id": trophy_id,
        "tier": tier,
        "requirement": {"type": requirement_type, "value": value},
        "icon": icon,
    }


TROPHIES: tuple[TrophyDef, ...] = (
    _trophy("bronze_beginner", const.TROPHY_TIER_BRONZE, const.TROPHY_REQUIREMENT_TOTAL_COMPLETIONS, 25, "mdi:medal-outline"),
    _trophy("bronze_streak", const.TROPHY_TIER_BRONZE, const.TROPHY_REQUIREMENT_MAX_STREAK, 7, "mdi:fire"),
    _trophy("silver_dedicated", const.TROPHY_TIER_SILVER, const.TROPHY_REQUIREMENT_TOTAL_COMPLETIONS, 100, "mdi:medal"),
    _trophy("silver_streak", const.TROPHY_TIER_SILVER, const.TROPHY_REQUIREMENT_MAX_STREAK, 30, "mdi:fire-circle"),
    _trophy("gold_master", const.TROPHY_TIER_GOLD, const.TROPHY_REQUIREMENT_TOTAL_COMPLETIONS, 500, "mdi:trophy-variant"),
    _trophy("gold_streak", const.TROPHY_TIER_GOLD, const.TROPHY_REQUIREMENT_MAX_STREAK, 100, "mdi:flash"),
    _trophy("platinum_elite", const.TROPHY_TIER_PLATINUM, const.TROPHY_REQUIREMENT_TOTAL_COMPLETIONS, 1000, "mdi:crown"),
    _trophy("platinum_achiever", const.TROPHY_TIER_PLATINUM, const.TROPHY_REQUIREMENT_ACHIEVEMENTS_UNLOCKED, 20, "mdi:star-circle"),
    _trophy("diamond_legend", const.TROPHY_TIER_DIAMOND, const.TROPHY_REQUIREMENT_LEVEL, 10, "mdi:diamond-stone"),
    _trophy("diamond_perfect", const.TROPHY_TIER_DIAMOND, const.TROPHY_REQUIREMENT_MAX_STREAK, 365, "mdi:diamond"),
)

TROPHIES_BY_ID: MappingProxyType[str, TrophyDef] = MappingProxyType(
    {trophy["id"]: trophy for trophy in TROPHIES}
)


# =============================================================================
# Daily login rewards (weekly cycle)
# =============================================================================

DAILY_REWARDS: tuple[DailyRewardDef, ...] = (
    {"day": 1, "xp_reward": 5, "bonus_type": None, "icon": "mdi:gift-outline"},
    {"day": 2, "xp_reward": 10, "bonus_type": None, "icon": "mdi:gift-outline"},
    {"day": 3, "xp_reward": 15, "bonus_type": None, "icon": "mdi:gift-outline"},
    {"day": 4, "xp_reward": 20, "bonus_type": None, "icon": "mdi:gift-outline"},
    {"day": 5, "xp_reward": 25, "bonus_type": const.BONUS_TYPE_DOUBLE_XP, "icon": "mdi:gift"},
    {"day": 6, "xp_reward": 30, "bonus_type": None, "icon": "mdi:gift-outline"},
    {"day": 7, "xp_reward": 50, "bonus_type": const.BONUS_TYPE_SPECIAL_ITEM, "icon": "mdi:treasure-chest"},
)
