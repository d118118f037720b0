"""Type definitions for HabitQuest data structures.

TypedDict is used for every structure whose keys are fixed at design time
(catalog definitions, profile, unlock state, XP events, results). Per-item
unlock maps are keyed by catalog id and typed as plain dicts of TypedDicts.

IMPORTANT: This file must NOT import from coordinator.py, managers or any file
that imports the coordinator, to avoid circular dependencies.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation of persisted data
happens in data_builders.py.
"""

from datetime import date
from typing import NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

AchievementId = str
TrophyId = str
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"


# =============================================================================
# Catalog Definitions (immutable, defined once in catalog.py)
# =============================================================================


class LevelDef(TypedDict):
    """A level tier. max_xp is exclusive; None means unbounded (top tier)."""

    id: int
    key: str  # translation key for the display name
    min_xp: int
    max_xp: int | None
    icon: str
    color: str


class AchievementDef(TypedDict):
    """Static achievement definition."""

    id: AchievementId
    category: str
    rarity: str
    metric: str
    requirement: int
    xp_reward: int
    icon: str


class TrophyRequirement(TypedDict):
    """Tagged predicate over profile aggregates."""

    type: str
    value: int


class TrophyDef(TypedDict):
    """Static trophy definition."""

    id: TrophyId
    tier: str
    requirement: TrophyRequirement
    icon: str


class DailyRewardDef(TypedDict):
    """One slot of the weekly login reward schedule."""

    day: int  # 1..7
    xp_reward: int
    bonus_type: str | None
    icon: str


# =============================================================================
# Mutable State
# =============================================================================


class ProfileData(TypedDict):
    """The single mutable progression aggregate (in-memory form).

    Sets and dates are native Python types here; data_builders converts them
    to lists and ISO strings for storage.
    """

    total_xp: int
    total_completions: int
    max_streak: int
    current_streak: int
    unlocked_achievement_ids: set[str]
    unlocked_trophy_ids: set[str]
    daily_login_streak: int
    last_login_date: date | None
    join_date: date
    perfect_months: int
    photos_added: int
    models_3d_created: int
    ai_habits_created: int
    habits_created: int
    categories_used: set[str]
    early_completions: int
    late_completions: int
    new_year_completions: int
    comebacks: int


class UnlockState(TypedDict):
    """Per-item unlock state for achievements and trophies."""

    unlocked: bool
    unlocked_at: ISODatetime | None


class XPEventData(TypedDict):
    """Side-record of an XP grant, kept in a bounded history."""

    amount: int
    reason: str
    reference: str | None
    timestamp: ISODatetime
    is_bonus: bool


class ClaimedRewardData(TypedDict):
    """A daily reward claim, keyed by calendar date."""

    date: ISODate
    day: int
    xp_earned: int
    multiplier: int
    bonus_type: str | None


class ProgressionState(TypedDict):
    """Everything the progression engine reads and writes."""

    profile: ProfileData
    achievements: dict[AchievementId, UnlockState]
    trophies: dict[TrophyId, UnlockState]
    xp_events: list[XPEventData]
    claimed_rewards: list[ClaimedRewardData]


# =============================================================================
# Views and Results
# =============================================================================


class AchievementView(TypedDict):
    """Achievement definition merged with live unlock state and progress."""

    id: AchievementId
    category: str
    rarity: str
    base_xp: int
    requirement: int
    xp_reward: int
    icon: str
    unlocked: bool
    unlocked_at: ISODatetime | None
    progress: int
    progress_percentage: float


class TrophyView(TypedDict):
    """Trophy definition merged with live unlock state."""

    id: TrophyId
    tier: str
    requirement_type: str
    requirement_value: int
    xp_bonus: int
    icon: str
    unlocked: bool
    unlocked_at: ISODatetime | None


class UnlockStats(TypedDict):
    """Unlocked vs total counts for a catalog."""

    unlocked: int
    total: int


class ProgressionResult(TypedDict):
    """Outcome of one engine operation.

    state is the complete post-event state; the caller swaps it in as a whole.
    For not_eligible outcomes state is the untouched input state.
    """

    outcome: str
    state: ProgressionState
    profile: ProfileData
    new_achievements: list[AchievementView]
    new_trophies: list[TrophyView]
    xp_events: list[XPEventData]
    xp_gained: int
    leveled_up: bool
    previous_level: LevelDef
    new_level: LevelDef | None
    daily_reward: NotRequired[ClaimedRewardData | None]
