"""Progression Engine - Pure logic for XP, levels, achievements and trophies.

This engine provides stateless, pure Python functions for:
- Level resolution from total XP
- Habit completion and explorer event handling (counter updates, XP grants)
- Daily login reward eligibility and weekly reward cycling
- Achievement and trophy unlock scans (iterated to a fixpoint)
- Read-only views (progress, stats, recent XP history)

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static or class methods that operate on passed-in data.

TIME: The engine never reads the clock. Callers pass `now` (aware datetime)
and, for daily rewards, `today` (local calendar date). The ProgressionManager
computes both from the configured Home Assistant time zone.

ATOMICITY: Every event operation deep-copies the input state, applies all
changes to the copy and returns it inside a ProgressionResult. The input is
never mutated, so a caller that discards the result leaves nothing half-applied.
"""

from __future__ import annotations

from collections.abc import Callable
import copy
from datetime import date, datetime
from typing import TYPE_CHECKING

from .. import const
from ..catalog import ACHIEVEMENTS, DAILY_REWARDS, LEVELS, TROPHIES
from ..utils.dt_utils import dt_days_between, dt_months_before, dt_parse_date
from ..utils.math_utils import calculate_ratio, non_negative_int

if TYPE_CHECKING:
    from ..type_defs import (
        AchievementDef,
        AchievementView,
        ClaimedRewardData,
        LevelDef,
        ProfileData,
        ProgressionResult,
        ProgressionState,
        TrophyDef,
        TrophyView,
        UnlockStats,
        XPEventData,
    )


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Metric handler signature: (profile) -> current value of the metric
MetricHandler = Callable[["ProfileData"], int]


# =============================================================================
# PROGRESSION ENGINE
# =============================================================================


class ProgressionEngine:
    """Pure logic engine for progression rules.

    All methods are static or class methods - no instance state. This enables
    easy unit testing without any Home Assistant mocking.

    PURITY CONTRACT:
    - All data comes via parameters (state, now, today)
    - No side effects beyond the returned copy, no storage access
    - Display names are never produced here; ids and numbers only

    Event Flow:
        1. Manager takes the lock and passes its current state
        2. Engine copies the state, updates counters and grants base XP
        3. Engine runs the unlock scan until nothing new unlocks
        4. Engine prunes history and returns the result
        5. Manager swaps in result["state"], persists and emits signals
    """

    # =========================================================================
    # METRIC HANDLER REGISTRY
    # =========================================================================

    # Maps achievement metric -> handler. Metrics without a handler
    # (perfect_weeks, productive_months) read as zero.
    _METRIC_HANDLERS: dict[str, MetricHandler] = {}

    # Maps trophy requirement type -> handler
    _TROPHY_HANDLERS: dict[str, MetricHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Register all metric and trophy handlers.

        Called once at module load to populate the registries.
        """
        if cls._METRIC_HANDLERS:
            return  # Already registered

        cls._METRIC_HANDLERS = {
            const.METRIC_MAX_STREAK: cls._metric_max_streak,
            const.METRIC_TOTAL_COMPLETIONS: cls._metric_total_completions,
            const.METRIC_PHOTOS_ADDED: cls._counter(const.DATA_PROFILE_PHOTOS_ADDED),
            const.METRIC_MODELS_3D_CREATED: cls._counter(
                const.DATA_PROFILE_MODELS_3D_CREATED
            ),
            const.METRIC_AI_HABITS_CREATED: cls._counter(
                const.DATA_PROFILE_AI_HABITS_CREATED
            ),
            const.METRIC_HABITS_CREATED: cls._counter(
                const.DATA_PROFILE_HABITS_CREATED
            ),
            const.METRIC_CATEGORIES_USED: cls._metric_categories_used,
            const.METRIC_LEVEL: cls._metric_level,
            const.METRIC_EARLY_COMPLETIONS: cls._counter(
                const.DATA_PROFILE_EARLY_COMPLETIONS
            ),
            const.METRIC_LATE_COMPLETIONS: cls._counter(
                const.DATA_PROFILE_LATE_COMPLETIONS
            ),
            const.METRIC_NEW_YEAR_COMPLETIONS: cls._counter(
                const.DATA_PROFILE_NEW_YEAR_COMPLETIONS
            ),
            const.METRIC_COMEBACKS: cls._counter(const.DATA_PROFILE_COMEBACKS),
        }

        cls._TROPHY_HANDLERS = {
            const.TROPHY_REQUIREMENT_TOTAL_COMPLETIONS: cls._metric_total_completions,
            const.TROPHY_REQUIREMENT_MAX_STREAK: cls._metric_max_streak,
            const.TROPHY_REQUIREMENT_MONTHLY_PERFECT: cls._counter(
                const.DATA_PROFILE_PERFECT_MONTHS
            ),
            const.TROPHY_REQUIREMENT_TOTAL_XP: cls._counter(
                const.DATA_PROFILE_TOTAL_XP
            ),
            const.TROPHY_REQUIREMENT_LEVEL: cls._metric_level,
            const.TROPHY_REQUIREMENT_ACHIEVEMENTS_UNLOCKED: (
                cls._metric_achievements_unlocked
            ),
        }

    @staticmethod
    def _counter(field: str) -> MetricHandler:
        """Build a handler that reads a plain integer profile counter."""

        def _read(profile: ProfileData) -> int:
            return int(profile.get(field, 0))  # type: ignore[misc]

        return _read

    @staticmethod
    def _metric_max_streak(profile: ProfileData) -> int:
        return profile["max_streak"]

    @staticmethod
    def _metric_total_completions(profile: ProfileData) -> int:
        return profile["total_completions"]

    @staticmethod
    def _metric_categories_used(profile: ProfileData) -> int:
        return len(profile["categories_used"])

    @staticmethod
    def _metric_level(profile: ProfileData) -> int:
        return ProgressionEngine.level_for(profile["total_xp"])["id"]

    @staticmethod
    def _metric_achievements_unlocked(profile: ProfileData) -> int:
        return len(profile["unlocked_achievement_ids"])

    # =========================================================================
    # LEVELS
    # =========================================================================

    @staticmethod
    def level_for(xp: int) -> LevelDef:
        """Return the last level whose min_xp <= xp (first level if none)."""
        resolved = LEVELS[0]
        for level in LEVELS:
            if level["min_xp"] <= xp:
                resolved = level
            else:
                break
        return resolved

    @staticmethod
    def xp_to_next_level(total_xp: int) -> int:
        """XP still needed to reach the next tier (0 at the top tier)."""
        level = ProgressionEngine.level_for(total_xp)
        if level["max_xp"] is None:
            return 0
        return max(0, level["max_xp"] - total_xp)

    @staticmethod
    def xp_progress(total_xp: int) -> float:
        """Fraction of the current tier completed, clamped to [0, 1]."""
        level = ProgressionEngine.level_for(total_xp)
        if level["max_xp"] is None:
            return 1.0
        span = level["max_xp"] - level["min_xp"]
        return calculate_ratio(total_xp - level["min_xp"], span)

    # =========================================================================
    # STATE CREATION
    # =========================================================================

    @staticmethod
    def create_profile(join_date: date) -> ProfileData:
        """Return a fresh profile with every counter at zero."""
        return {
            "total_xp": 0,
            "total_completions": 0,
            "max_streak": 0,
            "current_streak": 0,
            "unlocked_achievement_ids": set(),
            "unlocked_trophy_ids": set(),
            "daily_login_streak": 0,
            "last_login_date": None,
            "join_date": join_date,
            "perfect_months": 0,
            "photos_added": 0,
            "models_3d_created": 0,
            "ai_habits_created": 0,
            "habits_created": 0,
            "categories_used": set(),
            "early_completions": 0,
            "late_completions": 0,
            "new_year_completions": 0,
            "comebacks": 0,
        }

    @staticmethod
    def create_state(join_date: date) -> ProgressionState:
        """Return a fresh state: new profile, every catalog item locked."""
        return {
            "profile": ProgressionEngine.create_profile(join_date),
            "achievements": {
                achievement["id"]: {"unlocked": False, "unlocked_at": None}
                for achievement in ACHIEVEMENTS
            },
            "trophies": {
                trophy["id"]: {"unlocked": False, "unlocked_at": None}
                for trophy in TROPHIES
            },
            "xp_events": [],
            "claimed_rewards": [],
        }

    # =========================================================================
    # DAILY REWARD GATE
    # =========================================================================

    @staticmethod
    def can_claim_daily_reward(profile: ProfileData, today: date) -> bool:
        """True iff no daily reward was claimed on `today`."""
        return profile["last_login_date"] != today

    @staticmethod
    def _effective_login_streak(profile: ProfileData, today: date) -> int:
        """Login streak as it stands before a claim made on `today`.

        Anything other than a claim on the previous calendar day restarts the
        cycle (including a last claim dated in the future).
        """
        last = profile["last_login_date"]
        if last is None or dt_days_between(last, today) != 1:
            return 0
        return profile["daily_login_streak"]

    @staticmethod
    def next_daily_reward(profile: ProfileData, today: date) -> ClaimedRewardData:
        """Preview the reward a claim on `today` would grant."""
        streak = ProgressionEngine._effective_login_streak(profile, today)
        day_index = streak % const.DAILY_REWARD_CYCLE_DAYS
        multiplier = max(1, streak // const.DAILY_REWARD_CYCLE_DAYS + 1)
        reward = DAILY_REWARDS[day_index]
        return {
            "date": today.isoformat(),
            "day": reward["day"],
            "xp_earned": reward["xp_reward"] * multiplier,
            "multiplier": multiplier,
            "bonus_type": reward["bonus_type"],
        }

    # =========================================================================
    # EVENT OPERATIONS
    # =========================================================================

    @classmethod
    def habit_completed(
        cls,
        state: ProgressionState,
        streak_length: int,
        category: str | None,
        now: datetime,
        completed_at: datetime | None = None,
        history_size: int = const.DEFAULT_XP_HISTORY_SIZE,
    ) -> ProgressionResult:
        """Apply a habit completion fact.

        Args:
            state: Current state (not mutated)
            streak_length: Streak length of the completed habit (negative → 0)
            category: Habit category; blank values are not recorded
            now: Event time used for XP and unlock timestamps
            completed_at: Local completion time (defaults to `now`), drives
                the time-of-day and calendar achievements
            history_size: Max XP events kept in history

        Returns:
            ProgressionResult with outcome "applied"
        """
        new_state = copy.deepcopy(state)
        profile = new_state["profile"]
        previous_level = cls.level_for(profile["total_xp"])
        events: list[XPEventData] = []
        moment = completed_at or now
        streak = non_negative_int(streak_length)

        profile["total_completions"] += 1
        profile["current_streak"] = streak
        profile["max_streak"] = max(profile["max_streak"], streak)
        # Blank categories are not recorded; others are stored stripped
        if category and category.strip():
            profile["categories_used"].add(category.strip())

        if moment.hour < const.EARLY_BIRD_BEFORE_HOUR:
            profile["early_completions"] += 1
        elif moment.hour >= const.NIGHT_OWL_FROM_HOUR:
            profile["late_completions"] += 1
        if moment.month == 1 and moment.day == 1:
            profile["new_year_completions"] += 1

        cls._grant_xp(
            profile,
            events,
            const.XP_PER_COMPLETION,
            const.XP_REASON_HABIT_COMPLETED,
            category.strip() if category else None,
            now,
        )

        streak_bonus = min(streak, const.STREAK_BONUS_DAY_CAP) * const.XP_PER_STREAK_DAY
        if streak_bonus > 0:
            cls._grant_xp(
                profile,
                events,
                streak_bonus,
                const.XP_REASON_STREAK_BONUS,
                str(streak),
                now,
                is_bonus=True,
            )

        return cls._complete(new_state, previous_level, events, now, history_size)

    @classmethod
    def photo_added(
        cls,
        state: ProgressionState,
        now: datetime,
        history_size: int = const.DEFAULT_XP_HISTORY_SIZE,
    ) -> ProgressionResult:
        """A photo was attached to a habit."""
        return cls._increment(
            state, const.DATA_PROFILE_PHOTOS_ADDED, now, history_size
        )

    @classmethod
    def model_3d_created(
        cls,
        state: ProgressionState,
        now: datetime,
        history_size: int = const.DEFAULT_XP_HISTORY_SIZE,
    ) -> ProgressionResult:
        """A 3D model was created for a habit."""
        return cls._increment(
            state, const.DATA_PROFILE_MODELS_3D_CREATED, now, history_size
        )

    @classmethod
    def ai_habit_created(
        cls,
        state: ProgressionState,
        now: datetime,
        history_size: int = const.DEFAULT_XP_HISTORY_SIZE,
    ) -> ProgressionResult:
        """A habit was created from an AI suggestion."""
        return cls._increment(
            state, const.DATA_PROFILE_AI_HABITS_CREATED, now, history_size
        )

    @classmethod
    def habit_created(
        cls,
        state: ProgressionState,
        now: datetime,
        history_size: int = const.DEFAULT_XP_HISTORY_SIZE,
    ) -> ProgressionResult:
        """A habit was created."""
        return cls._increment(
            state, const.DATA_PROFILE_HABITS_CREATED, now, history_size
        )

    @classmethod
    def daily_login_claimed(
        cls,
        state: ProgressionState,
        today: date,
        now: datetime,
        history_size: int = const.DEFAULT_XP_HISTORY_SIZE,
    ) -> ProgressionResult:
        """Claim the daily login reward for `today`.

        Returns outcome "not_eligible" (state untouched, no XP) when a reward
        was already claimed today. Otherwise grants the weekly-cycle reward
        times the week multiplier, advances the login streak and records the
        claim.
        """
        profile_before = state["profile"]
        previous_level = cls.level_for(profile_before["total_xp"])

        if not cls.can_claim_daily_reward(profile_before, today):
            return {
                "outcome": const.OUTCOME_NOT_ELIGIBLE,
                "state": state,
                "profile": profile_before,
                "new_achievements": [],
                "new_trophies": [],
                "xp_events": [],
                "xp_gained": 0,
                "leveled_up": False,
                "previous_level": previous_level,
                "new_level": None,
                "daily_reward": None,
            }

        new_state = copy.deepcopy(state)
        profile = new_state["profile"]
        events: list[XPEventData] = []

        last = profile["last_login_date"]
        if (
            last is not None
            and dt_days_between(last, today) >= const.COMEBACK_GAP_DAYS
        ):
            profile["comebacks"] += 1

        claim = cls.next_daily_reward(profile, today)
        streak = cls._effective_login_streak(profile, today)
        profile["daily_login_streak"] = streak + 1
        profile["last_login_date"] = today

        cls._grant_xp(
            profile,
            events,
            claim["xp_earned"],
            const.XP_REASON_DAILY_REWARD,
            str(claim["day"]),
            now,
            is_bonus=True,
        )

        cutoff = dt_months_before(today, const.CLAIMED_REWARD_RETENTION_MONTHS)
        new_state["claimed_rewards"] = [
            reward
            for reward in new_state["claimed_rewards"]
            if (claimed_on := dt_parse_date(reward["date"])) is not None
            and claimed_on >= cutoff
        ]
        new_state["claimed_rewards"].append(claim)

        result = cls._complete(new_state, previous_level, events, now, history_size)
        result["daily_reward"] = claim
        return result

    # =========================================================================
    # INTERNAL: XP, UNLOCK SCAN, RESULT
    # =========================================================================

    @classmethod
    def _increment(
        cls,
        state: ProgressionState,
        field: str,
        now: datetime,
        history_size: int,
    ) -> ProgressionResult:
        new_state = copy.deepcopy(state)
        profile = new_state["profile"]
        previous_level = cls.level_for(profile["total_xp"])
        profile[field] += 1  # type: ignore[literal-required]
        return cls._complete(new_state, previous_level, [], now, history_size)

    @staticmethod
    def _grant_xp(
        profile: ProfileData,
        events: list[XPEventData],
        amount: int,
        reason: str,
        reference: str | None,
        now: datetime,
        is_bonus: bool = False,
    ) -> None:
        """Add XP to the profile and record the grant."""
        profile["total_xp"] += amount
        events.append(
            {
                "amount": amount,
                "reason": reason,
                "reference": reference,
                "timestamp": now.isoformat(),
                "is_bonus": is_bonus,
            }
        )

    @classmethod
    def _scan_unlocks(
        cls,
        state: ProgressionState,
        events: list[XPEventData],
        now: datetime,
    ) -> tuple[list[AchievementView], list[TrophyView]]:
        """Unlock everything newly satisfied, repeating until nothing changes.

        Unlock XP can satisfy further items (level achievements, XP and level
        trophies, the achievements-count trophy), so the scan repeats. Every
        pass unlocks at least one item or stops, which bounds the loop by the
        catalog size.
        """
        profile = state["profile"]
        unlocked_at = now.isoformat()
        new_achievements: list[AchievementView] = []
        new_trophies: list[TrophyView] = []

        changed = True
        while changed:
            changed = False

            for achievement in ACHIEVEMENTS:
                item = state["achievements"].setdefault(
                    achievement["id"], {"unlocked": False, "unlocked_at": None}
                )
                if item["unlocked"]:
                    continue
                if cls.achievement_progress(profile, achievement) < achievement["requirement"]:
                    continue

                item["unlocked"] = True
                item["unlocked_at"] = unlocked_at
                profile["unlocked_achievement_ids"].add(achievement["id"])
                cls._grant_xp(
                    profile,
                    events,
                    achievement["xp_reward"],
                    f"{const.XP_REASON_ACHIEVEMENT}:{achievement['id']}",
                    achievement["id"],
                    now,
                    is_bonus=True,
                )
                new_achievements.append(cls.achievement_view(state, achievement))
                changed = True

            for trophy in TROPHIES:
                item = state["trophies"].setdefault(
                    trophy["id"], {"unlocked": False, "unlocked_at": None}
                )
                if item["unlocked"]:
                    continue
                if not cls.trophy_satisfied(profile, trophy):
                    continue

                item["unlocked"] = True
                item["unlocked_at"] = unlocked_at
                profile["unlocked_trophy_ids"].add(trophy["id"])
                cls._grant_xp(
                    profile,
                    events,
                    const.TROPHY_TIER_XP_BONUS[trophy["tier"]],
                    f"{const.XP_REASON_TROPHY}:{trophy['id']}",
                    trophy["id"],
                    now,
                    is_bonus=True,
                )
                new_trophies.append(cls.trophy_view(state, trophy))
                changed = True

        return new_achievements, new_trophies

    @classmethod
    def _complete(
        cls,
        new_state: ProgressionState,
        previous_level: LevelDef,
        events: list[XPEventData],
        now: datetime,
        history_size: int,
    ) -> ProgressionResult:
        """Run the unlock scan, prune history and build the result."""
        new_achievements, new_trophies = cls._scan_unlocks(new_state, events, now)

        history = new_state["xp_events"]
        history.extend(events)
        limit = max(1, history_size)
        if len(history) > limit:
            del history[: len(history) - limit]

        profile = new_state["profile"]
        final_level = cls.level_for(profile["total_xp"])
        leveled_up = final_level["id"] > previous_level["id"]

        return {
            "outcome": const.OUTCOME_APPLIED,
            "state": new_state,
            "profile": profile,
            "new_achievements": new_achievements,
            "new_trophies": new_trophies,
            "xp_events": events,
            "xp_gained": sum(event["amount"] for event in events),
            "leveled_up": leveled_up,
            "previous_level": previous_level,
            "new_level": final_level if leveled_up else None,
        }

    # =========================================================================
    # PREDICATES AND VIEWS
    # =========================================================================

    @classmethod
    def metric_value(cls, profile: ProfileData, metric: str) -> int:
        """Current value of an achievement metric (0 when nothing feeds it)."""
        handler = cls._METRIC_HANDLERS.get(metric)
        if handler is None:
            return 0
        return handler(profile)

    @classmethod
    def achievement_progress(
        cls, profile: ProfileData, achievement: AchievementDef
    ) -> int:
        return cls.metric_value(profile, achievement["metric"])

    @classmethod
    def trophy_satisfied(cls, profile: ProfileData, trophy: TrophyDef) -> bool:
        requirement = trophy["requirement"]
        handler = cls._TROPHY_HANDLERS.get(requirement["type"])
        if handler is None:
            return False
        return handler(profile) >= requirement["value"]

    @classmethod
    def achievement_view(
        cls, state: ProgressionState, achievement: AchievementDef
    ) -> AchievementView:
        """Merge an achievement definition with live unlock state and progress."""
        item = state["achievements"].get(achievement["id"], {})
        progress = cls.achievement_progress(state["profile"], achievement)
        return {
            "id": achievement["id"],
            "category": achievement["category"],
            "rarity": achievement["rarity"],
            "base_xp": const.RARITY_XP_REWARDS[achievement["rarity"]],
            "requirement": achievement["requirement"],
            "xp_reward": achievement["xp_reward"],
            "icon": achievement["icon"],
            "unlocked": bool(item.get("unlocked", False)),
            "unlocked_at": item.get("unlocked_at"),
            "progress": progress,
            "progress_percentage": calculate_ratio(
                progress, achievement["requirement"]
            ),
        }

    @staticmethod
    def trophy_view(state: ProgressionState, trophy: TrophyDef) -> TrophyView:
        """Merge a trophy definition with live unlock state."""
        item = state["trophies"].get(trophy["id"], {})
        return {
            "id": trophy["id"],
            "tier": trophy["tier"],
            "requirement_type": trophy["requirement"]["type"],
            "requirement_value": trophy["requirement"]["value"],
            "xp_bonus": const.TROPHY_TIER_XP_BONUS[trophy["tier"]],
            "icon": trophy["icon"],
            "unlocked": bool(item.get("unlocked", False)),
            "unlocked_at": item.get("unlocked_at"),
        }

    @classmethod
    def achievements(
        cls, state: ProgressionState, category: str | None = None
    ) -> list[AchievementView]:
        """Achievement views in catalog order, optionally filtered by category."""
        return [
            cls.achievement_view(state, achievement)
            for achievement in ACHIEVEMENTS
            if category is None or achievement["category"] == category
        ]

    @classmethod
    def trophies(
        cls, state: ProgressionState, tier: str | None = None
    ) -> list[TrophyView]:
        """Trophy views in catalog order, optionally filtered by tier."""
        return [
            cls.trophy_view(state, trophy)
            for trophy in TROPHIES
            if tier is None or trophy["tier"] == tier
        ]

    @staticmethod
    def achievement_stats(state: ProgressionState) -> UnlockStats:
        unlocked = sum(
            1
            for achievement in ACHIEVEMENTS
            if state["achievements"].get(achievement["id"], {}).get("unlocked")
        )
        return {"unlocked": unlocked, "total": len(ACHIEVEMENTS)}

    @staticmethod
    def trophy_stats(state: ProgressionState) -> UnlockStats:
        unlocked = sum(
            1
            for trophy in TROPHIES
            if state["trophies"].get(trophy["id"], {}).get("unlocked")
        )
        return {"unlocked": unlocked, "total": len(TROPHIES)}

    @staticmethod
    def recent_xp_events(
        state: ProgressionState, limit: int | None = None
    ) -> list[XPEventData]:
        """XP history, newest first, optionally truncated to `limit` entries."""
        events = list(reversed(state["xp_events"]))
        if limit is not None:
            return events[: max(0, limit)]
        return events

    @staticmethod
    def recent_rewards(state: ProgressionState) -> list[ClaimedRewardData]:
        """Retained daily reward claims, newest first."""
        return sorted(
            state["claimed_rewards"], key=lambda reward: reward["date"], reverse=True
        )

    @staticmethod
    def has_claimed_reward(state: ProgressionState, day: date) -> bool:
        day_iso = day.isoformat()
        return any(reward["date"] == day_iso for reward in state["claimed_rewards"])


# Register handlers at module load
ProgressionEngine._register_handlers()
