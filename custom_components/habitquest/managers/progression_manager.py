"""Progression Manager - Stateful orchestration of the progression engine.

This manager owns the single progression state of a config entry:
- Loads it from storage on setup (via data_builders)
- Serializes every event operation behind an asyncio.Lock
- Supplies the engine with the current time and local calendar date
- Swaps in the engine's result state, persists and refreshes entities
- Emits dispatcher signals for XP, level-ups, unlocks and daily rewards
- Forwards user-facing signals to the Home Assistant event bus (BaseManager.emit)

ARCHITECTURE:
- ProgressionManager = STATEFUL owner of the progression aggregate
- ProgressionEngine = Pure rules (STATELESS, no clock, no I/O)
- Coordinator = Persistence and entity refresh
"""

from __future__ import annotations

import asyncio
import copy
from datetime import date, datetime
from typing import TYPE_CHECKING

from .. import const, data_builders as db
from ..engines.progression_engine import ProgressionEngine
from ..utils.dt_utils import as_local, dt_now_iso, dt_now_local, dt_today_local
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import HabitQuestDataCoordinator
    from ..type_defs import (
        AchievementView,
        ClaimedRewardData,
        LevelDef,
        ProfileData,
        ProgressionResult,
        ProgressionState,
        TrophyView,
        UnlockStats,
        XPEventData,
    )


class ProgressionManager(BaseManager):
    """Manager for all progression events and queries.

    Responsibilities:
    - Apply habit, explorer and daily login events atomically
    - Keep the in-memory state and storage in sync
    - Emit SIGNAL_SUFFIX_* events describing what changed

    NOT responsible for:
    - Rule evaluation (ProgressionEngine)
    - JSON conversion (data_builders)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: HabitQuestDataCoordinator,
    ) -> None:
        """Initialize the ProgressionManager.

        Args:
            hass: Home Assistant instance
            coordinator: The HabitQuest coordinator for this entry
        """
        super().__init__(hass, coordinator)
        self._lock = asyncio.Lock()
        self._state: ProgressionState = ProgressionEngine.create_state(
            dt_today_local()
        )

    async def async_setup(self) -> None:
        """Load persisted state."""
        self._state = db.build_state(self.coordinator.store.data, dt_today_local())
        profile = self._state["profile"]
        const.LOGGER.debug(
            "ProgressionManager: Loaded profile with %s XP, %s completions, "
            "%s achievements, %s trophies",
            profile["total_xp"],
            profile["total_completions"],
            len(profile["unlocked_achievement_ids"]),
            len(profile["unlocked_trophy_ids"]),
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def state(self) -> ProgressionState:
        """Current state. Treat as read-only; replaced whole on every event."""
        return self._state

    @property
    def history_size(self) -> int:
        """Configured XP history size."""
        return int(
            self.coordinator.config_entry.options.get(
                const.CONF_XP_HISTORY_SIZE, const.DEFAULT_XP_HISTORY_SIZE
            )
        )

    # =========================================================================
    # EVENT OPERATIONS
    # =========================================================================

    async def async_habit_completed(
        self,
        streak_length: int,
        category: str | None,
        completed_at: datetime | None = None,
    ) -> ProgressionResult:
        """Apply a habit completion.

        Args:
            streak_length: Streak length of the completed habit
            category: Habit category
            completed_at: Completion time (any zone); defaults to now
        """
        local_completed_at = as_local(completed_at) if completed_at else None
        async with self._lock:
            result = ProgressionEngine.habit_completed(
                self._state,
                streak_length,
                category,
                dt_now_local(),
                local_completed_at,
                self.history_size,
            )
            self._commit(result, const.SERVICE_HABIT_COMPLETED)
        return result

    async def async_photo_added(self) -> ProgressionResult:
        """Record a photo added to a habit."""
        async with self._lock:
            result = ProgressionEngine.photo_added(
                self._state, dt_now_local(), self.history_size
            )
            self._commit(result, const.SERVICE_PHOTO_ADDED)
        return result

    async def async_model_3d_created(self) -> ProgressionResult:
        """Record a 3D model created for a habit."""
        async with self._lock:
            result = ProgressionEngine.model_3d_created(
                self._state, dt_now_local(), self.history_size
            )
            self._commit(result, const.SERVICE_MODEL_3D_CREATED)
        return result

    async def async_ai_habit_created(self) -> ProgressionResult:
        """Record a habit created from an AI suggestion."""
        async with self._lock:
            result = ProgressionEngine.ai_habit_created(
                self._state, dt_now_local(), self.history_size
            )
            self._commit(result, const.SERVICE_AI_HABIT_CREATED)
        return result

    async def async_habit_created(self) -> ProgressionResult:
        """Record a newly created habit."""
        async with self._lock:
            result = ProgressionEngine.habit_created(
                self._state, dt_now_local(), self.history_size
            )
            self._commit(result, const.SERVICE_HABIT_CREATED)
        return result

    async def async_claim_daily_reward(self) -> ProgressionResult:
        """Claim today's login reward.

        A not_eligible result leaves state and storage untouched; raising is
        left to the caller.
        """
        async with self._lock:
            result = ProgressionEngine.daily_login_claimed(
                self._state, dt_today_local(), dt_now_local(), self.history_size
            )
            if result["outcome"] == const.OUTCOME_NOT_ELIGIBLE:
                const.LOGGER.debug(
                    "ProgressionManager: Daily reward already claimed today (%s)",
                    self._state["profile"]["last_login_date"],
                )
                return result
            self._commit(result, const.SERVICE_CLAIM_DAILY_REWARD)
        return result

    async def async_reset_all_data(self) -> None:
        """Reset profile, unlock state, XP history and claims to defaults."""
        async with self._lock:
            const.LOGGER.warning(
                "ProgressionManager: Resetting all progression data for %s",
                self.entry_id,
            )
            await self.coordinator.store.async_clear_data(reset_at=dt_now_iso())
            self._state = ProgressionEngine.create_state(dt_today_local())
            self.coordinator._persist_and_update()
        self.emit(const.SIGNAL_SUFFIX_PROGRESS_RESET)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def current_profile(self) -> ProfileData:
        """Return a copy of the current profile."""
        return copy.deepcopy(self._state["profile"])

    def level(self) -> LevelDef:
        return ProgressionEngine.level_for(self._state["profile"]["total_xp"])

    def xp_to_next_level(self) -> int:
        return ProgressionEngine.xp_to_next_level(self._state["profile"]["total_xp"])

    def xp_progress(self) -> float:
        return ProgressionEngine.xp_progress(self._state["profile"]["total_xp"])

    def achievements(self, category: str | None = None) -> list[AchievementView]:
        return ProgressionEngine.achievements(self._state, category)

    def trophies(self, tier: str | None = None) -> list[TrophyView]:
        return ProgressionEngine.trophies(self._state, tier)

    def achievement_stats(self) -> UnlockStats:
        return ProgressionEngine.achievement_stats(self._state)

    def trophy_stats(self) -> UnlockStats:
        return ProgressionEngine.trophy_stats(self._state)

    def recent_xp_events(self, limit: int | None = None) -> list[XPEventData]:
        """XP history, newest first."""
        return ProgressionEngine.recent_xp_events(self._state, limit)

    def can_claim_daily_reward(self) -> bool:
        return ProgressionEngine.can_claim_daily_reward(
            self._state["profile"], dt_today_local()
        )

    def next_daily_reward(self) -> ClaimedRewardData:
        """Preview what claiming today would grant."""
        return ProgressionEngine.next_daily_reward(
            self._state["profile"], dt_today_local()
        )

    def recent_rewards(self) -> list[ClaimedRewardData]:
        return ProgressionEngine.recent_rewards(self._state)

    def has_claimed_reward(self, day: date) -> bool:
        return ProgressionEngine.has_claimed_reward(self._state, day)

    # =========================================================================
    # INTERNAL
    # =========================================================================

    def _commit(self, result: ProgressionResult, source: str) -> None:
        """Swap in the result state, persist, and emit signals.

        Must be called while holding the lock.
        """
        self._state = result["state"]
        self.coordinator._persist_and_update()

        profile = result["profile"]
        const.LOGGER.debug(
            "ProgressionManager: %s applied: +%s XP (total %s), %s achievements, "
            "%s trophies unlocked",
            source,
            result["xp_gained"],
            profile["total_xp"],
            len(result["new_achievements"]),
            len(result["new_trophies"]),
        )

        if result["xp_gained"] > 0:
            self.emit(
                const.SIGNAL_SUFFIX_XP_GAINED,
                source=source,
                amount=result["xp_gained"],
                total_xp=profile["total_xp"],
                events=[dict(event) for event in result["xp_events"]],
            )

        for achievement in result["new_achievements"]:
            const.LOGGER.info(
                "INFO: Achievement unlocked: %s (+%s XP)",
                achievement["id"],
                achievement["xp_reward"],
            )
            self.emit(
                const.SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED,
                achievement_id=achievement["id"],
                category=achievement["category"],
                rarity=achievement["rarity"],
                xp_reward=achievement["xp_reward"],
                unlocked_at=achievement["unlocked_at"],
            )

        for trophy in result["new_trophies"]:
            const.LOGGER.info(
                "INFO: Trophy unlocked: %s (+%s XP)",
                trophy["id"],
                trophy["xp_bonus"],
            )
            self.emit(
                const.SIGNAL_SUFFIX_TROPHY_UNLOCKED,
                trophy_id=trophy["id"],
                tier=trophy["tier"],
                xp_bonus=trophy["xp_bonus"],
                unlocked_at=trophy["unlocked_at"],
            )

        new_level = result["new_level"]
        if result["leveled_up"] and new_level is not None:
            const.LOGGER.info(
                "INFO: Level up: %s -> %s (%s XP)",
                result["previous_level"]["id"],
                new_level["id"],
                profile["total_xp"],
            )
            self.emit(
                const.SIGNAL_SUFFIX_LEVEL_UP,
                previous_level=result["previous_level"]["id"],
                new_level=new_level["id"],
                level_key=new_level["key"],
                total_xp=profile["total_xp"],
            )

        claim = result.get("daily_reward")
        if claim:
            self.emit(
                const.SIGNAL_SUFFIX_DAILY_REWARD_CLAIMED,
                date=claim["date"],
                day=claim["day"],
                xp_earned=claim["xp_earned"],
                multiplier=claim["multiplier"],
                bonus_type=claim["bonus_type"],
                login_streak=profile["daily_login_streak"],
            )
