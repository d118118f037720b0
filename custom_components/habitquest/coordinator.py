# File: coordinator.py
"""Coordinator for the HabitQuest integration.

Owns the store and the progression manager of one config entry, persists
state after every change and pushes updates to entities. There is no
polling: updates are driven by progression events and by local midnight,
when daily reward eligibility changes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.core import callback
from homeassistant.helpers.event import async_track_time_change
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const, data_builders as db
from .managers.progression_manager import ProgressionManager

if TYPE_CHECKING:
    from datetime import datetime

    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .store import HabitQuestStore
    from .type_defs import ProgressionState


class HabitQuestDataCoordinator(DataUpdateCoordinator["ProgressionState"]):
    """Coordinator for HabitQuest integration.

    coordinator.data is the current ProgressionState; entities read it through
    coordinator.progression_manager query methods.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: HabitQuestStore,
    ) -> None:
        """Initialize the HabitQuestDataCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=None,
        )
        self.store = store
        self.progression_manager = ProgressionManager(hass, self)

    async def async_config_entry_first_refresh(self) -> None:
        """Load state from storage and publish it to listeners."""
        await self.progression_manager.async_setup()
        # Claim eligibility and the next-reward preview depend on the local day
        self.config_entry.async_on_unload(
            async_track_time_change(
                self.hass, self._async_day_changed, **const.DAY_ROLLOVER_TIME
            )
        )
        self.async_set_updated_data(self.progression_manager.state)

    @callback
    def _async_day_changed(self, _now: datetime) -> None:
        """Refresh entities when the local calendar day changes."""
        const.LOGGER.debug("DEBUG: Local day changed, refreshing HabitQuest entities")
        self.async_update_listeners()

    async def _async_update_data(self) -> ProgressionState:
        """Return the in-memory state (nothing to poll)."""
        return self.progression_manager.state

    def _persist(self) -> None:
        """Save to persistent storage."""
        self.store.set_data(db.dump_state(self.progression_manager.state))
        self.hass.add_job(self.store.async_save)

    def _persist_and_update(self) -> None:
        """Save to storage and notify entities."""
        self._persist()
        self.async_set_updated_data(self.progression_manager.state)
