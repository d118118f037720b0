"""Base manager class for HabitQuest managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import async_dispatcher_send

from .. import const
from ..helpers.entity_helpers import get_event_signal

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import HabitQuestDataCoordinator


class BaseManager(ABC):
    """Base class for HabitQuest managers.

    Every progression change is announced twice:
    - as a dispatcher signal scoped to the config entry, for in-process consumers
    - as a `habitquest_<suffix>` bus event for the user-facing suffixes in
      const.BUS_EVENT_SIGNAL_SUFFIXES, so automations can trigger on it

    Subclasses must implement async_setup() to load their state.
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: HabitQuestDataCoordinator
    ) -> None:
        """Initialize manager.

        Args:
            hass: Home Assistant instance
            coordinator: Coordinator owning the store of this config entry
        """
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    def emit(self, suffix: str, **payload: Any) -> None:
        """Announce a progression change.

        Args:
            suffix: const.SIGNAL_SUFFIX_* value
            **payload: JSON-serializable event data; the bus event also
                carries the entry_id
        """
        async_dispatcher_send(
            self.hass, get_event_signal(self.entry_id, suffix), payload
        )

        if suffix not in const.BUS_EVENT_SIGNAL_SUFFIXES:
            return
        const.LOGGER.debug(
            "DEBUG: Firing %s_%s for entry %s", const.DOMAIN, suffix, self.entry_id
        )
        self.hass.bus.async_fire(
            f"{const.DOMAIN}_{suffix}", {"entry_id": self.entry_id, **payload}
        )

    @abstractmethod
    async def async_setup(self) -> None:
        """Load state. Called once from the coordinator's first refresh."""
