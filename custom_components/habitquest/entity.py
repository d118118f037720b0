"""Base entity classes for HabitQuest integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import HabitQuestDataCoordinator
from .helpers.device_helpers import create_profile_device_info


class HabitQuestCoordinatorEntity(CoordinatorEntity[HabitQuestDataCoordinator]):
    """Base entity class for HabitQuest entities with typed coordinator access.

    All entities of an entry share one device and build their unique id from
    the entry id plus a per-entity suffix.
    """

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: HabitQuestDataCoordinator,
        entry: ConfigEntry,
        unique_id_suffix: str,
    ) -> None:
        """Initialize the entity.

        Args:
            coordinator: HabitQuestDataCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            unique_id_suffix: const.*_UID_SUFFIX_* value for this entity.
        """
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}{unique_id_suffix}"
        self._attr_device_info = create_profile_device_info(entry)

    @property
    def coordinator(self) -> HabitQuestDataCoordinator:
        """Return typed coordinator."""
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: HabitQuestDataCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)
