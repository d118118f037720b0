# File: store.py
"""Handles persistent data storage for the HabitQuest integration.

Uses Home Assistant's Storage helper to save and load progression data, ensuring
the profile, unlock state, XP history and reward claims survive restarts.
The store only holds the JSON storage form; conversion to the in-memory state
happens in data_builders.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class HabitQuestStore:
    """Handles persistent storage operations for HabitQuest data.

    Thin wrapper around Home Assistant's Store API for loading, saving, and
    accessing the progression payload.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical empty data structure for fresh installations.

        Profile and unlock maps are left empty here; data_builders.build_state()
        fills in defaults for every field and every catalog id.
        """
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION,
                const.DATA_META_LAST_RESET: None,
            },
            const.DATA_PROFILE: {},
            const.DATA_ACHIEVEMENTS: {},
            const.DATA_TROPHIES: {},
            const.DATA_XP_EVENTS: [],
            const.DATA_CLAIMED_REWARDS: [],
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure.
        """
        const.LOGGER.debug("DEBUG: HabitQuestStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = HabitQuestStore.get_default_structure()
        else:
            self._data = existing_data
            profile = self._data.get(const.DATA_PROFILE, {})
            const.LOGGER.debug(
                "DEBUG: Loaded existing data from storage: %s",
                {
                    "total_xp": profile.get(const.DATA_PROFILE_TOTAL_XP),
                    "achievements": len(
                        profile.get(const.DATA_PROFILE_UNLOCKED_ACHIEVEMENT_IDS, [])
                    ),
                    "xp_events": len(self._data.get(const.DATA_XP_EVENTS, [])),
                    "claimed_rewards": len(
                        self._data.get(const.DATA_CLAIMED_REWARDS, [])
                    ),
                },
            )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure.

        The meta section is carried over when `new_data` does not provide one.
        """
        meta = new_data.get(const.DATA_META) or self._data.get(const.DATA_META)
        self._data = {**new_data, const.DATA_META: meta or {}}

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Raises:
            No exceptions raised - errors are logged but do not stop execution.
            OSError: Logged when file system issues prevent saving.
            TypeError: Logged when data contains non-serializable types.
            ValueError: Logged when data is invalid for JSON serialization.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s. "
                "Data contains types that cannot be converted to JSON",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s. "
                "Data structure may be corrupted",
                err,
            )

    async def async_clear_data(self, reset_at: str | None = None) -> None:
        """Clear all stored data and reset to default structure.

        Args:
            reset_at: Optional ISO timestamp recorded as the last reset time.
        """
        const.LOGGER.warning(
            "WARNING: Clearing all HabitQuest data and resetting storage"
        )
        self._data = HabitQuestStore.get_default_structure()
        self._data[const.DATA_META][const.DATA_META_LAST_RESET] = reset_at
        await self.async_save()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk.

        This clears all in-memory data and removes the storage file using
        Home Assistant's Store API for proper file handling.
        """
        await self.async_clear_data()

        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
