# File: __init__.py
"""Initialization file for the HabitQuest integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator for data handling.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization for progression state.
- Storage management for persistent data handling.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import HabitQuestDataCoordinator
from .services import async_setup_services, async_unload_services
from .store import HabitQuestStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for HabitQuest entry: %s", entry.entry_id)

    # Set the home assistant configured timezone for date/time operations
    # Must be done before any manager computes "today"
    const.set_default_timezone(hass)

    store = HabitQuestStore(hass, const.STORAGE_KEY)
    await store.async_initialize()

    coordinator = HabitQuestDataCoordinator(hass, entry, store)
    await coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORE: store,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    const.LOGGER.info("INFO: HabitQuest setup complete for entry: %s", entry.entry_id)
    return True


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry when options change."""
    const.LOGGER.debug("DEBUG: Options changed, reloading entry %s", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading HabitQuest entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        hass.data[const.DOMAIN].pop(entry.entry_id)
        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry by deleting its storage file."""
    const.LOGGER.info("INFO: Removing HabitQuest entry: %s", entry.entry_id)

    store = HabitQuestStore(hass, const.STORAGE_KEY)
    await store.async_delete_storage()

    const.LOGGER.info("INFO: HabitQuest entry data cleared: %s", entry.entry_id)
