# File: helpers/device_helpers.py
"""Device registry helper functions for HabitQuest."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


def create_profile_device_info(config_entry: ConfigEntry) -> DeviceInfo:
    """Create device info grouping all progression entities of an entry.

    Args:
        config_entry: Config entry for this integration instance

    Returns:
        DeviceInfo dict for the progression profile device
    """
    return DeviceInfo(
        identifiers={(const.DOMAIN, f"{config_entry.entry_id}_profile")},
        name=config_entry.title,
        manufacturer=const.HABITQUEST_TITLE,
        model="Progression Profile",
        entry_type=DeviceEntryType.SERVICE,
    )
