# File: helpers/entity_helpers.py
"""Entity and config entry helper functions for HabitQuest.

All functions here require a `hass` object or build names scoped to a
config entry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.config_entries import ConfigEntryState

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


# ==============================================================================
# Event Signal Helpers (Manager Communication)
# ==============================================================================


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'habitquest_{entry_id}_{suffix}'

    Args:
        entry_id: ConfigEntry.entry_id from coordinator
        suffix: Signal suffix constant from const.py (e.g., SIGNAL_SUFFIX_LEVEL_UP)

    Returns:
        Fully qualified signal name scoped to this integration instance

    Example:
        >>> get_event_signal("abc123", const.SIGNAL_SUFFIX_LEVEL_UP)
        'habitquest_abc123_level_up'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


# ==============================================================================
# Config Entry Lookup
# ==============================================================================


def get_first_habitquest_entry(hass: HomeAssistant) -> str | None:
    """Get the entry_id of the first loaded HabitQuest config entry.

    Returns:
        Config entry ID string, or None if no loaded entries
    """
    entries = hass.config_entries.async_entries(const.DOMAIN)
    for entry in entries:
        if entry.state is ConfigEntryState.LOADED:
            return entry.entry_id
    return None
