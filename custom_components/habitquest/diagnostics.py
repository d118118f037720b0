"""Diagnostics support for HabitQuest integration.

The diagnostics JSON returns raw storage data - identical to the
habitquest_data file - plus a small summary of derived values.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import HabitQuestDataCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: HabitQuestDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    manager = coordinator.progression_manager
    level = manager.level()

    return {
        "storage": coordinator.store.data,
        "options": dict(entry.options),
        "summary": {
            "level": level["id"],
            "level_key": level["key"],
            "xp_to_next_level": manager.xp_to_next_level(),
            "achievements": manager.achievement_stats(),
            "trophies": manager.trophy_stats(),
            "can_claim_daily_reward": manager.can_claim_daily_reward(),
        },
    }
