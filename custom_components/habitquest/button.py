# File: button.py
"""Buttons for HabitQuest integration.

Features:
1) ClaimDailyRewardButton: claims today's login reward.
"""

from homeassistant.components.button import ButtonEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import HabitQuestDataCoordinator
from .entity import HabitQuestCoordinatorEntity


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up buttons for HabitQuest integration."""
    coordinator: HabitQuestDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    async_add_entities([ClaimDailyRewardButton(coordinator, entry)])


class ClaimDailyRewardButton(HabitQuestCoordinatorEntity, ButtonEntity):
    """Button that claims the daily login reward.

    Pressing after today's reward was already claimed raises so the frontend
    shows the failure.
    """

    _attr_translation_key = const.TRANS_KEY_BUTTON_CLAIM_DAILY_REWARD
    _attr_icon = "mdi:gift"

    def __init__(self, coordinator: HabitQuestDataCoordinator, entry: ConfigEntry):
        """Initialize the button."""
        super().__init__(
            coordinator, entry, const.BUTTON_UID_SUFFIX_CLAIM_DAILY_REWARD
        )

    async def async_press(self) -> None:
        """Handle the button press event."""
        result = await self.coordinator.progression_manager.async_claim_daily_reward()
        if result["outcome"] == const.OUTCOME_NOT_ELIGIBLE:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NOT_ELIGIBLE,
            )
        const.LOGGER.info(
            "INFO: Daily reward claimed via button: +%s XP",
            result["xp_gained"],
        )
