# File: sensor.py
"""Sensors for the HabitQuest integration.

Sensors Defined in This File (5):
01. LevelSensor - current level (enum, translated level names)
02. TotalXPSensor - lifetime XP with recent XP history
03. LoginStreakSensor - daily login streak and next reward preview
04. AchievementsSensor - unlocked achievement count with per-item progress
05. TrophiesSensor - unlocked trophy count with per-item state
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .catalog import LEVEL_KEYS
from .coordinator import HabitQuestDataCoordinator
from .entity import HabitQuestCoordinatorEntity


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for HabitQuest integration."""
    coordinator: HabitQuestDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    async_add_entities(
        [
            LevelSensor(coordinator, entry),
            TotalXPSensor(coordinator, entry),
            LoginStreakSensor(coordinator, entry),
            AchievementsSensor(coordinator, entry),
            TrophiesSensor(coordinator, entry),
        ]
    )


# ------------------------------------------------------------------------------------------
class LevelSensor(HabitQuestCoordinatorEntity, SensorEntity):
    """Sensor for the current level.

    ENUM device class so each level key is translated through
    entity.sensor.level.state in translations/en.json.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_LEVEL
    _attr_device_class = SensorDeviceClass.ENUM
    _attr_options = LEVEL_KEYS

    def __init__(self, coordinator: HabitQuestDataCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_LEVEL)

    @property
    def native_value(self) -> str:
        """Return the level key."""
        return self.coordinator.progression_manager.level()["key"]

    @property
    def icon(self) -> str:
        return self.coordinator.progression_manager.level()["icon"]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        manager = self.coordinator.progression_manager
        level = manager.level()
        return {
            const.ATTR_LEVEL_ID: level["id"],
            const.ATTR_MIN_XP: level["min_xp"],
            const.ATTR_MAX_XP: level["max_xp"],
            const.ATTR_XP_TO_NEXT_LEVEL: manager.xp_to_next_level(),
            const.ATTR_XP_PROGRESS: manager.xp_progress(),
        }


# ------------------------------------------------------------------------------------------
class TotalXPSensor(HabitQuestCoordinatorEntity, SensorEntity):
    """Sensor for lifetime XP.

    TOTAL_INCREASING state class: XP only grows, except on a full reset.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_TOTAL_XP
    _attr_state_class = SensorStateClass.TOTAL_INCREASING
    _attr_native_unit_of_measurement = const.UNIT_XP
    _attr_icon = "mdi:star-four-points"

    def __init__(self, coordinator: HabitQuestDataCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_TOTAL_XP)

    @property
    def native_value(self) -> int:
        return self.coordinator.progression_manager.state["profile"]["total_xp"]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        manager = self.coordinator.progression_manager
        profile = manager.state["profile"]
        return {
            const.ATTR_TOTAL_COMPLETIONS: profile["total_completions"],
            const.ATTR_CURRENT_STREAK: profile["current_streak"],
            const.ATTR_MAX_STREAK: profile["max_streak"],
            const.ATTR_RECENT_XP_EVENTS: manager.recent_xp_events(
                const.SENSOR_ATTR_RECENT_XP_EVENTS_LIMIT
            ),
        }


# ------------------------------------------------------------------------------------------
class LoginStreakSensor(HabitQuestCoordinatorEntity, SensorEntity):
    """Sensor for the daily login streak."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_LOGIN_STREAK
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_icon = "mdi:calendar-check"

    def __init__(self, coordinator: HabitQuestDataCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_LOGIN_STREAK)

    @property
    def native_value(self) -> int:
        return self.coordinator.progression_manager.state["profile"][
            "daily_login_streak"
        ]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose claim eligibility and a preview of the next reward."""
        manager = self.coordinator.progression_manager
        last_login = manager.state["profile"]["last_login_date"]
        return {
            const.ATTR_LAST_LOGIN_DATE: last_login.isoformat() if last_login else None,
            const.ATTR_CAN_CLAIM: manager.can_claim_daily_reward(),
            const.ATTR_NEXT_REWARD_XP: manager.next_daily_reward()["xp_earned"],
            const.ATTR_RECENT_REWARDS: manager.recent_rewards(),
        }


# ------------------------------------------------------------------------------------------
class AchievementsSensor(HabitQuestCoordinatorEntity, SensorEntity):
    """Sensor for unlocked achievements.

    State is the unlocked count; attributes list every achievement with its
    progress so dashboards can render the full catalog.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_ACHIEVEMENTS
    _attr_icon = "mdi:medal"

    def __init__(self, coordinator: HabitQuestDataCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_ACHIEVEMENTS)

    @property
    def native_value(self) -> int:
        return self.coordinator.progression_manager.achievement_stats()["unlocked"]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        manager = self.coordinator.progression_manager
        stats = manager.achievement_stats()
        return {
            const.ATTR_UNLOCKED: stats["unlocked"],
            const.ATTR_TOTAL: stats["total"],
            const.ATTR_ITEMS: manager.achievements(),
        }


# ------------------------------------------------------------------------------------------
class TrophiesSensor(HabitQuestCoordinatorEntity, SensorEntity):
    """Sensor for unlocked trophies."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_TROPHIES
    _attr_icon = "mdi:trophy"

    def __init__(self, coordinator: HabitQuestDataCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_TROPHIES)

    @property
    def native_value(self) -> int:
        return self.coordinator.progression_manager.trophy_stats()["unlocked"]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        manager = self.coordinator.progression_manager
        stats = manager.trophy_stats()
        return {
            const.ATTR_UNLOCKED: stats["unlocked"],
            const.ATTR_TOTAL: stats["total"],
            const.ATTR_ITEMS: manager.trophies(),
        }
