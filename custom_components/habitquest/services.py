# File: services.py
"""Defines custom services for the HabitQuest integration.

These services feed progression events from scripts and automations (or from
the habit tracker that owns habits and streak bookkeeping). Event services
return the engine result as an optional service response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall, SupportsResponse
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const, data_builders as db
from .helpers.entity_helpers import get_first_habitquest_entry

if TYPE_CHECKING:
    from .coordinator import HabitQuestDataCoordinator
    from .managers.progression_manager import ProgressionManager

# --- Service Schemas ---
HABIT_COMPLETED_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_STREAK): vol.Coerce(int),
        vol.Optional(const.FIELD_CATEGORY): cv.string,
        vol.Optional(const.FIELD_COMPLETED_AT): cv.datetime,
    }
)

EMPTY_SCHEMA = vol.Schema({})

# Simple counter events: service name -> manager coroutine name
_COUNTER_EVENT_SERVICES = {
    const.SERVICE_PHOTO_ADDED: "async_photo_added",
    const.SERVICE_MODEL_3D_CREATED: "async_model_3d_created",
    const.SERVICE_AI_HABIT_CREATED: "async_ai_habit_created",
    const.SERVICE_HABIT_CREATED: "async_habit_created",
}


def _get_manager(hass: HomeAssistant, service: str) -> ProgressionManager:
    """Return the progression manager of the loaded entry or raise."""
    entry_id = get_first_habitquest_entry(hass)
    data = hass.data.get(const.DOMAIN, {}).get(entry_id) if entry_id else None
    if not data:
        const.LOGGER.warning("WARNING: %s: %s", service, const.MSG_NO_ENTRY_FOUND)
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NOT_LOADED,
        )
    coordinator: HabitQuestDataCoordinator = data[const.COORDINATOR]
    return coordinator.progression_manager


def async_setup_services(hass: HomeAssistant) -> None:
    """Register HabitQuest services."""

    async def handle_habit_completed(call: ServiceCall) -> dict[str, Any]:
        """Handle a habit completion."""
        manager = _get_manager(hass, const.SERVICE_HABIT_COMPLETED)
        result = await manager.async_habit_completed(
            call.data[const.FIELD_STREAK],
            call.data.get(const.FIELD_CATEGORY),
            call.data.get(const.FIELD_COMPLETED_AT),
        )
        return db.build_result_response(result)

    async def handle_counter_event(call: ServiceCall) -> dict[str, Any]:
        """Handle photo, 3D model, AI habit and habit creation events."""
        manager = _get_manager(hass, call.service)
        method = getattr(manager, _COUNTER_EVENT_SERVICES[call.service])
        result = await method()
        return db.build_result_response(result)

    async def handle_claim_daily_reward(call: ServiceCall) -> dict[str, Any]:
        """Handle claiming today's login reward."""
        manager = _get_manager(hass, const.SERVICE_CLAIM_DAILY_REWARD)
        result = await manager.async_claim_daily_reward()
        if result["outcome"] == const.OUTCOME_NOT_ELIGIBLE:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NOT_ELIGIBLE,
            )
        return db.build_result_response(result)

    async def handle_reset_all_data(_call: ServiceCall) -> None:
        """Handle resetting ALL progression data."""
        manager = _get_manager(hass, const.SERVICE_RESET_ALL_DATA)
        await manager.async_reset_all_data()
        const.LOGGER.info("INFO: Reset All Data: progression data reset to defaults")

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_HABIT_COMPLETED,
        handle_habit_completed,
        schema=HABIT_COMPLETED_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )

    for service in _COUNTER_EVENT_SERVICES:
        hass.services.async_register(
            const.DOMAIN,
            service,
            handle_counter_event,
            schema=EMPTY_SCHEMA,
            supports_response=SupportsResponse.OPTIONAL,
        )

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CLAIM_DAILY_REWARD,
        handle_claim_daily_reward,
        schema=EMPTY_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_ALL_DATA,
        handle_reset_all_data,
        schema=EMPTY_SCHEMA,
    )

    const.LOGGER.debug("DEBUG: HabitQuest services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister HabitQuest services when unloading the integration."""
    services = [
        const.SERVICE_HABIT_COMPLETED,
        *_COUNTER_EVENT_SERVICES,
        const.SERVICE_CLAIM_DAILY_REWARD,
        const.SERVICE_RESET_ALL_DATA,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: HabitQuest services have been unregistered")
