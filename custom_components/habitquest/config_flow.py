# File: config_flow.py
"""Config flow for the HabitQuest integration.

A single progression profile per Home Assistant instance; the user step only
asks for the entry title.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.const import CONF_NAME
from homeassistant.core import callback

from . import const
from .options_flow import HabitQuestOptionsFlowHandler


class HabitQuestConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for HabitQuest."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Create the single HabitQuest entry."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is not None:
            title = user_input.get(CONF_NAME) or const.HABITQUEST_TITLE
            const.LOGGER.debug("DEBUG: Creating HabitQuest entry '%s'", title)
            return self.async_create_entry(
                title=title,
                data={},
                options={
                    const.CONF_XP_HISTORY_SIZE: const.DEFAULT_XP_HISTORY_SIZE,
                },
            )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=vol.Schema(
                {
                    vol.Optional(
                        CONF_NAME, default=const.HABITQUEST_TITLE
                    ): str,
                }
            ),
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return HabitQuestOptionsFlowHandler()
