# File: options_flow.py
"""Options Flow for the HabitQuest integration.

Only general settings live here; progression data itself is never edited
through the UI. Saving options reloads the entry so the new values apply.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.helpers import selector

from . import const


class HabitQuestOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for general HabitQuest settings."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        """Edit the XP history size."""
        if user_input is not None:
            const.LOGGER.debug(
                "DEBUG: Updating HabitQuest options: %s", user_input
            )
            return self.async_create_entry(
                data={
                    **self.config_entry.options,
                    const.CONF_XP_HISTORY_SIZE: int(
                        user_input[const.CONF_XP_HISTORY_SIZE]
                    ),
                }
            )

        current = self.config_entry.options.get(
            const.CONF_XP_HISTORY_SIZE, const.DEFAULT_XP_HISTORY_SIZE
        )
        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=vol.Schema(
                {
                    vol.Required(
                        const.CONF_XP_HISTORY_SIZE, default=current
                    ): selector.NumberSelector(
                        selector.NumberSelectorConfig(
                            min=const.MIN_XP_HISTORY_SIZE,
                            max=const.MAX_XP_HISTORY_SIZE,
                            step=1,
                            mode=selector.NumberSelectorMode.BOX,
                        )
                    ),
                }
            ),
        )
