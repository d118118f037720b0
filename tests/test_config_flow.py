"""Tests for the HabitQuest config and options flows."""

from __future__ import annotations

from unittest.mock import patch

from homeassistant import config_entries
from homeassistant.const import CONF_NAME
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.habitquest import const


async def test_user_step_creates_entry(hass: HomeAssistant) -> None:
    """Test the user step shows a form and creates the entry."""
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result["type"] == FlowResultType.FORM
    assert result["step_id"] == const.CONFIG_FLOW_STEP_USER

    with patch(
        "custom_components.habitquest.async_setup_entry", return_value=True
    ) as mock_setup:
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], {CONF_NAME: "My Quest"}
        )
        await hass.async_block_till_done()

    assert result["type"] == FlowResultType.CREATE_ENTRY
    assert result["title"] == "My Quest"
    assert result["data"] == {}
    assert result["options"] == {
        const.CONF_XP_HISTORY_SIZE: const.DEFAULT_XP_HISTORY_SIZE
    }
    assert len(mock_setup.mock_calls) == 1


async def test_single_instance(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """Test a second entry is refused."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result["type"] == FlowResultType.ABORT
    assert result["reason"] == const.TRANS_KEY_ERROR_SINGLE_INSTANCE


async def test_options_flow_updates_history_size(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test the options flow stores the new XP history size."""
    result = await hass.config_entries.options.async_init(init_integration.entry_id)
    assert result["type"] == FlowResultType.FORM
    assert result["step_id"] == const.OPTIONS_FLOW_STEP_INIT

    result = await hass.config_entries.options.async_configure(
        result["flow_id"], {const.CONF_XP_HISTORY_SIZE: 3}
    )
    await hass.async_block_till_done()

    assert result["type"] == FlowResultType.CREATE_ENTRY
    assert init_integration.options[const.CONF_XP_HISTORY_SIZE] == 3

    coordinator = hass.data[const.DOMAIN][init_integration.entry_id][const.COORDINATOR]
    assert coordinator.progression_manager.history_size == 3
