"""Shared fixtures for HabitQuest tests."""

from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.habitquest.const import (
    CONF_XP_HISTORY_SIZE,
    COORDINATOR,
    DEFAULT_XP_HISTORY_SIZE,
    DOMAIN,
)
from custom_components.habitquest.coordinator import HabitQuestDataCoordinator

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title="HabitQuest",
        data={},
        options={
            CONF_XP_HISTORY_SIZE: DEFAULT_XP_HISTORY_SIZE,
        },
        entry_id="test_entry_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any] | None:
    """Return stored data for setup (None = fresh installation)."""
    return None


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any] | None,  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the HabitQuest integration for testing with mocked storage."""
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry


@pytest.fixture
def coordinator(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> HabitQuestDataCoordinator:
    """Return the coordinator of the loaded entry."""
    return hass.data[DOMAIN][init_integration.entry_id][COORDINATOR]


def get_entity_id(hass: HomeAssistant, platform: str, unique_id: str) -> str:
    """Look up an entity id by unique id."""
    entity_id = er.async_get(hass).async_get_entity_id(platform, DOMAIN, unique_id)
    assert entity_id is not None, f"No {platform} entity with unique id {unique_id}"
    return entity_id
