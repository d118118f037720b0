"""Tests for HabitQuestStore."""

from __future__ import annotations

from unittest.mock import patch

from homeassistant.core import HomeAssistant

from custom_components.habitquest import const
from custom_components.habitquest.store import HabitQuestStore


async def test_initialize_without_storage(hass: HomeAssistant) -> None:
    """Test a fresh install starts from the default structure."""
    store = HabitQuestStore(hass)
    with patch("homeassistant.helpers.storage.Store.async_load", return_value=None):
        await store.async_initialize()

    assert store.data == HabitQuestStore.get_default_structure()


async def test_set_data_keeps_meta(hass: HomeAssistant) -> None:
    """Test replacing the payload carries the meta section over."""
    store = HabitQuestStore(hass)
    with patch("homeassistant.helpers.storage.Store.async_load", return_value=None):
        await store.async_initialize()

    store.set_data({const.DATA_PROFILE: {const.DATA_PROFILE_TOTAL_XP: 10}})

    assert store.data[const.DATA_PROFILE][const.DATA_PROFILE_TOTAL_XP] == 10
    assert store.data[const.DATA_META][const.DATA_META_SCHEMA_VERSION] == (
        const.SCHEMA_VERSION
    )


async def test_clear_data_records_reset(hass: HomeAssistant) -> None:
    """Test clearing resets the payload and stamps the reset time."""
    store = HabitQuestStore(hass)
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value={const.DATA_PROFILE: {const.DATA_PROFILE_TOTAL_XP: 500}},
    ):
        await store.async_initialize()

    with patch("homeassistant.helpers.storage.Store.async_save") as mock_save:
        await store.async_clear_data(reset_at="2026-03-10T12:00:00+00:00")

    mock_save.assert_called_once()
    assert store.data[const.DATA_PROFILE] == {}
    assert store.data[const.DATA_META][const.DATA_META_LAST_RESET] == (
        "2026-03-10T12:00:00+00:00"
    )


async def test_save_error_is_logged(hass: HomeAssistant, caplog) -> None:
    """Test a failing save is logged instead of raised."""
    store = HabitQuestStore(hass)
    with patch(
        "homeassistant.helpers.storage.Store.async_save",
        side_effect=OSError("disk full"),
    ):
        await store.async_save()

    assert "disk full" in caplog.text
