"""Tests for HabitQuest services, entities and event bus forwarding.

All tests run against a fully set up integration with mocked storage. Time is
frozen because completion hour and calendar day drive several achievements
and the daily reward gate. The test instance runs in US/Pacific, so 20:00 UTC
is early afternoon local time, 06:00 UTC is 23:00 the previous local day.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, date, datetime
from unittest.mock import patch

from freezegun import freeze_time
import pytest
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.util import dt as dt_util
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_capture_events,
)
import voluptuous as vol

from custom_components.habitquest import const
from custom_components.habitquest.coordinator import HabitQuestDataCoordinator
from custom_components.habitquest.engines.progression_engine import (
    ProgressionEngine,
)
from tests.conftest import get_entity_id

AFTERNOON = "2026-03-10 20:00:00"
NEXT_AFTERNOON = "2026-03-11 20:00:00"
LATE_EVENING = "2026-03-11 06:00:00"
JUST_AFTER_MIDNIGHT = "2026-03-11 07:05:00"


async def call(
    hass: HomeAssistant, service: str, data: dict | None = None
) -> dict:
    """Call a HabitQuest service and return its response."""
    response = await hass.services.async_call(
        const.DOMAIN,
        service,
        data or {},
        blocking=True,
        return_response=True,
    )
    await hass.async_block_till_done()
    assert response is not None
    return response


# =============================================================================
# Test: habit_completed
# =============================================================================


class TestHabitCompletedService:
    """Tests for the habit_completed service."""

    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_first_completion(
        self, hass: HomeAssistant, coordinator: HabitQuestDataCoordinator
    ) -> None:
        """Test the response and in-memory state after a first completion."""
        response = await call(
            hass,
            const.SERVICE_HABIT_COMPLETED,
            {const.FIELD_STREAK: 3, const.FIELD_CATEGORY: "fitness"},
        )

        assert response["outcome"] == const.OUTCOME_APPLIED
        assert response["xp_gained"] == 36
        assert response["total_xp"] == 36
        assert response["new_achievements"] == ["streak_3", "complete_1", "first_day"]
        assert response["leveled_up"] is False

        profile = coordinator.progression_manager.current_profile()
        assert profile["total_completions"] == 1
        assert profile["categories_used"] == {"fitness"}

    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_completed_at_drives_early_bird(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Test a local completion time before 07:00 unlocks early_bird."""
        response = await call(
            hass,
            const.SERVICE_HABIT_COMPLETED,
            {const.FIELD_STREAK: 0, const.FIELD_COMPLETED_AT: "2026-03-10 06:30:00"},
        )

        assert "early_bird" in response["new_achievements"]

    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_streak_is_required(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Test the schema rejects a call without a streak."""
        with pytest.raises(vol.Invalid):
            await hass.services.async_call(
                const.DOMAIN,
                const.SERVICE_HABIT_COMPLETED,
                {const.FIELD_CATEGORY: "fitness"},
                blocking=True,
                return_response=True,
            )

    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_state_is_persisted(
        self, hass: HomeAssistant, coordinator: HabitQuestDataCoordinator
    ) -> None:
        """Test the store holds the JSON form after an event."""
        await call(
            hass,
            const.SERVICE_HABIT_COMPLETED,
            {const.FIELD_STREAK: 3, const.FIELD_CATEGORY: "fitness"},
        )

        stored = coordinator.store.data
        assert stored[const.DATA_PROFILE][const.DATA_PROFILE_TOTAL_XP] == 36
        assert stored[const.DATA_PROFILE][const.DATA_PROFILE_CATEGORIES_USED] == [
            "fitness"
        ]
        assert stored[const.DATA_ACHIEVEMENTS]["streak_3"]["unlocked"] is True
        assert len(stored[const.DATA_XP_EVENTS]) == 5
        assert stored[const.DATA_META][const.DATA_META_SCHEMA_VERSION] == (
            const.SCHEMA_VERSION
        )


# =============================================================================
# Test: explorer services
# =============================================================================


class TestExplorerServices:
    """Tests for the counter event services."""

    @pytest.mark.parametrize(
        ("service", "achievement_id", "xp"),
        [
            (const.SERVICE_PHOTO_ADDED, "first_photo", 15),
            (const.SERVICE_MODEL_3D_CREATED, "first_3d", 50),
            (const.SERVICE_AI_HABIT_CREATED, "ai_habit", 50),
        ],
    )
    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_first_event_unlocks(
        self,
        hass: HomeAssistant,
        init_integration: MockConfigEntry,
        service: str,
        achievement_id: str,
        xp: int,
    ) -> None:
        """Test the first event of each kind unlocks its achievement."""
        response = await call(hass, service)

        assert response["new_achievements"] == [achievement_id]
        assert response["xp_gained"] == xp

    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_habit_created_counts(
        self, hass: HomeAssistant, coordinator: HabitQuestDataCoordinator
    ) -> None:
        """Test habit_created only counts until the fifth habit."""
        for _ in range(4):
            response = await call(hass, const.SERVICE_HABIT_CREATED)
            assert response["xp_gained"] == 0

        response = await call(hass, const.SERVICE_HABIT_CREATED)

        assert response["new_achievements"] == ["five_habits"]
        assert coordinator.progression_manager.state["profile"]["habits_created"] == 5


# =============================================================================
# Test: daily reward
# =============================================================================


class TestDailyReward:
    """Tests for the claim_daily_reward service and button."""

    async def test_claim_once_per_day(
        self, hass: HomeAssistant, coordinator: HabitQuestDataCoordinator
    ) -> None:
        """Test a second claim on the same day raises, the next day works."""
        with freeze_time(AFTERNOON, tz_offset=0) as frozen:
            first = await call(hass, const.SERVICE_CLAIM_DAILY_REWARD)
            assert first["xp_gained"] == 5
            assert first["daily_reward"]["day"] == 1

            with pytest.raises(HomeAssistantError):
                await call(hass, const.SERVICE_CLAIM_DAILY_REWARD)
            assert coordinator.progression_manager.state["profile"]["total_xp"] == 5

            frozen.move_to(NEXT_AFTERNOON)
            second = await call(hass, const.SERVICE_CLAIM_DAILY_REWARD)

        assert second["xp_gained"] == 10
        assert second["daily_reward"]["day"] == 2
        assert coordinator.progression_manager.state["profile"]["daily_login_streak"] == 2

    async def test_button_press(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Test the button claims and refuses a repeat on the same day."""
        button_id = get_entity_id(
            hass,
            "button",
            f"{init_integration.entry_id}{const.BUTTON_UID_SUFFIX_CLAIM_DAILY_REWARD}",
        )
        streak_id = get_entity_id(
            hass,
            "sensor",
            f"{init_integration.entry_id}{const.SENSOR_UID_SUFFIX_LOGIN_STREAK}",
        )

        with freeze_time(AFTERNOON, tz_offset=0):
            await hass.services.async_call(
                "button", "press", {"entity_id": button_id}, blocking=True
            )
            await hass.async_block_till_done()

            state = hass.states.get(streak_id)
            assert state is not None
            assert state.state == "1"
            assert state.attributes[const.ATTR_CAN_CLAIM] is False
            assert state.attributes[const.ATTR_LAST_LOGIN_DATE] == "2026-03-10"

            with pytest.raises(HomeAssistantError):
                await hass.services.async_call(
                    "button", "press", {"entity_id": button_id}, blocking=True
                )


# =============================================================================
# Test: sensors
# =============================================================================


class TestSensors:
    """Tests for sensor states and attributes."""

    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_initial_states(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Test a fresh install shows level 1 and nothing unlocked."""
        entry_id = init_integration.entry_id

        level = hass.states.get(
            get_entity_id(hass, "sensor", f"{entry_id}{const.SENSOR_UID_SUFFIX_LEVEL}")
        )
        achievements = hass.states.get(
            get_entity_id(
                hass, "sensor", f"{entry_id}{const.SENSOR_UID_SUFFIX_ACHIEVEMENTS}"
            )
        )
        trophies = hass.states.get(
            get_entity_id(hass, "sensor", f"{entry_id}{const.SENSOR_UID_SUFFIX_TROPHIES}")
        )

        assert level is not None
        assert level.state == "novice"
        assert level.attributes[const.ATTR_XP_TO_NEXT_LEVEL] == 100
        assert achievements is not None
        assert achievements.state == "0"
        assert achievements.attributes[const.ATTR_TOTAL] == 26
        assert trophies is not None
        assert trophies.attributes[const.ATTR_TOTAL] == 10

    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_states_follow_events(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Test sensors refresh after a level-up."""
        entry_id = init_integration.entry_id

        await call(
            hass,
            const.SERVICE_HABIT_COMPLETED,
            {const.FIELD_STREAK: 30, const.FIELD_CATEGORY: "fitness"},
        )

        level = hass.states.get(
            get_entity_id(hass, "sensor", f"{entry_id}{const.SENSOR_UID_SUFFIX_LEVEL}")
        )
        total_xp = hass.states.get(
            get_entity_id(hass, "sensor", f"{entry_id}{const.SENSOR_UID_SUFFIX_TOTAL_XP}")
        )
        trophies = hass.states.get(
            get_entity_id(hass, "sensor", f"{entry_id}{const.SENSOR_UID_SUFFIX_TROPHIES}")
        )

        assert level is not None
        assert level.state == "dedicated"
        assert total_xp is not None
        assert total_xp.state == "440"
        assert total_xp.attributes[const.ATTR_MAX_STREAK] == 30
        recent = total_xp.attributes[const.ATTR_RECENT_XP_EVENTS]
        assert len(recent) == const.SENSOR_ATTR_RECENT_XP_EVENTS_LIMIT
        assert recent[0]["reason"] == "trophy:silver_streak"
        assert trophies is not None
        assert trophies.state == "2"


# =============================================================================
# Test: event bus
# =============================================================================


class TestBusEvents:
    """Tests for dispatcher signals forwarded to the event bus."""

    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_unlock_and_level_events(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Test unlocks and level-ups fire habitquest_* events."""
        achievement_events = async_capture_events(
            hass, f"{const.DOMAIN}_{const.SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED}"
        )
        trophy_events = async_capture_events(
            hass, f"{const.DOMAIN}_{const.SIGNAL_SUFFIX_TROPHY_UNLOCKED}"
        )
        level_events = async_capture_events(
            hass, f"{const.DOMAIN}_{const.SIGNAL_SUFFIX_LEVEL_UP}"
        )

        await call(
            hass,
            const.SERVICE_HABIT_COMPLETED,
            {const.FIELD_STREAK: 30, const.FIELD_CATEGORY: "fitness"},
        )

        assert [event.data["achievement_id"] for event in achievement_events] == [
            "streak_3",
            "streak_7",
            "streak_14",
            "streak_30",
            "complete_1",
            "first_day",
        ]
        assert [event.data["trophy_id"] for event in trophy_events] == [
            "bronze_streak",
            "silver_streak",
        ]
        assert len(level_events) == 1
        assert level_events[0].data["entry_id"] == init_integration.entry_id
        assert level_events[0].data["previous_level"] == 1
        assert level_events[0].data["new_level"] == 3

    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_daily_reward_event(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Test a claim fires habitquest_daily_reward_claimed."""
        events = async_capture_events(
            hass, f"{const.DOMAIN}_{const.SIGNAL_SUFFIX_DAILY_REWARD_CLAIMED}"
        )

        await call(hass, const.SERVICE_CLAIM_DAILY_REWARD)

        assert len(events) == 1
        assert events[0].data["day"] == 1
        assert events[0].data["xp_earned"] == 5
        assert events[0].data["login_streak"] == 1


# =============================================================================
# Test: day rollover
# =============================================================================


class TestDayRollover:
    """Tests for refreshing claim availability at local midnight."""

    async def test_midnight_refreshes_claim_availability(
        self, hass: HomeAssistant, coordinator: HabitQuestDataCoordinator
    ) -> None:
        """Test can_claim turns true after midnight without any new event."""
        streak_id = get_entity_id(
            hass,
            "sensor",
            f"{coordinator.config_entry.entry_id}{const.SENSOR_UID_SUFFIX_LOGIN_STREAK}",
        )

        with freeze_time(LATE_EVENING, tz_offset=0) as frozen:
            await call(hass, const.SERVICE_CLAIM_DAILY_REWARD)
            state = hass.states.get(streak_id)
            assert state is not None
            assert state.attributes[const.ATTR_CAN_CLAIM] is False

            frozen.move_to(JUST_AFTER_MIDNIGHT)
            coordinator._async_day_changed(dt_util.now())
            await hass.async_block_till_done()

            state = hass.states.get(streak_id)
            assert state is not None
            assert state.attributes[const.ATTR_CAN_CLAIM] is True
            assert state.attributes[const.ATTR_NEXT_REWARD_XP] == 10

    async def test_midnight_listener_registered_and_released(
        self, hass: HomeAssistant, mock_config_entry: MockConfigEntry
    ) -> None:
        """Test setup tracks local midnight and unload cancels it."""
        mock_config_entry.add_to_hass(hass)

        with (
            patch("homeassistant.helpers.storage.Store.async_load", return_value=None),
            patch(
                "custom_components.habitquest.coordinator.async_track_time_change"
            ) as mock_track,
        ):
            assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
            await hass.async_block_till_done()

        mock_track.assert_called_once()
        assert mock_track.call_args.kwargs == const.DAY_ROLLOVER_TIME

        assert await hass.config_entries.async_unload(mock_config_entry.entry_id)
        await hass.async_block_till_done()

        mock_track.return_value.assert_called_once()


# =============================================================================
# Test: concurrent events
# =============================================================================


@freeze_time(AFTERNOON, tz_offset=0)
async def test_concurrent_completions_are_serialized(
    hass: HomeAssistant, coordinator: HabitQuestDataCoordinator
) -> None:
    """Test simultaneous completions all apply, matching a serial run."""
    manager = coordinator.progression_manager

    await asyncio.gather(
        *(manager.async_habit_completed(1, "x") for _ in range(10))
    )

    expected = ProgressionEngine.create_state(date(2026, 3, 10))
    for _ in range(10):
        expected = ProgressionEngine.habit_completed(
            expected, 1, "x", datetime(2026, 3, 10, 20, 0, tzinfo=UTC)
        )["state"]

    profile = manager.current_profile()
    assert profile["total_completions"] == 10
    assert profile["total_xp"] == expected["profile"]["total_xp"]
    assert profile["unlocked_achievement_ids"] == {
        "complete_1",
        "complete_10",
        "first_day",
    }
    assert len(manager.recent_xp_events()) == len(expected["xp_events"])


# =============================================================================
# Test: reset
# =============================================================================


class TestResetAllData:
    """Tests for the reset_all_data service."""

    @freeze_time(AFTERNOON, tz_offset=0)
    async def test_reset(
        self, hass: HomeAssistant, coordinator: HabitQuestDataCoordinator
    ) -> None:
        """Test a reset returns every field to its default."""
        events = async_capture_events(
            hass, f"{const.DOMAIN}_{const.SIGNAL_SUFFIX_PROGRESS_RESET}"
        )
        await call(
            hass,
            const.SERVICE_HABIT_COMPLETED,
            {const.FIELD_STREAK: 7, const.FIELD_CATEGORY: "fitness"},
        )
        await call(hass, const.SERVICE_CLAIM_DAILY_REWARD)

        await hass.services.async_call(
            const.DOMAIN, const.SERVICE_RESET_ALL_DATA, {}, blocking=True
        )
        await hass.async_block_till_done()

        manager = coordinator.progression_manager
        assert manager.state["profile"]["total_xp"] == 0
        assert manager.achievement_stats()["unlocked"] == 0
        assert manager.trophy_stats()["unlocked"] == 0
        assert manager.recent_xp_events() == []
        assert manager.recent_rewards() == []
        assert manager.can_claim_daily_reward() is True
        assert coordinator.store.data[const.DATA_META][
            const.DATA_META_LAST_RESET
        ] is not None
        assert len(events) == 1


# =============================================================================
# Test: not loaded
# =============================================================================


async def test_services_removed_on_unload(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test services are unregistered when the last entry unloads."""
    assert hass.services.has_service(const.DOMAIN, const.SERVICE_HABIT_COMPLETED)

    assert await hass.config_entries.async_unload(init_integration.entry_id)
    await hass.async_block_till_done()

    assert not hass.services.has_service(const.DOMAIN, const.SERVICE_HABIT_COMPLETED)
    assert not hass.services.has_service(const.DOMAIN, const.SERVICE_RESET_ALL_DATA)
