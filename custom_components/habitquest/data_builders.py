"""Progression state building and (de)serialization helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Profile field defaults when loading persisted data
- Conversion between the in-memory state and its JSON storage form
- Reconciling persisted unlock maps with the current catalog

## In-memory vs storage form

The engine works on native Python types: sets for id collections, `date`
for calendar fields. Home Assistant's Store serializes to JSON, so:
- set[str] → sorted list[str]
- date → ISO string "YYYY-MM-DD" (None stays None)
- counters → int >= 0

Loading is tolerant. Missing or corrupt fields fall back to defaults with a
debug log instead of failing setup.

Consumers:
- managers/progression_manager.py (load on setup, dump before persist)
- diagnostics.py (storage export)

See Also:
- type_defs.py: TypedDict definitions for type safety
- engines/progression_engine.py: create_state() for fresh defaults
"""

from __future__ import annotations

from datetime import date
from typing import Any

from . import const
from .catalog import ACHIEVEMENTS_BY_ID, TROPHIES_BY_ID
from .engines.progression_engine import ProgressionEngine
from .type_defs import (
    ClaimedRewardData,
    ProfileData,
    ProgressionResult,
    ProgressionState,
    UnlockState,
    XPEventData,
)
from .utils.dt_utils import dt_parse, dt_parse_date
from .utils.math_utils import non_negative_int

# ==============================================================================
# HELPER FUNCTIONS FOR FIELD NORMALIZATION
# ==============================================================================


def _normalize_id_set(value: Any) -> set[str]:
    """Normalize a field that should be a set of string ids.

    Handles cases where the value might be:
    - list/tuple/set → set of non-empty strings
    - None or anything else → empty set

    A bare string is treated as a single id, never iterated per character.
    """
    if value is None:
        return set()
    if isinstance(value, str):
        return {value} if value else set()
    if isinstance(value, (list, tuple, set)):
        return {str(item) for item in value if item not in (None, "")}
    return set()


def _normalize_dict_field(value: Any) -> dict[str, Any]:
    """Normalize a field that should be a dict."""
    if isinstance(value, dict):
        return dict(value)
    return {}


def _date_to_iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


# ==============================================================================
# PROFILE
# ==============================================================================


def build_profile(raw: Any, today: date) -> ProfileData:
    """Build an in-memory profile from its storage form.

    Args:
        raw: Stored profile dict (may be partial, empty or malformed)
        today: Join date used when none is stored

    Returns:
        Complete ProfileData with every field present
    """
    data = _normalize_dict_field(raw)
    profile = ProgressionEngine.create_profile(today)

    for field in const.PROFILE_COUNTER_FIELDS:
        profile[field] = non_negative_int(data.get(field))  # type: ignore[literal-required]

    profile["unlocked_achievement_ids"] = _normalize_id_set(
        data.get(const.DATA_PROFILE_UNLOCKED_ACHIEVEMENT_IDS)
    )
    profile["unlocked_trophy_ids"] = _normalize_id_set(
        data.get(const.DATA_PROFILE_UNLOCKED_TROPHY_IDS)
    )
    profile["categories_used"] = _normalize_id_set(
        data.get(const.DATA_PROFILE_CATEGORIES_USED)
    )
    profile["last_login_date"] = dt_parse_date(
        data.get(const.DATA_PROFILE_LAST_LOGIN_DATE)
    )
    profile["join_date"] = (
        dt_parse_date(data.get(const.DATA_PROFILE_JOIN_DATE)) or today
    )
    return profile


def dump_profile(profile: ProfileData) -> dict[str, Any]:
    """Convert an in-memory profile to its JSON-safe storage form."""
    stored: dict[str, Any] = {
        field: profile[field]  # type: ignore[literal-required]
        for field in const.PROFILE_COUNTER_FIELDS
    }
    stored[const.DATA_PROFILE_UNLOCKED_ACHIEVEMENT_IDS] = sorted(
        profile["unlocked_achievement_ids"]
    )
    stored[const.DATA_PROFILE_UNLOCKED_TROPHY_IDS] = sorted(
        profile["unlocked_trophy_ids"]
    )
    stored[const.DATA_PROFILE_CATEGORIES_USED] = sorted(profile["categories_used"])
    stored[const.DATA_PROFILE_LAST_LOGIN_DATE] = _date_to_iso(
        profile["last_login_date"]
    )
    stored[const.DATA_PROFILE_JOIN_DATE] = _date_to_iso(profile["join_date"])
    return stored


# ==============================================================================
# UNLOCK STATE
# ==============================================================================


def _build_unlock_map(
    raw: Any, catalog_ids: list[str], unlocked_ids: set[str]
) -> dict[str, UnlockState]:
    """Build a per-item unlock map covering exactly the catalog ids.

    Ids no longer in the catalog are dropped. An id present in the profile's
    unlocked set is treated as unlocked even if its map entry is missing,
    keeping unlocks one-way across partial data.
    """
    stored = _normalize_dict_field(raw)
    result: dict[str, UnlockState] = {}
    for item_id in catalog_ids:
        entry = _normalize_dict_field(stored.get(item_id))
        unlocked = bool(entry.get(const.DATA_UNLOCK_UNLOCKED)) or item_id in unlocked_ids
        unlocked_at = entry.get(const.DATA_UNLOCK_UNLOCKED_AT)
        if not isinstance(unlocked_at, str) or dt_parse(unlocked_at) is None:
            unlocked_at = None
        result[item_id] = {
            "unlocked": unlocked,
            "unlocked_at": unlocked_at if unlocked else None,
        }
    return result


# ==============================================================================
# HISTORY
# ==============================================================================


def _build_xp_events(raw: Any) -> list[XPEventData]:
    events: list[XPEventData] = []
    if not isinstance(raw, list):
        return events
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        timestamp = entry.get(const.DATA_XP_EVENT_TIMESTAMP)
        reason = entry.get(const.DATA_XP_EVENT_REASON)
        if not isinstance(timestamp, str) or not isinstance(reason, str):
            const.LOGGER.debug("DEBUG: Skipping malformed XP event: %s", entry)
            continue
        reference = entry.get(const.DATA_XP_EVENT_REFERENCE)
        events.append(
            {
                "amount": non_negative_int(entry.get(const.DATA_XP_EVENT_AMOUNT)),
                "reason": reason,
                "reference": str(reference) if reference is not None else None,
                "timestamp": timestamp,
                "is_bonus": bool(entry.get(const.DATA_XP_EVENT_IS_BONUS, False)),
            }
        )
    return events


def _build_claimed_rewards(raw: Any) -> list[ClaimedRewardData]:
    rewards: list[ClaimedRewardData] = []
    if not isinstance(raw, list):
        return rewards
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        claimed_on = dt_parse_date(entry.get(const.DATA_CLAIM_DATE))
        if claimed_on is None:
            const.LOGGER.debug("DEBUG: Skipping malformed reward claim: %s", entry)
            continue
        rewards.append(
            {
                "date": claimed_on.isoformat(),
                "day": non_negative_int(entry.get(const.DATA_CLAIM_DAY), 1),
                "xp_earned": non_negative_int(entry.get(const.DATA_CLAIM_XP_EARNED)),
                "multiplier": max(
                    1, non_negative_int(entry.get(const.DATA_CLAIM_MULTIPLIER), 1)
                ),
                "bonus_type": entry.get(const.DATA_CLAIM_BONUS_TYPE),
            }
        )
    return rewards


# ==============================================================================
# FULL STATE
# ==============================================================================


def build_state(raw: Any, today: date) -> ProgressionState:
    """Build the complete in-memory state from stored data.

    Args:
        raw: Stored data dict (the Store payload), possibly empty
        today: Local date, used as join date for a fresh profile

    Returns:
        ProgressionState covering the current catalog
    """
    data = _normalize_dict_field(raw)
    profile = build_profile(data.get(const.DATA_PROFILE), today)

    achievements = _build_unlock_map(
        data.get(const.DATA_ACHIEVEMENTS),
        list(ACHIEVEMENTS_BY_ID),
        profile["unlocked_achievement_ids"],
    )
    trophies = _build_unlock_map(
        data.get(const.DATA_TROPHIES),
        list(TROPHIES_BY_ID),
        profile["unlocked_trophy_ids"],
    )

    # Profile id sets mirror the unlock maps exactly
    profile["unlocked_achievement_ids"] = {
        item_id for item_id, item in achievements.items() if item["unlocked"]
    }
    profile["unlocked_trophy_ids"] = {
        item_id for item_id, item in trophies.items() if item["unlocked"]
    }

    return {
        "profile": profile,
        "achievements": achievements,
        "trophies": trophies,
        "xp_events": _build_xp_events(data.get(const.DATA_XP_EVENTS)),
        "claimed_rewards": _build_claimed_rewards(
            data.get(const.DATA_CLAIMED_REWARDS)
        ),
    }


def dump_state(state: ProgressionState) -> dict[str, Any]:
    """Convert the in-memory state to its JSON-safe storage form.

    The returned dict shares no mutable containers with `state`.
    """
    return {
        const.DATA_PROFILE: dump_profile(state["profile"]),
        const.DATA_ACHIEVEMENTS: {
            item_id: dict(item) for item_id, item in state["achievements"].items()
        },
        const.DATA_TROPHIES: {
            item_id: dict(item) for item_id, item in state["trophies"].items()
        },
        const.DATA_XP_EVENTS: [dict(event) for event in state["xp_events"]],
        const.DATA_CLAIMED_REWARDS: [
            dict(reward) for reward in state["claimed_rewards"]
        ],
    }


# ==============================================================================
# SERVICE RESPONSES
# ==============================================================================


def build_result_response(result: ProgressionResult) -> dict[str, Any]:
    """Build the JSON-safe service response for an engine result.

    The full state is not included; only what the event changed plus the
    resulting headline numbers.
    """
    profile = result["profile"]
    new_level = result["new_level"]
    level = ProgressionEngine.level_for(profile["total_xp"])
    return {
        "outcome": result["outcome"],
        "xp_gained": result["xp_gained"],
        "total_xp": profile["total_xp"],
        "level": level["id"],
        "level_key": level["key"],
        "leveled_up": result["leveled_up"],
        "previous_level": result["previous_level"]["id"],
        "new_level": new_level["id"] if new_level else None,
        "new_achievements": [item["id"] for item in result["new_achievements"]],
        "new_trophies": [item["id"] for item in result["new_trophies"]],
        "xp_events": [dict(event) for event in result["xp_events"]],
        "daily_reward": (
            dict(result["daily_reward"]) if result.get("daily_reward") else None
        ),
    }
