"""Diagnostics support for SalesQuest integration.

The config entry diagnostics return the raw document tree, identical to the
salesquest_data storage file. Device diagnostics give one member's slice.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceEntry

from . import const
from .coordinator import SalesQuestCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: SalesQuestCoordinator = entry.runtime_data
    return coordinator.store.data


async def async_get_device_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry, device: DeviceEntry
) -> dict[str, Any]:
    """Return the member, check-ins, goals and season standings behind a device."""
    coordinator: SalesQuestCoordinator = entry.runtime_data

    member_id = None
    for identifier in device.identifiers:
        if identifier[0] == const.DOMAIN:
            member_id = identifier[1]
            break

    if not member_id:
        return {"error": "Could not determine member_id from device identifiers"}

    member = coordinator.store.get(const.DATA_MEMBERS, member_id)
    if not member:
        return {"error": f"Member data not found for member_id: {member_id}"}

    by_member = [(const.DATA_MEMBER_ID, const.QUERY_OP_EQ, member_id)]
    return {
        "member_id": member_id,
        "member_data": member,
        "checkins": coordinator.store.query(
            const.DATA_CHECKINS,
            by_member,
            order_by=(const.DATA_CHECKIN_DATE, True),
            limit=30,
        ),
        "member_goals": coordinator.store.query(const.DATA_MEMBER_GOALS, by_member),
        "user_seasons": coordinator.store.query(const.DATA_USER_SEASONS, by_member),
    }
