# File: helpers/device_helpers.py
"""Device registry helper functions for SalesQuest."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


def create_member_device_info(
    member_id: str,
    member_name: str,
    config_entry: ConfigEntry,
) -> DeviceInfo:
    """Create device info for a sales team member.

    Args:
        member_id: Internal ID of the member
        member_name: Display name of the member
        config_entry: Config entry for this integration instance
    """
    return DeviceInfo(
        identifiers={(const.DOMAIN, member_id)},
        name=f"{member_name} ({config_entry.title})",
        manufacturer=const.SALESQUEST_TITLE,
        model="Member Profile",
        entry_type=DeviceEntryType.SERVICE,
    )
