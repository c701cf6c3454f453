# File: helpers/auth_helpers.py
"""Authorization helper functions for SalesQuest services.

Resolves which member a service call acts for and checks that the calling
Home Assistant user may act for that member.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const
from ..exceptions import AuthorizationError, NotFoundError

if TYPE_CHECKING:
    from homeassistant.auth.models import User
    from homeassistant.core import HomeAssistant

    from ..coordinator import SalesQuestCoordinator


# ==============================================================================
# Coordinator Access
# ==============================================================================


def get_salesquest_coordinator(hass: HomeAssistant) -> SalesQuestCoordinator | None:
    """Retrieve the SalesQuest coordinator from the loaded config entry.

    Returns:
        SalesQuestCoordinator if an entry is loaded, None otherwise
    """
    for entry in hass.config_entries.async_entries(const.DOMAIN):
        if entry.state.name == "LOADED":
            return entry.runtime_data
    return None


# ==============================================================================
# Authorization Checks
# ==============================================================================


async def async_is_admin(hass: HomeAssistant, user_id: str | None) -> bool:
    """Return True when the HA user is an administrator."""
    if not user_id:
        return False
    user: User | None = await hass.auth.async_get_user(user_id)
    return bool(user and user.is_admin)


async def async_resolve_actor(
    hass: HomeAssistant,
    coordinator: SalesQuestCoordinator,
    user_id: str | None,
    requested_member_id: str | None,
) -> str:
    """Return the member id a service call acts for.

    Rules:
      - No HA user on the call (automations, scripts) => requested member
      - Admin users => requested member, or their linked member
      - Other users => their linked member; requesting anyone else is denied

    Raises:
        AuthorizationError: Non-admin user asked to act for another member.
        NotFoundError: No member could be resolved.
    """
    linked_member_id = (
        coordinator.roster_manager.member_for_ha_user(user_id) if user_id else None
    )

    if not user_id or await async_is_admin(hass, user_id):
        member_id = requested_member_id or linked_member_id
    else:
        if requested_member_id and requested_member_id != linked_member_id:
            const.LOGGER.warning(
                "WARNING: Authorization: user '%s' attempted to act for member '%s'",
                user_id,
                requested_member_id,
            )
            raise AuthorizationError(
                const.ERROR_NOT_AUTHORIZED_FOR_MEMBER.format(requested_member_id)
            )
        member_id = linked_member_id

    if not member_id:
        raise NotFoundError(const.ERROR_NO_LINKED_MEMBER, const.DATA_MEMBERS)
    return member_id
