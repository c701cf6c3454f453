# File: services.py
"""Defines custom services for the SalesQuest integration.

These services allow direct actions through scripts, automations and the
companion dashboards. Every call resolves the member it acts for: an explicit
member/user field, else the member linked to the calling Home Assistant user.
Non-admin callers may only act as their linked member.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import SalesQuestCoordinator
from .exceptions import AuthorizationError
from .helpers.auth_helpers import (
    async_is_admin,
    async_resolve_actor,
    get_salesquest_coordinator,
)

# --- Service Schemas ---
REGISTER_MEMBER_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_NAME): cv.string,
        vol.Optional(const.FIELD_MEMBER_ID): cv.string,
        vol.Optional(const.FIELD_TEAM_ID): cv.string,
        vol.Optional(const.FIELD_HA_USER_ID): cv.string,
    }
)

CREATE_TEAM_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_NAME): cv.string,
        vol.Required(const.FIELD_LEADER_ID): cv.string,
        vol.Optional(const.FIELD_CO_LEADERS, default=[]): vol.All(
            cv.ensure_list, [cv.string]
        ),
        vol.Optional(const.FIELD_MEMBERS, default=[]): vol.All(
            cv.ensure_list, [cv.string]
        ),
        vol.Optional(const.FIELD_TEAM_ID): cv.string,
    }
)

SAVE_MORNING_INTENTIONS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_MEMBER_ID): cv.string,
        vol.Optional(const.FIELD_VICTORY, default=""): cv.string,
        vol.Optional(const.FIELD_FOCUS, default=""): cv.string,
        vol.Optional(const.FIELD_STUCK, default=""): cv.string,
    }
)

SAVE_EVENING_WRAP_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_MEMBER_ID): cv.string,
        vol.Optional(const.FIELD_ACCOMPLISHED, default=""): cv.string,
        vol.Optional(const.FIELD_TOMORROW, default=""): cv.string,
        vol.Optional(const.FIELD_SALES, default=0): vol.Coerce(int),
        vol.Optional(const.FIELD_QUOTES, default=0): vol.Coerce(int),
    }
)

AWARD_DAILY_ACTIVITY_POINTS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_MEMBER_ID): cv.string,
        vol.Required(const.FIELD_ACTIVITY): cv.string,
    }
)

CALCULATE_STREAK_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_MEMBER_ID): cv.string,
    }
)

CREATE_TEAM_GOAL_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_USER_ID): cv.string,
        vol.Required(const.FIELD_TEAM_ID): cv.string,
        vol.Required(const.FIELD_TITLE): cv.string,
        vol.Optional(const.FIELD_DESCRIPTION, default=""): cv.string,
        vol.Optional(const.FIELD_GOAL_TYPE, default=const.GOAL_TYPE_SALES): vol.In(
            const.GOAL_TYPES
        ),
        vol.Required(const.FIELD_TARGET_VALUE): vol.Coerce(float),
        vol.Optional(const.FIELD_START_DATE): cv.date,
        vol.Optional(const.FIELD_END_DATE): cv.date,
        vol.Optional(
            const.FIELD_DISTRIBUTION_TYPE, default=const.DISTRIBUTION_EQUAL
        ): vol.In(const.DISTRIBUTION_TYPES),
        vol.Optional(const.FIELD_CUSTOM_DISTRIBUTION): {
            cv.string: vol.Coerce(float)
        },
        vol.Optional(const.FIELD_INCLUDED_MEMBERS): vol.All(
            cv.ensure_list, [cv.string]
        ),
        vol.Optional(const.FIELD_LEADER_PARTICIPATES, default=False): cv.boolean,
    }
)

UPDATE_MEMBER_INCLUSION_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_USER_ID): cv.string,
        vol.Required(const.FIELD_GOAL_ID): cv.string,
        vol.Required(const.FIELD_INCLUDED_MEMBERS): vol.All(
            cv.ensure_list, [cv.string]
        ),
        vol.Optional(const.FIELD_LEADER_PARTICIPATES): cv.boolean,
    }
)

UPDATE_PERSONAL_TARGET_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_MEMBER_ID): cv.string,
        vol.Required(const.FIELD_MEMBER_GOAL_ID): cv.string,
        vol.Required(const.FIELD_PERSONAL_TARGET): vol.Coerce(float),
    }
)

RECORD_PROGRESS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_MEMBER_ID): cv.string,
        vol.Required(const.FIELD_GOAL_ID): cv.string,
        vol.Required(const.FIELD_VALUE): vol.Coerce(float),
        vol.Optional(const.FIELD_DATE): cv.date,
    }
)

UPDATE_TEAM_GOAL_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_USER_ID): cv.string,
        vol.Required(const.FIELD_GOAL_ID): cv.string,
        vol.Optional(const.FIELD_TITLE): cv.string,
        vol.Optional(const.FIELD_DESCRIPTION): cv.string,
        vol.Optional(const.FIELD_END_DATE): cv.date,
        vol.Optional(const.FIELD_TARGET_VALUE): vol.Coerce(float),
        vol.Optional(const.FIELD_STATUS): vol.In(const.GOAL_STATUSES),
    }
)

GET_TEAM_GOALS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_USER_ID): cv.string,
        vol.Required(const.FIELD_TEAM_ID): cv.string,
    }
)

GET_GOAL_PROGRESS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_USER_ID): cv.string,
        vol.Required(const.FIELD_GOAL_ID): cv.string,
    }
)

GET_MEMBER_GOALS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_MEMBER_ID): cv.string,
    }
)

GET_SEASON_LEADERBOARD_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_SEASON_ID): cv.string,
        vol.Optional(const.FIELD_LIMIT, default=const.DEFAULT_LEADERBOARD_LIMIT): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
    }
)

END_SEASON_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_SEASON_ID): cv.string,
    }
)

# Services that only produce a response
_RESPONSE_ONLY_SERVICES = (
    const.SERVICE_GET_TEAM_GOALS,
    const.SERVICE_GET_GOAL_PROGRESS,
    const.SERVICE_GET_MEMBER_GOALS,
    const.SERVICE_GET_SEASON_LEADERBOARD,
)


def _get_coordinator(hass: HomeAssistant, service: str) -> SalesQuestCoordinator:
    coordinator = get_salesquest_coordinator(hass)
    if coordinator is None:
        const.LOGGER.warning("WARNING: %s: %s", service, const.MSG_NO_ENTRY_FOUND)
        raise HomeAssistantError(const.MSG_NO_ENTRY_FOUND)
    return coordinator


async def _async_require_admin(hass: HomeAssistant, call: ServiceCall) -> None:
    user_id = call.context.user_id
    if user_id and not await async_is_admin(hass, user_id):
        const.LOGGER.warning(
            "WARNING: %s: user '%s' is not an administrator", call.service, user_id
        )
        raise AuthorizationError(f"Only administrators can call {call.service}")


def async_setup_services(hass: HomeAssistant) -> None:
    """Register SalesQuest services."""

    async def _actor(
        call: ServiceCall, coordinator: SalesQuestCoordinator, field: str
    ) -> str:
        return await async_resolve_actor(
            hass, coordinator, call.context.user_id, call.data.get(field)
        )

    # --- Roster ---

    async def handle_register_member(call: ServiceCall) -> ServiceResponse:
        """Handle registering a member."""
        coordinator = _get_coordinator(hass, call.service)
        await _async_require_admin(hass, call)
        member_id = await coordinator.roster_manager.async_register_member(
            call.data[const.FIELD_NAME],
            member_id=call.data.get(const.FIELD_MEMBER_ID),
            team_id=call.data.get(const.FIELD_TEAM_ID),
            ha_user_id=call.data.get(const.FIELD_HA_USER_ID),
        )
        return {"member_id": member_id}

    async def handle_create_team(call: ServiceCall) -> ServiceResponse:
        """Handle creating a team."""
        coordinator = _get_coordinator(hass, call.service)
        await _async_require_admin(hass, call)
        team_id = await coordinator.roster_manager.async_create_team(
            call.data[const.FIELD_NAME],
            call.data[const.FIELD_LEADER_ID],
            co_leaders=call.data[const.FIELD_CO_LEADERS],
            members=call.data[const.FIELD_MEMBERS],
            team_id=call.data.get(const.FIELD_TEAM_ID),
        )
        return {"team_id": team_id}

    # --- Check-ins, Points and Streaks ---

    async def handle_save_morning_intentions(call: ServiceCall) -> None:
        """Handle saving the morning intentions form."""
        coordinator = _get_coordinator(hass, call.service)
        member_id = await _actor(call, coordinator, const.FIELD_MEMBER_ID)
        result, streak = await coordinator.checkin_manager.async_save_morning_intentions(
            member_id,
            call.data[const.FIELD_VICTORY],
            call.data[const.FIELD_FOCUS],
            call.data[const.FIELD_STUCK],
        )
        if not result["success"]:
            raise HomeAssistantError(result.get("error", const.ERROR_STORE_WRITE_FAILED))
        if streak["status"] != "ok":
            const.LOGGER.warning(
                "WARNING: Morning intentions saved but streak update returned %s for member=%s",
                streak["status"],
                member_id,
            )
        const.LOGGER.info(
            "INFO: Morning intentions saved for member=%s (points=%s)",
            member_id,
            result["points_awarded"],
        )

    async def handle_save_evening_wrap(call: ServiceCall) -> None:
        """Handle saving the evening wrap form."""
        coordinator = _get_coordinator(hass, call.service)
        member_id = await _actor(call, coordinator, const.FIELD_MEMBER_ID)
        award, streak = await coordinator.checkin_manager.async_save_evening_wrap(
            member_id,
            call.data[const.FIELD_ACCOMPLISHED],
            call.data[const.FIELD_TOMORROW],
            call.data[const.FIELD_SALES],
            call.data[const.FIELD_QUOTES],
        )
        if not award["success"]:
            raise HomeAssistantError(award.get("error", const.ERROR_STORE_WRITE_FAILED))
        if streak["status"] != "ok":
            const.LOGGER.warning(
                "WARNING: Evening wrap saved but streak update returned %s for member=%s",
                streak["status"],
                member_id,
            )
        const.LOGGER.info(
            "INFO: Evening wrap saved for member=%s (points=%s)",
            member_id,
            award["points_awarded"],
        )

    async def handle_award_daily_activity_points(call: ServiceCall) -> ServiceResponse:
        """Handle a direct daily activity award."""
        coordinator = _get_coordinator(hass, call.service)
        member_id = await _actor(call, coordinator, const.FIELD_MEMBER_ID)
        result = await coordinator.points_manager.async_award_daily_activity_points(
            member_id, call.data[const.FIELD_ACTIVITY]
        )
        if not result["success"]:
            raise HomeAssistantError(result.get("error", const.ERROR_STORE_WRITE_FAILED))
        return dict(result)

    async def handle_calculate_streak(call: ServiceCall) -> ServiceResponse:
        """Handle recalculating a member's streak."""
        coordinator = _get_coordinator(hass, call.service)
        member_id = await _actor(call, coordinator, const.FIELD_MEMBER_ID)
        result = await coordinator.streak_manager.async_calculate_streak_for_today(
            member_id
        )
        return dict(result)

    # --- Team Goals ---

    async def handle_create_team_goal(call: ServiceCall) -> ServiceResponse:
        """Handle creating a team goal."""
        coordinator = _get_coordinator(hass, call.service)
        user_id = await _actor(call, coordinator, const.FIELD_USER_ID)
        goal_data: dict[str, Any] = {
            key: value
            for key, value in call.data.items()
            if key not in (const.FIELD_USER_ID, const.FIELD_TEAM_ID)
        }
        goal_id = await coordinator.team_goal_manager.async_create_team_goal(
            goal_data, user_id, call.data[const.FIELD_TEAM_ID]
        )
        const.LOGGER.info(
            "INFO: Team goal '%s' created (goal_id=%s)",
            call.data[const.FIELD_TITLE],
            goal_id,
        )
        return {"goal_id": goal_id}

    async def handle_update_member_inclusion(call: ServiceCall) -> None:
        """Handle changing a goal's participants."""
        coordinator = _get_coordinator(hass, call.service)
        user_id = await _actor(call, coordinator, const.FIELD_USER_ID)
        await coordinator.team_goal_manager.async_update_member_inclusion(
            call.data[const.FIELD_GOAL_ID],
            user_id,
            call.data[const.FIELD_INCLUDED_MEMBERS],
            call.data.get(const.FIELD_LEADER_PARTICIPATES),
        )

    async def handle_update_personal_target(call: ServiceCall) -> None:
        """Handle a member changing their personal target."""
        coordinator = _get_coordinator(hass, call.service)
        member_id = await _actor(call, coordinator, const.FIELD_MEMBER_ID)
        await coordinator.team_goal_manager.async_update_personal_target(
            call.data[const.FIELD_MEMBER_GOAL_ID],
            call.data[const.FIELD_PERSONAL_TARGET],
            member_id,
        )

    async def handle_record_progress(call: ServiceCall) -> ServiceResponse:
        """Handle recording goal progress."""
        coordinator = _get_coordinator(hass, call.service)
        member_id = await _actor(call, coordinator, const.FIELD_MEMBER_ID)
        return await coordinator.team_goal_manager.async_record_progress(
            member_id,
            call.data[const.FIELD_GOAL_ID],
            call.data[const.FIELD_VALUE],
            call.data.get(const.FIELD_DATE),
        )

    async def handle_update_team_goal(call: ServiceCall) -> None:
        """Handle editing a team goal."""
        coordinator = _get_coordinator(hass, call.service)
        user_id = await _actor(call, coordinator, const.FIELD_USER_ID)
        updates = {
            key: value
            for key, value in call.data.items()
            if key not in (const.FIELD_USER_ID, const.FIELD_GOAL_ID)
        }
        await coordinator.team_goal_manager.async_update_team_goal(
            call.data[const.FIELD_GOAL_ID], user_id, updates
        )

    async def handle_get_team_goals(call: ServiceCall) -> ServiceResponse:
        """Return a team's visible goals projected for the caller."""
        coordinator = _get_coordinator(hass, call.service)
        viewer_id = await _actor(call, coordinator, const.FIELD_USER_ID)
        goals = coordinator.team_goal_manager.get_team_goals(
            call.data[const.FIELD_TEAM_ID], viewer_id
        )
        return {"goals": [dict(goal) for goal in goals]}

    async def handle_get_goal_progress(call: ServiceCall) -> ServiceResponse:
        """Return a goal's progress projected for the caller."""
        coordinator = _get_coordinator(hass, call.service)
        viewer_id = await _actor(call, coordinator, const.FIELD_USER_ID)
        return dict(
            coordinator.team_goal_manager.get_goal_progress(
                call.data[const.FIELD_GOAL_ID], viewer_id
            )
        )

    async def handle_get_member_goals(call: ServiceCall) -> ServiceResponse:
        """Return the caller's own goals."""
        coordinator = _get_coordinator(hass, call.service)
        member_id = await _actor(call, coordinator, const.FIELD_MEMBER_ID)
        return {"goals": coordinator.team_goal_manager.get_member_goals(member_id)}

    # --- Seasons ---

    async def handle_get_season_leaderboard(call: ServiceCall) -> ServiceResponse:
        """Return the season leaderboard."""
        coordinator = _get_coordinator(hass, call.service)
        season_id = call.data.get(const.FIELD_SEASON_ID)
        leaderboard = coordinator.season_manager.get_season_leaderboard(
            season_id, call.data[const.FIELD_LIMIT]
        )
        return {"season_id": season_id, "leaderboard": leaderboard}

    async def handle_end_season(call: ServiceCall) -> None:
        """Handle ending a season (default: the current one)."""
        coordinator = _get_coordinator(hass, call.service)
        await _async_require_admin(hass, call)
        season_id = call.data.get(const.FIELD_SEASON_ID)
        if season_id is None:
            season = coordinator.season_manager.get_current_season()
            if season is None:
                raise HomeAssistantError(
                    const.ERROR_SEASON_NOT_FOUND_FMT.format("current")
                )
            season_id = season[const.DATA_SEASON_ID]
        count = await coordinator.season_manager.async_end_season(season_id)
        const.LOGGER.info("INFO: Season %s ended for %s member(s)", season_id, count)
        coordinator.async_set_updated_data(coordinator.store.data)

    # --- Register Services ---
    services: list[tuple[str, Any, vol.Schema, SupportsResponse]] = [
        (
            const.SERVICE_REGISTER_MEMBER,
            handle_register_member,
            REGISTER_MEMBER_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_CREATE_TEAM,
            handle_create_team,
            CREATE_TEAM_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_SAVE_MORNING_INTENTIONS,
            handle_save_morning_intentions,
            SAVE_MORNING_INTENTIONS_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_SAVE_EVENING_WRAP,
            handle_save_evening_wrap,
            SAVE_EVENING_WRAP_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_AWARD_DAILY_ACTIVITY_POINTS,
            handle_award_daily_activity_points,
            AWARD_DAILY_ACTIVITY_POINTS_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_CALCULATE_STREAK,
            handle_calculate_streak,
            CALCULATE_STREAK_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_CREATE_TEAM_GOAL,
            handle_create_team_goal,
            CREATE_TEAM_GOAL_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_UPDATE_MEMBER_INCLUSION,
            handle_update_member_inclusion,
            UPDATE_MEMBER_INCLUSION_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_UPDATE_PERSONAL_TARGET,
            handle_update_personal_target,
            UPDATE_PERSONAL_TARGET_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_RECORD_PROGRESS,
            handle_record_progress,
            RECORD_PROGRESS_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_UPDATE_TEAM_GOAL,
            handle_update_team_goal,
            UPDATE_TEAM_GOAL_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_GET_TEAM_GOALS,
            handle_get_team_goals,
            GET_TEAM_GOALS_SCHEMA,
            SupportsResponse.ONLY,
        ),
        (
            const.SERVICE_GET_GOAL_PROGRESS,
            handle_get_goal_progress,
            GET_GOAL_PROGRESS_SCHEMA,
            SupportsResponse.ONLY,
        ),
        (
            const.SERVICE_GET_MEMBER_GOALS,
            handle_get_member_goals,
            GET_MEMBER_GOALS_SCHEMA,
            SupportsResponse.ONLY,
        ),
        (
            const.SERVICE_GET_SEASON_LEADERBOARD,
            handle_get_season_leaderboard,
            GET_SEASON_LEADERBOARD_SCHEMA,
            SupportsResponse.ONLY,
        ),
        (
            const.SERVICE_END_SEASON,
            handle_end_season,
            END_SEASON_SCHEMA,
            SupportsResponse.NONE,
        ),
    ]
    for service, handler, schema, supports_response in services:
        hass.services.async_register(
            const.DOMAIN,
            service,
            handler,
            schema=schema,
            supports_response=supports_response,
        )

    const.LOGGER.info("INFO: SalesQuest services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister SalesQuest services when unloading the integration."""
    services = [
        const.SERVICE_REGISTER_MEMBER,
        const.SERVICE_CREATE_TEAM,
        const.SERVICE_SAVE_MORNING_INTENTIONS,
        const.SERVICE_SAVE_EVENING_WRAP,
        const.SERVICE_AWARD_DAILY_ACTIVITY_POINTS,
        const.SERVICE_CALCULATE_STREAK,
        const.SERVICE_CREATE_TEAM_GOAL,
        const.SERVICE_UPDATE_MEMBER_INCLUSION,
        const.SERVICE_UPDATE_PERSONAL_TARGET,
        const.SERVICE_RECORD_PROGRESS,
        const.SERVICE_UPDATE_TEAM_GOAL,
        *_RESPONSE_ONLY_SERVICES,
        const.SERVICE_END_SEASON,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: SalesQuest services have been unregistered")
