"""Service layer tests: schemas, caller resolution and authorization.

Service calls act for "today", so assertions avoid specific dates.
"""

# pylint: disable=redefined-outer-name

from typing import Any

import pytest
import voluptuous as vol
from homeassistant.core import Context, HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from custom_components.salesquest import const
from custom_components.salesquest.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from custom_components.salesquest.helpers.entity_helpers import member_goal_doc_id
from tests.helpers import SetupResult, member_doc, setup_from_yaml


@pytest.fixture
async def scenario(hass: HomeAssistant, mock_hass_users) -> SetupResult:
    """Load the sales team scenario."""
    return await setup_from_yaml(
        hass, mock_hass_users, "tests/scenarios/scenario_sales_team.yaml"
    )


async def _call(
    hass: HomeAssistant,
    service: str,
    data: dict[str, Any],
    user: Any = None,
    *,
    response: bool = False,
) -> Any:
    return await hass.services.async_call(
        const.DOMAIN,
        service,
        data,
        blocking=True,
        context=Context(user_id=user.id) if user else None,
        return_response=response,
    )


async def _create_goal(hass: HomeAssistant, scenario: SetupResult, users) -> str:
    response = await _call(
        hass,
        const.SERVICE_CREATE_TEAM_GOAL,
        {
            const.FIELD_TEAM_ID: scenario.team_ids["North Region"],
            const.FIELD_TITLE: "Quotes push",
            const.FIELD_GOAL_TYPE: const.GOAL_TYPE_QUOTES,
            const.FIELD_TARGET_VALUE: 40,
        },
        users["leader"],
        response=True,
    )
    return response["goal_id"]


# ============================================================================
# Check-ins
# ============================================================================


class TestCheckInServices:
    """Form services resolve the member from the calling user."""

    async def test_member_saves_own_forms(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Linked members need no member_id."""
        await _call(
            hass,
            const.SERVICE_SAVE_MORNING_INTENTIONS,
            {const.FIELD_VICTORY: "Book 3 demos"},
            mock_hass_users["member1"],
        )
        await _call(
            hass,
            const.SERVICE_SAVE_EVENING_WRAP,
            {const.FIELD_SALES: 2, const.FIELD_QUOTES: "4"},
            mock_hass_users["member1"],
        )

        member = member_doc(scenario.coordinator, scenario.member_ids["Marco"])
        assert member[const.DATA_MEMBER_TODAY_POINTS] == 20
        checkin = scenario.coordinator.checkin_manager.get_checkin(
            scenario.member_ids["Marco"]
        )
        assert checkin[const.DATA_CHECKIN_VICTORY] == "Book 3 demos"
        assert checkin[const.DATA_CHECKIN_QUOTES] == 4

    async def test_member_cannot_act_for_peer(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Non-admins are limited to their own member."""
        with pytest.raises(AuthorizationError):
            await _call(
                hass,
                const.SERVICE_SAVE_MORNING_INTENTIONS,
                {const.FIELD_MEMBER_ID: scenario.member_ids["Priya"]},
                mock_hass_users["member1"],
            )

    async def test_admin_acts_for_member(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Admins may name any member."""
        response = await _call(
            hass,
            const.SERVICE_AWARD_DAILY_ACTIVITY_POINTS,
            {
                const.FIELD_MEMBER_ID: scenario.member_ids["Priya"],
                const.FIELD_ACTIVITY: const.ACTIVITY_MORNING_INTENTIONS,
            },
            mock_hass_users["admin"],
            response=True,
        )
        assert response["awarded"] is True
        assert response["points_awarded"] == 5

    async def test_admin_without_member(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """An unlinked caller must name a member."""
        with pytest.raises(NotFoundError):
            await _call(
                hass,
                const.SERVICE_CALCULATE_STREAK,
                {},
                mock_hass_users["admin"],
                response=True,
            )

    async def test_invalid_activity(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Failed awards surface as errors."""
        with pytest.raises(HomeAssistantError):
            await _call(
                hass,
                const.SERVICE_AWARD_DAILY_ACTIVITY_POINTS,
                {const.FIELD_ACTIVITY: "lunch"},
                mock_hass_users["member2"],
                response=True,
            )

    async def test_calculate_streak_response(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """The streak service returns its result variant."""
        response = await _call(
            hass,
            const.SERVICE_CALCULATE_STREAK,
            {},
            mock_hass_users["member3"],
            response=True,
        )
        assert response["status"] == "ok"
        assert response["member_id"] == scenario.member_ids["Sam"]


# ============================================================================
# Roster and Seasons (admin only)
# ============================================================================


class TestAdminServices:
    """Roster and season administration."""

    async def test_register_member(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Admins register members onto a team."""
        team_id = scenario.team_ids["North Region"]
        response = await _call(
            hass,
            const.SERVICE_REGISTER_MEMBER,
            {const.FIELD_NAME: "Jonas", const.FIELD_TEAM_ID: team_id},
            mock_hass_users["admin"],
            response=True,
        )

        member_id = response["member_id"]
        assert member_doc(scenario.coordinator, member_id)[const.DATA_MEMBER_NAME] == (
            "Jonas"
        )
        team = scenario.coordinator.roster_manager.get_team(team_id)
        assert member_id in team[const.DATA_TEAM_MEMBERS]

    async def test_duplicate_member_id(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        """Registering an existing id is a validation error."""
        with pytest.raises(ValidationError):
            await _call(
                hass,
                const.SERVICE_REGISTER_MEMBER,
                {
                    const.FIELD_NAME: "Marco again",
                    const.FIELD_MEMBER_ID: scenario.member_ids["Marco"],
                },
            )

    @pytest.mark.parametrize(
        ("service", "data"),
        [
            (const.SERVICE_REGISTER_MEMBER, {const.FIELD_NAME: "Eve"}),
            (const.SERVICE_END_SEASON, {}),
        ],
    )
    async def test_non_admin_denied(
        self,
        hass: HomeAssistant,
        scenario: SetupResult,
        mock_hass_users,
        service: str,
        data: dict,
    ) -> None:
        """Roster and season administration need an admin."""
        with pytest.raises(AuthorizationError):
            await _call(hass, service, data, mock_hass_users["member1"])

    async def test_create_team(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Teams can be created from registered members."""
        ids = scenario.member_ids
        response = await _call(
            hass,
            const.SERVICE_CREATE_TEAM,
            {
                const.FIELD_NAME: "South Region",
                const.FIELD_LEADER_ID: ids["Priya"],
                const.FIELD_MEMBERS: [ids["Sam"]],
            },
            mock_hass_users["admin"],
            response=True,
        )

        team = scenario.coordinator.roster_manager.get_team(response["team_id"])
        assert team[const.DATA_TEAM_LEADER_ID] == ids["Priya"]
        assert team[const.DATA_TEAM_MEMBERS] == [ids["Priya"], ids["Sam"]]
        assert member_doc(scenario.coordinator, ids["Sam"])[
            const.DATA_MEMBER_TEAM_ID
        ] == response["team_id"]

    async def test_end_season_and_leaderboard(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Admins end the current season; the leaderboard reads it back."""
        await _call(
            hass,
            const.SERVICE_SAVE_MORNING_INTENTIONS,
            {},
            mock_hass_users["member2"],
        )
        await hass.async_block_till_done()

        response = await _call(
            hass,
            const.SERVICE_GET_SEASON_LEADERBOARD,
            {},
            mock_hass_users["member1"],
            response=True,
        )
        assert [entry["name"] for entry in response["leaderboard"]] == ["Priya"]

        await _call(hass, const.SERVICE_END_SEASON, {}, mock_hass_users["admin"])

        season = scenario.coordinator.season_manager.get_current_season()
        assert season[const.DATA_SEASON_STATUS] == const.SEASON_STATUS_ENDED
        assert member_doc(scenario.coordinator, scenario.member_ids["Priya"])[
            const.DATA_MEMBER_LAST_SEASON_POINTS
        ] == 5

    async def test_leaderboard_unknown_season(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        """Unknown explicit seasons are not found."""
        with pytest.raises(NotFoundError):
            await _call(
                hass,
                const.SERVICE_GET_SEASON_LEADERBOARD,
                {const.FIELD_SEASON_ID: "1999-01"},
                response=True,
            )


# ============================================================================
# Team Goals
# ============================================================================


class TestTeamGoalServices:
    """Goal services enforce roles through the resolved caller."""

    async def test_leader_creates_member_denied(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """The leader creates goals; members cannot."""
        goal_id = await _create_goal(hass, scenario, mock_hass_users)
        goal = scenario.coordinator.team_goal_manager.require_goal(goal_id)
        assert goal[const.DATA_GOAL_MINIMUM_PER_MEMBER] == 10
        assert goal[const.DATA_GOAL_TYPE] == const.GOAL_TYPE_QUOTES

        with pytest.raises(AuthorizationError):
            await _call(
                hass,
                const.SERVICE_CREATE_TEAM_GOAL,
                {
                    const.FIELD_TEAM_ID: scenario.team_ids["North Region"],
                    const.FIELD_TITLE: "Mine",
                    const.FIELD_TARGET_VALUE: 10,
                },
                mock_hass_users["member1"],
                response=True,
            )

    async def test_schema_rejects_unknown_goal_type(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Goal types are validated by the schema."""
        with pytest.raises((vol.Invalid, HomeAssistantError)):
            await _call(
                hass,
                const.SERVICE_CREATE_TEAM_GOAL,
                {
                    const.FIELD_TEAM_ID: scenario.team_ids["North Region"],
                    const.FIELD_TITLE: "Vibes",
                    const.FIELD_GOAL_TYPE: "vibes",
                    const.FIELD_TARGET_VALUE: 10,
                },
                mock_hass_users["leader"],
                response=True,
            )

    async def test_member_flow(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Members raise their target, record progress and read their goals."""
        goal_id = await _create_goal(hass, scenario, mock_hass_users)
        marco = scenario.member_ids["Marco"]

        await _call(
            hass,
            const.SERVICE_UPDATE_PERSONAL_TARGET,
            {
                const.FIELD_MEMBER_GOAL_ID: member_goal_doc_id(goal_id, marco),
                const.FIELD_PERSONAL_TARGET: 15,
            },
            mock_hass_users["member1"],
        )
        progress = await _call(
            hass,
            const.SERVICE_RECORD_PROGRESS,
            {const.FIELD_GOAL_ID: goal_id, const.FIELD_VALUE: 6, const.FIELD_DATE: "2025-10-20"},
            mock_hass_users["member1"],
            response=True,
        )
        assert progress["member_value"] == 6

        goals = await _call(
            hass,
            const.SERVICE_GET_MEMBER_GOALS,
            {},
            mock_hass_users["member1"],
            response=True,
        )
        member_goal = goals["goals"][0]["member_goal"]
        assert member_goal["personal_target"] == 15
        assert member_goal["current_value"] == 6
        assert member_goal["progress_percentage"] == 40

    async def test_peer_sees_summary(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Another member's progress is summarized."""
        goal_id = await _create_goal(hass, scenario, mock_hass_users)
        await _call(
            hass,
            const.SERVICE_RECORD_PROGRESS,
            {const.FIELD_GOAL_ID: goal_id, const.FIELD_VALUE: 5},
            mock_hass_users["member1"],
            response=True,
        )

        response = await _call(
            hass,
            const.SERVICE_GET_GOAL_PROGRESS,
            {const.FIELD_GOAL_ID: goal_id},
            mock_hass_users["member2"],
            response=True,
        )
        marco_entry = next(
            entry
            for entry in response["member_progress"]
            if entry["member_id"] == scenario.member_ids["Marco"]
        )
        assert marco_entry["view"] == const.VIEW_SUMMARY
        assert marco_entry["progress_percentage"] == 50
        assert response["team_goal"]["view"] == const.VIEW_SUMMARY

        listing = await _call(
            hass,
            const.SERVICE_GET_TEAM_GOALS,
            {const.FIELD_TEAM_ID: scenario.team_ids["North Region"]},
            mock_hass_users["leader"],
            response=True,
        )
        assert listing["goals"][0]["view"] == const.VIEW_FULL
        assert listing["goals"][0]["current_value"] == 5

    async def test_leader_updates_goal(
        self, hass: HomeAssistant, scenario: SetupResult, mock_hass_users
    ) -> None:
        """Inclusion and edits go through the leader."""
        goal_id = await _create_goal(hass, scenario, mock_hass_users)
        ids = scenario.member_ids

        await _call(
            hass,
            const.SERVICE_UPDATE_MEMBER_INCLUSION,
            {const.FIELD_GOAL_ID: goal_id, const.FIELD_INCLUDED_MEMBERS: [ids["Marco"], ids["Priya"]]},
            mock_hass_users["leader"],
        )
        await _call(
            hass,
            const.SERVICE_UPDATE_TEAM_GOAL,
            {const.FIELD_GOAL_ID: goal_id, const.FIELD_STATUS: const.GOAL_STATUS_PAUSED},
            mock_hass_users["leader"],
        )

        goal = scenario.coordinator.team_goal_manager.require_goal(goal_id)
        assert goal[const.DATA_GOAL_MINIMUM_PER_MEMBER] == 20
        assert goal[const.DATA_GOAL_STATUS] == const.GOAL_STATUS_PAUSED

        with pytest.raises(AuthorizationError):
            await _call(
                hass,
                const.SERVICE_UPDATE_TEAM_GOAL,
                {const.FIELD_GOAL_ID: goal_id, const.FIELD_TITLE: "Hijack"},
                mock_hass_users["member2"],
            )


async def test_services_removed_on_unload(
    hass: HomeAssistant, scenario: SetupResult
) -> None:
    """Unloading the entry removes every service."""
    assert hass.services.has_service(const.DOMAIN, const.SERVICE_RECORD_PROGRESS)

    assert await hass.config_entries.async_unload(scenario.config_entry.entry_id)
    await hass.async_block_till_done()

    assert not hass.services.has_service(const.DOMAIN, const.SERVICE_RECORD_PROGRESS)
