"""Team Goal Engine - Pure logic for shared targets and their member split.

This engine provides stateless functions for:
- Participant sets and the equal per-member minimum (ceil(T / N))
- Custom per-member minimums
- Personal target adjustment on membership changes (never lowered)
- Progress, contribution, expected progress and performance rating
- Goal achievability projection
- Role resolution and the privacy projection (FullView | SummaryView)

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Persistence and authorization errors belong in TeamGoalManager.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils import dt_utils, math_utils

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..type_defs import (
        MemberGoalData,
        MemberGoalView,
        TeamData,
        TeamGoalData,
        TeamGoalView,
    )

# Allowed team goal status changes (same-status updates are no-ops)
_STATUS_TRANSITIONS: dict[str, set[str]] = {
    const.GOAL_STATUS_ACTIVE: {const.GOAL_STATUS_PAUSED, const.GOAL_STATUS_COMPLETED},
    const.GOAL_STATUS_PAUSED: {const.GOAL_STATUS_ACTIVE, const.GOAL_STATUS_COMPLETED},
    const.GOAL_STATUS_COMPLETED: set(),
}


class TeamGoalEngine:
    """Pure logic engine for team goal math and views.

    All methods are static - no instance state.
    """

    # ==========================================================================
    # Distribution
    # ==========================================================================

    @staticmethod
    def participants(
        included_members: Iterable[str], leader_id: str, leader_participates: bool
    ) -> list[str]:
        """Return the ordered, de-duplicated participant list.

        The leader is appended when participating and not already included.
        """
        result: list[str] = []
        for member_id in included_members:
            if member_id not in result:
                result.append(member_id)
        if leader_participates and leader_id not in result:
            result.append(leader_id)
        return result

    @staticmethod
    def minimum_per_member(target_value: float, participant_count: int) -> int:
        """Return ceil(target / participants), 0 for an empty team.

        Examples:
            minimum_per_member(100, 4) → 25
            minimum_per_member(100, 3) → 34
        """
        return math_utils.ceil_div(target_value, participant_count)

    @staticmethod
    def member_minimum(
        distribution_type: str,
        minimum_per_member: int,
        custom_distribution: dict[str, float] | None,
        member_id: str,
    ) -> float:
        """Return one member's minimum target.

        Equal distribution uses the shared minimum; custom distribution uses
        the member's configured share, falling back to the shared minimum.
        """
        if distribution_type == const.DISTRIBUTION_CUSTOM and custom_distribution:
            return custom_distribution.get(member_id, minimum_per_member)
        return minimum_per_member

    @staticmethod
    def adjusted_personal_target(personal_target: float, new_minimum: float) -> float:
        """Raise a personal target to the new minimum; never lower it."""
        return max(personal_target, new_minimum)

    # ==========================================================================
    # Progress Analytics
    # ==========================================================================

    @staticmethod
    def progress_percentage(current_value: float, target_value: float) -> int:
        """Return min(100, round(current / target * 100)), 0 for non-positive targets."""
        return math_utils.calculate_percentage(current_value, target_value)

    @staticmethod
    def contribution_percentage(member_value: float, team_value: float) -> int:
        """Return the member's share of the team total as a percentage."""
        return math_utils.calculate_percentage(member_value, team_value)

    @staticmethod
    def expected_progress(
        start_date: date | None, end_date: date | None, today: date
    ) -> float | None:
        """Return the share of the goal window elapsed by today, in percent.

        Returns None when the goal has no usable date window.
        """
        if start_date is None or end_date is None or end_date < start_date:
            return None
        total_days = (end_date - start_date).days + 1
        elapsed = min(max((today - start_date).days + 1, 0), total_days)
        return elapsed / total_days * 100

    @staticmethod
    def performance_rating(progress: float, expected: float | None) -> str:
        """Rate progress against time-elapsed expectation.

        difference = progress - expected:
            >= 10  exceeding
            >= -5  on_track
            >= -15 behind
            else   at_risk
        Without a date window the rating is on_track.
        """
        if expected is None:
            return const.RATING_ON_TRACK
        difference = progress - expected
        if difference >= const.RATING_THRESHOLD_EXCEEDING:
            return const.RATING_EXCEEDING
        if difference >= const.RATING_THRESHOLD_ON_TRACK:
            return const.RATING_ON_TRACK
        if difference >= const.RATING_THRESHOLD_BEHIND:
            return const.RATING_BEHIND
        return const.RATING_AT_RISK

    @staticmethod
    def is_achievable(
        current_value: float,
        target_value: float,
        start_date: date | None,
        end_date: date | None,
        today: date,
    ) -> bool:
        """Return True when the current pace projects to at least 90% of target."""
        if target_value <= 0 or current_value >= target_value:
            return True
        if start_date is None or end_date is None or end_date < start_date:
            return True
        total_days = (end_date - start_date).days + 1
        elapsed = min(max((today - start_date).days + 1, 1), total_days)
        projected = current_value / elapsed * total_days
        return projected >= target_value * const.GOAL_ACHIEVABLE_RATIO

    @staticmethod
    def goal_window(goal: TeamGoalData) -> tuple[date | None, date | None]:
        """Return the parsed (start_date, end_date) of a goal."""
        return (
            dt_utils.dt_parse_date(goal.get(const.DATA_GOAL_START_DATE)),
            dt_utils.dt_parse_date(goal.get(const.DATA_GOAL_END_DATE)),
        )

    # ==========================================================================
    # Status
    # ==========================================================================

    @staticmethod
    def can_transition(current: str, new: str) -> bool:
        """Return True when a team goal may move from `current` to `new`."""
        if current == new:
            return True
        return new in _STATUS_TRANSITIONS.get(current, set())

    # ==========================================================================
    # Roles and Privacy
    # ==========================================================================

    @staticmethod
    def viewer_role(team: TeamData | None, viewer_id: str | None) -> str:
        """Return the viewer's role on a team."""
        if not team or not viewer_id:
            return const.ROLE_NONE
        if team.get(const.DATA_TEAM_LEADER_ID) == viewer_id:
            return const.ROLE_LEADER
        if viewer_id in team.get(const.DATA_TEAM_CO_LEADERS, []):
            return const.ROLE_CO_LEADER
        if viewer_id in team.get(const.DATA_TEAM_MEMBERS, []):
            return const.ROLE_MEMBER
        return const.ROLE_NONE

    @staticmethod
    def is_manager_role(role: str) -> bool:
        """Return True for leader and co-leader."""
        return role in (const.ROLE_LEADER, const.ROLE_CO_LEADER)

    @staticmethod
    def can_view_full(role: str, viewer_id: str | None, owner_id: str | None) -> bool:
        """Return True when the viewer may see raw numbers of a record.

        Leaders, co-leaders and the record's owner see everything.
        """
        if TeamGoalEngine.is_manager_role(role):
            return True
        return viewer_id is not None and viewer_id == owner_id

    @staticmethod
    def project_member_goal(
        member_goal: MemberGoalData,
        team_goal: TeamGoalData,
        role: str,
        viewer_id: str | None,
        today: date,
    ) -> MemberGoalView:
        """Project a member goal for a viewer.

        Returns a FullView for leader, co-leader or the goal's owner and a
        SummaryView (percentage, rating, status only) for anyone else.
        """
        current = member_goal.get(const.DATA_MEMBER_GOAL_CURRENT_VALUE, 0)
        personal_target = member_goal.get(const.DATA_MEMBER_GOAL_PERSONAL_TARGET, 0)
        progress = TeamGoalEngine.progress_percentage(current, personal_target)
        start, end = TeamGoalEngine.goal_window(team_goal)
        rating = TeamGoalEngine.performance_rating(
            progress, TeamGoalEngine.expected_progress(start, end, today)
        )
        owner_id = member_goal.get(const.DATA_MEMBER_GOAL_MEMBER_ID)
        status = member_goal.get(
            const.DATA_MEMBER_GOAL_STATUS, const.MEMBER_GOAL_STATUS_ACTIVE
        )

        if not TeamGoalEngine.can_view_full(role, viewer_id, owner_id):
            return {
                "view": const.VIEW_SUMMARY,
                "member_id": owner_id,
                "progress_percentage": progress,
                "performance_rating": rating,
                "status": status,
            }

        return {
            "view": const.VIEW_FULL,
            "member_goal_id": member_goal.get(const.DATA_MEMBER_GOAL_ID),
            "member_id": owner_id,
            "minimum_target": member_goal.get(const.DATA_MEMBER_GOAL_MINIMUM_TARGET, 0),
            "personal_target": personal_target,
            "current_value": current,
            "progress_percentage": progress,
            "contribution_percentage": TeamGoalEngine.contribution_percentage(
                current, team_goal.get(const.DATA_GOAL_CURRENT_VALUE, 0)
            ),
            "performance_rating": rating,
            "status": status,
        }

    @staticmethod
    def project_team_goal(
        team_goal: TeamGoalData, role: str, viewer_id: str | None, today: date
    ) -> TeamGoalView:
        """Project a team goal for a viewer.

        The goal's creator counts as its owner.
        """
        current = team_goal.get(const.DATA_GOAL_CURRENT_VALUE, 0)
        target = team_goal.get(const.DATA_GOAL_TARGET_VALUE, 0)
        common: dict[str, Any] = {
            "goal_id": team_goal.get(const.DATA_GOAL_ID),
            "team_id": team_goal.get(const.DATA_GOAL_TEAM_ID),
            "title": team_goal.get(const.DATA_GOAL_TITLE, ""),
            "description": team_goal.get(const.DATA_GOAL_DESCRIPTION, ""),
            "goal_type": team_goal.get(const.DATA_GOAL_TYPE, const.GOAL_TYPE_SALES),
            "status": team_goal.get(const.DATA_GOAL_STATUS, const.GOAL_STATUS_ACTIVE),
            "start_date": team_goal.get(const.DATA_GOAL_START_DATE),
            "end_date": team_goal.get(const.DATA_GOAL_END_DATE),
            "progress_percentage": TeamGoalEngine.progress_percentage(current, target),
        }

        if not TeamGoalEngine.can_view_full(
            role, viewer_id, team_goal.get(const.DATA_GOAL_CREATED_BY)
        ):
            return {"view": const.VIEW_SUMMARY, **common}  # type: ignore[typeddict-item]

        start, end = TeamGoalEngine.goal_window(team_goal)
        return {  # type: ignore[typeddict-item]
            "view": const.VIEW_FULL,
            **common,
            "target_value": target,
            "current_value": current,
            "minimum_per_member": team_goal.get(const.DATA_GOAL_MINIMUM_PER_MEMBER, 0),
            "included_members": list(
                team_goal.get(const.DATA_GOAL_INCLUDED_MEMBERS, [])
            ),
            "leader_participates": team_goal.get(
                const.DATA_GOAL_LEADER_PARTICIPATES, False
            ),
            "distribution_type": team_goal.get(
                const.DATA_GOAL_DISTRIBUTION_TYPE, const.DISTRIBUTION_EQUAL
            ),
            "achievable": TeamGoalEngine.is_achievable(
                current, target, start, end, today
            ),
        }
