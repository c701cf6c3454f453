"""Team Goal Manager - Shared team targets split into per-member goals.

Owns the `team_goals`, `member_goals` and `goal_progress` collections.
Mutations are leader/co-leader gated (personal targets are owner gated),
raise typed SalesQuest errors, and commit each operation as one batch.
Reads are projected per viewer through TeamGoalEngine so members never see
another member's raw numbers.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.team_goal_engine import TeamGoalEngine
from ..exceptions import AuthorizationError, NotFoundError, ValidationError
from ..helpers.entity_helpers import member_goal_doc_id, new_internal_id
from ..store import increment_write, set_merge_write
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import date

    from homeassistant.core import HomeAssistant

    from ..coordinator import SalesQuestCoordinator
    from ..type_defs import (
        Document,
        GoalProgressView,
        MemberGoalData,
        StoreWrite,
        TeamData,
        TeamGoalData,
        TeamGoalView,
    )

# Fields update_team_goal accepts
_UPDATABLE_FIELDS = (
    const.DATA_GOAL_TITLE,
    const.DATA_GOAL_DESCRIPTION,
    const.DATA_GOAL_END_DATE,
    const.DATA_GOAL_TARGET_VALUE,
    const.DATA_GOAL_STATUS,
)


class TeamGoalManager(BaseManager):
    """Manager for team goals, member goals and progress records."""

    def __init__(self, hass: HomeAssistant, coordinator: SalesQuestCoordinator) -> None:
        """Initialize the manager."""
        super().__init__(hass, coordinator)
        self._goal_lock = asyncio.Lock()

    async def async_setup(self) -> None:
        """Team goal manager has no event subscriptions."""
        const.LOGGER.debug("TeamGoalManager: setup complete")

    # ==========================================================================
    # Lookups and Guards
    # ==========================================================================

    def require_goal(self, goal_id: str) -> TeamGoalData:
        """Return a team goal.

        Raises:
            NotFoundError: Goal does not exist.
        """
        goal = self.store.get(const.DATA_TEAM_GOALS, goal_id)
        if goal is None:
            raise NotFoundError(
                const.ERROR_GOAL_NOT_FOUND_FMT.format(goal_id),
                const.DATA_TEAM_GOALS,
                goal_id,
            )
        return goal  # type: ignore[return-value]

    def require_member_goal(self, member_goal_id: str) -> MemberGoalData:
        """Return a member goal.

        Raises:
            NotFoundError: Member goal does not exist.
        """
        member_goal = self.store.get(const.DATA_MEMBER_GOALS, member_goal_id)
        if member_goal is None:
            raise NotFoundError(
                const.ERROR_MEMBER_GOAL_NOT_FOUND_FMT.format(member_goal_id),
                const.DATA_MEMBER_GOALS,
                member_goal_id,
            )
        return member_goal  # type: ignore[return-value]

    def _member_goals_for(self, goal_id: str) -> dict[str, MemberGoalData]:
        return {
            doc[const.DATA_MEMBER_GOAL_MEMBER_ID]: doc  # type: ignore[misc]
            for doc in self.store.query(
                const.DATA_MEMBER_GOALS,
                [(const.DATA_MEMBER_GOAL_GOAL_ID, const.QUERY_OP_EQ, goal_id)],
                order_by=(const.DATA_MEMBER_GOAL_MEMBER_ID, False),
            )
        }

    def _require_manager(self, team: TeamData, user_id: str | None) -> None:
        role = TeamGoalEngine.viewer_role(team, user_id)
        if not TeamGoalEngine.is_manager_role(role):
            const.LOGGER.warning(
                "WARNING: TeamGoalManager: user=%s (role=%s) denied on team=%s",
                user_id,
                role,
                team.get(const.DATA_TEAM_ID),
            )
            raise AuthorizationError(const.ERROR_NOT_TEAM_LEADER)

    @staticmethod
    def _validate_roster(team: TeamData, member_ids: list[str]) -> None:
        roster = set(team.get(const.DATA_TEAM_MEMBERS, [])) | {
            team.get(const.DATA_TEAM_LEADER_ID)
        }
        for member_id in member_ids:
            if member_id not in roster:
                raise ValidationError(
                    const.ERROR_NOT_TEAM_MEMBER_FMT.format(
                        member_id, team.get(const.DATA_TEAM_ID)
                    )
                )

    @staticmethod
    def _new_member_goal(
        goal_id: str, member_id: str, minimum: float, now_iso: str
    ) -> Document:
        return {
            const.DATA_MEMBER_GOAL_ID: member_goal_doc_id(goal_id, member_id),
            const.DATA_MEMBER_GOAL_GOAL_ID: goal_id,
            const.DATA_MEMBER_GOAL_MEMBER_ID: member_id,
            const.DATA_MEMBER_GOAL_MINIMUM_TARGET: minimum,
            const.DATA_MEMBER_GOAL_PERSONAL_TARGET: minimum,
            const.DATA_MEMBER_GOAL_CURRENT_VALUE: 0,
            const.DATA_MEMBER_GOAL_PROGRESS_PERCENTAGE: 0,
            const.DATA_MEMBER_GOAL_CONTRIBUTION_PERCENTAGE: 0,
            const.DATA_MEMBER_GOAL_STATUS: const.MEMBER_GOAL_STATUS_ACTIVE,
            const.DATA_MEMBER_GOAL_IS_INCLUDED: True,
            const.DATA_MEMBER_GOAL_COMPLETED_AT: None,
            const.DATA_MEMBER_GOAL_EXCLUDED_AT: None,
            const.DATA_MEMBER_GOAL_UPDATED_AT: now_iso,
        }

    # ==========================================================================
    # Mutations
    # ==========================================================================

    async def async_create_team_goal(
        self, goal_data: dict[str, Any], user_id: str | None, team_id: str
    ) -> str:
        """Create a team goal and one member goal per participant.

        Args:
            goal_data: title, description, goal_type, target_value, start_date,
                end_date, distribution_type, custom_distribution,
                included_members, leader_participates
            user_id: Acting member (must lead or co-lead the team)
            team_id: Owning team

        Returns:
            The new goal id.

        Raises:
            NotFoundError: Team does not exist.
            AuthorizationError: Caller is not leader or co-leader.
            ValidationError: Bad target, dates, members or distribution.
        """
        team = self.coordinator.roster_manager.require_team(team_id)
        self._require_manager(team, user_id)

        target = float(goal_data.get(const.DATA_GOAL_TARGET_VALUE) or 0)
        if target <= 0:
            raise ValidationError(const.ERROR_TARGET_NOT_POSITIVE)

        goal_type = goal_data.get(const.DATA_GOAL_TYPE, const.GOAL_TYPE_SALES)
        if goal_type not in const.GOAL_TYPES:
            raise ValidationError(f"Unknown goal type '{goal_type}'")

        start = dt_utils.dt_parse_date(
            goal_data.get(const.DATA_GOAL_START_DATE)
        ) or dt_utils.dt_today_local()
        end = dt_utils.dt_parse_date(goal_data.get(const.DATA_GOAL_END_DATE))
        if end is not None and end < start:
            raise ValidationError(const.ERROR_INVALID_DATE_RANGE)

        leader_id = team[const.DATA_TEAM_LEADER_ID]
        included = goal_data.get(const.DATA_GOAL_INCLUDED_MEMBERS)
        if included is None:
            included = [
                member_id
                for member_id in team.get(const.DATA_TEAM_MEMBERS, [])
                if member_id != leader_id
            ]
        included = list(dict.fromkeys(included))
        self._validate_roster(team, included)

        leader_participates = bool(
            goal_data.get(const.DATA_GOAL_LEADER_PARTICIPATES, False)
        )
        participants = TeamGoalEngine.participants(
            included, leader_id, leader_participates
        )
        if not participants:
            raise ValidationError(const.ERROR_NO_PARTICIPANTS)

        distribution_type = goal_data.get(
            const.DATA_GOAL_DISTRIBUTION_TYPE, const.DISTRIBUTION_EQUAL
        )
        if distribution_type not in const.DISTRIBUTION_TYPES:
            raise ValidationError(f"Unknown distribution type '{distribution_type}'")
        custom_distribution: dict[str, float] = {}
        if distribution_type == const.DISTRIBUTION_CUSTOM:
            custom_distribution = dict(
                goal_data.get(const.DATA_GOAL_CUSTOM_DISTRIBUTION) or {}
            )
            for member_id in participants:
                if member_id not in custom_distribution:
                    raise ValidationError(
                        const.ERROR_CUSTOM_DISTRIBUTION_MISSING_FMT.format(member_id)
                    )

        minimum = TeamGoalEngine.minimum_per_member(target, len(participants))
        goal_id = goal_data.get(const.DATA_GOAL_ID) or new_internal_id()
        now_iso = dt_utils.dt_now_iso()

        writes: list[StoreWrite] = [
            set_merge_write(
                const.DATA_TEAM_GOALS,
                goal_id,
                {
                    const.DATA_GOAL_ID: goal_id,
                    const.DATA_GOAL_TEAM_ID: team_id,
                    const.DATA_GOAL_TITLE: goal_data.get(const.DATA_GOAL_TITLE, ""),
                    const.DATA_GOAL_DESCRIPTION: goal_data.get(
                        const.DATA_GOAL_DESCRIPTION, ""
                    ),
                    const.DATA_GOAL_TYPE: goal_type,
                    const.DATA_GOAL_TARGET_VALUE: target,
                    const.DATA_GOAL_CURRENT_VALUE: 0,
                    const.DATA_GOAL_START_DATE: start.isoformat(),
                    const.DATA_GOAL_END_DATE: end.isoformat() if end else None,
                    const.DATA_GOAL_DISTRIBUTION_TYPE: distribution_type,
                    const.DATA_GOAL_CUSTOM_DISTRIBUTION: custom_distribution,
                    const.DATA_GOAL_INCLUDED_MEMBERS: included,
                    const.DATA_GOAL_EXCLUDED_MEMBERS: [],
                    const.DATA_GOAL_LEADER_PARTICIPATES: leader_participates,
                    const.DATA_GOAL_MINIMUM_PER_MEMBER: minimum,
                    const.DATA_GOAL_STATUS: const.GOAL_STATUS_ACTIVE,
                    const.DATA_GOAL_CREATED_BY: user_id,
                    const.DATA_GOAL_CREATED_AT: now_iso,
                    const.DATA_GOAL_UPDATED_AT: now_iso,
                    const.DATA_GOAL_COMPLETED_AT: None,
                },
            )
        ]
        writes.extend(
            set_merge_write(
                const.DATA_MEMBER_GOALS,
                member_goal_doc_id(goal_id, member_id),
                self._new_member_goal(
                    goal_id,
                    member_id,
                    TeamGoalEngine.member_minimum(
                        distribution_type, minimum, custom_distribution, member_id
                    ),
                    now_iso,
                ),
            )
            for member_id in participants
        )

        async with self._goal_lock:
            await self.async_commit(writes)

        const.LOGGER.debug(
            "TeamGoalManager.create_team_goal: goal=%s, team=%s, target=%s, "
            "participants=%s, minimum=%s",
            goal_id,
            team_id,
            target,
            len(participants),
            minimum,
        )
        self.emit(const.SIGNAL_SUFFIX_TEAM_GOAL_UPDATED, goal_id=goal_id, team_id=team_id)
        return goal_id

    async def async_update_member_inclusion(
        self,
        goal_id: str,
        user_id: str | None,
        included_members: list[str],
        leader_participates: bool | None = None,
    ) -> int:
        """Change who participates in a goal and redistribute the minimum.

        Still-included members get the new minimum and keep a personal target
        that is at least that minimum. New members get fresh member goals;
        re-included members are re-activated and keep their history and
        personal target. Removed
        active members become excluded; completed goals stay completed.

        Returns:
            The new minimum per member.

        Raises:
            NotFoundError: Goal or team does not exist.
            AuthorizationError: Caller is not leader or co-leader.
            ValidationError: Unknown members, empty participant set or
                completed goal.
        """
        async with self._goal_lock:
            goal = self.require_goal(goal_id)
            team = self.coordinator.roster_manager.require_team(
                goal[const.DATA_GOAL_TEAM_ID]
            )
            self._require_manager(team, user_id)
            if goal.get(const.DATA_GOAL_STATUS) == const.GOAL_STATUS_COMPLETED:
                raise ValidationError(const.ERROR_GOAL_NOT_ACTIVE_FMT.format(goal_id))

            included = list(dict.fromkeys(included_members))
            self._validate_roster(team, included)
            if leader_participates is None:
                leader_participates = goal.get(const.DATA_GOAL_LEADER_PARTICIPATES, False)
            leader_id = team[const.DATA_TEAM_LEADER_ID]

            participants = TeamGoalEngine.participants(
                included, leader_id, leader_participates
            )
            if not participants:
                raise ValidationError(const.ERROR_NO_PARTICIPANTS)

            previous = TeamGoalEngine.participants(
                goal.get(const.DATA_GOAL_INCLUDED_MEMBERS, []),
                leader_id,
                goal.get(const.DATA_GOAL_LEADER_PARTICIPATES, False),
            )
            minimum = TeamGoalEngine.minimum_per_member(
                goal[const.DATA_GOAL_TARGET_VALUE], len(participants)
            )
            distribution_type = goal.get(
                const.DATA_GOAL_DISTRIBUTION_TYPE, const.DISTRIBUTION_EQUAL
            )
            custom_distribution = goal.get(const.DATA_GOAL_CUSTOM_DISTRIBUTION) or {}
            existing = self._member_goals_for(goal_id)
            now_iso = dt_utils.dt_now_iso()
            writes: list[StoreWrite] = []

            for member_id in participants:
                member_minimum = TeamGoalEngine.member_minimum(
                    distribution_type, minimum, custom_distribution, member_id
                )
                member_goal = existing.get(member_id)
                doc_id = member_goal_doc_id(goal_id, member_id)
                if member_goal is None:
                    writes.append(
                        set_merge_write(
                            const.DATA_MEMBER_GOALS,
                            doc_id,
                            self._new_member_goal(
                                goal_id, member_id, member_minimum, now_iso
                            ),
                        )
                    )
                    continue

                updates: Document = {
                    const.DATA_MEMBER_GOAL_MINIMUM_TARGET: member_minimum,
                    const.DATA_MEMBER_GOAL_IS_INCLUDED: True,
                    const.DATA_MEMBER_GOAL_UPDATED_AT: now_iso,
                }
                if (
                    member_goal.get(const.DATA_MEMBER_GOAL_STATUS)
                    == const.MEMBER_GOAL_STATUS_EXCLUDED
                ):
                    updates[const.DATA_MEMBER_GOAL_STATUS] = (
                        const.MEMBER_GOAL_STATUS_ACTIVE
                    )
                    updates[const.DATA_MEMBER_GOAL_EXCLUDED_AT] = None
                updates[const.DATA_MEMBER_GOAL_PERSONAL_TARGET] = (
                    TeamGoalEngine.adjusted_personal_target(
                        member_goal.get(const.DATA_MEMBER_GOAL_PERSONAL_TARGET, 0),
                        member_minimum,
                    )
                )
                writes.append(set_merge_write(const.DATA_MEMBER_GOALS, doc_id, updates))

            removed = [member_id for member_id in previous if member_id not in participants]
            for member_id in removed:
                member_goal = existing.get(member_id)
                if member_goal is None:
                    continue
                updates = {
                    const.DATA_MEMBER_GOAL_IS_INCLUDED: False,
                    const.DATA_MEMBER_GOAL_UPDATED_AT: now_iso,
                }
                if (
                    member_goal.get(const.DATA_MEMBER_GOAL_STATUS)
                    == const.MEMBER_GOAL_STATUS_ACTIVE
                ):
                    updates[const.DATA_MEMBER_GOAL_STATUS] = (
                        const.MEMBER_GOAL_STATUS_EXCLUDED
                    )
                    updates[const.DATA_MEMBER_GOAL_EXCLUDED_AT] = now_iso
                writes.append(
                    set_merge_write(
                        const.DATA_MEMBER_GOALS,
                        member_goal_doc_id(goal_id, member_id),
                        updates,
                    )
                )

            excluded_members = [
                member_id
                for member_id in dict.fromkeys(
                    [*goal.get(const.DATA_GOAL_EXCLUDED_MEMBERS, []), *removed]
                )
                if member_id not in participants
            ]
            writes.append(
                set_merge_write(
                    const.DATA_TEAM_GOALS,
                    goal_id,
                    {
                        const.DATA_GOAL_INCLUDED_MEMBERS: included,
                        const.DATA_GOAL_EXCLUDED_MEMBERS: excluded_members,
                        const.DATA_GOAL_LEADER_PARTICIPATES: leader_participates,
                        const.DATA_GOAL_MINIMUM_PER_MEMBER: minimum,
                        const.DATA_GOAL_UPDATED_AT: now_iso,
                    },
                )
            )
            await self.async_commit(writes)

        const.LOGGER.debug(
            "TeamGoalManager.update_member_inclusion: goal=%s, participants=%s, "
            "removed=%s, minimum=%s",
            goal_id,
            participants,
            removed,
            minimum,
        )
        self.emit(
            const.SIGNAL_SUFFIX_TEAM_GOAL_UPDATED,
            goal_id=goal_id,
            team_id=goal[const.DATA_GOAL_TEAM_ID],
        )
        return minimum

    async def async_update_personal_target(
        self, member_goal_id: str, new_target: float, member_id: str | None
    ) -> None:
        """Let a member raise (or lower, down to the minimum) their own target.

        Raises:
            NotFoundError: Member goal does not exist.
            AuthorizationError: Caller does not own the member goal.
            ValidationError: Goal excluded or target below minimum.
        """
        async with self._goal_lock:
            member_goal = self.require_member_goal(member_goal_id)
            if member_goal.get(const.DATA_MEMBER_GOAL_MEMBER_ID) != member_id:
                const.LOGGER.warning(
                    "WARNING: TeamGoalManager.update_personal_target: user=%s "
                    "does not own member goal %s",
                    member_id,
                    member_goal_id,
                )
                raise AuthorizationError(const.ERROR_NOT_GOAL_OWNER)
            if (
                member_goal.get(const.DATA_MEMBER_GOAL_STATUS)
                == const.MEMBER_GOAL_STATUS_EXCLUDED
            ):
                raise ValidationError(const.ERROR_GOAL_EXCLUDED)

            minimum = member_goal.get(const.DATA_MEMBER_GOAL_MINIMUM_TARGET, 0)
            if new_target <= 0:
                raise ValidationError(const.ERROR_TARGET_NOT_POSITIVE)
            if new_target < minimum:
                raise ValidationError(
                    const.ERROR_TARGET_BELOW_MINIMUM_FMT.format(new_target, minimum)
                )

            await self.async_commit(
                [
                    set_merge_write(
                        const.DATA_MEMBER_GOALS,
                        member_goal_id,
                        {
                            const.DATA_MEMBER_GOAL_PERSONAL_TARGET: new_target,
                            const.DATA_MEMBER_GOAL_PROGRESS_PERCENTAGE: TeamGoalEngine.progress_percentage(
                                member_goal.get(const.DATA_MEMBER_GOAL_CURRENT_VALUE, 0),
                                new_target,
                            ),
                            const.DATA_MEMBER_GOAL_UPDATED_AT: dt_utils.dt_now_iso(),
                        },
                    )
                ]
            )

        const.LOGGER.debug(
            "TeamGoalManager.update_personal_target: member_goal=%s, target=%s",
            member_goal_id,
            new_target,
        )
        self.emit(
            const.SIGNAL_SUFFIX_TEAM_GOAL_UPDATED,
            goal_id=member_goal.get(const.DATA_MEMBER_GOAL_GOAL_ID),
            member_id=member_id,
        )

    async def async_record_progress(
        self,
        member_id: str,
        goal_id: str,
        value: float,
        day: date | None = None,
    ) -> dict[str, Any]:
        """Record a member's progress toward a team goal.

        The progress record and both current_value increments commit as one
        batch. The member goal completes at its personal target. Reaching the
        team target stamps completed_at once; the goal stays active and keeps
        taking progress until a leader completes it.

        Returns:
            dict with progress_id, member_value, team_value, member_completed,
            goal_completed

        Raises:
            NotFoundError: Goal does not exist.
            ValidationError: Non-positive value, inactive goal, or member not
                an included participant.
        """
        if value <= 0:
            raise ValidationError(const.ERROR_PROGRESS_NOT_POSITIVE)
        day = day or dt_utils.dt_today_local()

        async with self._goal_lock:
            goal = self.require_goal(goal_id)
            if goal.get(const.DATA_GOAL_STATUS) != const.GOAL_STATUS_ACTIVE:
                raise ValidationError(const.ERROR_GOAL_NOT_ACTIVE_FMT.format(goal_id))

            member_goal_id = member_goal_doc_id(goal_id, member_id)
            member_goal = self.store.get(const.DATA_MEMBER_GOALS, member_goal_id)
            if member_goal is None or not member_goal.get(
                const.DATA_MEMBER_GOAL_IS_INCLUDED, False
            ):
                raise ValidationError(
                    const.ERROR_NOT_PARTICIPANT_FMT.format(member_id, goal_id)
                )
            if (
                member_goal.get(const.DATA_MEMBER_GOAL_STATUS)
                == const.MEMBER_GOAL_STATUS_EXCLUDED
            ):
                raise ValidationError(const.ERROR_GOAL_EXCLUDED)

            member_value = member_goal.get(const.DATA_MEMBER_GOAL_CURRENT_VALUE, 0) + value
            team_value = goal.get(const.DATA_GOAL_CURRENT_VALUE, 0) + value
            personal_target = member_goal.get(const.DATA_MEMBER_GOAL_PERSONAL_TARGET, 0)
            member_completed = (
                member_goal.get(const.DATA_MEMBER_GOAL_STATUS)
                == const.MEMBER_GOAL_STATUS_ACTIVE
                and member_value >= personal_target
            )
            goal_completed = team_value >= goal[const.DATA_GOAL_TARGET_VALUE]
            now_iso = dt_utils.dt_now_iso()
            progress_id = new_internal_id()

            member_updates: Document = {
                const.DATA_MEMBER_GOAL_PROGRESS_PERCENTAGE: TeamGoalEngine.progress_percentage(
                    member_value, personal_target
                ),
                const.DATA_MEMBER_GOAL_CONTRIBUTION_PERCENTAGE: TeamGoalEngine.contribution_percentage(
                    member_value, team_value
                ),
                const.DATA_MEMBER_GOAL_UPDATED_AT: now_iso,
            }
            if member_completed:
                member_updates[const.DATA_MEMBER_GOAL_STATUS] = (
                    const.MEMBER_GOAL_STATUS_COMPLETED
                )
                member_updates[const.DATA_MEMBER_GOAL_COMPLETED_AT] = now_iso

            goal_updates: Document = {const.DATA_GOAL_UPDATED_AT: now_iso}
            if goal_completed and not goal.get(const.DATA_GOAL_COMPLETED_AT):
                goal_updates[const.DATA_GOAL_COMPLETED_AT] = now_iso

            await self.async_commit(
                [
                    set_merge_write(
                        const.DATA_GOAL_PROGRESS,
                        progress_id,
                        {
                            const.DATA_PROGRESS_ID: progress_id,
                            const.DATA_PROGRESS_GOAL_ID: goal_id,
                            const.DATA_PROGRESS_MEMBER_ID: member_id,
                            const.DATA_PROGRESS_DATE: day.isoformat(),
                            const.DATA_PROGRESS_DAILY_VALUE: value,
                            const.DATA_PROGRESS_CUMULATIVE_VALUE: member_value,
                            const.DATA_PROGRESS_PERCENTAGE_COMPLETE: member_updates[
                                const.DATA_MEMBER_GOAL_PROGRESS_PERCENTAGE
                            ],
                            const.DATA_PROGRESS_SOURCE: const.PROGRESS_SOURCE_MANUAL,
                            const.DATA_PROGRESS_RECORDED_AT: now_iso,
                        },
                    ),
                    increment_write(
                        const.DATA_MEMBER_GOALS,
                        member_goal_id,
                        const.DATA_MEMBER_GOAL_CURRENT_VALUE,
                        value,
                    ),
                    increment_write(
                        const.DATA_TEAM_GOALS,
                        goal_id,
                        const.DATA_GOAL_CURRENT_VALUE,
                        value,
                    ),
                    set_merge_write(const.DATA_MEMBER_GOALS, member_goal_id, member_updates),
                    set_merge_write(const.DATA_TEAM_GOALS, goal_id, goal_updates),
                ]
            )

        const.LOGGER.debug(
            "TeamGoalManager.record_progress: goal=%s, member=%s, value=%s, "
            "member_total=%s, team_total=%s",
            goal_id,
            member_id,
            value,
            member_value,
            team_value,
        )
        self.emit(
            const.SIGNAL_SUFFIX_TEAM_GOAL_UPDATED,
            goal_id=goal_id,
            team_id=goal[const.DATA_GOAL_TEAM_ID],
        )
        if member_completed:
            self.emit(
                const.SIGNAL_SUFFIX_MEMBER_GOAL_COMPLETED,
                goal_id=goal_id,
                member_id=member_id,
            )
            self.hass.bus.async_fire(
                const.EVENT_MEMBER_GOAL_COMPLETED,
                {
                    "goal_id": goal_id,
                    "member_id": member_id,
                    "title": goal.get(const.DATA_GOAL_TITLE, ""),
                },
            )

        return {
            "progress_id": progress_id,
            "member_value": member_value,
            "team_value": team_value,
            "member_completed": member_completed,
            "goal_completed": goal_completed,
        }

    async def async_update_team_goal(
        self, goal_id: str, user_id: str | None, updates: dict[str, Any]
    ) -> None:
        """Edit a team goal's title, description, end date, target or status.

        A new target recomputes the minimum and raises personal targets that
        fall below it.

        Raises:
            NotFoundError: Goal or team does not exist.
            AuthorizationError: Caller is not leader or co-leader.
            ValidationError: Bad target, date or status transition.
        """
        async with self._goal_lock:
            goal = self.require_goal(goal_id)
            team = self.coordinator.roster_manager.require_team(
                goal[const.DATA_GOAL_TEAM_ID]
            )
            self._require_manager(team, user_id)

            now_iso = dt_utils.dt_now_iso()
            goal_updates: Document = {
                key: value
                for key, value in updates.items()
                if key in _UPDATABLE_FIELDS and value is not None
            }
            writes: list[StoreWrite] = []

            if const.DATA_GOAL_STATUS in goal_updates:
                current = goal.get(const.DATA_GOAL_STATUS, const.GOAL_STATUS_ACTIVE)
                new = goal_updates[const.DATA_GOAL_STATUS]
                if new not in const.GOAL_STATUSES or not TeamGoalEngine.can_transition(
                    current, new
                ):
                    raise ValidationError(
                        const.ERROR_INVALID_STATUS_TRANSITION_FMT.format(current, new)
                    )
                if new == const.GOAL_STATUS_COMPLETED and current != new:
                    goal_updates[const.DATA_GOAL_COMPLETED_AT] = now_iso
            elif goal.get(const.DATA_GOAL_STATUS) == const.GOAL_STATUS_COMPLETED:
                raise ValidationError(const.ERROR_GOAL_NOT_ACTIVE_FMT.format(goal_id))

            if const.DATA_GOAL_END_DATE in goal_updates:
                start, _ = TeamGoalEngine.goal_window(goal)
                end = dt_utils.dt_parse_date(goal_updates[const.DATA_GOAL_END_DATE])
                if end is None or (start is not None and end < start):
                    raise ValidationError(const.ERROR_INVALID_DATE_RANGE)
                goal_updates[const.DATA_GOAL_END_DATE] = end.isoformat()

            if const.DATA_GOAL_TARGET_VALUE in goal_updates:
                target = float(goal_updates[const.DATA_GOAL_TARGET_VALUE])
                if target <= 0:
                    raise ValidationError(const.ERROR_TARGET_NOT_POSITIVE)
                goal_updates[const.DATA_GOAL_TARGET_VALUE] = target
                participants = TeamGoalEngine.participants(
                    goal.get(const.DATA_GOAL_INCLUDED_MEMBERS, []),
                    team[const.DATA_TEAM_LEADER_ID],
                    goal.get(const.DATA_GOAL_LEADER_PARTICIPATES, False),
                )
                minimum = TeamGoalEngine.minimum_per_member(target, len(participants))
                goal_updates[const.DATA_GOAL_MINIMUM_PER_MEMBER] = minimum
                distribution_type = goal.get(
                    const.DATA_GOAL_DISTRIBUTION_TYPE, const.DISTRIBUTION_EQUAL
                )
                custom_distribution = goal.get(const.DATA_GOAL_CUSTOM_DISTRIBUTION) or {}
                for member_id, member_goal in self._member_goals_for(goal_id).items():
                    if member_id not in participants:
                        continue
                    member_minimum = TeamGoalEngine.member_minimum(
                        distribution_type, minimum, custom_distribution, member_id
                    )
                    writes.append(
                        set_merge_write(
                            const.DATA_MEMBER_GOALS,
                            member_goal_doc_id(goal_id, member_id),
                            {
                                const.DATA_MEMBER_GOAL_MINIMUM_TARGET: member_minimum,
                                const.DATA_MEMBER_GOAL_PERSONAL_TARGET: TeamGoalEngine.adjusted_personal_target(
                                    member_goal.get(
                                        const.DATA_MEMBER_GOAL_PERSONAL_TARGET, 0
                                    ),
                                    member_minimum,
                                ),
                                const.DATA_MEMBER_GOAL_UPDATED_AT: now_iso,
                            },
                        )
                    )

            goal_updates[const.DATA_GOAL_UPDATED_AT] = now_iso
            writes.insert(0, set_merge_write(const.DATA_TEAM_GOALS, goal_id, goal_updates))
            await self.async_commit(writes)

        const.LOGGER.debug(
            "TeamGoalManager.update_team_goal: goal=%s, fields=%s",
            goal_id,
            sorted(goal_updates),
        )
        self.emit(
            const.SIGNAL_SUFFIX_TEAM_GOAL_UPDATED,
            goal_id=goal_id,
            team_id=goal[const.DATA_GOAL_TEAM_ID],
        )

    # ==========================================================================
    # Projected Reads
    # ==========================================================================

    def get_team_goals(self, team_id: str, viewer_id: str | None) -> list[TeamGoalView]:
        """Return a team's active and paused goals, newest first.

        Raises:
            NotFoundError: Team does not exist.
        """
        team = self.coordinator.roster_manager.require_team(team_id)
        role = TeamGoalEngine.viewer_role(team, viewer_id)
        today = dt_utils.dt_today_local()
        goals = self.store.query(
            const.DATA_TEAM_GOALS,
            [
                (const.DATA_GOAL_TEAM_ID, const.QUERY_OP_EQ, team_id),
                (const.DATA_GOAL_STATUS, const.QUERY_OP_IN, const.GOAL_STATUSES_VISIBLE),
            ],
            order_by=(const.DATA_GOAL_CREATED_AT, True),
        )
        return [
            TeamGoalEngine.project_team_goal(goal, role, viewer_id, today)  # type: ignore[arg-type]
            for goal in goals
        ]

    def get_goal_progress(self, goal_id: str, viewer_id: str | None) -> GoalProgressView:
        """Return a goal with every participant's progress, projected for the viewer.

        Raises:
            NotFoundError: Goal does not exist.
        """
        goal = self.require_goal(goal_id)
        team = self.coordinator.roster_manager.get_team(goal[const.DATA_GOAL_TEAM_ID])
        role = TeamGoalEngine.viewer_role(team, viewer_id)
        today = dt_utils.dt_today_local()
        member_goals = self.store.query(
            const.DATA_MEMBER_GOALS,
            [
                (const.DATA_MEMBER_GOAL_GOAL_ID, const.QUERY_OP_EQ, goal_id),
                (const.DATA_MEMBER_GOAL_IS_INCLUDED, const.QUERY_OP_EQ, True),
            ],
            order_by=(const.DATA_MEMBER_GOAL_MEMBER_ID, False),
        )
        return {
            "team_goal": TeamGoalEngine.project_team_goal(goal, role, viewer_id, today),
            "member_progress": [
                TeamGoalEngine.project_member_goal(
                    member_goal, goal, role, viewer_id, today  # type: ignore[arg-type]
                )
                for member_goal in member_goals
            ],
            "team_progress": TeamGoalEngine.progress_percentage(
                goal.get(const.DATA_GOAL_CURRENT_VALUE, 0),
                goal.get(const.DATA_GOAL_TARGET_VALUE, 0),
            ),
        }

    def get_member_goals(self, member_id: str) -> list[dict[str, Any]]:
        """Return a member's own goals (full view) with their team goal."""
        today = dt_utils.dt_today_local()
        results: list[dict[str, Any]] = []
        for member_goal in self.store.query(
            const.DATA_MEMBER_GOALS,
            [(const.DATA_MEMBER_GOAL_MEMBER_ID, const.QUERY_OP_EQ, member_id)],
            order_by=(const.DATA_MEMBER_GOAL_UPDATED_AT, True),
        ):
            goal = self.store.get(
                const.DATA_TEAM_GOALS, member_goal[const.DATA_MEMBER_GOAL_GOAL_ID]
            )
            if goal is None:
                continue
            role = self.coordinator.roster_manager.role_of(
                goal[const.DATA_GOAL_TEAM_ID], member_id
            )
            results.append(
                {
                    "team_goal": TeamGoalEngine.project_team_goal(
                        goal, role, member_id, today  # type: ignore[arg-type]
                    ),
                    "member_goal": TeamGoalEngine.project_member_goal(
                        member_goal, goal, role, member_id, today  # type: ignore[arg-type]
                    ),
                }
            )
        return results
