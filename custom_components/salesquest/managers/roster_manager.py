"""Roster Manager - Members, teams and leadership roles.

Owns the `members` and `teams` collections:
- register_member: Create a member progress record (optionally on a team)
- create_team: Create a team with a leader, co-leaders and members
- set_team_roles: Change leader / co-leaders
- Lookup helpers used by the other managers (require_member, role_of, ...)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const
from ..engines.team_goal_engine import TeamGoalEngine
from ..exceptions import NotFoundError, ValidationError
from ..helpers.entity_helpers import new_internal_id
from ..store import set_merge_write
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import Document, MemberData, StoreWrite, TeamData


class RosterManager(BaseManager):
    """Manager for members and teams."""

    async def async_setup(self) -> None:
        """Roster has no event subscriptions."""
        const.LOGGER.debug("RosterManager: setup complete")

    # ==========================================================================
    # Lookups
    # ==========================================================================

    def get_member(self, member_id: str) -> MemberData | None:
        """Return a member document or None."""
        return self.store.get(const.DATA_MEMBERS, member_id)  # type: ignore[return-value]

    def require_member(self, member_id: str) -> MemberData:
        """Return a member document.

        Raises:
            NotFoundError: Member does not exist.
        """
        member = self.get_member(member_id)
        if member is None:
            raise NotFoundError(
                const.ERROR_MEMBER_NOT_FOUND_FMT.format(member_id),
                const.DATA_MEMBERS,
                member_id,
            )
        return member

    def get_team(self, team_id: str) -> TeamData | None:
        """Return a team document or None."""
        return self.store.get(const.DATA_TEAMS, team_id)  # type: ignore[return-value]

    def require_team(self, team_id: str) -> TeamData:
        """Return a team document.

        Raises:
            NotFoundError: Team does not exist.
        """
        team = self.get_team(team_id)
        if team is None:
            raise NotFoundError(
                const.ERROR_TEAM_NOT_FOUND_FMT.format(team_id), const.DATA_TEAMS, team_id
            )
        return team

    def list_members(self) -> list[MemberData]:
        """Return all members ordered by name."""
        return self.store.query(  # type: ignore[return-value]
            const.DATA_MEMBERS, order_by=(const.DATA_MEMBER_NAME, False)
        )

    def member_for_ha_user(self, ha_user_id: str | None) -> str | None:
        """Return the member linked to a Home Assistant user id."""
        if not ha_user_id:
            return None
        matches = self.store.query(
            const.DATA_MEMBERS,
            [(const.DATA_MEMBER_HA_USER_ID, const.QUERY_OP_EQ, ha_user_id)],
            limit=1,
        )
        return matches[0][const.DATA_MEMBER_ID] if matches else None

    def role_of(self, team_id: str, user_id: str | None) -> str:
        """Return the role of a user on a team (leader, co_leader, member, none)."""
        return TeamGoalEngine.viewer_role(self.get_team(team_id), user_id)

    # ==========================================================================
    # Mutations
    # ==========================================================================

    async def async_register_member(
        self,
        name: str,
        *,
        member_id: str | None = None,
        team_id: str | None = None,
        ha_user_id: str | None = None,
    ) -> str:
        """Create a member record.

        Args:
            name: Display name
            member_id: Explicit id (default: random)
            team_id: Optional team to join
            ha_user_id: Optional linked Home Assistant user

        Returns:
            The member id.

        Raises:
            ValidationError: Member id already registered or empty name.
            NotFoundError: Team does not exist.
        """
        if not name or not name.strip():
            raise ValidationError("Member name cannot be empty")
        member_id = member_id or new_internal_id()
        if self.store.exists(const.DATA_MEMBERS, member_id):
            raise ValidationError(const.ERROR_MEMBER_EXISTS_FMT.format(member_id))

        member: Document = {
            const.DATA_MEMBER_ID: member_id,
            const.DATA_MEMBER_NAME: name.strip(),
            const.DATA_MEMBER_TEAM_ID: team_id,
            const.DATA_MEMBER_HA_USER_ID: ha_user_id,
            const.DATA_MEMBER_TODAY_POINTS: 0,
            const.DATA_MEMBER_SEASON_POINTS: 0,
            const.DATA_MEMBER_LIFETIME_POINTS: 0,
            const.DATA_MEMBER_XP: 0,
            const.DATA_MEMBER_LEVEL: 1,
            const.DATA_MEMBER_STREAK: 0,
            const.DATA_MEMBER_ACHIEVEMENTS: [],
            const.DATA_MEMBER_LAST_ACTIVITY_DATE: None,
            const.DATA_MEMBER_LAST_STREAK_UPDATE: None,
            const.DATA_MEMBER_CREATED_AT: dt_utils.dt_now_iso(),
        }
        writes: list[StoreWrite] = [
            set_merge_write(const.DATA_MEMBERS, member_id, member)
        ]

        if team_id:
            team = self.require_team(team_id)
            members = list(team.get(const.DATA_TEAM_MEMBERS, []))
            if member_id not in members:
                members.append(member_id)
            writes.append(
                set_merge_write(
                    const.DATA_TEAMS, team_id, {const.DATA_TEAM_MEMBERS: members}
                )
            )

        await self.async_commit(writes)
        const.LOGGER.info("INFO: Registered member '%s' (%s)", name, member_id)
        self.emit(
            const.SIGNAL_SUFFIX_MEMBER_REGISTERED, member_id=member_id, name=name.strip()
        )
        return member_id

    async def async_create_team(
        self,
        name: str,
        leader_id: str,
        *,
        co_leaders: list[str] | None = None,
        members: list[str] | None = None,
        team_id: str | None = None,
    ) -> str:
        """Create a team; every listed member is moved onto it.

        Raises:
            NotFoundError: Leader or a listed member is not registered.
            ValidationError: Team id already exists.
        """
        team_id = team_id or new_internal_id()
        if self.store.exists(const.DATA_TEAMS, team_id):
            raise ValidationError(f"Team '{team_id}' already exists")

        co_leaders = list(dict.fromkeys(co_leaders or []))
        roster = list(dict.fromkeys([leader_id, *co_leaders, *(members or [])]))
        for member_id in roster:
            self.require_member(member_id)

        writes: list[StoreWrite] = [
            set_merge_write(
                const.DATA_TEAMS,
                team_id,
                {
                    const.DATA_TEAM_ID: team_id,
                    const.DATA_TEAM_NAME: name,
                    const.DATA_TEAM_LEADER_ID: leader_id,
                    const.DATA_TEAM_CO_LEADERS: co_leaders,
                    const.DATA_TEAM_MEMBERS: roster,
                    const.DATA_TEAM_CREATED_AT: dt_utils.dt_now_iso(),
                },
            )
        ]
        writes.extend(
            set_merge_write(
                const.DATA_MEMBERS, member_id, {const.DATA_MEMBER_TEAM_ID: team_id}
            )
            for member_id in roster
        )

        await self.async_commit(writes)
        const.LOGGER.info(
            "INFO: Created team '%s' (%s) led by %s with %s member(s)",
            name,
            team_id,
            leader_id,
            len(roster),
        )
        return team_id

    async def async_set_team_roles(
        self, team_id: str, leader_id: str, co_leaders: list[str] | None = None
    ) -> None:
        """Change the leader and co-leaders of a team.

        New leaders and co-leaders are added to the team roster if missing.

        Raises:
            NotFoundError: Team or a named member does not exist.
        """
        team = self.require_team(team_id)
        co_leaders = list(dict.fromkeys(co_leaders or []))
        for member_id in [leader_id, *co_leaders]:
            self.require_member(member_id)

        roster = list(
            dict.fromkeys(
                [*team.get(const.DATA_TEAM_MEMBERS, []), leader_id, *co_leaders]
            )
        )
        await self.async_commit(
            [
                set_merge_write(
                    const.DATA_TEAMS,
                    team_id,
                    {
                        const.DATA_TEAM_LEADER_ID: leader_id,
                        const.DATA_TEAM_CO_LEADERS: co_leaders,
                        const.DATA_TEAM_MEMBERS: roster,
                    },
                ),
                *(
                    set_merge_write(
                        const.DATA_MEMBERS, member_id, {const.DATA_MEMBER_TEAM_ID: team_id}
                    )
                    for member_id in [leader_id, *co_leaders]
                ),
            ]
        )
        const.LOGGER.debug(
            "RosterManager.set_team_roles: team=%s, leader=%s, co_leaders=%s",
            team_id,
            leader_id,
            co_leaders,
        )
