"""Season Manager - Monthly seasons, skill rating and the leaderboard.

Owns the `seasons` and `user_seasons` collections:
- ensure_current_season: Create the month's season, ending a stale one first
- end_season: Freeze each member's finish and reset season points
- start_season: Soft-reset every member to a placement from last season
- apply_points: Keep a member's SR, rank, division and peak rank current
  (driven by the points_awarded signal)
- get_season_leaderboard: Members ordered by SR
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.season_engine import SeasonEngine
from ..exceptions import NotFoundError, SalesQuestError
from ..helpers.entity_helpers import user_season_doc_id
from ..store import increment_write, set_merge_write
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import SalesQuestCoordinator
    from ..type_defs import Document, MemberData, SeasonData, StoreWrite, UserSeasonData

# Season counters bumped per activity
_ACTIVITY_COUNTERS = {
    const.ACTIVITY_MORNING_INTENTIONS: const.DATA_USER_SEASON_INTENTIONS_COMPLETED,
    const.ACTIVITY_EVENING_WRAP: const.DATA_USER_SEASON_WRAPS_COMPLETED,
}


class SeasonManager(BaseManager):
    """Manager for season lifecycle and per-member season standings."""

    def __init__(self, hass: HomeAssistant, coordinator: SalesQuestCoordinator) -> None:
        """Initialize the manager."""
        super().__init__(hass, coordinator)
        self._season_lock = asyncio.Lock()

    async def async_setup(self) -> None:
        """Subscribe to point awards and make sure this month's season exists."""
        self.listen(const.SIGNAL_SUFFIX_POINTS_AWARDED, self._on_points_awarded)
        await self.async_ensure_current_season()
        const.LOGGER.debug("SeasonManager: setup complete")

    async def _on_points_awarded(self, payload: dict[str, Any]) -> None:
        try:
            await self.async_apply_points(
                payload["member_id"], payload["delta"], payload.get("activity")
            )
        except SalesQuestError as err:
            const.LOGGER.error(
                "ERROR: SeasonManager: failed to apply %s points for member=%s: %s",
                payload.get("delta"),
                payload.get("member_id"),
                err,
            )

    # ==========================================================================
    # Lookups
    # ==========================================================================

    def get_season(self, season_id: str) -> SeasonData | None:
        """Return a season document or None."""
        return self.store.get(const.DATA_SEASONS, season_id)  # type: ignore[return-value]

    def get_current_season(self, today: date | None = None) -> SeasonData | None:
        """Return this month's season document, if it has been created."""
        return self.get_season(
            SeasonEngine.season_id(today or dt_utils.dt_today_local())
        )

    def get_member_standing(
        self, member_id: str, season_id: str | None = None
    ) -> UserSeasonData | None:
        """Return a member's user-season document (default: current season)."""
        season_id = season_id or SeasonEngine.season_id(dt_utils.dt_today_local())
        return self.store.get(  # type: ignore[return-value]
            const.DATA_USER_SEASONS, user_season_doc_id(member_id, season_id)
        )

    def _new_user_season(self, member: MemberData, season_id: str) -> Document:
        placement = SeasonEngine.placement(
            member.get(const.DATA_MEMBER_LAST_SEASON_RANK),
            member.get(const.DATA_MEMBER_LAST_SEASON_DIVISION),
        )
        sr = SeasonEngine.current_sr(placement["sr"], 0, placement["starting_bonus"])
        rank = SeasonEngine.rank_from_sr(sr)
        return {
            const.DATA_USER_SEASON_MEMBER_ID: member[const.DATA_MEMBER_ID],
            const.DATA_USER_SEASON_SEASON_ID: season_id,
            const.DATA_USER_SEASON_POINTS: 0,
            const.DATA_USER_SEASON_STARTING_BONUS: placement["starting_bonus"],
            const.DATA_USER_SEASON_PLACEMENT_RANK: placement["rank"],
            const.DATA_USER_SEASON_PLACEMENT_DIVISION: placement["division"],
            const.DATA_USER_SEASON_PLACEMENT_SR: placement["sr"],
            const.DATA_USER_SEASON_CURRENT_SR: sr,
            const.DATA_USER_SEASON_CURRENT_RANK: rank["rank"],
            const.DATA_USER_SEASON_CURRENT_DIVISION: rank["division"],
            const.DATA_USER_SEASON_PEAK_RANK: rank["rank"],
            const.DATA_USER_SEASON_INTENTIONS_COMPLETED: 0,
            const.DATA_USER_SEASON_WRAPS_COMPLETED: 0,
        }

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def async_ensure_current_season(self, today: date | None = None) -> SeasonData:
        """Return this month's season, ending stale seasons and creating it if needed."""
        today = today or dt_utils.dt_today_local()
        season_id = SeasonEngine.season_id(today)

        for season in self.store.query(
            const.DATA_SEASONS,
            [(const.DATA_SEASON_STATUS, const.QUERY_OP_EQ, const.SEASON_STATUS_ACTIVE)],
        ):
            if season[const.DATA_SEASON_ID] != season_id:
                const.LOGGER.info(
                    "INFO: Season %s has passed its end date, ending it",
                    season[const.DATA_SEASON_ID],
                )
                await self.async_end_season(season[const.DATA_SEASON_ID])

        season = self.get_season(season_id)
        if season is None:
            season = await self.async_start_season(season_id)
        return season

    async def async_start_season(self, season_id: str) -> SeasonData:
        """Create a season and place every member by soft reset.

        Starting an existing season returns it unchanged.
        """
        async with self._season_lock:
            existing = self.get_season(season_id)
            if existing is not None:
                return existing

            start, end = SeasonEngine.season_window(season_id)
            season_number = len(self.store.query(const.DATA_SEASONS)) + 1
            season: Document = {
                const.DATA_SEASON_ID: season_id,
                const.DATA_SEASON_NUMBER: season_number,
                const.DATA_SEASON_NAME: SeasonEngine.season_name(season_number, season_id),
                const.DATA_SEASON_START_DATE: start.isoformat(),
                const.DATA_SEASON_END_DATE: end.isoformat(),
                const.DATA_SEASON_STATUS: const.SEASON_STATUS_ACTIVE,
                const.DATA_SEASON_ENDED_AT: None,
            }
            writes: list[StoreWrite] = [
                set_merge_write(const.DATA_SEASONS, season_id, season)
            ]
            members = self.coordinator.roster_manager.list_members()
            writes.extend(
                set_merge_write(
                    const.DATA_USER_SEASONS,
                    user_season_doc_id(member[const.DATA_MEMBER_ID], season_id),
                    self._new_user_season(member, season_id),
                )
                for member in members
            )
            await self.async_commit(writes)

        const.LOGGER.info(
            "INFO: Started %s with %s member(s)",
            season[const.DATA_SEASON_NAME],
            len(members),
        )
        self.emit(const.SIGNAL_SUFFIX_SEASON_STARTED, season_id=season_id)
        return season  # type: ignore[return-value]

    async def async_end_season(self, season_id: str) -> int:
        """End a season: store each member's finish and reset season points.

        Returns:
            Number of members whose finish was recorded.

        Raises:
            NotFoundError: Season does not exist.
        """
        async with self._season_lock:
            season = self.get_season(season_id)
            if season is None:
                raise NotFoundError(
                    const.ERROR_SEASON_NOT_FOUND_FMT.format(season_id),
                    const.DATA_SEASONS,
                    season_id,
                )
            if season.get(const.DATA_SEASON_STATUS) == const.SEASON_STATUS_ENDED:
                const.LOGGER.debug("SeasonManager.end_season: %s already ended", season_id)
                return 0

            writes: list[StoreWrite] = []
            members = self.coordinator.roster_manager.list_members()
            for member in members:
                member_id = member[const.DATA_MEMBER_ID]
                season_points = member.get(const.DATA_MEMBER_SEASON_POINTS, 0)
                standing = self.get_member_standing(member_id, season_id)
                if standing is not None:
                    rank_key = standing[const.DATA_USER_SEASON_CURRENT_RANK]
                    division = standing[const.DATA_USER_SEASON_CURRENT_DIVISION]
                else:
                    rank = SeasonEngine.rank_from_sr(
                        SeasonEngine.points_to_sr(season_points)
                    )
                    rank_key, division = rank["rank"], rank["division"]
                writes.append(
                    set_merge_write(
                        const.DATA_MEMBERS,
                        member_id,
                        {
                            const.DATA_MEMBER_LAST_SEASON_RANK: rank_key,
                            const.DATA_MEMBER_LAST_SEASON_DIVISION: division,
                            const.DATA_MEMBER_LAST_SEASON_POINTS: season_points,
                            const.DATA_MEMBER_SEASON_POINTS: 0,
                        },
                    )
                )
            writes.append(
                set_merge_write(
                    const.DATA_SEASONS,
                    season_id,
                    {
                        const.DATA_SEASON_STATUS: const.SEASON_STATUS_ENDED,
                        const.DATA_SEASON_ENDED_AT: dt_utils.dt_now_iso(),
                    },
                )
            )
            await self.async_commit(writes)

        const.LOGGER.info(
            "INFO: Ended season %s for %s member(s)", season_id, len(members)
        )
        self.emit(const.SIGNAL_SUFFIX_SEASON_UPDATED, season_id=season_id)
        return len(members)

    # ==========================================================================
    # Standings
    # ==========================================================================

    async def async_apply_points(
        self, member_id: str, delta: int, activity: str | None = None
    ) -> UserSeasonData:
        """Add points to a member's current season and refresh SR and rank.

        Raises:
            NotFoundError: Member does not exist.
        """
        member = self.coordinator.roster_manager.require_member(member_id)
        season = await self.async_ensure_current_season()
        season_id = season[const.DATA_SEASON_ID]
        doc_id = user_season_doc_id(member_id, season_id)

        async with self._season_lock:
            writes: list[StoreWrite] = []
            standing: Document | None = self.store.get(const.DATA_USER_SEASONS, doc_id)
            if standing is None:
                standing = self._new_user_season(member, season_id)
                writes.append(set_merge_write(const.DATA_USER_SEASONS, doc_id, standing))

            season_points = standing.get(const.DATA_USER_SEASON_POINTS, 0) + delta
            sr = SeasonEngine.current_sr(
                standing.get(const.DATA_USER_SEASON_PLACEMENT_SR, 0),
                season_points,
                standing.get(const.DATA_USER_SEASON_STARTING_BONUS, 0),
            )
            rank = SeasonEngine.rank_from_sr(sr)
            updates: Document = {
                const.DATA_USER_SEASON_CURRENT_SR: sr,
                const.DATA_USER_SEASON_CURRENT_RANK: rank["rank"],
                const.DATA_USER_SEASON_CURRENT_DIVISION: rank["division"],
                const.DATA_USER_SEASON_PEAK_RANK: SeasonEngine.higher_rank(
                    standing.get(const.DATA_USER_SEASON_PEAK_RANK), rank["rank"]
                ),
            }
            writes.append(
                increment_write(
                    const.DATA_USER_SEASONS, doc_id, const.DATA_USER_SEASON_POINTS, delta
                )
            )
            if activity in _ACTIVITY_COUNTERS:
                writes.append(
                    increment_write(
                        const.DATA_USER_SEASONS, doc_id, _ACTIVITY_COUNTERS[activity], 1
                    )
                )
            writes.append(set_merge_write(const.DATA_USER_SEASONS, doc_id, updates))
            await self.async_commit(writes)

        const.LOGGER.debug(
            "SeasonManager.apply_points: member=%s, season=%s, points=%s, sr=%s, "
            "rank=%s %s",
            member_id,
            season_id,
            season_points,
            sr,
            rank["rank"],
            rank["division"],
        )
        self.emit(
            const.SIGNAL_SUFFIX_SEASON_UPDATED, member_id=member_id, season_id=season_id
        )
        return self.get_member_standing(member_id, season_id)  # type: ignore[return-value]

    def get_season_leaderboard(
        self, season_id: str | None = None, limit: int = const.DEFAULT_LEADERBOARD_LIMIT
    ) -> list[dict[str, Any]]:
        """Return season standings ordered by SR, highest first.

        Raises:
            NotFoundError: An explicit season id does not exist.
        """
        if season_id is None:
            season_id = SeasonEngine.season_id(dt_utils.dt_today_local())
        elif self.get_season(season_id) is None:
            raise NotFoundError(
                const.ERROR_SEASON_NOT_FOUND_FMT.format(season_id),
                const.DATA_SEASONS,
                season_id,
            )

        standings = self.store.query(
            const.DATA_USER_SEASONS,
            [(const.DATA_USER_SEASON_SEASON_ID, const.QUERY_OP_EQ, season_id)],
            order_by=(const.DATA_USER_SEASON_CURRENT_SR, True),
            limit=limit,
        )
        leaderboard: list[dict[str, Any]] = []
        for position, standing in enumerate(standings, start=1):
            member_id = standing[const.DATA_USER_SEASON_MEMBER_ID]
            member = self.coordinator.roster_manager.get_member(member_id)
            rank_key = standing[const.DATA_USER_SEASON_CURRENT_RANK]
            leaderboard.append(
                {
                    "position": position,
                    "member_id": member_id,
                    "name": member[const.DATA_MEMBER_NAME] if member else member_id,
                    "season_points": standing.get(const.DATA_USER_SEASON_POINTS, 0),
                    "skill_rating": standing[const.DATA_USER_SEASON_CURRENT_SR],
                    "rank": rank_key,
                    "rank_name": const.RANKS[rank_key][const.RANK_FIELD_NAME],
                    "division": standing[const.DATA_USER_SEASON_CURRENT_DIVISION],
                }
            )
        return leaderboard
