"""Points Manager - Idempotent daily activity awards.

award_daily_activity_points reads today's check-in, plans the award with
PointsEngine, then commits the check-in flags and all point counters in one
batch. It never raises: failures come back as an AwardResult with
success=False and the error message.
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import TYPE_CHECKING

from .. import const
from ..engines.points_engine import PointsEngine
from ..exceptions import SalesQuestError, ValidationError
from ..helpers.entity_helpers import checkin_doc_id
from ..store import increment_write, set_merge_write
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import SalesQuestCoordinator
    from ..type_defs import AwardResult, CheckInData, StoreWrite


class PointsManager(BaseManager):
    """Manager for daily activity points and counter rollover."""

    def __init__(self, hass: HomeAssistant, coordinator: SalesQuestCoordinator) -> None:
        """Initialize the manager with its award lock."""
        super().__init__(hass, coordinator)
        # Serialises read-plan-commit so two concurrent awards see each other
        self._award_lock = asyncio.Lock()

    async def async_setup(self) -> None:
        """Points manager has no event subscriptions."""
        const.LOGGER.debug("PointsManager: setup complete")

    async def async_award_daily_activity_points(
        self, member_id: str, activity: str, *, day: date | None = None
    ) -> AwardResult:
        """Award points for a completed daily activity.

        Args:
            member_id: Member earning the points
            activity: const.ACTIVITY_MORNING_INTENTIONS or const.ACTIVITY_EVENING_WRAP
            day: Check-in day (default: today, local time)

        Returns:
            AwardResult. `awarded` is False for a repeat of an already-paid
            activity; `bonus_awarded` is True only on the call that completes
            both activities.
        """
        result: AwardResult = {
            "success": False,
            "member_id": member_id,
            "activity": activity,
            "awarded": False,
            "points_awarded": 0,
            "bonus_awarded": False,
        }

        try:
            if not PointsEngine.is_valid_activity(activity):
                raise ValidationError(const.ERROR_INVALID_ACTIVITY_FMT.format(activity))

            async with self._award_lock:
                member = self.coordinator.roster_manager.require_member(member_id)
                iso_date = (day or dt_utils.dt_today_local()).isoformat()
                checkin_id = checkin_doc_id(member_id, iso_date)
                checkin: CheckInData | None = self.store.get(
                    const.DATA_CHECKINS, checkin_id
                )  # type: ignore[assignment]

                plan = PointsEngine.plan_award(checkin, activity)
                result["state"] = plan["next_state"]
                if not plan["awarded"]:
                    const.LOGGER.debug(
                        "PointsManager.award: %s already awarded for member=%s on %s",
                        activity,
                        member_id,
                        iso_date,
                    )
                    result["success"] = True
                    return result

                # Season points reset at the month boundary before this award lands.
                await self.coordinator.season_manager.async_ensure_current_season()

                total = PointsEngine.total_points(plan)
                new_xp = member.get(const.DATA_MEMBER_XP, 0) + total
                writes: list[StoreWrite] = [
                    set_merge_write(
                        const.DATA_CHECKINS,
                        checkin_id,
                        PointsEngine.checkin_updates(checkin, plan, member_id, iso_date),
                    ),
                    *(
                        increment_write(const.DATA_MEMBERS, member_id, counter, total)
                        for counter in const.MEMBER_POINT_COUNTERS
                    ),
                    set_merge_write(
                        const.DATA_MEMBERS,
                        member_id,
                        {const.DATA_MEMBER_LEVEL: PointsEngine.level_for_xp(new_xp)},
                    ),
                ]
                await self.async_commit(writes)

        except SalesQuestError as err:
            const.LOGGER.warning(
                "WARNING: PointsManager.award: member=%s, activity=%s failed: %s",
                member_id,
                activity,
                err,
            )
            result["error"] = str(err)
            return result

        result.update(
            success=True,
            awarded=True,
            points_awarded=total,
            bonus_awarded=plan["bonus"] > 0,
        )
        const.LOGGER.debug(
            "PointsManager.award: member=%s, activity=%s, points=%s, bonus=%s, state=%s",
            member_id,
            activity,
            plan["points"],
            plan["bonus"],
            plan["next_state"],
        )
        self.emit(
            const.SIGNAL_SUFFIX_POINTS_AWARDED,
            member_id=member_id,
            activity=activity,
            delta=total,
            bonus=plan["bonus"],
            date=iso_date,
        )
        return result

    async def async_reset_today_points(self) -> int:
        """Clear today_points for every member (daily rollover).

        Returns:
            Number of members reset.
        """
        writes: list[StoreWrite] = [
            set_merge_write(
                const.DATA_MEMBERS,
                member[const.DATA_MEMBER_ID],
                {const.DATA_MEMBER_TODAY_POINTS: 0},
            )
            for member in self.store.query(
                const.DATA_MEMBERS,
                [(const.DATA_MEMBER_TODAY_POINTS, const.QUERY_OP_NE, 0)],
            )
        ]
        await self.async_commit(writes)
        const.LOGGER.debug("PointsManager: reset today_points for %s member(s)", len(writes))
        return len(writes)
