"""Streak Manager - Business-day streak calculation and achievement grants.

calculate_streak_for_today never raises. It returns one of three variants:
- StreakOk: the streak was computed (zero is a real answer)
- StreakNotFound: the member does not exist
- StreakFailed: the calculation or its persistence failed; stored data unchanged
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import TYPE_CHECKING

from .. import const
from ..engines.streak_engine import StreakEngine
from ..exceptions import SalesQuestError
from ..helpers.entity_helpers import checkin_doc_id
from ..store import set_merge_write
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import SalesQuestCoordinator
    from ..type_defs import CheckInData, StoreWrite, StreakResult


class StreakManager(BaseManager):
    """Manager for streaks and streak/sales achievements."""

    def __init__(self, hass: HomeAssistant, coordinator: SalesQuestCoordinator) -> None:
        """Initialize the manager."""
        super().__init__(hass, coordinator)
        self._streak_lock = asyncio.Lock()

    async def async_setup(self) -> None:
        """Streak manager has no event subscriptions."""
        const.LOGGER.debug("StreakManager: setup complete")

    def _checkin_getter(self, member_id: str) -> Callable[[date], CheckInData | None]:
        def _get(day: date) -> CheckInData | None:
            return self.store.get(  # type: ignore[return-value]
                const.DATA_CHECKINS, checkin_doc_id(member_id, day.isoformat())
            )

        return _get

    def count_sales_days(self, member_id: str) -> int:
        """Count recent check-ins with sales > 0 (most recent 30)."""
        return len(
            self.store.query(
                const.DATA_CHECKINS,
                [
                    (const.DATA_CHECKIN_MEMBER_ID, const.QUERY_OP_EQ, member_id),
                    (const.DATA_CHECKIN_SALES, const.QUERY_OP_GT, 0),
                ],
                order_by=(const.DATA_CHECKIN_DATE, True),
                limit=const.SALES_DAYS_QUERY_LIMIT,
            )
        )

    def count_completed_checkins(self, member_id: str) -> int:
        """Count check-ins with both morning and evening complete."""
        return len(
            self.store.query(
                const.DATA_CHECKINS,
                [
                    (const.DATA_CHECKIN_MEMBER_ID, const.QUERY_OP_EQ, member_id),
                    (const.DATA_CHECKIN_INTENTIONS_COMPLETED, const.QUERY_OP_EQ, True),
                    (const.DATA_CHECKIN_WRAP_COMPLETED, const.QUERY_OP_EQ, True),
                ],
            )
        )

    async def async_calculate_streak_for_today(
        self, member_id: str, *, today: date | None = None
    ) -> StreakResult:
        """Recalculate and persist a member's streak for today.

        Args:
            member_id: Member to evaluate
            today: Override for "today" (default: local date)
        """
        today = today or dt_utils.dt_today_local()
        calendar = self.coordinator.calendar

        member = self.store.get(const.DATA_MEMBERS, member_id)
        if member is None:
            const.LOGGER.debug(
                "StreakManager.calculate: member=%s not found", member_id
            )
            return {"status": "not_found", "member_id": member_id}

        previous_streak = int(member.get(const.DATA_MEMBER_STREAK, 0))
        existing = list(member.get(const.DATA_MEMBER_ACHIEVEMENTS, []))

        if not calendar.is_business_day(today):
            const.LOGGER.debug(
                "StreakManager.calculate: %s is not a business day, streak stays %s",
                today,
                previous_streak,
            )
            return {
                "status": "ok",
                "member_id": member_id,
                "streak": previous_streak,
                "previous_streak": previous_streak,
                "new_streak": False,
                "new_achievements": [],
                "all_achievements": existing,
                "business_day": False,
            }

        try:
            async with self._streak_lock:
                get_checkin = self._checkin_getter(member_id)
                today_checkin = get_checkin(today)
                member_updates: dict = {
                    const.DATA_MEMBER_LAST_STREAK_UPDATE: dt_utils.dt_now_iso(),
                }

                if StreakEngine.is_complete(today_checkin):
                    streak = StreakEngine.walk_streak(
                        today, get_checkin, calendar.previous_business_day
                    )
                    member_updates[const.DATA_MEMBER_LAST_ACTIVITY_DATE] = (
                        today.isoformat()
                    )
                elif StreakEngine.should_reset(
                    dt_utils.dt_parse_date(
                        member.get(const.DATA_MEMBER_LAST_ACTIVITY_DATE)
                    ),
                    today,
                    calendar.previous_business_day,
                ):
                    streak = 0
                else:
                    streak = previous_streak

                new_achievements = StreakEngine.evaluate_achievements(
                    streak,
                    self.count_sales_days(member_id),
                    self.count_completed_checkins(member_id),
                    existing,
                )
                all_achievements = StreakEngine.merge_achievements(
                    existing, new_achievements
                )
                member_updates[const.DATA_MEMBER_STREAK] = streak
                member_updates[const.DATA_MEMBER_ACHIEVEMENTS] = all_achievements

                writes: list[StoreWrite] = [
                    set_merge_write(const.DATA_MEMBERS, member_id, member_updates)
                ]
                if new_achievements and today_checkin is not None:
                    recorded = list(
                        today_checkin.get(const.DATA_CHECKIN_NEW_ACHIEVEMENTS, [])
                    )
                    writes.append(
                        set_merge_write(
                            const.DATA_CHECKINS,
                            checkin_doc_id(member_id, today.isoformat()),
                            {
                                const.DATA_CHECKIN_NEW_ACHIEVEMENTS: StreakEngine.merge_achievements(
                                    recorded, new_achievements
                                )
                            },
                        )
                    )
                await self.async_commit(writes)

        except (SalesQuestError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: StreakManager.calculate: member=%s failed: %s", member_id, err
            )
            return {"status": "failed", "member_id": member_id, "reason": str(err)}

        const.LOGGER.debug(
            "StreakManager.calculate: member=%s, streak %s -> %s, new achievements=%s",
            member_id,
            previous_streak,
            streak,
            new_achievements,
        )
        self.emit(
            const.SIGNAL_SUFFIX_STREAK_UPDATED,
            member_id=member_id,
            streak=streak,
            previous_streak=previous_streak,
        )
        for achievement_id in new_achievements:
            info = const.ACHIEVEMENTS[achievement_id]
            self.emit(
                const.SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED,
                member_id=member_id,
                achievement_id=achievement_id,
            )
            self.hass.bus.async_fire(
                const.EVENT_ACHIEVEMENT_UNLOCKED,
                {
                    "member_id": member_id,
                    "achievement_id": achievement_id,
                    "name": info[const.ACHIEVEMENT_FIELD_NAME],
                    "points": info[const.ACHIEVEMENT_FIELD_POINTS],
                },
            )

        return {
            "status": "ok",
            "member_id": member_id,
            "streak": streak,
            "previous_streak": previous_streak,
            "new_streak": streak > previous_streak,
            "new_achievements": new_achievements,
            "all_achievements": all_achievements,
            "business_day": True,
        }
