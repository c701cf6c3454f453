"""Check-in Manager - Morning intentions and evening wrap forms.

Saving a form writes the member's daily check-in, awards the activity points
through PointsManager, and (for the evening wrap) recalculates the streak.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..exceptions import ValidationError
from ..helpers.entity_helpers import checkin_doc_id
from ..store import set_merge_write
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import AwardResult, CheckInData, StreakResult


class CheckInManager(BaseManager):
    """Manager for daily check-in documents."""

    async def async_setup(self) -> None:
        """Check-in manager has no event subscriptions."""
        const.LOGGER.debug("CheckInManager: setup complete")

    def get_checkin(self, member_id: str, day: date | None = None) -> CheckInData | None:
        """Return a member's check-in for a day (default: today)."""
        iso_date = (day or dt_utils.dt_today_local()).isoformat()
        return self.store.get(  # type: ignore[return-value]
            const.DATA_CHECKINS, checkin_doc_id(member_id, iso_date)
        )

    async def _async_save_form(
        self, member_id: str, day: date, fields: dict[str, Any]
    ) -> None:
        iso_date = day.isoformat()
        await self.async_commit(
            [
                set_merge_write(
                    const.DATA_CHECKINS,
                    checkin_doc_id(member_id, iso_date),
                    {
                        const.DATA_CHECKIN_MEMBER_ID: member_id,
                        const.DATA_CHECKIN_DATE: iso_date,
                        **fields,
                        const.DATA_CHECKIN_UPDATED_AT: dt_utils.dt_now_iso(),
                    },
                )
            ]
        )

    async def async_save_morning_intentions(
        self,
        member_id: str,
        victory: str = "",
        focus: str = "",
        stuck: str = "",
        *,
        day: date | None = None,
    ) -> tuple[AwardResult, StreakResult]:
        """Save the morning form, award morning_intentions points and update the streak.

        Either form can complete the day, so both recalculate the streak.

        Returns:
            (award result, streak result)

        Raises:
            NotFoundError: Member does not exist.
            TransientStoreError: The check-in could not be saved.
        """
        self.coordinator.roster_manager.require_member(member_id)
        day = day or dt_utils.dt_today_local()

        await self._async_save_form(
            member_id,
            day,
            {
                const.DATA_CHECKIN_VICTORY: victory,
                const.DATA_CHECKIN_FOCUS: focus,
                const.DATA_CHECKIN_STUCK: stuck,
                const.DATA_CHECKIN_INTENTIONS_COMPLETED: True,
            },
        )
        const.LOGGER.debug(
            "CheckInManager.save_morning_intentions: member=%s, date=%s", member_id, day
        )
        self.emit(
            const.SIGNAL_SUFFIX_CHECKIN_SAVED,
            member_id=member_id,
            date=day.isoformat(),
            activity=const.ACTIVITY_MORNING_INTENTIONS,
        )
        award = await self.coordinator.points_manager.async_award_daily_activity_points(
            member_id, const.ACTIVITY_MORNING_INTENTIONS, day=day
        )
        streak = await self.coordinator.streak_manager.async_calculate_streak_for_today(
            member_id, today=day
        )
        return award, streak

    async def async_save_evening_wrap(
        self,
        member_id: str,
        accomplished: str = "",
        tomorrow: str = "",
        sales: int = 0,
        quotes: int = 0,
        *,
        day: date | None = None,
    ) -> tuple[AwardResult, StreakResult]:
        """Save the evening form, award evening_wrap points and update the streak.

        Returns:
            (award result, streak result)

        Raises:
            ValidationError: Negative sales or quotes.
            NotFoundError: Member does not exist.
            TransientStoreError: The check-in could not be saved.
        """
        for field, value in ((const.FIELD_SALES, sales), (const.FIELD_QUOTES, quotes)):
            if value < 0:
                raise ValidationError(const.ERROR_NEGATIVE_COUNT_FMT.format(field))

        self.coordinator.roster_manager.require_member(member_id)
        day = day or dt_utils.dt_today_local()

        await self._async_save_form(
            member_id,
            day,
            {
                const.DATA_CHECKIN_ACCOMPLISHED: accomplished,
                const.DATA_CHECKIN_TOMORROW: tomorrow,
                const.DATA_CHECKIN_SALES: int(sales),
                const.DATA_CHECKIN_QUOTES: int(quotes),
                const.DATA_CHECKIN_WRAP_COMPLETED: True,
            },
        )
        const.LOGGER.debug(
            "CheckInManager.save_evening_wrap: member=%s, date=%s, sales=%s, quotes=%s",
            member_id,
            day,
            sales,
            quotes,
        )
        self.emit(
            const.SIGNAL_SUFFIX_CHECKIN_SAVED,
            member_id=member_id,
            date=day.isoformat(),
            activity=const.ACTIVITY_EVENING_WRAP,
        )

        award = await self.coordinator.points_manager.async_award_daily_activity_points(
            member_id, const.ACTIVITY_EVENING_WRAP, day=day
        )
        streak = await self.coordinator.streak_manager.async_calculate_streak_for_today(
            member_id, today=day
        )
        return award, streak
