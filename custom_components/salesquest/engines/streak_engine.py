"""Streak Engine - Pure logic for business-day streaks and achievements.

This engine provides stateless functions for:
- Deciding whether a check-in qualifies (both morning and evening complete)
- Walking backward through previous business days to count a streak
- Deciding whether an unqualified today breaks the streak
- Evaluating achievement thresholds (streak, sales-days, total check-ins)
- Streak milestone progress

The business-day calendar is injected as a `previous_business_day` callable
so holiday configuration never touches the walk itself.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Persistence belongs in StreakManager.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ..type_defs import CheckInData, MilestoneProgress


class StreakEngine:
    """Pure logic engine for streak calculation.

    All methods are static - no instance state.
    """

    @staticmethod
    def is_complete(checkin: CheckInData | None) -> bool:
        """Return True when both daily check-ins are complete."""
        if not checkin:
            return False
        return bool(
            checkin.get(const.DATA_CHECKIN_INTENTIONS_COMPLETED)
            and checkin.get(const.DATA_CHECKIN_WRAP_COMPLETED)
        )

    @staticmethod
    def walk_streak(
        today: date,
        get_checkin: Callable[[date], CheckInData | None],
        previous_business_day: Callable[[date], date],
        max_days: int = const.MAX_STREAK_DAYS,
    ) -> int:
        """Count consecutive qualifying business days ending today.

        Args:
            today: Day the streak ends on
            get_checkin: Returns the check-in for a day (None if absent)
            previous_business_day: Returns the business day before a day
            max_days: Longest streak reported

        Returns:
            0 if today does not qualify, else 1 + the number of consecutive
            qualifying previous business days, capped at max_days.
        """
        if not StreakEngine.is_complete(get_checkin(today)):
            return 0

        streak = 1
        day = today
        while streak < max_days:
            day = previous_business_day(day)
            if not StreakEngine.is_complete(get_checkin(day)):
                break
            streak += 1
        return streak

    @staticmethod
    def should_reset(
        last_activity: date | None,
        today: date,
        previous_business_day: Callable[[date], date],
    ) -> bool:
        """Return True when an unqualified today means the streak is broken.

        The streak survives only when the last qualifying day is exactly the
        previous business day (today is still pending).
        """
        if last_activity is None:
            return True
        return last_activity != previous_business_day(today)

    @staticmethod
    def evaluate_achievements(
        streak: int,
        sales_days: int,
        completed_checkins: int,
        existing: Iterable[str],
    ) -> list[str]:
        """Return achievement ids newly crossed, in catalog order.

        Args:
            streak: Current streak length
            sales_days: Number of days with sales > 0 (recent window)
            completed_checkins: Number of fully completed check-ins
            existing: Achievement ids already granted

        Returns:
            Ids whose threshold is met and which are not in `existing`.
        """
        owned = set(existing)
        measures = {
            const.ACHIEVEMENT_KIND_STREAK: streak,
            const.ACHIEVEMENT_KIND_SALES_DAYS: sales_days,
            const.ACHIEVEMENT_KIND_CHECKINS: completed_checkins,
        }
        unlocked: list[str] = []
        for achievement_id, info in const.ACHIEVEMENTS.items():
            if achievement_id in owned:
                continue
            value = measures.get(info[const.ACHIEVEMENT_FIELD_KIND], 0)
            if value >= info[const.ACHIEVEMENT_FIELD_THRESHOLD]:
                unlocked.append(achievement_id)
        return unlocked

    @staticmethod
    def merge_achievements(existing: Iterable[str], new: Iterable[str]) -> list[str]:
        """Union preserving first-seen order."""
        merged: list[str] = []
        for achievement_id in [*existing, *new]:
            if achievement_id not in merged:
                merged.append(achievement_id)
        return merged

    @staticmethod
    def next_milestone(streak: int) -> int | None:
        """Return the next streak milestone above `streak`, or None past the last."""
        for milestone in sorted(const.STREAK_MILESTONES):
            if milestone > streak:
                return milestone
        return None

    @staticmethod
    def milestone_progress(streak: int) -> MilestoneProgress:
        """Return progress from the previous milestone toward the next one.

        Example:
            streak 5 → next 7, previous 3, progress 50, days_remaining 2
        """
        milestones = sorted(const.STREAK_MILESTONES)
        previous = max((m for m in milestones if m <= streak), default=0)
        upcoming = StreakEngine.next_milestone(streak)
        if upcoming is None:
            return {
                "next_milestone": None,
                "previous_milestone": previous,
                "progress": 100,
                "days_remaining": 0,
            }
        span = upcoming - previous
        return {
            "next_milestone": upcoming,
            "previous_milestone": previous,
            "progress": int((streak - previous) * 100 / span),
            "days_remaining": upcoming - streak,
        }
