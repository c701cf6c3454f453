"""Points Engine - Pure logic for daily check-in point awards.

This engine provides stateless functions for:
- The per-check-in award state machine (CheckInState)
- Planning an activity award (points, bonus, next state)
- Building the check-in and member field updates for an award
- Level derivation from XP

The award guard is a total function over (state, activity): every pair has a
defined outcome, and the daily bonus is paid exactly on the transition into
BOTH_DONE, whichever activity arrives second.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
State management belongs in PointsManager.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from ..type_defs import AwardPlan, CheckInData


class CheckInState(StrEnum):
    """Award progress of one daily check-in."""

    EMPTY = "empty"
    MORNING_DONE = "morning_done"
    EVENING_DONE = "evening_done"
    BOTH_DONE = "both_done"


# (state, activity) -> next state. Pairs not listed leave the state unchanged
# and award nothing.
_TRANSITIONS: dict[tuple[CheckInState, str], CheckInState] = {
    (CheckInState.EMPTY, const.ACTIVITY_MORNING_INTENTIONS): CheckInState.MORNING_DONE,
    (CheckInState.EMPTY, const.ACTIVITY_EVENING_WRAP): CheckInState.EVENING_DONE,
    (CheckInState.MORNING_DONE, const.ACTIVITY_EVENING_WRAP): CheckInState.BOTH_DONE,
    (CheckInState.EVENING_DONE, const.ACTIVITY_MORNING_INTENTIONS): CheckInState.BOTH_DONE,
}


class PointsEngine:
    """Pure logic engine for daily activity awards.

    All methods are static - no instance state.
    """

    @staticmethod
    def is_valid_activity(activity: str) -> bool:
        """Return True for morning_intentions and evening_wrap."""
        return activity in const.ACTIVITY_TYPES

    @staticmethod
    def state_of(checkin: CheckInData | None) -> CheckInState:
        """Derive the award state from a check-in's points_awarded flags.

        Args:
            checkin: Check-in document, or None when no check-in exists yet

        Returns:
            The CheckInState implied by which activities have been paid
        """
        flags = (checkin or {}).get(const.DATA_CHECKIN_POINTS_AWARDED) or {}
        morning = bool(flags.get(const.ACTIVITY_MORNING_INTENTIONS))
        evening = bool(flags.get(const.ACTIVITY_EVENING_WRAP))
        if morning and evening:
            return CheckInState.BOTH_DONE
        if morning:
            return CheckInState.MORNING_DONE
        if evening:
            return CheckInState.EVENING_DONE
        return CheckInState.EMPTY

    @staticmethod
    def is_bonus_paid(checkin: CheckInData | None) -> bool:
        """Return True when the daily bonus flag is already set."""
        flags = (checkin or {}).get(const.DATA_CHECKIN_POINTS_AWARDED) or {}
        return bool(flags.get(const.ACTIVITY_DAILY_BONUS))

    @staticmethod
    def next_state(state: CheckInState, activity: str) -> CheckInState:
        """Return the state after awarding `activity` (unchanged when already paid)."""
        return _TRANSITIONS.get((state, activity), state)

    @staticmethod
    def plan_award(checkin: CheckInData | None, activity: str) -> AwardPlan:
        """Plan the award for completing `activity` on a check-in.

        Args:
            checkin: Today's check-in (None if not yet created)
            activity: const.ACTIVITY_MORNING_INTENTIONS or const.ACTIVITY_EVENING_WRAP

        Returns:
            AwardPlan; `awarded` is False and points are 0 when the activity
            was already paid today.

        Raises:
            ValueError: Unknown activity.
        """
        if not PointsEngine.is_valid_activity(activity):
            raise ValueError(const.ERROR_INVALID_ACTIVITY_FMT.format(activity))

        state = PointsEngine.state_of(checkin)
        new_state = PointsEngine.next_state(state, activity)
        if new_state == state:
            return {
                "activity": activity,
                "points": 0,
                "bonus": 0,
                "previous_state": state.value,
                "next_state": state.value,
                "awarded": False,
            }

        bonus = 0
        if new_state == CheckInState.BOTH_DONE and not PointsEngine.is_bonus_paid(
            checkin
        ):
            bonus = const.POINTS_DAILY_BONUS

        return {
            "activity": activity,
            "points": const.ACTIVITY_POINTS[activity],
            "bonus": bonus,
            "previous_state": state.value,
            "next_state": new_state.value,
            "awarded": True,
        }

    @staticmethod
    def checkin_updates(
        checkin: CheckInData | None, plan: AwardPlan, member_id: str, iso_date: str
    ) -> dict[str, Any]:
        """Build the check-in set-merge payload for an awarded plan."""
        flags: dict[str, bool] = {plan["activity"]: True}
        if plan["bonus"]:
            flags[const.ACTIVITY_DAILY_BONUS] = True
        previous_total = (checkin or {}).get(const.DATA_CHECKIN_TOTAL_DAILY_POINTS, 0)
        return {
            const.DATA_CHECKIN_MEMBER_ID: member_id,
            const.DATA_CHECKIN_DATE: iso_date,
            const.DATA_CHECKIN_POINTS_AWARDED: flags,
            const.DATA_CHECKIN_AWARD_STATE: plan["next_state"],
            const.DATA_CHECKIN_TOTAL_DAILY_POINTS: previous_total
            + plan["points"]
            + plan["bonus"],
        }

    @staticmethod
    def total_points(plan: AwardPlan) -> int:
        """Return the activity points plus any bonus."""
        return plan["points"] + plan["bonus"]

    @staticmethod
    def level_for_xp(xp: int) -> int:
        """Return the level for an XP total (1000 XP per level, starting at 1).

        Examples:
            level_for_xp(0) → 1
            level_for_xp(2500) → 3
        """
        return max(0, int(xp)) // const.XP_PER_LEVEL + 1
