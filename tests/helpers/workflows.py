"""Check-in and goal workflow helpers for SalesQuest tests."""

from datetime import date

from custom_components.salesquest import const
from custom_components.salesquest.coordinator import SalesQuestCoordinator
from custom_components.salesquest.helpers.entity_helpers import checkin_doc_id
from custom_components.salesquest.store import set_merge_write


async def complete_day(
    coordinator: SalesQuestCoordinator,
    member_id: str,
    day: date,
    sales: int = 0,
    quotes: int = 0,
):
    """Run both daily forms for a member on a day.

    Returns:
        (morning award, evening award, streak result)
    """
    morning, _ = await coordinator.checkin_manager.async_save_morning_intentions(
        member_id, "Close two policies", "Follow-ups", "", day=day
    )
    evening, streak = await coordinator.checkin_manager.async_save_evening_wrap(
        member_id, "Closed one", "Call back leads", sales, quotes, day=day
    )
    return morning, evening, streak


async def seed_checkins(
    coordinator: SalesQuestCoordinator,
    member_id: str,
    days: list[date],
    *,
    complete: bool = True,
    sales: int = 0,
) -> None:
    """Write check-in documents directly (no points, no streak update)."""
    await coordinator.store.async_batch(
        [
            set_merge_write(
                const.DATA_CHECKINS,
                checkin_doc_id(member_id, day.isoformat()),
                {
                    const.DATA_CHECKIN_MEMBER_ID: member_id,
                    const.DATA_CHECKIN_DATE: day.isoformat(),
                    const.DATA_CHECKIN_INTENTIONS_COMPLETED: True,
                    const.DATA_CHECKIN_WRAP_COMPLETED: complete,
                    const.DATA_CHECKIN_SALES: sales,
                },
            )
            for day in days
        ]
    )


def member_doc(coordinator: SalesQuestCoordinator, member_id: str) -> dict:
    """Return the stored member document."""
    return coordinator.store.get(const.DATA_MEMBERS, member_id)
