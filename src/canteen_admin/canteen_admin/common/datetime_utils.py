from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..core.constants import BREAKFAST_HOURS, LUNCH_HOURS
from ..core.enums import MealSlot


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_window(day: date) -> tuple[datetime, datetime]:
    """Half-open [start, end) covering one calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def meal_slot_for(moment: datetime) -> MealSlot:
    hour = moment.hour
    if BREAKFAST_HOURS[0] <= hour < BREAKFAST_HOURS[1]:
        return MealSlot.BREAKFAST
    if LUNCH_HOURS[0] <= hour < LUNCH_HOURS[1]:
        return MealSlot.LUNCH
    return MealSlot.DINNER
