"""Month calendar around the event date.

The grid is Sunday-first and made of whole weeks: it starts on the Sunday
on or before the 1st of the event's month and ends on the Saturday on or
after the month's last day.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

MONTH_NAMES: tuple[str, ...] = tuple(calendar.month_name[1:])


@dataclass(frozen=True)
class CalendarDay:
    day: date
    in_month: bool
    is_event_day: bool


@dataclass(frozen=True)
class CalendarMonth:
    year: int
    month: int
    event_day: int
    days: tuple[CalendarDay, ...]

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    def weeks(self) -> list[tuple[CalendarDay, ...]]:
        return [self.days[i : i + 7] for i in range(0, len(self.days), 7)]


def _sunday_offset(day: date) -> int:
    # date.weekday(): Monday=0 .. Sunday=6
    return (day.weekday() + 1) % 7


def month_grid(event_date: date) -> CalendarMonth:
    first = event_date.replace(day=1)
    last = first.replace(day=calendar.monthrange(first.year, first.month)[1])
    start = first - timedelta(days=_sunday_offset(first))
    end = last + timedelta(days=6 - _sunday_offset(last))

    days: list[CalendarDay] = []
    current = start
    while current <= end:
        days.append(
            CalendarDay(
                day=current,
                in_month=current.month == event_date.month,
                is_event_day=current == event_date,
            )
        )
        current += timedelta(days=1)

    return CalendarMonth(
        year=event_date.year,
        month=event_date.month,
        event_day=event_date.day,
        days=tuple(days),
    )
