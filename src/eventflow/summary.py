"""Dashboard figures derived from a profile and its records."""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from eventflow.models.profile import Profile
from eventflow.models.records import Expense, Guest, Inspiration, Task, Vendor


class BudgetSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: Decimal
    used: Decimal
    remaining: Decimal
    by_category: dict[str | None, Decimal]

    @property
    def over_budget(self) -> bool:
        return self.remaining < 0


class TaskProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    completed: int
    total: int

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 0.0
        return self.completed / self.total


class DashboardSummary(BaseModel):
    """Everything the dashboard header and section badges show for a profile."""

    model_config = ConfigDict(frozen=True)

    profile: Profile
    budget: BudgetSummary
    guest_count: int
    tasks: TaskProgress
    vendor_count: int
    inspiration_count: int
    days_until_event: int

    @property
    def countdown(self) -> str:
        return countdown_label(self.days_until_event)


def summarize_budget(budget: Decimal, expenses: Iterable[Expense]) -> BudgetSummary:
    used = Decimal(0)
    by_category: dict[str | None, Decimal] = {}
    for expense in expenses:
        used += expense.amount
        by_category[expense.category] = by_category.get(expense.category, Decimal(0)) + expense.amount
    return BudgetSummary(total=budget, used=used, remaining=budget - used, by_category=by_category)


def count_guests(guests: Iterable[Guest]) -> int:
    """Total headcount across all guest parties."""
    return sum(guest.count for guest in guests)


def task_progress(tasks: Iterable[Task]) -> TaskProgress:
    completed = 0
    total = 0
    for task in tasks:
        total += 1
        if task.completed:
            completed += 1
    return TaskProgress(completed=completed, total=total)


def days_until(event_date: date, today: date | datetime) -> int:
    """Whole days from *today* to the event, rounded up; negative once past.

    A datetime *today* counts partial days, so the evening before the event
    still reports 1.
    """
    if isinstance(today, datetime):
        start = datetime.combine(event_date, datetime.min.time(), tzinfo=today.tzinfo)
        return math.ceil((start - today).total_seconds() / 86400)
    return (event_date - today).days


def countdown_label(days: int) -> str:
    if days > 0:
        return str(days)
    if days == 0:
        return "Today!"
    return "Past"


def build_dashboard(
    profile: Profile,
    *,
    expenses: Iterable[Expense] = (),
    guests: Iterable[Guest] = (),
    tasks: Iterable[Task] = (),
    vendors: Iterable[Vendor] = (),
    inspirations: Iterable[Inspiration] = (),
    today: date | datetime | None = None,
) -> DashboardSummary:
    if today is None:
        today = date.today()
    return DashboardSummary(
        profile=profile,
        budget=summarize_budget(profile.budget, expenses),
        guest_count=count_guests(guests),
        tasks=task_progress(tasks),
        vendor_count=sum(1 for _ in vendors),
        inspiration_count=sum(1 for _ in inspirations),
        days_until_event=days_until(profile.event_date, today),
    )
