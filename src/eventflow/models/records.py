"""Records owned by a profile: expenses, vendors, guests, tasks, inspirations.

Each kind has a ``New*`` payload model (what a form submits), the stored
model (payload plus ``id`` and any store-assigned field) and, where the
dashboard can edit the record, a ``*Update`` patch model.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from pydantic import Field

from eventflow.models._base import EventflowModel, PatchModel


class OwnedModel(EventflowModel):
    user_id: str
    """Id of the owning profile."""


# ------------------------------------------------------------------
# Expenses
# ------------------------------------------------------------------


class NewExpense(OwnedModel):
    name: str
    amount: Decimal
    category: str | None = None


class Expense(NewExpense):
    id: str
    date: datetime | None = None
    """Record time, assigned on insert."""


class ExpenseUpdate(PatchModel):
    required_fields: ClassVar[frozenset[str]] = frozenset({"name", "amount"})

    name: str | None = None
    amount: Decimal | None = None
    category: str | None = None


# ------------------------------------------------------------------
# Vendors
# ------------------------------------------------------------------


class NewVendor(OwnedModel):
    name: str
    contact: str
    service_type: str | None = None
    notes: str | None = None


class Vendor(NewVendor):
    id: str


class VendorUpdate(PatchModel):
    required_fields: ClassVar[frozenset[str]] = frozenset({"name", "contact"})

    name: str | None = None
    contact: str | None = None
    service_type: str | None = None
    notes: str | None = None


# ------------------------------------------------------------------
# Guests
# ------------------------------------------------------------------


class NewGuest(OwnedModel):
    name: str
    count: int = Field(default=1, ge=1)
    """Number of people in the party."""
    relationship: str | None = None
    notes: str | None = None


class Guest(NewGuest):
    id: str


class GuestUpdate(PatchModel):
    required_fields: ClassVar[frozenset[str]] = frozenset({"name", "count"})

    name: str | None = None
    count: int | None = Field(default=None, ge=1)
    relationship: str | None = None
    notes: str | None = None


# ------------------------------------------------------------------
# Tasks
# ------------------------------------------------------------------


class NewTask(OwnedModel):
    description: str
    completed: bool = False
    priority: str = "medium"
    due_date: date | None = None


class Task(NewTask):
    id: str


class TaskUpdate(PatchModel):
    required_fields: ClassVar[frozenset[str]] = frozenset({"description", "completed", "priority"})

    description: str | None = None
    completed: bool | None = None
    priority: str | None = None
    due_date: date | None = None


# ------------------------------------------------------------------
# Inspirations
# ------------------------------------------------------------------


class NewInspiration(OwnedModel):
    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    category: str | None = None


class Inspiration(NewInspiration):
    id: str
