"""Profile model: the event owner and the root of every other record."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from pydantic import Field

from eventflow.models._base import EventflowModel, PatchModel


class NewProfile(EventflowModel):
    """Payload for creating a profile (the onboarding form)."""

    name: str
    email: str
    event_name: str
    event_type: str
    custom_event_type: str | None = None
    """Free-text type, used when ``event_type`` is ``"other"``."""
    event_date: date
    partner_name: str | None = None
    budget: Decimal = Field(ge=0)
    """Total budget; sent as decimal text."""


class Profile(NewProfile):
    """A stored profile."""

    id: str
    created_at: datetime | None = None

    @property
    def display_event_type(self) -> str:
        """Event type as shown on the dashboard header."""
        if self.event_type == "other" and self.custom_event_type:
            return self.custom_event_type
        return self.event_type[:1].upper() + self.event_type[1:]


class ProfileUpdate(PatchModel):
    required_fields: ClassVar[frozenset[str]] = frozenset(
        {"name", "email", "event_name", "event_type", "event_date", "budget"}
    )

    name: str | None = None
    email: str | None = None
    event_name: str | None = None
    event_type: str | None = None
    custom_event_type: str | None = None
    event_date: date | None = None
    partner_name: str | None = None
    budget: Decimal | None = Field(default=None, ge=0)
