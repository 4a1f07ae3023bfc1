"""Base models for eventflow records.

Every record model inherits from :class:`EventflowModel` which provides:

* ``alias_generator=to_camel`` so the camelCase keys used on the wire
  and in the local store map to snake_case fields.
* A ``model_validator(mode="before")`` that drops blank form values
  (``""``, whitespace) so the field default is used instead.
* :meth:`EventflowModel.to_payload` producing the JSON-ready camelCase dict.

Partial-update models inherit from :class:`PatchModel`, whose payload only
carries the fields the caller actually set.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class EventflowModel(BaseModel):
    """Base for records and record payloads."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        """Drop ``None`` and blank-string values from *values*."""
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return EventflowModel._clean_dict(values)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape the API and local store use."""
        return self.model_dump(mode="json", by_alias=True)


class PatchModel(EventflowModel):
    """Base for partial updates: every field optional, only set fields sent.

    Blank strings become ``None`` instead of being dropped, so a patch can
    clear an optional field.  Fields listed in ``required_fields`` are
    required on the stored record and can never be cleared: a blank or
    ``None`` value for them is dropped, leaving the stored value as is.
    """

    required_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        keep = cls.required_fields | {to_camel(name) for name in cls.required_fields}
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if isinstance(value, str) and not value.strip():
                value = None
            if value is None and key in keep:
                continue
            cleaned[key] = value
        return cleaned

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
