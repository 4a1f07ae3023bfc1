"""Helpers for safe debug logging.

Records carry personal data: names of guests, e-mail addresses, vendor
contacts, free-text notes.  :func:`redact_for_log` turns a payload, a
record model, a list of records or a raw response body into something that
can go into DEBUG logs.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

# Compared after lower-casing and dropping underscores, so ``partner_name``
# and ``partnerName`` are the same key.
_PERSONAL_KEYS: frozenset[str] = frozenset(
    {
        "email",
        "contact",
        "partnername",
        "notes",
        "authorization",
        "cookie",
    }
)

_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")

REDACTED = "<redacted>"


def _is_personal(key: str) -> bool:
    return key.replace("_", "").lower() in _PERSONAL_KEYS


def _clip(text: str, max_string: int) -> str:
    text = _EMAIL_RE.sub("<email>", text)
    if len(text) <= max_string:
        return text
    return f"{text[:max_string]}…<+{len(text) - max_string} chars>"


def redact_for_log(
    value: Any,
    *,
    max_string: int = 512,
    max_items: int = 20,
    _depth: int = 0,
) -> Any:
    """Return a copy of *value* safe to log.

    Personal fields are replaced by ``<redacted>``, e-mail addresses inside
    any string (raw HTML or JSON bodies included) become ``<email>``, long
    strings are cut at *max_string* characters and record lists at
    *max_items* entries.
    """
    if _depth > 10:
        return "<nested>"

    def again(item: Any) -> Any:
        return redact_for_log(item, max_string=max_string, max_items=max_items, _depth=_depth + 1)

    if isinstance(value, BaseModel):
        return again(value.model_dump(mode="json", by_alias=True))
    if isinstance(value, str):
        return _clip(value, max_string)
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, (Decimal, date)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, Mapping):
        return {str(k): REDACTED if _is_personal(str(k)) else again(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        shown = [again(item) for item in value[:max_items]]
        if len(value) > max_items:
            shown.append(f"<+{len(value) - max_items} more>")
        return shown
    return repr(value)
