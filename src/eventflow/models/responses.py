"""Response envelopes shared by the transport and the dispatcher."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class RemoteResponse:
    """Raw answer from the remote endpoint, before classification."""

    status: int
    content_type: str
    text: str
    url: str = ""

    def json(self) -> Any:
        """Decode the body. Raises :class:`json.JSONDecodeError` on bad JSON."""
        return json.loads(self.text)


class ResponseSource(StrEnum):
    REMOTE = "remote"
    LOCAL = "local"


class ApiResponse(BaseModel):
    """Uniform result of a dispatched operation.

    ``body`` is the record, list of records, or acknowledgement returned by
    whichever side served the request. ``source`` tells which side that was;
    callers are not expected to branch on it.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool = True
    status: int = 200
    body: Any = None
    source: ResponseSource = ResponseSource.REMOTE
