"""Remote outcome classification.

Decides whether a remote answer is used as-is or the request is replayed
against the local store.  The boundary is data, not code: deployments that
answer with other structured types (``application/problem+json``,
``text/json``) widen ``json_content_types`` instead of patching the
dispatcher.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from eventflow._constants import JSON_CONTENT_TYPES
from eventflow.models.responses import RemoteResponse


def media_type(content_type: str | None) -> str:
    """Return the bare, lower-cased media type of a Content-Type header."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class FallbackPolicy(BaseModel):
    """Classifier for remote outcomes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    json_content_types: frozenset[str] = Field(default_factory=lambda: frozenset(JSON_CONTENT_TYPES))
    success_min: int = Field(default=200, ge=100, le=599)
    success_max: int = Field(default=299, ge=100, le=599)
    fallback_on_transport_error: bool = True

    @model_validator(mode="after")
    def _check_range(self) -> FallbackPolicy:
        if self.success_min > self.success_max:
            raise ValueError("success_min must not exceed success_max")
        return self

    def is_success_status(self, status: int) -> bool:
        return self.success_min <= status <= self.success_max

    def is_json_response(self, response: RemoteResponse) -> bool:
        return media_type(response.content_type) in self.json_content_types

    def should_fallback(self, response: RemoteResponse) -> bool:
        """Return True when *response* must not be handed to the caller."""
        if not self.is_success_status(response.status):
            return True
        return not self.is_json_response(response)
