from __future__ import annotations

import pytest
from pydantic import ValidationError

from eventflow.models.responses import RemoteResponse
from eventflow.policy import FallbackPolicy, media_type


def _resp(status: int, content_type: str) -> RemoteResponse:
    return RemoteResponse(status=status, content_type=content_type, text="")


def test_media_type_strips_parameters() -> None:
    assert media_type("Application/JSON; charset=utf-8") == "application/json"
    assert media_type(None) == ""


@pytest.mark.parametrize(
    ("status", "content_type", "expected"),
    [
        (200, "application/json", False),
        (201, "application/json; charset=utf-8", False),
        (200, "text/html", True),
        (200, "", True),
        (204, "text/plain", True),
        (404, "application/json", True),
        (500, "application/json", True),
        (302, "text/html", True),
    ],
)
def test_default_classification(status: int, content_type: str, expected: bool) -> None:
    assert FallbackPolicy().should_fallback(_resp(status, content_type)) is expected


def test_success_range_is_configurable() -> None:
    policy = FallbackPolicy(success_min=200, success_max=200)
    assert policy.should_fallback(_resp(201, "application/json"))
    assert not policy.should_fallback(_resp(200, "application/json"))


def test_invalid_success_range_rejected() -> None:
    with pytest.raises(ValidationError):
        FallbackPolicy(success_min=300, success_max=200)
