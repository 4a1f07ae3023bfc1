from __future__ import annotations

import re

import pytest

from eventflow.routing import DEFAULT_ROUTES, Route, match_route
from eventflow.store.backend import MemoryStorage
from eventflow.store.local import LocalStore


@pytest.mark.parametrize(
    ("method", "path", "name", "params"),
    [
        ("POST", "/users", "create-profile", {}),
        ("PUT", "/users/u1", "update-profile", {"id": "u1"}),
        ("GET", "/users/u1", "get-profile", {"id": "u1"}),
        ("GET", "/users/u1/expenses", "list-by-owner", {"owner": "u1", "collection": "expenses"}),
        ("GET", "/users/u1/inspirations", "list-by-owner", {"owner": "u1", "collection": "inspirations"}),
        ("POST", "/vendors", "insert", {"collection": "vendors"}),
        ("POST", "/inspirations", "insert", {"collection": "inspirations"}),
        ("PUT", "/tasks/t1", "update", {"collection": "tasks", "id": "t1"}),
        ("DELETE", "/guests/g1", "delete", {"collection": "guests", "id": "g1"}),
        ("DELETE", "/inspirations/i1", "delete", {"collection": "inspirations", "id": "i1"}),
        ("delete", "/expenses/e%2F1", "delete", {"collection": "expenses", "id": "e/1"}),
    ],
)
def test_default_routes_match(method: str, path: str, name: str, params: dict[str, str]) -> None:
    matched = match_route(DEFAULT_ROUTES, method, path)
    assert matched is not None
    assert matched.route.name == name
    assert matched.params == params


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("PUT", "/inspirations/i1"),
        ("DELETE", "/users/u1"),
        ("GET", "/expenses"),
        ("GET", "/users/u1/playlists"),
        ("DELETE", "/playlists/p1"),
        ("POST", "/expenses/e1"),
        ("DELETE", "/expenses/e1/extra"),
    ],
)
def test_unmapped_shapes_do_not_match(method: str, path: str) -> None:
    assert match_route(DEFAULT_ROUTES, method, path) is None


def test_first_match_wins() -> None:
    calls: list[str] = []
    routes = (
        Route("GET", re.compile(r"/users/(?P<id>[^/]+)"), lambda *_: calls.append("first"), "first"),
        Route("GET", re.compile(r"/users/(?P<id>[^/]+)"), lambda *_: calls.append("second"), "second"),
    )
    matched = match_route(routes, "GET", "/users/x")
    assert matched is not None
    matched.run(LocalStore(MemoryStorage()), None)
    assert calls == ["first"]


def test_insert_route_rejects_non_object_payload() -> None:
    matched = match_route(DEFAULT_ROUTES, "POST", "/tasks")
    assert matched is not None
    with pytest.raises(TypeError):
        matched.run(LocalStore(MemoryStorage()), ["not", "an", "object"])


def test_body_routes_accept_only_objects() -> None:
    insert = match_route(DEFAULT_ROUTES, "POST", "/tasks")
    delete = match_route(DEFAULT_ROUTES, "DELETE", "/tasks/t1")
    assert insert is not None and delete is not None

    assert insert.route.accepts({"description": "x"})
    assert insert.route.accepts(None)
    assert not insert.route.accepts(["x"])
    assert delete.route.accepts(["ignored"])
