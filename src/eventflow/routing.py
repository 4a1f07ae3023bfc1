"""Fallback route table: which local store operation replaces a remote call.

The table is an ordered list of :class:`Route` entries, first match wins.
Paths are matched after the API prefix has been stripped, e.g.
``/expenses/abc123`` rather than ``/api/expenses/abc123``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote

from eventflow._constants import OWNED_COLLECTIONS
from eventflow.store.local import LocalStore

Handler = Callable[[LocalStore, Mapping[str, str], Any], Any]

_WRITABLE = OWNED_COLLECTIONS
# Inspirations have no edit form and no update route.
_UPDATABLE = tuple(name for name in OWNED_COLLECTIONS if name != "inspirations")

DELETE_ACK: dict[str, Any] = {"ok": True}


def _alternation(names: Sequence[str]) -> str:
    return "|".join(re.escape(name) for name in names)


@dataclass(frozen=True)
class Route:
    method: str
    pattern: re.Pattern[str]
    handler: Handler
    name: str = ""
    takes_body: bool = False

    def accepts(self, payload: Any) -> bool:
        """Whether *payload* is a body this route's handler can store."""
        return not self.takes_body or payload is None or isinstance(payload, Mapping)

    def match(self, method: str, path: str) -> dict[str, str] | None:
        if method != self.method:
            return None
        found = self.pattern.fullmatch(path)
        if found is None:
            return None
        return {key: unquote(value) for key, value in found.groupdict().items()}


@dataclass(frozen=True)
class RouteMatch:
    route: Route
    params: dict[str, str]

    def run(self, store: LocalStore, payload: Any) -> Any:
        return self.route.handler(store, self.params, payload)


def _payload_dict(payload: Any) -> dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise TypeError(f"Expected a JSON object payload, got {type(payload).__name__}")
    return dict(payload)


def _create_profile(store: LocalStore, _params: Mapping[str, str], payload: Any) -> Any:
    return store.create_profile(_payload_dict(payload))


def _update_profile(store: LocalStore, params: Mapping[str, str], payload: Any) -> Any:
    return store.update_profile(params["id"], _payload_dict(payload))


def _get_profile(store: LocalStore, params: Mapping[str, str], _payload: Any) -> Any:
    return store.get_profile(params["id"])


def _list_owned(store: LocalStore, params: Mapping[str, str], _payload: Any) -> Any:
    return store.list_by_owner(params["collection"], params["owner"])


def _insert(store: LocalStore, params: Mapping[str, str], payload: Any) -> Any:
    return store.insert(params["collection"], _payload_dict(payload))


def _update(store: LocalStore, params: Mapping[str, str], payload: Any) -> Any:
    return store.update(params["collection"], params["id"], _payload_dict(payload))


def _delete(store: LocalStore, params: Mapping[str, str], _payload: Any) -> Any:
    store.delete(params["collection"], params["id"])
    return dict(DELETE_ACK)


DEFAULT_ROUTES: tuple[Route, ...] = (
    Route("POST", re.compile(r"/users"), _create_profile, "create-profile", takes_body=True),
    Route("PUT", re.compile(r"/users/(?P<id>[^/]+)"), _update_profile, "update-profile", takes_body=True),
    Route("GET", re.compile(r"/users/(?P<id>[^/]+)"), _get_profile, "get-profile"),
    Route(
        "GET",
        re.compile(rf"/users/(?P<owner>[^/]+)/(?P<collection>{_alternation(OWNED_COLLECTIONS)})"),
        _list_owned,
        "list-by-owner",
    ),
    Route("POST", re.compile(rf"/(?P<collection>{_alternation(_WRITABLE)})"), _insert, "insert", takes_body=True),
    Route(
        "PUT",
        re.compile(rf"/(?P<collection>{_alternation(_UPDATABLE)})/(?P<id>[^/]+)"),
        _update,
        "update",
        takes_body=True,
    ),
    Route(
        "DELETE",
        re.compile(rf"/(?P<collection>{_alternation(_WRITABLE)})/(?P<id>[^/]+)"),
        _delete,
        "delete",
    ),
)


def match_route(routes: Sequence[Route], method: str, path: str) -> RouteMatch | None:
    """Return the first route matching *method* and *path*, if any."""
    method = method.upper()
    for route in routes:
        params = route.match(method, path)
        if params is not None:
            return RouteMatch(route=route, params=params)
    return None
