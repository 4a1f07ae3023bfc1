"""Remote-first operation dispatch with local store fallback.

Every operation is tried against the remote API first.  When the remote
cannot serve it (no answer, a non-success status, or a body that is not
JSON) the matching local store operation runs instead and its result is
wrapped in the same :class:`ApiResponse` shape.  When nothing in the route
table matches, the original remote failure is raised unchanged.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote, urlsplit

from eventflow._constants import API_PREFIX, OWNED_COLLECTIONS
from eventflow._transport import Transport, transport_error_for
from eventflow.exceptions import EventflowTransportError, UnknownCollectionError
from eventflow.models.responses import ApiResponse, RemoteResponse, ResponseSource
from eventflow.policy import FallbackPolicy
from eventflow.routing import DEFAULT_ROUTES, Route, match_route
from eventflow.store.local import LocalStore

_logger = logging.getLogger(__name__)

_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


class Dispatcher:
    """Route operations to the remote API, falling back to a :class:`LocalStore`."""

    def __init__(
        self,
        transport: Transport,
        store: LocalStore,
        *,
        policy: FallbackPolicy | None = None,
        routes: Sequence[Route] = DEFAULT_ROUTES,
        api_prefix: str = API_PREFIX,
    ) -> None:
        self._transport = transport
        self._store = store
        self._policy = policy or FallbackPolicy()
        self._routes = tuple(routes)
        self._api_prefix = api_prefix.rstrip("/")

    @property
    def store(self) -> LocalStore:
        return self._store

    @property
    def policy(self) -> FallbackPolicy:
        return self._policy

    def _local_path(self, path: str) -> str:
        """Strip query string and API prefix, leaving e.g. ``/expenses/abc``."""
        local = urlsplit(path).path
        if self._api_prefix and (local == self._api_prefix or local.startswith(f"{self._api_prefix}/")):
            local = local[len(self._api_prefix) :]
        return local.rstrip("/") or "/"

    def _full_path(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        if self._api_prefix and not (path == self._api_prefix or path.startswith(f"{self._api_prefix}/")):
            return f"{self._api_prefix}{path}"
        return path

    async def _call_remote(self, method: str, path: str, payload: Any) -> tuple[int, Any, EventflowTransportError | None]:
        """Return ``(status, body, None)`` for a usable answer, else ``(status, None, error)``."""
        try:
            response: RemoteResponse = await self._transport.request(method, path, payload)
        except EventflowTransportError as exc:
            if not self._policy.fallback_on_transport_error:
                raise
            return 0, None, exc

        if self._policy.should_fallback(response):
            return response.status, None, transport_error_for(method, path, response)

        try:
            return response.status, response.json(), None
        except json.JSONDecodeError:
            _logger.debug("Remote %s %s declared JSON but body did not parse", method, path)
            return response.status, None, transport_error_for(method, path, response)

    async def execute(self, method: str, path: str, payload: Any = None) -> ApiResponse:
        """Run one operation, remote first.

        Parameters
        ----------
        method
            ``GET``, ``POST``, ``PUT`` or ``DELETE``.
        path
            Resource path, with or without the API prefix
            (``/api/expenses/abc`` and ``/expenses/abc`` are equivalent).
        payload
            JSON object body for ``POST``/``PUT``.

        Raises
        ------
        EventflowTransportError
            The remote failed and no local route covers the request, or the
            covering route cannot store a non-object body.
        RecordNotFoundError
            The local store was used and the addressed record is absent.
        """
        method = method.upper()
        if method not in _METHODS:
            raise ValueError(f"Unsupported method: {method}")
        full_path = self._full_path(path)

        status, body, remote_error = await self._call_remote(method, full_path, payload)
        if remote_error is None:
            return ApiResponse(ok=True, status=status, body=body, source=ResponseSource.REMOTE)

        matched = match_route(self._routes, method, self._local_path(full_path))
        if matched is None:
            _logger.debug("No local route for %s %s; surfacing remote failure", method, full_path)
            raise remote_error
        if not matched.route.accepts(payload):
            _logger.debug(
                "Local route %s cannot store a %s body; surfacing remote failure",
                matched.route.name,
                type(payload).__name__,
            )
            raise remote_error

        _logger.debug(
            "Falling back to local store for %s %s (status=%s, route=%s)",
            method,
            full_path,
            remote_error.status_code,
            matched.route.name,
        )
        result = matched.run(self._store, payload)
        return ApiResponse(ok=True, status=200, body=result, source=ResponseSource.LOCAL)

    async def list_by_owner(self, collection: str, owner_id: str) -> ApiResponse:
        """List the records of *collection* owned by *owner_id*."""
        if collection not in OWNED_COLLECTIONS:
            raise UnknownCollectionError(collection)
        return await self.execute("GET", f"/users/{quote(owner_id, safe='')}/{collection}")
