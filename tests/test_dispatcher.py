from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from eventflow.dispatcher import Dispatcher
from eventflow.exceptions import EventflowTransportError, RecordNotFoundError, UnknownCollectionError
from eventflow.models.responses import RemoteResponse, ResponseSource
from eventflow.policy import FallbackPolicy
from eventflow.store.backend import MemoryStorage
from eventflow.store.local import LocalStore

_HTML_SHELL = "<!doctype html><html><body><div id='root'></div></body></html>"


@dataclass
class FakeRemote:
    """Transport double answering every request with one canned response."""

    status: int = 503
    content_type: str = "text/plain"
    text: str = "Service Unavailable"
    raise_error: bool = False
    calls: list[tuple[str, str, Any]] = field(default_factory=list)

    async def request(self, method: str, path: str, payload: Any = None) -> RemoteResponse:
        self.calls.append((method, path, payload))
        if self.raise_error:
            raise EventflowTransportError(f"Request to {path} failed: connection refused", endpoint=path)
        return RemoteResponse(status=self.status, content_type=self.content_type, text=self.text)


def _json_remote(body: Any, status: int = 200) -> FakeRemote:
    return FakeRemote(status=status, content_type="application/json; charset=utf-8", text=json.dumps(body))


def _dispatcher(remote: FakeRemote, store: LocalStore | None = None, **kwargs: Any) -> Dispatcher:
    return Dispatcher(remote, store if store is not None else LocalStore(MemoryStorage()), **kwargs)


@pytest.mark.asyncio
async def test_successful_remote_json_is_returned_unchanged() -> None:
    remote = _json_remote({"id": "srv-1", "name": "Cake"})
    store = LocalStore(MemoryStorage())
    dispatcher = _dispatcher(remote, store)

    response = await dispatcher.execute("POST", "/api/expenses", {"userId": "u1", "name": "Cake", "amount": "50"})

    assert response.ok
    assert response.source == ResponseSource.REMOTE
    assert response.body == {"id": "srv-1", "name": "Cake"}
    assert store.list_by_owner("expenses", "u1") == []


@pytest.mark.asyncio
async def test_503_on_create_falls_back_to_local_insert() -> None:
    store = LocalStore(MemoryStorage())
    dispatcher = _dispatcher(FakeRemote(status=503), store)

    response = await dispatcher.execute("POST", "/api/guests", {"userId": "u1", "name": "Ann", "count": 2})

    assert response.ok
    assert response.source == ResponseSource.LOCAL
    assert response.body["id"]
    listed = await dispatcher.list_by_owner("guests", "u1")
    assert listed.body == [response.body]


@pytest.mark.asyncio
async def test_html_200_on_list_falls_back_to_local_list() -> None:
    store = LocalStore(MemoryStorage())
    seeded = store.insert("expenses", {"userId": "u1", "name": "Venue", "amount": "900"})
    store.insert("expenses", {"userId": "u2", "name": "Other", "amount": "1"})
    dispatcher = _dispatcher(FakeRemote(status=200, content_type="text/html", text=_HTML_SHELL), store)

    response = await dispatcher.execute("GET", "/api/users/u1/expenses")

    assert response.source == ResponseSource.LOCAL
    assert response.body == [seeded]


@pytest.mark.asyncio
async def test_unmapped_delete_resurfaces_remote_failure() -> None:
    remote = FakeRemote(status=404, content_type="application/json", text='{"message":"nope"}')
    dispatcher = _dispatcher(remote)

    with pytest.raises(EventflowTransportError) as exc_info:
        await dispatcher.execute("DELETE", "/api/playlists/abc")

    exc = exc_info.value
    assert exc.status_code == 404
    assert exc.endpoint == "/api/playlists/abc"
    assert exc.body == '{"message":"nope"}'


@pytest.mark.asyncio
async def test_network_error_without_route_is_raised_verbatim() -> None:
    remote = FakeRemote(raise_error=True)
    dispatcher = _dispatcher(remote)

    with pytest.raises(EventflowTransportError, match="connection refused"):
        await dispatcher.execute("PUT", "/api/inspirations/abc", {"title": "x"})


@pytest.mark.asyncio
async def test_network_error_falls_back_when_routed() -> None:
    store = LocalStore(MemoryStorage())
    dispatcher = _dispatcher(FakeRemote(raise_error=True), store)

    response = await dispatcher.execute("POST", "/api/users", {"name": "Sam", "budget": "1000"})

    assert response.source == ResponseSource.LOCAL
    assert store.get_profile(response.body["id"])["name"] == "Sam"
    assert "createdAt" in response.body


@pytest.mark.asyncio
async def test_transport_errors_propagate_when_policy_disables_fallback() -> None:
    store = LocalStore(MemoryStorage())
    dispatcher = _dispatcher(
        FakeRemote(raise_error=True),
        store,
        policy=FallbackPolicy(fallback_on_transport_error=False),
    )

    with pytest.raises(EventflowTransportError):
        await dispatcher.execute("POST", "/api/tasks", {"userId": "u1", "description": "x"})
    assert store.list_by_owner("tasks", "u1") == []


@pytest.mark.asyncio
async def test_local_update_of_missing_record_raises_not_found() -> None:
    dispatcher = _dispatcher(FakeRemote(status=500))

    with pytest.raises(RecordNotFoundError):
        await dispatcher.execute("PUT", "/api/vendors/ghost", {"name": "x"})


@pytest.mark.asyncio
async def test_local_delete_acknowledges_and_is_idempotent() -> None:
    store = LocalStore(MemoryStorage())
    task = store.insert("tasks", {"userId": "u1", "description": "x"})
    dispatcher = _dispatcher(FakeRemote(status=502), store)

    first = await dispatcher.execute("DELETE", f"/api/tasks/{task['id']}")
    second = await dispatcher.execute("DELETE", f"/api/tasks/{task['id']}")

    assert first.body == {"ok": True}
    assert second.body == {"ok": True}
    assert store.list_by_owner("tasks", "u1") == []


@pytest.mark.asyncio
async def test_local_update_through_dispatcher_protects_owner() -> None:
    store = LocalStore(MemoryStorage())
    expense = store.insert("expenses", {"userId": "u1", "name": "Cake", "amount": "50"})
    dispatcher = _dispatcher(FakeRemote(status=503), store)

    response = await dispatcher.execute("PUT", f"/api/expenses/{expense['id']}", {"amount": "75", "userId": "u9"})

    assert response.body["amount"] == "75"
    assert response.body["userId"] == "u1"


@pytest.mark.asyncio
async def test_profile_update_and_point_read_fall_back() -> None:
    store = LocalStore(MemoryStorage())
    profile = store.create_profile({"name": "Sam", "budget": "100"})
    dispatcher = _dispatcher(FakeRemote(status=503), store)

    updated = await dispatcher.execute("PUT", f"/api/users/{profile['id']}", {"budget": "250"})
    fetched = await dispatcher.execute("GET", f"/api/users/{profile['id']}")

    assert updated.body["budget"] == "250"
    assert fetched.body == updated.body


@pytest.mark.asyncio
async def test_json_content_type_with_unparseable_body_falls_back() -> None:
    store = LocalStore(MemoryStorage())
    dispatcher = _dispatcher(FakeRemote(status=200, content_type="application/json", text="<html>"), store)

    response = await dispatcher.execute("GET", "/api/users/u1/vendors")

    assert response.source == ResponseSource.LOCAL
    assert response.body == []


@pytest.mark.asyncio
async def test_configurable_content_types_accept_problem_json() -> None:
    policy = FallbackPolicy(json_content_types=frozenset({"application/json", "application/vnd.api+json"}))
    remote = FakeRemote(status=200, content_type="application/vnd.api+json", text="[]")
    dispatcher = _dispatcher(remote, policy=policy)

    response = await dispatcher.execute("GET", "/api/users/u1/tasks")

    assert response.source == ResponseSource.REMOTE


@pytest.mark.asyncio
async def test_paths_without_prefix_are_sent_with_prefix() -> None:
    remote = _json_remote([])
    dispatcher = _dispatcher(remote)

    await dispatcher.execute("get", "/users/u1/guests")

    assert remote.calls == [("GET", "/api/users/u1/guests", None)]


@pytest.mark.asyncio
async def test_reads_never_mutate_local_store() -> None:
    backend = MemoryStorage()
    store = LocalStore(backend)
    dispatcher = _dispatcher(FakeRemote(status=503), store)

    await dispatcher.list_by_owner("inspirations", "u1")

    assert backend.keys() == []


@pytest.mark.asyncio
async def test_list_by_owner_rejects_unknown_collection() -> None:
    dispatcher = _dispatcher(FakeRemote())
    with pytest.raises(UnknownCollectionError):
        await dispatcher.list_by_owner("users", "u1")


@pytest.mark.asyncio
async def test_unsupported_method_rejected() -> None:
    dispatcher = _dispatcher(FakeRemote())
    with pytest.raises(ValueError, match="Unsupported method"):
        await dispatcher.execute("PATCH", "/api/tasks/1", {})


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "path", "payload"),
    [
        ("POST", "/api/expenses", [1, 2]),
        ("POST", "/api/users", "Sam"),
        ("PUT", "/api/tasks/t1", 7),
    ],
)
async def test_non_object_body_resurfaces_remote_failure(method: str, path: str, payload: Any) -> None:
    backend = MemoryStorage()
    dispatcher = _dispatcher(FakeRemote(status=503), LocalStore(backend))

    with pytest.raises(EventflowTransportError) as exc_info:
        await dispatcher.execute(method, path, payload)

    assert exc_info.value.status_code == 503
    assert exc_info.value.endpoint == path
    assert backend.keys() == []
