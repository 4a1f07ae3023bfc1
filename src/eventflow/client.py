"""High-level async client for the event-planning API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, TypeVar
from urllib.parse import quote

import aiohttp
from pydantic import BaseModel

from eventflow._transport import HttpTransport, Transport
from eventflow.config import EventflowConfig
from eventflow.dispatcher import Dispatcher
from eventflow.exceptions import EventflowError, EventflowTransportError
from eventflow.models._base import EventflowModel
from eventflow.models.profile import NewProfile, Profile, ProfileUpdate
from eventflow.models.records import (
    Expense,
    ExpenseUpdate,
    Guest,
    GuestUpdate,
    Inspiration,
    NewExpense,
    NewGuest,
    NewInspiration,
    NewTask,
    NewVendor,
    Task,
    TaskUpdate,
    Vendor,
    VendorUpdate,
)
from eventflow.store.backend import FileStorage, MemoryStorage, StorageBackend
from eventflow.store.local import LocalStore
from eventflow.store.memory import ProfileMemory
from eventflow.summary import DashboardSummary, build_dashboard

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
P = TypeVar("P", bound=EventflowModel)


def _coerce(model_cls: type[P], data: P | Mapping[str, Any]) -> P:
    if isinstance(data, model_cls):
        return data
    return model_cls.model_validate(data)


def _seg(value: str) -> str:
    return quote(value, safe="")


class EventflowClient:
    """Async client for the event-planning API with offline fallback.

    Usage::

        async with EventflowClient(EventflowConfig.from_env()) as client:
            profile = await client.create_profile({...})
            expenses = await client.list_expenses(profile.id)

    Every call goes to the remote API first and is served from the local
    store when the remote is unreachable or answers with something other
    than JSON.
    """

    def __init__(
        self,
        config: EventflowConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        storage: StorageBackend | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or EventflowConfig()
        self._external_session = session is not None
        self._http_session = session
        self._storage = storage if storage is not None else self._default_storage()
        self._store = LocalStore(self._storage, key_prefix=self._config.key_prefix)
        self._memory = ProfileMemory(self._storage)
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._dispatcher: Dispatcher | None = None

    def _default_storage(self) -> StorageBackend:
        if self._config.storage_path:
            return FileStorage(self._config.storage_path)
        return MemoryStorage()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> EventflowClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        self._dispatcher = Dispatcher(
            self._transport,
            self._store,
            policy=self._config.fallback_policy(),
            api_prefix=self._config.api_prefix,
        )
        _logger.debug(
            "Client ready: base_url=%s storage=%s",
            self._config.base_url,
            type(self._storage).__name__,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None
        self._dispatcher = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def store(self) -> LocalStore:
        return self._store

    @property
    def memory(self) -> ProfileMemory:
        return self._memory

    def _require_dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            raise EventflowError("Client not initialized. Use 'async with EventflowClient(...) as client:'")
        return self._dispatcher

    async def _one(self, model_cls: type[M], method: str, path: str, payload: Any = None) -> M:
        response = await self._require_dispatcher().execute(method, path, payload)
        return model_cls.model_validate(response.body)

    async def _many(self, model_cls: type[M], collection: str, owner_id: str) -> list[M]:
        response = await self._require_dispatcher().list_by_owner(collection, owner_id)
        if not isinstance(response.body, list):
            raise EventflowTransportError(
                f"Expected a list of {collection} from {response.source} answer, got {type(response.body).__name__}",
                status_code=response.status,
                endpoint=f"{self._config.api_prefix}/users/{_seg(owner_id)}/{collection}",
            )
        return [model_cls.model_validate(item) for item in response.body]

    async def _delete(self, collection: str, record_id: str) -> None:
        await self._require_dispatcher().execute("DELETE", f"/{collection}/{_seg(record_id)}")

    async def request(self, method: str, path: str, payload: Any = None) -> Any:
        """Dispatch a raw operation and return the response body."""
        response = await self._require_dispatcher().execute(method, path, payload)
        return response.body

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def create_profile(self, data: NewProfile | Mapping[str, Any]) -> Profile:
        """Create a profile and remember it as the current one."""
        payload = _coerce(NewProfile, data).to_payload()
        profile = await self._one(Profile, "POST", "/users", payload)
        self._memory.remember(profile)
        return profile

    async def update_profile(self, profile_id: str, changes: ProfileUpdate | Mapping[str, Any]) -> Profile:
        payload = _coerce(ProfileUpdate, changes).to_payload()
        profile = await self._one(Profile, "PUT", f"/users/{_seg(profile_id)}", payload)
        self._memory.remember(profile)
        return profile

    async def get_profile(self, profile_id: str) -> Profile:
        return await self._one(Profile, "GET", f"/users/{_seg(profile_id)}")

    def current_profile(self) -> Profile | None:
        """The profile remembered from a previous create/update, if any."""
        return self._memory.recall()

    def forget_profile(self) -> None:
        self._memory.forget()

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    async def list_expenses(self, profile_id: str) -> list[Expense]:
        return await self._many(Expense, "expenses", profile_id)

    async def create_expense(self, data: NewExpense | Mapping[str, Any]) -> Expense:
        return await self._one(Expense, "POST", "/expenses", _coerce(NewExpense, data).to_payload())

    async def update_expense(self, expense_id: str, changes: ExpenseUpdate | Mapping[str, Any]) -> Expense:
        payload = _coerce(ExpenseUpdate, changes).to_payload()
        return await self._one(Expense, "PUT", f"/expenses/{_seg(expense_id)}", payload)

    async def delete_expense(self, expense_id: str) -> None:
        await self._delete("expenses", expense_id)

    # ------------------------------------------------------------------
    # Vendors
    # ------------------------------------------------------------------

    async def list_vendors(self, profile_id: str) -> list[Vendor]:
        return await self._many(Vendor, "vendors", profile_id)

    async def create_vendor(self, data: NewVendor | Mapping[str, Any]) -> Vendor:
        return await self._one(Vendor, "POST", "/vendors", _coerce(NewVendor, data).to_payload())

    async def update_vendor(self, vendor_id: str, changes: VendorUpdate | Mapping[str, Any]) -> Vendor:
        payload = _coerce(VendorUpdate, changes).to_payload()
        return await self._one(Vendor, "PUT", f"/vendors/{_seg(vendor_id)}", payload)

    async def delete_vendor(self, vendor_id: str) -> None:
        await self._delete("vendors", vendor_id)

    # ------------------------------------------------------------------
    # Guests
    # ------------------------------------------------------------------

    async def list_guests(self, profile_id: str) -> list[Guest]:
        return await self._many(Guest, "guests", profile_id)

    async def create_guest(self, data: NewGuest | Mapping[str, Any]) -> Guest:
        return await self._one(Guest, "POST", "/guests", _coerce(NewGuest, data).to_payload())

    async def update_guest(self, guest_id: str, changes: GuestUpdate | Mapping[str, Any]) -> Guest:
        payload = _coerce(GuestUpdate, changes).to_payload()
        return await self._one(Guest, "PUT", f"/guests/{_seg(guest_id)}", payload)

    async def delete_guest(self, guest_id: str) -> None:
        await self._delete("guests", guest_id)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def list_tasks(self, profile_id: str) -> list[Task]:
        return await self._many(Task, "tasks", profile_id)

    async def create_task(self, data: NewTask | Mapping[str, Any]) -> Task:
        return await self._one(Task, "POST", "/tasks", _coerce(NewTask, data).to_payload())

    async def update_task(self, task_id: str, changes: TaskUpdate | Mapping[str, Any]) -> Task:
        payload = _coerce(TaskUpdate, changes).to_payload()
        return await self._one(Task, "PUT", f"/tasks/{_seg(task_id)}", payload)

    async def set_task_completed(self, task_id: str, completed: bool = True) -> Task:
        return await self.update_task(task_id, TaskUpdate(completed=completed))

    async def delete_task(self, task_id: str) -> None:
        await self._delete("tasks", task_id)

    # ------------------------------------------------------------------
    # Inspirations
    # ------------------------------------------------------------------

    async def list_inspirations(self, profile_id: str) -> list[Inspiration]:
        return await self._many(Inspiration, "inspirations", profile_id)

    async def create_inspiration(self, data: NewInspiration | Mapping[str, Any]) -> Inspiration:
        return await self._one(Inspiration, "POST", "/inspirations", _coerce(NewInspiration, data).to_payload())

    async def delete_inspiration(self, inspiration_id: str) -> None:
        await self._delete("inspirations", inspiration_id)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    async def get_dashboard(self, profile_id: str, *, today: date | datetime | None = None) -> DashboardSummary:
        """Fetch a profile and all its records and summarize them."""
        profile = await self.get_profile(profile_id)
        return build_dashboard(
            profile,
            expenses=await self.list_expenses(profile_id),
            guests=await self.list_guests(profile_id),
            tasks=await self.list_tasks(profile_id),
            vendors=await self.list_vendors(profile_id),
            inspirations=await self.list_inspirations(profile_id),
            today=today,
        )
