"""eventflow - Async Python client for an event-planning API with offline fallback."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("eventflow")
except PackageNotFoundError:
    __version__ = "0+local"
from eventflow.client import EventflowClient
from eventflow.config import EventflowConfig
from eventflow.dispatcher import Dispatcher
from eventflow.exceptions import (
    EventflowConfigError,
    EventflowError,
    EventflowStoreError,
    EventflowTransportError,
    RecordNotFoundError,
    UnknownCollectionError,
)
from eventflow.models import (
    ApiResponse,
    Expense,
    Guest,
    Inspiration,
    NewExpense,
    NewGuest,
    NewInspiration,
    NewProfile,
    NewTask,
    NewVendor,
    Profile,
    ResponseSource,
    Task,
    Vendor,
)
from eventflow.policy import FallbackPolicy
from eventflow.store import FileStorage, LocalStore, MemoryStorage
from eventflow.summary import DashboardSummary
from eventflow.timeline import CalendarMonth, month_grid

__all__ = [
    "__version__",
    "ApiResponse",
    "CalendarMonth",
    "DashboardSummary",
    "Dispatcher",
    "EventflowClient",
    "EventflowConfig",
    "EventflowConfigError",
    "EventflowError",
    "EventflowStoreError",
    "EventflowTransportError",
    "Expense",
    "FallbackPolicy",
    "FileStorage",
    "Guest",
    "Inspiration",
    "LocalStore",
    "MemoryStorage",
    "NewExpense",
    "NewGuest",
    "NewInspiration",
    "NewProfile",
    "NewTask",
    "NewVendor",
    "Profile",
    "RecordNotFoundError",
    "ResponseSource",
    "Task",
    "UnknownCollectionError",
    "Vendor",
    "month_grid",
]
