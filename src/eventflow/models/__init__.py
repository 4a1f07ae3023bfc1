"""Data models for eventflow records and responses."""

from eventflow.models._base import EventflowModel, PatchModel
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
from eventflow.models.responses import ApiResponse, RemoteResponse, ResponseSource

__all__ = [
    "ApiResponse",
    "EventflowModel",
    "Expense",
    "ExpenseUpdate",
    "Guest",
    "GuestUpdate",
    "Inspiration",
    "NewExpense",
    "NewGuest",
    "NewInspiration",
    "NewProfile",
    "NewTask",
    "NewVendor",
    "PatchModel",
    "Profile",
    "ProfileUpdate",
    "RemoteResponse",
    "ResponseSource",
    "Task",
    "TaskUpdate",
    "Vendor",
    "VendorUpdate",
]
