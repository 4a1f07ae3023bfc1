"""Local persistence layer.

Holds the record collections the dispatcher falls back to when the remote
API is unavailable, plus the remembered current profile.
"""

from eventflow.store.backend import FileStorage, MemoryStorage, StorageBackend
from eventflow.store.local import LocalStore, generate_id
from eventflow.store.memory import ProfileMemory

__all__ = [
    "FileStorage",
    "LocalStore",
    "MemoryStorage",
    "ProfileMemory",
    "StorageBackend",
    "generate_id",
]
