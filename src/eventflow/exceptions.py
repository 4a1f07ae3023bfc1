"""Custom exception hierarchy for eventflow."""

from __future__ import annotations


class EventflowError(Exception):
    """Base exception for all eventflow errors."""


class EventflowConfigError(EventflowError):
    """Invalid or missing configuration."""


class EventflowTransportError(EventflowError):
    """Remote failure (network, timeout, non-2xx, or a non-JSON answer).

    The dispatcher treats this as recoverable and tries the local store.
    It only reaches callers when no local route matches the request, in
    which case it is re-raised exactly as the transport produced it.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        body: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.body = body
        super().__init__(message)


class EventflowStoreError(EventflowError):
    """Local store failure."""


class RecordNotFoundError(EventflowStoreError):
    """No record with the given id exists in the collection."""

    def __init__(self, collection: str, record_id: str) -> None:
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{collection} record {record_id!r} not found")


class UnknownCollectionError(EventflowStoreError, ValueError):
    """Collection name is not one of the known record collections."""

    def __init__(self, collection: str) -> None:
        self.collection = collection
        super().__init__(f"Unknown collection: {collection!r}")
