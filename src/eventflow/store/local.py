"""Local record store used when the remote API cannot serve a request.

Each collection is one JSON array kept under ``"{prefix}:{collection}"`` in
a :class:`~eventflow.store.backend.StorageBackend`.  Every operation reads
the whole array, mutates it and writes it back; nothing here awaits, so a
cycle cannot interleave with another coroutine.
"""

from __future__ import annotations

import json
import logging
import secrets
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from eventflow._constants import (
    COLLECTIONS,
    ID_ALPHABET,
    ID_FIELD,
    ID_LENGTH,
    KEY_PREFIX,
    OWNER_FIELD,
    PROFILE_COLLECTION,
    STORE_TIMESTAMP_FIELDS,
)
from eventflow.exceptions import RecordNotFoundError, UnknownCollectionError
from eventflow.store.backend import StorageBackend

_logger = logging.getLogger(__name__)

# Never taken from an update patch.
_PROTECTED_FIELDS = frozenset({ID_FIELD, OWNER_FIELD})


def generate_id(size: int = ID_LENGTH) -> str:
    """Return a random URL-safe id in the nanoid alphabet."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(size))


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LocalStore:
    """Per-collection record persistence.

    Records are plain JSON dicts in the camelCase wire shape.  Typed models
    are applied one layer up, by :class:`~eventflow.client.EventflowClient`.
    """

    def __init__(
        self,
        backend: StorageBackend,
        *,
        key_prefix: str = KEY_PREFIX,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._backend = backend
        self._key_prefix = key_prefix
        self._id_factory = id_factory
        self._clock = clock

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    def key_for(self, collection: str) -> str:
        return f"{self._key_prefix}:{collection}"

    # ------------------------------------------------------------------
    # Whole-collection IO
    # ------------------------------------------------------------------

    def _check(self, collection: str) -> None:
        if collection not in COLLECTIONS:
            raise UnknownCollectionError(collection)

    def _read(self, collection: str) -> list[dict[str, Any]]:
        key = self.key_for(collection)
        raw = self._backend.get_item(key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except json.JSONDecodeError:
            _logger.debug("Discarding malformed local collection %s", key)
            return []
        if not isinstance(items, list):
            _logger.debug("Local collection %s is not a list; treating as empty", key)
            return []
        return [item for item in items if isinstance(item, dict)]

    def _write(self, collection: str, items: list[dict[str, Any]]) -> None:
        self._backend.set_item(self.key_for(collection), json.dumps(items, separators=(",", ":")))

    def _new_id(self, items: list[dict[str, Any]]) -> str:
        taken = {item.get(ID_FIELD) for item in items}
        record_id = self._id_factory()
        while record_id in taken:
            record_id = self._id_factory()
        return record_id

    # ------------------------------------------------------------------
    # Collection operations
    # ------------------------------------------------------------------

    def insert(self, collection: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Store a new record and return it with its generated fields."""
        self._check(collection)
        items = self._read(collection)
        record: dict[str, Any] = dict(data)
        record[ID_FIELD] = self._new_id(items)
        timestamp_field = STORE_TIMESTAMP_FIELDS.get(collection)
        if timestamp_field is not None:
            record[timestamp_field] = _format_timestamp(self._clock())
        items.append(record)
        self._write(collection, items)
        _logger.debug("Inserted local %s record %s", collection, record[ID_FIELD])
        return dict(record)

    def update(self, collection: str, record_id: str, patch: Mapping[str, Any]) -> dict[str, Any]:
        """Shallow-merge *patch* onto a stored record.

        ``id`` and ``userId`` in *patch* are ignored.  Raises
        :class:`RecordNotFoundError` without touching storage when the
        record does not exist.
        """
        self._check(collection)
        items = self._read(collection)
        for index, item in enumerate(items):
            if item.get(ID_FIELD) == record_id:
                break
        else:
            raise RecordNotFoundError(collection, record_id)

        merged = dict(item)
        for key, value in patch.items():
            if key in _PROTECTED_FIELDS:
                continue
            merged[key] = value
        items[index] = merged
        self._write(collection, items)
        return dict(merged)

    def delete(self, collection: str, record_id: str) -> None:
        """Remove a record. Removing an absent id is a no-op."""
        self._check(collection)
        items = self._read(collection)
        remaining = [item for item in items if item.get(ID_FIELD) != record_id]
        if len(remaining) == len(items):
            _logger.debug("Local %s record %s already absent", collection, record_id)
            return
        self._write(collection, remaining)

    def list_by_owner(self, collection: str, owner_id: str) -> list[dict[str, Any]]:
        """Return the records owned by *owner_id*, in storage order."""
        self._check(collection)
        return [item for item in self._read(collection) if item.get(OWNER_FIELD) == owner_id]

    def get(self, collection: str, record_id: str) -> dict[str, Any]:
        """Return one record or raise :class:`RecordNotFoundError`."""
        self._check(collection)
        for item in self._read(collection):
            if item.get(ID_FIELD) == record_id:
                return item
        raise RecordNotFoundError(collection, record_id)

    # Profile shorthands used by the route table.

    def create_profile(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return self.insert(PROFILE_COLLECTION, data)

    def update_profile(self, profile_id: str, patch: Mapping[str, Any]) -> dict[str, Any]:
        return self.update(PROFILE_COLLECTION, profile_id, patch)

    def get_profile(self, profile_id: str) -> dict[str, Any]:
        return self.get(PROFILE_COLLECTION, profile_id)
