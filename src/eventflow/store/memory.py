"""Remembered current profile, so a returning user skips onboarding."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from eventflow._constants import PROFILE_MEMORY_KEY
from eventflow.models.profile import Profile
from eventflow.store.backend import StorageBackend

_logger = logging.getLogger(__name__)


class ProfileMemory:
    """Keeps one serialized :class:`Profile` under a fixed key."""

    def __init__(self, backend: StorageBackend, *, key: str = PROFILE_MEMORY_KEY) -> None:
        self._backend = backend
        self._key = key

    def remember(self, profile: Profile) -> None:
        self._backend.set_item(self._key, profile.model_dump_json(by_alias=True))

    def recall(self) -> Profile | None:
        """Return the remembered profile, or ``None`` if absent or unreadable."""
        stored = self._backend.get_item(self._key)
        if not stored:
            return None
        try:
            return Profile.model_validate_json(stored)
        except ValidationError:
            _logger.warning("Error parsing stored profile; ignoring it", exc_info=True)
            return None

    def forget(self) -> None:
        self._backend.remove_item(self._key)
