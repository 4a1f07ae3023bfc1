"""Client configuration for eventflow."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from eventflow._constants import API_PREFIX, BASE_URL, JSON_CONTENT_TYPES, KEY_PREFIX
from eventflow.exceptions import EventflowConfigError
from eventflow.policy import FallbackPolicy


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_list(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclasses.dataclass(frozen=True)
class EventflowConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Origin of the remote REST API. A trailing slash is stripped.
    api_prefix : str
        Path prefix every collection route lives under.
    request_timeout : float
        Total timeout in seconds for one remote request. A timeout is
        treated like any other remote failure and triggers the local
        fallback.
    storage_path : str or None
        JSON file backing the local store.  ``None`` keeps the local
        store in memory for the lifetime of the client.
    key_prefix : str
        Namespace prefix for per-collection keys in the local store.
    json_content_types : tuple of str
        Content types accepted as a structured remote answer.  A 2xx
        response with any other type is treated as a fallback case.
    fallback_on_transport_error : bool
        Whether network errors and timeouts fall back to the local store.
    log_payloads : bool
        Emit redacted request/response bodies in DEBUG logs.
    """

    base_url: str = BASE_URL
    api_prefix: str = API_PREFIX
    request_timeout: float = 10.0
    storage_path: str | None = None
    key_prefix: str = KEY_PREFIX
    json_content_types: tuple[str, ...] = JSON_CONTENT_TYPES
    fallback_on_transport_error: bool = True
    log_payloads: bool = False

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise EventflowConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if not self.json_content_types:
            raise EventflowConfigError("json_content_types must not be empty")
        if not self.key_prefix:
            raise EventflowConfigError("key_prefix must not be empty")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        prefix = self.api_prefix.strip()
        if prefix and not prefix.startswith("/"):
            prefix = f"/{prefix}"
        object.__setattr__(self, "api_prefix", prefix.rstrip("/"))
        object.__setattr__(self, "json_content_types", tuple(self.json_content_types))

    def fallback_policy(self) -> FallbackPolicy:
        """Build the remote-outcome classifier for this configuration."""
        return FallbackPolicy(
            json_content_types=frozenset(ct.lower() for ct in self.json_content_types),
            fallback_on_transport_error=self.fallback_on_transport_error,
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> EventflowConfig:
        """Create configuration from environment variables.

        Reads the optional ``EVENTFLOW_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        EventflowConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "EVENTFLOW_BASE_URL": "base_url",
            "EVENTFLOW_API_PREFIX": "api_prefix",
            "EVENTFLOW_STORAGE_PATH": "storage_path",
            "EVENTFLOW_KEY_PREFIX": "key_prefix",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("EVENTFLOW_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise EventflowConfigError(f"EVENTFLOW_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        types_env = env.get("EVENTFLOW_JSON_CONTENT_TYPES")
        if types_env is not None and "json_content_types" not in overrides:
            config_kwargs["json_content_types"] = _env_list(types_env)

        if "fallback_on_transport_error" not in overrides:
            config_kwargs["fallback_on_transport_error"] = _env_bool(
                env.get("EVENTFLOW_FALLBACK_ON_TRANSPORT_ERROR"),
                True,
            )

        if "log_payloads" not in overrides:
            config_kwargs["log_payloads"] = _env_bool(env.get("EVENTFLOW_LOG_PAYLOADS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
