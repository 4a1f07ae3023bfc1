"""HTTP transport for the remote event-planning API."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from eventflow._constants import USER_AGENT
from eventflow._redact import redact_for_log
from eventflow.config import EventflowConfig
from eventflow.exceptions import EventflowTransportError
from eventflow.models.responses import RemoteResponse

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the dispatcher.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    Implementations return every HTTP answer, successful or not, and raise
    :class:`EventflowTransportError` only when no answer arrived at all.
    """

    async def request(self, method: str, path: str, payload: Any = None) -> RemoteResponse:
        ...


class HttpTransport:
    """aiohttp-backed transport sending JSON bodies to ``config.base_url``."""

    def __init__(self, config: EventflowConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def request(self, method: str, path: str, payload: Any = None) -> RemoteResponse:
        """Send one request and return the raw answer.

        Network failures and timeouts raise :class:`EventflowTransportError`
        with ``status_code=None``.
        """
        url = f"{self._config.base_url}{path}"
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        data: str | None = None
        if payload is not None:
            headers["content-type"] = "application/json"
            data = json.dumps(payload, separators=(",", ":"))

        _logger.debug("%s %s", method, url)
        if self._config.log_payloads and payload is not None:
            _logger.debug("Request body: %s", redact_for_log(payload))

        try:
            async with self._http.request(method, url, data=data, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text(errors="replace")
                response = RemoteResponse(
                    status=resp.status,
                    content_type=resp.headers.get("Content-Type", ""),
                    text=text,
                    url=str(resp.url),
                )
        except aiohttp.ClientError as exc:
            raise EventflowTransportError(
                f"Request to {path} failed: {exc}",
                endpoint=path,
            ) from exc
        except TimeoutError as exc:
            raise EventflowTransportError(
                f"Request to {path} timed out after {self._config.request_timeout}s",
                endpoint=path,
            ) from exc

        _logger.debug("%s %s -> %s (%s)", method, url, response.status, response.content_type or "no content type")
        if self._config.log_payloads:
            _logger.debug("Response body: %s", redact_for_log(response.text))
        return response


def transport_error_for(method: str, path: str, response: RemoteResponse) -> EventflowTransportError:
    """Build the error describing a remote answer that cannot be used."""
    text = response.text or ""
    if not 200 <= response.status <= 299:
        message = f"HTTP {response.status} from {method} {path}: {text[:200]}"
    else:
        ctype = response.content_type or "no content type"
        message = f"Non-JSON response ({ctype}) from {method} {path}: {text[:200]}"
    return EventflowTransportError(
        message,
        status_code=response.status,
        endpoint=path,
        body=text,
    )

