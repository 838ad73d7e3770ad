"""
Thin client for the remote voting API.

This module is a framework-agnostic adapter used by the auth use cases. It
posts JSON to the configured base address and reports the result as a
`RemoteOutcome` value instead of raising, so callers branch on the outcome
kind rather than on exception types.

Security: Never log credentials or tokens. The bearer token is read from the
client's state right before each request and is not stored on the client.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional
import logging

import httpx


logger = logging.getLogger("votingportal.identity_access")

DEFAULT_API_BASE = "http://localhost:5148/api"


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    SOFT_FAILURE = "soft_failure"
    TRANSPORT_FAILURE = "transport_failure"


@dataclass(frozen=True)
class RemoteOutcome:
    """Result of one remote call.

    - SUCCESS: 2xx with a JSON object body accepted by the caller's predicate.
    - SOFT_FAILURE: 2xx, but the body is malformed or rejected by the predicate.
    - TRANSPORT_FAILURE: no response (network error) or a non-2xx status.
    """

    kind: OutcomeKind
    status_code: Optional[int] = None
    body: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


TokenSource = Callable[[], Optional[str]]


class ApiClient:
    """POST JSON to the remote API with an optional bearer token.

    Parameters:
        base_url: API base address, e.g. "http://localhost:5148/api".
        token_source: Callable returning the current session token (or None).
        transport: Optional httpx transport (tests pass `httpx.MockTransport`).
        timeout: Seconds, or None for no timeout.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token_source: TokenSource | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token_source = token_source
        self._transport = transport
        self._timeout = timeout

    async def _attach_bearer(self, request: httpx.Request) -> None:
        token = self._token_source() if self._token_source else None
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            transport=self._transport,
            timeout=self._timeout,
            event_hooks={"request": [self._attach_bearer]},
        )

    async def post_json(
        self,
        path: str,
        payload: Dict[str, Any],
        *,
        is_success: Callable[[Dict[str, Any]], bool],
    ) -> RemoteOutcome:
        url = "/" + path.lstrip("/")
        try:
            async with self._client() as client:
                resp = await client.post(url, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("API call %s failed: %s", url, exc.__class__.__name__)
            return RemoteOutcome(OutcomeKind.TRANSPORT_FAILURE, error=exc.__class__.__name__)

        if not resp.is_success:
            logger.info("API call %s returned status %s", url, resp.status_code)
            return RemoteOutcome(OutcomeKind.TRANSPORT_FAILURE, status_code=resp.status_code, error="http_status")

        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            return RemoteOutcome(OutcomeKind.SOFT_FAILURE, status_code=resp.status_code, error="malformed_body")
        if not is_success(body):
            return RemoteOutcome(OutcomeKind.SOFT_FAILURE, status_code=resp.status_code, body=body, error="rejected")
        return RemoteOutcome(OutcomeKind.SUCCESS, status_code=resp.status_code, body=body)
