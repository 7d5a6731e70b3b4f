"""Async REST client for the quote backend.

Two reads are supported: ``GET /quote/today`` and ``GET /quote/recent``.
Every response is validated against an explicit schema before it is
handed back, so callers only ever see well-typed :class:`Quote` objects
or a :class:`RemoteError`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ValidationError

from shrutam.config import DEFAULT_TIMEOUT_MS
from shrutam.models import Quote

logger = logging.getLogger(__name__)

TODAY_PATH = "/quote/today"
RECENT_PATH = "/quote/recent"


class RemoteError(Exception):
    """Raised when a remote read does not produce usable data.

    ``status_code`` is ``None`` for transport failures (timeout, DNS,
    connection refused) where no response was received.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retriable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retriable = retriable

    def __repr__(self) -> str:
        return f"RemoteError({self.message!r}, status_code={self.status_code!r})"


# ---- Wire envelopes ----


class _Envelope(BaseModel):
    success: bool
    data: Any = None
    message: str = ""


class _RecentPayload(BaseModel):
    quotes: list[Quote]
    count: Optional[int] = None


class RemoteClient:
    """Fetch quotes from the configured backend.

    No retries are performed here; retry and fallback policy belong to
    the sync orchestrator.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_ms / 1000.0
        self._http = http_client or httpx.AsyncClient(
            timeout=self._timeout,
            headers={"Content-Type": "application/json"},
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_today(self) -> Quote:
        """Return today's quote."""
        envelope = await self._get_envelope(TODAY_PATH, "Failed to fetch today's quote")
        try:
            quote = Quote.model_validate(envelope.data)
        except ValidationError as exc:
            raise RemoteError(f"Malformed quote in {TODAY_PATH} response: {exc}") from exc
        logger.info("Fetched today's quote %s", quote.id)
        return quote

    async def fetch_recent(self) -> list[Quote]:
        """Return the bounded list of recent quotes, in server order."""
        envelope = await self._get_envelope(RECENT_PATH, "Failed to fetch recent quotes")
        try:
            payload = _RecentPayload.model_validate(envelope.data)
        except ValidationError as exc:
            raise RemoteError(f"Malformed quotes in {RECENT_PATH} response: {exc}") from exc
        if payload.count is not None and payload.count != len(payload.quotes):
            logger.warning(
                "Recent quotes count mismatch: reported=%d actual=%d",
                payload.count,
                len(payload.quotes),
            )
        logger.info("Fetched %d recent quotes", len(payload.quotes))
        return payload.quotes

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _get_envelope(self, path: str, default_message: str) -> _Envelope:
        if not self._base_url:
            raise RemoteError("No base URL configured")

        logger.debug("GET %s%s (timeout=%.1fs)", self._base_url, path, self._timeout)
        try:
            resp = await self._http.get(f"{self._base_url}{path}")
        except httpx.TimeoutException as exc:
            raise RemoteError(f"Request to {path} timed out: {exc}", retriable=True) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise RemoteError(f"Network error on {path}: {exc}", retriable=True) from exc

        status = resp.status_code
        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.is_success:
            message = _message_from(body) or f"HTTP {status} from {path}"
            raise RemoteError(message, status_code=status, retriable=status >= 500)

        if body is None:
            raise RemoteError(f"Non-JSON response from {path}", status_code=status)

        try:
            envelope = _Envelope.model_validate(body)
        except ValidationError as exc:
            raise RemoteError(
                f"Malformed envelope from {path}: {exc}", status_code=status
            ) from exc

        if not envelope.success:
            raise RemoteError(envelope.message or default_message, status_code=status)

        return envelope


def _message_from(body: Any) -> str:
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str):
            return message
    return ""
