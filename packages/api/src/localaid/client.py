# This project was developed with assistance from AI tools.
"""Async HTTP client for the LocalAid API.

Wraps httpx with two behaviours the web frontend relies on:

* a query cache keyed by (path, params). Entries are served without a
  network call while younger than ``stale_time`` and evicted once unused for
  ``gc_time``. Mutations invalidate the affected path prefixes.
* retry with exponential backoff and +-25% jitter for transport errors and
  retryable status codes, honouring ``Retry-After``. When retries run out on
  a retryable status the last response is used.
"""

import logging
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
)

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

DEFAULT_STALE_TIME = 5 * 60
DEFAULT_GC_TIME = 30 * 60


class LocalAidAPIError(Exception):
    """Non-success response from the API."""

    def __init__(self, status_code: int, message: str, body: Any = None):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.body = body


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    backoff_multiplier: float = 2.0
    retryable_status_codes: frozenset[int] = RETRYABLE_STATUS_CODES


@dataclass
class _CacheEntry:
    data: Any
    fetched_at: float
    last_used: float


def parse_retry_after(value: str | None) -> float | None:
    """Seconds to wait from a Retry-After header (delta-seconds or HTTP date)."""
    if not value:
        return None
    value = value.strip()
    if value.isdigit():
        return float(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    return max((when - datetime.now(when.tzinfo)).total_seconds(), 0.0)


def backoff_delay(attempt: int, config: RetryConfig, rand: Callable[[], float] = random.random) -> float:
    """Delay before retry number ``attempt`` (0-based), capped then jittered."""
    delay = min(config.initial_delay * config.backoff_multiplier**attempt, config.max_delay)
    return delay + delay * 0.25 * (rand() * 2 - 1)


def _cache_key(path: str, params: dict | None) -> tuple:
    items = tuple(sorted((k, str(v)) for k, v in (params or {}).items() if v is not None))
    return path, items


class LocalAidClient:
    """Cached, retrying client for the LocalAid REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        retry: RetryConfig | None = None,
        stale_time: float = DEFAULT_STALE_TIME,
        gc_time: float = DEFAULT_GC_TIME,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        timeout: float = 30.0,
    ):
        self.retry = retry or RetryConfig()
        self.stale_time = stale_time
        self.gc_time = gc_time
        self._clock = clock
        self._sleep = sleep
        self._cache: dict[tuple, _CacheEntry] = {}
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        if token:
            self.set_token(token)

    async def __aenter__(self) -> "LocalAidClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def set_token(self, token: str | None) -> None:
        if token:
            self._http.headers["Authorization"] = f"Bearer {token}"
        else:
            self._http.headers.pop("Authorization", None)
        self._cache.clear()

    # -- retry --

    def _wait(self, retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        if outcome is not None and not outcome.failed:
            retry_after = parse_retry_after(outcome.result().headers.get("Retry-After"))
            if retry_after is not None:
                return retry_after
        return backoff_delay(retry_state.attempt_number - 1, self.retry)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        reason = outcome.exception() if outcome.failed else outcome.result().status_code
        logger.warning(
            "Request attempt %d failed (%s), retrying in %.1fs",
            retry_state.attempt_number,
            reason,
            retry_state.next_action.sleep if retry_state.next_action else 0,
        )

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Send with retry. Returns the final response, whatever its status."""
        retrying_kwargs = {}
        if self._sleep is not None:
            retrying_kwargs["sleep"] = self._sleep
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry.max_retries + 1),
            wait=self._wait,
            retry=(
                retry_if_exception_type(httpx.TransportError)
                | retry_if_result(lambda r: r.status_code in self.retry.retryable_status_codes)
            ),
            before_sleep=self._log_retry,
            retry_error_callback=lambda state: state.outcome.result(),
            **retrying_kwargs,
        )
        return await retrying(self._http.request, method, path, **kwargs)

    async def _json(self, method: str, path: str, **kwargs) -> Any:
        response = await self.request(method, path, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = None
        if response.is_error:
            message = None
            if isinstance(body, dict):
                message = body.get("error") or body.get("detail")
            raise LocalAidAPIError(response.status_code, str(message or response.reason_phrase), body)
        return body

    # -- cache --

    def _collect_garbage(self, now: float) -> None:
        expired = [key for key, entry in self._cache.items() if now - entry.last_used > self.gc_time]
        for key in expired:
            del self._cache[key]

    async def query(self, path: str, params: dict | None = None, *, stale_time: float | None = None) -> Any:
        """GET through the cache."""
        now = self._clock()
        self._collect_garbage(now)
        key = _cache_key(path, params)
        stale_after = self.stale_time if stale_time is None else stale_time

        entry = self._cache.get(key)
        if entry is not None and now - entry.fetched_at < stale_after:
            entry.last_used = now
            return entry.data

        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        data = await self._json("GET", path, params=clean_params or None)
        self._cache[key] = _CacheEntry(data=data, fetched_at=now, last_used=now)
        return data

    def invalidate(self, prefix: str = "") -> int:
        """Drop cached queries whose path starts with ``prefix``. Returns the count."""
        keys = [key for key in self._cache if key[0].startswith(prefix)]
        for key in keys:
            del self._cache[key]
        return len(keys)

    async def mutate(self, method: str, path: str, *, invalidates: tuple[str, ...] = (), **kwargs) -> Any:
        data = await self._json(method, path, **kwargs)
        for prefix in invalidates:
            self.invalidate(prefix)
        return data

    # -- auth --

    async def login(self, email: str, password: str) -> dict:
        data = await self._json("POST", "/api/auth/login", json={"email": email, "password": password})
        self.set_token(data["access_token"])
        return data

    # -- worker --

    async def get_requirements(self, services: list[str] | None = None) -> dict:
        params = {"services": ",".join(services)} if services else None
        return await self.query("/api/worker/requirements", params)

    async def get_setup_steps(self) -> dict:
        return await self.query("/api/worker/setup-steps")

    async def get_training_steps(self) -> dict:
        return await self.query("/api/worker/training-steps")

    async def get_setup_progress(self) -> dict:
        return await self.query("/api/worker/setup-progress", stale_time=0)

    async def list_compliance_documents(self, document_type: str | None = None) -> dict:
        return await self.query("/api/worker/compliance-documents", {"documentType": document_type})

    async def upload_compliance_document(
        self,
        document_type: str,
        filename: str,
        content: bytes,
        content_type: str,
        *,
        document_name: str | None = None,
    ) -> dict:
        form = {"documentType": document_type}
        if document_name:
            form["documentName"] = document_name
        return await self.mutate(
            "POST",
            "/api/worker/compliance-documents",
            data=form,
            files={"file": (filename, content, content_type)},
            invalidates=("/api/worker/compliance-documents", "/api/worker/setup-progress"),
        )

    async def delete_compliance_document(self, document_id: str) -> dict:
        return await self.mutate(
            "DELETE",
            f"/api/worker/compliance-documents/{document_id}",
            invalidates=("/api/worker/compliance-documents", "/api/worker/setup-progress"),
        )

    # -- admin review --

    async def get_worker_compliance(self, worker_id: str) -> dict:
        return await self.query(f"/api/admin/compliance/{worker_id}")

    async def get_pending_workers(self) -> dict:
        return await self.query("/api/admin/compliance/pending")

    def _review_path(self, worker_id: str, document_id: str, action: str) -> str:
        return f"/api/admin/compliance/{worker_id}/documents/{document_id}/{action}"

    async def approve_document(self, worker_id: str, document_id: str) -> dict:
        return await self.mutate(
            "POST", self._review_path(worker_id, document_id, "approve"), invalidates=("/api/admin/compliance",)
        )

    async def reject_document(self, worker_id: str, document_id: str, reason: str) -> dict:
        return await self.mutate(
            "POST",
            self._review_path(worker_id, document_id, "reject"),
            json={"rejectionReason": reason},
            invalidates=("/api/admin/compliance",),
        )

    async def reset_document(self, worker_id: str, document_id: str) -> dict:
        return await self.mutate(
            "POST", self._review_path(worker_id, document_id, "reset"), invalidates=("/api/admin/compliance",)
        )

    async def update_document_expiry(self, worker_id: str, document_id: str, expires_at: datetime | None) -> dict:
        return await self.mutate(
            "PATCH",
            self._review_path(worker_id, document_id, "expiry"),
            json={"expiresAt": expires_at.isoformat() if expires_at else None},
            invalidates=("/api/admin/compliance",),
        )

    async def set_worker_published(self, worker_id: str, is_published: bool) -> dict:
        return await self.mutate(
            "PATCH",
            f"/api/admin/compliance/{worker_id}/publish",
            json={"isPublished": is_published},
            invalidates=("/api/admin/compliance",),
        )
