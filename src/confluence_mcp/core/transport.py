import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import urlparse

import httpx

from .config import DEFAULT_TIMEOUT_SECONDS
from .errors import (
    ConfluenceApiError,
    ConfluenceClientError,
    ConfluenceParseError,
    ConfluenceRequestFailedError,
    sanitize,
)
from .observability import log_event

SleepFunc = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 2  # total extra attempts
    backoff_base_seconds: float = 0.5  # 0.5, 1.0, 2.0...
    retry_min_status: int = 500

    def delay_for(self, attempt: int) -> float:
        return self.backoff_base_seconds * (2**attempt)


class ConfluenceTransport:
    """
    Shared HTTP transport for the Confluence REST API.
    - Sends Authorization/JSON headers on every request
    - Enforces a per-attempt timeout and retries 5xx/network failures
    - Raises ConfluenceApiError for non-2xx responses with a sanitized body
    """

    def __init__(
        self,
        *,
        auth_header: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        retry: Optional[RetryConfig] = None,
        sleep: Optional[SleepFunc] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        if not auth_header:
            raise ValueError("auth_header must be provided.")

        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self.sleep: SleepFunc = sleep or asyncio.sleep
        self.log = logger or logging.getLogger("confluence_mcp.transport")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            headers={
                "Authorization": auth_header,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            # The overall per-attempt deadline is enforced with wait_for below.
            timeout=None,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "ConfluenceTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _attempt(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]],
        json: Optional[Dict[str, Any]],
    ) -> httpx.Response:
        return await asyncio.wait_for(
            self.http.request(method, url, params=params, json=json),
            timeout=self.timeout_seconds,
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> httpx.Response:
        """
        Core request method.
        - Retries on transient failures (network/timeouts + status >= 500)
        - Never retries 4xx responses
        - Raises ConfluenceApiError on a final non-2xx response
        - Raises ConfluenceRequestFailedError when no response arrived after retries
        """
        method = method.upper()
        endpoint = urlparse(url).path or url
        attempt = 0

        while True:
            start = time.perf_counter()
            try:
                resp = await self._attempt(method, url, params=params, json=json)
            except (httpx.TransportError, asyncio.TimeoutError) as exc:
                log_event(
                    "op_call",
                    tool=tool,
                    method=method,
                    endpoint=endpoint,
                    status="exception",
                    error_type=type(exc).__name__,
                    duration_ms=int((time.perf_counter() - start) * 1000),
                    attempt=attempt,
                )
                if attempt < self.retry.max_retries:
                    await self._backoff(attempt, tool=tool)
                    attempt += 1
                    continue
                detail = sanitize(str(exc)) or type(exc).__name__
                raise ConfluenceRequestFailedError(
                    f"Request failed after retries: {method} {url}: {detail}"
                ) from exc
            except httpx.HTTPError as exc:
                # Other httpx exceptions (rare) - do not blindly retry
                raise ConfluenceClientError(
                    f"HTTP error calling {method} {url}: {sanitize(str(exc))}"
                ) from exc

            log_event(
                "op_call",
                tool=tool,
                method=method,
                endpoint=endpoint,
                status=resp.status_code,
                duration_ms=int((time.perf_counter() - start) * 1000),
                attempt=attempt,
            )

            if resp.status_code >= self.retry.retry_min_status:
                if attempt < self.retry.max_retries:
                    await self._backoff(attempt, tool=tool)
                    attempt += 1
                    continue

            if resp.status_code < 200 or resp.status_code >= 300:
                raise self._to_api_error(resp)

            return resp

    async def _backoff(self, attempt: int, *, tool: Optional[str]) -> None:
        delay = self.retry.delay_for(attempt)
        log_event(
            "op_retry",
            self.log,
            level=logging.DEBUG,
            tool=tool,
            attempt=attempt + 1,
            delay_s=delay,
        )
        await self.sleep(delay)

    @staticmethod
    def _to_api_error(resp: httpx.Response) -> ConfluenceApiError:
        try:
            body = resp.text or ""
        except Exception:
            body = ""
        return ConfluenceApiError(
            status=resp.status_code,
            status_text=resp.reason_phrase or "",
            body=body,
        )

    @staticmethod
    def _safe_json(resp: httpx.Response) -> Dict[str, Any]:
        # Handle empty responses (204 No Content, etc.)
        if not resp.content:
            return {}

        try:
            data = resp.json()
        except ValueError as exc:
            snippet = sanitize((resp.text or "")[:500])
            raise ConfluenceParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url}, got non-JSON body snippet: "
                f"{snippet!r}"
            ) from exc

        if not isinstance(data, dict):
            raise ConfluenceParseError(
                f"Expected top-level JSON object from "
                f"{resp.request.method} {resp.request.url}, "
                f"got {type(data).__name__}"
            )
        return data

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        resp = await self.request(method, url, params=params, json=json, tool=tool)
        return self._safe_json(resp)

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.request_json("GET", url, params=params, tool=tool)

    async def post(
        self, url: str, *, json: Dict[str, Any], tool: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.request_json("POST", url, json=json, tool=tool)

    async def put(
        self, url: str, *, json: Dict[str, Any], tool: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.request_json("PUT", url, json=json, tool=tool)


__all__ = ["ConfluenceTransport", "RetryConfig", "SleepFunc"]
