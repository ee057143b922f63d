from __future__ import annotations

import asyncio
import logging
import time
from typing import Protocol

import httpx

from wordstress.config import RequestOptions
from wordstress.metrics import ErrorKind, RequestOutcome

LOGGER = logging.getLogger(__name__)


class Executor(Protocol):
    async def execute(self, url: str, options: RequestOptions) -> RequestOutcome:
        ...


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class RequestExecutor:
    """Issues single HTTP requests and classifies what happened.

    One attempt per call, no retries. Transport failures come back as
    outcomes carrying an ``ErrorKind``; they are never raised.

    The body is only downloaded when the response has no Content-Length
    header. Latency for those responses therefore includes the body
    transfer, while responses with the header are timed up to the headers.
    """

    def __init__(self, client: httpx.AsyncClient, logger: logging.Logger | None = None) -> None:
        self._client = client
        self._logger = logger or LOGGER

    async def execute(self, url: str, options: RequestOptions) -> RequestOutcome:
        start = time.perf_counter()
        try:
            status_code, size = await asyncio.wait_for(
                self._send(url, options),
                timeout=options.timeout_sec,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            outcome = RequestOutcome.failure(
                ErrorKind.TIMEOUT,
                f"Timeout after {options.timeout_ms}ms",
                _elapsed_ms(start),
            )
        except httpx.ConnectError as exc:
            outcome = RequestOutcome.failure(
                ErrorKind.NETWORK,
                f"Network error: {_describe(exc)}",
                _elapsed_ms(start),
            )
        except httpx.HTTPError as exc:
            outcome = RequestOutcome.failure(
                ErrorKind.UNKNOWN,
                f"{type(exc).__name__}: {_describe(exc)}",
                _elapsed_ms(start),
            )
        else:
            outcome = RequestOutcome.success(status_code, _elapsed_ms(start), size)
        self._logger.debug(
            "%s %s -> %s in %.1fms",
            options.method,
            url,
            outcome.status_code if outcome.ok else outcome.error,
            outcome.response_time_ms,
        )
        return outcome

    async def _send(self, url: str, options: RequestOptions) -> tuple[int, int]:
        request = self._client.build_request(
            options.method,
            url,
            headers={"User-Agent": options.user_agent} if options.user_agent else None,
            timeout=options.timeout_sec,
        )
        response = await self._client.send(
            request,
            stream=True,
            follow_redirects=options.follow_redirects,
        )
        try:
            length = _content_length(response)
            if length is None:
                length = len(await response.aread())
            return response.status_code, length
        finally:
            await response.aclose()


def _content_length(response: httpx.Response) -> int | None:
    raw = response.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
