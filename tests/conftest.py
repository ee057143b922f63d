from __future__ import annotations

import asyncio
import time

import pytest

from wordstress.config import RequestOptions
from wordstress.metrics import ErrorKind, RequestOutcome


class StubExecutor:
    """Executor double that sleeps for a fixed latency and answers 200.

    Calls listed in ``network_failures`` (1-based) come back as network
    errors; calls listed in ``raises`` raise ``RuntimeError``.
    """

    def __init__(
        self,
        latency_sec: float = 0.01,
        network_failures: set[int] | None = None,
        raises: set[int] | None = None,
    ) -> None:
        self.latency_sec = latency_sec
        self.network_failures = network_failures or set()
        self.raises = raises or set()
        self.calls = 0
        self.dispatched_at: list[float] = []

    async def execute(self, url: str, options: RequestOptions) -> RequestOutcome:
        self.calls += 1
        call = self.calls
        self.dispatched_at.append(time.perf_counter())
        start = time.perf_counter()
        await asyncio.sleep(self.latency_sec)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        if call in self.raises:
            raise RuntimeError(f"stub blew up on call {call}")
        if call in self.network_failures:
            return RequestOutcome.failure(ErrorKind.NETWORK, "Network error: unreachable", elapsed_ms)
        return RequestOutcome.success(200, elapsed_ms, 512)


@pytest.fixture
def stub_executor() -> StubExecutor:
    return StubExecutor()
