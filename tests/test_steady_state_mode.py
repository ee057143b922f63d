from __future__ import annotations

import asyncio
import time

from conftest import StubExecutor

from wordstress.config import LoadMode, RunConfig, SteadyStateConfig
from wordstress.metrics import MetricsAggregator
from wordstress.modes import SteadyStateMode, mode_for


def _config(clients: int, interval_ms: int, duration_sec: float) -> RunConfig:
    return RunConfig(
        target_url="http://shop.test/",
        mode=LoadMode.STEADY_STATE,
        steady=SteadyStateConfig(clients=clients, interval_ms=interval_ms, duration_sec=duration_sec),
    )


def test_clients_pace_requests_over_duration(stub_executor: StubExecutor) -> None:
    mode = SteadyStateMode(_config(clients=2, interval_ms=100, duration_sec=1))
    aggregator = MetricsAggregator()

    report = asyncio.run(mode.run(stub_executor, aggregator))

    assert 18 <= report.total_requests <= 22
    assert report.status_codes["2xx"] == report.total_requests
    assert report.error_total == 0
    assert aggregator.completed
    assert 0.8 <= report.duration_sec < 1.5


def test_slow_requests_free_run_without_sleeping() -> None:
    executor = StubExecutor(latency_sec=0.05)
    mode = SteadyStateMode(_config(clients=1, interval_ms=10, duration_sec=0.3))

    started = time.perf_counter()
    report = asyncio.run(mode.run(executor, MetricsAggregator()))
    elapsed = time.perf_counter() - started

    gaps = [b - a for a, b in zip(executor.dispatched_at, executor.dispatched_at[1:])]
    assert 4 <= report.total_requests <= 7
    assert all(gap < 0.09 for gap in gaps)
    # The last request may still be in flight at the deadline.
    assert elapsed < 0.3 + 0.15


def test_one_failing_client_does_not_stop_the_others() -> None:
    executor = StubExecutor(latency_sec=0.005, raises={1}, network_failures={2})
    mode = SteadyStateMode(_config(clients=3, interval_ms=50, duration_sec=0.2))

    report = asyncio.run(mode.run(executor, MetricsAggregator()))

    assert report.total_requests == executor.calls
    assert report.error_total == 2
    assert report.errors["Network error: unreachable"] == 1
    assert report.errors["RuntimeError: stub blew up on call 1"] == 1
    assert report.status_codes["2xx"] == report.total_requests - 2


def test_factory_selects_steady_state() -> None:
    assert isinstance(mode_for(_config(1, 100, 1)), SteadyStateMode)
