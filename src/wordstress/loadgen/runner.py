from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from wordstress.config import RunConfig
from wordstress.loadgen.client import RequestExecutor
from wordstress.metrics import AggregateReport, MetricsAggregator, PerSecondMetrics
from wordstress.modes import mode_for
from wordstress.storage import Storage

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[float, float | None], Awaitable[None]]

PROGRESS_INTERVAL_SEC = 1.0

# One connection per request and no cap on concurrent connections.
UNPOOLED_LIMITS = httpx.Limits(max_connections=None, max_keepalive_connections=0)


@dataclass(frozen=True, slots=True)
class RunResult:
    run_id: str
    report: AggregateReport
    timeline: list[PerSecondMetrics]


def _new_run_id() -> str:
    return uuid.uuid4().hex


async def run_test(
    config: RunConfig,
    storage: Storage | None = None,
    progress: ProgressCallback | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> RunResult:
    logger = logger or LOGGER
    run_id = config.run_id or _new_run_id()
    if storage is not None and storage.run_exists(run_id):
        msg = f"Run {run_id} already exists"
        raise ValueError(msg)

    mode = mode_for(config, logger)
    async with httpx.AsyncClient(transport=transport, limits=UNPOOLED_LIMITS) as client:
        executor = RequestExecutor(client, logger)
        aggregator = MetricsAggregator()
        run_task = asyncio.create_task(mode.run(executor, aggregator))
        if progress is not None:
            await _report_progress(run_task, aggregator, config.expected_duration_sec(), progress)
        report = await run_task

    timeline = aggregator.timeline()
    logger.info(
        "Run %s finished: %d requests in %.2fs",
        run_id,
        report.total_requests,
        report.duration_sec,
    )
    if storage is not None:
        storage.save_run(
            config,
            run_id,
            report,
            aggregator.outcomes,
            aggregator.completion_offsets,
            timeline,
        )
    return RunResult(run_id=run_id, report=report, timeline=timeline)


async def _report_progress(
    run_task: asyncio.Task[AggregateReport],
    aggregator: MetricsAggregator,
    expected_sec: float | None,
    progress: ProgressCallback,
) -> None:
    while not run_task.done():
        await asyncio.wait({run_task}, timeout=PROGRESS_INTERVAL_SEC)
        await progress(aggregator.elapsed_seconds(), expected_sec)
