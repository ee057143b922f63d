from __future__ import annotations

import logging
import time
from typing import Protocol

from wordstress.config import RequestOptions
from wordstress.loadgen.client import Executor
from wordstress.metrics import AggregateReport, ErrorKind, MetricsAggregator, RequestOutcome


class LoadTestMode(Protocol):
    async def run(self, executor: Executor, aggregator: MetricsAggregator) -> AggregateReport:
        ...


async def dispatch(
    executor: Executor,
    url: str,
    options: RequestOptions,
    aggregator: MetricsAggregator,
    logger: logging.Logger,
) -> RequestOutcome:
    """Issue one request and record its outcome.

    An exception escaping the executor is recorded as an ``UNKNOWN``
    outcome so that sibling tasks keep running.
    """
    start = time.perf_counter()
    try:
        outcome = await executor.execute(url, options)
    except Exception as exc:
        logger.exception("Request to %s failed unexpectedly", url)
        outcome = RequestOutcome.failure(
            ErrorKind.UNKNOWN,
            f"{type(exc).__name__}: {exc}",
            (time.perf_counter() - start) * 1000.0,
        )
    aggregator.record_outcome(outcome)
    return outcome
