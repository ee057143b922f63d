from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from wordstress.config import RunConfig
from wordstress.loadgen.client import Executor
from wordstress.metrics import AggregateReport, MetricsAggregator
from wordstress.modes.base import dispatch

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BurstMode:
    """One wave of simultaneous requests, joined once all have settled."""

    config: RunConfig
    logger: logging.Logger = field(default=LOGGER)

    async def run(self, executor: Executor, aggregator: MetricsAggregator) -> AggregateReport:
        count = self.config.burst.burst_clients or 0
        self.logger.info("Sending %d simultaneous requests", count)
        tasks = [
            asyncio.create_task(
                dispatch(executor, self.config.target_url, self.config.request, aggregator, self.logger)
            )
            for _ in range(count)
        ]
        if tasks:
            await asyncio.gather(*tasks)
        aggregator.complete()
        return aggregator.aggregate_metrics()
