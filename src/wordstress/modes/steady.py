from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field

from wordstress.config import RunConfig
from wordstress.loadgen.client import Executor
from wordstress.metrics import AggregateReport, MetricsAggregator
from wordstress.modes.base import dispatch

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SteadyStateMode:
    """Fixed number of clients, each pacing requests at a constant interval.

    Every client keeps its own clock. Request ``i`` is due at ``i * interval``
    after the client started. A client whose requests take longer than the
    interval never sleeps and sends back to back. A client stops once its
    duration has elapsed or the next due time falls outside it; a request in
    flight at the deadline is allowed to finish.
    """

    config: RunConfig
    logger: logging.Logger = field(default=LOGGER)

    async def run(self, executor: Executor, aggregator: MetricsAggregator) -> AggregateReport:
        steady = self.config.steady
        self.logger.info(
            "Starting %d clients every %dms for %ss",
            steady.clients,
            steady.interval_ms,
            steady.duration_sec,
        )
        tasks = [
            asyncio.create_task(self._client(client_id, executor, aggregator))
            for client_id in range(steady.clients)
        ]
        await asyncio.gather(*tasks)
        aggregator.complete()
        return aggregator.aggregate_metrics()

    async def _client(self, client_id: int, executor: Executor, aggregator: MetricsAggregator) -> None:
        duration = float(self.config.steady.duration_sec)
        interval = self.config.steady.interval_sec
        started = time.perf_counter()
        request_index = 0
        while time.perf_counter() - started < duration:
            await dispatch(executor, self.config.target_url, self.config.request, aggregator, self.logger)
            request_index += 1
            next_due = request_index * interval
            if next_due >= duration:
                break
            await _sleep_until(started + next_due)
        self.logger.debug("Client %d finished after %d requests", client_id, request_index)


async def _sleep_until(target: float) -> None:
    delay = max(0.0, target - time.perf_counter())
    if delay > 0:
        await asyncio.sleep(delay)
