from __future__ import annotations

import math
import time
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

import numpy as np

from wordstress.metrics.models import (
    OTHER_BUCKET,
    STATUS_BUCKETS,
    AggregateReport,
    ErrorGrouping,
    ErrorKind,
    PerSecondMetrics,
    RequestOutcome,
    ResponseTimeStats,
)


def median(sorted_values: Sequence[float]) -> float:
    n = len(sorted_values)
    if n == 0:
        return 0.0
    mid = n // 2
    if n % 2 == 1:
        return float(sorted_values[mid])
    return float((sorted_values[mid - 1] + sorted_values[mid]) / 2)


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Linearly interpolated percentile of an ascending sequence.

    ``index = p/100 * (n-1)``; when the index falls between two ranks the
    result is ``lo*(1-w) + hi*w`` with ``w`` the fractional part. An empty
    sequence yields 0.
    """
    n = len(sorted_values)
    if n == 0:
        return 0.0
    if p == 50:
        return median(sorted_values)
    index = (p / 100) * (n - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    weight = index % 1
    if lower == upper:
        return float(sorted_values[lower])
    return float(sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight)


def status_bucket(status_code: int) -> str:
    # Codes outside 200-599 have no class of their own.
    klass = status_code // 100
    if 2 <= klass <= 5:
        return f"{klass}xx"
    return OTHER_BUCKET


def error_key(outcome: RequestOutcome, grouping: ErrorGrouping) -> str:
    kind = outcome.error_kind or ErrorKind.UNKNOWN
    if grouping is ErrorGrouping.KIND:
        return kind.value
    return outcome.error or kind.value


def response_time_stats(outcomes: Iterable[RequestOutcome]) -> ResponseTimeStats:
    times = np.sort(np.fromiter((o.response_time_ms for o in outcomes if o.ok), dtype=float))
    if times.size == 0:
        return ResponseTimeStats()
    return ResponseTimeStats(
        min=float(times[0]),
        max=float(times[-1]),
        avg=float(times.mean()),
        median=median(times),
        p95=percentile(times, 95),
        p99=percentile(times, 99),
    )


def summarize(
    outcomes: Sequence[RequestOutcome],
    duration_sec: float,
    grouping: ErrorGrouping = ErrorGrouping.MESSAGE,
) -> AggregateReport:
    """Derive an ``AggregateReport`` from recorded outcomes.

    Response-time statistics only consider outcomes without a transport
    error. Ratios are 0 when nothing was recorded.
    """
    total = len(outcomes)
    if total == 0:
        return AggregateReport(duration_sec=duration_sec)

    buckets: dict[str, int] = {bucket: 0 for bucket in STATUS_BUCKETS}
    errors: Counter[str] = Counter()
    data_transferred = 0
    for outcome in outcomes:
        data_transferred += outcome.size_bytes
        if outcome.status_code is not None:
            key = status_bucket(outcome.status_code)
            buckets[key] = buckets.get(key, 0) + 1
        else:
            errors[error_key(outcome, grouping)] += 1

    error_total = sum(errors.values())
    throughput = total / duration_sec if duration_sec > 0 else 0.0
    return AggregateReport(
        total_requests=total,
        duration_sec=duration_sec,
        status_codes=buckets,
        errors=dict(errors),
        error_total=error_total,
        response_time=response_time_stats(outcomes),
        throughput_rps=throughput,
        data_transferred_bytes=data_transferred,
        success_rate_pct=(total - error_total) / total * 100,
    )


@dataclass(slots=True)
class MetricsAggregator:
    """Append-only collector of request outcomes for one run.

    Outcomes are kept in completion order. The run clock starts when the
    aggregator is created. Appends happen on the event loop thread, so no
    lock is taken.
    """

    grouping: ErrorGrouping = ErrorGrouping.MESSAGE
    clock: Callable[[], float] = time.perf_counter
    _outcomes: list[RequestOutcome] = field(default_factory=list, init=False, repr=False)
    _offsets: list[float] = field(default_factory=list, init=False, repr=False)
    _started: float = field(default=0.0, init=False)
    _ended: float | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self._started = self.clock()

    @property
    def outcomes(self) -> tuple[RequestOutcome, ...]:
        return tuple(self._outcomes)

    @property
    def completion_offsets(self) -> tuple[float, ...]:
        return tuple(self._offsets)

    @property
    def completed(self) -> bool:
        return self._ended is not None

    def record_outcome(self, outcome: RequestOutcome) -> None:
        self._offsets.append(self.clock() - self._started)
        self._outcomes.append(outcome)

    def complete(self) -> None:
        # Last call wins.
        self._ended = self.clock()

    def elapsed_seconds(self) -> float:
        return self.clock() - self._started

    def duration_seconds(self) -> float:
        end = self._ended if self._ended is not None else self.clock()
        return end - self._started

    def aggregate_metrics(self) -> AggregateReport:
        return summarize(self._outcomes, self.duration_seconds(), self.grouping)

    def timeline(self) -> list[PerSecondMetrics]:
        return aggregate_per_second(self._outcomes, self._offsets)


def aggregate_per_second(
    outcomes: Sequence[RequestOutcome],
    offsets: Sequence[float],
) -> list[PerSecondMetrics]:
    buckets: dict[int, list[RequestOutcome]] = defaultdict(list)
    for outcome, offset in zip(outcomes, offsets):
        buckets[max(0, int(offset))].append(outcome)
    if not buckets:
        return []

    metrics: list[PerSecondMetrics] = []
    for second in range(max(buckets) + 1):
        bucket = buckets.get(second, [])
        latencies = sorted(o.response_time_ms for o in bucket if o.ok)
        error_count = sum(1 for o in bucket if not o.ok)
        timeout_count = sum(1 for o in bucket if o.error_kind is ErrorKind.TIMEOUT)
        total = max(1, len(bucket))
        metrics.append(
            PerSecondMetrics(
                second=second,
                requests=len(bucket),
                p50_ms=percentile(latencies, 50),
                p95_ms=percentile(latencies, 95),
                p99_ms=percentile(latencies, 99),
                error_rate=error_count / total,
                timeout_rate=timeout_count / total,
            )
        )
    return metrics
