from __future__ import annotations

from wordstress.metrics.aggregator import (
    MetricsAggregator,
    aggregate_per_second,
    median,
    percentile,
    status_bucket,
    summarize,
)
from wordstress.metrics.models import (
    AggregateReport,
    ErrorGrouping,
    ErrorKind,
    PerSecondMetrics,
    RequestOutcome,
    ResponseTimeStats,
)

__all__ = [
    "AggregateReport",
    "ErrorGrouping",
    "ErrorKind",
    "MetricsAggregator",
    "PerSecondMetrics",
    "RequestOutcome",
    "ResponseTimeStats",
    "aggregate_per_second",
    "median",
    "percentile",
    "status_bucket",
    "summarize",
]
