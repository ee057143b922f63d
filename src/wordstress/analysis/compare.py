from __future__ import annotations

from dataclasses import dataclass

from wordstress.metrics import AggregateReport

P99_REGRESSION = 0.2
THROUGHPUT_REGRESSION = 0.2
SUCCESS_RATE_DROP_POINTS = 5.0


@dataclass(frozen=True, slots=True)
class Regression:
    metric: str
    delta_pct: float
    message: str


def compare_reports(base: AggregateReport, candidate: AggregateReport) -> list[Regression]:
    regressions: list[Regression] = []
    if base.total_requests == 0 or candidate.total_requests == 0:
        return regressions

    base_p99 = base.response_time.p99
    if base_p99 > 0:
        delta = (candidate.response_time.p99 - base_p99) / base_p99
        if delta > P99_REGRESSION:
            regressions.append(
                Regression(
                    metric="p99_ms",
                    delta_pct=delta * 100,
                    message="p99 latency increased materially",
                )
            )

    drop = base.success_rate_pct - candidate.success_rate_pct
    if drop > SUCCESS_RATE_DROP_POINTS:
        regressions.append(
            Regression(
                metric="success_rate_pct",
                delta_pct=-drop,
                message="success rate regression detected",
            )
        )

    base_rps = base.throughput_rps
    if base_rps > 0:
        delta = (base_rps - candidate.throughput_rps) / base_rps
        if delta > THROUGHPUT_REGRESSION:
            regressions.append(
                Regression(
                    metric="throughput_rps",
                    delta_pct=delta * 100,
                    message="throughput regression detected",
                )
            )
    return regressions
