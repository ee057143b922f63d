from __future__ import annotations

from hypothesis import given, strategies as st
import pytest

from wordstress.metrics import (
    AggregateReport,
    ErrorGrouping,
    ErrorKind,
    MetricsAggregator,
    RequestOutcome,
    ResponseTimeStats,
    summarize,
)


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def ok(status: int, ms: float, size: int = 100) -> RequestOutcome:
    return RequestOutcome.success(status, ms, size)


def failed(kind: ErrorKind, message: str, ms: float = 5.0) -> RequestOutcome:
    return RequestOutcome.failure(kind, message, ms)


outcomes_strategy = st.lists(
    st.one_of(
        st.builds(
            ok,
            st.integers(min_value=100, max_value=699),
            st.floats(min_value=0, max_value=10_000),
            st.integers(min_value=0, max_value=10_000),
        ),
        st.builds(
            failed,
            st.sampled_from(list(ErrorKind)),
            st.sampled_from(["Network error: refused", "Timeout after 100ms", "ReadError: reset"]),
        ),
    ),
    max_size=60,
)


@given(outcomes_strategy)
def test_buckets_plus_errors_equal_total(outcomes: list[RequestOutcome]) -> None:
    report = summarize(outcomes, duration_sec=2.0)
    assert sum(report.status_codes.values()) + report.error_total == report.total_requests
    assert report.total_requests == len(outcomes)
    assert sum(report.errors.values()) == report.error_total


@given(outcomes_strategy)
def test_response_times_ignore_failed_requests(outcomes: list[RequestOutcome]) -> None:
    report = summarize(outcomes, duration_sec=1.0)
    ok_times = [o.response_time_ms for o in outcomes if o.ok]
    if ok_times:
        assert report.response_time.min == min(ok_times)
        assert report.response_time.max == max(ok_times)
    else:
        assert report.response_time == ResponseTimeStats()


def test_all_errors_give_zero_response_times() -> None:
    outcomes = [
        failed(ErrorKind.TIMEOUT, "Timeout after 100ms", 100.0),
        failed(ErrorKind.NETWORK, "Network error: refused", 3.0),
    ]
    report = summarize(outcomes, duration_sec=1.0)
    assert report.response_time == ResponseTimeStats(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    assert report.success_rate_pct == 0.0
    assert report.error_total == 2


def test_empty_run_reports_zeroes() -> None:
    clock = FakeClock()
    aggregator = MetricsAggregator(clock=clock)
    clock.now += 3.0
    aggregator.complete()
    report = aggregator.aggregate_metrics()
    assert report.total_requests == 0
    assert report.success_rate_pct == 0
    assert report.throughput_rps == 0
    assert report.status_codes == {"2xx": 0, "3xx": 0, "4xx": 0, "5xx": 0}
    assert report.duration_sec == pytest.approx(3.0)


def test_http_error_statuses_count_as_success() -> None:
    outcomes = [ok(200, 10), ok(302, 20), ok(404, 30), ok(503, 40), failed(ErrorKind.NETWORK, "Network error: x")]
    report = summarize(outcomes, duration_sec=2.0)
    assert report.status_codes == {"2xx": 1, "3xx": 1, "4xx": 1, "5xx": 1}
    assert report.success_rate_pct == pytest.approx(80.0)
    assert report.throughput_rps == pytest.approx(2.5)
    assert report.response_time.median == 25
    assert report.response_time.avg == 25


def test_unclassified_status_goes_to_other_bucket() -> None:
    report = summarize([ok(101, 1), ok(200, 2), ok(700, 3)], duration_sec=1.0)
    assert report.status_codes["other"] == 2
    assert report.status_codes["2xx"] == 1


def test_bytes_include_failed_requests() -> None:
    outcomes = [
        ok(200, 10, size=1000),
        RequestOutcome.failure(ErrorKind.UNKNOWN, "ReadError: reset", 4.0, size_bytes=24),
    ]
    assert summarize(outcomes, duration_sec=1.0).data_transferred_bytes == 1024


def test_errors_keyed_by_message_by_default() -> None:
    outcomes = [
        failed(ErrorKind.NETWORK, "Network error: a.example unreachable"),
        failed(ErrorKind.NETWORK, "Network error: b.example unreachable"),
        failed(ErrorKind.NETWORK, "Network error: b.example unreachable"),
    ]
    report = summarize(outcomes, duration_sec=1.0)
    assert report.errors == {
        "Network error: a.example unreachable": 1,
        "Network error: b.example unreachable": 2,
    }


def test_errors_keyed_by_kind() -> None:
    outcomes = [
        failed(ErrorKind.NETWORK, "Network error: a.example unreachable"),
        failed(ErrorKind.NETWORK, "Network error: b.example unreachable"),
        failed(ErrorKind.TIMEOUT, "Timeout after 10ms"),
    ]
    report = summarize(outcomes, duration_sec=1.0, grouping=ErrorGrouping.KIND)
    assert report.errors == {"network": 2, "timeout": 1}


def test_aggregate_metrics_is_repeatable() -> None:
    clock = FakeClock()
    aggregator = MetricsAggregator(clock=clock)
    for ms in (12.0, 8.0, 30.0):
        clock.now += 0.5
        aggregator.record_outcome(ok(200, ms))
    aggregator.record_outcome(failed(ErrorKind.TIMEOUT, "Timeout after 50ms"))
    aggregator.complete()
    clock.now += 10.0
    first = aggregator.aggregate_metrics()
    second = aggregator.aggregate_metrics()
    assert first == second
    assert first.duration_sec == pytest.approx(1.5)
    assert first.throughput_rps == pytest.approx(4 / 1.5)


def test_outcomes_kept_in_completion_order() -> None:
    aggregator = MetricsAggregator()
    first, second = ok(200, 50), ok(500, 5)
    aggregator.record_outcome(first)
    aggregator.record_outcome(second)
    assert aggregator.outcomes == (first, second)


def test_duration_runs_until_complete_and_last_call_wins() -> None:
    clock = FakeClock(0.0)
    aggregator = MetricsAggregator(clock=clock)
    clock.now = 2.0
    assert aggregator.duration_seconds() == 2.0
    assert aggregator.elapsed_seconds() == 2.0
    aggregator.complete()
    clock.now = 4.0
    assert aggregator.duration_seconds() == 2.0
    aggregator.complete()
    assert aggregator.duration_seconds() == 4.0


def test_timeline_groups_by_completion_second() -> None:
    clock = FakeClock(0.0)
    aggregator = MetricsAggregator(clock=clock)
    clock.now = 0.2
    aggregator.record_outcome(ok(200, 10))
    clock.now = 0.7
    aggregator.record_outcome(ok(200, 30))
    clock.now = 2.1
    aggregator.record_outcome(failed(ErrorKind.TIMEOUT, "Timeout after 10ms"))
    timeline = aggregator.timeline()
    assert [m.second for m in timeline] == [0, 1, 2]
    assert timeline[0].requests == 2
    assert timeline[0].p50_ms == 20
    assert timeline[1].requests == 0
    assert timeline[2].timeout_rate == 1.0
    assert timeline[2].p99_ms == 0.0


def test_outcome_requires_status_xor_error() -> None:
    with pytest.raises(ValueError):
        RequestOutcome(status_code=200, response_time_ms=1.0, error_kind=ErrorKind.TIMEOUT)
    with pytest.raises(ValueError):
        RequestOutcome(status_code=None, response_time_ms=1.0)


def test_report_dict_round_trip() -> None:
    report = summarize([ok(200, 10), failed(ErrorKind.NETWORK, "Network error: x")], duration_sec=1.0)
    assert AggregateReport.from_dict(report.to_dict()) == report
