from __future__ import annotations

from wordstress.config import RunConfig
from wordstress.metrics import ErrorKind, MetricsAggregator, RequestOutcome
from wordstress.storage import Storage


def test_save_and_load_run(tmp_path) -> None:
    storage = Storage(tmp_path / "nested" / "runs.duckdb")
    aggregator = MetricsAggregator()
    aggregator.record_outcome(RequestOutcome.success(200, 12.5, 300))
    aggregator.record_outcome(RequestOutcome.failure(ErrorKind.TIMEOUT, "Timeout after 10ms", 10.0))
    aggregator.complete()
    report = aggregator.aggregate_metrics()
    config = RunConfig(target_url="https://example.com/", notes="first")

    storage.save_run(
        config,
        "run-a",
        report,
        aggregator.outcomes,
        aggregator.completion_offsets,
        aggregator.timeline(),
    )

    assert storage.run_exists("run-a")
    assert not storage.run_exists("run-b")
    assert storage.load_report("run-a") == report
    meta = storage.load_run_meta("run-a")
    assert meta is not None
    assert meta["run_id"] == "run-a"
    assert meta["steady"]["clients"] == 5

    outcomes = storage.load_outcomes("run-a")
    assert outcomes["status_code"].isna().tolist() == [False, True]
    assert outcomes["error_kind"].tolist()[1] == "timeout"

    runs = storage.list_runs()
    assert runs["run_id"].tolist() == ["run-a"]
    assert len(storage.load_per_second("run-a")) == 1
    assert storage.load_report("missing") is None
