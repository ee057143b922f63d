from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import timezone
from pathlib import Path
from typing import Sequence

import duckdb
import pandas as pd

from wordstress.config import RunConfig
from wordstress.metrics import AggregateReport, PerSecondMetrics, RequestOutcome


@dataclass(slots=True)
class Storage:
    db_path: Path

    def __post_init__(self) -> None:
        self.db_path = Path(self.db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> duckdb.DuckDBPyConnection:
        return duckdb.connect(str(self.db_path))

    def _init_schema(self) -> None:
        with self._connect() as con:
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS run_meta (
                    run_id TEXT PRIMARY KEY,
                    created_at TIMESTAMP,
                    mode TEXT,
                    target_url TEXT,
                    config_json TEXT,
                    report_json TEXT,
                    notes TEXT
                );
                """
            )
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS request_outcomes (
                    run_id TEXT,
                    seq INTEGER,
                    completed_offset_sec DOUBLE,
                    response_time_ms DOUBLE,
                    status_code INTEGER,
                    error_kind TEXT,
                    error TEXT,
                    size_bytes BIGINT
                );
                """
            )
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS per_second (
                    run_id TEXT,
                    second INTEGER,
                    requests INTEGER,
                    p50_ms DOUBLE,
                    p95_ms DOUBLE,
                    p99_ms DOUBLE,
                    error_rate DOUBLE,
                    timeout_rate DOUBLE
                );
                """
            )

    def run_exists(self, run_id: str) -> bool:
        with self._connect() as con:
            result = con.execute(
                "SELECT COUNT(*) FROM run_meta WHERE run_id = ?",
                [run_id],
            ).fetchone()
            return bool(result and result[0] > 0)

    def save_run(
        self,
        config: RunConfig,
        run_id: str,
        report: AggregateReport,
        outcomes: Sequence[RequestOutcome],
        offsets: Sequence[float],
        per_second: Sequence[PerSecondMetrics],
    ) -> None:
        metadata = dict(config.to_metadata())
        metadata["run_id"] = run_id
        created_at = config.created_at.astimezone(timezone.utc).replace(tzinfo=None)
        with self._connect() as con:
            con.execute(
                "INSERT INTO run_meta VALUES (?, ?, ?, ?, ?, ?, ?)",
                [
                    run_id,
                    created_at,
                    config.mode.value,
                    config.target_url,
                    json.dumps(metadata),
                    json.dumps(report.to_dict()),
                    config.notes,
                ],
            )
            outcomes_df = pd.DataFrame(
                [
                    {
                        "run_id": run_id,
                        "seq": seq,
                        "completed_offset_sec": offset,
                        "response_time_ms": o.response_time_ms,
                        "status_code": o.status_code,
                        "error_kind": o.error_kind.value if o.error_kind else None,
                        "error": o.error,
                        "size_bytes": o.size_bytes,
                    }
                    for seq, (o, offset) in enumerate(zip(outcomes, offsets))
                ]
            )
            if not outcomes_df.empty:
                outcomes_df = outcomes_df.astype({"status_code": "Int64"})
                con.execute("INSERT INTO request_outcomes SELECT * FROM outcomes_df")
            per_df = pd.DataFrame(
                [
                    {
                        "run_id": run_id,
                        "second": m.second,
                        "requests": m.requests,
                        "p50_ms": m.p50_ms,
                        "p95_ms": m.p95_ms,
                        "p99_ms": m.p99_ms,
                        "error_rate": m.error_rate,
                        "timeout_rate": m.timeout_rate,
                    }
                    for m in per_second
                ]
            )
            if not per_df.empty:
                con.execute("INSERT INTO per_second SELECT * FROM per_df")

    def list_runs(self) -> pd.DataFrame:
        with self._connect() as con:
            return con.execute(
                "SELECT run_id, created_at, mode, target_url, notes FROM run_meta ORDER BY created_at DESC"
            ).fetchdf()

    def load_run_meta(self, run_id: str) -> dict[str, object] | None:
        with self._connect() as con:
            row = con.execute(
                "SELECT config_json FROM run_meta WHERE run_id = ?",
                [run_id],
            ).fetchone()
            if not row:
                return None
            return json.loads(row[0])

    def load_report(self, run_id: str) -> AggregateReport | None:
        with self._connect() as con:
            row = con.execute(
                "SELECT report_json FROM run_meta WHERE run_id = ?",
                [run_id],
            ).fetchone()
            if not row:
                return None
            return AggregateReport.from_dict(json.loads(row[0]))

    def load_outcomes(self, run_id: str) -> pd.DataFrame:
        with self._connect() as con:
            return con.execute(
                "SELECT * FROM request_outcomes WHERE run_id = ? ORDER BY seq",
                [run_id],
            ).fetchdf()

    def load_per_second(self, run_id: str) -> pd.DataFrame:
        with self._connect() as con:
            return con.execute(
                "SELECT * FROM per_second WHERE run_id = ? ORDER BY second",
                [run_id],
            ).fetchdf()
