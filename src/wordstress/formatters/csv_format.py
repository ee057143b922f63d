from __future__ import annotations

import csv
import io

from wordstress.formatters.table import STATUS_LABELS
from wordstress.metrics import AggregateReport


def format_csv(report: AggregateReport) -> str:
    """Render a report as a two-column ``Metric,Value`` sheet."""
    rt = report.response_time
    rows: list[list[object]] = [
        ["Metric", "Value"],
        ["Total Requests", report.total_requests],
        ["Duration (seconds)", f"{report.duration_sec:.2f}"],
        ["Success Rate (%)", f"{report.success_rate_pct:.2f}"],
        ["Throughput (req/s)", f"{report.throughput_rps:.2f}"],
        ["Data Transferred (bytes)", report.data_transferred_bytes],
        [],
        ["Response Time Metrics"],
        ["Min (ms)", f"{rt.min:.2f}"],
        ["Max (ms)", f"{rt.max:.2f}"],
        ["Average (ms)", f"{rt.avg:.2f}"],
        ["Median P50 (ms)", f"{rt.median:.2f}"],
        ["P95 (ms)", f"{rt.p95:.2f}"],
        ["P99 (ms)", f"{rt.p99:.2f}"],
        [],
        ["Status Code Distribution"],
    ]
    rows.extend([STATUS_LABELS.get(bucket, bucket), count] for bucket, count in report.status_codes.items())
    if report.error_total > 0:
        rows.append([])
        rows.append(["Error Details"])
        rows.extend([error, count] for error, count in report.errors.items())

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")
