from __future__ import annotations

import io

from rich.console import Console
from rich.table import Table

from wordstress.formatters.units import format_bytes, format_duration
from wordstress.metrics import AggregateReport

STATUS_LABELS = {
    "2xx": "2xx Success",
    "3xx": "3xx Redirect",
    "4xx": "4xx Client Error",
    "5xx": "5xx Server Error",
    "other": "Other",
}


def _table(title: str, first: str, second: str) -> Table:
    table = Table(title=title, title_justify="left", border_style="cyan")
    table.add_column(first, min_width=25)
    table.add_column(second, min_width=20)
    return table


def format_table(report: AggregateReport) -> str:
    summary = _table("Summary", "Metric", "Value")
    summary.add_row("Total Requests", str(report.total_requests))
    summary.add_row("Duration", format_duration(report.duration_sec))
    summary.add_row("Success Rate", f"{report.success_rate_pct:.2f}%")
    summary.add_row("Throughput", f"{report.throughput_rps:.2f} req/s")
    summary.add_row("Data Transferred", format_bytes(report.data_transferred_bytes))

    rt = report.response_time
    times = _table("Response Times", "Metric", "Value")
    times.add_row("Min", f"{rt.min:.2f}ms")
    times.add_row("Max", f"{rt.max:.2f}ms")
    times.add_row("Average", f"{rt.avg:.2f}ms")
    times.add_row("Median (P50)", f"{rt.median:.2f}ms")
    times.add_row("P95", f"{rt.p95:.2f}ms")
    times.add_row("P99", f"{rt.p99:.2f}ms")

    statuses = _table("Status Codes", "Status Code", "Count")
    for bucket, count in report.status_codes.items():
        statuses.add_row(STATUS_LABELS.get(bucket, bucket), str(count))

    tables = [summary, times, statuses]
    if report.error_total > 0:
        errors = _table("Errors", "Error Type", "Count")
        for error, count in report.errors.items():
            errors.add_row(error, str(count))
        tables.append(errors)

    buffer = io.StringIO()
    console = Console(file=buffer, width=100, color_system=None, highlight=False)
    for table in tables:
        console.print(table)
        console.print()
    return buffer.getvalue().rstrip() + "\n"
