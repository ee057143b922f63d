from __future__ import annotations

import json

from wordstress.metrics import AggregateReport


def format_json(report: AggregateReport) -> str:
    return json.dumps(report.to_dict(), indent=2)
