from __future__ import annotations

from typing import Callable

from wordstress.config import OutputFormat
from wordstress.errors import ConfigurationError
from wordstress.formatters.csv_format import format_csv
from wordstress.formatters.json_format import format_json
from wordstress.formatters.table import format_table
from wordstress.metrics import AggregateReport

Formatter = Callable[[AggregateReport], str]

_FORMATTERS: dict[OutputFormat, Formatter] = {
    OutputFormat.TABLE: format_table,
    OutputFormat.JSON: format_json,
    OutputFormat.CSV: format_csv,
}


def get_formatter(output: OutputFormat | str) -> Formatter:
    if isinstance(output, OutputFormat):
        return _FORMATTERS[output]
    try:
        return _FORMATTERS[OutputFormat(output.lower())]
    except ValueError as exc:
        valid = ", ".join(f.value for f in OutputFormat)
        msg = f"Unknown format: {output}. Valid formats: {valid}"
        raise ConfigurationError(msg) from exc
