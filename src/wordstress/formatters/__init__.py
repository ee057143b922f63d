from __future__ import annotations

from wordstress.formatters.csv_format import format_csv
from wordstress.formatters.factory import Formatter, get_formatter
from wordstress.formatters.json_format import format_json
from wordstress.formatters.table import format_table
from wordstress.formatters.units import format_bytes, format_duration

__all__ = [
    "Formatter",
    "format_bytes",
    "format_csv",
    "format_duration",
    "format_json",
    "format_table",
    "get_formatter",
]
