from __future__ import annotations

import math

_SIZES = ("B", "KB", "MB", "GB")


def format_bytes(num_bytes: int) -> str:
    if num_bytes <= 0:
        return "0 B"
    exponent = min(int(math.floor(math.log(num_bytes, 1024))), len(_SIZES) - 1)
    return f"{num_bytes / 1024 ** exponent:.2f} {_SIZES[exponent]}"


def format_duration(seconds: float) -> str:
    return f"{seconds:.2f}s"
