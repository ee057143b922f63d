from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

STATUS_BUCKETS = ("2xx", "3xx", "4xx", "5xx")
OTHER_BUCKET = "other"


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    NETWORK = "network"
    UNKNOWN = "unknown"


class ErrorGrouping(str, Enum):
    MESSAGE = "message"
    KIND = "kind"


@dataclass(frozen=True, slots=True)
class RequestOutcome:
    """Result of one request attempt.

    ``status_code`` is set exactly when ``error_kind`` is ``None``. Any HTTP
    response, 4xx and 5xx included, is a successful completion.
    """

    status_code: int | None
    response_time_ms: float
    size_bytes: int = 0
    error_kind: ErrorKind | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.status_code is None) == (self.error_kind is None):
            msg = "status_code must be set if and only if error_kind is None"
            raise ValueError(msg)

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, status_code: int, response_time_ms: float, size_bytes: int) -> RequestOutcome:
        return cls(status_code=status_code, response_time_ms=response_time_ms, size_bytes=size_bytes)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        response_time_ms: float,
        size_bytes: int = 0,
    ) -> RequestOutcome:
        return cls(
            status_code=None,
            response_time_ms=response_time_ms,
            size_bytes=size_bytes,
            error_kind=kind,
            error=message,
        )


@dataclass(frozen=True, slots=True)
class ResponseTimeStats:
    min: float = 0.0
    max: float = 0.0
    avg: float = 0.0
    median: float = 0.0
    p95: float = 0.0
    p99: float = 0.0


def _empty_buckets() -> dict[str, int]:
    return {bucket: 0 for bucket in STATUS_BUCKETS}


@dataclass(frozen=True, slots=True)
class AggregateReport:
    total_requests: int = 0
    duration_sec: float = 0.0
    status_codes: Mapping[str, int] = field(default_factory=_empty_buckets)
    errors: Mapping[str, int] = field(default_factory=dict)
    error_total: int = 0
    response_time: ResponseTimeStats = field(default_factory=ResponseTimeStats)
    throughput_rps: float = 0.0
    data_transferred_bytes: int = 0
    success_rate_pct: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "duration_sec": self.duration_sec,
            "success_rate_pct": self.success_rate_pct,
            "throughput_rps": self.throughput_rps,
            "data_transferred_bytes": self.data_transferred_bytes,
            "response_time_ms": {
                "min": self.response_time.min,
                "max": self.response_time.max,
                "avg": self.response_time.avg,
                "median": self.response_time.median,
                "p95": self.response_time.p95,
                "p99": self.response_time.p99,
            },
            "status_codes": dict(self.status_codes),
            "errors": dict(self.errors),
            "error_total": self.error_total,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AggregateReport:
        rt = data.get("response_time_ms", {})
        return cls(
            total_requests=int(data["total_requests"]),
            duration_sec=float(data["duration_sec"]),
            status_codes={k: int(v) for k, v in data.get("status_codes", {}).items()},
            errors={k: int(v) for k, v in data.get("errors", {}).items()},
            error_total=int(data.get("error_total", 0)),
            response_time=ResponseTimeStats(**{k: float(v) for k, v in rt.items()}),
            throughput_rps=float(data.get("throughput_rps", 0.0)),
            data_transferred_bytes=int(data.get("data_transferred_bytes", 0)),
            success_rate_pct=float(data.get("success_rate_pct", 0.0)),
        )


@dataclass(frozen=True, slots=True)
class PerSecondMetrics:
    second: int
    requests: int
    p50_ms: float
    p95_ms: float
    p99_ms: float
    error_rate: float
    timeout_rate: float
