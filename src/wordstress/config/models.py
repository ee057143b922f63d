from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping


class LoadMode(str, Enum):
    STEADY_STATE = "steady-state"
    BURST = "burst"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


@dataclass(frozen=True, slots=True)
class RequestOptions:
    method: str = "GET"
    timeout_ms: int = 30_000
    follow_redirects: bool = True
    user_agent: str = ""

    @property
    def timeout_sec(self) -> float:
        return self.timeout_ms / 1000.0


@dataclass(frozen=True, slots=True)
class SteadyStateConfig:
    clients: int = 5
    interval_ms: int = 1000
    duration_sec: float = 60

    @property
    def interval_sec(self) -> float:
        return self.interval_ms / 1000.0


@dataclass(frozen=True, slots=True)
class BurstConfig:
    burst_clients: int | None = None


@dataclass(frozen=True, slots=True)
class RunConfig:
    target_url: str
    mode: LoadMode = LoadMode.STEADY_STATE
    request: RequestOptions = field(default_factory=RequestOptions)
    steady: SteadyStateConfig = field(default_factory=SteadyStateConfig)
    burst: BurstConfig = field(default_factory=BurstConfig)
    output: OutputFormat = OutputFormat.TABLE
    run_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    notes: str = ""

    def expected_duration_sec(self) -> float | None:
        if self.mode is LoadMode.STEADY_STATE:
            return float(self.steady.duration_sec)
        return None

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "run_id": self.run_id or "",
            "created_at": self.created_at.isoformat(),
            "target_url": self.target_url,
            "mode": self.mode.value,
            "output": self.output.value,
            "notes": self.notes,
            "request": {
                "method": self.request.method,
                "timeout_ms": self.request.timeout_ms,
                "follow_redirects": self.request.follow_redirects,
                "user_agent": self.request.user_agent,
            },
            "steady": {
                "clients": self.steady.clients,
                "interval_ms": self.steady.interval_ms,
                "duration_sec": self.steady.duration_sec,
            },
            "burst": {
                "burst_clients": self.burst.burst_clients,
            },
        }
