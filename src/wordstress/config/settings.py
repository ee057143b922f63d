from __future__ import annotations

import os
import re
from argparse import Namespace
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import httpx
from dotenv import load_dotenv

from wordstress.config.models import (
    BurstConfig,
    HttpMethod,
    LoadMode,
    OutputFormat,
    RequestOptions,
    RunConfig,
    SteadyStateConfig,
)
from wordstress.errors import ConfigurationError
from wordstress.useragent import resolve_user_agent

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Defaults:
    clients: int = 5
    interval_ms: int = 1000
    duration_sec: int = 60
    timeout_ms: int = 30_000
    output: str = OutputFormat.TABLE.value
    log_level: str = "INFO"
    db_path: Path = Path(".wordstress/wordstress.duckdb")


def load_defaults(environ: Mapping[str, str] | None = None) -> Defaults:
    """Read default values from the environment.

    A ``.env`` file in the working directory is loaded first when no explicit
    mapping is given. Variables already set in the process environment win.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ
    base = Defaults()
    return Defaults(
        clients=_env_int(environ, "WORDSTRESS_CLIENTS", base.clients),
        interval_ms=_env_int(environ, "WORDSTRESS_INTERVAL", base.interval_ms),
        duration_sec=_env_int(environ, "WORDSTRESS_DURATION", base.duration_sec),
        timeout_ms=_env_int(environ, "WORDSTRESS_TIMEOUT", base.timeout_ms),
        output=environ.get("WORDSTRESS_OUTPUT", base.output).lower(),
        log_level=environ.get("LOG_LEVEL", base.log_level).upper(),
        db_path=Path(environ.get("WORDSTRESS_DB_PATH", str(base.db_path))),
    )


def _env_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        msg = f"{key} must be an integer, got {raw!r}"
        raise ConfigurationError(msg) from exc


def build_url(https: bool, domain: str, endpoint: str = "/") -> str:
    scheme = "https" if https else "http"
    host = _SCHEME_RE.sub("", domain)
    path = endpoint if endpoint.startswith("/") else f"/{endpoint}"
    return f"{scheme}://{host}{path}"


def parse_switch(value: str | bool, name: str) -> bool:
    if isinstance(value, bool):
        return value
    lowered = value.strip().lower()
    if lowered == "on":
        return True
    if lowered == "off":
        return False
    msg = f"--{name} must be 'on' or 'off', got {value!r}"
    raise ConfigurationError(msg)


def build_config(args: Namespace, defaults: Defaults | None = None) -> RunConfig:
    """Translate parsed CLI arguments into a ``RunConfig``.

    Unset options take their value from ``defaults``. The result is not
    validated; call ``validate`` before running it.
    """
    defaults = defaults or Defaults()
    domain = getattr(args, "domain", None) or ""
    if not domain:
        raise ConfigurationError("Domain is required")

    mode_name = (getattr(args, "mode", None) or LoadMode.STEADY_STATE.value).lower()
    try:
        mode = LoadMode(mode_name)
    except ValueError as exc:
        valid = ", ".join(m.value for m in LoadMode)
        msg = f"Unknown test mode: {mode_name}. Valid modes: {valid}"
        raise ConfigurationError(msg) from exc

    output_name = (getattr(args, "output", None) or defaults.output).lower()
    try:
        output = OutputFormat(output_name)
    except ValueError as exc:
        valid = ", ".join(f.value for f in OutputFormat)
        msg = f"--output must be one of: {valid}"
        raise ConfigurationError(msg) from exc

    https = parse_switch(_arg(args, "https", "on"), "https")
    follow_redirects = parse_switch(_arg(args, "follow_redirects", "on"), "follow-redirects")
    user_agent = resolve_user_agent(
        custom=getattr(args, "user_agent", None),
        browser=getattr(args, "browser", None),
    )

    burst_clients = getattr(args, "burst_clients", None)
    return RunConfig(
        target_url=build_url(https, domain, _arg(args, "endpoint", "/")),
        mode=mode,
        request=RequestOptions(
            method=_arg(args, "method", HttpMethod.GET.value).upper(),
            timeout_ms=_arg(args, "timeout", defaults.timeout_ms),
            follow_redirects=follow_redirects,
            user_agent=user_agent,
        ),
        steady=SteadyStateConfig(
            clients=_arg(args, "clients", defaults.clients),
            interval_ms=_arg(args, "interval", defaults.interval_ms),
            duration_sec=_arg(args, "duration", defaults.duration_sec),
        ),
        burst=BurstConfig(burst_clients=burst_clients if mode is LoadMode.BURST else None),
        output=output,
        notes=_arg(args, "notes", ""),
    )


def _arg(args: Namespace, name: str, default):
    value = getattr(args, name, None)
    return default if value is None else value


def validate(config: RunConfig) -> None:
    try:
        host = httpx.URL(config.target_url).host
    except httpx.InvalidURL as exc:
        msg = f"Invalid target URL {config.target_url!r}: {exc}"
        raise ConfigurationError(msg) from exc
    if not host:
        raise ConfigurationError("Domain is required")

    if config.mode is LoadMode.BURST:
        if config.burst.burst_clients is None:
            raise ConfigurationError("--burst-clients is required for burst mode")
        if config.burst.burst_clients < 1:
            raise ConfigurationError("--burst-clients must be greater than 0")
    else:
        if config.steady.clients < 1:
            raise ConfigurationError("--clients must be greater than 0")
        if config.steady.interval_ms < 1:
            raise ConfigurationError("--interval must be greater than 0")
        if config.steady.duration_sec < 1:
            raise ConfigurationError("--duration must be greater than 0")

    valid_methods = [m.value for m in HttpMethod]
    if config.request.method not in valid_methods:
        msg = f"--method must be one of: {', '.join(valid_methods)}"
        raise ConfigurationError(msg)

    if config.request.timeout_ms < 1:
        raise ConfigurationError("--timeout must be greater than 0")
