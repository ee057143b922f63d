from __future__ import annotations

from wordstress.config.models import (
    BurstConfig,
    HttpMethod,
    LoadMode,
    OutputFormat,
    RequestOptions,
    RunConfig,
    SteadyStateConfig,
)
from wordstress.config.settings import Defaults, build_config, build_url, load_defaults, validate

__all__ = [
    "BurstConfig",
    "Defaults",
    "HttpMethod",
    "LoadMode",
    "OutputFormat",
    "RequestOptions",
    "RunConfig",
    "SteadyStateConfig",
    "build_config",
    "build_url",
    "load_defaults",
    "validate",
]
