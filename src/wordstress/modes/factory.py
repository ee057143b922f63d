from __future__ import annotations

import logging

from wordstress.config import LoadMode, RunConfig
from wordstress.errors import ConfigurationError
from wordstress.modes.base import LoadTestMode
from wordstress.modes.burst import BurstMode
from wordstress.modes.steady import SteadyStateMode


def mode_for(config: RunConfig, logger: logging.Logger | None = None) -> LoadTestMode:
    if config.mode is LoadMode.STEADY_STATE:
        return SteadyStateMode(config) if logger is None else SteadyStateMode(config, logger)
    if config.mode is LoadMode.BURST:
        return BurstMode(config) if logger is None else BurstMode(config, logger)
    valid = ", ".join(m.value for m in LoadMode)
    msg = f"Unknown test mode: {config.mode}. Valid modes: {valid}"
    raise ConfigurationError(msg)
