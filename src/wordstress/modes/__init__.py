from __future__ import annotations

from wordstress.modes.base import LoadTestMode, dispatch
from wordstress.modes.burst import BurstMode
from wordstress.modes.factory import mode_for
from wordstress.modes.steady import SteadyStateMode

__all__ = ["BurstMode", "LoadTestMode", "SteadyStateMode", "dispatch", "mode_for"]
