from __future__ import annotations

from wordstress.analysis.compare import Regression, compare_reports

__all__ = ["Regression", "compare_reports"]
