from __future__ import annotations

from pathlib import Path

from wordstress.config import load_defaults
from wordstress.storage.duckdb_store import Storage


def default_storage(db_path: Path | None = None) -> Storage:
    return Storage(db_path or load_defaults().db_path)


__all__ = ["Storage", "default_storage"]
