"""Database location for the claim/override storage adapter.

Claims and overrides are owned by upstream storage; claimstack only reads them.
``DATABASE_URI`` points at that store. Without it, a local SQLite file under the
claimstack data directory is used, which is handy for fixtures and demos.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env

APP_DIR_NAME: Final[str] = "claimstack"
DEFAULT_DB_FILENAME: Final[str] = "claims.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False

    @classmethod
    def for_sqlite_file(cls, path: Path) -> DatabaseConfig:
        return cls(uri=f"sqlite+pysqlite:///{path}")

    @property
    def is_sqlite(self) -> bool:
        return self.uri.startswith("sqlite")


def get_data_dir(*, ensure: bool = True) -> Path:
    """Return the directory holding local claimstack data."""

    env_dir = optional_env("CLAIMSTACK_DATA_DIR")
    if env_dir:
        data_dir = Path(env_dir)
    elif os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        data_dir = (Path(base) if base else Path.home() / "AppData" / "Local") / APP_DIR_NAME
    else:
        base = os.getenv("XDG_DATA_HOME")
        data_dir = (Path(base) if base else Path.home() / ".local" / "share") / APP_DIR_NAME
    data_dir = data_dir.expanduser().resolve()
    if ensure:
        data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_database_config() -> DatabaseConfig:
    env_uri = optional_env("DATABASE_URI")
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    return DatabaseConfig.for_sqlite_file(get_data_dir() / DEFAULT_DB_FILENAME)
