"""Runtime settings for the expense tracker."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

DEFAULT_DATABASE = Path("data") / "expenses.db"
DEFAULT_LOG_LEVEL = "INFO"

DATABASE_ENV = "EXPENSE_TRACKER_DB"
LOG_LEVEL_ENV = "EXPENSE_TRACKER_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    database_path: Path
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.database_path}"

    def ensure_database_dir(self) -> None:
        self.database_path.parent.mkdir(parents=True, exist_ok=True)


def load_settings(
    database: Optional[Union[str, Path]] = None,
    log_level: Optional[str] = None,
) -> Settings:
    """Resolve settings from explicit arguments, then environment, then defaults."""
    raw_database = database or os.getenv(DATABASE_ENV) or DEFAULT_DATABASE
    raw_level = (log_level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(raw_level), int):
        raise ValueError(f"Unknown log level: {raw_level}")
    return Settings(database_path=Path(raw_database).expanduser(), log_level=raw_level)


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # SQLAlchemy echoes every statement at INFO; keep it quiet unless debugging.
    if logging.getLevelName(level) > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
