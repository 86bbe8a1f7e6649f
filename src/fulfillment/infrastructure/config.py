"""Runtime settings, read from the environment.

    FULFILLMENT_DATABASE_URL   SQLAlchemy URL (default: sqlite file under data/)
    FULFILLMENT_DB_TIMEOUT     seconds to wait on a lock before failing
    FULFILLMENT_ACTOR          identity recorded on audit entries from the CLI
    FULFILLMENT_LOG_LEVEL      DEBUG / INFO / WARNING / ...
    FULFILLMENT_LOG_FORMAT     "console" or "json"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from fulfillment.domain.exceptions import ValidationError

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

LOG_FORMATS = ("console", "json")


@dataclass(frozen=True)
class Settings:
    database_url: str = f"sqlite:///{_DATA_DIR / 'fulfillment.db'}"
    db_timeout: float = 30.0
    actor: str = "cli"
    log_level: str = "INFO"
    log_format: str = "console"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = Settings()

        raw_timeout = env.get("FULFILLMENT_DB_TIMEOUT", str(defaults.db_timeout))
        try:
            db_timeout = float(raw_timeout)
        except ValueError:
            raise ValidationError(
                f"FULFILLMENT_DB_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from None
        if db_timeout <= 0:
            raise ValidationError("FULFILLMENT_DB_TIMEOUT must be positive")

        log_format = env.get("FULFILLMENT_LOG_FORMAT", defaults.log_format).lower()
        if log_format not in LOG_FORMATS:
            raise ValidationError(
                f"FULFILLMENT_LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}"
            )

        return Settings(
            database_url=env.get("FULFILLMENT_DATABASE_URL", defaults.database_url),
            db_timeout=db_timeout,
            actor=env.get("FULFILLMENT_ACTOR", defaults.actor),
            log_level=env.get("FULFILLMENT_LOG_LEVEL", defaults.log_level).upper(),
            log_format=log_format,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
