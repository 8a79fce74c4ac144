"""Configuration loaded from the environment (and an optional ``.env`` file).

Validated once at startup so a bad value fails fast.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Resolve the default data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    orders_dir: Path
    catalogue_file: Path
    receipts_dir: Path
    grace_period: float
    log_level: str

    @property
    def counter_file(self) -> Path:
        return self.orders_dir / "order_counter.txt"


def load_settings(env_file: Path | None = None) -> Settings:
    """Build Settings from ``SHOPHUB_*`` variables, loading ``.env`` first if present."""
    load_dotenv(env_file)

    data_dir = Path(os.getenv("SHOPHUB_DATA_DIR") or DEFAULT_DATA_DIR)
    return Settings(
        data_dir=data_dir,
        orders_dir=_path("SHOPHUB_ORDERS_DIR", data_dir / "orders"),
        catalogue_file=_path("SHOPHUB_CATALOGUE_FILE", data_dir / "products.json"),
        receipts_dir=_path("SHOPHUB_RECEIPTS_DIR", data_dir / "receipts"),
        grace_period=_grace_period(),
        log_level=_log_level(),
    )


def _path(key: str, default: Path) -> Path:
    value = os.getenv(key)
    return Path(value) if value else default


def _grace_period() -> float:
    raw = os.getenv("SHOPHUB_GRACE_PERIOD", "10")
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"SHOPHUB_GRACE_PERIOD must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationError(f"SHOPHUB_GRACE_PERIOD cannot be negative, got {value}")
    return value


def _log_level() -> str:
    level = os.getenv("SHOPHUB_LOG_LEVEL", "WARNING").strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(
            f"SHOPHUB_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {level!r}"
        )
    return level
