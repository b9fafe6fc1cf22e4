from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from models.schemas import ResetMode


_MONGO_URI_ENV = "MONGO_URI"
_MONGO_DB_ENV = "MONGO_DB"
_MONGO_COLLECTION_ENV = "MONGO_COLLECTION"
_SELECTION_TIMEOUT_ENV = "MONGO_SERVER_SELECTION_TIMEOUT_MS"
_BATCH_SIZE_ENV = "LOADER_BATCH_SIZE"
_WORKER_COUNT_ENV = "LOADER_WORKER_COUNT"
_TIMEOUT_ENV = "LOADER_TIMEOUT_SECONDS"
_RESET_MODE_ENV = "COLLECTION_RESET_MODE"
_MEMORY_STORE_PATH_ENV = "MEMORY_STORE_PATH"
_LOG_LEVEL_ENV = "LOG_LEVEL"


class ConfigurationError(ValueError):
    """Raised when settings cannot be loaded or hold unusable values."""


@dataclass(frozen=True)
class Settings:
    mongo_uri: str
    mongo_db: str
    mongo_collection: str
    server_selection_timeout_ms: int
    batch_size: int
    loader_workers: int
    request_timeout: float
    reset_mode: ResetMode
    memory_store_path: Optional[str]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    candidate = _read_str_env(name, "")
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {candidate!r}.") from exc
    if parsed <= 0:
        raise ConfigurationError(f"{name} must be positive, got {parsed}.")
    return parsed


def _read_positive_float(name: str, default: float) -> float:
    candidate = _read_str_env(name, "")
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {candidate!r}.") from exc
    if parsed <= 0:
        raise ConfigurationError(f"{name} must be positive, got {parsed}.")
    return parsed


def _read_reset_mode(default: ResetMode) -> ResetMode:
    candidate = _read_str_env(_RESET_MODE_ENV, "")
    if not candidate:
        return default
    try:
        return ResetMode(candidate.lower())
    except ValueError as exc:
        choices = ", ".join(mode.value for mode in ResetMode)
        raise ConfigurationError(
            f"{_RESET_MODE_ENV} must be one of: {choices}; got {candidate!r}."
        ) from exc


def _read_log_level(default: str) -> str:
    return _read_str_env(_LOG_LEVEL_ENV, default).upper()


def load_env_file(path: Optional[Path] = None) -> bool:
    """Load variables from a ``.env`` file without overriding the environment.

    An explicit ``path`` must exist; without one the nearest ``.env`` below the
    working directory is used when present.
    """
    if path is not None:
        if not path.is_file():
            raise ConfigurationError(f"Environment file {str(path)!r} does not exist.")
        return load_dotenv(path)
    discovered = find_dotenv(usecwd=True)
    if not discovered:
        return False
    return load_dotenv(discovered)


@lru_cache
def get_settings() -> Settings:
    return Settings(
        mongo_uri=_read_str_env(_MONGO_URI_ENV, "mongodb://localhost:27017"),
        mongo_db=_read_str_env(_MONGO_DB_ENV, "sample_iot_data"),
        mongo_collection=_read_str_env(_MONGO_COLLECTION_ENV, "readings"),
        server_selection_timeout_ms=_read_positive_int(_SELECTION_TIMEOUT_ENV, 5000),
        batch_size=_read_positive_int(_BATCH_SIZE_ENV, 500),
        loader_workers=_read_positive_int(_WORKER_COUNT_ENV, 4),
        request_timeout=_read_positive_float(_TIMEOUT_ENV, 5.0),
        reset_mode=_read_reset_mode(ResetMode.truncate),
        memory_store_path=_read_optional_env(_MEMORY_STORE_PATH_ENV, None),
        log_level=_read_log_level("INFO"),
    )
