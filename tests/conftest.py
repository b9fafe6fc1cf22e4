from __future__ import annotations

from typing import Iterator

import pytest

from settings import get_settings

_SETTINGS_ENV = (
    "MONGO_URI",
    "MONGO_DB",
    "MONGO_COLLECTION",
    "MONGO_SERVER_SELECTION_TIMEOUT_MS",
    "LOADER_BATCH_SIZE",
    "LOADER_WORKER_COUNT",
    "LOADER_TIMEOUT_SECONDS",
    "COLLECTION_RESET_MODE",
    "MEMORY_STORE_PATH",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch) -> Iterator[None]:
    for name in _SETTINGS_ENV:
        # setenv first so monkeypatch removes anything a .env file loads later
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setattr("cli.app.configure_logging", lambda level=None: None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
