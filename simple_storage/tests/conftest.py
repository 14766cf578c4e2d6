from __future__ import annotations

import logging
from pathlib import Path

import pytest

from simple_storage import logging as slog
from simple_storage.config import load_config
from simple_storage.runtime.host import Host
from simple_storage.storage import FileBackend
from simple_storage.store import ValueStore


@pytest.fixture(autouse=True)
def _isolate_config_and_logging(monkeypatch: pytest.MonkeyPatch):
    """
    Each test starts from default configuration and an unconfigured package
    logger, regardless of what the developer's shell exports.
    """
    for key in (
        "SIMPLE_STORAGE_STATE",
        "SIMPLE_STORAGE_LOG_LEVEL",
        "SIMPLE_STORAGE_LOG_FORMAT",
        "SIMPLE_STORAGE_MAX_CALLDATA_BYTES",
        "SIMPLE_STORAGE_MAX_KEY_BYTES",
    ):
        monkeypatch.delenv(key, raising=False)
    load_config.cache_clear()
    yield
    load_config.cache_clear()
    slog.clear_context()
    pkg = logging.getLogger("simple_storage")
    for h in list(pkg.handlers):
        pkg.removeHandler(h)
    pkg.propagate = True
    pkg.setLevel(logging.NOTSET)


@pytest.fixture
def store() -> ValueStore:
    return ValueStore()


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "store.json"


@pytest.fixture
def file_store(state_path: Path) -> ValueStore:
    return ValueStore(FileBackend(state_path))


@pytest.fixture
def host() -> Host:
    return Host()
