"""
simple_storage.config — state location, logging defaults and size caps.

Configuration precedence:
  1) Explicit arguments (CLI flags)
  2) Environment variables (SIMPLE_STORAGE_*)
  3) Hardcoded safe defaults below

Env vars:
  - SIMPLE_STORAGE_STATE              (path)  default: unset → in-memory slot
  - SIMPLE_STORAGE_LOG_LEVEL          (str)   default: WARNING
  - SIMPLE_STORAGE_LOG_FORMAT         (str)   json | text, default: auto (TTY → text)
  - SIMPLE_STORAGE_MAX_CALLDATA_BYTES (int)   default: 1024
  - SIMPLE_STORAGE_MAX_KEY_BYTES      (int)   default: 64

Usage:
    from simple_storage.config import load_config
    cfg = load_config()
    if cfg.state_path: ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

ENV_PREFIX = "SIMPLE_STORAGE_"


# ----------------------------- helpers ---------------------------------------


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


def _env_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    if not raw:
        return None
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...]) -> Optional[str]:
    raw = (os.getenv(name) or "").strip().lower()
    return raw if raw in choices else None


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class StoreConfig:
    # None means the slot lives in memory for the lifetime of the process
    state_path: Optional[Path]

    log_level: str
    log_format: Optional[str]

    max_calldata_bytes: int
    max_storage_key_bytes: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "state_path": str(self.state_path) if self.state_path else None,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "max_calldata_bytes": self.max_calldata_bytes,
            "max_storage_key_bytes": self.max_storage_key_bytes,
        }


@lru_cache(maxsize=1)
def load_config() -> StoreConfig:
    """Build and cache a StoreConfig from environment + safe defaults."""
    return StoreConfig(
        state_path=_env_path(ENV_PREFIX + "STATE"),
        log_level=(os.getenv(ENV_PREFIX + "LOG_LEVEL") or "WARNING").strip().upper(),
        log_format=_env_choice(ENV_PREFIX + "LOG_FORMAT", ("json", "text")),
        max_calldata_bytes=_env_int(ENV_PREFIX + "MAX_CALLDATA_BYTES", 1024, min_v=16, max_v=65_536),
        max_storage_key_bytes=_env_int(ENV_PREFIX + "MAX_KEY_BYTES", 64, min_v=1, max_v=256),
    )


def reload_config() -> StoreConfig:
    """Drop the cached config and re-read the environment (tests, CLI)."""
    load_config.cache_clear()
    return load_config()


__all__ = ["ENV_PREFIX", "StoreConfig", "load_config", "reload_config"]
