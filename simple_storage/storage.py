"""
simple_storage.storage — slot backends behind the ValueStore.

- Deterministic: pure (key, value) mapping, no clocks.
- Pluggable: a two-method backend protocol so a host can supply its own state DB.
- Durable option: `FileBackend` keeps slots in a JSON state file that survives
  process restarts. Every write replaces the file atomically.

State file layout (version 1)
-----------------------------
    {
      "version": 1,
      "slots": {"0x<key hex>": "0x<value hex>", ...}
    }
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from .config import load_config
from .errors import StateFileError, StorageError
from .logging import get_logger
from .numeric import WORD_BYTES

log = get_logger("simple_storage.storage")

STATE_FILE_VERSION = 1


# ---------------------------- Backend API ---------------------------- #


@runtime_checkable
class StorageBackend(Protocol):
    """Minimal backend interface for slot storage."""

    def get(self, key: bytes) -> Optional[bytes]: ...
    def set(self, key: bytes, value: bytes) -> None: ...


def check_key(key: bytes) -> bytes:
    if not isinstance(key, (bytes, bytearray)):
        raise StorageError("storage key must be bytes")
    if len(key) == 0:
        raise StorageError("storage key must be non-empty")
    max_len = load_config().max_storage_key_bytes
    if len(key) > max_len:
        raise StorageError(f"storage key too long (>{max_len} bytes)", context={"length": len(key)})
    return bytes(key)


def check_value(value: bytes) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise StorageError("storage value must be bytes")
    if len(value) > WORD_BYTES:
        raise StorageError(f"storage value too large (>{WORD_BYTES} bytes)", context={"length": len(value)})
    return bytes(value)


class MemoryBackend:
    """Thread-safe in-memory backend; the slot lives as long as the process."""

    def __init__(self) -> None:
        self._store: Dict[bytes, bytes] = {}
        self._lock = threading.RLock()

    def get(self, key: bytes) -> Optional[bytes]:
        key = check_key(key)
        with self._lock:
            return self._store.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        key, value = check_key(key), check_value(value)
        with self._lock:
            self._store[key] = value

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


class FileBackend:
    """
    JSON state-file backend.

    The file is read lazily on first access and cached; `set` writes the full
    document to a temp file in the same directory and `os.replace`s it over
    the old one, so readers never observe a half-written state.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()
        self._slots: Optional[Dict[bytes, bytes]] = None
        self._lock = threading.RLock()

    # -- file I/O --

    def _load(self) -> Dict[bytes, bytes]:
        if self._slots is not None:
            return self._slots
        if not self.path.exists():
            log.debug("state file absent, starting empty", extra={"path": self.path})
            self._slots = {}
            return self._slots
        try:
            doc = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StateFileError(f"cannot read state file: {e}", context={"path": str(self.path)}) from e
        self._slots = _parse_state(doc, self.path)
        log.debug("state file loaded", extra={"path": self.path, "slots": len(self._slots)})
        return self._slots

    def _flush(self, slots: Dict[bytes, bytes]) -> None:
        doc = {
            "version": STATE_FILE_VERSION,
            "slots": {"0x" + k.hex(): "0x" + v.hex() for k, v in sorted(slots.items())},
        }
        tmp: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=self.path.name + ".", suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2, sort_keys=True)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp is not None:
                try:
                    os.unlink(tmp)
                except OSError:
                    pass
            raise StateFileError(f"cannot write state file: {e}", context={"path": str(self.path)}) from e

    # -- backend API --

    def get(self, key: bytes) -> Optional[bytes]:
        key = check_key(key)
        with self._lock:
            return self._load().get(key)

    def set(self, key: bytes, value: bytes) -> None:
        key, value = check_key(key), check_value(value)
        with self._lock:
            slots = dict(self._load())
            slots[key] = value
            self._flush(slots)
            # cache only after the file is durable, so a failed write leaves both unchanged
            self._slots = slots


def _parse_hex(s: object, what: str, path: Path) -> bytes:
    if not isinstance(s, str) or not s.startswith("0x"):
        raise StateFileError(f"state file {what} must be a 0x-hex string", context={"path": str(path)})
    try:
        return bytes.fromhex(s[2:])
    except ValueError as e:
        raise StateFileError(f"state file {what} is not valid hex", context={"path": str(path)}) from e


def _parse_state(doc: object, path: Path) -> Dict[bytes, bytes]:
    if not isinstance(doc, dict):
        raise StateFileError("state file must contain a JSON object", context={"path": str(path)})
    version = doc.get("version")
    if version != STATE_FILE_VERSION:
        raise StateFileError(
            f"unsupported state file version: {version!r}",
            context={"path": str(path), "version": version},
        )
    slots = doc.get("slots", {})
    if not isinstance(slots, dict):
        raise StateFileError("state file 'slots' must be an object", context={"path": str(path)})
    out: Dict[bytes, bytes] = {}
    for k, v in slots.items():
        key, value = _parse_hex(k, "key", path), _parse_hex(v, "value", path)
        if not key:
            raise StateFileError("state file key must be non-empty", context={"path": str(path)})
        if len(value) > WORD_BYTES:
            raise StateFileError(
                f"state file value too large (>{WORD_BYTES} bytes)",
                context={"path": str(path), "key": k, "length": len(value)},
            )
        out[key] = value
    return out


def open_backend(state_path: Path | str | None = None) -> StorageBackend:
    """FileBackend for `state_path` (or the configured one), else a fresh MemoryBackend."""
    path = state_path if state_path is not None else load_config().state_path
    if path:
        return FileBackend(path)
    return MemoryBackend()


__all__ = [
    "STATE_FILE_VERSION",
    "StorageBackend",
    "MemoryBackend",
    "FileBackend",
    "check_key",
    "check_value",
    "open_backend",
]
