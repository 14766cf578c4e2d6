"""
simple_storage — a single persistent uint256 slot with a setter and a getter.

Public entrypoints:

- ValueStore
    The core: `set(x)` replaces the stored value, `get()` returns it (0 before
    any set). Values are checked against [0, 2**256 - 1].
- Host / run_call(name, args=(), *, state_path=None)
    Sequential dispatch of named calls or raw calldata through the ABI
    boundary, returning a CallResult envelope.
- MemoryBackend / FileBackend
    Where the slot lives: process memory, or a durable JSON state file.
"""

from __future__ import annotations

from .errors import (AbiError, DomainViolation, StateFileError, StorageError,
                     StoreError)
from .numeric import U256_MAX
from .runtime.host import CallResult, Host, run_call
from .storage import FileBackend, MemoryBackend, StorageBackend
from .store import SLOT_KEY, ValueStore
from .version import __version__


def version() -> str:
    """Return the simple_storage version string."""
    return __version__


__all__ = [
    "__version__",
    "version",
    "ValueStore",
    "SLOT_KEY",
    "U256_MAX",
    "Host",
    "CallResult",
    "run_call",
    "StorageBackend",
    "MemoryBackend",
    "FileBackend",
    "StoreError",
    "DomainViolation",
    "AbiError",
    "StorageError",
    "StateFileError",
]
