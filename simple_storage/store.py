"""
simple_storage.store — the ValueStore.

One slot, one uint256, two accessors:

    set(x) -> None   unconditionally replace the stored value with x
    get()  -> int    return the stored value (0 before any set)

The store does no locking, logging or event emission. Calls are assumed to
arrive one at a time; `simple_storage.runtime.host.Host` provides that
ordering when the store is shared between threads.
"""

from __future__ import annotations

from typing import Final, Optional

from .numeric import WORD_BYTES, ZERO, from_word, to_word
from .storage import MemoryBackend, StorageBackend

# Slot index 0 as a 32-byte key.
SLOT_KEY: Final[bytes] = (0).to_bytes(WORD_BYTES, "big")


class ValueStore:
    """Holds one bounded unsigned integer and mediates every read and write of it."""

    __slots__ = ("_backend",)

    def __init__(self, backend: Optional[StorageBackend] = None) -> None:
        self._backend: StorageBackend = backend if backend is not None else MemoryBackend()

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @property
    def slot_key(self) -> bytes:
        return SLOT_KEY

    def set(self, value: int) -> None:
        # to_word checks the range before the slot is touched; a rejected value leaves it as it was.
        self._backend.set(SLOT_KEY, to_word(value))

    def get(self) -> int:
        raw = self._backend.get(SLOT_KEY)
        if raw is None:
            return ZERO
        return from_word(raw)

    def __repr__(self) -> str:
        return f"ValueStore(backend={type(self._backend).__name__})"


__all__ = ["SLOT_KEY", "ValueStore"]
