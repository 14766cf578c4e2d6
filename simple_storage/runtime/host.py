"""
simple_storage.runtime.host — sequential execution host for a ValueStore.

The store assumes its calls arrive one at a time. The Host provides that
ordering: every dispatch runs under a single exclusive lock, so concurrent
callers are serialised into one schedule.

The Host is also the argument-decoding boundary. Calldata (or Python
arguments) is decoded/coerced through the ABI before the store is touched,
so an out-of-range value is rejected as a DomainViolation with the slot
unchanged.

    host = Host()
    host.call("set", [42]).ok          # True
    host.call("get").return_value      # 42
    host.call_data(encode_call("get")) # same, from raw calldata
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from ..abi.calls import AbiFunction, decode_call, encode_return, lookup
from ..abi.types import coerce_uint
from ..errors import AbiError, DomainViolation, StoreError
from ..logging import get_logger
from ..storage import StorageBackend, open_backend
from ..store import ValueStore

log = get_logger("simple_storage.host")

# Failures that belong to the caller; anything else is a host fault and propagates.
_REJECTIONS = (DomainViolation, AbiError)


@dataclass(frozen=True)
class CallResult:
    ok: bool
    function: Optional[str]
    return_value: Optional[int] = None
    return_data: bytes = b""
    error: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "function": self.function,
            "return": self.return_value,
            "returnData": "0x" + self.return_data.hex(),
            "error": self.error,
        }


class Host:
    """Owns one ValueStore and serialises every call made to it."""

    def __init__(
        self,
        store: Optional[ValueStore] = None,
        *,
        backend: Optional[StorageBackend] = None,
    ) -> None:
        if store is not None and backend is not None:
            raise ValueError("pass either store or backend, not both")
        self.store = store if store is not None else ValueStore(backend)
        self._lock = threading.RLock()

    # -- dispatch --

    def _execute(self, fn: AbiFunction, args: Sequence[int]) -> CallResult:
        if fn.name == "set":
            self.store.set(args[0])
            value = None
        elif fn.name == "get":
            value = self.store.get()
        else:
            raise AbiError(f"function not implemented by host: {fn.name!r}")
        log.debug("call applied", extra={"function": fn.name})
        return CallResult(
            ok=True,
            function=fn.name,
            return_value=value,
            return_data=encode_return(fn, value),
        )

    def _reject(self, function: Optional[str], err: StoreError) -> CallResult:
        payload = err.to_dict()
        log.warning("call rejected: %s", payload["message"], extra={"code": payload["code"]})
        return CallResult(ok=False, function=function, error=payload)

    def call(self, name: str, args: Sequence[Any] = ()) -> CallResult:
        """Dispatch by function name with Python values (ints or numeric strings)."""
        with self._lock:
            try:
                fn = lookup(name)
                if len(args) != len(fn.inputs):
                    raise AbiError(
                        f"{fn.signature} takes {len(fn.inputs)} argument(s), got {len(args)}",
                        context={"expected": len(fn.inputs), "got": len(args)},
                    )
                coerced = [coerce_uint(a, bits=t.bits) for t, a in zip(fn.inputs, args)]
                return self._execute(fn, coerced)
            except _REJECTIONS as e:
                return self._reject(name, e)

    def call_data(self, data: bytes) -> CallResult:
        """Dispatch selector-prefixed calldata."""
        with self._lock:
            try:
                fn, args = decode_call(data)
                return self._execute(fn, args)
            except _REJECTIONS as e:
                return self._reject(None, e)

    # -- conveniences mirroring the two operations --

    def set(self, value: Any) -> None:
        """Like `call("set", [value])`, but raises the rejection instead of returning it."""
        with self._lock:
            self.store.set(coerce_uint(value, bits=256))

    def get(self) -> int:
        with self._lock:
            return self.store.get()


def run_call(
    name: str,
    args: Sequence[Any] = (),
    *,
    state_path: Optional[Path | str] = None,
) -> CallResult:
    """Execute one call against a fresh host (file backend if a state path is configured)."""
    return Host(backend=open_backend(state_path)).call(name, args)


__all__ = ["CallResult", "Host", "run_call"]
