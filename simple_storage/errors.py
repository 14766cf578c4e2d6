"""
Structured errors for simple_storage.

Every error carries a short machine-readable ``code``, a human-readable
``message`` and an optional ``context`` mapping, so the host can place it
into a JSON result envelope unchanged.

    StoreError("message")
    StoreError("message", code="some_code", context={...})
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class StoreError(Exception):
    """Base error for the store, its backends and the ABI boundary."""

    default_code = "store_error"

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code: str = str(code or self.default_code)
        self.message: str = str(message)
        self.context: Dict[str, Any] = dict(context or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class DomainViolation(StoreError, ValueError):
    """A value outside [0, 2**256 - 1] (or not an integer) reached a uint256 boundary."""

    default_code = "domain_violation"


class AbiError(StoreError, ValueError):
    """Malformed calldata, unknown function/selector or argument mismatch."""

    default_code = "abi_error"


class StorageError(StoreError):
    """Backend rejected a key/value or failed to read/write."""

    default_code = "storage_error"


class StateFileError(StorageError):
    """The durable state file exists but cannot be parsed or written."""

    default_code = "state_file_error"


__all__ = [
    "StoreError",
    "DomainViolation",
    "AbiError",
    "StorageError",
    "StateFileError",
]
