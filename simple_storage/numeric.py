"""
simple_storage.numeric
======================

The bounded 256-bit unsigned integer domain held by the store.

Python ints are arbitrary precision, so the bound is modelled explicitly:
construction is *checked* (out-of-range input raises ``DomainViolation``)
and nothing ever wraps modulo 2**256.

Persisted words are 32-byte big-endian.
"""

from __future__ import annotations

from typing import Any, Final

from .errors import DomainViolation

U256_BITS: Final[int] = 256
U256_MAX: Final[int] = (1 << U256_BITS) - 1
WORD_BYTES: Final[int] = U256_BITS // 8
ZERO: Final[int] = 0


def is_u256(x: Any) -> bool:
    """True if `x` is a (non-bool) int within [0, U256_MAX]."""
    return isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= U256_MAX


def require_u256(x: Any, *, name: str = "value") -> int:
    """
    Checked-range construction of a uint256.

    Raises DomainViolation if `x` is not an int (bools are rejected even though
    they subclass int) or lies outside [0, 2**256 - 1].
    """
    if isinstance(x, bool) or not isinstance(x, int):
        raise DomainViolation(
            f"{name} must be an integer, got {type(x).__name__}",
            context={"name": name, "type": type(x).__name__},
        )
    if x < 0:
        raise DomainViolation(
            f"{name} is negative",
            context={"name": name, "value": str(x)},
        )
    if x > U256_MAX:
        raise DomainViolation(
            f"{name} does not fit in {U256_BITS} bits",
            context={"name": name, "bits": x.bit_length()},
        )
    return int(x)


def to_word(x: Any) -> bytes:
    """Encode a uint256 as a 32-byte big-endian word."""
    return require_u256(x).to_bytes(WORD_BYTES, "big", signed=False)


def from_word(raw: bytes) -> int:
    """Decode a big-endian word (up to 32 bytes). Empty input reads as 0."""
    if not isinstance(raw, (bytes, bytearray)):
        raise DomainViolation(f"word must be bytes, got {type(raw).__name__}")
    if len(raw) > WORD_BYTES:
        raise DomainViolation(
            f"word too long ({len(raw)} > {WORD_BYTES} bytes)",
            context={"length": len(raw)},
        )
    if not raw:
        return ZERO
    return int.from_bytes(raw, "big", signed=False)


__all__ = [
    "U256_BITS",
    "U256_MAX",
    "WORD_BYTES",
    "ZERO",
    "is_u256",
    "require_u256",
    "to_word",
    "from_word",
]
