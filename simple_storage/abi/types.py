"""
ABI type definitions and value coercion for the simple_storage call surface.

The surface is intentionally tiny: the only on-wire type is `uintN`
(canonically `uint256`). Coercion is where a caller-supplied value is
checked against the type's domain; an out-of-range value is a
DomainViolation, rejected here before any call reaches the store.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from ..errors import AbiError, DomainViolation

__all__ = [
    "UIntType",
    "UINT256",
    "parse_type",
    "coerce_uint",
]

_UINT_RE = re.compile(r"^uint(\d{0,3})$")


@dataclass(frozen=True)
class UIntType:
    bits: int = 256

    def __post_init__(self) -> None:
        if self.bits <= 0 or self.bits > 256 or self.bits % 8 != 0:
            raise AbiError(f"invalid uint width: {self.bits}")

    @property
    def max_value(self) -> int:
        return (1 << self.bits) - 1

    @property
    def name(self) -> str:
        return f"uint{self.bits}"

    def __str__(self) -> str:
        return self.name


UINT256 = UIntType(256)


def parse_type(spec: str | UIntType) -> UIntType:
    """Parse 'uint', 'uint64', 'uint256', ... (bare 'uint' means uint256)."""
    if isinstance(spec, UIntType):
        return spec
    if not isinstance(spec, str):
        raise AbiError(f"type spec must be a string, got {type(spec).__name__}")
    m = _UINT_RE.match(spec.strip().lower())
    if not m:
        raise AbiError(f"unsupported ABI type: {spec!r}")
    return UIntType(int(m.group(1)) if m.group(1) else 256)


def coerce_uint(value: Any, *, bits: int = 256) -> int:
    """
    Accept an int, a decimal string or a 0x-hex string and return an int that
    fits `bits`. Bools are rejected.
    """
    if isinstance(value, bool):
        raise DomainViolation("uint value must not be a bool", context={"type": "bool"})
    if isinstance(value, str):
        s = value.strip().replace("_", "")
        try:
            v = int(s, 16) if s.lower().startswith("0x") else int(s, 10)
        except ValueError as e:
            raise DomainViolation(f"not an unsigned integer: {value!r}") from e
    elif isinstance(value, int):
        v = value
    else:
        raise DomainViolation(
            f"uint value must be int or str, got {type(value).__name__}",
            context={"type": type(value).__name__},
        )
    if v < 0:
        raise DomainViolation(f"uint{bits} cannot be negative", context={"value": str(v)})
    if v.bit_length() > bits:
        raise DomainViolation(f"uint{bits} overflow", context={"bits": v.bit_length()})
    return v
