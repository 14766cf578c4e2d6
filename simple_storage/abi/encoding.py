"""
Canonical ABI encoding for simple_storage calls.

- uintN:        LEB128(len) || big-endian minimal magnitude (0 -> 0x00)
- argument list: LEB128(count) || item1 || ... || itemN

No implicit padding or alignment; the same bytes always mean the same call.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Union

from ..errors import AbiError
from .types import UIntType, coerce_uint, parse_type

__all__ = [
    "uvarint_encode",
    "encode_uint",
    "encode_value",
    "encode_args",
]


def uvarint_encode(n: int) -> bytes:
    """Unsigned LEB128, minimal length."""
    if not isinstance(n, int) or isinstance(n, bool):
        raise TypeError("uvarint value must be int")
    if n < 0:
        raise ValueError("uvarint cannot encode negative values")
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(b | 0x80)
        else:
            out.append(b)
            break
    return bytes(out)


def _minimal_be_unsigned(n: int) -> bytes:
    """Big-endian minimal bytes for a non-negative integer (0 → b'\\x00')."""
    if n == 0:
        return b"\x00"
    return n.to_bytes((n.bit_length() + 7) // 8, "big", signed=False)


def encode_uint(value: Any, *, bits: int = 256) -> bytes:
    mag = _minimal_be_unsigned(coerce_uint(value, bits=bits))
    return uvarint_encode(len(mag)) + mag


def encode_value(value: Any, typ: Union[str, UIntType]) -> bytes:
    t = parse_type(typ)
    return encode_uint(value, bits=t.bits)


def encode_args(types: Sequence[Union[str, UIntType]], values: Sequence[Any]) -> bytes:
    if len(types) != len(values):
        raise AbiError(
            "types and values length mismatch",
            context={"types": len(types), "values": len(values)},
        )
    items: List[bytes] = [encode_value(v, t) for t, v in zip(types, values)]
    return uvarint_encode(len(items)) + b"".join(items)
