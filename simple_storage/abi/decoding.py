"""
Inverse of simple_storage.abi.encoding.

Decoding is strict: magnitudes must be minimal, counts must match, and a
value wider than its declared type is a DomainViolation. This is the host's
argument-decoding boundary; nothing out of range gets past it.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple, Union

from ..errors import AbiError, DomainViolation
from .types import UIntType, parse_type

__all__ = [
    "uvarint_decode",
    "decode_uint",
    "decode_value",
    "decode_args",
]

# A uint256 magnitude never needs more than a two-byte length prefix.
_MAX_UVARINT_BYTES = 10


def uvarint_decode(buf: bytes, offset: int = 0) -> Tuple[int, int]:
    """Decode unsigned LEB128 at buf[offset:]. Returns (value, new_offset)."""
    n = 0
    shift = 0
    i = offset
    while i < len(buf):
        b = buf[i]
        i += 1
        n |= (b & 0x7F) << shift
        if (b & 0x80) == 0:
            if i - offset > 1 and b == 0:
                raise AbiError("non-minimal uvarint")
            return n, i
        shift += 7
        if i - offset >= _MAX_UVARINT_BYTES:
            raise AbiError("uvarint too long")
    raise AbiError("truncated uvarint")


def _read_exact(buf: bytes, offset: int, n: int) -> Tuple[bytes, int]:
    j = offset + n
    if j > len(buf):
        raise AbiError("truncated payload", context={"need": n, "have": len(buf) - offset})
    return buf[offset:j], j


def decode_uint(buf: bytes, offset: int = 0, *, bits: int = 256) -> Tuple[int, int]:
    length, i = uvarint_decode(buf, offset)
    if length == 0:
        raise AbiError("empty uint magnitude")
    mag, j = _read_exact(buf, i, length)
    if len(mag) > 1 and mag[0] == 0x00:
        raise AbiError("non-minimal uint magnitude")
    v = int.from_bytes(mag, "big", signed=False)
    if v.bit_length() > bits:
        raise DomainViolation(f"uint{bits} overflow", context={"bits": v.bit_length()})
    return v, j


def decode_value(buf: bytes, typ: Union[str, UIntType], offset: int = 0) -> Tuple[Any, int]:
    t = parse_type(typ)
    return decode_uint(buf, offset, bits=t.bits)


def decode_args(
    buf: bytes,
    types: Sequence[Union[str, UIntType]],
    offset: int = 0,
) -> Tuple[List[Any], int]:
    """Decode `LEB128(count) || items`. Returns (values, new_offset)."""
    count, i = uvarint_decode(buf, offset)
    if count != len(types):
        raise AbiError(
            f"argument count mismatch: encoded={count} expected={len(types)}",
            context={"encoded": count, "expected": len(types)},
        )
    out: List[Any] = []
    for t in types:
        v, i = decode_value(buf, t, i)
        out.append(v)
    return out, i
