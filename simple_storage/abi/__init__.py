"""
simple_storage.abi — the call ABI of the ValueStore.

Public surface:
  - types:    UIntType, UINT256, parse_type, coerce_uint
  - encoding: uvarint_encode, encode_uint, encode_value, encode_args
  - decoding: uvarint_decode, decode_uint, decode_value, decode_args
  - calls:    selector, load_manifest, functions, encode_call, decode_call,
              encode_return, decode_return
"""

from __future__ import annotations

from .calls import (AbiFunction, canonical_signature, decode_call,
                    decode_return, dispatch_table, encode_call, encode_return,
                    functions, load_manifest, lookup, selector)
from .decoding import decode_args, decode_uint, decode_value, uvarint_decode
from .encoding import encode_args, encode_uint, encode_value, uvarint_encode
from .types import UINT256, UIntType, coerce_uint, parse_type

__all__ = [
    "UIntType",
    "UINT256",
    "parse_type",
    "coerce_uint",
    "uvarint_encode",
    "encode_uint",
    "encode_value",
    "encode_args",
    "uvarint_decode",
    "decode_uint",
    "decode_value",
    "decode_args",
    "AbiFunction",
    "canonical_signature",
    "selector",
    "load_manifest",
    "functions",
    "dispatch_table",
    "lookup",
    "encode_call",
    "decode_call",
    "encode_return",
    "decode_return",
]
