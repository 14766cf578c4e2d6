"""
Function selectors, the packaged manifest, and call/return framing.

    selector  = sha3_256("simple-storage:abi:v1|" + canonical_signature)[:8]
    signature = name "(" type ["," type]* ")"      e.g. "set(uint256)", "get()"
    calldata  = selector || encode_args(input types, args)
    returndata = encode_args(output types, [value]) (or the empty arg list)
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources as importlib_resources
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..config import load_config
from ..errors import AbiError
from .decoding import decode_args
from .encoding import encode_args
from .types import UIntType, parse_type

SELECTOR_DOMAIN = "simple-storage:abi:v1|"
SELECTOR_BYTES = 8


@dataclass(frozen=True)
class AbiFunction:
    name: str
    inputs: Tuple[UIntType, ...]
    outputs: Tuple[UIntType, ...]
    state_mutability: str = "nonpayable"

    @property
    def signature(self) -> str:
        return f"{self.name}(" + ",".join(t.name for t in self.inputs) + ")"

    @property
    def selector(self) -> bytes:
        return selector(self.signature)

    @property
    def is_view(self) -> bool:
        return self.state_mutability in ("view", "pure")

    @classmethod
    def from_manifest(cls, entry: Mapping[str, Any]) -> "AbiFunction":
        try:
            name = entry["name"]
        except KeyError as e:
            raise AbiError("manifest function entry without a name") from e
        return cls(
            name=str(name),
            inputs=tuple(parse_type(i["type"]) for i in entry.get("inputs", [])),
            outputs=tuple(parse_type(o["type"]) for o in entry.get("outputs", [])),
            state_mutability=str(entry.get("stateMutability", "nonpayable")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "signature": self.signature,
            "selector": "0x" + self.selector.hex(),
            "inputs": [t.name for t in self.inputs],
            "outputs": [t.name for t in self.outputs],
            "stateMutability": self.state_mutability,
        }


def canonical_signature(fn: Mapping[str, Any]) -> str:
    """Signature string for a manifest function entry."""
    types = [parse_type(i["type"]).name for i in fn.get("inputs", [])]
    return f"{fn['name']}(" + ",".join(types) + ")"


def selector(signature: str) -> bytes:
    data = (SELECTOR_DOMAIN + signature).encode("utf-8")
    return hashlib.sha3_256(data).digest()[:SELECTOR_BYTES]


@lru_cache(maxsize=1)
def load_manifest() -> Dict[str, Any]:
    """The packaged ValueStore manifest (parsed once)."""
    text = importlib_resources.files(__package__).joinpath("manifest.json").read_text(encoding="utf-8")
    return json.loads(text)


def _build_functions(m: Mapping[str, Any]) -> Dict[str, AbiFunction]:
    out: Dict[str, AbiFunction] = {}
    for entry in (m.get("abi") or {}).get("functions", []):
        fn = AbiFunction.from_manifest(entry)
        if fn.name in out:
            raise AbiError(f"duplicate function in manifest: {fn.name}")
        out[fn.name] = fn
    return out


def _build_table(fns: Mapping[str, AbiFunction]) -> Dict[bytes, AbiFunction]:
    table: Dict[bytes, AbiFunction] = {}
    for fn in fns.values():
        sel = fn.selector
        if sel in table:
            raise AbiError(f"selector collision: {table[sel].signature} / {fn.signature}")
        table[sel] = fn
    return table


@lru_cache(maxsize=1)
def _packaged_functions() -> Dict[str, AbiFunction]:
    return _build_functions(load_manifest())


@lru_cache(maxsize=1)
def _packaged_table() -> Dict[bytes, AbiFunction]:
    return _build_table(_packaged_functions())


def functions(manifest: Optional[Mapping[str, Any]] = None) -> Dict[str, AbiFunction]:
    """Name → AbiFunction for every function the manifest declares."""
    if manifest is None:
        return dict(_packaged_functions())
    return _build_functions(manifest)


def dispatch_table(manifest: Optional[Mapping[str, Any]] = None) -> Dict[bytes, AbiFunction]:
    """Selector → AbiFunction; selector collisions are a manifest error."""
    if manifest is None:
        return dict(_packaged_table())
    return _build_table(_build_functions(manifest))


def lookup(name: str, manifest: Optional[Mapping[str, Any]] = None) -> AbiFunction:
    fns = _packaged_functions() if manifest is None else _build_functions(manifest)
    try:
        return fns[name]
    except KeyError:
        raise AbiError(f"unknown function: {name!r}", context={"known": sorted(fns)}) from None


def encode_call(name: str, args: Sequence[Any] = (), manifest: Optional[Mapping[str, Any]] = None) -> bytes:
    fn = lookup(name, manifest)
    return fn.selector + encode_args(fn.inputs, list(args))


def decode_call(data: bytes, manifest: Optional[Mapping[str, Any]] = None) -> Tuple[AbiFunction, list]:
    """Split calldata into (function, decoded args). Trailing bytes are rejected."""
    if not isinstance(data, (bytes, bytearray)):
        raise AbiError("calldata must be bytes")
    max_len = load_config().max_calldata_bytes
    if len(data) > max_len:
        raise AbiError(f"calldata too large (>{max_len} bytes)", context={"length": len(data)})
    if len(data) < SELECTOR_BYTES:
        raise AbiError("calldata shorter than a selector", context={"length": len(data)})
    sel = bytes(data[:SELECTOR_BYTES])
    table = _packaged_table() if manifest is None else dispatch_table(manifest)
    fn = table.get(sel)
    if fn is None:
        raise AbiError("unknown selector", context={"selector": "0x" + sel.hex()})
    args, end = decode_args(bytes(data), fn.inputs, SELECTOR_BYTES)
    if end != len(data):
        raise AbiError("trailing bytes after arguments", context={"extra": len(data) - end})
    return fn, args


def encode_return(fn: AbiFunction, value: Any) -> bytes:
    if not fn.outputs:
        return encode_args((), ())
    return encode_args(fn.outputs, [value])


def decode_return(fn: AbiFunction, data: bytes) -> Any:
    values, end = decode_args(bytes(data), fn.outputs)
    if end != len(data):
        raise AbiError("trailing bytes after return value")
    return values[0] if values else None


__all__ = [
    "SELECTOR_DOMAIN",
    "SELECTOR_BYTES",
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
