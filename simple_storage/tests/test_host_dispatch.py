from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from simple_storage.abi import encode_call, lookup, selector
from simple_storage.config import load_config
from simple_storage.errors import DomainViolation, StateFileError
from simple_storage.numeric import U256_MAX
from simple_storage.runtime.host import CallResult, Host, run_call
from simple_storage.storage import FileBackend, MemoryBackend
from simple_storage.store import ValueStore


# --------------------------------------------------------------------------
# Named calls
# --------------------------------------------------------------------------

def test_scenarios_through_host(host: Host) -> None:
    assert host.call("get").return_value == 0

    res = host.call("set", [42])
    assert res.ok and res.function == "set"
    assert res.return_value is None
    assert host.call("get").return_value == 42

    host.call("set", [7])
    assert host.call("get").return_value == 7

    host.call("set", [U256_MAX])
    assert host.call("get").return_value == U256_MAX


def test_string_arguments_are_coerced(host: Host) -> None:
    assert host.call("set", ["0xff"]).ok
    assert host.get() == 255


@pytest.mark.parametrize("bad", [-1, 2**256, "nope", True])
def test_out_of_range_set_is_rejected_without_mutation(host: Host, bad: object) -> None:
    host.call("set", [5])
    res = host.call("set", [bad])
    assert res.ok is False
    assert res.error is not None and res.error["code"] == "domain_violation"
    assert host.call("get").return_value == 5


def test_wrong_arity_and_unknown_function(host: Host) -> None:
    res = host.call("set")
    assert not res.ok and res.error["code"] == "abi_error"

    res = host.call("get", [1])
    assert not res.ok and res.error["code"] == "abi_error"

    res = host.call("inc")
    assert not res.ok and res.error["code"] == "abi_error"
    assert res.function == "inc"


def test_convenience_accessors_raise(host: Host) -> None:
    host.set(9)
    assert host.get() == 9
    with pytest.raises(DomainViolation):
        host.set(-1)
    assert host.get() == 9


def test_store_and_backend_are_exclusive() -> None:
    with pytest.raises(ValueError):
        Host(ValueStore(), backend=MemoryBackend())


def test_host_wraps_existing_store() -> None:
    store = ValueStore()
    store.set(3)
    assert Host(store).get() == 3


# --------------------------------------------------------------------------
# Raw calldata
# --------------------------------------------------------------------------

def test_oversized_state_value_propagates(state_path: Path) -> None:
    state_path.parent.mkdir(parents=True)
    doc = {"version": 1, "slots": {"0x" + "00" * 32: "0x" + "01" * 33}}
    state_path.write_text(json.dumps(doc), encoding="utf-8")
    with pytest.raises(StateFileError):
        Host(backend=FileBackend(state_path)).call("get")


def test_calldata_round_trip(host: Host) -> None:
    res = host.call_data(encode_call("set", [U256_MAX]))
    assert res.ok and res.function == "set"
    assert res.return_data == b"\x00"

    res = host.call_data(encode_call("get"))
    assert res.ok
    assert res.return_value == U256_MAX
    assert res.return_data == b"\x01\x20" + b"\xff" * 32


def test_calldata_overflow_is_domain_violation(host: Host) -> None:
    host.set(1)
    data = selector("set(uint256)") + b"\x01\x21\x01" + b"\x00" * 32
    res = host.call_data(data)
    assert not res.ok
    assert res.function is None
    assert res.error["code"] == "domain_violation"
    assert host.get() == 1


def test_unknown_selector(host: Host) -> None:
    res = host.call_data(b"\x00" * 8 + b"\x00")
    assert not res.ok and res.error["code"] == "abi_error"


def test_calldata_size_cap(monkeypatch: pytest.MonkeyPatch, host: Host) -> None:
    monkeypatch.setenv("SIMPLE_STORAGE_MAX_CALLDATA_BYTES", "16")
    load_config.cache_clear()
    oversized = lookup("get").selector + b"\x00" * 9
    res = host.call_data(oversized)
    assert not res.ok
    assert "too large" in res.error["message"]


# --------------------------------------------------------------------------
# Envelope & helpers
# --------------------------------------------------------------------------

def test_envelope_shape(host: Host) -> None:
    host.call("set", [42])
    doc = host.call("get").to_dict()
    assert doc == {
        "ok": True,
        "function": "get",
        "return": 42,
        "returnData": "0x01012a",
        "error": None,
    }


def test_rejection_envelope_carries_structured_error(host: Host) -> None:
    doc = host.call("set", [-1]).to_dict()
    assert doc["ok"] is False
    assert doc["return"] is None
    assert doc["returnData"] == "0x"
    assert set(doc["error"]) == {"code", "message", "context"}


def test_call_result_is_frozen() -> None:
    res = CallResult(ok=True, function="get", return_value=1)
    with pytest.raises(AttributeError):
        res.ok = False  # type: ignore[misc]


def test_run_call_with_state_path(state_path: Path) -> None:
    assert run_call("set", [11], state_path=state_path).ok
    assert run_call("get", state_path=state_path).return_value == 11


def test_run_call_without_state_is_ephemeral() -> None:
    run_call("set", [11])
    assert run_call("get").return_value == 0


# --------------------------------------------------------------------------
# Concurrency: calls are serialised into one schedule
# --------------------------------------------------------------------------

def test_concurrent_calls_are_serialised(host: Host) -> None:
    written = list(range(1, 17))
    observed: list[int] = []
    errors: list[BaseException] = []
    barrier = threading.Barrier(len(written))

    def worker(v: int) -> None:
        try:
            barrier.wait()
            for _ in range(50):
                assert host.call("set", [v]).ok
                observed.append(host.call("get").return_value)
        except BaseException as e:  # pragma: no cover - surfaced below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(v,)) for v in written]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert host.get() in written
    assert set(observed) <= set(written)
