from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from simple_storage.abi import encode_call, selector
from simple_storage.cli.main import EXIT_REJECTED, app
from simple_storage.numeric import U256_MAX

runner = CliRunner()


def run_cli(args: list[str], state: Path, *, exit_code: int = 0) -> str:
    result = runner.invoke(app, ["--state", str(state)] + args)
    assert result.exit_code == exit_code, result.output
    return result.output


def test_get_defaults_to_zero(state_path: Path) -> None:
    assert run_cli(["get"], state_path).strip() == "0"


def test_set_then_get_across_invocations(state_path: Path) -> None:
    assert run_cli(["set", "42"], state_path).strip() == "ok"
    assert run_cli(["get"], state_path).strip() == "42"

    run_cli(["set", "7"], state_path)
    assert run_cli(["get"], state_path).strip() == "7"


def test_set_accepts_hex_and_max(state_path: Path) -> None:
    run_cli(["set", hex(U256_MAX)], state_path)
    assert run_cli(["get"], state_path).strip() == str(U256_MAX)


@pytest.mark.parametrize("value", [str(2**256), "forty-two"])
def test_set_rejects_out_of_domain(state_path: Path, value: str) -> None:
    run_cli(["set", "5"], state_path)
    out = run_cli(["set", value], state_path, exit_code=EXIT_REJECTED)
    assert "Error" in out
    assert run_cli(["get"], state_path).strip() == "5"


def test_negative_value_rejected(state_path: Path) -> None:
    out = run_cli(["set", "--", "-1"], state_path, exit_code=EXIT_REJECTED)
    assert "negative" in out


def test_json_envelope(state_path: Path) -> None:
    doc = json.loads(run_cli(["--json", "set", "42"], state_path))
    assert doc["ok"] is True and doc["function"] == "set"

    doc = json.loads(run_cli(["--json", "get"], state_path))
    assert doc["return"] == 42
    assert doc["returnData"] == "0x01012a"


def test_json_rejection_exits_nonzero(state_path: Path) -> None:
    # rejections are also logged at WARNING on stderr; keep the output to the envelope
    out = run_cli(["--log-level", "ERROR", "--json", "set", str(2**256)], state_path, exit_code=EXIT_REJECTED)
    doc = json.loads(out)
    assert doc["ok"] is False
    assert doc["error"]["code"] == "domain_violation"


def test_raw_calldata(state_path: Path) -> None:
    doc = json.loads(run_cli(["call", "0x" + encode_call("set", [7]).hex()], state_path))
    assert doc["ok"] is True
    doc = json.loads(run_cli(["call", encode_call("get").hex()], state_path))
    assert doc["return"] == 7


def test_raw_calldata_rejections(state_path: Path) -> None:
    run_cli(["call", "0xnothex"], state_path, exit_code=EXIT_REJECTED)
    bad = selector("set(uint256)") + b"\x01\x21\x01" + b"\x00" * 32
    out = run_cli(["call", bad.hex()], state_path, exit_code=EXIT_REJECTED)
    assert "overflow" in out


def test_state_from_environment(monkeypatch: pytest.MonkeyPatch, state_path: Path) -> None:
    monkeypatch.setenv("SIMPLE_STORAGE_STATE", str(state_path))
    assert runner.invoke(app, ["set", "99"]).exit_code == 0
    assert json.loads(state_path.read_text(encoding="utf-8"))["slots"]
    result = runner.invoke(app, ["get"])
    assert result.exit_code == 0
    assert result.output.strip() == "99"


def test_corrupt_state_file_exits_one(state_path: Path) -> None:
    state_path.parent.mkdir(parents=True)
    state_path.write_text("garbage", encoding="utf-8")
    out = run_cli(["get"], state_path, exit_code=1)
    assert "state file" in out


def test_oversized_state_value_exits_one(state_path: Path) -> None:
    state_path.parent.mkdir(parents=True)
    doc = {"version": 1, "slots": {"0x" + "00" * 32: "0x" + "01" * 33}}
    state_path.write_text(json.dumps(doc), encoding="utf-8")
    out = run_cli(["get"], state_path, exit_code=1)
    assert "Error:" in out
    assert "too large" in out


def test_unwritable_state_path_exits_one(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    out = run_cli(["set", "1"], blocker / "s.json", exit_code=1)
    assert "Error: cannot write state file" in out


def test_abi_command_lists_selectors(state_path: Path) -> None:
    doc = json.loads(run_cli(["abi"], state_path))
    assert doc["name"] == "ValueStore"
    by_name = {f["name"]: f for f in doc["functions"]}
    assert by_name["set"]["selector"] == "0x" + selector("set(uint256)").hex()
    assert by_name["get"]["outputs"] == ["uint256"]


def test_info_reports_state(state_path: Path) -> None:
    doc = json.loads(run_cli(["info"], state_path))
    assert doc["config"]["state_path"] == str(state_path)
    assert doc["version"]
