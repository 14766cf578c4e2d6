"""
simple-storage — command-line host for a single ValueStore slot.

Commands:
  simple-storage get                 Print the stored value
  simple-storage set VALUE           Store VALUE (decimal or 0x-hex uint256)
  simple-storage call CALLDATA       Dispatch raw 0x-hex calldata
  simple-storage abi                 Print the ABI with selectors
  simple-storage info                Print version and effective configuration

Global options:
  --state PATH        JSON state file (env SIMPLE_STORAGE_STATE); without it the
                      slot lives only for the duration of the command
  --json              Print the JSON result envelope instead of plain text
  --log-level LEVEL   DEBUG, INFO, WARNING, ERROR (env SIMPLE_STORAGE_LOG_LEVEL)

Examples:
  simple-storage --state ./store.json set 42
  simple-storage --state ./store.json get
  simple-storage --json --state ./store.json set 0xff
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from .. import logging as slog
from ..abi.calls import functions, load_manifest
from ..config import load_config
from ..errors import StoreError
from ..runtime.host import CallResult, Host
from ..storage import open_backend
from ..version import __version__

# Exit code for calls rejected at the ABI boundary (bad value, bad calldata).
EXIT_REJECTED = 2

app = typer.Typer(
    name="simple-storage",
    help="Read and write a single uint256 storage slot.",
    no_args_is_help=True,
    add_completion=False,
)


class GlobalContext:
    def __init__(self) -> None:
        self.state_path: Optional[Path] = None
        self.json_output: bool = False


_ctx = GlobalContext()


def _host() -> Host:
    return Host(backend=open_backend(_ctx.state_path))


def _emit(result: CallResult, text: Optional[str] = None) -> None:
    if _ctx.json_output:
        typer.echo(json.dumps(result.to_dict(), sort_keys=True))
    elif result.ok and text is not None:
        typer.echo(text)
    if not result.ok:
        err: Dict[str, Any] = result.error or {}
        if not _ctx.json_output:
            typer.echo(f"Error: {err.get('message', 'call rejected')}", err=True)
        raise typer.Exit(EXIT_REJECTED)


@app.callback()
def main_callback(
    state: Optional[Path] = typer.Option(
        None,
        "--state",
        help="Path to the JSON state file",
        envvar="SIMPLE_STORAGE_STATE",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the JSON result envelope",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
        envvar="SIMPLE_STORAGE_LOG_LEVEL",
    ),
) -> None:
    """
    simple-storage — one slot, one uint256, two operations.

    Configuration is resolved in this order (highest to lowest priority):
      1. Command-line flags (--state, --log-level)
      2. Environment variables (SIMPLE_STORAGE_STATE, SIMPLE_STORAGE_LOG_LEVEL, ...)
      3. Built-in defaults (in-memory slot, WARNING)
    """
    cfg = load_config()
    _ctx.state_path = state if state is not None else cfg.state_path
    _ctx.json_output = json_output

    fmt = cfg.log_format
    slog.configure(
        level=log_level or cfg.log_level,
        json=None if fmt is None else fmt == "json",
    )
    slog.bind(component="cli", state=str(_ctx.state_path) if _ctx.state_path else "memory")


@app.command()
def get() -> None:
    """Print the stored value (0 if nothing has been set)."""
    try:
        result = _host().call("get")
    except StoreError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1)
    _emit(result, str(result.return_value))


@app.command("set")
def set_value(
    value: str = typer.Argument(..., help="uint256 value, decimal or 0x-hex"),
) -> None:
    """Replace the stored value."""
    try:
        result = _host().call("set", [value])
    except StoreError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1)
    _emit(result, "ok")


@app.command()
def call(
    calldata: str = typer.Argument(..., help="0x-hex calldata (selector || args)"),
) -> None:
    """Dispatch raw calldata and print the result envelope."""
    raw = calldata[2:] if calldata.lower().startswith("0x") else calldata
    try:
        data = bytes.fromhex(raw)
    except ValueError:
        typer.echo("Error: calldata must be hex", err=True)
        raise typer.Exit(EXIT_REJECTED)
    try:
        result = _host().call_data(data)
    except StoreError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1)
    if not _ctx.json_output and result.ok:
        typer.echo(json.dumps(result.to_dict(), sort_keys=True))
        return
    _emit(result)


@app.command()
def abi() -> None:
    """Print the ValueStore ABI with canonical signatures and selectors."""
    manifest = load_manifest()
    doc = {
        "name": manifest.get("name"),
        "version": manifest.get("version"),
        "functions": [fn.to_dict() for fn in functions(manifest).values()],
    }
    typer.echo(json.dumps(doc, indent=None if _ctx.json_output else 2))


@app.command()
def info() -> None:
    """Print version and effective configuration."""
    cfg = load_config().as_dict()
    cfg["state_path"] = str(_ctx.state_path) if _ctx.state_path else None
    doc = {"version": __version__, "config": cfg}
    typer.echo(json.dumps(doc, indent=None if _ctx.json_output else 2, sort_keys=True))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
