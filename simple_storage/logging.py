"""
simple_storage.logging
----------------------

Structured logging for the host, backends and CLI:
- JSON or concise (optionally colored) text lines
- Context-local fields via `contextvars` (trace_id, component, state, ...)
- Safe value coercion (bytes → hex, Paths → str)

The store core never logs; only the layers around it do.

Usage
-----
    from simple_storage import logging as slog

    slog.configure(level="INFO")  # once at process start
    log = slog.get_logger(__name__)

    with slog.trace_scope():
        slog.bind(component="cli")
        log.info("value written", extra={"value": 42})
"""

from __future__ import annotations

import datetime as _dt
import io
import json
import logging
import os
import sys
import threading
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

# ----------------------------
# Context
# ----------------------------

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("_LOG_CONTEXT", default={})

DEFAULT_CONTEXT_KEYS = ("trace_id", "component", "state", "function")

# LogRecord attributes that are never rendered as extras.
_RESERVED = frozenset(
    (
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    )
)


def context() -> Dict[str, Any]:
    """Return a *copy* of the active logging context."""
    return dict(_LOG_CONTEXT.get())


def bind(**fields: Any) -> None:
    """Merge fields into the active context."""
    cur = dict(_LOG_CONTEXT.get())
    cur.update({k: _coerce_value(v) for k, v in fields.items()})
    _LOG_CONTEXT.set(cur)


def unbind(*keys: str) -> None:
    cur = dict(_LOG_CONTEXT.get())
    for k in keys:
        cur.pop(k, None)
    _LOG_CONTEXT.set(cur)


def clear_context() -> None:
    _LOG_CONTEXT.set({})


@contextmanager
def trace_scope(trace_id: Optional[str] = None) -> Iterator[str]:
    """Ensure a trace_id for the duration of the scope; restore prior context on exit."""
    prev = dict(_LOG_CONTEXT.get())
    tid = trace_id or short_uuid()
    try:
        bind(trace_id=tid)
        yield tid
    finally:
        _LOG_CONTEXT.set(prev)


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


# ----------------------------
# Formatters
# ----------------------------


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _coerce_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, float, str, list, dict)):
        return v
    if isinstance(v, int):
        # uint256 values overflow JSON consumers that parse numbers as doubles
        return v if abs(v) < (1 << 53) else str(v)
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    if isinstance(v, Path):
        return str(v)
    return str(v)


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in record.__dict__.items():
        if k.startswith("_") or k in _RESERVED:
            continue
        out[k] = _coerce_value(v)
    return out


_LEVEL_COLOR = {
    logging.DEBUG: "\x1b[90m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[1m\x1b[35m",
}
_RESET = "\x1b[0m"


def _supports_color(stream: Any) -> bool:
    try:
        return bool(stream.isatty()) and os.environ.get("NO_COLOR") is None
    except (AttributeError, ValueError):
        return False


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "pid": os.getpid(),
            "tid": threading.get_ident(),
        }
        payload.update(context())
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, default=str, separators=(",", ":"))


class TextFormatter(logging.Formatter):
    """
    Human-friendly one-liner:
      2026-01-05T12:34:56.789+00:00 | INFO  | simple_storage.host | trace_id=abc123 | set applied value=42
    """

    def __init__(self, stream: Any):
        super().__init__()
        self._color = _supports_color(stream)

    def format(self, record: logging.LogRecord) -> str:
        ctx = context()
        ctx_str = " ".join(f"{k}={ctx[k]}" for k in DEFAULT_CONTEXT_KEYS if ctx.get(k) is not None)
        extras = " ".join(f"{k}={v}" for k, v in _extras(record).items() if k not in ctx)

        lvl = f"{record.levelname:<5}"
        if self._color:
            lvl = f"{_LEVEL_COLOR.get(record.levelno, '')}{lvl}{_RESET}"

        line = f"{_utcnow_iso()} | {lvl} | {record.name}"
        if ctx_str:
            line += f" | {ctx_str}"
        line += f" | {record.getMessage()}"
        if extras:
            line += f" {extras}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


# ----------------------------
# Public setup API
# ----------------------------


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "WARNING",
    stream: io.TextIOBase | Any = None,
    file_path: Optional[Path | str] = None,
) -> None:
    """
    Configure the package logger ("simple_storage").

    Parameters
    ----------
    json : bool | None
        If None, determined by SIMPLE_STORAGE_LOG_FORMAT=(json|text), then TTY detection.
    level : str | int
        Minimum log level.
    stream : TextIO
        Stream for the console handler (default: stderr at call time).
    file_path : Path | str | None
        Optional file that additionally receives JSON lines.
    """
    stream = stream if stream is not None else sys.stderr
    lvl = _coerce_level(level)

    pkg = logging.getLogger("simple_storage")
    pkg.setLevel(lvl)
    pkg.propagate = False
    for h in list(pkg.handlers):
        pkg.removeHandler(h)

    console = logging.StreamHandler(stream)
    console.setLevel(lvl)
    console.setFormatter(JSONFormatter() if _decide_json(json, stream) else TextFormatter(stream))
    pkg.addHandler(console)

    if file_path:
        p = Path(file_path).expanduser()
        p.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(p, encoding="utf-8")
        fh.setLevel(lvl)
        fh.setFormatter(JSONFormatter())
        pkg.addHandler(fh)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "simple_storage")


# ----------------------------
# Internals
# ----------------------------


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def _decide_json(json_flag: Optional[bool], stream: Any) -> bool:
    if json_flag is not None:
        return json_flag
    env = os.environ.get("SIMPLE_STORAGE_LOG_FORMAT", "").strip().lower()
    if env in ("json", "text"):
        return env == "json"
    return not _supports_color(stream)


__all__ = [
    "bind",
    "unbind",
    "clear_context",
    "context",
    "trace_scope",
    "configure",
    "get_logger",
    "JSONFormatter",
    "TextFormatter",
]
