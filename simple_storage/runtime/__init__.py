"""
simple_storage.runtime — host-side execution around the ValueStore.

  - Host:       serialised dispatch of named calls or raw calldata
  - CallResult: JSON-friendly result envelope
  - run_call:   one-shot helper (fresh host, optional durable state)
"""

from __future__ import annotations

from .host import CallResult, Host, run_call

__all__ = ["CallResult", "Host", "run_call"]
