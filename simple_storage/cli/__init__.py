"""
simple_storage.cli
------------------

Console entrypoint `simple-storage` -> simple_storage.cli.main:main
"""

from __future__ import annotations

from .main import app, main

__all__ = ["app", "main"]
