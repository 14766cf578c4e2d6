"""simple_storage.version — the installed distribution's version.

Reads the 'simple-storage' package metadata; a source checkout that was
never installed reports BASE_VERSION with a '+dev' local tag.
"""

from __future__ import annotations

from importlib import metadata as importlib_metadata

# Bump when the ABI, selector domain or state-file layout changes.
BASE_VERSION = "0.1.0"

DIST_NAME = "simple-storage"


def installed_version() -> str:
    try:
        return importlib_metadata.version(DIST_NAME)
    except importlib_metadata.PackageNotFoundError:
        return f"{BASE_VERSION}+dev"


__version__ = installed_version()

__all__ = ["__version__", "BASE_VERSION", "DIST_NAME", "installed_version"]
