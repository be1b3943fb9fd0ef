"""Per-market resolution of product marketing claims."""

from __future__ import annotations

from importlib import metadata

try:
    __version__ = metadata.version("claimstack")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"
