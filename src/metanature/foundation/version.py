"""
Version helpers for metanature.
"""

from __future__ import annotations

from importlib import metadata as importlib_metadata

_VERSION: str | None = None


def get_version() -> str:
    global _VERSION
    if _VERSION is None:
        try:
            _VERSION = importlib_metadata.version("metanature")
        except importlib_metadata.PackageNotFoundError:  # pragma: no cover - source checkout
            _VERSION = "0.0.0+unknown"
    return _VERSION


__all__ = ["get_version"]
