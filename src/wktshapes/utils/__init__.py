"""Utility helpers for wktshapes."""

from wktshapes.utils.logging import configure_logging

__all__ = [
    "configure_logging",
]
