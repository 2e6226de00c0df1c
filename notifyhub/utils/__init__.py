"""Utility helpers for reusable functionality."""

from .datetime import ensure_utc, isoformat_or_none, now_utc

__all__ = [
    "ensure_utc",
    "isoformat_or_none",
    "now_utc",
]
