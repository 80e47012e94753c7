"""Helpers for combining JSON-like values."""

from __future__ import annotations

from typing import Any


def merge(a: Any, b: Any) -> Any:
    """Return ``a`` with the keys of ``b`` laid over it.

    Only objects (dicts) are merged; the keys of ``b`` win. When either value
    is not an object, ``a`` is returned unchanged. Neither input is modified.
    """
    if isinstance(a, dict) and isinstance(b, dict):
        return {**a, **b}
    return a


def merge_inplace(a: Any, b: Any) -> None:
    """Copy the keys of ``b`` into ``a`` when both are objects; otherwise do nothing."""
    if isinstance(a, dict) and isinstance(b, dict):
        a.update(b)