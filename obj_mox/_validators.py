"""Shared validation helpers."""

from __future__ import annotations


def validate_call_count(count: int, *, name: str = "count") -> None:
    """Ensure *count* is usable as an expected number of calls."""
    if isinstance(count, bool) or not isinstance(count, int):
        msg = f"{name} must be an integer"
        raise TypeError(msg)

    if count < 0:
        msg = f"{name} must be >= 0"
        raise ValueError(msg)


def validate_call_range(low: int, high: int) -> None:
    """Ensure ``low``..``high`` describes a non-empty range of call counts."""
    validate_call_count(low, name="low")
    validate_call_count(high, name="high")
    if low > high:
        msg = f"low must not exceed high (got {low} > {high})"
        raise ValueError(msg)
