"""Call-count policies for expectations."""

from __future__ import annotations

import typing as t

from ._validators import validate_call_count, validate_call_range


class Cardinality(t.Protocol):
    """Predicate over the number of times a method was called."""

    def matches(self, count: int) -> bool:
        """Return ``True`` if *count* calls satisfy the policy."""
        ...


class AnyCount:
    """Allow any number of calls, including none."""

    def matches(self, count: int) -> bool:
        """Return ``True`` for any count."""
        return True

    def __str__(self) -> str:
        """Describe the policy."""
        return "zero or more times"

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return "AnyCount()"


class ExactCount:
    """Require exactly ``times`` calls."""

    def __init__(self, times: int) -> None:
        validate_call_count(times, name="times")
        self.times = times

    def matches(self, count: int) -> bool:
        """Return ``True`` if *count* equals ``times``."""
        return count == self.times

    def __str__(self) -> str:
        """Describe the policy."""
        return f"exactly {self.times} times"

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"ExactCount({self.times})"


class AtLeast:
    """Require ``times`` calls or more."""

    def __init__(self, times: int) -> None:
        validate_call_count(times, name="times")
        self.times = times

    def matches(self, count: int) -> bool:
        """Return ``True`` if *count* reaches the minimum."""
        return count >= self.times

    def __str__(self) -> str:
        """Describe the policy."""
        return f"at least {self.times} times"

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"AtLeast({self.times})"


class AtMost:
    """Allow up to ``times`` calls."""

    def __init__(self, times: int) -> None:
        validate_call_count(times, name="times")
        self.times = times

    def matches(self, count: int) -> bool:
        """Return ``True`` if *count* does not exceed the maximum."""
        return count <= self.times

    def __str__(self) -> str:
        """Describe the policy."""
        return f"at most {self.times} times"

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"AtMost({self.times})"


class Between:
    """Require between ``low`` and ``high`` calls, both inclusive."""

    def __init__(self, low: int, high: int) -> None:
        validate_call_range(low, high)
        self.low = low
        self.high = high

    def matches(self, count: int) -> bool:
        """Return ``True`` if *count* lies within the range."""
        return self.low <= count <= self.high

    def __str__(self) -> str:
        """Describe the policy."""
        return f"between {self.low} and {self.high} times"

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"Between({self.low}, {self.high})"


__all__ = ["AnyCount", "AtLeast", "AtMost", "Between", "Cardinality", "ExactCount"]
