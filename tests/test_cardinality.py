"""Cardinality matcher tests."""

from __future__ import annotations

import pytest

from obj_mox.cardinality import AnyCount, AtLeast, AtMost, Between, ExactCount


@pytest.mark.parametrize(
    ("cardinality", "accepted", "rejected"),
    [
        (ExactCount(5), [5], [4, 6]),
        (ExactCount(0), [0], [1]),
        (AtLeast(3), [3, 4, 5, 100], [0, 2]),
        (AtMost(2), [0, 1, 2], [3]),
        (Between(3, 5), [3, 4, 5], [2, 6]),
        (AnyCount(), [0, 1, 1000], []),
    ],
)
def test_cardinality_matching(
    cardinality: ExactCount | AtLeast | AtMost | Between | AnyCount,
    accepted: list[int],
    rejected: list[int],
) -> None:
    """Each policy accepts exactly the counts it describes."""
    for count in accepted:
        assert cardinality.matches(count), count
    for count in rejected:
        assert not cardinality.matches(count), count


@pytest.mark.parametrize("factory", [ExactCount, AtLeast, AtMost])
def test_negative_counts_are_rejected(factory: type) -> None:
    """Call counts cannot be negative."""
    with pytest.raises(ValueError, match="must be >= 0"):
        factory(-1)


@pytest.mark.parametrize("value", [1.5, "2", True])
def test_non_integer_counts_are_rejected(value: object) -> None:
    """Call counts must be plain integers."""
    with pytest.raises(TypeError, match="must be an integer"):
        ExactCount(value)  # type: ignore[arg-type]


def test_inverted_range_is_rejected() -> None:
    """``Between`` needs ``low <= high``."""
    with pytest.raises(ValueError, match="low must not exceed high"):
        Between(5, 3)
