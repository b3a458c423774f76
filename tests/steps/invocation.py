"""pytest-bdd steps that exercise doubles and finalise the registry."""

from __future__ import annotations

import typing as t

from pytest_bdd import parsers, when

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from obj_mox.registry import ExpectationRegistry


@when(
    parsers.cfparse('I call "{method}" with argument "{arg}"'),
    target_fixture="results",
)
def call_with_argument(subject: object, method: str, arg: str) -> list[object]:
    """Call *method* on the subject with one argument."""
    return [getattr(subject, method)(arg)]


@when(parsers.cfparse('I call "{method}" {count:d} times'), target_fixture="results")
def call_repeatedly(subject: object, method: str, count: int) -> list[object]:
    """Call *method* without arguments *count* times."""
    return [getattr(subject, method)() for _ in range(count)]


@when("I verify the registry")
def verify_registry(mox: ExpectationRegistry) -> None:
    """Verify and restore every expectation."""
    mox.verify()
