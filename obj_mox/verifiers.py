"""Verification helpers for :class:`~obj_mox.registry.ExpectationRegistry`."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as t
from textwrap import indent

from .errors import UnsatisfiedExpectationError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .expectations import Expectation

logger = logging.getLogger(__name__)


def _numbered(entries: t.Sequence[str], *, start: int = 1) -> str:
    if not entries:
        return "(none)"
    return "\n".join(
        f"{index}. {entry}" for index, entry in enumerate(entries, start=start)
    )


def _format_sections(title: str, sections: list[tuple[str, str]]) -> str:
    parts = [title]
    for label, body in sections:
        if not body:
            continue
        parts.append("")
        parts.append(f"{label}:")
        parts.append(indent(body, "  "))
    return "\n".join(parts)


def format_failure(exp: Expectation) -> str:
    """Return the failure report for an unsatisfied *exp*."""
    return _format_sections(
        f"Expectation {exp.describe()} not satisfied.",
        [
            ("Target", repr(exp.target)),
            ("Recorded calls", _numbered([str(call) for call in exp.calls])),
            ("Details", exp.details()),
        ],
    )


@dc.dataclass(frozen=True, slots=True)
class Verdict:
    """Outcome of evaluating one expectation."""

    expectation: Expectation
    satisfied: bool

    @property
    def report(self) -> str:
        """Return the human readable detail string for this verdict."""
        if self.satisfied:
            return f"Expectation {self.expectation.describe()} satisfied."
        return format_failure(self.expectation)


class ExpectationVerifier:
    """Evaluate expectations in declaration order."""

    def evaluate(self, expectations: t.Iterable[Expectation]) -> list[Verdict]:
        """Return a verdict for every expectation."""
        return [Verdict(exp, exp.evaluate()) for exp in expectations]

    def verify(self, expectations: t.Iterable[Expectation]) -> None:
        """Raise for the first expectation that is not satisfied."""
        for exp in expectations:
            if exp.evaluate():
                logger.debug("Expectation satisfied: %s", exp.describe())
                continue
            raise UnsatisfiedExpectationError(format_failure(exp), exp)


__all__ = ["ExpectationVerifier", "Verdict", "format_failure"]
