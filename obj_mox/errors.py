"""Custom exceptions for obj_mox."""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .expectations import Expectation


class ObjMoxError(Exception):
    """Base exception for all obj_mox errors."""


class LifecycleError(ObjMoxError):
    """Raised when an expectation is used outside its lifecycle."""


class MatcherNotImplementedError(ObjMoxError, NotImplementedError):
    """Raised when the abstract parameter matcher is used directly."""


class MissingSuperclassError(ObjMoxError, TypeError):
    """Raised when a superclass expectation targets a class without a base."""


class VerificationError(ObjMoxError):
    """Raised when verification at the end of a test scope fails."""


class UnsatisfiedExpectationError(VerificationError):
    """Raised when an expectation was not met by the recorded calls."""

    def __init__(self, message: str, expectation: Expectation) -> None:
        super().__init__(message)
        self.expectation = expectation


__all__ = [
    "LifecycleError",
    "MatcherNotImplementedError",
    "MissingSuperclassError",
    "ObjMoxError",
    "UnsatisfiedExpectationError",
    "VerificationError",
]
