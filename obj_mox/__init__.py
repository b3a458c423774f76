"""Method-level test doubles with declarative expectations.

Declare expectations on any object, let the code under test call it, and
verify at the end of the test scope. Patched methods are restored in reverse
declaration order whether or not verification succeeds.
"""

from __future__ import annotations

from .cardinality import AnyCount, AtLeast, AtMost, Between, ExactCount
from .doubles import Double
from .errors import (
    LifecycleError,
    MatcherNotImplementedError,
    MissingSuperclassError,
    ObjMoxError,
    UnsatisfiedExpectationError,
    VerificationError,
)
from .expectations import Call, Expectation, Phase
from .matchers import (
    AllOf,
    AnyOf,
    AnyParameter,
    AnyParameters,
    Anything,
    Exactly,
    Having,
    HavingKey,
    HavingValue,
    Includes,
    InstanceOf,
    MatchesPattern,
    Not,
    Nothing,
    ParameterListMatcher,
    ParameterMatcher,
    Predicate,
    RespondsWith,
    SomethingLike,
)
from .registry import ExpectationRegistry
from .verifiers import Verdict

__all__ = [
    "AllOf",
    "AnyCount",
    "AnyOf",
    "AnyParameter",
    "AnyParameters",
    "Anything",
    "AtLeast",
    "AtMost",
    "Between",
    "Call",
    "Double",
    "ExactCount",
    "Exactly",
    "Expectation",
    "ExpectationRegistry",
    "Having",
    "HavingKey",
    "HavingValue",
    "Includes",
    "InstanceOf",
    "LifecycleError",
    "MatcherNotImplementedError",
    "MatchesPattern",
    "MissingSuperclassError",
    "Not",
    "Nothing",
    "ObjMoxError",
    "ParameterListMatcher",
    "ParameterMatcher",
    "Phase",
    "Predicate",
    "RespondsWith",
    "SomethingLike",
    "UnsatisfiedExpectationError",
    "Verdict",
    "VerificationError",
]
