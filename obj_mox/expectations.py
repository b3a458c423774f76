"""Expectations: instrumented stand-ins for methods on arbitrary objects."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import logging
import typing as t

from .cardinality import AnyCount, AtLeast, AtMost, Between, Cardinality, ExactCount
from .errors import LifecycleError
from .matchers import AnyParameters, KeywordArgumentsMatcher, ParameterListMatcher

logger = logging.getLogger(__name__)

_ABSENT: t.Final = object()


class Phase(enum.StrEnum):
    """Lifecycle phases of an :class:`Expectation`."""

    CONFIGURED = "CONFIGURED"
    ACTIVE = "ACTIVE"
    EVALUATED = "EVALUATED"
    RESTORED = "RESTORED"


@dc.dataclass(frozen=True, slots=True)
class Call:
    """Snapshot of the arguments of one intercepted call."""

    args: tuple[object, ...]
    kwargs: cabc.Mapping[str, object] = dc.field(default_factory=dict)

    def __str__(self) -> str:
        """Render the call arguments like a Python argument list."""
        parts = [repr(arg) for arg in self.args]
        parts.extend(f"{key}={value!r}" for key, value in self.kwargs.items())
        return f"({', '.join(parts)})"


@dc.dataclass(slots=True, eq=False, repr=False)
class Expectation:
    """Expectation that ``target.method_name`` is called in a certain way.

    A new expectation accepts any arguments, must be called exactly once and
    returns ``None``. The fluent methods narrow that down. Once applied, every
    call to the attribute is routed through the expectation until
    :meth:`restore` puts the original back.
    """

    target: object
    method_name: str
    parameters: ParameterListMatcher = dc.field(
        default_factory=lambda: ParameterListMatcher([AnyParameters()])
    )
    keywords: KeywordArgumentsMatcher | None = None
    cardinality: Cardinality = dc.field(default_factory=lambda: ExactCount(1))
    return_values: list[object] = dc.field(default_factory=list)
    handler: t.Callable[..., object] | None = None
    negated: bool = False
    calls: list[Call] = dc.field(default_factory=list, init=False)
    times_called: int = dc.field(default=0, init=False)
    parameters_correct: bool = dc.field(default=True, init=False)
    cardinality_correct: bool | None = dc.field(default=None, init=False)
    _original: object = dc.field(default=_ABSENT, init=False)
    _installed: object = dc.field(default=None, init=False)
    _phase: Phase = dc.field(default=Phase.CONFIGURED, init=False)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def with_args(self, *matchers: object) -> Expectation:
        """Require the positional arguments to satisfy ``matchers`` in order.

        Literal values are compared by equality. ``with_args()`` with no
        matchers only accepts calls without positional arguments.
        """
        self.parameters = ParameterListMatcher(matchers)
        return self

    def with_kwargs(self, **matchers: object) -> Expectation:
        """Require exactly these keyword arguments, each satisfying its matcher."""
        self.keywords = KeywordArgumentsMatcher(matchers)
        return self

    def returns(self, *values: object) -> Expectation:
        """Append ``values`` to the sequence returned by consecutive calls.

        The last value is returned again for every further call.
        """
        self.return_values.extend(values)
        return self

    def then(self) -> Expectation:
        """Return the expectation unchanged, for readable chains."""
        return self

    def runs(self, handler: t.Callable[..., object]) -> Expectation:
        """Compute the return value by calling ``handler`` with the call arguments."""
        self.handler = handler
        return self

    def times(self, count: int) -> Expectation:
        """Require exactly ``count`` calls."""
        self.cardinality = ExactCount(count)
        return self

    def once(self) -> Expectation:
        """Require exactly one call. This is the default."""
        return self.times(1)

    def twice(self) -> Expectation:
        """Require exactly two calls."""
        return self.times(2)

    def never(self) -> Expectation:
        """Require that the method is not called at all."""
        return self.times(0)

    def at_least(self, count: int) -> Expectation:
        """Require ``count`` calls or more."""
        self.cardinality = AtLeast(count)
        return self

    def at_most(self, count: int) -> Expectation:
        """Allow at most ``count`` calls."""
        self.cardinality = AtMost(count)
        return self

    def between(self, low: int, high: int) -> Expectation:
        """Require between ``low`` and ``high`` calls, inclusive."""
        self.cardinality = Between(low, high)
        return self

    def any_number_of_times(self) -> Expectation:
        """Allow any number of calls, including none."""
        self.cardinality = AnyCount()
        return self

    def not_(self) -> Expectation:
        """Negate the expectation: it fails when all criteria are met."""
        self.negated = True
        return self

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def phase(self) -> Phase:
        """Return the current lifecycle phase."""
        return self._phase

    @property
    def is_active(self) -> bool:
        """Return ``True`` while the interceptor is installed on the target."""
        return self._phase in (Phase.ACTIVE, Phase.EVALUATED)

    def apply(self) -> Expectation:
        """Replace the target attribute with the interceptor.

        The attribute is saved from the target's own namespace so that
        :meth:`restore` can tell an overridden attribute from an inherited or
        missing one. On classes a leading instance of the class is dropped
        from the recorded arguments, so ``obj.method(x)``, ``super().method(x)``
        and ``Base.method(obj, x)`` are all recorded as ``(x,)``.
        """
        if self._phase is not Phase.CONFIGURED:
            msg = (
                f"Cannot apply expectation for {self.method_name!r}: "
                f"already {self._phase.name.lower()}"
            )
            raise LifecycleError(msg)
        namespace = getattr(self.target, "__dict__", {})
        original = namespace.get(self.method_name, _ABSENT)
        owner = self.target if isinstance(self.target, type) else None

        def intercept(*args: object, **kwargs: object) -> object:
            if owner is not None and args and isinstance(args[0], owner):
                args = args[1:]
            return self._record_call(args, kwargs)

        intercept.__name__ = self.method_name
        setattr(self.target, self.method_name, intercept)
        self._installed = intercept
        self._original = original
        self._phase = Phase.ACTIVE
        logger.debug("Patched %r on %r", self.method_name, self.target)
        return self

    def _record_call(
        self, args: tuple[object, ...], kwargs: dict[str, object]
    ) -> object:
        """Record one call, update the verdicts and produce the return value."""
        self.calls.append(Call(args, dict(kwargs)))
        self.parameters_correct = self.parameters_correct and self._matches(
            args, kwargs
        )
        self.times_called += 1
        if self.handler is not None:
            return self.handler(*args, **kwargs)
        if len(self.return_values) > 1:
            return self.return_values.pop(0)
        if self.return_values:
            return self.return_values[0]
        return None

    def _matches(self, args: tuple[object, ...], kwargs: dict[str, object]) -> bool:
        if not self.parameters.matches(args):
            return False
        return self.keywords is None or self.keywords.matches(kwargs)

    def evaluate(self) -> bool:
        """Return ``True`` if the recorded calls satisfy the expectation."""
        self.cardinality_correct = self.cardinality.matches(self.times_called)
        satisfied = self.parameters_correct and self.cardinality_correct
        if self._phase is Phase.ACTIVE:
            self._phase = Phase.EVALUATED
        return not satisfied if self.negated else satisfied

    def restore(self) -> None:
        """Put the original attribute back on the target.

        Attributes that were inherited or missing before :meth:`apply` are
        removed again instead of being shadowed. Restoring twice is a no-op.

        Expectations stacked on one attribute must be restored last-in
        first-out: restoring one whose interceptor has been replaced since
        raises :class:`~obj_mox.errors.LifecycleError` and leaves it active.
        """
        if not self.is_active:
            return
        namespace = getattr(self.target, "__dict__", {})
        if namespace.get(self.method_name, _ABSENT) is not self._installed:
            msg = (
                f"Cannot restore {self.method_name!r} on {self.target!r}: "
                "the attribute no longer holds this expectation's interceptor"
            )
            raise LifecycleError(msg)
        if self._original is _ABSENT:
            delattr(self.target, self.method_name)
        else:
            setattr(self.target, self.method_name, self._original)
        self._original = _ABSENT
        self._installed = None
        self._phase = Phase.RESTORED
        logger.debug("Restored %r on %r", self.method_name, self.target)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def describe(self) -> str:
        """Return a short description of the expectation."""
        text = "NOT Call" if self.negated else "Call"
        text += f" of method {self.method_name!r} with {self.parameters}"
        if self.keywords is not None:
            text += f" and keywords {self.keywords}"
        text += f", {self.cardinality}"
        if self.return_values:
            text += ", returning " + ", then ".join(
                repr(value) for value in self.return_values
            )
        return text

    def details(self) -> str:
        """Return which criteria were met and which calls were recorded."""
        if self.parameters_correct:
            text = "Parameters were correctly matched. "
        else:
            text = "Parameters were NOT correctly matched. "
        cardinality_correct = self.cardinality_correct
        if cardinality_correct is None:
            cardinality_correct = self.cardinality.matches(self.times_called)
        if cardinality_correct:
            text += "Expected number of calls was matched. "
        else:
            text += "Expected number of calls was NOT matched. "
        text += f"{self.times_called} times called"
        if self.calls:
            text += ", with " + "; ".join(str(call) for call in self.calls)
        if self.negated:
            text += " NOTE! This expectation was negated."
        return text

    def __str__(self) -> str:
        """Return :meth:`describe`."""
        return self.describe()

    def __repr__(self) -> str:
        """Return a debug representation."""
        return (
            f"<Expectation {self.method_name!r} on {self.target!r} "
            f"phase={self._phase.name.lower()} calls={self.times_called}>"
        )


__all__ = ["Call", "Expectation", "Phase"]
