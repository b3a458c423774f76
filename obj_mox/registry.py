"""Expectation registry and the declarative API used by tests."""

from __future__ import annotations

import collections.abc as cabc
import logging
import types  # noqa: TC003
import typing as t

from .doubles import Double, event_methods
from .errors import MissingSuperclassError
from .expectations import Expectation
from .verifiers import ExpectationVerifier, Verdict

logger = logging.getLogger(__name__)

MethodSpec: t.TypeAlias = str | cabc.Iterable[str] | cabc.Mapping[str, object]


class ExpectationRegistry:
    """Collect the expectations of one test scope and finalise them together.

    Use it as a context manager (or through the ``obj_mox`` pytest fixture)
    so that every patched method is restored even when the test fails.

    Expectations are evaluated in declaration order and restored in reverse
    declaration order. The reverse order matters when several expectations
    patch the same method: each one saved the previous one's interceptor, so
    only unwinding them last-in first-out leaves the true original in place.
    """

    def __init__(self, *, verify_on_exit: bool = True) -> None:
        """Create an empty registry.

        Parameters
        ----------
        verify_on_exit:
            When ``True`` (the default), leaving the ``with`` block without an
            exception calls :meth:`verify`. Otherwise only :meth:`restore_all`
            runs on exit.
        """
        self._verify_on_exit = verify_on_exit
        self._expectations: list[Expectation] = []
        self._verifier = ExpectationVerifier()

    @property
    def expectations(self) -> tuple[Expectation, ...]:
        """Return the registered expectations in declaration order."""
        return tuple(self._expectations)

    # ------------------------------------------------------------------
    # Context manager protocol
    # ------------------------------------------------------------------
    def __enter__(self) -> ExpectationRegistry:
        """Enter the scope."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Verify when the block succeeded, and always restore."""
        if exc_type is None and self._verify_on_exit:
            self.verify()
        else:
            self.restore_all()

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------
    def register(self, expectation: Expectation) -> Expectation:
        """Add *expectation* to this scope."""
        self._expectations.append(expectation)
        return expectation

    @t.overload
    def expects(self, target: object, methods: str) -> Expectation: ...

    @t.overload
    def expects(
        self, target: object, methods: cabc.Iterable[str] | cabc.Mapping[str, object]
    ) -> list[Expectation]: ...

    def expects(
        self, target: object, methods: MethodSpec
    ) -> Expectation | list[Expectation]:
        """Expect ``target.<method>`` to be called exactly once with any arguments.

        *methods* may be a single name, a list of names, or a mapping of name
        to return value. A single name returns its :class:`Expectation`; the
        other forms return one expectation per entry.
        """
        if isinstance(methods, str):
            return self._declare(target, methods)
        if isinstance(methods, cabc.Mapping):
            return [
                self._declare(target, name).returns(value)
                for name, value in methods.items()
            ]
        return [self._declare(target, name) for name in methods]

    @t.overload
    def stubs(self, target: object, methods: str) -> Expectation: ...

    @t.overload
    def stubs(
        self, target: object, methods: cabc.Iterable[str] | cabc.Mapping[str, object]
    ) -> list[Expectation]: ...

    def stubs(
        self, target: object, methods: MethodSpec
    ) -> Expectation | list[Expectation]:
        """Like :meth:`expects`, but the methods may be called any number of times."""
        if isinstance(methods, str):
            return self._declare(target, methods).any_number_of_times()
        created = self.expects(target, methods)
        for expectation in created:
            expectation.any_number_of_times()
        return created

    def expects_super(self, target: object, method: str) -> Expectation:
        """Expect the superclass implementation of *method* to be called once.

        The method is patched on the next class in the MRO of ``target`` (or
        of ``target``'s class, for instances), so it is seen both through
        ``super()`` and through subclasses that do not override it.
        """
        cls = target if isinstance(target, type) else type(target)
        base = cls.__mro__[1] if len(cls.__mro__) > 1 else object
        if base is object:
            msg = f"expects_super: {cls.__name__} has no superclass"
            raise MissingSuperclassError(msg)
        return self._declare(base, method)

    def instantiates(self, cls: type) -> Expectation:
        """Expect *cls* to be instantiated exactly once.

        The class initialiser is replaced for the duration of the scope, so
        the real ``__init__`` does not run.
        """
        return self._declare(cls, "__init__")

    def mock(self, methods: MethodSpec | None = None) -> Double:
        """Return a blank double expecting *methods* (see :meth:`expects`)."""
        double = Double("mock")
        if methods is not None:
            self.expects(double, methods)
        return double

    def stub(self, methods: MethodSpec | None = None) -> Double:
        """Return a blank double stubbing *methods* (see :meth:`stubs`)."""
        double = Double("stub")
        if methods is not None:
            self.stubs(double, methods)
        return double

    def mock_event(self, **overrides: object) -> Double:
        """Return a stub behaving like a DOM-style event.

        ``stop``, ``prevent_default`` and ``stop_propagation`` return ``True``
        unless overridden.
        """
        return self.stub(event_methods(overrides))

    def _declare(self, target: object, name: str) -> Expectation:
        expectation = Expectation(target, name).apply()
        return self.register(expectation)

    # ------------------------------------------------------------------
    # Finalisation
    # ------------------------------------------------------------------
    def evaluate_all(self) -> list[Verdict]:
        """Evaluate every expectation in declaration order."""
        return self._verifier.evaluate(self._expectations)

    def verify(self) -> None:
        """Check every expectation, then restore all patched methods.

        Raises :class:`~obj_mox.errors.UnsatisfiedExpectationError` for the
        first expectation that is not satisfied. Restoration happens whether
        or not verification succeeds.
        """
        try:
            self._verifier.verify(self._expectations)
        finally:
            self.restore_all()

    def restore_all(self) -> None:
        """Restore every patched method, most recent declaration first."""
        first_error: Exception | None = None
        for expectation in reversed(self._expectations):
            try:
                expectation.restore()
            except Exception as err:
                logger.exception("Error restoring %r", expectation)
                if first_error is None:
                    first_error = err
        if first_error is not None:
            raise first_error


__all__ = ["ExpectationRegistry", "MethodSpec"]
