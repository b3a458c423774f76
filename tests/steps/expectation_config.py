"""pytest-bdd steps that declare expectations and doubles."""

from __future__ import annotations

import types
import typing as t

import pytest
from pytest_bdd import given, parsers

from obj_mox.matchers import Exactly
from obj_mox.registry import ExpectationRegistry
from tests.helpers.targets import Greeter

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from obj_mox.doubles import Double


@pytest.fixture
def mox() -> t.Generator[ExpectationRegistry, None, None]:
    """Provide a registry restored after each scenario."""
    registry = ExpectationRegistry(verify_on_exit=False)
    yield registry
    registry.restore_all()


@given("an expectation registry")
def empty_registry(mox: ExpectationRegistry) -> None:
    """Ensure the scenario starts without expectations."""
    assert mox.expectations == ()


@given(
    parsers.cfparse('an object expecting "{method}" with argument "{arg}" once'),
    target_fixture="subject",
)
def expect_with_argument(
    mox: ExpectationRegistry, method: str, arg: str
) -> types.SimpleNamespace:
    """Expect *method* to be called once with *arg*."""
    subject = types.SimpleNamespace()
    mox.expects(subject, method).with_args(Exactly(arg)).times(1)
    return subject


@given(
    parsers.cfparse('an object expecting "{method}" never, negated'),
    target_fixture="subject",
)
def expect_never_negated(mox: ExpectationRegistry, method: str) -> types.SimpleNamespace:
    """Declare a negated ``never`` expectation."""
    subject = types.SimpleNamespace()
    mox.expects(subject, method).never().not_()
    return subject


@given(
    parsers.cfparse('a stub double with methods "{methods}"'),
    target_fixture="subject",
)
def stub_double(mox: ExpectationRegistry, methods: str) -> Double:
    """Create an anonymous stub for the comma separated *methods*."""
    return mox.stub(methods.split(","))


@given(
    parsers.cfparse('an object stubbing "{method}" returning {first:d} then {second:d}'),
    target_fixture="subject",
)
def stub_returning(
    mox: ExpectationRegistry, method: str, first: int, second: int
) -> types.SimpleNamespace:
    """Stub *method* with a two-value return sequence."""
    subject = types.SimpleNamespace()
    mox.stubs(subject, method).returns(first).then().returns(second)
    return subject


@given("two stacked stubs on a class method")
def stacked_stubs(mox: ExpectationRegistry) -> None:
    """Patch ``Greeter.greet`` twice."""
    mox.stubs(Greeter, "greet").returns("first")
    mox.stubs(Greeter, "greet").returns("second")
    assert Greeter().greet() == "second"
