"""Behavioural test of the obj_mox pytest plug-in, expressed with pytest-bdd."""

from __future__ import annotations

import textwrap
import typing as t
from pathlib import Path

from pytest_bdd import given, scenario, then, when

if t.TYPE_CHECKING:  # pragma: no cover - used for type checking only
    from _pytest.pytester import Pytester, RunResult

FEATURES_DIR = Path(__file__).resolve().parent.parent / "features"
FEATURE = str(FEATURES_DIR / "pytest_plugin.feature")


@scenario(FEATURE, "obj_mox fixture basic usage")
def test_obj_mox_plugin() -> None:
    """Bind scenario steps for the pytest plugin."""
    pass


@scenario(FEATURE, "unmet expectation fails at teardown")
def test_obj_mox_plugin_unmet() -> None:
    """Bind the teardown failure scenario."""
    pass


@scenario(FEATURE, "auto verification can be disabled by marker")
def test_obj_mox_plugin_marker() -> None:
    """Bind the marker override scenario."""
    pass


PASSING_CODE = textwrap.dedent(
    """
    import pytest

    from obj_mox import Exactly

    pytest_plugins = ("obj_mox.pytest_plugin",)

    class Mailer:
        def send(self, to):
            raise AssertionError("real mailer used")

    def test_example(obj_mox):
        obj_mox.expects(Mailer, "send").with_args(Exactly("bob")).returns(True)
        assert Mailer().send("bob") is True

    def test_restored():
        with pytest.raises(AssertionError, match="real mailer used"):
            Mailer().send("bob")
    """
)

FAILING_CODE = textwrap.dedent(
    """
    pytest_plugins = ("obj_mox.pytest_plugin",)

    class Mailer:
        def send(self, to):
            return "real"

    def test_example(obj_mox):
        obj_mox.expects(Mailer, "send").twice()
        Mailer().send("bob")
    """
)

MARKER_CODE = textwrap.dedent(
    """
    import pytest

    pytest_plugins = ("obj_mox.pytest_plugin",)

    class Mailer:
        def send(self, to):
            return "real"

    @pytest.mark.obj_mox(auto_verify=False)
    def test_example(obj_mox):
        obj_mox.expects(Mailer, "send")

    def test_restored():
        assert Mailer().send("bob") == "real"
    """
)


@given("a temporary test file using the obj_mox fixture", target_fixture="test_file")
def create_test_file(pytester: Pytester) -> Path:
    """Write a test file whose expectations are met."""
    return pytester.makepyfile(PASSING_CODE)


@given("a temporary test file with an unmet expectation", target_fixture="test_file")
def create_failing_test_file(pytester: Pytester) -> Path:
    """Write a test file whose expectation is not met."""
    return pytester.makepyfile(FAILING_CODE)


@given(
    "a temporary test file disabling auto verification", target_fixture="test_file"
)
def create_marker_test_file(pytester: Pytester) -> Path:
    """Write a test file that turns verification off with a marker."""
    return pytester.makepyfile(MARKER_CODE)


@when("I run pytest on the file", target_fixture="result")
def run_pytest(pytester: Pytester, test_file: Path) -> RunResult:
    """Run the inner pytest instance."""
    return pytester.runpytest(str(test_file))


@then("the run should pass")
def assert_success(result: RunResult) -> None:
    """Assert that every test passed."""
    result.assert_outcomes(passed=2)


@then("the run should report a verification error")
def assert_verification_error(result: RunResult) -> None:
    """Assert the test body passed but teardown reported the expectation."""
    result.assert_outcomes(passed=1, errors=1)
    result.stdout.fnmatch_lines(["*UnsatisfiedExpectationError*"])
