"""Pytest plugin providing the ``obj_mox`` fixture.

Each test using the fixture gets its own :class:`ExpectationRegistry`. At
teardown the registry is verified (unless verification is switched off for
the test) and every patched method is restored.
"""

from __future__ import annotations

import logging
import typing as t

import pytest

from .registry import ExpectationRegistry

logger = logging.getLogger(__name__)

_AUTO_VERIFY: t.Final = "obj_mox_auto_verify"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add the switch controlling teardown verification."""
    group = parser.getgroup("obj_mox", "method-level test doubles")
    group.addoption(
        "--obj-mox-auto-verify",
        action="store_true",
        dest=_AUTO_VERIFY,
        default=None,
        help="Check every obj_mox expectation when its test finishes.",
    )
    group.addoption(
        "--no-obj-mox-auto-verify",
        action="store_false",
        dest=_AUTO_VERIFY,
        default=None,
        help=(
            "Leave expectation checks to explicit obj_mox.verify() calls. "
            "Patched methods are still restored."
        ),
    )
    parser.addini(
        _AUTO_VERIFY,
        "Check obj_mox expectations when each test finishes (default: true).",
        type="bool",
        default=True,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Declare the ``obj_mox`` marker."""
    config.addinivalue_line(
        "markers",
        "obj_mox(auto_verify=False): do not check obj_mox expectations at teardown.",
    )


class _ObjMoxItem(t.Protocol):
    """pytest item carrying obj_mox lifecycle metadata."""

    _obj_mox_registry: ExpectationRegistry | None
    _obj_mox_auto_verify: bool
    _obj_mox_verify_error: Exception | None
    _obj_mox_verify_should_fail: bool


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[t.Any]
) -> t.Generator[None, None, None]:
    """Keep each phase report on the item.

    Teardown reads ``rep_call`` to tell whether the test body already failed.
    """
    del call
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)
    if rep.when == "teardown":
        _apply_deferred_verify_failure(item, rep)


def _auto_verify_enabled(request: pytest.FixtureRequest) -> bool:
    """Decide whether teardown checks the expectations of this test.

    The marker wins over the fixture parameter, which wins over the command
    line, which wins over the ini file.
    """
    for override in (_get_marker_auto_verify, _get_param_auto_verify):
        value = override(request)
        if value is not None:
            return value
    cli_value = request.config.getoption(_AUTO_VERIFY)
    if cli_value is not None:
        return bool(cli_value)
    return bool(request.config.getini(_AUTO_VERIFY))


def _get_marker_auto_verify(request: pytest.FixtureRequest) -> bool | None:
    """Return ``auto_verify`` from the closest ``obj_mox`` marker, if given."""
    marker = request.node.get_closest_marker("obj_mox")
    if marker is None:
        return None
    value = marker.kwargs.get("auto_verify")
    return None if value is None else bool(value)


def _get_param_auto_verify(request: pytest.FixtureRequest) -> bool | None:
    """Return the switch passed through indirect fixture parametrisation.

    Accepts ``True``/``False`` or ``{"auto_verify": bool}``.
    """
    param = getattr(request, "param", None)
    if param is None or isinstance(param, bool):
        return param
    if not isinstance(param, dict):
        msg = (
            "obj_mox fixture param must be a bool or dict with 'auto_verify' key, "
            f"got {type(param).__name__}"
        )
        raise TypeError(msg)
    if "auto_verify" not in param:
        msg = (
            "obj_mox fixture param dict must contain 'auto_verify' key, "
            f"got keys: {sorted(param)}"
        )
        raise TypeError(msg)
    return bool(param["auto_verify"])


def _apply_deferred_verify_failure(
    item: pytest.Item, report: pytest.TestReport
) -> None:
    """Attach a verification error that did not fail the test to its report."""
    err: Exception | None = getattr(item, "_obj_mox_verify_error", None)
    if err is None:
        return
    delattr(item, "_obj_mox_verify_error")
    should_fail = getattr(item, "_obj_mox_verify_should_fail", False)
    if hasattr(item, "_obj_mox_verify_should_fail"):
        delattr(item, "_obj_mox_verify_should_fail")
    if not should_fail:
        report.sections.append(("obj_mox verification", f"{type(err).__name__}: {err}"))


@pytest.fixture
def obj_mox(request: pytest.FixtureRequest) -> t.Generator[ExpectationRegistry, None, None]:
    """Provide an :class:`ExpectationRegistry` scoped to the current test."""
    registry = ExpectationRegistry(verify_on_exit=False)
    auto_verify = _auto_verify_enabled(request)
    _attach_node_state(request.node, registry, auto_verify=auto_verify)
    try:
        yield registry
    except Exception:
        logger.exception("Error during obj_mox fixture setup or test execution")
        raise
    finally:
        _teardown_obj_mox(request.node, registry)


def _attach_node_state(
    item: pytest.Item, registry: ExpectationRegistry, *, auto_verify: bool
) -> None:
    """Expose ``registry`` on the test item for later teardown hooks."""
    typed_item = t.cast("_ObjMoxItem", item)
    typed_item._obj_mox_registry = registry
    typed_item._obj_mox_auto_verify = auto_verify
    typed_item._obj_mox_verify_error = None
    typed_item._obj_mox_verify_should_fail = False


def _teardown_obj_mox(item: pytest.Item, registry: ExpectationRegistry) -> None:
    """Verify expectations when enabled, always restore, and clear item state."""
    typed_item = t.cast("_ObjMoxItem", item)
    auto_verify = getattr(typed_item, "_obj_mox_auto_verify", True)
    should_raise = False
    if auto_verify:
        try:
            registry.verify()
        except Exception as err:
            logger.exception("Error during obj_mox verification")
            typed_item._obj_mox_verify_error = err
            should_fail = not _call_stage_failed(item)
            typed_item._obj_mox_verify_should_fail = should_fail
            should_raise = should_fail
    try:
        registry.restore_all()
    except Exception:
        logger.exception("Error during obj_mox fixture cleanup")
        pytest.fail("obj_mox fixture cleanup failed")
    finally:
        _detach_node_state(item, registry)
    if should_raise:
        err = typed_item._obj_mox_verify_error
        pytest.fail(f"{type(err).__name__}: {err}")


def _detach_node_state(item: pytest.Item, registry: ExpectationRegistry) -> None:
    """Remove per-item references to ``registry``."""
    typed_item = t.cast("_ObjMoxItem", item)
    if getattr(typed_item, "_obj_mox_registry", None) is registry:
        delattr(typed_item, "_obj_mox_registry")
    if hasattr(typed_item, "_obj_mox_auto_verify"):
        delattr(typed_item, "_obj_mox_auto_verify")


def _call_stage_failed(item: pytest.Item) -> bool:
    """Return ``True`` when the test body has already failed."""
    rep_call = getattr(item, "rep_call", None)
    return bool(rep_call and rep_call.failed)
