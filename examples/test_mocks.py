"""Example tests demonstrating strict expectations."""

from __future__ import annotations

import typing as t

from examples._utils import Mailer, Notifier
from obj_mox import AnyParameters, Exactly, SomethingLike

pytest_plugins = ("obj_mox.pytest_plugin",)

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from obj_mox import ExpectationRegistry


def test_expectation_enforces_args_and_call_count(
    obj_mox: ExpectationRegistry,
) -> None:
    """Expectations check arguments and call counts at teardown."""
    mailer = Mailer()
    obj_mox.expects(mailer, "send").with_args(
        SomethingLike("@example.com$"), "hi"
    ).returns(True).times(2)

    sent = Notifier(mailer).notify_all(["a@example.com", "b@example.com"], "hi")

    assert sent == 2


def test_expectation_with_keyword_arguments(obj_mox: ExpectationRegistry) -> None:
    """Keyword arguments can be matched as well."""
    mailer = Mailer()
    obj_mox.expects(mailer, "send").with_args(
        Exactly("ops"), AnyParameters()
    ).with_kwargs(urgent=True).returns(True)

    assert Notifier(mailer).alert("ops")


def test_class_level_expectation(obj_mox: ExpectationRegistry) -> None:
    """Patching the class affects every instance until teardown."""
    obj_mox.expects(Mailer, "send").never()

    Notifier(Mailer()).notify_all([], "nobody")
