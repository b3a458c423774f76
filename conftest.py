"""Global test configuration and shared fixtures."""

from __future__ import annotations

import typing as t

import pytest

from obj_mox.registry import ExpectationRegistry

pytest_plugins = ("obj_mox.pytest_plugin",)


@pytest.fixture
def registry() -> t.Generator[ExpectationRegistry, None, None]:
    """Provide a registry that is always restored, but never auto-verified."""
    reg = ExpectationRegistry(verify_on_exit=False)
    yield reg
    reg.restore_all()
