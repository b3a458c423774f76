"""Anonymous test doubles."""

from __future__ import annotations

import typing as t

EVENT_DEFAULTS: t.Final[dict[str, object]] = {
    "stop": True,
    "prevent_default": True,
    "stop_propagation": True,
}


class Double:
    """Blank object whose methods are supplied by expectations."""

    def __init__(self, name: str = "double") -> None:
        self._double_name = name

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"<Double {self._double_name}>"


def event_methods(overrides: t.Mapping[str, object] | None = None) -> dict[str, object]:
    """Return the method/return-value table of an event-like stub.

    Every method of an event returns ``True`` unless *overrides* says
    otherwise. Overrides may also introduce extra methods.
    """
    methods = dict(EVENT_DEFAULTS)
    if overrides:
        methods.update(overrides)
    return methods


__all__ = ["EVENT_DEFAULTS", "Double", "event_methods"]
