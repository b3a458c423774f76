"""Sample classes used as patch targets in tests."""

from __future__ import annotations

import dataclasses as dc


class Greeter:
    """Object with an ordinary instance method."""

    def greet(self, name: str) -> str:
        """Return a greeting for *name*."""
        return f"hello {name}"

    def farewell(self) -> str:
        """Return a farewell."""
        return "bye"


class Base:
    """Base class providing ``method``."""

    def method(self, *args: object) -> str:
        """Return the name of the implementing class."""
        return "base"


class Sub(Base):
    """Subclass inheriting ``method`` unchanged."""


class CallsSuper(Base):
    """Subclass delegating ``method`` to its base class."""

    def method(self, *args: object) -> str:
        """Delegate to :meth:`Base.method`."""
        return super().method(*args)


@dc.dataclass
class Widget:
    """Class whose construction is observed by ``instantiates``."""

    size: int = 0


class Responder:
    """Object with a method and a plain attribute."""

    colour = "red"

    def bar(self) -> int:
        """Return a constant."""
        return 1


class ExplicitSuper(Base):
    """Subclass calling ``Base.method`` with an explicit instance argument."""

    def method(self, *args: object) -> str:
        """Delegate to :meth:`Base.method` without ``super()``."""
        return Base.method(self, *args)


class ExplodingCardinality:
    """Call-count policy that fails while being evaluated."""

    def matches(self, count: int) -> bool:
        """Raise instead of answering."""
        msg = "count exploded"
        raise RuntimeError(msg)
