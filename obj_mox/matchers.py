"""Parameter matchers used to validate the arguments of intercepted calls.

A matcher inspects the positional argument tuple of a call starting at a
cursor position and reports whether it accepts what it sees, together with
the position where the next matcher should continue. Most matchers claim a
single argument; :class:`AnyParameters` claims everything that is left and
:class:`Nothing` claims nothing at all. :class:`ParameterListMatcher` threads
the cursor through a sequence of matchers and requires every argument to be
claimed.

Anything that is not a :class:`ParameterMatcher` is treated as a literal and
compared by equality (see :func:`to_matcher`).
"""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as t

from .errors import MatcherNotImplementedError

_MISSING: t.Final = object()


class ParameterMatcher:
    """Base class for all parameter matchers."""

    def consume(self, args: t.Sequence[object], pos: int) -> tuple[bool, int]:
        """Match ``args`` from ``pos`` onwards.

        Returns a ``(matched, end)`` pair where ``end`` is the cursor position
        after the arguments this matcher claimed. ``args`` is never mutated.
        """
        msg = f"{type(self).__name__} does not implement consume()"
        raise MatcherNotImplementedError(msg)

    def matches(self, value: object) -> bool:
        """Return ``True`` when the single argument *value* is accepted."""
        matched, _ = self.consume((value,), 0)
        return matched

    def __str__(self) -> str:
        """Return a human readable description used in failure reports."""
        return repr(self)


def to_matcher(thing: object) -> ParameterMatcher:
    """Return *thing* as a matcher, wrapping literals in :class:`Exactly`."""
    if isinstance(thing, ParameterMatcher):
        return thing
    return Exactly(thing)


class _SingleArgumentMatcher(ParameterMatcher):
    """Matcher that claims exactly one argument."""

    def consume(self, args: t.Sequence[object], pos: int) -> tuple[bool, int]:
        """Claim the argument at ``pos`` and test it with :meth:`accepts`."""
        if pos >= len(args):
            return False, pos
        return bool(self.accepts(args[pos])), pos + 1

    def accepts(self, value: object) -> bool:
        """Return ``True`` if *value* satisfies this matcher."""
        raise NotImplementedError


class Exactly(_SingleArgumentMatcher):
    """Match one argument equal to ``expected``."""

    def __init__(self, expected: object) -> None:
        self.expected = expected

    def accepts(self, value: object) -> bool:
        """Return ``True`` if *value* equals the expected value."""
        return value == self.expected

    def __str__(self) -> str:
        """Render the expected value."""
        return repr(self.expected)

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"Exactly({self.expected!r})"


class Anything(_SingleArgumentMatcher):
    """Match any one argument, as long as it is present."""

    def accepts(self, value: object) -> bool:
        """Return ``True`` for any input."""
        return True

    def __str__(self) -> str:
        """Describe the matcher."""
        return "any parameter"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return "Anything()"


AnyParameter = Anything


class AnyParameters(ParameterMatcher):
    """Match all remaining arguments, including none at all.

    The matcher is greedy: placed before other matchers in a parameter list it
    claims every remaining argument and the matchers after it only ever see an
    empty window.
    """

    def consume(self, args: t.Sequence[object], pos: int) -> tuple[bool, int]:
        """Claim everything from ``pos`` to the end."""
        return True, len(args)

    def __str__(self) -> str:
        """Describe the matcher."""
        return "any parameters"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return "AnyParameters()"


class Nothing(ParameterMatcher):
    """Match only when no arguments remain."""

    def consume(self, args: t.Sequence[object], pos: int) -> tuple[bool, int]:
        """Return ``True`` if the cursor is already at the end."""
        return pos >= len(args), pos

    def __str__(self) -> str:
        """Describe the matcher."""
        return "no parameters"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return "Nothing()"


class CompositeMatcher(_SingleArgumentMatcher):
    """Matcher delegating one argument to a list of child matchers."""

    label: t.ClassVar[str] = "composite"

    def __init__(self, *children: object) -> None:
        self.children = tuple(to_matcher(child) for child in children)

    def __str__(self) -> str:
        """Describe the matcher and its children."""
        inner = ", ".join(str(child) for child in self.children)
        return f"{self.label} ({inner})"

    def __repr__(self) -> str:
        """Return a debug representation."""
        inner = ", ".join(repr(child) for child in self.children)
        return f"{type(self).__name__}({inner})"


class AnyOf(CompositeMatcher):
    """Match one argument accepted by at least one child matcher."""

    label = "any of"

    def accepts(self, value: object) -> bool:
        """Return ``True`` if any child accepts *value*."""
        return any(child.matches(value) for child in self.children)


class AllOf(CompositeMatcher):
    """Match one argument accepted by every child matcher."""

    label = "all of"

    def accepts(self, value: object) -> bool:
        """Return ``True`` if all children accept *value*."""
        return all(child.matches(value) for child in self.children)


class Not(ParameterMatcher):
    """Invert the verdict of ``matcher``, consuming what it consumes."""

    def __init__(self, matcher: object) -> None:
        self.matcher = to_matcher(matcher)

    def consume(self, args: t.Sequence[object], pos: int) -> tuple[bool, int]:
        """Run the wrapped matcher and negate its verdict."""
        matched, end = self.matcher.consume(args, pos)
        return not matched, end

    def __str__(self) -> str:
        """Describe the matcher."""
        return f"not {self.matcher}"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"Not({self.matcher!r})"


class InstanceOf(_SingleArgumentMatcher):
    """Match one argument that is an instance of ``typ``."""

    def __init__(self, typ: type | tuple[type, ...]) -> None:
        self.typ = typ

    def accepts(self, value: object) -> bool:
        """Return ``True`` when ``isinstance(value, typ)`` holds."""
        return isinstance(value, self.typ)

    def _type_name(self) -> str:
        if isinstance(self.typ, tuple):
            return " or ".join(typ.__name__ for typ in self.typ)
        return self.typ.__name__

    def __str__(self) -> str:
        """Describe the matcher."""
        return f"[instance of {self._type_name()}]"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"InstanceOf({self._type_name()})"


class Having(_SingleArgumentMatcher):
    """Match a mapping (or object) where a declared key has its declared value.

    Mapping arguments are looked up by item, other objects by attribute. One
    matching pair is enough.
    """

    def __init__(self, expected: cabc.Mapping[t.Any, object]) -> None:
        self.expected = dict(expected)

    def accepts(self, value: object) -> bool:
        """Return ``True`` if any declared pair is present in *value*."""
        for key, expected in self.expected.items():
            actual = _lookup(value, key)
            if actual is not _MISSING and actual == expected:
                return True
        return False

    def __str__(self) -> str:
        """Describe the matcher."""
        return f"[mapping containing {self.expected!r}]"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"Having({self.expected!r})"


def _lookup(value: object, key: object) -> object:
    """Return ``value[key]`` for mappings and ``value.key`` otherwise."""
    if isinstance(value, cabc.Mapping):
        return value.get(key, _MISSING)
    if isinstance(key, str):
        return getattr(value, key, _MISSING)
    return _MISSING


def _entries(value: object) -> cabc.Mapping[t.Any, object] | None:
    """Return *value* for mappings and its public attributes for plain objects.

    Builtin values without a ``__dict__`` (strings, numbers, lists) have no
    entries.
    """
    if isinstance(value, cabc.Mapping):
        return value
    if not hasattr(value, "__dict__"):
        return None
    entries = {name: getattr(value, name, _MISSING) for name in dir(value)}
    return {
        name: item
        for name, item in entries.items()
        if not name.startswith("_") and item is not _MISSING
    }


class HavingKey(_SingleArgumentMatcher):
    """Match a mapping with at least one key accepted by ``matcher``.

    Plain objects are inspected through their public attribute names.
    """

    def __init__(self, matcher: object) -> None:
        self.matcher = to_matcher(matcher)

    def accepts(self, value: object) -> bool:
        """Return ``True`` if a key of *value* satisfies the nested matcher."""
        entries = _entries(value)
        if entries is None:
            return False
        return any(self.matcher.matches(key) for key in entries)

    def __str__(self) -> str:
        """Describe the matcher."""
        return f"[mapping with key {self.matcher}]"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"HavingKey({self.matcher!r})"


class HavingValue(_SingleArgumentMatcher):
    """Match a mapping with at least one value accepted by ``matcher``.

    Plain objects are inspected through their public attribute values.
    """

    def __init__(self, matcher: object) -> None:
        self.matcher = to_matcher(matcher)

    def accepts(self, value: object) -> bool:
        """Return ``True`` if a value of *value* satisfies the nested matcher."""
        entries = _entries(value)
        if entries is None:
            return False
        return any(self.matcher.matches(item) for item in entries.values())

    def __str__(self) -> str:
        """Describe the matcher."""
        return f"[mapping with value {self.matcher}]"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"HavingValue({self.matcher!r})"


class Includes(_SingleArgumentMatcher):
    """Match a list or tuple with at least one element accepted by ``matcher``."""

    def __init__(self, matcher: object) -> None:
        self.matcher = to_matcher(matcher)

    def accepts(self, value: object) -> bool:
        """Return ``True`` if an element of *value* satisfies the nested matcher."""
        if not isinstance(value, list | tuple):
            return False
        return any(self.matcher.matches(element) for element in value)

    def __str__(self) -> str:
        """Describe the matcher."""
        return f"[including {self.matcher}]"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"Includes({self.matcher!r})"


class SomethingLike(_SingleArgumentMatcher):
    """Match a string argument in which ``pattern`` can be found."""

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self._pattern = re.compile(pattern)

    def accepts(self, value: object) -> bool:
        """Return ``True`` if the regex matches somewhere in *value*."""
        if not isinstance(value, str):
            return False
        return bool(self._pattern.search(value))

    def __str__(self) -> str:
        """Describe the matcher."""
        return f"matching pattern {self._pattern.pattern!r}"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"SomethingLike({self._pattern.pattern!r})"


MatchesPattern = SomethingLike


class RespondsWith(_SingleArgumentMatcher):
    """Match an object exposing attribute ``name``.

    When ``value`` is given the attribute must also produce it: callables are
    invoked without arguments, plain attributes are compared directly.
    """

    def __init__(self, name: str, value: object = _MISSING) -> None:
        self.name = name
        self.value = value

    def accepts(self, value: object) -> bool:
        """Return ``True`` if *value* responds to ``name`` as configured."""
        attr = getattr(value, self.name, _MISSING)
        if attr is _MISSING:
            return False
        if self.value is _MISSING:
            return True
        result = attr() if callable(attr) else attr
        return result == self.value

    def __str__(self) -> str:
        """Describe the matcher."""
        text = f'responds with "{self.name}"'
        if self.value is not _MISSING:
            text += f" returning {self.value!r}"
        return text

    def __repr__(self) -> str:
        """Return a debug representation."""
        if self.value is _MISSING:
            return f"RespondsWith({self.name!r})"
        return f"RespondsWith({self.name!r}, {self.value!r})"


class Predicate(_SingleArgumentMatcher):
    """Use a custom ``func`` to decide whether one argument matches."""

    def __init__(self, func: t.Callable[[t.Any], object]) -> None:
        self.func = func

    def accepts(self, value: object) -> bool:
        """Return ``True`` if ``func(value)`` is truthy."""
        return bool(self.func(value))

    def __str__(self) -> str:
        """Describe the matcher."""
        name = getattr(self.func, "__qualname__", None) or repr(self.func)
        return f"satisfying {name}"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"Predicate({self.func!r})"


class ParameterListMatcher:
    """Match a whole positional argument list against a sequence of matchers.

    Matching is a single greedy pass: each matcher continues where the
    previous one stopped, and the call only matches when every matcher
    accepts and no argument is left unclaimed.
    """

    def __init__(self, expected: t.Iterable[object] = ()) -> None:
        self.matchers = tuple(to_matcher(item) for item in expected)

    def matches(self, args: t.Sequence[object]) -> bool:
        """Return ``True`` if *args* satisfies every matcher in order."""
        args = tuple(args)
        pos = 0
        for matcher in self.matchers:
            matched, pos = matcher.consume(args, pos)
            if not matched:
                return False
        return pos == len(args)

    def __str__(self) -> str:
        """Describe the matchers as a comma separated list."""
        return ", ".join(str(matcher) for matcher in self.matchers)

    def __repr__(self) -> str:
        """Return a debug representation."""
        inner = ", ".join(repr(matcher) for matcher in self.matchers)
        return f"ParameterListMatcher([{inner}])"


class KeywordArgumentsMatcher:
    """Match keyword arguments against a mapping of name to matcher.

    The keyword names of the call must be exactly the declared names.
    """

    def __init__(self, expected: cabc.Mapping[str, object]) -> None:
        self.matchers = {name: to_matcher(item) for name, item in expected.items()}

    def matches(self, kwargs: cabc.Mapping[str, object]) -> bool:
        """Return ``True`` if *kwargs* satisfies every declared matcher."""
        if set(kwargs) != set(self.matchers):
            return False
        return all(
            matcher.matches(kwargs[name]) for name, matcher in self.matchers.items()
        )

    def __str__(self) -> str:
        """Describe the keyword matchers."""
        return ", ".join(f"{name}={matcher}" for name, matcher in self.matchers.items())

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"KeywordArgumentsMatcher({self.matchers!r})"


__all__ = [
    "AllOf",
    "AnyOf",
    "AnyParameter",
    "AnyParameters",
    "Anything",
    "CompositeMatcher",
    "Exactly",
    "Having",
    "HavingKey",
    "HavingValue",
    "Includes",
    "InstanceOf",
    "KeywordArgumentsMatcher",
    "MatchesPattern",
    "Not",
    "Nothing",
    "ParameterListMatcher",
    "ParameterMatcher",
    "Predicate",
    "RespondsWith",
    "SomethingLike",
    "to_matcher",
]
