"""
Shared helpers for the commandeer package.

- Unset: the "nothing was passed" marker, for places where None means something.
- coalesce: swap Unset for a fallback value.
- rename: decorator that pins __name__ and __qualname__ on generated callables.
- view: read-only property that hands out frozen copies of a private field.
- ordinal: "first", "second", ..., "11th", "22nd" for log and fault messages.

Anything not listed in __all__ is private to the package.
"""
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker. There is exactly one instance, it is false in a
    boolean context, and it can take part in isinstance unions (str | Unset).
    """

    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return object.__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"


def coalesce(object, default=None, /):
    """Return *default* when *object* is Unset, otherwise *object* unchanged."""
    if object is Unset:
        return default
    return object


def rename(name, /):
    """
    Decorator form only: ``@rename("overload")`` sets both __name__ and
    __qualname__ of the decorated callable to *name* and returns it.
    """
    if not isinstance(name, str):
        raise TypeError(f"rename() expects a str name, got {type(name).__name__}")

    def decorator(callable, /):
        for attribute in ("__name__", "__qualname__"):
            try:
                setattr(callable, attribute, name)
            except (AttributeError, TypeError):
                raise TypeError(f"cannot rename {callable!r}") from None
        return callable

    return decorator


def view(name, /):
    """
    Define a read-only property over the private backing attribute "_{name}".

    Containers are handed out as immutable views so callers cannot reach into
    registry state:
    - Sequence (non-str) → tuple
    - Mapping           → MappingProxyType
    - Set               → frozenset
    - other types       → returned as-is
    """
    if not isinstance(name, str):
        raise TypeError("view() argument must be a string")

    @rename(name)
    def getter(self):
        value = getattr(self, "_" + name)
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        if isinstance(value, Set):
            return frozenset(value)
        return value

    return property(getter)


_WORDS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@functools.cache
def ordinal(number, /):
    """Spell 1-based positions up to ten as words, larger ones as 11th, 21st, 102nd."""
    if 1 <= number <= len(_WORDS):
        return _WORDS[number - 1]
    if number % 100 in (11, 12, 13):
        return f"{number}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


Unset = UnsetType()
"""The single UnsetType instance."""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "view",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
