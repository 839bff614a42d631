"""
Small helpers shared by the definitions, the engine, the binder and the renderers.

- Unset / UnsetType: the "not given" sentinel, distinct from None.
- coalesce(value, default): resolve Unset to a default.
- rename(...): give generated callables a stable name.
- mirror(name): read-only property over a "_name" attribute.
- ordinal(number): "first", "second", ..., "21st", used by fault messages.

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> ordinal(3)
    'third'
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    Used as a keyword default wherever None is a meaningful value of its own.
    Unset is falsey, prints as "Unset", survives copies, and takes part in
    isinstance() unions (str | Unset). There is exactly one instance.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, else `object` itself (None, 0 and
    empty containers included).
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    Set __name__ and __qualname__ of a callable.

    rename(callable, name) renames in place and returns the callable;
    rename(name) returns a decorator doing the same.
    """
    match parameters:
        case (callable, name):
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__name__ = callable.__qualname__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case (name,):
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def decorator(callable):
                return rename(callable, name)

            return decorator
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    # containers are handed out as read-only views/copies
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Read-only property returning self._<name>; lists, dicts and sets come back
    as tuple, mappingproxy and frozenset.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


_WORDS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@functools.cache
def ordinal(number, /):
    """
    Ordinal label of a 1-based position: words up to ten, then 11th, 21st, 22nd...
    """
    if not isinstance(number, int):
        raise TypeError("ordinal() argument must be an integer")
    if 1 <= number <= len(_WORDS):
        return _WORDS[number - 1]
    if 10 < number % 100 < 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
