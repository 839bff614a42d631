"""
Binding: turn recognized argument events into typed values.

The engine only reports what it recognized; the Binder decides what that means
for each definition:

- Positional → converted value (definition.type).
- Trail      → list of converted values.
- Switch     → True.
- Count      → number of occurrences.
- Option     → converted value. A second occurrence is a user error
               (OptionGivenTwiceError) with repeat="error", or replaces the
               previous value with repeat="overwrite".
- Collect    → every converted value is added to a collector.

Converter failures (TypeError/ValueError) surface as InvalidValueError.
Positionals, the trail and the options share the namespace: two of them with the
same name are rejected with ArgumentNameClashError when the Binder is built.

Collectors
- A collector is anything with add(value). collector(target) adapts the common
  containers: objects with append (list, deque) or add (set) are wrapped.
"""
import logging
from typing import Protocol, runtime_checkable

from . import events
from .arguments import Kind, Count, Collect
from .definitions import DefinitionSet
from .faults import *

logger = logging.getLogger(__name__)

REPEAT_POLICIES = ("error", "overwrite")


@runtime_checkable
class Collector(Protocol):
    """
    capability interface: a container values can be added to.
    """

    def add(self, value, /): ...


class _Appender:
    """
    Internal: Collector view over a container with append().
    """
    __slots__ = ("target",)

    def __init__(self, target):
        self.target = target

    def add(self, value, /):
        self.target.append(value)


def collector(target, /):
    """
    Adapt a container to the Collector interface.

    - objects with add(value) (set, Collector implementations) are returned as-is;
    - objects with append(value) (list, deque) are wrapped;
    - anything else raises TypeError.
    """
    if callable(getattr(target, "add", None)):
        return target
    if callable(getattr(target, "append", None)):
        return _Appender(target)
    raise TypeError(f"cannot collect values into {type(target).__name__!r} objects")


class Namespace:
    """
    The bound values of a parse, by definition name.

    Values read as items (namespace["dry-run"]) or attributes, where dashes in the
    name are written as underscores (namespace.dry_run).

    Attribute access finds the methods first: arguments named "get" or "asdict"
    are read as items (namespace["get"]).
    """

    def __init__(self, values=(), /):
        object.__setattr__(self, "_values", dict(values))

    def __getattr__(self, name, /):
        values = object.__getattribute__(self, "_values")
        for candidate in (name, name.replace("_", "-")):
            if candidate in values:
                return values[candidate]
        raise AttributeError(f"namespace has no argument {name!r}")

    def __setattr__(self, name, value, /):
        raise AttributeError("namespace is read-only")

    def __getitem__(self, name, /):
        return self._values[name]

    def __contains__(self, name, /):
        return name in self._values

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __eq__(self, other, /):
        if not isinstance(other, Namespace):
            return NotImplemented
        return self._values == other._values

    __hash__ = None

    def get(self, name, default=None, /):
        return self._values.get(name, default)

    def asdict(self):
        return dict(self._values)

    def __repr__(self):
        return "namespace(%s)" % ", ".join("%s=%r" % item for item in self._values.items())

    def __rich_repr__(self):
        yield from self._values.items()


class Binder:
    """
    Accumulate events of one parse into typed values.

    Parameters
    - definitions: DefinitionSet the events were produced against.
    - repeat: "error" (default) or "overwrite", the policy for an Option given
      more than once.
    """

    def __init__(self, definitions, /, *, repeat="error"):
        if not isinstance(definitions, DefinitionSet):
            raise TypeError("Binder() argument must be a compiled definition set")
        if repeat not in REPEAT_POLICIES:
            raise ValueError(f"Binder() 'repeat' must be one of {', '.join(map(repr, REPEAT_POLICIES))}")

        self._definitions = definitions
        self._repeat = repeat
        self._given = set()
        self._collectors = {}
        self._values = {}

        for name in definitions.positional:
            self._declare(name, None)
        if (trail := definitions.trail) is not None:
            self._declare(trail.name, [])
        for name, definition in definitions.options.items():
            if definition.kind is Kind.INTERRUPT or not name:
                continue
            if isinstance(definition, Collect):
                self._collectors[name] = collector(self._declare(name, definition.factory()))
            elif isinstance(definition, Count):
                self._declare(name, 0)
            elif definition.kind is Kind.SWITCH:
                self._declare(name, False)
            else:
                self._declare(name, None)

    def _declare(self, name, value):
        # positionals, the trail and the options share one namespace
        if name in self._values:
            raise ArgumentNameClashError(name)
        self._values[name] = value
        return value

    @property
    def repeat(self):
        return self._repeat

    def bind(self, event, /):
        """
        Apply one event. Interrupted/Delegated events and the terminator switch
        carry no value and are ignored.
        """
        match event:
            case events.Positional(name, value):
                self._values[name] = self._convert(self._definitions.positionals[name], value)
            case events.TrailValue(value):
                trail = self._definitions.trail
                self._values[trail.name].append(self._convert(trail, value))
            case events.Switch(""):
                pass
            case events.Switch(name):
                if isinstance(self._definitions.options[name], Count):
                    self._values[name] += 1
                else:
                    self._values[name] = True
            case events.Option(name, value):
                definition = self._definitions.options[name]
                if isinstance(definition, Collect):
                    self._collectors[name].add(self._convert(definition, value))
                    return
                if name in self._given and self._repeat == "error":
                    raise OptionGivenTwiceError(name)
                self._values[name] = self._convert(definition, value)
                self._given.add(name)
            case events.Interrupted() | events.Delegated():
                pass
            case _:
                raise TypeError(f"bind() argument must be an event, not {type(event).__name__!r}")

    def _convert(self, definition, value):
        try:
            return definition.type(value)
        except (TypeError, ValueError) as exception:
            logger.debug("conversion of %r for %r failed: %s", value, definition.name, exception)
            raise InvalidValueError(definition.name, value, reason=str(exception)) from exception

    def namespace(self):
        return Namespace(self._values)


__all__ = (
    "Collector",
    "collector",
    "Namespace",
    "Binder",
)
