r"""
Argonaut argument definitions.

Overview
- Definitions (immutable value objects, one per expected argument)
  • Positional: required value identified by its position among non-flag tokens.
  • Trail: the variable-length run of positional values after the fixed slots
    (one-or-more, or zero-or-more when optional).
  • Switch: presence-only flag, e.g. --verbose / -v.
  • Count: presence-only flag whose occurrences are counted, e.g. -vvv.
  • Option: flag that consumes the following token as its parameter.
  • Collect: option that may be repeated; every parameter is collected.
  • Subcommand: named token that hands every remaining token to a handler.
  • Interrupt: switch-like flag that stops the parse (help, version).

- Factories
  • default_help(description): the conventional "help" interrupt.
  • default_version(version): the conventional "version" interrupt.

Kinds
- The engine only distinguishes six kinds (see Kind): Count reads as a Switch and
  Collect reads as an Option. Repetition semantics belong to the binder.

Metadata (sanitized on construction)
- name: str. Long names are given without dashes ("verbose" is matched by
  "--verbose"). A Switch may use the empty name: it is then matched by the
  bare "--" token and conventionally terminates the parse.
- short: Unset | str, the single-character alias ("v" is matched by "-v").
  Its shape is checked when the definitions are compiled.
- param: Unset | str, parameter label in help (defaults to the upper-cased name).
- type: Callable, converter applied by the binder.
- descr: Unset | str | Text, short help text, non-empty when provided.

Immutability
- Fields are exposed through read-only properties. Derive a modified copy with
  copy.replace(definition, short="x", descr="...").

Quick example:
    >>> from argonaut.arguments import Positional, Trail, Switch, Option
    >>> definitions = [
    ...     Positional("foo"),
    ...     Trail("files"),
    ...     Switch("verbose", short="v"),
    ...     Option("exclude", short="x", param="PATTERN"),
    ... ]
"""
import builtins
import functools
import operator
import re
from enum import Enum

from rich.console import Console
from rich.text import Text

from .utils import *


class Kind(Enum):
    """
    the argument kinds the engine dispatches on.
    """
    POSITIONAL = "positional"
    TRAIL = "trail"
    SWITCH = "switch"
    OPTION = "option"
    SUBCOMMAND = "subcommand"
    INTERRUPT = "interrupt"


class DefinitionType(type):
    """
    Metaclass that turns definitions into introspectable value objects.

    Responsibilities
    - Expose the fields listed in __introspectable__ as read-only properties
      (via mirror()) backed by "_<field>" attributes.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - switch(name='verbose', short='v', descr=None)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /, *, nameless=False):
    """
    Internal: normalize and validate the fields every definition shares.

    - name: must be a string; stripped. It cannot start with '-' (dashes are
      part of the token syntax, not of the name) nor contain whitespace. It
      must be non-empty unless `nameless` allows the terminator convention.
    - descr: Unset | str | Text. If provided as a string, it must be non-empty
      after trimming. Unset becomes None.

    Raises
    - TypeError: on wrong types.
    - ValueError: on empty/malformed strings.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    name = name.strip()
    if not name and not nameless:
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    if name.startswith("-"):
        raise ValueError(f"{cls.__typename__} 'name' must be given without leading dashes")
    if re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} 'name' cannot contain whitespace")
    metadata["name"] = name

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the short alias of flag-like definitions.

    Only the type is checked here (Unset or str). Whether the alias is a single
    character other than '-' is a property of the definition set and is reported
    by compile() as InvalidShortNameError.
    """
    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    metadata["short"] = coalesce(short)


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate the fields of value-bearing definitions.

    - type: must be callable (converter). Only callability is enforced.
    - param: Unset | str, non-empty after trimming when provided (option-like only).
    """
    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if "param" not in metadata:
        return
    if not isinstance(param := metadata["param"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'param' must be a string")
    elif isinstance(param, str) and not (param := param.strip()):
        raise ValueError(f"{cls.__typename__} 'param' cannot be empty")
    metadata["param"] = coalesce(param)


class Definition(metaclass=DefinitionType):
    """
    Common base of every argument definition.

    Subclasses set __kind__ (the engine-visible Kind) and __introspectable__
    (their fields, which are also the keyword arguments accepted by their
    constructor and by copy.replace).
    """
    __kind__ = Unset
    __introspectable__ = ()

    @property
    def kind(self):
        return type(self).__kind__

    def _populate(self, metadata):
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __replace__(self, *unused, **changes):
        assert not unused, "positional arguments are not allowed"
        fields = type(self).__introspectable__
        if unknown := changes.keys() - set(fields):
            raise TypeError(f"{type(self).__typename__} has no field {sorted(unknown)[0]!r}")
        # fields stored as None were omitted at construction
        current = {name: object for name in fields if (object := getattr(self, "_" + name)) is not None}
        return type(self)(**current | changes)

    def __eq__(self, other, /):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, "_" + name) == getattr(other, "_" + name) for name in type(self).__introspectable__)

    def __hash__(self):
        return hash((type(self), self._name))


class Positional(Definition):
    """
    A required positional argument.

    Slots are filled in definition order by tokens that do not start with '-'.
    """
    __kind__ = Kind.POSITIONAL
    __introspectable__ = (
        "name",
        "type",
        "descr",
    )

    def __init__(self, name, *, type=str, descr=Unset):
        metadata = {
            "name": name,
            "type": type,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._populate(metadata)


class Trail(Definition):
    """
    The trailing positional values, collected after every slot is filled.

    A required trail (optional=False) expects one or more values; an optional
    trail accepts zero or more.
    """
    __kind__ = Kind.TRAIL
    __introspectable__ = (
        "name",
        "optional",
        "type",
        "descr",
    )

    def __init__(self, name="trail", *, optional=False, type=str, descr=Unset):
        metadata = {
            "name": name,
            "optional": bool(optional),
            "type": type,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._populate(metadata)


class Switch(Definition):
    """
    A presence-only flag.

    A switch with the empty name is the terminator: it is matched by the bare
    "--" token and the caller usually stops there and takes the remainder.
    """
    __kind__ = Kind.SWITCH
    __introspectable__ = (
        "name",
        "short",
        "descr",
    )

    def __init__(self, name, *, short=Unset, descr=Unset):
        metadata = {
            "name": name,
            "short": short,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata, nameless=True)
        _sanitize_named_metadata(builtins.type(self), metadata)
        self._populate(metadata)


class Count(Switch):
    """
    A presence-only flag that may be repeated; the binder counts occurrences.
    """


class Option(Definition):
    """
    A flag taking exactly one parameter: the following token.

    The parameter cannot start with '-' (it would read as another flag).
    """
    __kind__ = Kind.OPTION
    __introspectable__ = (
        "name",
        "short",
        "param",
        "type",
        "descr",
    )

    def __init__(self, name, *, short=Unset, param=Unset, type=str, descr=Unset):
        metadata = {
            "name": name,
            "short": short,
            "param": param,
            "type": type,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_named_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._populate(metadata)


class Collect(Option):
    """
    An option that may be given several times (`-i foo.h -i bar.h`).

    Every parameter is converted and added to a container built by `factory`
    (list by default; sets, deques, or anything with add/append work too).
    """
    __introspectable__ = (
        "name",
        "short",
        "param",
        "type",
        "factory",
        "descr",
    )

    def __init__(self, name, *, short=Unset, param=Unset, type=str, factory=list, descr=Unset):
        if not callable(factory):
            raise TypeError(f"{builtins.type(self).__typename__} 'factory' must be callable")
        super().__init__(name, short=short, param=param, type=type, descr=descr)
        self._factory = factory


class Subcommand(Definition):
    """
    A named subcommand.

    When matched, every remaining token is handed to `handler(program, tokens)`
    where `program` is the parent program label extended with the subcommand
    name. Whatever the handler returns becomes the outcome of the parse.
    """
    __kind__ = Kind.SUBCOMMAND
    __introspectable__ = (
        "name",
        "handler",
        "descr",
    )

    def __init__(self, name, handler, *, descr=Unset):
        if not callable(handler):
            raise TypeError(f"{builtins.type(self).__typename__} 'handler' must be callable")
        metadata = {
            "name": name,
            "handler": handler,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        self._populate(metadata)


class Interrupt(Definition):
    """
    A switch-like flag that interrupts the parse (help, version).

    `callback(help)` is run by the outer layer with the compiled Help of the
    parse. Completeness checks (missing positionals/trail) are skipped.
    """
    __kind__ = Kind.INTERRUPT
    __introspectable__ = (
        "name",
        "callback",
        "short",
        "descr",
    )

    def __init__(self, name, callback=None, *, short=Unset, descr=Unset):
        if callback is not None and not callable(callback):
            raise TypeError(f"{builtins.type(self).__typename__} 'callback' must be callable")
        metadata = {
            "name": name,
            "callback": callback,
            "short": short,
            "descr": descr,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_named_metadata(builtins.type(self), metadata)
        self._populate(metadata)


def default_help(description="", /, *, short=Unset, descr="Print this help message."):
    """
    Build the conventional "help" interrupt.

    When matched, prints the help message of the running program followed by
    the (possibly empty) program description.
    """
    if not isinstance(description, str):
        raise TypeError("default_help() argument must be a string")

    @rename("print_help")
    def callback(help):
        help.print_help(description)

    return Interrupt("help", callback, short=short, descr=descr)


def default_version(version, /, *, short=Unset, descr="Print version information."):
    """
    Build the conventional "version" interrupt printing `<program> <version>`.
    """
    if not isinstance(version, str) or not version.strip():
        raise TypeError("default_version() argument must be a non-empty string")

    @rename("print_version")
    def callback(help):
        Console().print(Text(" ".join(part for part in (help.program, version.strip()) if part)))

    return Interrupt("version", callback, short=short, descr=descr)


__all__ = (
    # Kinds
    "Kind",

    # Definitions
    "Definition",
    "Positional",
    "Trail",
    "Switch",
    "Count",
    "Option",
    "Collect",
    "Subcommand",
    "Interrupt",

    # Factories
    "default_help",
    "default_version",
)


# The metaclass is an implementation detail of the definitions; keep it out of
# the module namespace.
del DefinitionType
