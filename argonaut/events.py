"""
Recognized argument events.

Each step of a parse yields one of these small immutable records, in strict
left-to-right correspondence with the input tokens (after grouped short
flags have been expanded):

- Positional(name, value): a token bound to the next positional slot.
- TrailValue(value): a token collected by the trail once slots are filled.
- Switch(name): a parameterless flag, by its long name.
- Option(name, value): a flag and the token it consumed as its parameter.
- Interrupted(name): an interrupt flag (help, version); the parse stops here.
- Delegated(name, program, outcome): a subcommand took over the remaining
  tokens; `outcome` is whatever its handler returned.

Events compare by kind and payload, so Switch("x") != Interrupted("x"), and
they pattern-match positionally:

    match event:
        case events.Option("exclude", value):
            ...
"""
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Positional:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class TrailValue:
    value: str


@dataclass(frozen=True, slots=True)
class Switch:
    name: str


@dataclass(frozen=True, slots=True)
class Option:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class Interrupted:
    name: str


@dataclass(frozen=True, slots=True)
class Delegated:
    name: str
    program: str
    outcome: object


__all__ = (
    "Positional",
    "TrailValue",
    "Switch",
    "Option",
    "Interrupted",
    "Delegated",
)
