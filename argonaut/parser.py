"""
Argonaut parser engine: the stepwise token scanner.

A Parse is a pull-based event producer over a compiled DefinitionSet and a token
sequence. Every step yields exactly one recognized argument event (see
argonaut.events), raises one ParseError, or signals the end of the stream.

States
- SCANNING: reading whole tokens.
- GROUPED: draining the characters of a grouped short-flag token ("-abc").
- FINISHED: absorbing. Reached on error, end of stream, interrupt, subcommand
  delegation, or take_remainder(). Later steps only report end of stream.

Resolution order for each step
1. pending grouped characters (resolved through the alias table; only the last
   character of a group may be an option that claims the following token);
2. "--name": long flag, looked up by its long name;
3. "-x" / "-xyz": short flag(s);
4. anything else: next positional slot, else subcommand, else trail, else an
   unexpected positional;
5. end of input: missing positional / missing trail checks.

Two ways to drive it:

    for event in Parse(definitions, tokens):      # raises ParseError
        ...

    while (item := parse.step()) is not None:     # returns the fault instead
        ...

The engine is pure over its inputs: tokens are never mutated and nothing but the
cursor state changes. Subcommand handlers are called synchronously and their
result is reported verbatim in a Delegated event.
"""
import difflib
import logging
from collections import deque
from collections.abc import Sequence
from enum import Enum

from . import events
from .arguments import Kind
from .definitions import DefinitionSet
from .faults import *

logger = logging.getLogger(__name__)


class State(Enum):
    SCANNING = "scanning"
    GROUPED = "grouped"
    FINISHED = "finished"


class Parse:
    """
    One parse of one token sequence against one definition set.

    Parameters
    - definitions: DefinitionSet (see argonaut.definitions.compile).
    - tokens: Sequence[str] (any other iterable is materialized into a tuple).
    - program: label of the running program, extended with the subcommand name
      when delegating ("git" → "git commit").

    Cursor
    - index: number of tokens consumed so far.
    - slot: index of the next unfilled positional slot.
    - trails: number of trail values emitted.
    - pending: characters of a grouped short-flag token not resolved yet, with
      the original token kept for error reporting.
    """

    def __init__(self, definitions, tokens, /, *, program=""):
        if not isinstance(definitions, DefinitionSet):
            raise TypeError("Parse() first argument must be a compiled definition set")
        if isinstance(tokens, str):
            raise TypeError("Parse() second argument must be a sequence of strings, not a string")
        if not isinstance(tokens, Sequence):
            tokens = tuple(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("Parse() second argument must be a sequence of strings")
        if not isinstance(program, str):
            raise TypeError("Parse() 'program' must be a string")

        self._definitions = definitions
        self._tokens = tokens
        self._program = program

        self._index = 0
        self._slot = 0
        self._trails = 0
        self._pending = deque()
        self._group = None
        self._state = State.SCANNING

    @property
    def definitions(self):
        return self._definitions

    @property
    def program(self):
        return self._program

    @property
    def state(self):
        return self._state

    @property
    def finished(self):
        return self._state is State.FINISHED

    @property
    def index(self):
        return self._index

    @property
    def trails(self):
        return self._trails

    def __iter__(self):
        return self

    def __next__(self):
        if self._state is State.FINISHED:
            raise StopIteration
        try:
            event = self._advance()
        except ParseError as fault:
            logger.debug("parse of %r failed: %r", self._program, fault)
            self._finish()
            raise
        if event is None:
            logger.debug("parse of %r reached the end of the stream", self._program)
            self._finish()
            raise StopIteration
        logger.debug("recognized %r", event)
        return event

    def step(self):
        """
        Advance by one step.

        Returns
        - an event when an argument was recognized;
        - the ParseError instance when the tokens do not match (the parse is then
          finished);
        - None at the end of the stream, and on every call after the parse finished.
        """
        try:
            return next(self)
        except StopIteration:
            return None
        except ParseError as fault:
            return fault

    def remainder(self):
        """
        The tokens not consumed yet, as a tuple. Does not change the parse.
        """
        return tuple(self._tokens[self._index:])

    def take_remainder(self):
        """
        Finish the parse and return the unconsumed tokens verbatim, as a list.

        Used after the terminator switch ("--") so that everything after it is
        taken literally. Characters still pending from a grouped token are dropped.
        """
        remainder = list(self._tokens[self._index:])
        self._index = len(self._tokens)
        self._finish()
        return remainder

    def verify(self):
        """
        Check that every required slot is satisfied.

        Raises MissingPositionalError for the first unfilled slot, then
        MissingTrailError when a required trail received no value. Does not change
        the parse; the engine runs it at the end of the stream and callers may run
        it after take_remainder().
        """
        positional = self._definitions.positional
        if self._slot < len(positional):
            raise MissingPositionalError(positional[self._slot])
        trail = self._definitions.trail
        if trail is not None and not trail.optional and not self._trails:
            raise MissingTrailError(trail.name)

    def _finish(self):
        self._pending.clear()
        self._group = None
        self._state = State.FINISHED

    def _advance(self):
        if self._pending:
            char = self._pending.popleft()
            last = not self._pending
            group = self._group
            if last:
                self._state = State.SCANNING
                self._group = None
            return self._resolve_short(char, group, last=last)

        if self._index >= len(self._tokens):
            self.verify()
            return None

        token = self._tokens[self._index]
        self._index += 1

        if token.startswith("--"):
            return self._resolve_long(token)
        if token.startswith("-") and len(token) > 1:
            return self._resolve_group(token)
        return self._resolve_positional(token)

    def _resolve_long(self, token):
        name = token[2:]
        try:
            definition = self._definitions.options[name]
        except KeyError:
            raise UnknownLongArgumentError(
                token,
                index=self._index,
                suggestions=difflib.get_close_matches(name, self._definitions.options.keys(), 5),
            ) from None
        if definition.kind is Kind.OPTION:
            return events.Option(name, self._parameter(token))
        return self._flag(definition)

    def _resolve_group(self, token):
        chars = token[1:]
        if len(chars) > 1:
            self._pending.extend(chars[1:])
            self._group = token
            self._state = State.GROUPED
        return self._resolve_short(chars[0], token, last=len(chars) == 1)

    def _resolve_short(self, char, token, *, last):
        definition = self._definitions.lookup(char)
        if definition is None:
            raise UnknownShortArgumentError(char, token, index=self._index)
        if definition.kind is Kind.OPTION:
            # only the final character of a group may claim the next token
            if not last:
                raise GroupedNonSwitchError(char, token, index=self._index)
            return events.Option(definition.name, self._parameter(token))
        return self._flag(definition)

    def _flag(self, definition):
        if definition.kind is Kind.INTERRUPT:
            logger.debug("interrupted by %r", definition.name)
            self._finish()
            return events.Interrupted(definition.name)
        return events.Switch(definition.name)

    def _parameter(self, token):
        """
        Consume the token following an option as its parameter.
        """
        if self._index >= len(self._tokens) or self._tokens[self._index].startswith("-"):
            raise MissingParameterError(token, index=self._index)
        parameter = self._tokens[self._index]
        self._index += 1
        return parameter

    def _resolve_positional(self, token):
        positional = self._definitions.positional
        if self._slot < len(positional):
            name = positional[self._slot]
            self._slot += 1
            return events.Positional(name, token)

        if subcommands := self._definitions.subcommands:
            try:
                subcommand = subcommands[token]
            except KeyError:
                raise UnknownSubcommandError(
                    token,
                    index=self._index,
                    suggestions=difflib.get_close_matches(token, subcommands.keys(), 5),
                ) from None
            return self._delegate(token, subcommand.handler)

        if self._definitions.trail is not None:
            self._trails += 1
            return events.TrailValue(token)

        raise UnexpectedPositionalError(token, index=self._index)

    def _delegate(self, name, handler):
        remainder = self.take_remainder()
        program = f"{self._program} {name}" if self._program else name
        logger.debug("delegating %d token(s) to %r", len(remainder), program)
        return events.Delegated(name, program, handler(program, tuple(remainder)))


__all__ = (
    "State",
    "Parse",
)
