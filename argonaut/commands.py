"""
Argonaut command layer: run a definition list against a token stream.

What this module provides
- parse_plain(program, tokens, definitions): compile, drive the engine, bind
  and return a Result. Definition and parse faults are raised; parse faults
  carry the program and usage of the parse that found them as options.
- parse(program, tokens, definitions): the same, but parse faults are rendered
  for the end user (message, hint, usage) instead of raised.
- invoke(program, definitions, prompt): process entry point. Reads sys.argv,
  runs parse() and exits with the conventional status.

Result
- namespace: bound values (argonaut.binder.Namespace).
- outcome: what a subcommand handler returned, or None.
- interrupted: name of the interrupt that stopped the parse, or None.
- remainder: tokens found after the "--" terminator, verbatim.

Quick start
    from argonaut import Positional, Trail, Switch, Subcommand, default_help, invoke

    def add(program, tokens):
        namespace = invoke(program, [default_help(), Trail("paths")], tokens).namespace
        ...

    if __name__ == "__main__":
        invoke("tool", [
            default_help("A small tool.", short="h"),
            Switch("verbose", short="v"),
            Subcommand("add", add, descr="Add files."),
        ])

Subcommand handlers receive (program, tokens) and usually call parse() or
invoke() themselves, so the nested program label ("tool add") shows up in their
usage and fault messages. A fault found by the nested parse is reported once,
with the nested usage; a failed nested parse() makes the enclosing parse() return
None as well, so invoke() exits with status 1.
"""
import contextvars
import copy
import logging
import shlex
import sys
from collections.abc import Iterable
from typing import NamedTuple

from . import events
from .binder import Binder
from .definitions import compile
from .faults import *
from .help import Help
from .parser import Parse
from .utils import *

logger = logging.getLogger(__name__)

# set while a parse is driven, so a parse() run by a subcommand handler knows it is nested
_driving = contextvars.ContextVar("driving", default=False)


class Result(NamedTuple):
    namespace: object
    outcome: object = None
    interrupted: object = None
    remainder: tuple = ()


def _drive(help, tokens, repeat):
    """
    Internal: run one parse over compiled definitions and collect its Result.
    Parse faults leave tagged with the program and usage of this parse.
    """
    token = _driving.set(True)
    try:
        return _collect(help, tokens, repeat)
    except ParseError as fault:
        # a fault from a subcommand handler already names the nested program
        if "program" in fault.options:
            raise
        raise copy.replace(fault, program=help.program, usage=help.usage_message()) from None
    finally:
        _driving.reset(token)


def _collect(help, tokens, repeat):
    definitions = help.definitions
    parse = Parse(definitions, tokens, program=help.program)
    binder = Binder(definitions, repeat=repeat)
    remainder = ()

    for event in parse:
        match event:
            case events.Interrupted(name):
                if (callback := definitions.options[name].callback) is not None:
                    callback(help)
                return Result(binder.namespace(), interrupted=name)
            case events.Delegated(outcome=outcome):
                return Result(binder.namespace(), outcome=outcome)
            case events.Switch(""):
                # everything after "--" is taken literally
                remainder = tuple(parse.take_remainder())
                parse.verify()
            case _:
                binder.bind(event)

    if definitions.subcommands:
        raise MissingSubcommandError()

    return Result(binder.namespace(), remainder=remainder)


def parse_plain(program, tokens, definitions, /, *, repeat="error"):
    """
    Parse tokens against definitions and bind the values.

    Parameters
    - program: label of the running program (used by help and subcommands).
    - tokens: Sequence[str], typically sys.argv[1:].
    - definitions: Iterable[Definition] or a compiled DefinitionSet.
    - repeat: policy for an Option given twice ("error" or "overwrite").

    Returns
    - Result

    Raises
    - DefinitionError: when the definitions are inconsistent.
    - ParseError: when the tokens do not match the definitions (SubParseFailedError
      when a subcommand handler ran parse() and its fault was already rendered).
    """
    if not isinstance(program, str):
        raise TypeError("parse_plain() first argument must be a string")
    return _drive(Help(program, compile(definitions)), tokens, repeat)


def parse(program, tokens, definitions, /, *, repeat="error", shell=True, colorful=True, fancy=False):
    """
    Parse like parse_plain(), reporting parse faults to the end user.

    Parameters
    - shell: render parse faults (True, default) or raise them (False).
    - colorful/fancy: rendering options of faults and help.

    Returns
    - Result on success or interrupt; None when a parse fault was rendered.

    Raises
    - SubParseFailedError: when called from a subcommand handler and the fault
      was rendered, so the enclosing parse() fails without rendering it again.

    Faults are rendered with the program and usage of the parse that found them,
    nested subcommands included. Definition faults always propagate: they are
    programmer errors.
    """
    if not isinstance(program, str):
        raise TypeError("parse() first argument must be a string")
    nested = _driving.get()
    help = Help(program, compile(definitions), colorful=colorful, fancy=fancy)
    try:
        return _drive(help, tokens, repeat)
    except SubParseFailedError:
        if nested:
            raise
    except ParseError as fault:
        logger.debug("parse of %r failed: %r", program, fault)
        trigger(fault, shell=shell, colorful=colorful, fancy=fancy, deferred=True)
        if nested:
            raise SubParseFailedError(program=program) from None
    return None


def _tokenize(prompt):
    """
    Internal: normalize a prompt into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string, split via shlex.split.
    - Iterable[str]: items are kept verbatim.
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() 'prompt' must be a string or an iterable of strings")
        return tokens
    raise TypeError("invoke() 'prompt' must be a string or an iterable of strings")


def invoke(program, definitions, prompt=Unset, /, **options):
    """
    Run definitions as the entry point of a process.

    Parameters
    - program: label of the running program.
    - definitions: Iterable[Definition] or a compiled DefinitionSet.
    - prompt: Unset (read sys.argv[1:]), a shell-like string, or an iterable of tokens.
    - **options: forwarded to parse() (repeat, shell, colorful, fancy).

    Exit behavior
    - a rendered parse fault exits with status 1;
    - an interrupt (help, version) exits with status 0 once its callback ran;
    - a subcommand outcome that is a non-zero int is used as exit status.

    Returns
    - the Result of a successful parse.
    """
    result = parse(program, _tokenize(prompt), definitions, **options)
    if result is None:
        sys.exit(1)
    if result.interrupted is not None:
        sys.exit(0)
    if isinstance(result.outcome, int) and not isinstance(result.outcome, bool) and result.outcome:
        sys.exit(result.outcome)
    return result


__all__ = (
    "Result",
    "parse_plain",
    "parse",
    "invoke",
)
