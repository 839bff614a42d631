"""
Definition validation: compile a list of definitions into a DefinitionSet.

compile(definitions) partitions the definitions by kind, in input order, and
checks the structural rules of a definition set:

- long names are unique (OptionDefinedTwiceError);
- positional names are unique (PositionalDefinedTwiceError);
- short aliases are single characters other than '-' (InvalidShortNameError)
  and map to one long name only (SameShortNameError);
- there is at most one trail (TwoTrailsDefinedError);
- subcommand names are unique (SubcommandDefinedTwiceError);
- positionals/trail and subcommands are not mixed
  (PositionalAndSubcommandMixedError).

Either a fully valid DefinitionSet is returned or a DefinitionError is raised;
nothing partially built escapes. The set is read-only once compiled.
"""
import logging

from .arguments import Kind, Definition
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


class DefinitionSet:
    """
    The compiled, validated, queryable form of a definition list.

    Attributes (read-only)
    - definitions: every definition, in input order (used by the help renderer).
    - positional: positional slot names, in definition order.
    - positionals: slot name → Positional definition.
    - trail: the Trail definition, or None.
    - options: long name → switch/option/interrupt definition.
    - shorts: short alias → long name.
    - subcommands: subcommand name → Subcommand definition.
    - handlers: subcommand name → handler callable.
    - help_defined: True when an interrupt named "help" is defined.
    """
    definitions = mirror("definitions")
    positionals = mirror("positionals")
    trail = mirror("trail")
    options = mirror("options")
    shorts = mirror("shorts")
    subcommands = mirror("subcommands")
    help_defined = mirror("help_defined")

    def __init__(self, definitions, positionals, trail, options, shorts, subcommands):
        self._definitions = tuple(definitions)
        self._positionals = dict(positionals)
        self._trail = trail
        self._options = dict(options)
        self._shorts = dict(shorts)
        self._subcommands = dict(subcommands)
        self._help_defined = "help" in self._options and self._options["help"].kind is Kind.INTERRUPT

    @property
    def positional(self):
        return tuple(self._positionals)

    @property
    def handlers(self):
        return {name: definition.handler for name, definition in self._subcommands.items()}

    def lookup(self, short, /):
        """
        Resolve a short alias to its definition, or None when unknown.
        """
        try:
            return self._options[self._shorts[short]]
        except KeyError:
            return None

    def __len__(self):
        return len(self._definitions)

    def __iter__(self):
        return iter(self._definitions)

    def __repr__(self):
        return "definition-set(positional=%r, trail=%r, options=%r, subcommands=%r)" % (
            self.positional,
            None if self._trail is None else self._trail.name,
            tuple(self._options),
            tuple(self._subcommands),
        )


def _register(definition, options, shorts):
    """
    Internal: register a switch/option/interrupt under its long name and alias.
    """
    name = definition.name
    if name in options:
        raise OptionDefinedTwiceError(name)

    if (short := definition.short) is not None:
        if len(short) != 1 or short == "-" or short.isspace():
            raise InvalidShortNameError(name, short)
        if (existing := shorts.get(short, name)) != name:
            raise SameShortNameError(name, existing)
        shorts[short] = name

    options[name] = definition


def compile(definitions, /):
    """
    Compile and check a list of definitions.

    Parameters
    - definitions: Iterable[Definition], in the order they should be matched
      (positional slot order follows it).

    Returns
    - DefinitionSet (an already compiled DefinitionSet is returned unchanged)

    Raises
    - TypeError: when an item is not a Definition.
    - DefinitionError: on the first structural violation found.
    """
    if isinstance(definitions, DefinitionSet):
        return definitions

    definitions = tuple(definitions)

    positionals = {}
    trail = None
    options = {}
    shorts = {}
    subcommands = {}

    for definition in definitions:
        if not isinstance(definition, Definition):
            raise TypeError("compile() argument must be an iterable of definitions")

        match definition.kind:
            case Kind.POSITIONAL:
                if definition.name in positionals:
                    raise PositionalDefinedTwiceError(definition.name)
                positionals[definition.name] = definition
            case Kind.TRAIL:
                if trail is not None:
                    raise TwoTrailsDefinedError()
                trail = definition
            case Kind.SWITCH | Kind.OPTION | Kind.INTERRUPT:
                _register(definition, options, shorts)
            case Kind.SUBCOMMAND:
                if definition.name in subcommands:
                    raise SubcommandDefinedTwiceError(definition.name)
                subcommands[definition.name] = definition
            case _:
                raise TypeError(f"unexpected definition kind {definition.kind!r}")

    if (positionals or trail is not None) and subcommands:
        raise PositionalAndSubcommandMixedError()

    compiled = DefinitionSet(definitions, positionals, trail, options, shorts, subcommands)
    logger.debug("compiled %r", compiled)
    return compiled


__all__ = (
    "DefinitionSet",
    "compile",
)
