"""
Argonaut faults (definition errors, parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Codes are
  grouped by domain to keep copy consistent and make logs/searches predictable.
- ArgonautError: base type that carries a structured payload + options and knows
  how to render itself in a friendly, lowercased, and actionable way.
- DefinitionError: construction-time faults. They are programmer bugs, never
  shown to end users, and always raised (even in shell mode).
- ParseError: user-input faults. Recoverable; in shell mode they are rendered via
  rich and the process exits with status 1.
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

Payload and equality
- Every fault class declares its payload fields in __fields__ (e.g. ("name",)).
  The payload is exposed as attributes, and two faults compare equal when they
  share type and payload. Options (index, suggestions, program, ...) are context
  only and never take part in equality.

Integration
- The engine raises faults with an `index` option (1-based token position) so the
  message can lead with an ordinal (“at third position”).
- commands.parse() calls trigger(fault, **ctx) to render in shell mode.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import *

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - definitions (101xx)
      • OPTION_DEFINED_TWICE, POSITIONAL_DEFINED_TWICE, SAME_SHORT_NAME,
        TWO_TRAILS_DEFINED, SUBCOMMAND_DEFINED_TWICE,
        POSITIONAL_AND_SUBCOMMAND_MIXED, INVALID_SHORT_NAME, ARGUMENT_NAME_CLASH
    - positionals (1110x)
      • MISSING_POSITIONAL, MISSING_TRAIL, UNEXPECTED_POSITIONAL
    - switches and options (1111x)
      • UNKNOWN_SHORT_ARGUMENT, UNKNOWN_LONG_ARGUMENT, MISSING_PARAMETER,
        GROUPED_NON_SWITCH
    - routing (1112x)
      • UNKNOWN_SUBCOMMAND, MISSING_SUBCOMMAND, SUB_PARSE_FAILED
    - binding (112xx)
      • OPTION_GIVEN_TWICE, INVALID_VALUE
    """
    # --- definition errors (101xx) ---
    OPTION_DEFINED_TWICE            = 10101
    POSITIONAL_DEFINED_TWICE        = 10102
    SAME_SHORT_NAME                 = 10103
    TWO_TRAILS_DEFINED              = 10104
    SUBCOMMAND_DEFINED_TWICE        = 10105
    POSITIONAL_AND_SUBCOMMAND_MIXED = 10106
    INVALID_SHORT_NAME              = 10107
    ARGUMENT_NAME_CLASH             = 10108

    # --- positional errors (1110x) ---
    MISSING_POSITIONAL              = 11101
    MISSING_TRAIL                   = 11102
    UNEXPECTED_POSITIONAL           = 11103

    # --- switch/option errors (1111x) ---
    UNKNOWN_SHORT_ARGUMENT          = 11111
    UNKNOWN_LONG_ARGUMENT           = 11112
    MISSING_PARAMETER               = 11113
    GROUPED_NON_SWITCH              = 11114

    # --- routing errors (1112x) ---
    UNKNOWN_SUBCOMMAND              = 11121
    MISSING_SUBCOMMAND              = 11122
    SUB_PARSE_FAILED                = 11123

    # --- binding errors (112xx) ---
    OPTION_GIVEN_TWICE              = 11201
    INVALID_VALUE                   = 11202

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArgonautError(Exception):
    """
    base fault: structured payload + rendering options.

    class attributes (set by each concrete fault)
    - __fields__: payload field names, in constructor order.
    - __code__: FaultCode of the fault.
    - __title__: short lowercase title used in rendered headers.
    - __template__: %-style message template formatted with the payload.
    - __hint__: %-style hint template formatted with the payload and options.
    """
    __fields__ = ()
    __code__ = Unset
    __title__ = "fault"
    __template__ = "%(title)s"
    __hint__ = ""

    def __init__(self, *payload, **options):
        fields = type(self).__fields__
        if len(payload) != len(fields):
            raise TypeError("%s() takes %d payload argument%s but %d were given" % (
                type(self).__name__, len(fields), "" if len(fields) == 1 else "s", len(payload)
            ))
        super().__init__(*payload)
        self.payload = MappingProxyType(dict(zip(fields, payload)))
        self.options = MappingProxyType(options)

    def __getattr__(self, name, /):
        # payload fields read like plain attributes (fault.name, fault.token, ...)
        try:
            return object.__getattribute__(self, "payload")[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} fault has no attribute {name!r}") from None

    @property
    def code(self):
        return type(self).__code__

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def message(self):
        """
        lowercased, position-first message built from the payload.
        """
        message = type(self).__template__ % ({"title": type(self).__title__} | dict(self.payload))
        if isinstance(index := self.options.get("index"), int):
            message += " at %s position" % ordinal(index)
        return message

    @property
    def hint(self):
        if "hint" in self.options:
            return self.options["hint"]
        return type(self).__hint__ % (dict(self.options) | dict(self.payload))

    def __str__(self):
        return self.message

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(map(repr, self.payload.values())))

    def __eq__(self, other, /):
        if not isinstance(other, ArgonautError):
            return NotImplemented
        return type(self) is type(other) and self.payload == other.payload

    def __hash__(self):
        return hash((type(self), tuple(self.payload.values())))

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "usage": "#737373",  # dim usage footer
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        program = self.options.get("program") or getattr(main, "__prog__", "argonaut")

        header = Text.assemble(
            "[ ",
            text(program, styler("prog-name")),
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        renders = [text(self.message, styler("error-message"))]
        if self.hint:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))
        if usage := self.options.get("usage"):
            renders.append(text("usage: %s" % usage, styler("usage")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(*self.payload.values(), **{**self.options, **overrides})

    def __reduce__(self):
        return _rebuild, (type(self), tuple(self.payload.values()), dict(self.options))


def _rebuild(cls, payload, options):
    return cls(*payload, **options)


class DefinitionError(ArgonautError):
    """
    invalid argument definitions (a programmer bug).

    never shown to end users: __trigger__ always raises, whatever the shell mode.
    """
    __title__ = "invalid definitions"

    def __trigger__(self) -> None:
        raise self from None


class ParseError(ArgonautError):
    """
    the given tokens do not match the definitions (a user-input fault).
    """
    __title__ = "parse failed"
    __hint__ = "run with --help to see the expected usage"


# --- definition errors ---

class OptionDefinedTwiceError(DefinitionError):
    __fields__ = ("name",)
    __code__ = FaultCode.OPTION_DEFINED_TWICE
    __template__ = "option %(name)r defined twice"


class PositionalDefinedTwiceError(DefinitionError):
    __fields__ = ("name",)
    __code__ = FaultCode.POSITIONAL_DEFINED_TWICE
    __template__ = "positional argument %(name)r defined twice"


class SameShortNameError(DefinitionError):
    __fields__ = ("name", "existing")
    __code__ = FaultCode.SAME_SHORT_NAME
    __template__ = "option %(name)r reuses the short name already given to %(existing)r"


class TwoTrailsDefinedError(DefinitionError):
    __code__ = FaultCode.TWO_TRAILS_DEFINED
    __template__ = "two trails defined"


class SubcommandDefinedTwiceError(DefinitionError):
    __fields__ = ("name",)
    __code__ = FaultCode.SUBCOMMAND_DEFINED_TWICE
    __template__ = "subcommand %(name)r defined twice"


class PositionalAndSubcommandMixedError(DefinitionError):
    __code__ = FaultCode.POSITIONAL_AND_SUBCOMMAND_MIXED
    __template__ = "positional (and trail) and subcommand definitions cannot be used together"


class InvalidShortNameError(DefinitionError):
    __fields__ = ("name", "short")
    __code__ = FaultCode.INVALID_SHORT_NAME
    __template__ = "invalid short name %(short)r for %(name)r; short names are a single character other than '-'"


class ArgumentNameClashError(DefinitionError):
    __fields__ = ("name",)
    __code__ = FaultCode.ARGUMENT_NAME_CLASH
    __template__ = "argument name %(name)r is used by definitions of different kinds"


# --- parse errors ---

class MissingPositionalError(ParseError):
    __fields__ = ("name",)
    __code__ = FaultCode.MISSING_POSITIONAL
    __title__ = "missing positional"
    __template__ = "missing positional argument %(name)r"
    __hint__ = "add a value for %(name)r; run with --help to see the expected order"


class MissingTrailError(ParseError):
    __fields__ = ("name",)
    __code__ = FaultCode.MISSING_TRAIL
    __title__ = "missing trail"
    __template__ = "expected at least one trailing argument for %(name)r"
    __hint__ = "add one or more values for %(name)r"


class UnexpectedPositionalError(ParseError):
    __fields__ = ("token",)
    __code__ = FaultCode.UNEXPECTED_POSITIONAL
    __title__ = "unexpected positional"
    __template__ = "unexpected argument %(token)r"
    __hint__ = "remove this extra value or run with --help to see the expected usage"


class UnknownShortArgumentError(ParseError):
    __fields__ = ("char", "token")
    __code__ = FaultCode.UNKNOWN_SHORT_ARGUMENT
    __title__ = "unknown option"
    __template__ = "unknown short option '-%(char)s' in %(token)r"


class UnknownLongArgumentError(ParseError):
    __fields__ = ("token",)
    __code__ = FaultCode.UNKNOWN_LONG_ARGUMENT
    __title__ = "unknown option"
    __template__ = "unknown option %(token)r"

    @property
    def hint(self):
        if "hint" in self.options:
            return self.options["hint"]
        try:
            return "did you mean '--%s'? you can also run with --help to see all options" % self.options["suggestions"][0]
        except (KeyError, IndexError):
            return "run with --help to see all available options"


class UnknownSubcommandError(ParseError):
    __fields__ = ("token",)
    __code__ = FaultCode.UNKNOWN_SUBCOMMAND
    __title__ = "unknown subcommand"
    __template__ = "unknown subcommand %(token)r"

    @property
    def hint(self):
        if "hint" in self.options:
            return self.options["hint"]
        try:
            return "did you mean %r? you can also run with --help to see available subcommands" % self.options["suggestions"][0]
        except (KeyError, IndexError):
            return "run with --help to see available subcommands"


class MissingSubcommandError(ParseError):
    __code__ = FaultCode.MISSING_SUBCOMMAND
    __title__ = "missing subcommand"
    __template__ = "no subcommand specified"
    __hint__ = "run with --help to see available subcommands"


class SubParseFailedError(ParseError):
    """
    a subcommand parse failed and its fault was already reported to the user.

    raised by a nested parse() so the enclosing parse() does not render again.
    """
    __code__ = FaultCode.SUB_PARSE_FAILED
    __title__ = "subcommand failed"
    __template__ = "parse of subcommand failed"
    __hint__ = "see the message reported by the subcommand"


class MissingParameterError(ParseError):
    __fields__ = ("token",)
    __code__ = FaultCode.MISSING_PARAMETER
    __title__ = "missing parameter"
    __template__ = "missing parameter for option %(token)r"
    __hint__ = "pass a value after %(token)r (values cannot start with '-')"


class GroupedNonSwitchError(ParseError):
    __fields__ = ("char", "token")
    __code__ = FaultCode.GROUPED_NON_SWITCH
    __title__ = "grouped option"
    __template__ = "option '-%(char)s' takes a parameter and must be last in %(token)r"
    __hint__ = "move '%(char)s' to the end of the group or pass it on its own (-%(char)s <value>)"


class OptionGivenTwiceError(ParseError):
    __fields__ = ("name",)
    __code__ = FaultCode.OPTION_GIVEN_TWICE
    __title__ = "duplicated option"
    __template__ = "option %(name)r given twice"
    __hint__ = "keep a single '--%(name)s'; it can be specified only once"


class InvalidValueError(ParseError):
    __fields__ = ("name", "value")
    __code__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"
    __template__ = "could not parse and convert %(value)r for %(name)r"
    __hint__ = "run with --help to see the expected usage"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArgonautError).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, parse errors are rendered via rich console; otherwise they are raised.
      definition errors are always raised.

    typical options
    - program, shell, fancy, colorful, deferred, usage, hint, and any other context the
      reporter may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys are
    FaultCode instances and values are short documentation strings. when not found,
    returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ArgonautError",
    "DefinitionError",
    "ParseError",
    "OptionDefinedTwiceError",
    "PositionalDefinedTwiceError",
    "SameShortNameError",
    "TwoTrailsDefinedError",
    "SubcommandDefinedTwiceError",
    "PositionalAndSubcommandMixedError",
    "InvalidShortNameError",
    "ArgumentNameClashError",
    "MissingPositionalError",
    "MissingTrailError",
    "UnexpectedPositionalError",
    "UnknownShortArgumentError",
    "UnknownLongArgumentError",
    "UnknownSubcommandError",
    "MissingSubcommandError",
    "SubParseFailedError",
    "MissingParameterError",
    "GroupedNonSwitchError",
    "OptionGivenTwiceError",
    "InvalidValueError",
    "trigger",
    "getdoc",
)
