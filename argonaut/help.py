"""
Help and usage rendering over a compiled DefinitionSet.

Help(program, definitions) formats the metadata of one parse:

- usage_message(): one line, e.g.
      tool [-h, OPTS...] SOURCE FILES [FILES...]
      git [--help, OPTS...] { add | commit } ...
- help_message(description=""): the full text with the sections Usage,
  Description, Positional arguments, Subcommands and Optional arguments. Options
  that can be given several times are marked ( * ); interrupts are marked ( X ).
- __rich__(): the same content styled with rich. The palette can be overridden
  with a __styles__ mapping in __main__; colorful=False renders plain text.

print_usage() and print_help() write through a rich Console.
"""
import textwrap
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .arguments import Kind, Count, Collect
from .definitions import DefinitionSet, compile
from .utils import mirror


def _lines(text, /):
    """
    dedent, strip leading/trailing blank lines, then trim every line.
    """
    return [line.strip() for line in textwrap.dedent(str(text)).strip("\n").splitlines()]


def _indented(text, prefix, /):
    return "".join(prefix + line + "\n" for line in _lines(text))


class Help:
    """
    Help and usage for one program and its definitions.

    Parameters
    - program: the program label ("cargo", "cargo new").
    - definitions: DefinitionSet or an iterable of definitions (compiled on the fly).
    - colorful: style the rich rendering (default True).
    - fancy: wrap the rich rendering in a panel (default False).
    """
    program = mirror("program")
    definitions = mirror("definitions")

    def __init__(self, program, definitions, /, *, colorful=True, fancy=False):
        if not isinstance(program, str):
            raise TypeError("Help() first argument must be a string")
        if not isinstance(definitions, DefinitionSet):
            definitions = compile(definitions)
        self._program = program
        self._definitions = definitions
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

    def _usage_parts(self):
        definitions = self._definitions
        options = definitions.options
        parts = []

        if options:
            more = ", OPTS..." if len(options) > 1 else ""
            if definitions.help_defined:
                if (short := options["help"].short) is not None:
                    parts.append("[-%s%s]" % (short, more))
                else:
                    parts.append("[--help%s]" % more)
            else:
                parts.append("[opts...]")

        parts.extend(definitions.positional)

        if (trail := definitions.trail) is not None:
            parts.append(self._trail_label(trail))

        if subcommands := definitions.subcommands:
            parts.append("{ %s } ..." % " | ".join(subcommands))

        return parts

    @staticmethod
    def _trail_label(trail):
        if trail.optional:
            return "[%s...]" % trail.name
        return "%s [%s...]" % (trail.name, trail.name)

    @staticmethod
    def _option_label(definition):
        label = "--" + definition.name
        if definition.short is not None:
            label += ", -" + definition.short
        if definition.kind is Kind.OPTION:
            label += " " + (definition.param or definition.name.upper())
        if isinstance(definition, Collect | Count):
            label += " ( * )"
        elif definition.kind is Kind.INTERRUPT:
            label += " ( X )"
        return label

    def usage_message(self):
        return " ".join([self._program, *self._usage_parts()]).strip()

    def help_message(self, description="", /):
        """
        The full help text, with an optional (dedented, trimmed) description.
        """
        definitions = self._definitions
        has_description = bool(description and description.strip())
        has_positional = bool(definitions.positional) or definitions.trail is not None
        has_optional = bool(definitions.options)
        has_subcommands = bool(definitions.subcommands)

        message = "Usage:\n  " + self.usage_message()
        if has_positional or has_optional or has_description or has_subcommands:
            message += "\n\n"

        if has_description:
            message += "Description:\n" + _indented(description, "  ")

        if has_positional:
            message += "\nPositional arguments:\n"
            for name, definition in definitions.positionals.items():
                message += "  %s\n" % name
                if definition.descr is not None:
                    message += _indented(definition.descr, "    ")
                message += "\n"
            if (trail := definitions.trail) is not None:
                message += "  %s\n" % self._trail_label(trail)
                if trail.descr is not None:
                    message += _indented(trail.descr, "    ")
                message += "\n"

        if has_subcommands:
            message += "\nSubcommands:\n"
            for name, definition in definitions.subcommands.items():
                message += "  %s\n" % name
                if definition.descr is not None:
                    message += _indented(definition.descr, "    ")
                message += "\n"

        if has_optional:
            if not (has_positional or has_subcommands):
                message += "\n"

            repeatable = any(isinstance(x, Collect | Count) for x in definitions.options.values())
            interrupt = any(x.kind is Kind.INTERRUPT for x in definitions.options.values())

            message += "Optional arguments:\n"
            if repeatable:
                message += "  ( * ) This option can be given multiple times.\n"
            if interrupt:
                message += "  ( X ) This option interrupts normal parsing.\n"
            if repeatable or interrupt:
                message += "\n"

            for definition in definitions.options.values():
                message += "  %s\n" % self._option_label(definition)
                if definition.descr is not None:
                    message += _indented(definition.descr, "      ") + "\n"

        return message

    def __rich__(self):
        """
        Styled rendering (sections as in help_message, without the description).

        Palette keys
        - usage-label, program-name, usage-section
        - section-label, argument-name, option-name, interrupt-name, metavar,
          marker, argument-description
        """
        styles = defaultdict(str, {
            # === Head sections ===
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan

            # === Sections / arguments ===
            "section-label": "bold #FFFFFF",  # Pure white headers
            "argument-name": "bold #FFD600",  # AMBER for positionals
            "option-name": "bold #00E6FF",  # CYAN for options
            "interrupt-name": "bold #22C55E",  # GREEN for interrupts
            "metavar": "bold #FFD600",
            "marker": "#9CA3AF dim",
            "argument-description": "#9CA3AF",  # Muted gray

            # === Fancy panel ===
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self._colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        definitions = self._definitions
        renders = [Text.assemble(
            text("usage: ", styler("usage-label")),
            text(self._program, styler("program-name")),
            " ",
            text(" ".join(self._usage_parts()), styler("usage-section")),
        )]

        def section(label, rows):
            renders.append(Text(""))
            renders.append(text(label, styler("section-label")))
            for name, descr in rows:
                renders.append(Text.assemble("  ", name))
                if descr is not None:
                    renders.extend(Text.assemble("    ", text(line, styler("argument-description"))) for line in _lines(descr))

        if definitions.positional or definitions.trail is not None:
            rows = [(text(name, styler("argument-name")), x.descr) for name, x in definitions.positionals.items()]
            if (trail := definitions.trail) is not None:
                rows.append((text(self._trail_label(trail), styler("argument-name")), trail.descr))
            section("positional arguments", rows)

        if definitions.subcommands:
            section("subcommands", [
                (text(name, styler("argument-name")), x.descr) for name, x in definitions.subcommands.items()
            ])

        if definitions.options:
            rows = []
            for x in definitions.options.values():
                style = "interrupt-name" if x.kind is Kind.INTERRUPT else "option-name"
                names = text("--" + x.name, styler(style))
                if x.short is not None:
                    names = Text.assemble(names, ", ", text("-" + x.short, styler(style)))
                if x.kind is Kind.OPTION:
                    names = Text.assemble(names, " ", text(x.param or x.name.upper(), styler("metavar")))
                if isinstance(x, Collect | Count):
                    names = Text.assemble(names, text(" ( * )", styler("marker")))
                elif x.kind is Kind.INTERRUPT:
                    names = Text.assemble(names, text(" ( X )", styler("marker")))
                rows.append((names, x.descr))
            section("optional arguments", rows)

        if self._fancy:
            return Panel(Group(*renders), title=text(self._program, styler("panel-title")), title_align="left")
        return Group(*renders)

    def print_usage(self, *, stderr=False):
        Console(stderr=stderr).print(Text("Usage: " + self.usage_message()))

    def print_help(self, description="", /):
        Console().print(Text(self.help_message(description)), end="")


__all__ = (
    "Help",
)
