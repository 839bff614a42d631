"""
Help module behavioral tests (usage line, help text, rich rendering).

Scope
- Validate the usage line forms: help short/long, [opts...], trails, subcommands.
- Validate the help text sections, legend markers and description trimming.
- Validate the rich rendering (plain and styled, fancy panel) and printing.

Conventions
- Test method names follow CamelCase per project convention.
- Rich output is captured through a recording Console without colors.
"""

from __future__ import annotations

import unittest
from unittest import TestCase, mock

from rich.console import Console

from argonaut import (
    Help,
    Positional,
    Trail,
    Switch,
    Count,
    Option,
    Collect,
    Subcommand,
    Interrupt,
    default_help,
)
from argonaut.definitions import compile


def handler(program, tokens):
    return 0


def tool():
    return Help("tool", compile([
        default_help(short="h"),
        Positional("source", descr="Where to read from."),
        Trail("files", optional=True),
        Switch("verbose", short="v", descr="Talk more."),
        Option("exclude", short="x", param="PATTERN"),
        Collect("include", short="i", descr="Add a path."),
    ]))


class TestUsage(TestCase):
    """Behavioral tests for usage_message()."""

    def testUsageWithHelpShort(self):
        self.assertEqual(tool().usage_message(), "tool [-h, OPTS...] source [files...]")

    def testUsageWithHelpLongOnly(self):
        self.assertEqual(Help("tool", [default_help()]).usage_message(), "tool [--help]")
        self.assertEqual(Help("tool", [default_help(), Switch("v")]).usage_message(), "tool [--help, OPTS...]")

    def testUsageWithoutHelp(self):
        self.assertEqual(Help("tool", [Switch("v"), Positional("a")]).usage_message(), "tool [opts...] a")

    def testUsageRequiredTrail(self):
        self.assertEqual(Help("tool", [Trail("files")]).usage_message(), "tool files [files...]")

    def testUsageSubcommands(self):
        help = Help("git", [default_help(), Subcommand("add", handler), Subcommand("commit", handler)])
        self.assertEqual(help.usage_message(), "git [--help] { add | commit } ...")

    def testUsageEmpty(self):
        self.assertEqual(Help("tool", []).usage_message(), "tool")


class TestHelpMessage(TestCase):
    """Behavioral tests for help_message()."""

    def testFullHelp(self):
        self.assertEqual(tool().help_message("A small tool."), (
            "Usage:\n"
            "  tool [-h, OPTS...] source [files...]\n"
            "\n"
            "Description:\n"
            "  A small tool.\n"
            "\n"
            "Positional arguments:\n"
            "  source\n"
            "    Where to read from.\n"
            "\n"
            "  [files...]\n"
            "\n"
            "Optional arguments:\n"
            "  ( * ) This option can be given multiple times.\n"
            "  ( X ) This option interrupts normal parsing.\n"
            "\n"
            "  --help, -h ( X )\n"
            "      Print this help message.\n"
            "\n"
            "  --verbose, -v\n"
            "      Talk more.\n"
            "\n"
            "  --exclude, -x PATTERN\n"
            "  --include, -i INCLUDE ( * )\n"
            "      Add a path.\n"
            "\n"
        ))

    def testOnlyUsage(self):
        self.assertEqual(Help("tool", []).help_message(), "Usage:\n  tool")

    def testOnlyPositionals(self):
        self.assertEqual(Help("tool", [Positional("a")]).help_message(), (
            "Usage:\n"
            "  tool a\n"
            "\n"
            "\n"
            "Positional arguments:\n"
            "  a\n"
            "\n"
        ))

    def testOnlyOptions(self):
        self.assertEqual(Help("tool", [Switch("v")]).help_message(), (
            "Usage:\n"
            "  tool [opts...]\n"
            "\n"
            "\n"
            "Optional arguments:\n"
            "  --v\n"
        ))

    def testSubcommandSection(self):
        message = Help("git", [Subcommand("commit", handler, descr="Record changes.")]).help_message()
        self.assertIn("Subcommands:\n  commit\n    Record changes.\n\n", message)

    def testCountMarker(self):
        message = Help("tool", [Count("verbose", short="v")]).help_message()
        self.assertIn("  --verbose, -v ( * )\n", message)
        self.assertIn("( * ) This option can be given multiple times.", message)
        self.assertNotIn("( X ) This option", message)

    def testInterruptMarker(self):
        message = Help("tool", [Interrupt("version", short="V")]).help_message()
        self.assertIn("  --version, -V ( X )\n", message)

    def testDescriptionIsDedented(self):
        message = Help("tool", []).help_message("""
            Line one.
              Line two.
        """)
        self.assertIn("Description:\n  Line one.\n  Line two.\n", message)

    def testBlankDescriptionIsSkipped(self):
        self.assertNotIn("Description:", Help("tool", [Positional("a")]).help_message("   "))


class TestRendering(TestCase):
    """Behavioral tests for __rich__ and printing."""

    def render(self, help):
        console = Console(record=True, width=100, color_system=None)
        console.print(help)
        return console.export_text()

    def testRichRendering(self):
        output = self.render(tool())
        self.assertIn("usage: tool [-h, OPTS...] source [files...]", output)
        self.assertIn("positional arguments", output)
        self.assertIn("--verbose, -v", output)
        self.assertIn("--include, -i INCLUDE ( * )", output)
        self.assertIn("Talk more.", output)

    def testPlainRendering(self):
        help = Help("tool", [Switch("verbose", short="v")], colorful=False)
        self.assertIn("optional arguments", self.render(help))

    def testFancyRendering(self):
        help = Help("git", [Subcommand("add", handler, descr="Add files.")], fancy=True)
        output = self.render(help)
        self.assertIn("subcommands", output)
        self.assertIn("Add files.", output)

    def testPrintHelp(self):
        help = tool()
        with mock.patch("argonaut.help.Console") as console:
            help.print_help("A small tool.")
        printed, = console.return_value.print.call_args.args
        self.assertEqual(printed.plain, help.help_message("A small tool."))

    def testPrintUsage(self):
        with mock.patch("argonaut.help.Console") as console:
            tool().print_usage()
        printed, = console.return_value.print.call_args.args
        self.assertEqual(printed.plain, "Usage: tool [-h, OPTS...] source [files...]")


class TestConstruction(TestCase):
    """Argument checks of Help()."""

    def testProgramMustBeString(self):
        with self.assertRaises(TypeError):
            Help(None, [])

    def testCompilesDefinitions(self):
        help = Help("tool", [Positional("a")])
        self.assertEqual(help.definitions.positional, ("a",))
        self.assertEqual(help.program, "tool")


if __name__ == "__main__":
    unittest.main()
