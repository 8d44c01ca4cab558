"""
Help module behavioral tests (usage line, help screen, color policy).

Scope
- Validate the usage line: [OPTIONS], <subcommand>, positional ordering.
- Validate the help screen layout: sections, entries, padding, markers.
- Validate placeholders, defaults and the ready-made HELP flag.
- Validate color policy resolution.

Conventions
- Test method names follow CamelCase per project convention.
- Layout is checked uncolored (ColorMode.NEVER).
"""

from __future__ import annotations

import io
import os
import unittest
from types import SimpleNamespace
from unittest import TestCase, mock

from argtab import (
    Argument,
    Kind,
    ValueType,
    ColorMode,
    HelpConfig,
    HELP,
    Parser,
    colorize,
    render_help,
    render_usage,
)

TABLE = (
    Argument("verbose", Kind.FLAG, short="v", long="verbose", help="Enable verbose output"),
    Argument("output", Kind.OPTION, short="o", long="output", help="Output file path", default="out.txt"),
    Argument("count", Kind.OPTION, long="count", value_type=ValueType.INT, help="Number of iterations"),
    Argument("input", Kind.POSITIONAL, position=0, required=True, help="Input file to process"),
)

CONFIG = HelpConfig(program_name="myapp", description="A sample application", color=ColorMode.NEVER)


class TestUsage(TestCase):
    """Behavioral tests for render_usage()."""

    def testUsageLine(self):
        table = (
            Argument("verbose", Kind.FLAG, short="v"),
            Argument("file", Kind.POSITIONAL, position=0, required=True),
        )
        self.assertEqual(render_usage(table, HelpConfig(program_name="tool", color=ColorMode.NEVER)), "Usage: tool [OPTIONS] <file>")

    def testNoOptionsMarkerWithoutNamedArguments(self):
        table = (Argument("file", Kind.POSITIONAL),)
        self.assertEqual(render_usage(table, HelpConfig(color=ColorMode.NEVER)), "Usage: program [file]")

    def testPositionalsOrderedByIndex(self):
        table = (
            Argument("target", Kind.POSITIONAL, position=1, required=True),
            Argument("source", Kind.POSITIONAL, position=0, required=True),
            Argument("extra", Kind.POSITIONAL),
        )
        self.assertEqual(
            render_usage(table, HelpConfig(program_name="cp", color=ColorMode.NEVER)),
            "Usage: cp <source> <target> [extra]",
        )

    def testSubcommandMarker(self):
        table = (Argument("verbose", Kind.FLAG, short="v"),)
        self.assertEqual(
            render_usage(table, HelpConfig(program_name="git", color=ColorMode.NEVER), commands=True),
            "Usage: git [OPTIONS] <subcommand>",
        )

    def testParserUsage(self):
        self.assertEqual(Parser(TABLE, CONFIG).usage(), "Usage: myapp [OPTIONS] <input>")


class TestHelp(TestCase):
    """Behavioral tests for render_help()."""

    def testFullLayout(self):
        expected = "\n".join((
            "Usage: myapp [OPTIONS] <input>",
            "",
            "A sample application",
            "",
            "Arguments:",
            "  Flags:",
            "  -v, --verbose".ljust(25) + "Enable verbose output",
            "  Options:",
            "  -o, --output <string>".ljust(25) + "Output file path [default: out.txt]",
            "      --count <int>".ljust(25) + "Number of iterations",
            "  Positionals:",
            "  <input>".ljust(25) + "Input file to process (required)",
            "",
        ))
        self.assertEqual(render_help(TABLE, CONFIG), expected)

    def testParserHelpMatches(self):
        self.assertEqual(Parser(TABLE, CONFIG).help(), render_help(TABLE, CONFIG))

    def testNoDescription(self):
        text = render_help(TABLE, HelpConfig(program_name="myapp", color=ColorMode.NEVER))
        self.assertTrue(text.startswith("Usage: myapp [OPTIONS] <input>\n\nArguments:\n"))

    def testCountsListedWithFlags(self):
        table = (Argument("level", Kind.COUNT, short="l", help="Raise the level"),)
        text = render_help(table, HelpConfig(color=ColorMode.NEVER))
        self.assertIn("  Flags:\n" + "  -l".ljust(25) + "Raise the level\n", text)

    def testAliasesListed(self):
        table = (Argument("output", Kind.OPTION, short="o", short_aliases="O", long="output", aliases=("out",)),)
        text = render_help(table, HelpConfig(color=ColorMode.NEVER))
        self.assertIn("  -o, -O, --output, --out <string>", text)

    def testLongEntryKeepsOneSpace(self):
        table = (Argument("configuration", Kind.OPTION, long="configuration-file", help="Path"),)
        text = render_help(table, HelpConfig(color=ColorMode.NEVER))
        self.assertIn("      --configuration-file <string> Path\n", text)

    def testNoPlaceholders(self):
        table = (Argument("file", Kind.OPTION, short="f", long="file", help="Input file"),)
        text = render_help(table, HelpConfig(show_placeholders=False, color=ColorMode.NEVER))
        self.assertNotIn("<string>", text)
        self.assertIn("  -f, --file", text)

    def testDefaults(self):
        table = (
            Argument("count", Kind.OPTION, long="count", value_type=ValueType.INT, default=10),
            Argument("enabled", Kind.OPTION, long="enabled", value_type=ValueType.BOOL, default=True),
            Argument("ratio", Kind.OPTION, long="ratio", value_type=ValueType.FLOAT, default=0.25),
        )
        text = render_help(table, HelpConfig(color=ColorMode.NEVER))
        self.assertIn("[default: 10]", text)
        self.assertIn("[default: true]", text)
        self.assertIn("[default: 0.25]", text)

    def testOptionsWidth(self):
        table = (Argument("verbose", Kind.FLAG, short="v"),)
        text = render_help(table, HelpConfig(options_width=10, color=ColorMode.NEVER))
        self.assertIn("  -v      \n", text)

    def testSubcommands(self):
        commands = (SimpleNamespace(name="add", help="Add a remote"), SimpleNamespace(name="remove", help="Remove a remote"))
        text = render_help((), HelpConfig(program_name="git remote", color=ColorMode.NEVER), commands)
        self.assertEqual(text, "\n".join((
            "Usage: git remote <subcommand>",
            "",
            "Subcommands:",
            "  add".ljust(25) + "Add a remote",
            "  remove".ljust(25) + "Remove a remote",
            "",
        )))

    def testEmptyTableHasNoArgumentsHeader(self):
        self.assertEqual(render_help((), HelpConfig(color=ColorMode.NEVER)), "Usage: program\n\n")
        text = render_help((), HelpConfig(description="Nothing to set", color=ColorMode.NEVER))
        self.assertEqual(text, "Usage: program\n\nNothing to set\n\n")

    def testHelpFlag(self):
        text = render_help((HELP,), HelpConfig(color=ColorMode.NEVER))
        self.assertIn("  -h, --help".ljust(25) + "Show this help message and exit", text)

    def testAlwaysColorEmitsAnsi(self):
        text = render_help(TABLE, HelpConfig(color=ColorMode.ALWAYS))
        self.assertIn("\x1b[", text)
        self.assertIn("Enable verbose output", text)

    def testRejectsForeignConfig(self):
        with self.assertRaises(TypeError):
            render_help(TABLE, {"program_name": "x"})


class TestColorPolicy(TestCase):
    """Behavioral tests for colorize()."""

    def testNeverAndAlways(self):
        self.assertFalse(colorize(ColorMode.NEVER))
        self.assertTrue(colorize(ColorMode.ALWAYS))

    def testAutoOnNonTerminal(self):
        with mock.patch.dict(os.environ):
            for name in ("FORCE_COLOR", "TTY_COMPATIBLE"):
                os.environ.pop(name, None)
            self.assertFalse(colorize(ColorMode.AUTO, io.StringIO()))

    def testAcceptsStrings(self):
        self.assertTrue(colorize("always"))


if __name__ == "__main__":
    unittest.main()
