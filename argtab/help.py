"""
Argtab help generator.

Renders the usage line and the full help screen for an argument table,
optionally followed by a list of subcommands. Rendering is pure: it reads the
table and the configuration and returns a string.

Layout
    Usage: myapp [OPTIONS] <input> [output]

    A sample application

    Arguments:
      Flags:
      -v, --verbose          Enable verbose output
      Options:
      -o, --output <string>  Output file path [default: out.txt]
      Positionals:
      <input>                Input file (required)
"""
import sys
from dataclasses import dataclass

from rich.text import Text

from .arguments import *
from .styles import *
from .tables import positions


@dataclass(frozen=True)
class HelpConfig:
    """
    help rendering settings.

    - program_name: name shown after "Usage:".
    - description: paragraph shown under the usage line (omitted when empty).
    - options_width: column where help text starts.
    - show_placeholders: append <type> to option spellings.
    - color: ColorMode policy.
    - stream: stream AUTO is resolved against (stdout when None).
    """
    program_name: str = "program"
    description: str = ""
    options_width: int = 25
    show_placeholders: bool = True
    color: ColorMode = ColorMode.AUTO
    stream: object = None


HELP = Argument(
    "help",
    Kind.FLAG,
    short="h",
    long="help",
    help="Show this help message and exit",
)
"""
Ready-made --help/-h flag for tables that want it listed in their help.
"""


def _color(config):
    return colorize(config.color, config.stream if config.stream is not None else sys.stdout)


def _pad(text, width, /):
    text.append(" " * (width - len(text) if len(text) < width else 1))
    return text


def _default(value, /):
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _usage(arguments, config, commands, styles, /):
    text = Text.assemble(("Usage:", styles["usage"]), " ", (config.program_name, styles["program"]))

    if any(argument.named for argument in arguments):
        text.append(" [OPTIONS]")
    if commands:
        text.append(" <subcommand>")

    for argument, _ in sorted(positions(arguments).items(), key=lambda item: item[1]):
        text.append(" <%s>" % argument.name if argument.required else " [%s]" % argument.name)

    return text


def _entry(argument, config, styles, /):
    if argument.named:
        shorts = ", ".join("-" + char for char in (argument.short, *argument.short_aliases) if char is not None)
        longs = ", ".join("--" + name for name in (argument.long, *argument.aliases) if name is not None)
        text = Text("  ")
        if shorts:
            text.append(shorts, styles["argument"])
            if longs:
                text.append(", ")
        else:
            text.append("    ")
        text.append(longs, styles["argument"])
        if argument.kind is Kind.OPTION and config.show_placeholders:
            text.append(" ")
            text.append("<%s>" % argument.value_type.placeholder, styles["placeholder"])
    else:
        text = Text.assemble("  ", ("<%s>" % argument.name, styles["argument"]))

    _pad(text, config.options_width)
    text.append(argument.help)
    if argument.required:
        text.append(" (required)", styles["required"])
    if argument.default is not None:
        text.append(" [default: %s]" % _default(argument.default), styles["default"])
    text.append("\n")
    return text


def render_usage(arguments, config=HelpConfig(), commands=False):
    """
    the usage line alone, without a trailing newline.

    - [OPTIONS] appears when the table has a flag, option or count.
    - <subcommand> appears when commands is true.
    - positionals follow in index order, required ones as <name>, others as [name].
    """
    arguments = tuple(arguments)
    if not isinstance(config, HelpConfig):
        raise TypeError("render_usage() config must be a help-config")
    return render(_usage(arguments, config, bool(commands), palette()), _color(config))


def render_help(arguments, config=HelpConfig(), commands=()):
    """
    the full help screen.

    commands, when given, are objects with a name and a help line (usually
    Command instances) listed under "Subcommands:".
    """
    arguments, commands = tuple(arguments), tuple(commands)
    if not isinstance(config, HelpConfig):
        raise TypeError("render_help() config must be a help-config")

    styles = palette()
    text = _usage(arguments, config, bool(commands), styles)
    text.append("\n\n")

    if config.description:
        text.append(config.description)
        text.append("\n\n")

    if arguments:
        text.append("Arguments:\n", styles["header"])
        groups = (
            ("Flags:", (Kind.FLAG, Kind.COUNT)),
            ("Options:", (Kind.OPTION,)),
            ("Positionals:", (Kind.POSITIONAL,)),
        )
        for header, kinds in groups:
            members = [argument for argument in arguments if argument.kind in kinds]
            if not members:
                continue
            text.append("  ")
            text.append(header, styles["header"])
            text.append("\n")
            for argument in members:
                text.append_text(_entry(argument, config, styles))

    if commands:
        text.append("Subcommands:\n", styles["header"])
        for command in commands:
            entry = _pad(Text.assemble("  ", (command.name, styles["command"])), config.options_width)
            entry.append(command.help)
            entry.append("\n")
            text.append_text(entry)

    return render(text, _color(config))


__all__ = (
    "HelpConfig",
    "HELP",
    "render_usage",
    "render_help",
)
