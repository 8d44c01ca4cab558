"""
Argtab faults (parse errors, table errors) and rendering.

Scope
- ErrorKind: canonical, stable numeric identifiers for every failure the
  parser, the dispatcher and the table checks can report.
- ErrorContext: immutable record of the first failure (kind, offending token,
  argument definition, offending value).
- ParseError family: one exception per kind, each carrying its ErrorContext.
  ShowHelp is part of the family so callers branching on errors get help
  handling for free.
- TableError / DuplicateDefinitionError: structural mistakes in an argument table.
- suggest(): "did you mean" lookup by edit distance.
- format_error(): "error: ..." line plus an optional suggestion hint.

UX goals
- One-line, lowercased messages quoting the offending input.
- A single hint for unknown arguments and commands, only when a close match exists.
- Styling is caller policy (FormatConfig.color) and never part of the error itself.
"""
import sys
from collections import namedtuple
from dataclasses import dataclass
from enum import IntEnum

from rich.text import Text

from .styles import *
from .utils import *


class ErrorKind(IntEnum):
    """
    canonical error kinds (stable identifiers).

    grouping (by high-level domain)
    - control (100xx)
      • SHOW_HELP
    - routing (101xx)
      • UNKNOWN_COMMAND
    - arguments (102xx)
      • UNKNOWN_ARGUMENT, MISSING_VALUE, MISSING_REQUIRED, INVALID_VALUE,
        DUPLICATE_ARGUMENT
    - tables (103xx)
      • MALFORMED_TABLE

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- control (100xx) ---
    SHOW_HELP          = 10001

    # --- routing (101xx) ---
    UNKNOWN_COMMAND    = 10101

    # --- arguments (102xx) ---
    UNKNOWN_ARGUMENT   = 10201
    MISSING_VALUE      = 10202
    MISSING_REQUIRED   = 10203
    INVALID_VALUE      = 10204
    DUPLICATE_ARGUMENT = 10205

    # --- tables (103xx) ---
    MALFORMED_TABLE    = 10301

    def normalize(self):
        """
        return a host-normalized string for this kind.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


ErrorContext = namedtuple("ErrorContext", ("kind", "token", "argument", "value"), defaults=(None, None, None))
ErrorContext.__doc__ = """
Immutable description of a parse failure.

- kind: ErrorKind
- token: offending command-line token (e.g., '--ouput', '-x', 'frobnicate'), if any
- argument: Argument definition involved, if any
- value: offending raw value (InvalidValue), if any
"""


@dataclass(frozen=True)
class FormatConfig:
    """
    rendering policy for format_error().

    - color: ColorMode deciding whether ANSI styles are emitted.
    - stream: stream AUTO is resolved against (stderr when None).
    - show_code: label the heading with the normalized kind, "error[10201]:".
    """
    color: ColorMode = ColorMode.NEVER
    stream: object = None
    show_code: bool = False


def _message(context, styles, /):
    """
    Internal: kind-specific message body as styled text.
    """
    def quoted(fragment):
        return Text.assemble("'", (str(fragment), styles["token"]), "'")

    form = context.argument.display if context.argument is not None else context.token

    match context.kind:
        case ErrorKind.UNKNOWN_ARGUMENT:
            parts = ("unknown argument ", quoted(context.token))
        case ErrorKind.UNKNOWN_COMMAND:
            parts = ("unknown command ", quoted(context.token))
        case ErrorKind.MISSING_VALUE:
            parts = ("missing value for argument ", quoted(form))
        case ErrorKind.MISSING_REQUIRED:
            parts = ("missing required argument ", quoted(form))
        case ErrorKind.INVALID_VALUE:
            parts = ("invalid value ", quoted(context.value), " for argument ", quoted(form))
        case ErrorKind.DUPLICATE_ARGUMENT:
            parts = ("argument ", quoted(form), " was provided more than once")
        case ErrorKind.SHOW_HELP:
            parts = ("help requested",)
        case ErrorKind.MALFORMED_TABLE:
            parts = ("malformed argument table",)
        case _:
            raise ValueError("unknown error kind %r" % (context.kind,))

    return Text.assemble(*parts, style=styles["message"])


def describe(context, /):
    """
    plain message body for an ErrorContext (no "error:" label, no styling).
    """
    if not isinstance(context, ErrorContext):
        raise TypeError("describe() argument must be an error context")
    return _message(context, palette()).plain


class ParseError(Exception):
    """
    Base class of every failure reported while parsing or dispatching.

    Construction
    - ParseError(context): wrap an existing ErrorContext.
    - <Subclass>(token=..., argument=..., value=...): build the context for
      the subclass's own kind.

    str(error) is the uncolored message body; rich renders the styled form.
    """
    __kind__ = None

    def __init__(self, context=Unset, /, **fields):
        if context is Unset:
            if type(self).__kind__ is None:
                raise TypeError("%s() requires an error context" % type(self).__name__)
            context = ErrorContext(type(self).__kind__, **fields)
        elif fields:
            raise TypeError("%s() takes either a context or fields, not both" % type(self).__name__)
        elif not isinstance(context, ErrorContext):
            raise TypeError("%s() argument must be an error context" % type(self).__name__)
        super().__init__(describe(context))
        self.context = context

    @property
    def kind(self):
        return self.context.kind

    def __str__(self):
        return describe(self.context)

    def __rich__(self):
        styles = palette()
        return Text.assemble(("error:", styles["error"]), " ", _message(self.context, styles))

    @classmethod
    def from_context(cls, context, /):
        """
        build the ParseError subclass matching context.kind.
        """
        if not isinstance(context, ErrorContext):
            raise TypeError("from_context() argument must be an error context")
        for subclass in _subclasses(ParseError):
            if subclass.__kind__ == context.kind:
                return subclass(context)
        return ParseError(context)


def _subclasses(cls, /):
    for subclass in cls.__subclasses__():
        yield subclass
        yield from _subclasses(subclass)


class ShowHelp(ParseError):
    """
    Control signal: --help or -h appeared on the command line.
    """
    __kind__ = ErrorKind.SHOW_HELP


class UnknownCommandError(ParseError):
    __kind__ = ErrorKind.UNKNOWN_COMMAND


class UnknownArgumentError(ParseError):
    __kind__ = ErrorKind.UNKNOWN_ARGUMENT


class MissingValueError(ParseError):
    __kind__ = ErrorKind.MISSING_VALUE


class MissingRequiredError(ParseError):
    __kind__ = ErrorKind.MISSING_REQUIRED


class InvalidValueError(ParseError):
    __kind__ = ErrorKind.INVALID_VALUE


class DuplicateArgumentError(ParseError):
    __kind__ = ErrorKind.DUPLICATE_ARGUMENT


class TableError(ValueError):
    """
    Structural mistake in an argument table (or a command tree).

    The message names the offending definition; .context carries a
    MALFORMED_TABLE ErrorContext so the mistake can be formatted like any
    other failure.
    """

    def __init__(self, message, /, *, argument=None, token=None):
        if not isinstance(message, str):
            raise TypeError("%s() argument must be a string" % type(self).__name__)
        super().__init__(message)
        self.context = ErrorContext(ErrorKind.MALFORMED_TABLE, token, argument)


class DuplicateDefinitionError(TableError):
    """
    Two definitions of one table share a name, a short form, a long form or
    an explicit positional index.
    """


def suggest(token, candidates, /, threshold=3):
    """
    closest candidate to token by edit distance, or None.

    - leading dashes are stripped from token before comparing.
    - only candidates strictly closer than threshold qualify.
    - ties keep the candidate seen first.

    Example
        >>> suggest("--ouput", ["input", "output", "verbose"])
        'output'
    """
    if not isinstance(token, str):
        raise TypeError("suggest() first argument must be a string")

    target = token.lstrip("-")
    best, best_distance = None, threshold
    for candidate in candidates:
        if (current := distance(target, candidate)) < best_distance:
            best, best_distance = candidate, current
    return best


def format_error(error, /, candidates=(), config=FormatConfig()):
    """
    format a failure as "error: <message>" with an optional suggestion line.

    - error may be an ErrorContext, a ParseError or a TableError.
    - candidates feed suggest() for UNKNOWN_ARGUMENT and UNKNOWN_COMMAND.
    - config.color decides styling; AUTO is resolved against config.stream
      (stderr when unset).
    """
    if isinstance(error, ParseError | TableError):
        context = error.context
    elif isinstance(error, ErrorContext):
        context = error
    else:
        raise TypeError("format_error() argument must be an error or an error context")
    if not isinstance(config, FormatConfig):
        raise TypeError("format_error() config must be a format-config")

    styles = palette()
    if config.show_code:
        heading = Text.assemble(("error[", styles["error"]), (context.kind.normalize(), styles["code"]), ("]:", styles["error"]))
    else:
        heading = Text("error:", styles["error"])
    text = Text.assemble(heading, " ", _message(context, styles))

    if context.kind in (ErrorKind.UNKNOWN_ARGUMENT, ErrorKind.UNKNOWN_COMMAND) and context.token is not None:
        if (suggestion := suggest(context.token, candidates)) is not None:
            text.append("\n")
            text.append(" → ", styles["hint-arrow"])
            text.append("did you mean '%s'?" % suggestion, styles["hint"])

    return render(text, colorize(config.color, config.stream if config.stream is not None else sys.stderr))


__all__ = (
    "ErrorKind",
    "ErrorContext",
    "FormatConfig",
    "ParseError",
    "ShowHelp",
    "UnknownCommandError",
    "UnknownArgumentError",
    "MissingValueError",
    "MissingRequiredError",
    "InvalidValueError",
    "DuplicateArgumentError",
    "TableError",
    "DuplicateDefinitionError",
    "describe",
    "suggest",
    "format_error",
)
