"""
Argtab parsing engine.

Parser binds an argument table, classifies the tokens of an argument vector
against it and records the results in a Values store.

Token grammar
- "--" ends named-argument processing; every later token is positional.
- "--name", "--name value", "--name=value": long forms.
- "-x", "-x value", "-xvalue": short forms; "-xyz" sets several flags or counts.
- "-12" and "-1.5" are positionals (negative numbers), not short forms.
- anything else is positional, kept in encounter order.
- "--help" or "-h" anywhere wins over everything and raises ShowHelp.

Failures are fail-fast: the first one is recorded as parser.context and
raised as the matching ParseError subclass.

Quick example:
    >>> parser = Parser((
    ...     Argument("verbose", Kind.FLAG, short="v", long="verbose"),
    ...     Argument("count", Kind.OPTION, short="c", long="count", value_type=ValueType.INT),
    ... ))
    >>> parser.parse(["prog", "-v", "--count=3"])
    >>> parser.flag("verbose"), parser.get("count")
    (True, 3)
"""
import logging
import re

from .arguments import *
from .faults import *
from .help import *
from .tables import *
from .utils import *
from .values import *

logger = logging.getLogger(__name__)

NUMBER = re.compile(r"-[0-9]+(\.[0-9]*)?")


class Parser:
    """
    Parser for one argument table.

    Construction freezes the table, builds its lookup Index (raising
    DuplicateArgumentError when two table entries share a spelling) and
    resolves positional indices. A name used by two entries raises
    DuplicateDefinitionError. The parser owns its Values store; every
    parse() starts from an empty store.

    Accessors
    - flag(name), count(name), option(name), option_values(name): raw results.
    - positionals, positional(name): positional values.
    - require(name): raw value or MissingRequiredError.
    - get(name): typed value, falling back to the definition's default.
    """

    def __init__(self, arguments, /, config=HelpConfig()):
        if not isinstance(config, HelpConfig):
            raise TypeError("Parser() config must be a help-config")
        self._index = Index(arguments)
        self._arguments = self._index.arguments
        self._positions = positions(self._arguments)
        self._names = {}
        for argument in self._arguments:
            if argument.name in self._names:
                raise DuplicateDefinitionError(
                    "argument name %r is defined more than once" % argument.name,
                    argument=argument,
                )
            self._names[argument.name] = argument
        self._config = config
        self._values = Values()
        self._context = None

    arguments = mirror("arguments")

    @property
    def config(self):
        return self._config

    @property
    def values(self):
        return self._values

    @property
    def context(self):
        """
        ErrorContext of the last failed parse, or None.
        """
        return self._context

    def reset(self):
        self._values.reset()
        self._context = None

    # parsing

    def parse(self, argv, /):
        """
        parse an argument vector; argv[0] is the program name and is skipped.
        """
        argv = tuple(argv)
        self.reset()
        logger.debug("parsing %r", argv[1:])

        for token in argv[1:]:
            if token in ("--help", "-h"):
                raise self._fault(ShowHelp, token=token)

        stop_parsing = False
        cursor = 1
        while cursor < len(argv):
            token = argv[cursor]
            if stop_parsing:
                self._values.append_positional(token)
            elif token == "--":
                logger.debug("terminator at %d", cursor)
                stop_parsing = True
            elif token.startswith("--"):
                cursor = self._parse_long(argv, cursor)
            elif token.startswith("-") and len(token) > 1 and not NUMBER.fullmatch(token):
                cursor = self._parse_short(argv, cursor)
            else:
                logger.debug("positional %r", token)
                self._values.append_positional(token)
            cursor += 1

        self._check_required()
        self._check_positionals()

    def _parse_long(self, argv, cursor, /):
        body = argv[cursor][2:]
        name, separator, inline = body.partition("=")
        token = "--" + name

        argument = self._index.long(name)
        if argument is None or argument.kind is Kind.POSITIONAL:
            raise self._fault(UnknownArgumentError, token=token)
        logger.debug("long %s -> %s %r", token, argument.kind, argument.name)

        match argument.kind:
            case Kind.FLAG:
                self._values.set_flag(argument.name)
            case Kind.COUNT:
                self._values.increment(argument.name)
            case Kind.OPTION if separator:
                self._record(argument, inline, token)
            case Kind.OPTION:
                cursor = self._consume(argument, argv, cursor, token)
        return cursor

    def _parse_short(self, argv, cursor, /):
        token = argv[cursor]
        argument = self._index.short(token[1])
        if argument is None or argument.kind is Kind.POSITIONAL:
            raise self._fault(UnknownArgumentError, token=token[:2])

        if len(token) == 2:
            logger.debug("short %s -> %s %r", token, argument.kind, argument.name)
            match argument.kind:
                case Kind.FLAG:
                    self._values.set_flag(argument.name)
                case Kind.COUNT:
                    self._values.increment(argument.name)
                case Kind.OPTION:
                    cursor = self._consume(argument, argv, cursor, token)
            return cursor

        if argument.kind is Kind.OPTION:
            logger.debug("short %s -> option %r with attached value", token[:2], argument.name)
            self._record(argument, token[2:], token[:2])
            return cursor

        logger.debug("short cluster %s", token)
        for char in token[1:]:
            argument = self._index.short(char)
            if argument is None or argument.kind not in (Kind.FLAG, Kind.COUNT):
                raise self._fault(UnknownArgumentError, token="-" + char)
            if argument.kind is Kind.FLAG:
                self._values.set_flag(argument.name)
            else:
                self._values.increment(argument.name)
        return cursor

    def _consume(self, argument, argv, cursor, token, /):
        cursor += 1
        if cursor >= len(argv):
            raise self._fault(MissingValueError, token=token, argument=argument)
        self._record(argument, argv[cursor], token)
        return cursor

    def _record(self, argument, raw, token, /):
        """
        convert, validate and store one option value.
        """
        try:
            typed = argument.value_type.convert(raw)
        except ValueError as exception:
            raise self._fault(InvalidValueError, token=token, argument=argument, value=raw) from exception
        self._values.set_typed(argument.name, typed)

        self._validate(argument, raw, token)

        if argument.multiple:
            self._values.append_option(argument.name, raw)
        elif self._values.has_option(argument.name):
            raise self._fault(DuplicateArgumentError, token=token, argument=argument)
        else:
            self._values.set_option(argument.name, raw)

    def _validate(self, argument, raw, token, /):
        if argument.validator is None:
            return
        try:
            accepted = argument.validator(raw)
        except Exception as exception:
            raise self._fault(InvalidValueError, token=token, argument=argument, value=raw) from exception
        if accepted is False:
            raise self._fault(InvalidValueError, token=token, argument=argument, value=raw)

    def _check_required(self):
        for argument in self._arguments:
            if not argument.required:
                continue
            match argument.kind:
                case Kind.FLAG:
                    satisfied = self._values.flag(argument.name)
                case Kind.COUNT:
                    satisfied = self._values.count(argument.name) > 0
                case Kind.OPTION:
                    satisfied = self._values.has_option(argument.name) or argument.default is not None
                case Kind.POSITIONAL:
                    satisfied = self._positions[argument] < len(self._values.positionals)
            if not satisfied:
                raise self._fault(MissingRequiredError, argument=argument)

    def _check_positionals(self):
        for argument, index in self._positions.items():
            if (raw := self._values.positional(index)) is not None:
                self._validate(argument, raw, raw)

    def _fault(self, cls, /, **fields):
        """
        Internal: record the failure context and build the error to raise.
        """
        error = cls(**fields)
        self._context = error.context
        logger.debug("parse failed: %s", error)
        return error

    # accessors

    def _lookup(self, name, /):
        try:
            return self._names[name]
        except KeyError:
            raise UnknownArgumentError(token=name) from None

    def flag(self, name, /):
        return self._values.flag(name)

    def count(self, name, /):
        return self._values.count(name)

    def option(self, name, /):
        return self._values.option(name)

    def option_values(self, name, /):
        return self._values.option_values(name)

    @property
    def positionals(self):
        return self._values.positionals

    def positional(self, name, /):
        """
        raw value of the named positional, or None when absent or unknown.
        """
        argument = self._names.get(name)
        if argument is None or argument.kind is not Kind.POSITIONAL:
            return None
        return self._values.positional(self._positions[argument])

    def require(self, name, /):
        """
        raw value of an argument that must have been given.

        Flags and counts return their state; options and positionals their
        raw string. Raises MissingRequiredError when absent and
        UnknownArgumentError for a name the table does not define.
        """
        argument = self._lookup(name)
        match argument.kind:
            case Kind.FLAG:
                value = self._values.flag(name) or None
            case Kind.COUNT:
                value = self._values.count(name) or None
            case Kind.OPTION:
                value = self._values.option(name)
            case Kind.POSITIONAL:
                value = self._values.positional(self._positions[argument])
        if value is None:
            raise MissingRequiredError(argument=argument)
        return value

    def get(self, name, /):
        """
        typed value of an argument.

        - flags: bool; counts: tally.
        - options: converted value, else the default.
        - positionals: converted value, else the default.

        Raises MissingRequiredError when there is neither a value nor a
        default, InvalidValueError when a positional does not convert.
        """
        argument = self._lookup(name)
        match argument.kind:
            case Kind.FLAG:
                return self._values.flag(name)
            case Kind.COUNT:
                return self._values.count(name)
            case Kind.OPTION:
                if self._values.has_typed(name):
                    return self._values.typed(name)
            case Kind.POSITIONAL:
                if (raw := self._values.positional(self._positions[argument])) is not None:
                    try:
                        return argument.value_type.convert(raw)
                    except ValueError as exception:
                        raise InvalidValueError(token=raw, argument=argument, value=raw) from exception
        if argument.default is not None:
            return argument.default
        raise MissingRequiredError(argument=argument)

    # rendering

    def help(self):
        return render_help(self._arguments, self._config)

    def usage(self):
        return render_usage(self._arguments, self._config)

    def format_error(self, error=None, /, config=FormatConfig()):
        """
        format error (or the last recorded failure) with suggestions drawn
        from the table's long forms.
        """
        if error is None:
            if self._context is None:
                raise ValueError("format_error() called without an error and no parse has failed")
            error = self._context
        candidates = [
            name
            for argument in self._arguments
            for name in (argument.long, *argument.aliases)
            if name is not None
        ]
        return format_error(error, candidates, config)

    def __repr__(self):
        return "parser(%s)" % ", ".join(argument.name for argument in self._arguments)


__all__ = (
    "Parser",
)
