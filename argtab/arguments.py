r"""
Argtab argument definitions.

Overview
- Kind: what a definition is on the command line (flag, option, positional, count).
- ValueType: how an option or positional value is converted (bool, string, int, float).
- Argument: one immutable entry of an argument table.

An argument table is an ordered collection of Argument values. It is declared
once by the host program, validated once (see argtab.tables.validate), and then
shared read-only by the parser and the help generator.

Metadata (sanitized on construction)
- name: str, the stable lookup key used by the accessors.
- kind: Kind (or its string value).
- short: one character ("v" for -v); short_aliases: more characters.
- long: a name without dashes ("verbose" for --verbose); aliases: more names.
- help: one line of help text.
- value_type: ValueType used to convert option and positional values.
- multiple: options only; every occurrence is collected instead of rejected.
- default: a typed value matching value_type.
- required: the argument must be satisfied by the command line.
- position: positionals only; explicit index into the positional sequence.
- validator: callable receiving the raw string; raising or returning False rejects it.

Validation highlights
- Field shapes are checked here (TypeError/ValueError).
- Table rules (forms on positionals, missing forms, duplicates) are checked by
  argtab.tables.validate so that a malformed table can still be expressed and
  reported as a whole.

Quick example:
    >>> from argtab.arguments import Argument, Kind, ValueType
    >>> table = (
    ...     Argument("verbose", Kind.FLAG, short="v", long="verbose", help="Enable verbose output"),
    ...     Argument("count", Kind.OPTION, short="c", long="count", value_type=ValueType.INT, default=1),
    ...     Argument("input", Kind.POSITIONAL, position=0, help="Input file"),
    ... )
"""
import functools
import operator
import re
from collections.abc import Iterable
from enum import StrEnum

from .utils import *


class Kind(StrEnum):
    """
    kind of a command-line argument.

    - FLAG: presence-only switch (--verbose, -v).
    - OPTION: named switch carrying a value (--file path, -fpath, --file=path).
    - POSITIONAL: value identified by its position, never invoked by name.
    - COUNT: switch whose occurrences are tallied (-vvv counts 3).
    """
    FLAG = "flag"
    OPTION = "option"
    POSITIONAL = "positional"
    COUNT = "count"


class ValueType(StrEnum):
    """
    conversion applied to option and positional values.
    """
    BOOL = "bool"
    STRING = "string"
    INT = "int"
    FLOAT = "float"

    @property
    def placeholder(self):
        """
        label shown in help for a value of this type (e.g., --count <int>).
        """
        return self.value

    def convert(self, raw, /):
        """
        convert a raw command-line string into a typed value.

        - STRING: returned unchanged.
        - INT: base-10 literal with an optional sign.
        - FLOAT: decimal or exponent literal (also inf/nan); digit grouping
          and surrounding whitespace are rejected.
        - BOOL: true/1/yes/on and false/0/no/off.

        Raises ValueError for a literal that does not fit the type.
        """
        if not isinstance(raw, str):
            raise TypeError("convert() argument must be a string")

        match self:
            case ValueType.STRING:
                return raw
            case ValueType.INT:
                if not re.fullmatch(r"[+-]?[0-9]+", raw):
                    raise ValueError("invalid integer literal %r" % raw)
                return int(raw)
            case ValueType.FLOAT:
                if "_" in raw or raw != raw.strip():
                    raise ValueError("invalid float literal %r" % raw)
                try:
                    return float(raw)
                except ValueError:
                    raise ValueError("invalid float literal %r" % raw) from None
            case ValueType.BOOL:
                if raw in ("true", "1", "yes", "on"):
                    return True
                if raw in ("false", "0", "no", "off"):
                    return False
                raise ValueError("invalid boolean literal %r" % raw)

    def accepts(self, value, /):
        """
        tell whether an already-typed value (e.g., a default) belongs to this type.
        """
        match self:
            case ValueType.STRING:
                return isinstance(value, str)
            case ValueType.INT:
                return isinstance(value, int) and not isinstance(value, bool)
            case ValueType.FLOAT:
                return isinstance(value, int | float) and not isinstance(value, bool)
            case ValueType.BOOL:
                return isinstance(value, bool)


class ArgumentType(type):
    """
    Metaclass giving definitions stable introspection.

    - Exposes every name in __introspectable__ as a read-only property mirroring
      the private "_<name>" field.
    - Derives __typename__ from the class name for messages.
    - Provides __repr__/__rich_repr__ for diagnostics and rich pretty printing.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            # Only fields that differ from their "not provided" state, keeping reprs short.
            for name in type(self).__introspectable__:
                object = getattr(self, name)
                if (object is None or object is False or object in ((), "")) and name not in ("name", "kind"):
                    continue
                yield name, object
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize the fields every definition carries (name, kind, help, required).
    """
    if not isinstance(metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    # An empty name is a table mistake reported by validate(), not a shape error.
    metadata["name"] = metadata["name"].strip()

    try:
        metadata["kind"] = Kind(metadata["kind"])
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'kind' must be one of {', '.join(map(repr, Kind))}") from None

    if not isinstance(metadata["help"], str):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    metadata["help"] = metadata["help"].strip()

    metadata["required"] = bool(metadata["required"])


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate short/long spellings.

    - short and short_aliases are single characters other than '-' and whitespace.
    - long and aliases are non-empty names without leading '-', '=' or whitespace.
    - aliases keep their declaration order; repeats collapse.
    """
    def short(char, field):
        if not isinstance(char, str):
            raise TypeError(f"{cls.__typename__} '{field}' must be a single character")
        if len(char) != 1 or char == "-" or char.isspace():
            raise ValueError(f"{cls.__typename__} '{field}' must be a single character other than '-'")
        return char

    def long(name, field):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} '{field}' must be a string")
        if not name or name.startswith("-") or not re.fullmatch(r"[^\s=]+", name):
            raise ValueError(f"{cls.__typename__} '{field}' must be a name without dashes, '=' or spaces")
        return name

    if metadata["short"] is not Unset:
        metadata["short"] = short(metadata["short"], "short")
    if metadata["long"] is not Unset:
        metadata["long"] = long(metadata["long"], "long")

    if not isinstance(metadata["short_aliases"], Iterable):
        raise TypeError(f"{cls.__typename__} 'short_aliases' must be iterable")
    metadata["short_aliases"] = tuple(dict.fromkeys(
        short(char, "short_aliases") for char in metadata["short_aliases"]
    ))

    if isinstance(metadata["aliases"], str) or not isinstance(metadata["aliases"], Iterable):
        raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
    metadata["aliases"] = tuple(dict.fromkeys(
        long(name, "aliases") for name in metadata["aliases"]
    ))


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate value-bearing fields (value_type, default, multiple, position, validator).

    Side effects
    - Mutates the provided metadata dict in place.
    """
    try:
        metadata["value_type"] = value_type = ValueType(metadata["value_type"])
    except ValueError:
        raise ValueError(
            f"{cls.__typename__} 'value_type' must be one of {', '.join(map(repr, ValueType))}"
        ) from None

    kind = metadata["kind"]

    if (default := metadata["default"]) is not Unset and default is not None:
        expected = ValueType.BOOL if kind is Kind.FLAG else ValueType.INT if kind is Kind.COUNT else value_type
        if not expected.accepts(default):
            raise TypeError(f"{cls.__typename__} 'default' must be a {expected.placeholder} value")

    metadata["multiple"] = bool(metadata["multiple"])
    if metadata["multiple"] and kind is not Kind.OPTION:
        raise ValueError(f"only options can be 'multiple' (got a {kind})")

    if (position := metadata["position"]) is not Unset and position is not None:
        if not isinstance(position, int) or isinstance(position, bool):
            raise TypeError(f"{cls.__typename__} 'position' must be an integer")
        if position < 0:
            raise ValueError(f"{cls.__typename__} 'position' must be a non-negative integer")
        if kind is not Kind.POSITIONAL:
            raise ValueError(f"only positionals can have a 'position' (got a {kind})")

    if (validator := metadata["validator"]) is not Unset and validator is not None and not callable(validator):
        raise TypeError(f"{cls.__typename__} 'validator' must be callable")


class Argument(metaclass=ArgumentType):
    """
    Immutable definition of one command-line argument.

    Argument declares how a flag, option, count or positional is recognized,
    converted, validated, and rendered in help. Instances are hashable by
    identity; the parser and the help generator refer to them directly.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      mirroring the sanitized metadata values.
    """

    __introspectable__ = (
        "name",
        "kind",
        "short",
        "short_aliases",
        "long",
        "aliases",
        "help",
        "value_type",
        "multiple",
        "default",
        "required",
        "position",
        "validator",
    )

    def __new__(
            cls,
            name,
            kind,
            /,
            *,
            short=Unset,
            short_aliases=(),
            long=Unset,
            aliases=(),
            help="",
            value_type=ValueType.STRING,
            multiple=False,
            default=Unset,
            required=False,
            position=Unset,
            validator=Unset,
    ):
        """
        Construct an Argument with the provided metadata.

        Notes
        - Metadata is sanitized in three passes:
          • _sanitize_metadata handles name/kind/help/required.
          • _sanitize_named_metadata handles short/long spellings and aliases.
          • _sanitize_parametric_metadata handles value_type/default/multiple/position/validator.
        - Unset fields become None on the instance.
        """
        metadata = {
            "name": name,
            "kind": kind,
            "short": short,
            "short_aliases": short_aliases,
            "long": long,
            "aliases": aliases,
            "help": help,
            "value_type": value_type,
            "multiple": multiple,
            "default": default,
            "required": required,
            "position": position,
            "validator": validator,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))
        return self

    @property
    def forms(self):
        """
        command-line spellings of this argument, shorts first (e.g., ('-o', '-O', '--output', '--out')).
        """
        shorts = (self.short,) if self.short is not None else ()
        longs = (self.long,) if self.long is not None else ()
        return (
            *("-" + char for char in shorts + self.short_aliases),
            *("--" + name for name in longs + self.aliases),
        )

    @property
    def display(self):
        """
        preferred spelling for messages: --long, else -short, else <name> for positionals.
        """
        if self.long is not None:
            return "--" + self.long
        if self.short is not None:
            return "-" + self.short
        if self.kind is Kind.POSITIONAL:
            return "<%s>" % self.name
        if self.forms:
            return self.forms[0]
        return self.name

    @property
    def named(self):
        """
        whether this argument is invoked by name (flags, options and counts).
        """
        return self.kind is not Kind.POSITIONAL


__all__ = (
    "Kind",
    "ValueType",
    "Argument",
)

# Not part of the public API.
del ArgumentType
