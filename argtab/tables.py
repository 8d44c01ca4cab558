"""
Argtab table checks and lookup index.

Scope
- validate(): one structural pass over an argument table, run once at startup
  before any parsing. Rejects every mistake the lookup index would trip over,
  plus the ones it cannot see (empty names, misplaced forms, duplicate names
  and positional indices).
- positions(): effective index of every positional.
- Index: short character -> definition and long name -> definition maps.

Rules enforced by validate()
- every definition has a non-empty name.
- positionals carry no short, long or alias form.
- flags, options and counts carry at least one form.
- names, short forms (aliases included) and long forms (aliases included)
  are unique across the table.
- explicit positional indices are unique.
"""
import logging
from collections.abc import Iterable
from types import MappingProxyType

from .arguments import *
from .faults import *

logger = logging.getLogger(__name__)


def _freeze(arguments, /):
    if not isinstance(arguments, Iterable):
        raise TypeError("argument table must be an iterable of arguments")
    arguments = tuple(arguments)
    for argument in arguments:
        if not isinstance(argument, Argument):
            raise TypeError("argument table must only contain arguments, got %r" % (argument,))
    return arguments


def validate(arguments, /):
    """
    check an argument table and return it frozen as a tuple.

    Raises
    - TypeError: the table holds something other than Argument values.
    - TableError: empty name, forms on a positional, or a named argument
      without any form.
    - DuplicateDefinitionError: a repeated name, short form, long form or
      explicit positional index.
    """
    arguments = _freeze(arguments)

    names, shorts, longs, indices = {}, {}, {}, {}

    for argument in arguments:
        if not argument.name:
            raise TableError("argument names must not be empty", argument=argument)

        if argument.kind is Kind.POSITIONAL:
            if argument.forms:
                raise TableError(
                    "positional %r must not have short or long forms" % argument.name,
                    argument=argument,
                    token=argument.forms[0],
                )
        elif not argument.forms:
            raise TableError(
                "%s %r must have a short or a long form" % (argument.kind, argument.name),
                argument=argument,
            )

        if argument.name in names:
            raise DuplicateDefinitionError(
                "argument name %r is defined more than once" % argument.name,
                argument=argument,
            )
        names[argument.name] = argument

        for char in (argument.short, *argument.short_aliases):
            if char is None:
                continue
            if shorts.setdefault(char, argument) is not argument:
                raise DuplicateDefinitionError(
                    "short form '-%s' of %r is already used by %r" % (char, argument.name, shorts[char].name),
                    argument=argument,
                    token="-" + char,
                )

        for name in (argument.long, *argument.aliases):
            if name is None:
                continue
            if longs.setdefault(name, argument) is not argument:
                raise DuplicateDefinitionError(
                    "long form '--%s' of %r is already used by %r" % (name, argument.name, longs[name].name),
                    argument=argument,
                    token="--" + name,
                )

        if argument.position is not None:
            if indices.setdefault(argument.position, argument) is not argument:
                raise DuplicateDefinitionError(
                    "position %d of %r is already used by %r" % (
                        argument.position, argument.name, indices[argument.position].name,
                    ),
                    argument=argument,
                )

    logger.debug("validated table of %d arguments", len(arguments))
    return arguments


def positions(arguments, /):
    """
    resolve the index of every positional, in declaration order.

    - an explicit position is used as is.
    - a positional without one takes the index right after the highest
      index resolved so far (0 for the first).

    Returns a read-only mapping Argument -> index.
    """
    resolved, following = {}, 0
    for argument in _freeze(arguments):
        if argument.kind is not Kind.POSITIONAL:
            continue
        index = argument.position if argument.position is not None else following
        resolved[argument] = index
        following = max(following, index + 1)
    return MappingProxyType(resolved)


class Index:
    """
    Lookup maps from command-line spellings to definitions.

    - short(char) -> Argument | None, primary short forms and short aliases.
    - long(name) -> Argument | None, primary long forms and aliases.

    Built once per parser and never mutated afterwards. Construction fails
    fast with DuplicateArgumentError when two table entries claim one spelling,
    even when both entries are the same definition; an entry repeating its
    own spelling is tolerated.
    """

    def __init__(self, arguments, /):
        arguments = _freeze(tuple(arguments))
        shorts, longs = {}, {}

        for position, argument in enumerate(arguments):
            for char in (argument.short, *argument.short_aliases):
                if char is not None:
                    self._insert(shorts, char, position, arguments, "-" + char)
            for name in (argument.long, *argument.aliases):
                if name is not None:
                    self._insert(longs, name, position, arguments, "--" + name)

        self._arguments = arguments
        self._shorts = MappingProxyType({char: arguments[position] for char, position in shorts.items()})
        self._longs = MappingProxyType({name: arguments[position] for name, position in longs.items()})

    @staticmethod
    def _insert(mapping, key, position, arguments, token):
        if (existing := mapping.setdefault(key, position)) != position:
            argument = arguments[position]
            logger.debug("%r (entry %d) collides with %r (entry %d) on %s",
                         argument.name, position, arguments[existing].name, existing, token)
            raise DuplicateArgumentError(token=token, argument=argument)

    @property
    def arguments(self):
        return self._arguments

    def short(self, char, /):
        return self._shorts.get(char)

    def long(self, name, /):
        return self._longs.get(name)

    def __len__(self):
        return len(self._shorts) + len(self._longs)

    def __repr__(self):
        return "index(shorts=%r, longs=%r)" % (tuple(self._shorts), tuple(self._longs))


__all__ = (
    "validate",
    "positions",
    "Index",
)
