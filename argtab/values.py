"""
Argtab value store.

Values holds everything one parse produced, keyed by argument name:
- flags: names of the flags that were present.
- counts: occurrence tallies of count arguments.
- options: latest raw value of every option.
- multiples: every raw value of multiple options, in order.
- positionals: raw positional values, in encounter order.
- typed: converted option values.

The store belongs to one parser and is written only by it. reset() drops
every container at once, so nothing from a previous parse survives into the
next one.
"""
from .utils import *


class Values:
    """
    Per-parse store of raw and typed argument values.

    Public read access goes through the accessors and the mirrored
    properties, which return immutable snapshots.
    """

    flags = mirror("flags")
    counts = mirror("counts")
    options = mirror("options")
    positionals = mirror("positionals")

    def __init__(self):
        self.reset()

    def reset(self):
        """
        drop every recorded value.
        """
        self._flags = set()
        self._counts = {}
        self._options = {}
        self._multiples = {}
        self._positionals = []
        self._typed = {}

    # writers

    def set_flag(self, name, /):
        self._flags.add(name)

    def increment(self, name, /):
        self._counts[name] = self._counts.get(name, 0) + 1
        return self._counts[name]

    def set_option(self, name, value, /):
        self._options[name] = value

    def append_option(self, name, value, /):
        """
        record one more value of a multiple option; option(name) reports the latest.
        """
        self._multiples.setdefault(name, []).append(value)
        self._options[name] = value

    def append_positional(self, value, /):
        self._positionals.append(value)

    def set_typed(self, name, value, /):
        self._typed[name] = value

    # readers

    def flag(self, name, /):
        return name in self._flags

    def count(self, name, /):
        return self._counts.get(name, 0)

    def option(self, name, /):
        return self._options.get(name)

    def option_values(self, name, /):
        """
        every value of a multiple option in order, or None when it never appeared.
        """
        if name not in self._multiples:
            return None
        return tuple(self._multiples[name])

    def positional(self, index, /):
        if not 0 <= index < len(self._positionals):
            return None
        return self._positionals[index]

    def typed(self, name, default=None, /):
        return self._typed.get(name, default)

    def has_option(self, name, /):
        return name in self._options

    def has_typed(self, name, /):
        return name in self._typed

    def __repr__(self):
        return "values(flags=%r, counts=%r, options=%r, positionals=%r)" % (
            sorted(self._flags), self._counts, self._options, self._positionals,
        )


__all__ = (
    "Values",
)
