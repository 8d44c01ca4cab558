"""
Arguments module behavioral tests (definitions, value types, conversions).

Scope
- Validate ValueType conversions for every type, including rejected literals.
- Validate Argument construction: field shapes, normalization, rejected shapes.
- Validate derived properties (forms, display, named) and read-only access.

Conventions
- Test method names follow CamelCase per project convention.
- Structural table rules (duplicates, misplaced forms) live in the tables tests.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argtab import Argument, Kind, ValueType


class TestValueType(TestCase):
    """Behavioral tests for ValueType conversions."""

    def testStringIsUnchanged(self):
        self.assertEqual(ValueType.STRING.convert("  spaced  "), "  spaced  ")

    def testIntAcceptsSignedDecimal(self):
        self.assertEqual(ValueType.INT.convert("42"), 42)
        self.assertEqual(ValueType.INT.convert("-7"), -7)
        self.assertEqual(ValueType.INT.convert("+3"), 3)

    def testIntRejectsOtherLiterals(self):
        for raw in ("", "4.2", "0x10", "1_000", " 1", "abc"):
            with self.subTest(raw=raw), self.assertRaises(ValueError):
                ValueType.INT.convert(raw)

    def testFloatAcceptsDecimalAndExponent(self):
        self.assertEqual(ValueType.FLOAT.convert("3.5"), 3.5)
        self.assertEqual(ValueType.FLOAT.convert("-1e3"), -1000.0)
        self.assertEqual(ValueType.FLOAT.convert("2"), 2.0)

    def testFloatRejectsGroupingAndGarbage(self):
        for raw in ("1_000.5", "", "pi", " 1.5 ", "1.5\n", "\t2"):
            with self.subTest(raw=raw), self.assertRaises(ValueError):
                ValueType.FLOAT.convert(raw)

    def testBoolLiterals(self):
        for raw in ("true", "1", "yes", "on"):
            with self.subTest(raw=raw):
                self.assertIs(ValueType.BOOL.convert(raw), True)
        for raw in ("false", "0", "no", "off"):
            with self.subTest(raw=raw):
                self.assertIs(ValueType.BOOL.convert(raw), False)

    def testBoolRejectsOtherLiterals(self):
        for raw in ("TRUE", "y", "2", ""):
            with self.subTest(raw=raw), self.assertRaises(ValueError):
                ValueType.BOOL.convert(raw)

    def testConvertRequiresString(self):
        with self.assertRaises(TypeError):
            ValueType.INT.convert(1)

    def testPlaceholders(self):
        self.assertEqual(
            [value_type.placeholder for value_type in ValueType],
            ["bool", "string", "int", "float"],
        )


class TestArgument(TestCase):
    """Behavioral tests for Argument definitions."""

    def testDefaults(self):
        a = Argument("verbose", Kind.FLAG, long="verbose")
        self.assertEqual(a.name, "verbose")
        self.assertIs(a.kind, Kind.FLAG)
        self.assertIsNone(a.short)
        self.assertEqual(a.short_aliases, ())
        self.assertEqual(a.aliases, ())
        self.assertEqual(a.help, "")
        self.assertIs(a.value_type, ValueType.STRING)
        self.assertFalse(a.multiple)
        self.assertIsNone(a.default)
        self.assertFalse(a.required)
        self.assertIsNone(a.position)
        self.assertIsNone(a.validator)

    def testKindAndValueTypeAcceptStrings(self):
        a = Argument("count", "option", long="count", value_type="int")
        self.assertIs(a.kind, Kind.OPTION)
        self.assertIs(a.value_type, ValueType.INT)

    def testUnknownKindRejected(self):
        with self.assertRaises(ValueError):
            Argument("x", "switch", long="x")

    def testShortMustBeOneCharacter(self):
        for short in ("", "vv", "-", " "):
            with self.subTest(short=short), self.assertRaises(ValueError):
                Argument("x", Kind.FLAG, short=short)
        with self.assertRaises(TypeError):
            Argument("x", Kind.FLAG, short=1)

    def testLongMustNotCarryDashesOrEquals(self):
        for long in ("", "--verbose", "a=b", "two words"):
            with self.subTest(long=long), self.assertRaises(ValueError):
                Argument("x", Kind.FLAG, long=long)

    def testAliasesMustNotBeBareString(self):
        with self.assertRaises(TypeError):
            Argument("x", Kind.FLAG, long="x", aliases="xx")

    def testAliasesKeepOrderAndCollapseRepeats(self):
        a = Argument("output", Kind.OPTION, short="o", short_aliases="OoO", long="output", aliases=["out", "o2", "out"])
        self.assertEqual(a.short_aliases, ("O", "o"))
        self.assertEqual(a.aliases, ("out", "o2"))

    def testDefaultMustMatchValueType(self):
        Argument("n", Kind.OPTION, long="n", value_type=ValueType.INT, default=3)
        Argument("r", Kind.OPTION, long="r", value_type=ValueType.FLOAT, default=1)
        with self.assertRaises(TypeError):
            Argument("n", Kind.OPTION, long="n", value_type=ValueType.INT, default="3")
        with self.assertRaises(TypeError):
            Argument("n", Kind.OPTION, long="n", value_type=ValueType.INT, default=True)

    def testMultipleOnlyForOptions(self):
        with self.assertRaises(ValueError):
            Argument("v", Kind.FLAG, short="v", multiple=True)

    def testPositionShape(self):
        with self.assertRaises(ValueError):
            Argument("input", Kind.POSITIONAL, position=-1)
        with self.assertRaises(TypeError):
            Argument("input", Kind.POSITIONAL, position="0")
        with self.assertRaises(ValueError):
            Argument("v", Kind.FLAG, short="v", position=0)

    def testValidatorMustBeCallable(self):
        with self.assertRaises(TypeError):
            Argument("x", Kind.OPTION, long="x", validator="nope")

    def testHelpIsStripped(self):
        a = Argument("x", Kind.FLAG, long="x", help="  Enable x  ")
        self.assertEqual(a.help, "Enable x")

    def testFormsShortsFirst(self):
        a = Argument("output", Kind.OPTION, short="o", short_aliases="O", long="output", aliases=("out",))
        self.assertEqual(a.forms, ("-o", "-O", "--output", "--out"))

    def testDisplayPrefersLong(self):
        self.assertEqual(Argument("v", Kind.FLAG, short="v", long="verbose").display, "--verbose")
        self.assertEqual(Argument("v", Kind.FLAG, short="v").display, "-v")
        self.assertEqual(Argument("v", Kind.FLAG, short_aliases="V").display, "-V")
        self.assertEqual(Argument("input", Kind.POSITIONAL).display, "<input>")

    def testNamed(self):
        self.assertTrue(Argument("v", Kind.COUNT, short="v").named)
        self.assertFalse(Argument("input", Kind.POSITIONAL).named)

    def testPropertiesAreReadOnly(self):
        a = Argument("v", Kind.FLAG, short="v")
        with self.assertRaises(AttributeError):
            a.name = "other"  # type: ignore[misc]

    def testHashableByIdentity(self):
        a = Argument("v", Kind.FLAG, short="v")
        b = Argument("v", Kind.FLAG, short="v")
        self.assertNotEqual(a, b)
        self.assertEqual(len({a, b, a}), 2)

    def testRepr(self):
        a = Argument("v", Kind.FLAG, short="v")
        self.assertEqual(repr(a), "argument(name='v', kind=<Kind.FLAG: 'flag'>, short='v', value_type=<ValueType.STRING: 'string'>)")


if __name__ == "__main__":
    unittest.main()
