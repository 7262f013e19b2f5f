"""
Utility tests (sentinel, references, wrapping, value codecs).

Scope
- Unset semantics and coalesce.
- Ref reads and writes through the owner's attribute.
- wrap / wrap_at_length: width limit, minimal raggedness, padding.
- parse_duration / format_duration / parse_bool.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import datetime
import unittest
from unittest import TestCase

from vaultcli.utils import *


class Holder:
    pass


class TestUnset(TestCase):
    def testUnsetIsFalseyAndSingleton(self):
        self.assertFalse(Unset)
        self.assertIs(UnsetType(), Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testCoalescePreservesFalseyValues(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce(0, 1), 0)


class TestRef(TestCase):
    def testSetWritesOwnerAttribute(self):
        holder = Holder()
        ref = Ref(holder, "value")
        ref.set("x")
        self.assertEqual(holder.value, "x")
        self.assertEqual(ref.get(), "x")

    def testGetWithDefault(self):
        self.assertEqual(Ref(Holder(), "missing").get("d"), "d")

    def testEmptyNameRejected(self):
        with self.assertRaises(TypeError):
            Ref(Holder(), "")

    def testGetMissingWithoutDefault(self):
        with self.assertRaises(AttributeError):
            Ref(Holder(), "missing").get()


class TestWrap(TestCase):
    def testShortTextStaysOnOneLine(self):
        self.assertEqual(wrap("one two three", 78), "one two three")

    def testEmptyText(self):
        self.assertEqual(wrap("   ", 10), "")

    def testBreaksToFitLimit(self):
        self.assertEqual(wrap("aaa bbb ccc", 7), "aaa bbb\nccc")

    def testMinimalRaggedness(self):
        # greedy filling would give "aaa bb" / "cc" / "ddddd"
        self.assertEqual(wrap("aaa bb cc ddddd", 6), "aaa\nbb cc\nddddd")

    def testLongWordIsNotBroken(self):
        # the overflowing line still takes the short word before it
        self.assertEqual(wrap("a " + "x" * 20 + " b", 10).split("\n"), ["a " + "x" * 20, "b"])

    def testWrapAtLengthPadsEveryLine(self):
        text = " ".join(["word"] * 40)
        lines = wrap_at_length(text, 6).split("\n")
        self.assertGreater(len(lines), 1)
        for line in lines:
            self.assertTrue(line.startswith(" " * 6))
            self.assertFalse(line.startswith(" " * 7))
            self.assertLessEqual(len(line), MAX_LINE_LENGTH)

    def testNormalizeCollapsesWhitespace(self):
        self.assertEqual(normalize("a \n\t b"), "a b")


class TestDurations(TestCase):
    def testParseUnits(self):
        self.assertEqual(parse_duration("5m"), datetime.timedelta(minutes=5))
        self.assertEqual(parse_duration("1h30m"), datetime.timedelta(hours=1, minutes=30))
        self.assertEqual(parse_duration("1.5h"), datetime.timedelta(minutes=90))
        self.assertEqual(parse_duration("250ms"), datetime.timedelta(milliseconds=250))

    def testBareIntegerIsSeconds(self):
        self.assertEqual(parse_duration("90"), datetime.timedelta(seconds=90))

    def testInvalidDurations(self):
        for text in ("", "abc", "5x", "m5", "1h-"):
            with self.subTest(text=text), self.assertRaises(ValueError):
                parse_duration(text)

    def testFormat(self):
        self.assertEqual(format_duration(datetime.timedelta(seconds=300)), "5m")
        self.assertEqual(format_duration(datetime.timedelta(seconds=5400)), "1h30m")
        self.assertEqual(format_duration(datetime.timedelta(seconds=90)), "1m30s")
        self.assertEqual(format_duration(datetime.timedelta()), "0s")

    def testSubSecondValues(self):
        self.assertEqual(format_duration(datetime.timedelta(milliseconds=1500)), "1.5s")
        self.assertEqual(format_duration(datetime.timedelta(microseconds=1)), "0.000001s")
        self.assertEqual(format_duration(datetime.timedelta(hours=1, microseconds=250)), "1h0.00025s")
        self.assertEqual(format_duration(parse_duration("1us")), "0.000001s")

    def testBelowResolutionRejected(self):
        for text in ("1ns", "400ns"):
            with self.subTest(text=text), self.assertRaises(ValueError):
                parse_duration(text)
        self.assertEqual(parse_duration("1500ns"), datetime.timedelta(microseconds=2))

    def testFormatRejectsNonDelta(self):
        with self.assertRaises(TypeError):
            format_duration(300)


class TestParseBool(TestCase):
    def testSpellings(self):
        for text in ("1", "t", "TRUE", "true"):
            self.assertTrue(parse_bool(text))
        for text in ("0", "f", "False"):
            self.assertFalse(parse_bool(text))

    def testInvalid(self):
        with self.assertRaises(ValueError):
            parse_bool("maybe")


if __name__ == "__main__":
    unittest.main()
