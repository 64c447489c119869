"""
Values module behavioral tests (kinds, codecs, destinations).

Scope
- Validate kind inference from defaults and explicit kind validation.
- Validate the textual codecs per primitive kind (syntax, bases, ranges, durations).
- Validate Destination seeding, decoding and custom value handling.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from datetime import timedelta
from unittest import TestCase

from pennant import Kind, Destination, decode, encode, infer, UnsupportedTypeError


class Names(list):
    def __str__(self):
        return ",".join(self)

    def __parse__(self, token, /):
        self.append(token)


class Switch:
    def __init__(self):
        self.on = False

    def __str__(self):
        return "on" if self.on else "off"

    def __parse__(self, token, /):
        self.on = decode(Kind.BOOL, token)

    def __boolean__(self):
        return True


class TestInfer(TestCase):
    """Kind resolution from default values."""

    def testInferPrimitives(self):
        self.assertIs(infer(False), Kind.BOOL)
        self.assertIs(infer(""), Kind.STRING)
        self.assertIs(infer(0), Kind.INT)
        self.assertIs(infer(0.0), Kind.FLOAT)
        self.assertIs(infer(timedelta(0)), Kind.DURATION)

    def testInferCustomValue(self):
        self.assertIs(infer(Names()), Kind.VALUE)

    def testInferRejectsUnsupported(self):
        for value in (b"bytes", [1, 2], object(), 1j):
            with self.subTest(value=value):
                with self.assertRaises(UnsupportedTypeError):
                    infer(value)

    def testUnsupportedIsTypeError(self):
        with self.assertRaises(TypeError):
            infer(b"bytes")

    def testExplicitWidths(self):
        self.assertIs(infer(0, Kind.INT64), Kind.INT64)
        self.assertIs(infer(0, "uint"), Kind.UINT)
        self.assertIs(infer(2 ** 64 - 1, Kind.UINT64), Kind.UINT64)
        self.assertIs(infer(1, Kind.FLOAT), Kind.FLOAT)

    def testExplicitKindMismatch(self):
        for value, kind in ((-1, Kind.UINT), (True, Kind.INT), ("1", Kind.INT), (2 ** 63, Kind.INT64), (1, "nope")):
            with self.subTest(value=value, kind=kind):
                with self.assertRaises(UnsupportedTypeError):
                    infer(value, kind)


class TestCodecs(TestCase):
    """Textual decode/encode rules per kind."""

    def testBoolSpellings(self):
        for token in ("1", "t", "T", "TRUE", "true", "True"):
            self.assertIs(decode(Kind.BOOL, token), True)
        for token in ("0", "f", "F", "FALSE", "false", "False"):
            self.assertIs(decode(Kind.BOOL, token), False)

    def testBoolRejectsOtherWords(self):
        for token in ("yes", "", "tRUE"):
            with self.subTest(token=token):
                with self.assertRaises(ValueError):
                    decode(Kind.BOOL, token)

    def testIntegerBases(self):
        cases = {"10": 10, "-1": -1, "+7": 7, "0x1F": 31, "0o17": 15, "017": 15, "0b101": 5, "1_000": 1000, "0": 0}
        for token, expected in cases.items():
            with self.subTest(token=token):
                self.assertEqual(decode(Kind.INT, token), expected)

    def testIntegerSyntaxErrors(self):
        for token in ("", " 1", "1.5", "08", "abc"):
            with self.subTest(token=token):
                with self.assertRaises(ValueError):
                    decode(Kind.INT, token)

    def testIntegerRanges(self):
        self.assertEqual(decode(Kind.INT64, str(2 ** 63 - 1)), 2 ** 63 - 1)
        with self.assertRaises(ValueError):
            decode(Kind.INT64, str(2 ** 63))
        self.assertEqual(decode(Kind.UINT64, str(2 ** 64 - 1)), 2 ** 64 - 1)
        with self.assertRaises(ValueError):
            decode(Kind.UINT64, str(2 ** 64))

    def testUnsignedRejectsSign(self):
        for token in ("-1", "+1", "-0"):
            with self.subTest(token=token):
                with self.assertRaises(ValueError):
                    decode(Kind.UINT, token)

    def testFloat(self):
        self.assertEqual(decode(Kind.FLOAT, "10.000001"), 10.000001)
        with self.assertRaises(ValueError):
            decode(Kind.FLOAT, "ten")

    def testDurationDecode(self):
        cases = {
            "0": timedelta(0),
            "1ms": timedelta(milliseconds=1),
            "300ms": timedelta(milliseconds=300),
            "2h45m": timedelta(hours=2, minutes=45),
            "1m30s": timedelta(seconds=90),
            "-1.5h": -timedelta(hours=1, minutes=30),
            "+2s": timedelta(seconds=2),
            "1500ns": timedelta(microseconds=2),
            "3us": timedelta(microseconds=3),
            "3µs": timedelta(microseconds=3),
        }
        for token, expected in cases.items():
            with self.subTest(token=token):
                self.assertEqual(decode(Kind.DURATION, token), expected)

    def testDurationSyntaxErrors(self):
        for token in ("", "5", "1x", "h", "-", "1.2.3s"):
            with self.subTest(token=token):
                with self.assertRaises(ValueError):
                    decode(Kind.DURATION, token)

    def testNonAsciiDigitsRejected(self):
        for kind, token in ((Kind.INT, "\u0661\u0662"), (Kind.UINT, "\uff11"), (Kind.FLOAT, "\u0661.5"), (Kind.DURATION, "\u0661s")):
            with self.subTest(kind=kind, token=token):
                with self.assertRaises(ValueError):
                    decode(kind, token)

    def testDurationEncode(self):
        cases = {
            timedelta(0): "0s",
            timedelta(hours=1): "1h0m0s",
            timedelta(seconds=90): "1m30s",
            timedelta(seconds=1.5): "1.5s",
            timedelta(microseconds=1500): "1.5ms",
            timedelta(microseconds=2): "2µs",
            -timedelta(seconds=1.5): "-1.5s",
        }
        for value, expected in cases.items():
            with self.subTest(value=value):
                self.assertEqual(encode(Kind.DURATION, value), expected)

    def testBoolEncode(self):
        self.assertEqual(encode(Kind.BOOL, True), "true")
        self.assertEqual(encode(Kind.BOOL, False), "false")

    def testDecodeRefusesCustomValues(self):
        with self.assertRaises(TypeError):
            decode(Kind.VALUE, "x")


class TestDestination(TestCase):
    """Typed storage cells."""

    def testSeededWithDefault(self):
        destination = Destination(Kind.INT, 7)
        self.assertEqual(destination.value, 7)
        self.assertEqual(destination.default, 7)
        self.assertEqual(str(destination), "7")

    def testParseReplacesValue(self):
        destination = Destination(Kind.DURATION, timedelta(0))
        destination.__parse__("1ms")
        self.assertEqual(destination.value, timedelta(milliseconds=1))
        self.assertEqual(destination.default, timedelta(0))

    def testFloatKindNormalizesIntDefault(self):
        destination = Destination(Kind.FLOAT, 1)
        self.assertIsInstance(destination.value, float)

    def testCustomValueIsCopied(self):
        names = Names()
        destination = Destination(Kind.VALUE, names)
        destination.__parse__("A")
        destination.__parse__("B")
        self.assertEqual(destination.value, ["A", "B"])
        self.assertEqual(names, [])
        self.assertEqual(str(destination), "A,B")

    def testBooleanProperty(self):
        self.assertTrue(Destination(Kind.BOOL, False).boolean)
        self.assertFalse(Destination(Kind.STRING, "").boolean)
        self.assertFalse(Destination(Kind.VALUE, Names()).boolean)
        self.assertTrue(Destination(Kind.VALUE, Switch()).boolean)

    def testMalformedTokenLeavesValue(self):
        destination = Destination(Kind.INT, 3)
        with self.assertRaises(ValueError):
            destination.__parse__("three")
        self.assertEqual(destination.value, 3)


if __name__ == "__main__":
    unittest.main()
