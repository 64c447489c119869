"""
Faults module behavioral tests (codes, policies, rendering).

Scope
- Validate code normalization and documentation lookup hooks.
- Validate trigger() contract and option merging through __replace__.
- Validate rich rendering of errors and warnings.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
import warnings
from unittest import TestCase

from rich.console import Console

from pennant import (
    FaultCode,
    ErrorPolicy,
    FlagException,
    UnknownFlagError,
    HelpRequestedError,
    EmptyValueWarning,
    DuplicateFlagError,
    trigger,
    getdoc,
)


def rendered(fault):
    sink = io.StringIO()
    Console(file=sink, markup=False, highlight=False, no_color=True, soft_wrap=True).print(fault)
    return sink.getvalue()


class TestFaultCode(TestCase):
    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "11112")
        self.assertEqual(FaultCode.EMPTY_INLINE_VALUE.normalize(), "12111")

    def testCodesAreUnique(self):
        self.assertEqual(len(set(FaultCode)), len(FaultCode.__members__))

    def testGetdocWithoutHostMapping(self):
        self.assertIsNone(getdoc(FaultCode.MISSING_VALUE))

    def testGetdocRejectsPlainIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(11112)


class TestTrigger(TestCase):
    def testRejectsObjectsWithoutProtocol(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testReturnPolicyHandsBackMergedFault(self):
        fault = trigger(UnknownFlagError("flag provided but not defined: -x", input="x"), policy=ErrorPolicy.RETURN)
        self.assertIsInstance(fault, UnknownFlagError)
        self.assertEqual(fault.options["input"], "x")
        self.assertIs(fault.options["policy"], ErrorPolicy.RETURN)
        self.assertEqual(str(fault), "flag provided but not defined: -x")

    def testAbortIsTheDefault(self):
        with self.assertRaises(UnknownFlagError):
            trigger(UnknownFlagError("boom"))

    def testHelpUnderAbortRaises(self):
        with self.assertRaises(HelpRequestedError) as context:
            trigger(HelpRequestedError("help requested"), policy=ErrorPolicy.ABORT)
        self.assertEqual(context.exception.status, 0)

    def testReplaceOverridesOptions(self):
        fault = UnknownFlagError("boom", hint="first", index=1)
        replaced = fault.__replace__(hint="second")
        self.assertEqual(replaced.options["hint"], "second")
        self.assertEqual(replaced.options["index"], 1)
        self.assertEqual(fault.options["hint"], "first")

    def testWarningOutsideExitGoesThroughWarnings(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            trigger(EmptyValueWarning("empty inline value for flag -s"), policy=ErrorPolicy.RETURN)
        self.assertEqual(len(caught), 1)
        self.assertIs(caught[0].category, EmptyValueWarning)


class TestHierarchy(TestCase):
    def testDefinitionFaultsAreBuiltinErrors(self):
        self.assertTrue(issubclass(DuplicateFlagError, ValueError))
        self.assertTrue(issubclass(DuplicateFlagError, FlagException))

    def testParseFaultExitStatus(self):
        self.assertEqual(UnknownFlagError.status, 2)
        self.assertEqual(HelpRequestedError.status, 0)


class TestRendering(TestCase):
    def testErrorShowsCodeTitleAndHint(self):
        text = rendered(UnknownFlagError(
            "flag provided but not defined: -x",
            title="unknown flag",
            code=FaultCode.UNKNOWN_FLAG,
            hint="try 'tool -help' to see all flags",
        ))
        self.assertIn("11112", text)
        self.assertIn("Unknown Flag", text)
        self.assertIn("flag provided but not defined: -x", text)
        self.assertIn("try 'tool -help' to see all flags", text)

    def testWarningWithoutHint(self):
        text = rendered(EmptyValueWarning(
            "empty inline value for flag -s",
            title="empty inline value",
            code=FaultCode.EMPTY_INLINE_VALUE,
        ))
        self.assertIn("12111", text)
        self.assertIn("Empty Inline Value", text)
        self.assertNotIn("→", text)


if __name__ == "__main__":
    unittest.main()
