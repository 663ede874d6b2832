"""
Faults module behavioral tests (exit codes, rendering, triggering).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from helmsman.faults import (
    CommandError,
    CommandInterrupt,
    CommandUsageError,
    DeferredUsageError,
    DelegatedCommandError,
    InvalidArgumentError,
    InvalidCommandError,
    MissingArgumentError,
    UnknownSwitchError,
    USAGE_FAULTS,
    trigger,
)


class TestExitCodes(TestCase):
    """Every kind maps to its documented exit status."""

    def testUsageShapedKinds(self):
        for kind in (UnknownSwitchError, InvalidCommandError, CommandUsageError, DeferredUsageError):
            self.assertEqual(kind("x").exit_code, 126, kind)

    def testSwitchValueFaultsAreUsageShaped(self):
        self.assertTrue(issubclass(MissingArgumentError, USAGE_FAULTS))
        self.assertTrue(issubclass(InvalidArgumentError, USAGE_FAULTS))

    def testInterrupt(self):
        self.assertEqual(CommandInterrupt("interrupted").exit_code, 130)

    def testProgramError(self):
        self.assertEqual(CommandError("program version required").exit_code, 1)

    def testDelegatedDefaultsToOne(self):
        self.assertEqual(DelegatedCommandError("boom", exception=RuntimeError("boom")).exit_code, 1)

    def testDelegatedHonorsExitCodeAttribute(self):
        class DomainError(Exception):
            exit_code = 3

        self.assertEqual(DelegatedCommandError("boom", exception=DomainError()).exit_code, 3)

    def testDelegatedIgnoresUnusableExitCode(self):
        class DomainError(Exception):
            exit_code = "three"

        self.assertEqual(DelegatedCommandError("boom", exception=DomainError()).exit_code, 1)


class TestRendering(TestCase):
    """The single "<program>: <message>" line."""

    def testPlainLine(self):
        fault = CommandUsageError("excess arguments for command 'x'", program="prog", colorful=False)
        self.assertEqual(fault.__rich__().plain, "prog: excess arguments for command 'x'")

    def testStyledLine(self):
        text = CommandUsageError("bad", program="prog").__rich__()
        self.assertEqual(text.plain, "prog: bad")
        styles = [str(span.style) for span in text.spans]
        self.assertIn("#2794d8", styles)
        self.assertIn("bold red", styles)

    def testWithoutProgram(self):
        self.assertEqual(CommandError("bad", colorful=False).__rich__().plain, "bad")

    def testUnknownSwitchInput(self):
        self.assertEqual(UnknownSwitchError("invalid option: --x", input="--x").input, "--x")


class TestTrigger(TestCase):
    """Raising outside shell mode, printing and exiting inside it."""

    def testRaisesMergedCopy(self):
        with self.assertRaises(CommandUsageError) as context:
            trigger(CommandUsageError("bad", command="x"), program="prog")
        self.assertEqual(dict(context.exception.options), {"command": "x", "program": "prog"})
        self.assertEqual(str(context.exception), "bad")

    def testShellModePrintsAndExits(self):
        buffer = io.StringIO()
        with mock.patch("helmsman.faults.console", Console(file=buffer, width=120)):
            with self.assertRaises(SystemExit) as context:
                trigger(InvalidCommandError("invalid command 'x'"), program="prog", shell=True, colorful=False)
        self.assertEqual(context.exception.code, 126)
        self.assertEqual(buffer.getvalue(), "prog: invalid command 'x'\n")

    def testDeferredUsageRunsBeforeMessage(self):
        buffer = io.StringIO()
        console = Console(file=buffer, width=120)
        fault = DeferredUsageError("bad", usage=lambda: console.print("usage text"))
        with mock.patch("helmsman.faults.console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(fault, program="prog", shell=True, colorful=False)
        self.assertEqual(context.exception.code, 126)
        self.assertEqual(buffer.getvalue(), "usage text\nprog: bad\n")

    def testReplacePreservesCause(self):
        cause = RuntimeError("root")
        fault = DelegatedCommandError("root", exception=cause)
        fault.__cause__ = cause
        self.assertIs(fault.__replace__(shell=False).__cause__, cause)

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(RuntimeError("x"))


if __name__ == "__main__":
    unittest.main()
