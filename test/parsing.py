"""
Parsing module behavioral tests (switch grammar, global/local passes, recovery).

Scope
- Validate the switch grammar and the "--" terminator.
- Validate boolean presence vs. absence vs. negation.
- Validate global-first parsing and inheritance of global values.
- Validate default injection, conversion faults and unknown-switch recovery.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from helmsman import OptionSpec, Options, parse, parse_global, parse_local
from helmsman.faults import InvalidArgumentError, MissingArgumentError, UnknownSwitchError


class TestOptions(TestCase):
    """The read-only options mapping."""

    def testAttributeAccess(self):
        options = Options({"verbose": True, "color": False})
        self.assertTrue(options.verbose)
        self.assertFalse(options.color)
        self.assertIsNone(options.quiet)

    def testAbsentIsDistinctFromFalse(self):
        options = Options({"color": False})
        self.assertIn("color", options)
        self.assertNotIn("quiet", options)

    def testReadOnly(self):
        options = Options({"verbose": True})
        with self.assertRaises(AttributeError):
            options.verbose = False
        with self.assertRaises(TypeError):
            options["verbose"] = False

    def testMappingProtocol(self):
        options = Options({"file": "a.txt"})
        self.assertEqual(dict(options), {"file": "a.txt"})
        self.assertEqual(len(options), 1)
        self.assertEqual(options["file"], "a.txt")


class TestSwitchGrammar(TestCase):
    """Value and flag forms."""

    def setUp(self):
        self.specs = [OptionSpec("-f", "--file FILE"), OptionSpec("-v", "--verbose")]

    def testValueForms(self):
        for tokens in (["--file=x"], ["--file", "x"], ["-f", "x"], ["-f=x"]):
            arguments, values, faults = parse_local(self.specs, tokens)
            self.assertEqual(values, {"file": "x"}, tokens)
            self.assertEqual(arguments, [])
            self.assertEqual(faults, [])

    def testPositionalsKeepOrder(self):
        arguments, values, _ = parse_local(self.specs, ["a", "-v", "b", "--file", "x", "c"])
        self.assertEqual(arguments, ["a", "b", "c"])
        self.assertEqual(values, {"verbose": True, "file": "x"})

    def testTerminatorEndsSwitchParsing(self):
        arguments, values, _ = parse_local(self.specs, ["--file", "x", "--", "--file", "y", "-v"])
        self.assertEqual(arguments, ["--file", "y", "-v"])
        self.assertEqual(values, {"file": "x"})

    def testLoneDashIsPositional(self):
        arguments, _, _ = parse_local(self.specs, ["-"])
        self.assertEqual(arguments, ["-"])

    def testLastValueWins(self):
        _, values, _ = parse_local(self.specs, ["--file", "a", "--file", "b"])
        self.assertEqual(values, {"file": "b"})

    def testMissingValue(self):
        with self.assertRaises(MissingArgumentError):
            parse_local(self.specs, ["--file"])

    def testNeedlessValue(self):
        with self.assertRaises(InvalidArgumentError):
            parse_local(self.specs, ["--verbose=yes"])


class TestBooleanFlags(TestCase):
    """Presence, absence and negation."""

    def setUp(self):
        self.specs = [OptionSpec("--[no-]color")]

    def testPresenceIsTrue(self):
        self.assertIs(parse((), self.specs, ["--color"]).options["color"], True)

    def testNegationIsFalse(self):
        self.assertIs(parse((), self.specs, ["--no-color"]).options["color"], False)

    def testAbsenceIsAbsent(self):
        options = parse((), self.specs, []).options
        self.assertNotIn("color", options)
        self.assertIsNone(options.color)


class TestConversion(TestCase):
    """Typed values and choices."""

    def testTypedValue(self):
        _, values, _ = parse_local([OptionSpec("--count N", type=int)], ["--count", "3"])
        self.assertEqual(values, {"count": 3})

    def testUncastableValue(self):
        with self.assertRaises(InvalidArgumentError) as context:
            parse_local([OptionSpec("--count N", type=int)], ["--count", "many"])
        self.assertEqual(str(context.exception), "invalid argument: --count many")

    def testValueOutsideChoices(self):
        with self.assertRaises(InvalidArgumentError):
            parse_local([OptionSpec("--level LEVEL", choices=("low", "high"))], ["--level", "mid"])

    def testNegativeNumberAsValue(self):
        _, values, _ = parse_local([OptionSpec("--offset N", type=int)], ["--offset", "-5"])
        self.assertEqual(values, {"offset": -5})


class TestDefaults(TestCase):
    """Declared defaults behave as if typed before the user's tokens."""

    def testDefaultApplied(self):
        _, values, _ = parse_local([OptionSpec("--file FILE", default="a.txt")], [])
        self.assertEqual(values, {"file": "a.txt"})

    def testUserValueOverridesDefault(self):
        _, values, _ = parse_local([OptionSpec("--file FILE", default="a.txt")], ["--file", "b.txt"])
        self.assertEqual(values, {"file": "b.txt"})

    def testTypedDefault(self):
        _, values, _ = parse_local([OptionSpec("--jobs N", type=int, default=4)], [])
        self.assertEqual(values, {"jobs": 4})

    def testNegatableDefault(self):
        specs = [OptionSpec("--[no-]color", default=True)]
        self.assertEqual(parse_local(specs, [])[1], {"color": True})
        self.assertEqual(parse_local(specs, ["--no-color"])[1], {"color": False})

    def testPlainFalseDefault(self):
        _, values, _ = parse_local([OptionSpec("--quiet", default=False)], [])
        self.assertEqual(values, {"quiet": False})

    def testHandlersObserveDefaults(self):
        seen = []
        spec = OptionSpec("--file FILE", default="a.txt", handler=seen.append)
        parse_local([spec], ["--file", "b.txt"])
        self.assertEqual(seen, ["a.txt", "b.txt"])


class TestUnknownSwitchRecovery(TestCase):
    """Unknown switches are stripped one at a time, never aborting the parse."""

    def setUp(self):
        self.specs = [OptionSpec("--file FILE")]

    def testOneUnknownSwitch(self):
        arguments, values, faults = parse_local(self.specs, ["--bogus", "--file", "x.txt"])
        self.assertEqual(values, {"file": "x.txt"})
        self.assertEqual(arguments, [])
        self.assertEqual(len(faults), 1)
        self.assertIsInstance(faults[0], UnknownSwitchError)
        self.assertEqual(faults[0].input, "--bogus")

    def testEachUnknownSwitchCollectedOnce(self):
        arguments, values, faults = parse_local(self.specs, ["--bogus", "a", "--bogus", "--other=1", "--file", "x"])
        self.assertEqual(arguments, ["a"])
        self.assertEqual(values, {"file": "x"})
        self.assertEqual([fault.input for fault in faults], ["--bogus", "--other=1"])

    def testHandlersRunOnceDespiteRestarts(self):
        seen = []
        specs = [OptionSpec("--file FILE", handler=seen.append)]
        parse_local(specs, ["--file", "x", "--bogus", "--worse"])
        self.assertEqual(seen, ["x"])


class TestTwoPasses(TestCase):
    """Global switches first, then the command's own."""

    def setUp(self):
        self.globals = [OptionSpec("-v", "--verbose"), OptionSpec("--config FILE")]
        self.locals = [OptionSpec("-f", "--file FILE")]

    def testGlobalPassLeavesUnknownSwitches(self):
        arguments, proxy = parse_global(self.globals, ["--file", "a", "--verbose", "pos"])
        self.assertEqual(arguments, ["--file", "a", "pos"])
        self.assertEqual(proxy, {"verbose": True})

    def testCommandInheritsGlobalValues(self):
        result = parse(self.globals, self.locals, ["--file", "a", "--verbose", "--config", "c.yml", "pos"])
        self.assertEqual(result.arguments, ["pos"])
        self.assertEqual(dict(result.options), {"verbose": True, "config": "c.yml", "file": "a"})
        self.assertEqual(result.faults, [])

    def testGlobalSwitchAfterTerminatorIsPositional(self):
        result = parse(self.globals, self.locals, ["--", "--verbose"])
        self.assertEqual(result.arguments, ["--verbose"])
        self.assertNotIn("verbose", result.options)

    def testUnknownToBothIsReported(self):
        result = parse(self.globals, self.locals, ["--bogus", "-v"])
        self.assertTrue(result.options.verbose)
        self.assertEqual([fault.input for fault in result.faults], ["--bogus"])


if __name__ == "__main__":
    unittest.main()
