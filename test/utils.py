"""
Utils module behavioral tests (sentinel, renaming, mirrored properties).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from helmsman.utils import IntrospectiveType, Unset, UnsetType, coalesce, rename


class TestUnset(TestCase):
    """The "not provided" sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestRename(TestCase):
    """Stable names on generated callables."""

    def testDirectForm(self):
        function = rename(lambda: None, "handler")
        self.assertEqual(function.__name__, "handler")
        self.assertEqual(function.__qualname__, "handler")

    def testDecoratorForm(self):
        @rename("handler")
        def function():
            pass

        self.assertEqual(function.__name__, "handler")

    def testRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename(42, "x")


class TestIntrospectiveType(TestCase):
    """Mirrored fields and the frozen state."""

    def setUp(self):
        class SampleRecord(metaclass=IntrospectiveType):
            __introspectable__ = ("name", "tags")
            __writable__ = ("name",)

            def __init__(self, name, tags):
                self._frozen = False
                self._name = name
                self._tags = tags

        self.Sample = SampleRecord

    def testTypename(self):
        self.assertEqual(self.Sample.__typename__, "sample-record")

    def testRepr(self):
        self.assertEqual(repr(self.Sample("a", ["x"])), "sample-record(name='a', tags=['x'])")

    def testContainersAreCopied(self):
        sample = self.Sample("a", ["x"])
        sample.tags.append("y")
        self.assertEqual(sample.tags, ["x"])

    def testReadOnlyField(self):
        with self.assertRaises(AttributeError):
            self.Sample("a", []).tags = ["x"]

    def testWritableUntilFrozen(self):
        sample = self.Sample("a", [])
        sample.name = "b"
        self.assertEqual(sample.name, "b")
        sample._frozen = True
        with self.assertRaises(AttributeError):
            sample.name = "c"


if __name__ == "__main__":
    unittest.main()
