"""
Utils module behavioral tests (sentinel, coalesce, rename, mirror, ordinal).

Scope
- Validate the Unset sentinel: singleton, falsey, sealed, copy-stable, unions.
- Validate coalesce() keeps legitimate falsey values.
- Validate rename() in its direct and decorator forms.
- Validate mirror() exposes frozen snapshots of containers.
- Validate ordinal() words and suffixes.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from types import MappingProxyType
from unittest import TestCase

from argonaut.utils import Unset, UnsetType, coalesce, rename, mirror, ordinal


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testUnsetIsFalsey(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testUnsetRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetSurvivesCopies(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testUnsetInUnionChecks(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce()."""

    def testCoalesceReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testCoalesceDefaultsToNone(self):
        self.assertIsNone(coalesce(Unset))

    def testCoalescePreservesFalseyValues(self):
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertEqual(coalesce(value, "fallback"), value)


class TestRename(TestCase):
    """Behavioral tests for rename()."""

    def testRenameDirect(self):
        def function():
            pass

        self.assertIs(rename(function, "other"), function)
        self.assertEqual(function.__name__, "other")
        self.assertEqual(function.__qualname__, "other")

    def testRenameDecorator(self):
        @rename("other")
        def function():
            pass

        self.assertEqual(function.__name__, "other")

    def testRenameRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename(1, "other")

    def testRenameRejectsBadArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """Behavioral tests for mirror() properties."""

    class Holder:
        items = mirror("items")
        table = mirror("table")
        tags = mirror("tags")
        label = mirror("label")

        def __init__(self):
            self._items = [1, 2]
            self._table = {"a": 1}
            self._tags = {"x"}
            self._label = "name"

    def testMirrorFreezesContainers(self):
        holder = self.Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.tags, frozenset({"x"}))
        self.assertEqual(holder.label, "name")

    def testMirrorIsReadOnly(self):
        holder = self.Holder()
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testMirrorRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(1)


class TestOrdinal(TestCase):
    """Behavioral tests for ordinal()."""

    def testOrdinalWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testOrdinalSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(13), "13th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(111), "111th")
        self.assertEqual(ordinal(104), "104th")

    def testOrdinalRejectsNonInteger(self):
        with self.assertRaises(TypeError):
            ordinal("1")


if __name__ == "__main__":
    unittest.main()
