"""
Binder module behavioral tests (typed values from events).

Scope
- Validate initial values per definition kind.
- Validate conversion, counting, collecting and the repeat policies.
- Validate collectors and the Namespace access forms.

Conventions
- Test method names follow CamelCase per project convention.
- Events are fed through a real Parse unless a test targets bind() itself.
"""

from __future__ import annotations

import unittest
from collections import deque
from unittest import TestCase

from argonaut import (
    Binder,
    Namespace,
    Collector,
    collector,
    Parse,
    Positional,
    Trail,
    Switch,
    Count,
    Option,
    Collect,
    default_help,
    events,
)
from argonaut.definitions import compile
from argonaut.faults import OptionGivenTwiceError, InvalidValueError, ArgumentNameClashError


def bind(definitions, tokens, **options):
    definitions = compile(definitions)
    binder = Binder(definitions, **options)
    for event in Parse(definitions, tokens):
        binder.bind(event)
    return binder.namespace()


class TestBinderValues(TestCase):
    """Behavioral tests for bound values."""

    def testInitialValues(self):
        namespace = bind([
            Positional("foo", descr="The foo."),
            Trail("files", optional=True),
            Switch("dry-run"),
            Count("verbose", short="v"),
            Option("level", type=int),
            Collect("include", short="i"),
            default_help(),
        ], ["x"])
        self.assertEqual(namespace.asdict(), {
            "foo": "x",
            "files": [],
            "dry-run": False,
            "verbose": 0,
            "level": None,
            "include": [],
        })

    def testConvertedValues(self):
        namespace = bind([
            Positional("count", type=int),
            Trail("ratios", type=float),
            Option("level", type=int),
        ], ["3", "0.5", "1.5", "--level", "7"])
        self.assertEqual(namespace["count"], 3)
        self.assertEqual(namespace["ratios"], [0.5, 1.5])
        self.assertEqual(namespace["level"], 7)

    def testSwitchAndCount(self):
        namespace = bind([Switch("force", short="f"), Count("verbose", short="v")], ["-vfv", "--verbose"])
        self.assertIs(namespace["force"], True)
        self.assertEqual(namespace["verbose"], 3)

    def testCollect(self):
        namespace = bind([Collect("include", short="i", type=int)], ["-i", "1", "--include", "2", "-i", "1"])
        self.assertEqual(namespace["include"], [1, 2, 1])

    def testCollectIntoSet(self):
        namespace = bind([Collect("tag", short="t", factory=set)], ["-t", "a", "-t", "b", "-t", "a"])
        self.assertEqual(namespace["tag"], {"a", "b"})

    def testCollectIntoDeque(self):
        namespace = bind([Collect("tag", factory=deque)], ["--tag", "a", "--tag", "b"])
        self.assertEqual(namespace["tag"], deque(["a", "b"]))

    def testTerminatorIsNotBound(self):
        namespace = bind([Switch(""), Trail(optional=True)], ["--"])
        self.assertNotIn("", namespace)


class TestRepeatPolicy(TestCase):
    """Behavioral tests for repeated single-value options."""

    def testRepeatErrorsByDefault(self):
        with self.assertRaises(OptionGivenTwiceError) as context:
            bind([Option("level", short="l")], ["-l", "1", "--level", "2"])
        self.assertEqual(context.exception.name, "level")

    def testRepeatOverwrite(self):
        namespace = bind([Option("level", short="l")], ["-l", "1", "--level", "2"], repeat="overwrite")
        self.assertEqual(namespace["level"], "2")

    def testRepeatPolicyValidated(self):
        with self.assertRaises(ValueError):
            Binder(compile([]), repeat="ignore")

    def testRepeatProperty(self):
        self.assertEqual(Binder(compile([])).repeat, "error")


class TestBinderFaults(TestCase):
    """Behavioral tests for conversion faults and argument checks."""

    def testInvalidValue(self):
        with self.assertRaises(InvalidValueError) as context:
            bind([Positional("count", type=int)], ["three"])
        self.assertEqual(context.exception.name, "count")
        self.assertEqual(context.exception.value, "three")
        self.assertIn("reason", context.exception.options)

    def testRequiresCompiledDefinitions(self):
        with self.assertRaises(TypeError):
            Binder([Positional("foo")])

    def testRejectsNonEvents(self):
        with self.assertRaises(TypeError):
            Binder(compile([])).bind("foo")

    def testNameClashAcrossKinds(self):
        with self.assertRaises(ArgumentNameClashError) as context:
            Binder(compile([Trail("files"), Switch("files")]))
        self.assertEqual(context.exception.name, "files")
        with self.assertRaises(ArgumentNameClashError):
            Binder(compile([Positional("level"), Option("level")]))
        with self.assertRaises(ArgumentNameClashError):
            Binder(compile([Positional("files"), Trail("files")]))

    def testInterruptNamesDoNotClash(self):
        namespace = bind([Positional("help"), default_help()], ["x"])
        self.assertEqual(namespace["help"], "x")

    def testIgnoresShortCircuitEvents(self):
        binder = Binder(compile([]))
        binder.bind(events.Interrupted("help"))
        binder.bind(events.Delegated("build", "tool build", 0))
        self.assertEqual(len(binder.namespace()), 0)


class TestCollector(TestCase):
    """Behavioral tests for collector adapters."""

    def testSetIsCollector(self):
        target = set()
        self.assertIs(collector(target), target)
        self.assertIsInstance(target, Collector)

    def testListIsAdapted(self):
        target = []
        adapter = collector(target)
        adapter.add(1)
        self.assertEqual(target, [1])
        self.assertIsInstance(adapter, Collector)

    def testUnsupportedTarget(self):
        with self.assertRaises(TypeError):
            collector(())


class TestNamespace(TestCase):
    """Behavioral tests for Namespace access."""

    def testAttributeAccessWithDashes(self):
        namespace = Namespace({"dry-run": True, "level": 2})
        self.assertIs(namespace.dry_run, True)
        self.assertEqual(namespace.level, 2)

    def testMissingAttribute(self):
        with self.assertRaises(AttributeError):
            Namespace().missing  # NOQA: B-018

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            Namespace().level = 1

    def testMappingAccess(self):
        namespace = Namespace({"a": 1})
        self.assertEqual(namespace["a"], 1)
        self.assertEqual(namespace.get("b", 2), 2)
        self.assertEqual(list(namespace), ["a"])
        self.assertIn("a", namespace)

    def testMethodNamesReadAsItems(self):
        namespace = Namespace({"get": 1, "asdict": 2})
        self.assertEqual(namespace["get"], 1)
        self.assertEqual(namespace["asdict"], 2)
        self.assertTrue(callable(namespace.get))

    def testEquality(self):
        self.assertEqual(Namespace({"a": 1}), Namespace({"a": 1}))
        self.assertNotEqual(Namespace({"a": 1}), Namespace({"a": 2}))

    def testRepr(self):
        self.assertEqual(repr(Namespace({"a": 1})), "namespace(a=1)")


if __name__ == "__main__":
    unittest.main()
