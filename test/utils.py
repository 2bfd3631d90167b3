"""
Utilities module behavioral tests.

Scope
- Validate the Unset sentinel (singleton, falsey, sealed, union-friendly).
- Validate coalesce, rename (function and decorator forms) and mirror views.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from types import MappingProxyType
from unittest import TestCase

from nuargs.utils import *


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testSealed(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType):
                pass

    def testUnionWithTypes(self):
        self.assertTrue(isinstance("x", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(1, str | Unset))


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce."""

    def testUnsetIsReplaced(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testFalseyValuesArePreserved(self):
        for value in (None, 0, "", []):
            self.assertIs(coalesce(value, "fallback"), value)

    def testDefaultIsNone(self):
        self.assertIsNone(coalesce(Unset))


class TestRename(TestCase):
    """Behavioral tests for rename in both forms."""

    def testFunctionForm(self):
        def work():
            pass

        self.assertIs(rename(work, "job"), work)
        self.assertEqual(work.__name__, "job")
        self.assertEqual(work.__qualname__, "job")

    def testDecoratorForm(self):
        @rename("job")
        def work():
            pass

        self.assertEqual(work.__name__, "job")

    def testBuiltinRejected(self):
        with self.assertRaises(TypeError):
            rename(len, "size")

    def testWrongArity(self):
        with self.assertRaises(TypeError):
            rename()

    def testNonStringName(self):
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)


class TestMirror(TestCase):
    """Behavioral tests for mirror read-only views."""

    def setUp(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")
            keys = mirror("keys")
            count = mirror("count")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._keys = {"x"}
                self._count = 3

        self.holder = Holder()

    def testSequenceBecomesTuple(self):
        self.assertEqual(self.holder.items, (1, 2))

    def testMappingBecomesProxy(self):
        self.assertIsInstance(self.holder.table, MappingProxyType)
        with self.assertRaises(TypeError):
            self.holder.table["b"] = 2

    def testSetBecomesFrozenset(self):
        self.assertEqual(self.holder.keys, frozenset({"x"}))

    def testScalarsAreReturnedAsIs(self):
        self.assertEqual(self.holder.count, 3)

    def testStringsAreNotSplit(self):
        self.holder._items = "ab"
        self.assertEqual(self.holder.items, "ab")

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.holder.items = ()


if __name__ == "__main__":
    unittest.main()
