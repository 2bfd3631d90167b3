"""
Converters module behavioral tests.

Scope
- Validate the built-in converter table (arrays, first-value forms, files).
- Validate converter resolution (callables, built-ins, context methods).
- Validate automatic conversion planned from target types.

Conventions
- Test method names follow CamelCase per project convention.
- File converters run against a temporary directory.
"""
import os
import os.path
import pathlib
import tempfile
import unittest
from collections.abc import Sequence, Set
from enum import Enum
from typing import Any
from unittest import TestCase

from nuargs.converters import BUILTINS, resolve, automatic
from nuargs.faults import FileDoesNotExistError, UnknownConverterError


class TestBuiltins(TestCase):
    """Behavioral tests for the built-in converter table."""

    def testTableIsComplete(self):
        self.assertEqual(set(BUILTINS), {
            "auto", "file", "files", "file_verify_path", "files_verify_paths",
            "int32_array", "int64_array", "double_array", "string_array",
            "first_int32", "first_int64", "first_double", "first_string", "first_bool",
        })

    def testTableIsReadOnly(self):
        with self.assertRaises(TypeError):
            BUILTINS["mine"] = len

    def testStringForms(self):
        self.assertEqual(BUILTINS["auto"](["a", "b"]), ["a", "b"])
        self.assertEqual(BUILTINS["string_array"](("a",)), ["a"])

    def testArrays(self):
        self.assertEqual(BUILTINS["int32_array"](["1", "-2"]), [1, -2])
        self.assertEqual(BUILTINS["int64_array"](["9000000000"]), [9000000000])
        self.assertEqual(BUILTINS["double_array"](["1.5", "2"]), [1.5, 2.0])

    def testIntegerRanges(self):
        self.assertEqual(BUILTINS["first_int32"](["2147483647"]), 2147483647)
        with self.assertRaises(OverflowError):
            BUILTINS["first_int32"](["2147483648"])
        with self.assertRaises(OverflowError):
            BUILTINS["int64_array"](["9223372036854775808"])

    def testFirstForms(self):
        self.assertEqual(BUILTINS["first_int64"](["7", "8"]), 7)
        self.assertEqual(BUILTINS["first_double"](["0.25"]), 0.25)
        self.assertEqual(BUILTINS["first_string"](["x", "y"]), "x")
        self.assertIs(BUILTINS["first_bool"](["TRUE"]), True)
        self.assertIs(BUILTINS["first_bool"](["false"]), False)
        for name in ("first_int32", "first_int64", "first_double", "first_string", "first_bool"):
            self.assertIsNone(BUILTINS[name]([]))

    def testMalformedValues(self):
        with self.assertRaises(ValueError):
            BUILTINS["first_int32"](["abc"])
        with self.assertRaises(ValueError):
            BUILTINS["first_bool"](["yes"])
        with self.assertRaises(ValueError):
            BUILTINS["double_array"](["x"])


class TestFileConverters(TestCase):
    """Behavioral tests for the path converters."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.directory.name, "present.txt")
        with open(self.path, "w") as file:
            file.write("x")
        self.missing = os.path.join(self.directory.name, "missing.txt")

    def tearDown(self):
        self.directory.cleanup()

    def testFileIsAbsolute(self):
        self.assertEqual(BUILTINS["file"](["a.txt", "b.txt"]), os.path.abspath("a.txt"))
        self.assertEqual(BUILTINS["files"](["a.txt", "b.txt"]), [os.path.abspath("a.txt"), os.path.abspath("b.txt")])

    def testVerifyPath(self):
        self.assertEqual(BUILTINS["file_verify_path"]([self.path]), os.path.abspath(self.path))

    def testVerifyPathNeedsExactlyOneValue(self):
        self.assertIsNone(BUILTINS["file_verify_path"]([]))
        self.assertIsNone(BUILTINS["file_verify_path"]([self.path, self.path]))

    def testVerifyPathMissing(self):
        with self.assertRaises(FileDoesNotExistError) as context:
            BUILTINS["file_verify_path"]([self.missing])
        self.assertEqual(context.exception.value, self.missing)

    def testVerifyPathRejectsDirectories(self):
        with self.assertRaises(FileDoesNotExistError):
            BUILTINS["file_verify_path"]([self.directory.name])

    def testVerifyPathsNamesFirstMissing(self):
        with self.assertRaises(FileDoesNotExistError) as context:
            BUILTINS["files_verify_paths"]([self.path, self.missing, "other.txt"])
        self.assertEqual(context.exception.value, self.missing)
        self.assertEqual(BUILTINS["files_verify_paths"]([self.path]), [os.path.abspath(self.path)])


class TestResolve(TestCase):
    """Behavioral tests for converter resolution."""

    def testCallableIsKept(self):
        self.assertIs(resolve(len), len)

    def testBuiltinByName(self):
        self.assertIs(resolve("first_int32"), BUILTINS["first_int32"])

    def testBuiltinsWinOverContext(self):
        class Context:
            @staticmethod
            def files(values):
                return "shadowed"

        self.assertIs(resolve("files", Context()), BUILTINS["files"])

    def testContextMethod(self):
        class Context:
            def shout(self, values):
                return [value.upper() for value in values]

        self.assertEqual(resolve("shout", Context())(["a"]), ["A"])

    def testUnknownName(self):
        with self.assertRaises(UnknownConverterError) as context:
            resolve("nope", object())
        self.assertEqual(context.exception.value, "nope")

    def testNonCallableAttribute(self):
        class Context:
            shout = "loud"

        with self.assertRaises(UnknownConverterError):
            resolve("shout", Context())

    def testWrongReferenceType(self):
        with self.assertRaises(TypeError):
            resolve(42)


class Color(Enum):
    RED = "red"
    BLUE = "blue"


class TestAutomatic(TestCase):
    """Behavioral tests for automatic conversion plans."""

    def testRawStrings(self):
        for annotation in (object, Any):
            self.assertEqual(automatic(annotation)(["a", "b"]), ["a", "b"])

    def testScalars(self):
        self.assertEqual(automatic(int)(["42", "7"]), 42)
        self.assertEqual(automatic(float)(["0.5"]), 0.5)
        self.assertEqual(automatic(str)(["x"]), "x")
        self.assertIs(automatic(bool)(["True"]), True)
        self.assertEqual(automatic(pathlib.Path)(["a/b"]), pathlib.Path("a/b"))
        self.assertIs(automatic(Color)(["blue"]), Color.BLUE)

    def testEmptyScalarIsNone(self):
        self.assertIsNone(automatic(int)([]))

    def testOptional(self):
        self.assertEqual(automatic(int | None)(["3"]), 3)
        self.assertIsNone(automatic(int | None)([]))

    def testStringContainers(self):
        self.assertEqual(automatic(list[str])(["1", "2"]), ["1", "2"])
        self.assertEqual(automatic(list)(["1", "2"]), ["1", "2"])
        self.assertEqual(automatic(tuple[str, ...])(["1", "2"]), ("1", "2"))
        self.assertEqual(automatic(Sequence[str])(["1"]), ["1"])

    def testConvertedContainers(self):
        self.assertEqual(automatic(list[int])(["1", "2"]), [1, 2])
        self.assertEqual(automatic(tuple[float, ...])(["1"]), (1.0,))
        self.assertEqual(automatic(set[int])(["1", "1", "2"]), {1, 2})
        self.assertEqual(automatic(frozenset[str])(["a"]), frozenset({"a"}))
        self.assertEqual(automatic(Set[int])(["1"]), frozenset({1}))
        self.assertEqual(automatic(list[int] | None)(["5"]), [5])

    def testMalformedElement(self):
        with self.assertRaises(ValueError):
            automatic(list[int])(["1", "x"])

    def testUnsupportedShapes(self):
        for annotation in (tuple[int, int], int | str, list[list[int]]):
            with self.assertRaises(TypeError):
                automatic(annotation)

    def testPlansAreCached(self):
        self.assertIs(automatic(list[int]), automatic(list[int]))


if __name__ == "__main__":
    unittest.main()
