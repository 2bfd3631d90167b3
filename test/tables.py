"""
Tables module behavioral tests (Schema).

Scope
- Validate the lookup tables built from the option and command enumerations.
- Validate name collisions, cross-enumeration references and default checks.
- Validate schema-level settings and their defaults.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from enum import Enum
from types import MappingProxyType
from unittest import TestCase

from nuargs import Option, Command, OptionKind
from nuargs.faults import NameCollisionError
from nuargs.tables import Schema
from nuargs.utils import Unset


class Opt(Enum):
    NONE = 0
    INPUT = Option("a", "input", kind=OptionKind.SINGLE_VALUE)
    VERBOSE = Option("v", kind=OptionKind.FLAG)


class Cmd(Enum):
    NONE = 0
    RUN = Command("run", Opt.INPUT)
    LIST = Command("list")


class Foreign(Enum):
    X = Option("x", kind=OptionKind.FLAG)


class TestSchemaTables(TestCase):
    """Behavioral tests for the lookup tables."""

    def setUp(self):
        self.schema = Schema(Opt, Cmd)

    def testSpecMembersOnly(self):
        self.assertEqual(set(self.schema.options), {Opt.INPUT, Opt.VERBOSE})
        self.assertEqual(set(self.schema.commands), {Cmd.RUN, Cmd.LIST})

    def testNamesCoverAliases(self):
        self.assertEqual(dict(self.schema.names), {"a": Opt.INPUT, "input": Opt.INPUT, "v": Opt.VERBOSE})

    def testLookup(self):
        self.assertEqual(self.schema.lookup("input"), (Opt.INPUT, Opt.INPUT.value))
        self.assertIsNone(self.schema.lookup("zzz"))

    def testRoute(self):
        self.assertEqual(self.schema.route("run"), (Cmd.RUN, Cmd.RUN.value))
        self.assertIsNone(self.schema.route("RUN"))

    def testTablesAreReadOnly(self):
        self.assertIsInstance(self.schema.names, MappingProxyType)
        with self.assertRaises(TypeError):
            self.schema.routes["walk"] = Cmd.RUN

    def testOptionNameCollision(self):
        class Clash(Enum):
            A = Option("a", kind=OptionKind.FLAG)
            B = Option("b", "a", kind=OptionKind.FLAG)

        with self.assertRaises(NameCollisionError) as context:
            Schema(Clash, Cmd)
        self.assertEqual(context.exception.value, "a")

    def testCommandNameCollision(self):
        class Clash(Enum):
            ONE = Command("go")
            TWO = Command("go")

        with self.assertRaises(NameCollisionError):
            Schema(Opt, Clash)

    def testForeignRequiredOptionRejected(self):
        class Stray(Enum):
            GO = Command("go", Foreign.X)

        with self.assertRaises(TypeError):
            Schema(Opt, Stray)

    def testEnumerationsRequired(self):
        with self.assertRaises(TypeError):
            Schema(dict, Cmd)


class TestSchemaSettings(TestCase):
    """Behavioral tests for schema-level settings."""

    def testDefaults(self):
        schema = Schema(Opt, Cmd)
        self.assertIs(schema.default, Unset)
        self.assertFalse(schema.unix)
        self.assertEqual(schema.version, "1.0.0")
        self.assertIsNone(schema.about)
        self.assertEqual(dict(schema.sections), {})

    def testDefaultCommand(self):
        self.assertIs(Schema(Opt, Cmd, default=Cmd.RUN).default, Cmd.RUN)
        self.assertIsNone(Schema(Opt, Cmd, default=None).default)

    def testDefaultMustBeCommand(self):
        with self.assertRaises(TypeError):
            Schema(Opt, Cmd, default=Opt.INPUT)
        with self.assertRaises(TypeError):
            Schema(Opt, Cmd, default=Cmd.NONE)

    def testExplicitName(self):
        self.assertEqual(Schema(Opt, Cmd, name="tool").prog, "tool")

    def testNameFallback(self):
        self.assertTrue(Schema(Opt, Cmd).prog)

    def testTextSettingsValidated(self):
        with self.assertRaises(TypeError):
            Schema(Opt, Cmd, version=2)
        with self.assertRaises(ValueError):
            Schema(Opt, Cmd, about="  ")

    def testSections(self):
        schema = Schema(Opt, Cmd, sections={"notes": "Read the docs."})
        self.assertEqual(dict(schema.sections), {"notes": "Read the docs."})
        with self.assertRaises(TypeError):
            Schema(Opt, Cmd, sections=["notes"])
        with self.assertRaises(ValueError):
            Schema(Opt, Cmd, sections={" ": "x"})


if __name__ == "__main__":
    unittest.main()
