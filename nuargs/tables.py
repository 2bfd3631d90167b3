"""
nuargs descriptor tables.

A Schema is the read-only form of the option and command enumerations plus the
schema-level settings. It is built once (when a Program subclass is created)
and shared by every parse afterwards, so everything it exposes is an immutable
view.

Tables
- options:  identifier → Option
- commands: identifier → Command
- names:    option name (no dashes) → identifier
- routes:   command name → identifier

Settings
- default:  command identifier used when the first token is not a command.
            Unset means the schema carries no such configuration; None means
            it was configured without a default. The engine reports the two
            cases with different faults.
- unix:     enables unix-style grouping of single-dash short flags.
- name/version/about/sections: identity and help metadata.
"""
import os.path
import sys
from collections.abc import Mapping
from enum import EnumType

from .arguments import Option, Command
from .faults import NameCollisionError
from .utils import *


def _collect(enumeration, spec, /):
    """
    Internal: map the members of an enumeration whose value is a `spec` instance.
    """
    if not isinstance(enumeration, EnumType):
        raise TypeError(f"schema {spec.__typename__}s must be declared on an enumeration")
    return {member: member.value for member in enumeration if isinstance(member.value, spec)}


class Schema:
    """
    Immutable descriptor tables for one option enumeration and one command
    enumeration.

    Raises
    - NameCollisionError: an option name or a command name is declared twice.
    - TypeError: the enumerations are not enumerations, a command requires an
      option from another enumeration, or the default is not a command of this
      schema.
    - TypeError / ValueError: malformed settings (non-string or empty texts).
    """

    options = mirror("options")
    commands = mirror("commands")
    names = mirror("names")
    routes = mirror("routes")
    sections = mirror("sections")

    def __init__(
            self,
            options,
            commands,
            /,
            *,
            default=Unset,
            unix=False,
            name=Unset,
            version=Unset,
            about=Unset,
            sections=Unset,
    ):
        self._options = _collect(options, Option)
        self._commands = _collect(commands, Command)
        self._names = {}
        self._routes = {}

        for identifier, option in self._options.items():
            for alias in option.names:
                if alias in self._names:
                    raise NameCollisionError(option=alias, value=alias, identifier=identifier)
                self._names[alias] = identifier

        for identifier, command in self._commands.items():
            if command.name in self._routes:
                raise NameCollisionError(command=command.name, value=command.name, identifier=identifier)
            for required in command.required:
                if required not in self._options:
                    raise TypeError(f"command {command.name!r} requires an option outside of the schema")
            self._routes[command.name] = identifier

        if default is not Unset and default is not None and default not in self._commands:
            raise TypeError("schema 'default' must be a command of the schema")
        self.default = default
        self.unix = bool(unix)

        for label, text in (("name", name), ("version", version), ("about", about)):
            if not isinstance(text, str | Unset):
                raise TypeError(f"schema {label!r} must be a string")
            if isinstance(text, str) and not text.strip():
                raise ValueError(f"schema {label!r} cannot be empty")

        self.name = name
        self.version = coalesce(version, "1.0.0")
        self.about = coalesce(about)

        if not isinstance(sections := coalesce(sections, {}), Mapping):
            raise TypeError("schema 'sections' must be a mapping of headers to texts")
        for header, text in sections.items():
            if not isinstance(header, str) or not isinstance(text, str):
                raise TypeError("schema 'sections' headers and texts must be strings")
            if not header.strip():
                raise ValueError("schema 'sections' headers cannot be empty")
        self._sections = dict(sections)

    @property
    def prog(self):
        """
        Program name: explicit name, then __main__.__prog__, then argv[0].
        """
        if self.name is not Unset:
            return self.name
        main = __import__("__main__")
        return getattr(main, "__prog__", None) or os.path.basename(sys.argv[0]) or "nuargs"

    def lookup(self, name, /):
        """
        Return (identifier, Option) for an option name, or None when unknown.
        """
        try:
            identifier = self._names[name]
        except KeyError:
            return None
        return identifier, self._options[identifier]

    def route(self, name, /):
        """
        Return (identifier, Command) for a command name, or None when unknown.
        """
        try:
            identifier = self._routes[name]
        except KeyError:
            return None
        return identifier, self._commands[identifier]

    def __repr__(self):
        return "schema(options=%r, commands=%r, default=%r, unix=%r)" % (
            tuple(self._names), tuple(self._routes), self.default, self.unix
        )


__all__ = (
    "Schema",
)
