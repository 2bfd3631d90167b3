r"""
nuargs argument specifications.

Overview
- OptionKind: closed set of option kinds (FLAG, SINGLE_VALUE, MULTIPLE_VALUES).
- Option: named option metadata, attached as the value of an enum member.
- Command: named command metadata with the ordered sequence of required options
  that may be filled from positional tokens, attached the same way.

Declaring a schema
- Options and commands are declared on two enumerations; the enum members are
  the identifiers the engine reports back, the specs are their values.
  Members whose value is not a spec (such as a zero sentinel) are ignored.

    >>> from enum import Enum
    >>> from nuargs import Option, Command, OptionKind
    >>> class Opt(Enum):
    ...     NONE = 0
    ...     INPUT = Option("a", kind=OptionKind.SINGLE_VALUE, descr="Receive a single value.")
    ...     VALUES = Option("b", kind=OptionKind.MULTIPLE_VALUES, descr="Receive multiple values.")
    ...     VERBOSE = Option("v", "verbose", kind=OptionKind.FLAG)
    ...
    >>> class Cmd(Enum):
    ...     NONE = 0
    ...     RUN = Command("run", Opt.INPUT, Opt.VALUES, descr="Run with an input and values.")

Metadata (sanitized on construction)
- Option
  • names: one or more names without leading dashes, matching
    r"[^\W_](-?[^\W_]+)*" (unicode letters and digits, inner single hyphens).
  • kind: an OptionKind member.
  • descr: help text; defaults to "no help available".
  • default: typed default written to unbound targets after parsing (not converted).
  • metavar: label used by help for valued options; defaults to the first name upper-cased.
- Command
  • name: plain token; 'help' and 'version' are reserved (case-insensitive).
  • required: option members, no repetitions, a MULTIPLE_VALUES option only last.
  • descr: help text; defaults to "no help available".

Validation failures
- TypeError / ValueError for malformed metadata (wrong types, empty strings,
  invalid names, repeated names inside one spec).
- ReservedCommandNameError / MultipleValuesNotLastError (schema faults) for the
  structural rules, raised as soon as the enum body is executed.
"""
import functools
import operator
import re
from enum import Enum, IntEnum

from .faults import ReservedCommandNameError, MultipleValuesNotLastError
from .utils import *

RESERVED = frozenset(("help", "version"))


class OptionKind(IntEnum):
    """
    closed set of option kinds.

    - FLAG: boolean, no associated value.
    - SINGLE_VALUE: exactly one following token.
    - MULTIPLE_VALUES: every following token up to the next known option.
    """
    FLAG = 1
    SINGLE_VALUE = 2
    MULTIPLE_VALUES = 3


class ArgumentType(type):
    """
    Metaclass that turns specs into sealed, introspectable descriptors.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      (mirror) over the sanitized private field.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Derive __typename__ from the class name for messages.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ()) if name not in namespace
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_descr(cls, metadata, /):
    """
    Internal: validate and normalize the 'descr' field shared by all specs.

    - Unset becomes "no help available".
    - Strings are trimmed and must not be empty afterwards.
    """
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr, "no help available")


def _sanitize_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} names must be strings")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
    elif not re.fullmatch(r"[^\W_](-?[^\W_]+)*", name):
        raise ValueError(f"{cls.__typename__} names must be given without dashes (unicodes are allowed)")
    return name


class Option(metaclass=ArgumentType):
    """
    Named option specification (the descriptor behind an option identifier).

    Names are registered without leading dashes: callers type "-x" for the
    single-character name "x" and "--name" for "name". An option may carry
    several names; all of them resolve to the same identifier.
    """

    __introspectable__ = (
        "names",
        "kind",
        "descr",
        "default",
        "metavar",
    )

    def __init__(self, *names, kind, descr=Unset, default=None, metavar=Unset):
        metadata = {
            "names": names,
            "kind": kind,
            "descr": descr,
            "default": default,
            "metavar": metavar,
        }
        _sanitize_descr(type(self), metadata)

        if not names:
            raise TypeError(f"{type(self).__typename__} must specify at least one name")
        sanitized = []
        for name in names:
            if (name := _sanitize_name(type(self), name)) in sanitized:
                raise ValueError(f"{type(self).__typename__} names cannot contain duplicates")
            sanitized.append(name)
        metadata["names"] = tuple(sanitized)

        if not isinstance(kind, OptionKind):
            raise TypeError(f"{type(self).__typename__} 'kind' must be an option kind")

        if not isinstance(metavar := metadata["metavar"], str | Unset):
            raise TypeError(f"{type(self).__typename__} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ValueError(f"{type(self).__typename__} 'metavar' cannot be empty")
        metadata["metavar"] = coalesce(metavar, sanitized[0].upper())

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def default(self):
        # Not mirrored: defaults are written to targets as declared, containers included.
        return self._default

    @property
    def name(self):
        """
        Primary name (the first one declared), used in messages.
        """
        return self._names[0]

    def spellings(self):
        """
        Yield the names as typed on the command line ("-x" / "--name").
        """
        for name in self._names:
            yield ("-" if len(name) == 1 else "--") + name


class Command(metaclass=ArgumentType):
    """
    Command specification (the descriptor behind a command identifier).

    The required sequence lists option identifiers (enum members holding an
    Option) that are filled from leftover positional tokens, in declaration
    order, when they were not given explicitly.
    """

    __introspectable__ = (
        "name",
        "required",
        "descr",
    )

    def __init__(self, name, /, *required, descr=Unset):
        metadata = {
            "name": name,
            "required": required,
            "descr": descr,
        }
        _sanitize_descr(type(self), metadata)

        name = metadata["name"] = _sanitize_name(type(self), name)
        if name.lower() in RESERVED:
            raise ReservedCommandNameError(command=name)

        for index, identifier in enumerate(required):
            if not isinstance(identifier, Enum) or not isinstance(identifier.value, Option):
                raise TypeError(f"{type(self).__typename__} required options must be option members")
            if identifier in required[:index]:
                raise ValueError(f"{type(self).__typename__} required options cannot contain duplicates")
            if identifier.value.kind is OptionKind.MULTIPLE_VALUES and index != len(required) - 1:
                raise MultipleValuesNotLastError(option=identifier.value.name, identifier=identifier)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)


__all__ = (
    "OptionKind",
    "Option",
    "Command",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
