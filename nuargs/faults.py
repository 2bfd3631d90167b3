"""
nuargs faults (parse-time and schema-time errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure kind the
  engine can surface. Codes are grouped by domain so logs and searches stay
  predictable.
- ParsingException: base type that carries a message plus structured context
  (option name, command name, offending value) and knows how to render itself.
- SchemaError: the branch of the taxonomy raised while a schema is being built.
- trigger(): central entry point to surface a fault (raise it, or print it and exit).

Context carried by every fault (all optional)
- option: the external option name (without dashes) the fault is about.
- command: the external command name the fault is about.
- value: the offending raw value (a token, a path, a converter name, leftovers).
- identifier: the enum member behind the option/command, when known.

Integration
- The engine raises faults directly; nothing is collected or deferred, the first
  failure aborts the parse pass.
- Program.parse_or_exit() calls trigger(fault, shell=True, status=...), which
  prints the fault through rich and terminates the process.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND, NO_COMMAND_GIVEN, NO_DEFAULT_COMMAND
    - options (1111x)
      • UNKNOWN_OPTION, DUPLICATE_OPTION, NO_VALUE_GIVEN
    - positionals (1112x)
      • TOO_MANY_POSITIONALS
    - conversion (1113x)
      • INVALID_OPTION_VALUE, FILE_DOES_NOT_EXIST, UNKNOWN_CONVERTER
    - schema (1114x)
      • RESERVED_COMMAND_NAME, MULTIPLE_VALUES_NOT_LAST, NAME_COLLISION
    - custom (1119x)
      • CUSTOM_MESSAGE

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- routing errors ---
    UNKNOWN_COMMAND          = 11101
    NO_COMMAND_GIVEN         = 11102
    NO_DEFAULT_COMMAND       = 11103

    # --- option errors ---
    UNKNOWN_OPTION           = 11111
    DUPLICATE_OPTION         = 11112
    NO_VALUE_GIVEN           = 11113

    # --- positional errors ---
    TOO_MANY_POSITIONALS     = 11121

    # --- conversion errors ---
    INVALID_OPTION_VALUE     = 11131
    FILE_DOES_NOT_EXIST      = 11132
    UNKNOWN_CONVERTER        = 11133

    # --- schema errors ---
    RESERVED_COMMAND_NAME    = 11141
    MULTIPLE_VALUES_NOT_LAST = 11142
    NAME_COLLISION           = 11143

    # --- caller-supplied errors ---
    CUSTOM_MESSAGE           = 11199

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParsingException(Exception):
    """
    base of every fault raised by nuargs.

    subclasses only declare class-level metadata:
    - __code__: the FaultCode of the kind.
    - __title__: short lowercase title used in the rendered header.
    - __message__: %-style template filled from the context when no explicit
      message is given (Unset means a message is mandatory).
    - __hint__: one actionable sentence shown below the message.

    raising ParsingException("...") directly is reserved for caller-supplied
    messages; prefer CustomMessageError, which states the intent.
    """
    __code__ = FaultCode.CUSTOM_MESSAGE
    __title__ = "custom message"
    __message__ = Unset
    __hint__ = "try 'help' to see the available commands and options"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        if message is Unset:
            if type(self).__message__ is Unset:
                raise TypeError(f"{type(self).__name__}() requires a message")
            message = type(self).__message__ % options
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return type(self).__code__

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint", type(self).__hint__)

    @property
    def option(self):
        return self.options.get("option")

    @property
    def command(self):
        return self.options.get("command")

    @property
    def value(self):
        return self.options.get("value")

    @property
    def identifier(self):
        return self.options.get("identifier")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(self.options.get("program", getattr(main, "__prog__", "nuargs")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)
        sys.exit(self.options.get("status", 1))

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownCommandError(ParsingException):
    __code__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"
    __message__ = "unknown command %(command)r"
    __hint__ = "try 'help' to see all available commands"


class NoCommandGivenError(ParsingException):
    __code__ = FaultCode.NO_COMMAND_GIVEN
    __title__ = "no command given"
    __message__ = "no command given"
    __hint__ = "start with one of the commands listed by 'help'"


class NoDefaultCommandError(ParsingException):
    __code__ = FaultCode.NO_DEFAULT_COMMAND
    __title__ = "no default command"
    __message__ = "no command given and no default command set"
    __hint__ = "start with one of the commands listed by 'help'"


class UnknownOptionError(ParsingException):
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"
    __message__ = "unknown option %(option)r"
    __hint__ = "try 'help' to see all available options"


class DuplicateOptionError(ParsingException):
    __code__ = FaultCode.DUPLICATE_OPTION
    __title__ = "duplicate option"
    __message__ = "option %(option)r used twice"
    __hint__ = "keep a single occurrence of the option"


class NoValueGivenError(ParsingException):
    __code__ = FaultCode.NO_VALUE_GIVEN
    __title__ = "missing value"
    __message__ = "no value given to option %(option)r"
    __hint__ = "pass a value after the option, or as a positional argument when the command requires it"


class TooManyPositionalsError(ParsingException):
    __code__ = FaultCode.TOO_MANY_POSITIONALS
    __title__ = "too many positional arguments"
    __message__ = "too many positional arguments"
    __hint__ = "remove the extra values or pass them to an option"


class InvalidOptionValueError(ParsingException):
    __code__ = FaultCode.INVALID_OPTION_VALUE
    __title__ = "invalid value"
    __message__ = "invalid value given to option %(option)r: %(value)r"
    __hint__ = "check the expected type of the option with 'help'"


class FileDoesNotExistError(ParsingException):
    __code__ = FaultCode.FILE_DOES_NOT_EXIST
    __title__ = "file does not exist"
    __message__ = "file does not exist: %(value)r"
    __hint__ = "check the path (relative paths start from the working directory)"


class UnknownConverterError(ParsingException):
    __code__ = FaultCode.UNKNOWN_CONVERTER
    __title__ = "unknown converter"
    __message__ = "unknown converter: %(value)r"
    __hint__ = "use a built-in converter name or define a method with that name on the program"


class CustomMessageError(ParsingException):
    """
    escape hatch for caller-supplied failures (for example raised from a
    custom converter); the message is mandatory and rendered as-is.
    """


class SchemaError(ParsingException):
    """
    base of the faults raised while a schema is declared or its tables are built.

    schema errors are detected eagerly, so a malformed schema fails at import
    time regardless of the input that would be parsed later.
    """
    __hint__ = "fix the schema declaration"


class ReservedCommandNameError(SchemaError):
    __code__ = FaultCode.RESERVED_COMMAND_NAME
    __title__ = "reserved command name"
    __message__ = "reserved command name: %(command)r"
    __hint__ = "'help' and 'version' are built-in commands; pick another name"


class MultipleValuesNotLastError(SchemaError):
    __code__ = FaultCode.MULTIPLE_VALUES_NOT_LAST
    __title__ = "multiple values option not last"
    __message__ = "multiple values option %(option)r is not at the end of the required options"
    __hint__ = "move the multiple values option to the end of the required options"


class NameCollisionError(SchemaError):
    __code__ = FaultCode.NAME_COLLISION
    __title__ = "name collision"
    __message__ = "name %(value)r is used more than once"
    __hint__ = "give every option and every command a unique name"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParsingException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - when shell is false the fault is raised; otherwise it is printed to the
      given console (stderr by default) and the process exits with status.

    typical options
    - shell, status, console, program, fancy, colorful, title, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ParsingException",
    "UnknownCommandError",
    "NoCommandGivenError",
    "NoDefaultCommandError",
    "UnknownOptionError",
    "DuplicateOptionError",
    "NoValueGivenError",
    "TooManyPositionalsError",
    "InvalidOptionValueError",
    "FileDoesNotExistError",
    "UnknownConverterError",
    "CustomMessageError",
    "SchemaError",
    "ReservedCommandNameError",
    "MultipleValuesNotLastError",
    "NameCollisionError",
    "trigger",
)
