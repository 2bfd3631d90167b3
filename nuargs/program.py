"""
nuargs programs: declarative binding contexts.

A Program subclass is configured with class keywords and declares its binding
targets as annotated class attributes:

    class Tool(Program, options=Opt, commands=Cmd, default=Cmd.RUN, unix=True,
               name="tool", version="2.1.0", about="Process files."):
        count: int | None = Target(Opt.COUNT)
        files: list[str] = Target(Opt.FILES, "files_verify_paths")
        verbose: bool = Target(Opt.VERBOSE)

    tool = Tool().parse_or_exit()
    if tool.command is Cmd.RUN:
        ...

Class keywords
- options, commands: the option and command enumerations (both or neither).
- default: command selected when the first token is not a command; Unset
  (omitted) and None select different failure kinds.
- unix: unix-style grouping of single-dash short flags.
- name, version, about, sections: identity and help metadata.
- colorful, fancy: rendering flags for help, version and faults.

Keywords are inherited: a subclass only states what it changes. The schema,
the binding table and the parser are built once, when the class is created,
so schema errors surface at import time.

Entry points
- parse(prompt): raise the first ParsingException met.
- parse_or_exit(prompt, status): print the fault and exit instead.
- attempt(prompt): return an Outcome, never raising a parsing fault.
- invoke(program, prompt): run a Program class or instance from the shell.
"""
import shlex
import sys
from collections.abc import Iterable
from enum import Enum
from types import MappingProxyType

from rich.console import Console

from .bindings import Target, BindingTable
from .engine import Parser
from .faults import *
from .manual import Manual
from .tables import Schema
from .utils import *

SETTINGS = frozenset((
    "options",
    "commands",
    "default",
    "unix",
    "name",
    "version",
    "about",
    "sections",
    "colorful",
    "fancy",
))


class ProgramType(type):
    """
    Metaclass that compiles a Program subclass into its parse machinery.

    Responsibilities
    - Validate and inherit the class keywords (see SETTINGS).
    - Build the Schema, the BindingTable and the Parser once per class.
    - Reject targets that would shadow an attribute of a base class and
      targets bound to options outside the schema.
    """

    def __new__(cls, name, bases, namespace, /, **options):
        if unknown := sorted(options.keys() - SETTINGS):
            raise TypeError(f"program got an unexpected keyword argument {unknown[0]!r}")

        self = super().__new__(cls, name, bases, namespace)

        for attribute, object in namespace.items():
            if not isinstance(object, Target):
                continue
            for base in self.__mro__[1:]:
                if attribute in vars(base) and not isinstance(vars(base)[attribute], Target):
                    raise TypeError(f"target {attribute!r} shadows an attribute of {base.__name__!r}")

        settings = dict(getattr(self, "__settings__", {})) | options
        self.__settings__ = MappingProxyType(settings)

        if ("options" in settings) != ("commands" in settings):
            raise TypeError("program 'options' and 'commands' must be given together")

        if "options" not in settings:
            self.__schema__ = None
            self.__parser__ = None
            return self

        schema = Schema(
            settings["options"],
            settings["commands"],
            default=settings.get("default", Unset),
            unix=settings.get("unix", False),
            name=settings.get("name", Unset),
            version=settings.get("version", Unset),
            about=settings.get("about", Unset),
            sections=settings.get("sections", Unset),
        )
        bindings = BindingTable.collect(self)
        for target in bindings:
            if target.option not in schema.options:
                raise TypeError(f"target {target.name!r} is bound to an option outside of the schema")

        manual = Manual(schema, colorful=settings.get("colorful", False), fancy=settings.get("fancy", False))
        self.__schema__ = schema
        self.__parser__ = Parser(schema, bindings, manual=manual)
        return self


def _tokenize(prompt, /):
    """
    Normalize a prompt into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string, split with shlex.split.
    - Iterable[str]: pre-tokenized sequence, kept as given.
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("prompt must be a string or an iterable of strings")
        return tokens
    raise TypeError("prompt must be a string or an iterable of strings")


class Program(metaclass=ProgramType):
    """
    Base class of every binding context.

    After a successful parse, `command` holds the selected command identifier
    (None on the help and version paths) and `used` the consumed option
    identifiers; the targets hold the converted values.
    """

    command = None
    used = ()

    def __init__(self, *, console=Unset):
        if console is not Unset and not isinstance(console, Console):
            raise TypeError("program 'console' must be a rich console")
        self._console = coalesce(console, Console())
        self._errors = coalesce(console, Console(stderr=True))

    @property
    def _parser(self):
        if (parser := type(self).__parser__) is None:
            raise TypeError(f"{type(self).__name__!r} declares no options and commands")
        return parser

    @property
    def schema(self):
        """
        The Schema of this program (shared by every instance).
        """
        return self._parser.schema

    def __rich_repr__(self):
        yield "command", self.command
        for target in self._parser.bindings:
            yield target.name, target.__get__(self)

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__name__, ", ".join("%s=%r" % field for field in self.__rich_repr__())
        )

    def parse(self, prompt=Unset):
        """
        Parse `prompt` into this context and return it.

        Raises
        - ParsingException: the first failure met (see nuargs.faults).
        - TypeError: when the prompt is not a string or an iterable of strings.
        """
        parser = self._parser
        self.command = None
        self.used = ()
        state = parser.parse(self, _tokenize(prompt), console=self._console)
        self.command = state.command
        self.used = tuple(state.used)
        return self

    def parse_or_exit(self, prompt=Unset, /, status=1):
        """
        Like parse(), but a fault is printed to the error console and the
        process exits with `status`.
        """
        try:
            return self.parse(prompt)
        except ParsingException as fault:
            settings = type(self).__settings__
            trigger(
                fault,
                shell=True,
                status=status,
                console=self._errors,
                program=self.schema.prog,
                colorful=settings.get("colorful", False),
                fancy=settings.get("fancy", False),
            )

    def attempt(self, prompt=Unset):
        """
        Parse `prompt` and return an Outcome(command, used, fault, output).

        Parsing faults are returned in Outcome.fault; the help and version
        text is captured in Outcome.output instead of being printed.
        """
        parser = self._parser
        self.command = None
        self.used = ()
        outcome = parser.attempt(self, _tokenize(prompt))
        if outcome.ok:
            self.command = outcome.command
            self.used = outcome.used
        return outcome

    def print_help(self, command=None):
        """
        Print the full help, or the help of `command` (identifier or name).

        Raises
        - UnknownCommandError: when `command` is not a command of the schema.
        """
        schema = self.schema
        if isinstance(command, str):
            if (route := schema.route(command)) is None:
                raise UnknownCommandError(command=command)
            command = route[0]
        elif command is not None and command not in schema.commands:
            raise UnknownCommandError(command=command.name if isinstance(command, Enum) else command)
        self._parser.manual.help(self._console, command)

    def print_version(self):
        self._parser.manual.version(self._console)


def invoke(program, prompt=Unset, /):
    """
    Convenience runner for programs.

    Parameters
    - program: a Program subclass (instantiated with defaults) or instance.
    - prompt: Unset (sys.argv[1:]), a shell-like string, or an iterable of strings.

    Behavior
    - Parses with parse_or_exit(): a fault is printed and the process exits.

    Returns
    - the parsed Program instance.
    """
    if isinstance(program, type) and issubclass(program, Program):
        program = program()
    if not isinstance(program, Program):
        raise TypeError("invoke() first argument must be a program or a program class")
    return program.parse_or_exit(prompt)


__all__ = (
    "Program",
    "invoke",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ProgramType
