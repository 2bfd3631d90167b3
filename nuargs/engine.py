"""
nuargs parse engine.

Overview
- ParseState: the mutable record of one parse pass (selected command, consumed
  options, pending positional tokens, binding context).
- Parser: single left-to-right pass over the tokens, driven by a Schema and a
  BindingTable that were built once beforehand.
- Outcome: result value of Parser.attempt(), carrying the fault (if any) and the
  text emitted while parsing instead of raising.

Pass
1. empty input: full help, no command.
2. "help" [COMMAND]: help for the command when it is known, full help otherwise.
3. "version": the version line.
4. command resolution: a leading command name is consumed, otherwise the
   default command (if any) is selected and the first token is scanned.
5. main scan: options are consumed and bound, other tokens are buffered.
6. positional filling: required options of the command that were not given
   explicitly take buffered tokens, in declaration order.
7. leftovers fail with TooManyPositionalsError.
8. defaults of unconsumed options are written to targets still holding None.

Notes
- The first failure aborts the pass; nothing is collected or deferred.
- Help and version text is written to the console handed to parse(), never to
  a global stream.
"""
import copy
import io
import logging
from collections import deque, namedtuple

from rich.console import Console

from .arguments import OptionKind
from .faults import *
from .tokens import resolve
from .utils import *

logger = logging.getLogger(__name__)


class ParseState:
    """
    State of one parse pass. Created fresh for every call, never shared.
    """

    __slots__ = ("command", "used", "positionals", "context")

    def __init__(self, context, /):
        self.command = None
        self.used = []
        self.positionals = deque()
        self.context = context

    def __repr__(self):
        return "parse-state(command=%s, used=%r, positionals=%r)" % (
            self.command, self.used, list(self.positionals)
        )


class Outcome(namedtuple("Outcome", ("command", "used", "fault", "output"))):
    """
    Result of a parse pass that does not raise.

    - command: the selected command identifier, or None.
    - used: the consumed option identifiers, in consumption order.
    - fault: the ParsingException that aborted the pass, or None.
    - output: the help/version text emitted during the pass.
    """
    __slots__ = ()

    @property
    def ok(self):
        return self.fault is None


class Parser:
    """
    Parse engine bound to one schema and one binding table.

    The parser holds no per-parse state, so one instance serves every parse of
    a Program subclass; the binding context passed to parse() receives the
    values.
    """

    def __init__(self, schema, bindings, /, *, manual):
        self.schema = schema
        self.bindings = bindings
        self.manual = manual

    def __repr__(self):
        return "parser(schema=%r, targets=%d)" % (self.schema, len(self.bindings))

    def parse(self, context, tokens, /, *, console=Unset):
        """
        Run one parse pass and return its ParseState.

        Raises
        - ParsingException: the first failure met. Options bound before the
          failure keep their values until the next parse resets the targets.
        """
        console = coalesce(console, Console())
        tokens = list(tokens)
        state = ParseState(context)

        for target in self.bindings:
            target.reset(context)

        logger.debug("parsing %r", tokens)

        if not tokens:
            logger.debug("no input, showing help")
            self.manual.help(console)
            return state

        match tokens[0]:
            case "help":
                route = self.schema.route(tokens[1]) if len(tokens) > 1 else None
                logger.debug("help requested for %s", route[0] if route else "the program")
                self.manual.help(console, route[0] if route else None)
                return state
            case "version":
                logger.debug("version requested")
                self.manual.version(console)
                return state

        index = self._select(state, tokens)
        self._scan(state, tokens, index)
        self._fill(state)

        if state.positionals:
            leftovers = tuple(state.positionals)
            label = "positional argument" if len(leftovers) == 1 else "positional arguments"
            raise TooManyPositionalsError(
                f"{len(leftovers)} unexpected {label}: {' '.join(map(repr, leftovers))}",
                value=leftovers,
            )

        self._defaults(state)
        logger.debug("parsed command=%s used=%r", state.command, state.used)
        return state

    def attempt(self, context, tokens, /):
        """
        Run one parse pass and return an Outcome; parsing faults are returned,
        not raised. The emitted text is captured in Outcome.output.
        """
        buffer = io.StringIO()
        try:
            state = self.parse(context, tokens, console=Console(file=buffer))
        except ParsingException as fault:
            logger.debug("parse failed: %s", fault)
            return Outcome(None, (), fault, buffer.getvalue())
        return Outcome(state.command, tuple(state.used), None, buffer.getvalue())

    def _select(self, state, tokens, /):
        """
        Resolve the command and return the index where the main scan starts.
        """
        if route := self.schema.route(tokens[0]):
            state.command = route[0]
            logger.debug("command %s selected", state.command)
            return 1
        if self.schema.default is Unset:
            raise NoCommandGivenError(value=tokens[0])
        if self.schema.default is None:
            raise NoDefaultCommandError(value=tokens[0])
        state.command = self.schema.default
        logger.debug("default command %s selected", state.command)
        return 0

    def _known(self, token, /):
        """
        Whether `token` references at least one option of the schema.
        """
        if (names := resolve(token, unix=self.schema.unix)) is None:
            return False
        return any(name in self.schema.names for name in names)

    def _lookup(self, name, /):
        if (found := self.schema.lookup(name)) is None:
            raise UnknownOptionError(option=name)
        return found

    def _scan(self, state, tokens, index, /):
        while index < len(tokens):
            token = tokens[index]
            index += 1

            if (names := resolve(token, unix=self.schema.unix)) is None:
                state.positionals.append(token)
                continue

            *group, last = names
            grouped = []
            for name in group:
                identifier, option = self._lookup(name)
                if option.kind is not OptionKind.FLAG:
                    raise NoValueGivenError(option=name, identifier=identifier)
                grouped.append((identifier, option))
            for identifier, option in grouped:
                self._consume(state, identifier, option)
                self._flag(state, identifier)

            identifier, option = self._lookup(last)
            self._consume(state, identifier, option)

            match option.kind:
                case OptionKind.FLAG:
                    self._flag(state, identifier)
                case OptionKind.SINGLE_VALUE:
                    if index >= len(tokens) or self._known(tokens[index]):
                        raise NoValueGivenError(option=last, identifier=identifier)
                    self._bind(state, identifier, option, [tokens[index]])
                    index += 1
                case OptionKind.MULTIPLE_VALUES:
                    values = []
                    while index < len(tokens) and not self._known(tokens[index]):
                        values.append(tokens[index])
                        index += 1
                    if not values:
                        raise NoValueGivenError(option=last, identifier=identifier)
                    self._bind(state, identifier, option, values)

    def _consume(self, state, identifier, option, /):
        if identifier in state.used:
            raise DuplicateOptionError(option=option.name, identifier=identifier)
        state.used.append(identifier)
        logger.debug("option %s consumed", identifier)

    def _flag(self, state, identifier, /):
        for target in self.bindings[identifier]:
            target.__set__(state.context, True)

    def _bind(self, state, identifier, option, values, /):
        """
        Convert `values` for every target bound to `identifier`, then write them.

        Every target is converted before any is written, so a failing converter
        leaves all targets of the option untouched.
        """
        converted = []
        for target in self.bindings[identifier]:
            try:
                value = target.convert(state.context, values)
            except ParsingException as fault:
                if fault.option is not None:
                    raise
                raise fault.__replace__(option=option.name, identifier=identifier) from fault
            except (ValueError, TypeError, OverflowError) as exception:
                raise InvalidOptionValueError(
                    option=option.name,
                    value=values[0] if len(values) == 1 else list(values),
                    identifier=identifier,
                ) from exception
            converted.append((target, value))
        for target, value in converted:
            target.__set__(state.context, value)
            logger.debug("target %s bound to %r", target.name, value)

    def _fill(self, state, /):
        """
        Fill the required options of the selected command from the buffered
        positional tokens, in declaration order.
        """
        if state.command is None:
            return
        for identifier in self.schema.commands[state.command].required:
            if identifier in state.used:
                continue
            option = self.schema.options[identifier]
            if not state.positionals:
                raise NoValueGivenError(option=option.name, identifier=identifier)
            state.used.append(identifier)
            logger.debug("option %s filled from positionals", identifier)
            match option.kind:
                case OptionKind.MULTIPLE_VALUES:
                    values = list(state.positionals)
                    state.positionals.clear()
                    self._bind(state, identifier, option, values)
                    break
                case OptionKind.FLAG:
                    state.positionals.popleft()
                    self._flag(state, identifier)
                case OptionKind.SINGLE_VALUE:
                    self._bind(state, identifier, option, [state.positionals.popleft()])

    def _defaults(self, state, /):
        for identifier, option in self.schema.options.items():
            if identifier in state.used or option.default is None:
                continue
            for target in self.bindings[identifier]:
                if target.__get__(state.context) is None:
                    target.__set__(state.context, copy.deepcopy(option.default))
                    logger.debug("target %s defaulted to %r", target.name, option.default)


__all__ = (
    "ParseState",
    "Outcome",
    "Parser",
)
