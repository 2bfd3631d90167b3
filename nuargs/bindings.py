"""
nuargs binding table.

A Target is a data descriptor declared on a Program subclass. It names the
option identifier it is bound to, an optional converter reference, and (through
the class annotation) the static type of the value it stores:

    class Tool(Program, options=Opt, commands=Cmd):
        count: int | None = Target(Opt.COUNT)
        files: list[str] = Target(Opt.FILES, "files_verify_paths")

Several targets may be bound to one option (fan-out, each with its own
converter); an option may also have no target at all.

The BindingTable is built once per Program subclass. It maps every option
identifier to the tuple of its targets, and each target plans its automatic
conversion from its annotation at that moment, never at parse time.
"""
import inspect
from enum import Enum

from .arguments import Option
from .converters import automatic, resolve
from .utils import *


class Target:
    """
    Typed write/read slot for the value of one option.

    Values live in the instance dictionary of the binding context under the
    attribute name, so concurrent contexts never share storage. Until written,
    a target reads as its initial value: False for a plain `bool` annotation,
    None otherwise.
    """

    __slots__ = ("option", "converter", "name", "type", "automatic", "initial")

    def __init__(self, option, converter=Unset, /):
        if not isinstance(option, Enum) or not isinstance(option.value, Option):
            raise TypeError("target() first argument must be an option member")
        if not isinstance(converter, str | Unset) and not callable(converter):
            raise TypeError("target() converter must be a string or a callable")
        if isinstance(converter, str) and not converter.strip():
            raise ValueError("target() converter cannot be empty")
        self.option = option
        self.converter = converter
        self.name = Unset
        self.type = object
        self.automatic = automatic(object)
        self.initial = None

    def __set_name__(self, owner, name):
        if self.name is not Unset:
            raise TypeError(f"target {self.name!r} cannot be bound twice")
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.__dict__.get(self.name, self.initial)

    def __set__(self, instance, value):
        instance.__dict__[self.name] = value

    def __delete__(self, instance):
        instance.__dict__.pop(self.name, None)

    def __repr__(self):
        return "target(name=%r, option=%s, converter=%r, type=%r)" % (
            self.name, self.option, self.converter, self.type
        )

    def plan(self, annotation, /):
        """
        Record the static type of the target and plan its automatic conversion.
        """
        self.type = annotation
        self.automatic = automatic(annotation)
        self.initial = False if annotation is bool else None

    def convert(self, context, values, /):
        """
        Turn raw strings into the value for this target.

        A converter result that is a plain list of strings flows through the
        automatic conversion of the target type, like raw input does.
        """
        values = list(values)
        if self.converter is Unset:
            return self.automatic(values)
        converted = resolve(self.converter, context)(values)
        if type(converted) is list and all(isinstance(value, str) for value in converted):
            return self.automatic(converted)
        return converted

    def reset(self, context, /):
        context.__dict__.pop(self.name, None)


class BindingTable:
    """
    Read-only map from option identifier to the targets bound to it.
    """

    targets = mirror("targets")

    def __init__(self, targets, /):
        self._targets = {}
        for target in targets:
            self._targets.setdefault(target.option, []).append(target)
        self._targets = {option: tuple(targets) for option, targets in self._targets.items()}

    def __getitem__(self, option, /):
        return self._targets.get(option, ())

    def __iter__(self):
        for targets in self._targets.values():
            yield from targets

    def __len__(self):
        return sum(map(len, self._targets.values()))

    @classmethod
    def collect(cls, owner, /):
        """
        Build the table for `owner` from the Target descriptors found along its MRO.

        Annotations are evaluated (string annotations included) and planned
        once here; unannotated targets keep the raw strings.
        """
        targets = {}
        for klass in reversed(owner.__mro__):
            annotations = inspect.get_annotations(klass, eval_str=True)
            for name, object in vars(klass).items():
                if isinstance(object, Target):
                    object.plan(annotations.get(name, object.type))
                    targets[name] = object
        return cls(targets.values())


def target(option, converter=Unset, /):
    """
    Functional alias of Target(option, converter) for declarations that read
    better in lowercase.
    """
    return Target(option, converter)


__all__ = (
    "Target",
    "BindingTable",
    "target",
)
