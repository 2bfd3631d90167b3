"""
nuargs utilities.

Small helpers shared by the schema, binding and engine layers.

- Unset: the "not given" sentinel, kept apart from None because None is a
  meaningful setting in several places (the default command, for one).
- coalesce(value, default): swap Unset for a default, keep any other value.
- rename(callable, name) and @rename(name): give generated callables a
  readable name for reprs and tracebacks.
- mirror(name): property exposing "_<name>" as a read-only view, so tables
  built once can be shared by every parse.
"""
import builtins
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel. There is exactly one instance; it is falsy,
    cannot be subclassed, and can take part in `X | Unset` unions.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    `default` when `object` is Unset, `object` otherwise (None and other falsy
    values included).
    """
    return default if object is Unset else object


def _relabel(callable, name, /):
    if not builtins.callable(callable):
        raise TypeError("rename() target must be callable")
    try:
        callable.__name__ = callable.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError(f"rename() cannot relabel {callable!r}") from None
    return callable


def rename(*parameters):
    """
    rename(callable, name) relabels `callable` and returns it;
    rename(name) returns a decorator doing the same.
    """
    if not 1 <= len(parameters) <= 2:
        raise TypeError(f"rename() takes 1 or 2 arguments ({len(parameters)} given)")
    name = parameters[-1]
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    if len(parameters) == 2:
        return _relabel(parameters[0], name)
    return _relabel(lambda callable: _relabel(callable, name), "rename")


def _view(object):
    match object:
        case str():
            return object
        case MappingProxyType():
            return object
        case Mapping():
            return MappingProxyType(object)
        case Sequence():
            return tuple(object)
        case Set():
            return frozenset(object)
    return object


def mirror(name, /):
    """
    Read-only property for the private attribute "_<name>".

    Lists come back as tuples, dicts as mapping proxies and sets as frozensets;
    anything else is returned unchanged.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    attribute = "_" + name
    return property(rename(lambda self: _view(getattr(self, attribute)), name))


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
)
