r"""
nuargs converter registry.

A converter turns the raw strings given to an option into the typed value
written to a binding target: `Callable[[list[str]], object]`.

Resolution order for a converter reference
1. a callable given directly is used as-is;
2. the built-in table below, by name;
3. a callable attribute with that name on the binding context (usually a
   method or a static method of the Program subclass);
4. otherwise UnknownConverterError.

Built-ins
- auto, string_array:          the raw strings (automatic conversion then applies)
- file / files:                absolute path of the first value / of every value
- file_verify_path:            like file, None unless exactly one value, and
                               FileDoesNotExistError when it is not an existing file
- files_verify_paths:          like files, FileDoesNotExistError naming the first missing file
- int32_array, int64_array:    every value as a range-checked integer
- double_array:                every value as a float
- first_int32, first_int64,
  first_double, first_string,
  first_bool:                  the first value converted, None when there is none

Automatic conversion
- automatic(annotation) plans, once per target type, how raw strings become a
  value of that type (see its docstring). Converters that hand back a plain
  list of strings are followed by the automatic conversion of the target.

Failures
- ValueError / TypeError / OverflowError raised by a converter are turned into
  InvalidOptionValueError by the engine, which knows the option and the value.
"""
import functools
import os.path
import types
import typing
from collections.abc import Sequence, MutableSequence, Collection, Iterable, Set, MutableSet
from types import MappingProxyType

from .faults import FileDoesNotExistError, UnknownConverterError
from .utils import rename

INT32 = range(-2 ** 31, 2 ** 31)
INT64 = range(-2 ** 63, 2 ** 63)

_builtins = {}


def builtin(name, /):
    """
    Register the decorated function in the built-in table under `name`.
    """
    def wrapper(converter):
        if name in _builtins:
            raise ValueError(f"built-in converter {name!r} is already registered")
        _builtins[name] = rename(converter, name)
        return converter
    return wrapper


def _boolean(text, /):
    match text.strip().lower():
        case "true":
            return True
        case "false":
            return False
    raise ValueError(f"{text!r} is not a valid boolean")


def _integer(text, bounds, /):
    if (number := int(text)) not in bounds:
        raise OverflowError(f"{text!r} is out of range")
    return number


@builtin("auto")
def auto(values):
    return list(values)


@builtin("string_array")
def string_array(values):
    return list(values)


@builtin("file")
def file(values):
    return os.path.abspath(values[0])


@builtin("files")
def files(values):
    return list(map(os.path.abspath, values))


@builtin("file_verify_path")
def file_verify_path(values):
    if len(values) != 1:
        return None
    if not os.path.isfile(path := values[0]):
        raise FileDoesNotExistError(value=path)
    return os.path.abspath(path)


@builtin("files_verify_paths")
def files_verify_paths(values):
    for path in values:
        if not os.path.isfile(path):
            raise FileDoesNotExistError(value=path)
    return list(map(os.path.abspath, values))


@builtin("int32_array")
def int32_array(values):
    return [_integer(value, INT32) for value in values]


@builtin("int64_array")
def int64_array(values):
    return [_integer(value, INT64) for value in values]


@builtin("double_array")
def double_array(values):
    return list(map(float, values))


@builtin("first_int32")
def first_int32(values):
    return _integer(values[0], INT32) if values else None


@builtin("first_int64")
def first_int64(values):
    return _integer(values[0], INT64) if values else None


@builtin("first_double")
def first_double(values):
    return float(values[0]) if values else None


@builtin("first_string")
def first_string(values):
    return values[0] if values else None


@builtin("first_bool")
def first_bool(values):
    return _boolean(values[0]) if values else None


BUILTINS = MappingProxyType(_builtins)


def resolve(reference, context=None, /):
    """
    Resolve a converter reference to a callable.

    Parameters
    - reference: str | Callable
      a built-in name, the name of a callable attribute of `context`, or a
      converter callable.
    - context: any (positional-only)
      the binding context searched after the built-in table.

    Raises
    - UnknownConverterError: when the name resolves to nothing callable.
    - TypeError: when the reference is neither a string nor a callable.
    """
    if callable(reference):
        return reference
    if not isinstance(reference, str):
        raise TypeError("converter reference must be a string or a callable")
    try:
        return BUILTINS[reference]
    except KeyError:
        pass
    if callable(converter := getattr(context, reference, None)):
        return converter
    raise UnknownConverterError(value=reference)


# Abstract containers are materialized as lists; concrete ones keep their type.
_containers = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    Sequence: list,
    MutableSequence: list,
    Collection: list,
    Iterable: list,
    Set: frozenset,
    MutableSet: set,
}


def _element(annotation, /):
    """
    Plan the conversion of one raw string into `annotation`.
    """
    if annotation is str or annotation is typing.Any:
        return str
    if annotation is bool:
        return _boolean
    if typing.get_origin(annotation) is not None or not callable(annotation):
        raise TypeError(f"cannot convert option values to {annotation!r} automatically")
    return annotation


@functools.cache
def automatic(annotation, /):
    """
    Plan the automatic conversion for a target whose static type is `annotation`.

    Rules
    - object / Any: the list of raw strings.
    - T | None: same plan as T (an empty input already yields None for scalars).
    - containers (list, tuple[T, ...], set, frozenset, and the abstract
      Sequence/Collection/Iterable/Set families), bare or parameterized:
      every element converted; a container of strings keeps the raw strings.
    - any other type: the first value converted, None when there is none.

    Element conversion
    - str is kept, bool accepts "true"/"false" (any case), any other type is
      called with the raw string (int, float, pathlib.Path, enum classes...).

    Raises
    - TypeError: fixed-arity tuples, unions of several non-None types, nested
      generics and non-callable element types cannot be planned.
    """
    if annotation is object or annotation is typing.Any:
        return auto

    origin = typing.get_origin(annotation)
    arguments = typing.get_args(annotation)

    if origin is typing.Union or origin is types.UnionType:
        members = [member for member in arguments if member is not type(None)]
        if len(members) != 1:
            raise TypeError(f"cannot convert option values to {annotation!r} automatically")
        return automatic(members[0])

    if (container := origin or annotation) in _containers:
        factory = _containers[container]
        if container is tuple and arguments:
            if len(arguments) != 2 or arguments[1] is not Ellipsis:
                raise TypeError(f"cannot convert option values to {annotation!r} automatically")
        convert = _element(arguments[0] if arguments else str)

        if convert is str:
            @rename("automatic")
            def converter(values):
                return factory(values)
        else:
            @rename("automatic")
            def converter(values):
                return factory(map(convert, values))
        return converter

    convert = _element(annotation)

    @rename("automatic")
    def converter(values):
        return convert(values[0]) if values else None
    return converter


__all__ = (
    "BUILTINS",
    "resolve",
    "automatic",
)
