"""
Kind classification of Python type hints.

Every annotation a record field can carry is reduced to one ``Kind``. The
reflector turns the primitive and composite kinds into schema properties and
reports the rest as unsupported.
"""
import asyncio
import collections.abc
import ctypes
import inspect
import queue
import types
from enum import Enum
from typing import Annotated, Any, NewType, Optional, TypeVar, Union, get_args, get_origin

from ..exceptions import InvalidTypeError
from .records import is_record, type_name

# Width aliases. Python has a single int and float type; these let a record
# state the intended width, and the unsigned ones select unsigned tag parsing.
Int = NewType("Int", int)
Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
Uint = NewType("Uint", int)
Uint8 = NewType("Uint8", int)
Uint16 = NewType("Uint16", int)
Uint32 = NewType("Uint32", int)
Uint64 = NewType("Uint64", int)
Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)

UNSIGNED_ALIASES = (Uint, Uint8, Uint16, Uint32, Uint64)


class Kind(str, Enum):
    STRING = "string"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    ARRAY = "array"
    STRUCT = "struct"
    MAP = "map"
    POINTER = "ptr"
    CHAN = "chan"
    FUNC = "func"
    INTERFACE = "interface"
    COMPLEX = "complex"
    UNSAFE_POINTER = "unsafe pointer"
    INVALID = "invalid"


_CHANNEL_TYPES = (queue.Queue, queue.SimpleQueue, asyncio.Queue)


def _is_unsigned_alias(tp: Any) -> bool:
    # Identity check: Annotated hints with unhashable metadata cannot be hashed
    return any(tp is alias for alias in UNSIGNED_ALIASES)


def unwrap_alias(tp: Any) -> Any:
    """Strips ``Annotated`` metadata and ``NewType`` wrappers, stopping at unsigned width aliases."""
    while True:
        if _is_unsigned_alias(tp):
            return tp
        if get_origin(tp) is Annotated:
            tp = get_args(tp)[0]
            continue
        supertype = getattr(tp, "__supertype__", None)
        if supertype is None:
            return tp
        tp = supertype


def optional_target(tp: Any) -> Optional[Any]:
    """Returns ``X`` for ``Optional[X]`` / ``X | None``, else None."""
    if get_origin(tp) not in (Union, types.UnionType):
        return None
    args = get_args(tp)
    present = [arg for arg in args if arg is not type(None)]
    if len(present) == 1 and len(args) == 2:
        return present[0]
    return None


def indirection_target(tp: Any) -> Optional[Any]:
    """Unwraps one level of indirection (Annotated, NewType, Optional)."""
    if get_origin(tp) is Annotated:
        return get_args(tp)[0]
    supertype = getattr(tp, "__supertype__", None)
    if supertype is not None:
        return supertype
    return optional_target(tp)


def reduce_to_record(tp: Any) -> type:
    """Follows indirection from ``tp`` down to a record type."""
    start = tp
    while not is_record(tp):
        inner = indirection_target(tp)
        if inner is None:
            raise InvalidTypeError(type_name(start))
        tp = inner
    return tp


def _tuple_element(tp: Any) -> Optional[Any]:
    args = get_args(tp)
    if len(args) == 2 and args[1] is Ellipsis:
        return args[0]
    if args and all(arg == args[0] for arg in args):
        return args[0]
    return None


def _classify_class(cls: Any) -> Kind:
    if not isinstance(cls, type):
        return Kind.INVALID
    if cls is bool:
        return Kind.BOOL
    if is_record(cls):
        return Kind.STRUCT
    if issubclass(cls, str):
        return Kind.STRING
    if issubclass(cls, int):
        return Kind.INT
    if issubclass(cls, float):
        return Kind.FLOAT
    if issubclass(cls, complex):
        return Kind.COMPLEX
    if issubclass(cls, (bytes, bytearray)):
        return Kind.ARRAY
    if issubclass(cls, ctypes.c_void_p):
        return Kind.UNSAFE_POINTER
    if issubclass(cls, _CHANNEL_TYPES):
        return Kind.CHAN
    if issubclass(cls, collections.abc.Mapping):
        return Kind.MAP
    if issubclass(cls, (collections.abc.Sequence, collections.abc.Set)):
        return Kind.ARRAY
    if issubclass(cls, collections.abc.Callable):
        return Kind.FUNC
    if getattr(cls, "_is_protocol", False) or inspect.isabstract(cls):
        return Kind.INTERFACE
    return Kind.INVALID


def classify(tp: Any) -> Kind:
    tp = unwrap_alias(tp)
    if _is_unsigned_alias(tp):
        return Kind.UINT
    if tp is None or tp is type(None):
        return Kind.INVALID
    if tp is Any or tp is object or isinstance(tp, TypeVar):
        return Kind.INTERFACE

    origin = get_origin(tp)
    if origin in (Union, types.UnionType):
        return Kind.POINTER if optional_target(tp) is not None else Kind.INTERFACE
    if origin is tuple:
        return Kind.ARRAY if _tuple_element(tp) is not None else Kind.INVALID
    if origin is not None:
        return _classify_class(origin)
    return _classify_class(tp)


def primitive_kind(tp: Any) -> Kind:
    """Kind of ``tp`` after following Optional indirection."""
    kind = classify(tp)
    while kind is Kind.POINTER:
        tp = optional_target(unwrap_alias(tp))
        kind = classify(tp)
    return kind


def element_type(tp: Any) -> Any:
    """Element type of an array-kind hint; ``Any`` when unparameterised."""
    tp = unwrap_alias(tp)
    if get_origin(tp) is tuple:
        return _tuple_element(tp)
    args = get_args(tp)
    if args:
        return args[0]
    if isinstance(tp, type) and issubclass(tp, (bytes, bytearray)):
        return Uint8
    return Any


def map_key_type(tp: Any) -> Any:
    """Key type of a map-kind hint; ``Any`` when unparameterised."""
    args = get_args(unwrap_alias(tp))
    return args[0] if args else Any


def pointer_target(tp: Any) -> Any:
    return optional_target(unwrap_alias(tp))
