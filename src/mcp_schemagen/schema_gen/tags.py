"""
Field tag parsing.

Tags are plain string-keyed metadata attached to record fields. Values are
written as text, the same way they would appear in a struct tag
(``{"json": "limit,omitempty", "enum": "10,20,50"}``); Python literals such as
``True`` or ``[10, 20, 50]`` are accepted as well and converted through their
text form.
"""
import collections.abc
import dataclasses
import re
from typing import Any, Callable, Iterable, Optional

from .kinds import Kind

IGNORE_NAME = "-"
OMITEMPTY_OPTION = "omitempty"
REQUIRED_TAG = "required"
ENUM_TAG = "enum"
DEFAULT_TAG = "default"

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1


def parse_bool(text: str) -> bool:
    text = text.strip()
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    raise ValueError(f"invalid boolean literal {text!r}")


def parse_int(text: str) -> int:
    text = text.strip()
    if not _SIGNED_RE.fullmatch(text):
        raise ValueError(f"invalid integer literal {text!r}")
    value = int(text, 10)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer literal {text!r} out of range")
    return value


def parse_uint(text: str) -> int:
    text = text.strip()
    if not _UNSIGNED_RE.fullmatch(text):
        raise ValueError(f"invalid unsigned integer literal {text!r}")
    value = int(text, 10)
    if value > _UINT64_MAX:
        raise ValueError(f"unsigned integer literal {text!r} out of range")
    return value


def parse_float(text: str) -> float:
    text = text.strip()
    # float() accepts digit grouping ("1_0"); tag literals do not
    if "_" in text:
        raise ValueError(f"invalid float literal {text!r}")
    return float(text)


# Kind -> (kind name used in error messages, converter)
LITERAL_CONVERTERS: dict[Kind, tuple[str, Callable[[str], Any]]] = {
    Kind.STRING: ("string", str),
    Kind.INT: ("integer", parse_int),
    Kind.UINT: ("unsigned integer", parse_uint),
    Kind.FLOAT: ("float", parse_float),
    Kind.BOOL: ("boolean", parse_bool),
}


def parse_name_tag(tag: Optional[str], declared_name: str) -> tuple[str, bool]:
    """
    Splits a naming tag such as ``"limit,omitempty"``.

    Returns:
        The external property name (the declared name when the tag has no
        name part) and whether the ``omitempty`` option was present.
    """
    if not tag:
        return declared_name, False
    name, *options = str(tag).split(",")
    return (name or declared_name), OMITEMPTY_OPTION in options


def split_enum(value: Any) -> list[str]:
    """Enum tag value as a list of untrimmed literal texts."""
    if isinstance(value, str):
        return value.split(",")
    if isinstance(value, collections.abc.Iterable):
        return [item if isinstance(item, str) else str(item) for item in value]
    return [str(value)]


def schema_field(
    *,
    name: Optional[str] = None,
    omitempty: bool = False,
    ignore: bool = False,
    description: Optional[str] = None,
    required: Optional[bool] = None,
    enum: Optional[Iterable[Any] | str] = None,
    schema_default: Any = None,
    embedded: bool = False,
    name_tag: str = "json",
    metadata: Optional[dict[str, Any]] = None,
    **kwargs: Any,
) -> Any:
    """
    ``dataclasses.field`` with schema tags in its metadata.

    Args:
        name: External property name.
        omitempty: Marks the field optional unless ``required`` says otherwise.
        ignore: Leaves the field out of the schema.
        description: Property description.
        required: Explicit requiredness, overriding ``omitempty``.
        enum: Permitted values, as a comma-separated string or an iterable.
        schema_default: Default value advertised in the schema. This is not the
            dataclass default; pass ``default``/``default_factory`` for that.
        embedded: Flattens the field's record type into the parent object.
        name_tag: Tag key for the name; must match the generator's configuration.
        metadata: Additional metadata merged under the schema tags.
        **kwargs: Passed through to ``dataclasses.field``.
    """
    tags: dict[str, Any] = dict(metadata or {})
    if ignore:
        tags[name_tag] = IGNORE_NAME
    elif name is not None or omitempty:
        tags[name_tag] = (name or "") + (f",{OMITEMPTY_OPTION}" if omitempty else "")
    if description:
        tags["description"] = description
    if required is not None:
        tags[REQUIRED_TAG] = "true" if required else "false"
    if enum is not None:
        tags[ENUM_TAG] = enum if isinstance(enum, str) else list(enum)
    if schema_default is not None:
        tags[DEFAULT_TAG] = schema_default
    if embedded:
        tags["embedded"] = True
    return dataclasses.field(metadata=tags, **kwargs)
