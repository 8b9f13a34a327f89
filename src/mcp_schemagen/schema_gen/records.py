"""
Record type detection and field enumeration.

A record is a dataclass or a pydantic model class. Fields are reported in
declaration order together with their tags: dataclass ``metadata`` or the
pydantic ``json_schema_extra`` mapping.
"""
import dataclasses
import typing
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel

from ..exceptions import InvalidTypeError

EMBEDDED_TAG = "embedded"
DESCRIPTION_TAG = "description"


@dataclass(frozen=True)
class RecordField:
    name: str
    annotation: Any
    tags: Mapping[str, Any]

    @property
    def embedded(self) -> bool:
        return bool(self.tags.get(EMBEDDED_TAG))


def is_record(tp: Any) -> bool:
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


def record_fields(record: type, name_tag: str = "json") -> list[RecordField]:
    """
    Lists the declared fields of a record type, in declaration order.

    Python defaults play no part in requiredness: a pydantic field declared as
    ``limit: int = 10`` (or a dataclass field with a default) is still required
    unless its naming tag carries ``omitempty`` or a ``required`` tag says
    otherwise. Use ``json_schema_extra={"json": "limit,omitempty"}`` to make it
    optional.
    """
    if issubclass(record, BaseModel):
        return _pydantic_fields(record, name_tag)
    return _dataclass_fields(record)


def _dataclass_fields(record: type) -> list[RecordField]:
    try:
        hints = typing.get_type_hints(record, include_extras=True)
    except (NameError, TypeError) as e:
        # Unresolvable forward reference in the annotations
        raise InvalidTypeError(type_name(record), reason=str(e)) from e

    return [
        RecordField(name=f.name, annotation=hints.get(f.name, f.type), tags=dict(f.metadata))
        for f in dataclasses.fields(record)
    ]


def _pydantic_fields(record: type[BaseModel], name_tag: str) -> list[RecordField]:
    fields = []
    for name, info in record.model_fields.items():
        extra = info.json_schema_extra
        tags: dict[str, Any] = dict(extra) if isinstance(extra, Mapping) else {}
        if info.alias and name_tag not in tags:
            tags[name_tag] = info.alias
        if info.description and DESCRIPTION_TAG not in tags:
            tags[DESCRIPTION_TAG] = info.description
        fields.append(RecordField(name=name, annotation=info.annotation, tags=tags))
    return fields
