"""
Reflective derivation of schema properties from record types.
"""
from typing import Any, get_origin

from ..exceptions import (
    CyclicTypeError,
    DuplicatePropertyError,
    TagConversionError,
    UnsupportedKindError,
    UnsupportedMapKeyError,
)
from ..models.common import DataType
from ..models.schema import Property
from .kinds import (
    Kind,
    classify,
    element_type,
    map_key_type,
    pointer_target,
    primitive_kind,
    reduce_to_record,
    unwrap_alias,
)
from .records import DESCRIPTION_TAG, RecordField, record_fields, type_name
from .tags import (
    DEFAULT_TAG,
    ENUM_TAG,
    IGNORE_NAME,
    LITERAL_CONVERTERS,
    REQUIRED_TAG,
    parse_bool,
    parse_name_tag,
    split_enum,
)

_PRIMITIVE_TYPES = {
    Kind.STRING: DataType.STRING,
    Kind.INT: DataType.INTEGER,
    Kind.UINT: DataType.INTEGER,
    Kind.FLOAT: DataType.NUMBER,
    Kind.BOOL: DataType.BOOLEAN,
}


class SchemaReflector:
    """
    Walks a record type and builds its object property.

    A reflector tracks the records it is currently inside of so that cyclic
    record graphs fail with CyclicTypeError instead of recursing forever.
    Use one instance per derivation; it is not thread-safe.
    """

    def __init__(self, name_tag: str = "json"):
        self.name_tag = name_tag
        self._in_progress: list[type] = []

    def reflect_object(self, record: type) -> Property:
        if record in self._in_progress:
            path = [type_name(r) for r in self._in_progress[self._in_progress.index(record):]]
            raise CyclicTypeError(path + [type_name(record)])
        self._in_progress.append(record)
        try:
            return self._reflect_fields(record)
        finally:
            self._in_progress.pop()

    def _reflect_fields(self, record: type) -> Property:
        properties: dict[str, Property] = {}
        required: list[str] = []
        embedded: list[RecordField] = []

        for field in record_fields(record, self.name_tag):
            if field.name.startswith("_"):
                continue
            name_tag = field.tags.get(self.name_tag)
            if name_tag == IGNORE_NAME:
                continue
            # Embedded records are merged after all explicit fields are known
            if field.embedded:
                embedded.append(field)
                continue

            name, omitempty = parse_name_tag(name_tag, field.name)
            if name in properties:
                raise DuplicatePropertyError(name, type_name(record), embedded=False)

            item = self.reflect_type(field.annotation)
            description = field.tags.get(DESCRIPTION_TAG)
            if description:
                item.description = str(description)
            self._apply_enum(item, field, name)
            self._apply_default(item, field, name)
            properties[name] = item

            if self._is_required(field, name, default=not omitempty):
                required.append(name)

        for field in embedded:
            obj = self.reflect_object(reduce_to_record(field.annotation))
            for prop_name, prop in obj.properties.items():
                if prop_name in properties:
                    raise DuplicatePropertyError(prop_name, type_name(record))
                properties[prop_name] = prop
            required.extend(obj.required)

        return Property(type=DataType.OBJECT, properties=properties, required=required)

    def reflect_type(self, tp: Any) -> Property:
        kind = classify(tp)

        if kind in _PRIMITIVE_TYPES:
            return Property(type=_PRIMITIVE_TYPES[kind])
        if kind is Kind.ARRAY:
            return Property(type=DataType.ARRAY, items=self.reflect_type(element_type(tp)))
        if kind is Kind.STRUCT:
            record = unwrap_alias(tp)
            # Parameterised generic records reflect as their origin class
            obj = self.reflect_object(get_origin(record) or record)
            obj.type = DataType.OBJECT
            return obj
        if kind is Kind.MAP:
            key_kind = classify(map_key_type(tp))
            if key_kind is not Kind.STRING:
                raise UnsupportedMapKeyError(key_kind.value, type_name(tp))
            # Open object: no declared properties
            return Property(type=DataType.OBJECT)
        if kind is Kind.POINTER:
            return self.reflect_type(pointer_target(tp))

        raise UnsupportedKindError(kind.value, type_name(tp))

    def _is_required(self, field: RecordField, name: str, default: bool) -> bool:
        value = field.tags.get(REQUIRED_TAG)
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            return value
        try:
            return parse_bool(str(value))
        except ValueError as e:
            raise TagConversionError(name, REQUIRED_TAG, str(value), "boolean") from e

    def _apply_enum(self, item: Property, field: RecordField, name: str) -> None:
        value = field.tags.get(ENUM_TAG)
        if value is None or value == "":
            return
        kind = primitive_kind(field.annotation)
        if kind not in LITERAL_CONVERTERS:
            raise TagConversionError(name, ENUM_TAG, str(value), f"unsupported {kind.value}")
        kind_name, convert = LITERAL_CONVERTERS[kind]

        values = []
        for literal in split_enum(value):
            literal = literal.strip()
            try:
                values.append(convert(literal))
            except ValueError as e:
                raise TagConversionError(name, ENUM_TAG, literal, kind_name) from e
        item.enum = values

    def _apply_default(self, item: Property, field: RecordField, name: str) -> None:
        value = field.tags.get(DEFAULT_TAG)
        if value is None or value == "":
            return
        # Optional[X] converts with X's kind, like enum values
        kind = primitive_kind(field.annotation)
        if kind not in LITERAL_CONVERTERS:
            # No conversion rule for composite kinds; the consumer interprets the raw value
            item.default = value
            return
        kind_name, convert = LITERAL_CONVERTERS[kind]
        literal = value if isinstance(value, str) else str(value)
        try:
            item.default = convert(literal)
        except ValueError as e:
            raise TagConversionError(name, DEFAULT_TAG, literal, kind_name) from e
