"""
Custom exceptions for schema generation.
"""
from typing import Sequence


class SchemaGenerationError(Exception):
    """Base class for all schema generation errors."""
    pass

class InvalidTypeError(SchemaGenerationError):
    """Raised when the supplied value's type cannot be reduced to a record type."""
    def __init__(self, type_repr: str, reason: str | None = None):
        message = f"invalid type {type_repr}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.type_repr = type_repr

class UnsupportedKindError(SchemaGenerationError):
    """Raised when a field or element type has no schema representation
    (channels, functions, interfaces, complex numbers, raw pointers, ...)."""
    def __init__(self, kind: str, type_repr: str):
        super().__init__(f"unsupported type: {kind} ({type_repr})")
        self.kind = kind
        self.type_repr = type_repr

class UnsupportedMapKeyError(SchemaGenerationError):
    """Raised when a mapping field's key type is not string-like."""
    def __init__(self, key_kind: str, type_repr: str):
        super().__init__(f"map key type {key_kind} is not supported ({type_repr})")
        self.key_kind = key_kind
        self.type_repr = type_repr

class DuplicatePropertyError(SchemaGenerationError):
    """Raised when two fields of one object map to the same property name."""
    def __init__(self, property_name: str, record_name: str, embedded: bool = True):
        origin = "in embedded record" if embedded else "among explicit fields"
        super().__init__(f"duplicate property name {property_name} {origin} of {record_name}")
        self.property_name = property_name
        self.record_name = record_name

class TagConversionError(SchemaGenerationError):
    """Raised when an enum, default or required tag literal cannot be parsed
    as the field's primitive kind."""
    def __init__(self, field_name: str, tag: str, literal: str, expected_kind: str):
        super().__init__(
            f"{tag} value {literal!r} of field {field_name} is not compatible with {expected_kind} type"
        )
        self.field_name = field_name
        self.tag = tag
        self.literal = literal
        self.expected_kind = expected_kind

class CyclicTypeError(SchemaGenerationError):
    """Raised when a record type is reached again while it is still being reflected."""
    def __init__(self, path: Sequence[str]):
        self.path = list(path)
        super().__init__(f"cyclic record type: {' -> '.join(self.path)}")
