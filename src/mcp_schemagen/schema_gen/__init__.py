"""
Schema generation for MCP Schemagen.

Derives JSON-Schema-like input schemas from dataclasses and pydantic models
by inspecting their fields and field tags.
"""
from .cache import DEFAULT_CACHE, SchemaCache
from .generator import SchemaGenerator, derive_schema, get_default_generator, resolve_record_type, type_identity
from .kinds import (
    Float32,
    Float64,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    Kind,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from .reflector import SchemaReflector
from .tags import schema_field

__all__ = [
    "DEFAULT_CACHE",
    "Float32",
    "Float64",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Kind",
    "SchemaCache",
    "SchemaGenerator",
    "SchemaReflector",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "derive_schema",
    "get_default_generator",
    "resolve_record_type",
    "schema_field",
    "type_identity",
]
