"""MCP Schemagen - input schemas for MCP tools, derived from request records.

Inspects dataclasses and pydantic models at runtime and describes their
shape as JSON-Schema-like objects, cached once per record type.
"""

__version__ = "0.1.0"

from .config import Config
from .exceptions import (
    CyclicTypeError,
    DuplicatePropertyError,
    InvalidTypeError,
    SchemaGenerationError,
    TagConversionError,
    UnsupportedKindError,
    UnsupportedMapKeyError,
)
from .models import DataType, InputSchema, Property, Tool
from .schema_gen import SchemaGenerator, derive_schema, schema_field
from .tools import new_tool

__all__ = [
    "Config",
    "CyclicTypeError",
    "DataType",
    "DuplicatePropertyError",
    "InputSchema",
    "InvalidTypeError",
    "Property",
    "SchemaGenerationError",
    "SchemaGenerator",
    "TagConversionError",
    "Tool",
    "UnsupportedKindError",
    "UnsupportedMapKeyError",
    "derive_schema",
    "new_tool",
    "schema_field",
]
