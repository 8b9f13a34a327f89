"""
Pydantic models for MCP Schemagen.
"""
from .common import BasePydanticModel, DataType
from .mcp import Tool
from .schema import InputSchema, Property

__all__ = [
    "BasePydanticModel",
    "DataType",
    "InputSchema",
    "Property",
    "Tool",
]
