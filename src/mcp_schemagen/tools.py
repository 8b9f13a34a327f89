"""
Tool declarations with input schemas derived from request records.
"""
from typing import Any, Optional

from .models.mcp import Tool
from .schema_gen.generator import SchemaGenerator, get_default_generator


def new_tool(name: str, description: str, input_req: Any, generator: Optional[SchemaGenerator] = None) -> Tool:
    """
    Builds a Tool whose input schema is derived from ``input_req``.

    Args:
        name: Tool name.
        description: Tool description shown to the caller.
        input_req: The request record: a dataclass or pydantic model class, or an instance of one.
        generator: Generator to use; defaults to the process-wide one.

    Raises:
        SchemaGenerationError: If the request record cannot be described.
    """
    generator = generator or get_default_generator()
    return Tool(name=name, description=description, input_schema=generator.derive(input_req))
