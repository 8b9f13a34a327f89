from typing import Any

from pydantic import Field

from .common import BasePydanticModel
from .schema import InputSchema


class Tool(BasePydanticModel):
    name: str = Field(..., description="Name of the tool, unique within the MCP server.")
    description: str = Field(..., description="Detailed description of what the tool does.")
    input_schema: InputSchema = Field(..., alias="inputSchema", description="Object schema for the tool's input parameters.")

    def to_dict(self, sort_properties: bool = False) -> dict[str, Any]:
        """Tool declaration as sent in a ``tools/list`` result."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema.to_json_schema(sort_properties=sort_properties),
        }
