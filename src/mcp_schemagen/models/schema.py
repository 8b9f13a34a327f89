"""
Schema tree models produced by the schema generator.
"""
from typing import Any

from pydantic import Field

from .common import BasePydanticModel, DataType


def _sorted_schema(node: Any) -> Any:
    if isinstance(node, dict):
        out = {}
        for key, value in node.items():
            if key == "properties" and isinstance(value, dict):
                out[key] = {name: _sorted_schema(value[name]) for name in sorted(value)}
            else:
                out[key] = _sorted_schema(value)
        return out
    if isinstance(node, list):
        return [_sorted_schema(item) for item in node]
    return node


class Property(BasePydanticModel):
    """One node of a derived schema: a record, a field, or an array element."""

    type: DataType
    description: str | None = None
    # Only set for arrays
    items: "Property | None" = None
    # Only set for objects derived from a record (maps leave both unset)
    properties: dict[str, "Property"] | None = None
    required: list[str] | None = None
    enum: list[Any] | None = None
    default: Any = None

    def to_json_schema(self, sort_properties: bool = False) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude_none=True)
        return _sorted_schema(data) if sort_properties else data


class InputSchema(BasePydanticModel):
    """Root schema of a record type. Always an object; carries only
    ``properties`` and ``required``.

    Instances are shared through the schema cache and must be treated as
    read-only by callers.
    """

    model_config = {"frozen": True}

    type: DataType = DataType.OBJECT
    properties: dict[str, Property] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    def to_json_schema(self, sort_properties: bool = False) -> dict[str, Any]:
        """Wire form of the schema.

        Properties keep declaration order (embedded fields last) unless
        ``sort_properties`` is set, in which case names are sorted at every level.
        """
        data = self.model_dump(mode="json", exclude_none=True)
        return _sorted_schema(data) if sort_properties else data


Property.model_rebuild()
