"""Configuration management for MCP Schemagen."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format ('json' or 'console')")
    file: Optional[Path] = Field(default=None, description="Log file path. Logs go to stderr if unset.")

class GenerationConfig(BaseModel):
    """Configuration for schema derivation."""

    name_tag: str = Field(default="json", min_length=1, description="Field tag key holding the external property name and its options.")
    sort_properties: bool = Field(default=False, description="Emit property names sorted when serializing derived schemas.")


class Config(BaseSettings):
    """Main configuration for MCP Schemagen. Loads from environment variables prefixed with MCP_SCHEMAGEN_."""

    model_config = SettingsConfigDict(
        env_prefix='MCP_SCHEMAGEN_',
        env_nested_delimiter='__', # e.g., MCP_SCHEMAGEN_GENERATION__NAME_TAG
        extra='ignore',
        env_file='.env',
        env_file_encoding='utf-8'
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)

    @classmethod
    def from_file(cls, file_path: Path) -> "Config":
        """Create configuration strictly from a JSON file.
        Environment variables are not layered on top.
        """
        with open(file_path) as f:
            config_data = json.load(f)
        return cls.model_validate(config_data)
