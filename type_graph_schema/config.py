"""
Top-level configuration, as loaded from a JSON config file by the CLI.

Example file::

    {
        "json_schema": {"preset": "strict"},
        "function_calling": {"strict_schema_flag": false},
        "introspection": {"discriminator_property": "kind"},
        "indent": 2
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .introspect.descriptions import IntrospectionConfig
from .json_schema.config import FunctionCallingSchemaConfig, JsonSchemaConfig


@dataclass
class SchemaGeneratorConfig:
    """Configuration options for schema generation."""

    # JSON Schema output flags
    json_schema: JsonSchemaConfig = field(default_factory=lambda: JsonSchemaConfig.DEFAULT)

    # Function-calling output flags
    function_calling: FunctionCallingSchemaConfig = field(default_factory=lambda: FunctionCallingSchemaConfig.DEFAULT)

    # Description and discriminator settings used while introspecting
    introspection: IntrospectionConfig = field(default_factory=IntrospectionConfig)

    # Indentation of the written JSON (None for compact output)
    indent: int | None = 2

    @staticmethod
    def from_dict(config_dict: dict[str, Any]) -> SchemaGeneratorConfig:
        """Create a configuration from a dictionary, ignoring unknown keys."""
        config = SchemaGeneratorConfig()
        if "json_schema" in config_dict:
            config.json_schema = JsonSchemaConfig.from_dict(config_dict["json_schema"])
        if "function_calling" in config_dict:
            config.function_calling = FunctionCallingSchemaConfig.from_dict(config_dict["function_calling"])
        if "introspection" in config_dict:
            config.introspection = IntrospectionConfig.from_dict(config_dict["introspection"])
        if "indent" in config_dict:
            config.indent = config_dict["indent"]
        return config

    def to_dict(self) -> dict[str, Any]:
        return {
            "json_schema": self.json_schema.to_dict(),
            "function_calling": self.function_calling.to_dict(),
            "introspection": self.introspection.to_dict(),
            "indent": self.indent,
        }
