"""
Configuration for the schema transformers.

Both configurations are immutable; use the named presets or build a new
instance with ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar

JSON_SCHEMA_DRAFT_2020_12 = "https://json-schema.org/draft/2020-12/schema"


def _known_keys(cls: type, config_dict: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in config_dict.items() if key in names}


@dataclass(frozen=True)
class JsonSchemaConfig:
    """Flags controlling JSON Schema output.

    Required-field policy, decided once per object:
    1. ``respect_default_presence``: properties without a default are required
    2. else ``require_nullable_fields``: every property is required
    3. else: only properties with a non-nullable type are required
    """

    # Emit $schema/$id, use const for fixed values and drop the discriminator block
    strict_schema_flag: bool = False

    # Derive required fields from default-value presence
    respect_default_presence: bool = True

    # Require nullable fields too (when defaults are not respected)
    require_nullable_fields: bool = True

    DEFAULT: ClassVar[JsonSchemaConfig]
    SIMPLE: ClassVar[JsonSchemaConfig]
    STRICT: ClassVar[JsonSchemaConfig]

    @staticmethod
    def from_dict(config_dict: dict[str, Any]) -> JsonSchemaConfig:
        """Create a configuration from a dictionary, ignoring unknown keys."""
        preset = config_dict.get("preset")
        base = JsonSchemaConfig.preset(preset) if preset else JsonSchemaConfig()
        values = base.to_dict()
        values.update(_known_keys(JsonSchemaConfig, config_dict))
        return JsonSchemaConfig(**values)

    @staticmethod
    def preset(name: str) -> JsonSchemaConfig:
        presets = {
            "default": JsonSchemaConfig.DEFAULT,
            "simple": JsonSchemaConfig.SIMPLE,
            "strict": JsonSchemaConfig.STRICT,
        }
        try:
            return presets[name.lower()]
        except KeyError:
            raise ValueError(f"Unknown JSON schema preset '{name}', expected one of {sorted(presets)}") from None

    def to_dict(self) -> dict[str, Any]:
        return {
            "strict_schema_flag": self.strict_schema_flag,
            "respect_default_presence": self.respect_default_presence,
            "require_nullable_fields": self.require_nullable_fields,
        }


JsonSchemaConfig.DEFAULT = JsonSchemaConfig()
JsonSchemaConfig.SIMPLE = JsonSchemaConfig()
JsonSchemaConfig.STRICT = JsonSchemaConfig(
    strict_schema_flag=True,
    respect_default_presence=False,
    require_nullable_fields=True,
)


@dataclass(frozen=True)
class FunctionCallingSchemaConfig:
    """Flags controlling function-calling output.

    In strict mode every parameter is required and optional values are
    expressed only through ``["T", "null"]`` unions.
    """

    strict_schema_flag: bool = True
    respect_default_presence: bool = False
    require_nullable_fields: bool = True

    STRICT: ClassVar[FunctionCallingSchemaConfig]
    SIMPLE: ClassVar[FunctionCallingSchemaConfig]
    DEFAULT: ClassVar[FunctionCallingSchemaConfig]

    @staticmethod
    def from_dict(config_dict: dict[str, Any]) -> FunctionCallingSchemaConfig:
        """Create a configuration from a dictionary, ignoring unknown keys."""
        preset = config_dict.get("preset")
        base = FunctionCallingSchemaConfig.preset(preset) if preset else FunctionCallingSchemaConfig()
        values = base.to_dict()
        values.update(_known_keys(FunctionCallingSchemaConfig, config_dict))
        return FunctionCallingSchemaConfig(**values)

    @staticmethod
    def preset(name: str) -> FunctionCallingSchemaConfig:
        presets = {
            "default": FunctionCallingSchemaConfig.DEFAULT,
            "simple": FunctionCallingSchemaConfig.SIMPLE,
            "strict": FunctionCallingSchemaConfig.STRICT,
        }
        try:
            return presets[name.lower()]
        except KeyError:
            raise ValueError(f"Unknown function-calling preset '{name}', expected one of {sorted(presets)}") from None

    def to_dict(self) -> dict[str, Any]:
        return {
            "strict_schema_flag": self.strict_schema_flag,
            "respect_default_presence": self.respect_default_presence,
            "require_nullable_fields": self.require_nullable_fields,
        }


FunctionCallingSchemaConfig.STRICT = FunctionCallingSchemaConfig()
FunctionCallingSchemaConfig.SIMPLE = FunctionCallingSchemaConfig(
    strict_schema_flag=False,
    respect_default_presence=False,
    require_nullable_fields=False,
)
FunctionCallingSchemaConfig.DEFAULT = FunctionCallingSchemaConfig.STRICT
