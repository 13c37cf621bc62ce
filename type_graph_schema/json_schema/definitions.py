"""
Typed model of the JSON Schema subset emitted by the transformers.

Each definition knows how to render itself with ``to_dict``; fields left as
None are omitted from the output. Key order in the rendered dictionaries is
fixed, so identical models always encode to identical text.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any

NULL_TYPE = "null"


def _put(target: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


def _render(value: Any) -> Any:
    if isinstance(value, PropertyDefinition):
        return value.to_dict()
    return value


@dataclass
class PropertyDefinition(ABC):
    """Base class for every schema fragment."""

    description: str | None = None

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        pass

    def with_description(self, description: str | None) -> PropertyDefinition:
        return replace(self, description=description)


@dataclass
class TypedDefinition(PropertyDefinition):
    """A fragment with a ``type`` keyword: value, array and object definitions."""

    type: str | list[str] = "string"
    nullable: bool | None = None  # OpenAPI-style marker, only on optional properties
    default: Any = None
    const: Any = None

    def as_union(self) -> TypedDefinition:
        """Replace the nullable marker with a ``["T", "null"]`` type union."""
        if not self.nullable:
            return self
        types = list(self.type) if isinstance(self.type, list) else [self.type]
        if NULL_TYPE not in types:
            types.append(NULL_TYPE)
        return replace(self, type=types, nullable=None)

    def _head(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type}
        _put(result, "description", self.description)
        _put(result, "nullable", self.nullable)
        return result

    def _tail(self, result: dict[str, Any]) -> dict[str, Any]:
        _put(result, "default", self.default)
        _put(result, "const", self.const)
        return result


@dataclass
class ValueDefinition(TypedDefinition):
    """string, integer, number, boolean and null fragments, including enums."""

    enum: list[Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result = self._head()
        _put(result, "enum", self.enum)
        return self._tail(result)


@dataclass
class ArrayDefinition(TypedDefinition):
    type: str | list[str] = "array"
    items: PropertyDefinition | None = None

    def to_dict(self) -> dict[str, Any]:
        result = self._head()
        _put(result, "items", _render(self.items))
        return self._tail(result)


@dataclass
class ObjectDefinition(TypedDefinition):
    type: str | list[str] = "object"
    properties: dict[str, PropertyDefinition] | None = None
    required: list[str] | None = None
    additional_properties: bool | PropertyDefinition | None = None

    def to_dict(self) -> dict[str, Any]:
        result = self._head()
        if self.properties is not None:
            result["properties"] = {name: prop.to_dict() for name, prop in self.properties.items()}
        _put(result, "required", self.required)
        _put(result, "additionalProperties", _render(self.additional_properties))
        return self._tail(result)


@dataclass
class ReferenceDefinition(PropertyDefinition):
    ref: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"$ref": self.ref}
        _put(result, "description", self.description)
        return result


@dataclass
class DiscriminatorDefinition:
    """OpenAPI-style discriminator block; not part of JSON Schema itself."""

    property_name: str = "type"
    mapping: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"propertyName": self.property_name}
        _put(result, "mapping", self.mapping)
        return result


@dataclass
class OneOfDefinition(PropertyDefinition):
    one_of: list[PropertyDefinition] | None = None
    discriminator: DiscriminatorDefinition | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        _put(result, "description", self.description)
        result["oneOf"] = [option.to_dict() for option in self.one_of or []]
        if self.discriminator is not None:
            result["discriminator"] = self.discriminator.to_dict()
        return result


@dataclass
class AnyOfDefinition(PropertyDefinition):
    any_of: list[PropertyDefinition] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        _put(result, "description", self.description)
        result["anyOf"] = [option.to_dict() for option in self.any_of or []]
        return result


@dataclass
class AllOfDefinition(PropertyDefinition):
    all_of: list[PropertyDefinition] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        _put(result, "description", self.description)
        result["allOf"] = [option.to_dict() for option in self.all_of or []]
        return result


@dataclass
class JsonSchemaDefinition:
    """The body of a generated schema document."""

    schema_uri: str | None = None  # $schema
    id: str | None = None  # $id
    type: str = "object"
    description: str | None = None
    properties: dict[str, PropertyDefinition] | None = None
    required: list[str] | None = None
    additional_properties: bool | None = False
    one_of: list[PropertyDefinition] | None = None
    discriminator: DiscriminatorDefinition | None = None
    defs: dict[str, PropertyDefinition] | None = None  # $defs

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        _put(result, "$schema", self.schema_uri)
        _put(result, "$id", self.id)
        result["type"] = self.type
        _put(result, "description", self.description)
        if self.properties is not None:
            result["properties"] = {name: prop.to_dict() for name, prop in self.properties.items()}
        _put(result, "required", self.required)
        _put(result, "additionalProperties", self.additional_properties)
        if self.one_of is not None:
            result["oneOf"] = [option.to_dict() for option in self.one_of]
        if self.discriminator is not None:
            result["discriminator"] = self.discriminator.to_dict()
        if self.defs is not None:
            result["$defs"] = {name: definition.to_dict() for name, definition in self.defs.items()}
        return result


@dataclass
class JsonSchema:
    """A named JSON Schema document."""

    name: str
    strict: bool = False
    description: str | None = None
    schema: JsonSchemaDefinition | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "strict": self.strict}
        _put(result, "description", self.description)
        result["schema"] = (self.schema or JsonSchemaDefinition()).to_dict()
        return result


@dataclass
class FunctionCallingSchema:
    """A tool definition in the LLM function-calling dialect."""

    name: str
    description: str = ""
    strict: bool = True
    parameters: JsonSchemaDefinition | None = None
    type: str = "function"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "strict": self.strict,
            "parameters": (self.parameters or JsonSchemaDefinition()).to_dict(),
        }
