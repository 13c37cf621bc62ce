"""
Encoding of schema documents to JSON text and decoding them back.

Decoding picks the definition class from the keys present, in this order:
oneOf, anyOf, allOf, $ref, items, properties, then the ``type`` keyword.
A fragment matching none of them is read as a string definition.
"""

from __future__ import annotations

import json
from typing import Any

from ..errors import SchemaDecodeError
from .definitions import (
    NULL_TYPE,
    AllOfDefinition,
    AnyOfDefinition,
    ArrayDefinition,
    DiscriminatorDefinition,
    FunctionCallingSchema,
    JsonSchema,
    JsonSchemaDefinition,
    ObjectDefinition,
    OneOfDefinition,
    PropertyDefinition,
    ReferenceDefinition,
    ValueDefinition,
)


def encode_schema(document: JsonSchema | FunctionCallingSchema, indent: int | None = None) -> str:
    """
    Encode a schema document as UTF-8 JSON text.

    Args:
        document: The document to encode
        indent: Indentation width, or None for compact output

    Returns:
        The JSON text
    """
    return json.dumps(document.to_dict(), ensure_ascii=False, indent=indent)


def decode_json_schema(text: str) -> JsonSchema:
    data = _load_object(text)
    if "name" not in data:
        raise SchemaDecodeError("JSON schema document is missing 'name'")
    return JsonSchema(
        name=data["name"],
        strict=bool(data.get("strict", False)),
        description=data.get("description"),
        schema=decode_schema_definition(data.get("schema", {})),
    )


def decode_function_calling_schema(text: str) -> FunctionCallingSchema:
    data = _load_object(text)
    if data.get("type") != "function" or "name" not in data:
        raise SchemaDecodeError("Function-calling document must have type 'function' and a name")
    return FunctionCallingSchema(
        name=data["name"],
        description=data.get("description", ""),
        strict=bool(data.get("strict", True)),
        parameters=decode_schema_definition(data.get("parameters", {})),
    )


def decode_schema_definition(data: dict[str, Any]) -> JsonSchemaDefinition:
    """Decode the body of a schema document."""
    _expect_mapping(data, "schema")
    properties = data.get("properties")
    defs = data.get("$defs")
    one_of = data.get("oneOf")
    discriminator = data.get("discriminator")
    return JsonSchemaDefinition(
        schema_uri=data.get("$schema"),
        id=data.get("$id"),
        type=data.get("type", "object"),
        description=data.get("description"),
        properties=_decode_properties(properties) if properties is not None else None,
        required=data.get("required"),
        additional_properties=data.get("additionalProperties"),
        one_of=[decode_definition(option) for option in one_of] if one_of is not None else None,
        discriminator=_decode_discriminator(discriminator) if discriminator is not None else None,
        defs=_decode_properties(defs) if defs is not None else None,
    )


def decode_definition(data: dict[str, Any]) -> PropertyDefinition:
    """
    Decode one schema fragment.

    Args:
        data: The fragment as parsed JSON

    Returns:
        The matching PropertyDefinition subclass

    Raises:
        SchemaDecodeError: If the fragment is not a JSON object
    """
    _expect_mapping(data, "definition")
    description = data.get("description")

    if "oneOf" in data:
        discriminator = data.get("discriminator")
        return OneOfDefinition(
            description=description,
            one_of=[decode_definition(option) for option in data["oneOf"]],
            discriminator=_decode_discriminator(discriminator) if discriminator is not None else None,
        )
    if "anyOf" in data:
        return AnyOfDefinition(description=description, any_of=[decode_definition(o) for o in data["anyOf"]])
    if "allOf" in data:
        return AllOfDefinition(description=description, all_of=[decode_definition(o) for o in data["allOf"]])
    if "$ref" in data:
        return ReferenceDefinition(description=description, ref=data["$ref"])

    common = {
        "description": description,
        "nullable": data.get("nullable"),
        "default": data.get("default"),
        "const": data.get("const"),
    }
    if "items" in data:
        return ArrayDefinition(type=data.get("type", "array"), items=decode_definition(data["items"]), **common)
    if "properties" in data or _primary_type(data.get("type")) == "object":
        properties = data.get("properties")
        additional = data.get("additionalProperties")
        return ObjectDefinition(
            type=data.get("type", "object"),
            properties=_decode_properties(properties) if properties is not None else None,
            required=data.get("required"),
            additional_properties=decode_definition(additional) if isinstance(additional, dict) else additional,
            **common,
        )
    if _primary_type(data.get("type")) == "array":
        return ArrayDefinition(type=data["type"], **common)

    return ValueDefinition(type=data.get("type", "string"), enum=data.get("enum"), **common)


def _primary_type(type_value: Any) -> str | None:
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != NULL_TYPE]
        return non_null[0] if non_null else NULL_TYPE
    return type_value


def _decode_properties(data: dict[str, Any]) -> dict[str, PropertyDefinition]:
    _expect_mapping(data, "properties")
    return {name: decode_definition(value) for name, value in data.items()}


def _decode_discriminator(data: dict[str, Any]) -> DiscriminatorDefinition:
    _expect_mapping(data, "discriminator")
    return DiscriminatorDefinition(property_name=data.get("propertyName", "type"), mapping=data.get("mapping"))


def _expect_mapping(data: Any, what: str) -> None:
    if not isinstance(data, dict):
        raise SchemaDecodeError(f"Expected a JSON object for {what}, got {type(data).__name__}")


def _load_object(text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaDecodeError(f"Invalid JSON: {e}") from e
    _expect_mapping(data, "document")
    return data
