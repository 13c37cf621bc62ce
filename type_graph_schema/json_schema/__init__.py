"""
JSON Schema and function-calling schema output.
"""

from .codec import (
    decode_definition,
    decode_function_calling_schema,
    decode_json_schema,
    decode_schema_definition,
    encode_schema,
)
from .config import JSON_SCHEMA_DRAFT_2020_12, FunctionCallingSchemaConfig, JsonSchemaConfig
from .definitions import (
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
from .function_calling import TypeGraphToFunctionCallingSchemaTransformer
from .transformer import TypeGraphToJsonSchemaTransformer

__all__ = [
    "JSON_SCHEMA_DRAFT_2020_12",
    "AllOfDefinition",
    "AnyOfDefinition",
    "ArrayDefinition",
    "DiscriminatorDefinition",
    "FunctionCallingSchema",
    "FunctionCallingSchemaConfig",
    "JsonSchema",
    "JsonSchemaConfig",
    "JsonSchemaDefinition",
    "ObjectDefinition",
    "OneOfDefinition",
    "PropertyDefinition",
    "ReferenceDefinition",
    "TypeGraphToFunctionCallingSchemaTransformer",
    "TypeGraphToJsonSchemaTransformer",
    "ValueDefinition",
    "decode_definition",
    "decode_function_calling_schema",
    "decode_json_schema",
    "decode_schema_definition",
    "encode_schema",
]
