"""Type Graph Schema Generator

Builds a type graph from Python classes, functions or serialization
descriptors and turns it into JSON Schema (Draft 2020-12) or LLM
function-calling schemas.
"""

__version__ = "1.0.1"
__author__ = "François Lagunas"

from .annotations import Description
from .config import SchemaGeneratorConfig
from .errors import DanglingReferenceError, InvalidGraphError, SchemaDecodeError, SchemaGenerationError
from .generator import (
    DescriptorJsonSchemaGenerator,
    ReflectionClassJsonSchemaGenerator,
    ReflectionFunctionCallingSchemaGenerator,
    SchemaGenerator,
)
from .introspect import (
    Descriptor,
    DescriptorIntrospector,
    DescriptorKind,
    Element,
    IntrospectionConfig,
    ReflectionClassIntrospector,
    ReflectionFunctionIntrospector,
)
from .ir import TypeGraph
from .json_schema import (
    FunctionCallingSchema,
    FunctionCallingSchemaConfig,
    JsonSchema,
    JsonSchemaConfig,
    TypeGraphToFunctionCallingSchemaTransformer,
    TypeGraphToJsonSchemaTransformer,
    decode_function_calling_schema,
    decode_json_schema,
    encode_schema,
)

__all__ = [
    "DanglingReferenceError",
    "Description",
    "Descriptor",
    "DescriptorIntrospector",
    "DescriptorJsonSchemaGenerator",
    "DescriptorKind",
    "Element",
    "FunctionCallingSchema",
    "FunctionCallingSchemaConfig",
    "IntrospectionConfig",
    "InvalidGraphError",
    "JsonSchema",
    "JsonSchemaConfig",
    "ReflectionClassIntrospector",
    "ReflectionClassJsonSchemaGenerator",
    "ReflectionFunctionCallingSchemaGenerator",
    "ReflectionFunctionIntrospector",
    "SchemaDecodeError",
    "SchemaGenerationError",
    "SchemaGenerator",
    "SchemaGeneratorConfig",
    "TypeGraph",
    "TypeGraphToFunctionCallingSchemaTransformer",
    "TypeGraphToJsonSchemaTransformer",
    "decode_function_calling_schema",
    "decode_json_schema",
    "encode_schema",
]
