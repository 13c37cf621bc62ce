"""
One-call facades chaining an introspector with a transformer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from .introspect.descriptions import IntrospectionConfig
from .introspect.descriptors import Descriptor, DescriptorIntrospector
from .introspect.functions import ReflectionFunctionIntrospector
from .introspect.reflection import ReflectionClassIntrospector
from .ir.base import SchemaIntrospector, TypeGraphTransformer
from .ir.nodes import InlineRef, TypeGraph
from .json_schema.codec import encode_schema
from .json_schema.config import FunctionCallingSchemaConfig, JsonSchemaConfig
from .json_schema.definitions import FunctionCallingSchema, JsonSchema
from .json_schema.function_calling import TypeGraphToFunctionCallingSchemaTransformer
from .json_schema.transformer import TypeGraphToJsonSchemaTransformer

T = TypeVar("T")
R = TypeVar("R", JsonSchema, FunctionCallingSchema)


def default_root_name(graph: TypeGraph) -> str:
    """The root's TypeId, or the inlined node's type name."""
    if isinstance(graph.root, InlineRef):
        return type(graph.root.node).__name__
    return graph.root.id


class SchemaGenerator(ABC, Generic[T, R]):
    """Generates a schema document for a target object."""

    def __init__(self, root_name: str | None = None, indent: int | None = None):
        self.root_name = root_name
        self.indent = indent

    @property
    @abstractmethod
    def introspector(self) -> SchemaIntrospector[T]:
        pass

    @property
    @abstractmethod
    def transformer(self) -> TypeGraphTransformer[R]:
        pass

    def generate_schema(self, target: T) -> R:
        graph = self.introspector.introspect(target)
        return self.transformer.transform(graph, self.root_name or default_root_name(graph))

    def generate_schema_string(self, target: T) -> str:
        return encode_schema(self.generate_schema(target), indent=self.indent)


class ReflectionClassJsonSchemaGenerator(SchemaGenerator[type, JsonSchema]):
    """JSON Schema for a dataclass, enum or class hierarchy."""

    def __init__(
        self,
        config: JsonSchemaConfig | None = None,
        introspection_config: IntrospectionConfig | None = None,
        root_name: str | None = None,
        indent: int | None = None,
    ):
        super().__init__(root_name, indent)
        self._introspector = ReflectionClassIntrospector(introspection_config)
        self._transformer = TypeGraphToJsonSchemaTransformer(config or JsonSchemaConfig.DEFAULT)

    @property
    def introspector(self) -> ReflectionClassIntrospector:
        return self._introspector

    @property
    def transformer(self) -> TypeGraphToJsonSchemaTransformer:
        return self._transformer


class DescriptorJsonSchemaGenerator(SchemaGenerator[Descriptor, JsonSchema]):
    """JSON Schema for a serialization descriptor."""

    def __init__(
        self,
        config: JsonSchemaConfig | None = None,
        introspection_config: IntrospectionConfig | None = None,
        root_name: str | None = None,
        indent: int | None = None,
    ):
        super().__init__(root_name, indent)
        self._introspector = DescriptorIntrospector(introspection_config)
        self._transformer = TypeGraphToJsonSchemaTransformer(config or JsonSchemaConfig.DEFAULT)

    @property
    def introspector(self) -> DescriptorIntrospector:
        return self._introspector

    @property
    def transformer(self) -> TypeGraphToJsonSchemaTransformer:
        return self._transformer


class ReflectionFunctionCallingSchemaGenerator(SchemaGenerator[Callable[..., Any], FunctionCallingSchema]):
    """Function-calling (tool) schema for a plain function."""

    def __init__(
        self,
        config: FunctionCallingSchemaConfig | None = None,
        introspection_config: IntrospectionConfig | None = None,
        root_name: str | None = None,
        indent: int | None = None,
    ):
        super().__init__(root_name, indent)
        self._introspector = ReflectionFunctionIntrospector(introspection_config)
        self._transformer = TypeGraphToFunctionCallingSchemaTransformer(config or FunctionCallingSchemaConfig.STRICT)

    @property
    def introspector(self) -> ReflectionFunctionIntrospector:
        return self._introspector

    @property
    def transformer(self) -> TypeGraphToFunctionCallingSchemaTransformer:
        return self._transformer
