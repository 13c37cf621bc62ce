"""
Transformation of a TypeGraph into an LLM function-calling (tool) schema.
"""

from __future__ import annotations

import logging

from ..errors import InvalidGraphError
from ..ir.base import TypeGraphTransformer
from ..ir.nodes import ObjectNode, Ref, TypeGraph
from .config import FunctionCallingSchemaConfig
from .definitions import FunctionCallingSchema, JsonSchemaDefinition
from .transformer import DefinitionConverter

logger = logging.getLogger(__name__)


class FunctionCallingConverter(DefinitionConverter):
    """Converter for the function-calling dialect.

    The dialect has no nullable marker: nullable values are always written as
    ``["T", "null"]`` unions. In strict mode every property is required.
    """

    def __init__(self, graph: TypeGraph, config: FunctionCallingSchemaConfig):
        super().__init__(graph, config, union_nullable_properties=True)

    def required_names(self, node: ObjectNode) -> set[str]:
        if self.config.strict_schema_flag:
            return {prop.name for prop in node.properties}
        return super().required_names(node)


class TypeGraphToFunctionCallingSchemaTransformer(TypeGraphTransformer[FunctionCallingSchema]):
    """Transforms the graph of a function's parameters into a tool schema."""

    def __init__(self, config: FunctionCallingSchemaConfig | None = None):
        self.config = config or FunctionCallingSchemaConfig.DEFAULT

    def transform(self, graph: TypeGraph, root_name: str) -> FunctionCallingSchema:
        """
        Build the tool schema for the object at the graph's root.

        Args:
            graph: Graph whose root references an object node
            root_name: Name of the generated document (the tool is named after the node)

        Returns:
            The function-calling schema

        Raises:
            InvalidGraphError: If the root is not a reference to an object node
        """
        if not isinstance(graph.root, Ref):
            raise InvalidGraphError("Function-calling root cannot be inline; expected a reference to an object node")
        node = graph.node(graph.root.id)
        if not isinstance(node, ObjectNode):
            raise InvalidGraphError(
                f"Function-calling root must be an object node, got {type(node).__name__}",
                graph.root.id,
            )

        converter = FunctionCallingConverter(graph, self.config)
        definition = converter.object_definition(node, graph.root.id)
        parameters = JsonSchemaDefinition(
            properties=definition.properties or {},
            required=definition.required or [],
            additional_properties=False,
            defs=converter.defs or None,
        )

        logger.debug("Transformed '%s' into function-calling schema '%s'", root_name, node.name)
        return FunctionCallingSchema(
            name=node.name,
            description=node.description or "",
            strict=self.config.strict_schema_flag,
            parameters=parameters,
        )
