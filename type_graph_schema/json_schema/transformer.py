"""
Transformation of a TypeGraph into a JSON Schema (Draft 2020-12) document.

Objects are inlined at each point of use. Polymorphic subtypes, and objects
that refer back to themselves, are emitted once under ``$defs`` and
referenced with ``$ref``.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..errors import InvalidGraphError
from ..ir.base import TypeGraphTransformer
from ..ir.nodes import (
    NAMED_NODE_TYPES,
    EnumNode,
    InlineRef,
    ListNode,
    MapNode,
    ObjectNode,
    PolymorphicNode,
    PrimitiveKind,
    PrimitiveNode,
    Property,
    Ref,
    TypeGraph,
    TypeNode,
    TypeRef,
)
from .config import JSON_SCHEMA_DRAFT_2020_12, FunctionCallingSchemaConfig, JsonSchemaConfig
from .definitions import (
    NULL_TYPE,
    AnyOfDefinition,
    ArrayDefinition,
    DiscriminatorDefinition,
    JsonSchema,
    JsonSchemaDefinition,
    ObjectDefinition,
    OneOfDefinition,
    PropertyDefinition,
    ReferenceDefinition,
    TypedDefinition,
    ValueDefinition,
)

logger = logging.getLogger(__name__)

PRIMITIVE_JSON_TYPES = {
    PrimitiveKind.STRING: "string",
    PrimitiveKind.BOOLEAN: "boolean",
    PrimitiveKind.INT: "integer",
    PrimitiveKind.LONG: "integer",
    PrimitiveKind.FLOAT: "number",
    PrimitiveKind.DOUBLE: "number",
}


def defs_pointer(type_id: str) -> str:
    return f"#/$defs/{type_id}"


def as_union(definition: PropertyDefinition) -> PropertyDefinition:
    """Turn a nullable marker into a ``["T", "null"]`` union; other fragments are returned as is."""
    if isinstance(definition, TypedDefinition):
        return definition.as_union()
    return definition


class DefinitionConverter:
    """Converts graph nodes to schema fragments for a single transform call.

    Holds the ``$defs`` accumulator and the set of objects currently being
    converted; a converter must not be reused for another graph.
    """

    def __init__(
        self,
        graph: TypeGraph,
        config: JsonSchemaConfig | FunctionCallingSchemaConfig,
        union_nullable_properties: bool = False,
    ):
        self.graph = graph
        self.config = config
        self.union_nullable_properties = union_nullable_properties
        self.defs: dict[str, PropertyDefinition] = {}
        self.root_id = graph.root.id if isinstance(graph.root, Ref) else None
        self._in_progress: set[str] = set()
        self._defs_pending: set[str] = set()  # Objects that must also appear under $defs

    @property
    def include_discriminator(self) -> bool:
        return not self.config.strict_schema_flag

    def convert_ref(self, ref: TypeRef, owner: str | None = None) -> PropertyDefinition:
        if isinstance(ref, InlineRef):
            if isinstance(ref.node, NAMED_NODE_TYPES):
                raise InvalidGraphError(
                    f"Unsupported inline node {type(ref.node).__name__}; "
                    "only primitive, list and map nodes can be inlined",
                    owner,
                )
            return self.convert_node(ref.node, ref.nullable, None)
        return self.convert_node(self.graph.node(ref.id, owner), ref.nullable, ref.id)

    def convert_node(self, node: TypeNode, nullable: bool, type_id: str | None) -> PropertyDefinition:
        if isinstance(node, PrimitiveNode):
            return self._convert_primitive(node, nullable)
        if isinstance(node, ObjectNode):
            return self._convert_object(node, nullable, type_id)
        if isinstance(node, EnumNode):
            return self._convert_enum(node, nullable)
        if isinstance(node, ListNode):
            return self._convert_list(node, nullable, type_id)
        if isinstance(node, MapNode):
            return self._convert_map(node, nullable, type_id)
        if isinstance(node, PolymorphicNode):
            return self._convert_polymorphic(node, nullable, type_id)
        raise InvalidGraphError(f"Unknown node type {type(node).__name__}", type_id)

    def required_names(self, node: ObjectNode) -> set[str]:
        if self.config.respect_default_presence:
            return {prop.name for prop in node.properties if not prop.has_default_value}
        if self.config.require_nullable_fields:
            return {prop.name for prop in node.properties}
        return {prop.name for prop in node.properties if not prop.type.nullable}

    def object_definition(self, node: ObjectNode, type_id: str | None) -> ObjectDefinition:
        """Convert the body of an object node (never a reference to it)."""
        if type_id is not None:
            self._in_progress.add(type_id)
        try:
            required = self.required_names(node)
            properties = {
                prop.name: self.convert_property(prop, prop.name in required, type_id) for prop in node.properties
            }
        finally:
            if type_id is not None:
                self._in_progress.discard(type_id)

        return ObjectDefinition(
            description=node.description,
            properties=properties,
            required=[prop.name for prop in node.properties if prop.name in required],
            additional_properties=False,
        )

    def convert_property(self, prop: Property, required: bool, owner: str | None) -> PropertyDefinition:
        definition = self.convert_ref(prop.type, owner)

        # Nullable markers are only kept on optional properties
        if required or self.union_nullable_properties:
            definition = as_union(definition)

        if prop.default_value is not None and isinstance(definition, TypedDefinition):
            if self.config.strict_schema_flag and required:
                definition = replace(definition, const=prop.default_value)
            else:
                definition = replace(definition, default=prop.default_value)

        if prop.description is not None:
            definition = definition.with_description(prop.description)
        return definition

    def _reference(self, target: str, nullable: bool) -> PropertyDefinition:
        reference = ReferenceDefinition(ref=target)
        if nullable:
            return AnyOfDefinition(any_of=[reference, ValueDefinition(type=NULL_TYPE)])
        return reference

    def _marker(self, nullable: bool) -> bool | None:
        return True if nullable else None

    def _convert_primitive(self, node: PrimitiveNode, nullable: bool) -> PropertyDefinition:
        return ValueDefinition(
            type=PRIMITIVE_JSON_TYPES[node.kind],
            description=node.description,
            nullable=self._marker(nullable),
        )

    def _convert_enum(self, node: EnumNode, nullable: bool) -> PropertyDefinition:
        return ValueDefinition(
            type="string",
            description=node.description,
            nullable=self._marker(nullable),
            enum=list(node.entries),
        )

    def _convert_list(self, node: ListNode, nullable: bool, owner: str | None) -> PropertyDefinition:
        return ArrayDefinition(
            description=node.description,
            nullable=self._marker(nullable),
            items=as_union(self.convert_ref(node.element, owner)),
        )

    def _convert_map(self, node: MapNode, nullable: bool, owner: str | None) -> PropertyDefinition:
        return ObjectDefinition(
            description=node.description,
            nullable=self._marker(nullable),
            additional_properties=as_union(self.convert_ref(node.value, owner)),
        )

    def _convert_object(self, node: ObjectNode, nullable: bool, type_id: str | None) -> PropertyDefinition:
        if type_id is not None:
            if type_id in self._in_progress:
                if type_id == self.root_id:
                    return self._reference("#", nullable)
                self._defs_pending.add(type_id)
                return self._reference(defs_pointer(type_id), nullable)
            if type_id in self.defs:
                return self._reference(defs_pointer(type_id), nullable)

        definition = self.object_definition(node, type_id)

        if type_id is not None and type_id in self._defs_pending:
            self.defs[type_id] = definition
            if type_id != self.root_id:
                return self._reference(defs_pointer(type_id), nullable)

        if nullable:
            definition = replace(definition, nullable=True)
        return definition

    def _convert_polymorphic(self, node: PolymorphicNode, nullable: bool, type_id: str | None) -> PropertyDefinition:
        if type_id not in self._in_progress:
            if type_id is not None:
                self._in_progress.add(type_id)
            try:
                for subtype in node.subtypes:
                    if subtype.id in self.defs:
                        continue
                    if subtype.id in self._in_progress:
                        self._defs_pending.add(subtype.id)
                        continue
                    self.defs[subtype.id] = self._subtype_definition(subtype.id, type_id)
            finally:
                if type_id is not None:
                    self._in_progress.discard(type_id)

        discriminator = None
        if node.discriminator is not None and self.include_discriminator:
            mapping = node.discriminator.mapping
            discriminator = DiscriminatorDefinition(
                property_name=node.discriminator.property_name,
                mapping=(
                    {value: defs_pointer(target) for value, target in mapping.items()} if mapping is not None else None
                ),
            )

        block = OneOfDefinition(
            one_of=[ReferenceDefinition(ref=defs_pointer(subtype.id)) for subtype in node.subtypes],
            discriminator=discriminator,
        )
        if nullable:
            # oneOf cannot take a null branch without becoming ambiguous, so wrap it
            return AnyOfDefinition(description=node.description, any_of=[block, ValueDefinition(type=NULL_TYPE)])
        return replace(block, description=node.description)

    def _subtype_definition(self, subtype_id: str, owner: str | None) -> PropertyDefinition:
        node = self.graph.node(subtype_id, owner)
        if isinstance(node, ObjectNode):
            return self.object_definition(node, subtype_id)
        return self.convert_node(node, False, subtype_id)


class TypeGraphToJsonSchemaTransformer(TypeGraphTransformer[JsonSchema]):
    """Transforms a TypeGraph into a JSON Schema document.

    The transformation is pure: the same graph and configuration always
    produce an equal document.
    """

    def __init__(self, config: JsonSchemaConfig | None = None):
        self.config = config or JsonSchemaConfig.DEFAULT

    def transform(self, graph: TypeGraph, root_name: str) -> JsonSchema:
        converter = DefinitionConverter(graph, self.config)
        root_definition = converter.convert_ref(graph.root)
        defs = converter.defs or None

        strict = self.config.strict_schema_flag
        schema_uri = JSON_SCHEMA_DRAFT_2020_12 if strict else None
        schema_id = root_name if strict else None

        if isinstance(root_definition, ObjectDefinition) and root_definition.properties is not None:
            body = JsonSchemaDefinition(
                schema_uri=schema_uri,
                id=schema_id,
                description=root_definition.description,
                properties=root_definition.properties or None,
                required=root_definition.required or None,
                additional_properties=False,
                defs=defs,
            )
        elif isinstance(root_definition, OneOfDefinition):
            body = JsonSchemaDefinition(
                schema_uri=schema_uri,
                id=schema_id,
                description=root_definition.description,
                additional_properties=False,
                one_of=root_definition.one_of,
                discriminator=root_definition.discriminator,
                defs=defs,
            )
        else:
            body = JsonSchemaDefinition(
                schema_uri=schema_uri,
                id=schema_id,
                additional_properties=False,
                defs=defs,
            )

        logger.debug("Transformed '%s' into JSON schema with %d $defs entries", root_name, len(converter.defs))
        return JsonSchema(name=root_name, strict=strict, description=None, schema=body)
