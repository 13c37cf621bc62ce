"""
Introspection of serialization-style descriptors.

A ``Descriptor`` describes how a type is serialized, independently of the
Python class (if any) behind it: a serial name, a kind, and an ordered list
of elements. Sealed hierarchies follow the usual two-element layout::

    Descriptor(kind=SEALED)
      elements[0] -> "type"   (the discriminator)
      elements[1] -> "value"  (its elements are the subtype descriptors)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import InvalidGraphError
from ..ir.base import SchemaIntrospector
from ..ir.nodes import (
    Discriminator,
    EnumNode,
    InlineRef,
    ListNode,
    MapNode,
    ObjectNode,
    PolymorphicNode,
    PrimitiveKind,
    PrimitiveNode,
    Property,
    SubtypeRef,
    TypeGraph,
    TypeId,
    TypeRef,
)
from .context import BaseIntrospectionContext
from .descriptions import IntrospectionConfig

logger = logging.getLogger(__name__)


class DescriptorKind(str, Enum):
    STRING = "string"
    CHAR = "char"
    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    ENUM = "enum"
    CLASS = "class"
    OBJECT = "object"
    LIST = "list"
    MAP = "map"
    SEALED = "sealed"
    OPEN = "open"
    CONTEXTUAL = "contextual"


PRIMITIVE_KINDS: dict[DescriptorKind, PrimitiveKind] = {
    DescriptorKind.STRING: PrimitiveKind.STRING,
    DescriptorKind.CHAR: PrimitiveKind.STRING,
    DescriptorKind.BOOLEAN: PrimitiveKind.BOOLEAN,
    DescriptorKind.BYTE: PrimitiveKind.INT,
    DescriptorKind.SHORT: PrimitiveKind.INT,
    DescriptorKind.INT: PrimitiveKind.INT,
    DescriptorKind.LONG: PrimitiveKind.LONG,
    DescriptorKind.FLOAT: PrimitiveKind.FLOAT,
    DescriptorKind.DOUBLE: PrimitiveKind.DOUBLE,
}


@dataclass(eq=False)
class Descriptor:
    """Serialization metadata for one type. Compared and hashed by identity."""

    serial_name: str
    kind: DescriptorKind
    elements: list[Element] = field(default_factory=list)
    annotations: list[Any] = field(default_factory=list)

    @property
    def simple_name(self) -> str:
        return self.serial_name.rsplit(".", 1)[-1]


@dataclass(eq=False)
class Element:
    """A named slot of a descriptor (a property, list item, map key or subtype)."""

    name: str
    descriptor: Descriptor
    nullable: bool = False
    optional: bool = False  # Has a default value and may be omitted
    annotations: list[Any] = field(default_factory=list)


class DescriptorIntrospectionContext(BaseIntrospectionContext[Descriptor]):
    """Builds graph nodes from descriptors."""

    def __init__(self, config: IntrospectionConfig | None = None):
        super().__init__(config)
        self._subtype_ids: dict[Descriptor, TypeId] = {}

    def to_ref(self, declaration: Descriptor, nullable: bool = False) -> TypeRef:
        cached = self.cached_ref(declaration, nullable)
        if cached is not None:
            return cached

        kind = declaration.kind
        if kind in PRIMITIVE_KINDS:
            return self.remember_ref(declaration, InlineRef(PrimitiveNode(PRIMITIVE_KINDS[kind]), nullable))
        if kind == DescriptorKind.ENUM:
            return self._enum_ref(declaration, nullable)
        if kind in (DescriptorKind.CLASS, DescriptorKind.OBJECT):
            return self._object_ref(declaration, nullable)
        if kind == DescriptorKind.LIST:
            element = self._element_at(declaration, 0)
            node = ListNode(element=self.to_ref(element.descriptor, element.nullable))
            return self.remember_ref(declaration, InlineRef(node, nullable))
        if kind == DescriptorKind.MAP:
            key = self._element_at(declaration, 0)
            value = self._element_at(declaration, 1)
            node = MapNode(
                key=self.to_ref(key.descriptor, key.nullable),
                value=self.to_ref(value.descriptor, value.nullable),
            )
            return self.remember_ref(declaration, InlineRef(node, nullable))
        if kind == DescriptorKind.SEALED:
            return self._polymorphic_ref(declaration, nullable)

        return self._unknown_ref(declaration, nullable)

    def register_subtype_ids(self, root: Descriptor) -> None:
        """
        Assign qualified ids to every sealed subtype reachable from ``root``.

        Runs before any node is built, so a subtype gets its ``Base.Sub`` id
        even when it is reached directly before its sealed parent.
        """
        pending = [root]
        seen: set[Descriptor] = set()
        while pending:
            descriptor = pending.pop(0)
            if descriptor in seen:
                continue
            seen.add(descriptor)

            # Malformed sealed descriptors are reported when their node is built
            if descriptor.kind == DescriptorKind.SEALED and self._has_subtypes(descriptor):
                for subtype in self._sealed_subtypes(descriptor):
                    self._subtype_ids.setdefault(
                        subtype, self.qualified_name(descriptor.simple_name, subtype.simple_name)
                    )
            pending.extend(element.descriptor for element in descriptor.elements)

    def _type_id(self, descriptor: Descriptor) -> TypeId:
        return self._subtype_ids.get(descriptor, TypeId(descriptor.serial_name))

    def _element_at(self, descriptor: Descriptor, index: int) -> Element:
        if len(descriptor.elements) <= index:
            raise InvalidGraphError(
                f"{descriptor.kind.value} descriptor needs at least {index + 1} element(s)",
                descriptor.serial_name,
            )
        return descriptor.elements[index]

    def _enum_ref(self, descriptor: Descriptor, nullable: bool) -> TypeRef:
        def build() -> EnumNode:
            return EnumNode(
                name=descriptor.serial_name,
                entries=tuple(element.name for element in descriptor.elements),
                description=self.extract_description(descriptor.annotations),
            )

        return self.named_ref(descriptor, self._type_id(descriptor), nullable, build)

    def _object_ref(self, descriptor: Descriptor, nullable: bool) -> TypeRef:
        def build() -> ObjectNode:
            properties = []
            required = set()
            for element in descriptor.elements:
                properties.append(
                    Property(
                        name=element.name,
                        type=self.to_ref(element.descriptor, element.nullable),
                        description=self.extract_description(element.annotations),
                        has_default_value=element.optional,
                    )
                )
                if not element.optional:
                    required.add(element.name)
            return ObjectNode(
                name=descriptor.serial_name,
                properties=tuple(properties),
                required=frozenset(required),
                description=self.extract_description(descriptor.annotations),
            )

        return self.named_ref(descriptor, self._type_id(descriptor), nullable, build)

    def _polymorphic_ref(self, descriptor: Descriptor, nullable: bool) -> TypeRef:
        def build() -> PolymorphicNode:
            subtype_descriptors = self._sealed_subtypes(descriptor)
            subtypes = []
            mapping: dict[str, TypeId] = {}
            for subtype in subtype_descriptors:
                ref = self.to_ref(subtype)
                subtypes.append(SubtypeRef(ref.id))
                mapping[subtype.serial_name] = ref.id
            return PolymorphicNode(
                base_name=descriptor.serial_name,
                subtypes=tuple(subtypes),
                discriminator=Discriminator(
                    property_name=self.config.discriminator_property,
                    required=self.config.discriminator_required,
                    mapping=mapping,
                ),
                description=self.extract_description(descriptor.annotations),
            )

        return self.named_ref(descriptor, self._type_id(descriptor), nullable, build)

    @staticmethod
    def _has_subtypes(descriptor: Descriptor) -> bool:
        elements = descriptor.elements
        return len(elements) >= 2 and elements[1].name == "value"

    def _sealed_subtypes(self, descriptor: Descriptor) -> list[Descriptor]:
        elements = descriptor.elements
        if not self._has_subtypes(descriptor):
            found = elements[1].name if len(elements) > 1 else None
            raise InvalidGraphError(
                f"Unexpected sealed descriptor structure: expected 'value' element at index 1, found {found!r}",
                descriptor.serial_name,
            )
        return [element.descriptor for element in elements[1].descriptor.elements]

    def _unknown_ref(self, descriptor: Descriptor, nullable: bool) -> TypeRef:
        logger.warning(
            "Unsupported descriptor kind %r for '%s', emitting an empty object",
            descriptor.kind,
            descriptor.serial_name,
        )

        def build() -> ObjectNode:
            return ObjectNode(
                name=descriptor.serial_name,
                description=self.extract_description(descriptor.annotations),
            )

        return self.named_ref(descriptor, self._type_id(descriptor), nullable, build)


class DescriptorIntrospector(SchemaIntrospector[Descriptor]):
    """Introspects a root descriptor into a TypeGraph."""

    def __init__(self, config: IntrospectionConfig | None = None):
        self.config = config or IntrospectionConfig()

    def introspect(self, root: Descriptor) -> TypeGraph:
        context = DescriptorIntrospectionContext(self.config)
        context.register_subtype_ids(root)
        return context.build_graph(context.to_ref(root))
