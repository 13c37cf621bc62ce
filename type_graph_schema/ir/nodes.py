"""
Type graph node definitions.

The type graph is the intermediate representation shared by every
introspector and every schema transformer. Introspectors build it; the
transformers read it once and throw it away.

Nullability lives on references, never on nodes: the same node can be
referenced as nullable from one property and as non-nullable from another.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, NewType, Union

from ..errors import DanglingReferenceError, InvalidGraphError

TypeId = NewType("TypeId", str)


class PrimitiveKind(str, Enum):
    """Scalar kinds understood by the transformers."""

    STRING = "string"
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"


@dataclass(frozen=True)
class InlineRef:
    """A node embedded directly at the point of use.

    Only primitive, list and map nodes may be inlined.
    """

    node: TypeNode
    nullable: bool = False


@dataclass(frozen=True)
class Ref:
    """A reference to a node stored in the graph's node table."""

    id: TypeId
    nullable: bool = False


@dataclass(frozen=True)
class PrimitiveNode:
    kind: PrimitiveKind
    description: str | None = None


@dataclass(frozen=True)
class ListNode:
    element: TypeRef
    description: str | None = None


@dataclass(frozen=True)
class MapNode:
    """A string-keyed dictionary; ``key`` is recorded but always emitted as a string."""

    key: TypeRef
    value: TypeRef
    description: str | None = None


@dataclass(frozen=True)
class Property:
    """A named member of an object node."""

    name: str
    type: TypeRef
    description: str | None = None
    has_default_value: bool = False  # Whether the source declares a default
    default_value: Any = None  # Literal default, or the fixed discriminator tag


@dataclass(frozen=True)
class ObjectNode:
    name: str
    properties: tuple[Property, ...] = ()  # Declaration order
    required: frozenset[str] = frozenset()
    description: str | None = None

    def property_names(self) -> list[str]:
        return [prop.name for prop in self.properties]


@dataclass(frozen=True)
class EnumNode:
    name: str
    entries: tuple[str, ...] = ()  # Declaration order
    description: str | None = None


@dataclass(frozen=True)
class Discriminator:
    """How a polymorphic value announces its concrete subtype."""

    property_name: str = "type"
    required: bool = True
    mapping: Mapping[str, TypeId] | None = None  # discriminator value -> TypeId


@dataclass(frozen=True)
class SubtypeRef:
    id: TypeId
    ref: Ref | None = None

    def __post_init__(self):
        if self.ref is None:
            object.__setattr__(self, "ref", Ref(self.id))


@dataclass(frozen=True)
class PolymorphicNode:
    base_name: str
    subtypes: tuple[SubtypeRef, ...] = ()
    discriminator: Discriminator | None = None
    description: str | None = None


TypeRef = Union[InlineRef, Ref]
TypeNode = Union[PrimitiveNode, ListNode, MapNode, ObjectNode, EnumNode, PolymorphicNode]

# Nodes that carry an identity of their own and must be referenced by id
NAMED_NODE_TYPES = (ObjectNode, EnumNode, PolymorphicNode)


def with_nullable(ref: TypeRef, nullable: bool) -> TypeRef:
    """Return ``ref`` with its nullability replaced."""
    if ref.nullable == nullable:
        return ref
    return replace(ref, nullable=nullable)


@dataclass(frozen=True)
class TypeGraph:
    """A root reference plus the table of every named node reachable from it."""

    root: TypeRef
    nodes: dict[TypeId, TypeNode] = field(default_factory=dict)  # Discovery order

    def node(self, type_id: str, referenced_from: str | None = None) -> TypeNode:
        """
        Look up a node by id.

        Args:
            type_id: Id to resolve
            referenced_from: Optional id of the referencing node, for diagnostics

        Returns:
            The node stored under ``type_id``

        Raises:
            DanglingReferenceError: If ``type_id`` is not in the node table
        """
        try:
            return self.nodes[type_id]
        except KeyError:
            raise DanglingReferenceError(type_id, referenced_from) from None

    def validate(self) -> None:
        """
        Check the closure and inlining rules of the whole graph.

        Raises:
            DanglingReferenceError: If any Ref does not resolve
            InvalidGraphError: If a named node appears inline
        """
        for ref, owner in self._iter_refs():
            if isinstance(ref, Ref):
                self.node(ref.id, owner)
            elif isinstance(ref.node, NAMED_NODE_TYPES):
                raise InvalidGraphError(
                    f"{type(ref.node).__name__} cannot be inlined; it must be referenced by id",
                    owner,
                )

    def _iter_refs(self) -> Iterator[tuple[TypeRef, str | None]]:
        pending: list[tuple[TypeRef, str | None]] = [(self.root, None)]
        for type_id, node in self.nodes.items():
            pending.extend((ref, type_id) for ref in _child_refs(node))
        while pending:
            ref, owner = pending.pop()
            yield ref, owner
            if isinstance(ref, InlineRef):
                pending.extend((child, owner) for child in _child_refs(ref.node))


def _child_refs(node: TypeNode) -> list[TypeRef]:
    if isinstance(node, ListNode):
        return [node.element]
    if isinstance(node, MapNode):
        return [node.key, node.value]
    if isinstance(node, ObjectNode):
        return [prop.type for prop in node.properties]
    if isinstance(node, PolymorphicNode):
        return [subtype.ref for subtype in node.subtypes]
    return []
