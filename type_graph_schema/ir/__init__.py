"""
Type graph intermediate representation.
"""

from .base import SchemaIntrospector, TypeGraphTransformer
from .nodes import (
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
    Ref,
    SubtypeRef,
    TypeGraph,
    TypeId,
    TypeNode,
    TypeRef,
    with_nullable,
)

__all__ = [
    "Discriminator",
    "EnumNode",
    "InlineRef",
    "ListNode",
    "MapNode",
    "ObjectNode",
    "PolymorphicNode",
    "PrimitiveKind",
    "PrimitiveNode",
    "Property",
    "Ref",
    "SchemaIntrospector",
    "SubtypeRef",
    "TypeGraph",
    "TypeGraphTransformer",
    "TypeId",
    "TypeNode",
    "TypeRef",
    "with_nullable",
]
