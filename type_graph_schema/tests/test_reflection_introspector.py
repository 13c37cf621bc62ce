import logging
from dataclasses import dataclass, field, make_dataclass
from enum import Enum
from typing import Annotated, Optional

import pytest

from type_graph_schema import Description
from type_graph_schema.errors import InvalidGraphError
from type_graph_schema.introspect import IntrospectionConfig, ReflectionClassIntrospector
from type_graph_schema.ir import (
    EnumNode,
    InlineRef,
    ListNode,
    MapNode,
    ObjectNode,
    PolymorphicNode,
    PrimitiveKind,
    PrimitiveNode,
    Ref,
)


class Color(Enum):
    RED = "red"
    GREEN = "green"


@Description("A postal address")
@dataclass
class Address:
    street: Annotated[str, Description("Street and number")]
    country: str = "US"
    floor: int | None = None
    tags: list[str] = field(default_factory=list)
    color: Color = Color.GREEN


@dataclass
class Node:
    value: int
    next: "Node | None" = None


@dataclass
class Inventory:
    counts: dict[str, int]
    ratios: Optional[list[float]]
    flags: set[bool]
    note: str = field(default="", metadata={"description": "Free text"})


@Description("A drawable shape")
@dataclass
class Shape:
    name: Annotated[str, Description("Display name")]


@dataclass
class Circle(Shape):
    radius: float


@dataclass
class Square(Shape):
    side: float


@dataclass
class Canvas:
    main: Shape
    extra: Shape | None = None


@dataclass
class Loose:
    either: int | str


ItemA = make_dataclass("Item", [("a", int)], module="inventory.a")
ItemB = make_dataclass("Item", [("b", str)], module="inventory.b")
ItemC = make_dataclass("Item", [("c", bool)], module="inventory.b")


@dataclass
class Warehouse:
    first: ItemA
    second: ItemB


def primitive(kind, nullable=False):
    return InlineRef(PrimitiveNode(kind), nullable)


class TestReflectionClassIntrospector:
    """Test cases for reflection-based class introspection"""

    def test_dataclass_fields(self):
        graph = ReflectionClassIntrospector().introspect(Address)

        assert graph.root == Ref("Address")
        node = graph.nodes["Address"]
        assert isinstance(node, ObjectNode)
        assert node.description == "A postal address"
        assert node.property_names() == ["street", "country", "floor", "tags", "color"]
        assert node.required == frozenset({"street"})

        street, country, floor, tags, color = node.properties
        assert street.type == primitive(PrimitiveKind.STRING)
        assert street.description == "Street and number"
        assert country.has_default_value is True
        assert country.default_value == "US"
        assert floor.type == primitive(PrimitiveKind.INT, nullable=True)
        assert floor.default_value is None
        assert tags.type == InlineRef(ListNode(primitive(PrimitiveKind.STRING)))
        assert tags.has_default_value is True
        assert color.type == Ref("Color")
        assert color.default_value == "GREEN"

    def test_enum_uses_member_names(self):
        graph = ReflectionClassIntrospector().introspect(Address)
        assert graph.nodes["Color"] == EnumNode(name="Color", entries=("RED", "GREEN"))

    def test_collections_and_field_metadata(self):
        graph = ReflectionClassIntrospector().introspect(Inventory)
        counts, ratios, flags, note = graph.nodes["Inventory"].properties

        assert counts.type == InlineRef(MapNode(primitive(PrimitiveKind.STRING), primitive(PrimitiveKind.INT)))
        assert ratios.type == InlineRef(ListNode(primitive(PrimitiveKind.DOUBLE)), nullable=True)
        assert flags.type == InlineRef(ListNode(primitive(PrimitiveKind.BOOLEAN)))
        assert note.description == "Free text"

    def test_self_reference(self):
        graph = ReflectionClassIntrospector().introspect(Node)

        objects = [node for node in graph.nodes.values() if isinstance(node, ObjectNode)]
        assert len(objects) == 1
        assert objects[0].name == "Node"
        assert graph.nodes["Node"].properties[1].type == Ref("Node", nullable=True)

    def test_hierarchy_becomes_polymorphic(self):
        graph = ReflectionClassIntrospector().introspect(Shape)

        base = graph.nodes["Shape"]
        assert isinstance(base, PolymorphicNode)
        assert base.description == "A drawable shape"
        assert [subtype.id for subtype in base.subtypes] == ["Shape.Circle", "Shape.Square"]
        assert base.discriminator.required is True
        assert base.discriminator.mapping == {"Shape.Circle": "Shape.Circle", "Shape.Square": "Shape.Square"}
        assert list(graph.nodes) == ["Shape", "Shape.Circle", "Shape.Square"]

    def test_subtype_carries_discriminator_and_inherited_fields(self):
        graph = ReflectionClassIntrospector().introspect(Shape)
        circle = graph.nodes["Shape.Circle"]

        assert circle.name == "Circle"
        assert circle.property_names() == ["type", "name", "radius"]
        tag = circle.properties[0]
        assert tag.default_value == "Shape.Circle"
        assert tag.has_default_value is False
        assert circle.required == frozenset({"type", "name", "radius"})
        assert circle.properties[1].description == "Display name"

    def test_subtype_referenced_directly_keeps_qualified_id(self):
        graph = ReflectionClassIntrospector().introspect(Circle)
        assert graph.root == Ref("Shape.Circle")

    def test_hierarchy_referenced_twice_is_built_once(self):
        graph = ReflectionClassIntrospector().introspect(Canvas)
        main, extra = graph.nodes["Canvas"].properties

        assert main.type == Ref("Shape")
        assert extra.type == Ref("Shape", nullable=True)
        assert list(graph.nodes) == ["Canvas", "Shape", "Shape.Circle", "Shape.Square"]

    def test_custom_discriminator_property(self):
        config = IntrospectionConfig(discriminator_property="kind")
        graph = ReflectionClassIntrospector(config).introspect(Shape)
        assert graph.nodes["Shape"].discriminator.property_name == "kind"
        assert graph.nodes["Shape.Square"].property_names()[0] == "kind"

    def test_unsupported_union_degrades(self, caplog):
        with caplog.at_level(logging.WARNING, logger="type_graph_schema.introspect.reflection"):
            graph = ReflectionClassIntrospector().introspect(Loose)

        either = graph.nodes["Loose"].properties[0]
        assert isinstance(either.type, Ref)
        assert graph.nodes[either.type.id] == ObjectNode(name=either.type.id)
        assert "Unsupported type hint" in caplog.text

    def test_same_qualname_from_other_module_gets_module_prefix(self):
        graph = ReflectionClassIntrospector().introspect(Warehouse)
        first, second = graph.nodes["Warehouse"].properties

        assert first.type == Ref("Item")
        assert second.type == Ref("inventory.b.Item")
        assert graph.nodes["Item"].property_names() == ["a"]
        assert graph.nodes["inventory.b.Item"].property_names() == ["b"]
        graph.validate()

    def test_unresolvable_id_collision_raises(self):
        Crowded = make_dataclass("Crowded", [("a", ItemA), ("b", ItemB), ("c", ItemC)])
        with pytest.raises(InvalidGraphError, match="inventory.b.Item"):
            ReflectionClassIntrospector().introspect(Crowded)

    def test_primitive_root_is_inline(self):
        graph = ReflectionClassIntrospector().introspect(str)
        assert graph.root == primitive(PrimitiveKind.STRING)
        assert graph.nodes == {}


if __name__ == "__main__":
    pytest.main([__file__])
