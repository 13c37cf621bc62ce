import json
import logging
from pathlib import Path

import pytest

from type_graph_schema import Description
from type_graph_schema.errors import InvalidGraphError
from type_graph_schema.generator import DescriptorJsonSchemaGenerator
from type_graph_schema.introspect import (
    Descriptor,
    DescriptorIntrospector,
    DescriptorKind,
    Element,
    IntrospectionConfig,
)
from type_graph_schema.ir import (
    EnumNode,
    InlineRef,
    ObjectNode,
    PolymorphicNode,
    PrimitiveKind,
    PrimitiveNode,
    Ref,
)
from type_graph_schema.json_schema import JsonSchemaConfig


def descriptor_from_dict(data):
    """Build a Descriptor tree from its JSON test representation"""
    annotations = [Description(data["description"])] if "description" in data else []
    return Descriptor(
        serial_name=data["serial_name"],
        kind=DescriptorKind(data["kind"]),
        elements=[
            Element(
                name=element["name"],
                descriptor=descriptor_from_dict(element["descriptor"]),
                nullable=element.get("nullable", False),
                optional=element.get("optional", False),
            )
            for element in data.get("elements", [])
        ],
        annotations=annotations,
    )


def load_test_data():
    """Load test cases from JSON file"""
    test_data_path = Path(__file__).parent / "test_data" / "descriptor_cases.json"
    with open(test_data_path) as f:
        return json.load(f)


def string_descriptor():
    return Descriptor("String", DescriptorKind.STRING)


@pytest.mark.parametrize("test_case", load_test_data(), ids=lambda case: case["name"])
def test_descriptor_json_schema(test_case):
    """Test JSON schema generation from descriptors"""
    config = JsonSchemaConfig.from_dict(test_case["config"])
    generator = DescriptorJsonSchemaGenerator(config)

    schema = generator.generate_schema(descriptor_from_dict(test_case["descriptor"]))

    assert schema.to_dict() == test_case["expected"], f"Unexpected schema:\n{json.dumps(schema.to_dict(), indent=2)}"


class TestDescriptorIntrospector:
    """Test cases for descriptor introspection"""

    def test_primitive_kinds(self):
        expected = {
            DescriptorKind.CHAR: PrimitiveKind.STRING,
            DescriptorKind.BYTE: PrimitiveKind.INT,
            DescriptorKind.SHORT: PrimitiveKind.INT,
            DescriptorKind.LONG: PrimitiveKind.LONG,
            DescriptorKind.FLOAT: PrimitiveKind.FLOAT,
        }
        for kind, primitive in expected.items():
            graph = DescriptorIntrospector().introspect(Descriptor("x", kind))
            assert graph.root == InlineRef(PrimitiveNode(primitive))
            assert graph.nodes == {}

    def test_object_required_follows_optional_flag(self):
        address = Descriptor(
            "Address",
            DescriptorKind.CLASS,
            elements=[
                Element("street", string_descriptor(), annotations=[Description("Street name")]),
                Element("country", string_descriptor(), optional=True),
            ],
            annotations=[Description("A postal address")],
        )

        graph = DescriptorIntrospector().introspect(address)

        node = graph.nodes["Address"]
        assert isinstance(node, ObjectNode)
        assert node.required == frozenset({"street"})
        assert node.description == "A postal address"
        assert node.properties[0].description == "Street name"
        assert node.properties[1].has_default_value is True

    def test_enum_entries_in_order(self):
        status = Descriptor(
            "Status",
            DescriptorKind.ENUM,
            elements=[Element("B", string_descriptor()), Element("A", string_descriptor())],
        )
        graph = DescriptorIntrospector().introspect(status)
        assert graph.nodes["Status"] == EnumNode(name="Status", entries=("B", "A"))

    def test_self_reference_produces_single_node(self):
        node = Descriptor("Node", DescriptorKind.CLASS)
        node.elements.append(Element("next", node, nullable=True))

        graph = DescriptorIntrospector().introspect(node)

        assert list(graph.nodes) == ["Node"]
        assert graph.nodes["Node"].properties[0].type == Ref("Node", nullable=True)

    def test_same_descriptor_shared(self):
        address = Descriptor("Address", DescriptorKind.CLASS, elements=[Element("street", string_descriptor())])
        person = Descriptor(
            "Person",
            DescriptorKind.CLASS,
            elements=[Element("home", address), Element("work", address, nullable=True)],
        )

        graph = DescriptorIntrospector().introspect(person)

        assert list(graph.nodes) == ["Person", "Address"]
        home, work = graph.nodes["Person"].properties
        assert home.type == Ref("Address")
        assert work.type == Ref("Address", nullable=True)

    def test_sealed_subtypes_are_qualified(self):
        circle = Descriptor("Circle", DescriptorKind.CLASS)
        sealed = Descriptor(
            "Shape",
            DescriptorKind.SEALED,
            elements=[
                Element("type", string_descriptor()),
                Element("value", Descriptor("value", DescriptorKind.CONTEXTUAL, elements=[Element("Circle", circle)])),
            ],
        )

        graph = DescriptorIntrospector(IntrospectionConfig(discriminator_property="kind")).introspect(sealed)

        base = graph.nodes["Shape"]
        assert isinstance(base, PolymorphicNode)
        assert [subtype.id for subtype in base.subtypes] == ["Shape.Circle"]
        assert base.discriminator.property_name == "kind"
        assert base.discriminator.mapping == {"Circle": "Shape.Circle"}
        assert list(graph.nodes) == ["Shape", "Shape.Circle"]

    def test_subtype_reached_before_its_sealed_parent_is_qualified(self):
        unknown = Descriptor("com.x.OuterA.Unknown", DescriptorKind.CLASS, elements=[Element("code", string_descriptor())])
        known = Descriptor("com.x.OuterA.Known", DescriptorKind.CLASS)
        sealed = Descriptor(
            "com.x.OuterA",
            DescriptorKind.SEALED,
            elements=[
                Element("type", string_descriptor()),
                Element(
                    "value",
                    Descriptor(
                        "Polymorphic<OuterA>",
                        DescriptorKind.CONTEXTUAL,
                        elements=[Element(unknown.serial_name, unknown), Element(known.serial_name, known)],
                    ),
                ),
            ],
        )
        root = Descriptor("Root", DescriptorKind.CLASS, elements=[Element("direct", unknown), Element("poly", sealed)])

        graph = DescriptorIntrospector().introspect(root)

        assert graph.nodes["Root"].properties[0].type == Ref("OuterA.Unknown")
        assert [subtype.id for subtype in graph.nodes["com.x.OuterA"].subtypes] == ["OuterA.Unknown", "OuterA.Known"]
        assert "com.x.OuterA.Unknown" not in graph.nodes
        graph.validate()

    def test_malformed_sealed_descriptor_raises(self):
        sealed = Descriptor(
            "Shape",
            DescriptorKind.SEALED,
            elements=[Element("type", string_descriptor()), Element("subtypes", string_descriptor())],
        )
        with pytest.raises(InvalidGraphError, match="'value' element at index 1"):
            DescriptorIntrospector().introspect(sealed)

    def test_unknown_kind_degrades_to_empty_object(self, caplog):
        holder = Descriptor(
            "Holder",
            DescriptorKind.CLASS,
            elements=[Element("payload", Descriptor("Payload", DescriptorKind.OPEN))],
        )

        with caplog.at_level(logging.WARNING, logger="type_graph_schema.introspect.descriptors"):
            graph = DescriptorIntrospector().introspect(holder)

        assert graph.nodes["Payload"] == ObjectNode(name="Payload")
        assert "Payload" in caplog.text

    def test_list_without_element_raises(self):
        with pytest.raises(InvalidGraphError):
            DescriptorIntrospector().introspect(Descriptor("List", DescriptorKind.LIST))

    def test_introspections_do_not_share_state(self):
        address = Descriptor("Address", DescriptorKind.CLASS, elements=[Element("street", string_descriptor())])
        introspector = DescriptorIntrospector()

        first = introspector.introspect(address)
        second = introspector.introspect(address)

        assert first == second
        assert first.nodes is not second.nodes


if __name__ == "__main__":
    pytest.main([__file__])
