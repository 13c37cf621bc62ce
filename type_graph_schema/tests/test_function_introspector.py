from typing import Annotated

import pytest

from type_graph_schema import Description
from type_graph_schema.introspect import ReflectionFunctionIntrospector
from type_graph_schema.ir import InlineRef, ObjectNode, PrimitiveKind, PrimitiveNode, Ref


def get_weather(
    city: Annotated[str, Description("City to look up")],
    days: int = 1,
    unit: str | None = None,
    *args,
    **kwargs,
) -> str:
    """Return the weather forecast for a city.

    The forecast is fetched from the configured provider.
    """
    return ""


@Description("Send an email")
def send_email(to: list[str], subject: str) -> None:
    """This docstring is ignored because a description marker is present."""


def no_docs(flag: bool):
    pass


class Calculator:
    def add(self, a: int, b: int) -> int:
        """Add two numbers."""
        return a + b


async def fetch(url: str) -> str:
    return url


class TestReflectionFunctionIntrospector:
    """Test cases for function introspection"""

    def test_parameters_become_properties(self):
        graph = ReflectionFunctionIntrospector().introspect(get_weather)

        assert graph.root == Ref("get_weather")
        node = graph.nodes["get_weather"]
        assert isinstance(node, ObjectNode)
        assert node.property_names() == ["city", "days", "unit"]
        assert node.required == frozenset({"city"})

        city, days, unit = node.properties
        assert city.description == "City to look up"
        assert days.has_default_value is True
        # Function defaults are not emitted as literal values
        assert days.default_value is None
        assert unit.type == InlineRef(PrimitiveNode(PrimitiveKind.STRING), nullable=True)

    def test_docstring_summary_is_description(self):
        node = ReflectionFunctionIntrospector().introspect(get_weather).nodes["get_weather"]
        assert node.description == "Return the weather forecast for a city."

    def test_description_marker_wins_over_docstring(self):
        node = ReflectionFunctionIntrospector().introspect(send_email).nodes["send_email"]
        assert node.description == "Send an email"

    def test_missing_docstring(self):
        node = ReflectionFunctionIntrospector().introspect(no_docs).nodes["no_docs"]
        assert node.description is None

    def test_bound_method_skips_self(self):
        node = ReflectionFunctionIntrospector().introspect(Calculator().add).nodes["add"]
        assert node.property_names() == ["a", "b"]
        assert node.description == "Add two numbers."

    def test_unbound_method_skips_self(self):
        node = ReflectionFunctionIntrospector().introspect(Calculator.add).nodes["add"]
        assert node.property_names() == ["a", "b"]

    def test_coroutine_functions_rejected(self):
        with pytest.raises(ValueError, match="Coroutine"):
            ReflectionFunctionIntrospector().introspect(fetch)


if __name__ == "__main__":
    pytest.main([__file__])
