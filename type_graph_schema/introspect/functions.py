"""
Introspection of plain functions, for tool / function-calling schemas.

The function becomes an object node named after it, with one property per
parameter.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, get_type_hints

from ..annotations import annotations_of
from ..ir.base import SchemaIntrospector
from ..ir.nodes import ObjectNode, Property, Ref, TypeGraph, TypeId
from .descriptions import IntrospectionConfig
from .reflection import ReflectionIntrospectionContext, hint_metadata

SKIPPED_PARAMETERS = {"self", "cls"}


def docstring_summary(func: Callable[..., Any]) -> str | None:
    """Return the first paragraph of ``func``'s docstring, joined on one line."""
    doc = inspect.getdoc(func)
    if not doc:
        return None
    paragraph = doc.split("\n\n", 1)[0]
    return " ".join(line.strip() for line in paragraph.splitlines())


class ReflectionFunctionIntrospector(SchemaIntrospector[Callable[..., Any]]):
    """Introspects a function's signature into a TypeGraph."""

    def __init__(self, config: IntrospectionConfig | None = None):
        self.config = config or IntrospectionConfig()

    def introspect(self, root: Callable[..., Any]) -> TypeGraph:
        if inspect.iscoroutinefunction(root):
            raise ValueError(f"Coroutine functions are not supported: {root.__name__}")

        context = ReflectionIntrospectionContext(self.config)
        type_id = context.claim_id(root, TypeId(root.__name__), root.__module__)
        context.with_cycle_detection(type_id, lambda: self._function_node(context, root))
        return context.build_graph(Ref(type_id))

    def _function_node(self, context: ReflectionIntrospectionContext, func: Callable[..., Any]) -> ObjectNode:
        hints = get_type_hints(func, include_extras=True)
        properties = []
        required = set()

        for param in inspect.signature(func).parameters.values():
            if param.name in SKIPPED_PARAMETERS:
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            hint = hints.get(param.name, str)
            has_default = param.default is not inspect.Parameter.empty
            properties.append(
                Property(
                    name=param.name,
                    type=context.to_ref(hint),
                    description=context.extract_description(hint_metadata(hint)),
                    has_default_value=has_default,
                )
            )
            if not has_default:
                required.add(param.name)

        description = context.extract_description(annotations_of(func))
        if description is None:
            description = docstring_summary(func)

        return ObjectNode(
            name=func.__name__,
            properties=tuple(properties),
            required=frozenset(required),
            description=description,
        )
