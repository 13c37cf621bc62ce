"""
Abstract interfaces on both sides of the type graph.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .nodes import TypeGraph

T = TypeVar("T")
R = TypeVar("R")


class SchemaIntrospector(ABC, Generic[T]):
    """Builds a TypeGraph from some source of type metadata."""

    @abstractmethod
    def introspect(self, root: T) -> TypeGraph:
        """Build a fresh graph rooted at ``root``."""
        pass


class TypeGraphTransformer(ABC, Generic[R]):
    """Turns a TypeGraph into an output document."""

    @abstractmethod
    def transform(self, graph: TypeGraph, root_name: str) -> R:
        """
        Transform ``graph`` into an output document.

        Args:
            graph: The graph to transform
            root_name: Name given to the generated document

        Returns:
            The generated document
        """
        pass
