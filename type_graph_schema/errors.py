"""
Exceptions raised while building or transforming a type graph.
"""

from __future__ import annotations


class SchemaGenerationError(Exception):
    """Base class for all schema generation failures."""

    pass


class DanglingReferenceError(SchemaGenerationError):
    """Raised when a Ref points at a TypeId missing from the graph's node table.

    A dangling reference always means the introspector that built the graph
    is broken; there is nothing the caller can do to recover from it.
    """

    def __init__(self, type_id: str, referenced_from: str | None = None):
        self.type_id = type_id
        self.referenced_from = referenced_from
        message = f"Type graph references unknown type id '{type_id}'"
        if referenced_from:
            message += f" (referenced from '{referenced_from}')"
        super().__init__(message)


class InvalidGraphError(SchemaGenerationError):
    """Raised when a type graph or a source descriptor has an illegal shape.

    This can happen when:
    - An Object, Enum or Polymorphic node is inlined instead of referenced
    - A sealed descriptor does not carry its subtypes under a 'value' element
    - A function-calling root is not a reference to an object node
    """

    def __init__(self, message: str, type_id: str | None = None):
        self.type_id = type_id
        if type_id is not None:
            message = f"{message} (type id '{type_id}')"
        super().__init__(message)


class SchemaDecodeError(SchemaGenerationError):
    """Raised when JSON text cannot be decoded into a schema document."""

    pass
