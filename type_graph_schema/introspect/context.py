"""
Shared state for building a type graph.

Every introspector walks its own source metadata but relies on the same
bookkeeping: a node table whose slots are reserved before a node's body is
built (so recursive types resolve to a reference instead of recursing
forever), a set of ids currently under construction, and a reference cache
keyed by source declaration.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Hashable, Iterable
from typing import Any, Generic, TypeVar

from ..ir.nodes import Ref, TypeGraph, TypeId, TypeNode, TypeRef, with_nullable
from .descriptions import IntrospectionConfig, Introspections

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=Hashable)


class BaseIntrospectionContext(ABC, Generic[D]):
    """Graph builder state for a single introspection call.

    A context must not be reused across unrelated builds: its cache and node
    table describe exactly one graph.
    """

    def __init__(self, config: IntrospectionConfig | None = None):
        self.config = config or IntrospectionConfig()
        self.introspections = Introspections(self.config)
        self._slots: dict[TypeId, TypeNode | None] = {}  # Reservation order
        self._visiting: set[TypeId] = set()
        self._ref_cache: dict[D, TypeRef] = {}

    @abstractmethod
    def to_ref(self, declaration: D, nullable: bool = False) -> TypeRef:
        """Convert a source declaration to a reference, discovering its nodes."""
        pass

    def cached_ref(self, declaration: D, nullable: bool) -> TypeRef | None:
        """Return the cached reference for ``declaration`` with the caller's nullability."""
        ref = self._ref_cache.get(declaration)
        if ref is None:
            return None
        return with_nullable(ref, nullable)

    def remember_ref(self, declaration: D, ref: TypeRef) -> TypeRef:
        """Cache ``ref`` for ``declaration`` and return it unchanged.

        Nullability belongs to the call site, so the cached copy is always
        stored as non-nullable.
        """
        self._ref_cache[declaration] = with_nullable(ref, False)
        return ref

    def with_cycle_detection(self, type_id: TypeId, builder: Callable[[], TypeNode]) -> bool:
        """
        Build and register the node for ``type_id`` unless it is already known.

        The slot is reserved before ``builder`` runs, so a recursive request
        for the same id sees it as known and only produces a reference.

        Args:
            type_id: Id of the node to build
            builder: Produces the node body; may recurse into ``to_ref``

        Returns:
            True if the node was built by this call, False if it was already
            discovered or is currently being built
        """
        if type_id in self._slots or type_id in self._visiting:
            return False

        self._slots[type_id] = None
        self._visiting.add(type_id)
        try:
            node = builder()
        except Exception:
            del self._slots[type_id]
            raise
        finally:
            self._visiting.discard(type_id)

        self._slots[type_id] = node
        return True

    def named_ref(self, declaration: D, type_id: TypeId, nullable: bool, builder: Callable[[], TypeNode]) -> Ref:
        """Build (once) a node that is always referenced by id and return its Ref."""
        self.with_cycle_detection(type_id, builder)
        ref = Ref(type_id, nullable)
        self.remember_ref(declaration, ref)
        return ref

    @staticmethod
    def qualified_name(owner_base_name: str, simple_name: str) -> TypeId:
        """Id of a subtype nested under a polymorphic base, e.g. ``Shape.Circle``."""
        return TypeId(f"{owner_base_name}.{simple_name}")

    def extract_description(self, annotations: Iterable[Any]) -> str | None:
        return self.introspections.extract_description(annotations)

    def nodes(self) -> dict[TypeId, TypeNode]:
        """Return the filled slots in reservation order."""
        return {type_id: node for type_id, node in self._slots.items() if node is not None}

    def build_graph(self, root: TypeRef) -> TypeGraph:
        graph = TypeGraph(root=root, nodes=self.nodes())
        logger.debug("Built type graph with %d named nodes", len(graph.nodes))
        return graph
