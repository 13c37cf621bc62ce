import pytest

from type_graph_schema.introspect.context import BaseIntrospectionContext
from type_graph_schema.ir import InlineRef, ObjectNode, PrimitiveKind, PrimitiveNode, Ref, TypeId


class RecordingContext(BaseIntrospectionContext[str]):
    """Minimal context mapping declaration names straight to object nodes"""

    def __init__(self):
        super().__init__()
        self.builds = []

    def to_ref(self, declaration, nullable=False):
        cached = self.cached_ref(declaration, nullable)
        if cached is not None:
            return cached

        def build():
            self.builds.append(declaration)
            return ObjectNode(name=declaration)

        return self.named_ref(declaration, TypeId(declaration), nullable, build)


class TestBaseIntrospectionContext:
    """Test cases for the shared graph builder state"""

    def test_cycle_detection_builds_once(self):
        context = RecordingContext()
        calls = []

        def build():
            calls.append(1)
            # Re-entering the same id while it is being built must not recurse
            assert context.with_cycle_detection(TypeId("Node"), build) is False
            return ObjectNode(name="Node")

        assert context.with_cycle_detection(TypeId("Node"), build) is True
        assert context.with_cycle_detection(TypeId("Node"), build) is False
        assert len(calls) == 1
        assert list(context.nodes()) == ["Node"]

    def test_failed_build_releases_slot(self):
        context = RecordingContext()

        def failing():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            context.with_cycle_detection(TypeId("Broken"), failing)

        assert context.nodes() == {}
        # The id can be built again after the failure
        assert context.with_cycle_detection(TypeId("Broken"), lambda: ObjectNode(name="Broken")) is True

    def test_parent_slot_precedes_children(self):
        context = RecordingContext()

        def build_parent():
            context.to_ref("Child")
            return ObjectNode(name="Parent")

        context.with_cycle_detection(TypeId("Parent"), build_parent)
        assert list(context.nodes()) == ["Parent", "Child"]

    def test_cached_ref_applies_call_site_nullability(self):
        context = RecordingContext()
        nullable = context.to_ref("Address", nullable=True)
        plain = context.to_ref("Address")

        assert nullable == Ref(TypeId("Address"), nullable=True)
        assert plain == Ref(TypeId("Address"), nullable=False)
        assert context.builds == ["Address"]

    def test_remember_ref_stores_non_nullable_copy(self):
        context = RecordingContext()
        ref = InlineRef(PrimitiveNode(PrimitiveKind.STRING), nullable=True)
        assert context.remember_ref("text", ref) is ref
        assert context.cached_ref("text", False).nullable is False

    def test_qualified_name(self):
        assert BaseIntrospectionContext.qualified_name("OuterA", "Unknown") == "OuterA.Unknown"

    def test_build_graph(self):
        context = RecordingContext()
        root = context.to_ref("Root")
        graph = context.build_graph(root)
        assert graph.root == Ref(TypeId("Root"))
        assert graph.nodes == {"Root": ObjectNode(name="Root")}


if __name__ == "__main__":
    pytest.main([__file__])
