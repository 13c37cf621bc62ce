"""
Introspection of Python classes through type hints.

Supported shapes:
- ``str``, ``bool``, ``int``, ``float`` as primitives
- ``list``/``tuple``/``set``/``Sequence`` as lists, ``dict``/``Mapping`` as maps
- ``Optional[T]`` / ``T | None`` as nullable references
- ``Annotated[T, ...]`` whose metadata may carry a description
- ``enum.Enum`` subclasses as enums (entries are member names)
- dataclasses and annotated classes as objects
- classes with subclasses as polymorphic hierarchies

Anything else degrades to an empty object.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import logging
import types
from enum import Enum
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin, get_type_hints

from ..annotations import annotations_of
from ..errors import InvalidGraphError
from ..ir.base import SchemaIntrospector
from ..ir.nodes import (
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
    SubtypeRef,
    TypeGraph,
    TypeId,
    TypeRef,
)
from .context import BaseIntrospectionContext
from .descriptions import IntrospectionConfig

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES: dict[Any, PrimitiveKind] = {
    str: PrimitiveKind.STRING,
    bool: PrimitiveKind.BOOLEAN,
    int: PrimitiveKind.INT,
    float: PrimitiveKind.DOUBLE,
}

LIST_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Iterable,
    collections.abc.Collection,
)

MAP_ORIGINS = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)

# Modules whose classes are never treated as user-defined hierarchies
FOREIGN_MODULES = {"builtins", "typing", "abc", "collections.abc", "enum"}

LITERAL_DEFAULT_TYPES = (str, bool, int, float)


def unwrap_annotated(hint: Any) -> tuple[Any, list[Any]]:
    """Strip ``Annotated`` layers, returning the bare hint and all collected metadata."""
    metadata: list[Any] = []
    while get_origin(hint) is Annotated:
        metadata.extend(hint.__metadata__)
        hint = hint.__origin__
    return hint, metadata


def hint_metadata(hint: Any) -> list[Any]:
    """Collect ``Annotated`` metadata, looking through an ``Optional`` wrapper."""
    hint, metadata = unwrap_annotated(hint)
    if get_origin(hint) in (Union, types.UnionType):
        for arg in get_args(hint):
            if arg is not type(None):
                metadata.extend(unwrap_annotated(arg)[1])
    return metadata


def literal_default(value: Any) -> Any:
    """Return ``value`` if it can be emitted as a JSON literal, else None."""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, LITERAL_DEFAULT_TYPES):
        return value
    return None


def is_hierarchy_root(cls: Any) -> bool:
    """Whether ``cls`` is a user-defined class with direct subclasses."""
    return (
        isinstance(cls, type)
        and not issubclass(cls, Enum)
        and cls.__module__ not in FOREIGN_MODULES
        and bool(cls.__subclasses__())
    )


def hierarchy_parent(cls: type) -> type | None:
    """Return the first direct base of ``cls`` that is a hierarchy root."""
    for base in cls.__bases__:
        if is_hierarchy_root(base):
            return base
    return None


def hint_name(hint: Any) -> str:
    return getattr(hint, "__qualname__", None) or repr(hint)


class ReflectionIntrospectionContext(BaseIntrospectionContext[Any]):
    """Builds graph nodes from Python type hints."""

    def __init__(self, config: IntrospectionConfig | None = None):
        super().__init__(config)
        self._class_ids: dict[Any, TypeId] = {}
        self._id_owners: dict[TypeId, Any] = {}

    def to_ref(self, declaration: Any, nullable: bool = False) -> TypeRef:
        hint, _ = unwrap_annotated(declaration)

        origin = get_origin(hint)
        if origin in (Union, types.UnionType):
            args = get_args(hint)
            members = [arg for arg in args if arg is not type(None)]
            if len(members) < len(args):
                nullable = True
            if len(members) == 1:
                return self.to_ref(members[0], nullable)
            return self._unknown_ref(hint, nullable)

        if hint in PRIMITIVE_TYPES:
            return InlineRef(PrimitiveNode(PRIMITIVE_TYPES[hint]), nullable)

        if hint in LIST_ORIGINS or origin in LIST_ORIGINS:
            args = get_args(hint)
            element = args[0] if args else str
            return InlineRef(ListNode(element=self.to_ref(element)), nullable)

        if hint in MAP_ORIGINS or origin in MAP_ORIGINS:
            args = get_args(hint)
            key, value = args if len(args) == 2 else (str, str)
            return InlineRef(MapNode(key=self.to_ref(key), value=self.to_ref(value)), nullable)

        cached = self.cached_ref(hint, nullable)
        if cached is not None:
            return cached

        if isinstance(hint, type) and issubclass(hint, Enum):
            return self._enum_ref(hint, nullable)
        if is_hierarchy_root(hint):
            return self._polymorphic_ref(hint, nullable)
        if isinstance(hint, type) and hint.__module__ not in FOREIGN_MODULES:
            return self._object_ref(hint, nullable)

        return self._unknown_ref(hint, nullable)

    def type_id(self, cls: type) -> TypeId:
        """
        Return the id of ``cls``, assigned once per context.

        The short id (``Qualname``, or ``Base.Sub`` for subtypes) is used unless
        another class already holds it, in which case the module name is
        prepended.

        Raises:
            InvalidGraphError: If the module-qualified id is taken as well
        """
        if cls in self._class_ids:
            return self._class_ids[cls]

        parent = hierarchy_parent(cls)
        if parent is not None:
            type_id = self.qualified_name(parent.__name__, cls.__name__)
        else:
            type_id = TypeId(cls.__qualname__)

        return self.claim_id(cls, type_id, cls.__module__)

    def claim_id(self, declaration: Any, type_id: TypeId, module: str | None) -> TypeId:
        # Ids are unique within a graph; a taken id is retried once with the module prefix
        if type_id in self._id_owners and module is not None:
            type_id = TypeId(f"{module}.{type_id}")
        if type_id in self._id_owners:
            raise InvalidGraphError(f"Type id already used by {self._id_owners[type_id]!r}", type_id)

        self._class_ids[declaration] = type_id
        self._id_owners[type_id] = declaration
        return type_id

    def class_description(self, cls: type) -> str | None:
        return self.extract_description(annotations_of(cls))

    def _enum_ref(self, cls: type[Enum], nullable: bool) -> TypeRef:
        def build() -> EnumNode:
            return EnumNode(
                name=cls.__name__,
                entries=tuple(member.name for member in cls),
                description=self.class_description(cls),
            )

        return self.named_ref(cls, self.type_id(cls), nullable, build)

    def _polymorphic_ref(self, cls: type, nullable: bool) -> TypeRef:
        def build() -> PolymorphicNode:
            subtypes = []
            mapping: dict[str, TypeId] = {}
            for subclass in cls.__subclasses__():
                ref = self.to_ref(subclass)
                subtypes.append(SubtypeRef(ref.id))
                mapping[ref.id] = ref.id
            return PolymorphicNode(
                base_name=cls.__name__,
                subtypes=tuple(subtypes),
                discriminator=Discriminator(
                    property_name=self.config.discriminator_property,
                    required=self.config.discriminator_required,
                    mapping=mapping,
                ),
                description=self.class_description(cls),
            )

        return self.named_ref(cls, self.type_id(cls), nullable, build)

    def _object_ref(self, cls: type, nullable: bool) -> TypeRef:
        type_id = self.type_id(cls)
        return self.named_ref(cls, type_id, nullable, lambda: self._object_node(cls, type_id))

    def _object_node(self, cls: type, type_id: TypeId) -> ObjectNode:
        properties: list[Property] = []
        required: set[str] = set()
        discriminator = self.config.discriminator_property

        # Subtypes of a hierarchy carry their fixed tag as the first property
        is_subtype = hierarchy_parent(cls) is not None
        if is_subtype:
            properties.append(
                Property(
                    name=discriminator,
                    type=InlineRef(PrimitiveNode(PrimitiveKind.STRING)),
                    default_value=type_id,
                )
            )
            required.add(discriminator)

        for prop in self._class_properties(cls):
            if is_subtype and prop.name == discriminator:
                continue
            properties.append(prop)
            if not prop.has_default_value:
                required.add(prop.name)

        return ObjectNode(
            name=cls.__name__,
            properties=tuple(properties),
            required=frozenset(required),
            description=self.class_description(cls),
        )

    def _class_properties(self, cls: type) -> list[Property]:
        hints = get_type_hints(cls, include_extras=True)

        if dataclasses.is_dataclass(cls):
            properties = []
            for f in dataclasses.fields(cls):
                if not f.init:
                    continue
                hint = hints.get(f.name, Any)
                has_default = f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
                default = f.default if f.default is not dataclasses.MISSING else None
                description = self.extract_description(hint_metadata(hint))
                if description is None and isinstance(f.metadata.get("description"), str):
                    description = f.metadata["description"]
                properties.append(
                    Property(
                        name=f.name,
                        type=self.to_ref(hint),
                        description=description,
                        has_default_value=has_default,
                        default_value=literal_default(default),
                    )
                )
            return properties

        properties = []
        for name, hint in hints.items():
            if get_origin(unwrap_annotated(hint)[0]) is ClassVar or name.startswith("_"):
                continue
            default = getattr(cls, name, dataclasses.MISSING)
            has_default = default is not dataclasses.MISSING
            properties.append(
                Property(
                    name=name,
                    type=self.to_ref(hint),
                    description=self.extract_description(hint_metadata(hint)),
                    has_default_value=has_default,
                    default_value=literal_default(default) if has_default else None,
                )
            )
        return properties

    def _unknown_ref(self, hint: Any, nullable: bool) -> TypeRef:
        type_id = self._class_ids.get(hint)
        if type_id is None:
            type_id = self.claim_id(hint, TypeId(hint_name(hint)), getattr(hint, "__module__", None))
        logger.warning("Unsupported type hint %r, emitting an empty object", hint)
        return self.named_ref(hint, type_id, nullable, lambda: ObjectNode(name=type_id))


class ReflectionClassIntrospector(SchemaIntrospector[type]):
    """Introspects a class into a TypeGraph."""

    def __init__(self, config: IntrospectionConfig | None = None):
        self.config = config or IntrospectionConfig()

    def introspect(self, root: type) -> TypeGraph:
        context = ReflectionIntrospectionContext(self.config)
        return context.build_graph(context.to_ref(root))

