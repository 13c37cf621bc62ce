"""
Description extraction from annotation objects.

Any annotation whose class name matches one of the configured names
(case-insensitively) and exposes one of the configured value attributes is
treated as a description. This lets third-party markers such as a
``JsonPropertyDescription`` class be picked up without depending on them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

DEFAULT_DESCRIPTION_ANNOTATIONS = (
    "description",
    "llmdescription",
    "jsonpropertydescription",
    "jsonclassdescription",
    "p",
)
DEFAULT_DESCRIPTION_ATTRIBUTES = ("value", "description")


@dataclass(frozen=True)
class IntrospectionConfig:
    """Configuration shared by all introspectors."""

    # Annotation class names recognised as descriptions (compared lowercased)
    description_annotation_names: tuple[str, ...] = DEFAULT_DESCRIPTION_ANNOTATIONS

    # Attributes read, in order, to obtain the description text
    description_value_attributes: tuple[str, ...] = DEFAULT_DESCRIPTION_ATTRIBUTES

    # Property name used for the discriminator of polymorphic hierarchies
    discriminator_property: str = "type"

    # Whether the discriminator must be present on every polymorphic value
    discriminator_required: bool = True

    @staticmethod
    def from_dict(config_dict: dict[str, Any]) -> IntrospectionConfig:
        """Create a configuration from a dictionary, ignoring unknown keys."""
        kwargs: dict[str, Any] = {}
        for key in ("description_annotation_names", "description_value_attributes"):
            if key in config_dict:
                kwargs[key] = tuple(config_dict[key])
        for key in ("discriminator_property", "discriminator_required"):
            if key in config_dict:
                kwargs[key] = config_dict[key]
        return IntrospectionConfig(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "description_annotation_names": list(self.description_annotation_names),
            "description_value_attributes": list(self.description_value_attributes),
            "discriminator_property": self.discriminator_property,
            "discriminator_required": self.discriminator_required,
        }

    @property
    def normalized_annotation_names(self) -> frozenset[str]:
        return frozenset(name.lower() for name in self.description_annotation_names)


@dataclass
class Introspections:
    """Helpers resolving description text from annotation objects."""

    config: IntrospectionConfig = field(default_factory=IntrospectionConfig)

    def get_description_from_annotation(self, annotation_name: str, arguments: Mapping[str, Any]) -> str | None:
        """
        Resolve a description from an annotation's name and arguments.

        Args:
            annotation_name: Simple class name of the annotation
            arguments: Attribute values of the annotation

        Returns:
            The description text, or None if the annotation is not a description
        """
        if annotation_name.lower() not in self.config.normalized_annotation_names:
            return None
        for attribute in self.config.description_value_attributes:
            value = arguments.get(attribute)
            if isinstance(value, str):
                return value
        return None

    def extract_description(self, annotations: Iterable[Any]) -> str | None:
        """Return the first description found among ``annotations``."""
        for annotation in annotations:
            if isinstance(annotation, (str, bytes)) or isinstance(annotation, type):
                continue
            arguments = {
                attribute: getattr(annotation, attribute, None)
                for attribute in self.config.description_value_attributes
            }
            description = self.get_description_from_annotation(type(annotation).__name__, arguments)
            if description is not None:
                return description
        return None
