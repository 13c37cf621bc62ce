"""
Introspectors that build type graphs from descriptors, classes and functions.
"""

from .context import BaseIntrospectionContext
from .descriptions import IntrospectionConfig, Introspections
from .descriptors import Descriptor, DescriptorIntrospector, DescriptorKind, Element
from .functions import ReflectionFunctionIntrospector
from .reflection import ReflectionClassIntrospector

__all__ = [
    "BaseIntrospectionContext",
    "Descriptor",
    "DescriptorIntrospector",
    "DescriptorKind",
    "Element",
    "IntrospectionConfig",
    "Introspections",
    "ReflectionClassIntrospector",
    "ReflectionFunctionIntrospector",
]
