"""
Markers that attach human-readable descriptions to types, fields and functions.

``Description`` works both as ``Annotated`` metadata and as a decorator::

    @Description("A postal address")
    @dataclass
    class Address:
        street: Annotated[str, Description("Street and number")]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

SCHEMA_ANNOTATIONS_ATTR = "__schema_annotations__"


@dataclass(frozen=True)
class Description:
    value: str

    def __call__(self, target: Any) -> Any:
        # Read from __dict__ so subclasses do not inherit their parent's markers
        existing = tuple(vars(target).get(SCHEMA_ANNOTATIONS_ATTR, ()))
        setattr(target, SCHEMA_ANNOTATIONS_ATTR, existing + (self,))
        return target


def annotations_of(target: Any) -> tuple[Any, ...]:
    """Return the markers attached to ``target`` by decorators (not inherited)."""
    try:
        return tuple(vars(target).get(SCHEMA_ANNOTATIONS_ATTR, ()))
    except TypeError:
        return ()
