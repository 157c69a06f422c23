"""
Property Access

Builds, once per type, the ordered list of readable properties of a DTO
together with a getter for each. Shaping looks these up instead of
introspecting every object it projects.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from operator import attrgetter, itemgetter
from typing import Any, ClassVar, get_origin

from pydantic import BaseModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyAccessor:
    """A readable property and the function that reads it."""

    name: str
    getter: Callable[[Any], Any]

    def read(self, obj: Any) -> Any:
        return self.getter(obj)


# Populated lazily per type; concurrent population is idempotent.
_accessor_cache: dict[type, tuple[PropertyAccessor, ...]] = {}


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _optional_attrgetter(name: str) -> Callable[[Any], Any]:
    """Getter for an annotated attribute that an instance may never assign."""

    def getter(obj: Any) -> Any:
        return getattr(obj, name, None)

    return getter


def _declared_accessors(source_type: type) -> list[PropertyAccessor]:
    if isinstance(source_type, type) and issubclass(source_type, BaseModel):
        names = list(source_type.model_fields) + list(source_type.model_computed_fields)
        return [PropertyAccessor(name, attrgetter(name)) for name in names]

    if dataclasses.is_dataclass(source_type):
        return [PropertyAccessor(f.name, attrgetter(f.name)) for f in dataclasses.fields(source_type)]

    accessors: dict[str, PropertyAccessor] = {}
    for klass in reversed(source_type.__mro__):
        for name, annotation in inspect.get_annotations(klass).items():
            if name.startswith("_") or name in accessors or _is_class_var(annotation):
                continue
            accessors[name] = PropertyAccessor(name, _optional_attrgetter(name))
    for klass in reversed(source_type.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property) and not name.startswith("_") and name not in accessors:
                accessors[name] = PropertyAccessor(name, attrgetter(name))
    return list(accessors.values())


def get_property_accessors(source_type: type) -> tuple[PropertyAccessor, ...]:
    """
    Return the readable properties of ``source_type`` in declared order.

    Pydantic models contribute their fields followed by computed fields,
    dataclasses their fields, and plain classes their public annotated
    instance attributes followed by their public properties. ``ClassVar``
    annotations are skipped; an annotated attribute an instance never
    assigned reads as None.
    """
    accessors = _accessor_cache.get(source_type)
    if accessors is None:
        accessors = tuple(_declared_accessors(source_type))
        accessors = _accessor_cache.setdefault(source_type, accessors)
        logger.debug(f"Cached {len(accessors)} readable properties for {source_type.__name__}")
    return accessors


def accessors_for(item: Any) -> tuple[PropertyAccessor, ...]:
    """
    Return the readable properties of one object.

    Mappings (including shaped records) expose their own keys; any other
    object exposes the declared properties of its type.
    """
    if isinstance(item, Mapping):
        return tuple(PropertyAccessor(key, itemgetter(key)) for key in item)
    return get_property_accessors(type(item))


def match_accessor(accessors: tuple[PropertyAccessor, ...], name: str) -> PropertyAccessor | None:
    """Pick the accessor called ``name``, ignoring case."""
    wanted = name.casefold()
    for accessor in accessors:
        if accessor.name.casefold() == wanted:
            return accessor
    return None


def split_field_list(fields: str | None) -> list[str]:
    """
    Split a comma-separated field list into trimmed names.

    Blank input yields an empty list; empty entries are kept so that
    callers can reject them.
    """
    if fields is None or not fields.strip():
        return []
    return [field.strip() for field in fields.split(",")]


def find_property_accessor(source_type: type, name: str) -> PropertyAccessor | None:
    """Look up a declared property of ``source_type`` by name, ignoring case."""
    return match_accessor(get_property_accessors(source_type), name)
