"""
Data Shaping Service

Projects DTOs onto ShapedEntity records holding only the fields a client
asked for (``?fields=id,name``). Field names match case-insensitively;
output keys always use the declared property name.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from course_library.exceptions import InvalidShapingFieldError
from course_library.utils.property_access import (
    PropertyAccessor,
    accessors_for,
    find_property_accessor,
    get_property_accessors,
    match_accessor,
    split_field_list,
)
from course_library.utils.shaped_entity import ShapedEntity

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _select_accessors(
    available: tuple[PropertyAccessor, ...], fields: str | None, resource_type: type
) -> list[PropertyAccessor]:
    """
    Resolve requested field names to accessors before any value is read.

    Raises:
        InvalidShapingFieldError: if a name matches no available property
    """
    requested = split_field_list(fields)
    if not requested:
        return list(available)

    selected = []
    for name in requested:
        accessor = match_accessor(available, name)
        if accessor is None:
            raise InvalidShapingFieldError(name, resource_type)
        selected.append(accessor)
    return selected


def _shape(item: Any, accessors: list[PropertyAccessor]) -> ShapedEntity:
    return ShapedEntity((accessor.name, accessor.read(item)) for accessor in accessors)


def shape_data(source_type: type[T], items: Iterable[T], fields: str | None = None) -> list[ShapedEntity]:
    """
    Shape a sequence of objects of ``source_type``.

    Args:
        source_type: Declared type of the items
        items: Objects to shape
        fields: Comma-separated field names; blank selects every field

    Returns:
        One ShapedEntity per item, in input order

    Raises:
        InvalidShapingFieldError: if a requested field does not exist;
            raised before any item is shaped
    """
    if isinstance(source_type, type) and issubclass(source_type, Mapping):
        # Mapping records carry their keys per instance
        items = list(items)
        selections = [_select_accessors(accessors_for(item), fields, source_type) for item in items]
        return [_shape(item, selected) for item, selected in zip(items, selections)]

    selected = _select_accessors(get_property_accessors(source_type), fields, source_type)
    return [_shape(item, selected) for item in items]


def shape_single_item(item: Any, fields: str | None = None) -> ShapedEntity:
    """Shape one object; its runtime type (or its keys, for a mapping) supplies the properties."""
    return _shape(item, _select_accessors(accessors_for(item), fields, type(item)))


def type_has_properties(source_type: type, fields: str | None) -> bool:
    """
    Pre-flight check for a shaping request.

    Returns True when ``fields`` is blank or every name in it matches a
    declared property of ``source_type`` (case-insensitive). Mapping types
    declare no properties; check their records with ``items_have_properties``.
    """
    for name in split_field_list(fields):
        if find_property_accessor(source_type, name) is None:
            logger.debug(f"Shaping field '{name}' not found on {source_type.__name__}")
            return False
    return True


def items_have_properties(items: Iterable[Any], fields: str | None) -> bool:
    """
    Pre-flight check against the objects themselves.

    Needed for mapping records, whose keys vary per instance; for other
    objects it agrees with ``type_has_properties`` on their type.
    """
    requested = split_field_list(fields)
    for item in items:
        available = accessors_for(item)
        for name in requested:
            if match_accessor(available, name) is None:
                logger.debug(f"Shaping field '{name}' not found on {type(item).__name__}")
                return False
    return True
