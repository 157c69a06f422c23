"""
Property Mapping Service

Translates client ``orderBy`` strings into sort instructions against
storage entities. Each (DTO, entity) pair has a MappingTable that maps an
externally visible field onto one or more entity properties, optionally
reversing the sort direction of a property (e.g. ``age`` sorts on
``date_of_birth`` in the opposite direction).

Usage::

    registry = get_property_mapping_registry()
    if not registry.valid_mapping_exists_for(AuthorDto, Author, order_by):
        raise InvalidSortFieldError(order_by)
    sort_keys = registry.resolve_sort(AuthorDto, Author, order_by)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache

from course_library.exceptions import (
    ConfigurationError,
    DuplicateMappingError,
    InvalidSortFieldError,
    MappingNotFoundError,
)
from course_library.models.author import Author
from course_library.schemas.author import AuthorDto

logger = logging.getLogger(__name__)

SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class PropertyMapping:
    """One backing entity property and whether its sort direction is reversed."""

    property_name: str
    revert: bool = False


@dataclass(frozen=True)
class SortKey:
    """A resolved sort instruction for the storage layer."""

    property_name: str
    ascending: bool = True


class MappingTable(Mapping[str, tuple[PropertyMapping, ...]]):
    """
    Case-insensitive mapping from external field name to backing properties.

    Keys keep their declared casing when iterated. Immutable once built.
    """

    def __init__(self, mappings: Mapping[str, Sequence[PropertyMapping]]):
        self._entries: dict[str, tuple[str, tuple[PropertyMapping, ...]]] = {}
        for field_name, property_mappings in mappings.items():
            key = field_name.casefold()
            if key in self._entries:
                raise ConfigurationError(
                    f"Field '{field_name}' is mapped more than once",
                    details={"field": field_name},
                )
            property_mappings = tuple(property_mappings)
            if not property_mappings:
                raise ConfigurationError(
                    f"Field '{field_name}' must map to at least one property",
                    details={"field": field_name},
                )
            self._entries[key] = (field_name, property_mappings)

    def __getitem__(self, field_name: str) -> tuple[PropertyMapping, ...]:
        return self._entries[field_name.casefold()][1]

    def __iter__(self) -> Iterator[str]:
        return (declared for declared, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MappingTable({dict(self)!r})"


def parse_order_by_clause(clause: str) -> tuple[str, bool] | None:
    """
    Split one orderBy clause into (field name, descending).

    Returns None for an empty clause or an unrecognised direction token.
    """
    parts = clause.split()
    if len(parts) == 1:
        return parts[0], False
    if len(parts) == 2 and parts[1].lower() in SORT_DIRECTIONS:
        return parts[0], parts[1].lower() == "desc"
    return None


def _split_order_by(order_by: str | None) -> list[str]:
    if order_by is None or not order_by.strip():
        return []
    return [clause.strip() for clause in order_by.split(",")]


class PropertyMappingRegistry:
    """
    Holds one MappingTable per (source, destination) type pair.

    Tables are registered during startup; after ``freeze()`` the registry
    is read-only and safe to share between concurrent requests.
    """

    def __init__(self):
        self._tables: dict[tuple[type, type], MappingTable] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(
        self,
        source: type,
        destination: type,
        table: MappingTable | Mapping[str, Sequence[PropertyMapping]],
    ) -> MappingTable:
        """
        Register the mapping table for a type pair.

        Raises:
            ConfigurationError: if the registry is frozen
            DuplicateMappingError: if the pair already has a table
        """
        if self._frozen:
            raise ConfigurationError("Property mapping registry is frozen; register mappings at startup")
        if (source, destination) in self._tables:
            raise DuplicateMappingError(source, destination)
        if not isinstance(table, MappingTable):
            table = MappingTable(table)
        self._tables[(source, destination)] = table
        logger.info(f"Registered property mapping {source.__name__} -> {destination.__name__} ({len(table)} fields)")
        return table

    def freeze(self) -> "PropertyMappingRegistry":
        self._frozen = True
        return self

    def get_mapping_table(self, source: type, destination: type) -> MappingTable:
        """
        Raises:
            MappingNotFoundError: if no table was registered for the pair
        """
        try:
            return self._tables[(source, destination)]
        except KeyError:
            raise MappingNotFoundError(source, destination) from None

    def valid_mapping_exists_for(self, source: type, destination: type, order_by: str | None) -> bool:
        """
        Check that every clause of ``order_by`` maps onto the destination.

        Blank ``order_by`` is always valid.
        """
        table = self.get_mapping_table(source, destination)
        for clause in _split_order_by(order_by):
            parsed = parse_order_by_clause(clause)
            if parsed is None or parsed[0] not in table:
                logger.debug(f"orderBy clause '{clause}' has no mapping for {source.__name__} -> {destination.__name__}")
                return False
        return True

    def resolve_sort(self, source: type, destination: type, order_by: str | None) -> list[SortKey]:
        """
        Translate ``order_by`` into ordered sort keys on the destination.

        Clauses keep the client's order and each field's backing properties
        keep their declared order. A property with ``revert`` set sorts
        opposite to the requested direction.

        Raises:
            InvalidSortFieldError: if a clause does not map onto the destination
        """
        table = self.get_mapping_table(source, destination)
        sort_keys: list[SortKey] = []
        for clause in _split_order_by(order_by):
            parsed = parse_order_by_clause(clause)
            if parsed is None or parsed[0] not in table:
                raise InvalidSortFieldError(clause)
            field_name, descending = parsed
            for mapping in table[field_name]:
                sort_keys.append(SortKey(mapping.property_name, (not descending) != mapping.revert))
        return sort_keys


def build_default_registry() -> PropertyMappingRegistry:
    """Build and freeze the registry with the API's resource mappings."""
    registry = PropertyMappingRegistry()
    registry.register(
        AuthorDto,
        Author,
        {
            "id": [PropertyMapping("id")],
            "main_category": [PropertyMapping("main_category")],
            "age": [PropertyMapping("date_of_birth", revert=True)],
            "name": [PropertyMapping("first_name"), PropertyMapping("last_name")],
        },
    )
    return registry.freeze()


@lru_cache
def get_property_mapping_registry() -> PropertyMappingRegistry:
    """FastAPI dependency returning the shared, frozen registry."""
    return build_default_registry()
