"""
Resource Parameter Dependencies

FastAPI dependencies that read ``fields``, ``orderBy``, filter and paging
query parameters and run the pre-flight checks, so that a bad request is
rejected with one descriptive 400 before storage or shaping starts.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fastapi import Query
from sqlalchemy import Select

from course_library.config import settings
from course_library.exceptions import InvalidShapingFieldError, InvalidSortFieldError
from course_library.models.author import Author
from course_library.schemas.author import AuthorDto
from course_library.services.data_shaping_service import shape_data, shape_single_item, type_has_properties
from course_library.services.property_mapping_service import PropertyMappingRegistry, SortKey
from course_library.utils.filtering import apply_author_filters
from course_library.utils.property_access import find_property_accessor, split_field_list
from course_library.utils.shaped_entity import ShapedEntity


def shaping_fields_error(source_type: type, fields: str) -> InvalidShapingFieldError:
    """Build the client error for a shaping request naming unknown fields."""
    unknown = [name for name in split_field_list(fields) if find_property_accessor(source_type, name) is None]
    return InvalidShapingFieldError(
        ", ".join(unknown),
        source_type,
        message=f"Not all requested shaping fields exist on the resource: {fields}",
    )


class ShapingParams:
    """
    FastAPI dependency for data shaping.

    Usage::

        @router.get("/authors/{author_id}")
        async def get_author(author_id: UUID, shaping: ShapingParams = Depends()):
            shaping.validate_for(AuthorDto)
            ...
            return shaping.apply_single(author_dto).to_dict()
    """

    def __init__(
        self,
        fields: str | None = Query(
            default=None,
            description="Comma-separated list of fields to include (e.g. id,name)",
        ),
    ):
        self.fields = fields

    @property
    def has_selection(self) -> bool:
        """Return True when the caller requested specific fields."""
        return bool(self.fields and self.fields.strip())

    def validate_for(self, source_type: type) -> None:
        """Raise InvalidShapingFieldError unless every field exists on ``source_type``."""
        if not type_has_properties(source_type, self.fields):
            raise shaping_fields_error(source_type, self.fields)

    def apply(self, source_type: type, items: Iterable[Any]) -> list[ShapedEntity]:
        return shape_data(source_type, items, self.fields)

    def apply_single(self, item: Any) -> ShapedEntity:
        return shape_single_item(item, self.fields)


class AuthorsResourceParameters:
    """
    FastAPI dependency for the author collection query string.

    Page size is clamped to ``settings.max_page_size``.
    """

    def __init__(
        self,
        main_category: str | None = Query(default=None, alias="mainCategory"),
        search_query: str | None = Query(default=None, alias="searchQuery"),
        page_number: int = Query(default=1, ge=1, alias="pageNumber"),
        page_size: int = Query(default=settings.default_page_size, ge=1, alias="pageSize"),
        order_by: str = Query(default=settings.default_order_by, alias="orderBy"),
        fields: str | None = Query(default=None),
    ):
        self.main_category = main_category
        self.search_query = search_query
        self.page_number = page_number
        self.page_size = min(page_size, settings.max_page_size)
        self.order_by = order_by
        self.fields = fields

    def validate(self, registry: PropertyMappingRegistry) -> None:
        """
        Run the orderBy and shaping pre-flight checks.

        Raises:
            InvalidSortFieldError: if ``order_by`` does not map onto Author
            InvalidShapingFieldError: if ``fields`` names unknown properties
        """
        if not registry.valid_mapping_exists_for(AuthorDto, Author, self.order_by):
            raise InvalidSortFieldError(
                self.order_by,
                message=f"Not all requested sort fields can be mapped: {self.order_by}",
            )
        if not type_has_properties(AuthorDto, self.fields):
            raise shaping_fields_error(AuthorDto, self.fields)

    def sort_keys(self, registry: PropertyMappingRegistry) -> list[SortKey]:
        return registry.resolve_sort(AuthorDto, Author, self.order_by)

    def filter(self, query: Select) -> Select:
        """Apply the ``mainCategory`` and ``searchQuery`` filters to an Author select."""
        return apply_author_filters(query, self.main_category, self.search_query)
