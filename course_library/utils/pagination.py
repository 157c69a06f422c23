"""
Pagination Utilities

Offset pagination over in-memory sequences or SQLAlchemy selects, plus
the metadata sent to clients in the ``X-Pagination`` header.
"""

import json
import logging
import math
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PagedList(Generic[T]):
    """One page of results together with its position in the full set."""

    def __init__(self, items: list[T], total_count: int, current_page: int, page_size: int):
        self.items = items
        self.total_count = total_count
        self.current_page = current_page
        self.page_size = page_size
        self.total_pages = math.ceil(total_count / page_size) if page_size > 0 else 0

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @classmethod
    def from_sequence(cls, source: Sequence[T], page_number: int, page_size: int) -> "PagedList[T]":
        """Page an in-memory sequence."""
        start = (page_number - 1) * page_size
        return cls(list(source[start : start + page_size]), len(source), page_number, page_size)

    @classmethod
    async def create(cls, db: AsyncSession, query: Select, page_number: int, page_size: int) -> "PagedList[Any]":
        """
        Count the rows of ``query`` and fetch one page of them.

        Args:
            db: Database session
            query: Select over a single entity, already filtered and sorted
            page_number: 1-based page number
            page_size: Number of items per page

        Returns:
            PagedList of entities
        """
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total_count = (await db.execute(count_query)).scalar() or 0

        page_query = query.offset((page_number - 1) * page_size).limit(page_size)
        result = await db.execute(page_query)
        items = list(result.scalars().all())

        logger.debug(f"Fetched page {page_number} ({len(items)} of {total_count} items)")
        return cls(items, total_count, page_number, page_size)

    def pagination_metadata(self) -> dict[str, int]:
        return {
            "totalCount": self.total_count,
            "pageSize": self.page_size,
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
        }

    def pagination_header(self) -> str:
        """JSON value for the ``X-Pagination`` response header."""
        return json.dumps(self.pagination_metadata())
