"""
Sorting Utilities

Applies resolved sort keys to a SQLAlchemy select.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy import asc, desc

from course_library.exceptions import ConfigurationError

if TYPE_CHECKING:
    from sqlalchemy import Select

    from course_library.services.property_mapping_service import SortKey


def apply_sort(query: Select, entity: type, sort_keys: Iterable[SortKey], tie_breaker: str | None = "id") -> Select:
    """
    Append ORDER BY clauses for ``sort_keys`` to ``query``.

    Args:
        query: Select statement over ``entity``
        entity: SQLAlchemy model class the keys refer to
        sort_keys: Resolved keys, most significant first
        tie_breaker: Column appended last (ascending) for a deterministic
            order; skipped when None or already among the keys

    Raises:
        ConfigurationError: if a key names a column ``entity`` lacks
    """
    ordered: list[str] = []
    for key in sort_keys:
        column = getattr(entity, key.property_name, None)
        if column is None:
            raise ConfigurationError(
                f"{entity.__name__} has no column '{key.property_name}' to sort on",
                details={"entity": entity.__name__, "property": key.property_name},
            )
        query = query.order_by(asc(column) if key.ascending else desc(column))
        ordered.append(key.property_name)

    if tie_breaker and tie_breaker not in ordered:
        query = query.order_by(asc(getattr(entity, tie_breaker)))
    return query
