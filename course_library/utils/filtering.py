"""
Filtering Utilities

Applies the author collection's ``mainCategory`` and ``searchQuery``
filters to a SQLAlchemy select.
"""

from sqlalchemy import Select, or_

from course_library.models.author import Author


def apply_author_filters(query: Select, main_category: str | None = None, search_query: str | None = None) -> Select:
    """
    Narrow an Author select by category and free-text search.

    Args:
        query: Select over Author
        main_category: Exact category match, ignoring surrounding whitespace
        search_query: Substring matched against category, first and last name

    Returns:
        The filtered select; blank arguments leave it unchanged
    """
    if main_category and main_category.strip():
        query = query.where(Author.main_category == main_category.strip())

    if search_query and search_query.strip():
        term = search_query.strip()
        query = query.where(
            or_(
                Author.main_category.contains(term, autoescape=True),
                Author.first_name.contains(term, autoescape=True),
                Author.last_name.contains(term, autoescape=True),
            )
        )
    return query
