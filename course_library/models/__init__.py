from .author import Author
from .course import Course

__all__ = [
    "Author",
    "Course",
]
