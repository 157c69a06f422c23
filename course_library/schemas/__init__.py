from .author import AuthorDto, AuthorFullDto
from .course import CourseDto

__all__ = [
    "AuthorDto",
    "AuthorFullDto",
    "CourseDto",
]
