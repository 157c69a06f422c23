"""
Pytest configuration and fixtures for Course Library tests
"""

import os
import sys
import uuid
from collections.abc import AsyncGenerator
from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH119, PTH120

from course_library.database import Base  # noqa: E402
from course_library.models import Author, Course  # noqa: E402
from course_library.schemas import AuthorDto  # noqa: E402
from course_library.services.property_mapping_service import build_default_registry  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed reference date so computed ages stay stable
TODAY = date(2024, 6, 1)

AUTHOR_ROWS = [
    ("Berry", "Griffin Beak", date(1980, 7, 23), "Ships"),
    ("Nancy", "Rye", date(1978, 5, 21), "Rum"),
    ("Eli", "Ivory Bones", date(1957, 12, 16), "Singing"),
    ("Arnold", "Rapscallion", date(1957, 3, 6), "Singing"),
    ("Anne", "Bonny", date(1975, 3, 28), "Ships"),
]


def make_authors() -> list[Author]:
    return [
        Author(
            id=uuid.uuid4(),
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
            main_category=main_category,
        )
        for first_name, last_name, date_of_birth, main_category in AUTHOR_ROWS
    ]


@pytest.fixture
def authors() -> list[Author]:
    """Unsaved author entities."""
    return make_authors()


@pytest.fixture
def author_dtos(authors) -> list[AuthorDto]:
    """Author DTOs mapped from the entity fixtures."""
    return [AuthorDto.from_entity(author, today=TODAY) for author in authors]


@pytest.fixture
def registry():
    """Frozen registry with the default resource mappings."""
    return build_default_registry()


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    In-memory database seeded with the author fixtures and one course each.
    """
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        for author in make_authors():
            author.courses.append(Course(title=f"Commandeering a Ship with {author.first_name}"))
            session.add(author)
        await session.commit()

        yield session

    await engine.dispose()
