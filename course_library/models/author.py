"""Author entity."""

import uuid

from sqlalchemy import Column, Date, String, Uuid
from sqlalchemy.orm import relationship

from course_library.database import Base


class Author(Base):
    """An author of one or more courses."""

    __tablename__ = "authors"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    date_of_death = Column(Date, nullable=True)
    main_category = Column(String(50), nullable=False, index=True)

    courses = relationship("Course", back_populates="author", cascade="all, delete-orphan")
