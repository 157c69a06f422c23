"""Course entity."""

import uuid

from sqlalchemy import Column, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from course_library.database import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    description = Column(String(1500), nullable=True)
    author_id = Column(Uuid, ForeignKey("authors.id"), nullable=False, index=True)

    author = relationship("Author", back_populates="courses")
