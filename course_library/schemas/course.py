from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CourseDto(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    author_id: UUID

    model_config = ConfigDict(from_attributes=True)
