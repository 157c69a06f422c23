from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


def get_current_age(date_of_birth: date, date_of_death: Optional[date] = None, today: Optional[date] = None) -> int:
    """Age in whole years, measured up to the date of death when there is one."""
    end = date_of_death or today or date.today()
    age = end.year - date_of_birth.year
    if (end.month, end.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


class AuthorDto(BaseModel):
    id: UUID
    name: str
    age: int
    main_category: str

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, author, today: Optional[date] = None) -> "AuthorDto":
        return cls(
            id=author.id,
            name=f"{author.first_name} {author.last_name}",
            age=get_current_age(author.date_of_birth, author.date_of_death, today),
            main_category=author.main_category,
        )


class AuthorFullDto(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    date_of_birth: date
    main_category: str

    model_config = ConfigDict(from_attributes=True)
