from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from utils.validation import SQL_INT_MAX


class CommentBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    book: str = Field(..., alias='bookId', min_length=1, max_length=100)
    chapter: int = Field(..., ge=0, le=SQL_INT_MAX)
    verse: int = Field(..., ge=0, le=SQL_INT_MAX)

    @field_validator('book', mode='before')
    @classmethod
    def book_as_string(cls, value):
        # Clients send numeric book ids as well as names
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class CommentQuery(CommentBase):
    pass


class CommentCreate(CommentBase):
    author: Optional[str] = Field(None, max_length=100)
    body: str = Field(..., min_length=1)
