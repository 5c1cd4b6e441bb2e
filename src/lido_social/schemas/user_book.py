from datetime import datetime

from pydantic import BaseModel, Field

from lido_social.schemas.common import BookSummary


class UserBookSetRequest(BaseModel):
    book_id: str = Field(min_length=1)
    status: str = Field(
        description="One of want-to-read, reading, read, dnf",
        examples=["reading"],
    )


class UserBookRead(BaseModel):
    id: int
    status: str
    added_at: datetime
    started_at: datetime | None = None
    finished_at: datetime | None = None
    book: BookSummary


class UserBookSetResponse(BaseModel):
    success: bool = True
    data: UserBookRead


class UserBooksResponse(BaseModel):
    books: list[UserBookRead]
