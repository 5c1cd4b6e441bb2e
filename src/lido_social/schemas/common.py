from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AuthorSummary(BaseModel):
    id: str = Field(description="Profile identifier", examples=["5b0c2f7e-auth-sub"])
    username: str = Field(description="Unique handle", examples=["ana.reads"])
    display_name: str | None = Field(default=None, description="Display name")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")

    model_config = ConfigDict(from_attributes=True)


class BookSummary(BaseModel):
    id: str = Field(description="Book identifier")
    title: str = Field(description="Book title", examples=["Dom Casmurro"])
    authors: list[str] = Field(default_factory=list, description="Book authors")
    cover_url: str | None = Field(default=None, description="Cover image URL")

    model_config = ConfigDict(from_attributes=True)


class SuccessResponse(BaseModel):
    success: Literal[True] = True


class ErrorResponse(BaseModel):
    error: str = Field(description="Human readable error message")
