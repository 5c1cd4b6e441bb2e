import typing
from typing import Annotated, Literal

from pydantic import Field

if typing.TYPE_CHECKING:
    PrincipalId = typing.NewType("PrincipalId", str)
    BookId = typing.NewType("BookId", str)
    ReviewId = typing.NewType("ReviewId", str)
    CommentId = typing.NewType("CommentId", str)
    Username = typing.NewType("Username", str)
else:
    _PrincipalIdStr = Annotated[str, Field(min_length=1, max_length=64)]
    PrincipalId = typing.NewType("PrincipalId", _PrincipalIdStr)

    _BookIdStr = Annotated[str, Field(min_length=1, max_length=36)]
    BookId = typing.NewType("BookId", _BookIdStr)

    _ReviewIdStr = Annotated[str, Field(min_length=1, max_length=36)]
    ReviewId = typing.NewType("ReviewId", _ReviewIdStr)

    _CommentIdStr = Annotated[str, Field(min_length=1, max_length=36)]
    CommentId = typing.NewType("CommentId", _CommentIdStr)

    _UsernameStr = Annotated[str, Field(pattern=r"^[a-z0-9_\.]{3,30}$")]
    Username = typing.NewType("Username", _UsernameStr)

ReadingStatus = Literal["want_to_read", "reading", "read", "dnf"]

ActivityType = Literal[
    "user_reviewed",
    "user_started_reading",
    "user_finished_book",
    "user_added_to_list",
    "user_followed",
    "book_trending",
]

NotificationType = Literal["like_review", "comment_review", "new_follower", "system_alert"]

XPEventType = Literal["review", "indie_review", "finish_book"]

FeedScope = Literal["all", "following"]

ADMIN_LEVEL = 10
