from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from lido_social.config import settings
from lido_social.dependencies.auth import resolve_principal
from lido_social.dependencies.services import get_feed_service
from lido_social.domain import BookId, FeedScope
from lido_social.models import Profile
from lido_social.schemas.feed import FeedPage, FriendsActivityResponse, FriendsBooksResponse
from lido_social.services.feed_service import FeedService

router = APIRouter(tags=["feed"])


@router.get(
    "/feed",
    response_model=FeedPage,
    summary="Activity feed",
    description=(
        "Newest activity first. Pass the previous page's nextCursor as cursor to "
        "continue; hasMore is false once a short page is returned."
    ),
)
def get_feed(
    viewer: Annotated[Profile | None, Depends(resolve_principal)],
    svc: Annotated[FeedService, Depends(get_feed_service)],
    limit: int = Query(
        settings.feed_default_limit,
        ge=1,
        le=settings.feed_max_limit,
        description="Max number of events to return",
    ),
    cursor: datetime | None = Query(None, description="created_at of the last event seen"),
    scope: FeedScope = Query("all", description="'following' limits the feed to your circle"),
) -> FeedPage:
    return svc.get_feed(viewer, cursor=cursor, limit=limit, scope=scope)


@router.get("/books/{book_id}/friends", response_model=FriendsActivityResponse)
def get_friends_activity(
    book_id: str,
    viewer: Annotated[Profile | None, Depends(resolve_principal)],
    svc: Annotated[FeedService, Depends(get_feed_service)],
) -> FriendsActivityResponse:
    """Shelf statuses and reviews of a book by the people you follow."""
    return svc.get_friends_activity(viewer, BookId(book_id))


@router.get("/friends/books", response_model=FriendsBooksResponse)
def get_friends_books(
    viewer: Annotated[Profile | None, Depends(resolve_principal)],
    svc: Annotated[FeedService, Depends(get_feed_service)],
) -> FriendsBooksResponse:
    """What the people you follow are reading, most recent first."""
    return svc.get_friends_books(viewer)
