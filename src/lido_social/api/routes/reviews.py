from typing import Annotated

from fastapi import APIRouter, Depends, Query

from lido_social.dependencies.auth import require_principal, resolve_principal
from lido_social.dependencies.services import get_engagement_service, get_review_service
from lido_social.domain import BookId, CommentId, ReviewId
from lido_social.models import Profile
from lido_social.schemas.common import SuccessResponse
from lido_social.schemas.review import (
    CommentCreateRequest,
    CommentCreateResponse,
    CommentListResponse,
    LikeStatusResponse,
    LikeToggleRequest,
    LikeToggleResponse,
    ReviewListResponse,
    ReviewSubmitRequest,
    ReviewSubmitResponse,
)
from lido_social.services.engagement_service import EngagementService
from lido_social.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("", response_model=ReviewListResponse)
def list_reviews(
    svc: Annotated[ReviewService, Depends(get_review_service)],
    book_id: str = Query(..., min_length=1, description="Book whose reviews to list"),
) -> ReviewListResponse:
    """Reviews of a book, newest first, with their authors."""
    return ReviewListResponse(reviews=svc.list_reviews(BookId(book_id)))


@router.post(
    "",
    response_model=ReviewSubmitResponse,
    summary="Create or update a review",
    description=(
        "Creates the caller's review of a book. A second submission for the same "
        "book updates the existing review instead of creating another one."
    ),
    responses={
        400: {"description": "Rating outside 1..5 or unknown vibes"},
        401: {"description": "Not authenticated"},
        404: {"description": "Book not found"},
    },
)
def submit_review(
    payload: ReviewSubmitRequest,
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[ReviewService, Depends(get_review_service)],
) -> ReviewSubmitResponse:
    return svc.submit_review(principal, payload)


@router.delete(
    "",
    response_model=SuccessResponse,
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not the author"},
        404: {"description": "Review not found"},
    },
)
def delete_review(
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[ReviewService, Depends(get_review_service)],
    review_id: str = Query(..., min_length=1),
) -> SuccessResponse:
    svc.delete_review(principal, ReviewId(review_id))
    return SuccessResponse()


@router.get("/like", response_model=LikeStatusResponse)
def get_like_status(
    principal: Annotated[Profile | None, Depends(resolve_principal)],
    svc: Annotated[EngagementService, Depends(get_engagement_service)],
    review_id: str = Query(..., min_length=1),
) -> LikeStatusResponse:
    """Anonymous callers always see ``liked: false``."""
    return LikeStatusResponse(liked=svc.is_liked(principal, ReviewId(review_id)))


@router.post(
    "/like",
    response_model=LikeToggleResponse,
    summary="Toggle a like on a review",
    responses={401: {"description": "Not authenticated"}, 404: {"description": "Review not found"}},
)
def toggle_like(
    payload: LikeToggleRequest,
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[EngagementService, Depends(get_engagement_service)],
) -> LikeToggleResponse:
    liked = svc.toggle_like(principal, ReviewId(payload.review_id))
    return LikeToggleResponse(liked=liked, action="liked" if liked else "unliked")


@router.get("/comments", response_model=CommentListResponse)
def list_comments(
    svc: Annotated[EngagementService, Depends(get_engagement_service)],
    review_id: str = Query(..., min_length=1),
) -> CommentListResponse:
    """Comments on a review, oldest first."""
    return CommentListResponse(comments=svc.list_comments(ReviewId(review_id)))


@router.post(
    "/comments",
    response_model=CommentCreateResponse,
    responses={
        400: {"description": "Blank comment"},
        401: {"description": "Not authenticated"},
        404: {"description": "Review not found"},
    },
)
def add_comment(
    payload: CommentCreateRequest,
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[EngagementService, Depends(get_engagement_service)],
) -> CommentCreateResponse:
    comment = svc.add_comment(principal, ReviewId(payload.review_id), payload.content)
    return CommentCreateResponse(comment=comment)


@router.delete(
    "/comments",
    response_model=SuccessResponse,
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not the comment author"},
        404: {"description": "Comment not found"},
    },
)
def delete_comment(
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[EngagementService, Depends(get_engagement_service)],
    comment_id: str = Query(..., min_length=1),
) -> SuccessResponse:
    svc.delete_comment(principal, CommentId(comment_id))
    return SuccessResponse()
