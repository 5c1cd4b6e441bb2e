from typing import Annotated

from fastapi import APIRouter, Depends, Query

from lido_social.dependencies.auth import require_principal
from lido_social.dependencies.services import get_user_book_service
from lido_social.domain import BookId
from lido_social.models import Profile
from lido_social.schemas.common import SuccessResponse
from lido_social.schemas.user_book import UserBookSetRequest, UserBookSetResponse, UserBooksResponse
from lido_social.services.user_book_service import UserBookService

router = APIRouter(prefix="/user-books", tags=["shelf"])


@router.get("", response_model=UserBooksResponse)
def list_my_books(
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[UserBookService, Depends(get_user_book_service)],
    status: str | None = Query(None, description="Filter by shelf, or 'all'"),
) -> UserBooksResponse:
    return UserBooksResponse(books=svc.list_books(principal, status))


@router.post(
    "",
    response_model=UserBookSetResponse,
    summary="Put a book on a shelf",
    description="Upserts the reading status and records the matching activity.",
)
def set_book_status(
    payload: UserBookSetRequest,
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[UserBookService, Depends(get_user_book_service)],
) -> UserBookSetResponse:
    entry = svc.set_status(principal, BookId(payload.book_id), payload.status)
    return UserBookSetResponse(data=entry)


@router.delete("", response_model=SuccessResponse)
def remove_book(
    principal: Annotated[Profile, Depends(require_principal)],
    svc: Annotated[UserBookService, Depends(get_user_book_service)],
    book_id: str = Query(..., min_length=1),
) -> SuccessResponse:
    svc.remove_book(principal, BookId(book_id))
    return SuccessResponse()
