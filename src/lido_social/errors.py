"""Error taxonomy shared by services, repositories and the HTTP layer.

Every error carries the HTTP status it is rendered with, so the exception
handlers in ``main`` stay a single mapping.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class LidoError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(LidoError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class InvalidArgument(LidoError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Forbidden(LidoError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(LidoError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(LidoError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class Unavailable(LidoError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Storage unavailable"


@contextmanager
def translate_store_errors(session: Session, action: str) -> Iterator[None]:
    """Roll back and re-raise store failures as taxonomy errors."""
    try:
        yield
    except IntegrityError as exc:
        session.rollback()
        logger.warning("Integrity violation during %s: %s", action, exc.orig)
        raise Conflict(f"Conflict while trying to {action}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Store failure during %s: %s", action, exc)
        raise Unavailable(f"Failed to {action}") from exc
