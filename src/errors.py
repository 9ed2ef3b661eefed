"""API error taxonomy and storage fault translation."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base error carrying the HTTP status it is rendered with."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    """A field is missing or malformed."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class BadRequestError(ApiError):
    """Unknown fields in a partial update or a broken file pairing."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(ApiError):
    """Invalid credentials, invalid tokens, or a caller who does not own the resource."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class UnsupportedMediaTypeError(ApiError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE


class InternalServerError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


@contextmanager
def storage_guard(db: Session, message: str) -> Iterator[None]:
    """Translate storage faults into an InternalServerError with a fixed message.

    The session is rolled back so it can be reused by the error path.
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Storage fault: {message}")
        raise InternalServerError(message) from e
