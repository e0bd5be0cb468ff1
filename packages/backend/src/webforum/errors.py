"""Error taxonomy and its translation to HTTP responses.

Services raise these; the handler registered in main.py turns them into
a status code plus {"detail": message}. Routes never build error
responses by hand.
"""

from http import HTTPStatus

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger()


class ForumError(Exception):
    """Base class for every error the API reports to clients."""

    status: HTTPStatus = HTTPStatus.BAD_REQUEST
    message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class ValidationError(ForumError):
    """Malformed or missing input. User-correctable."""

    status = HTTPStatus.BAD_REQUEST
    message = "Invalid request"


class AuthError(ForumError):
    """Bad credentials or an unusable token.

    Messages stay generic so responses don't reveal which accounts exist.
    """

    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid email or password"

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class ForbiddenError(ForumError):
    status = HTTPStatus.FORBIDDEN
    message = "Not allowed"


class NotFoundError(ForumError):
    status = HTTPStatus.NOT_FOUND
    message = "Not found"


class ConflictError(ForumError):
    """Duplicate username, email, or other unique value."""

    status = HTTPStatus.CONFLICT
    message = "Already exists"


class StorageError(ForumError):
    """The database failed underneath us. Detail is logged, not returned."""

    status = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "Storage failure"


class HashingError(ForumError):
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "Failed to hash password"


async def forum_error_handler(request: Request, exc: ForumError) -> JSONResponse:
    """Translate a ForumError into a JSON response."""
    if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error(
            "request.failed",
            path=request.url.path,
            error=exc.message,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
        )
        detail = "Internal server error"
    else:
        logger.info(
            "request.rejected",
            path=request.url.path,
            status=int(exc.status),
            error=type(exc).__name__,
        )
        detail = exc.message
    return JSONResponse(
        status_code=int(exc.status),
        content={"detail": detail},
        headers=exc.headers,
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Last resort for database errors a service did not translate."""
    return await forum_error_handler(request, _as_storage_error(exc))


def _as_storage_error(exc: SQLAlchemyError) -> StorageError:
    error = StorageError()
    error.__cause__ = exc
    return error


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ForumError, forum_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
