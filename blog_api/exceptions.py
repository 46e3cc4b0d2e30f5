"""Domain errors raised by the service layer and their HTTP rendering."""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BlogAPIError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConflictError(BlogAPIError):
    """A unique field (title, name, email) is already taken."""

    status_code = 422


class UnprocessableError(BlogAPIError):
    status_code = 422


class NotFoundError(BlogAPIError):
    status_code = 404


class ForbiddenError(BlogAPIError):
    status_code = 403


class UnauthorizedError(BlogAPIError):
    status_code = 401


def check_update_fields(fields: dict, allowed: frozenset[str], entity: str) -> None:
    """
    Reject a partial update that is empty or touches a field outside
    *allowed*.  Every offending field is listed in the message.
    """
    if not fields:
        raise UnprocessableError(f"provide fields to update {entity}")

    unknown = [key for key in fields if key not in allowed]
    if unknown:
        noun = "fields are" if len(unknown) > 1 else "field is"
        raise ForbiddenError(f"{' & '.join(unknown)} {noun} not allowed to update")


async def blog_api_error_handler(request: Request, exc: BlogAPIError) -> JSONResponse:
    logger.warning(
        "%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
