from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.database import get_db
from blog_api.exceptions import UnauthorizedError
from blog_api.middleware import REQUEST_CONTEXT_KEY, RequestContext
from blog_api.models import User
from blog_api.services import user_service


class FilteredListingParams:
    """
    Reusable FastAPI dependency that parses the query parameters of the
    filtered article listing.

    Usage in a router::

        @router.get("/articles/filtered")
        async def get_filtered(params: FilteredListingParams = Depends()):
            ...

    Attributes
    ----------
    tag:
        Substring matched against the serialised tag list.
    author:
        Name of the author whose articles are listed.
    sort_direction:
        ``"ASC"`` or ``"DESC"`` (case-insensitive); ordering is always by
        creation time.
    count_on_page:
        Page size, unbounded above.  ``None`` means
        "no limit": every matching article is returned as one page.
    current_page:
        1-based page number; ``None`` is reported back as page 1.
    """

    def __init__(
        self,
        tag: str | None = Query(None, description="Substring of the tag list."),
        author: str | None = Query(None, description="Author name."),
        sort_direction: str = Query(
            "ASC",
            alias="sortDirection",
            pattern="^(ASC|DESC|asc|desc)$",
            description="Sort direction by creation time: 'ASC' or 'DESC'.",
        ),
        count_on_page: int | None = Query(
            None,
            alias="countOnPage",
            ge=1,
            description="Number of articles per page.",
        ),
        current_page: int | None = Query(
            None,
            alias="currentPage",
            ge=1,
            description="Page number (1-based).",
        ),
    ) -> None:
        self.tag = tag or None
        self.author = author or None
        self.sort_direction = sort_direction.upper()
        self.count_on_page = count_on_page
        self.current_page = current_page


def get_request_context(request: Request) -> RequestContext:
    """Return the context stored by ``RequestContextMiddleware``."""
    return getattr(request.state, REQUEST_CONTEXT_KEY, None) or RequestContext()


async def get_current_user(
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """The authenticated user, or None for anonymous requests."""
    if context.claims is None:
        return None
    return await user_service.get_user(db, context.claims.id)


async def require_user(user: User | None = Depends(get_current_user)) -> User:
    if user is None:
        raise UnauthorizedError("Not authorized")
    return user
