"""
Article service: business logic for the Article aggregate.

Design notes
------------
- The author is always eager-loaded with ``joinedload`` (many-to-one), so
  serialisation never triggers a lazy load on the async session.
- Titles and slugs are unique at the storage layer.  The title lookup in
  ``create_article`` / ``update_article`` only produces a friendlier
  message; an ``IntegrityError`` on flush is reported the same way.
- Mutations are allowed for the author only, and only for the fields in
  ``ALLOWED_UPDATE_FIELDS``.  A payload with any other key is rejected
  whole.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging
import math

from sqlalchemy import asc, delete, desc, false, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from blog_api.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnprocessableError,
    check_update_fields,
)
from blog_api.models import Article, User
from blog_api.schemas import ArticleCreate, PaginatedListResponse
from blog_api.services import user_service
from blog_api.slugs import generate_slug

logger = logging.getLogger(__name__)

ALLOWED_UPDATE_FIELDS: frozenset[str] = frozenset({"title", "description", "body"})


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _serialize_author(author: User | None) -> dict | None:
    if author is None:
        return None
    return user_service.user_to_dict(author)


def article_to_dict(article: Article) -> dict:
    """Serialise an Article ORM instance (author attached) to a plain dict."""
    return {
        "id": article.id,
        "slug": article.slug,
        "title": article.title,
        "description": article.description,
        "body": article.body,
        "tagList": article.tag_list,
        "createdAt": article.created_at.isoformat() if article.created_at else None,
        "updatedAt": article.updated_at.isoformat() if article.updated_at else None,
        "author": _serialize_author(article.author),
    }


def build_article_response(article: dict) -> dict:
    return {"article": article}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------

async def _find_by_slug(db: AsyncSession, slug: str) -> Article | None:
    q = (
        select(Article)
        .where(Article.slug == slug)
        .options(joinedload(Article.author))
    )
    result = await db.execute(q)
    return result.unique().scalar_one_or_none()


async def _title_taken(db: AsyncSession, title: str) -> bool:
    result = await db.execute(select(Article.id).where(Article.title == title))
    return result.first() is not None


async def _get_owned_article(db: AsyncSession, user_id: int, slug: str, action: str) -> Article:
    article = await _find_by_slug(db, slug)
    if article is None:
        raise NotFoundError(f"Article with slug '{slug}' not found")
    if article.author_id != user_id:
        raise ForbiddenError(f"You should be the author of this article to {action} it")
    return article


def _title_conflict(title: str) -> ConflictError:
    return ConflictError(f"Article with title '{title}' already exists")


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def create_article(db: AsyncSession, author: User, data: ArticleCreate) -> dict:
    """
    Create a new article owned by *author* and return its serialised dict.

    The slug is the slugified title plus a random base-36 suffix.
    """
    if await _title_taken(db, data.title):
        raise _title_conflict(data.title)

    article = Article(
        title=data.title,
        description=data.description,
        body=data.body,
        tag_list=data.tag_list,
        slug=generate_slug(data.title),
        author_id=author.id,
    )
    article.author = author
    db.add(article)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise _title_conflict(data.title)

    logger.info("Created article slug=%s author_id=%s", article.slug, author.id)
    return article_to_dict(article)


async def get_articles(db: AsyncSession) -> list[dict]:
    """Return every article, oldest first, without pagination."""
    q = (
        select(Article)
        .options(joinedload(Article.author))
        .order_by(Article.created_at.asc(), Article.id.asc())
    )
    result = await db.execute(q)
    return [article_to_dict(a) for a in result.unique().scalars().all()]


async def get_filtered(
    db: AsyncSession,
    tag: str | None = None,
    author: str | None = None,
    sort_direction: str = "ASC",
    count_on_page: int | None = None,
    current_page: int | None = None,
) -> PaginatedListResponse:
    """
    Return one page of articles ordered by creation time.

    *tag* is matched case-insensitively as a substring of the serialised tag
    list, so ``"ja"`` and ``"JA"`` both match ``java`` and ``ninja``.
    *author* is resolved to a user first; an unknown author yields an empty
    listing.

    Without *count_on_page* every matching article is returned and the
    listing reports a single page.

    Two SQL statements are issued (three with an author filter):
    1. COUNT: total matching articles.
    2. SELECT with LIMIT/OFFSET and the author JOIN.
    """
    conditions = []
    if tag:
        conditions.append(Article.tag_list_raw.icontains(tag, autoescape=True))
    if author:
        author_row = await user_service.get_user_by_name(db, author)
        if author_row is None:
            conditions.append(false())
        else:
            conditions.append(Article.author_id == author_row.id)

    # 1. Total count
    count_q = select(func.count()).select_from(Article)
    for condition in conditions:
        count_q = count_q.where(condition)
    total: int = (await db.execute(count_q)).scalar_one()

    # 2. Requested page with the author eager-loaded
    order = desc if sort_direction.upper() == "DESC" else asc
    articles_q = (
        select(Article)
        .options(joinedload(Article.author))
        .order_by(order(Article.created_at), order(Article.id))
    )
    for condition in conditions:
        articles_q = articles_q.where(condition)

    page = current_page or 1
    if count_on_page:
        articles_q = articles_q.offset((page - 1) * count_on_page).limit(count_on_page)
        total_pages = math.ceil(total / count_on_page)
    else:
        total_pages = 1

    result = await db.execute(articles_q)
    articles = result.unique().scalars().all()

    return PaginatedListResponse(
        total_count=total,
        total_pages=total_pages,
        current_page=page,
        count_on_current_page=len(articles),
        data=[article_to_dict(a) for a in articles],
    )


async def get_article(db: AsyncSession, slug: str) -> dict:
    """Return the serialised article identified by *slug* or raise NotFoundError."""
    article = await _find_by_slug(db, slug)
    if article is None:
        raise NotFoundError(f"Article with slug '{slug}' not found")
    return article_to_dict(article)


async def update_article(db: AsyncSession, user_id: int, slug: str, fields: dict) -> dict:
    """
    Partially update the article identified by *slug* on behalf of
    *user_id* and return the updated dict.

    A new slug is generated when the title changes.
    """
    article = await _get_owned_article(db, user_id, slug, "update")

    check_update_fields(fields, ALLOWED_UPDATE_FIELDS, "article")
    for field, value in fields.items():
        if value is None:
            raise UnprocessableError(f"{field} must not be null")

    new_title = fields.get("title")
    if new_title is not None and new_title != article.title:
        if await _title_taken(db, new_title):
            raise _title_conflict(new_title)
        article.slug = generate_slug(new_title)

    for field, value in fields.items():
        setattr(article, field, value)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise _title_conflict(fields.get("title", ""))

    logger.info("Updated article slug=%s fields=%s", article.slug, sorted(fields))
    return article_to_dict(article)


async def delete_article(db: AsyncSession, user_id: int, slug: str) -> dict:
    """
    Delete the article identified by *slug* on behalf of *user_id*.

    Returns the deletion result, ``{"affected": <rows deleted>}``.
    """
    article = await _get_owned_article(db, user_id, slug, "delete")

    result = await db.execute(delete(Article).where(Article.id == article.id))
    await db.flush()

    logger.info("Deleted article slug=%s", slug)
    return {"affected": result.rowcount}
