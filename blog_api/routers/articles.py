from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from blog_api.database import get_db
from blog_api.dependencies import FilteredListingParams, require_user
from blog_api.models import User
from blog_api.schemas import ArticleCreateRequest, ArticleUpdateRequest, PaginatedListResponse
from blog_api.services import article_service

router = APIRouter(prefix="/articles", tags=["articles"])

@router.post("", status_code=201)
async def create_article(
    data: ArticleCreateRequest,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    article = await article_service.create_article(db, current_user, data.article)
    return article_service.build_article_response(article)

@router.get("")
async def list_articles(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.get_articles(db)

# Declared before "/{slug}" so "filtered" is not captured as a slug.
@router.get("/filtered", response_model=PaginatedListResponse)
async def get_filtered(
    params: FilteredListingParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.get_filtered(
        db,
        tag=params.tag,
        author=params.author,
        sort_direction=params.sort_direction,
        count_on_page=params.count_on_page,
        current_page=params.current_page,
    )

@router.get("/{slug}")
async def get_article(slug: str, db: AsyncSession = Depends(get_db)):
    article = await article_service.get_article(db, slug)
    return article_service.build_article_response(article)

@router.put("/{slug}")
async def update_article(
    slug: str,
    data: ArticleUpdateRequest,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    fields = data.article.model_dump(exclude_unset=True)
    article = await article_service.update_article(db, current_user.id, slug, fields)
    return article_service.build_article_response(article)

@router.delete("/{slug}")
async def delete_article(
    slug: str,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.delete_article(db, current_user.id, slug)
