"""Category, FAQ and statistics API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.api.deps import AdminActor
from qa_forum.database import get_db
from qa_forum.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    FaqCreate,
    FaqResponse,
    StatsResponse,
)
from qa_forum.services import catalog as catalog_service

router = APIRouter(tags=["catalog"])


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)) -> list[CategoryResponse]:
    """List all categories."""
    categories = await catalog_service.list_categories(db)
    return [CategoryResponse.model_validate(category) for category in categories]


@router.get("/categories/{slug}", response_model=CategoryResponse)
async def get_category(slug: str, db: AsyncSession = Depends(get_db)) -> CategoryResponse:
    """Get a category by its slug."""
    category = await catalog_service.get_category_by_slug(db, slug)
    return CategoryResponse.model_validate(category)


@router.post("/categories", response_model=CategoryResponse, status_code=201)
async def create_category(
    actor: AdminActor,
    category_data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """Create a category. Admins only."""
    category = await catalog_service.create_category(db, category_data, actor)
    return CategoryResponse.model_validate(category)


@router.get("/faqs", response_model=list[FaqResponse])
async def list_faqs(db: AsyncSession = Depends(get_db)) -> list[FaqResponse]:
    """List FAQs in display order."""
    faqs = await catalog_service.list_faqs(db)
    return [FaqResponse.model_validate(faq) for faq in faqs]


@router.post("/faqs", response_model=FaqResponse, status_code=201)
async def create_faq(
    actor: AdminActor,
    faq_data: FaqCreate,
    db: AsyncSession = Depends(get_db),
) -> FaqResponse:
    """Create an FAQ entry. Admins only."""
    faq = await catalog_service.create_faq(db, faq_data, actor)
    return FaqResponse.model_validate(faq)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(db: AsyncSession = Depends(get_db)) -> StatsResponse:
    """Site-wide question, answer and category totals."""
    return await catalog_service.get_stats(db)
