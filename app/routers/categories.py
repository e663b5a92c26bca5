"""Category endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.config import settings
from app.models.category_model import Category, CategoryCreate, CategoryWrapper
from app.services import category_service
from app.utils.dependencies import require_authority

router = APIRouter()


@router.get("", response_model=List[Category])
async def list_categories():
    """All categories sorted by name."""
    return [Category.model_validate(category) for category in await category_service.get_all_categories()]


@router.get("/{category_id}", response_model=CategoryWrapper)
async def get_category(
    category_id: str,
    page: int = Query(0, ge=0),
    size: int = Query(settings.default_page_size, ge=1, le=100),
):
    wrapper = None
    if await category_service.exists_by_id(category_id):
        wrapper = await category_service.find_category_wrapper(category_id, page, size)
    if wrapper is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category with id: {category_id} cannot be found",
        )
    return wrapper


@router.post(
    "",
    response_model=Category,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_authority("category:create"))],
)
async def create_category(payload: CategoryCreate):
    return Category.model_validate(await category_service.save_category(payload))


@router.put(
    "/{category_id}",
    response_model=Category,
    dependencies=[Depends(require_authority("category:update"))],
)
async def rename_category(category_id: str, payload: CategoryCreate):
    return Category.model_validate(await category_service.save_category(payload, category_id))
