"""Author endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.config import settings
from app.models.author_model import AuthorWrapper
from app.models.book_model import AuthorCreate, AuthorSummary
from app.services import author_service
from app.utils.dependencies import require_authority

router = APIRouter()


@router.get("/{author_id}", response_model=AuthorWrapper)
async def get_author(
    author_id: str,
    page: int = Query(0, ge=0),
    size: int = Query(settings.default_page_size, ge=1, le=100),
):
    """Author details with one page of their books."""
    wrapper = None
    if await author_service.exists_by_id(author_id):
        wrapper = await author_service.find_author_wrapper(author_id, page, size)
    if wrapper is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Author with id: {author_id} cannot be found",
        )
    return wrapper


@router.put(
    "/{author_id}",
    response_model=AuthorSummary,
    dependencies=[Depends(require_authority("author:update"))],
)
async def update_author(author_id: str, payload: AuthorCreate):
    """Correct an author's name."""
    return AuthorSummary.model_validate(await author_service.update_author(author_id, payload))
