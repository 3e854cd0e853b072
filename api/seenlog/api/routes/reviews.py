import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.api.deps import get_current_user, get_db
from seenlog.models.review import Review
from seenlog.models.user import User
from seenlog.schema.review import ReviewCreate, ReviewRead
from seenlog.services import review_service

router = APIRouter()


@router.post("", response_model=ReviewRead)
async def post_review(
    payload: ReviewCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> Review:
    return await review_service.post_review(session, current_user.id, payload)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    deleted = await review_service.delete_review(session, current_user.id, review_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
