"""Current-user endpoints: progress, seen history and summary."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from seenlog.api.deps import get_current_user, get_db
from seenlog.models.user import User
from seenlog.schema.progress import ProgressUpdateInput, ProgressUpdateResponse, SeenRead
from seenlog.schema.summary import SummaryRegenerateResponse, UserSummaryRead
from seenlog.schema.user import UserRead
from seenlog.services import progress_service, summary_service

router = APIRouter()


@router.get("/me", response_model=UserRead)
async def read_current_user(current_user: User = Depends(get_current_user)) -> User:
    """Return the current authenticated user."""
    return current_user


@router.post("/me/progress", response_model=ProgressUpdateResponse)
async def update_progress(
    payload: ProgressUpdateInput,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ProgressUpdateResponse:
    """Record a progress report; replays of an identifier return the stored record."""
    result = await progress_service.progress_update(session, current_user.id, payload)
    return ProgressUpdateResponse(
        seen=SeenRead.model_validate(result.record),
        action=result.action.value if result.action else None,
        replayed=result.replayed,
    )


@router.get("/me/seen/{media_item_id}", response_model=list[SeenRead])
async def seen_history(
    media_item_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    return await progress_service.seen_history(session, current_user.id, media_item_id)


@router.delete("/me/seen/{seen_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_seen(
    seen_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    await progress_service.delete_seen_item(session, current_user.id, seen_id)


@router.get("/me/summary", response_model=UserSummaryRead)
async def read_summary(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> UserSummaryRead:
    """Return the latest summary snapshot, empty before the first recompute."""
    return await summary_service.latest_user_summary(session, current_user.id)


@router.post("/me/summary/regenerate", response_model=SummaryRegenerateResponse, status_code=status.HTTP_202_ACCEPTED)
async def regenerate_summary(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> SummaryRegenerateResponse:
    job_id = await summary_service.regenerate_user_summary(session, current_user.id)
    return SummaryRegenerateResponse(job_id=job_id)
