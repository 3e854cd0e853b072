"""Summary recompute jobs."""

from __future__ import annotations

import asyncio
import logging
import uuid

from seenlog.db.session import async_session
from seenlog.services import summary_service

logger = logging.getLogger("seenlog.jobs.summaries")


def recalculate_user_summary_job(user_id: str) -> dict[str, str]:
    """Recompute one user's summary snapshot."""

    async def _run() -> str:
        async with async_session() as session:
            summary = await summary_service.calculate_user_summary(session, uuid.UUID(user_id))
            return str(summary.id)

    try:
        summary_id = asyncio.run(_run())
    except Exception:
        logger.exception("Summary recompute failed for user %s", user_id)
        raise
    return {"user_id": user_id, "summary_id": summary_id}


def regenerate_all_user_summaries_job() -> dict[str, int]:
    """Scheduled recompute of every user's summary."""

    async def _run() -> int:
        async with async_session() as session:
            return await summary_service.regenerate_all_user_summaries(session)

    try:
        users = asyncio.run(_run())
    except Exception:
        logger.exception("Scheduled summary recompute failed")
        raise
    logger.info("Recalculated summaries for %d users", users)
    return {"users": users}
