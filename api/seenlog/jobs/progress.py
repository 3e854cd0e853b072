"""Worker entrypoint for the after-progress side effects."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from seenlog.db.session import async_session
from seenlog.services import consistency_service

logger = logging.getLogger("seenlog.jobs.progress")


def after_progress_recorded_job(**event: Any) -> dict[str, Any]:
    """Reconcile the "In Progress" collection for one recorded seen item."""
    payload = consistency_service.AfterProgressRecorded.from_job_kwargs(event)

    async def _run() -> None:
        async with async_session() as session:
            await consistency_service.after_progress_recorded(session, payload)

    try:
        asyncio.run(_run())
    except Exception:
        logger.exception("After-progress job failed for seen %s", payload.seen_id)
        raise
    logger.info("Applied after-progress side effects for seen %s", payload.seen_id)
    return {"seen_id": str(payload.seen_id)}
