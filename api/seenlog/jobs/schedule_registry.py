from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from rq_scheduler import Scheduler

from seenlog.core.config import settings
from seenlog.jobs.summaries import regenerate_all_user_summaries_job
from seenlog.services.task_queue import task_queue

logger = logging.getLogger("seenlog.jobs.schedule_registry")


def _schedule_entries() -> list[dict]:
    entries: list[dict] = []
    if settings.summary_refresh_hours > 0:
        entries.append(
            {
                "id": "summaries:regenerate_all",
                "func": regenerate_all_user_summaries_job,
                "interval": int(timedelta(hours=settings.summary_refresh_hours).total_seconds()),
                "repeat": None,
                "queue_name": task_queue.queue_name_for("summaries"),
            }
        )
    return entries


def ensure_schedules() -> None:
    """Idempotently register periodic jobs with rq-scheduler."""
    if settings.environment.lower() == "test":
        return
    if not task_queue.connection:
        logger.info("Skipping scheduler bootstrap; queue connection is unavailable")
        return
    entries = _schedule_entries()
    if not entries:
        logger.info("No periodic jobs configured")
        return
    scheduler = Scheduler(connection=task_queue.connection, queue_name=task_queue.queue_name_for("default"))
    for entry in entries:
        if entry["id"] in scheduler:
            continue
        scheduler.schedule(
            scheduled_time=datetime.now(timezone.utc),
            func=entry["func"],
            interval=entry["interval"],
            repeat=entry["repeat"],
            id=entry["id"],
            queue_name=entry["queue_name"],
            result_ttl=int(timedelta(hours=1).total_seconds()),
        )
        logger.info("Scheduled job %s every %ss on queue %s", entry["id"], entry["interval"], entry["queue_name"])
