"""RQ task queue wrapper with inline fallback for local/test runs."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from redis import Redis
from redis.exceptions import RedisError
from rq import Queue
from rq.registry import FailedJobRegistry, StartedJobRegistry
from rq.worker import Worker

from seenlog.core.config import settings

logger = logging.getLogger("seenlog.services.task_queue")

InlineFallback = Callable[[], Awaitable[Any]]


class TaskQueue:
    """Thin wrapper around RQ that can fall back to inline execution.

    Jobs are enqueued without a retry policy; a failed job stays in RQ's
    failed registry. Callers never wait for results.
    """

    def __init__(self) -> None:
        self.queue_names: list[str] = settings.worker_queue_names or ["default"]
        self._connection: Redis | None = None
        self._enabled = False
        self._bootstrap()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def connection(self) -> Redis | None:
        return self._connection

    def _bootstrap(self) -> None:
        """Initialize Redis connectivity unless disabled for tests."""
        if settings.environment.lower() == "test":
            logger.info("Task queue disabled in test environment")
            return
        try:
            connection = Redis.from_url(settings.redis_url)
            connection.ping()
        except Exception as exc:  # pragma: no cover - network/redis specific
            logger.warning("Redis unavailable; running jobs inline: %s", exc)
            self._connection = None
            self._enabled = False
            return
        self._connection = connection
        self._enabled = True
        logger.info("Task queue ready (queues: %s)", ", ".join(self.queue_names))

    def queue_name_for(self, preferred: str) -> str:
        """Route to ``preferred`` when a worker listens on it, else the first queue."""
        if preferred in self.queue_names:
            return preferred
        return self.queue_names[0] if self.queue_names else "default"

    def get_queue(self, queue_name: str | None = None) -> Queue:
        """Return a configured queue instance for enqueuing jobs."""
        if not self._connection:
            raise RuntimeError("Queue connection not initialized")
        target = queue_name or (self.queue_names[0] if self.queue_names else "default")
        return Queue(target, connection=self._connection)

    async def enqueue_after_progress(self, event: dict[str, Any], *, fallback: InlineFallback | None = None) -> str | None:
        """Dispatch the after-progress side effects for a created or updated seen record."""
        from seenlog.jobs.progress import after_progress_recorded_job

        return await self.push(
            after_progress_recorded_job,
            fallback=fallback,
            queue_name=self.queue_name_for("progress"),
            timeout_seconds=30,
            description=f"after_progress:{event['seen_id']}",
            **event,
        )

    async def enqueue_summary_recalculation(
        self, user_id: uuid.UUID, *, fallback: InlineFallback | None = None
    ) -> str | None:
        """Dispatch a full summary recompute for one user."""
        from seenlog.jobs.summaries import recalculate_user_summary_job

        return await self.push(
            recalculate_user_summary_job,
            fallback=fallback,
            queue_name=self.queue_name_for("summaries"),
            timeout_seconds=600,
            description=f"summary:{user_id}",
            user_id=str(user_id),
        )

    async def push(
        self,
        func: Callable[..., Any],
        *,
        fallback: InlineFallback | None = None,
        queue_name: str | None = None,
        timeout_seconds: int = 60,
        description: str | None = None,
        **kwargs: Any,
    ) -> str | None:
        """Enqueue a job and return its id; run ``fallback`` inline when the queue is unavailable."""
        label = description or getattr(func, "__name__", "job")
        if not self._enabled or not self._connection:
            await self._run_inline(label, fallback)
            return None

        def _enqueue() -> str:
            queue = self.get_queue(queue_name)
            job = queue.enqueue(func, kwargs=kwargs, job_timeout=timeout_seconds, description=description)
            return job.id

        try:
            return await asyncio.to_thread(_enqueue)
        except Exception as exc:  # pragma: no cover - network/redis specific
            logger.warning("Enqueue of %s failed; running inline: %s", label, exc)
            await self._run_inline(label, fallback)
            return None

    async def _run_inline(self, label: str, fallback: InlineFallback | None) -> None:
        """Run a job body in-process, logging failures the way a worker would."""
        if fallback is None:
            logger.warning("Queue unavailable and no inline fallback for %s; job skipped", label)
            return
        try:
            await fallback()
        except Exception:
            logger.exception("Inline job %s failed", label)

    def snapshot(self) -> dict[str, Any]:
        """Return a diagnostic snapshot of queue and worker state."""
        if not self._connection:
            return {
                "status": "offline",
                "queues": [],
                "workers": [],
                "error": "queue connection not initialized",
            }

        queues: list[dict[str, Any]] = []
        for name in self.queue_names:
            queue = Queue(name, connection=self._connection)
            queues.append(
                {
                    "name": name,
                    "size": queue.count,
                    "started": len(StartedJobRegistry(queue=queue)),
                    "failed": len(FailedJobRegistry(queue=queue)),
                }
            )

        workers: list[dict[str, Any]] = []
        try:
            for worker in Worker.all(connection=self._connection):
                workers.append(
                    {
                        "name": worker.name,
                        "state": getattr(worker, "state", "unknown"),
                        "queues": list(worker.queue_names()),
                    }
                )
        except RedisError as exc:  # pragma: no cover - network/redis specific
            logger.warning("Unable to list workers: %s", exc)

        return {
            "status": "online" if workers else "degraded",
            "queues": queues,
            "workers": workers,
            "checked_at": datetime.now(timezone.utc).isoformat(),
        }


task_queue = TaskQueue()
