from __future__ import annotations

import logging
import uuid

import pytest

from seenlog.jobs.progress import after_progress_recorded_job
from seenlog.jobs.summaries import recalculate_user_summary_job
from seenlog.services.task_queue import TaskQueue


class _FakeJob:
    id = "job-123"


class _FakeQueue:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def enqueue(self, func, **options):
        self.calls.append((func, options))
        return _FakeJob()


@pytest.mark.asyncio
async def test_disabled_queue_runs_fallback_inline():
    queue = TaskQueue()
    ran: list[str] = []

    async def _fallback() -> None:
        ran.append("inline")

    job_id = await queue.enqueue_summary_recalculation(uuid.uuid4(), fallback=_fallback)

    assert queue.enabled is False
    assert job_id is None
    assert ran == ["inline"]


@pytest.mark.asyncio
async def test_inline_failure_is_logged_not_raised(caplog):
    queue = TaskQueue()

    async def _broken() -> None:
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR, logger="seenlog.services.task_queue"):
        assert await queue.push(after_progress_recorded_job, fallback=_broken, description="after_progress:x") is None

    assert "Inline job after_progress:x failed" in caplog.text


@pytest.mark.asyncio
async def test_enabled_queue_enqueues_without_retry(monkeypatch):
    queue = TaskQueue()
    fake = _FakeQueue()
    monkeypatch.setattr(queue, "_enabled", True)
    monkeypatch.setattr(queue, "_connection", object())
    monkeypatch.setattr(queue, "get_queue", lambda queue_name=None: fake)
    user_id = uuid.uuid4()

    job_id = await queue.enqueue_summary_recalculation(user_id)

    assert job_id == "job-123"
    func, options = fake.calls[0]
    assert func is recalculate_user_summary_job
    assert options["kwargs"] == {"user_id": str(user_id)}
    assert "retry" not in options


def test_queue_routing_prefers_dedicated_queues():
    queue = TaskQueue()

    assert queue.queue_name_for("summaries") == "summaries"
    assert queue.queue_name_for("maintenance") == queue.queue_names[0]
    assert queue.snapshot()["status"] == "offline"
