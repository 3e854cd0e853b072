"""FastAPI application entrypoint and health reporting.

Invariants:
- Queue detail is only exposed to authenticated users.
"""

from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from seenlog.api.deps import get_optional_current_user
from seenlog.api.router import api_router
from seenlog.core.config import settings
from seenlog.jobs.schedule_registry import ensure_schedules
from seenlog.models.user import User
from seenlog.services.task_queue import task_queue

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix=settings.api_prefix)


@app.on_event("startup")
async def _register_schedules() -> None:
    """Register scheduled jobs on startup."""
    ensure_schedules()


@app.get("/health", tags=["internal"])
@app.get(f"{settings.api_prefix}/health", tags=["internal"])
async def health(current_user: User | None = Depends(get_optional_current_user)) -> dict[str, Any]:
    """Return health status and, for signed-in users, the job queue state."""
    if not current_user:
        return {"status": "ok"}

    queue = task_queue.snapshot()
    status = "ok" if queue["status"] == "online" or not task_queue.enabled else "degraded"
    return {"status": status, "queue": queue}
