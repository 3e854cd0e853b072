from __future__ import annotations

import pytest

from seenlog.tests.utils import register_and_login


@pytest.mark.asyncio
async def test_health_reports_ok_without_auth(client, monkeypatch):
    called = False

    def _snapshot_stub() -> dict[str, object]:
        nonlocal called
        called = True
        return {}

    monkeypatch.setattr("seenlog.main.task_queue.snapshot", _snapshot_stub)

    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert called is False


@pytest.mark.asyncio
async def test_health_reports_queue_for_authenticated_users(client):
    await register_and_login(client, prefix="health")

    response = await client.get("/api/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["queue"]["status"] == "offline"
