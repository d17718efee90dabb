"""
End-to-end tests through the HTTP surface.

The app is built against the test SQLite database with the keyword engine;
lifespan is not run, so tests drain the dispatcher themselves.
"""
from __future__ import annotations

import logging
import uuid

import httpx
import pytest
import pytest_asyncio

from api.app import main as app_main
from api.app.config import Settings
from api.app.main import create_app
from services.analysis_engine import AnalysisEngine


@pytest.fixture
def app(session_factory):
    settings = Settings(_env_file=None, openai_api_key=None, enable_metrics=True)
    return create_app(settings=settings, session_factory=session_factory, analysis_engine=AnalysisEngine())


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _create_watchlist(client, terms=("malware", "phishing")) -> dict:
    resp = await client.post("/api/watchlists", json={"name": "Malware watch", "terms": list(terms)})
    assert resp.status_code == 201
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    body = resp.json()
    assert resp.status_code == 200
    assert body["status"] == "healthy"
    assert body["analysis"]["mode"] == "fallback"
    assert body["analysis"]["dispatched"] == 0


@pytest.mark.asyncio
async def test_watchlist_crud(client):
    wl = await _create_watchlist(client)
    assert wl["terms"] == ["malware", "phishing"]
    assert wl["is_active"] is True

    resp = await client.put(f"/api/watchlists/{wl['id']}", json={"terms": ["ransomware"], "is_active": False})
    assert resp.status_code == 200
    assert resp.json()["data"]["terms"] == ["ransomware"]
    assert resp.json()["data"]["is_active"] is False

    listing = (await client.get("/api/watchlists")).json()["data"]
    assert [w["id"] for w in listing] == [wl["id"]]
    assert listing[0]["event_count"] == 0

    assert (await client.delete(f"/api/watchlists/{wl['id']}")).status_code == 200
    assert (await client.get(f"/api/watchlists/{wl['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_watchlist_requires_terms(client):
    resp = await client.post("/api/watchlists", json={"name": "empty", "terms": []})
    assert resp.status_code == 422
    resp = await client.post("/api/watchlists", json={"name": "blank", "terms": ["  "]})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_create_event_then_poll_until_enriched(app, client):
    wl = await _create_watchlist(client)
    resp = await client.post(
        "/api/events",
        json={
            "type": "malware_detection",
            "description": "Malware signature detected",
            "metadata": {},
            "watchlist_id": wl["id"],
        },
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Event created, AI analysis in progress"
    created = body["data"]
    assert created["ai_summary"] is None
    assert created["ai_severity"] is None
    assert created["ai_suggested_action"] is None
    assert created["ai_processed_at"] is None

    await app.state.dispatcher.drain(timeout=5)

    event = (await client.get(f"/api/events/{created['id']}")).json()["data"]
    assert event["ai_severity"] == "HIGH"
    assert "malware_detection" in event["ai_summary"]
    assert "matches watchlist terms: malware" in event["ai_summary"]
    assert event["ai_processed_at"] is not None
    assert event["metadata"] == {}


@pytest.mark.asyncio
async def test_create_event_unknown_watchlist_is_404(app, client):
    resp = await client.post(
        "/api/events",
        json={"type": "x", "description": "y", "watchlist_id": str(uuid.uuid4())},
    )
    assert resp.status_code == 404
    assert resp.json()["success"] is False
    assert app.state.dispatcher.sink.stats.dispatched == 0


@pytest.mark.asyncio
async def test_create_event_validation(client):
    wl = await _create_watchlist(client)
    resp = await client.post("/api/events", json={"type": "", "description": "y", "watchlist_id": wl["id"]})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_simulate_and_filter_by_severity(app, client):
    wl = await _create_watchlist(client)
    resp = await client.post("/api/events/simulate", json={"watchlist_id": wl["id"], "count": 5})
    assert resp.status_code == 201
    assert len(resp.json()["data"]) == 5

    await app.state.dispatcher.drain(timeout=10)

    events = (await client.get("/api/events", params={"watchlist_id": wl["id"]})).json()["data"]
    assert len(events) == 5
    assert all(e["ai_processed_at"] is not None for e in events)

    high = (await client.get("/api/events", params={"severity": "HIGH"})).json()["data"]
    assert {e["type"] for e in high} >= {"malware_detection"}
    assert all(e["ai_severity"] == "HIGH" for e in high)

    health = (await client.get("/health")).json()["analysis"]
    assert health["succeeded"] == 5
    assert health["fallback_used"] == 5


@pytest.mark.asyncio
async def test_simulate_count_bounds(client):
    wl = await _create_watchlist(client)
    resp = await client.post("/api/events/simulate", json={"watchlist_id": wl["id"], "count": 11})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_deleting_watchlist_cascades(app, client):
    wl = await _create_watchlist(client)
    await client.post("/api/events/simulate", json={"watchlist_id": wl["id"], "count": 2})
    await app.state.dispatcher.drain(timeout=10)

    await client.delete(f"/api/watchlists/{wl['id']}")
    events = (await client.get("/api/events")).json()["data"]
    assert events == []


@pytest.mark.asyncio
async def test_correlation_id_is_echoed_and_reaches_task_logs(app, client, caplog):
    caplog.set_level(logging.INFO)
    wl = await _create_watchlist(client)

    resp = await client.post(
        "/api/events",
        json={"type": "login", "description": "user signed in", "watchlist_id": wl["id"]},
        headers={"X-Correlation-ID": "req-123"},
    )
    assert resp.headers["X-Correlation-ID"] == "req-123"
    assert resp.json()["correlation_id"] == "req-123"

    await app.state.dispatcher.drain(timeout=5)

    records = {
        r.log_event: r
        for r in caplog.records
        if getattr(r, "log_event", "").startswith("analysis_")
    }
    assert set(records) == {"analysis_dispatched", "analysis_succeeded"}
    assert all(r.correlation_id == "req-123" for r in records.values())
    assert records["analysis_succeeded"].fields["severity"] == "LOW"


@pytest.mark.asyncio
async def test_correlation_id_generated_when_absent(client):
    resp = await client.get("/api/watchlists")
    cid = resp.headers["X-Correlation-ID"]
    assert uuid.UUID(cid)
    assert resp.json()["correlation_id"] == cid


@pytest.mark.asyncio
async def test_request_metrics(client):
    await client.get("/api/watchlists")
    await client.get(f"/api/events/{uuid.uuid4()}")
    metrics = (await client.get("/health")).json()["metrics"]
    assert metrics["requests"] >= 2
    assert metrics["errors"] >= 1


def test_main_serves_on_configured_host_and_port(monkeypatch):
    calls = []
    monkeypatch.setattr(
        app_main, "get_settings", lambda: Settings(_env_file=None, api_host="127.0.0.1", api_port=9001)
    )
    monkeypatch.setattr(app_main.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))

    app_main.main()

    assert calls == [(("api.app.main:app",), {"host": "127.0.0.1", "port": 9001})]
