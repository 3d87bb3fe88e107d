"""Tests for the FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from intake.engine import EngineInitializationError
from intake.routing.ensemble import EnsembleResolver
from intake.tasks import TASK_DEFS


@pytest.fixture(scope="module")
def client(resolver):
    with TestClient(create_app(resolver, eager_init=True)) as c:
        yield c


# ── Health ───────────────────────────────────────────────────────────────

def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["mode"] == "ensemble"
    assert data["models_ready"] is True
    assert data["tasks"] == ["type", "category", "urgency", "sentiment", "complexity"]
    assert data["uptime_seconds"] >= 0


# ── Analyze ──────────────────────────────────────────────────────────────

def test_analyze_printer(client):
    resp = client.post("/v1/analyze", json={
        "text": "Mon imprimante ne fonctionne plus, c'est urgent, je ne peux plus travailler.",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["type"]["type"] == "incident"
    assert data["type"]["type_id"] == 1
    assert data["category"]["category"].startswith("incident_")
    assert data["urgency"]["urgency"] == 1
    assert data["title"]
    assert 1 <= data["complexity"]["score"] <= 3
    assert data["category_name"]
    assert data["follow_up"] == {"is_follow_up": False, "ticket_number": None, "keywords": []}
    assert data["missing_info"]


def test_analyze_empty_text_defaults(client):
    resp = client.post("/v1/analyze", json={"text": ""})
    assert resp.status_code == 200
    data = resp.json()
    assert data["type"]["source"] == "default"
    assert data["urgency"]["urgency"] == 3
    assert data["complexity"]["complexity"] == "moderate"


def test_analyze_returns_entities(client):
    resp = client.post("/v1/analyze", json={
        "text": "Relance du ticket #812 : le serveur 10.1.2.3 est injoignable depuis lundi.",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["follow_up"]["ticket_number"] == "812"
    assert data["entities"]["ips"] == ["10.1.2.3"]
    assert data["entities"]["dates"] == ["lundi"]


def test_analyze_missing_text(client):
    assert client.post("/v1/analyze", json={}).status_code == 422


def test_analyze_text_too_long(client):
    assert client.post("/v1/analyze", json={"text": "a" * 5001}).status_code == 422


# ── Single task ──────────────────────────────────────────────────────────

def test_classify_type(client):
    resp = client.post("/v1/classify/type", json={
        "text": "J'aimerais avoir accès au dossier partagé du service comptabilité.",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["task"] == "type"
    assert data["label"] == "request"
    assert data["label_id"] == 2
    assert 0.0 <= data["confidence"] <= 1.0


def test_classify_category_with_type_hint(client):
    resp = client.post("/v1/classify/category", json={
        "text": "J'aimerais avoir accès au dossier partagé du service comptabilité.",
        "ticket_type": "request",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["label"].startswith("demande_")


def test_classify_urgency(client):
    resp = client.post("/v1/classify/urgency", json={"text": "banane"})
    assert resp.status_code == 200
    assert resp.json()["label"] == 3
    assert resp.json()["label_id"] is None


def test_classify_unknown_task(client):
    resp = client.post("/v1/classify/priority", json={"text": "bonjour"})
    assert resp.status_code == 404


def test_classify_bad_type_hint(client):
    resp = client.post("/v1/classify/category", json={"text": "x", "ticket_type": "bug"})
    assert resp.status_code == 422


# ── Engine unavailable ───────────────────────────────────────────────────

class _BrokenEngine:
    is_initialized = False
    task_defs = TASK_DEFS

    def initialize(self):
        raise EngineInitializationError("training failed")


def test_engine_failure_maps_to_503():
    app = create_app(EnsembleResolver(_BrokenEngine(), mode="ensemble"), eager_init=True)
    with TestClient(app) as c:
        assert c.get("/health").json()["models_ready"] is False
        resp = c.post("/v1/classify/type", json={"text": "panne"})
        assert resp.status_code == 503
        assert "unavailable" in resp.json()["detail"]


def test_warm_up_runs_off_the_event_loop(monkeypatch):
    import api.main as main_module

    offloaded = []

    async def recording_threadpool(func, *args, **kwargs):
        offloaded.append(func)
        return func(*args, **kwargs)

    monkeypatch.setattr(main_module, "run_in_threadpool", recording_threadpool)
    resolver = EnsembleResolver(mode="rules")
    with TestClient(create_app(resolver, eager_init=True)) as c:
        assert c.get("/health").status_code == 200
    assert offloaded == [resolver.ensure_ready]
