"""Tests for the FastAPI service mode."""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from docwatch.git.history import HistoryScanner
from docwatch.orchestrator import Orchestrator
from docwatch.service import create_app
from tests._fixtures.repo_builder import FakeGit


@pytest.fixture
def client() -> TestClient:
    app = create_app(lambda: Orchestrator(history=HistoryScanner(runner=FakeGit())))
    return TestClient(app)


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_endpoint(client: TestClient) -> None:
    response = client.post(
        "/analyze",
        json={
            "docReferences": [
                {"docPath": "docs/a.md", "references": ["src/**/*.ts"], "lastModified": "2024-01-01"},
                {"docPath": "docs/b.md", "references": ["lib/x.ts"]},
            ],
            "recentChanges": [
                {
                    "sha": "c1",
                    "date": "2024-01-11T00:00:00Z",
                    "files": [{"filename": "src/a/b/c.ts", "additions": 2}],
                    "pr_number": 9,
                }
            ],
            "scanPeriodDays": 14,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["totalDocsAnalyzed"] == 2
    assert data["totalReferencesChecked"] == 2
    assert data["scanPeriodDays"] == 14
    assert [ref["docPath"] for ref in data["staleReferences"]] == ["docs/a.md"]
    assert data["staleReferences"][0]["stalenessDays"] == 10
    assert data["staleReferences"][0]["recentSourceChanges"][0]["pr_number"] == 9


def test_analyze_rejects_malformed_timestamp(client: TestClient) -> None:
    response = client.post(
        "/analyze",
        json={"recentChanges": [{"sha": "c1", "date": "not-a-date"}]},
    )

    assert response.status_code == 422
    assert "not-a-date" in response.json()["detail"]


class _LoopRecordingOrchestrator(Orchestrator):
    def __init__(self) -> None:
        super().__init__(history=HistoryScanner(runner=FakeGit()))
        self.ran_on_event_loop: bool | None = None

    def run_analyze(self, payload, *, scan_period_days=None):  # type: ignore[no-untyped-def]
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self.ran_on_event_loop = False
        else:
            self.ran_on_event_loop = True
        return super().run_analyze(payload, scan_period_days=scan_period_days)


def test_analyze_runs_off_the_event_loop() -> None:
    orchestrator = _LoopRecordingOrchestrator()
    client = TestClient(create_app(lambda: orchestrator))

    response = client.post("/analyze", json={"scanPeriodDays": 3})

    assert response.status_code == 200
    assert response.json()["scanPeriodDays"] == 3
    assert orchestrator.ran_on_event_loop is False
