"""Tests for the Jenkins webhook endpoint.

Uses FastAPI's TestClient against apps built with explicit handlers, plus one
app wired to a file document store under tmp_path.
"""

from __future__ import annotations

import json
from typing import List

import pytest
from fastapi.testclient import TestClient

from devops.api import create_app
from devops.event.workflowrun import Handlers, RunData
from devops.store import StoreError


class Recorder:
    def __init__(self, error: Exception = None):
        self.calls: List[RunData] = []
        self.error = error

    def __call__(self, data: RunData) -> None:
        self.calls.append(data)
        if self.error is not None:
            raise self.error


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def client(recorder):
    app = create_app(handlers=Handlers(handle_initialize=recorder))
    return TestClient(app)


class TestJenkinsWebhook:
    """Tests for POST /webhooks/jenkins."""

    def test_dispatches_event(self, client, recorder, make_event, run_data):
        resp = client.post("/webhooks/jenkins", content=make_event("run.initialize", data=run_data))

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "event_id": "event-1", "event_type": "run.initialize"}
        assert len(recorder.calls) == 1
        assert recorder.calls[0].project_name == "my-pipeline"

    def test_unbound_phase_acknowledged(self, client, recorder, make_event, run_data):
        resp = client.post("/webhooks/jenkins", content=make_event("run.completed", data=run_data))

        assert resp.status_code == 200
        assert recorder.calls == []

    def test_other_data_type_acknowledged(self, client, recorder, make_event, run_data):
        body = make_event("run.initialize", data=run_data, data_type="hudson.model.FreeStyleBuild")

        resp = client.post("/webhooks/jenkins", content=body)

        assert resp.status_code == 200
        assert recorder.calls == []

    @pytest.mark.parametrize("body", [b"", b"not json", b"[]", b'{"type": 5}'])
    def test_malformed_envelope(self, client, body):
        resp = client.post("/webhooks/jenkins", content=body)

        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "invalid_event"

    def test_malformed_run_data(self, client, recorder, make_event):
        resp = client.post("/webhooks/jenkins", content=make_event("run.initialize", data=["x"]))

        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "invalid_event_data"
        assert recorder.calls == []

    def test_deeply_nested_envelope(self, client, recorder):
        body = b'{"type": "run.initialize", "data": ' + b"[" * 200000 + b"]" * 200000 + b"}"

        resp = client.post("/webhooks/jenkins", content=body)

        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "invalid_event"
        assert recorder.calls == []

    def test_handler_failure(self, make_event, run_data):
        app = create_app(handlers=Handlers(handle_initialize=Recorder(StoreError("disk full"))))
        client = TestClient(app)

        resp = client.post("/webhooks/jenkins", content=make_event("run.initialize", data=run_data))

        assert resp.status_code == 500
        assert resp.json()["detail"] == {"error": "handler_failed", "message": "disk full"}


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestFileBackedApp:
    """End-to-end: the default recorder writes run data documents to disk."""

    def test_initialize_writes_document(self, tmp_path, make_event, run_data):
        client = TestClient(create_app(store_root=tmp_path))

        resp = client.post("/webhooks/jenkins", content=make_event("run.initialize", data=run_data))

        assert resp.status_code == 200
        payload = json.loads((tmp_path / "my-project" / "my-pipeline-3.json").read_text())
        assert payload["data"]["run-id"] == "3"
        assert payload["ownerReferences"][0]["name"] == "my-pipeline"

    def test_store_root_from_environment(self, tmp_path, monkeypatch, make_event, run_data):
        monkeypatch.setenv("DEVOPS_STORE_ROOT", str(tmp_path / "env-root"))
        client = TestClient(create_app())

        client.post("/webhooks/jenkins", content=make_event("run.initialize", data=run_data))

        assert (tmp_path / "env-root" / "my-project" / "my-pipeline-3.json").exists()
