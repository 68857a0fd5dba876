"""
Test fixtures for the devops event and store tests.

Provides WorkflowRun payloads, envelope builders, and store clients shared
across test modules.
"""

import json
from typing import Any, Callable, Dict, Optional

import pytest

from devops.config import reset_config
from devops.event.workflowrun import WORKFLOW_RUN_TYPE
from devops.store import FileDocumentClient, InMemoryDocumentClient

# ============================================================================
# WorkflowRun Payload Fixtures
# ============================================================================


PARAMETERS_ACTION = {
    "_class": "hudson.model.ParametersAction",
    "parameters": [
        {"_class": "hudson.model.StringParameterValue", "name": "branch", "value": "main"},
        {"_class": "hudson.model.BooleanParameterValue", "name": "skip", "value": False},
    ],
}


@pytest.fixture
def run_data() -> Dict[str, Any]:
    """
    WorkflowRun event data for a plain pipeline.

    Returns a dict with parentFullName "my-project", projectName
    "my-pipeline", run id "3", and a run carrying a cause action, an action
    without discriminator, and a parameters action.
    """
    return {
        "parentFullName": "my-project",
        "projectName": "my-pipeline",
        "multiBranch": False,
        "run": {
            "_class": "org.jenkinsci.plugins.workflow.job.WorkflowRun",
            "actions": [
                {"_class": "hudson.model.CauseAction", "causes": [{"shortDescription": "Started by user admin"}]},
                {},
                PARAMETERS_ACTION,
            ],
            "building": True,
            "description": None,
            "displayName": "#3",
            "duration": 0,
            "estimatedDuration": 1024,
            "fullDisplayName": "my-project » my-pipeline #3",
            "id": "3",
            "keepLog": False,
            "number": 3,
            "queueId": 42,
            "result": None,
            "timestamp": 1650000000000,
        },
    }


@pytest.fixture
def make_event() -> Callable[..., bytes]:
    """
    Factory building a raw event envelope.

    Usage:
        body = make_event("run.started", data={...})
        body = make_event("run.started", data={...}, data_type="other")
    """

    def _make_event(
        event_type: str = "run.initialize",
        data: Optional[Dict[str, Any]] = None,
        data_type: str = WORKFLOW_RUN_TYPE,
        event_id: str = "event-1",
    ) -> bytes:
        envelope = {
            "type": event_type,
            "source": "job/my-project/job/my-pipeline/",
            "id": event_id,
            "time": "2022-04-15T05:20:00Z",
            "dataType": data_type,
            "data": data,
        }
        return json.dumps(envelope).encode("utf-8")

    return _make_event


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def memory_client() -> InMemoryDocumentClient:
    return InMemoryDocumentClient()


@pytest.fixture
def file_client(tmp_path) -> FileDocumentClient:
    return FileDocumentClient(tmp_path / "store")


@pytest.fixture(autouse=True)
def _reset_runtime_config(monkeypatch):
    """Isolate tests from DEVOPS_* variables and the config cache."""
    for name in ("DEVOPS_STORE_ROOT", "DEVOPS_LOG_LEVEL", "DEVOPS_HOST", "DEVOPS_PORT"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()
