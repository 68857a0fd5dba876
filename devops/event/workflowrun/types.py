"""WorkflowRun event data.

The payload of a WorkflowRun event carries brief information about the owning
WorkflowJob plus the run detail:

    {
        "parentFullName": "my-devops-project",
        "projectName": "my-pipeline",
        "multiBranch": false,
        "run": {"id": "3", "number": 3, "actions": [...], ...}
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..types import RawJSON, get_field, get_raw_field, load_object
from .actions import Actions, decode_actions

# Full qualified Java class name announced in Event.data_type
WORKFLOW_RUN_TYPE = "org.jenkinsci.plugins.workflow.job.WorkflowRun"


@dataclass
class WorkflowRun:
    """WorkflowRun detail."""

    actions: Actions = field(default_factory=Actions)
    building: bool = False
    description: str = ""
    display_name: str = ""
    duration: int = 0
    estimated_duration: int = 0
    full_display_name: str = ""
    id: str = ""
    keep_log: bool = False
    number: int = 0
    queue_id: int = 0
    result: str = ""
    timestamp: int = 0


@dataclass
class RunData:
    """WorkflowJob brief information and WorkflowRun detail.

    Attributes:
        parent_full_name: Full name of the job's parent folder. For a
            multi-branch pipeline this is "<namespace>/<pipeline>".
        project_name: Job name; the branch name for multi-branch pipelines.
        is_multi_branch: Whether the job belongs to a multi-branch pipeline.
        run: The run detail.
    """

    parent_full_name: str = ""
    project_name: str = ""
    is_multi_branch: bool = False
    run: WorkflowRun = field(default_factory=WorkflowRun)


def decode_workflow_run(raw: RawJSON) -> WorkflowRun:
    """Decode WorkflowRun detail; ``actions`` keep their raw records."""
    what = "workflow run"
    fields = load_object(raw, what)
    actions_raw = get_raw_field(fields, "actions")

    return WorkflowRun(
        actions=decode_actions(actions_raw) if actions_raw is not None else Actions(),
        building=get_field(fields, "building", bool, False, what),
        description=get_field(fields, "description", str, "", what),
        display_name=get_field(fields, "displayName", str, "", what),
        duration=get_field(fields, "duration", int, 0, what),
        estimated_duration=get_field(fields, "estimatedDuration", int, 0, what),
        full_display_name=get_field(fields, "fullDisplayName", str, "", what),
        id=get_field(fields, "id", str, "", what),
        keep_log=get_field(fields, "keepLog", bool, False, what),
        number=get_field(fields, "number", int, 0, what),
        queue_id=get_field(fields, "queueId", int, 0, what),
        result=get_field(fields, "result", str, "", what),
        timestamp=get_field(fields, "timestamp", int, 0, what),
    )


def decode_run_data(raw: RawJSON) -> RunData:
    """Decode the payload of a WorkflowRun event.

    Raises:
        DecodeError: If the payload is not an object or a field has the
            wrong type.
    """
    what = "workflow run data"
    fields = load_object(raw, what)
    run_raw = get_raw_field(fields, "run")

    return RunData(
        parent_full_name=get_field(fields, "parentFullName", str, "", what),
        project_name=get_field(fields, "projectName", str, "", what),
        is_multi_branch=get_field(fields, "multiBranch", bool, False, what),
        run=decode_workflow_run(run_raw) if run_raw is not None else WorkflowRun(),
    )
