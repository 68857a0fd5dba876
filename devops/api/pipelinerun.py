"""
pipelinerun.py - Record PipelineRuns announced by WorkflowRun events.

Jenkins runs are mapped back to pipelines by their parent full name:

    plain pipeline         parentFullName = "<namespace>"
                           projectName    = "<pipeline>"
    multi-branch pipeline  parentFullName = "<namespace>/<pipeline>"
                           projectName    = "<branch>"

Anything else is not a standard pipeline and its events are skipped.

On ``run.initialize`` the recorder creates a run data document named after
the run identifier (``<pipeline>[-<branch>]-<build>``) in the pipeline's
namespace, owned by the pipeline, holding the initial status and the run
parameters. A document that already exists is left untouched.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from devops.event.workflowrun import Handlers, Parameter, RunData, get_parameters
from devops.store import DocumentClient, DocumentKey, DocumentStore, OwnerReference

logger = logging.getLogger(__name__)

PIPELINE_API_VERSION = "devops.kubesphere.io/v1alpha3"
PIPELINE_KIND = "Pipeline"

# Extra keys written next to the fixed run data keys
DATA_KEY_PARAMETERS = "parameters"
DATA_KEY_RUN_ID = "run-id"

INITIAL_PHASE = "Pending"


def build_pipeline_run_identifier(pipeline_name: str, scm_ref_name: str, run_id: str) -> str:
    """Join the non-empty parts into ``<pipeline>[-<scm ref>]-<run id>``."""
    return "-".join(part for part in (pipeline_name, scm_ref_name, run_id) if part)


@dataclass(frozen=True)
class PipelineRunIdentifier:
    """Identifies the PipelineRun behind a WorkflowRun."""

    namespace_name: str
    pipeline_name: str
    scm_ref_name: str = ""
    build_number: str = ""

    def __str__(self) -> str:
        return build_pipeline_run_identifier(
            self.pipeline_name, self.scm_ref_name, self.build_number
        )

    def document_key(self) -> DocumentKey:
        # Branch names may contain "/"
        return DocumentKey(self.namespace_name, str(self).replace("/", "-"))


def extract_pipeline_run_identifier(data: Optional[RunData]) -> Optional[PipelineRunIdentifier]:
    """Work out which pipeline a run belongs to.

    Returns:
        The identifier, or None when the run does not belong to a standard
        pipeline.
    """
    if data is None or not data.parent_full_name:
        return None

    names = data.parent_full_name.split("/")
    if data.is_multi_branch:
        if len(names) != 2:
            return None
        return PipelineRunIdentifier(
            namespace_name=names[0],
            pipeline_name=names[1],
            scm_ref_name=data.project_name,
            build_number=data.run.id,
        )

    if len(names) != 1:
        return None
    return PipelineRunIdentifier(
        namespace_name=data.parent_full_name,
        pipeline_name=data.project_name,
        build_number=data.run.id,
    )


def _format_value(value: Any) -> str:
    """Render a parameter value: strings as is, null as "", the rest as JSON text."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value)


def convert_parameters(parameters: List[Parameter]) -> List[Dict[str, str]]:
    """Convert run parameters to name/value string pairs, dropping unnamed ones."""
    return [
        {"name": parameter.name, "value": _format_value(parameter.value)}
        for parameter in parameters
        if parameter.name
    ]


class PipelineRunRecorder:
    """WorkflowRun handlers persisting run data through a DocumentClient."""

    def __init__(self, client: DocumentClient):
        self.client = client

    def handle_initialize(self, data: RunData) -> None:
        """Create the run data document for a newly initialized run.

        Raises:
            DecodeError: If the run's parameter action is malformed.
            StoreError: If the document cannot be loaded or created.
        """
        identifier = extract_pipeline_run_identifier(data)
        if identifier is None:
            logger.warning(
                "Skipping run of non-standard pipeline: parentFullName=%r, projectName=%r",
                data.parent_full_name,
                data.project_name,
            )
            return

        store = DocumentStore.load(identifier.document_key(), self.client)
        if store.has_version:
            logger.debug("PipelineRun %s already recorded", store.key)
            return

        parameters = convert_parameters(get_parameters(data.run.actions))
        store.set_status(json.dumps({"phase": INITIAL_PHASE}))
        store.set(DATA_KEY_PARAMETERS, json.dumps(parameters))
        store.set(DATA_KEY_RUN_ID, identifier.build_number)
        store.set_owner_reference(
            OwnerReference(
                api_version=PIPELINE_API_VERSION,
                kind=PIPELINE_KIND,
                name=identifier.pipeline_name,
                controller=True,
                block_owner_deletion=True,
            )
        )
        store.save()
        logger.info("Created a PipelineRun: %s", store.key)

    def handlers(self) -> Handlers:
        return Handlers(handle_initialize=self.handle_initialize)
