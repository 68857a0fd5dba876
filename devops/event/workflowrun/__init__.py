"""
WorkflowRun events: run data, tag-discriminated actions, and phase dispatch.

Usage:
    from devops.event.workflowrun import Handlers, get_parameters

    def on_initialize(data):
        for parameter in get_parameters(data.run.actions):
            ...

    Handlers(handle_initialize=on_initialize).handle(event)
"""

from .actions import DISCRIMINATOR_FIELD, Action, Actions, decode_actions, encode_actions
from .handlers import Handler, Handlers, discard_handler
from .parameter_action import (
    PARAMETERS_ACTION_KIND,
    Parameter,
    ParameterAction,
    ParameterValue,
    get_parameters,
)
from .types import WORKFLOW_RUN_TYPE, RunData, WorkflowRun, decode_run_data, decode_workflow_run

__all__ = [
    # Actions
    "DISCRIMINATOR_FIELD",
    "Action",
    "Actions",
    "decode_actions",
    "encode_actions",
    # Parameters
    "PARAMETERS_ACTION_KIND",
    "Parameter",
    "ParameterAction",
    "ParameterValue",
    "get_parameters",
    # Run data
    "WORKFLOW_RUN_TYPE",
    "RunData",
    "WorkflowRun",
    "decode_run_data",
    "decode_workflow_run",
    # Dispatch
    "Handler",
    "Handlers",
    "discard_handler",
]
