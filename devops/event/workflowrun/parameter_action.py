"""Parameters passed to a WorkflowRun.

The parameters live in the action whose ``_class`` is
``hudson.model.ParametersAction``:

    {
        "_class": "hudson.model.ParametersAction",
        "parameters": [
            {"_class": "hudson.model.BooleanParameterValue", "name": "skip", "value": false}
        ]
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Union

from ..types import DecodeError
from .actions import DISCRIMINATOR_FIELD, Action, Actions

PARAMETERS_ACTION_KIND = "hudson.model.ParametersAction"

# A parameter value is any JSON value
ParameterValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]


@dataclass(frozen=True)
class Parameter:
    """A single run parameter.

    Attributes:
        kind: Java class of the value, e.g. "hudson.model.StringParameterValue".
        name: Parameter name.
        value: Parameter value as decoded from JSON.
    """

    kind: str
    name: str
    value: ParameterValue = None

    @classmethod
    def from_dict(cls, data: Any) -> "Parameter":
        if not isinstance(data, dict):
            raise DecodeError("parameter", f"expected object, got {type(data).__name__}")
        kind = data.get(DISCRIMINATOR_FIELD)
        name = data.get("name")
        kind = "" if kind is None else kind
        name = "" if name is None else name
        if not isinstance(kind, str) or not isinstance(name, str):
            raise DecodeError("parameter", "'_class' and 'name' must be strings")
        return cls(kind=kind, name=name, value=data.get("value"))

    def to_dict(self) -> Dict[str, Any]:
        return {DISCRIMINATOR_FIELD: self.kind, "name": self.name, "value": self.value}


@dataclass(frozen=True)
class ParameterAction:
    """An action which carries parameters."""

    KIND: ClassVar[str] = PARAMETERS_ACTION_KIND

    parameters: List[Parameter] = field(default_factory=list)

    @classmethod
    def from_action(cls, action: Action) -> "ParameterAction":
        """Re-decode an action's raw bytes as a parameter action.

        Raises:
            DecodeError: If the raw record does not match the schema.
        """
        try:
            data = action.load()
        except (json.JSONDecodeError, RecursionError) as e:
            raise DecodeError("parameter action", str(e)) from e
        if not isinstance(data, dict):
            raise DecodeError("parameter action", f"expected object, got {type(data).__name__}")

        parameters = data.get("parameters")
        if parameters is None:
            return cls()
        if not isinstance(parameters, list):
            raise DecodeError("parameter action", "'parameters' must be an array")
        return cls(parameters=[Parameter.from_dict(item) for item in parameters])


def get_parameters(actions: Actions) -> List[Parameter]:
    """Get the parameters passed to a WorkflowRun.

    Returns:
        The decoded parameters, or an empty list when the run carries no
        parameter action.

    Raises:
        DecodeError: If the parameter action is present but malformed.
    """
    action = actions.get_action(ParameterAction.KIND)
    if action is None:
        return []
    return ParameterAction.from_action(action).parameters
