"""Tag-discriminated actions carried by a WorkflowRun.

Jenkins serialises a run's actions as a heterogeneous JSON array where each
record names its Java class in the ``_class`` field. Decoding happens in two
passes: the first extracts only the discriminator and keeps the record's raw
bytes; the second re-decodes those bytes against the schema chosen by the
discriminator (see ``parameter_action.py``).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from ..rawjson import scan_array
from ..types import DecodeError, RawJSON, as_text

if TYPE_CHECKING:
    from .parameter_action import Parameter

# Field naming the record's fully qualified class
DISCRIMINATOR_FIELD = "_class"


@dataclass(frozen=True)
class Action:
    """One action record: its discriminator plus the full original bytes.

    Attributes:
        kind: Value of ``_class``; "" when the record has no discriminator.
        raw: The complete record exactly as received.
    """

    kind: str
    raw: bytes

    @classmethod
    def from_value(cls, value: Any, raw: str) -> "Action":
        """Build an Action from an already-parsed record and its source text."""
        if value is None:
            return cls(kind="", raw=raw.encode("utf-8"))
        if not isinstance(value, dict):
            raise DecodeError("action", f"expected object, got {type(value).__name__}")
        kind = value.get(DISCRIMINATOR_FIELD)
        if kind is None:
            kind = ""
        elif not isinstance(kind, str):
            raise DecodeError("action", f"{DISCRIMINATOR_FIELD!r} must be a string")
        return cls(kind=kind, raw=raw.encode("utf-8"))

    @classmethod
    def decode(cls, raw: RawJSON) -> "Action":
        """Decode a single action record."""
        text = as_text(raw, "action")
        try:
            value = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as e:
            raise DecodeError("action", str(e)) from e
        return cls.from_value(value, text)

    def load(self) -> Any:
        """Parse the raw record for a type-specific decode."""
        return json.loads(self.raw)


class Actions(List[Action]):
    """Ordered actions of a WorkflowRun, in original array order."""

    def get_action(self, kind: str) -> Optional[Action]:
        """Get the first action with the given fully qualified class name.

        An empty ``kind`` never matches, so records lacking a discriminator
        cannot be fetched by accident.
        """
        if not kind:
            return None
        for action in self:
            if action.kind == kind:
                return action
        return None

    def get_parameters(self) -> List[Parameter]:
        """Get the parameters passed to the run (empty if none were)."""
        from .parameter_action import get_parameters

        return get_parameters(self)


def decode_actions(raw: RawJSON) -> Actions:
    """Decode a JSON array of action records.

    Raises:
        DecodeError: If the input is not a JSON array or an element is not
            an object. A missing discriminator is not an error.
    """
    text = as_text(raw, "actions")
    try:
        elements = scan_array(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise DecodeError("actions", str(e)) from e
    return Actions(Action.from_value(value, element_raw) for value, element_raw in elements)


def encode_actions(actions: Iterable[Action]) -> bytes:
    """Re-emit actions as a JSON array of their raw records."""
    return b"[" + b",".join(action.raw for action in actions) + b"]"
