"""Event envelope types shared by every event kind.

Jenkins notifies us with a common wrapper:

    {
        "type": "run.started",
        "source": "job/my-project/job/my-pipeline/",
        "id": "...",
        "time": "2022-01-01T00:00:00Z",
        "dataType": "org.jenkinsci.plugins.workflow.job.WorkflowRun",
        "data": { ... }
    }

The ``data`` member stays opaque here; consumers decode it against the schema
named by ``dataType``.

Usage:
    from devops.event.types import DecodeError, EventType, decode_event

    event = decode_event(request_body)
    if event.type_equals(EventType.RUN_STARTED):
        ...
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .rawjson import RawValue, scan_object

logger = logging.getLogger(__name__)

RawJSON = Union[bytes, str]


class EventType(str, Enum):
    """Lifecycle phase carried in ``Event.type``."""

    RUN_INITIALIZE = "run.initialize"
    RUN_STARTED = "run.started"
    RUN_FINALIZED = "run.finalized"
    RUN_COMPLETED = "run.completed"
    RUN_DELETED = "run.deleted"


class DecodeError(ValueError):
    """Raised when an envelope, action array or typed payload is malformed."""

    def __init__(self, what: str, reason: str):
        self.what = what
        self.reason = reason
        super().__init__(f"Failed to decode {what}: {reason}")


@dataclass(frozen=True)
class Event:
    """Common fields of an event; ``data`` is the verbatim payload JSON.

    Attributes:
        type: Lifecycle phase, e.g. "run.started".
        source: Where the event originated.
        id: Event identifier assigned by the sender.
        time: Send time as reported by the sender.
        data_type: Fully qualified class name describing ``data``.
        data: Raw JSON bytes of the payload; ``b""`` when absent or null.
    """

    type: str = ""
    source: str = ""
    id: str = ""
    time: str = ""
    data_type: str = ""
    data: bytes = b""

    def type_equals(self, event_type: Union[EventType, str]) -> bool:
        """Check whether this event carries the given lifecycle phase."""
        expected = event_type.value if isinstance(event_type, EventType) else event_type
        return self.type == expected


# =============================================================================
# Decoding helpers
# =============================================================================


def as_text(raw: RawJSON, what: str) -> str:
    """Return ``raw`` as text, decoding bytes as UTF-8."""
    if isinstance(raw, str):
        return raw
    try:
        return bytes(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(what, f"invalid UTF-8: {e}") from e


def load_object(raw: RawJSON, what: str) -> Dict[str, RawValue]:
    """Parse ``raw`` as a JSON object, keeping each field's source text."""
    text = as_text(raw, what)
    try:
        return scan_object(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise DecodeError(what, str(e)) from e


def get_field(
    fields: Mapping[str, RawValue],
    name: str,
    expected: Union[type, Tuple[type, ...]],
    default: Any,
    what: str,
) -> Any:
    """Fetch a typed field, falling back to ``default`` when absent or null.

    ``bool`` is never accepted where an integer is expected.
    """
    if name not in fields:
        return default
    value = fields[name][0]
    if value is None:
        return default
    if isinstance(value, bool) and expected in (int, float, (int, float)):
        raise DecodeError(what, f"field {name!r} must be a number, got bool")
    if not isinstance(value, expected):
        raise DecodeError(
            what, f"field {name!r} has unexpected type {type(value).__name__}"
        )
    return value


def get_raw_field(fields: Mapping[str, RawValue], name: str) -> Optional[str]:
    """Return a field's verbatim JSON text, or None when absent or null."""
    if name not in fields or fields[name][0] is None:
        return None
    return fields[name][1]


# =============================================================================
# Envelope
# =============================================================================


def decode_event(raw: RawJSON) -> Event:
    """Decode the common event envelope.

    Args:
        raw: JSON text or bytes of the envelope.

    Returns:
        The decoded Event. Missing string fields decode to "".

    Raises:
        DecodeError: If the input is not a JSON object or a field has the
            wrong type.
    """
    fields = load_object(raw, "event")
    data = get_raw_field(fields, "data")

    event = Event(
        type=get_field(fields, "type", str, "", "event"),
        source=get_field(fields, "source", str, "", "event"),
        id=get_field(fields, "id", str, "", "event"),
        time=get_field(fields, "time", str, "", "event"),
        data_type=get_field(fields, "dataType", str, "", "event"),
        data=data.encode("utf-8") if data is not None else b"",
    )
    logger.debug("Decoded event id=%s type=%s dataType=%s", event.id, event.type, event.data_type)
    return event


def event_to_dict(event: Event) -> Dict[str, Any]:
    """Convert an Event to its wire dictionary (``data`` parsed)."""
    return {
        "type": event.type,
        "source": event.source,
        "id": event.id,
        "time": event.time,
        "dataType": event.data_type,
        "data": json.loads(event.data) if event.data else None,
    }
