# devops.event package
# Decoding of Jenkins event notifications.
#
#   - types: Event envelope, EventType phases, DecodeError
#   - rawjson: verbatim element/field slicing for two-pass decoding
#   - workflowrun: WorkflowRun run data, actions, parameters, dispatch

from .types import DecodeError, Event, EventType, decode_event, event_to_dict

__all__ = [
    "DecodeError",
    "Event",
    "EventType",
    "decode_event",
    "event_to_dict",
]
