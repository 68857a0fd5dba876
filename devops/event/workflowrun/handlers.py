"""Phase dispatch for WorkflowRun events.

Bind a handler per lifecycle phase and feed events through ``handle``:

    from devops.event.workflowrun import Handlers

    handlers = Handlers(handle_started=on_started)
    handlers.handle(event)  # decodes RunData, calls on_started for run.started

Events that are not WorkflowRun events, and phases without a bound handler,
are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..types import Event, EventType
from .types import WORKFLOW_RUN_TYPE, RunData, decode_run_data

logger = logging.getLogger(__name__)

Handler = Callable[[RunData], None]


def discard_handler(data: RunData) -> None:
    """Give up handling the data."""


@dataclass(frozen=True)
class Handlers:
    """Handlers bound to each WorkflowRun lifecycle phase.

    A handler signals failure by raising; the exception propagates out of
    ``handle`` unchanged.
    """

    handle_initialize: Optional[Handler] = None
    handle_started: Optional[Handler] = None
    handle_finalized: Optional[Handler] = None
    handle_completed: Optional[Handler] = None
    handle_deleted: Optional[Handler] = None

    def _handler_map(self) -> Dict[str, Optional[Handler]]:
        return {
            EventType.RUN_INITIALIZE.value: self.handle_initialize,
            EventType.RUN_STARTED.value: self.handle_started,
            EventType.RUN_FINALIZED.value: self.handle_finalized,
            EventType.RUN_COMPLETED.value: self.handle_completed,
            EventType.RUN_DELETED.value: self.handle_deleted,
        }

    def resolve(self, event_type: str) -> Handler:
        """Return the handler bound to ``event_type``, or ``discard_handler``."""
        handler = self._handler_map().get(event_type)
        if handler is None:
            return discard_handler
        return handler

    def handle(self, event: Optional[Event]) -> None:
        """Handle a WorkflowRun event.

        Args:
            event: The decoded envelope. None, an empty payload, or a
                payload of another data type is a no-op.

        Raises:
            DecodeError: If the payload is not valid WorkflowRun data; no
                handler is invoked in that case.
            Exception: Whatever the resolved handler raises.
        """
        if event is None or not event.data or event.data_type != WORKFLOW_RUN_TYPE:
            return

        data = decode_run_data(event.data)
        handler = self.resolve(event.type)
        logger.debug(
            "Dispatching %s for %s #%s to %s",
            event.type,
            data.parent_full_name,
            data.run.id,
            getattr(handler, "__name__", handler),
        )
        handler(data)
