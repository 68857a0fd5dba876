"""
Webhook endpoints for receiving Jenkins events.

    POST /webhooks/jenkins   - Decode the event envelope and dispatch it to
                               the WorkflowRun handlers bound on the app

Responses:
    200  event handled, or ignored (not a WorkflowRun event / unbound phase)
    400  envelope or run data could not be decoded
    500  a handler failed; the handler's message is returned
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from devops.event import DecodeError, decode_event
from devops.event.workflowrun import Handlers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


class WebhookResponse(BaseModel):
    """Acknowledgement of a received event."""

    status: str = "ok"
    event_id: Optional[str] = None
    event_type: Optional[str] = None


def _get_handlers(request: Request) -> Handlers:
    return request.app.state.workflow_run_handlers


@router.post("/jenkins", response_model=WebhookResponse)
async def receive_jenkins_event(request: Request) -> WebhookResponse:
    """Receive an event from Jenkins."""
    body = await request.body()
    try:
        event = decode_event(body)
    except DecodeError as e:
        logger.warning("Rejected malformed event: %s", e)
        raise HTTPException(
            status_code=400,
            detail={"error": "invalid_event", "message": str(e)},
        )

    try:
        _get_handlers(request).handle(event)
    except DecodeError as e:
        logger.warning("Rejected event %s with malformed data: %s", event.id, e)
        raise HTTPException(
            status_code=400,
            detail={"error": "invalid_event_data", "message": str(e)},
        )
    except Exception as e:
        logger.error("Failed to handle event %s (%s): %s", event.id, event.type, e)
        raise HTTPException(
            status_code=500,
            detail={"error": "handler_failed", "message": str(e)},
        )

    return WebhookResponse(event_id=event.id or None, event_type=event.type or None)
