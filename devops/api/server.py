"""
FastAPI server receiving Jenkins events.

Usage:
    # Run standalone
    python -m devops.api.server --port 5002

    # Or via factory
    from devops.api import create_app
    app = create_app()
    uvicorn.run(app, port=5002)

    # Or through uvicorn directly
    uvicorn devops.api.server:create_app --factory

API Structure:
    /webhooks/jenkins - Jenkins event webhook (from routes/webhooks.py)
    /health           - Health check
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI

from devops.config.runtime_config import (
    get_log_level,
    get_server_host,
    get_server_port,
    get_store_root,
)
from devops.event.workflowrun import Handlers
from devops.store import FileDocumentClient

from .pipelinerun import PipelineRunRecorder
from .routes import webhooks_router

logger = logging.getLogger(__name__)


def create_app(
    handlers: Optional[Handlers] = None,
    store_root: Optional[Path] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        handlers: WorkflowRun handlers to dispatch events to. Defaults to a
            PipelineRunRecorder writing to the file document store.
        store_root: Root of the file document store; defaults to the
            configured root. Ignored when ``handlers`` is given.

    Returns:
        Configured FastAPI application.
    """
    if handlers is None:
        root = store_root or get_store_root()
        logger.info("Recording pipeline runs under %s", root)
        handlers = PipelineRunRecorder(FileDocumentClient(root)).handlers()

    app = FastAPI(
        title="DevOps Webhook API",
        description="Receives Jenkins WorkflowRun events",
        version="1.0.0",
    )
    app.state.workflow_run_handlers = handlers
    app.include_router(webhooks_router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# =============================================================================
# Main Entry Point
# =============================================================================


def main():
    """Run the API server."""
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(description="DevOps Webhook Server")
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    parser.add_argument("--store-root", type=Path, default=None, help="Document store root")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level="DEBUG" if args.debug else get_log_level())

    host = args.host or get_server_host()
    port = args.port or get_server_port()
    app = create_app(store_root=args.store_root)

    print(f"Starting DevOps webhook server at http://{host}:{port}")
    print("    POST   /webhooks/jenkins   - Jenkins event webhook")
    print("    GET    /health             - Health check")

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
