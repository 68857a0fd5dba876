"""
DevOps Webhook API - FastAPI surface for Jenkins events.

Endpoints:
    POST   /webhooks/jenkins   - Receive a Jenkins event (from routes/webhooks.py)
    GET    /health             - Health check
"""

from .pipelinerun import (
    PipelineRunIdentifier,
    PipelineRunRecorder,
    build_pipeline_run_identifier,
    convert_parameters,
    extract_pipeline_run_identifier,
)
from .routes import webhooks_router
from .server import create_app

__all__ = [
    "create_app",
    "webhooks_router",
    "PipelineRunIdentifier",
    "PipelineRunRecorder",
    "build_pipeline_run_identifier",
    "convert_parameters",
    "extract_pipeline_run_identifier",
]
