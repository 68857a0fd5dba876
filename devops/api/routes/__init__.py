"""
Routes package for the DevOps webhook API.

This package contains the FastAPI routers for:
- webhooks: Jenkins event webhook
"""

from .webhooks import router as webhooks_router

__all__ = ["webhooks_router"]
