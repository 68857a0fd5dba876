"""Configuration for the devops webhook server and run data store."""

from .runtime_config import (
    get_log_level,
    get_server_host,
    get_server_port,
    get_store_root,
    reset_config,
)

__all__ = [
    "get_log_level",
    "get_server_host",
    "get_server_port",
    "get_store_root",
    "reset_config",
]
