"""Runtime configuration for the webhook server and run data store.

Environment variables take precedence over YAML config.

Usage:
    from devops.config.runtime_config import get_store_root, get_log_level

    root = get_store_root()   # Path of the file document store
    level = get_log_level()   # "INFO", "DEBUG", ...

Environment variables:
    DEVOPS_STORE_ROOT   Root directory of the file document store
    DEVOPS_LOG_LEVEL    Server log level
    DEVOPS_HOST         Host the webhook server binds to
    DEVOPS_PORT         Port the webhook server binds to
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path(__file__).parent / "runtime.yaml"
_cached_config: Optional[Dict[str, Any]] = None

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_config() -> Dict[str, Any]:
    """Load runtime.yaml configuration, with caching."""
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            _cached_config = yaml.safe_load(f) or {}
    else:
        _cached_config = _default_config()

    return _cached_config


def _default_config() -> Dict[str, Any]:
    """Return default configuration if runtime.yaml doesn't exist."""
    return {
        "version": "1.0",
        "store": {
            "root": ".devops/store",
        },
        "server": {
            "host": "127.0.0.1",
            "port": 5002,
            "log_level": "INFO",
        },
    }


def reset_config() -> None:
    """Reset cached config (for testing)."""
    global _cached_config
    _cached_config = None


def _section(name: str) -> Dict[str, Any]:
    config = _load_config()
    section = config.get(name)
    if isinstance(section, dict):
        return section
    return _default_config()[name]


def get_store_root() -> Path:
    """Get the root directory of the file document store.

    Precedence:
    1. DEVOPS_STORE_ROOT
    2. store.root in runtime.yaml
    3. Default: .devops/store
    """
    env_value = os.environ.get("DEVOPS_STORE_ROOT")
    if env_value:
        return Path(env_value)
    return Path(_section("store").get("root") or ".devops/store")


def get_log_level() -> str:
    """Get the server log level.

    Invalid values (from env or config) log a warning and fall back to INFO.
    """
    env_value = os.environ.get("DEVOPS_LOG_LEVEL")
    source = "DEVOPS_LOG_LEVEL"
    value = env_value
    if not value:
        source = "server.log_level"
        value = _section("server").get("log_level") or "INFO"

    level = str(value).upper()
    if level not in VALID_LOG_LEVELS:
        logger.warning(
            "Invalid %s value '%s' (valid: %s). Falling back to 'INFO'.",
            source,
            value,
            ", ".join(VALID_LOG_LEVELS),
        )
        return "INFO"
    return level


def get_server_host() -> str:
    """Get the host the webhook server binds to."""
    return os.environ.get("DEVOPS_HOST") or str(_section("server").get("host") or "127.0.0.1")


def get_server_port() -> int:
    """Get the port the webhook server binds to.

    A non-numeric DEVOPS_PORT logs a warning and is ignored.
    """
    env_value = os.environ.get("DEVOPS_PORT")
    if env_value:
        try:
            return int(env_value)
        except ValueError:
            logger.warning("Invalid DEVOPS_PORT value '%s'; using config file value.", env_value)
    return int(_section("server").get("port") or 5002)
