"""
Shared utilities for CLI commands.

Provides resolver construction and output formatting used by the commands.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from layerconf.config.providers import DirectoryLayerProvider
from layerconf.config.resolver import Resolver

logger = logging.getLogger(__name__)

VIRTUALHOST_ENV = "LAYERCONF_VIRTUALHOST"


# ============================================================================
# Resolver Construction
# ============================================================================


def get_default_virtualhost(explicit: Optional[str] = None) -> Optional[str]:
    """
    Pick the virtualhost selected on the command line.

    Args:
        explicit: Value of --virtualhost

    Returns:
        Explicit value, else LAYERCONF_VIRTUALHOST, else None
    """
    if explicit:
        return explicit
    return os.environ.get(VIRTUALHOST_ENV) or None


def create_resolver(config_dir: Optional[Path] = None) -> Resolver:
    """
    Create a resolver reading YAML layers from a directory.

    Args:
        config_dir: Configuration directory (defaults to LAYERCONF_CONFIG_DIR or ./config)

    Returns:
        Resolver instance
    """
    provider = DirectoryLayerProvider(config_dir)
    logger.debug(f"Using configuration directory {provider.config_dir}")
    return Resolver(provider)


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def format_value(value: Any) -> str:
    """
    Format a resolved value for display.

    Scalars print as-is; structured values print as YAML.

    Args:
        value: Value to format

    Returns:
        Printable string
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        return yaml.safe_dump(
            _plain(value), default_flow_style=False, sort_keys=False
        ).rstrip("\n")
    return yaml.safe_dump(_plain(value)).rstrip("\n").removesuffix("\n...")


def _plain(value: Any) -> Any:
    """Convert values safe_dump cannot represent to strings."""
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_plain(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)
