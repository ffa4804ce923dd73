"""
Centralized exception hierarchy for layerconf.

Every error carries a short message code suitable for showing to users
and a details string meant for operator-facing logs.
"""

from pathlib import Path
from typing import Union


# ============================================================================
# Base Exceptions
# ============================================================================


class LayerConfError(Exception):
    """Base exception for all layerconf errors."""

    def __init__(self, code: str, details: str = ""):
        self.code = code
        self.details = details
        message = f"{code}: {details}" if details else code
        super().__init__(message)


class ConfigError(LayerConfError):
    """Base exception for configuration loading and resolution errors."""

    pass


# ============================================================================
# Source Exceptions
# ============================================================================


class MissingConfigSourceError(ConfigError):
    """Raised when a mandatory configuration source cannot be found.

    This covers the base configuration and the override source of a
    selected virtualhost (which must exist even if empty).
    """

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__("config_file_missing", f"File {self.path} not found")


class ConfigSourceError(ConfigError):
    """Raised when a configuration source exists but cannot be parsed."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__("config_file_invalid", f"File {self.path}: {reason}")


# ============================================================================
# Parameter Exceptions
# ============================================================================


class InvalidParameterTypeError(ConfigError):
    """Raised when a parameter does not have the primitive type it requires."""

    def __init__(self, key: str):
        self.key = key
        super().__init__("config_bad_parameter", f"parameter : {key}")


class UnknownProcessorError(ConfigError):
    """Raised when a processor chain names a processor that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__("config_unknown_processor", f"processor : {name}")
