"""
Core functionality for layerconf.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    LayerConfError,
    ConfigError,
    MissingConfigSourceError,
    ConfigSourceError,
    InvalidParameterTypeError,
    UnknownProcessorError,
)

from .interfaces import (
    LayerProvider,
)

__all__ = [
    "LayerConfError",
    "ConfigError",
    "MissingConfigSourceError",
    "ConfigSourceError",
    "InvalidParameterTypeError",
    "UnknownProcessorError",
    "LayerProvider",
]
