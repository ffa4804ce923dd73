"""
layerconf - layered configuration with lazy, memoized parameter resolution.

Merges defaults, a base configuration and an optional per-virtualhost
override into one parameter space, evaluating deferred values on first
access.
"""

from layerconf.config.resolver import (
    Resolver,
    configure,
    get_global_resolver,
    reset_global_resolver,
    get,
    exists,
)
from layerconf.config.providers import DirectoryLayerProvider, MappingLayerProvider
from layerconf.config.processors import ProcessorRegistry, create_default_processors
from layerconf.config.references import ReferenceRegistry
from layerconf.core.exceptions import (
    LayerConfError,
    ConfigError,
    MissingConfigSourceError,
    ConfigSourceError,
    InvalidParameterTypeError,
    UnknownProcessorError,
)

__all__ = [
    "Resolver",
    "configure",
    "get_global_resolver",
    "reset_global_resolver",
    "get",
    "exists",
    "DirectoryLayerProvider",
    "MappingLayerProvider",
    "ProcessorRegistry",
    "create_default_processors",
    "ReferenceRegistry",
    "LayerConfError",
    "ConfigError",
    "MissingConfigSourceError",
    "ConfigSourceError",
    "InvalidParameterTypeError",
    "UnknownProcessorError",
]
