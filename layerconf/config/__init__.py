"""Configuration module for layerconf.

This module provides the layered resolution engine: layer providers, snapshot
merging, lazy evaluation with processors, memoization and the resolver facade.
"""

from layerconf.config.providers import (
    DirectoryLayerProvider,
    MappingLayerProvider,
    get_config_dir,
    load_yaml_layer,
)
from layerconf.config.processors import (
    ProcessorRegistry,
    create_default_processors,
)
from layerconf.config.references import (
    ReferenceRegistry,
    is_reference,
)
from layerconf.config.evaluator import evaluate
from layerconf.config.store import Snapshot
from layerconf.config.merge import VIRTUALHOST_KEY, build_snapshot
from layerconf.config.resolver import (
    Resolver,
    configure,
    get_global_resolver,
    reset_global_resolver,
)

__all__ = [
    # Layer sources
    "DirectoryLayerProvider",
    "MappingLayerProvider",
    "get_config_dir",
    "load_yaml_layer",
    # Evaluation
    "ProcessorRegistry",
    "create_default_processors",
    "ReferenceRegistry",
    "is_reference",
    "evaluate",
    # Snapshot and resolver
    "Snapshot",
    "VIRTUALHOST_KEY",
    "build_snapshot",
    "Resolver",
    "configure",
    "get_global_resolver",
    "reset_global_resolver",
]
