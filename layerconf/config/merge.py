"""Layer merging into configuration snapshots.

A snapshot is built in two phases:

1. Defaults are copied into a working snapshot and the base layer is
   overlaid on top of it.
2. The virtualhost identity is determined, either from the explicit argument
   or by lazily resolving the ``virtualhost`` parameter of the working
   snapshot, and the matching override layer is overlaid. An explicit empty
   identity skips the lookup and selects no virtualhost.

The working snapshot is returned only once every layer has been read, so a
failure never leaves a half-merged snapshot behind.
"""

import logging
from typing import Any, Dict, Optional

from layerconf.config.store import Evaluate, Snapshot
from layerconf.core.exceptions import InvalidParameterTypeError
from layerconf.core.interfaces import LayerProvider

logger = logging.getLogger(__name__)

VIRTUALHOST_KEY = "virtualhost"


def merge_layers(*layers: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge layers left to right, later layers overwriting earlier keys.

    Values are replaced as a whole; nested mappings are not merged.

    Returns:
        Merged mapping
    """
    merged: Dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    return merged


def build_snapshot(
    provider: LayerProvider,
    defaults: Dict[str, Any],
    evaluate: Evaluate,
    virtualhost: Optional[str] = None,
) -> Snapshot:
    """
    Build a snapshot from the provider's layers.

    Args:
        provider: Source of base and override layers
        defaults: Default parameters (already loaded)
        evaluate: Evaluation function used for the virtualhost lookup
        virtualhost: Explicit virtualhost identity, if any

    Returns:
        Newly built Snapshot

    Raises:
        MissingConfigSourceError: If the base layer or the selected override
            layer does not exist
        InvalidParameterTypeError: If the virtualhost identity is not a string
    """
    base = provider.load_base()

    snapshot = Snapshot(parameters=merge_layers(defaults, base))
    logger.debug(f"Merged {len(defaults)} defaults with {len(base)} base parameters")

    if virtualhost is None:
        identity = snapshot.fetch(VIRTUALHOST_KEY, (), evaluate)
    else:
        identity = virtualhost
        if virtualhost:
            snapshot.overlay({VIRTUALHOST_KEY: virtualhost})

    if identity:
        if not isinstance(identity, str):
            raise InvalidParameterTypeError(VIRTUALHOST_KEY)

        override = provider.load_override(identity)
        snapshot.overlay(override)
        snapshot.virtualhost = identity
        logger.debug(
            f"Merged {len(override)} override parameters for virtualhost '{identity}'"
        )

    return snapshot


__all__ = ["VIRTUALHOST_KEY", "merge_layers", "build_snapshot"]
