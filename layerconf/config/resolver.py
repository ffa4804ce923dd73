"""Resolver facade: the public surface of the configuration engine.

The Resolver merges layers lazily on first access, evaluates parameters on
first read and memoizes the results for the lifetime of the snapshot.

Example:
    >>> from layerconf.config.providers import MappingLayerProvider
    >>> from layerconf.config.resolver import Resolver
    >>> resolver = Resolver(MappingLayerProvider(
    ...     base={"db.host": "localhost", "db.port": "5432"},
    ...     processors={"db.port": "int"},
    ... ))
    >>> resolver.get("db.port")
    5432
    >>> resolver.get("db.*")
    {'host': 'localhost', 'port': 5432}

Note:
    Call arguments only matter the first time a key is resolved. Once a key is
    cached, later calls return the cached value and silently ignore their
    arguments until the next virtualhost switch or reload.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence

from layerconf.config.evaluator import evaluate
from layerconf.config.merge import build_snapshot
from layerconf.config.processors import ProcessorRegistry, create_default_processors
from layerconf.config.providers import DirectoryLayerProvider
from layerconf.config.references import ReferenceRegistry
from layerconf.config.store import Snapshot
from layerconf.core.interfaces import LayerProvider

logger = logging.getLogger(__name__)

WILDCARD = "*"


class Resolver:
    """
    Resolve configuration parameters from layered sources.

    Defaults and the processor map are read once and reused across reloads.
    Loading and first-time evaluation are serialized behind a reentrant lock;
    reads of already resolved keys do not take the lock.

    Attributes:
        provider: Source of configuration layers
        processors: Registry of named processors
        references: Registry of static reference callables
    """

    def __init__(
        self,
        provider: LayerProvider,
        processors: Optional[ProcessorRegistry] = None,
        references: Optional[ReferenceRegistry] = None,
    ):
        """
        Initialize resolver.

        Args:
            provider: Layer provider
            processors: Processor registry (defaults to the built-in processors)
            references: Reference registry (defaults to an empty registry)
        """
        self.provider = provider
        self.processors = (
            processors if processors is not None else create_default_processors()
        )
        self.references = references if references is not None else ReferenceRegistry()

        self._defaults: Optional[Dict[str, Any]] = None
        self._processor_map: Optional[Dict[str, Any]] = None
        self._snapshot: Optional[Snapshot] = None
        self._lock = threading.RLock()

    # ========================================================================
    # Loading
    # ========================================================================

    def load(self, virtualhost: Optional[str] = None) -> Snapshot:
        """
        Make sure a snapshot is loaded.

        Without an argument this is a no-op once any snapshot exists, whatever
        virtualhost it was built for. An explicit virtualhost always rebuilds.

        Args:
            virtualhost: Virtualhost identity to switch to

        Returns:
            Live snapshot

        Raises:
            MissingConfigSourceError: If the base or selected override source is missing
            InvalidParameterTypeError: If the virtualhost identity is not a string
        """
        snapshot = self._snapshot
        if snapshot is not None and not virtualhost:
            return snapshot

        with self._lock:
            if self._snapshot is not None and not virtualhost:
                return self._snapshot

            if self._defaults is None:
                self._defaults = self.provider.load_defaults()
                logger.debug(f"Loaded {len(self._defaults)} default parameters")

            if self._processor_map is None:
                self._processor_map = self.provider.load_processor_map()
                logger.debug(f"Loaded {len(self._processor_map)} processor chains")

            snapshot = build_snapshot(
                self.provider, self._defaults, self._evaluate, virtualhost
            )
            self._snapshot = snapshot

        if snapshot.virtualhost:
            logger.info(f"Loaded configuration for virtualhost '{snapshot.virtualhost}'")
        else:
            logger.debug("Loaded configuration without virtualhost")

        return snapshot

    def reload(self) -> None:
        """Discard the live snapshot; the next access rebuilds it."""
        with self._lock:
            self._snapshot = None

    @property
    def virtualhost(self) -> Optional[str]:
        """Virtualhost identity of the live snapshot (loads it if needed)."""
        return self.load().virtualhost

    # ========================================================================
    # Lookup
    # ========================================================================

    def get(self, key: str, *args: Any) -> Any:
        """
        Get a parameter value, evaluating it on first access.

        A key ending with "*" is a family query: every key starting with the
        prefix is resolved and returned in a mapping keyed by the rest of the
        key.

        Args:
            key: Parameter key or family query
            *args: Arguments forwarded to deferred computations and processors

        Returns:
            Resolved value, None if the key is unknown, or a dict for family queries

        Raises:
            UnknownProcessorError: If the key's processor chain is invalid
        """
        snapshot = self.load()

        if key.endswith(WILDCARD):
            prefix = key[: -len(WILDCARD)]
            return {
                name[len(prefix) :]: self._fetch(snapshot, name, args)
                for name in snapshot.family(prefix)
            }

        return self._fetch(snapshot, key, args)

    def exists(self, key: str) -> bool:
        """
        Check if a parameter is defined, without evaluating it.

        Args:
            key: Parameter key

        Returns:
            True if any layer defines the key
        """
        return key in self.load()

    def dump(self) -> Dict[str, Any]:
        """
        Resolve every parameter of the live snapshot.

        Returns:
            Mapping of key to resolved value, in merge order
        """
        snapshot = self.load()
        return {key: self._fetch(snapshot, key, ()) for key in list(snapshot.parameters)}

    def _fetch(self, snapshot: Snapshot, key: str, args: Sequence[Any]) -> Any:
        if snapshot.is_resolved(key):
            return snapshot.parameters[key]

        with self._lock:
            return snapshot.fetch(key, args, self._evaluate)

    def _evaluate(self, key: str, raw_value: Any, args: Sequence[Any]) -> Any:
        return evaluate(
            key,
            raw_value,
            args,
            self._processor_map or {},
            self.processors,
            self.references,
        )

    # ========================================================================
    # Virtualhosts
    # ========================================================================

    def list_virtualhosts(self) -> List[str]:
        """
        List virtualhosts that have an override source.

        Returns:
            Virtualhost identities in provider order
        """
        return self.provider.list_virtualhosts()

    def run_for_each_virtualhost(self, callback: Callable[[], Any]) -> None:
        """
        Run code once per virtualhost with its configuration active.

        The callback takes no arguments and reads configuration through this
        resolver. Without any virtualhost it runs once on the default snapshot.

        Args:
            callback: Code to run
        """
        virtualhosts = self.list_virtualhosts()

        if virtualhosts:
            for name in virtualhosts:
                self.load(name)
                callback()
        else:
            self.load()
            callback()


# ============================================================================
# Global Resolver Singleton
# ============================================================================

_global_resolver: Optional[Resolver] = None


def configure(
    provider: Optional[LayerProvider] = None,
    processors: Optional[ProcessorRegistry] = None,
    references: Optional[ReferenceRegistry] = None,
) -> Resolver:
    """
    Install the global resolver.

    Args:
        provider: Layer provider (defaults to DirectoryLayerProvider())
        processors: Processor registry
        references: Reference registry

    Returns:
        The new global Resolver
    """
    global _global_resolver
    _global_resolver = Resolver(
        provider if provider is not None else DirectoryLayerProvider(),
        processors=processors,
        references=references,
    )
    return _global_resolver


def get_global_resolver() -> Resolver:
    """
    Get the global resolver, creating a directory-backed one if needed.

    Returns:
        Global Resolver instance
    """
    if _global_resolver is None:
        return configure()
    return _global_resolver


def reset_global_resolver() -> None:
    """Reset the global resolver (for testing)."""
    global _global_resolver
    _global_resolver = None


def get(key: str, *args: Any) -> Any:
    """Get a parameter from the global resolver."""
    return get_global_resolver().get(key, *args)


def exists(key: str) -> bool:
    """Check a parameter on the global resolver."""
    return get_global_resolver().exists(key)


__all__ = [
    "WILDCARD",
    "Resolver",
    "configure",
    "get_global_resolver",
    "reset_global_resolver",
    "get",
    "exists",
]
