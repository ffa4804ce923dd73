"""
Processor registry for post-processing evaluated parameter values.

A processor is a transform called as ``processor(value, *args)`` where
``args`` are the arguments the caller passed to ``get``. Processors are
registered by name once and looked up when a key's processor chain runs.
"""

import logging
import os
import re
from typing import Any, Callable, Dict, List, Optional

from layerconf.core.exceptions import UnknownProcessorError

logger = logging.getLogger(__name__)

Processor = Callable[..., Any]


class ProcessorRegistry:
    """
    Registry mapping processor names to transform functions.

    The registry can be frozen once populated; after that it is read-only.
    """

    def __init__(self):
        """Initialize empty registry."""
        self._processors: Dict[str, Processor] = {}
        self._frozen = False

    def register(self, name: str, processor: Processor) -> None:
        """
        Register a processor.

        Args:
            name: Processor name used in processor chains (e.g., 'int', 'size')
            processor: Callable taking the value followed by call arguments

        Raises:
            RuntimeError: If the registry is frozen
            ValueError: If a processor with same name is already registered

        Example:
            registry.register('csv', lambda value, *args: value.split(','))
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register processor '{name}': registry is frozen")
        if name in self._processors:
            raise ValueError(f"Processor '{name}' is already registered")
        self._processors[name] = processor

    def get(self, name: str) -> Processor:
        """
        Get registered processor by name.

        Args:
            name: Processor name

        Returns:
            Processor callable

        Raises:
            UnknownProcessorError: If processor not found
        """
        if name not in self._processors:
            raise UnknownProcessorError(name)
        return self._processors[name]

    def has(self, name: str) -> bool:
        """Check if processor is registered."""
        return name in self._processors

    def names(self) -> List[str]:
        """List registered processor names."""
        return list(self._processors)

    def freeze(self) -> "ProcessorRegistry":
        """Make the registry read-only and return it."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: str) -> bool:
        return name in self._processors

    def __len__(self) -> int:
        return len(self._processors)


def normalize_chain(chain: Any) -> List[str]:
    """
    Normalize a processor chain declaration to a list of names.

    Args:
        chain: Single processor name or sequence of names

    Returns:
        List of processor names in declared order
    """
    if chain is None:
        return []
    if isinstance(chain, (list, tuple)):
        return [str(name) for name in chain]
    return [str(chain)]


# ============================================================================
# Built-in Processors
# ============================================================================

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}

_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([kmgtp]?)i?b?\s*$", re.IGNORECASE)
_SIZE_MULTIPLIERS = {"": 0, "k": 1, "m": 2, "g": 3, "t": 4, "p": 5}


def to_bool(value: Any, *args: Any) -> bool:
    """Convert yes/no, on/off, true/false and 1/0 strings to a boolean."""
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"Cannot interpret {value!r} as a boolean")
    return bool(value)


def to_list(value: Any, *args: Any) -> List[Any]:
    """Split a comma-separated string into stripped items."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [value]


def to_size(value: Any, *args: Any) -> int:
    """
    Convert a human readable byte size to a number of bytes.

    Multipliers are 1024-based: "10M" is 10485760, "1.5k" is 1536.
    Integers pass through unchanged.
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot interpret {value!r} as a size")
    if isinstance(value, (int, float)):
        return int(value)
    match = _SIZE_PATTERN.match(str(value))
    if not match:
        raise ValueError(f"Cannot interpret {value!r} as a size")
    number, unit = match.groups()
    return int(float(number) * (1024 ** _SIZE_MULTIPLIERS[unit.lower()]))


def to_path(value: Any, *args: Any) -> Optional[str]:
    """Expand ~ and environment variables in a path string."""
    if value is None:
        return None
    return os.path.expandvars(os.path.expanduser(str(value)))


def _wrap(func: Callable[[Any], Any]) -> Processor:
    """Adapt a single-argument function to the processor signature."""

    def processor(value: Any, *args: Any) -> Any:
        return func(value)

    processor.__name__ = getattr(func, "__name__", "processor")
    return processor


BUILTIN_PROCESSORS: Dict[str, Processor] = {
    "int": _wrap(int),
    "float": _wrap(float),
    "bool": to_bool,
    "string": _wrap(str),
    "lower": _wrap(lambda value: str(value).lower()),
    "upper": _wrap(lambda value: str(value).upper()),
    "strip": _wrap(lambda value: str(value).strip()),
    "list": to_list,
    "size": to_size,
    "path": to_path,
}


def create_default_processors(
    extra: Optional[Dict[str, Processor]] = None,
) -> ProcessorRegistry:
    """
    Create a frozen registry holding the built-in processors.

    Args:
        extra: Additional processors to register alongside the built-ins

    Returns:
        Frozen ProcessorRegistry
    """
    registry = ProcessorRegistry()
    for name, processor in BUILTIN_PROCESSORS.items():
        registry.register(name, processor)
    for name, processor in (extra or {}).items():
        registry.register(name, processor)
    logger.debug(f"Registered {len(registry)} processors")
    return registry.freeze()


__all__ = [
    "Processor",
    "ProcessorRegistry",
    "normalize_chain",
    "to_bool",
    "to_list",
    "to_size",
    "to_path",
    "BUILTIN_PROCESSORS",
    "create_default_processors",
]
