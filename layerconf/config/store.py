"""Memoizing parameter store.

A Snapshot holds the merged raw parameters of one virtualhost selection.
When a key is evaluated its raw value is replaced by the result and the key
is marked resolved; later reads return the cached value and ignore any new
call arguments.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Set

logger = logging.getLogger(__name__)

Evaluate = Callable[[str, Any, Sequence[Any]], Any]


@dataclass
class Snapshot:
    """Merged, partially resolved parameter mapping.

    Attributes:
        parameters: Raw or resolved value per key, in merge order
        resolved: Keys whose value has been evaluated
        virtualhost: Identity of the override layer merged in, if any
    """

    parameters: Dict[str, Any] = field(default_factory=dict)
    resolved: Set[str] = field(default_factory=set)
    virtualhost: Optional[str] = None

    def overlay(self, layer: Dict[str, Any]) -> None:
        """
        Overlay a layer, overwriting existing keys.

        Overwritten keys lose their resolved mark so the new raw value gets
        evaluated on next read.

        Args:
            layer: Mapping of key to raw value
        """
        for key, value in layer.items():
            self.parameters[key] = value
            self.resolved.discard(key)

    def is_resolved(self, key: str) -> bool:
        return key in self.resolved

    def fetch(self, key: str, args: Sequence[Any], evaluate: Evaluate) -> Any:
        """
        Get a key's value, evaluating and caching it on first access.

        Args:
            key: Parameter key
            args: Call arguments, only used on first resolution
            evaluate: Function (key, raw_value, args) -> resolved value

        Returns:
            Resolved value, or None if the key is absent
        """
        if key not in self.parameters:
            return None

        if key in self.resolved:
            return self.parameters[key]

        value = evaluate(key, self.parameters[key], args)
        self.parameters[key] = value
        self.resolved.add(key)
        return value

    def family(self, prefix: str) -> List[str]:
        """List keys starting with prefix, in insertion order."""
        return [key for key in self.parameters if key.startswith(prefix)]

    def __contains__(self, key: str) -> bool:
        return key in self.parameters

    def __len__(self) -> int:
        return len(self.parameters)


__all__ = ["Snapshot", "Evaluate"]
