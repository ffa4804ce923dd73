"""
Core interfaces for layerconf.

This module defines the abstract interfaces that the resolution engine depends
on. Storage backends implement these interfaces so the resolver can read
configuration layers without knowing where they physically live.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class LayerProvider(ABC):
    """
    Abstract interface for components that supply configuration layers.

    A provider exposes three kinds of layers (defaults, base and one override
    per virtualhost) plus the processor map that associates parameter keys
    with processor chains. The resolver only ever reads from a provider.
    """

    @abstractmethod
    def load_defaults(self) -> Dict[str, Any]:
        """
        Load the default parameter values.

        Returns:
            Mapping of parameter key to raw value (empty if no defaults source)
        """
        pass

    @abstractmethod
    def load_processor_map(self) -> Dict[str, Any]:
        """
        Load the processor chains.

        Returns:
            Mapping of parameter key to a processor name or list of names
            (empty if no processors source)
        """
        pass

    @abstractmethod
    def load_base(self) -> Dict[str, Any]:
        """
        Load the base configuration layer.

        Returns:
            Mapping of parameter key to raw value

        Raises:
            MissingConfigSourceError: If the base source does not exist
        """
        pass

    @abstractmethod
    def load_override(self, virtualhost: str) -> Dict[str, Any]:
        """
        Load the override layer of a virtualhost.

        Args:
            virtualhost: Virtualhost identity

        Returns:
            Mapping of parameter key to raw value (may be empty)

        Raises:
            MissingConfigSourceError: If no override source exists for the identity
        """
        pass

    @abstractmethod
    def list_virtualhosts(self) -> List[str]:
        """
        List the identities that have an override source.

        Returns:
            Virtualhost identities in provider-defined order
        """
        pass


__all__ = [
    "LayerProvider",
]
