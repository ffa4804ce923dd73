"""
Registry of callables addressable from configuration data.

Configuration files cannot hold Python functions, so a parameter may instead
hold a static reference string such as ``"Storage::default_path"``. Such a
string is only treated as a deferred computation when the reference has been
registered here; any other string stays a literal value.
"""

import inspect
import re
from typing import Any, Callable, Dict, List, Optional

REFERENCE_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*::[A-Za-z_][A-Za-z0-9_]*$")


def is_reference(value: Any) -> bool:
    """Check whether a value has the shape of a static reference."""
    return isinstance(value, str) and REFERENCE_PATTERN.match(value) is not None


class ReferenceRegistry:
    """
    Closed mapping from static reference names to callables.

    Example:
        >>> references = ReferenceRegistry()
        >>> references.register("Storage::default_path", lambda: "/var/lib/app")
        >>> references.resolve("Storage::default_path")()
        '/var/lib/app'
    """

    def __init__(self):
        self._references: Dict[str, Callable[..., Any]] = {}

    def register(self, reference: str, func: Callable[..., Any]) -> None:
        """
        Register a callable under a static reference name.

        Args:
            reference: Name of the form "Type::member"
            func: Callable invoked with the arguments passed to get()

        Raises:
            ValueError: If the name is malformed or already registered
            TypeError: If func is not callable
        """
        if not is_reference(reference):
            raise ValueError(
                f"Invalid reference name '{reference}' (expected 'Type::member')"
            )
        if not callable(func):
            raise TypeError(f"Reference '{reference}' must be callable")
        if reference in self._references:
            raise ValueError(f"Reference '{reference}' is already registered")
        self._references[reference] = func

    def register_class(self, cls: type, name: Optional[str] = None) -> List[str]:
        """
        Register every public static or class method of a class.

        Args:
            cls: Class whose methods are registered as "ClassName::method"
            name: Type name to use instead of cls.__name__

        Returns:
            List of registered reference names
        """
        type_name = name or cls.__name__
        registered = []
        for attr, raw in vars(cls).items():
            if attr.startswith("_"):
                continue
            if not isinstance(raw, (staticmethod, classmethod)):
                continue
            reference = f"{type_name}::{attr}"
            self.register(reference, getattr(cls, attr))
            registered.append(reference)
        return registered

    def resolve(self, reference: str) -> Optional[Callable[..., Any]]:
        """
        Look up a reference.

        Returns:
            Registered callable, or None if the name is not registered
        """
        return self._references.get(reference)

    def names(self) -> List[str]:
        return list(self._references)

    def __contains__(self, reference: str) -> bool:
        return reference in self._references

    def __len__(self) -> int:
        return len(self._references)


def describe_callable(func: Callable[..., Any]) -> str:
    """Short printable name of a callable, for log messages."""
    if inspect.ismethod(func) or inspect.isfunction(func):
        return func.__qualname__
    return type(func).__name__


__all__ = [
    "REFERENCE_PATTERN",
    "is_reference",
    "ReferenceRegistry",
    "describe_callable",
]
