"""Lazy evaluation of raw parameter values.

A raw value becomes a resolved value in two steps:

1. Deferred computations are invoked with the call arguments. A deferred
   computation is either a Python callable or a registered static reference
   string ("Type::member"). Everything else is taken literally.
2. If the key has a processor chain, the value is threaded through each
   processor in declared order as ``processor(value, *args)``.

The evaluator only looks at the value and arguments it is given, so it can
run while a snapshot is still being merged.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from layerconf.config.processors import ProcessorRegistry, normalize_chain
from layerconf.config.references import (
    ReferenceRegistry,
    describe_callable,
    is_reference,
)

logger = logging.getLogger(__name__)


def resolve_deferred(
    value: Any,
    args: Sequence[Any] = (),
    references: Optional[ReferenceRegistry] = None,
) -> Any:
    """
    Invoke a deferred computation, or return a literal unchanged.

    Args:
        value: Raw parameter value
        args: Arguments forwarded to the computation
        references: Registry used to resolve static reference strings

    Returns:
        Computed or literal value
    """
    if isinstance(value, str):
        if references is not None and is_reference(value):
            func = references.resolve(value)
            if func is not None:
                logger.debug(f"Calling reference {value}")
                return func(*args)
        return value

    if callable(value):
        logger.debug(f"Calling deferred value {describe_callable(value)}")
        return value(*args)

    return value


def apply_processors(
    key: str,
    value: Any,
    chain: Any,
    processors: ProcessorRegistry,
    args: Sequence[Any] = (),
) -> Any:
    """
    Thread a value through a processor chain.

    Args:
        key: Parameter key (for logging)
        value: Value to process
        chain: Processor name or list of names
        processors: Registry providing the processors
        args: Extra arguments passed after the value

    Returns:
        Processed value

    Raises:
        UnknownProcessorError: If a processor of the chain is not registered
    """
    for name in normalize_chain(chain):
        processor = processors.get(name)
        logger.debug(f"Applying processor '{name}' to '{key}'")
        value = processor(value, *args)
    return value


def evaluate(
    key: str,
    raw_value: Any,
    args: Sequence[Any],
    processor_map: Dict[str, Any],
    processors: ProcessorRegistry,
    references: Optional[ReferenceRegistry] = None,
) -> Any:
    """
    Evaluate a raw parameter value.

    Args:
        key: Parameter key
        raw_value: Raw value from the snapshot
        args: Call arguments forwarded to deferred computations and processors
        processor_map: Mapping of key to processor chain
        processors: Processor registry
        references: Static reference registry

    Returns:
        Resolved value

    Raises:
        UnknownProcessorError: If the key's chain names an unknown processor
    """
    value = resolve_deferred(raw_value, args, references)

    if key in processor_map:
        value = apply_processors(key, value, processor_map[key], processors, args)

    return value


__all__ = ["resolve_deferred", "apply_processors", "evaluate"]
