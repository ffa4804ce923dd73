"""Layer providers reading configuration layers from YAML files or dictionaries.

Directory layout expected by DirectoryLayerProvider:

    config/
        config.yaml          base configuration (required)
        defaults.yaml        default values (optional)
        processors.yaml      processor chains per key (optional)
        tenant1.conf.yaml    override layer of virtualhost "tenant1"

Example:
    >>> from layerconf.config.providers import DirectoryLayerProvider
    >>> provider = DirectoryLayerProvider(Path("/etc/myapp"))
    >>> provider.list_virtualhosts()
    ['tenant1', 'tenant2']
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from layerconf.core.exceptions import ConfigSourceError, MissingConfigSourceError
from layerconf.core.interfaces import LayerProvider

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "LAYERCONF_CONFIG_DIR"

BASE_FILE = "config.yaml"
DEFAULTS_FILE = "defaults.yaml"
PROCESSORS_FILE = "processors.yaml"

_OVERRIDE_PATTERN = re.compile(r"^(.+)\.conf\.ya?ml$")


def get_config_dir() -> Path:
    """
    Get the default configuration directory.

    The directory can be set with the LAYERCONF_CONFIG_DIR environment
    variable and falls back to ./config.

    Returns:
        Path to configuration directory
    """
    config_dir_env = os.environ.get(CONFIG_DIR_ENV)
    if config_dir_env:
        return Path(config_dir_env)
    return Path("config")


class _LayerLoader(yaml.SafeLoader):
    """SafeLoader rejecting mapping keys that are equal or share a string form."""

    def construct_mapping(self, node, deep=False):
        keys = set()
        names = set()
        for key_node, _ in node.value:
            if key_node.tag == "tag:yaml.org,2002:merge" or not isinstance(
                key_node, yaml.ScalarNode
            ):
                continue
            key = self.construct_object(key_node)
            if key in keys or str(key) in names:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            keys.add(key)
            names.add(str(key))
        return super().construct_mapping(node, deep=deep)


def normalize_layer(layer: Dict[Any, Any], source: Union[str, Path]) -> Dict[str, Any]:
    """
    Convert the keys of a layer to strings.

    Args:
        layer: Parameter mapping
        source: Path or name of the layer, used in error messages

    Returns:
        Copy of the layer with string keys

    Raises:
        ConfigSourceError: If two keys share the same string form
    """
    normalized: Dict[str, Any] = {}
    for key, value in layer.items():
        name = str(key)
        if name in normalized:
            raise ConfigSourceError(source, f"duplicate key {name!r}")
        normalized[name] = value
    return normalized


def load_yaml_layer(path: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load a YAML layer file as a parameter mapping.

    Args:
        path: Path to YAML file
        required: If True, raise error if file doesn't exist

    Returns:
        Parameter mapping (empty dict if file is empty, or missing and not required)

    Raises:
        MissingConfigSourceError: If required=True and file doesn't exist
        ConfigSourceError: If the file is not valid YAML, not a mapping, or
            holds keys that collide once converted to strings
    """
    if not path.is_file():
        if required:
            raise MissingConfigSourceError(path)
        logger.debug(f"Layer file not found (optional): {path}")
        return {}

    logger.debug(f"Loading layer from {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.load(f, Loader=_LayerLoader)
    except yaml.YAMLError as e:
        raise ConfigSourceError(path, f"invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigSourceError(
            path, f"expected a mapping at top level, got {type(data).__name__}"
        )

    return normalize_layer(data, path)


class DirectoryLayerProvider(LayerProvider):
    """
    Read configuration layers from YAML files in a single directory.

    Virtualhost identities are taken from files named <identity>.conf.yaml
    (or .conf.yml) and listed in sorted order.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize provider.

        Args:
            config_dir: Configuration directory (defaults to get_config_dir())
        """
        self.config_dir = Path(config_dir) if config_dir else get_config_dir()

    @property
    def base_path(self) -> Path:
        """Path of the base configuration file."""
        return self.config_dir / BASE_FILE

    def override_path(self, virtualhost: str) -> Path:
        """
        Get the override file path of a virtualhost.

        An existing .conf.yml file is preferred only when no .conf.yaml exists.

        Args:
            virtualhost: Virtualhost identity

        Returns:
            Path to override file (which may not exist)
        """
        path = self.config_dir / f"{virtualhost}.conf.yaml"
        alt = self.config_dir / f"{virtualhost}.conf.yml"
        if not path.exists() and alt.exists():
            return alt
        return path

    def load_defaults(self) -> Dict[str, Any]:
        return load_yaml_layer(self.config_dir / DEFAULTS_FILE)

    def load_processor_map(self) -> Dict[str, Any]:
        return load_yaml_layer(self.config_dir / PROCESSORS_FILE)

    def load_base(self) -> Dict[str, Any]:
        return load_yaml_layer(self.base_path, required=True)

    def load_override(self, virtualhost: str) -> Dict[str, Any]:
        return load_yaml_layer(self.override_path(virtualhost), required=True)

    def list_virtualhosts(self) -> List[str]:
        if not self.config_dir.is_dir():
            logger.debug(f"Configuration directory not found: {self.config_dir}")
            return []

        virtualhosts = []
        for item in sorted(os.listdir(self.config_dir)):
            match = _OVERRIDE_PATTERN.match(item)
            if match and match.group(1) not in virtualhosts:
                virtualhosts.append(match.group(1))
        return virtualhosts

    def __repr__(self) -> str:
        return f"DirectoryLayerProvider({str(self.config_dir)!r})"


class MappingLayerProvider(LayerProvider):
    """
    Serve configuration layers from in-memory dictionaries.

    Values may be arbitrary Python objects, including callables used as
    deferred computations. Keys are converted to strings when a layer is
    loaded. Passing base=None simulates a missing base source.

    Example:
        >>> provider = MappingLayerProvider(
        ...     base={"timeout": 20, "virtualhost": "tenant1"},
        ...     defaults={"timeout": 10},
        ...     overrides={"tenant1": {"timeout": 30}},
        ... )
    """

    def __init__(
        self,
        base: Optional[Dict[str, Any]] = None,
        defaults: Optional[Dict[str, Any]] = None,
        processors: Optional[Dict[str, Any]] = None,
        overrides: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.base = base
        self.defaults = defaults or {}
        self.processors = processors or {}
        self.overrides = overrides or {}

    def load_defaults(self) -> Dict[str, Any]:
        return normalize_layer(self.defaults, "<memory>/defaults")

    def load_processor_map(self) -> Dict[str, Any]:
        return normalize_layer(self.processors, "<memory>/processors")

    def load_base(self) -> Dict[str, Any]:
        if self.base is None:
            raise MissingConfigSourceError("<memory>/base")
        return normalize_layer(self.base, "<memory>/base")

    def load_override(self, virtualhost: str) -> Dict[str, Any]:
        if virtualhost not in self.overrides:
            raise MissingConfigSourceError(f"<memory>/{virtualhost}")
        return normalize_layer(self.overrides[virtualhost] or {}, f"<memory>/{virtualhost}")

    def list_virtualhosts(self) -> List[str]:
        return list(self.overrides)
