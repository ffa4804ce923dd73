"""
Tests for the layerconf exception hierarchy.
"""

from pathlib import Path

import pytest

from layerconf.core.exceptions import (
    ConfigError,
    ConfigSourceError,
    InvalidParameterTypeError,
    LayerConfError,
    MissingConfigSourceError,
    UnknownProcessorError,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "error",
    [
        MissingConfigSourceError("/etc/app/config.yaml"),
        ConfigSourceError("/etc/app/config.yaml", "invalid YAML"),
        InvalidParameterTypeError("virtualhost"),
        UnknownProcessorError("nonexistent"),
    ],
)
def test_hierarchy(error):
    """Test all errors share the configuration base classes."""
    assert isinstance(error, ConfigError)
    assert isinstance(error, LayerConfError)


@pytest.mark.unit
def test_missing_config_source():
    error = MissingConfigSourceError(Path("/etc/app/config.yaml"))

    assert error.path == "/etc/app/config.yaml"
    assert error.code == "config_file_missing"
    assert error.details == "File /etc/app/config.yaml not found"
    assert str(error) == "config_file_missing: File /etc/app/config.yaml not found"


@pytest.mark.unit
def test_config_source_error():
    error = ConfigSourceError("/etc/app/config.yaml", "invalid YAML")

    assert error.code == "config_file_invalid"
    assert error.reason == "invalid YAML"
    assert "/etc/app/config.yaml" in str(error)


@pytest.mark.unit
def test_invalid_parameter_type():
    error = InvalidParameterTypeError("virtualhost")

    assert error.key == "virtualhost"
    assert error.code == "config_bad_parameter"
    assert error.details == "parameter : virtualhost"


@pytest.mark.unit
def test_unknown_processor():
    error = UnknownProcessorError("nonexistent")

    assert error.name == "nonexistent"
    assert error.code == "config_unknown_processor"
    assert error.details == "processor : nonexistent"


@pytest.mark.unit
def test_base_error_without_details():
    assert str(LayerConfError("some_code")) == "some_code"
