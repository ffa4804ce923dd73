"""
Pytest configuration and shared fixtures for layerconf tests.
"""

from pathlib import Path
from typing import Any, Callable, Dict

import pytest
import yaml

from layerconf.config.resolver import reset_global_resolver


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line(
        "markers",
        "integration: marks tests that read configuration directories from disk",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_global_resolver():
    """Make sure no test leaks a global resolver into another."""
    reset_global_resolver()
    yield
    reset_global_resolver()


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Create an empty configuration directory."""
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


@pytest.fixture
def write_layer(config_dir: Path) -> Callable[[str, Any], Path]:
    """Return a helper writing a YAML layer file into config_dir."""

    def _write(filename: str, data: Any) -> Path:
        path = config_dir / filename
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def tenant_config(write_layer, config_dir: Path) -> Path:
    """Create a directory with defaults, base, processors and two tenants."""
    write_layer("defaults.yaml", {"timeout": 10, "db.host": "localhost", "retries": "3"})
    write_layer("processors.yaml", {"retries": "int", "max_upload": ["strip", "size"]})
    write_layer(
        "config.yaml",
        {"timeout": 20, "db.port": 5432, "max_upload": " 2M ", "site.name": "Main"},
    )
    write_layer("tenant1.conf.yaml", {"timeout": 30, "site.name": "Tenant One"})
    write_layer("tenant2.conf.yaml", "")
    return config_dir


@pytest.fixture
def call_counter() -> Dict[str, int]:
    """Mutable counter shared between a deferred value and the test."""
    return {"calls": 0}
