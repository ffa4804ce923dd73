"""
Tests for config.store and config.merge modules.

Tests cover:
- Snapshot memoization and overlay semantics
- Two-phase snapshot building with virtualhost detection
"""

from unittest.mock import Mock

import pytest

from layerconf.config.merge import build_snapshot, merge_layers
from layerconf.config.providers import MappingLayerProvider
from layerconf.config.store import Snapshot
from layerconf.core.exceptions import InvalidParameterTypeError, MissingConfigSourceError


def passthrough(key, value, args):
    return value() if callable(value) else value


class TestSnapshot:
    """Test the memoizing store."""

    def test_fetch_missing_key(self):
        snapshot = Snapshot()
        evaluate = Mock()

        assert snapshot.fetch("missing", (), evaluate) is None
        evaluate.assert_not_called()

    def test_fetch_stores_result(self):
        snapshot = Snapshot(parameters={"a": "raw"})
        evaluate = Mock(return_value="resolved")

        assert snapshot.fetch("a", ("x",), evaluate) == "resolved"
        assert snapshot.parameters["a"] == "resolved"
        assert snapshot.is_resolved("a")
        evaluate.assert_called_once_with("a", "raw", ("x",))

    def test_fetch_cached_ignores_args(self):
        snapshot = Snapshot(parameters={"a": "raw"})
        evaluate = Mock(return_value="resolved")

        snapshot.fetch("a", (1,), evaluate)
        assert snapshot.fetch("a", (2,), evaluate) == "resolved"
        evaluate.assert_called_once()

    def test_overlay_clears_resolved_mark(self):
        snapshot = Snapshot(parameters={"a": 1, "b": 2})
        snapshot.fetch("a", (), passthrough)
        snapshot.fetch("b", (), passthrough)

        snapshot.overlay({"a": 10})

        assert not snapshot.is_resolved("a")
        assert snapshot.is_resolved("b")
        assert snapshot.parameters == {"a": 10, "b": 2}

    def test_family_keeps_insertion_order(self):
        snapshot = Snapshot(parameters={"db.port": 1, "x": 2, "db.host": 3})

        assert snapshot.family("db.") == ["db.port", "db.host"]
        assert snapshot.family("") == ["db.port", "x", "db.host"]

    def test_container_protocol(self):
        snapshot = Snapshot(parameters={"a": None})

        assert "a" in snapshot
        assert "b" not in snapshot
        assert len(snapshot) == 1


class TestMergeLayers:
    """Test plain layer merging."""

    def test_later_layers_win(self):
        assert merge_layers({"a": 1, "b": 1}, {"b": 2}, {"c": 3}) == {"a": 1, "b": 2, "c": 3}

    def test_nested_values_replaced_whole(self):
        merged = merge_layers({"db": {"host": "a", "port": 1}}, {"db": {"host": "b"}})

        assert merged == {"db": {"host": "b"}}

    def test_inputs_not_mutated(self):
        defaults = {"a": 1}

        merge_layers(defaults, {"a": 2})

        assert defaults == {"a": 1}


class TestBuildSnapshot:
    """Test two-phase snapshot building."""

    def test_defaults_then_base(self):
        provider = MappingLayerProvider(base={"a": 2})

        snapshot = build_snapshot(provider, {"a": 1, "b": 1}, passthrough)

        assert snapshot.parameters == {"a": 2, "b": 1}
        assert snapshot.virtualhost is None

    def test_defaults_not_mutated(self):
        defaults = {"a": 1}

        build_snapshot(MappingLayerProvider(base={"a": 2}), defaults, passthrough)

        assert defaults == {"a": 1}

    def test_virtualhost_detected_from_working_map(self):
        provider = MappingLayerProvider(
            base={"virtualhost": lambda: "t1", "a": 1}, overrides={"t1": {"a": 3}}
        )

        snapshot = build_snapshot(provider, {}, passthrough)

        assert snapshot.virtualhost == "t1"
        assert snapshot.parameters["a"] == 3
        assert snapshot.parameters["virtualhost"] == "t1"
        assert snapshot.is_resolved("virtualhost")

    def test_virtualhost_from_defaults(self):
        provider = MappingLayerProvider(base={}, overrides={"t1": {"a": 3}})

        snapshot = build_snapshot(provider, {"virtualhost": "t1"}, passthrough)

        assert snapshot.virtualhost == "t1"

    def test_explicit_virtualhost(self):
        provider = MappingLayerProvider(
            base={"virtualhost": "t1"}, overrides={"t1": {"a": 1}, "t2": {"a": 2}}
        )

        snapshot = build_snapshot(provider, {}, passthrough, virtualhost="t2")

        assert snapshot.virtualhost == "t2"
        assert snapshot.parameters["virtualhost"] == "t2"
        assert snapshot.parameters["a"] == 2

    def test_explicit_empty_virtualhost_skips_lookup(self):
        """Test an explicit empty identity ignores the base virtualhost parameter."""
        lookup = Mock(return_value="t1")
        provider = MappingLayerProvider(
            base={"virtualhost": lookup}, overrides={"t1": {"a": 1}}
        )

        snapshot = build_snapshot(provider, {}, passthrough, virtualhost="")

        assert snapshot.virtualhost is None
        assert "a" not in snapshot
        lookup.assert_not_called()

    def test_override_redefining_resolved_key(self):
        """Test an override value replaces a key resolved during the build."""
        provider = MappingLayerProvider(
            base={"virtualhost": "t1"}, overrides={"t1": {"virtualhost": lambda: "t1"}}
        )

        snapshot = build_snapshot(provider, {}, passthrough)

        assert not snapshot.is_resolved("virtualhost")

    @pytest.mark.parametrize("value", [42, ["t1"], True])
    def test_non_string_virtualhost(self, value):
        provider = MappingLayerProvider(base={"virtualhost": value})

        with pytest.raises(InvalidParameterTypeError):
            build_snapshot(provider, {}, passthrough)

    @pytest.mark.parametrize("value", [None, "", False])
    def test_falsy_virtualhost_means_none(self, value):
        provider = MappingLayerProvider(base={"virtualhost": value})

        snapshot = build_snapshot(provider, {}, passthrough)

        assert snapshot.virtualhost is None

    def test_missing_base(self):
        with pytest.raises(MissingConfigSourceError):
            build_snapshot(MappingLayerProvider(), {}, passthrough)
