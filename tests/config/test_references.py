"""
Tests for the static reference registry.
"""

import pytest

from layerconf.config.references import ReferenceRegistry, is_reference


class Storage:
    """Sample class exposing static and class methods."""

    root = "/var/lib/app"

    @staticmethod
    def default_path(name="data"):
        return f"/var/lib/app/{name}"

    @classmethod
    def root_dir(cls):
        return cls.root

    @staticmethod
    def _private():
        return "hidden"

    def instance_method(self):
        return "instance"


class TestIsReference:
    """Test reference shape detection."""

    @pytest.mark.parametrize(
        "value",
        ["Storage::default_path", "_A::_b", "Type1::member2"],
    )
    def test_valid_references(self, value):
        assert is_reference(value)

    @pytest.mark.parametrize(
        "value",
        ["Storage", "Storage::", "::x", "1Type::x", "A::b::c", "A:: b", "http://host", 42, None],
    )
    def test_not_references(self, value):
        assert not is_reference(value)


class TestReferenceRegistry:
    """Test registration and lookup."""

    def test_register_and_resolve(self):
        registry = ReferenceRegistry()

        def func():
            return 1

        registry.register("Mod::func", func)

        assert registry.resolve("Mod::func") is func
        assert "Mod::func" in registry
        assert registry.names() == ["Mod::func"]

    def test_resolve_unknown_returns_none(self):
        assert ReferenceRegistry().resolve("Mod::missing") is None

    def test_register_rejects_bad_name(self):
        with pytest.raises(ValueError, match="Invalid reference name"):
            ReferenceRegistry().register("not a reference", lambda: 1)

    def test_register_rejects_non_callable(self):
        with pytest.raises(TypeError):
            ReferenceRegistry().register("Mod::value", 42)

    def test_register_rejects_duplicate(self):
        registry = ReferenceRegistry()
        registry.register("Mod::f", lambda: 1)

        with pytest.raises(ValueError, match="already registered"):
            registry.register("Mod::f", lambda: 2)

    def test_register_class(self):
        """Test public static and class methods are registered."""
        registry = ReferenceRegistry()

        names = registry.register_class(Storage)

        assert sorted(names) == ["Storage::default_path", "Storage::root_dir"]
        assert registry.resolve("Storage::default_path")("logs") == "/var/lib/app/logs"
        assert registry.resolve("Storage::root_dir")() == "/var/lib/app"
        assert registry.resolve("Storage::_private") is None
        assert registry.resolve("Storage::instance_method") is None

    def test_register_class_with_alias(self):
        registry = ReferenceRegistry()

        registry.register_class(Storage, name="Store")

        assert "Store::root_dir" in registry
        assert len(registry) == 2
