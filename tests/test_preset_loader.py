import sys
import textwrap
from types import SimpleNamespace

import pytest

from conftest import write_manifest
from readme import preset_loader
from readme.preset_loader import PluginDescriptor, PluginMetadata, PresetError


def make_plugin(name):
    def plugin():
        return SimpleNamespace(postcss_plugin=name)
    plugin.__name__ = name
    return plugin


def identifiers(entries):
    return [preset_loader.plugin_name(plugin) for plugin, _ in entries]


def test_plugin_name_invokes_construction():
    calls = []

    def plugin():
        calls.append(True)
        return SimpleNamespace(postcss_plugin="postcss-calc")

    assert preset_loader.plugin_name(plugin) == "postcss-calc"
    assert calls == [True]


def test_plugin_name_accepts_instances_and_mappings():
    assert preset_loader.plugin_name(SimpleNamespace(postcss_plugin="a")) == "a"
    assert preset_loader.plugin_name(lambda: {"postcss_plugin": "b"}) == "b"
    assert preset_loader.plugin_name(lambda: SimpleNamespace(name="c"), attribute="name") == "c"


def test_plugin_name_without_registered_name_is_fatal():
    with pytest.raises(PresetError):
        preset_loader.plugin_name(lambda: SimpleNamespace())


def test_sort_plugins_orders_by_identifier():
    entries = [(make_plugin("b"), None), (make_plugin("a"), None), (make_plugin("c"), None)]
    assert identifiers(preset_loader.sort_plugins(entries)) == ["a", "b", "c"]


def test_sort_plugins_is_stable_for_equal_identifiers():
    entries = [
        (make_plugin("b"), "first"),
        (make_plugin("a"), None),
        (make_plugin("b"), "second"),
    ]
    sorted_entries = preset_loader.sort_plugins(entries)
    assert [options for _, options in sorted_entries] == [None, "first", "second"]


def test_sort_plugins_is_case_sensitive():
    entries = [(make_plugin("b"), None), (make_plugin("B"), None), (make_plugin("a"), None)]
    assert identifiers(preset_loader.sort_plugins(entries)) == ["B", "a", "b"]


def test_load_preset_plugins(preset_dir):
    entries = preset_loader.load_preset_plugins(preset_dir)
    assert identifiers(entries) == ["zeta", "alpha"]
    assert [options for _, options in entries] == [None, {"x": 1}]


def test_load_preset_plugins_accepts_plain_lists(tmp_path):
    package_dir = tmp_path / "cssnano-preset-list"
    package_dir.mkdir()
    (package_dir / "index.py").write_text(textwrap.dedent(
        """
        from types import SimpleNamespace

        def one():
            return SimpleNamespace(postcss_plugin="one")

        def preset():
            return [one, (one, False), [one, {"safe": True}]]
        """
    ), encoding="utf-8")

    entries = preset_loader.load_preset_plugins(package_dir)
    assert [options for _, options in entries] == [None, False, {"safe": True}]


def test_load_preset_factory_missing_module_is_fatal(tmp_path):
    with pytest.raises(PresetError):
        preset_loader.load_preset_factory(tmp_path)


def test_load_preset_factory_missing_factory_is_fatal(tmp_path):
    (tmp_path / "index.py").write_text("value = 1\n", encoding="utf-8")
    with pytest.raises(PresetError):
        preset_loader.load_preset_factory(tmp_path)


def test_load_preset_factory_import_error_is_fatal(tmp_path):
    (tmp_path / "index.py").write_text("raise RuntimeError('boom')\n", encoding="utf-8")
    with pytest.raises(PresetError):
        preset_loader.load_preset_factory(tmp_path)


def test_load_preset_factory_supports_dataclass_plugins(tmp_path):
    (tmp_path / "index.py").write_text(textwrap.dedent("""\
        from __future__ import annotations

        from dataclasses import dataclass


        @dataclass
        class Plugin:
            postcss_plugin: str = "gamma"


        def preset():
            return [(Plugin, {"keep": True})]
    """), encoding="utf-8")
    entries = preset_loader.load_preset_plugins(tmp_path)
    assert [preset_loader.plugin_name(plugin) for plugin, _ in entries] == ["gamma"]
    assert entries[0][1] == {"keep": True}


def test_load_preset_factory_import_error_leaves_no_module(tmp_path):
    (tmp_path / "index.py").write_text("raise RuntimeError('boom')\n", encoding="utf-8")
    with pytest.raises(PresetError):
        preset_loader.load_preset_factory(tmp_path)
    assert preset_loader._module_name_for(tmp_path) not in sys.modules


def test_load_preset_plugins_failing_factory_is_fatal(tmp_path):
    (tmp_path / "index.py").write_text("def preset():\n    raise ValueError('nope')\n", encoding="utf-8")
    with pytest.raises(PresetError):
        preset_loader.load_preset_plugins(tmp_path)


def test_find_plugin_metadata(packages_dir, alpha_package):
    assert preset_loader.find_plugin_metadata(packages_dir, "alpha") == PluginMetadata(
        description="Alpha plugin.", repository="https://example.com/alpha"
    )


def test_find_plugin_metadata_accepts_repository_objects(packages_dir):
    write_manifest(packages_dir / "beta", {"repository": {"type": "git", "url": "https://example.com/beta"}})
    metadata = preset_loader.find_plugin_metadata(packages_dir, "beta")
    assert metadata == PluginMetadata(description=None, repository="https://example.com/beta")


def test_find_plugin_metadata_absent_for_core_plugins(packages_dir):
    assert preset_loader.find_plugin_metadata(packages_dir, "postcss-core") is None
    write_manifest(packages_dir / "broken", "{")
    assert preset_loader.find_plugin_metadata(packages_dir, "broken") is None


def test_find_plugin_metadata_absent_for_undecodable_manifest(packages_dir):
    (packages_dir / "alpha").mkdir()
    (packages_dir / "alpha" / "package.json").write_bytes(b'{"description": "caf\xe9"}')
    assert preset_loader.find_plugin_metadata(packages_dir, "alpha") is None


def test_describe_plugins(preset_dir, packages_dir, alpha_package):
    entries = preset_loader.load_preset_plugins(preset_dir)
    descriptors = preset_loader.describe_plugins(entries, packages_dir)
    assert descriptors == [
        PluginDescriptor("alpha", {"x": 1}, PluginMetadata("Alpha plugin.", "https://example.com/alpha")),
        PluginDescriptor("zeta", None, None),
    ]
    assert descriptors[1].description is None
    assert descriptors[1].repository is None
