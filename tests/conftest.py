import json
import textwrap
from pathlib import Path

import pytest

HOMEPAGE = "https://github.com/ben-eb/cssnano"

PRESET_SOURCE = textwrap.dedent(
    """
    class Plugin:
        def __init__(self, name):
            self.postcss_plugin = name


    def zeta():
        return Plugin("zeta")


    def alpha():
        return Plugin("alpha")


    class Preset:
        def __init__(self):
            self.plugins = [(zeta,), (alpha, {"x": 1})]


    def preset():
        return Preset()
    """
)


def write_manifest(package_dir: Path, data) -> Path:
    package_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = package_dir / "package.json"
    if isinstance(data, str):
        manifest_path.write_text(data, encoding="utf-8")
    else:
        manifest_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return manifest_path


def read_manifest(package_dir: Path):
    return json.loads((package_dir / "package.json").read_text(encoding="utf-8"))


@pytest.fixture
def packages_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "packages"
    directory.mkdir()
    return directory


@pytest.fixture
def preset_dir(packages_dir: Path) -> Path:
    """Preset `cssnano-preset-test` exposant `zeta` (défaut) et `alpha` ({"x": 1})."""
    directory = packages_dir / "cssnano-preset-test"
    write_manifest(directory, {
        "name": "cssnano-preset-test",
        "description": "Test preset.",
        "license": "MIT",
        "author": {"name": "Ben Briggs", "url": "http://beneb.info"},
    })
    (directory / "index.py").write_text(PRESET_SOURCE, encoding="utf-8")
    return directory


@pytest.fixture
def alpha_package(packages_dir: Path) -> Path:
    return write_manifest(packages_dir / "alpha", {
        "name": "alpha",
        "description": "Alpha plugin.",
        "repository": "https://example.com/alpha",
    })
