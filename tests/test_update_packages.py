import argparse

import pytest

from conftest import read_manifest, write_manifest
from lib import utils as shared_utils
from update_packages import main as update_main
from update_packages.main import PackagesDirError


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(shared_utils, "setup_logging", lambda **kwargs: None)


def make_args(packages_dir, **overrides):
    values = {"packages_dir": packages_dir, "skip_readmes": False, "dry_run": False, "debug": False, "log_file": None}
    values.update(overrides)
    return argparse.Namespace(**values)


def test_discover_packages_lists_directories_sorted(packages_dir):
    (packages_dir / "b").mkdir()
    (packages_dir / "a").mkdir()
    (packages_dir / "notes.txt").write_text("x", encoding="utf-8")
    assert [p.name for p in update_main.discover_packages(packages_dir)] == ["a", "b"]


def test_discover_packages_missing_directory_is_fatal(tmp_path):
    with pytest.raises(PackagesDirError):
        update_main.discover_packages(tmp_path / "missing")


def test_is_preset():
    assert update_main.is_preset("packages/cssnano-preset-default", "cssnano-preset-")
    assert not update_main.is_preset("packages/postcss-cssnano-preset-x", "cssnano-preset-")


def test_run_update_workflow(packages_dir, preset_dir, alpha_package):
    write_manifest(packages_dir / "postcss-foo", {"dependencies": {"postcss": "^5.2.4"}})

    assert update_main.run_update_workflow(make_args(packages_dir)) is True

    assert read_manifest(packages_dir / "postcss-foo")["dependencies"] == {"postcss": "^5.0.0"}
    assert read_manifest(preset_dir)["engines"]["node"] == ">=4"
    assert (preset_dir / "README.md").is_file()
    assert not (packages_dir / "alpha" / "README.md").exists()


def test_run_update_workflow_skip_readmes(packages_dir, preset_dir):
    update_main.run_update_workflow(make_args(packages_dir, skip_readmes=True))
    assert read_manifest(preset_dir)["name"] == "cssnano-preset-test"
    assert not (preset_dir / "README.md").exists()


def test_run_update_workflow_stops_on_first_error(packages_dir):
    write_manifest(packages_dir / "a-broken", "{")
    good = write_manifest(packages_dir / "b-good", {"name": "wrong"})
    with pytest.raises(Exception):
        update_main.run_update_workflow(make_args(packages_dir))
    assert read_manifest(packages_dir / "b-good") == {"name": "wrong"}
    assert good.is_file()


def test_main_exit_codes(packages_dir, preset_dir):
    with pytest.raises(SystemExit) as success:
        update_main.update_packages_main(["--packages-dir", str(packages_dir)])
    assert success.value.code == 0

    write_manifest(packages_dir / "broken", "{")
    with pytest.raises(SystemExit) as failure:
        update_main.update_packages_main(["--packages-dir", str(packages_dir)])
    assert failure.value.code == 1


def test_main_rejects_missing_packages_dir(tmp_path):
    with pytest.raises(SystemExit) as exit_info:
        update_main.update_packages_main(["--packages-dir", str(tmp_path / "missing")])
    assert exit_info.value.code == 1
