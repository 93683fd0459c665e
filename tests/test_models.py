"""Tests for manifest entry and settings models."""

import os

import pytest

from modbundle.exceptions import ConfigValidationError, ManifestError
from modbundle.models import (
    AssetType,
    BundleSettings,
    ModDescriptor,
    ModSource,
    RunReport,
    Stage,
    StageResult,
)


def test_descriptor_from_camel_case_entry() -> None:
    mod = ModDescriptor.from_dict(
        {
            "name": "BepInExPack",
            "source": "github",
            "url": "https://github.com/BepInEx/BepInEx",
            "assetType": "zip",
            "assetNameStartsWith": "BepInEx_x64",
        }
    )
    assert mod.source is ModSource.GITHUB
    assert mod.asset_type is AssetType.ZIP
    assert mod.asset_name_starts_with == "BepInEx_x64"
    assert mod.filename == "BepInExPack.zip"
    assert mod.move_in_bepinex_plugins is True


def test_descriptor_accepts_snake_case_keys() -> None:
    mod = ModDescriptor.from_dict(
        {
            "name": "Bar",
            "source": "thunderstoreIo",
            "url": "https://thunderstore.io/c/game/p/Team/Bar/",
            "asset_type": "dll",
            "move_in_bepinex_plugins": False,
        }
    )
    assert mod.source is ModSource.THUNDERSTORE
    assert mod.filename == "Bar.dll"
    assert mod.move_in_bepinex_plugins is False


def test_descriptor_missing_fields() -> None:
    with pytest.raises(ConfigValidationError) as excinfo:
        ModDescriptor.from_dict({"name": "Foo", "source": "github"})
    assert excinfo.value.context["missing"] == ["url", "assetType"]
    assert isinstance(excinfo.value, ManifestError)


def test_descriptor_unknown_source() -> None:
    with pytest.raises(ConfigValidationError):
        ModDescriptor.from_dict(
            {"name": "Foo", "source": "gitlab", "url": "x", "assetType": "zip"}
        )


def test_descriptor_rejects_non_mapping() -> None:
    with pytest.raises(ConfigValidationError):
        ModDescriptor.from_dict(["Foo"])


def test_settings_default_layout(tmp_path) -> None:
    settings = BundleSettings(root=str(tmp_path))
    assert settings.staging_dir == os.path.join(str(tmp_path), "tmp")
    assert settings.output_dir == os.path.join(str(tmp_path), "output")
    assert settings.archive_path == os.path.join(str(tmp_path), "output.zip")
    assert settings.plugins_dir == os.path.join(
        str(tmp_path), "output", "BepInEx", "plugins"
    )


def test_settings_relative_paths_follow_root(tmp_path) -> None:
    settings = BundleSettings(root=str(tmp_path), output_dir="dist", archive_path="dist.zip")
    assert settings.output_dir == os.path.join(str(tmp_path), "dist")
    assert settings.archive_path == os.path.join(str(tmp_path), "dist.zip")


def test_settings_from_dict_ignores_unknown_keys(tmp_path) -> None:
    settings = BundleSettings.from_dict(
        {"compress_level": 6, "colour": "blue"}, root=str(tmp_path), skip_failed=None
    )
    assert settings.compress_level == 6
    assert settings.skip_failed is False
    assert settings.root == str(tmp_path)


def test_settings_token_from_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "abc")
    assert BundleSettings(root=str(tmp_path)).github_token == "abc"


@pytest.mark.parametrize(
    ("in_bepinex", "in_plugins", "expected"),
    [
        (False, True, ("output", "BepInEx", "plugins")),
        (True, False, ("output", "BepInEx")),
        (False, False, ("output",)),
    ],
)
def test_relocation_dir(tmp_path, in_bepinex, in_plugins, expected) -> None:
    settings = BundleSettings(root=str(tmp_path))
    mod = ModDescriptor(
        name="Bar",
        source=ModSource.THUNDERSTORE,
        url="x",
        asset_type=AssetType.DLL,
        move_in_bepinex=in_bepinex,
        move_in_bepinex_plugins=in_plugins,
    )
    assert settings.relocation_dir(mod) == os.path.join(str(tmp_path), *expected)


def test_run_report_summary() -> None:
    report = RunReport()
    report.add(StageResult.success("Foo", Stage.FETCH))
    report.add(StageResult.failure("Bar", Stage.FETCH, RuntimeError("boom")))
    report.add(StageResult.skip("Bar", Stage.EXTRACT))

    assert report.succeeded(Stage.FETCH) == ["Foo"]
    assert report.failed(Stage.FETCH) == ["Bar"]
    assert report.failed(Stage.EXTRACT) == []
    summary = report.summary()
    assert summary["fetch_ok"] == 1
    assert summary["fetch_failed"] == 1
    assert summary["extract_skipped"] == 1
    assert report.packaged is False
