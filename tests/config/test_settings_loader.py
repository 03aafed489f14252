# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the settings loader and schema.

We test:
  1. Defaults when no file exists
  2. A valid YAML file overrides only what it names
  3. Unknown keys and bad values raise ConfigValidationError
  4. Broken or non-mapping YAML raises ConfigLoadError
  5. Loaded settings are immutable
"""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from plugship.config.exceptions import ConfigLoadError, ConfigValidationError
from plugship.config.loader import load_settings, resolve_settings
from plugship.config.schema import BuildSettings


def _write(path: Path, content: str) -> Path:
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


class TestDefaults:
    def test_no_file_means_defaults(self, tmp_path: Path) -> None:
        settings = resolve_settings(tmp_path)
        assert settings == BuildSettings()
        assert settings.toolchain == "dotnet"
        assert settings.artifact_template == "dist/{plugin_id}-{version}.zip"
        assert settings.version_helper.interpreters == ["pwsh", "powershell"]
        assert settings.library_extension == ".dll"

    def test_empty_file_means_defaults(self, tmp_path: Path) -> None:
        _write(tmp_path / "plugship.yaml", "")
        assert resolve_settings(tmp_path) == BuildSettings()


class TestLoadValidSettings:
    def test_partial_override(self, tmp_path: Path) -> None:
        _write(
            tmp_path / "plugship.yaml",
            """\
            plugin_id: Jellyfin.Plugin.Foo
            descriptor: build.props
            version_helper:
              interpreters: [bash]
            """,
        )
        settings = resolve_settings(tmp_path)
        assert settings.plugin_id == "Jellyfin.Plugin.Foo"
        assert settings.descriptor == "build.props"
        assert settings.version_helper.interpreters == ["bash"]
        assert settings.version_helper.native == "scripts/update-version.sh"
        assert settings.toolchain == "dotnet"

    def test_explicit_path_is_relative_to_working_dir(self, tmp_path: Path) -> None:
        (tmp_path / "ci").mkdir()
        _write(tmp_path / "ci" / "release.yaml", "log_level: debug\n")
        settings = resolve_settings(tmp_path, Path("ci/release.yaml"))
        assert settings.log_level == "DEBUG"

    def test_settings_are_frozen(self, tmp_path: Path) -> None:
        settings = load_settings(_write(tmp_path / "s.yaml", "plugin_id: X\n"))
        with pytest.raises(ValidationError):
            settings.plugin_id = "Y"  # type: ignore[misc]


class TestValidationFailures:
    def test_unknown_key(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError):
            load_settings(_write(tmp_path / "s.yaml", "toolchian: dotnet\n"))

    def test_unknown_template_placeholder(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError, match="placeholder"):
            load_settings(_write(tmp_path / "s.yaml", "artifact_template: 'dist/{name}.zip'\n"))

    @pytest.mark.parametrize(
        "template",
        ["dist/{version:d}.zip", "dist/{plugin_id!r}.zip", "dist/{version:>10}.zip"],
    )
    def test_template_placeholder_with_format_spec_or_conversion(
        self, tmp_path: Path, template: str,
    ) -> None:
        with pytest.raises(ConfigValidationError, match="placeholder"):
            load_settings(_write(tmp_path / "s.yaml", f"artifact_template: '{template}'\n"))

    def test_extension_without_dot(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError):
            load_settings(_write(tmp_path / "s.yaml", "library_extension: dll\n"))

    def test_blank_toolchain(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError):
            load_settings(_write(tmp_path / "s.yaml", "toolchain: '  '\n"))

    def test_bad_log_level(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError):
            load_settings(_write(tmp_path / "s.yaml", "log_level: LOUD\n"))


class TestLoadFailures:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not found"):
            load_settings(tmp_path / "absent.yaml")

    def test_directory_instead_of_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_settings(tmp_path)

    def test_broken_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="Invalid YAML"):
            load_settings(_write(tmp_path / "s.yaml", "{{not: yaml: at: all:::"))

    def test_yaml_list_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="mapping"):
            load_settings(_write(tmp_path / "s.yaml", "- a\n- b\n"))
