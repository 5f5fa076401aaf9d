"""Tests for settings file loading and merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from confload.cli import Options
from confload.config import (
    ConfloadSettings,
    find_settings_file,
    load_settings,
    merge_cli_with_settings,
)


def test_find_settings_confload_toml(tmp_path: Path) -> None:
    settings_file = tmp_path / "confload.toml"
    settings_file.write_text('env = "prod"\n')
    result = find_settings_file(tmp_path)
    assert result == settings_file


def test_find_settings_dot_confload_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "confload.toml").write_text('env = "prod"\n')
    dot_settings = tmp_path / ".confload.toml"
    dot_settings.write_text('env = "dev"\n')
    result = find_settings_file(tmp_path)
    assert result == dot_settings


def test_find_settings_pyproject_toml(tmp_path: Path) -> None:
    settings_file = tmp_path / "pyproject.toml"
    settings_file.write_text('[tool.confload]\nenv = "prod"\n')
    result = find_settings_file(tmp_path)
    assert result == settings_file


def test_find_settings_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    result = find_settings_file(tmp_path)
    assert result is None


def test_find_settings_walks_up(tmp_path: Path) -> None:
    settings_file = tmp_path / "confload.toml"
    settings_file.write_text('env = "prod"\n')
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    result = find_settings_file(subdir)
    assert result == settings_file


def test_find_settings_none_when_missing(tmp_path: Path) -> None:
    result = find_settings_file(tmp_path)
    assert result is None


def test_load_settings_confload_toml(tmp_path: Path) -> None:
    settings_file = tmp_path / "confload.toml"
    settings_file.write_text('env = "prod"\nformat = "yaml"\nignore-errors = true\n')
    settings = load_settings(settings_file)
    assert settings.env == "prod"
    assert settings.format == "yaml"
    assert settings.ignore_errors is True
    # Unset fields should be None (not set)
    assert settings.paths is None
    assert settings.exclude is None


def test_load_settings_pyproject_toml(tmp_path: Path) -> None:
    settings_file = tmp_path / "pyproject.toml"
    settings_file.write_text('[tool.confload]\nenv = "test"\nresource-type = "glob"\n')
    settings = load_settings(settings_file)
    assert settings.env == "test"
    assert settings.resource_type == "glob"


def test_load_settings_sections_and_paths(tmp_path: Path) -> None:
    settings_file = tmp_path / "confload.toml"
    settings_file.write_text(
        "[lookup]\n"
        'paths = ["config", "/etc/myapp"]\n'
        "\n"
        "[import]\n"
        'exclude = "config/local_*.yaml"\n'
    )
    settings = load_settings(settings_file)
    assert settings.paths == [str(tmp_path.resolve() / "config"), "/etc/myapp"]
    assert settings.exclude == ["config/local_*.yaml"]


def test_load_settings_malformed_toml(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Malformed TOML should return empty settings, not crash."""
    settings_file = tmp_path / "confload.toml"
    settings_file.write_text("this is not valid toml [[[")
    settings = load_settings(settings_file)
    assert settings.env is None
    assert settings.paths is None
    assert "malformed settings file" in caplog.text


def test_load_settings_warns_unknown_keys(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Unknown keys in settings should produce a warning."""
    settings_file = tmp_path / "confload.toml"
    settings_file.write_text('unknown_key = true\nenv = "prod"\n')
    settings = load_settings(settings_file)
    assert settings.env == "prod"
    assert "unrecognized config key: unknown_key" in caplog.text


def _make_options(
    resources: list[str] | None = None,
    paths: list[str] | None = None,
    resource_type: str | None = None,
    env: str | None = None,
    exclude: list[str] | None = None,
    ignore_errors: bool = False,
    format: str = "json",
    output: str = "-",
    list_resources: bool = False,
    verbose: bool = False,
    version: bool = False,
) -> Options:
    """Create an Options with defaults for all required fields."""
    return Options(
        resources=resources if resources is not None else ["app.yaml"],
        paths=paths if paths is not None else [],
        resource_type=resource_type,
        env=env,
        exclude=exclude if exclude is not None else [],
        ignore_errors=ignore_errors,
        format=format,
        output=output,
        list_resources=list_resources,
        verbose=verbose,
        version=version,
    )


def test_merge_no_settings() -> None:
    opts = _make_options(env="dev")
    result = merge_cli_with_settings(opts, settings=None, explicit_flags=set())
    assert result.env == "dev"


def test_merge_settings_overrides_defaults() -> None:
    opts = _make_options()
    settings = ConfloadSettings(env="prod", format="yaml", ignore_errors=True)
    result = merge_cli_with_settings(opts, settings=settings, explicit_flags=set())
    assert result.env == "prod"
    assert result.format == "yaml"
    assert result.ignore_errors is True


def test_merge_explicit_cli_overrides_settings() -> None:
    opts = _make_options(env="dev")
    settings = ConfloadSettings(env="prod")
    result = merge_cli_with_settings(opts, settings=settings, explicit_flags={"env"})
    assert result.env == "dev"


def test_merge_paths_and_exclude_from_settings() -> None:
    settings = ConfloadSettings(paths=["/etc/myapp"], exclude=["local.yaml"])
    opts = _make_options()
    result = merge_cli_with_settings(opts, settings=settings, explicit_flags=set())
    assert result.paths == ["/etc/myapp"]
    assert result.exclude == ["local.yaml"]


def test_find_settings_nearest_directory_wins(tmp_path: Path) -> None:
    (tmp_path / ".confload.toml").write_text('env = "outer"\n')
    inner = tmp_path / "project"
    inner.mkdir()
    pyproject = inner / "pyproject.toml"
    pyproject.write_text('[tool.confload]\nenv = "inner"\n')
    assert find_settings_file(inner) == pyproject
