"""Tests for specgen.config -- XDG paths, atomic writes, config files, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
import yaml

from specgen.config import (
    atomic_write,
    get_data_dir,
    load_config,
    load_project_config,
    merge_filter,
    resolve_config,
)
from specgen.exceptions import ConfigError
from specgen.models import FilterConfig, FilterParamsConfig, GenerateConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _write_yaml(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestDataDir:
    def test_xdg_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specgen.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
        path = get_data_dir()
        assert path == tmp_path / "xdg" / "specgen"
        assert path.is_dir()

    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specgen.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_data_dir() == tmp_path / ".local" / "share" / "specgen"

    def test_non_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specgen.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_data_dir() == tmp_path / ".specgen" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_file(self, tmp_path: Path) -> None:
        target = tmp_path / "out" / "types.json"
        atomic_write(target, '{"a": 1}\n')
        assert target.read_text(encoding="utf-8") == '{"a": 1}\n'

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "types.json"
        target.write_text("old", encoding="utf-8")
        atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"

    def test_failure_leaves_no_temp_file(self, tmp_path: Path) -> None:
        target = tmp_path / "types.json"
        target.write_text("old", encoding="utf-8")
        with patch("specgen.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "old"
        assert [p.name for p in tmp_path.iterdir()] == ["types.json"]


# ---------------------------------------------------------------------------
# Config files
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "specgen.yaml"
        _write_yaml(
            path,
            {
                "filter": {
                    "include": {"tags": ["cat"]},
                    "exclude": {"schema_properties": {"Cat": ["secret"]}},
                },
                "skip_prune": True,
                "output": {"format": "yaml", "path": "types.yaml"},
            },
        )
        config = load_config(path)
        assert config.filter.include.tags == ["cat"]
        assert config.filter.exclude.schema_properties == {"Cat": ["secret"]}
        assert config.skip_prune is True
        assert config.output.format == "yaml"
        assert config.output.path == "types.yaml"

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "specgen.json"
        _write_json(path, {"filter": {"exclude": {"paths": ["/internal"]}}})
        assert load_config(path).filter.exclude.paths == ["/internal"]

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "specgen.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == GenerateConfig()

    def test_unknown_keys_preserved(self, tmp_path: Path) -> None:
        path = tmp_path / "specgen.yaml"
        _write_yaml(path, {"emitter": {"package": "petstore"}})
        assert load_config(path).model_extra == {"emitter": {"package": "petstore"}}

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "specgen.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "specgen.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="expected a mapping"):
            load_config(path)

    def test_validation_error_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "specgen.yaml"
        _write_yaml(path, {"filter": {"include": {"tags": "not-a-list"}}})
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path)


class TestProjectConfig:
    def test_none_without_file(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_yaml_preferred_over_json(self, isolated_config: Path) -> None:
        _write_yaml(isolated_config / "specgen.yaml", {"skip_prune": True})
        _write_json(isolated_config / "specgen.json", {"skip_prune": False})
        config = load_project_config()
        assert config is not None and config.skip_prune is True

    def test_yml_extension(self, isolated_config: Path) -> None:
        _write_yaml(isolated_config / "specgen.yml", {"output": {"format": "yaml"}})
        assert load_project_config().output.format == "yaml"


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GenerateConfig()

    def test_project_config_used(self, isolated_config: Path) -> None:
        _write_yaml(isolated_config / "specgen.yaml", {"filter": {"include": {"tags": ["cat"]}}})
        assert resolve_config().filter.include.tags == ["cat"]

    def test_env_beats_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_yaml(isolated_config / "specgen.yaml", {"filter": {"include": {"tags": ["cat"]}}})
        env_path = isolated_config / "env.yaml"
        _write_yaml(env_path, {"filter": {"include": {"tags": ["dog"]}}})
        monkeypatch.setenv("SPECGEN_CONFIG", str(env_path))
        assert resolve_config().filter.include.tags == ["dog"]

    def test_cli_config_beats_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        env_path = isolated_config / "env.yaml"
        cli_path = isolated_config / "cli.yaml"
        _write_yaml(env_path, {"skip_prune": False})
        _write_yaml(cli_path, {"skip_prune": True})
        monkeypatch.setenv("SPECGEN_CONFIG", str(env_path))
        assert resolve_config(cli_config=str(cli_path)).skip_prune is True

    def test_cli_flags_override_file(self, isolated_config: Path) -> None:
        _write_yaml(
            isolated_config / "specgen.yaml",
            {
                "filter": {"include": {"tags": ["cat"], "paths": ["/cat"]}},
                "output": {"format": "json"},
            },
        )
        config = resolve_config(
            cli_filter=FilterConfig(include=FilterParamsConfig(tags=["dog"])),
            cli_skip_prune=True,
            cli_format="yaml",
            cli_output="out.yaml",
        )
        assert config.filter.include.tags == ["dog"]
        # Axes the CLI leaves empty keep the file's rules.
        assert config.filter.include.paths == ["/cat"]
        assert config.skip_prune is True
        assert config.output.format == "yaml"
        assert config.output.path == "out.yaml"

    def test_missing_cli_config_raises(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_config(cli_config=str(isolated_config / "missing.yaml"))


class TestMergeFilter:
    def test_does_not_mutate_base(self) -> None:
        base = FilterConfig(exclude=FilterParamsConfig(tags=["a"]))
        merged = merge_filter(base, FilterConfig(exclude=FilterParamsConfig(tags=["b"])))
        assert merged.exclude.tags == ["b"]
        assert base.exclude.tags == ["a"]
