"""Configuration loading with XDG paths, atomic writes, and precedence resolution.

This module handles the settings of a generation run:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specgen/`` on macOS and Windows. See :func:`get_data_dir`, used for
  crash logs.
* **Config files** -- A :class:`~specgen.models.GenerateConfig` stored as
  JSON or YAML, loaded by :func:`load_config`. A project can keep one at
  ``./specgen.yaml``, ``./specgen.yml`` or ``./specgen.json``
  (:func:`load_project_config`).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags, the
  ``SPECGEN_CONFIG`` environment variable, project-local config, and
  defaults into the effective configuration.

Output files are written with an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so an interrupted run never leaves a truncated file.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from specgen.exceptions import ConfigError
from specgen.models import FilterConfig, GenerateConfig

_APP_NAME = "specgen"
_PROJECT_CONFIG_FILENAMES = ("specgen.yaml", "specgen.yml", "specgen.json")
CONFIG_ENV_VAR = "SPECGEN_CONFIG"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specgen/`` (default ``~/.local/share/specgen/``).
    On macOS/Windows: ``~/.specgen/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On failure the temp
    file is removed and the original exception propagates.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config files ---


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid config at {path}: expected a mapping, got {type(data).__name__}"
        )
    return data


def load_config(path: str | Path) -> GenerateConfig:
    """Load and validate a configuration file.

    JSON is used for ``.json`` files, YAML for everything else. An empty file
    yields the defaults.

    Raises:
        ConfigError: If the file is missing, unparsable, or fails validation.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    data = _read_mapping(path)
    try:
        return GenerateConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def find_project_config() -> Optional[Path]:
    """Return the first project config file in the working directory, if any."""
    for name in _PROJECT_CONFIG_FILENAMES:
        path = Path.cwd() / name
        if path.is_file():
            return path
    return None


def load_project_config() -> Optional[GenerateConfig]:
    """Load project-local configuration, or ``None`` when there is none.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    path = find_project_config()
    if path is None:
        return None
    return load_config(path)


# --- Precedence resolution ---


def merge_filter(base: FilterConfig, override: FilterConfig) -> FilterConfig:
    """Overlay every non-empty axis of *override* onto *base*."""
    merged = base.model_copy(deep=True)
    for side in ("include", "exclude"):
        target = getattr(merged, side)
        source = getattr(override, side)
        for axis in ("paths", "tags", "operation_ids", "schema_properties"):
            value = getattr(source, axis)
            if value:
                setattr(target, axis, value)
    return merged


def resolve_config(
    cli_config: Optional[str] = None,
    cli_filter: Optional[FilterConfig] = None,
    cli_skip_prune: Optional[bool] = None,
    cli_format: Optional[str] = None,
    cli_output: Optional[str] = None,
) -> GenerateConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (filter axes, ``--skip-prune``, format, output path)
        2. The file named by ``--config``, else by ``SPECGEN_CONFIG``
        3. Project config (``./specgen.yaml``, ``./specgen.yml``, ``./specgen.json``)
        4. Defaults

    Returns:
        The effective :class:`~specgen.models.GenerateConfig`.
    """
    config_path = cli_config or os.environ.get(CONFIG_ENV_VAR) or None
    if config_path:
        config = load_config(config_path)
    else:
        config = load_project_config() or GenerateConfig()

    if cli_filter is not None and not cli_filter.is_empty():
        config.filter = merge_filter(config.filter, cli_filter)
    if cli_skip_prune is not None:
        config.skip_prune = cli_skip_prune
    if cli_format is not None:
        config.output.format = cli_format
    if cli_output is not None:
        config.output.path = cli_output

    return config
