"""Configuration loading pipeline.

Sources are merged from lowest to highest precedence: built-in defaults, the
user config directory, config files in the working directory, the
``[tool.gelfwriter]`` table of ``pyproject.toml``, ``GELFWRITER__*``
environment variables and finally explicit overrides.
"""

from __future__ import annotations

import importlib
import json
import os
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Mapping, cast

from platformdirs import user_config_dir

from ..core.errors import ConfigurationError
from .schema import GELFWriterConfig, build_config, default_config

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

try:  # pragma: no cover
    yaml_module = importlib.import_module("yaml")
except ModuleNotFoundError:  # pragma: no cover
    yaml_module = None

yaml: ModuleType | None = yaml_module

APP_NAME = "gelfwriter"
CONFIG_FILENAMES = (f"{APP_NAME}.toml", f"{APP_NAME}.yaml", f"{APP_NAME}.yml")

_ENV_PREFIX = "GELFWRITER__"


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc


def _read_yaml(path: Path) -> Dict[str, Any]:
    if yaml is None:
        return {}
    loader = getattr(yaml, "safe_load", None)
    if not callable(loader):
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = cast(Callable[[Any], Any], loader)(fh)
    if not isinstance(data, Mapping):
        return {}
    return {str(key): value for key, value in data.items()}


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    if path.suffix == ".toml":
        return _read_toml(path)
    return _read_yaml(path)


def deep_merge(base: Dict[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``incoming`` into ``base`` and return ``base``."""

    for key, value in incoming.items():
        if isinstance(value, Mapping):
            existing = base.get(key)
            target = dict(existing) if isinstance(existing, Mapping) else {}
            base[key] = deep_merge(target, value)
        else:
            base[key] = value
    return base


def _load_directory(directory: Path) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if not directory.is_dir():
        return data
    for filename in CONFIG_FILENAMES:
        deep_merge(data, _read_file(directory / filename))
    return data


def _load_user_config() -> Dict[str, Any]:
    return _load_directory(Path(user_config_dir(APP_NAME)))


def _load_local_config() -> Dict[str, Any]:
    return _load_directory(Path.cwd())


def _load_pyproject() -> Dict[str, Any]:
    tool = _read_file(Path.cwd() / "pyproject.toml").get("tool", {})
    section = tool.get(APP_NAME, {}) if isinstance(tool, Mapping) else {}
    if not isinstance(section, Mapping):
        return {}
    return {str(key): value for key, value in section.items()}


def _coerce_value(value: str) -> Any:
    stripped = value.strip()
    lowered = stripped.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    for number in (int, float):
        try:
            return number(stripped)
        except ValueError:
            continue
    if stripped[:1] in {"[", "{"}:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
    return stripped


def _env_config(environ: Mapping[str, str] | None = None) -> Dict[str, Any]:
    """Turn ``GELFWRITER__WRITER__HTTP__TIMEOUT=2`` into nested mappings."""

    data: Dict[str, Any] = {}
    for env_key, raw_value in (os.environ if environ is None else environ).items():
        if not env_key.startswith(_ENV_PREFIX):
            continue
        *parents, leaf = env_key[len(_ENV_PREFIX) :].lower().split("__")
        target = data
        for segment in parents:
            target = cast(Dict[str, Any], target.setdefault(segment, {}))
        target[leaf] = _coerce_value(raw_value)
    return data


def load_configuration(overrides: Mapping[str, Any] | None = None) -> GELFWriterConfig:
    """Load configuration from supported sources in precedence order."""

    merged = default_config()
    for source in (
        _load_user_config(),
        _load_local_config(),
        _load_pyproject(),
        _env_config(),
        overrides or {},
    ):
        deep_merge(merged, source)
    return build_config(merged)
