"""Layered configuration loading.

Sources are merged from lowest to highest precedence: the per-user config
directory, config files in the working directory, ``[tool.gelflog]`` in
``pyproject.toml``, ``GELFLOG__*`` environment variables and finally explicit
overrides.
"""

from __future__ import annotations

import importlib
import json
import os
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Iterable, Mapping, MutableMapping, cast

from platformdirs import user_config_dir

from .schema import GraylogConfig, build_config, default_config

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

try:  # pragma: no cover
    yaml: ModuleType | None = importlib.import_module("yaml")
except ModuleNotFoundError:  # pragma: no cover
    yaml = None

__all__ = ["CONFIG_FILENAMES", "ENV_PREFIX", "load_configuration", "merge"]

ENV_PREFIX = "GELFLOG__"
CONFIG_FILENAMES = ("gelflog.toml", "gelflog.yaml", "gelflog.yml")


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    if path.suffix == ".toml":
        with path.open("rb") as fh:
            return tomllib.load(fh)
    if yaml is None:
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if isinstance(data, Mapping):
        return {str(key): value for key, value in data.items()}
    return {}


def merge(base: MutableMapping[str, Any], incoming: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Deep-merge ``incoming`` into ``base`` and return ``base``."""

    for key, value in incoming.items():
        if isinstance(value, Mapping):
            current = base.get(key)
            target = dict(current) if isinstance(current, Mapping) else {}
            base[key] = merge(target, value)
        else:
            base[key] = value
    return base


def _load_directory(directory: Path) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for filename in CONFIG_FILENAMES:
        merge(data, _read_file(directory / filename))
    return data


def _load_pyproject(directory: Path) -> Dict[str, Any]:
    tool = _read_file(directory / "pyproject.toml").get("tool", {})
    section = tool.get("gelflog", {}) if isinstance(tool, Mapping) else {}
    if isinstance(section, Mapping):
        return {str(key): value for key, value in section.items()}
    return {}


def _coerce_value(raw: str) -> Any:
    value = raw.strip()
    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"null", "none", ""}:
        return None
    for convert in (int, float):
        try:
            return convert(value)
        except ValueError:
            continue
    if value[:1] in {"[", "{"}:
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass
    return value


def _env_config(environ: Mapping[str, str]) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for name, raw in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        *sections, leaf = name[len(ENV_PREFIX) :].lower().split("__")
        target = data
        for section in sections:
            target = cast(Dict[str, Any], target.setdefault(section, {}))
        target[leaf] = _coerce_value(raw)
    return data


def _layers(overrides: Mapping[str, Any]) -> Iterable[Mapping[str, Any]]:
    cwd = Path.cwd()
    yield _load_directory(Path(user_config_dir("gelflog")))
    yield _load_directory(cwd)
    yield _load_pyproject(cwd)
    yield _env_config(os.environ)
    yield overrides


def load_configuration(overrides: Mapping[str, Any] | None = None) -> GraylogConfig:
    """Load configuration from every supported source."""

    merged: Dict[str, Any] = default_config()
    for layer in _layers(overrides or {}):
        merge(merged, layer)
    return build_config(merged)
