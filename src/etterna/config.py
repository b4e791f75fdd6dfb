from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

DEFAULT_CONFIG: dict[str, Any] = {
    "scoring": {
        "judge": "J4",
        "wife": "wife3",
        "system": "matching",
        "num_lanes": 4,
    },
    "rating": {
        "pre_070": False,
    },
    "timeline": {
        "max_workers": None,
    },
    "logging": {
        "level": "WARNING",
    },
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def etterna_home(data_dir: str | Path | None = None) -> Path:
    if data_dir is not None:
        return Path(data_dir).expanduser()
    env_home = os.getenv("ETTERNA_HOME")
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / ".etterna-py"


def config_path(data_dir: str | Path | None = None) -> Path:
    return etterna_home(data_dir) / "config.yaml"


def reports_path(data_dir: str | Path | None = None) -> Path:
    return etterna_home(data_dir) / "reports"


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(result.get(key), dict):
            # A scalar or list where a section belongs is ignored
            if isinstance(value, dict):
                result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def save_config(config: dict[str, Any], data_dir: str | Path | None = None) -> Path:
    home = etterna_home(data_dir)
    home.mkdir(parents=True, exist_ok=True)
    path = config_path(home)
    with path.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config, fp, sort_keys=False, allow_unicode=False)
    return path


def load_config(data_dir: str | Path | None = None) -> dict[str, Any]:
    path = config_path(data_dir)
    if not path.exists():
        save_config(copy.deepcopy(DEFAULT_CONFIG), data_dir=data_dir)
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with path.open("r", encoding="utf-8") as fp:
            loaded = yaml.safe_load(fp) or {}
    except (yaml.YAMLError, UnicodeDecodeError):
        logging.getLogger(__name__).warning("unreadable config at %s, restoring defaults", path)
        loaded = {}
    if not isinstance(loaded, dict):
        loaded = {}
    merged = _deep_merge(DEFAULT_CONFIG, loaded)
    if merged != loaded:
        save_config(merged, data_dir=data_dir)
    return merged


def ensure_config(data_dir: str | Path | None = None) -> dict[str, Any]:
    return load_config(data_dir=data_dir)


def configure_logging(level: str | int) -> None:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level}")
        level = resolved
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
