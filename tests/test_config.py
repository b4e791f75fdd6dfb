from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml  # type: ignore[import-untyped]

from etterna import config


def test_load_config_writes_defaults(tmp_path: Path) -> None:
    loaded = config.load_config(data_dir=tmp_path)

    assert loaded == config.DEFAULT_CONFIG
    assert config.config_path(data_dir=tmp_path).exists()


def test_etterna_home_from_env(etterna_home: Path) -> None:
    assert config.etterna_home() == etterna_home
    assert config.reports_path() == etterna_home / "reports"


def test_load_config_recovers_from_invalid_yaml(tmp_path: Path) -> None:
    cfg_path = config.config_path(data_dir=tmp_path)
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text("scoring: [bad", encoding="utf-8")

    loaded = config.load_config(data_dir=tmp_path)

    assert loaded["scoring"]["judge"] == "J4"
    reparsed = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    assert isinstance(reparsed, dict)
    assert reparsed.get("scoring", {}).get("judge") == "J4"


def test_load_config_recovers_from_non_mapping_yaml(tmp_path: Path) -> None:
    cfg_path = config.config_path(data_dir=tmp_path)
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text("- invalid\n- shape\n", encoding="utf-8")

    loaded = config.load_config(data_dir=tmp_path)

    assert loaded["scoring"]["wife"] == "wife3"
    reparsed = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    assert isinstance(reparsed, dict)
    assert reparsed.get("scoring", {}).get("wife") == "wife3"


def test_load_config_recovers_from_invalid_utf8(tmp_path: Path) -> None:
    cfg_path = config.config_path(data_dir=tmp_path)
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_bytes(b"\xff\xfe\x00\x00")

    loaded = config.load_config(data_dir=tmp_path)

    assert loaded["scoring"]["system"] == "matching"
    reparsed = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    assert isinstance(reparsed, dict)


def test_load_config_keeps_user_values_and_fills_missing(tmp_path: Path) -> None:
    cfg_path = config.config_path(data_dir=tmp_path)
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text("scoring:\n  judge: J7\n", encoding="utf-8")

    loaded = config.load_config(data_dir=tmp_path)

    assert loaded["scoring"]["judge"] == "J7"
    assert loaded["scoring"]["wife"] == "wife3"
    assert loaded["rating"]["pre_070"] is False


def test_load_config_ignores_non_mapping_override_for_default_mapping_key(
    tmp_path: Path,
) -> None:
    cfg_path = config.config_path(data_dir=tmp_path)
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text("scoring: []\nrating: bad\n", encoding="utf-8")

    loaded = config.load_config(data_dir=tmp_path)

    assert isinstance(loaded["scoring"], dict)
    assert loaded["scoring"]["judge"] == "J4"
    assert isinstance(loaded["rating"], dict)
    reparsed = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    assert isinstance(reparsed.get("scoring"), dict)
    assert isinstance(reparsed.get("rating"), dict)


def test_configure_logging() -> None:
    config.configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    config.configure_logging(logging.WARNING)
    assert logging.getLogger().level == logging.WARNING
    with pytest.raises(ValueError, match="unknown log level"):
        config.configure_logging("chatty")
