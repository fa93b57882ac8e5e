"""Tests for configuration loading and validation."""
import copy
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from tradejournal.config import Config, FxConfig, ShareConfig, load_config

# A complete and valid dictionary that can be used to construct a Config object.
FULL_CONFIG_DICT: Dict[str, Any] = {
    "share": {
        "base_url": "https://journal.example.com",
        "path": "/share",
        "query_param": "data",
        "max_url_length": 2000,
        "env": None,
        "production": True,
    },
    "fx": {"cad_to_usd_rate": 0.74, "fx_date": "2024-02-01"},
}


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """Pytest fixture to create a temporary, valid config file."""
    config_path = tmp_path / "config.yaml"
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(copy.deepcopy(FULL_CONFIG_DICT), f)
    return config_path


def write_config(tmp_path: Path, text: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(text, encoding="utf-8")
    return config_path


def test_load_valid_config(temp_config_file: Path) -> None:
    """Test loading a valid configuration file returns a Config object."""
    config = load_config(temp_config_file)
    assert isinstance(config, Config)
    assert isinstance(config.share, ShareConfig)
    assert config.share.base_url == "https://journal.example.com"
    assert config.fx == FxConfig(cad_to_usd_rate=0.74, fx_date="2024-02-01")


def test_load_example_config_file() -> None:
    """Test that the main example config file is valid."""
    config = load_config(Path("config/example.yaml"))
    assert isinstance(config, Config)
    assert config.share.max_url_length == 2000


def test_missing_config_file() -> None:
    """Test error handling for missing config file."""
    with pytest.raises(FileNotFoundError):
        load_config(Path("nonexistent.yaml"))


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    config = load_config(write_config(tmp_path, ""))
    assert config == Config.default()
    assert config.share.base_url == "http://localhost:5173"
    assert config.fx.cad_to_usd_rate is None


def test_null_sections_use_defaults(tmp_path: Path) -> None:
    config = load_config(write_config(tmp_path, "share:\nfx:\n"))
    assert config == Config.default()


def test_unquoted_fx_date_becomes_string(tmp_path: Path) -> None:
    config = load_config(write_config(tmp_path, "fx:\n  cad_to_usd_rate: 0.73\n  fx_date: 2024-03-01\n"))
    assert config.fx.fx_date == "2024-03-01"


def test_invalid_yaml_syntax(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Invalid YAML syntax"):
        load_config(write_config(tmp_path, "share: [unclosed"))


def test_unknown_key_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match=r"Unknown key\(s\) in share: colour"):
        load_config(write_config(tmp_path, "share:\n  colour: blue\n"))


def test_unknown_section_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unknown configuration section"):
        load_config(write_config(tmp_path, "reporting:\n  plots: true\n"))


@pytest.mark.parametrize(
    "section, key, value, message",
    [
        ("share", "base_url", "ftp://journal.example.com", "base_url"),
        ("share", "base_url", 42, "base_url"),
        ("share", "path", "share", "share.path"),
        ("share", "max_url_length", 0, "max_url_length"),
        ("share", "max_url_length", "2000", "max_url_length"),
        ("share", "max_url_length", True, "max_url_length"),
        ("fx", "cad_to_usd_rate", -0.7, "cad_to_usd_rate"),
        ("fx", "cad_to_usd_rate", "0.7", "cad_to_usd_rate"),
    ],
)
def test_validation_errors(tmp_path: Path, section: str, key: str, value: Any, message: str) -> None:
    config_dict = copy.deepcopy(FULL_CONFIG_DICT)
    config_dict[section][key] = value
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump(config_dict), encoding="utf-8")
    with pytest.raises(ValueError, match=message):
        load_config(config_path)


def test_non_mapping_section(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="share must be a mapping"):
        load_config(write_config(tmp_path, "share: [1, 2]\n"))

