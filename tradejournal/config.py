"""
Configuration loading and validation for share-link generation.

Configuration lives in a small YAML file and is loaded into frozen
dataclasses. Validation is a handful of explicit checks on the raw
dictionary, run before any object is built.
"""

import yaml
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from tradejournal.links import MAX_SHARE_URL_LENGTH, SHARE_PATH, SHARE_QUERY_PARAM

__all__ = ["load_config", "Config", "ShareConfig", "FxConfig"]


# §1. Configuration Sections
# --------------------------------------------------------------------------------------


@dataclass(frozen=True)
class ShareConfig:
    base_url: str = "http://localhost:5173"
    path: str = SHARE_PATH
    query_param: str = SHARE_QUERY_PARAM
    max_url_length: int = MAX_SHARE_URL_LENGTH
    env: Optional[str] = None
    production: bool = True


@dataclass(frozen=True)
class FxConfig:
    cad_to_usd_rate: Optional[float] = None
    fx_date: Optional[str] = None


@dataclass(frozen=True)
class Config:
    """The root configuration object."""
    share: ShareConfig = field(default_factory=ShareConfig)
    fx: FxConfig = field(default_factory=FxConfig)

    @classmethod
    def default(cls) -> "Config":
        return cls()


# §2. Validation and Loading
# --------------------------------------------------------------------------------------

_SECTIONS = {"share": ShareConfig, "fx": FxConfig}


def _build_section(name: str, data: Dict[str, Any]) -> Any:
    """Creates one section dataclass; unknown keys are a ValueError naming the section."""
    section_class = _SECTIONS[name]
    known = {f.name for f in fields(section_class)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown key(s) in {name}: {', '.join(map(str, unknown))}")
    return section_class(**data)


def _validate_config(cfg: Dict[str, Any]) -> None:
    """
    Checks the raw mapping in place and fills in missing sections.
    Raises ValueError on the first problem found.
    """
    if not isinstance(cfg, dict):
        raise ValueError("Configuration must be a YAML object.")
    unknown_sections = sorted(set(cfg) - set(_SECTIONS))
    if unknown_sections:
        raise ValueError(f"Unknown configuration section(s): {', '.join(map(str, unknown_sections))}")

    for name in _SECTIONS:
        section = cfg.get(name) or {}
        if not isinstance(section, dict):
            raise ValueError(f"{name} must be a mapping")
        cfg[name] = section

    share = cfg["share"]
    base_url = share.get("base_url", ShareConfig.base_url)
    if not isinstance(base_url, str) or not base_url.startswith(("http://", "https://")):
        raise ValueError("share.base_url must be an http(s) URL")

    path = share.get("path", SHARE_PATH)
    if not isinstance(path, str) or not path.startswith("/"):
        raise ValueError("share.path must start with '/'")

    max_url_length = share.get("max_url_length", MAX_SHARE_URL_LENGTH)
    if isinstance(max_url_length, bool) or not isinstance(max_url_length, int) or max_url_length <= 0:
        raise ValueError("share.max_url_length must be a positive integer")

    fx = cfg["fx"]
    rate = fx.get("cad_to_usd_rate")
    if rate is not None and (isinstance(rate, bool) or not isinstance(rate, (int, float)) or rate <= 0):
        raise ValueError("fx.cad_to_usd_rate must be a positive number")

    # YAML reads unquoted dates as date objects.
    if fx.get("fx_date") is not None:
        fx["fx_date"] = str(fx["fx_date"])


# impure
def load_config(config_path: Path) -> Config:
    """
    Reads share and FX settings from a YAML file. An empty file gives the defaults.
    #impure: Reads from the filesystem.
    """
    if not config_path.is_file():
        raise FileNotFoundError(f"Share configuration not found: {config_path}")

    try:
        raw_config = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in {config_path}: {e}") from e

    raw_config = {} if raw_config is None else raw_config
    _validate_config(raw_config)
    return Config(**{name: _build_section(name, raw_config[name]) for name in _SECTIONS})
