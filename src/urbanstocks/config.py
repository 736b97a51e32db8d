"""Typed configuration loader for `config.yaml`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, cast

import yaml

from .models import Metric

DEFAULT_SOURCE_URL = (
    "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/master/"
    "geojson/ne_50m_admin_0_countries.geojson"
)
DEFAULT_ISO_FIELDS = ("ISO_A3", "ISO_A3_EH", "ADM0_A3")
DEFAULT_NAME_FIELDS = ("NAME", "NAME_EN", "ADMIN")
DEFAULT_UNKNOWN_SENTINEL = "-99"


def _mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected mapping for '{field_name}'")
    return cast(Mapping[str, Any], value)


def _optional_mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    return _mapping(value, field_name)


def _str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _int(value: Any, field_name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Expected integer for '{field_name}'")
    return value


def _bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Expected bool for '{field_name}'")
    return value


def _str_list(value: Any, field_name: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not value:
        raise ValueError(f"Expected non-empty list for '{field_name}'")
    out: list[str] = []
    for idx, item in enumerate(value):
        out.append(_str(item, f"{field_name}[{idx}]"))
    return tuple(out)


def _path_from_cfg(value: Any, field_name: str, root_dir: Path) -> Path:
    raw = _str(value, field_name)
    p = Path(raw)
    return p if p.is_absolute() else root_dir / p


@dataclass(frozen=True, slots=True)
class PathsConfig:
    countries_geojson: Path
    city_index: Path
    logs_dir: Path

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path) -> PathsConfig:
        return cls(
            countries_geojson=_path_from_cfg(
                raw.get("countries_geojson"), "paths.countries_geojson", root_dir
            ),
            city_index=_path_from_cfg(raw.get("city_index"), "paths.city_index", root_dir),
            logs_dir=_path_from_cfg(raw.get("logs_dir", "build/logs"), "paths.logs_dir", root_dir),
        )


@dataclass(frozen=True, slots=True)
class SourceConfig:
    url: str
    request_timeout_s: int
    user_agent: str

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> SourceConfig:
        timeout = _int(raw.get("request_timeout_s", 60), "source.request_timeout_s")
        if timeout <= 0:
            raise ValueError("source.request_timeout_s must be > 0")
        return cls(
            url=_str(raw.get("url", DEFAULT_SOURCE_URL), "source.url"),
            request_timeout_s=timeout,
            user_agent=_str(raw.get("user_agent", "urbanstocks/0.1"), "source.user_agent"),
        )


@dataclass(frozen=True, slots=True)
class NormalizeConfig:
    iso_fields: tuple[str, ...] = DEFAULT_ISO_FIELDS
    name_fields: tuple[str, ...] = DEFAULT_NAME_FIELDS
    unknown_sentinel: str = DEFAULT_UNKNOWN_SENTINEL

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> NormalizeConfig:
        return cls(
            iso_fields=_str_list(
                raw.get("iso_fields", list(DEFAULT_ISO_FIELDS)), "normalize.iso_fields"
            ),
            name_fields=_str_list(
                raw.get("name_fields", list(DEFAULT_NAME_FIELDS)), "normalize.name_fields"
            ),
            unknown_sentinel=_str(
                raw.get("unknown_sentinel", DEFAULT_UNKNOWN_SENTINEL), "normalize.unknown_sentinel"
            ),
        )


@dataclass(frozen=True, slots=True)
class ExplorerConfig:
    default_metric: Metric = Metric.MASS
    dark_mode: bool = False

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> ExplorerConfig:
        return cls(
            default_metric=Metric.parse(
                _str(raw.get("default_metric", Metric.MASS.value), "explorer.default_metric")
            ),
            dark_mode=_bool(raw.get("dark_mode", False), "explorer.dark_mode"),
        )


@dataclass(frozen=True, slots=True)
class AppConfig:
    source_path: Path
    paths: PathsConfig
    source: SourceConfig
    normalize: NormalizeConfig
    explorer: ExplorerConfig

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], source_path: Path) -> AppConfig:
        root_dir = source_path.parent.resolve()
        return cls(
            source_path=source_path.resolve(),
            paths=PathsConfig.from_mapping(_mapping(raw.get("paths"), "paths"), root_dir),
            source=SourceConfig.from_mapping(_optional_mapping(raw.get("source"), "source")),
            normalize=NormalizeConfig.from_mapping(
                _optional_mapping(raw.get("normalize"), "normalize")
            ),
            explorer=ExplorerConfig.from_mapping(
                _optional_mapping(raw.get("explorer"), "explorer")
            ),
        )


def load_config(path: str | Path) -> AppConfig:
    """Load and validate the YAML config file into typed settings."""
    cfg_path = Path(path).resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if not isinstance(raw, Mapping):
        raise ValueError("Top-level config must be a YAML mapping")
    return AppConfig.from_mapping(cast(Mapping[str, Any], raw), cfg_path)
