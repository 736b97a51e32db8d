"""Country polygon repair and coverage validation against the city index."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from .config import AppConfig, NormalizeConfig
from .io_ne import NaturalEarthClient, NormalizerError, read_feature_collection
from .models import CountryFeature
from .util import write_json

_LOGGER = logging.getLogger("urbanstocks.normalize")


@dataclass(slots=True)
class CoverageReport:
    """Diagnostics for a normalized country dataset; never blocks the write."""

    feature_count: int = 0
    required: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    null_iso3: int = 0
    null_name: int = 0
    output_path: Path | None = None
    warnings: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)

    @property
    def found_count(self) -> int:
        return len(self.required) - len(self.missing)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def add_info(self, msg: str) -> None:
        self.infos.append(msg)


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def resolve_iso3(
    properties: Mapping[str, Any],
    fields: Sequence[str],
    *,
    sentinel: str = "-99",
) -> str | None:
    """First non-empty, non-sentinel code among ``fields``, left to right."""
    for name in fields:
        value = _clean(properties.get(name))
        if value is None or value == sentinel:
            continue
        return value.upper()
    return None


def resolve_name(properties: Mapping[str, Any], fields: Sequence[str]) -> str | None:
    for name in fields:
        value = _clean(properties.get(name))
        if value is not None:
            return value
    return None


def normalize_features(
    collection: Mapping[str, Any],
    cfg: NormalizeConfig,
) -> list[CountryFeature]:
    """Reduce every feature to ``iso3`` + ``name``; geometry is passed through as-is."""
    out: list[CountryFeature] = []
    for feature in collection.get("features", []):
        if not isinstance(feature, Mapping):
            raise NormalizerError("Expected every GeoJSON feature to be an object")
        props = feature.get("properties") or {}
        if not isinstance(props, Mapping):
            props = {}
        out.append(
            CountryFeature(
                iso3=resolve_iso3(props, cfg.iso_fields, sentinel=cfg.unknown_sentinel),
                name=resolve_name(props, cfg.name_fields),
                geometry=feature.get("geometry"),
            )
        )
    return out


def feature_collection(features: Iterable[CountryFeature]) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [feature.to_dict() for feature in features],
    }


def load_city_index(path: Path) -> list[str]:
    """Return the required ISO3 codes, i.e. the keys of `country_to_cities.json`."""
    if not path.exists():
        raise FileNotFoundError(f"City index not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, dict):
        raise ValueError(f"Expected mapping in {path}")

    codes: list[str] = []
    for key in raw:
        if not isinstance(key, str) or not key.strip():
            raise ValueError(f"City index keys must be ISO3 strings in {path}")
        codes.append(key.strip().upper())
    return codes


def validate_coverage(
    features: Sequence[CountryFeature],
    required: Sequence[str],
) -> CoverageReport:
    """Compare the output ISO3 set with the required codes and count nulls."""
    available = {feature.iso3 for feature in features if feature.iso3}
    report = CoverageReport(
        feature_count=len(features),
        required=list(required),
        missing=[iso3 for iso3 in required if iso3 not in available],
        null_iso3=sum(1 for feature in features if not feature.iso3),
        null_name=sum(1 for feature in features if not feature.name),
    )

    report.add_info(f"Output features: {report.feature_count}")
    report.add_info(f"Needed ISOs: {len(report.required)}")
    report.add_info(f"Found: {report.found_count}/{len(report.required)}")
    if report.missing:
        report.add_warning(f"Missing ISOs: {_format_code_list(report.missing)}")

    null_msg = f"Null iso3: {report.null_iso3}, Null name: {report.null_name}"
    if report.null_iso3 or report.null_name:
        report.add_warning(null_msg)
    else:
        report.add_info(null_msg)
    return report


def run_fix_countries(cfg: AppConfig, *, client: NaturalEarthClient | None = None) -> CoverageReport:
    """Fetch, normalize, validate and write the countries GeoJSON.

    Transport and I/O failures propagate; coverage gaps only produce warnings.
    """
    client = client or NaturalEarthClient(cfg.source)
    raw = client.fetch_countries()
    _LOGGER.info("Downloaded %d features", len(raw["features"]))

    features = normalize_features(raw, cfg.normalize)
    required = load_city_index(cfg.paths.city_index)
    report = validate_coverage(features, required)

    write_json(cfg.paths.countries_geojson, feature_collection(features), compact=True)
    report.output_path = cfg.paths.countries_geojson
    report.add_info(f"Written to {cfg.paths.countries_geojson}")
    return report


def run_check(cfg: AppConfig) -> CoverageReport:
    """Validate an existing countries GeoJSON without fetching anything."""
    raw = read_feature_collection(cfg.paths.countries_geojson)
    features: list[CountryFeature] = []
    for item in raw["features"]:
        if not isinstance(item, Mapping):
            raise NormalizerError("Expected every GeoJSON feature to be an object")
        features.append(CountryFeature.from_mapping(item))
    required = load_city_index(cfg.paths.city_index)
    report = validate_coverage(features, required)
    report.add_info(f"Checked {cfg.paths.countries_geojson}")
    return report


def _format_code_list(values: list[str], limit: int = 12) -> str:
    if len(values) <= limit:
        return ", ".join(values)
    shown = ", ".join(values[:limit])
    return f"{shown}, ... (+{len(values) - limit} more)"


def format_coverage_lines(report: CoverageReport) -> Iterable[str]:
    for info in report.infos:
        yield f"[INFO] {info}"
    for warning in report.warnings:
        yield f"[WARN] {warning}"
    yield "[OK] Country dataset processed."
