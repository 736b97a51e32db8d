"""Domain models shared across navigation and normalization modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union


class ScopeLevel(str, Enum):
    GLOBAL = "global"
    COUNTRY = "country"
    CITY = "city"


class Metric(str, Enum):
    MASS = "mass"
    POPULATION = "population"

    @classmethod
    def parse(cls, value: Metric | str) -> Metric:
        """Accept a metric or its string value; ``pop`` is an alias for population."""
        if isinstance(value, Metric):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Expected metric string, got {value!r}")
        raw = value.strip().casefold()
        if raw == "pop":
            return cls.POPULATION
        try:
            return cls(raw)
        except ValueError:
            allowed = ", ".join(item.value for item in cls)
            raise ValueError(f"Unknown metric '{value}'; expected one of: {allowed}") from None


@dataclass(frozen=True, slots=True)
class GlobalScope:
    @property
    def level(self) -> ScopeLevel:
        return ScopeLevel.GLOBAL


@dataclass(frozen=True, slots=True)
class CountryScope:
    iso3: str

    @property
    def level(self) -> ScopeLevel:
        return ScopeLevel.COUNTRY


@dataclass(frozen=True, slots=True)
class CityScope:
    """City selected inside the country it was entered through."""

    iso3: str
    city_id: str

    @property
    def level(self) -> ScopeLevel:
        return ScopeLevel.CITY


Scope = Union[GlobalScope, CountryScope, CityScope]


@dataclass(frozen=True, slots=True)
class ScopeState:
    """Current scope plus the display labels cached alongside it.

    ``city_name`` is only set at city level and ``country_name`` only at
    country or city level.
    """

    scope: Scope
    country_name: str | None = None
    city_name: str | None = None

    @property
    def level(self) -> ScopeLevel:
        return self.scope.level

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"level": self.level.value}
        if isinstance(self.scope, (CountryScope, CityScope)):
            payload["iso3"] = self.scope.iso3
        if isinstance(self.scope, CityScope):
            payload["city_id"] = self.scope.city_id
        payload["country_name"] = self.country_name
        payload["city_name"] = self.city_name
        return payload


@dataclass(frozen=True, slots=True)
class Breadcrumb:
    label: str
    level: ScopeLevel
    clickable: bool
    active: bool


@dataclass(frozen=True, slots=True)
class CountryFeature:
    """Normalized admin-0 polygon with exactly two output properties."""

    iso3: str | None
    name: str | None
    geometry: Mapping[str, Any] | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "Feature",
            "properties": {"iso3": self.iso3, "name": self.name},
            "geometry": self.geometry,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CountryFeature:
        """Read a feature already in normalized form."""
        props = data.get("properties") or {}
        if not isinstance(props, Mapping):
            raise ValueError("Expected mapping for feature 'properties'")
        iso3_raw = props.get("iso3")
        name_raw = props.get("name")
        iso3 = iso3_raw.strip().upper() if isinstance(iso3_raw, str) and iso3_raw.strip() else None
        name = name_raw.strip() if isinstance(name_raw, str) and name_raw.strip() else None
        return cls(iso3=iso3, name=name, geometry=data.get("geometry"))
