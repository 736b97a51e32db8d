"""View models for the city list and neighborhood detail panels."""

from __future__ import annotations

from dataclasses import dataclass

from .models import CityScope, CountryScope, GlobalScope, Metric, Scope, ScopeState


@dataclass(frozen=True, slots=True)
class CityPanelView:
    """City list input; ``iso3`` is None when listing cities worldwide."""

    iso3: str | None
    title: str


@dataclass(frozen=True, slots=True)
class NeighborhoodPanelView:
    iso3: str
    city_id: str
    city_name: str
    country_name: str | None


@dataclass(frozen=True, slots=True)
class MapViewState:
    scope: Scope
    metric: Metric


def city_panel_view(state: ScopeState) -> CityPanelView | None:
    """City panel is live at global and country level and empty at city level."""
    scope = state.scope
    if isinstance(scope, GlobalScope):
        return CityPanelView(iso3=None, title="All cities")
    if isinstance(scope, CountryScope):
        return CityPanelView(iso3=scope.iso3, title=f"Cities in {state.country_name or scope.iso3}")
    if isinstance(scope, CityScope):
        return None
    raise TypeError(f"Unknown scope variant: {scope!r}")


def neighborhood_panel_view(state: ScopeState) -> NeighborhoodPanelView | None:
    scope = state.scope
    if isinstance(scope, (GlobalScope, CountryScope)):
        return None
    if isinstance(scope, CityScope):
        return NeighborhoodPanelView(
            iso3=scope.iso3,
            city_id=scope.city_id,
            city_name=state.city_name or f"City {scope.city_id}",
            country_name=state.country_name,
        )
    raise TypeError(f"Unknown scope variant: {scope!r}")
