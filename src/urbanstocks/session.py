"""Explorer session: one scope owner, one metric toggle, one theme watcher."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .breadcrumbs import derive_breadcrumbs
from .config import ExplorerConfig
from .metric import MetricSelector
from .models import Breadcrumb, Metric, Scope, ScopeState
from .panels import (
    CityPanelView,
    MapViewState,
    NeighborhoodPanelView,
    city_panel_view,
    neighborhood_panel_view,
)
from .scope import ScopeStore
from .theme import ThemeColors, ThemeWatcher

_LOGGER = logging.getLogger("urbanstocks.session")


def _optional_str(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise ValueError(f"Expected string for '{field_name}'")
    return value.strip() or None


def _required_str(value: Any, field_name: str) -> str:
    out = _optional_str(value, field_name)
    if out is None:
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return out


class ExplorerSession:
    """Routes map and panel events to the scope store and derives every view from it."""

    def __init__(self, cfg: ExplorerConfig | None = None) -> None:
        self.store = ScopeStore()
        self.metric = MetricSelector(cfg.default_metric if cfg else Metric.MASS)
        self.theme = ThemeWatcher(cfg.dark_mode if cfg else False)

    @property
    def state(self) -> ScopeState:
        return self.store.state

    @property
    def scope(self) -> Scope:
        return self.store.scope

    # Map Surface and City Panel callbacks.

    def on_select_country(self, iso3: str | None, name: str | None = None) -> ScopeState:
        return self.store.select_country(iso3, name)

    def on_select_city(self, city_id: str, name: str | None = None) -> ScopeState:
        return self.store.select_city(city_id, name)

    # Breadcrumb actions.

    def reset_to_global(self) -> ScopeState:
        return self.store.reset_to_global()

    def reset_to_country(self) -> ScopeState:
        return self.store.reset_to_country()

    def set_metric(self, value: Metric | str) -> Metric:
        return self.metric.set_metric(value)

    def on_color_scheme_change(self, is_dark: bool) -> ThemeColors:
        return self.theme.on_preference_change(is_dark)

    # Derived views.

    def breadcrumbs(self) -> list[Breadcrumb]:
        return derive_breadcrumbs(self.store.state)

    def city_panel(self) -> CityPanelView | None:
        return city_panel_view(self.store.state)

    def neighborhood_panel(self) -> NeighborhoodPanelView | None:
        return neighborhood_panel_view(self.store.state)

    def map_view(self) -> MapViewState:
        return MapViewState(scope=self.store.scope, metric=self.metric.metric)

    def apply_event(self, event: Mapping[str, Any]) -> None:
        """Dispatch one scripted event, e.g. ``{"action": "select_country", "iso3": "FRA"}``."""
        action = _required_str(event.get("action"), "action").casefold()
        if action == "select_country":
            self.on_select_country(
                _required_str(event.get("iso3"), "iso3").upper(),
                _optional_str(event.get("name"), "name"),
            )
        elif action == "select_city":
            self.on_select_city(
                _required_str(event.get("city_id"), "city_id"),
                _optional_str(event.get("name"), "name"),
            )
        elif action in {"reset", "reset_to_global"}:
            self.reset_to_global()
        elif action == "reset_to_country":
            self.reset_to_country()
        elif action == "set_metric":
            self.set_metric(_required_str(event.get("value"), "value"))
        elif action == "color_scheme":
            dark = event.get("dark")
            if not isinstance(dark, bool):
                raise ValueError("Expected bool for 'dark'")
            self.on_color_scheme_change(dark)
        else:
            raise ValueError(f"Unknown event action: {action}")
        _LOGGER.debug("Applied %s event", action)
