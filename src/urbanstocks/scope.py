"""Scope state cell and its four navigation transitions."""

from __future__ import annotations

import logging
from typing import Callable

from .models import CityScope, CountryScope, GlobalScope, Scope, ScopeState

_LOGGER = logging.getLogger("urbanstocks.scope")

ScopeListener = Callable[[ScopeState], None]


class ScopeStore:
    """Single owner of the current navigation scope.

    Every transition replaces the whole ``ScopeState`` snapshot, so readers
    never see a half-applied change. Other components read ``state`` and
    request transitions; they never write to it.
    """

    def __init__(self) -> None:
        self._state = ScopeState(scope=GlobalScope())
        self._listeners: list[ScopeListener] = []

    @property
    def state(self) -> ScopeState:
        return self._state

    @property
    def scope(self) -> Scope:
        return self._state.scope

    def subscribe(self, listener: ScopeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def is_current(self, scope: Scope) -> bool:
        """True if ``scope`` still matches the active one (stale-fetch check)."""
        return self._state.scope == scope

    def select_country(self, iso3: str | None, name: str | None = None) -> ScopeState:
        """Enter a country from any level, dropping any city selection.

        Polygons without a resolved code cannot be entered; the click is ignored.
        """
        if not isinstance(iso3, str) or not iso3.strip():
            _LOGGER.warning("Ignoring country selection without an ISO3 code (name=%r).", name)
            return self._state
        iso3 = iso3.strip()
        return self._commit(
            ScopeState(
                scope=CountryScope(iso3=iso3),
                country_name=name or iso3,
                city_name=None,
            )
        )

    def select_city(self, city_id: str, name: str | None = None) -> ScopeState:
        current = self._state.scope
        if isinstance(current, GlobalScope):
            _LOGGER.warning(
                "Ignoring city selection %r without an active country.", city_id
            )
            return self._state
        if isinstance(current, (CountryScope, CityScope)):
            if not current.iso3:
                _LOGGER.warning("Ignoring city selection %r: active country has no ISO3.", city_id)
                return self._state
            return self._commit(
                ScopeState(
                    scope=CityScope(iso3=current.iso3, city_id=city_id),
                    country_name=self._state.country_name,
                    city_name=name or f"City {city_id}",
                )
            )
        raise TypeError(f"Unknown scope variant: {current!r}")

    def reset_to_global(self) -> ScopeState:
        return self._commit(ScopeState(scope=GlobalScope()))

    def reset_to_country(self) -> ScopeState:
        current = self._state.scope
        if isinstance(current, GlobalScope):
            _LOGGER.warning("Ignoring reset to country: no country is held at global scope.")
            return self._state
        if isinstance(current, (CountryScope, CityScope)):
            return self._commit(
                ScopeState(
                    scope=CountryScope(iso3=current.iso3),
                    country_name=self._state.country_name,
                    city_name=None,
                )
            )
        raise TypeError(f"Unknown scope variant: {current!r}")

    def _commit(self, new_state: ScopeState) -> ScopeState:
        self._state = new_state
        _LOGGER.debug("Scope -> %s", new_state.to_dict())
        for listener in list(self._listeners):
            listener(new_state)
        return new_state
