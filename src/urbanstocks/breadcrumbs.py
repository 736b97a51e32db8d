"""Breadcrumb path derived from the current scope state."""

from __future__ import annotations

from typing import Sequence

from .models import Breadcrumb, CityScope, CountryScope, GlobalScope, ScopeLevel, ScopeState

GLOBAL_LABEL = "Global"


def derive_breadcrumbs(state: ScopeState) -> list[Breadcrumb]:
    """Return the ordered Global / Country / City path for ``state``.

    Global and country crumbs are clickable (reset to global / reset to
    country); the city crumb is never clickable.
    """
    scope = state.scope
    crumbs = [
        Breadcrumb(
            label=GLOBAL_LABEL,
            level=ScopeLevel.GLOBAL,
            clickable=True,
            active=isinstance(scope, GlobalScope),
        )
    ]
    if isinstance(scope, GlobalScope):
        return crumbs
    if not isinstance(scope, (CountryScope, CityScope)):
        raise TypeError(f"Unknown scope variant: {scope!r}")

    crumbs.append(
        Breadcrumb(
            label=state.country_name or scope.iso3,
            level=ScopeLevel.COUNTRY,
            clickable=True,
            active=isinstance(scope, CountryScope),
        )
    )
    if isinstance(scope, CityScope):
        crumbs.append(
            Breadcrumb(
                label=state.city_name or f"City {scope.city_id}",
                level=ScopeLevel.CITY,
                clickable=False,
                active=True,
            )
        )
    return crumbs


def format_breadcrumbs(crumbs: Sequence[Breadcrumb], sep: str = " / ") -> str:
    parts: list[str] = []
    for crumb in crumbs:
        parts.append(f"[{crumb.label}]" if crumb.active else crumb.label)
    return sep.join(parts)
