"""Natural Earth admin-0 dataset retrieval and local GeoJSON reading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import requests

from .config import SourceConfig

_LOGGER = logging.getLogger("urbanstocks.io_ne")


class NormalizerError(RuntimeError):
    """Raised when the reference dataset cannot be retrieved or read."""


class NaturalEarthClient:
    """Single-shot HTTP fetch of the Natural Earth countries FeatureCollection.

    No retries: a failed fetch aborts the batch.
    """

    def __init__(self, cfg: SourceConfig, session: requests.Session | None = None) -> None:
        self.cfg = cfg
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": cfg.user_agent})

    def fetch_countries(self) -> dict[str, Any]:
        _LOGGER.info("Downloading Natural Earth countries from %s", self.cfg.url)
        response = self._session.get(self.cfg.url, timeout=self.cfg.request_timeout_s)
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise NormalizerError(
                f"Failed to download {self.cfg.url}: HTTP {response.status_code}"
            ) from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise NormalizerError(f"Response from {self.cfg.url} is not valid JSON") from exc
        return _require_feature_collection(payload, source=self.cfg.url)


def read_feature_collection(path: Path) -> dict[str, Any]:
    """Read a local GeoJSON FeatureCollection."""
    if not path.exists():
        raise FileNotFoundError(f"GeoJSON file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        try:
            payload = json.load(fh)
        except json.JSONDecodeError as exc:
            raise NormalizerError(f"Invalid JSON in {path}: {exc}") from exc
    return _require_feature_collection(payload, source=str(path))


def _require_feature_collection(payload: Any, *, source: str) -> dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise NormalizerError(f"Expected a GeoJSON object from {source}")
    features = payload.get("features")
    if not isinstance(features, list):
        raise NormalizerError(f"Expected 'features' list in GeoJSON from {source}")
    return dict(payload)
