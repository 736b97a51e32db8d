"""Two-state map metric toggle, independent of scope."""

from __future__ import annotations

import logging
from typing import Callable

from .models import Metric

_LOGGER = logging.getLogger("urbanstocks.metric")

MetricListener = Callable[[Metric], None]


class MetricSelector:
    def __init__(self, default: Metric | str = Metric.MASS) -> None:
        self._metric = Metric.parse(default)
        self._listeners: list[MetricListener] = []

    @property
    def metric(self) -> Metric:
        return self._metric

    def subscribe(self, listener: MetricListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_metric(self, value: Metric | str) -> Metric:
        """Switch the metric unconditionally and notify subscribers."""
        self._metric = Metric.parse(value)
        _LOGGER.debug("Metric -> %s", self._metric.value)
        for listener in list(self._listeners):
            listener(self._metric)
        return self._metric
