"""Chart color roles selected by the host light/dark preference."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class ThemeColors:
    axis: str
    grid: str
    tick_text: str
    label_text: str
    empty_text: str
    zero_line: str


LIGHT_COLORS = ThemeColors(
    axis="#ebe7e1",
    grid="#f0ede9",
    tick_text="#9a948e",
    label_text="#6b6560",
    empty_text="#9a948e",
    zero_line="#d0cdc8",
)

DARK_COLORS = ThemeColors(
    axis="#3a3a42",
    grid="#2e2e36",
    tick_text="#7a756f",
    label_text="#8a857f",
    empty_text="#6b6560",
    zero_line="#4a4a52",
)


def chart_colors(is_dark: bool) -> ThemeColors:
    return DARK_COLORS if is_dark else LIGHT_COLORS


ThemeListener = Callable[[ThemeColors], None]


class ThemeWatcher:
    """Tracks the host color-scheme preference and re-reads the color table on change."""

    def __init__(self, is_dark: bool = False) -> None:
        self._is_dark = bool(is_dark)
        self._listeners: list[ThemeListener] = []

    @property
    def is_dark(self) -> bool:
        return self._is_dark

    @property
    def colors(self) -> ThemeColors:
        return chart_colors(self._is_dark)

    def subscribe(self, listener: ThemeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_preference_change(self, is_dark: bool) -> ThemeColors:
        self._is_dark = bool(is_dark)
        colors = self.colors
        for listener in list(self._listeners):
            listener(colors)
        return colors
