from __future__ import annotations

from enum import Enum

from softvibe.storage import KeyValueStorage

THEME_KEY = "softvibe_theme"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class ThemeStore:
    """Persisted light/dark preference; anything unrecognized reads as light."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def get_theme(self) -> Theme:
        raw = self.storage.get_item(THEME_KEY)
        return Theme.DARK if raw == Theme.DARK.value else Theme.LIGHT

    def set_theme(self, theme: Theme) -> None:
        self.storage.set_item(THEME_KEY, Theme(theme).value)

    def toggle(self) -> Theme:
        """Flip the stored theme and return the new value."""
        theme = Theme.LIGHT if self.get_theme() is Theme.DARK else Theme.DARK
        self.set_theme(theme)
        return theme
