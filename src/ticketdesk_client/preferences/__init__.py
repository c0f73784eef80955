"""
Local user preferences.
"""

from .theme import (
    THEME_KEY, DEFAULT_PREFERENCES_PATH, ThemeMode, ThemeBridge, ThemePreferences,
    ThemePreferenceStore, ThemeContext, sync_theme_with_local
)

__all__ = [
    "THEME_KEY",
    "DEFAULT_PREFERENCES_PATH",
    "ThemeMode",
    "ThemeBridge",
    "ThemePreferences",
    "ThemePreferenceStore",
    "ThemeContext",
    "sync_theme_with_local"
]
