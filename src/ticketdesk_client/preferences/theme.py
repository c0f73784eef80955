"""
Theme preference.

The only client-side persisted state: one `theme` key in a small JSON file.
A host bridge (for example a desktop shell) may apply the theme natively;
when it is missing or fails, the stored preference alone decides.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, Union


logger = logging.getLogger(__name__)

THEME_KEY = "theme"
DEFAULT_PREFERENCES_PATH = Path.home() / ".ticketdesk" / "preferences.json"


class ThemeMode(str, Enum):
    DARK = "dark"
    LIGHT = "light"
    SYSTEM = "system"


class ThemeBridge(Protocol):
    """Host-side theme controls."""

    async def current(self) -> str:
        """Theme source the host is using."""
        ...

    async def dark(self) -> None:
        ...

    async def light(self) -> None:
        ...

    async def system(self) -> bool:
        """Follow the OS theme; returns whether the result is dark."""
        ...

    async def toggle(self) -> bool:
        """Flip between dark and light; returns whether the result is dark."""
        ...


@dataclass
class ThemePreferences:
    """Host theme and the locally stored choice, if any."""
    system: ThemeMode
    local: Optional[ThemeMode]


def _parse_mode(value: object) -> Optional[ThemeMode]:
    try:
        return ThemeMode(value)
    except ValueError:
        return None


class ThemePreferenceStore:
    """JSON-file store for the theme key."""

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path) if path is not None else DEFAULT_PREFERENCES_PATH

    def load(self) -> Optional[ThemeMode]:
        """Stored theme, or None if unset or unreadable."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read theme preference from {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            return None
        return _parse_mode(data.get(THEME_KEY))

    def save(self, mode: ThemeMode) -> None:
        """Persist the theme, keeping any other keys in the file."""
        data = {}
        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    data = loaded
            except (OSError, json.JSONDecodeError):
                data = {}
        data[THEME_KEY] = ThemeMode(mode).value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)


class ThemeContext:
    """
    Current theme of one consumer.

    Tracks the effective mode and whether it renders dark. Bridge failures
    never propagate: the stored preference is updated regardless.
    """

    def __init__(self, store: ThemePreferenceStore, bridge: Optional[ThemeBridge] = None):
        self.store = store
        self.bridge = bridge
        self.theme = ThemeMode.SYSTEM
        self.is_dark = False

    async def get_current_theme(self) -> ThemePreferences:
        system = ThemeMode.SYSTEM
        if self.bridge is not None:
            try:
                system = _parse_mode(await self.bridge.current()) or ThemeMode.SYSTEM
            except Exception as e:
                logger.warning(f"Error getting current theme: {e}")
        return ThemePreferences(system=system, local=self.store.load())

    async def set_theme(self, mode: Union[ThemeMode, str]) -> None:
        """Apply a theme through the bridge (if any) and store it."""
        mode = ThemeMode(mode)
        try:
            self.is_dark = await self._apply(mode)
        except Exception as e:
            logger.warning(f"Error setting theme through host bridge: {e}")
            self.is_dark = mode is ThemeMode.DARK
        self.store.save(mode)
        self.theme = mode

    async def _apply(self, mode: ThemeMode) -> bool:
        if mode is ThemeMode.DARK:
            if self.bridge is not None:
                await self.bridge.dark()
            return True
        if mode is ThemeMode.LIGHT:
            if self.bridge is not None:
                await self.bridge.light()
            return False
        if self.bridge is not None:
            return bool(await self.bridge.system())
        return False

    async def toggle_theme(self) -> ThemeMode:
        """Flip between dark and light and store the result."""
        if self.bridge is None:
            return await self._toggle_locally()
        try:
            is_dark = bool(await self.bridge.toggle())
        except Exception as e:
            logger.warning(f"Error toggling theme through host bridge: {e}")
            return await self._toggle_locally()

        mode = ThemeMode.DARK if is_dark else ThemeMode.LIGHT
        self.is_dark = is_dark
        self.store.save(mode)
        self.theme = mode
        return mode

    async def _toggle_locally(self) -> ThemeMode:
        mode = ThemeMode.LIGHT if self.store.load() is ThemeMode.DARK else ThemeMode.DARK
        self.is_dark = mode is ThemeMode.DARK
        self.store.save(mode)
        self.theme = mode
        return mode

    async def initialize(self) -> ThemeMode:
        """Reconcile host and stored preferences; returns the effective mode."""
        await sync_theme_with_local(self.store, self.bridge, context=self)
        preferences = await self.get_current_theme()
        self.theme = preferences.local or preferences.system
        return self.theme


async def sync_theme_with_local(store: ThemePreferenceStore, bridge: Optional[ThemeBridge] = None,
                                context: Optional[ThemeContext] = None) -> ThemeMode:
    """
    Re-apply the stored theme at startup, or `system` if none is stored.

    Returns:
        The mode applied
    """
    context = context or ThemeContext(store, bridge)
    mode = store.load() or ThemeMode.SYSTEM
    await context.set_theme(mode)
    return mode


__all__ = [
    "THEME_KEY",
    "DEFAULT_PREFERENCES_PATH",
    "ThemeMode",
    "ThemeBridge",
    "ThemePreferences",
    "ThemePreferenceStore",
    "ThemeContext",
    "sync_theme_with_local",
]
