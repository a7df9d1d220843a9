from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict

from lumina.constants import (
    PREF_INSTALL_PROMPTED_KEY,
    PREF_NOTIFICATION_PROMPTED_KEY,
    PREF_NOTIFICATIONS_ENABLED_KEY,
    PREF_THEME_KEY,
    VIEW_DASHBOARD,
    VIEW_OPTIONS,
)

THEMES = ("light", "dark")


@dataclass
class AppContext:
    theme: str = "light"
    install_prompted: bool = False
    notification_prompted: bool = False
    notifications_enabled: bool = False
    current_view: str = VIEW_DASHBOARD
    current_date: date = field(default_factory=date.today)
    refresh_key: int = 0
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, store, **kwargs):
        theme = store.get_json(PREF_THEME_KEY, "light")
        return cls(
            theme=theme if theme in THEMES else "light",
            install_prompted=store.get_flag(PREF_INSTALL_PROMPTED_KEY),
            notification_prompted=store.get_flag(PREF_NOTIFICATION_PROMPTED_KEY),
            notifications_enabled=store.get_flag(PREF_NOTIFICATIONS_ENABLED_KEY),
            **kwargs,
        )

    def save(self, store):
        store.set_json(PREF_THEME_KEY, self.theme)
        store.set_flag(PREF_INSTALL_PROMPTED_KEY, self.install_prompted)
        store.set_flag(PREF_NOTIFICATION_PROMPTED_KEY, self.notification_prompted)
        store.set_flag(PREF_NOTIFICATIONS_ENABLED_KEY, self.notifications_enabled)

    def toggle_theme(self):
        self.theme = "light" if self.theme == "dark" else "dark"
        return self.theme

    def trigger_refresh(self):
        self.refresh_key += 1
        return self.refresh_key

    def navigate(self, view, day=None):
        if view not in VIEW_OPTIONS:
            raise ValueError(f"Unknown view: {view}")
        if day is not None:
            self.current_date = day
        self.current_view = view

    def get(self, key, default=None):
        return self.payload.get(key, default)

    def __getitem__(self, key):
        return self.payload[key]
