"""Kursverwaltung module core (configuration)."""
from modules.kursverwaltung.core.config import (
    APP_KEYS,
    KursSettings,
    get_kurs_settings,
)

__all__ = ["APP_KEYS", "KursSettings", "get_kurs_settings"]
