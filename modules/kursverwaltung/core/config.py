"""
Kursverwaltung Module Configuration.

Manages environment variables specific to the Kursverwaltung module.
Uses prefix KURS_ to avoid conflicts with other modules.

Each of the five collections lives in its own LivingApps app. The app ids
are 24 character hex strings taken from the LivingApps app URL.
"""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.livingapps import is_object_id

# App keys in the order the dashboard fetches them
APP_KEYS = ("dozenten", "raeume", "teilnehmer", "kurse", "anmeldungen")


class KursSettings(BaseSettings):
    """
    Kursverwaltung settings loaded from environment variables.

    All variables use the KURS_ prefix for module isolation.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    app_id_dozenten: Annotated[
        str,
        Field(
            description="LivingApps app id of the Dozenten collection",
            validation_alias="KURS_APP_ID_DOZENTEN",
        ),
    ] = "6940a1b2c3d4e5f601000001"

    app_id_raeume: Annotated[
        str,
        Field(
            description="LivingApps app id of the Räume collection",
            validation_alias="KURS_APP_ID_RAEUME",
        ),
    ] = "6940a1b2c3d4e5f601000002"

    app_id_teilnehmer: Annotated[
        str,
        Field(
            description="LivingApps app id of the Teilnehmer collection",
            validation_alias="KURS_APP_ID_TEILNEHMER",
        ),
    ] = "6940a1b2c3d4e5f601000003"

    app_id_kurse: Annotated[
        str,
        Field(
            description="LivingApps app id of the Kurse collection",
            validation_alias="KURS_APP_ID_KURSE",
        ),
    ] = "6940a1b2c3d4e5f601000004"

    app_id_anmeldungen: Annotated[
        str,
        Field(
            description="LivingApps app id of the Anmeldungen collection",
            validation_alias="KURS_APP_ID_ANMELDUNGEN",
        ),
    ] = "6940a1b2c3d4e5f601000005"

    default_tab: Annotated[
        str,
        Field(
            description="Tab shown when the dashboard opens",
            validation_alias="KURS_DEFAULT_TAB",
        ),
    ] = "kurse"

    @field_validator(
        "app_id_dozenten",
        "app_id_raeume",
        "app_id_teilnehmer",
        "app_id_kurse",
        "app_id_anmeldungen",
    )
    @classmethod
    def validate_app_id(cls, v: str) -> str:
        """App ids must be 24 character hex strings."""
        v = v.strip()
        if not is_object_id(v):
            raise ValueError(f"'{v}' is not a LivingApps app id (24 hex characters)")
        return v.lower()

    @field_validator("default_tab")
    @classmethod
    def validate_default_tab(cls, v: str) -> str:
        if v not in APP_KEYS:
            raise ValueError(f"default_tab must be one of {', '.join(APP_KEYS)}")
        return v

    def app_id(self, app_key: str) -> str:
        """
        Resolve an app key (e.g. "kurse") to its LivingApps app id.

        Raises:
            KeyError: If the app key is unknown.
        """
        if app_key not in APP_KEYS:
            raise KeyError(f"Unknown app key: {app_key}")
        return getattr(self, f"app_id_{app_key}")

    def app_ids(self) -> dict[str, str]:
        """All app ids by app key."""
        return {key: self.app_id(key) for key in APP_KEYS}


@lru_cache
def get_kurs_settings() -> KursSettings:
    """
    Get cached Kursverwaltung module settings.

    Uses LRU cache to ensure settings are loaded only once.
    """
    return KursSettings()
