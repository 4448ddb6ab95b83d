"""
Kursverwaltung Data Access.

Single access point translating panel operations into LivingApps calls.
One repository per app; nothing is cached, so callers re-fetch after every
mutation. Errors from LivingApps propagate unchanged.
"""

import logging
from typing import Any, Dict, List, Optional

from core.livingapps import (
    LivingAppsRecord,
    LivingAppsRepository,
    LivingAppsService,
    extract_record_id,
)
from modules.kursverwaltung.core.config import APP_KEYS, KursSettings, get_kurs_settings
from modules.kursverwaltung.models import (
    RECORD_MODELS,
    Anmeldung,
    Dozent,
    Kurs,
    Raum,
    Teilnehmer,
)

logger = logging.getLogger(__name__)

Fields = Dict[str, Any]


class KursverwaltungService:
    """
    Facade over the five Kursverwaltung apps.
    
    Args:
        livingapps: LivingAppsService bound to an HTTP client.
        settings: Module settings holding the app ids. Uses singleton if not provided.
    """
    
    def __init__(
        self,
        livingapps: LivingAppsService,
        settings: Optional[KursSettings] = None,
    ) -> None:
        self._livingapps = livingapps
        self._settings = settings or get_kurs_settings()
        self._repositories: Dict[str, LivingAppsRepository] = {
            key: LivingAppsRepository(RECORD_MODELS[key], livingapps, self._settings.app_id(key))
            for key in APP_KEYS
        }
    
    @property
    def settings(self) -> KursSettings:
        return self._settings
    
    def repository(self, app_key: str) -> LivingAppsRepository:
        """
        Repository for an app key.
        
        Raises:
            KeyError: If the app key is unknown.
        """
        return self._repositories[app_key]
    
    # =========================================================================
    # Reference helpers
    # =========================================================================
    
    @staticmethod
    def extract_record_id(url: Optional[str]) -> Optional[str]:
        """Record id at the end of a reference URL."""
        return extract_record_id(url)
    
    def create_record_url(self, app_key: str, record_id: str) -> str:
        """Reference URL for a record of the given app key."""
        return self.repository(app_key).record_url(record_id)
    
    async def check_connection(self) -> Dict[str, Any]:
        """LivingApps health probe."""
        return await self._livingapps.check_connection()
    
    # =========================================================================
    # Generic operations
    # =========================================================================
    
    async def list_records(self, app_key: str) -> List[LivingAppsRecord]:
        """All records of an app, in backend order."""
        return await self.repository(app_key).find_all()
    
    async def create(self, app_key: str, fields: Fields) -> Optional[Fields]:
        return await self.repository(app_key).create(fields)
    
    async def update(self, app_key: str, record_id: str, fields: Fields) -> Optional[Fields]:
        return await self.repository(app_key).update(record_id, fields)
    
    async def delete(self, app_key: str, record_id: str) -> None:
        await self.repository(app_key).delete(record_id)
    
    # =========================================================================
    # Dozenten
    # =========================================================================
    
    async def get_dozenten(self) -> List[Dozent]:
        return await self.list_records("dozenten")
    
    async def create_dozenten_entry(self, fields: Fields) -> Optional[Fields]:
        return await self.create("dozenten", fields)
    
    async def update_dozenten_entry(self, record_id: str, fields: Fields) -> Optional[Fields]:
        return await self.update("dozenten", record_id, fields)
    
    async def delete_dozenten_entry(self, record_id: str) -> None:
        await self.delete("dozenten", record_id)
    
    # =========================================================================
    # Räume
    # =========================================================================
    
    async def get_raeume(self) -> List[Raum]:
        return await self.list_records("raeume")
    
    async def create_raeume_entry(self, fields: Fields) -> Optional[Fields]:
        return await self.create("raeume", fields)
    
    async def update_raeume_entry(self, record_id: str, fields: Fields) -> Optional[Fields]:
        return await self.update("raeume", record_id, fields)
    
    async def delete_raeume_entry(self, record_id: str) -> None:
        await self.delete("raeume", record_id)
    
    # =========================================================================
    # Teilnehmer
    # =========================================================================
    
    async def get_teilnehmer(self) -> List[Teilnehmer]:
        return await self.list_records("teilnehmer")
    
    async def create_teilnehmer_entry(self, fields: Fields) -> Optional[Fields]:
        return await self.create("teilnehmer", fields)
    
    async def update_teilnehmer_entry(self, record_id: str, fields: Fields) -> Optional[Fields]:
        return await self.update("teilnehmer", record_id, fields)
    
    async def delete_teilnehmer_entry(self, record_id: str) -> None:
        await self.delete("teilnehmer", record_id)
    
    # =========================================================================
    # Kurse
    # =========================================================================
    
    async def get_kurse(self) -> List[Kurs]:
        return await self.list_records("kurse")
    
    async def create_kurse_entry(self, fields: Fields) -> Optional[Fields]:
        return await self.create("kurse", fields)
    
    async def update_kurse_entry(self, record_id: str, fields: Fields) -> Optional[Fields]:
        return await self.update("kurse", record_id, fields)
    
    async def delete_kurse_entry(self, record_id: str) -> None:
        await self.delete("kurse", record_id)
    
    # =========================================================================
    # Anmeldungen
    # =========================================================================
    
    async def get_anmeldungen(self) -> List[Anmeldung]:
        return await self.list_records("anmeldungen")
    
    async def create_anmeldungen_entry(self, fields: Fields) -> Optional[Fields]:
        return await self.create("anmeldungen", fields)
    
    async def update_anmeldungen_entry(self, record_id: str, fields: Fields) -> Optional[Fields]:
        return await self.update("anmeldungen", record_id, fields)
    
    async def delete_anmeldungen_entry(self, record_id: str) -> None:
        await self.delete("anmeldungen", record_id)
