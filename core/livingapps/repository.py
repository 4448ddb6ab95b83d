"""
LivingApps Repository Pattern.

Provides high-level data access for LivingApps record models,
similar to SQLAlchemy's Session/Repository pattern.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from core.livingapps.models import LivingAppsRecord
from core.livingapps.references import RecordRef
from core.livingapps.service import LivingAppsService

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=LivingAppsRecord)


class LivingAppsRepository(Generic[T]):
    """
    Repository for one LivingApps app.
    
    Handles model instantiation from raw API responses and forwards
    payloads for create/update/delete. Nothing is cached: every call
    goes to the API and errors propagate to the caller.
    
    Example:
        repo = LivingAppsRepository(Raum, service, app_id="6650...")
        raeume = await repo.find_all()
        await repo.update(raeume[0].record_id, {"kapazitaet": 30})
    """
    
    def __init__(
        self,
        model_cls: Type[T],
        service: LivingAppsService,
        app_id: str,
    ) -> None:
        """
        Initialize repository.
        
        Args:
            model_cls: The LivingAppsRecord subclass to work with.
            service: LivingAppsService instance (required).
            app_id: Id of the LivingApps app holding the records.
        """
        self._model_cls = model_cls
        self._service = service
        self._app_id = app_id
    
    @property
    def app_id(self) -> str:
        """Id of the app this repository reads and writes."""
        return self._app_id
    
    @property
    def model_cls(self) -> Type[T]:
        return self._model_cls
    
    def record_url(self, record_id: str) -> str:
        """Reference URL pointing at one of this app's records."""
        return RecordRef(self._app_id, record_id).to_url(self._service.base_url)
    
    async def find_all(self) -> List[T]:
        """
        Fetch all records of the app, in backend order.
        
        Returns:
            List of model instances.
        """
        records = await self._service.get_records(self._app_id)
        return [self._model_cls.from_api_record(r) for r in records]
    
    async def get(self, record_id: str) -> T:
        """Fetch a single record by id."""
        record = await self._service.get_record(self._app_id, record_id)
        return self._model_cls.from_api_record(record)
    
    async def create(self, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Create a new record.
        
        Returns:
            The backend response, if any.
        """
        result = await self._service.create_record(self._app_id, fields)
        logger.info(f"Created {self._model_cls.__name__} in app {self._app_id}")
        return result
    
    async def update(self, record_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update the given fields of a record."""
        result = await self._service.update_record(self._app_id, record_id, fields)
        logger.info(f"Updated {self._model_cls.__name__} ID {record_id}")
        return result
    
    async def delete(self, record_id: str) -> None:
        """Delete a record by id."""
        await self._service.delete_record(self._app_id, record_id)
        logger.info(f"Deleted {self._model_cls.__name__} ID {record_id}")
