"""
Kursverwaltung Module Entry Point.

Implements IAppModule interface for integration with the admin system framework.
Provides the course administration dashboard over the five LivingApps apps.
"""

import logging
from typing import Any, Optional, TYPE_CHECKING

from fastapi import APIRouter

from core.interface import IAppModule
from modules.kursverwaltung.core.config import get_kurs_settings
from modules.kursverwaltung.routers import api_router, pages_router

if TYPE_CHECKING:
    from core.app_context import AppContext

logger = logging.getLogger(__name__)


class KursverwaltungModule(IAppModule):
    """
    Course administration module.

    Features:
        - Dashboard with stat cards and one tab per app
        - Add/edit dialogs, delete confirmation, payment toggle
        - JSON API under /api/kursverwaltung
    """

    def __init__(self) -> None:
        self._context: Optional["AppContext"] = None
        self._api_router: Optional[APIRouter] = None
        self._settings = get_kurs_settings()

    def get_module_name(self) -> str:
        """Return module identifier."""
        return "kursverwaltung"

    def on_entry(self, context: "AppContext") -> None:
        """
        Initialize the module.

        Args:
            context: Application context from the main framework.
        """
        self._context = context
        logger.info("Kursverwaltung module initializing...")

        self._api_router = APIRouter(prefix="/kursverwaltung")
        self._api_router.include_router(api_router)

        if not context.config.is_livingapps_configured():
            context.log_event("LIVINGAPPS_BASE_URL not set, using default", "WARNING")

        context.log_event(
            f"Kursverwaltung module loaded ({len(self._settings.app_ids())} apps)",
            "KURSVERWALTUNG",
        )
        logger.info("Kursverwaltung module initialized")

    def get_api_router(self) -> Optional[APIRouter]:
        """Return the JSON API router (mounted under /api)."""
        return self._api_router

    def get_page_router(self) -> Optional[APIRouter]:
        """Return the HTML dashboard router."""
        return pages_router

    def get_status(self) -> dict[str, Any]:
        """Return current module status for monitoring."""
        return {
            "status": "active" if self._context is not None else "initializing",
            "details": {
                "Apps": str(len(self._settings.app_ids())),
                "Default Tab": self._settings.default_tab,
            },
        }

    def on_shutdown(self) -> None:
        """Cleanup when module is shutting down."""
        logger.info("Kursverwaltung module shutting down")
        self._context = None


# Module factory function for dynamic loading
def create_module() -> KursverwaltungModule:
    """Factory function for module instantiation."""
    return KursverwaltungModule()
