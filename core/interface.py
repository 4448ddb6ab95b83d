"""
IAppModule - contract between the framework and a feature module.

A module is a package under modules/ exporting a subclass of IAppModule.
The registry instantiates it, hands it the AppContext, and main.py mounts
the routers it returns.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from fastapi import APIRouter
    from core.app_context import AppContext


class IAppModule(ABC):
    """
    Pluggable feature module.

    Lifecycle:
        __init__()       no I/O, the module may be discovered but unused
        on_entry(ctx)    build routers, report to the event log
        on_shutdown()    release whatever on_entry acquired
    """

    @abstractmethod
    def get_module_name(self) -> str:
        """Unique registry key, also used as URL segment (e.g. 'kursverwaltung')."""

    @abstractmethod
    def on_entry(self, context: "AppContext") -> None:
        """
        Activate the module.

        Args:
            context: Shared configuration and event log.
        """

    def get_api_router(self) -> Optional["APIRouter"]:
        """JSON API router, mounted under /api. None if the module has no API."""
        return None

    def get_page_router(self) -> Optional["APIRouter"]:
        """HTML router, mounted at the root. None if the module renders no pages."""
        return None

    def on_shutdown(self) -> None:
        """Deactivate the module. Default does nothing."""

    def get_status(self) -> dict[str, Any]:
        """
        Status report for /api/status.

        Returns:
            {"status": "active" | "warning" | "error" | "initializing",
             "details": {label: value}}
        """
        return {"status": "active", "details": {}}
