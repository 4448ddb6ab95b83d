"""
Kursverwaltung FastAPI Dependencies.

Usage:
    @router.get("/dashboard")
    async def dashboard(controller: DashboardControllerDep):
        await controller.refresh()
"""

from typing import Annotated

from fastapi import Depends, Request

from core.dependencies import LivingAppsServiceDep
from modules.kursverwaltung.core.config import get_kurs_settings
from modules.kursverwaltung.services.dashboard import DashboardController
from modules.kursverwaltung.services.data_access import KursverwaltungService


def get_kurs_service(livingapps: LivingAppsServiceDep) -> KursverwaltungService:
    """FastAPI dependency for the data access facade."""
    return KursverwaltungService(livingapps, get_kurs_settings())


def get_dashboard_controller(
    request: Request,
    service: Annotated[KursverwaltungService, Depends(get_kurs_service)],
) -> DashboardController:
    """
    FastAPI dependency for the app-wide dashboard controller.

    The controller is created on first use and kept in app state so the
    snapshot and its generation counter are shared by all requests.
    """
    controller = getattr(request.app.state, "kurs_dashboard", None)
    if controller is None:
        controller = DashboardController(service)
        request.app.state.kurs_dashboard = controller
    return controller


KursServiceDep = Annotated[KursverwaltungService, Depends(get_kurs_service)]
DashboardControllerDep = Annotated[DashboardController, Depends(get_dashboard_controller)]
