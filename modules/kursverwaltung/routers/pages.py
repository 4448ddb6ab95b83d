"""
Kursverwaltung Page Router.

Serves the server-rendered dashboard. Dialogs and confirmations are opened
through query parameters; form posts redirect back to the tab on success
(post/redirect/get) and re-render the open dialog on failure.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from core.livingapps import LivingAppsError
from modules.kursverwaltung.core.config import get_kurs_settings
from modules.kursverwaltung.core.dependencies import DashboardControllerDep, KursServiceDep
from modules.kursverwaltung.services import (
    PANEL_CONFIGS,
    TAB_ORDER,
    DashboardController,
    DraftValidationError,
    EntityPanel,
    PanelConfig,
    compute_stats,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/kursverwaltung", tags=["Kursverwaltung Pages"])

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
STATIC_DIR = Path(__file__).parent.parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

STATIC_MEDIA_TYPES = {
    ".css": "text/css",
    ".js": "application/javascript",
}

LOAD_ERROR = "Die Daten konnten nicht geladen werden. Bitte versuchen Sie es erneut."
SAVE_ERROR = "Speichern fehlgeschlagen. Bitte versuchen Sie es erneut."
DELETE_ERROR = "Löschen fehlgeschlagen. Bitte versuchen Sie es erneut."


# =============================================================================
# Helpers
# =============================================================================

def _get_config(entity: str) -> PanelConfig:
    config = PANEL_CONFIGS.get(entity)
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown entity '{entity}'",
        )
    return config


def _resolve_tab(tab: Optional[str]) -> str:
    if tab in PANEL_CONFIGS:
        return tab
    return get_kurs_settings().default_tab


def _tab_url(tab: str, **params: str) -> str:
    query = "&".join(f"{key}={value}" for key, value in params.items())
    url = f"{router.prefix}/?tab={tab}"
    return f"{url}&{query}" if query else url


def _stat_cards(controller: DashboardController) -> list[dict[str, Any]]:
    stats = compute_stats(controller.snapshot)
    return [
        {"label": "Einnahmen (bezahlt)", "value": stats.revenue_display, "icon": "euro", "primary": True},
        {"label": "Kurse", "value": stats.counts["kurse"], "icon": "book-open"},
        {"label": "Dozenten", "value": stats.counts["dozenten"], "icon": "graduation-cap"},
        {"label": "Teilnehmer", "value": stats.counts["teilnehmer"], "icon": "users"},
        {"label": "Räume", "value": stats.counts["raeume"], "icon": "door-open"},
        {"label": "Anmeldungen", "value": stats.paid_display, "icon": "clipboard-list"},
    ]


def _render(
    request: Request,
    controller: DashboardController,
    panel: EntityPanel,
    error: Optional[str] = None,
    form_error: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    snapshot = controller.snapshot
    context = {
        "title": "Kursverwaltung",
        "subtitle": "Verwalten Sie Kurse, Dozenten, Teilnehmer und Anmeldungen",
        "tabs": [PANEL_CONFIGS[key] for key in TAB_ORDER],
        "active_tab": panel.app_key,
        "stat_cards": _stat_cards(controller),
        "panel": panel,
        "config": panel.config,
        "rows": panel.rows(snapshot),
        "options": panel.options(snapshot),
        "fields": list(panel.config.fields.values()),
        "delete_description": panel.delete_description(snapshot),
        "error": error,
        "form_error": form_error,
        "base_path": router.prefix,
    }
    return templates.TemplateResponse(request, "dashboard.html", context, status_code=status_code)


# =============================================================================
# Dashboard
# =============================================================================

@router.get(
    "/",
    response_class=HTMLResponse,
    summary="Kursverwaltung Dashboard",
    description="Stat cards, tabs and dialogs of the course administration.",
)
async def dashboard_page(
    request: Request,
    service: KursServiceDep,
    controller: DashboardControllerDep,
    tab: Optional[str] = Query(None, description="Active tab (app key)"),
    dialog: Optional[str] = Query(None, description="'add' or 'edit'"),
    record_id: Optional[str] = Query(None, alias="id", description="Record to edit"),
    delete: Optional[str] = Query(None, description="Record awaiting delete confirmation"),
) -> HTMLResponse:
    """Re-fetch everything and render the requested tab."""
    active = _resolve_tab(tab)
    error = None

    try:
        await controller.refresh()
    except LivingAppsError as e:
        logger.error(f"Dashboard load failed: {e}")
        error = LOAD_ERROR

    panel = EntityPanel(active, service)
    snapshot = controller.snapshot

    if dialog == "add":
        panel.open_add()
    elif dialog == "edit" and record_id:
        record = snapshot.find(active, record_id)
        if record is not None:
            panel.open_edit(record)
        else:
            error = error or "Datensatz nicht gefunden."
    elif delete:
        panel.request_delete(delete)

    return _render(request, controller, panel, error=error)


# =============================================================================
# Form posts
# =============================================================================

@router.post("/anmeldungen/{record_id}/toggle-bezahlt", summary="Toggle payment status")
async def toggle_bezahlt(
    record_id: str,
    service: KursServiceDep,
    controller: DashboardControllerDep,
) -> RedirectResponse:
    """Flip "bezahlt" of a registration; failures are logged only."""
    record = controller.snapshot.find("anmeldungen", record_id)
    if record is None:
        try:
            record = await service.repository("anmeldungen").get(record_id)
        except LivingAppsError as e:
            logger.error(f"Failed to update payment status: {e}")
            record = None

    if record is not None:
        panel = EntityPanel("anmeldungen", service)
        await panel.toggle_paid(record)

    return RedirectResponse(url=_tab_url("anmeldungen"), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/{entity}/save", response_class=HTMLResponse, summary="Save record")
async def save_record(
    request: Request,
    entity: str,
    service: KursServiceDep,
    controller: DashboardControllerDep,
) -> Response:
    """
    Create (no record_id) or update (record_id given) a record from the
    dialog form. Every field is taken from the form.
    """
    config = _get_config(entity)
    form = await request.form()
    record_id = (form.get("record_id") or "").strip() or None

    panel = EntityPanel(config, service)
    if record_id:
        panel.open_edit(config.model(record_id=record_id))
    else:
        panel.open_add()
    panel.load_form(form)

    try:
        await panel.submit()
    except DraftValidationError as e:
        return _render(
            request, controller, panel,
            form_error=str(e),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    except LivingAppsError:
        return _render(
            request, controller, panel,
            form_error=SAVE_ERROR,
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    return RedirectResponse(url=_tab_url(entity), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/{entity}/{record_id}/delete", response_class=HTMLResponse, summary="Delete record")
async def delete_record(
    request: Request,
    entity: str,
    record_id: str,
    service: KursServiceDep,
    controller: DashboardControllerDep,
) -> Response:
    """Delete a confirmed record; on failure the confirmation stays open."""
    config = _get_config(entity)
    panel = EntityPanel(config, service)
    panel.request_delete(record_id)

    try:
        await panel.confirm_delete()
    except LivingAppsError:
        return _render(
            request, controller, panel,
            form_error=DELETE_ERROR,
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    return RedirectResponse(url=_tab_url(entity), status_code=status.HTTP_303_SEE_OTHER)


# =============================================================================
# Static assets
# =============================================================================

@router.get("/static/{filename}", response_class=FileResponse, include_in_schema=False)
async def serve_static(filename: str) -> FileResponse:
    """Serve the dashboard stylesheet and script."""
    path = STATIC_DIR / filename
    media_type = STATIC_MEDIA_TYPES.get(path.suffix)

    if media_type is None or path.parent != STATIC_DIR or not path.exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    return FileResponse(path=path, media_type=media_type)
