"""
Kursverwaltung JSON API Router.

Endpoints mirroring the dashboard operations for programmatic access.
Mounted under /api/kursverwaltung.
"""

import logging
from typing import Any, NoReturn

from fastapi import APIRouter, HTTPException, status

from core.livingapps import LivingAppsAPIError, LivingAppsError, LivingAppsRecord
from modules.kursverwaltung.core.dependencies import DashboardControllerDep, KursServiceDep
from modules.kursverwaltung.schemas import (
    DashboardResponse,
    FieldSchema,
    MutationResponse,
    PanelSchemaResponse,
    RecordDraftRequest,
    RecordResponse,
    StatsResponse,
)
from modules.kursverwaltung.services import (
    PANEL_CONFIGS,
    TAB_ORDER,
    DashboardController,
    DraftValidationError,
    EntityPanel,
    KursverwaltungService,
    PanelConfig,
    compute_stats,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Kursverwaltung"])


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


def _raise_remote_error(e: LivingAppsError) -> NoReturn:
    if isinstance(e, LivingAppsAPIError) and e.status_code == 404:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Datensatz nicht gefunden",
        )
    raise HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"LivingApps request failed: {e}",
    )


def _raise_validation_error(e: DraftValidationError) -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": str(e), "missing": e.missing, "invalid": e.invalid},
    )


async def _load_record(
    service: KursverwaltungService, entity: str, record_id: str
) -> LivingAppsRecord:
    try:
        return await service.repository(entity).get(record_id)
    except LivingAppsError as e:
        _raise_remote_error(e)


def _panel_schema(config: PanelConfig) -> PanelSchemaResponse:
    return PanelSchemaResponse(
        app_key=config.app_key,
        title=config.title,
        subtitle=config.subtitle,
        add_label=config.add_label,
        new_title=config.new_title,
        edit_title=config.edit_title,
        empty_title=config.empty_title,
        empty_description=config.empty_description,
        delete_title=config.delete_title,
        delete_description=config.delete_description,
        columns=[column.label for column in config.columns],
        fields=[
            FieldSchema(
                name=f.name,
                label=f.label,
                kind=f.kind.value,
                input_type=f.kind.input_type,
                required=f.required,
                reference_app=f.reference_app,
                placeholder=f.placeholder,
                min_value=float(f.min_value) if f.min_value is not None else None,
                step=f.step,
            )
            for f in config.fields.values()
        ],
    )


def _dashboard_response(controller: DashboardController) -> DashboardResponse:
    snapshot = controller.snapshot
    stats = compute_stats(snapshot)
    return DashboardResponse(
        generation=snapshot.generation,
        loaded_at=snapshot.loaded_at,
        stats=StatsResponse(
            total_revenue=float(stats.total_revenue),
            revenue_display=stats.revenue_display,
            paid_count=stats.paid_count,
            total_registrations=stats.total_registrations,
            paid_display=stats.paid_display,
            counts=stats.counts,
        ),
        collections={
            key: [RecordResponse.from_record(r) for r in snapshot.collection(key)]
            for key in TAB_ORDER
        },
    )


# =============================================================================
# Dashboard
# =============================================================================

@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Dashboard snapshot",
    description="Re-fetch all five collections and return them with the stat card values.",
)
async def get_dashboard(controller: DashboardControllerDep) -> DashboardResponse:
    try:
        await controller.refresh()
    except LivingAppsError as e:
        _raise_remote_error(e)
    return _dashboard_response(controller)


@router.get(
    "/schema",
    response_model=list[PanelSchemaResponse],
    summary="Panel schemas",
)
async def get_schema() -> list[PanelSchemaResponse]:
    """Texts, columns and form fields of all tabs, in tab order."""
    return [_panel_schema(PANEL_CONFIGS[key]) for key in TAB_ORDER]


@router.get("/status", summary="LivingApps connectivity")
async def get_status(service: KursServiceDep) -> dict[str, Any]:
    return await service.check_connection()


# =============================================================================
# Payment toggle
# =============================================================================

@router.post(
    "/anmeldungen/{record_id}/toggle-bezahlt",
    response_model=MutationResponse,
    summary="Toggle payment status",
)
async def toggle_bezahlt(
    record_id: str,
    service: KursServiceDep,
    controller: DashboardControllerDep,
) -> MutationResponse:
    """
    Flip "bezahlt" of a registration.

    A failed update is logged and reported with success=false.
    """
    record = await _load_record(service, "anmeldungen", record_id)
    panel = EntityPanel("anmeldungen", service, on_refresh=controller.refresh)
    updated = await panel.toggle_paid(record)
    if not updated:
        return MutationResponse(
            success=False,
            message="Zahlungsstatus konnte nicht aktualisiert werden",
            record_id=record_id,
        )
    return MutationResponse(
        success=True,
        message="Bezahlt" if not record.bezahlt else "Offen",
        record_id=record_id,
    )


# =============================================================================
# Records
# =============================================================================

@router.get(
    "/{entity}",
    response_model=list[RecordResponse],
    summary="List records",
)
async def list_records(entity: str, service: KursServiceDep) -> list[RecordResponse]:
    """All records of one app, in backend order."""
    _get_config(entity)
    try:
        records = await service.list_records(entity)
    except LivingAppsError as e:
        _raise_remote_error(e)
    return [RecordResponse.from_record(r) for r in records]


@router.post(
    "/{entity}",
    response_model=MutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create record",
)
async def create_record(
    entity: str,
    body: RecordDraftRequest,
    service: KursServiceDep,
    controller: DashboardControllerDep,
) -> MutationResponse:
    """
    Create a record from draft values.

    Fields not given keep their add-dialog defaults.
    """
    config = _get_config(entity)
    panel = EntityPanel(config, service, on_refresh=controller.refresh)
    panel.open_add()
    panel.update_draft(body.fields)

    try:
        result = await panel.submit()
    except DraftValidationError as e:
        _raise_validation_error(e)
    except LivingAppsError as e:
        _raise_remote_error(e)

    logger.info(f"Created {entity} record via API")
    return MutationResponse(success=True, message=f"{config.title}: gespeichert", result=result)


@router.patch(
    "/{entity}/{record_id}",
    response_model=MutationResponse,
    summary="Update record",
)
async def update_record(
    entity: str,
    record_id: str,
    body: RecordDraftRequest,
    service: KursServiceDep,
    controller: DashboardControllerDep,
) -> MutationResponse:
    """Update a record; fields not given keep their stored values."""
    config = _get_config(entity)
    record = await _load_record(service, entity, record_id)

    panel = EntityPanel(config, service, on_refresh=controller.refresh)
    panel.open_edit(record)
    panel.update_draft(body.fields)

    try:
        result = await panel.submit()
    except DraftValidationError as e:
        _raise_validation_error(e)
    except LivingAppsError as e:
        _raise_remote_error(e)

    return MutationResponse(
        success=True,
        message=f"{config.title}: gespeichert",
        record_id=record_id,
        result=result,
    )


@router.delete(
    "/{entity}/{record_id}",
    response_model=MutationResponse,
    summary="Delete record",
)
async def delete_record(
    entity: str,
    record_id: str,
    service: KursServiceDep,
    controller: DashboardControllerDep,
) -> MutationResponse:
    """Delete a record. Registrations of a deleted course are left untouched."""
    config = _get_config(entity)
    panel = EntityPanel(config, service, on_refresh=controller.refresh)
    panel.request_delete(record_id)

    try:
        await panel.confirm_delete()
    except LivingAppsError as e:
        _raise_remote_error(e)

    return MutationResponse(
        success=True,
        message=f"{config.title}: gelöscht",
        record_id=record_id,
    )
