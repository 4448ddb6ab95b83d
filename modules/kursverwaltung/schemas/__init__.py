"""
Kursverwaltung Module Schemas.

Pydantic models for request/response validation.
"""

from modules.kursverwaltung.schemas.dashboard import (
    DashboardResponse,
    FieldSchema,
    MutationResponse,
    PanelSchemaResponse,
    RecordDraftRequest,
    RecordResponse,
    StatsResponse,
)

__all__ = [
    "DashboardResponse",
    "FieldSchema",
    "MutationResponse",
    "PanelSchemaResponse",
    "RecordDraftRequest",
    "RecordResponse",
    "StatsResponse",
]
