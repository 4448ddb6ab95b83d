"""
Kursverwaltung API Schemas.

Pydantic models for the JSON API request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field

from core.livingapps import LivingAppsRecord


class RecordResponse(BaseModel):
    """One record with converted field values."""

    record_id: Optional[str] = Field(None, description="24 hex character record id")
    created_at: Optional[str] = Field(None, description="Creation timestamp from LivingApps")
    updated_at: Optional[str] = Field(None, description="Last update timestamp from LivingApps")
    fields: dict[str, Any] = Field(default_factory=dict, description="Field values by field name")

    @classmethod
    def from_record(cls, record: LivingAppsRecord) -> "RecordResponse":
        fields = {
            name: float(value) if isinstance(value, Decimal) else value
            for name, value in record.field_values().items()
        }
        return cls(
            record_id=record.record_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
            fields=fields,
        )


class StatsResponse(BaseModel):
    """Stat card values."""

    total_revenue: float = Field(..., description="Sum of course prices of paid registrations")
    revenue_display: str = Field(..., examples=["250 €"])
    paid_count: int
    total_registrations: int
    paid_display: str = Field(..., examples=["2/3"])
    counts: dict[str, int] = Field(default_factory=dict, description="Records per app key")


class DashboardResponse(BaseModel):
    """The current snapshot together with its statistics."""

    generation: int = Field(..., description="Refresh generation the snapshot came from")
    loaded_at: Optional[datetime] = None
    stats: StatsResponse
    collections: dict[str, list[RecordResponse]]


class FieldSchema(BaseModel):
    """Form field definition."""

    name: str
    label: str
    kind: str
    input_type: str
    required: bool = False
    reference_app: Optional[str] = None
    placeholder: str = ""
    min_value: Optional[float] = None
    step: Optional[str] = None


class PanelSchemaResponse(BaseModel):
    """Texts, columns and form fields of one tab."""

    app_key: str
    title: str
    subtitle: str
    add_label: str
    new_title: str
    edit_title: str
    empty_title: str
    empty_description: str
    delete_title: str
    delete_description: str
    columns: list[str]
    fields: list[FieldSchema]


class RecordDraftRequest(BaseModel):
    """Raw draft values as entered in a form."""

    fields: dict[str, Any] = Field(default_factory=dict, description="Draft values by field name")


class MutationResponse(BaseModel):
    """Result of a create, update, delete or toggle."""

    success: bool
    message: str
    record_id: Optional[str] = None
    result: Optional[dict[str, Any]] = None
