"""
Entity Panel.

One generic panel drives the add/edit dialog, the delete confirmation and
the table of any of the five apps. Field behaviour comes from the record
model, texts and columns from PanelConfig.

States:
    IDLE -> EDITING -> SAVING -> IDLE
    IDLE -> CONFIRMING_DELETE -> DELETING -> IDLE

A failed save returns to EDITING with the draft intact; a failed delete
returns to CONFIRMING_DELETE. In both cases the error propagates.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from core.livingapps import FieldConversionError, FieldKind, LivingAppsError, LivingAppsRecord
from modules.kursverwaltung.services.data_access import KursverwaltungService
from modules.kursverwaltung.services.dashboard import DashboardSnapshot
from modules.kursverwaltung.services.panel_config import PANEL_CONFIGS, PanelConfig

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[], Awaitable[Any]]


class PanelState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    SAVING = "saving"
    CONFIRMING_DELETE = "confirming_delete"
    DELETING = "deleting"


class PanelStateError(RuntimeError):
    """Raised when an operation is not allowed in the panel's current state."""
    
    def __init__(self, operation: str, state: PanelState) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while panel is {state.value}")


class DraftValidationError(ValueError):
    """
    Raised when a draft cannot be submitted.
    
    Attributes:
        missing: Names of required fields that are empty.
        invalid: Field name -> message for values that cannot be converted.
    """
    
    def __init__(
        self,
        missing: Optional[List[str]] = None,
        invalid: Optional[Dict[str, str]] = None,
    ) -> None:
        self.missing = list(missing or [])
        self.invalid = dict(invalid or {})
        parts = []
        if self.missing:
            parts.append("Pflichtfelder fehlen: " + ", ".join(self.missing))
        parts.extend(self.invalid.values())
        super().__init__("; ".join(parts) or "Ungültige Eingabe")


@dataclass(frozen=True)
class TableRow:
    """A rendered table row."""
    
    record_id: str
    cells: Tuple[Tuple[str, str, str], ...]
    paid: Optional[bool] = None


class EntityPanel:
    """
    Dialog, confirmation and table state for one app.
    
    Args:
        config: Panel configuration (or app key).
        service: Data access facade.
        on_refresh: Awaited after every successful mutation, typically
            DashboardController.refresh.
    """
    
    def __init__(
        self,
        config: "PanelConfig | str",
        service: KursverwaltungService,
        on_refresh: Optional[RefreshCallback] = None,
    ) -> None:
        if isinstance(config, str):
            config = PANEL_CONFIGS[config]
        self.config = config
        self._service = service
        self._on_refresh = on_refresh
        
        self.state = PanelState.IDLE
        self.draft: Dict[str, Any] = {}
        self.editing_id: Optional[str] = None
        self.delete_id: Optional[str] = None
        self.loading = False
    
    # =========================================================================
    # Properties
    # =========================================================================
    
    @property
    def app_key(self) -> str:
        return self.config.app_key
    
    @property
    def dialog_open(self) -> bool:
        return self.state in (PanelState.EDITING, PanelState.SAVING)
    
    @property
    def confirm_open(self) -> bool:
        return self.state in (PanelState.CONFIRMING_DELETE, PanelState.DELETING)
    
    @property
    def dialog_title(self) -> str:
        return self.config.edit_title if self.editing_id else self.config.new_title
    
    @property
    def can_submit(self) -> bool:
        """Submit is enabled only with all required fields filled and no save running."""
        return (
            self.state is PanelState.EDITING
            and not self.loading
            and not self.missing_fields()
        )
    
    def _require(self, operation: str, *states: PanelState) -> None:
        if self.state not in states:
            raise PanelStateError(operation, self.state)
    
    async def _refresh(self) -> None:
        if self._on_refresh is None:
            return
        # The mutation already went through; a failed reload leaves the old snapshot
        try:
            await self._on_refresh()
        except LivingAppsError as e:
            logger.warning(f"Refresh after {self.app_key} change failed: {e}")
    
    # =========================================================================
    # Dialog
    # =========================================================================
    
    def empty_draft(self) -> Dict[str, Any]:
        return {name: f.default_draft_value() for name, f in self.config.fields.items()}
    
    def open_add(self) -> None:
        """Open the dialog with a fresh draft."""
        self._require("open add dialog", PanelState.IDLE)
        self.editing_id = None
        self.draft = self.empty_draft()
        self.state = PanelState.EDITING
    
    def open_edit(self, record: LivingAppsRecord) -> None:
        """Open the dialog seeded from an existing record."""
        self._require("open edit dialog", PanelState.IDLE)
        self.editing_id = record.record_id
        self.draft = {
            name: f.to_draft(getattr(record, name, None))
            for name, f in self.config.fields.items()
        }
        self.state = PanelState.EDITING
    
    def update_draft(self, values: Mapping[str, Any]) -> None:
        """Apply raw values for the given fields; unknown keys are ignored."""
        self._require("edit draft", PanelState.EDITING)
        fields = self.config.fields
        for name, raw in values.items():
            if name in fields:
                self.draft[name] = fields[name].parse_draft(raw)
    
    def load_form(self, form: Mapping[str, Any]) -> None:
        """
        Apply a submitted HTML form.
        
        Every field is taken from the form; an absent checkbox means False.
        """
        self._require("edit draft", PanelState.EDITING)
        for name, f in self.config.fields.items():
            if f.kind is FieldKind.CHECKBOX:
                self.draft[name] = f.parse_draft(form.get(name))
            else:
                self.draft[name] = f.parse_draft(form.get(name, ""))
    
    def close(self) -> None:
        """Cancel the dialog and discard the draft."""
        if self.state is PanelState.SAVING:
            raise PanelStateError("close dialog", self.state)
        self.state = PanelState.IDLE
        self.draft = {}
        self.editing_id = None
    
    def missing_fields(self) -> List[str]:
        """Names of required fields whose draft value is empty."""
        return [
            name
            for name, f in self.config.fields.items()
            if f.required and f.is_empty(self.draft.get(name))
        ]
    
    def missing_labels(self) -> List[str]:
        fields = self.config.fields
        return [fields[name].label for name in self.missing_fields()]
    
    def serialize(self) -> Dict[str, Any]:
        """
        Convert the draft into a LivingApps fields payload.
        
        Empty optional values are omitted.
        
        Raises:
            DraftValidationError: If a numeric value is unparsable or below
                its minimum, or a selected reference is not a record id.
        """
        payload: Dict[str, Any] = {}
        invalid: Dict[str, str] = {}
        
        for name, f in self.config.fields.items():
            try:
                value = f.to_payload(self.draft.get(name), self._service.create_record_url)
            except FieldConversionError as e:
                invalid[name] = str(e)
                continue
            if value is not None:
                payload[name] = value
        
        if invalid:
            raise DraftValidationError(invalid=invalid)
        return payload
    
    async def submit(self) -> Optional[Dict[str, Any]]:
        """
        Create or update the record from the draft.
        
        Returns:
            The backend response, if any.
        
        Raises:
            DraftValidationError: Required fields missing or values invalid.
            LivingAppsError: The remote call failed; the dialog stays open.
        """
        self._require("submit", PanelState.EDITING)
        
        missing = self.missing_fields()
        if missing:
            raise DraftValidationError(missing=missing)
        payload = self.serialize()
        
        self.state = PanelState.SAVING
        self.loading = True
        try:
            if self.editing_id:
                result = await self._service.update(self.app_key, self.editing_id, payload)
            else:
                result = await self._service.create(self.app_key, payload)
        except Exception as e:
            self.state = PanelState.EDITING
            logger.error(f"Saving {self.app_key} record failed: {e}")
            raise
        finally:
            self.loading = False
        
        self.state = PanelState.IDLE
        self.draft = {}
        self.editing_id = None
        await self._refresh()
        return result
    
    # =========================================================================
    # Delete
    # =========================================================================
    
    def request_delete(self, record_id: str) -> None:
        self._require("request delete", PanelState.IDLE)
        self.delete_id = record_id
        self.state = PanelState.CONFIRMING_DELETE
    
    def cancel_delete(self) -> None:
        self._require("cancel delete", PanelState.CONFIRMING_DELETE)
        self.delete_id = None
        self.state = PanelState.IDLE
    
    async def confirm_delete(self) -> None:
        """
        Delete the record awaiting confirmation.
        
        Raises:
            LivingAppsError: The remote call failed; the confirmation stays open.
        """
        self._require("confirm delete", PanelState.CONFIRMING_DELETE)
        
        self.state = PanelState.DELETING
        self.loading = True
        try:
            await self._service.delete(self.app_key, self.delete_id)
        except Exception as e:
            self.state = PanelState.CONFIRMING_DELETE
            logger.error(f"Deleting {self.app_key} record {self.delete_id} failed: {e}")
            raise
        finally:
            self.loading = False
        
        self.delete_id = None
        self.state = PanelState.IDLE
        await self._refresh()
    
    def delete_description(self, snapshot: Optional[DashboardSnapshot] = None) -> str:
        """Confirmation text; for courses it names the affected registrations."""
        text = self.config.delete_description
        if self.app_key == "kurse" and snapshot is not None and self.delete_id:
            count = len(snapshot.registrations_for_course(self.delete_id))
            if count:
                text = f"{text} Betroffene Anmeldungen: {count}."
        return text
    
    # =========================================================================
    # Payment toggle
    # =========================================================================
    
    async def toggle_paid(self, record: LivingAppsRecord) -> bool:
        """
        Flip "bezahlt" of a registration with a partial update.
        
        Failures are logged only.
        
        Returns:
            True if the update went through.
        """
        if not self.config.supports_toggle_paid:
            raise PanelStateError("toggle payment", self.state)
        
        try:
            await self._service.update(
                self.app_key, record.record_id, {"bezahlt": not record.bezahlt}
            )
        except LivingAppsError as e:
            logger.error(f"Failed to update payment status: {e}")
            return False
        
        await self._refresh()
        return True
    
    # =========================================================================
    # Rendering
    # =========================================================================
    
    def rows(self, snapshot: DashboardSnapshot) -> List[TableRow]:
        """Table rows in backend order."""
        rows = []
        for record in snapshot.collection(self.app_key):
            cells = tuple(
                (column.label, column.render(record, snapshot), column.css_class)
                for column in self.config.columns
            )
            paid = bool(record.bezahlt) if self.config.supports_toggle_paid else None
            rows.append(TableRow(record_id=record.record_id, cells=cells, paid=paid))
        return rows
    
    def options(self, snapshot: DashboardSnapshot) -> Dict[str, List[Tuple[str, str]]]:
        """(record_id, label) choices for each reference field."""
        choices: Dict[str, List[Tuple[str, str]]] = {}
        for f in self.config.reference_fields():
            label = PANEL_CONFIGS[f.reference_app].option_label
            choices[f.name] = [
                (record.record_id, label(record))
                for record in snapshot.collection(f.reference_app)
            ]
        return choices
