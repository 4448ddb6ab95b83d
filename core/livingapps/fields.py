"""
LivingApps Field Descriptors.

Defines metadata for LivingApps record fields, similar to SQLAlchemy Column.
A field knows its label, its input kind and how to convert values between
the API representation, the draft (form) representation and the payload.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Optional

from core.livingapps.references import extract_record_id, is_object_id


class FieldKind(str, Enum):
    """Input kind of a record field."""
    
    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    TEXTAREA = "textarea"
    DATE = "date"
    INTEGER = "integer"
    DECIMAL = "decimal"
    REFERENCE = "reference"
    CHECKBOX = "checkbox"
    
    def __str__(self) -> str:
        return self.value
    
    @property
    def input_type(self) -> str:
        """HTML input type used to render this kind."""
        if self in (FieldKind.INTEGER, FieldKind.DECIMAL):
            return "number"
        if self is FieldKind.TEXTAREA:
            return "textarea"
        if self is FieldKind.REFERENCE:
            return "select"
        return self.value


class FieldConversionError(ValueError):
    """Raised when a draft value cannot be converted for the payload."""
    
    def __init__(self, field_name: str, message: str) -> None:
        self.field_name = field_name
        super().__init__(message)


@dataclass
class RecordField:
    """
    Represents a field in a LivingApps app.
    
    Attributes:
        label: German display label (e.g., "E-Mail").
        kind: Input kind, drives conversion and rendering.
        required: Whether the field must be non-empty before submit.
        reference_app: App key of the referenced collection (references only).
        placeholder: Placeholder text for the input.
        min_value: Lower bound for numeric inputs.
        step: Step for numeric inputs.
        default_factory: Callable producing the draft default on "add".
    
    Example:
        class Raum(LivingAppsRecord):
            raumname = RecordField("Raumname", required=True)
            kapazitaet = RecordField("Kapazität", FieldKind.INTEGER, required=True, min_value=1)
    """
    
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    reference_app: Optional[str] = None
    placeholder: str = ""
    min_value: Optional[Decimal] = None
    step: Optional[str] = None
    default_factory: Optional[Callable[[], Any]] = None
    
    # Internal: attribute name set by the record metaclass
    name: str = field(default="", repr=False)
    
    def __post_init__(self) -> None:
        if self.kind is FieldKind.REFERENCE and not self.reference_app:
            raise ValueError(f"Reference field '{self.label}' needs a reference_app")
        if self.min_value is not None:
            self.min_value = Decimal(str(self.min_value))
    
    # =========================================================================
    # API -> Python
    # =========================================================================
    
    def convert_value(self, value: Any) -> Any:
        """Convert a raw API value to the appropriate Python type."""
        if value is None or value == "":
            return False if self.kind is FieldKind.CHECKBOX else None
        
        if self.kind is FieldKind.CHECKBOX:
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                return value.lower() in ("true", "1", "yes", "on")
            return bool(value)
        
        if self.kind is FieldKind.INTEGER:
            try:
                return int(value)
            except (ValueError, TypeError):
                return None
        
        if self.kind is FieldKind.DECIMAL:
            try:
                return Decimal(str(value))
            except InvalidOperation:
                return None
        
        return str(value)
    
    # =========================================================================
    # Python -> Draft
    # =========================================================================
    
    def default_draft_value(self) -> Any:
        """Draft value used when opening an empty "add" dialog."""
        if self.default_factory is not None:
            return self.default_factory()
        return False if self.kind is FieldKind.CHECKBOX else ""
    
    def to_draft(self, value: Any) -> Any:
        """Render a stored value for an edit form."""
        if self.kind is FieldKind.CHECKBOX:
            return bool(value)
        if value is None:
            return ""
        if self.kind is FieldKind.REFERENCE:
            return extract_record_id(value) or ""
        if self.kind is FieldKind.DECIMAL and isinstance(value, Decimal):
            return format(value, "f")
        return str(value)
    
    def parse_draft(self, raw: Any) -> Any:
        """Normalise a raw form value into a draft value."""
        if self.kind is FieldKind.CHECKBOX:
            if isinstance(raw, bool):
                return raw
            if raw is None:
                return False
            return str(raw).lower() in ("true", "1", "yes", "on")
        if raw is None:
            return ""
        return str(raw).strip()
    
    def is_empty(self, draft_value: Any) -> bool:
        """Existence check used to gate submit."""
        if self.kind is FieldKind.CHECKBOX:
            return False
        return draft_value is None or str(draft_value).strip() == ""
    
    # =========================================================================
    # Draft -> Payload
    # =========================================================================
    
    def to_payload(
        self,
        draft_value: Any,
        reference_url: Optional[Callable[[str, str], str]] = None,
    ) -> Any:
        """
        Convert a draft value into the value sent to LivingApps.
        
        Args:
            draft_value: Value from the draft form.
            reference_url: Callable (app_key, record_id) -> URL, required for
                reference fields.
        
        Returns:
            The payload value, or None if the field should be omitted.
        
        Raises:
            FieldConversionError: If a numeric value cannot be parsed or
                violates min_value, or a reference is not a record id.
        """
        if self.kind is FieldKind.CHECKBOX:
            return bool(draft_value)
        
        if self.is_empty(draft_value):
            return None
        
        text = str(draft_value).strip()
        
        if self.kind is FieldKind.INTEGER:
            try:
                number = int(text)
            except ValueError:
                raise FieldConversionError(self.name, f"{self.label}: keine ganze Zahl")
            self._check_min(Decimal(number))
            return number
        
        if self.kind is FieldKind.DECIMAL:
            try:
                number = Decimal(text.replace(",", "."))
            except InvalidOperation:
                raise FieldConversionError(self.name, f"{self.label}: keine Zahl")
            if not number.is_finite():
                raise FieldConversionError(self.name, f"{self.label}: keine Zahl")
            self._check_min(number)
            return float(number)
        
        if self.kind is FieldKind.REFERENCE:
            if reference_url is None:
                raise ValueError(f"reference_url is required for field '{self.name}'")
            if not is_object_id(text):
                raise FieldConversionError(self.name, f"{self.label}: ungültige Auswahl")
            return reference_url(self.reference_app, text)
        
        return text
    
    def _check_min(self, number: Decimal) -> None:
        if self.min_value is not None and number < self.min_value:
            raise FieldConversionError(
                self.name, f"{self.label}: mindestens {self.min_value}"
            )
