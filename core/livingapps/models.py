"""
LivingApps Record Base Class.

Provides a declarative way to define LivingApps app structures,
similar to SQLAlchemy's declarative base.
"""

from typing import Any, ClassVar, Dict, Optional

from core.livingapps.fields import RecordField


class LivingAppsRecordMeta(type):
    """
    Metaclass for LivingAppsRecord.
    
    Collects RecordField definitions in declaration order.
    """
    
    def __new__(mcs, name: str, bases: tuple, namespace: dict) -> type:
        fields: Dict[str, RecordField] = {}
        
        # Parent fields first so subclasses keep the parent's column order
        for base in bases:
            if hasattr(base, "_fields"):
                fields.update(base._fields)
        
        for attr_name, attr_value in namespace.items():
            if isinstance(attr_value, RecordField):
                attr_value.name = attr_name
                fields[attr_name] = attr_value
        
        namespace["_fields"] = fields
        return super().__new__(mcs, name, bases, namespace)


class LivingAppsRecord(metaclass=LivingAppsRecordMeta):
    """
    Base class for LivingApps record models.
    
    Subclass this to define an app structure:
        
        class Raum(LivingAppsRecord):
            _app_key = "raeume"
            
            raumname = RecordField("Raumname", required=True)
            gebaeude = RecordField("Gebäude", required=True)
    
    Instances are read-only snapshots of a remote record.
    """
    
    # App key (must be defined in subclass, resolved to an app id by settings)
    _app_key: ClassVar[str] = ""
    
    # Field definitions (populated by metaclass)
    _fields: ClassVar[Dict[str, RecordField]] = {}
    
    def __init__(
        self,
        record_id: Optional[str] = None,
        created_at: Optional[str] = None,
        updated_at: Optional[str] = None,
        **data: Any,
    ) -> None:
        self.record_id = record_id
        self.created_at = created_at
        self.updated_at = updated_at
        for attr_name, field_def in self._fields.items():
            setattr(self, attr_name, field_def.convert_value(data.get(attr_name)))
    
    @classmethod
    def from_api_record(cls, record: Dict[str, Any]) -> "LivingAppsRecord":
        """
        Create an instance from a LivingApps API record.
        
        Args:
            record: Dict with "record_id", "createdat", "updatedat" and "fields".
        """
        raw_fields = record.get("fields") or {}
        data = {name: raw_fields.get(name) for name in cls._fields}
        return cls(
            record_id=record.get("record_id"),
            created_at=record.get("createdat"),
            updated_at=record.get("updatedat"),
            **data,
        )
    
    @classmethod
    def get_app_key(cls) -> str:
        """Get the app key for this model."""
        return cls._app_key
    
    @classmethod
    def get_fields(cls) -> Dict[str, RecordField]:
        """Get field definitions in declaration order."""
        return dict(cls._fields)
    
    @classmethod
    def get_field(cls, name: str) -> RecordField:
        """Get a single field definition."""
        return cls._fields[name]
    
    def field_values(self) -> Dict[str, Any]:
        """Current field values by attribute name."""
        return {name: getattr(self, name) for name in self._fields}
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LivingAppsRecord) or type(other) is not type(self):
            return NotImplemented
        return self.record_id == other.record_id and self.field_values() == other.field_values()
    
    def __hash__(self) -> int:
        return hash((type(self).__name__, self.record_id))
    
    def __repr__(self) -> str:
        fields_str = ", ".join(
            f"{name}={getattr(self, name, None)!r}"
            for name in list(self._fields.keys())[:3]
        )
        return f"{self.__class__.__name__}(record_id={self.record_id!r}, {fields_str})"
