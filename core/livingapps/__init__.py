"""
Core LivingApps Data Layer.

Provides a framework-level abstraction for LivingApps API access,
similar to SQLAlchemy for databases.

Components:
    - RecordField: Field descriptor for defining app fields
    - LivingAppsRecord: Base class for defining app records
    - LivingAppsService: Low-level HTTP client
    - LivingAppsRepository: High-level data access pattern
    - RecordRef: Typed reference to a record in another app
"""

from core.livingapps.exceptions import (
    LivingAppsError,
    LivingAppsAPIError,
    LivingAppsConfigurationError,
    LivingAppsConnectionError,
)
from core.livingapps.fields import FieldConversionError, FieldKind, RecordField
from core.livingapps.models import LivingAppsRecord
from core.livingapps.references import (
    DEFAULT_BASE_URL,
    RecordRef,
    create_record_url,
    extract_record_id,
    is_object_id,
)
from core.livingapps.repository import LivingAppsRepository
from core.livingapps.service import LivingAppsService

__all__ = [
    # Exceptions
    "LivingAppsError",
    "LivingAppsAPIError",
    "LivingAppsConfigurationError",
    "LivingAppsConnectionError",
    # Fields / models
    "FieldConversionError",
    "FieldKind",
    "RecordField",
    "LivingAppsRecord",
    # References
    "DEFAULT_BASE_URL",
    "RecordRef",
    "create_record_url",
    "extract_record_id",
    "is_object_id",
    # Data access
    "LivingAppsRepository",
    "LivingAppsService",
]
