"""
LivingApps Record References.

Reference fields in LivingApps hold a URL pointing at a record in another
app: ``{base_url}/apps/{app_id}/records/{record_id}``. Both ids are
24 character hex strings.

This module is the only place that builds or takes apart those URLs.
Writes go through a ``RecordRef`` (app id + record id) rendered with
``to_url()``; reads recover the bare record id with ``extract_record_id()``.
"""

import re
from dataclasses import dataclass
from typing import Optional

from core.livingapps.exceptions import LivingAppsConfigurationError

DEFAULT_BASE_URL = "https://my.living-apps.de/rest"

_RECORD_ID_PATTERN = re.compile(r"([a-f0-9]{24})$", re.IGNORECASE)
_OBJECT_ID_PATTERN = re.compile(r"^[a-f0-9]{24}$", re.IGNORECASE)


def is_object_id(value: Optional[str]) -> bool:
    """Check whether value looks like a LivingApps id (24 hex chars)."""
    return bool(value) and bool(_OBJECT_ID_PATTERN.match(value))


@dataclass(frozen=True)
class RecordRef:
    """
    Typed pointer to a record in another LivingApps app.
    
    Attributes:
        app_id: Id of the target app (collection).
        record_id: Id of the target record.
    """
    
    app_id: str
    record_id: str
    
    def to_url(self, base_url: str = DEFAULT_BASE_URL) -> str:
        """Render the reference as the URL LivingApps stores."""
        return create_record_url(self.app_id, self.record_id, base_url=base_url)


def extract_record_id(url: Optional[str]) -> Optional[str]:
    """
    Extract the trailing record id from a reference URL.
    
    Args:
        url: Reference field value, may be None or empty.
    
    Returns:
        The 24 character record id, or None if the value has none.
    """
    if not url:
        return None
    match = _RECORD_ID_PATTERN.search(url)
    return match.group(1) if match else None


def create_record_url(
    app_id: str,
    record_id: str,
    base_url: str = DEFAULT_BASE_URL,
) -> str:
    """
    Build the reference URL for a record.
    
    Args:
        app_id: Id of the target app.
        record_id: Id of the target record.
        base_url: LivingApps REST base URL.
    
    Raises:
        LivingAppsConfigurationError: If app_id is not a valid id.
    """
    if not is_object_id(app_id):
        raise LivingAppsConfigurationError(f"Invalid LivingApps app id: {app_id!r}")
    return f"{base_url.rstrip('/')}/apps/{app_id}/records/{record_id}"
