"""
LivingApps-specific exceptions.

Custom exception classes for LivingApps configuration and operation errors.
"""


class LivingAppsError(Exception):
    """Base exception for LivingApps-related errors."""
    pass


class LivingAppsConfigurationError(LivingAppsError):
    """
    Raised when LivingApps configuration is missing or invalid.
    
    Examples:
        - App id is not a 24 character hex string
        - Reference URL points to an unknown app
    """
    
    def __init__(self, message: str, app_key: str | None = None) -> None:
        self.app_key = app_key
        super().__init__(message)


class LivingAppsConnectionError(LivingAppsError):
    """Raised when the LivingApps API cannot be reached."""
    pass


class LivingAppsAPIError(LivingAppsError):
    """
    Raised when the LivingApps API answers with an error status.
    
    Attributes:
        status_code: HTTP status code returned by the API.
        body: Raw response body (truncated for logging).
    """
    
    def __init__(self, message: str, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)
