"""
Kursverwaltung Routers Package.
"""

from modules.kursverwaltung.routers.api import router as api_router
from modules.kursverwaltung.routers.pages import router as pages_router

__all__ = [
    "api_router",
    "pages_router",
]
