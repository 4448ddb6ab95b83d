"""
Kursverwaltung Module Services.
"""

from modules.kursverwaltung.services.data_access import KursverwaltungService
from modules.kursverwaltung.services.dashboard import (
    DashboardController,
    DashboardSnapshot,
    DashboardStats,
    compute_stats,
)
from modules.kursverwaltung.services.panel_config import (
    PANEL_CONFIGS,
    TAB_ORDER,
    Column,
    PanelConfig,
    get_panel_config,
)
from modules.kursverwaltung.services.panels import (
    DraftValidationError,
    EntityPanel,
    PanelState,
    PanelStateError,
    TableRow,
)

__all__ = [
    "KursverwaltungService",
    "DashboardController",
    "DashboardSnapshot",
    "DashboardStats",
    "compute_stats",
    "PANEL_CONFIGS",
    "TAB_ORDER",
    "Column",
    "PanelConfig",
    "get_panel_config",
    "DraftValidationError",
    "EntityPanel",
    "PanelState",
    "PanelStateError",
    "TableRow",
]
