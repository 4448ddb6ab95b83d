"""
Kursverwaltung Module.

Course administration dashboard over LivingApps: Kurse, Dozenten,
Teilnehmer, Räume and Anmeldungen.
"""

from modules.kursverwaltung.kursverwaltung_module import KursverwaltungModule, create_module

__all__ = ["KursverwaltungModule", "create_module"]
