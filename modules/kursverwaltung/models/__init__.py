"""Kursverwaltung record models."""
from modules.kursverwaltung.models.entities import (
    RECORD_MODELS,
    Anmeldung,
    Dozent,
    Kurs,
    Raum,
    Teilnehmer,
)

__all__ = ["RECORD_MODELS", "Anmeldung", "Dozent", "Kurs", "Raum", "Teilnehmer"]
