"""
Kursverwaltung Record Models.

Declarative definitions of the five LivingApps apps. Field names are the
LivingApps field identifiers; labels are the German UI labels.
"""

from datetime import date

from core.livingapps import FieldKind, LivingAppsRecord, RecordField


def _today_iso() -> str:
    return date.today().isoformat()


class Dozent(LivingAppsRecord):
    """Instructor."""

    _app_key = "dozenten"

    name = RecordField("Name", required=True, placeholder="Max Mustermann")
    email = RecordField("E-Mail", FieldKind.EMAIL, required=True, placeholder="max@example.com")
    telefon = RecordField("Telefon", FieldKind.TEL, placeholder="+49 123 456789")
    fachgebiet = RecordField("Fachgebiet", placeholder="z.B. Informatik, Marketing")


class Raum(LivingAppsRecord):
    """Room."""

    _app_key = "raeume"

    raumname = RecordField("Raumname", required=True, placeholder="z.B. Seminarraum A")
    gebaeude = RecordField("Gebäude", required=True, placeholder="z.B. Hauptgebäude")
    kapazitaet = RecordField(
        "Kapazität", FieldKind.INTEGER, required=True, min_value=1, placeholder="z.B. 20"
    )


class Teilnehmer(LivingAppsRecord):
    """Participant."""

    _app_key = "teilnehmer"

    name = RecordField("Name", required=True, placeholder="Anna Beispiel")
    email = RecordField("E-Mail", FieldKind.EMAIL, required=True, placeholder="anna@example.com")
    telefon = RecordField("Telefon", FieldKind.TEL, placeholder="+49 123 456789")
    geburtsdatum = RecordField("Geburtsdatum", FieldKind.DATE)


class Kurs(LivingAppsRecord):
    """Course, held by one Dozent in one Raum."""

    _app_key = "kurse"

    titel = RecordField("Titel", required=True, placeholder="z.B. Einführung in Python")
    beschreibung = RecordField("Beschreibung", FieldKind.TEXTAREA, placeholder="Kursbeschreibung...")
    startdatum = RecordField("Startdatum", FieldKind.DATE, required=True)
    enddatum = RecordField("Enddatum", FieldKind.DATE, required=True)
    max_teilnehmer = RecordField(
        "Max. Teilnehmer", FieldKind.INTEGER, required=True, min_value=1, placeholder="z.B. 20"
    )
    preis = RecordField(
        "Preis (€)", FieldKind.DECIMAL, required=True, min_value=0, step="0.01",
        placeholder="z.B. 299.00",
    )
    dozent = RecordField("Dozent", FieldKind.REFERENCE, required=True, reference_app="dozenten")
    raum = RecordField("Raum", FieldKind.REFERENCE, required=True, reference_app="raeume")


class Anmeldung(LivingAppsRecord):
    """Registration of one Teilnehmer for one Kurs."""

    _app_key = "anmeldungen"

    teilnehmer = RecordField(
        "Teilnehmer", FieldKind.REFERENCE, required=True, reference_app="teilnehmer"
    )
    kurs = RecordField("Kurs", FieldKind.REFERENCE, required=True, reference_app="kurse")
    anmeldedatum = RecordField(
        "Anmeldedatum", FieldKind.DATE, required=True, default_factory=_today_iso
    )
    bezahlt = RecordField("Bezahlt", FieldKind.CHECKBOX)


RECORD_MODELS = {
    model.get_app_key(): model
    for model in (Dozent, Raum, Teilnehmer, Kurs, Anmeldung)
}
