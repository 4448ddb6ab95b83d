"""
Panel Configuration.

Declarative description of the five entity tabs: German UI texts, table
columns and reference option labels. EntityPanel renders any of them.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple, Type

from core.livingapps import FieldKind, LivingAppsRecord, RecordField
from modules.kursverwaltung.models import RECORD_MODELS
from modules.kursverwaltung.services.formatting import EMPTY, format_date, format_price

if TYPE_CHECKING:
    from modules.kursverwaltung.services.dashboard import DashboardSnapshot

CellRenderer = Callable[[LivingAppsRecord, "DashboardSnapshot"], str]


@dataclass(frozen=True)
class Column:
    """One table column."""

    label: str
    render: CellRenderer
    css_class: str = ""


@dataclass(frozen=True)
class PanelConfig:
    """UI texts and table layout for one app."""

    app_key: str
    title: str
    subtitle: str
    add_label: str
    new_title: str
    edit_title: str
    empty_title: str
    empty_description: str
    delete_title: str
    delete_description: str
    columns: Tuple[Column, ...]
    option_label: Callable[[LivingAppsRecord], str]
    icon: str = ""
    select_placeholders: Dict[str, str] = field(default_factory=dict)

    @property
    def model(self) -> Type[LivingAppsRecord]:
        return RECORD_MODELS[self.app_key]

    @property
    def fields(self) -> Dict[str, RecordField]:
        return self.model.get_fields()

    @property
    def supports_toggle_paid(self) -> bool:
        return self.app_key == "anmeldungen"

    def reference_fields(self) -> List[RecordField]:
        return [f for f in self.fields.values() if f.kind is FieldKind.REFERENCE]


# =============================================================================
# Cell helpers
# =============================================================================

def _text(name: str) -> CellRenderer:
    def render(record: LivingAppsRecord, snapshot: "DashboardSnapshot") -> str:
        value = getattr(record, name)
        return str(value) if value not in (None, "") else EMPTY
    return render


def _date(name: str) -> CellRenderer:
    def render(record: LivingAppsRecord, snapshot: "DashboardSnapshot") -> str:
        return format_date(getattr(record, name))
    return render


def _reference(name: str, app_key: str, display: Callable[[LivingAppsRecord], Optional[str]]) -> CellRenderer:
    def render(record: LivingAppsRecord, snapshot: "DashboardSnapshot") -> str:
        target = snapshot.resolve(app_key, getattr(record, name))
        if target is None:
            return EMPTY
        return display(target) or EMPTY
    return render


def _zeitraum(record: LivingAppsRecord, snapshot: "DashboardSnapshot") -> str:
    return f"{format_date(record.startdatum)} – {format_date(record.enddatum)}"


def _preis(record: LivingAppsRecord, snapshot: "DashboardSnapshot") -> str:
    return format_price(record.preis)


def _kapazitaet(record: LivingAppsRecord, snapshot: "DashboardSnapshot") -> str:
    if record.kapazitaet is None:
        return EMPTY
    return f"{record.kapazitaet} Plätze"


def _raum_name(raum: LivingAppsRecord) -> str:
    return f"{raum.raumname} ({raum.gebaeude})"


def _bezahlt(record: LivingAppsRecord, snapshot: "DashboardSnapshot") -> str:
    return "Bezahlt" if record.bezahlt else "Offen"


# =============================================================================
# Option labels
# =============================================================================

def dozent_option(dozent: LivingAppsRecord) -> str:
    if dozent.fachgebiet:
        return f"{dozent.name} ({dozent.fachgebiet})"
    return dozent.name or ""


def raum_option(raum: LivingAppsRecord) -> str:
    return f"{raum.raumname} ({raum.gebaeude}) – {raum.kapazitaet} Plätze"


def teilnehmer_option(teilnehmer: LivingAppsRecord) -> str:
    return f"{teilnehmer.name} ({teilnehmer.email})"


def kurs_option(kurs: LivingAppsRecord) -> str:
    return f"{kurs.titel} ({format_date(kurs.startdatum)})"


def anmeldung_option(anmeldung: LivingAppsRecord) -> str:
    return format_date(anmeldung.anmeldedatum)


_IRREVERSIBLE = "Diese Aktion kann nicht rückgängig gemacht werden."


PANEL_CONFIGS: Dict[str, PanelConfig] = {
    "kurse": PanelConfig(
        app_key="kurse",
        title="Kurse",
        subtitle="Verwalten Sie Ihre Kursangebote",
        add_label="Kurs hinzufügen",
        new_title="Neuer Kurs",
        edit_title="Kurs bearbeiten",
        empty_title="Keine Kurse",
        empty_description="Fügen Sie Ihren ersten Kurs hinzu, um loszulegen.",
        delete_title="Kurs löschen",
        delete_description=(
            "Möchten Sie diesen Kurs wirklich löschen? "
            "Alle zugehörigen Anmeldungen werden ebenfalls betroffen."
        ),
        columns=(
            Column("Titel", _text("titel"), "font-medium"),
            Column("Zeitraum", _zeitraum, "muted"),
            Column("Dozent", _reference("dozent", "dozenten", lambda d: d.name)),
            Column("Raum", _reference("raum", "raeume", _raum_name)),
            Column("Max. TN", _text("max_teilnehmer"), "badge-muted"),
            Column("Preis", _preis, "font-medium"),
        ),
        option_label=kurs_option,
        icon="book-open",
        select_placeholders={"dozent": "Dozent auswählen", "raum": "Raum auswählen"},
    ),
    "dozenten": PanelConfig(
        app_key="dozenten",
        title="Dozenten",
        subtitle="Verwalten Sie Ihre Kursleiter",
        add_label="Dozent hinzufügen",
        new_title="Neuer Dozent",
        edit_title="Dozent bearbeiten",
        empty_title="Keine Dozenten",
        empty_description="Fügen Sie Ihren ersten Dozenten hinzu, um loszulegen.",
        delete_title="Dozent löschen",
        delete_description=f"Möchten Sie diesen Dozenten wirklich löschen? {_IRREVERSIBLE}",
        columns=(
            Column("Name", _text("name"), "font-medium"),
            Column("E-Mail", _text("email")),
            Column("Telefon", _text("telefon")),
            Column("Fachgebiet", _text("fachgebiet"), "badge-muted"),
        ),
        option_label=dozent_option,
        icon="graduation-cap",
    ),
    "teilnehmer": PanelConfig(
        app_key="teilnehmer",
        title="Teilnehmer",
        subtitle="Verwalten Sie Ihre Kursteilnehmer",
        add_label="Teilnehmer hinzufügen",
        new_title="Neuer Teilnehmer",
        edit_title="Teilnehmer bearbeiten",
        empty_title="Keine Teilnehmer",
        empty_description="Fügen Sie Ihren ersten Teilnehmer hinzu, um loszulegen.",
        delete_title="Teilnehmer löschen",
        delete_description=f"Möchten Sie diesen Teilnehmer wirklich löschen? {_IRREVERSIBLE}",
        columns=(
            Column("Name", _text("name"), "font-medium"),
            Column("E-Mail", _text("email")),
            Column("Telefon", _text("telefon")),
            Column("Geburtsdatum", _date("geburtsdatum")),
        ),
        option_label=teilnehmer_option,
        icon="users",
    ),
    "raeume": PanelConfig(
        app_key="raeume",
        title="Räume",
        subtitle="Verwalten Sie Ihre Schulungsräume",
        add_label="Raum hinzufügen",
        new_title="Neuer Raum",
        edit_title="Raum bearbeiten",
        empty_title="Keine Räume",
        empty_description="Fügen Sie Ihren ersten Raum hinzu, um loszulegen.",
        delete_title="Raum löschen",
        delete_description=f"Möchten Sie diesen Raum wirklich löschen? {_IRREVERSIBLE}",
        columns=(
            Column("Raumname", _text("raumname"), "font-medium"),
            Column("Gebäude", _text("gebaeude")),
            Column("Kapazität", _kapazitaet, "badge-muted"),
        ),
        option_label=raum_option,
        icon="door-open",
    ),
    "anmeldungen": PanelConfig(
        app_key="anmeldungen",
        title="Anmeldungen",
        subtitle="Verwalten Sie Kursanmeldungen",
        add_label="Anmeldung hinzufügen",
        new_title="Neue Anmeldung",
        edit_title="Anmeldung bearbeiten",
        empty_title="Keine Anmeldungen",
        empty_description="Erstellen Sie die erste Kursanmeldung.",
        delete_title="Anmeldung löschen",
        delete_description=f"Möchten Sie diese Anmeldung wirklich löschen? {_IRREVERSIBLE}",
        columns=(
            Column("Teilnehmer", _reference("teilnehmer", "teilnehmer", lambda t: t.name), "font-medium"),
            Column("Kurs", _reference("kurs", "kurse", lambda k: k.titel)),
            Column("Anmeldedatum", _date("anmeldedatum"), "muted"),
            Column("Bezahlt", _bezahlt, "paid-toggle"),
        ),
        option_label=anmeldung_option,
        icon="clipboard-list",
        select_placeholders={"teilnehmer": "Teilnehmer auswählen", "kurs": "Kurs auswählen"},
    ),
}

# Tab order of the dashboard
TAB_ORDER: Tuple[str, ...] = ("kurse", "dozenten", "teilnehmer", "raeume", "anmeldungen")


def get_panel_config(app_key: str) -> PanelConfig:
    """
    Panel configuration for an app key.

    Raises:
        KeyError: If the app key is unknown.
    """
    return PANEL_CONFIGS[app_key]
