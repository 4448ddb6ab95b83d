"""
Conftest for Kursverwaltung Module Tests.

Provides an in-memory stand-in for KursverwaltungService and a sample data set:
three paid/unpaid registrations over three courses.
"""

from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio

from core.livingapps import LivingAppsAPIError, create_record_url
from modules.kursverwaltung.core.config import APP_KEYS, KursSettings
from modules.kursverwaltung.models import RECORD_MODELS
from modules.kursverwaltung.services.dashboard import DashboardController

BASE_URL = "https://la.test/rest"


def _oid(value: int) -> str:
    return f"{value:024x}"


IDS = {
    "dozent": _oid(0xD1),
    "raum": _oid(0xA1),
    "teilnehmer": _oid(0x71),
    "kurs_python": _oid(0xC1),
    "kurs_marketing": _oid(0xC2),
    "kurs_excel": _oid(0xC3),
    "anmeldung_paid_1": _oid(0xE1),
    "anmeldung_paid_2": _oid(0xE2),
    "anmeldung_open": _oid(0xE3),
}


class _FakeRepository:
    def __init__(self, service: "FakeKursService", app_key: str) -> None:
        self._service = service
        self._app_key = app_key

    async def get(self, record_id: str):
        self._service._check("get", self._app_key)
        raw = self._service.records[self._app_key].get(record_id)
        if raw is None:
            raise LivingAppsAPIError("not found", status_code=404)
        return RECORD_MODELS[self._app_key].from_api_record({**raw, "record_id": record_id})


class FakeKursService:
    """
    In-memory KursverwaltungService.

    Records are stored as raw LivingApps bodies. Every mutating call is
    appended to `calls`; operations listed in `fail` raise LivingAppsAPIError.
    """

    def __init__(self, settings: KursSettings) -> None:
        self.settings = settings
        self.records: Dict[str, Dict[str, dict]] = {key: {} for key in APP_KEYS}
        self.calls: List[tuple] = []
        self.fail: set = set()
        self.fetch_count = 0
        self._next_id = 0xF00

    def _check(self, operation: str, app_key: str) -> None:
        if operation in self.fail or f"{operation}:{app_key}" in self.fail:
            raise LivingAppsAPIError(f"{operation} failed", status_code=500)

    def url(self, app_key: str, record_id: str) -> str:
        return self.create_record_url(app_key, record_id)

    def add(self, app_key: str, record_id: str, **fields: Any) -> str:
        self.records[app_key][record_id] = {
            "createdat": "2024-01-01 10:00:00",
            "updatedat": "2024-01-01 10:00:00",
            "fields": fields,
        }
        return record_id

    # KursverwaltungService surface

    def create_record_url(self, app_key: str, record_id: str) -> str:
        return create_record_url(self.settings.app_id(app_key), record_id, base_url=BASE_URL)

    def repository(self, app_key: str) -> _FakeRepository:
        if app_key not in self.records:
            raise KeyError(app_key)
        return _FakeRepository(self, app_key)

    async def check_connection(self) -> dict:
        return {"status": "healthy", "message": "Connected", "details": {"Base URL": BASE_URL}}

    async def list_records(self, app_key: str):
        self._check("list", app_key)
        model = RECORD_MODELS[app_key]
        return [
            model.from_api_record({**raw, "record_id": record_id})
            for record_id, raw in self.records[app_key].items()
        ]

    async def create(self, app_key: str, fields: dict) -> Optional[dict]:
        self.calls.append(("create", app_key, fields))
        self._check("create", app_key)
        self._next_id += 1
        record_id = _oid(self._next_id)
        self.add(app_key, record_id, **fields)
        return {"id": record_id}

    async def update(self, app_key: str, record_id: str, fields: dict) -> Optional[dict]:
        self.calls.append(("update", app_key, record_id, fields))
        self._check("update", app_key)
        self.records[app_key][record_id]["fields"].update(fields)
        return None

    async def delete(self, app_key: str, record_id: str) -> None:
        self.calls.append(("delete", app_key, record_id))
        self._check("delete", app_key)
        self.records[app_key].pop(record_id, None)

    async def get_dozenten(self):
        self.fetch_count += 1
        return await self.list_records("dozenten")

    async def get_raeume(self):
        return await self.list_records("raeume")

    async def get_teilnehmer(self):
        return await self.list_records("teilnehmer")

    async def get_kurse(self):
        return await self.list_records("kurse")

    async def get_anmeldungen(self):
        return await self.list_records("anmeldungen")


@pytest.fixture
def ids() -> Dict[str, str]:
    """Record ids of the sample data set."""
    return dict(IDS)


@pytest.fixture
def kurs_settings() -> KursSettings:
    """Settings with the default app ids."""
    return KursSettings()


@pytest.fixture
def empty_service(kurs_settings) -> FakeKursService:
    """Fake service without records."""
    return FakeKursService(kurs_settings)


@pytest.fixture
def fake_service(kurs_settings) -> FakeKursService:
    """
    Fake service with sample data.

    Paid registrations for courses priced 100.00 and 150.00 and an
    open one for a course priced 200.00.
    """
    service = FakeKursService(kurs_settings)
    service.add(
        "dozenten", IDS["dozent"],
        name="Dr. Anna Weber", email="anna.weber@example.com", fachgebiet="Informatik",
    )
    service.add(
        "raeume", IDS["raum"],
        raumname="Seminarraum A", gebaeude="Hauptgebäude", kapazitaet=20,
    )
    service.add(
        "teilnehmer", IDS["teilnehmer"],
        name="Max Mustermann", email="max@example.com", geburtsdatum="1990-05-17",
    )
    for key, titel, preis in (
        ("kurs_python", "Python Grundlagen", 100.00),
        ("kurs_marketing", "Online Marketing", 150.00),
        ("kurs_excel", "Excel für Profis", 200.00),
    ):
        service.add(
            "kurse", IDS[key],
            titel=titel,
            startdatum="2024-03-01",
            enddatum="2024-03-05",
            max_teilnehmer=12,
            preis=preis,
            dozent=service.url("dozenten", IDS["dozent"]),
            raum=service.url("raeume", IDS["raum"]),
        )
    for key, kurs, bezahlt in (
        ("anmeldung_paid_1", "kurs_python", True),
        ("anmeldung_paid_2", "kurs_marketing", True),
        ("anmeldung_open", "kurs_excel", False),
    ):
        service.add(
            "anmeldungen", IDS[key],
            teilnehmer=service.url("teilnehmer", IDS["teilnehmer"]),
            kurs=service.url("kurse", IDS[kurs]),
            anmeldedatum="2024-02-10",
            bezahlt=bezahlt,
        )
    return service


@pytest_asyncio.fixture
async def loaded_controller(fake_service) -> DashboardController:
    """Controller with one applied refresh of the sample data."""
    controller = DashboardController(fake_service)
    await controller.refresh()
    return controller
