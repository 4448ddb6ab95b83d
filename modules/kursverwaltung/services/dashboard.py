"""
Kursverwaltung Dashboard Controller.

Loads the five collections as one immutable snapshot and derives the stat
card values from it.

Refresh protocol:
    Every refresh() takes a new generation number before fetching. A finished
    fetch replaces the snapshot only if no newer generation has been applied
    in the meantime; otherwise its result is dropped and the caller receives
    the snapshot that is current.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple

from core.livingapps import LivingAppsRecord, extract_record_id
from modules.kursverwaltung.models import Anmeldung, Dozent, Kurs, Raum, Teilnehmer
from modules.kursverwaltung.services.data_access import KursverwaltungService
from modules.kursverwaltung.services.formatting import format_revenue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSnapshot:
    """All five collections as fetched together, in backend order."""

    dozenten: Tuple[Dozent, ...] = ()
    raeume: Tuple[Raum, ...] = ()
    teilnehmer: Tuple[Teilnehmer, ...] = ()
    kurse: Tuple[Kurs, ...] = ()
    anmeldungen: Tuple[Anmeldung, ...] = ()
    generation: int = 0
    loaded_at: Optional[datetime] = None

    def collection(self, app_key: str) -> Tuple[LivingAppsRecord, ...]:
        """
        Records of one app.

        Raises:
            KeyError: If the app key is unknown.
        """
        if app_key not in ("dozenten", "raeume", "teilnehmer", "kurse", "anmeldungen"):
            raise KeyError(app_key)
        return getattr(self, app_key)

    def find(self, app_key: str, record_id: Optional[str]) -> Optional[LivingAppsRecord]:
        """Record by id, or None."""
        if not record_id:
            return None
        for record in self.collection(app_key):
            if record.record_id == record_id:
                return record
        return None

    def resolve(self, app_key: str, reference: Optional[str]) -> Optional[LivingAppsRecord]:
        """Record a reference URL points to, or None if it is not loaded."""
        return self.find(app_key, extract_record_id(reference))

    def registrations_for_course(self, kurs_id: str) -> Tuple[Anmeldung, ...]:
        return tuple(a for a in self.anmeldungen if extract_record_id(a.kurs) == kurs_id)


@dataclass(frozen=True)
class DashboardStats:
    """Values shown on the stat cards."""

    total_revenue: Decimal = Decimal("0")
    paid_count: int = 0
    total_registrations: int = 0
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def revenue_display(self) -> str:
        return format_revenue(self.total_revenue)

    @property
    def paid_display(self) -> str:
        return f"{self.paid_count}/{self.total_registrations}"


def compute_stats(snapshot: DashboardSnapshot) -> DashboardStats:
    """
    Derive the stat card values.

    Revenue sums the course price of every paid registration. A registration
    whose course is not loaded, or whose course has no price, adds nothing.
    """
    courses = {kurs.record_id: kurs for kurs in snapshot.kurse}

    total = Decimal("0")
    paid_count = 0
    for anmeldung in snapshot.anmeldungen:
        if anmeldung.bezahlt is not True:
            continue
        paid_count += 1
        kurs = courses.get(extract_record_id(anmeldung.kurs))
        if kurs is not None and kurs.preis is not None:
            total += kurs.preis

    return DashboardStats(
        total_revenue=total,
        paid_count=paid_count,
        total_registrations=len(snapshot.anmeldungen),
        counts={
            "kurse": len(snapshot.kurse),
            "dozenten": len(snapshot.dozenten),
            "teilnehmer": len(snapshot.teilnehmer),
            "raeume": len(snapshot.raeume),
            "anmeldungen": len(snapshot.anmeldungen),
        },
    )


class DashboardController:
    """
    Owns the current snapshot and its refresh cycle.

    Args:
        service: Data access facade used for every fetch.
    """

    def __init__(self, service: KursverwaltungService) -> None:
        self._service = service
        self._snapshot = DashboardSnapshot()
        self._generation = 0
        self._loaded = False

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self._snapshot

    @property
    def stats(self) -> DashboardStats:
        return compute_stats(self._snapshot)

    @property
    def has_loaded(self) -> bool:
        """Whether any refresh has been applied yet."""
        return self._loaded

    async def fetch_all(self, generation: int = 0) -> DashboardSnapshot:
        """
        Fetch all five collections concurrently.

        Any failing call fails the whole fetch; no partial snapshot is built.
        """
        service = self._service
        dozenten, raeume, teilnehmer, kurse, anmeldungen = await asyncio.gather(
            service.get_dozenten(),
            service.get_raeume(),
            service.get_teilnehmer(),
            service.get_kurse(),
            service.get_anmeldungen(),
        )
        return DashboardSnapshot(
            dozenten=tuple(dozenten),
            raeume=tuple(raeume),
            teilnehmer=tuple(teilnehmer),
            kurse=tuple(kurse),
            anmeldungen=tuple(anmeldungen),
            generation=generation,
            loaded_at=datetime.now(),
        )

    async def refresh(self) -> DashboardSnapshot:
        """
        Re-fetch everything and apply the result unless it is stale.

        Raises:
            LivingAppsError: If any of the five fetches fails. The current
                snapshot is left untouched.
        """
        self._generation += 1
        generation = self._generation

        try:
            snapshot = await self.fetch_all(generation)
        except Exception as e:
            logger.error(f"Dashboard refresh #{generation} failed: {e}")
            raise

        if generation > self._snapshot.generation:
            self._snapshot = snapshot
            self._loaded = True
            logger.debug(f"Dashboard refresh #{generation} applied")
        else:
            logger.debug(
                f"Dashboard refresh #{generation} discarded, "
                f"#{self._snapshot.generation} already applied"
            )
        return self._snapshot
