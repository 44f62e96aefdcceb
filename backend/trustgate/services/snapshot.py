"""Authoritative snapshot of the user's structured records.

The structured-data store owns the records; this layer only ever reads a
complete, immutable copy of them. Connectivity and local model health are
reported the same way.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol

from trustgate.config import settings

logger = logging.getLogger("trustgate")


@dataclass(frozen=True)
class CachedMedication:
    """A medication as recorded by the structured-data store."""

    name: str
    dose: str  # "500mg", "10 units"
    unit: str = ""
    frequency: str = ""
    prescriber: str = ""
    is_active: bool = True

    @property
    def dose_text(self) -> str:
        """Dose with its unit, however the store split them."""
        if self.unit and not self.dose.strip().lower().endswith(self.unit.lower()):
            return f"{self.dose.strip()} {self.unit}"
        return self.dose.strip()


@dataclass(frozen=True)
class CachedLabResult:
    """A lab result; ``value`` is numeric when the lab reported a number."""

    test_name: str
    value: float | str
    unit: str = ""
    reference_min: float | None = None
    reference_max: float | None = None
    is_abnormal: bool = False
    tested_at: str = ""

    @property
    def numeric_value(self) -> float | None:
        if isinstance(self.value, bool):
            return None
        if isinstance(self.value, (int, float)):
            return float(self.value)
        try:
            return float(str(self.value).strip())
        except ValueError:
            return None


@dataclass(frozen=True)
class CachedTimelineEvent:
    timestamp: str
    event_type: str
    title: str


@dataclass(frozen=True)
class CachedAlert:
    title: str
    description: str = ""
    severity: str = "info"
    dismissed: bool = False


@dataclass(frozen=True)
class CachedAppointment:
    date: str
    doctor_name: str
    purpose: str = ""


@dataclass(frozen=True)
class CachedProfile:
    name: str
    blood_type: str | None = None
    allergies: tuple[str, ...] = ()


@dataclass(frozen=True)
class AuthoritativeSnapshot:
    """Point-in-time copy of the user's records used for verification."""

    medications: tuple[CachedMedication, ...] = ()
    labs: tuple[CachedLabResult, ...] = ()
    timeline: tuple[CachedTimelineEvent, ...] = ()
    alerts: tuple[CachedAlert, ...] = ()
    appointment: CachedAppointment | None = None
    profile: CachedProfile | None = None
    synced_at: datetime | None = None

    @property
    def has_medications(self) -> bool:
        return len(self.medications) > 0

    @property
    def has_labs(self) -> bool:
        return len(self.labs) > 0

    @property
    def has_timeline(self) -> bool:
        return len(self.timeline) > 0

    @property
    def has_alerts(self) -> bool:
        """Only undismissed alerts count."""
        return any(not alert.dismissed for alert in self.alerts)

    @property
    def has_appointment(self) -> bool:
        return self.appointment is not None

    @property
    def has_data(self) -> bool:
        """True when any answerable section holds records."""
        return (
            self.has_medications
            or self.has_labs
            or self.has_timeline
            or self.has_alerts
            or self.has_appointment
        )

    def find_medication(self, name: str) -> CachedMedication | None:
        wanted = name.strip().lower()
        for medication in self.medications:
            if medication.name.strip().lower() == wanted:
                return medication
        return None

    def find_lab(self, test_name: str) -> CachedLabResult | None:
        wanted = test_name.strip().lower()
        for lab in self.labs:
            if lab.test_name.strip().lower() == wanted:
                return lab
        return None


EMPTY_SNAPSHOT = AuthoritativeSnapshot()


class ModelState(str, Enum):
    """Local model lifecycle as reported by the model host."""

    UNLOADED = "unloaded"
    DOWNLOADING = "downloading"
    READY = "ready"


@dataclass(frozen=True)
class ConnectivityState:
    """Which answer sources can currently be reached."""

    authoritative_reachable: bool = False
    local_model: ModelState = ModelState.UNLOADED

    @property
    def local_model_ready(self) -> bool:
        return self.local_model is ModelState.READY


class SnapshotStore(Protocol):
    def get_snapshot(self) -> AuthoritativeSnapshot:
        ...

    def replace_snapshot(self, snapshot: AuthoritativeSnapshot) -> None:
        ...

    def get_connectivity(self) -> ConnectivityState:
        ...

    def set_connectivity(self, state: ConnectivityState) -> None:
        ...


@dataclass
class InMemorySnapshotStore:
    """Holds the latest snapshot pushed by the structured-data store.

    Snapshots are immutable and swapped whole, so a reader never observes a
    half-applied sync.
    """

    _snapshot: AuthoritativeSnapshot = EMPTY_SNAPSHOT
    _connectivity: ConnectivityState = field(default_factory=ConnectivityState)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get_snapshot(self) -> AuthoritativeSnapshot:
        return self._snapshot

    def replace_snapshot(self, snapshot: AuthoritativeSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot
        logger.info(
            "Snapshot replaced medications=%d labs=%d timeline=%d alerts=%d",
            len(snapshot.medications),
            len(snapshot.labs),
            len(snapshot.timeline),
            len(snapshot.alerts),
        )

    def get_connectivity(self) -> ConnectivityState:
        return self._connectivity

    def set_connectivity(self, state: ConnectivityState) -> None:
        with self._lock:
            self._connectivity = state
        logger.info(
            "Connectivity updated authoritative_reachable=%s local_model=%s",
            state.authoritative_reachable,
            state.local_model.value,
        )


def initial_connectivity() -> ConnectivityState:
    """Connectivity assumed at startup, before the first status push."""
    try:
        model_state = ModelState(settings.local_model_state.lower())
    except ValueError:
        logger.warning(
            "Unknown LOCAL_MODEL_STATE %r, assuming unloaded", settings.local_model_state
        )
        model_state = ModelState.UNLOADED
    return ConnectivityState(
        authoritative_reachable=settings.authoritative_reachable,
        local_model=model_state,
    )
