"""Pydantic schemas for snapshot and connectivity pushes."""

from datetime import datetime

from pydantic import BaseModel, Field

from trustgate.services.snapshot import (
    AuthoritativeSnapshot,
    CachedAlert,
    CachedAppointment,
    CachedLabResult,
    CachedMedication,
    CachedProfile,
    CachedTimelineEvent,
    ConnectivityState,
    ModelState,
)


class MedicationSchema(BaseModel):
    name: str = Field(..., min_length=1)
    dose: str = Field(..., description="Dose as recorded, e.g. '500mg' or '10'")
    unit: str = Field("", description="Unit when recorded separately from the dose")
    frequency: str = ""
    prescriber: str = ""
    is_active: bool = True


class LabResultSchema(BaseModel):
    test_name: str = Field(..., min_length=1)
    value: float | str = Field(..., description="Numeric value, or text such as 'Negative'")
    unit: str = ""
    reference_min: float | None = None
    reference_max: float | None = None
    is_abnormal: bool = False
    tested_at: str = ""


class TimelineEventSchema(BaseModel):
    timestamp: str
    event_type: str
    title: str


class AlertSchema(BaseModel):
    title: str
    description: str = ""
    severity: str = "info"
    dismissed: bool = False


class AppointmentSchema(BaseModel):
    date: str
    doctor_name: str
    purpose: str = ""


class ProfileSchema(BaseModel):
    name: str
    blood_type: str | None = None
    allergies: list[str] = Field(default_factory=list)


class SnapshotPayload(BaseModel):
    """Full replacement snapshot pushed by the structured-data store after a sync."""

    medications: list[MedicationSchema] = Field(default_factory=list)
    labs: list[LabResultSchema] = Field(default_factory=list)
    timeline: list[TimelineEventSchema] = Field(default_factory=list)
    alerts: list[AlertSchema] = Field(default_factory=list)
    appointment: AppointmentSchema | None = None
    profile: ProfileSchema | None = None
    synced_at: datetime | None = None

    def to_snapshot(self) -> AuthoritativeSnapshot:
        return AuthoritativeSnapshot(
            medications=tuple(CachedMedication(**m.model_dump()) for m in self.medications),
            labs=tuple(CachedLabResult(**lab.model_dump()) for lab in self.labs),
            timeline=tuple(CachedTimelineEvent(**e.model_dump()) for e in self.timeline),
            alerts=tuple(CachedAlert(**a.model_dump()) for a in self.alerts),
            appointment=(
                CachedAppointment(**self.appointment.model_dump()) if self.appointment else None
            ),
            profile=(
                CachedProfile(
                    name=self.profile.name,
                    blood_type=self.profile.blood_type,
                    allergies=tuple(self.profile.allergies),
                )
                if self.profile
                else None
            ),
            synced_at=self.synced_at,
        )


class SnapshotSummary(BaseModel):
    """Section counts of the snapshot currently in use."""

    medications: int
    labs: int
    timeline: int
    alerts: int
    has_appointment: bool
    has_profile: bool
    synced_at: datetime | None = None

    @classmethod
    def from_snapshot(cls, snapshot: AuthoritativeSnapshot) -> "SnapshotSummary":
        return cls(
            medications=len(snapshot.medications),
            labs=len(snapshot.labs),
            timeline=len(snapshot.timeline),
            alerts=len(snapshot.alerts),
            has_appointment=snapshot.has_appointment,
            has_profile=snapshot.profile is not None,
            synced_at=snapshot.synced_at,
        )


class ConnectivitySchema(BaseModel):
    authoritative_reachable: bool = False
    local_model: ModelState = ModelState.UNLOADED

    def to_state(self) -> ConnectivityState:
        return ConnectivityState(
            authoritative_reachable=self.authoritative_reachable,
            local_model=self.local_model,
        )

    @classmethod
    def from_state(cls, state: ConnectivityState) -> "ConnectivitySchema":
        return cls(
            authoritative_reachable=state.authoritative_reachable,
            local_model=state.local_model,
        )
