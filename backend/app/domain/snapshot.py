"""
Anthropometry snapshot schemas.

A snapshot is the fully resolved, read-only view handed to the AI narrative
service and the report renderer. Every model here is frozen and serializes with
camelCase keys (``weightKg``, ``bodyComp``, ...), the shape both consumers
expect.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class SnapshotModel(BaseModel):
    """Base for frozen, camelCase-serialized snapshot parts."""

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class SnapshotSource(str, Enum):
    """Where the snapshot data came from."""

    PERSISTED = "persisted"
    FORM = "form"
    NONE = "none"


class SnapshotPatient(SnapshotModel):
    name: str = ""
    gender: Optional[str] = None
    age: int = 0


class SnapshotClinical(SnapshotModel):
    objective: str = ""
    active_diagnoses: Tuple[str, ...] = ()


class CircumferencesCm(SnapshotModel):
    neck: Optional[float] = None
    chest: Optional[float] = None
    waist: Optional[float] = None
    abdomen: Optional[float] = None
    hip: Optional[float] = None
    arm: Optional[float] = None
    thigh: Optional[float] = None
    calf: Optional[float] = None


class SkinfoldsMm(SnapshotModel):
    chest: Optional[float] = None
    midaxillary: Optional[float] = None
    triceps: Optional[float] = None
    biceps: Optional[float] = None
    subscapular: Optional[float] = None
    abdominal: Optional[float] = None
    suprailiac: Optional[float] = None
    thigh: Optional[float] = None
    calf: Optional[float] = None


class BodyComposition(SnapshotModel):
    bmi: float = 0.0
    whr: float = 0.0
    body_fat_pct: float = 0.0
    fat_mass_kg: float = 0.0
    lean_mass_kg: float = 0.0


class SnapshotAnthro(SnapshotModel):
    date: str
    protocol: str
    weight_kg: float
    height_m: float
    body_comp: BodyComposition
    circumferences_cm: CircumferencesCm
    skinfolds_mm: SkinfoldsMm


class AnthroSnapshot(SnapshotModel):
    """Immutable view of a patient's current anthropometric state."""

    patient: SnapshotPatient
    clinical: SnapshotClinical
    anthro: SnapshotAnthro


class SnapshotResult(SnapshotModel):
    """Outcome of a snapshot build. ``snapshot`` is None when source is NONE."""

    snapshot: Optional[AnthroSnapshot] = None
    source: SnapshotSource = SnapshotSource.NONE
    warnings: Tuple[str, ...] = ()
