"""
Anthropometry value objects.

MeasurementSet is the raw input (form draft or persisted record). Numeric
fields are optional and never NaN: empty, unparseable and non-finite input is
normalized to None at construction time, so absence stays distinct from zero.
"""

import math
from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

CIRCUMFERENCE_FIELDS = (
    "circ_neck",
    "circ_chest",
    "circ_waist",
    "circ_abdomen",
    "circ_hip",
    "circ_arm",
    "circ_thigh",
    "circ_calf",
)

SKINFOLD_FIELDS = (
    "skinfold_chest",
    "skinfold_axillary",
    "skinfold_triceps",
    "skinfold_biceps",
    "skinfold_subscapular",
    "skinfold_abdominal",
    "skinfold_suprailiac",
    "skinfold_thigh",
    "skinfold_calf",
)

NUMERIC_FIELDS = ("weight", "height") + CIRCUMFERENCE_FIELDS + SKINFOLD_FIELDS


def parse_measurement(value: Any) -> Optional[float]:
    """
    Normalize a raw measurement to a finite float or None.

    Accepts numbers and numeric strings (comma or dot decimal separator).
    Empty strings, unparseable strings, booleans, NaN and infinities become None.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None

    if not isinstance(value, (int, float)):
        return None

    value = float(value)
    if not math.isfinite(value):
        return None
    return value


class MeasurementSet(BaseModel):
    """Raw body measurements for one evaluation."""

    weight: Optional[float] = Field(None, description="Weight in kilograms")
    height: Optional[float] = Field(None, description="Height in meters")

    # Circumferences (cm)
    circ_neck: Optional[float] = None
    circ_chest: Optional[float] = None
    circ_waist: Optional[float] = None
    circ_abdomen: Optional[float] = None
    circ_hip: Optional[float] = None
    circ_arm: Optional[float] = None
    circ_thigh: Optional[float] = None
    circ_calf: Optional[float] = None

    # Skinfolds (mm)
    skinfold_chest: Optional[float] = None
    skinfold_axillary: Optional[float] = None
    skinfold_triceps: Optional[float] = None
    skinfold_biceps: Optional[float] = None
    skinfold_subscapular: Optional[float] = None
    skinfold_abdominal: Optional[float] = None
    skinfold_suprailiac: Optional[float] = None
    skinfold_thigh: Optional[float] = None
    skinfold_calf: Optional[float] = None

    protocol: Optional[str] = Field(None, description="Skinfold protocol identifier")
    procedure_date: Optional[str] = Field(
        None, description="Date the evaluation was performed"
    )

    class Config:
        frozen = True

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def normalize_numeric(cls, value: Any) -> Optional[float]:
        return parse_measurement(value)

    @field_validator("protocol", "procedure_date", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def has_minimum_data(self) -> bool:
        """Weight and height are the minimum for any derived metric."""
        return bool(self.weight) and bool(self.height)


class ComputedResult(BaseModel):
    """Derived body-composition metrics. Zero means not computable."""

    bmi: float = 0.0
    waist_to_hip_ratio: float = 0.0
    body_density: float = 0.0
    body_fat_percentage: float = 0.0
    fat_mass: float = 0.0
    lean_mass: float = 0.0

    class Config:
        frozen = True


class HistoryRecord(BaseModel):
    """One finalized evaluation in the longitudinal series, keyed by date."""

    date: str
    weight: Optional[float] = None
    height: Optional[float] = None
    bmi: float = 0.0
    waist_circumference: Optional[float] = None
    body_fat_percentage: Optional[float] = None
    fat_mass: Optional[float] = None
    lean_mass: Optional[float] = None

    class Config:
        frozen = True


class PatientProfile(BaseModel):
    """Patient data the engine needs from the host's patient record."""

    name: str = ""
    gender: Optional[str] = Field(None, description='"Masculino" or "Feminino"')
    birth_date: Optional[date] = None
    clinical_goal: str = ""
    active_diagnoses: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @field_validator("birth_date", mode="before")
    @classmethod
    def blank_birth_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
