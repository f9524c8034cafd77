"""
Anthropometry evaluation service.

Runs the save flow for an evaluation: validate the protocol's required
measurements, compute body composition, build the history record and
reconcile it into the patient's history. Nothing is persisted here; the
caller stores the returned values.
"""

import logging
from datetime import date
from typing import List, Optional, Sequence

from pydantic import BaseModel

from app.domain.anthropometry import (
    ComputedResult,
    HistoryRecord,
    MeasurementSet,
    PatientProfile,
)
from app.domain.protocols import resolve_protocol
from app.services.body_fat_calculator import BodyFatCalculator
from app.services.history_service import reconcile_history
from app.services.measurement_validator import ensure_complete

logger = logging.getLogger(__name__)


class SaveResult(BaseModel):
    """Everything the caller needs to persist after a successful save."""

    measurements: MeasurementSet
    result: ComputedResult
    record: HistoryRecord
    history: List[HistoryRecord]


class AnthropometryService:
    """Service for computing and finalizing anthropometric evaluations."""

    def __init__(self):
        self.calculator = BodyFatCalculator()

    def compute(
        self,
        patient: PatientProfile,
        measurements: MeasurementSet,
        protocol: Optional[str] = None,
        as_of: Optional[date] = None,
    ) -> ComputedResult:
        """
        Compute the provisional result for the current form values.

        Never validates and never raises for incomplete input.
        """
        age = self.calculator.calculate_age(patient.birth_date, as_of)
        return self.calculator.compute(measurements, age, patient.gender, protocol)

    def save_measurement(
        self,
        patient: PatientProfile,
        measurements: MeasurementSet,
        history: Sequence[HistoryRecord] = (),
        editing_date: Optional[str] = None,
        as_of: Optional[date] = None,
    ) -> SaveResult:
        """
        Finalize an evaluation.

        Args:
            patient: Patient demographics
            measurements: Measurements to save
            history: Current evaluation history
            editing_date: Date of the history entry being edited, if any
            as_of: Reference date (defaults to today); used for age and as the
                record date when the measurements carry no procedure date

        Returns:
            SaveResult with the finalized measurements, computed result, new
            history record and reconciled history

        Raises:
            IncompleteMeasurementError: If required skinfolds are missing for
                the selected protocol
        """
        if as_of is None:
            as_of = date.today()

        definition = resolve_protocol(measurements.protocol)
        ensure_complete(measurements, definition.key.value, patient.gender)

        result = self.compute(patient, measurements, definition.key.value, as_of)

        record_date = measurements.procedure_date or as_of.isoformat()
        record = HistoryRecord(
            date=record_date,
            weight=measurements.weight,
            height=measurements.height,
            bmi=result.bmi,
            waist_circumference=measurements.circ_waist,
            body_fat_percentage=result.body_fat_percentage,
            fat_mass=result.fat_mass,
            lean_mass=result.lean_mass,
        )

        updated_history = reconcile_history(
            history, record, editing_date or record_date
        )

        finalized = measurements.model_copy(
            update={"protocol": definition.key.value, "procedure_date": record_date}
        )

        logger.info(
            f"[SAVE] Evaluation {record_date} finalized with {definition.key.value} "
            f"(body fat {result.body_fat_percentage}%, history size {len(updated_history)})"
        )

        return SaveResult(
            measurements=finalized,
            result=result,
            record=record,
            history=updated_history,
        )
