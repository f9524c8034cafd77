"""
Anthropometry snapshot builder.

Assembles the immutable snapshot consumed by the AI narrative analysis and the
report renderer, so both see identical values for the same request. In-progress
form data takes precedence over the persisted evaluation.
"""

import logging
from datetime import date
from typing import Optional

from app.domain.anthropometry import MeasurementSet, PatientProfile
from app.domain.protocols import resolve_protocol
from app.domain.snapshot import (
    AnthroSnapshot,
    BodyComposition,
    CircumferencesCm,
    SkinfoldsMm,
    SnapshotAnthro,
    SnapshotClinical,
    SnapshotPatient,
    SnapshotResult,
    SnapshotSource,
)
from app.services.body_fat_calculator import BodyFatCalculator

logger = logging.getLogger(__name__)

WARNING_PATIENT_NOT_FOUND = "Paciente não encontrado."
WARNING_INSUFFICIENT_DATA = "Dados insuficientes: Peso e Altura são obrigatórios."
WARNING_UNSAVED_DATA = "Usando dados da tela (não salvos)."


def normalize_height_m(height: float) -> float:
    """Heights in (3, 300] are taken as centimeters and converted to meters."""
    if 3 < height <= 300:
        return height / 100
    return height


def build_snapshot(
    patient: Optional[PatientProfile],
    persisted: Optional[MeasurementSet] = None,
    draft: Optional[MeasurementSet] = None,
    as_of: Optional[date] = None,
) -> SnapshotResult:
    """
    Build a snapshot from the draft (if usable) or the persisted evaluation.

    Args:
        patient: Patient demographics and clinical summary
        persisted: Last saved measurement set
        draft: Unsaved form data
        as_of: Reference date for age and snapshot date (defaults to today)

    Returns:
        SnapshotResult with source FORM, PERSISTED or NONE (snapshot None,
        warnings explain what is missing)
    """
    if patient is None:
        return SnapshotResult(
            source=SnapshotSource.NONE, warnings=(WARNING_PATIENT_NOT_FOUND,)
        )

    if draft is not None and draft.has_minimum_data():
        measurements = draft
        source = SnapshotSource.FORM
        warnings = (WARNING_UNSAVED_DATA,)
    elif persisted is not None and persisted.has_minimum_data():
        measurements = persisted
        source = SnapshotSource.PERSISTED
        warnings = ()
    else:
        logger.info("[SNAPSHOT] No draft or persisted evaluation with weight and height")
        return SnapshotResult(
            source=SnapshotSource.NONE, warnings=(WARNING_INSUFFICIENT_DATA,)
        )

    if as_of is None:
        as_of = date.today()

    height_m = normalize_height_m(measurements.height)
    if height_m != measurements.height:
        measurements = measurements.model_copy(update={"height": height_m})

    age = BodyFatCalculator.calculate_age(patient.birth_date, as_of)
    result = BodyFatCalculator.compute(measurements, age, patient.gender)

    snapshot = AnthroSnapshot(
        patient=SnapshotPatient(name=patient.name, gender=patient.gender, age=age),
        clinical=SnapshotClinical(
            objective=patient.clinical_goal,
            active_diagnoses=tuple(patient.active_diagnoses),
        ),
        anthro=SnapshotAnthro(
            date=measurements.procedure_date or as_of.isoformat(),
            protocol=resolve_protocol(measurements.protocol).key.value,
            weight_kg=measurements.weight,
            height_m=height_m,
            body_comp=BodyComposition(
                bmi=result.bmi,
                whr=result.waist_to_hip_ratio,
                body_fat_pct=result.body_fat_percentage,
                fat_mass_kg=result.fat_mass,
                lean_mass_kg=result.lean_mass,
            ),
            circumferences_cm=CircumferencesCm(
                neck=measurements.circ_neck,
                chest=measurements.circ_chest,
                waist=measurements.circ_waist,
                abdomen=measurements.circ_abdomen,
                hip=measurements.circ_hip,
                arm=measurements.circ_arm,
                thigh=measurements.circ_thigh,
                calf=measurements.circ_calf,
            ),
            skinfolds_mm=SkinfoldsMm(
                chest=measurements.skinfold_chest,
                midaxillary=measurements.skinfold_axillary,
                triceps=measurements.skinfold_triceps,
                biceps=measurements.skinfold_biceps,
                subscapular=measurements.skinfold_subscapular,
                abdominal=measurements.skinfold_abdominal,
                suprailiac=measurements.skinfold_suprailiac,
                thigh=measurements.skinfold_thigh,
                calf=measurements.skinfold_calf,
            ),
        ),
    )

    logger.debug(f"[SNAPSHOT] Built from {source.value} data")
    return SnapshotResult(snapshot=snapshot, source=source, warnings=warnings)
