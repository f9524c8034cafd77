"""
Anthropometry endpoints.

Stateless wrappers around the body-composition engine: live computation,
save-time validation, history reconciliation, staleness advisory, snapshot
building and the snapshot consumers (AI analysis and report data). The host
application owns persistence; every request carries the data it needs.
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from app.domain.anthropometry import (
    ComputedResult,
    HistoryRecord,
    MeasurementSet,
    PatientProfile,
)
from app.domain.protocols import PROTOCOL_REGISTRY, SKINFOLD_LABELS, resolve_protocol
from app.domain.snapshot import SnapshotResult, SnapshotSource
from app.services.anthro_ai_service import AnthroAIAnalysisService, AnthroAnalysisResult
from app.services.anthro_report_service import AnthroReport, build_report
from app.services.anthropometry_service import AnthropometryService, SaveResult
from app.services.history_service import (
    ClinicalAlert,
    StalenessResult,
    build_overdue_alert,
    check_staleness,
    reconcile_history,
)
from app.services.measurement_validator import (
    IncompleteMeasurementError,
    validate_for_save,
)
from app.services.snapshot_service import build_snapshot

logger = logging.getLogger(__name__)

router = APIRouter()


class ComputeRequest(BaseModel):
    """Request model for live computation."""

    patient: PatientProfile
    measurements: MeasurementSet
    protocol: Optional[str] = Field(
        None, description="Protocol override (defaults to measurements.protocol)"
    )
    as_of: Optional[date] = Field(None, description="Reference date for age")


class ValidateRequest(BaseModel):
    """Request model for save-time validation."""

    measurements: MeasurementSet
    protocol: Optional[str] = None
    gender: Optional[str] = None


class ValidateResponse(BaseModel):
    protocol: str
    protocol_label: str
    missing_fields: List[str]
    is_complete: bool


class SaveRequest(BaseModel):
    """Request model for finalizing an evaluation."""

    patient: PatientProfile
    measurements: MeasurementSet
    history: List[HistoryRecord] = Field(default_factory=list)
    editing_date: Optional[str] = Field(
        None, description="Date of the history entry being edited"
    )
    as_of: Optional[date] = None


class ReconcileRequest(BaseModel):
    history: List[HistoryRecord] = Field(default_factory=list)
    record: HistoryRecord
    key_date: Optional[str] = None


class StalenessRequest(BaseModel):
    history: List[HistoryRecord] = Field(default_factory=list)
    now: Optional[date] = None
    patient_name: str = ""


class StalenessResponse(StalenessResult):
    alert: Optional[ClinicalAlert] = None


class SnapshotRequest(BaseModel):
    """Request model for snapshot-based endpoints."""

    patient: Optional[PatientProfile] = None
    persisted: Optional[MeasurementSet] = None
    draft: Optional[MeasurementSet] = None
    as_of: Optional[date] = None


class AnalysisRequest(SnapshotRequest):
    patient_key: Optional[str] = Field(
        None, description="Stable patient identifier for AI memory"
    )


class AnalysisResponse(BaseModel):
    source: SnapshotSource
    warnings: List[str]
    analysis: AnthroAnalysisResult


class ReportResponse(BaseModel):
    source: SnapshotSource
    warnings: List[str]
    report: AnthroReport


class ProtocolInfo(BaseModel):
    key: str
    label: str
    male_sites: List[str]
    female_sites: List[str]
    site_labels: dict


def _require_snapshot(request: SnapshotRequest) -> SnapshotResult:
    """Build the snapshot or stop with 422 when there is not enough data."""
    result = build_snapshot(
        request.patient, request.persisted, request.draft, request.as_of
    )
    if result.snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": "Snapshot unavailable",
                "warnings": list(result.warnings),
            },
        )
    return result


@router.get(
    "/anthropometry/protocols",
    response_model=List[ProtocolInfo],
    status_code=status.HTTP_200_OK,
)
async def list_protocols():
    """List supported skinfold protocols and their required sites."""
    return [
        ProtocolInfo(
            key=definition.key.value,
            label=definition.label,
            male_sites=list(definition.male_sites),
            female_sites=list(definition.female_sites),
            site_labels={
                site: SKINFOLD_LABELS[site]
                for site in definition.male_sites + definition.female_sites
            },
        )
        for definition in PROTOCOL_REGISTRY.values()
    ]


@router.post(
    "/anthropometry/compute",
    response_model=ComputedResult,
    status_code=status.HTTP_200_OK,
)
async def compute_measurement(request: ComputeRequest):
    """
    Compute BMI, WHR, body density, body fat, fat mass and lean mass.

    Always succeeds; values that cannot be computed are 0.
    """
    service = AnthropometryService()
    return service.compute(
        request.patient, request.measurements, request.protocol, request.as_of
    )


@router.post(
    "/anthropometry/validate",
    response_model=ValidateResponse,
    status_code=status.HTTP_200_OK,
)
async def validate_measurement(request: ValidateRequest):
    """List the required skinfolds missing for the selected protocol."""
    protocol = request.protocol or request.measurements.protocol
    definition = resolve_protocol(protocol)
    missing = validate_for_save(request.measurements, protocol, request.gender)

    return ValidateResponse(
        protocol=definition.key.value,
        protocol_label=definition.label,
        missing_fields=missing,
        is_complete=not missing,
    )


@router.post(
    "/anthropometry/save",
    response_model=SaveResult,
    status_code=status.HTTP_200_OK,
)
async def save_measurement(request: SaveRequest):
    """
    Finalize an evaluation and reconcile it into the history.

    Returns 422 with the missing field labels when the protocol's required
    skinfolds are incomplete. The caller persists the returned values.
    """
    service = AnthropometryService()

    try:
        return service.save_measurement(
            patient=request.patient,
            measurements=request.measurements,
            history=request.history,
            editing_date=request.editing_date,
            as_of=request.as_of,
        )
    except IncompleteMeasurementError as e:
        logger.info(f"[SAVE] Rejected, missing fields: {e.missing_fields}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": str(e),
                "protocol_label": e.protocol_label,
                "missing_fields": e.missing_fields,
            },
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.post(
    "/anthropometry/history/reconcile",
    response_model=List[HistoryRecord],
    status_code=status.HTTP_200_OK,
)
async def reconcile(request: ReconcileRequest):
    """Insert or replace a record in the history by date."""
    return reconcile_history(request.history, request.record, request.key_date)


@router.post(
    "/anthropometry/history/staleness",
    response_model=StalenessResponse,
    status_code=status.HTTP_200_OK,
)
async def staleness(request: StalenessRequest):
    """Report days since the last evaluation and the overdue alert, if any."""
    result = check_staleness(request.history, request.now)
    alert = build_overdue_alert(request.patient_name, result)
    return StalenessResponse(**result.model_dump(), alert=alert)


@router.post(
    "/anthropometry/snapshot",
    response_model=SnapshotResult,
    status_code=status.HTTP_200_OK,
)
async def snapshot(request: SnapshotRequest):
    """
    Build the anthropometry snapshot.

    Unsaved form data wins over the persisted evaluation when it has weight and
    height. Returns source "none" with warnings when neither is usable.
    """
    return build_snapshot(
        request.patient, request.persisted, request.draft, request.as_of
    )


@router.post(
    "/anthropometry/analysis",
    response_model=AnalysisResponse,
    status_code=status.HTTP_200_OK,
)
def analyze(request: AnalysisRequest):
    """
    Generate the narrative analysis for the current snapshot.

    Returns 422 when no snapshot can be built.
    """
    result = _require_snapshot(request)
    analysis = AnthroAIAnalysisService().analyze(result.snapshot, request.patient_key)

    return AnalysisResponse(
        source=result.source,
        warnings=list(result.warnings),
        analysis=analysis,
    )


@router.post(
    "/anthropometry/report",
    response_model=ReportResponse,
    status_code=status.HTTP_200_OK,
)
async def report(request: SnapshotRequest):
    """
    Build the report rows for the current snapshot.

    Returns 422 when no snapshot can be built.
    """
    result = _require_snapshot(request)

    return ReportResponse(
        source=result.source,
        warnings=list(result.warnings),
        report=build_report(result.snapshot),
    )
