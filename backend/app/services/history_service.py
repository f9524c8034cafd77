"""
Anthropometry history service.

Keeps the date-keyed evaluation series consistent (one record per date) and
derives the "evaluation overdue" advisory from it.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel

from app.config import get_settings
from app.domain.anthropometry import HistoryRecord

logger = logging.getLogger(__name__)


class StalenessResult(BaseModel):
    """Advisory on how long ago the last evaluation happened."""

    stale: bool
    days_since_last: int
    last_date: Optional[date] = None


class AlertSeverity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ClinicalAlert(BaseModel):
    """Informational alert for the host's clinical-alerts list."""

    type: str
    severity: AlertSeverity
    patient_name: str
    description: str
    created_at: datetime


def reconcile_history(
    history: Sequence[HistoryRecord],
    record: HistoryRecord,
    key_date: Optional[str] = None,
) -> List[HistoryRecord]:
    """
    Insert or replace a record in the history, keeping one record per date.

    Dates are compared as opaque strings. The input sequence is not modified;
    a new list is returned.

    Args:
        history: Current history
        record: Finalized record to store
        key_date: Date of the entry being edited (defaults to record.date)

    Returns:
        New history list. The record replaces the entry dated key_date in
        place, else the entry dated record.date, else it is appended. Any
        other entry sharing record.date is dropped.
    """
    key = key_date or record.date
    updated = list(history)

    position = next((i for i, r in enumerate(updated) if r.date == key), None)
    if position is None:
        position = next(
            (i for i, r in enumerate(updated) if r.date == record.date), None
        )
    if position is None:
        updated.append(record)
        return updated

    logger.debug(f"[HISTORY] Replacing record at position {position} ({key})")
    updated[position] = record

    return [
        existing
        for index, existing in enumerate(updated)
        if index == position or existing.date != record.date
    ]


def parse_history_date(value: str) -> Optional[date]:
    """Parse an ISO date or datetime string, None if unparseable."""
    text = (value or "").strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def check_staleness(
    history: Sequence[HistoryRecord],
    now: Optional[Union[date, datetime]] = None,
    threshold_days: Optional[int] = None,
) -> StalenessResult:
    """
    Check whether the latest evaluation is older than the threshold.

    Args:
        history: Evaluation history
        now: Reference date (defaults to today)
        threshold_days: Days after which an evaluation is overdue
            (defaults to the configured value, 30)

    Returns:
        StalenessResult; empty history is never stale
    """
    if threshold_days is None:
        threshold_days = get_settings().staleness_threshold_days
    if now is None:
        now = date.today()
    if isinstance(now, datetime):
        now = now.date()

    dates = []
    for record in history:
        parsed = parse_history_date(record.date)
        if parsed is None:
            logger.warning(f"[HISTORY] Skipping unparseable date: {record.date!r}")
            continue
        dates.append(parsed)

    if not dates:
        return StalenessResult(stale=False, days_since_last=0)

    last_date = max(dates)
    days = max(0, (now - last_date).days)

    return StalenessResult(
        stale=days > threshold_days,
        days_since_last=days,
        last_date=last_date,
    )


def build_overdue_alert(
    patient_name: str,
    staleness: StalenessResult,
    now: Optional[datetime] = None,
) -> Optional[ClinicalAlert]:
    """
    Build the overdue-evaluation alert for a stale history.

    Returns:
        ClinicalAlert, or None if the history is not stale
    """
    if not staleness.stale or staleness.last_date is None:
        return None

    return ClinicalAlert(
        type="ANTHROPOMETRY_OVERDUE",
        severity=AlertSeverity.MEDIUM,
        patient_name=patient_name,
        description=(
            f"Paciente está há {staleness.days_since_last} dias sem nova avaliação "
            f"antropométrica (última em {staleness.last_date.strftime('%d/%m/%Y')})."
        ),
        created_at=now or datetime.now(),
    )
