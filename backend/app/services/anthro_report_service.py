"""
Report data for the anthropometry report renderer.

Turns a snapshot into labeled rows. Absent values are shown as "--"; an
explicit zero measurement is shown as measured.
"""

from typing import List, Optional

from pydantic import BaseModel

from app.domain.snapshot import AnthroSnapshot

PLACEHOLDER = "--"

CIRCUMFERENCE_ROWS = (
    ("neck", "Pescoço"),
    ("chest", "Tórax"),
    ("waist", "Cintura"),
    ("abdomen", "Abdômen"),
    ("hip", "Quadril"),
    ("arm", "Braço"),
    ("thigh", "Coxa"),
    ("calf", "Panturrilha"),
)

SKINFOLD_ROWS = (
    ("chest", "Peitoral"),
    ("midaxillary", "Axilar Média"),
    ("triceps", "Tríceps"),
    ("biceps", "Bíceps"),
    ("subscapular", "Subescapular"),
    ("abdominal", "Abdominal"),
    ("suprailiac", "Supra-ilíaca"),
    ("thigh", "Coxa"),
    ("calf", "Panturrilha"),
)


class ReportRow(BaseModel):
    label: str
    value: str


class AnthroReport(BaseModel):
    """Everything the renderer prints for one evaluation."""

    patient_name: str
    gender: Optional[str]
    age: int
    date: str
    protocol: str
    summary: List[ReportRow]
    circumferences: List[ReportRow]
    skinfolds: List[ReportRow]


def format_value(value: Optional[float], unit: str = "") -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value:g}{unit}"


def format_metric(value: float, unit: str = "") -> str:
    """Computed metrics use 0 for "not computed"."""
    if not value:
        return PLACEHOLDER
    return f"{value:g}{unit}"


def build_report(snapshot: AnthroSnapshot) -> AnthroReport:
    """Build the report rows for a snapshot."""
    anthro = snapshot.anthro
    body_comp = anthro.body_comp

    summary = [
        ReportRow(label="Peso", value=format_value(anthro.weight_kg, " kg")),
        ReportRow(label="Altura", value=format_value(anthro.height_m, " m")),
        ReportRow(label="IMC", value=format_metric(body_comp.bmi)),
        ReportRow(label="% Gordura", value=format_metric(body_comp.body_fat_pct, "%")),
        ReportRow(label="RCQ", value=format_metric(body_comp.whr)),
        ReportRow(label="Massa Gorda", value=format_metric(body_comp.fat_mass_kg, " kg")),
        ReportRow(label="Massa Magra", value=format_metric(body_comp.lean_mass_kg, " kg")),
    ]

    circumferences = [
        ReportRow(label=label, value=format_value(getattr(anthro.circumferences_cm, key)))
        for key, label in CIRCUMFERENCE_ROWS
    ]
    skinfolds = [
        ReportRow(label=label, value=format_value(getattr(anthro.skinfolds_mm, key)))
        for key, label in SKINFOLD_ROWS
    ]

    return AnthroReport(
        patient_name=snapshot.patient.name,
        gender=snapshot.patient.gender,
        age=snapshot.patient.age,
        date=anthro.date,
        protocol=anthro.protocol,
        summary=summary,
        circumferences=circumferences,
        skinfolds=skinfolds,
    )
