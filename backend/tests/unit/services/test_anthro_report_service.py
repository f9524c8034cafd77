"""
Unit tests for report data building.
"""

from app.domain.anthropometry import MeasurementSet
from app.services.anthro_report_service import (
    PLACEHOLDER,
    build_report,
    format_metric,
    format_value,
)
from app.services.snapshot_service import build_snapshot


def rows(report_rows):
    return {row.label: row.value for row in report_rows}


class TestFormatting:
    """Tests for value formatting."""

    def test_absent_value(self):
        assert format_value(None, " kg") == PLACEHOLDER

    def test_zero_measurement_is_shown(self):
        """A measured zero is printed, not hidden."""
        assert format_value(0.0) == "0"

    def test_value_with_unit(self):
        assert format_value(80.0, " kg") == "80 kg"
        assert format_value(1.8, " m") == "1.8 m"

    def test_uncomputed_metric(self):
        """A zero metric means not computed."""
        assert format_metric(0.0, "%") == PLACEHOLDER
        assert format_metric(14.6, "%") == "14.6%"


class TestBuildReport:
    """Tests for the report rows."""

    def test_full_report(self, male_patient, seven_site_measurements, as_of):
        snapshot = build_snapshot(
            male_patient, persisted=seven_site_measurements, as_of=as_of
        ).snapshot
        report = build_report(snapshot)

        assert report.patient_name == "João Silva"
        assert report.age == 30
        assert report.date == "2024-06-10"
        assert report.protocol == "JacksonPollock7"
        assert rows(report.summary) == {
            "Peso": "80 kg",
            "Altura": "1.8 m",
            "IMC": "24.7",
            "% Gordura": "14.6%",
            "RCQ": "0.85",
            "Massa Gorda": "11.7 kg",
            "Massa Magra": "68.3 kg",
        }
        circumferences = rows(report.circumferences)
        assert circumferences["Cintura"] == "85"
        assert circumferences["Pescoço"] == PLACEHOLDER
        skinfolds = rows(report.skinfolds)
        assert skinfolds["Axilar Média"] == "12"
        assert skinfolds["Bíceps"] == PLACEHOLDER
        assert len(report.skinfolds) == 9

    def test_minimal_report(self, female_patient, as_of):
        """Uncomputed metrics are placeholders."""
        snapshot = build_snapshot(
            female_patient, draft=MeasurementSet(weight=60, height=1.65), as_of=as_of
        ).snapshot
        summary = rows(build_report(snapshot).summary)
        assert summary["% Gordura"] == PLACEHOLDER
        assert summary["RCQ"] == PLACEHOLDER
        assert summary["IMC"] == "22"
