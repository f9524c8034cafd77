"""
Unit tests for save-time measurement validation.
"""

import pytest

from app.domain.anthropometry import MeasurementSet
from app.domain.protocols import SKINFOLD_LABELS, resolve_required_fields
from app.services.measurement_validator import (
    IncompleteMeasurementError,
    ensure_complete,
    validate_for_save,
)


class TestValidateForSave:
    """Tests for missing-site detection."""

    def test_three_site_female_reports_missing_labels(self):
        """Only triceps supplied reports suprailiac and thigh, in order."""
        measurements = MeasurementSet(skinfold_triceps=12.0)
        assert validate_for_save(measurements, "JacksonPollock3", "Feminino") == [
            "Supra-ilíaca",
            "Coxa",
        ]

    def test_complete_seven_site(self, seven_site_measurements):
        """All seven sites present reports nothing."""
        assert validate_for_save(seven_site_measurements, "JacksonPollock7", "Masculino") == []

    def test_zero_counts_as_present(self):
        """An explicit zero is a measured value."""
        measurements = MeasurementSet(
            skinfold_chest=0, skinfold_abdominal=0, skinfold_thigh=0
        )
        assert validate_for_save(measurements, "JacksonPollock3", "Masculino") == []

    def test_raw_mapping_with_empty_strings(self):
        """Raw form mappings treat empty strings as missing."""
        form = {
            "skinfold_triceps": "10",
            "skinfold_suprailiac": "",
            "skinfold_thigh": 0,
        }
        assert validate_for_save(form, "JacksonPollock3", "Feminino") == ["Supra-ilíaca"]

    def test_default_protocol(self):
        """No protocol validates against the 7-site list."""
        assert len(validate_for_save(MeasurementSet(), None, "Masculino")) == 7

    def test_uses_measurement_protocol(self):
        """Without an explicit protocol the measurements' own protocol applies."""
        measurements = MeasurementSet(skinfold_triceps=10.0, protocol="JacksonPollock3")
        assert validate_for_save(measurements, None, "Feminino") == [
            "Supra-ilíaca",
            "Coxa",
        ]

    def test_explicit_protocol_wins(self):
        """An explicit protocol overrides the one on the measurements."""
        measurements = MeasurementSet(protocol="JacksonPollock3")
        assert validate_for_save(measurements, "Faulkner", "Masculino") == [
            "Tríceps",
            "Subescapular",
            "Supra-ilíaca",
            "Abdominal",
        ]

    def test_raw_mapping_protocol(self):
        """Raw mappings carry their protocol too."""
        form = {"protocol": "Guedes", "skinfold_thigh": "9"}
        assert validate_for_save(form, None, "Feminino") == [
            "Supra-ilíaca",
            "Subescapular",
        ]

    @pytest.mark.parametrize(
        "protocol,gender,expected",
        [
            (
                "JacksonPollock7",
                "Masculino",
                ["Peitoral", "Axilar Média", "Tríceps", "Subescapular",
                 "Abdominal", "Supra-ilíaca", "Coxa"],
            ),
            (
                "JacksonPollock7",
                "Feminino",
                ["Peitoral", "Axilar Média", "Tríceps", "Subescapular",
                 "Abdominal", "Supra-ilíaca", "Coxa"],
            ),
            ("JacksonPollock3", "Masculino", ["Peitoral", "Abdominal", "Coxa"]),
            ("JacksonPollock3", "Feminino", ["Tríceps", "Supra-ilíaca", "Coxa"]),
            (
                "DurninWomersley",
                "Masculino",
                ["Bíceps", "Tríceps", "Subescapular", "Supra-ilíaca"],
            ),
            (
                "DurninWomersley",
                "Feminino",
                ["Bíceps", "Tríceps", "Subescapular", "Supra-ilíaca"],
            ),
            (
                "Faulkner",
                "Masculino",
                ["Tríceps", "Subescapular", "Supra-ilíaca", "Abdominal"],
            ),
            (
                "Faulkner",
                "Feminino",
                ["Tríceps", "Subescapular", "Supra-ilíaca", "Abdominal"],
            ),
            ("Guedes", "Masculino", ["Tríceps", "Supra-ilíaca", "Abdominal"]),
            ("Guedes", "Feminino", ["Coxa", "Supra-ilíaca", "Subescapular"]),
            (
                "ISAK",
                "Feminino",
                ["Tríceps", "Bíceps", "Subescapular", "Supra-ilíaca", "Abdominal",
                 "Coxa", "Panturrilha", "Axilar Média", "Peitoral"],
            ),
        ],
    )
    def test_missing_labels_per_protocol(self, protocol, gender, expected):
        """Empty measurements report exactly the protocol's sites, in order."""
        assert validate_for_save(MeasurementSet(), protocol, gender) == expected

    @pytest.mark.parametrize(
        "protocol",
        ["JacksonPollock7", "JacksonPollock3", "DurninWomersley", "Faulkner", "Guedes", "ISAK"],
    )
    @pytest.mark.parametrize("gender", ["Masculino", "Feminino"])
    def test_only_the_absent_site_is_reported(self, protocol, gender):
        """Every site filled except thigh reports thigh only where required."""
        filled = {site: 10.0 for site in SKINFOLD_LABELS if site != "skinfold_thigh"}
        required = resolve_required_fields(protocol, gender)
        expected = ["Coxa"] if "skinfold_thigh" in required else []
        assert validate_for_save(MeasurementSet(**filled), protocol, gender) == expected

    def test_isak_lists_all_sites(self):
        """ISAK requires the full site set."""
        missing = validate_for_save(MeasurementSet(), "ISAK", "Masculino")
        assert missing[0] == "Tríceps"
        assert len(missing) == 9


class TestEnsureComplete:
    """Tests for the raising variant."""

    def test_raises_with_labels(self):
        """Missing sites raise IncompleteMeasurementError."""
        with pytest.raises(IncompleteMeasurementError) as exc_info:
            ensure_complete(MeasurementSet(skinfold_triceps=12.0), "JacksonPollock3", "Feminino")

        error = exc_info.value
        assert error.protocol_label == "Pollock (3 Dobras)"
        assert error.missing_fields == ["Supra-ilíaca", "Coxa"]
        assert "Supra-ilíaca, Coxa" in str(error)
        assert isinstance(error, ValueError)

    def test_complete_passes(self, seven_site_measurements):
        """Complete measurements do not raise."""
        ensure_complete(seven_site_measurements, "JacksonPollock7", "Feminino")

    def test_label_follows_measurement_protocol(self):
        """The error names the measurements' own protocol."""
        measurements = MeasurementSet(skinfold_biceps=4.0, protocol="DurninWomersley")
        with pytest.raises(IncompleteMeasurementError) as exc_info:
            ensure_complete(measurements, None, "Masculino")

        assert exc_info.value.protocol_label == "Durnin & Womersley (4)"
        assert exc_info.value.missing_fields == ["Tríceps", "Subescapular", "Supra-ilíaca"]
