"""
Pytest configuration and shared fixtures.
"""

from datetime import date

import pytest

from app.config import get_settings
from app.domain.anthropometry import MeasurementSet, PatientProfile


@pytest.fixture(autouse=True)
def offline_ai(monkeypatch):
    """Keep AI disabled unless a test enables it explicitly."""
    monkeypatch.setenv("ANTHRO_AI_ENABLED", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def as_of():
    """Fixed reference date for age and record dates."""
    return date(2024, 6, 15)


@pytest.fixture
def male_patient():
    """30-year-old male patient on the reference date."""
    return PatientProfile(
        name="João Silva",
        gender="Masculino",
        birth_date=date(1994, 1, 10),
        clinical_goal="Redução de gordura",
        active_diagnoses=["Hipertensão", "Dislipidemia"],
    )


@pytest.fixture
def female_patient():
    """25-year-old female patient on the reference date."""
    return PatientProfile(
        name="Maria Souza",
        gender="Feminino",
        birth_date=date(1999, 3, 2),
        clinical_goal="Hipertrofia",
        active_diagnoses=[],
    )


@pytest.fixture
def seven_site_measurements():
    """Complete 7-site evaluation, skinfolds summing to 100 mm."""
    return MeasurementSet(
        weight=80.0,
        height=1.80,
        circ_waist=85.0,
        circ_hip=100.0,
        circ_abdomen=90.0,
        skinfold_chest=10.0,
        skinfold_axillary=12.0,
        skinfold_triceps=14.0,
        skinfold_subscapular=16.0,
        skinfold_abdominal=20.0,
        skinfold_suprailiac=13.0,
        skinfold_thigh=15.0,
        protocol="JacksonPollock7",
        procedure_date="2024-06-10",
    )
