"""
Body composition calculator service.

Implements BMI, waist-to-hip ratio and skinfold body-fat protocols
(Jackson-Pollock 7/3, Durnin & Womersley, Faulkner, Guedes).
All calculations use metric units (kg, m, cm, mm).

The calculator never raises on incomplete input: anything that cannot be
computed is reported as 0, because it runs on every keystroke of a form that is
expected to be partially filled.
"""

import logging
import math
from datetime import date, datetime
from typing import Optional, Tuple, Union

from app.domain.anthropometry import ComputedResult, MeasurementSet
from app.domain.protocols import ProtocolDefinition, is_male, resolve_protocol

logger = logging.getLogger(__name__)


class BodyFatCalculator:
    """Service for calculating body composition from anthropometric measurements."""

    @staticmethod
    def calculate_age(
        birth_date: Optional[Union[date, datetime]],
        as_of: Optional[Union[date, datetime]] = None,
    ) -> int:
        """
        Calculate age in whole years.

        One year is subtracted when the birthday has not yet been reached in
        the as-of year.

        Args:
            birth_date: Date of birth
            as_of: Reference date (defaults to today)

        Returns:
            Age in years, 0 if birth date is unknown
        """
        if birth_date is None:
            return 0
        if as_of is None:
            as_of = date.today()
        if isinstance(birth_date, datetime):
            birth_date = birth_date.date()
        if isinstance(as_of, datetime):
            as_of = as_of.date()

        age = as_of.year - birth_date.year
        if (as_of.month, as_of.day) < (birth_date.month, birth_date.day):
            age -= 1
        return age

    @staticmethod
    def calculate_bmi(weight_kg: Optional[float], height_m: Optional[float]) -> float:
        """
        Calculate body mass index.

        Args:
            weight_kg: Weight in kilograms
            height_m: Height in meters

        Returns:
            BMI rounded to 1 decimal, 0 if weight or height is missing
        """
        if not weight_kg or not height_m:
            return 0.0
        return round(weight_kg / (height_m * height_m), 1)

    @staticmethod
    def calculate_waist_to_hip_ratio(
        waist_cm: Optional[float], hip_cm: Optional[float]
    ) -> float:
        """
        Calculate waist-to-hip ratio.

        Returns:
            Ratio rounded to 2 decimals, 0 if either circumference is missing
        """
        if not waist_cm or not hip_cm:
            return 0.0
        return round(waist_cm / hip_cm, 2)

    @staticmethod
    def skinfold_sum(
        measurements: MeasurementSet,
        definition: ProtocolDefinition,
        gender: Optional[str],
    ) -> Optional[float]:
        """
        Sum the protocol's required skinfolds.

        Returns:
            Sum in mm, or None if a required site is missing (or not positive,
            for protocols that require every site to be positive)
        """
        values = [getattr(measurements, site) for site in definition.sites_for(gender)]
        if any(v is None for v in values):
            return None
        if definition.requires_positive_sites and any(v <= 0 for v in values):
            return None
        return sum(values)

    @staticmethod
    def calculate_body_fat(
        measurements: MeasurementSet,
        age: int,
        gender: Optional[str],
        protocol: Optional[str] = None,
    ) -> Tuple[float, float]:
        """
        Estimate body density and body fat percentage for a protocol.

        Args:
            measurements: Raw measurements
            age: Age in years
            gender: "Masculino" or "Feminino"
            protocol: Protocol identifier (defaults to the measurement's own,
                then to 7-site Jackson-Pollock)

        Returns:
            Tuple of (body_density, body_fat_percentage); zeros when the
            estimate is not feasible. Body fat is clamped to >= 0 and rounded
            to 1 decimal.
        """
        definition = resolve_protocol(protocol or measurements.protocol)
        if definition.equation is None:
            return 0.0, 0.0

        total = BodyFatCalculator.skinfold_sum(measurements, definition, gender)
        if total is None or total <= 0:
            return 0.0, 0.0
        if definition.requires_age and age <= 0:
            return 0.0, 0.0

        density, body_fat = definition.equation(total, age, is_male(gender))

        if density is not None and (not math.isfinite(density) or density <= 0):
            logger.debug(
                f"[CALC] {definition.key.value}: non-positive density {density} "
                f"for skinfold sum {total}"
            )
            return 0.0, 0.0
        if not math.isfinite(body_fat):
            return 0.0, 0.0

        body_density = round(density, 5) if density is not None else 0.0
        return body_density, max(0.0, round(body_fat, 1))

    @staticmethod
    def calculate_fat_mass(
        weight_kg: Optional[float], body_fat_percentage: float
    ) -> float:
        """
        Calculate fat mass from total weight and body fat percentage.

        Returns:
            Fat mass in kilograms (1 decimal), 0 if weight or body fat is 0
        """
        if not weight_kg or not body_fat_percentage:
            return 0.0
        return round(weight_kg * body_fat_percentage / 100.0, 1)

    @staticmethod
    def calculate_lean_mass(weight_kg: Optional[float], fat_mass_kg: float) -> float:
        """
        Calculate lean body mass from total weight and fat mass.

        Returns:
            Lean mass in kilograms (1 decimal), 0 if weight or fat mass is 0
        """
        if not weight_kg or not fat_mass_kg:
            return 0.0
        return round(weight_kg - fat_mass_kg, 1)

    @staticmethod
    def compute(
        measurements: MeasurementSet,
        age: int,
        gender: Optional[str],
        protocol: Optional[str] = None,
    ) -> ComputedResult:
        """
        Derive the full body-composition result from a measurement set.

        Pure and idempotent: the same inputs always give the same result.

        Args:
            measurements: Raw measurements
            age: Patient age in years
            gender: "Masculino" or "Feminino"
            protocol: Protocol override (defaults to measurements.protocol)

        Returns:
            ComputedResult with zeros for anything not computable
        """
        bmi = BodyFatCalculator.calculate_bmi(measurements.weight, measurements.height)
        whr = BodyFatCalculator.calculate_waist_to_hip_ratio(
            measurements.circ_waist, measurements.circ_hip
        )
        body_density, body_fat = BodyFatCalculator.calculate_body_fat(
            measurements, age, gender, protocol
        )
        fat_mass = BodyFatCalculator.calculate_fat_mass(measurements.weight, body_fat)
        lean_mass = BodyFatCalculator.calculate_lean_mass(measurements.weight, fat_mass)

        return ComputedResult(
            bmi=bmi,
            waist_to_hip_ratio=whr,
            body_density=body_density,
            body_fat_percentage=body_fat,
            fat_mass=fat_mass,
            lean_mass=lean_mass,
        )


def compute(
    measurements: MeasurementSet,
    age: int,
    gender: Optional[str],
    protocol: Optional[str] = None,
) -> ComputedResult:
    """Module-level shortcut for BodyFatCalculator.compute."""
    return BodyFatCalculator.compute(measurements, age, gender, protocol)
