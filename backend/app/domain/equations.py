"""
Skinfold body-fat equations.

Each equation takes the sum of the protocol's skinfold sites (mm), the age in
years and whether the subject is male, and returns ``(body_density, body_fat)``.
``body_density`` is ``None`` for equations without a density step. Results are
raw (unrounded, unclamped); the calculator decides what is feasible.
"""

import math
from typing import Optional, Tuple

EquationResult = Tuple[Optional[float], float]

# Durnin & Womersley (1974) constants (c, m) per age band: <20, 20-29, 30-39, 40-49, >=50
DURNIN_WOMERSLEY_MALE = (
    (1.1620, 0.0630),
    (1.1631, 0.0632),
    (1.1422, 0.0544),
    (1.1333, 0.0612),
    (1.1715, 0.0779),
)
DURNIN_WOMERSLEY_FEMALE = (
    (1.1549, 0.0678),
    (1.1599, 0.0717),
    (1.1423, 0.0632),
    (1.1333, 0.0612),
    (1.1339, 0.0645),
)


def siri_body_fat(body_density: float) -> float:
    """Siri (1961): BF% = 495 / BD - 450."""
    return (495 / body_density) - 450


def jackson_pollock_7(total: float, age: int, is_male: bool) -> EquationResult:
    if is_male:
        density = (
            1.112
            - 0.00043499 * total
            + 0.00000055 * total**2
            - 0.00028826 * age
        )
    else:
        density = (
            1.097
            - 0.00046971 * total
            + 0.00000056 * total**2
            - 0.00012828 * age
        )
    return density, siri_body_fat(density)


def jackson_pollock_3(total: float, age: int, is_male: bool) -> EquationResult:
    if is_male:
        # chest + abdominal + thigh
        density = (
            1.10938
            - 0.0008267 * total
            + 0.0000016 * total**2
            - 0.0002574 * age
        )
    else:
        # triceps + suprailiac + thigh
        density = (
            1.0994921
            - 0.0009929 * total
            + 0.0000023 * total**2
            - 0.0001392 * age
        )
    return density, siri_body_fat(density)


def guedes(total: float, age: int, is_male: bool) -> EquationResult:
    """Guedes (1985). Age does not enter the equation."""
    if is_male:
        density = 1.17136 - 0.06706 * math.log10(total)
    else:
        density = 1.16650 - 0.07063 * math.log10(total)
    return density, siri_body_fat(density)


def durnin_womersley_constants(age: int, is_male: bool) -> Tuple[float, float]:
    """Return the (c, m) constants for the subject's age band."""
    table = DURNIN_WOMERSLEY_MALE if is_male else DURNIN_WOMERSLEY_FEMALE
    if age < 20:
        return table[0]
    elif age < 30:
        return table[1]
    elif age < 40:
        return table[2]
    elif age < 50:
        return table[3]
    return table[4]


def durnin_womersley(total: float, age: int, is_male: bool) -> EquationResult:
    c, m = durnin_womersley_constants(age, is_male)
    density = c - m * math.log10(total)
    return density, siri_body_fat(density)


def faulkner(total: float, age: int, is_male: bool) -> EquationResult:
    """Faulkner (1968): direct percentage, no density step."""
    return None, 0.153 * total + 5.783
