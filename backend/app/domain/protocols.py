"""
Skinfold protocol registry.

Each supported protocol is a ProtocolDefinition carrying its label, the
skinfold sites it requires (per sex where they differ) and its body-fat
equation. The calculator and the validator both dispatch through this table,
so site lists are defined exactly once.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from app.domain import equations

logger = logging.getLogger(__name__)


class SkinfoldProtocol(str, Enum):
    """Supported skinfold protocols."""

    JACKSON_POLLOCK_7 = "JacksonPollock7"
    JACKSON_POLLOCK_3 = "JacksonPollock3"
    DURNIN_WOMERSLEY = "DurninWomersley"
    FAULKNER = "Faulkner"
    GUEDES = "Guedes"
    ISAK = "ISAK"


class Gender(str, Enum):
    """Patient sex as stored on the patient record."""

    MALE = "Masculino"
    FEMALE = "Feminino"


DEFAULT_PROTOCOL = SkinfoldProtocol.JACKSON_POLLOCK_7

SKINFOLD_LABELS: Dict[str, str] = {
    "skinfold_chest": "Peitoral",
    "skinfold_axillary": "Axilar Média",
    "skinfold_triceps": "Tríceps",
    "skinfold_biceps": "Bíceps",
    "skinfold_subscapular": "Subescapular",
    "skinfold_abdominal": "Abdominal",
    "skinfold_suprailiac": "Supra-ilíaca",
    "skinfold_thigh": "Coxa",
    "skinfold_calf": "Panturrilha",
}


def is_male(gender: Optional[str]) -> bool:
    """Anything other than "Masculino" uses the female site lists and constants."""
    return gender == Gender.MALE.value


@dataclass(frozen=True)
class ProtocolDefinition:
    """One variant of the protocol table."""

    key: SkinfoldProtocol
    label: str
    male_sites: Tuple[str, ...]
    female_sites: Tuple[str, ...]
    equation: Optional[Callable[[float, int, bool], equations.EquationResult]]
    requires_positive_sites: bool = False
    requires_age: bool = False

    def sites_for(self, gender: Optional[str]) -> Tuple[str, ...]:
        return self.male_sites if is_male(gender) else self.female_sites


def _same_for_both(
    key: SkinfoldProtocol, label: str, sites: Tuple[str, ...], equation, **kwargs
) -> ProtocolDefinition:
    return ProtocolDefinition(key, label, sites, sites, equation, **kwargs)


JACKSON_POLLOCK_7_SITES = (
    "skinfold_chest",
    "skinfold_axillary",
    "skinfold_triceps",
    "skinfold_subscapular",
    "skinfold_abdominal",
    "skinfold_suprailiac",
    "skinfold_thigh",
)

PROTOCOL_REGISTRY: Dict[SkinfoldProtocol, ProtocolDefinition] = {
    SkinfoldProtocol.JACKSON_POLLOCK_7: _same_for_both(
        SkinfoldProtocol.JACKSON_POLLOCK_7,
        "Pollock (7 Dobras)",
        JACKSON_POLLOCK_7_SITES,
        equations.jackson_pollock_7,
        requires_positive_sites=True,
        requires_age=True,
    ),
    SkinfoldProtocol.JACKSON_POLLOCK_3: ProtocolDefinition(
        SkinfoldProtocol.JACKSON_POLLOCK_3,
        "Pollock (3 Dobras)",
        male_sites=("skinfold_chest", "skinfold_abdominal", "skinfold_thigh"),
        female_sites=("skinfold_triceps", "skinfold_suprailiac", "skinfold_thigh"),
        equation=equations.jackson_pollock_3,
    ),
    SkinfoldProtocol.DURNIN_WOMERSLEY: _same_for_both(
        SkinfoldProtocol.DURNIN_WOMERSLEY,
        "Durnin & Womersley (4)",
        (
            "skinfold_biceps",
            "skinfold_triceps",
            "skinfold_subscapular",
            "skinfold_suprailiac",
        ),
        equations.durnin_womersley,
    ),
    SkinfoldProtocol.FAULKNER: _same_for_both(
        SkinfoldProtocol.FAULKNER,
        "Faulkner (Físico/Esporte)",
        (
            "skinfold_triceps",
            "skinfold_subscapular",
            "skinfold_suprailiac",
            "skinfold_abdominal",
        ),
        equations.faulkner,
    ),
    SkinfoldProtocol.GUEDES: ProtocolDefinition(
        SkinfoldProtocol.GUEDES,
        "Guedes (3 Dobras)",
        male_sites=("skinfold_triceps", "skinfold_suprailiac", "skinfold_abdominal"),
        female_sites=("skinfold_thigh", "skinfold_suprailiac", "skinfold_subscapular"),
        equation=equations.guedes,
    ),
    # ISAK collects the full site set for the record; it has no body-fat equation.
    SkinfoldProtocol.ISAK: _same_for_both(
        SkinfoldProtocol.ISAK,
        "ISAK (Medidas Completas)",
        (
            "skinfold_triceps",
            "skinfold_biceps",
            "skinfold_subscapular",
            "skinfold_suprailiac",
            "skinfold_abdominal",
            "skinfold_thigh",
            "skinfold_calf",
            "skinfold_axillary",
            "skinfold_chest",
        ),
        None,
    ),
}


def resolve_protocol(protocol: Optional[str]) -> ProtocolDefinition:
    """
    Resolve a protocol identifier to its definition.

    An unset protocol selects the default (7-site Jackson-Pollock). An unknown
    identifier also selects the default; the fallback is logged, not raised.

    Args:
        protocol: Protocol identifier, SkinfoldProtocol or None

    Returns:
        ProtocolDefinition for the effective protocol
    """
    if protocol is None or protocol == "":
        return PROTOCOL_REGISTRY[DEFAULT_PROTOCOL]

    try:
        key = SkinfoldProtocol(protocol)
    except ValueError:
        logger.warning(
            f"[PROTOCOL] Unknown protocol {protocol!r}, "
            f"falling back to {DEFAULT_PROTOCOL.value}"
        )
        key = DEFAULT_PROTOCOL

    return PROTOCOL_REGISTRY[key]


def resolve_required_fields(
    protocol: Optional[str], gender: Optional[str]
) -> Tuple[str, ...]:
    """Ordered skinfold field names required by a protocol for a given sex."""
    return resolve_protocol(protocol).sites_for(gender)
