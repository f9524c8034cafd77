"""
Save-time validation for anthropometric evaluations.

Checks that every skinfold the selected protocol needs is present before an
evaluation may be saved. Live computation never goes through here.
"""

from typing import Any, List, Mapping, Optional, Union

from app.domain.anthropometry import MeasurementSet
from app.domain.protocols import ProtocolDefinition, SKINFOLD_LABELS, resolve_protocol

Measurements = Union[MeasurementSet, Mapping[str, Any]]


class IncompleteMeasurementError(ValueError):
    """Raised when a save is attempted with required measurements missing."""

    def __init__(self, protocol_label: str, missing_fields: List[str]):
        self.protocol_label = protocol_label
        self.missing_fields = list(missing_fields)
        super().__init__(
            f"Cálculo não pode ser efetuado. Campos obrigatórios ausentes para o "
            f"protocolo {protocol_label}: {', '.join(self.missing_fields)}"
        )


def _field(measurements: Measurements, name: str) -> Any:
    if isinstance(measurements, MeasurementSet):
        return getattr(measurements, name)
    return measurements.get(name)


def _is_missing(value: Any) -> bool:
    # An explicit zero counts as present.
    return value is None or value == ""


def _effective_protocol(
    measurements: Measurements, protocol: Optional[str]
) -> ProtocolDefinition:
    return resolve_protocol(protocol or _field(measurements, "protocol"))


def validate_for_save(
    measurements: Measurements,
    protocol: Optional[str],
    gender: Optional[str],
) -> List[str]:
    """
    List the required skinfold sites that are missing for a protocol.

    Args:
        measurements: MeasurementSet or a raw mapping of field name to value
        protocol: Protocol identifier (None uses the measurements' own
            protocol, then the 7-site default)
        gender: "Masculino" or "Feminino"

    Returns:
        Human-readable labels of the missing sites, in protocol order.
        Empty when the evaluation may be saved.
    """
    definition = _effective_protocol(measurements, protocol)

    return [
        SKINFOLD_LABELS.get(site, site)
        for site in definition.sites_for(gender)
        if _is_missing(_field(measurements, site))
    ]


def ensure_complete(
    measurements: Measurements,
    protocol: Optional[str],
    gender: Optional[str],
) -> None:
    """
    Raise IncompleteMeasurementError if any required site is missing.

    Raises:
        IncompleteMeasurementError: With the protocol label and missing labels
    """
    missing = validate_for_save(measurements, protocol, gender)
    if missing:
        raise IncompleteMeasurementError(
            _effective_protocol(measurements, protocol).label, missing
        )
