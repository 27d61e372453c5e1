"""Data models for service status facts."""

from .service import (
    DEFAULT_FACTS,
    FactDefinition,
    ProbeResult,
    ServiceStatus,
    unit_name,
    validate_service_name,
)

__all__ = [
    "DEFAULT_FACTS",
    "FactDefinition",
    "ProbeResult",
    "ServiceStatus",
    "unit_name",
    "validate_service_name",
]
