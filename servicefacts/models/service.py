"""Data models for service status facts."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Suffixes systemd recognizes as unit types
UNIT_SUFFIXES = (
    ".service", ".socket", ".target", ".timer", ".mount",
    ".automount", ".path", ".slice", ".scope", ".swap", ".device",
)


class ServiceStatus(Enum):
    """Enumeration of possible service states."""

    RUNNING = "running"
    STOPPED = "stopped"
    UNKNOWN = "unknown"

    @classmethod
    def from_active_state(cls, active_state: str) -> 'ServiceStatus':
        """Convert a systemd ActiveState to ServiceStatus.

        Only 'active' and 'reloading' count as running, the same as
        `systemctl is-active`.

        Args:
            active_state: ActiveState property value from systemd

        Returns:
            ServiceStatus enum value
        """
        state = active_state.strip().lower()
        if state in ("active", "reloading"):
            return cls.RUNNING
        if state in ("inactive", "failed", "activating", "deactivating"):
            return cls.STOPPED
        return cls.UNKNOWN

    @classmethod
    def from_lsb_exit_code(cls, code: int) -> 'ServiceStatus':
        """Convert an LSB init script `status` exit code to ServiceStatus.

        Args:
            code: Exit code of `<script> status`

        Returns:
            ServiceStatus enum value
        """
        if code == 0:
            return cls.RUNNING
        if code in (1, 2, 3):
            return cls.STOPPED
        return cls.UNKNOWN


def validate_service_name(service: str) -> str:
    """Check a service identifier and return it stripped.

    Raises:
        ValueError: If the identifier is empty
    """
    if not isinstance(service, str) or not service.strip():
        raise ValueError("Service name cannot be empty")
    return service.strip()


def unit_name(service: str) -> str:
    """Get the full systemd unit name for a service identifier.

    'alert_manager' becomes 'alert_manager.service'; names that already
    carry a unit suffix are returned unchanged.
    """
    service = validate_service_name(service)
    if service.endswith(UNIT_SUFFIXES):
        return service
    return f"{service}.service"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single status probe.

    Attributes:
        service: Service identifier that was queried
        status: Status reported by the service manager (UNKNOWN on error)
        error: Reason the status could not be determined, if any
    """

    service: str
    status: ServiceStatus = ServiceStatus.UNKNOWN
    error: Optional[str] = None

    @property
    def running(self) -> bool:
        return self.status is ServiceStatus.RUNNING

    @property
    def determined(self) -> bool:
        """False when the service manager could not be queried."""
        return self.error is None


@dataclass
class FactDefinition:
    """A named fact backed by a service status probe.

    Attributes:
        name: Fact name published to the catalog
        service: Service identifier to probe
        user_service: Query the per-user service manager instead of the system one
    """

    name: str
    service: str
    user_service: bool = False

    def __post_init__(self):
        """Validate fact definition after initialization."""
        if not self.name or not self.name.strip():
            raise ValueError("Fact name cannot be empty")
        self.name = self.name.strip()
        self.service = validate_service_name(self.service)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "service": self.service,
            "user_service": self.user_service,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'FactDefinition':
        """Create FactDefinition from dictionary.

        Args:
            data: Dictionary with fact configuration

        Returns:
            FactDefinition instance
        """
        return cls(
            name=data["name"],
            service=data["service"],
            user_service=bool(data.get("user_service", False)),
        )


DEFAULT_FACTS = (
    FactDefinition(name="prometheus_alert_manager_running", service="alert_manager"),
)
