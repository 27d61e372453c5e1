"""Service managers for querying service status from the host."""

import logging
import subprocess
from pathlib import Path
from typing import Dict, Optional

from ..models.service import ServiceStatus, validate_service_name
from ..utils.constants import (
    DEFAULT_TIMEOUT,
    INIT_DIR,
    SYSTEMCTL,
    SYSTEMD_RUNTIME_DIR,
)

logger = logging.getLogger(__name__)


class ServiceQueryError(Exception):
    """The service manager could not report a status for a service.

    Covers unknown services, an unreachable service manager, permission
    errors and unparseable output.
    """

    def __init__(self, service: str, reason: str):
        self.service = service
        self.reason = reason
        super().__init__(f"{service}: {reason}")


class ServiceManager:
    """Read-only view of the host's service manager."""

    name = "base"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def query_status(self, service: str, user_service: bool = False) -> ServiceStatus:
        """Get the current status of a service.

        Args:
            service: Name of the service
            user_service: True for per-user services, False for system services

        Returns:
            ServiceStatus enum value

        Raises:
            ServiceQueryError: If the status could not be determined
        """
        raise NotImplementedError

    def _check_name(self, service: str) -> str:
        try:
            return validate_service_name(service)
        except ValueError as e:
            raise ServiceQueryError(repr(service), str(e)) from e


class SystemctlServiceManager(ServiceManager):
    """Queries systemd units via `systemctl show`."""

    name = "systemd"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, systemctl: str = SYSTEMCTL):
        super().__init__(timeout)
        self.systemctl = systemctl

    def query_status(self, service: str, user_service: bool = False) -> ServiceStatus:
        service = self._check_name(service)

        cmd = [self.systemctl]
        if user_service:
            cmd.append("--user")

        cmd.extend([
            "show", service,
            "--property=LoadState",
            "--property=ActiveState",
            "--no-pager"
        ])

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
                check=True
            )
        except FileNotFoundError as e:
            raise ServiceQueryError(service, f"{self.systemctl} not found") from e
        except subprocess.TimeoutExpired as e:
            raise ServiceQueryError(service, f"timed out after {self.timeout}s") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise ServiceQueryError(service, stderr or f"systemctl exited with {e.returncode}") from e
        except OSError as e:
            raise ServiceQueryError(service, str(e)) from e

        properties = self._parse_properties(result.stdout)
        logger.debug(f"systemctl show {service}: {properties}")

        if properties.get("LoadState") == "not-found":
            raise ServiceQueryError(service, "unit not found")

        active_state = properties.get("ActiveState")
        if not active_state:
            raise ServiceQueryError(service, "no ActiveState in systemctl output")

        return ServiceStatus.from_active_state(active_state)

    @staticmethod
    def _parse_properties(output: str) -> Dict[str, str]:
        """Parse `Key=Value` lines from `systemctl show`."""
        properties = {}
        for line in output.splitlines():
            key, sep, value = line.partition("=")
            if sep:
                properties[key.strip()] = value.strip()
        return properties


class SysVServiceManager(ServiceManager):
    """Queries SysV init scripts via `<script> status`."""

    name = "sysv"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, init_dir: Path = INIT_DIR):
        super().__init__(timeout)
        self.init_dir = Path(init_dir)

    def query_status(self, service: str, user_service: bool = False) -> ServiceStatus:
        service = self._check_name(service)

        if user_service:
            raise ServiceQueryError(service, "SysV init has no user services")

        script = self.init_dir / service
        if not script.is_file():
            raise ServiceQueryError(service, f"no init script at {script}")

        try:
            result = subprocess.run(
                [str(script), "status"],
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise ServiceQueryError(service, f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise ServiceQueryError(service, str(e)) from e

        status = ServiceStatus.from_lsb_exit_code(result.returncode)
        logger.debug(f"{script} status exited with {result.returncode}: {status.value}")

        if status is ServiceStatus.UNKNOWN:
            stderr = (result.stderr or "").strip()
            raise ServiceQueryError(service, stderr or f"status unknown (exit code {result.returncode})")

        return status


def systemd_booted(runtime_dir: Path = SYSTEMD_RUNTIME_DIR) -> bool:
    """Check if the host was booted with systemd."""
    try:
        return Path(runtime_dir).is_dir()
    except OSError:
        return False


def create_service_manager(backend: str = "auto", timeout: Optional[float] = None) -> ServiceManager:
    """Create the service manager for a backend name.

    Args:
        backend: One of 'auto', 'systemd', 'dbus', 'sysv'
        timeout: Per-query timeout in seconds

    Returns:
        ServiceManager instance

    Raises:
        ValueError: If the backend name is not recognized
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUT

    backend = (backend or "auto").lower()
    if backend == "auto":
        backend = "systemd" if systemd_booted() else "sysv"
        logger.debug(f"Auto-detected service manager backend: {backend}")

    if backend == "systemd":
        return SystemctlServiceManager(timeout=timeout)
    if backend == "sysv":
        return SysVServiceManager(timeout=timeout)
    if backend == "dbus":
        # PyQt6 is only needed for this backend
        from .dbus_manager import DbusServiceManager
        return DbusServiceManager(timeout=timeout)

    raise ValueError(f"Invalid backend: {backend}. Must be one of 'auto', 'systemd', 'dbus', 'sysv'")
