"""Service status probe."""

import logging

from ..models.service import ProbeResult, ServiceStatus
from .service_manager import ServiceManager, ServiceQueryError

logger = logging.getLogger(__name__)


class ServiceStatusProbe:
    """Reports whether a service is running, failing closed on query errors.

    The probe holds no state of its own. Every call issues one read-only
    query to the service manager it was constructed with.
    """

    def __init__(self, service_manager: ServiceManager):
        """Initialize the probe.

        Args:
            service_manager: ServiceManager used to query the host
        """
        self.service_manager = service_manager

    def check(self, service: str, user_service: bool = False) -> ProbeResult:
        """Query a service and return the detailed result.

        Args:
            service: Name of the service
            user_service: True for per-user services, False for system services

        Returns:
            ProbeResult; status is UNKNOWN and error is set when the service
            manager could not be queried
        """
        try:
            status = self.service_manager.query_status(service, user_service=user_service)
        except ServiceQueryError as e:
            logger.warning(f"Could not query status of {e.service}: {e.reason}")
            return ProbeResult(service=service, status=ServiceStatus.UNKNOWN, error=e.reason)

        logger.debug(f"Service {service} is {status.value}")
        return ProbeResult(service=service, status=status)

    def is_running(self, service: str, user_service: bool = False) -> bool:
        """Check if a service is running.

        Args:
            service: Name of the service
            user_service: True for per-user services, False for system services

        Returns:
            True only if the service manager reports the service as running
        """
        return self.check(service, user_service=user_service).running
