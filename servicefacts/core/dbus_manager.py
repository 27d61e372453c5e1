"""Service manager that talks to systemd over D-Bus via QtDBus."""

import logging
from typing import Any

from PyQt6.QtCore import QCoreApplication
from PyQt6.QtDBus import QDBusConnection, QDBusInterface, QDBusMessage

from ..models.service import ServiceStatus, unit_name
from ..utils.constants import (
    APP_NAME,
    DBUS_PROPERTIES_INTERFACE,
    DEFAULT_TIMEOUT,
    SYSTEMD_BUS_NAME,
    SYSTEMD_MANAGER_INTERFACE,
    SYSTEMD_OBJECT_PATH,
    SYSTEMD_UNIT_INTERFACE,
)
from .service_manager import ServiceManager, ServiceQueryError

logger = logging.getLogger(__name__)

# QtDBus wants a core application instance; kept alive for the process
_qt_app = None


def _ensure_core_application():
    global _qt_app
    if QCoreApplication.instance() is None:
        _qt_app = QCoreApplication([APP_NAME])


def _unwrap(value: Any) -> Any:
    """Unwrap QDBusVariant / QDBusObjectPath reply arguments."""
    if hasattr(value, "variant"):
        value = value.variant()
    if hasattr(value, "path"):
        value = value.path()
    return value


class DbusServiceManager(ServiceManager):
    """Queries systemd units via the org.freedesktop.systemd1 D-Bus API."""

    name = "dbus"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        super().__init__(timeout)
        _ensure_core_application()

    def query_status(self, service: str, user_service: bool = False) -> ServiceStatus:
        service = self._check_name(service)
        bus = QDBusConnection.sessionBus() if user_service else QDBusConnection.systemBus()

        if not bus.isConnected():
            bus_type = "session" if user_service else "system"
            raise ServiceQueryError(service, f"D-Bus {bus_type} bus not connected")

        manager = self._interface(bus, SYSTEMD_OBJECT_PATH, SYSTEMD_MANAGER_INTERFACE, service)
        unit_path = _unwrap(self._call(manager, service, "LoadUnit", unit_name(service)))

        properties = self._interface(bus, unit_path, DBUS_PROPERTIES_INTERFACE, service)
        load_state = _unwrap(self._call(properties, service, "Get", SYSTEMD_UNIT_INTERFACE, "LoadState"))
        if load_state == "not-found":
            raise ServiceQueryError(service, "unit not found")

        active_state = _unwrap(self._call(properties, service, "Get", SYSTEMD_UNIT_INTERFACE, "ActiveState"))
        logger.debug(f"D-Bus {unit_path}: LoadState={load_state} ActiveState={active_state}")

        if not isinstance(active_state, str) or not active_state:
            raise ServiceQueryError(service, f"unexpected ActiveState: {active_state!r}")

        return ServiceStatus.from_active_state(active_state)

    def _interface(self, bus, path: str, interface: str, service: str) -> QDBusInterface:
        iface = QDBusInterface(SYSTEMD_BUS_NAME, path, interface, bus)
        if not iface.isValid():
            raise ServiceQueryError(service, f"D-Bus interface {interface} not available at {path}")
        iface.setTimeout(int(self.timeout * 1000))
        return iface

    @staticmethod
    def _call(iface: QDBusInterface, service: str, method: str, *args) -> Any:
        """Call a D-Bus method and return its first reply argument."""
        reply = iface.call(method, *args)

        if reply.type() == QDBusMessage.MessageType.ErrorMessage:
            raise ServiceQueryError(service, f"{reply.errorName()}: {reply.errorMessage()}")

        arguments = reply.arguments()
        if not arguments:
            raise ServiceQueryError(service, f"empty reply to {method}")
        return arguments[0]
