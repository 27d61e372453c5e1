"""Tests for the QtDBus service manager, with the bus replaced by fakes."""

import pytest

pytest.importorskip("PyQt6.QtDBus")

from PyQt6.QtDBus import QDBusMessage  # noqa: E402

from servicefacts.core import dbus_manager  # noqa: E402
from servicefacts.core.dbus_manager import DbusServiceManager  # noqa: E402
from servicefacts.core.service_manager import ServiceQueryError, create_service_manager  # noqa: E402
from servicefacts.models.service import ServiceStatus  # noqa: E402
from servicefacts.utils.constants import (  # noqa: E402
    DBUS_PROPERTIES_INTERFACE,
    SYSTEMD_MANAGER_INTERFACE,
    SYSTEMD_UNIT_INTERFACE,
)


class FakeReply:
    def __init__(self, arguments=None, error=None):
        self._arguments = arguments or []
        self._error = error

    def type(self):
        if self._error:
            return QDBusMessage.MessageType.ErrorMessage
        return QDBusMessage.MessageType.ReplyMessage

    def errorName(self):
        return self._error[0]

    def errorMessage(self):
        return self._error[1]

    def arguments(self):
        return self._arguments


class FakeSystemd:
    """Units keyed by unit name: (LoadState, ActiveState)."""

    def __init__(self, units=None, connected=True, load_error=None):
        self.units = units or {}
        self.connected = connected
        self.load_error = load_error
        self.buses = []
        self.timeouts = []

    def unit_path(self, unit):
        return "/org/freedesktop/systemd1/unit/" + unit.replace(".", "_2e")

    def reply(self, path, interface, method, args):
        if interface == SYSTEMD_MANAGER_INTERFACE and method == "LoadUnit":
            if self.load_error:
                return FakeReply(error=self.load_error)
            return FakeReply([self.unit_path(args[0])])

        if interface == DBUS_PROPERTIES_INTERFACE and method == "Get":
            assert args[0] == SYSTEMD_UNIT_INTERFACE
            for unit, (load_state, active_state) in self.units.items():
                if self.unit_path(unit) == path:
                    return FakeReply([{"LoadState": load_state, "ActiveState": active_state}[args[1]]])
            return FakeReply(["not-found" if args[1] == "LoadState" else "inactive"])

        return FakeReply(error=("org.freedesktop.DBus.Error.UnknownMethod", method))


@pytest.fixture
def systemd(monkeypatch):
    fake = FakeSystemd(units={"alert_manager.service": ("loaded", "active")})

    class FakeBus:
        def __init__(self, kind):
            self.kind = kind

        def isConnected(self):
            return fake.connected

    class FakeConnection:
        @staticmethod
        def systemBus():
            fake.buses.append("system")
            return FakeBus("system")

        @staticmethod
        def sessionBus():
            fake.buses.append("session")
            return FakeBus("session")

    class FakeInterface:
        def __init__(self, bus_name, path, interface, bus):
            self.path = path
            self.interface = interface

        def isValid(self):
            return True

        def setTimeout(self, ms):
            fake.timeouts.append(ms)

        def call(self, method, *args):
            return fake.reply(self.path, self.interface, method, args)

    monkeypatch.setattr(dbus_manager, "QDBusConnection", FakeConnection)
    monkeypatch.setattr(dbus_manager, "QDBusInterface", FakeInterface)
    return fake


def test_active_unit_is_running(systemd):
    assert DbusServiceManager().query_status("alert_manager") is ServiceStatus.RUNNING
    assert systemd.buses == ["system"]


def test_inactive_unit_is_stopped(systemd):
    systemd.units["alert_manager.service"] = ("loaded", "inactive")
    assert DbusServiceManager().query_status("alert_manager") is ServiceStatus.STOPPED


def test_user_service_uses_session_bus(systemd):
    DbusServiceManager().query_status("alert_manager", user_service=True)
    assert systemd.buses == ["session"]


def test_timeout_in_milliseconds(systemd):
    DbusServiceManager(timeout=2.5).query_status("alert_manager")
    assert set(systemd.timeouts) == {2500}


def test_unknown_unit_raises(systemd):
    with pytest.raises(ServiceQueryError, match="unit not found"):
        DbusServiceManager().query_status("no_such_service")


def test_error_reply_raises(systemd):
    systemd.load_error = ("org.freedesktop.DBus.Error.AccessDenied", "Permission denied")
    with pytest.raises(ServiceQueryError, match="AccessDenied: Permission denied"):
        DbusServiceManager().query_status("alert_manager")


def test_disconnected_bus_raises(systemd):
    systemd.connected = False
    with pytest.raises(ServiceQueryError, match="system bus not connected"):
        DbusServiceManager().query_status("alert_manager")


def test_factory_builds_dbus_manager(systemd):
    assert isinstance(create_service_manager("dbus"), DbusServiceManager)
