"""Pytest fixtures for servicefacts tests."""

import logging
import subprocess
import sys
from pathlib import Path

import pytest

# Ensure project root is in path for package imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from servicefacts.core.service_manager import ServiceManager, ServiceQueryError  # noqa: E402
from servicefacts.models.service import ServiceStatus  # noqa: E402


class FakeServiceManager(ServiceManager):
    """In-memory service manager: known services map to a status or an error reason."""

    name = "fake"

    def __init__(self, statuses=None, errors=None):
        super().__init__()
        self.statuses = dict(statuses or {})
        self.errors = dict(errors or {})
        self.calls = []

    def query_status(self, service, user_service=False):
        self.calls.append((service, user_service))
        service = self._check_name(service)
        if service in self.errors:
            raise ServiceQueryError(service, self.errors[service])
        if service not in self.statuses:
            raise ServiceQueryError(service, "unit not found")
        return self.statuses[service]


class UnavailableServiceManager(ServiceManager):
    """Service manager that cannot be reached at all."""

    def query_status(self, service, user_service=False):
        raise ServiceQueryError(service, "Failed to connect to bus: Permission denied")


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def fake_manager() -> FakeServiceManager:
    return FakeServiceManager(
        statuses={
            "alert_manager": ServiceStatus.RUNNING,
            "node_exporter": ServiceStatus.STOPPED,
        }
    )


@pytest.fixture
def unavailable_manager() -> UnavailableServiceManager:
    return UnavailableServiceManager()


@pytest.fixture
def fake_run(monkeypatch):
    """Replace subprocess.run; returns the list of recorded commands.

    Set `fake_run.result` to a CompletedProcess or an exception instance.
    """

    class Recorder:
        def __init__(self):
            self.commands = []
            self.result = subprocess.CompletedProcess([], 0, stdout="", stderr="")

        def __call__(self, cmd, **kwargs):
            self.commands.append(cmd)
            if isinstance(self.result, BaseException):
                raise self.result
            if kwargs.get("check") and self.result.returncode != 0:
                raise subprocess.CalledProcessError(
                    self.result.returncode, cmd,
                    output=self.result.stdout, stderr=self.result.stderr
                )
            return self.result

    recorder = Recorder()
    monkeypatch.setattr(subprocess, "run", recorder)
    return recorder


@pytest.fixture
def config_file(tmp_path) -> Path:
    return tmp_path / "config.yaml"
