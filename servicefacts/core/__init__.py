"""Core functionality for service status facts."""

from .service_manager import (
    ServiceManager,
    ServiceQueryError,
    SystemctlServiceManager,
    SysVServiceManager,
    create_service_manager,
)
from .probe import ServiceStatusProbe
from .facts import FactCollector, format_facts
from .config_manager import ConfigManager

__all__ = [
    "ServiceManager",
    "ServiceQueryError",
    "SystemctlServiceManager",
    "SysVServiceManager",
    "create_service_manager",
    "ServiceStatusProbe",
    "FactCollector",
    "format_facts",
    "ConfigManager",
]
