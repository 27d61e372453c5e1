"""Application constants and configuration."""

from pathlib import Path

# Application metadata
APP_NAME = "servicefacts"

# Paths
CONFIG_DIR = Path.home() / ".config" / "servicefacts"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Host service manager locations
SYSTEMCTL = "systemctl"
SYSTEMD_RUNTIME_DIR = Path("/run/systemd/system")  # exists only when booted with systemd
INIT_DIR = Path("/etc/init.d")

# systemd D-Bus API
SYSTEMD_BUS_NAME = "org.freedesktop.systemd1"
SYSTEMD_OBJECT_PATH = "/org/freedesktop/systemd1"
SYSTEMD_MANAGER_INTERFACE = "org.freedesktop.systemd1.Manager"
SYSTEMD_UNIT_INTERFACE = "org.freedesktop.systemd1.Unit"
DBUS_PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"

# Default settings
DEFAULT_BACKEND = "auto"
DEFAULT_TIMEOUT = 10  # seconds
DEFAULT_LOG_LEVEL = "WARNING"

BACKENDS = ("auto", "systemd", "dbus", "sysv")
OUTPUT_FORMATS = ("text", "json", "yaml")
