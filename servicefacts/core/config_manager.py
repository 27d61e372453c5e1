"""Configuration manager for loading and saving fact definitions and settings."""

import logging
import shutil
from pathlib import Path
from typing import List, Dict, Any, Optional
import yaml

from ..models.service import DEFAULT_FACTS, FactDefinition
from ..utils.constants import (
    BACKENDS,
    CONFIG_FILE,
    DEFAULT_BACKEND,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TIMEOUT,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages fact definitions and application settings."""

    CONFIG_VERSION = "1.0"

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize the config manager.

        Args:
            config_file: Path to the YAML config file, defaults to CONFIG_FILE
        """
        self.config_file = Path(config_file) if config_file else CONFIG_FILE
        self.facts: List[FactDefinition] = []
        self.settings: Dict[str, Any] = {}
        self._load_defaults()

    def load_config(self) -> bool:
        """Load configuration from file.

        Returns:
            True if config loaded successfully, False if defaults are in use
        """
        if not self.config_file.exists():
            logger.info(f"Config file {self.config_file} not found, using defaults")
            self._load_defaults()
            return False

        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f)

            if not data:
                logger.warning("Empty config file, using defaults")
                self._load_defaults()
                return False

            if not self._validate_config(data):
                logger.error("Invalid config file, using defaults")
                self._load_defaults()
                return False

            if "facts" in data:
                self.facts = []
                for fact_data in data["facts"]:
                    try:
                        self.facts.append(FactDefinition.from_dict(fact_data))
                    except (KeyError, TypeError, ValueError, AttributeError) as e:
                        logger.error(f"Failed to load fact definition {fact_data!r}: {e}")
            else:
                self.facts = list(DEFAULT_FACTS)

            self.settings = data.get("settings") or {}
            self._ensure_default_settings()

            logger.info(f"Loaded {len(self.facts)} facts from config")
            return True

        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}")
            self._load_defaults()
            return False
        except OSError as e:
            logger.error(f"Failed to read config: {e}")
            self._load_defaults()
            return False

    def save_config(self) -> bool:
        """Save configuration to file.

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            # Create backup if config exists
            if self.config_file.exists():
                backup_file = self.config_file.with_suffix('.yaml.bak')
                shutil.copy2(self.config_file, backup_file)
                logger.debug(f"Created backup at {backup_file}")

            data = {
                "version": self.CONFIG_VERSION,
                "facts": [fact.to_dict() for fact in self.facts],
                "settings": self.settings
            }

            # Write to temp file first (atomic write)
            temp_file = self.config_file.with_suffix('.yaml.tmp')
            with open(temp_file, 'w') as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False)

            temp_file.replace(self.config_file)

            logger.info(f"Saved {len(self.facts)} facts to {self.config_file}")
            return True

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save config: {e}")
            return False

    def get_facts(self) -> List[FactDefinition]:
        """Get list of configured facts."""
        return list(self.facts)

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting value.

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        return self.settings.get(key, default)

    def set_setting(self, key: str, value: Any):
        """Set a setting value (in memory; call save_config to persist).

        Args:
            key: Setting key
            value: Setting value
        """
        self.settings[key] = value

    def _validate_config(self, data: dict) -> bool:
        """Validate configuration data structure.

        Args:
            data: Configuration dictionary

        Returns:
            True if valid, False otherwise
        """
        if not isinstance(data, dict):
            logger.error("Config must be a dictionary")
            return False

        if "version" not in data:
            logger.warning("Config missing version, assuming valid")

        if "facts" in data and not isinstance(data["facts"], list):
            logger.error("Facts must be a list")
            return False

        settings = data.get("settings")
        if settings is not None and not isinstance(settings, dict):
            logger.error("Settings must be a dictionary")
            return False

        if settings:
            backend = settings.get("backend", DEFAULT_BACKEND)
            if backend not in BACKENDS:
                logger.error(f"Invalid backend: {backend}. Must be one of {', '.join(BACKENDS)}")
                return False

            timeout = settings.get("timeout", DEFAULT_TIMEOUT)
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                logger.error(f"Timeout must be a positive number, got {timeout!r}")
                return False

        return True

    def _load_defaults(self):
        """Load default configuration."""
        self.facts = list(DEFAULT_FACTS)
        self.settings = {}
        self._ensure_default_settings()
        logger.debug("Loaded default configuration")

    def _ensure_default_settings(self):
        """Ensure all default settings exist."""
        defaults = {
            "backend": DEFAULT_BACKEND,
            "timeout": DEFAULT_TIMEOUT,
            "log_level": DEFAULT_LOG_LEVEL,
            "log_file": None
        }

        for key, value in defaults.items():
            if key not in self.settings:
                self.settings[key] = value
