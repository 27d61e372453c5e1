"""Fact collection and formatting."""

import json
import logging
from typing import Dict, Iterable, List

import yaml

from ..models.service import FactDefinition
from .probe import ServiceStatusProbe

logger = logging.getLogger(__name__)


class FactCollector:
    """Resolves named service facts through a status probe."""

    def __init__(self, probe: ServiceStatusProbe, facts: Iterable[FactDefinition]):
        self.probe = probe
        self.facts: List[FactDefinition] = list(facts)

    def get_fact(self, name: str) -> FactDefinition:
        """Get a fact definition by name.

        Raises:
            KeyError: If no fact with that name is defined
        """
        for fact in self.facts:
            if fact.name == name:
                return fact
        raise KeyError(name)

    def resolve(self, name: str) -> bool:
        """Resolve a single fact by name."""
        fact = self.get_fact(name)
        return self.probe.is_running(fact.service, user_service=fact.user_service)

    def collect(self) -> Dict[str, bool]:
        """Resolve every defined fact.

        Returns:
            Dictionary of fact name to value, in definition order
        """
        values = {}
        for fact in self.facts:
            values[fact.name] = self.probe.is_running(fact.service, user_service=fact.user_service)
        logger.info(f"Collected {len(values)} facts")
        return values


def format_facts(facts: Dict[str, bool], fmt: str = "text") -> str:
    """Render a fact catalog for output.

    Args:
        facts: Dictionary of fact name to value
        fmt: 'text' (name => value), 'json' or 'yaml'

    Returns:
        Formatted string without trailing newline
    """
    if fmt == "json":
        return json.dumps(facts, indent=2)
    if fmt == "yaml":
        return yaml.safe_dump(facts, default_flow_style=False, sort_keys=False).rstrip("\n")
    if fmt == "text":
        return "\n".join(f"{name} => {str(value).lower()}" for name, value in facts.items())

    raise ValueError(f"Invalid format: {fmt}. Must be 'text', 'json' or 'yaml'")
