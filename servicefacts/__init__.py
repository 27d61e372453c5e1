"""servicefacts - Report whether host services are running as named facts."""

__version__ = "1.0.0"
