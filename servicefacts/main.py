#!/usr/bin/env python3
"""Entry point for the servicefacts command."""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .core.config_manager import ConfigManager
from .core.facts import FactCollector, format_facts
from .core.probe import ServiceStatusProbe
from .core.service_manager import create_service_manager
from .utils.constants import APP_NAME, BACKENDS, OUTPUT_FORMATS

logger = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None):
    """Set up application logging.

    Args:
        level: Log level name
        log_file: Optional file to write logs to in addition to stderr
    """
    handlers = [logging.StreamHandler(sys.stderr)]
    log_file_error = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file))
        except OSError as e:
            log_file_error = e

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )

    if log_file_error:
        logger.warning(f"Could not open log file {log_file}: {log_file_error}")


def positive_float(value: str) -> float:
    """argparse type for a timeout: a number greater than zero."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{APP_NAME} - Report whether host services are running as named facts"
    )
    parser.add_argument('facts', nargs='*', metavar='FACT',
                        help='Fact names to resolve (default: all configured facts)')
    parser.add_argument('-c', '--config',
                        help='Path to the YAML config file')
    parser.add_argument('-b', '--backend', choices=BACKENDS,
                        help='Service manager backend (overrides config)')
    parser.add_argument('-t', '--timeout', type=positive_float,
                        help='Per-query timeout in seconds (overrides config)')
    parser.add_argument('-f', '--format', choices=OUTPUT_FORMATS, default='text',
                        help='Output format')
    parser.add_argument('-s', '--service',
                        help='Probe a single service and print true/false')
    parser.add_argument('--user', action='store_true',
                        help='Query the per-user service manager (with --service)')
    parser.add_argument('--write-config', action='store_true',
                        help='Write the effective configuration to the config file and exit')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.user and args.service is None:
        parser.error("--user requires --service")

    setup_logging("DEBUG" if args.verbose else "WARNING")

    config_manager = ConfigManager(args.config)
    config_manager.load_config()

    if args.backend:
        config_manager.set_setting("backend", args.backend)
    if args.timeout is not None:
        config_manager.set_setting("timeout", args.timeout)

    if not args.verbose:
        setup_logging(
            config_manager.get_setting("log_level", "WARNING"),
            config_manager.get_setting("log_file")
        )

    if args.write_config:
        return 0 if config_manager.save_config() else 1

    try:
        service_manager = create_service_manager(
            config_manager.get_setting("backend"),
            timeout=config_manager.get_setting("timeout")
        )
        probe = ServiceStatusProbe(service_manager)

        if args.service is not None:
            running = probe.is_running(args.service, user_service=args.user)
            print(str(running).lower())
            return 0

        collector = FactCollector(probe, config_manager.get_facts())

        if args.facts:
            values = {}
            for name in args.facts:
                try:
                    values[name] = collector.resolve(name)
                except KeyError:
                    print(f"{APP_NAME}: unknown fact: {name}", file=sys.stderr)
                    return 2
        else:
            values = collector.collect()

        output = format_facts(values, args.format)
        if output:
            print(output)
        return 0

    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
