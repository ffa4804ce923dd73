"""
layerconf CLI argument parser.

This module implements the command-line interface for inspecting a layered
configuration directory using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from layerconf.cli.utils import (
    create_resolver,
    format_value,
    get_default_virtualhost,
    print_error,
)
from layerconf.config.resolver import WILDCARD, Resolver
from layerconf.core.exceptions import LayerConfError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("layerconf")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """layerconf command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="layerconf",
            description="layerconf - layered configuration resolver",
            epilog='Use "layerconf COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"layerconf {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config-dir",
            type=Path,
            metavar="PATH",
            help="Configuration directory (default: $LAYERCONF_CONFIG_DIR or ./config)",
        )
        parser.add_argument(
            "--virtualhost",
            metavar="NAME",
            help="Virtualhost to load (default: $LAYERCONF_VIRTUALHOST or the "
            "'virtualhost' parameter of the base configuration)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_get_command(subparsers)
        self._add_exists_command(subparsers)
        self._add_virtualhosts_command(subparsers)
        self._add_dump_command(subparsers)

        return parser

    def _add_get_command(self, subparsers):
        """Add 'get' subcommand."""
        parser = subparsers.add_parser(
            "get",
            help="Print a parameter value",
            description="Resolve a parameter, or a family of parameters with KEY ending in '*'",
        )
        parser.add_argument("key", metavar="KEY", help="Parameter key")
        parser.add_argument(
            "args",
            nargs="*",
            metavar="ARG",
            help="Arguments passed to deferred values and processors",
        )

    def _add_exists_command(self, subparsers):
        """Add 'exists' subcommand."""
        parser = subparsers.add_parser(
            "exists",
            help="Check whether a parameter is defined",
            description="Exit with status 0 if the parameter is defined, 1 otherwise",
        )
        parser.add_argument("key", metavar="KEY", help="Parameter key")

    def _add_virtualhosts_command(self, subparsers):
        """Add 'virtualhosts' subcommand."""
        subparsers.add_parser(
            "virtualhosts",
            help="List virtualhosts",
            description="List virtualhosts that have an override file",
        )

    def _add_dump_command(self, subparsers):
        """Add 'dump' subcommand."""
        parser = subparsers.add_parser(
            "dump",
            help="Print the resolved configuration",
            description="Resolve every parameter and print the result as YAML",
        )
        parser.add_argument(
            "--all-virtualhosts",
            action="store_true",
            help="Dump the configuration of each virtualhost in turn",
        )

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except LayerConfError as e:
            logger.debug(f"Configuration error: {e}")
            print_error(e.code, e.details)
            return 1
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.WARNING
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "get": self._run_get,
            "exists": self._run_exists,
            "virtualhosts": self._run_virtualhosts,
            "dump": self._run_dump,
        }

        handler = command_map.get(args.command)
        if not handler:
            logger.error(f"Unknown command: {args.command}")
            return 1

        resolver = create_resolver(args.config_dir)
        return handler(resolver, args)

    def _load(self, resolver: Resolver, args) -> None:
        """Load the snapshot of the selected virtualhost."""
        resolver.load(get_default_virtualhost(args.virtualhost))

    def _run_get(self, resolver: Resolver, args) -> int:
        self._load(resolver, args)

        if not args.key.endswith(WILDCARD) and not resolver.exists(args.key):
            print_error(f"Unknown parameter: {args.key}")
            return 1

        print(format_value(resolver.get(args.key, *args.args)))
        return 0

    def _run_exists(self, resolver: Resolver, args) -> int:
        self._load(resolver, args)
        return 0 if resolver.exists(args.key) else 1

    def _run_virtualhosts(self, resolver: Resolver, args) -> int:
        for name in resolver.list_virtualhosts():
            print(name)
        return 0

    def _run_dump(self, resolver: Resolver, args) -> int:
        if not args.all_virtualhosts:
            self._load(resolver, args)
            print(format_value(resolver.dump()))
            return 0

        def dump_current():
            print(f"# virtualhost: {resolver.virtualhost or '(none)'}")
            print(format_value(resolver.dump()))

        resolver.run_for_each_virtualhost(dump_current)
        return 0


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
