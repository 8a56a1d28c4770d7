#!/usr/bin/env python3
"""
NordVPN TUI CLI - Command-line entry point and non-interactive commands.
"""

import argparse
import logging
import os
import sys
from dataclasses import asdict
from typing import Optional

from . import __version__
from .backend import BackendError, NordVPNBackend, VPNBackend
from .config import Config, ConfigManager
from .models import Connected
from .roster import parse_roster
from .status_parser import describe_status, parse_status


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    DIM = "\033[2m"


def supports_color() -> bool:
    """Check if terminal supports colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(sys.stdout, "isatty"):
        return False
    return sys.stdout.isatty()


def colorize(text: str, color: str) -> str:
    """Apply color to text if supported."""
    if supports_color():
        return f"{color}{text}{Colors.RESET}"
    return text


def configure_logging(log_file: Optional[str], level: str = "WARNING", verbose: bool = False) -> None:
    """Send log records to a file; without one, logging stays silent."""
    if not log_file:
        return
    logging.basicConfig(
        filename=os.path.expanduser(log_file),
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
    )


class NordVPNCLI:
    """Non-interactive commands for the NordVPN client."""

    def __init__(self, backend: VPNBackend, config_manager: Optional[ConfigManager] = None):
        """
        Initialize CLI.
        
        Args:
            backend: VPN client to use.
            config_manager: Configuration store for the config commands.
        """
        self.backend = backend
        self.config_manager = config_manager if config_manager is not None else ConfigManager()

    def cmd_countries(self) -> int:
        """
        List the connectable countries.
        
        Returns:
            Exit code.
        """
        try:
            regions = parse_roster(self.backend.list_regions())
        except BackendError as e:
            print(colorize(f"Error: {e}", Colors.RED))
            return 1

        if not regions:
            print(colorize("No countries found.", Colors.YELLOW))
            return 0

        width = max(len(r.display_name) for r in regions)
        for region in regions:
            print(f"{region.display_name:<{width}}  {colorize(region.id, Colors.DIM)}")

        print(f"\nTotal: {len(regions)} countries")
        return 0

    def cmd_status(self) -> int:
        """
        Show the current connection status.
        
        Returns:
            Exit code.
        """
        try:
            state = parse_status(self.backend.query_status())
        except BackendError as e:
            print(colorize(f"Error: {e}", Colors.RED))
            return 1

        color = Colors.GREEN if isinstance(state, Connected) else Colors.RED
        print(colorize(describe_status(state), Colors.BOLD + color))

        if isinstance(state, Connected):
            for label, value in (("City", state.city), ("Server", state.server), ("IP", state.ip)):
                if value:
                    print(f"  {label + ':':<8} {value}")
        return 0

    def cmd_connect(self, region: str) -> int:
        """
        Connect to a country.
        
        Args:
            region: Country id or display name.
            
        Returns:
            Exit code.
        """
        region_id = region.strip().replace(" ", "_")
        print(colorize(f"Connecting to {region_id.replace('_', ' ')}...", Colors.CYAN))
        try:
            self.backend.connect(region_id)
        except BackendError as e:
            print(colorize(f"Failed to connect: {e}", Colors.RED))
            return 1
        return self.cmd_status()

    def cmd_disconnect(self) -> int:
        """
        Disconnect from the VPN.
        
        Returns:
            Exit code.
        """
        try:
            self.backend.disconnect()
        except BackendError as e:
            print(colorize(f"Failed to disconnect: {e}", Colors.RED))
            return 1
        print(colorize("Disconnected", Colors.GREEN))
        return 0

    def cmd_config_show(self) -> int:
        """Show current configuration."""
        config = self.config_manager.load()
        print(colorize("Configuration:", Colors.BOLD))
        for key, value in asdict(config).items():
            print(f"  {key}: {value}")
        return 0

    def cmd_config_set(self, key: str, value: str) -> int:
        """Set a configuration value."""
        try:
            self.config_manager.set(key, value)
        except ValueError as e:
            print(colorize(f"Error: {e}", Colors.RED))
            return 1
        print(colorize(f"Set {key} = {getattr(self.config_manager.config, key)}", Colors.GREEN))
        return 0

    def cmd_config_reset(self) -> int:
        """Reset configuration to defaults."""
        self.config_manager.reset()
        print(colorize("Configuration reset to defaults", Colors.GREEN))
        return 0

    def cmd_config_path(self) -> int:
        """Show configuration file path."""
        print(self.config_manager.config_path)
        return 0


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="nordvpn-tui",
        description="Interactive terminal controller for the NordVPN Linux client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nordvpn-tui                          # Launch the interactive picker
  nordvpn-tui countries                # List countries
  nordvpn-tui connect "United States"  # Connect to a country
  nordvpn-tui status                   # Show connection status
  nordvpn-tui config set log_file ~/nordvpn-tui.log
        """
    )

    # Global options
    parser.add_argument("--config-dir", type=str,
                       help="Custom configuration directory")
    parser.add_argument("--nordvpn-path", type=str,
                       help="Path to the nordvpn executable")
    parser.add_argument("--timeout", type=float,
                       help="Seconds to wait for each nordvpn command")
    parser.add_argument("--log-file", type=str,
                       help="Write a debug log to this file")
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Log at debug level (needs a log file)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("tui", help="Launch the interactive interface (default)")
    subparsers.add_parser("countries", help="List available countries")
    subparsers.add_parser("status", help="Show connection status")

    connect_parser = subparsers.add_parser("connect", help="Connect to a country")
    connect_parser.add_argument("region", help="Country name or id")

    subparsers.add_parser("disconnect", help="Disconnect from the VPN")

    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_sub = config_parser.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Show current configuration")
    config_set = config_sub.add_parser("set", help="Set a configuration value")
    config_set.add_argument("key", help="Configuration key")
    config_set.add_argument("value", help="Value to set")
    config_sub.add_parser("reset", help="Reset configuration to defaults")
    config_sub.add_parser("path", help="Show configuration file path")

    return parser


def build_backend(config: Config, args: argparse.Namespace) -> NordVPNBackend:
    """Create the backend from config, with command-line overrides."""
    return NordVPNBackend(
        executable=args.nordvpn_path or config.nordvpn_path,
        timeout=args.timeout if args.timeout is not None else config.command_timeout,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    config_manager = ConfigManager(config_dir=args.config_dir)
    config = config_manager.load()
    configure_logging(args.log_file or config.log_file, config.log_level, args.verbose)

    backend = build_backend(config, args)
    cli = NordVPNCLI(backend, config_manager)

    try:
        if args.command in (None, "tui"):
            from .tui import run_tui
            return run_tui(backend, show_help=config.show_help)
        elif args.command == "countries":
            return cli.cmd_countries()
        elif args.command == "status":
            return cli.cmd_status()
        elif args.command == "connect":
            return cli.cmd_connect(args.region)
        elif args.command == "disconnect":
            return cli.cmd_disconnect()
        elif args.command == "config":
            if args.config_command == "show":
                return cli.cmd_config_show()
            elif args.config_command == "set":
                return cli.cmd_config_set(args.key, args.value)
            elif args.config_command == "reset":
                return cli.cmd_config_reset()
            elif args.config_command == "path":
                return cli.cmd_config_path()
            else:
                parser.parse_args(["config", "--help"])
                return 0
        else:
            parser.print_help()
            return 0

    except KeyboardInterrupt:
        print(colorize("\nOperation cancelled.", Colors.YELLOW))
        return 130


if __name__ == "__main__":
    sys.exit(main())
