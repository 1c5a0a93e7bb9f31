"""CLI entry point for botguard."""

from __future__ import annotations

import argparse
import sys

from botguard import __version__
from botguard.cidr import ip_in_any
from botguard.config import load_config
from botguard.errors import StoreError
from botguard.logging_config import setup_logging
from botguard.replay import read_signals, replay
from botguard.reporters.console_reporter import ConsoleReporter
from botguard.reporters.json_reporter import JsonReporter
from botguard.storage import create_store


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="botguard",
        description="botguard -- Per-identity abuse scoring for storefront traffic",
    )
    parser.add_argument(
        "--version", action="version", version=f"botguard {__version__}"
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to YAML config file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # -- serve command --
    serve_parser = subparsers.add_parser("serve", help="Run the tracker HTTP service")
    serve_parser.add_argument(
        "--host", type=str, default=None,
        help="Bind address (default: server.host from config)",
    )
    serve_parser.add_argument(
        "--port", type=int, default=None,
        help="Bind port (default: server.port from config)",
    )

    # -- replay command --
    replay_parser = subparsers.add_parser(
        "replay", help="Replay recorded signals through a fresh tracker",
    )
    replay_parser.add_argument(
        "signals", type=str,
        help="JSON Lines file with identity, timestamp, path and optional country",
    )
    replay_parser.add_argument(
        "--format", type=str, default="console",
        choices=["console", "json"],
        help="Output format (default: console)",
    )
    replay_parser.add_argument(
        "--output", type=str, default=None,
        help="Output file path for json format (default: stdout)",
    )

    # -- state command --
    state_parser = subparsers.add_parser("state", help="Show the stored state of an identity")
    state_parser.add_argument("identity", type=str, help="Network address or fingerprint")

    # -- cidr command --
    cidr_parser = subparsers.add_parser(
        "cidr", help="Check whether an address falls inside any of the given ranges",
    )
    cidr_parser.add_argument("ip", type=str, help="IPv4 or IPv6 address")
    cidr_parser.add_argument("cidrs", type=str, nargs="+", help="Ranges as base/prefix")

    return parser.parse_args(argv)


def run_serve(args: argparse.Namespace, config: dict) -> int:
    """Execute the serve command."""
    import uvicorn

    from botguard.api.server import create_app

    server_config = config.get("server", {})
    host = args.host or server_config.get("host", "127.0.0.1")
    port = args.port or int(server_config.get("port", 8787))

    if not server_config.get("reset_key"):
        print("Warning: BG_RESET_KEY not set, reset-state will always be refused", file=sys.stderr)

    uvicorn.run(create_app(config), host=host, port=port)
    return 0


def run_replay(args: argparse.Namespace, config: dict) -> int:
    """Execute the replay command."""
    try:
        records = read_signals(args.signals)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if not records:
        print("No signals found in the replay file")
        return 0

    result = replay(records, config)

    if args.format == "console":
        ConsoleReporter().render(result)
    elif args.format == "json":
        reporter = JsonReporter()
        if args.output:
            reporter.write(result, args.output)
            print(f"JSON replay written to {args.output}")
        else:
            print(reporter.render(result))

    return 0


def run_state(args: argparse.Namespace, config: dict) -> int:
    """Execute the state command."""
    store = create_store(config)
    try:
        with store.exclusive(args.identity):
            state = store.load(args.identity)
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    ConsoleReporter().render_state(args.identity, state)
    return 0


def run_cidr(args: argparse.Namespace, config: dict) -> int:
    """Execute the cidr command. Exit status 0 on match, 1 otherwise."""
    matched = ip_in_any(args.ip, args.cidrs)
    print(f"{args.ip}: {'match' if matched else 'no match'}")
    return 0 if matched else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    setup_logging()
    args = parse_args(argv)

    if not args.command:
        parse_args(["--help"])
        return 1

    config = load_config(args.config)

    if args.command == "serve":
        return run_serve(args, config)
    elif args.command == "replay":
        return run_replay(args, config)
    elif args.command == "state":
        return run_state(args, config)
    elif args.command == "cidr":
        return run_cidr(args, config)

    return 0


if __name__ == "__main__":
    sys.exit(main())
