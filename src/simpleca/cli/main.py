"""SimpleCA command-line entry point.

Usage::

    simpleca ca                      # create missing CA tiers
    simpleca ca --reset -v           # regenerate root + intermediate
    simpleca server '*.example.com' '*.another.com' --org "Example Ltd"
    simpleca --config-dir ./pki server localhost 127.0.0.1.nip.io
    python -m simpleca ca
"""

from __future__ import annotations

import argparse
import logging
import sys

log = logging.getLogger(__name__)


def _get_version() -> str:
    from simpleca import __version__

    return __version__


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simpleca",
        description="SimpleCA — create certificates for a dev environment easily.",
    )
    parser.add_argument(
        "--config-dir",
        metavar="PATH",
        default=None,
        help="Configuration directory (default: $SIMPLECA_HOME or ~/.simpleca).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug output (full tracebacks, verbose logging).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # ca
    ca_parser = subparsers.add_parser(
        "ca",
        help="Create missing CA certificates (use --reset to regenerate all)",
    )
    ca_parser.add_argument(
        "--reset",
        action="store_true",
        default=False,
        help="Regenerate root and intermediate even if they already exist.",
    )
    ca_parser.add_argument("-v", dest="verbose", action="store_true", help="Sets verbose mode")

    # server
    server_parser = subparsers.add_parser("server", help="Create server certificate")
    server_parser.add_argument(
        "common_name",
        metavar="COMMON_NAME",
        help="Common name field of the certificate",
    )
    server_parser.add_argument(
        "sub_alt_names",
        metavar="subjectAltName",
        nargs="+",
        help="DNS entry in the SubjectAltName extension of the certificate",
    )
    for flag, help_text in [
        ("--country", "Country field of the certificate"),
        ("--state", "State or province field of the certificate"),
        ("--locality", "Locality field of the certificate"),
        ("--org", "Organization field of the certificate"),
        ("--org-unit", "Organization unit field of the certificate"),
    ]:
        server_parser.add_argument(flag, default="", metavar="NAME", help=help_text)
    server_parser.add_argument("-v", dest="verbose", action="store_true", help="Sets verbose mode")

    return parser


def _print_error(message: str) -> None:
    """Print a user-facing error to stderr."""
    print(f"simpleca: error: {message}", file=sys.stderr)  # noqa: T201


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Parses arguments, loads config, dispatches."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stderr)
        sys.exit(1)

    # -- bootstrap logging early (basic stderr until config is loaded) ---
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    # -- resolve config directory & load config ---
    try:
        from simpleca.config import (
            SimpleCAConfig,
            ensure_config_file,
            resolve_config_dir,
        )

        config_dir = resolve_config_dir(args.config_dir)
        config = SimpleCAConfig(
            config_file=ensure_config_file(config_dir),
            schema_file="bundled",
        )
    except Exception as exc:
        if args.debug:
            raise
        _print_error(f"failed to load configuration: {exc}")
        sys.exit(1)

    # -- replace bootstrap logging ---
    from simpleca.logging import configure_logging

    configure_logging(
        config.settings.logging,
        verbose=getattr(args, "verbose", False) or args.debug,
    )
    if args.debug:
        logging.getLogger("simpleca").setLevel(logging.DEBUG)

    from simpleca.ca.store import CAStore

    store = CAStore(config_dir)

    # -- dispatch subcommand ---
    try:
        if args.command == "ca":
            from simpleca.cli.commands.ca import run_ca

            run_ca(config, store, args)
        elif args.command == "server":
            from simpleca.cli.commands.server import run_server

            run_server(config, store, args)
    except Exception as exc:
        if args.debug:
            raise
        _print_error(str(exc))
        sys.exit(1)
