"""hubactions command line entry point."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from hubactions import __version__
from hubactions.logging import configure_logging


def _add_connection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", help="Platform or hub host (https:// is added when missing)")
    parser.add_argument("--token", help="API token")
    parser.add_argument("--timeout", type=float, help="Per-attempt timeout in seconds")
    parser.add_argument("--interval", type=float, help="Poll interval in seconds")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hubactions",
        description="Drive Automation Platform project syncs and collection approvals",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Structured log level (default: INFO)",
    )
    subparsers = parser.add_subparsers(dest="command")

    sync_parser = subparsers.add_parser("project-sync", help="Update one or all controller projects")
    _add_connection_args(sync_parser)
    sync_parser.add_argument("--project-name", help="Only sync the project with this exact name")
    sync_parser.add_argument("--retry-attempts", type=int, help="Attempts per project")
    sync_parser.add_argument("--retry-delay", type=float, help="Seconds to wait between attempts")
    sync_parser.add_argument("--project-delay", type=float, help="Seconds to wait between projects")
    sync_parser.add_argument(
        "--parallel",
        action="store_true",
        default=None,
        help="Sync all projects concurrently",
    )
    sync_parser.add_argument("--output", choices=["text", "json"], default="text")

    approve_parser = subparsers.add_parser(
        "collection-approve", help="Move a collection version from staging to published"
    )
    _add_connection_args(approve_parser)
    approve_parser.add_argument("--namespace", help="Collection namespace")
    approve_parser.add_argument("--name", help="Collection name")
    approve_parser.add_argument("--collection-version", dest="collection_version", help="Version (defaults to galaxy.yml)")
    approve_parser.add_argument("--galaxy-file", help="Path to galaxy.yml")

    check_parser = subparsers.add_parser("version-check", help="Require a version bump against a git ref")
    check_parser.add_argument("--galaxy-file", default="galaxy.yml")
    check_parser.add_argument("--ref", default="origin/main")

    increment_parser = subparsers.add_parser("version-increment", help="Stamp a timestamp version")
    increment_parser.add_argument("--galaxy-file", default="galaxy.yml")
    increment_parser.add_argument("--timezone", default="America/Chicago")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "project-sync":
        from hubactions.cli.project_sync import project_sync_command

        sys.exit(
            project_sync_command(
                host=args.host,
                token=args.token,
                project_name=args.project_name,
                timeout=args.timeout,
                interval=args.interval,
                retry_attempts=args.retry_attempts,
                retry_delay=args.retry_delay,
                project_delay=args.project_delay,
                parallel=args.parallel,
                output_format=args.output,
            )
        )

    if args.command == "collection-approve":
        from hubactions.cli.approve import approve_command

        sys.exit(
            approve_command(
                host=args.host,
                token=args.token,
                namespace=args.namespace,
                name=args.name,
                version=args.collection_version,
                timeout=args.timeout,
                interval=args.interval,
                galaxy_file=args.galaxy_file,
            )
        )

    if args.command == "version-check":
        from hubactions.cli.version import version_check_command

        sys.exit(version_check_command(args.galaxy_file, args.ref))

    if args.command == "version-increment":
        from hubactions.cli.version import version_increment_command

        sys.exit(version_increment_command(args.galaxy_file, args.timezone))

    parser.print_help()
    sys.exit(2)


if __name__ == "__main__":  # pragma: no cover
    main()
