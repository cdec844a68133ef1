"""CLI entrypoint for grimoire documentation generation."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, ConfigError, load_config
from .errors import FilesystemFailure
from .logging import configure_logging
from .orchestrator import Orchestrator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grimoire",
        description="Generate a versioned, cross-linked documentation tree from symbol metadata.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=CONFIG_FILENAME,
        help=f"Path to the configuration file or its directory (defaults to ./{CONFIG_FILENAME}).",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Override the output root configured in the configuration file.",
    )
    parser.add_argument(
        "--only-version",
        action="append",
        dest="versions",
        metavar="VERSION",
        help="Generate only this version; may be given more than once.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log output to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for grimoire."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"grimoire: {exc}\n")
    if args.output:
        config.output_root = Path(args.output).expanduser().resolve()

    orchestrator = Orchestrator(config)
    try:
        report = orchestrator.run(args.versions)
    except (ConfigError, FilesystemFailure) as exc:
        parser.exit(1, f"grimoire: {exc}\nRun with --verbose for more details.\n")

    for version in report.versions:
        print(
            f"{version.version}: {len(version.processed)} namespaces, "
            f"{sum(len(ns.succeeded) for ns in version.namespaces)} symbols written"
        )
        for namespace in version.namespaces:
            if namespace.skipped:
                print(f"  skipped {namespace.namespace}: {namespace.skipped}")
            for outcome in namespace.failed:
                print(f"  failed {outcome.identity}: {outcome.reason}")


if __name__ == "__main__":
    main(sys.argv[1:])
