"""CLI entrypoints for nsgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .errors import NamespaceError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the module root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nsgen",
        description="Compile namespace tags from documentation blocks into a manifest.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Regenerate the manifest from the block document.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "--blocks",
        default=None,
        help="Block document to read (overrides .nsgen.yml).",
    )
    build_parser.add_argument(
        "--module",
        default=None,
        help="Importable module used to evaluate @evalNamespace fragments.",
    )
    build_parser.add_argument(
        "--pre-only",
        action="store_true",
        help="Run only the import pre-pass.",
    )
    build_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the manifest diff without writing.",
    )

    clean_parser = subparsers.add_parser(
        "clean",
        help="Delete the manifest if nsgen generated it.",
    )
    _add_verbose_option(clean_parser, suppress_default=True)
    _add_path_argument(clean_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP compile service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for nsgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file
    )

    orchestrator = Orchestrator()

    if args.command == "build":
        dry_run = bool(args.dry_run)
        try:
            outcome = orchestrator.run_build(
                args.path,
                blocks=args.blocks,
                module=args.module,
                pre_only=bool(args.pre_only),
                dry_run=dry_run,
            )
        except (FileNotFoundError, ConfigError) as exc:
            parser.exit(1, f"{exc}\n")
        except NamespaceError as exc:
            parser.exit(1, f"nsgen build failed: {exc}\nRun with --verbose for more details.\n")

        rel_path = _relativize(outcome.path)
        if dry_run:
            print(f"{rel_path} changes (dry-run):")
            print(outcome.diff or "(no diff)")
        elif outcome.written:
            print(f"{outcome.path.name} updated at {rel_path}")
        else:
            print(f"{outcome.path.name} already up to date")
    elif args.command == "clean":
        try:
            removed = orchestrator.run_clean(args.path)
        except (FileNotFoundError, ConfigError) as exc:
            parser.exit(1, f"{exc}\n")
        print("Manifest removed" if removed else "Nothing to clean")
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
