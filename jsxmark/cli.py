"""CLI entrypoints for jsxmark commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, JsxMarkConfig, load_config
from .engine import ComponentRegistry
from .frontend import SourceParseError, UnsupportedSourceError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    # Subcommands suppress defaults so flags given before the command survive.
    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress_default else value

    noise = parser.add_mutually_exclusive_group()
    noise.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default(False),
        help="Log debug details for troubleshooting.",
    )
    noise.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default(False),
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=default(None),
        help="Also write a debug log to this file.",
    )


def _add_config_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .jsxmark.yml file (defaults to the first path's directory).",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="NAME",
        help="Component name to leave unannotated (repeatable).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsxmark",
        description="Annotate JSX components with component and source-file attributes.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    annotate_parser = subparsers.add_parser(
        "annotate",
        help="Annotate files or directories.",
    )
    _add_logging_options(annotate_parser, suppress_default=True)
    _add_config_options(annotate_parser)
    annotate_parser.add_argument(
        "paths",
        nargs="+",
        help="Files or directories to annotate.",
    )
    mode = annotate_parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--write",
        action="store_true",
        help="Rewrite files in place.",
    )
    mode.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 when any file would change.",
    )
    annotate_parser.add_argument(
        "--diff",
        action="store_true",
        help="Print a unified diff of the changes.",
    )
    annotate_parser.add_argument(
        "--prefix",
        default=None,
        help="Vendor segment for attribute names, e.g. 'sentry' for data-sentry-component.",
    )
    annotate_parser.add_argument(
        "--native",
        action="store_true",
        default=None,
        help="Emit camelCase attribute names (dataComponent) for React Native.",
    )
    annotate_parser.add_argument(
        "--no-styled",
        dest="rewrite_styled",
        action="store_false",
        default=None,
        help="Do not rewrite styled(Component) calls.",
    )

    components_parser = subparsers.add_parser(
        "components",
        help="List the components found in a file.",
    )
    _add_logging_options(components_parser, suppress_default=True)
    _add_config_options(components_parser)
    components_parser.add_argument("path", help="Source file to inspect.")

    return parser


def _resolve_config(args: argparse.Namespace, first_path: str) -> JsxMarkConfig:
    config = load_config(args.config if args.config is not None else Path(first_path))
    config.ignored_components.extend(args.ignore)
    if getattr(args, "prefix", None):
        config.attributes.prefix = args.prefix
    if getattr(args, "native", None):
        config.attributes.native = True
    if getattr(args, "rewrite_styled", None) is False:
        config.rewrite_styled = False
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for jsxmark commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    first_path = args.paths[0] if args.command == "annotate" else args.path
    try:
        config = _resolve_config(args, first_path)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    orchestrator = Orchestrator(config)

    if args.command == "annotate":
        _run_annotate(parser, orchestrator, args)
    elif args.command == "components":
        _run_components(parser, orchestrator, Path(args.path))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_annotate(
    parser: argparse.ArgumentParser, orchestrator: Orchestrator, args: argparse.Namespace
) -> None:
    single_file = len(args.paths) == 1 and Path(args.paths[0]).is_file()
    try:
        summary = orchestrator.run(args.paths, write=bool(args.write))
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")

    if single_file and not (args.write or args.check or args.diff):
        outcome = summary.outcomes[0] if summary.outcomes else None
        if outcome is None or outcome.result is None:
            reason = outcome.error if outcome is not None else "unsupported file type"
            parser.exit(1, f"jsxmark annotate failed: {reason}\n")
        sys.stdout.write(outcome.result.output)
        return

    if args.diff:
        for outcome in summary.changed:
            sys.stdout.write(outcome.diff)

    for outcome in summary.changed:
        verb = "annotated" if args.write else "would annotate"
        print(f"{verb} {_relativize(outcome.path)}")

    if summary.failed:
        parser.exit(1, f"{len(summary.failed)} file(s) could not be parsed\n")
    if args.check and summary.changed:
        parser.exit(1)


def _run_components(
    parser: argparse.ArgumentParser, orchestrator: Orchestrator, path: Path
) -> None:
    try:
        module = orchestrator.frontend.parse_file(path)
    except (OSError, SourceParseError, UnsupportedSourceError) as exc:
        parser.exit(1, f"{exc}\n")
    registry = ComponentRegistry.scan(module, frozenset(orchestrator.config.ignored_components))
    for entry in registry:
        suffix = "" if entry.eligible else "\tignored"
        print(f"{entry.name}\t{entry.kind.value}{suffix}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
