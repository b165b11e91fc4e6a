"""CLI entrypoints for hookscan commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import OUTPUT_FORMATS, ConfigError, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator
from .registry import RegistryLoadError, iter_rule_pairs
from .reporters import get_reporter

EXIT_FINDINGS = 1
EXIT_USAGE = 2


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write log records to this file.",
    )


def _add_rules_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Repository root or single source file (defaults to current directory).",
    )
    parser.add_argument(
        "--rules",
        default=None,
        help="Deprecated hook rule file (JSON or YAML). Defaults to the bundled rules.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Reject rule files that list the same deprecated signature twice.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookscan",
        description="Report declarations of deprecated hooks and their replacements.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan source files for deprecated hook declarations.",
    )
    _add_logging_options(scan_parser, suppress_default=True)
    _add_rules_options(scan_parser)
    scan_parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Report format (defaults to output.format from .hookscan.yml, else text).",
    )
    scan_parser.add_argument(
        "--jobs",
        type=int,
        default=None,
        help="Number of files examined in parallel.",
    )
    scan_parser.add_argument(
        "--include-generated",
        action="store_true",
        default=None,
        help="Also scan generated sources (*.g.cs, designer files, <auto-generated> headers).",
    )
    scan_parser.add_argument(
        "--fail-on-findings",
        action="store_true",
        help="Exit with status 1 when any deprecated hook is reported.",
    )

    rules_parser = subparsers.add_parser(
        "rules",
        help="List the deprecated hook rules that a scan would use.",
    )
    _add_logging_options(rules_parser, suppress_default=True)
    _add_rules_options(rules_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for hookscan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "scan":
        if args.jobs is not None and args.jobs < 1:
            parser.exit(EXIT_USAGE, "--jobs must be a positive integer\n")
        try:
            result = orchestrator.run_scan(
                args.path,
                rules=args.rules,
                strict=args.strict,
                jobs=args.jobs,
                include_generated=args.include_generated,
            )
            output_format = args.format or load_config(result.root).output.format
        except (RegistryLoadError, ConfigError) as exc:
            parser.exit(EXIT_USAGE, f"hookscan: {exc}\n")
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(EXIT_USAGE, f"{exc}\n")
        print(get_reporter(output_format).render(result))
        if args.fail_on_findings and result.diagnostics:
            return EXIT_FINDINGS
    elif args.command == "rules":
        try:
            registry = orchestrator.list_rules(args.path, rules=args.rules, strict=args.strict)
        except (RegistryLoadError, ConfigError) as exc:
            parser.exit(EXIT_USAGE, f"hookscan: {exc}\n")
        except FileNotFoundError as exc:
            parser.exit(EXIT_USAGE, f"{exc}\n")
        for old, new in iter_rule_pairs(registry):
            print(f"{old} -> {new or 'no replacement'}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(EXIT_USAGE, "Unknown command\n")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
