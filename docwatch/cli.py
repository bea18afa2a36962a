"""CLI entrypoints for docwatch commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .logging import configure_logging
from .models import InvalidTimestampError
from .orchestrator import Orchestrator
from .report import build_report


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    def _default(value: object) -> object:
        return argparse.SUPPRESS if suppress_default else value

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=_default(False),
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=_default(False),
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        default=_default(None),
        help="Also write DEBUG logs to this file.",
    )


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docwatch",
        description="Find documentation that fell behind recent source changes.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan a local git checkout for stale documentation.",
    )
    _add_logging_options(scan_parser, suppress_default=True)
    scan_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    scan_parser.add_argument(
        "--lookback-days",
        type=_positive_int,
        default=None,
        help="Number of days of history to inspect (defaults to config, then 7).",
    )
    scan_parser.add_argument(
        "--branch",
        default=None,
        help="Branch or ref whose history is scanned (defaults to HEAD).",
    )
    scan_parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for JSON reports (defaults to config, then ./reports).",
    )
    scan_parser.add_argument(
        "--no-report",
        action="store_true",
        help="Skip writing report files.",
    )
    scan_parser.add_argument(
        "--patches",
        action="store_true",
        help="Include per-file diff hunks in the recent changes of the report.",
    )
    scan_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full report as JSON instead of a summary.",
    )

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a JSON file of doc references and recent changes.",
    )
    _add_logging_options(analyze_parser, suppress_default=True)
    analyze_parser.add_argument(
        "input",
        help="JSON file with `docReferences` and `recentChanges` arrays.",
    )
    analyze_parser.add_argument(
        "--scan-period-days",
        type=_positive_int,
        default=None,
        help="Lookback window recorded in the result.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP analysis service.",
    )
    _add_logging_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docwatch commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=Path(args.log_file).expanduser() if args.log_file else None,
    )

    orchestrator = Orchestrator()

    if args.command == "scan":
        output_dir = Path(args.output_dir).expanduser() if args.output_dir else None
        try:
            outcome = orchestrator.run_scan(
                args.path,
                lookback_days=args.lookback_days,
                branch=args.branch,
                output_dir=output_dir,
                write_report=not args.no_report,
                include_patches=args.patches,
            )
        except (FileNotFoundError, InvalidTimestampError) as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"docwatch scan failed: {exc}\nRun with --verbose for more details.\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"docwatch scan failed: {exc}\nRun with --verbose for more details.\n")
        if args.json:
            report = build_report(outcome.result, outcome.statistics, scan_date=outcome.scan_date)
            print(json.dumps(report, indent=2, sort_keys=True))
            return
        stale = outcome.result.stale_references
        if not stale:
            print("All documentation is up to date")
        for ref in stale:
            print(f"{ref.doc_path}: {ref.source_file} changed ({ref.staleness_days} days behind)")
        if outcome.report_path is not None:
            print(f"Report written to {_relativize(outcome.report_path)}")
    elif args.command == "analyze":
        try:
            payload = json.loads(Path(args.input).read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except json.JSONDecodeError as exc:
            parser.exit(1, f"docwatch analyze failed: invalid JSON ({exc})\n")
        if not isinstance(payload, dict):
            parser.exit(1, "docwatch analyze failed: input must be a JSON object\n")
        try:
            result = orchestrator.run_analyze(payload, scan_period_days=args.scan_period_days)
        except KeyError as exc:
            parser.exit(1, f"docwatch analyze failed: missing field {exc}\n")
        except (TypeError, ValueError) as exc:
            parser.exit(1, f"docwatch analyze failed: {exc}\n")
        print(json.dumps(result.to_dict(), indent=2, sort_keys=True))
    elif args.command == "serve":
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
