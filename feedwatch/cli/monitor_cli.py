"""
CLI for running the feed quality monitor.

Provides commands to run the monitor over NDJSON input with the periodic
scheduler, to print a one-off report, and to validate input records.
"""

import argparse
import json
import signal
import sys
import time
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from feedwatch.config.settings import load_settings
from feedwatch.core.validators.schema_validator import SchemaValidator
from feedwatch.monitor import create_monitor
from feedwatch.observability.logger import configure_level, get_logger
from feedwatch.observability.metrics import start_metrics_server
from feedwatch.reports.report_writer import JsonReportWriter
from feedwatch.scheduling.scheduler import RELIABILITY_RECOMPUTE, REPORT_GENERATION
from feedwatch.streaming.sources.file_stream_source import FileStreamSource

logger = get_logger(__name__)

# Global flag for graceful shutdown
_shutdown_requested = False


def signal_handler(signum, frame):  # type: ignore[no-untyped-def]
    """
    Handle shutdown signals (SIGINT, SIGTERM) for graceful monitor termination.
    """
    global _shutdown_requested
    signal_name = signal.Signals(signum).name
    logger.info(f"Received {signal_name} signal, initiating graceful shutdown...")
    _shutdown_requested = True


def _load(args: argparse.Namespace):
    settings = load_settings(args.config)
    configure_level(settings.log_level)
    return settings


def _ingest_inputs(monitor, inputs: list[str], default_source: str | None) -> dict[str, int]:
    counts = {"read": 0, "accepted": 0, "skipped": 0}
    for input_path in inputs:
        source = FileStreamSource(input_path, default_source=default_source)
        for result in monitor.pipeline.ingest_many(source.read()):
            counts["read"] += 1
            counts["accepted"] += int(result.accepted)
        counts["skipped"] += source.skipped
    return counts


def run_monitor(args: argparse.Namespace) -> int:
    """
    Ingest input, then keep the scheduler running until a signal or --duration.

    Returns:
        Exit code (0 for success)
    """
    global _shutdown_requested
    _shutdown_requested = False

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        settings = _load(args)
        monitor = create_monitor(settings)

        if args.report_dir:
            monitor.scheduler.add_report_sink(JsonReportWriter(args.report_dir))

        metrics_port = args.metrics_port or settings.metrics_port
        if metrics_port:
            start_metrics_server(metrics_port)
            logger.info(f"Serving Prometheus metrics on port {metrics_port}")

        monitor.scheduler.start()
        counts = _ingest_inputs(monitor, args.input, args.source)

        print(json.dumps({"status": "running", **counts}, indent=2))

        deadline = time.monotonic() + args.duration if args.duration else None
        logger.info("Monitor running (press Ctrl+C to stop)...")
        while not _shutdown_requested:
            if deadline is not None and time.monotonic() >= deadline:
                break
            time.sleep(0.5)

        monitor.scheduler.stop(wait=True)
        report = monitor.scheduler.run_task(REPORT_GENERATION)
        print(json.dumps({"status": "stopped", "summary": report.summary.model_dump()}, indent=2))
        return 0

    except Exception as e:
        logger.error(f"Monitor failed: {e}", exc_info=True)
        print(json.dumps({"status": "error", "error": str(e)}), file=sys.stderr)
        return 1


def print_report(args: argparse.Namespace) -> int:
    """
    Ingest input once, recompute reliability and print the report.

    Returns:
        Exit code (0 for success)
    """
    try:
        settings = _load(args)
        monitor = create_monitor(settings)
        _ingest_inputs(monitor, args.input, args.source)

        monitor.scheduler.run_task(RELIABILITY_RECOMPUTE)
        report = monitor.queries.report()
        if args.output:
            Path(args.output).write_text(json.dumps(report, indent=2))
        print(json.dumps(report, indent=2))
        return 0

    except Exception as e:
        logger.error(f"Failed to generate report: {e}", exc_info=True)
        print(json.dumps({"status": "error", "error": str(e)}), file=sys.stderr)
        return 1


def validate_input(args: argparse.Namespace) -> int:
    """
    Print the validation result of every input record.

    Returns:
        Exit code (0 when every record is valid, 1 otherwise)
    """
    try:
        validator = SchemaValidator()
        results = []
        for input_path in args.input:
            for datum in FileStreamSource(input_path, default_source=args.source).read():
                result = validator.validate(datum)
                results.append({"id": datum.id, "source": datum.source, **result.model_dump()})

        invalid = sum(1 for r in results if not r["ok"])
        print(json.dumps({"total": len(results), "invalid": invalid, "results": results}, indent=2))
        return 0 if invalid == 0 else 1

    except Exception as e:
        logger.error(f"Validation failed: {e}", exc_info=True)
        print(json.dumps({"status": "error", "error": str(e)}), file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feedwatch",
        description="Data quality monitoring for market data feeds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the monitor over a directory of NDJSON files for ten minutes
  %(prog)s run --input /data/feeds --config config/monitor.yaml --duration 600

  # One-off report
  %(prog)s report --input ticks.jsonl --output report.json

  # Validate records
  %(prog)s validate --input ticks.jsonl
        """
    )
    parser.add_argument(
        "--config",
        help="Path to monitor configuration YAML (optional)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    def add_input_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--input",
            required=True,
            action="append",
            help="NDJSON file or directory (repeatable)"
        )
        sub.add_argument(
            "--source",
            help="Source name for records that do not carry one"
        )

    run_parser = subparsers.add_parser("run", help="Run the monitor with its scheduler")
    add_input_args(run_parser)
    run_parser.add_argument(
        "--duration",
        type=float,
        help="Stop after this many seconds (default: run until signalled)"
    )
    run_parser.add_argument(
        "--metrics-port",
        type=int,
        help="Serve Prometheus metrics on this port"
    )
    run_parser.add_argument(
        "--report-dir",
        help="Directory receiving scheduled JSON reports"
    )

    report_parser = subparsers.add_parser("report", help="Ingest input and print a report")
    add_input_args(report_parser)
    report_parser.add_argument(
        "--output",
        help="Also write the report to this file"
    )

    validate_parser = subparsers.add_parser("validate", help="Validate input records")
    add_input_args(validate_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the feedwatch CLI."""
    load_dotenv(find_dotenv(usecwd=True))

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "run":
        return run_monitor(args)
    elif args.command == "report":
        return print_report(args)
    elif args.command == "validate":
        return validate_input(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
