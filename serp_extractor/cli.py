"""Minimal CLI entrypoint for serp-extractor."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any
from typing import Sequence
from uuid import uuid4

from connectors import HtmlFileDiscoverStage
from core.config import ExtractorConfig
from core.models import RunLog, RunStatus
from core.pipeline import Pipeline
from core.structured_logging import emit_json_event
from parser import SrpParseStage
from storage import JsonFileExportStage


def _resolve_command_run_id(args: argparse.Namespace) -> str:
    """Resolve run_id from CLI args or create one for command-level tracing."""
    explicit = getattr(args, "run_id", None)
    if explicit:
        return str(explicit)
    return str(uuid4())


def _emit_cli_event(
    event_type: str,
    *,
    run_id: str,
    command: str,
    **payload: Any,
) -> str:
    """Emit one structured CLI event line with standard fields."""
    return emit_json_event(
        event_type=event_type,
        run_id=run_id,
        command=command,
        **payload,
    )


def _build_pipeline(args: argparse.Namespace) -> Pipeline:
    """Wire discover/parse/export stages from CLI options."""
    return Pipeline(
        discover=HtmlFileDiscoverStage(pattern=getattr(args, "pattern", ExtractorConfig.INPUT_GLOB)),
        parse=SrpParseStage(),
        export=JsonFileExportStage(args.output_dir),
    )


def _emit_run_summary(run_log: RunLog, *, command: str, **payload: Any) -> int:
    """Emit the completion event for a run and return the exit code."""
    _emit_cli_event(
        f"cli_{command}_completed",
        run_id=run_log.id,
        command=command,
        status=run_log.status.value,
        discovered=run_log.discovered_count,
        parsed=run_log.parsed_count,
        empty=run_log.empty_count,
        written=run_log.written_count,
        errors=run_log.error_count,
        note=run_log.error_message,
        **payload,
    )
    return 0 if run_log.status == RunStatus.COMPLETED else 1


def _cmd_convert(args: argparse.Namespace) -> int:
    """Convert every HTML snapshot in a directory to JSON."""
    run_id = _resolve_command_run_id(args)
    pipeline = _build_pipeline(args)
    run_log = pipeline.run(seed=str(args.input_dir), run_id=run_id, dry_run=args.dry_run)
    return _emit_run_summary(
        run_log,
        command="convert",
        input_dir=str(args.input_dir),
        output_dir=str(args.output_dir),
        pattern=args.pattern,
    )


def _cmd_parse(args: argparse.Namespace) -> int:
    """Convert explicitly listed HTML files to JSON."""
    run_id = _resolve_command_run_id(args)
    pipeline = _build_pipeline(args)
    paths = [Path(item) for item in args.files]
    run_log = pipeline.run_paths(
        seed=",".join(args.files),
        run_id=run_id,
        paths=paths,
        dry_run=args.dry_run,
    )
    return _emit_run_summary(run_log, command="parse", output_dir=str(args.output_dir))


def build_parser() -> argparse.ArgumentParser:
    """Create argument parser for the serp-extractor CLI."""
    parser = argparse.ArgumentParser(
        prog="serp-extractor",
        description="Extract result cards from saved search-results pages into JSON",
    )
    parser.add_argument("--version", action="version", version="serp-extractor 0.1.0")

    subparsers = parser.add_subparsers(dest="command")

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert every HTML snapshot in a directory",
    )
    convert_parser.add_argument(
        "--input-dir",
        default=ExtractorConfig.DEFAULT_INPUT_DIR,
        help="Directory of saved HTML snapshots",
    )
    convert_parser.add_argument(
        "--output-dir",
        default=ExtractorConfig.DEFAULT_OUTPUT_DIR,
        help="Directory for JSON output (created on demand)",
    )
    convert_parser.add_argument(
        "--pattern",
        default=ExtractorConfig.INPUT_GLOB,
        help="Glob pattern selecting input files",
    )
    convert_parser.add_argument("--run-id", help="Optional explicit run ID")
    convert_parser.add_argument("--dry-run", action="store_true", help="Parse only, write nothing")
    convert_parser.set_defaults(func=_cmd_convert)

    parse_parser = subparsers.add_parser(
        "parse",
        help="Convert specific HTML files",
    )
    parse_parser.add_argument("files", nargs="+", help="HTML files to convert")
    parse_parser.add_argument(
        "--output-dir",
        default=ExtractorConfig.DEFAULT_OUTPUT_DIR,
        help="Directory for JSON output (created on demand)",
    )
    parse_parser.add_argument("--run-id", help="Optional explicit run ID")
    parse_parser.add_argument("--dry-run", action="store_true", help="Parse only, write nothing")
    parse_parser.set_defaults(func=_cmd_parse)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Execute CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    try:
        return int(args.func(args))
    except Exception as exc:
        run_id = _resolve_command_run_id(args)
        _emit_cli_event(
            "cli_error",
            run_id=run_id,
            command=str(getattr(args, "command", "unknown")),
            level="error",
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return 1


def cli() -> None:
    """Console-script entrypoint."""
    raise SystemExit(main())


if __name__ == "__main__":
    raise SystemExit(main())
