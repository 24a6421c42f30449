"""
Pipeline interface for serp-extractor.

Defines the contract for moving data through the stages:
discover → parse → export

This is intentionally minimal and prescriptive:
- No skipping stages
- No out-of-order execution
- One file's failure never stops the batch
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Iterator

from core.models import RunLog, RunStatus
from core.structured_logging import emit_json_event


ParseResult = dict[str, list[dict[str, Any]]]


# ============================================================================
# Stage Interfaces
# ============================================================================

class DiscoverStage(ABC):
    """
    Discover stage: given a seed, produce the HTML files to convert.

    Example:
      seed = "files"
      → yields [Path("files/a.html"), Path("files/b.html"), ...]
    """

    @abstractmethod
    def discover(self, seed: str, run_id: str) -> Iterator[Path]:
        """
        Discover input files from seed.

        Args:
            seed: Input directory or single file path
            run_id: Run ID for tracking

        Yields:
            Paths to parse, in a deterministic order

        Raises:
            FileNotFoundError: If seed does not exist
        """
        pass


class ParseStage(ABC):
    """
    Parse stage: convert one HTML file → ParseResult.

    Responsibilities:
    - Build the per-document image index
    - Locate the section title and result cards
    - Extract card fields with per-field failure isolation
    """

    @abstractmethod
    def parse_file(self, path: Path, run_id: str | None = None) -> ParseResult:
        """
        Parse one saved SRP snapshot.

        Args:
            path: HTML file to read
            run_id: Run ID for tracking

        Returns:
            {section_title: [record, ...]}, or {} when the document could
            not be read or parsed

        Never raises; failures are logged and degrade the result.
        """
        pass


class ExportStage(ABC):
    """
    Export stage: serialize one ParseResult next to its siblings.

    Responsibilities:
    - Create the output directory on demand
    - Name the artifact after the input file
    - Write pretty-printed JSON
    """

    @abstractmethod
    def export(self, source_path: Path, result: ParseResult, run_id: str) -> Path:
        """
        Write one artifact.

        Args:
            source_path: Input file the result came from
            result: ParseResult to serialize
            run_id: Run ID for tracking

        Returns:
            Path of the written artifact

        Raises:
            OSError: If the write fails
        """
        pass


# ============================================================================
# Pipeline Orchestrator
# ============================================================================

class Pipeline:
    """
    Main orchestrator: coordinates all stages in sequence.

    Usage:
        pipeline = Pipeline(discover, parse, export)
        run = pipeline.run(seed="files", run_id="run-1")
    """

    def __init__(
        self,
        discover: DiscoverStage,
        parse: ParseStage,
        export: ExportStage,
    ):
        """Initialize pipeline stage instances."""
        self.discover = discover
        self.parse = parse
        self.export = export

    @staticmethod
    def _emit_pipeline_event(
        event_type: str,
        *,
        run_id: str,
        level: str = "error",
        **payload: object,
    ) -> None:
        """Emit a structured pipeline event."""
        emit_json_event(
            event_type,
            run_id=run_id,
            level=level,
            component="pipeline",
            **payload,
        )

    def run(self, seed: str, run_id: str, dry_run: bool = False) -> RunLog:
        """
        Execute full pipeline for a seed.

        Stages executed in order:
        1. discover(seed) → paths
        2. for each path:
           a. parse_file(path) → ParseResult
           b. export(path, ParseResult) → artifact path

        Args:
            seed: Input directory or file
            run_id: Run ID (for tracking)
            dry_run: If True, parse but do not write artifacts

        Returns:
            RunLog with final status + counts

        Note:
            - Per-file errors are logged and counted, not fatal
            - A discovery failure marks the run FAILED
        """
        return self.run_paths(seed, run_id, paths=None, dry_run=dry_run)

    def run_paths(
        self,
        seed: str,
        run_id: str,
        paths: list[Path] | None = None,
        dry_run: bool = False,
    ) -> RunLog:
        """Execute the pipeline over explicit paths, or discovered ones when None."""
        run_log = RunLog(id=run_id, seed=seed)

        try:
            if paths is None:
                paths = list(self.discover.discover(seed, run_id))
            run_log.discovered_count = len(paths)

            if not paths:
                run_log.status = RunStatus.COMPLETED
                run_log.error_message = "No input files discovered"
                run_log.ended_at = datetime.now(UTC)
                return run_log

            for path in paths:
                stage = "parse"
                try:
                    result = self.parse.parse_file(path, run_id=run_id)
                    run_log.parsed_count += 1
                    if not result:
                        run_log.empty_count += 1

                    if not dry_run:
                        stage = "export"
                        self.export.export(path, result, run_id)
                        run_log.written_count += 1

                except Exception as exc:
                    run_log.error_count += 1
                    self._emit_pipeline_event(
                        "pipeline_stage_error",
                        run_id=run_id,
                        path=str(path),
                        stage=stage,
                        error_type=type(exc).__name__,
                        error=str(exc),
                    )
                    # Log error and continue to next file.
                    continue

            run_log.status = RunStatus.COMPLETED
            run_log.ended_at = datetime.now(UTC)

        except Exception as e:
            self._emit_pipeline_event(
                "pipeline_run_error",
                run_id=run_id,
                seed=seed,
                stage="run",
                error_type=type(e).__name__,
                error=str(e),
            )
            run_log.status = RunStatus.FAILED
            run_log.error_message = str(e)
            run_log.ended_at = datetime.now(UTC)

        return run_log
