"""JSON artifact export: one pretty-printed file per parsed input."""

from __future__ import annotations

import json
from pathlib import Path

from core.config import ExtractorConfig
from core.pipeline import ExportStage, ParseResult
from core.structured_logging import emit_json_event


def artifact_name(source_path: Path) -> str:
    """Artifact file name for an input: `<stem>.json`."""
    return f"{Path(source_path).stem}{ExtractorConfig.OUTPUT_SUFFIX}"


def render_result(result: ParseResult) -> str:
    """Pretty-print a ParseResult the way artifacts are written."""
    return json.dumps(result, indent=ExtractorConfig.JSON_INDENT, ensure_ascii=False) + "\n"


class JsonFileExportStage(ExportStage):
    """Write ParseResults as JSON files into one output directory."""

    def __init__(self, output_dir: Path | str = ExtractorConfig.DEFAULT_OUTPUT_DIR) -> None:
        """Initialize the output directory; it is created on first export."""
        self.output_dir = Path(output_dir)

    def export(self, source_path: Path, result: ParseResult, run_id: str) -> Path:
        """Write `result` to `<output_dir>/<stem>.json` and return that path."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output = self.output_dir / artifact_name(source_path)
        output.write_text(render_result(result), encoding="utf-8")
        emit_json_event(
            "export_written",
            run_id=run_id,
            component="storage",
            source=str(source_path),
            output=str(output),
            sections=len(result),
            records=sum(len(records) for records in result.values()),
        )
        return output
