"""Local-file connector: discover saved SRP snapshots in a directory."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from core.config import ExtractorConfig
from core.pipeline import DiscoverStage


class HtmlFileDiscoverStage(DiscoverStage):
    """Discover HTML snapshots from a directory or a single file seed."""

    def __init__(self, pattern: str = ExtractorConfig.INPUT_GLOB) -> None:
        """Initialize the glob pattern applied to directory seeds."""
        self.pattern = pattern

    def discover(self, seed: str, run_id: str) -> Iterator[Path]:
        """Yield matching files sorted by name; a file seed yields itself."""
        _ = run_id
        seed_path = Path(seed)
        if seed_path.is_file():
            yield seed_path
            return
        if not seed_path.is_dir():
            raise FileNotFoundError(f"Input directory not found: {seed_path}")

        for path in sorted(seed_path.glob(self.pattern)):
            if path.is_file():
                yield path
