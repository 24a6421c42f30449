"""Core module for serp-extractor."""

from core.models import (
    CardRecord,
    ImageIndex,
    RunLog,
    RunStatus,
)
from core.config import ExtractorConfig
from core.pipeline import Pipeline

__all__ = [
    "CardRecord",
    "ImageIndex",
    "RunLog",
    "RunStatus",
    "ExtractorConfig",
    "Pipeline",
]
