"""
Core models for serp-extractor.

Design principles:
- Every extracted field is explicitly optional; absence is a value, not an error
- Records serialize with a fixed key order (name, extensions, link, image)
- The image index is immutable once built
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


# ============================================================================
# Enums
# ============================================================================

class RunStatus(str, Enum):
    """Status of a batch run."""
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


# ============================================================================
# Card Record (Output Unit)
# ============================================================================

class CardRecord(BaseModel):
    """
    One result card extracted from an SRP snapshot.

    `extensions` holds the year when one was found. When it is None the key is
    left out of the serialized record entirely (not written as null).
    """
    name: Optional[str] = None
    extensions: Optional[List[str]] = None
    link: Optional[str] = None
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in artifact shape, omitting absent extensions."""
        payload = self.model_dump()
        if payload["extensions"] is None:
            del payload["extensions"]
        return payload

    class Config:
        json_schema_extra = {
            "examples": [
                {
                    "name": "The Starry Night",
                    "extensions": ["1889"],
                    "link": "https://www.google.com/search?q=The+Starry+Night",
                    "image": "data:image/jpeg;base64,/9j/4AAQSkZJRg==",
                }
            ]
        }


# ============================================================================
# Image Index
# ============================================================================

@dataclass(frozen=True, slots=True)
class ImageIndex:
    """
    Image id -> decoded data URI, recovered from inline scripts.

    `undecodable` holds ids whose script literal used an unsupported escape;
    those images resolve to None instead of falling back to `data-src`.
    """

    sources: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    undecodable: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not isinstance(self.sources, MappingProxyType):
            object.__setattr__(self, "sources", MappingProxyType(dict(self.sources)))

    def __len__(self) -> int:
        return len(self.sources)

    def __contains__(self, image_id: object) -> bool:
        return image_id in self.sources

    def resolve(self, image_id: str | None, fallback: str | None) -> str | None:
        """Return the decoded source for `image_id`, else `fallback`."""
        if image_id is not None:
            if image_id in self.sources:
                return self.sources[image_id]
            if image_id in self.undecodable:
                return None
        return fallback


# ============================================================================
# Run Logging
# ============================================================================

class RunLog(BaseModel):
    """
    Log entry for one batch conversion run.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    seed: str  # Input directory or explicit file list

    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    ended_at: Optional[datetime] = None

    status: RunStatus = RunStatus.RUNNING
    error_message: Optional[str] = None

    # Summary stats (updated as run progresses)
    discovered_count: int = 0
    parsed_count: int = 0
    empty_count: int = 0  # Files whose parse degraded to {}
    written_count: int = 0
    error_count: int = 0
