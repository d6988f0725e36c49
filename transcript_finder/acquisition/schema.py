# transcript_finder/acquisition/schema.py
"""
Authoritative schema definitions for the transcript acquisition pipeline.

This module defines:
- The request-scoped value types (reference, metadata, language priority)
- The segment and caption-track shapes exchanged with strategies
- The AcquisitionAttempt record every strategy produces
- The two terminal payloads: TranscriptResult and AcquisitionFailure

All other modules MUST conform to these contracts.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


AUTOMATIC = "automatic"
"""Sentinel language tag: no specific language requested."""

VIDEO_ID_LENGTH = 11


class FailureType(str, Enum):
    """Terminal failure categories surfaced to the caller."""
    INVALID_LOCATOR = "invalid_locator"
    METADATA_UNAVAILABLE = "metadata_unavailable"
    EXHAUSTED = "exhausted"


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


class VideoReference(BaseModel):
    """Canonical identifier extracted from a locator."""
    video_id: str = Field(pattern=r"^[A-Za-z0-9_-]{11}$")

    model_config = ConfigDict(frozen=True)

    @property
    def watch_url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"

    @property
    def thumbnail_url(self) -> str:
        return f"https://img.youtube.com/vi/{self.video_id}/mqdefault.jpg"


class VideoMetadata(BaseModel):
    """Read-only facts supplied by the metadata collaborator."""
    video_id: str
    title: str = ""
    channel: str = ""
    published_at: Optional[datetime] = None
    thumbnail_url: Optional[str] = None
    default_language: Optional[str] = None
    default_audio_language: Optional[str] = None
    description: str = ""

    model_config = ConfigDict(frozen=True)


class LanguagePriority(BaseModel):
    """
    Ordered language preference shared read-only by every strategy.

    Never empty, never holds a duplicate tag; the AUTOMATIC sentinel appears at most once.
    """
    languages: Tuple[str, ...]

    model_config = ConfigDict(frozen=True)

    @field_validator("languages")
    @classmethod
    def check_languages(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("language priority must not be empty")
        if len(set(value)) != len(value):
            raise ValueError(f"duplicate language tag in priority: {value}")
        return value

    @property
    def tagged(self) -> List[str]:
        """Concrete language tags, sentinel excluded."""
        return [lang for lang in self.languages if lang != AUTOMATIC]


class TranscriptSegment(BaseModel):
    """One timed fragment of raw transcript text."""
    text: str
    start: Optional[float] = None
    duration: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class CaptionTrack(BaseModel):
    """A caption track as reported by a listing or a watch page."""
    language: str
    kind: str = "standard"  # "asr" marks automatic speech recognition tracks
    name: Optional[str] = None
    base_url: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_automatic(self) -> bool:
        return self.kind == "asr"


class TranscriptFetch(BaseModel):
    """Segments of one transcript plus the language and kind it actually had."""
    language: str
    caption_kind: Optional[str] = None
    segments: List[TranscriptSegment] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class AcquisitionAttempt(BaseModel):
    """Diagnostic record of a single strategy/language try."""
    strategy: str
    language: Optional[str] = None
    outcome: AttemptOutcome
    error: Optional[str] = None
    error_type: Optional[str] = None
    note: Optional[str] = None
    caption_kind: Optional[str] = None
    segment_count: int = 0
    execution_time_ms: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class TranscriptResult(BaseModel):
    """Terminal success payload. No mutation after assembly."""
    success: Literal[True] = True
    video_id: str
    text: str
    strategy: str
    language: str
    segment_count: int
    method: str
    caption_kind: Optional[str] = None
    metadata: VideoMetadata

    model_config = ConfigDict(frozen=True)


class VideoSummary(BaseModel):
    """Partial metadata kept for user-facing failure diagnostics."""
    title: str = ""
    channel: str = ""
    description: str = ""
    thumbnail_url: Optional[str] = None
    published_at: Optional[datetime] = None


class AcquisitionFailure(BaseModel):
    """Terminal failure payload with guidance and the full attempt trail."""
    success: Literal[False] = False
    failure_type: FailureType
    error: str
    details: List[str] = Field(default_factory=list)
    attempts: List[AcquisitionAttempt] = Field(default_factory=list)
    video_id: Optional[str] = None
    video_info: Optional[VideoSummary] = None

    model_config = ConfigDict(frozen=True)
