"""
External collaborators consumed by the acquisition core.

The core only depends on these capabilities; the concrete classes in the
sibling modules are the default implementations.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from transcript_finder.acquisition.schema import CaptionTrack, TranscriptFetch, VideoMetadata


class VideoSource(Protocol):
    """Metadata lookup plus caption listing."""

    def fetch_metadata(self, video_id: str, timeout: Optional[float] = None) -> VideoMetadata:
        ...

    def list_caption_tracks(self, video_id: str, timeout: Optional[float] = None) -> List[CaptionTrack]:
        ...


class DocumentSource(Protocol):
    """Watch page and timed-text downloads."""

    def fetch_document(self, video_id: str, timeout: Optional[float] = None) -> str:
        ...

    def fetch_track_payload(self, track_url: str, timeout: Optional[float] = None) -> str:
        ...


class TranscriptSource(Protocol):
    """Third-party transcript fetching library."""

    def fetch_transcript(self, video_id: str, language: Optional[str] = None, timeout: Optional[float] = None) -> TranscriptFetch:
        ...
