# transcript_finder/acquisition/assembler.py
"""
Result assembly: winning segments -> TranscriptResult, or attempt trail -> AcquisitionFailure.
"""

from __future__ import annotations

from typing import List, Optional

from transcript_finder.acquisition.errors import TerminalError
from transcript_finder.acquisition.normalize import normalize
from transcript_finder.acquisition.schema import (
    AUTOMATIC,
    AcquisitionAttempt,
    AcquisitionFailure,
    TranscriptResult,
    TranscriptSegment,
    VideoMetadata,
    VideoSummary,
)


DESCRIPTION_EXCERPT_CHARS = 200


def join_segments(segments: List[TranscriptSegment]) -> str:
    """Ordered segment texts, each flattened to one line, joined with single spaces."""
    return " ".join(" ".join(segment.text.split()) for segment in segments if segment.text.strip())


def describe_method(language: str, caption_kind: Optional[str]) -> str:
    if caption_kind == "asr":
        return f"Automatic captions ({language})"
    if caption_kind:
        return f"Official captions ({language})"
    return f"Captions ({language})"


def summarize_metadata(metadata: Optional[VideoMetadata]) -> Optional[VideoSummary]:
    if metadata is None:
        return None
    description = metadata.description
    if len(description) > DESCRIPTION_EXCERPT_CHARS:
        description = description[:DESCRIPTION_EXCERPT_CHARS] + "..."
    return VideoSummary(
        title=metadata.title,
        channel=metadata.channel,
        description=description,
        thumbnail_url=metadata.thumbnail_url,
        published_at=metadata.published_at,
    )


def assemble_result(
    segments: List[TranscriptSegment],
    metadata: VideoMetadata,
    strategy: str,
    language: Optional[str],
    caption_kind: Optional[str] = None,
) -> TranscriptResult:
    language = language or AUTOMATIC
    return TranscriptResult(
        video_id=metadata.video_id,
        text=normalize(join_segments(segments)),
        strategy=strategy,
        language=language,
        segment_count=len(segments),
        method=describe_method(language, caption_kind),
        caption_kind=caption_kind,
        metadata=metadata,
    )


def assemble_failure(
    error: TerminalError,
    *,
    video_id: Optional[str] = None,
    metadata: Optional[VideoMetadata] = None,
    attempts: Optional[List[AcquisitionAttempt]] = None,
) -> AcquisitionFailure:
    return AcquisitionFailure(
        failure_type=error.failure_type,
        error=error.message,
        details=list(error.details),
        attempts=list(attempts or getattr(error, "attempts", [])),
        video_id=video_id,
        video_info=summarize_metadata(metadata),
    )
