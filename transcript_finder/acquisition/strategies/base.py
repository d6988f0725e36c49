# transcript_finder/acquisition/strategies/base.py
"""
Shared base definitions for all acquisition strategies.

This module defines:
- AcquisitionContext: the request-scoped state handed to every strategy
- AcquisitionStrategy: the strategy contract

All strategies MUST conform to the defined interface.
No business logic belongs here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from transcript_finder.acquisition.diagnostics import AttemptCollector
from transcript_finder.acquisition.language import same_language
from transcript_finder.acquisition.normalize import normalize
from transcript_finder.acquisition.schema import (
    AcquisitionAttempt,
    AttemptOutcome,
    CaptionTrack,
    LanguagePriority,
    TranscriptSegment,
    VideoMetadata,
    VideoReference,
)
from transcript_finder.acquisition.timing import Deadline
from transcript_finder.logging_core.logger import log_event


@dataclass
class AcquisitionContext:
    """Everything a strategy may read during one request."""
    reference: VideoReference
    metadata: VideoMetadata
    priority: LanguagePriority
    deadline: Deadline
    call_timeout: float
    collector: AttemptCollector
    logger: logging.Logger
    caption_tracks: List[CaptionTrack] = field(default_factory=list)  # filled by the caption index

    def timeout(self) -> float:
        """Timeout for the next outbound call; raises TimeoutExceeded once the budget is spent."""
        return self.deadline.timeout_for(self.call_timeout)

    def caption_kind(self, language: Optional[str]) -> Optional[str]:
        """Kind of the indexed track for a language, if the caption index saw one."""
        if not language:
            return None
        matches = [track for track in self.caption_tracks if same_language(track.language, language)]
        if not matches:
            return None
        # A human-authored track outranks the automatic one for labeling.
        return "standard" if any(not track.is_automatic for track in matches) else "asr"

    def record(
        self,
        strategy: str,
        language: Optional[str],
        outcome: AttemptOutcome,
        *,
        error: Optional[BaseException | str] = None,
        note: Optional[str] = None,
        caption_kind: Optional[str] = None,
        segment_count: int = 0,
        execution_time_ms: Optional[float] = None,
    ) -> AcquisitionAttempt:
        attempt = AcquisitionAttempt(
            strategy=strategy,
            language=language,
            outcome=outcome,
            error=str(error) if error is not None else None,
            error_type=type(error).__name__ if isinstance(error, BaseException) else None,
            note=note,
            caption_kind=caption_kind,
            segment_count=segment_count,
            execution_time_ms=execution_time_ms,
        )
        self.collector.add(attempt)

        log_event(
            self.logger,
            logging.WARNING if outcome == AttemptOutcome.ERROR else logging.INFO,
            "Attempt recorded",
            stage_name=strategy,
            event_type=outcome.value,
            metadata=attempt.model_dump(exclude_none=True, mode="json"),
        )
        return attempt


class AcquisitionStrategy(ABC):
    """
    One independent way of getting transcript segments.

    acquire() returns the segments of the first language that worked (or an
    empty list). Per-language problems are recorded on the context; anything
    raised out of acquire() is treated by the runner as a strategy failure.
    """

    name: str = "strategy"

    @abstractmethod
    def acquire(self, context: AcquisitionContext) -> List[TranscriptSegment]:
        ...


def has_text(segments: List[TranscriptSegment]) -> bool:
    """Whether any segment still carries text once entities and markup are cleaned away."""
    return any(normalize(segment.text) for segment in segments)
