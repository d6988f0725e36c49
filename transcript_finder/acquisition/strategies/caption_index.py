# transcript_finder/acquisition/strategies/caption_index.py
"""
Caption-index strategy: confirm which caption tracks exist and of what kind.

Never produces text. The track list it stores on the context lets the
assembler tell official captions from automatic ones, whichever strategy
ends up delivering the transcript.
"""

from __future__ import annotations

from typing import List

from transcript_finder.acquisition.schema import AttemptOutcome, TranscriptSegment
from transcript_finder.acquisition.strategies.base import AcquisitionContext, AcquisitionStrategy
from transcript_finder.acquisition.timing import timer
from transcript_finder.sources import VideoSource


class CaptionIndexStrategy(AcquisitionStrategy):
    name = "caption_index"

    def __init__(self, video_source: VideoSource) -> None:
        self.video_source = video_source

    def acquire(self, context: AcquisitionContext) -> List[TranscriptSegment]:
        with timer() as end:
            tracks = self.video_source.list_caption_tracks(context.reference.video_id, timeout=context.timeout())
        context.caption_tracks = list(tracks)

        summary = ", ".join(f"{track.language}:{track.kind}" for track in tracks) or "no tracks listed"
        context.record(
            self.name,
            None,
            AttemptOutcome.EMPTY,
            note=f"index only ({summary})",
            execution_time_ms=end(),
        )
        return []
