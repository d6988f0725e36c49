# transcript_finder/acquisition/strategies/library.py
"""
Library-backed strategy: ask the transcript library for each priority language in turn.

Each language is fault-isolated: a failure is recorded and the next language
is tried. Transient failures get an immediate retry, bounded by max_attempts.
"""

from __future__ import annotations

from typing import List

from transcript_finder.acquisition.errors import StrategyFailure, TimeoutExceeded, TransientFailure
from transcript_finder.acquisition.schema import AttemptOutcome, TranscriptFetch, TranscriptSegment
from transcript_finder.acquisition.strategies.base import AcquisitionContext, AcquisitionStrategy, has_text
from transcript_finder.acquisition.timing import timer
from transcript_finder.config import MAX_LIBRARY_ATTEMPTS
from transcript_finder.sources import TranscriptSource


class LibraryStrategy(AcquisitionStrategy):
    name = "library"

    def __init__(self, transcript_source: TranscriptSource, max_attempts: int = 2) -> None:
        self.transcript_source = transcript_source
        self.max_attempts = max(1, min(MAX_LIBRARY_ATTEMPTS, max_attempts))

    def _fetch_language(self, context: AcquisitionContext, language: str) -> TranscriptFetch:
        attempt = 1
        while True:
            try:
                return self.transcript_source.fetch_transcript(
                    context.reference.video_id, language, timeout=context.timeout()
                )
            except TransientFailure:
                if attempt >= self.max_attempts:
                    raise
                attempt += 1

    def acquire(self, context: AcquisitionContext) -> List[TranscriptSegment]:
        for language in context.priority.languages:
            with timer() as end:
                try:
                    fetched = self._fetch_language(context, language)
                except TimeoutExceeded as exc:
                    context.record(self.name, language, AttemptOutcome.ERROR, error=exc, execution_time_ms=end())
                    if context.deadline.expired:
                        break
                    continue
                except StrategyFailure as exc:
                    context.record(self.name, language, AttemptOutcome.ERROR, error=exc, execution_time_ms=end())
                    continue
                except Exception as exc:  # pylint: disable=broad-except
                    # Unknown library failure for one language must not abort the others
                    context.record(self.name, language, AttemptOutcome.ERROR, error=exc, execution_time_ms=end())
                    continue

            if not has_text(fetched.segments):
                context.record(self.name, fetched.language, AttemptOutcome.EMPTY, execution_time_ms=end())
                continue

            # Label with the transcript's own code, not the tag that was asked for.
            context.record(
                self.name,
                fetched.language,
                AttemptOutcome.SUCCESS,
                caption_kind=fetched.caption_kind or context.caption_kind(fetched.language),
                segment_count=len(fetched.segments),
                execution_time_ms=end(),
            )
            return fetched.segments

        return []
