# transcript_finder/acquisition/diagnostics/collector.py
"""
Attempt aggregation for one acquisition run.

Central authority for collecting AcquisitionAttempt records across all
strategies and synthesizing the diagnostic trail of a failure report.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from transcript_finder.acquisition.schema import AcquisitionAttempt, AttemptOutcome


class AttemptCollector:
    """
    Accumulates AcquisitionAttempt objects in the order they happened.

    Thread-safe not required (strategies run sequentially).
    """

    def __init__(self, run_id: UUID) -> None:
        self.run_id = run_id
        self._attempts: List[AcquisitionAttempt] = []

    def add(self, attempt: AcquisitionAttempt) -> AcquisitionAttempt:
        self._attempts.append(attempt)
        return attempt

    @property
    def attempts(self) -> List[AcquisitionAttempt]:
        return list(self._attempts)

    def for_strategy(self, strategy: str) -> List[AcquisitionAttempt]:
        return [attempt for attempt in self._attempts if attempt.strategy == strategy]

    def last_success(self, strategy: str) -> Optional[AcquisitionAttempt]:
        for attempt in reversed(self._attempts):
            if attempt.strategy == strategy and attempt.outcome == AttemptOutcome.SUCCESS:
                return attempt
        return None

    def build_trail(self) -> List[str]:
        """Human-readable line per attempt, for failure payloads and logs."""
        lines = []
        for attempt in self._attempts:
            label = f"{attempt.strategy}[{attempt.language or '*'}]"
            if attempt.outcome == AttemptOutcome.ERROR:
                kind = f" ({attempt.error_type})" if attempt.error_type else ""
                lines.append(f"{label}: error{kind}: {attempt.error}")
            elif attempt.outcome == AttemptOutcome.EMPTY:
                note = f": {attempt.note}" if attempt.note else ""
                lines.append(f"{label}: empty{note}")
            else:
                lines.append(f"{label}: success ({attempt.segment_count} segments)")
        return lines
