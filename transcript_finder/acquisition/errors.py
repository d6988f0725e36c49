# transcript_finder/acquisition/errors.py
"""
Error taxonomy for transcript acquisition.

Only InvalidLocator, MetadataUnavailable and Exhausted are terminal; every
StrategyFailure (Unsupported and TimeoutExceeded included) is absorbed into an
AcquisitionAttempt and the pipeline moves on.
"""

from __future__ import annotations

from typing import List, Optional

from transcript_finder.acquisition.schema import AcquisitionAttempt, FailureType


class AcquisitionError(Exception):
    """Base class for every error raised by the pipeline."""


class TerminalError(AcquisitionError):
    """An outcome that ends the request."""

    failure_type: FailureType
    suggested_causes: List[str] = []

    def __init__(self, message: str, *, details: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = list(details) if details is not None else list(self.suggested_causes)


class InvalidLocator(TerminalError):
    failure_type = FailureType.INVALID_LOCATOR
    suggested_causes = [
        "Make sure the link comes from youtube.com or youtu.be",
        "Use a watch?v=, youtu.be/, embed/ or shorts/ link",
        "Check that the video identifier is complete (11 characters)",
    ]


class MetadataUnavailable(TerminalError):
    failure_type = FailureType.METADATA_UNAVAILABLE
    suggested_causes = [
        "The video may be private, deleted or not public yet",
        "The video may be geo-restricted or age-restricted",
        "The metadata service may be misconfigured (check the API key)",
    ]


class Exhausted(TerminalError):
    failure_type = FailureType.EXHAUSTED
    suggested_causes = [
        "The video has no automatic captions enabled",
        "The video is very recent and captions have not been generated yet",
        "The creator disabled captions for this video",
        "The spoken language is not supported for automatic captions",
        "The video may be geo-restricted",
    ]

    def __init__(self, message: str, attempts: List[AcquisitionAttempt], *, details: Optional[List[str]] = None) -> None:
        super().__init__(message, details=details)
        self.attempts = list(attempts)


class StrategyFailure(AcquisitionError):
    """Non-fatal failure of one strategy (or one language within it)."""


class Unsupported(StrategyFailure):
    """The capability cannot serve this request (missing library, language not offered)."""


class TimeoutExceeded(StrategyFailure):
    """A single call's timer fired, or the overall budget ran out."""

    def __init__(self, message: str, *, timeout: Optional[float] = None) -> None:
        super().__init__(message)
        self.timeout = timeout


class TransientFailure(StrategyFailure):
    """Network-level hiccup worth one immediate retry."""
