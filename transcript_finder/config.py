# transcript_finder/config.py
"""
Shared configuration for an acquisition run.
Single responsibility: hold timeouts, budget and collaborator settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


MAX_LIBRARY_ATTEMPTS = 3

METADATA_BACKENDS = ("yt-dlp", "data-api")

TRANSCRIPT_BACKENDS = ("library", "none")


@dataclass
class AcquisitionConfig:
    """Config for one acquisition request."""
    total_budget_seconds: float = 25.0  # fits a 30s hosting limit
    call_timeout_seconds: float = 8.0  # per outbound call
    library_max_attempts: int = 2  # first try + one immediate retry
    youtube_api_key: Optional[str] = None
    metadata_backend: str = "yt-dlp"
    transcript_backend: str = "library"  # "none" switches the library strategy off
    cookies_file: Optional[str] = None

    def __post_init__(self) -> None:
        self.library_max_attempts = max(1, min(MAX_LIBRARY_ATTEMPTS, int(self.library_max_attempts)))
        if self.metadata_backend not in METADATA_BACKENDS:
            raise ValueError(f"Unknown metadata backend: {self.metadata_backend!r} (expected one of {METADATA_BACKENDS})")
        if self.metadata_backend == "data-api" and not self.youtube_api_key:
            raise ValueError("The data-api metadata backend needs a YouTube API key (YOUTUBE_API_KEY)")
        if self.transcript_backend not in TRANSCRIPT_BACKENDS:
            raise ValueError(f"Unknown transcript backend: {self.transcript_backend!r} (expected one of {TRANSCRIPT_BACKENDS})")
        if self.call_timeout_seconds <= 0 or self.total_budget_seconds <= 0:
            raise ValueError("Timeouts must be positive")

    @classmethod
    def from_env(cls, **overrides) -> "AcquisitionConfig":
        """Build from environment variables; explicit overrides (not None) win."""
        values = {
            "youtube_api_key": os.getenv("YOUTUBE_API_KEY") or None,
            "cookies_file": os.getenv("TRANSCRIPT_FINDER_COOKIES") or None,
        }
        if os.getenv("TRANSCRIPT_FINDER_BUDGET"):
            values["total_budget_seconds"] = float(os.environ["TRANSCRIPT_FINDER_BUDGET"])
        if os.getenv("TRANSCRIPT_FINDER_CALL_TIMEOUT"):
            values["call_timeout_seconds"] = float(os.environ["TRANSCRIPT_FINDER_CALL_TIMEOUT"])
        if os.getenv("TRANSCRIPT_FINDER_METADATA_BACKEND"):
            values["metadata_backend"] = os.environ["TRANSCRIPT_FINDER_METADATA_BACKEND"]
        if os.getenv("TRANSCRIPT_FINDER_TRANSCRIPT_BACKEND"):
            values["transcript_backend"] = os.environ["TRANSCRIPT_FINDER_TRANSCRIPT_BACKEND"]

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
