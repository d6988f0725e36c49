"""
Transcript acquisition pipeline.

The orchestrator lives in transcript_finder.acquisition.runner; the pure
building blocks are re-exported here.
"""

from transcript_finder.acquisition.language import prioritize
from transcript_finder.acquisition.normalize import normalize
from transcript_finder.acquisition.resolve import resolve

__all__ = ["normalize", "prioritize", "resolve"]
