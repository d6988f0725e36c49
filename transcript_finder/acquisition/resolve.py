# transcript_finder/acquisition/resolve.py
"""
Locator resolution: user-supplied string -> canonical VideoReference.

Responsibility:
- Recognize the accepted YouTube URL shapes (watch, youtu.be, embed, v/, shorts, live)
- Capture the identifier token and validate its length and character class

Raises InvalidLocator on anything else.
No external network calls; pure deterministic validation.
"""

from __future__ import annotations

import re

from transcript_finder.acquisition.errors import InvalidLocator
from transcript_finder.acquisition.schema import VIDEO_ID_LENGTH, VideoReference


LOCATOR_REGEX = re.compile(
    r"^(?:https?://)?"
    r"(?:(?:www|m)\.)?"
    r"(?:youtube\.com|youtu\.be|youtube-nocookie\.com)"
    r"/(?:watch\?(?:[^#]*?&)?v=|embed/|v/|shorts/|live/)?([^&\s?#/]*)",
    re.IGNORECASE,
)

VIDEO_ID_REGEX = re.compile(r"^[A-Za-z0-9_-]+$")


def resolve(locator: str) -> VideoReference:
    """
    Extract the canonical video identifier from a locator.

    Bare identifiers are accepted as-is. The captured token must be exactly
    VIDEO_ID_LENGTH characters from [A-Za-z0-9_-].
    """
    candidate = (locator or "").strip()
    if not candidate:
        raise InvalidLocator("A YouTube URL is required")

    match = LOCATOR_REGEX.match(candidate)
    if match:
        token = match.group(1)
    elif VIDEO_ID_REGEX.match(candidate):
        token = candidate
    else:
        raise InvalidLocator(f"Not a YouTube URL: {candidate}")

    if len(token) != VIDEO_ID_LENGTH or not VIDEO_ID_REGEX.match(token):
        raise InvalidLocator(f"Invalid YouTube video identifier in: {candidate}")

    return VideoReference(video_id=token)
