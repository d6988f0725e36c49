# transcript_finder/sources/transcripts.py
"""
Transcript collaborator using youtube_transcript_api.
Single responsibility: fetch one language's transcript and map library errors to our taxonomy.

The library matches language codes exactly, so the listing is consulted and
regional variants ("es-ES", "es-419") are accepted for a plain tag.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import requests
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    RequestBlocked,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeRequestFailed,
    YouTubeTranscriptApi,
)

from transcript_finder.acquisition.errors import StrategyFailure, TransientFailure, Unsupported
from transcript_finder.acquisition.language import same_language
from transcript_finder.acquisition.schema import AUTOMATIC, TranscriptFetch, TranscriptSegment
from transcript_finder.acquisition.timing import call_with_timeout
from transcript_finder.sources.http import HttpClientConfig


def pick_transcript(transcripts: Iterable[Any], tag: str) -> Optional[Any]:
    """Best listed transcript for a tag: exact code first, then manual before generated."""
    candidates = [transcript for transcript in transcripts if same_language(transcript.language_code, tag)]
    if not candidates:
        return None
    return sorted(
        candidates,
        key=lambda transcript: (transcript.language_code.lower() != tag.lower(), bool(transcript.is_generated)),
    )[0]


class LibraryTranscriptSource:
    """Wraps YouTubeTranscriptApi with its own HTTP session."""

    def __init__(self, http: HttpClientConfig = HttpClientConfig(), timeout: float = 8.0) -> None:
        self.timeout = timeout
        self.api = YouTubeTranscriptApi(http_client=http.build_session())

    def _fetch(self, video_id: str, language: Optional[str]) -> TranscriptFetch:
        listed = list(self.api.list(video_id))
        if language in (None, AUTOMATIC):
            # No language requested: take whatever the listing offers first.
            transcript = listed[0] if listed else None
        else:
            transcript = pick_transcript(listed, language)
        if transcript is None:
            raise Unsupported(f"No {language or AUTOMATIC} transcript listed for {video_id}")

        return TranscriptFetch(
            language=transcript.language_code,
            caption_kind="asr" if transcript.is_generated else "standard",
            segments=[
                TranscriptSegment(text=snippet.text, start=snippet.start, duration=snippet.duration)
                for snippet in transcript.fetch()
            ],
        )

    def fetch_transcript(self, video_id: str, language: Optional[str] = None, timeout: Optional[float] = None) -> TranscriptFetch:
        try:
            return call_with_timeout(self._fetch, timeout or self.timeout, video_id, language)
        except (NoTranscriptFound, TranscriptsDisabled, VideoUnavailable) as exc:
            raise Unsupported(_first_line(exc)) from exc
        except (RequestBlocked, YouTubeRequestFailed, requests.RequestException) as exc:
            raise TransientFailure(_first_line(exc)) from exc
        except CouldNotRetrieveTranscript as exc:
            raise StrategyFailure(_first_line(exc)) from exc


class UnsupportedTranscriptSource:
    """Used when the transcript library is switched off; always reports Unsupported."""

    def fetch_transcript(self, video_id: str, language: Optional[str] = None, timeout: Optional[float] = None) -> TranscriptFetch:
        raise Unsupported("No transcript library configured")


def _first_line(exc: Exception) -> str:
    # Library messages are multi-paragraph; the first non-empty line carries the cause.
    for line in str(exc).splitlines():
        if line.strip():
            return line.strip()
    return type(exc).__name__
