# transcript_finder/acquisition/strategies/page_scrape.py
"""
Page-scrape strategy: read the caption track list embedded in the watch page.

Responsibility:
- Fetch the watch page document
- Locate the caption track list with an ordered list of matchers (first match wins):
  player-response assignment, raw "captionTracks" array, backslash-escaped
  "captionTracks" array inside a JS string
- Pick a track by language priority (first available when nothing matches)
- Download the timed text and turn each timed element into a segment

Entities are left in place; the normalizer decodes them at assembly.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from transcript_finder.acquisition.errors import StrategyFailure
from transcript_finder.acquisition.language import same_language
from transcript_finder.acquisition.schema import (
    AUTOMATIC,
    AttemptOutcome,
    CaptionTrack,
    LanguagePriority,
    TranscriptSegment,
)
from transcript_finder.acquisition.strategies.base import (
    AcquisitionContext,
    AcquisitionStrategy,
    has_text,
)
from transcript_finder.acquisition.timing import timer
from transcript_finder.sources import DocumentSource


PLAYER_RESPONSE_RE = re.compile(r"ytInitialPlayerResponse\s*=\s*\{")
CAPTION_TRACKS_RE = re.compile(r'"captionTracks"\s*:\s*\[')
ESCAPED_CAPTION_TRACKS_RE = re.compile(r'\\"captionTracks\\"\s*:\s*\[')
STRING_END_RE = re.compile(r'(?<!\\)(?:\\\\)*"')
HEX_ESCAPE_RE = re.compile(r"\\x([0-9a-fA-F]{2})")

TEXT_ELEMENT_RE = re.compile(r"<text\b([^>]*)>(.*?)</text>", re.DOTALL)
P_ELEMENT_RE = re.compile(r"<p\b([^>]*)>(.*?)</p>", re.DOTALL)
ATTRIBUTE_RE = re.compile(r'([\w:-]+)="([^"]*)"')
MARKUP_RE = re.compile(r"<[^>]*>")

_decoder = json.JSONDecoder()

TrackMatcher = Callable[[str], Optional[List[Dict[str, Any]]]]


def match_player_response(html: str) -> Optional[List[Dict[str, Any]]]:
    match = PLAYER_RESPONSE_RE.search(html)
    if not match:
        return None
    try:
        player, _ = _decoder.raw_decode(html, match.end() - 1)
    except ValueError:
        return None
    tracks = (
        player.get("captions", {})
        .get("playerCaptionsTracklistRenderer", {})
        .get("captionTracks")
    )
    return tracks if isinstance(tracks, list) else None


def match_caption_tracks(html: str) -> Optional[List[Dict[str, Any]]]:
    match = CAPTION_TRACKS_RE.search(html)
    if not match:
        return None
    try:
        tracks, _ = _decoder.raw_decode(html, match.end() - 1)
    except ValueError:
        return None
    return tracks if isinstance(tracks, list) else None


def match_escaped_caption_tracks(html: str) -> Optional[List[Dict[str, Any]]]:
    """Track list serialized inside a JS string literal (legacy player config)."""
    match = ESCAPED_CAPTION_TRACKS_RE.search(html)
    if not match:
        return None
    end = STRING_END_RE.search(html, match.end())
    if not end:
        return None

    fragment = html[match.end() - 1 : end.end() - 1]
    try:
        unescaped = json.loads('"' + HEX_ESCAPE_RE.sub(r"\\u00\1", fragment) + '"')
        tracks, _ = _decoder.raw_decode(unescaped)
    except ValueError:
        return None
    return tracks if isinstance(tracks, list) else None


TRACK_MATCHERS: Tuple[TrackMatcher, ...] = (
    match_player_response,
    match_caption_tracks,
    match_escaped_caption_tracks,
)


def _track_name(raw: Dict[str, Any]) -> Optional[str]:
    name = raw.get("name")
    if isinstance(name, dict):
        if name.get("simpleText"):
            return name["simpleText"]
        return "".join(run.get("text", "") for run in name.get("runs", [])) or None
    return name or None


def extract_caption_tracks(html: str, matchers: Sequence[TrackMatcher] = TRACK_MATCHERS) -> List[CaptionTrack]:
    """Run the matchers in order and convert the first hit into CaptionTracks."""
    for matcher in matchers:
        raw_tracks = matcher(html)
        if raw_tracks is None:
            continue
        return [
            CaptionTrack(
                language=raw.get("languageCode") or "und",
                kind=raw.get("kind") or "standard",
                name=_track_name(raw),
                base_url=raw["baseUrl"],
            )
            for raw in raw_tracks
            if isinstance(raw, dict) and raw.get("baseUrl")
        ]
    return []


def select_track(tracks: List[CaptionTrack], priority: LanguagePriority) -> Optional[CaptionTrack]:
    """Best track by priority order; human-authored before automatic within a language."""
    if not tracks:
        return None
    for language in priority.languages:
        if language == AUTOMATIC:
            return tracks[0]
        candidates = [track for track in tracks if same_language(track.language, language)]
        if candidates:
            exact = [track for track in candidates if track.language.lower() == language.lower()] or candidates
            return sorted(exact, key=lambda track: track.is_automatic)[0]
    return tracks[0]


def _attributes(raw: str) -> Dict[str, str]:
    return dict(ATTRIBUTE_RE.findall(raw))


def _seconds(value: Optional[str], scale: float = 1.0) -> Optional[float]:
    try:
        return float(value) / scale if value is not None else None
    except ValueError:
        return None


def parse_timed_text(payload: str) -> List[TranscriptSegment]:
    """Segments from timed-text XML: <text start dur> (seconds) or srv3 <p t d> (milliseconds)."""
    segments = []
    for body_match, scale, start_key, duration_key in (
        (TEXT_ELEMENT_RE, 1.0, "start", "dur"),
        (P_ELEMENT_RE, 1000.0, "t", "d"),
    ):
        for match in body_match.finditer(payload):
            text = MARKUP_RE.sub("", match.group(2)).strip()
            if not text:
                continue
            attributes = _attributes(match.group(1))
            segments.append(
                TranscriptSegment(
                    text=text,
                    start=_seconds(attributes.get(start_key), scale),
                    duration=_seconds(attributes.get(duration_key), scale),
                )
            )
        if segments:
            break
    return segments


class PageScrapeStrategy(AcquisitionStrategy):
    name = "page_scrape"

    def __init__(self, document_source: DocumentSource, matchers: Sequence[TrackMatcher] = TRACK_MATCHERS) -> None:
        self.document_source = document_source
        self.matchers = tuple(matchers)

    def acquire(self, context: AcquisitionContext) -> List[TranscriptSegment]:
        with timer() as end:
            html = self.document_source.fetch_document(context.reference.video_id, timeout=context.timeout())
            tracks = extract_caption_tracks(html, self.matchers)
            track = select_track(tracks, context.priority)
            if track is None:
                raise StrategyFailure("No caption track descriptor found in the watch page")

            payload = self.document_source.fetch_track_payload(track.base_url, timeout=context.timeout())
            segments = parse_timed_text(payload)

        if not has_text(segments):
            context.record(self.name, track.language, AttemptOutcome.EMPTY, caption_kind=track.kind, execution_time_ms=end())
            return []

        context.record(
            self.name,
            track.language,
            AttemptOutcome.SUCCESS,
            caption_kind=track.kind,
            segment_count=len(segments),
            execution_time_ms=end(),
        )
        return segments
