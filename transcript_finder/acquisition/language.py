# transcript_finder/acquisition/language.py
"""
Language prioritization: VideoMetadata -> ordered LanguagePriority.

Declared languages (audio first, then content) win outright. Otherwise a
lexical scorer inspects a bounded excerpt of title + description. The scorer
is a plain callable so a stronger classifier can replace it without touching
the orchestrator.

Deterministic, no I/O.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Optional, Pattern

from transcript_finder.acquisition.schema import AUTOMATIC, LanguagePriority, VideoMetadata


PRIMARY_LANGUAGE = "es"
SECONDARY_LANGUAGE = "en"
UNKNOWN = "unknown"

EXCERPT_CHARS = 500
MIN_MATCHES = 3
MARGIN = 2

LANGUAGE_PATTERNS: Dict[str, Pattern[str]] = {
    PRIMARY_LANGUAGE: re.compile(
        r"\b(?:el|la|los|las|del|que|por|para|con|una|como|pero|más|muy|este|esta|"
        r"cómo|qué|sobre|también|porque|cuando|hasta|desde|nuestro|nuestra)\b"
        r"|[áéíóúñ¿¡]"
    ),
    SECONDARY_LANGUAGE: re.compile(
        r"\b(?:the|and|of|to|is|that|for|with|this|you|are|how|what|your|from|"
        r"about|will|have|was|it's|don't|why|when|which)\b"
    ),
}

Scorer = Callable[[str], Dict[str, int]]

TEMPLATES: Dict[str, tuple] = {
    PRIMARY_LANGUAGE: (PRIMARY_LANGUAGE, AUTOMATIC),
    SECONDARY_LANGUAGE: (SECONDARY_LANGUAGE, AUTOMATIC),
    UNKNOWN: (AUTOMATIC, PRIMARY_LANGUAGE, SECONDARY_LANGUAGE),
}


def score_languages(text: str) -> Dict[str, int]:
    """Count characteristic function words and diacritics per supported language."""
    lowered = text.lower()
    return {lang: len(pattern.findall(lowered)) for lang, pattern in LANGUAGE_PATTERNS.items()}


def normalize_tag(tag: Optional[str]) -> Optional[str]:
    """Reduce a BCP-47 style tag to its lowercase primary subtag ("es-419" -> "es")."""
    if not tag:
        return None
    primary = re.split(r"[-_]", tag.strip())[0].lower()
    if not primary or primary in {"und", "zxx"}:
        return None
    return primary


def same_language(track_language: str, tag: str) -> bool:
    """True when a track's code is the tag itself or one of its regional variants ("es-419" for "es")."""
    track_language = track_language.lower()
    tag = tag.lower()
    return track_language == tag or track_language.startswith(f"{tag}-") or track_language.startswith(f"{tag}_")


class LanguagePrioritizer:
    """Derives the per-request language priority list."""

    def __init__(self, scorer: Scorer = score_languages, excerpt_chars: int = EXCERPT_CHARS) -> None:
        self.scorer = scorer
        self.excerpt_chars = excerpt_chars

    def declared_language(self, metadata: VideoMetadata) -> Optional[str]:
        return normalize_tag(metadata.default_audio_language) or normalize_tag(metadata.default_language)

    def detect(self, metadata: VideoMetadata) -> str:
        """Heuristic detection over title + description. Returns a language tag or UNKNOWN."""
        excerpt = f"{metadata.title} {metadata.description}"[: self.excerpt_chars]
        scores = self.scorer(excerpt)

        primary = scores.get(PRIMARY_LANGUAGE, 0)
        secondary = scores.get(SECONDARY_LANGUAGE, 0)

        if primary > secondary + MARGIN and primary >= MIN_MATCHES:
            return PRIMARY_LANGUAGE
        if secondary > primary + MARGIN and secondary >= MIN_MATCHES:
            return SECONDARY_LANGUAGE
        return UNKNOWN

    def prioritize(self, metadata: VideoMetadata) -> LanguagePriority:
        declared = self.declared_language(metadata)
        if declared:
            # A declared language is authoritative: never fall across to the other known language.
            return LanguagePriority(languages=(declared, AUTOMATIC))

        return LanguagePriority(languages=TEMPLATES[self.detect(metadata)])


_default_prioritizer = LanguagePrioritizer()


def prioritize(metadata: VideoMetadata) -> LanguagePriority:
    """Module-level entry point using the default lexical scorer."""
    return _default_prioritizer.prioritize(metadata)
