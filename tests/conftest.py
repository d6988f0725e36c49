"""Shared fakes: every collaborator is replaced, no test touches the network."""

from __future__ import annotations

import uuid
from typing import Dict, List, Optional, Union

import pytest

from transcript_finder.acquisition.diagnostics import AttemptCollector
from transcript_finder.acquisition.errors import MetadataUnavailable
from transcript_finder.acquisition.schema import (
    AUTOMATIC,
    CaptionTrack,
    LanguagePriority,
    TranscriptFetch,
    TranscriptSegment,
    VideoMetadata,
    VideoReference,
)
from transcript_finder.acquisition.strategies.base import AcquisitionContext, AcquisitionStrategy
from transcript_finder.acquisition.timing import Deadline
from transcript_finder.logging_core.logger import get_logger, release_logger


VIDEO_ID = "abc12345678"


def segments(*texts: str) -> List[TranscriptSegment]:
    return [TranscriptSegment(text=text, start=float(i), duration=1.0) for i, text in enumerate(texts)]


class FakeVideoSource:
    def __init__(
        self,
        metadata: Optional[VideoMetadata] = None,
        tracks: Union[List[CaptionTrack], Exception, None] = None,
        metadata_error: Optional[Exception] = None,
    ) -> None:
        self.metadata = metadata or VideoMetadata(video_id=VIDEO_ID, title="A video", channel="A channel")
        self.tracks = tracks if tracks is not None else []
        self.metadata_error = metadata_error
        self.metadata_calls = 0
        self.listing_calls = 0

    def fetch_metadata(self, video_id, timeout=None):
        self.metadata_calls += 1
        if self.metadata_error is not None:
            raise self.metadata_error
        return self.metadata

    def list_caption_tracks(self, video_id, timeout=None):
        self.listing_calls += 1
        if isinstance(self.tracks, Exception):
            raise self.tracks
        return self.tracks


class NotFoundVideoSource(FakeVideoSource):
    def __init__(self) -> None:
        super().__init__(metadata_error=MetadataUnavailable("Video not found or not public"))


class FakeTranscriptSource:
    """
    Responses keyed by language; a tuple of values is consumed one call at a time.
    Plain segment lists come back labeled with the requested tag.
    """

    def __init__(self, responses: Dict[str, object]) -> None:
        self.responses = responses
        self.calls: List[Optional[str]] = []

    def fetch_transcript(self, video_id, language=None, timeout=None):
        self.calls.append(language)
        response = self.responses.get(language, [])
        if isinstance(response, tuple):
            response, rest = response[0], response[1:]
            self.responses[language] = rest if len(rest) > 1 else rest[0]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, TranscriptFetch):
            return response
        return TranscriptFetch(language=language or AUTOMATIC, segments=response)


class FakeDocumentSource:
    def __init__(self, html: Union[str, Exception] = "", payloads: Optional[Dict[str, str]] = None) -> None:
        self.html = html
        self.payloads = payloads or {}
        self.document_calls = 0
        self.payload_calls: List[str] = []

    def fetch_document(self, video_id, timeout=None):
        self.document_calls += 1
        if isinstance(self.html, Exception):
            raise self.html
        return self.html

    def fetch_track_payload(self, track_url, timeout=None):
        self.payload_calls.append(track_url)
        return self.payloads.get(track_url, "")


class CountingStrategy(AcquisitionStrategy):
    """Strategy double with call-count instrumentation."""

    def __init__(self, name: str, result: Union[List[TranscriptSegment], Exception]) -> None:
        self.name = name
        self.result = result
        self.calls = 0

    def acquire(self, context):
        self.calls += 1
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def metadata() -> VideoMetadata:
    return VideoMetadata(
        video_id=VIDEO_ID,
        title="Cómo hacer pan casero",
        channel="Cocina Fácil",
        description="Una receta muy sencilla para hacer pan en casa con los niños.",
    )


@pytest.fixture
def reference() -> VideoReference:
    return VideoReference(video_id=VIDEO_ID)


@pytest.fixture
def make_context(reference, metadata):
    run_ids = []

    def factory(languages=("es", "automatic"), budget=30.0, call_timeout=5.0, tracks=None) -> AcquisitionContext:
        run_id = uuid.uuid4()
        run_ids.append(run_id)
        return AcquisitionContext(
            reference=reference,
            metadata=metadata,
            priority=LanguagePriority(languages=languages),
            deadline=Deadline(budget),
            call_timeout=call_timeout,
            collector=AttemptCollector(run_id),
            logger=get_logger(run_id),
            caption_tracks=list(tracks or []),
        )

    yield factory

    for run_id in run_ids:
        release_logger(run_id)
