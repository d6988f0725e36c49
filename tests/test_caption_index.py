import pytest
from conftest import FakeVideoSource

from transcript_finder.acquisition.errors import Unsupported
from transcript_finder.acquisition.schema import AttemptOutcome, CaptionTrack
from transcript_finder.acquisition.strategies import CaptionIndexStrategy


def test_index_never_yields_text_but_stores_tracks(make_context):
    tracks = [CaptionTrack(language="es", kind="asr"), CaptionTrack(language="en")]
    context = make_context()

    assert CaptionIndexStrategy(FakeVideoSource(tracks=tracks)).acquire(context) == []

    assert context.caption_tracks == tracks
    attempt = context.collector.attempts[0]
    assert attempt.outcome == AttemptOutcome.EMPTY
    assert attempt.note == "index only (es:asr, en:standard)"
    assert attempt.error is None
    assert context.caption_kind("es") == "asr"
    assert context.caption_kind("en-GB") is None
    assert context.caption_kind("en") == "standard"


def test_empty_listing_is_recorded(make_context):
    context = make_context()
    CaptionIndexStrategy(FakeVideoSource(tracks=[])).acquire(context)
    assert "no tracks listed" in context.collector.attempts[0].note
    assert context.collector.build_trail() == ["caption_index[*]: empty: index only (no tracks listed)"]


def test_listing_errors_propagate_to_the_runner(make_context):
    context = make_context()
    with pytest.raises(Unsupported):
        CaptionIndexStrategy(FakeVideoSource(tracks=Unsupported("quota"))).acquire(context)
    assert context.caption_tracks == []
