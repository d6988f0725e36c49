import itertools
from types import SimpleNamespace

import pytest
from conftest import FakeTranscriptSource, segments

from transcript_finder.acquisition.errors import StrategyFailure, TimeoutExceeded, TransientFailure, Unsupported
from transcript_finder.acquisition.schema import AUTOMATIC, AttemptOutcome, CaptionTrack, TranscriptFetch
from transcript_finder.acquisition.strategies import LibraryStrategy
from transcript_finder.acquisition.timing import Deadline
from transcript_finder.sources.transcripts import LibraryTranscriptSource, UnsupportedTranscriptSource


def test_languages_are_tried_in_priority_order(make_context):
    source = FakeTranscriptSource({"es": [], AUTOMATIC: segments("hello")})
    context = make_context(languages=("es", AUTOMATIC))

    result = LibraryStrategy(source).acquire(context)

    assert [s.text for s in result] == ["hello"]
    assert source.calls == ["es", AUTOMATIC]
    assert [a.outcome for a in context.collector.attempts] == [AttemptOutcome.EMPTY, AttemptOutcome.SUCCESS]
    assert context.collector.last_success("library").language == AUTOMATIC


def test_one_language_failing_does_not_stop_the_next(make_context):
    source = FakeTranscriptSource({"es": StrategyFailure("bad payload"), "en": ValueError("odd"), AUTOMATIC: segments("ok")})
    context = make_context(languages=("es", "en", AUTOMATIC))

    result = LibraryStrategy(source).acquire(context)

    assert result
    errors = [a for a in context.collector.attempts if a.outcome == AttemptOutcome.ERROR]
    assert [(a.language, a.error_type) for a in errors] == [("es", "StrategyFailure"), ("en", "ValueError")]


def test_transient_failure_is_retried_up_to_max_attempts(make_context):
    source = FakeTranscriptSource({"es": (TransientFailure("429"), segments("hola"))})
    context = make_context(languages=("es", AUTOMATIC))

    result = LibraryStrategy(source, max_attempts=2).acquire(context)

    assert [s.text for s in result] == ["hola"]
    assert source.calls == ["es", "es"]


def test_retries_are_bounded(make_context):
    source = FakeTranscriptSource({"es": TransientFailure("429"), AUTOMATIC: []})
    context = make_context(languages=("es", AUTOMATIC))

    assert LibraryStrategy(source, max_attempts=10).acquire(context) == []
    assert source.calls == ["es", "es", "es", AUTOMATIC]
    assert context.collector.attempts[0].error_type == "TransientFailure"


def test_unsupported_is_not_retried(make_context):
    source = FakeTranscriptSource({"es": Unsupported("disabled")})
    context = make_context(languages=("es", AUTOMATIC))

    LibraryStrategy(source, max_attempts=3).acquire(context)

    assert source.calls == ["es", AUTOMATIC]


def test_call_timeout_moves_on_while_budget_remains(make_context):
    source = FakeTranscriptSource({"es": TimeoutExceeded("slow", timeout=5), AUTOMATIC: segments("ok")})
    context = make_context(languages=("es", AUTOMATIC))

    assert LibraryStrategy(source).acquire(context)
    assert context.collector.attempts[0].error_type == "TimeoutExceeded"


def test_spent_budget_stops_the_language_loop(make_context):
    context = make_context(languages=("es", "en", AUTOMATIC))
    ticks = itertools.chain([0.0], itertools.repeat(100.0))
    context.deadline = Deadline(10.0, clock=lambda: next(ticks))
    source = FakeTranscriptSource({"en": segments("never")})

    assert LibraryStrategy(source).acquire(context) == []
    assert source.calls == []
    assert [a.language for a in context.collector.attempts] == ["es"]


def test_caption_kind_comes_from_the_index(make_context):
    tracks = [CaptionTrack(language="en", kind="asr"), CaptionTrack(language="es")]
    source = FakeTranscriptSource({"es": segments("hola")})
    context = make_context(languages=("es", AUTOMATIC), tracks=tracks)

    LibraryStrategy(source).acquire(context)

    assert context.collector.last_success("library").caption_kind == "standard"


def test_unconfigured_library_always_reports_unsupported(make_context):
    context = make_context(languages=("es", AUTOMATIC))

    assert LibraryStrategy(UnsupportedTranscriptSource()).acquire(context) == []
    assert {a.error_type for a in context.collector.attempts} == {"Unsupported"}
    with pytest.raises(Unsupported):
        UnsupportedTranscriptSource().fetch_transcript("abc12345678", "es")


def test_success_is_labeled_with_the_transcript_language(make_context):
    fetched = TranscriptFetch(language="es-419", caption_kind="asr", segments=segments("hola"))
    source = FakeTranscriptSource({"es": [], AUTOMATIC: fetched})
    context = make_context(languages=("es", AUTOMATIC))

    LibraryStrategy(source).acquire(context)

    winner = context.collector.last_success("library")
    assert winner.language == "es-419"
    assert winner.caption_kind == "asr"


class ListedTranscript:
    def __init__(self, language_code, is_generated, texts):
        self.language_code = language_code
        self.is_generated = is_generated
        self.texts = texts

    def fetch(self):
        return [SimpleNamespace(text=text, start=float(i), duration=1.0) for i, text in enumerate(self.texts)]


class ListingApi:
    def __init__(self, *transcripts):
        self.transcripts = list(transcripts)

    def list(self, video_id):
        return iter(self.transcripts)


def test_regional_track_satisfies_a_plain_tag(make_context):
    source = LibraryTranscriptSource()
    source.api = ListingApi(ListedTranscript("en", False, ["english text"]), ListedTranscript("es-ES", True, ["texto en español"]))
    context = make_context(languages=("es", AUTOMATIC))

    result = LibraryStrategy(source).acquire(context)

    assert [s.text for s in result] == ["texto en español"]
    winner = context.collector.last_success("library")
    assert (winner.language, winner.caption_kind) == ("es-ES", "asr")


def test_markup_only_transcript_counts_as_empty(make_context):
    source = FakeTranscriptSource({"es": segments("&nbsp;", "<font></font>", "&#160;"), AUTOMATIC: segments("real")})
    context = make_context(languages=("es", AUTOMATIC))

    assert [s.text for s in LibraryStrategy(source).acquire(context)] == ["real"]
    assert context.collector.attempts[0].outcome == AttemptOutcome.EMPTY
