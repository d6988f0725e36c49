import json

import pytest
from typer.testing import CliRunner

from transcript_finder.acquisition.assembler import assemble_failure
from transcript_finder.acquisition.errors import Exhausted
from transcript_finder.acquisition.schema import TranscriptResult, VideoMetadata
from transcript_finder.cli import youtube


runner = CliRunner()

VIDEO_ID = "abc12345678"
METADATA = VideoMetadata(video_id=VIDEO_ID, title="Pan casero", channel="Cocina")
RESULT = TranscriptResult(
    video_id=VIDEO_ID,
    text="hola mundo",
    strategy="library",
    language="es",
    segment_count=2,
    method="Automatic captions (es)",
    caption_kind="asr",
    metadata=METADATA,
)


class Calls(list):
    outcome = None


@pytest.fixture
def recorder(monkeypatch):
    for name in ("YOUTUBE_API_KEY", "TRANSCRIPT_FINDER_BUDGET", "TRANSCRIPT_FINDER_METADATA_BACKEND", "TRANSCRIPT_FINDER_TRANSCRIPT_BACKEND"):
        monkeypatch.delenv(name, raising=False)
    seen = Calls()

    def fake_run(locator, config):
        seen.append((locator, config))
        return seen.outcome

    seen.outcome = RESULT
    monkeypatch.setattr(youtube, "run_acquisition", fake_run)
    return seen


def test_fetch_prints_transcript(recorder):
    result = runner.invoke(youtube.app, ["fetch", "https://youtu.be/abc12345678"])

    assert result.exit_code == 0
    assert "hola mundo" in result.output
    assert "Automatic captions (es)" in result.output
    assert recorder[0][0] == "https://youtu.be/abc12345678"


def test_options_flow_into_config(recorder):
    result = runner.invoke(
        youtube.app,
        ["fetch", VIDEO_ID, "--budget", "9", "--call-timeout", "2", "--api-key", "k", "--metadata-backend", "data-api"],
    )

    assert result.exit_code == 0
    config = recorder[0][1]
    assert config.total_budget_seconds == 9
    assert config.call_timeout_seconds == 2
    assert config.metadata_backend == "data-api"
    assert config.youtube_api_key == "k"
    assert config.transcript_backend == "library"


def test_transcript_backend_can_be_switched_off(recorder):
    result = runner.invoke(youtube.app, ["fetch", VIDEO_ID, "--transcript-backend", "none"])

    assert result.exit_code == 0
    assert recorder[0][1].transcript_backend == "none"


def test_json_payload_written_to_file(recorder, tmp_path):
    target = tmp_path / "out" / "transcript.json"

    result = runner.invoke(youtube.app, ["fetch", VIDEO_ID, "--json", "--out", str(target)])

    assert result.exit_code == 0
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["success"] is True
    assert payload["text"] == "hola mundo"


def test_failure_exits_non_zero_with_guidance(recorder):
    recorder.outcome = assemble_failure(Exhausted("No transcript or captions found", []), video_id=VIDEO_ID, metadata=METADATA)

    result = runner.invoke(youtube.app, ["fetch", VIDEO_ID])

    assert result.exit_code == 1
    assert "No transcript or captions found" in result.output
    assert "Possible causes:" in result.output
    assert "Pan casero (Cocina)" in result.output


def test_failure_json_is_still_written(recorder, tmp_path):
    recorder.outcome = assemble_failure(Exhausted("nothing", []), video_id=VIDEO_ID)
    target = tmp_path / "failure.json"

    result = runner.invoke(youtube.app, ["fetch", VIDEO_ID, "--json", "-o", str(target)])

    assert result.exit_code == 1
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["success"] is False
    assert payload["failure_type"] == "exhausted"


def test_bad_configuration_exits_with_usage_code(recorder):
    result = runner.invoke(youtube.app, ["fetch", VIDEO_ID, "--metadata-backend", "data-api"])

    assert result.exit_code == 2
    assert "Configuration error" in result.output
    assert recorder == []
