# transcript_finder/cli/youtube.py
"""
CLI entrypoint for YouTube transcript acquisition.

Thin adapter, no business logic.
Responsibilities:
- Parse arguments
- Build the run configuration
- Invoke the core pipeline
- Print the transcript (or JSON payload) and clear user feedback

All logging is structured JSON on stderr from the core pipeline.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from transcript_finder.acquisition.runner import run_acquisition
from transcript_finder.acquisition.schema import AcquisitionFailure
from transcript_finder.config import AcquisitionConfig
from transcript_finder.logging_core.logger import set_level


app = typer.Typer(
    name="transcript-finder",
    help="Transcript Finder: best-effort transcripts for YouTube videos",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Emit DEBUG level pipeline logs"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only emit pipeline errors"),
) -> None:
    """Transcript Finder command group."""
    if verbose:
        set_level(logging.DEBUG)
    elif quiet:
        set_level(logging.ERROR)


@app.command()
def fetch(
    url: str = typer.Argument(..., help="YouTube video URL or 11-character video id"),
    as_json: bool = typer.Option(False, "--json", help="Print the full JSON payload instead of plain text"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the output to this file instead of stdout"),
    budget: Optional[float] = typer.Option(None, "--budget", help="Overall time budget in seconds"),
    call_timeout: Optional[float] = typer.Option(None, "--call-timeout", help="Timeout for each network call in seconds"),
    api_key: Optional[str] = typer.Option(None, "--api-key", envvar="YOUTUBE_API_KEY", help="YouTube Data API key"),
    metadata_backend: Optional[str] = typer.Option(
        None, "--metadata-backend", help="Metadata source: yt-dlp (default) or data-api"
    ),
    transcript_backend: Optional[str] = typer.Option(
        None, "--transcript-backend", help="Transcript library: library (default) or none"
    ),
    cookies: Optional[Path] = typer.Option(None, "--cookies", help="cookies.txt for yt-dlp"),
) -> None:
    """
    Fetch the transcript of a YouTube video.
    """
    try:
        config = AcquisitionConfig.from_env(
            total_budget_seconds=budget,
            call_timeout_seconds=call_timeout,
            youtube_api_key=api_key,
            metadata_backend=metadata_backend,
            transcript_backend=transcript_backend,
            cookies_file=str(cookies) if cookies else None,
        )
    except ValueError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=2)

    try:
        outcome = run_acquisition(url, config)
    except KeyboardInterrupt:
        typer.echo("\nInterrupted by user.", err=True)
        sys.exit(1)

    if as_json:
        payload = outcome.model_dump_json(indent=2)
    elif isinstance(outcome, AcquisitionFailure):
        payload = None
    else:
        payload = outcome.text

    if payload is not None:
        if out is not None:
            out.expanduser().parent.mkdir(parents=True, exist_ok=True)
            out.expanduser().write_text(payload + "\n", encoding="utf-8")
        else:
            typer.echo(payload)

    if isinstance(outcome, AcquisitionFailure):
        _report_failure(outcome)
        raise typer.Exit(code=1)

    typer.echo(typer.style(f"✓ {outcome.metadata.title or outcome.video_id}", fg=typer.colors.GREEN, bold=True), err=True)
    typer.echo(f"Method: {outcome.method} via {outcome.strategy} ({outcome.segment_count} segments)", err=True)
    if out is not None:
        typer.echo(f"Written to: {out.expanduser().resolve()}", err=True)


def _report_failure(failure: AcquisitionFailure) -> None:
    typer.echo("", err=True)
    typer.echo(typer.style(f"✗ {failure.error}", fg=typer.colors.RED, bold=True), err=True)
    if failure.video_info and failure.video_info.title:
        typer.echo(f"Video: {failure.video_info.title} ({failure.video_info.channel})", err=True)
    if failure.details:
        typer.echo("Possible causes:", err=True)
        for detail in failure.details:
            typer.echo(f"  - {detail}", err=True)


if __name__ == "__main__":
    app()
