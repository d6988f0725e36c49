# transcript_finder/acquisition/runner.py
"""
Orchestration runner for the transcript acquisition pipeline.

Responsibilities:
- Resolve the locator and fetch metadata (terminal failures surface here)
- Derive the language priority once per request
- Execute strategies in fixed order, sequentially, first non-empty result wins
- Keep every attempt for the failure report
- Assemble the terminal payload

No business logic lives here, only orchestration and error containment.
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Sequence, Union

from transcript_finder.acquisition.assembler import assemble_failure, assemble_result
from transcript_finder.acquisition.diagnostics import AttemptCollector
from transcript_finder.acquisition.errors import Exhausted, InvalidLocator, MetadataUnavailable, TimeoutExceeded
from transcript_finder.acquisition.language import LanguagePrioritizer
from transcript_finder.acquisition.resolve import resolve
from transcript_finder.acquisition.schema import (
    AUTOMATIC,
    AcquisitionFailure,
    AttemptOutcome,
    TranscriptResult,
    VideoMetadata,
    VideoReference,
)
from transcript_finder.acquisition.strategies import (
    AcquisitionContext,
    AcquisitionStrategy,
    CaptionIndexStrategy,
    LibraryStrategy,
    PageScrapeStrategy,
)
from transcript_finder.acquisition.strategies.base import has_text
from transcript_finder.acquisition.timing import Deadline, timer
from transcript_finder.config import AcquisitionConfig
from transcript_finder.logging_core.logger import get_logger, log_event, release_logger
from transcript_finder.sources import DocumentSource, TranscriptSource, VideoSource
from transcript_finder.sources.http import WATCH_PAGE_CLIENT
from transcript_finder.sources.metadata import DataApiVideoSource, YtDlpVideoSource
from transcript_finder.sources.page import WatchPageSource
from transcript_finder.sources.transcripts import LibraryTranscriptSource, UnsupportedTranscriptSource


AcquisitionOutcome = Union[TranscriptResult, AcquisitionFailure]


def build_video_source(config: AcquisitionConfig) -> VideoSource:
    if config.metadata_backend == "data-api":
        return DataApiVideoSource(config.youtube_api_key or "")
    return YtDlpVideoSource(cookies_file=config.cookies_file, timeout=config.call_timeout_seconds)


def build_transcript_source(config: AcquisitionConfig) -> TranscriptSource:
    if config.transcript_backend == "none":
        return UnsupportedTranscriptSource()
    return LibraryTranscriptSource(timeout=config.call_timeout_seconds)


def build_strategies(
    config: AcquisitionConfig,
    video_source: VideoSource,
    transcript_source: Optional[TranscriptSource] = None,
    document_source: Optional[DocumentSource] = None,
) -> List[AcquisitionStrategy]:
    """Fixed strategy order: most structured first."""
    return [
        CaptionIndexStrategy(video_source),
        LibraryStrategy(
            transcript_source or build_transcript_source(config),
            max_attempts=config.library_max_attempts,
        ),
        PageScrapeStrategy(document_source or WatchPageSource(WATCH_PAGE_CLIENT)),
    ]


def acquire(
    reference: VideoReference,
    metadata: VideoMetadata,
    strategies: Sequence[AcquisitionStrategy],
    *,
    config: Optional[AcquisitionConfig] = None,
    deadline: Optional[Deadline] = None,
    prioritizer: Optional[LanguagePrioritizer] = None,
    run_id: Optional[uuid.UUID] = None,
) -> AcquisitionOutcome:
    """
    Run the strategy chain for an already resolved video.

    Returns a TranscriptResult for the first strategy yielding non-empty
    segments, otherwise an AcquisitionFailure carrying every attempt.
    Strategy errors never escape.
    """
    config = config or AcquisitionConfig()
    deadline = deadline or Deadline(config.total_budget_seconds)
    if run_id is None:
        run_id = uuid.uuid4()
        try:
            return _run_chain(reference, metadata, strategies, config, deadline, prioritizer, run_id)
        finally:
            release_logger(run_id)
    return _run_chain(reference, metadata, strategies, config, deadline, prioritizer, run_id)


def _run_chain(
    reference: VideoReference,
    metadata: VideoMetadata,
    strategies: Sequence[AcquisitionStrategy],
    config: AcquisitionConfig,
    deadline: Deadline,
    prioritizer: Optional[LanguagePrioritizer],
    run_id: uuid.UUID,
) -> AcquisitionOutcome:
    logger = get_logger(run_id)

    priority = (prioritizer or LanguagePrioritizer()).prioritize(metadata)
    log_event(
        logger,
        logging.INFO,
        "Language priority derived",
        stage_name="prioritize",
        event_type="success",
        metadata={"languages": list(priority.languages)},
    )

    collector = AttemptCollector(run_id)
    context = AcquisitionContext(
        reference=reference,
        metadata=metadata,
        priority=priority,
        deadline=deadline,
        call_timeout=config.call_timeout_seconds,
        collector=collector,
        logger=logger,
    )

    for strategy in strategies:
        if deadline.expired:
            context.record(
                strategy.name,
                None,
                AttemptOutcome.ERROR,
                error=TimeoutExceeded(f"Overall budget of {deadline.budget_seconds:.1f}s exhausted before this strategy ran"),
            )
            log_event(logger, logging.WARNING, "Strategy skipped", stage_name=strategy.name, event_type="skipped")
            continue

        log_event(logger, logging.INFO, "Starting strategy", stage_name=strategy.name, event_type="start")

        with timer() as end:
            try:
                segments = strategy.acquire(context)
            except Exception as exc:  # pylint: disable=broad-except
                # Strategy-level failure is never fatal to the pipeline
                context.record(strategy.name, None, AttemptOutcome.ERROR, error=exc, execution_time_ms=end())
                continue

        if has_text(segments):
            winner = collector.last_success(strategy.name) or context.record(
                strategy.name,
                None,
                AttemptOutcome.SUCCESS,
                segment_count=len(segments),
                execution_time_ms=end(),
            )
            language = winner.language or AUTOMATIC
            result = assemble_result(
                segments,
                metadata,
                strategy.name,
                language,
                caption_kind=winner.caption_kind or context.caption_kind(language),
            )
            log_event(
                logger,
                logging.INFO,
                "Transcript acquired",
                event_type="pipeline_success",
                metadata={
                    "strategy": result.strategy,
                    "language": result.language,
                    "segment_count": result.segment_count,
                    "characters": len(result.text),
                },
            )
            return result

        if not collector.for_strategy(strategy.name):
            context.record(strategy.name, None, AttemptOutcome.EMPTY, execution_time_ms=end())

    exhausted = Exhausted("No transcript or captions found for this video", collector.attempts)
    log_event(
        logger,
        logging.ERROR,
        "All strategies exhausted",
        event_type="pipeline_failure",
        metadata={"attempts": collector.build_trail()},
    )
    return assemble_failure(exhausted, video_id=reference.video_id, metadata=metadata)


def run_acquisition(
    locator: str,
    config: Optional[AcquisitionConfig] = None,
    *,
    video_source: Optional[VideoSource] = None,
    strategies: Optional[Sequence[AcquisitionStrategy]] = None,
    prioritizer: Optional[LanguagePrioritizer] = None,
) -> AcquisitionOutcome:
    """
    Execute the full pipeline for a user-supplied locator.

    Args:
        locator: YouTube URL (or bare video identifier)
        config: Budget/timeouts/backends; read from the environment when omitted
        video_source: Metadata + caption listing collaborator override
        strategies: Strategy chain override (defaults to build_strategies())

    Returns:
        TranscriptResult on success, AcquisitionFailure otherwise. Never raises
        for terminal outcomes.
    """
    config = config or AcquisitionConfig.from_env()
    run_id = uuid.uuid4()
    logger = get_logger(run_id)
    deadline = Deadline(config.total_budget_seconds)

    log_event(
        logger,
        logging.INFO,
        "Starting transcript acquisition",
        event_type="pipeline_start",
        metadata={"locator": locator, "budget_seconds": config.total_budget_seconds},
    )

    try:
        try:
            reference = resolve(locator)
        except InvalidLocator as exc:
            log_event(logger, logging.ERROR, "Invalid locator", stage_name="resolve", event_type="failure", metadata={"error": exc.message})
            return assemble_failure(exc)

        video_source = video_source or build_video_source(config)
        try:
            metadata = video_source.fetch_metadata(
                reference.video_id, timeout=deadline.timeout_for(config.call_timeout_seconds)
            )
        except MetadataUnavailable as exc:
            log_event(logger, logging.ERROR, "Metadata unavailable", stage_name="metadata", event_type="failure", metadata={"error": exc.message})
            return assemble_failure(exc, video_id=reference.video_id)
        except Exception as exc:  # pylint: disable=broad-except
            failure = MetadataUnavailable(f"Unexpected error fetching metadata: {exc}")
            log_event(logger, logging.ERROR, "Metadata fetch crashed", stage_name="metadata", event_type="failure", metadata={"exception": str(exc)})
            return assemble_failure(failure, video_id=reference.video_id)

        log_event(
            logger,
            logging.INFO,
            "Metadata fetched",
            stage_name="metadata",
            event_type="success",
            metadata={"title": metadata.title, "channel": metadata.channel},
        )

        if strategies is None:
            strategies = build_strategies(config, video_source)

        return acquire(
            reference,
            metadata,
            strategies,
            config=config,
            deadline=deadline,
            prioritizer=prioritizer,
            run_id=run_id,
        )
    finally:
        release_logger(run_id)


# High-Level Intent
# runner.py is the orchestration heart of the acquisition pipeline.
# run_acquisition() owns the request: run_id, logger, deadline, terminal
# failures before any strategy runs. acquire() owns the strategy chain and the
# attempt trail; nothing it creates outlives the call.

# Data Flow
# locator → resolve → VideoReference
# → video_source.fetch_metadata → VideoMetadata
# → prioritize → LanguagePriority
# → for each strategy: acquire(context) → segments | [] | raises
# → first non-empty → assemble_result (normalize) → TranscriptResult
# → none → Exhausted → assemble_failure → AcquisitionFailure

# Edge Cases & Failure Scenarios
# Invalid URL → InvalidLocator payload, metadata never fetched.
# Private/deleted video → MetadataUnavailable payload, zero attempts.
# Caption index down → recorded, library and page scrape still run.
# Budget spent mid-chain → remaining strategies recorded as TimeoutExceeded.
