from transcript_finder.logging_core.logger import get_logger, log_event, release_logger

__all__ = ["get_logger", "log_event", "release_logger"]
