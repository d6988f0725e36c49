from transcript_finder.acquisition.diagnostics.collector import AttemptCollector

__all__ = ["AttemptCollector"]
