"""transcript-finder: best-effort YouTube transcript acquisition."""

__version__ = "0.1.0"
