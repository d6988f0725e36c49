from transcript_finder.acquisition.strategies.base import AcquisitionContext, AcquisitionStrategy
from transcript_finder.acquisition.strategies.caption_index import CaptionIndexStrategy
from transcript_finder.acquisition.strategies.library import LibraryStrategy
from transcript_finder.acquisition.strategies.page_scrape import PageScrapeStrategy

__all__ = [
    "AcquisitionContext",
    "AcquisitionStrategy",
    "CaptionIndexStrategy",
    "LibraryStrategy",
    "PageScrapeStrategy",
]
