# transcript_finder/sources/page.py
"""
Watch page and timed-text collaborator over requests.
Single responsibility: download documents; parsing belongs to the page-scrape strategy.
"""

from __future__ import annotations

from typing import Optional

import requests

from transcript_finder.acquisition.errors import StrategyFailure, TimeoutExceeded, TransientFailure
from transcript_finder.sources.http import WATCH_PAGE_CLIENT, HttpClientConfig


WATCH_URL = "https://www.youtube.com/watch"


class WatchPageSource:
    def __init__(self, http: HttpClientConfig = WATCH_PAGE_CLIENT) -> None:
        self.http = http
        self.session = http.build_session()

    def _get_text(self, url: str, timeout: Optional[float], **kwargs) -> str:
        effective = timeout or self.http.timeout
        try:
            response = self.session.get(url, timeout=effective, **kwargs)
        except requests.Timeout as exc:
            raise TimeoutExceeded(f"GET {url} timed out after {effective:.1f}s", timeout=effective) from exc
        except requests.RequestException as exc:
            raise TransientFailure(f"GET {url} failed: {exc}") from exc

        if response.status_code == 429 or response.status_code >= 500:
            raise TransientFailure(f"GET {url} returned HTTP {response.status_code}")
        if not response.ok:
            raise StrategyFailure(f"GET {url} returned HTTP {response.status_code}")
        return response.text

    def fetch_document(self, video_id: str, timeout: Optional[float] = None) -> str:
        return self._get_text(WATCH_URL, timeout, params={"v": video_id, "hl": "en"})

    def fetch_track_payload(self, track_url: str, timeout: Optional[float] = None) -> str:
        return self._get_text(track_url, timeout)
