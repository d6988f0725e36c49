# transcript_finder/sources/http.py
"""
Explicit per-collaborator HTTP client configuration.

Each strategy or collaborator builds its own requests.Session from an
HttpClientConfig; nothing touches a process-wide client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

import requests


BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
API_USER_AGENT = "transcript-finder/0.1"


@dataclass(frozen=True)
class HttpClientConfig:
    user_agent: str = BROWSER_USER_AGENT
    accept_language: Optional[str] = "es,en;q=0.8"
    timeout: float = 8.0
    headers: Dict[str, str] = field(default_factory=dict)
    cookies: Dict[str, str] = field(default_factory=dict)

    def build_session(self) -> requests.Session:
        session = requests.Session()
        session.headers["User-Agent"] = self.user_agent
        if self.accept_language:
            session.headers["Accept-Language"] = self.accept_language
        session.headers.update(self.headers)
        for name, value in self.cookies.items():
            session.cookies.set(name, value)
        return session


# Consent cookie keeps the watch page from redirecting to the EU consent wall.
WATCH_PAGE_CLIENT = HttpClientConfig(cookies={"CONSENT": "YES+cb"})
API_CLIENT = HttpClientConfig(user_agent=API_USER_AGENT, accept_language=None)
