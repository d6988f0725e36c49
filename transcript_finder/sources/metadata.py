# transcript_finder/sources/metadata.py
"""
Video metadata and caption listing collaborators.

Two backends:
- YtDlpVideoSource: one yt-dlp extraction serves both metadata and the caption
  index. No media is downloaded.
- DataApiVideoSource: YouTube Data API v3 (videos + captions endpoints), needs an API key.

Missing/private videos raise MetadataUnavailable; caption listing problems
raise Unsupported so the caption-index strategy can absorb them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests
import yt_dlp

from transcript_finder.acquisition.errors import MetadataUnavailable, TimeoutExceeded, Unsupported
from transcript_finder.acquisition.schema import CaptionTrack, VideoMetadata
from transcript_finder.acquisition.timing import call_with_timeout
from transcript_finder.sources.http import API_CLIENT, HttpClientConfig


YDL_PARAMS = {
    "quiet": True,
    "no_warnings": True,
    "extract_flat": False,
    "skip_download": True,
    "noplaylist": True,
}

DATA_API_URL = "https://www.googleapis.com/youtube/v3"


def _parse_timestamp(info: Dict[str, Any]) -> Optional[datetime]:
    if info.get("timestamp"):
        return datetime.fromtimestamp(info["timestamp"], tz=timezone.utc)
    if info.get("upload_date"):
        return datetime.strptime(info["upload_date"], "%Y%m%d").replace(tzinfo=timezone.utc)
    return None


class YtDlpVideoSource:
    """Metadata + caption index from a single yt-dlp info extraction."""

    def __init__(self, cookies_file: Optional[str] = None, timeout: float = 8.0) -> None:
        self.timeout = timeout
        self.params = dict(YDL_PARAMS, socket_timeout=timeout)
        if cookies_file:
            self.params["cookiefile"] = cookies_file
        self._info: Dict[str, Dict[str, Any]] = {}

    def _extract(self, video_id: str, timeout: Optional[float]) -> Dict[str, Any]:
        if video_id in self._info:
            return self._info[video_id]

        def extract() -> Dict[str, Any]:
            with yt_dlp.YoutubeDL(self.params) as ydl:
                return ydl.extract_info(f"https://www.youtube.com/watch?v={video_id}", download=False)

        info = call_with_timeout(extract, timeout or self.timeout)
        if not info:
            raise yt_dlp.DownloadError("No info returned")
        self._info[video_id] = info
        return info

    def fetch_metadata(self, video_id: str, timeout: Optional[float] = None) -> VideoMetadata:
        try:
            info = self._extract(video_id, timeout)
        except TimeoutExceeded as exc:
            raise MetadataUnavailable(f"Timed out fetching video metadata: {exc}") from exc
        except yt_dlp.DownloadError as exc:
            # Covers unavailable, private, deleted, age-restricted, geo-blocked
            message = str(exc)
            details = list(MetadataUnavailable.suggested_causes)
            if "age-restricted" in message.lower() or "sign in" in message.lower():
                details.append("Provide a cookies.txt file with a logged-in session")
            raise MetadataUnavailable(f"Video not found or not public: {message}", details=details) from exc

        return VideoMetadata(
            video_id=video_id,
            title=info.get("title") or "",
            channel=info.get("channel") or info.get("uploader") or "",
            published_at=_parse_timestamp(info),
            thumbnail_url=info.get("thumbnail"),
            default_language=info.get("language"),
            description=info.get("description") or "",
        )

    def list_caption_tracks(self, video_id: str, timeout: Optional[float] = None) -> List[CaptionTrack]:
        try:
            info = self._extract(video_id, timeout)
        except yt_dlp.DownloadError as exc:
            raise Unsupported(f"Caption listing unavailable: {exc}") from exc

        tracks = [
            CaptionTrack(language=lang, kind="standard", name=(formats[0].get("name") if formats else None))
            for lang, formats in (info.get("subtitles") or {}).items()
            if lang != "live_chat"
        ]

        automatic = info.get("automatic_captions") or {}
        # yt-dlp lists every machine translation too; "-orig" marks the spoken track.
        originals = [lang for lang in automatic if lang.endswith("-orig")]
        for lang in originals or list(automatic):
            tracks.append(CaptionTrack(language=lang.removesuffix("-orig"), kind="asr"))

        return tracks


class DataApiVideoSource:
    """YouTube Data API v3 backed metadata and caption listing."""

    def __init__(self, api_key: str, http: HttpClientConfig = API_CLIENT) -> None:
        if not api_key:
            raise ValueError("YouTube Data API key is not configured")
        self.api_key = api_key
        self.http = http
        self.session = http.build_session()

    def _get(self, endpoint: str, params: Dict[str, str], timeout: Optional[float]) -> requests.Response:
        return self.session.get(
            f"{DATA_API_URL}/{endpoint}",
            params=dict(params, key=self.api_key),
            timeout=timeout or self.http.timeout,
        )

    def fetch_metadata(self, video_id: str, timeout: Optional[float] = None) -> VideoMetadata:
        try:
            response = self._get("videos", {"id": video_id, "part": "snippet"}, timeout)
        except requests.Timeout as exc:
            raise MetadataUnavailable("Timed out querying the YouTube API") from exc
        except requests.RequestException as exc:
            raise MetadataUnavailable(f"Could not reach the YouTube API: {exc}") from exc

        if not response.ok:
            raise MetadataUnavailable(f"YouTube API error: {response.status_code}")

        items = response.json().get("items") or []
        if not items:
            raise MetadataUnavailable("Video not found or not public")

        snippet = items[0].get("snippet", {})
        thumbnails = snippet.get("thumbnails") or {}
        thumbnail = (thumbnails.get("medium") or thumbnails.get("default") or {}).get("url")
        published = snippet.get("publishedAt")

        return VideoMetadata(
            video_id=video_id,
            title=snippet.get("title") or "",
            channel=snippet.get("channelTitle") or "",
            published_at=datetime.fromisoformat(published.replace("Z", "+00:00")) if published else None,
            thumbnail_url=thumbnail or f"https://img.youtube.com/vi/{video_id}/mqdefault.jpg",
            default_language=snippet.get("defaultLanguage"),
            default_audio_language=snippet.get("defaultAudioLanguage"),
            description=snippet.get("description") or "",
        )

    def list_caption_tracks(self, video_id: str, timeout: Optional[float] = None) -> List[CaptionTrack]:
        try:
            response = self._get("captions", {"videoId": video_id, "part": "snippet"}, timeout)
        except requests.Timeout as exc:
            raise TimeoutExceeded("Timed out listing caption tracks", timeout=timeout) from exc
        except requests.RequestException as exc:
            raise Unsupported(f"Caption listing unavailable: {exc}") from exc

        if not response.ok:
            raise Unsupported(f"Caption listing unavailable: HTTP {response.status_code}")

        return [
            CaptionTrack(
                language=item["snippet"]["language"],
                kind=(item["snippet"].get("trackKind") or "standard").lower(),
                name=item["snippet"].get("name") or None,
            )
            for item in response.json().get("items") or []
            if item.get("snippet", {}).get("language")
        ]
