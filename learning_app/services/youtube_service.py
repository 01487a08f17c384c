"""
YouTube service for fetching video metadata and transcripts.

Uses TranscriptAPI.com for transcripts (Supadata.ai as an alternative provider)
and the oEmbed endpoint for metadata.
"""
import logging
import math
import re
from typing import Dict, Any, List, Optional

import requests

from learning_app.core.config import settings

logger = logging.getLogger(__name__)

TRANSCRIPT_API_URL = "https://transcriptapi.com/api/v2/youtube/transcript"
SUPADATA_BASE_URL = "https://api.supadata.ai/v1/youtube/transcript"
OEMBED_URL = "https://www.youtube.com/oembed"

DEFAULT_TITLE = "Untitled Video"


class YouTubeServiceError(Exception):
    """Custom exception for YouTube service errors."""
    pass


def format_transcript(segments: List[Dict[str, Any]]) -> str:
    """
    Format transcript segments as "[m:ss] text" lines.

    Minutes are not wrapped into hours, so a segment at 1h05m reads [65:00].
    """
    lines = []
    for segment in segments:
        start = segment.get("start", 0)
        minutes = int(start // 60)
        seconds = int(start % 60)
        lines.append(f"[{minutes}:{seconds:02d}] {segment.get('text', '')}")
    return "\n".join(lines)


def estimate_duration(segments: List[Dict[str, Any]]) -> int:
    """Estimate duration as the end of the last segment, rounded up."""
    if not segments:
        return 0
    last = segments[-1]
    return math.ceil(last.get("start", 0) + last.get("duration", 0))


class YouTubeService:
    """Service for interacting with YouTube videos."""

    def __init__(
        self,
        transcript_api_key: Optional[str] = None,
        supadata_api_key: Optional[str] = None
    ):
        self.transcript_api_key = transcript_api_key or settings.TRANSCRIPT_API_KEY
        self.supadata_api_key = supadata_api_key or settings.SUPADATA_API_KEY

    def extract_video_id(self, url: str) -> str:
        """
        Extract YouTube video ID from various URL formats or a bare video ID.
        """
        if not url or not isinstance(url, str):
            raise YouTubeServiceError("Invalid YouTube URL")

        url = url.strip()
        patterns = [
            r'(?:youtube\.com\/watch\?v=|youtu\.be\/|youtube\.com\/embed\/|youtube\.com\/v\/|youtube\.com\/shorts\/)([a-zA-Z0-9_-]{11})',
            r'youtube\.com\/watch\?.*v=([a-zA-Z0-9_-]{11})',
            r'^([a-zA-Z0-9_-]{11})$'
        ]

        for pattern in patterns:
            match = re.search(pattern, url)
            if match:
                return match.group(1)

        raise YouTubeServiceError("Invalid YouTube URL")

    def get_video_metadata(self, video_id: str) -> Dict[str, Any]:
        """
        Fetch title and thumbnail via oEmbed.

        Never raises: on any failure returns a placeholder title and no thumbnail.
        """
        params = {
            "url": f"https://www.youtube.com/watch?v={video_id}",
            "format": "json"
        }

        try:
            response = requests.get(OEMBED_URL, params=params, timeout=10)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("oEmbed failed for %s: %s", video_id, e)
            return {"video_id": video_id, "title": DEFAULT_TITLE, "thumbnail_url": None}

        return {
            "video_id": video_id,
            "title": data.get("title") or DEFAULT_TITLE,
            "thumbnail_url": data.get("thumbnail_url") or None
        }

    def _get_transcript_transcriptapi(self, video_id: str) -> List[Dict[str, Any]]:
        """Fetch timestamped transcript segments from TranscriptAPI.com."""
        logger.info("Fetching transcript via TranscriptAPI for %s", video_id)

        params = {
            "video_url": video_id,
            "include_timestamp": "true"
        }
        headers = {
            "Authorization": f"Bearer {self.transcript_api_key}"
        }

        try:
            response = requests.get(TRANSCRIPT_API_URL, params=params, headers=headers, timeout=30)
        except requests.exceptions.RequestException as e:
            raise YouTubeServiceError(f"Failed to fetch transcript: {str(e)}")

        if response.status_code == 404:
            raise YouTubeServiceError("Video not found or no transcript available")
        if response.status_code == 429:
            raise YouTubeServiceError("Too many requests, please try again")
        if not response.ok:
            raise YouTubeServiceError("Failed to fetch transcript")

        try:
            data = response.json()
        except ValueError:
            raise YouTubeServiceError("Failed to fetch transcript")

        if not isinstance(data, dict):
            raise YouTubeServiceError("Failed to fetch transcript")

        segments = []
        for item in data.get("transcript") or []:
            text = (item.get("text") or "").strip()
            if text:
                segments.append({
                    "text": text,
                    "start": float(item.get("start") or 0),
                    "duration": float(item.get("duration") or 0)
                })
        return segments

    def _get_transcript_supadata(self, video_id: str, language: str = "en") -> List[Dict[str, Any]]:
        """Fetch transcript segments from Supadata.ai (offsets in milliseconds)."""
        logger.info("Fetching transcript via Supadata.ai for %s", video_id)

        params = {
            "videoId": video_id,
            "lang": language,
            "text": "false"  # Get segments with timestamps
        }
        headers = {
            "x-api-key": self.supadata_api_key
        }

        try:
            response = requests.get(SUPADATA_BASE_URL, params=params, headers=headers, timeout=30)
        except requests.exceptions.RequestException as e:
            raise YouTubeServiceError(f"Failed to fetch transcript: {str(e)}")

        if response.status_code == 404:
            raise YouTubeServiceError("Video not found or no transcript available")
        if response.status_code == 429:
            raise YouTubeServiceError("Too many requests, please try again")
        if not response.ok:
            raise YouTubeServiceError("Failed to fetch transcript")

        try:
            data = response.json()
        except ValueError:
            raise YouTubeServiceError("Failed to fetch transcript")

        if not isinstance(data, dict) or "error" in data:
            raise YouTubeServiceError("Video not found or no transcript available")

        segments = []
        for item in data.get("content") or []:
            text = (item.get("text") or "").strip()
            if text:
                segments.append({
                    "text": text,
                    "start": (item.get("offset") or 0) / 1000.0,
                    "duration": (item.get("duration") or 0) / 1000.0
                })
        return segments

    def get_transcript(self, video_id: str) -> List[Dict[str, Any]]:
        """
        Fetch transcript segments, preferring TranscriptAPI.

        Raises:
            YouTubeServiceError: If no provider is configured or the transcript is unavailable
        """
        if self.transcript_api_key:
            segments = self._get_transcript_transcriptapi(video_id)
        elif self.supadata_api_key:
            segments = self._get_transcript_supadata(video_id)
        else:
            raise YouTubeServiceError("No transcript provider configured")

        if not segments:
            raise YouTubeServiceError("Video not found or no transcript available")

        logger.info("Fetched %d transcript segments for %s", len(segments), video_id)
        return segments
