"""
Unit tests for YouTubeService.
"""
import pytest
import requests
from unittest.mock import Mock, patch

from learning_app.services.youtube_service import (
    YouTubeService,
    YouTubeServiceError,
    DEFAULT_TITLE,
    format_transcript,
    estimate_duration,
)


def _response(status_code=200, json_data=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = json_data if json_data is not None else {}
    if response.ok:
        response.raise_for_status.return_value = None
    else:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} error")
    return response


class TestYouTubeServiceURLValidation:
    """Test YouTube URL validation and video ID extraction."""

    def setup_method(self):
        """Setup test fixtures."""
        self.service = YouTubeService(transcript_api_key="test-key")

    def test_extract_video_id_from_watch_url(self):
        """Should extract video ID from standard watch URL."""
        assert self.service.extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_extract_video_id_from_short_url(self):
        """Should extract video ID from short youtu.be URL."""
        assert self.service.extract_video_id("https://youtu.be/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_extract_video_id_with_timestamp(self):
        assert self.service.extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42s") == "dQw4w9WgXcQ"

    def test_extract_video_id_with_v_not_first(self):
        """Should find v= when other query parameters come first."""
        url = "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ"
        assert self.service.extract_video_id(url) == "dQw4w9WgXcQ"

    def test_extract_video_id_from_embed_url(self):
        assert self.service.extract_video_id("https://www.youtube.com/embed/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_extract_video_id_from_shorts_url(self):
        assert self.service.extract_video_id("https://www.youtube.com/shorts/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_extract_bare_video_id(self):
        """Should accept an 11-character video ID on its own."""
        assert self.service.extract_video_id("  dQw4w9WgXcQ ") == "dQw4w9WgXcQ"

    def test_invalid_url_raises_error(self):
        with pytest.raises(YouTubeServiceError, match="Invalid YouTube URL"):
            self.service.extract_video_id("https://vimeo.com/123456")

    def test_empty_url_raises_error(self):
        with pytest.raises(YouTubeServiceError, match="Invalid YouTube URL"):
            self.service.extract_video_id("")

    def test_malformed_url_raises_error(self):
        with pytest.raises(YouTubeServiceError, match="Invalid YouTube URL"):
            self.service.extract_video_id("not a url at all")

    def test_invalid_url_error_message(self):
        """The message is exactly "Invalid YouTube URL" for every bad input."""
        with pytest.raises(YouTubeServiceError) as exc_info:
            self.service.extract_video_id("https://vimeo.com/123456")
        assert str(exc_info.value) == "Invalid YouTube URL"


class TestYouTubeServiceMetadata:
    """Test oEmbed metadata fetching."""

    def setup_method(self):
        self.service = YouTubeService(transcript_api_key="test-key")

    @patch('learning_app.services.youtube_service.requests.get')
    def test_get_metadata_success(self, mock_get):
        """Should return title and thumbnail from oEmbed."""
        mock_get.return_value = _response(json_data={
            "title": "Intro to Graphs",
            "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
        })

        metadata = self.service.get_video_metadata("dQw4w9WgXcQ")

        assert metadata == {
            "video_id": "dQw4w9WgXcQ",
            "title": "Intro to Graphs",
            "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
        }
        params = mock_get.call_args[1]["params"]
        assert params["url"] == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        assert params["format"] == "json"

    @patch('learning_app.services.youtube_service.requests.get')
    def test_get_metadata_http_error_falls_back(self, mock_get):
        """Should not raise when oEmbed fails."""
        mock_get.return_value = _response(status_code=401)

        metadata = self.service.get_video_metadata("dQw4w9WgXcQ")

        assert metadata["title"] == DEFAULT_TITLE
        assert metadata["thumbnail_url"] is None

    @patch('learning_app.services.youtube_service.requests.get')
    def test_get_metadata_network_error_falls_back(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("offline")

        metadata = self.service.get_video_metadata("dQw4w9WgXcQ")

        assert metadata["title"] == DEFAULT_TITLE


class TestYouTubeServiceTranscript:
    """Test transcript fetching."""

    @patch('learning_app.services.youtube_service.requests.get')
    def test_transcriptapi_success(self, mock_get):
        """Should fetch segments with a bearer token."""
        mock_get.return_value = _response(json_data={
            "transcript": [
                {"text": "Hello and welcome", "start": 0, "duration": 2.5},
                {"text": "  ", "start": 2.5, "duration": 1.0},
                {"text": "Today we cover graphs", "start": 3.5, "duration": 4.0},
            ]
        })
        service = YouTubeService(transcript_api_key="tapi-key")

        segments = service.get_transcript("dQw4w9WgXcQ")

        assert segments == [
            {"text": "Hello and welcome", "start": 0.0, "duration": 2.5},
            {"text": "Today we cover graphs", "start": 3.5, "duration": 4.0},
        ]
        headers = mock_get.call_args[1]["headers"]
        assert headers["Authorization"] == "Bearer tapi-key"

    @patch('learning_app.services.youtube_service.requests.get')
    def test_transcriptapi_not_found(self, mock_get):
        mock_get.return_value = _response(status_code=404)
        service = YouTubeService(transcript_api_key="tapi-key")

        with pytest.raises(YouTubeServiceError, match="no transcript available"):
            service.get_transcript("dQw4w9WgXcQ")

    @patch('learning_app.services.youtube_service.requests.get')
    def test_transcriptapi_rate_limited(self, mock_get):
        mock_get.return_value = _response(status_code=429)
        service = YouTubeService(transcript_api_key="tapi-key")

        with pytest.raises(YouTubeServiceError, match="Too many requests"):
            service.get_transcript("dQw4w9WgXcQ")

    @patch('learning_app.services.youtube_service.requests.get')
    def test_transcriptapi_server_error(self, mock_get):
        mock_get.return_value = _response(status_code=500)
        service = YouTubeService(transcript_api_key="tapi-key")

        with pytest.raises(YouTubeServiceError, match="Failed to fetch transcript"):
            service.get_transcript("dQw4w9WgXcQ")

    @patch('learning_app.services.youtube_service.requests.get')
    def test_empty_transcript_raises(self, mock_get):
        mock_get.return_value = _response(json_data={"transcript": []})
        service = YouTubeService(transcript_api_key="tapi-key")

        with pytest.raises(YouTubeServiceError, match="no transcript available"):
            service.get_transcript("dQw4w9WgXcQ")

    @patch('learning_app.services.youtube_service.requests.get')
    def test_supadata_converts_milliseconds(self, mock_get):
        """Should use Supadata when only its key is set."""
        mock_get.return_value = _response(json_data={
            "content": [
                {"text": "First line", "offset": 1500, "duration": 2000},
                {"text": "Second line", "offset": 3500, "duration": 1000},
            ]
        })
        service = YouTubeService(supadata_api_key="supa-key")
        service.transcript_api_key = None

        segments = service.get_transcript("dQw4w9WgXcQ")

        assert segments[0] == {"text": "First line", "start": 1.5, "duration": 2.0}
        assert segments[1]["start"] == 3.5
        assert mock_get.call_args[1]["headers"]["x-api-key"] == "supa-key"

    @patch('learning_app.services.youtube_service.requests.get')
    def test_supadata_non_json_reply(self, mock_get):
        """A 200 reply that is not JSON is a fetch failure, not a crash."""
        response = _response()
        response.json.side_effect = ValueError("not json")
        mock_get.return_value = response
        service = YouTubeService(supadata_api_key="supa-key")
        service.transcript_api_key = None

        with pytest.raises(YouTubeServiceError, match="Failed to fetch transcript"):
            service.get_transcript("dQw4w9WgXcQ")

    @patch('learning_app.services.youtube_service.requests.get')
    def test_supadata_null_offsets(self, mock_get):
        mock_get.return_value = _response(json_data={
            "content": [{"text": "No timing", "offset": None, "duration": None}]
        })
        service = YouTubeService(supadata_api_key="supa-key")
        service.transcript_api_key = None

        assert service.get_transcript("dQw4w9WgXcQ") == [{"text": "No timing", "start": 0.0, "duration": 0.0}]

    @patch('learning_app.services.youtube_service.requests.get')
    def test_transcriptapi_null_timestamps(self, mock_get):
        """Segments with null start or duration default to zero."""
        mock_get.return_value = _response(json_data={
            "transcript": [{"text": "Hello", "start": None, "duration": None}]
        })
        service = YouTubeService(transcript_api_key="tapi-key")

        assert service.get_transcript("dQw4w9WgXcQ") == [{"text": "Hello", "start": 0.0, "duration": 0.0}]

    def test_no_provider_configured(self):
        service = YouTubeService()
        service.transcript_api_key = None
        service.supadata_api_key = None

        with pytest.raises(YouTubeServiceError, match="No transcript provider configured"):
            service.get_transcript("dQw4w9WgXcQ")


class TestTranscriptFormatting:

    def test_format_transcript(self):
        segments = [
            {"text": "Hello", "start": 0.0, "duration": 2.0},
            {"text": "Later on", "start": 75.4, "duration": 3.0},
            {"text": "Past the hour", "start": 3905.0, "duration": 3.0},
        ]

        assert format_transcript(segments) == "[0:00] Hello\n[1:15] Later on\n[65:05] Past the hour"

    def test_estimate_duration_rounds_up(self):
        segments = [
            {"text": "a", "start": 0.0, "duration": 2.0},
            {"text": "b", "start": 118.2, "duration": 1.5},
        ]

        assert estimate_duration(segments) == 120

    def test_estimate_duration_empty(self):
        assert estimate_duration([]) == 0
