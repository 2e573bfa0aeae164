"""
Session Broker

Server-side half of the upload: asks the Vimeo API to create a video with a
tus upload approach and hands back only what the uploader needs
(upload URL, video URI, video ID).

The access token is injected through BrokerConfig. It is sent to Vimeo and
nowhere else: not returned, not logged.

One outbound call per session, no retry at this layer. Retrying is the
transfer client's job, and only for the upload itself.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from broker.constants import (
    PRIVACY_VIEW,
    PROVIDER_UNREACHABLE_STATUS,
    UNKNOWN_PROVIDER_ERROR,
    UPLOAD_APPROACH,
    VIDEO_DESCRIPTION,
    VIMEO_ACCEPT_HEADER,
    VIMEO_CREATE_VIDEO_URL,
)
from broker.interfaces.session_provider_interface import SessionProviderInterface
from broker.models import BrokerConfig, UploadRequest, UploadSession
from core.exceptions import ConfigError, ProviderError


def extract_video_id(video_uri: str) -> str:
    """
    Video ID is the trailing path segment of the resource URI.

    Example:
        extract_video_id("/videos/123456789")  # "123456789"
    """
    return video_uri.split("/")[-1]


class SessionBroker(SessionProviderInterface):
    """
    Creates Vimeo upload sessions.

    Usage:
        broker = SessionBroker(BrokerConfig.from_env())
        session = broker.create_upload_session(
            UploadRequest("match.mp4", 10_485_760, "video/mp4")
        )
        print(session.upload_url, session.video_id)
    """

    def __init__(
        self,
        config: BrokerConfig,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize broker.

        Args:
            config: Broker configuration holding the access token
            http_client: Shared httpx client, or None to open one per call
                (tests pass a client with httpx.MockTransport)
        """
        self.logger = logging.getLogger(__name__)
        self.config = config
        self.http_client = http_client

    def create_upload_session(self, request: UploadRequest) -> UploadSession:
        """
        Create a Vimeo video and return its tus upload session.

        Raises:
            ConfigError: No access token configured (no outbound call made)
            ProviderError: Vimeo rejected the request or could not be reached
        """
        if not self.config.has_token:
            self.logger.error("Vimeo access token is not configured")
            raise ConfigError()

        self.logger.info(
            f"Creating Vimeo upload: {request.file_name} "
            f"({request.file_size} bytes, {request.file_type})",
        )

        response = self._post_create_video(request)

        if not response.is_success:
            error_msg = f"Vimeo API error: {self._extract_error(response)}"
            self.logger.error(f"❌ {error_msg} (status: {response.status_code})")
            raise ProviderError(error_msg, status_code=response.status_code)

        session = self._parse_session(response)
        self.logger.info(f"✅ Upload session created for video {session.video_id}")
        return session

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"bearer {self.config.access_token}",
            "Content-Type": "application/json",
            "Accept": VIMEO_ACCEPT_HEADER,
        }

    def _build_payload(self, request: UploadRequest) -> Dict[str, Any]:
        return {
            "upload": {
                "approach": UPLOAD_APPROACH,
                "size": request.file_size,
            },
            "privacy": {
                "view": PRIVACY_VIEW,
            },
            "name": request.file_name,
            "description": VIDEO_DESCRIPTION,
        }

    def _post_create_video(self, request: UploadRequest) -> httpx.Response:
        """
        Send the "create video" request.

        Raises:
            ProviderError: Network failure (status 502)
        """
        kwargs = {
            "headers": self._build_headers(),
            "json": self._build_payload(request),
        }

        try:
            if self.http_client is not None:
                return self.http_client.post(VIMEO_CREATE_VIDEO_URL, **kwargs)

            with httpx.Client(timeout=self.config.timeout) as client:
                return client.post(VIMEO_CREATE_VIDEO_URL, **kwargs)

        except httpx.RequestError as e:
            self.logger.error(f"❌ Could not reach Vimeo API: {type(e).__name__}")
            raise ProviderError(
                f"Could not reach Vimeo API: {e}",
                status_code=PROVIDER_UNREACHABLE_STATUS,
            ) from e

    def _extract_error(self, response: httpx.Response) -> str:
        """Pull the "error" field out of a Vimeo error body"""
        try:
            data = response.json()
        except ValueError:
            return UNKNOWN_PROVIDER_ERROR

        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return UNKNOWN_PROVIDER_ERROR

    def _parse_session(self, response: httpx.Response) -> UploadSession:
        """
        Keep only the fields the uploader needs.

        Raises:
            ProviderError: Success response without a usable upload link or URI
        """
        try:
            data = response.json()
            upload_url = data["upload"]["upload_link"]
            video_uri = data["uri"]
        except (ValueError, KeyError, TypeError) as e:
            raise self._unexpected_response() from e

        # Present but null, empty or not a string
        if not isinstance(upload_url, str) or not upload_url:
            raise self._unexpected_response()
        if not isinstance(video_uri, str) or not extract_video_id(video_uri):
            raise self._unexpected_response()

        return UploadSession(
            upload_url=upload_url,
            video_uri=video_uri,
            video_id=extract_video_id(video_uri),
        )

    def _unexpected_response(self) -> ProviderError:
        self.logger.error("❌ Vimeo returned a success response without upload link or URI")
        return ProviderError(
            "Unexpected response from Vimeo API",
            status_code=PROVIDER_UNREACHABLE_STATUS,
        )
