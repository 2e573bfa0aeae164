"""
Broker Client

Client side of the session broker: posts the picked file's metadata to
POST /api/vimeo/create-upload and turns the JSON answer into an
UploadSession.
"""

import logging
from typing import Optional

import httpx

from broker.constants import CREATE_UPLOAD_PATH
from broker.interfaces.session_provider_interface import SessionProviderInterface
from broker.models import UploadRequest, UploadSession
from config.settings import BROKER_BASE_URL, BROKER_REQUEST_TIMEOUT
from core.exceptions import SessionRequestError


class BrokerClient(SessionProviderInterface):
    """
    Requests upload sessions from a running broker.

    Usage:
        client = BrokerClient("http://127.0.0.1:8000")
        session = client.create_upload_session(request)
    """

    def __init__(
        self,
        base_url: str = BROKER_BASE_URL,
        http_client: Optional[httpx.Client] = None,
        timeout: float = BROKER_REQUEST_TIMEOUT,
    ):
        """
        Initialize broker client.

        Args:
            base_url: Broker root URL
            http_client: Shared httpx client, or None to open one per call
            timeout: Request timeout in seconds
        """
        self.logger = logging.getLogger(__name__)
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{CREATE_UPLOAD_PATH}"

    def create_upload_session(self, request: UploadRequest) -> UploadSession:
        """
        Ask the broker for an upload session.

        Raises:
            SessionRequestError: Broker unreachable, or answered with an error
        """
        payload = {
            "fileName": request.file_name,
            "fileSize": request.file_size,
            "fileType": request.file_type,
        }

        self.logger.info(f"Requesting upload session: {request.file_name}")

        try:
            if self.http_client is not None:
                response = self.http_client.post(self.endpoint, json=payload)
            else:
                with httpx.Client(timeout=self.timeout) as http_client:
                    response = http_client.post(self.endpoint, json=payload)

        except httpx.RequestError as e:
            raise SessionRequestError(f"Could not reach upload broker: {e}") from e

        if not response.is_success:
            raise SessionRequestError(
                self._extract_error(response),
                status_code=response.status_code,
            )

        try:
            data = response.json()
            session = UploadSession(
                upload_url=data["uploadUrl"],
                video_uri=data.get("videoUri", ""),
                video_id=data["videoId"],
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise SessionRequestError("Invalid response from upload broker") from e

        self.logger.debug(f"Upload session received for video {session.video_id}")
        return session

    def _extract_error(self, response: httpx.Response) -> Optional[str]:
        """Broker's "error" field, or None for the default message"""
        try:
            data = response.json()
        except ValueError:
            return None

        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return None
