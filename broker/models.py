"""
Broker Data Models

Plain dataclasses exchanged between the orchestrator and the broker.
The camelCase JSON forms are produced by the HTTP layer (broker/api.py).
"""

import os
from dataclasses import dataclass
from typing import Optional

from config.settings import PROVIDER_HTTP_TIMEOUT, VIMEO_ACCESS_TOKEN_ENV


@dataclass(frozen=True)
class UploadRequest:
    """
    Metadata of the file the user picked. Sent once to the broker.

    Attributes:
        file_name: Original file name (becomes the video title)
        file_size: Size in bytes
        file_type: MIME type, e.g. "video/mp4"
    """

    file_name: str
    file_size: int
    file_type: str


@dataclass(frozen=True)
class UploadSession:
    """
    Server-issued pair authorizing one resumable transfer.

    Attributes:
        upload_url: tus endpoint for this video
        video_uri: Vimeo resource URI, e.g. "/videos/123456789"
        video_id: Trailing segment of video_uri
    """

    upload_url: str
    video_uri: str
    video_id: str


@dataclass(frozen=True)
class BrokerConfig:
    """
    Explicit broker configuration.

    The access token is injected here instead of being read from the
    environment inside the broker, so tests can substitute it.
    """

    access_token: Optional[str] = None
    timeout: float = PROVIDER_HTTP_TIMEOUT

    @classmethod
    def from_env(cls) -> "BrokerConfig":
        """Read the access token from the process environment (at call time)"""
        return cls(access_token=os.getenv(VIMEO_ACCESS_TOKEN_ENV) or None)

    @property
    def has_token(self) -> bool:
        return bool(self.access_token)

    def __repr__(self) -> str:
        # Never print the token
        token_state = "set" if self.has_token else "missing"
        return f"BrokerConfig(access_token=<{token_state}>, timeout={self.timeout})"
