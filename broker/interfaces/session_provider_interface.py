"""
Session Provider Interface

Anything that can turn an UploadRequest into an UploadSession.
The orchestrator depends on this abstraction, not on whether the broker
runs in-process or behind HTTP.
"""

from abc import ABC, abstractmethod

from broker.models import UploadRequest, UploadSession


class SessionProviderInterface(ABC):
    """
    Abstract base class for upload session providers.

    Implementations:
    - SessionBroker: calls the Vimeo API directly (server side)
    - BrokerClient: calls the broker's HTTP endpoint (client side)
    """

    @abstractmethod
    def create_upload_session(self, request: UploadRequest) -> UploadSession:
        """
        Create a resumable upload session for one file.

        Args:
            request: File metadata (name, size, MIME type)

        Returns:
            UploadSession with the tus upload URL and the video ID

        Raises:
            UploaderError: Subclass describing why no session was created
        """
