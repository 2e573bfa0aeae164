"""
Broker Module

Server-side session broker: turns file metadata into a Vimeo tus upload
session without exposing the access token.

Public API:
    - SessionBroker: Creates upload sessions against the Vimeo API
    - BrokerConfig: Explicit configuration (access token, timeout)
    - UploadRequest / UploadSession: Exchanged data

The FastAPI application lives in broker.api (create_app).

Usage:
    from broker import BrokerConfig, SessionBroker, UploadRequest

    broker = SessionBroker(BrokerConfig.from_env())
    session = broker.create_upload_session(
        UploadRequest("match.mp4", 10_485_760, "video/mp4")
    )
"""

from broker.interfaces.session_provider_interface import SessionProviderInterface
from broker.models import BrokerConfig, UploadRequest, UploadSession
from broker.session_broker import SessionBroker, extract_video_id

# Public API
__all__ = [
    "BrokerConfig",
    "SessionBroker",
    "SessionProviderInterface",
    "UploadRequest",
    "UploadSession",
    "extract_video_id",
]
