"""
Session Broker HTTP API

FastAPI application exposing the broker to the uploader front-end.

Endpoints:
    POST /api/vimeo/create-upload  {fileName, fileSize, fileType}
        200 → {uploadUrl, videoUri, videoId}
        4xx/5xx → {error}
    GET /health

Status mapping:
    ConfigError      → 500
    ProviderError    → Vimeo's own status (502 if unreachable)
    invalid body     → 400
    anything else    → 500 "Server error: ..."
"""

import logging
from typing import Callable, Optional

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from broker.constants import CREATE_UPLOAD_PATH
from broker.interfaces.session_provider_interface import SessionProviderInterface
from broker.models import BrokerConfig, UploadRequest
from broker.session_broker import SessionBroker
from core.exceptions import UploaderError

logger = logging.getLogger(__name__)

# Type aliases
ConfigLoader = Callable[[], BrokerConfig]
BrokerFactory = Callable[[], SessionProviderInterface]


class CreateUploadBody(BaseModel):
    """Request body sent by the uploader"""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName", min_length=1)
    file_size: int = Field(alias="fileSize", ge=0)
    file_type: str = Field(default="", alias="fileType")


class CreateUploadResponse(BaseModel):
    """Only the fields the uploader needs, never the full Vimeo response"""

    model_config = ConfigDict(populate_by_name=True)

    upload_url: str = Field(alias="uploadUrl")
    video_uri: str = Field(alias="videoUri")
    video_id: str = Field(alias="videoId")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    config_loader: ConfigLoader = BrokerConfig.from_env,
    broker_factory: Optional[BrokerFactory] = None,
    http_client: Optional[httpx.Client] = None,
) -> FastAPI:
    """
    Build the broker application.

    Args:
        config_loader: Called per request, so the access token is read from
            the environment at request time
        broker_factory: Override how the session provider is built
            (default: SessionBroker from config_loader)
        http_client: httpx client handed to the default SessionBroker

    Example:
        # Production
        app = create_app()

        # Testing
        app = create_app(
            config_loader=lambda: BrokerConfig(access_token="test-token"),
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
    """
    app = FastAPI(
        title="Vimeo Upload Session Broker",
        description="Creates Vimeo tus upload sessions for the uploader",
        version="1.0.0",
    )

    def get_broker() -> SessionProviderInterface:
        if broker_factory is not None:
            return broker_factory()
        return SessionBroker(config_loader(), http_client=http_client)

    @app.exception_handler(RequestValidationError)
    async def handle_invalid_body(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
            for error in exc.errors()
        )
        logger.warning(f"Rejected create-upload request: {details}")
        return _error_response(400, f"Invalid request: {details}")

    @app.post(CREATE_UPLOAD_PATH, response_model=CreateUploadResponse)
    def create_upload(
        body: CreateUploadBody,
        broker: SessionProviderInterface = Depends(get_broker),
    ):
        """Create a Vimeo video and return its tus upload URL"""
        upload_request = UploadRequest(
            file_name=body.file_name,
            file_size=body.file_size,
            file_type=body.file_type,
        )

        try:
            session = broker.create_upload_session(upload_request)

        except UploaderError as e:
            # ConfigError (500) or ProviderError (Vimeo status passthrough)
            return _error_response(e.status_code or 500, e.message)

        except Exception as e:
            logger.error(f"Server error: {e}", exc_info=True)
            return _error_response(500, f"Server error: {str(e) or 'Unknown error'}")

        return CreateUploadResponse(
            upload_url=session.upload_url,
            video_uri=session.video_uri,
            video_id=session.video_id,
        )

    @app.get("/health")
    def health():
        """Liveness plus whether a token is configured (never the token)"""
        return {
            "status": "ok",
            "token_configured": config_loader().has_token,
        }

    return app


app = create_app()
