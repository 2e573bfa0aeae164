"""
Uploader Exceptions

Error taxonomy shared by the session broker and the upload orchestrator.

Every error carries a human-readable message. Errors that come from an HTTP
exchange also carry the status code so the broker endpoint can pass it
through unchanged.

Usage:
    from core.exceptions import ProviderError

    raise ProviderError("Vimeo API error: Unauthorized", status_code=401)
"""

from typing import Optional


class UploaderError(Exception):
    """
    Base exception for upload-related errors.

    Attributes:
        message: Human-readable error description
        status_code: HTTP status associated with the error (if any)
    """

    default_message = "Unknown error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)


class ConfigError(UploaderError):
    """Provider credential is missing. Fatal for the request (HTTP 500)."""

    default_message = "Vimeo access token is not configured"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, status_code=500)


class ProviderError(UploaderError):
    """
    Vimeo API rejected the request or could not be reached.

    status_code is the provider's own status, passed through to the caller.
    """


class SessionRequestError(UploaderError):
    """The broker could not hand out an upload session."""

    default_message = "Failed to get upload URL"


class ValidationError(UploaderError):
    """Local validation failure that blocks a UI action."""


class NoFileSelected(ValidationError):
    """Upload requested before a file was picked."""

    default_message = "Please select a file"


class TransferError(UploaderError):
    """
    Chunk transfer failed after the retry schedule was exhausted,
    or failed with a non-retryable status.
    """


class CancellationError(UploaderError):
    """
    User-initiated abort.

    Not a failure: ends the transfer and is reported as an informational
    state rather than an error banner.
    """

    default_message = "Upload cancelled"
