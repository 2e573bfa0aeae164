"""
Upload Constants

Centralized configuration for the resumable transfer and the uploader UI.
Following the same pattern as broker/constants.py for consistency.
"""

from broker.constants import VIMEO_ACCEPT_HEADER

# =============================================================================
# TUS TRANSFER CONFIGURATION
# =============================================================================

# Delays (seconds) before each retry of a failed chunk: immediately, then
# 3s, 5s, 10s, 20s. Once exhausted the transfer fails.
RETRY_DELAYS = (0, 3, 5, 10, 20)

# Chunk size for PATCH requests (in bytes)
# 5 MB keeps memory low and gives regular progress updates
TUS_CHUNK_SIZE = 5 * 1024 * 1024  # 5 MB

# Headers sent on every tus request (HEAD and PATCH)
TUS_HEADERS = {
    "Accept": VIMEO_ACCEPT_HEADER,
}

# HTTP statuses worth retrying besides 5xx: conflicting offset and locked upload
RETRYABLE_CLIENT_STATUSES = (409, 423)

# How long abort() waits for the worker thread to notice (seconds)
ABORT_JOIN_TIMEOUT = 5.0

# =============================================================================
# FILE PICKER
# =============================================================================

# Picker accepts any video MIME type
ACCEPTED_MIME_PREFIX = "video/"

# Used when the MIME type cannot be guessed from the file name
DEFAULT_MIME_TYPE = "application/octet-stream"

# =============================================================================
# USER-FACING MESSAGES
# =============================================================================

SESSION_ERROR_PREFIX = "Error"
TRANSFER_ERROR_PREFIX = "Upload error"
UNKNOWN_ERROR = "Unknown error"
CANCELLED_MESSAGE = "Upload cancelled"

# Hosted video page, keyed by video ID
VIMEO_VIDEO_PAGE_URL = "https://vimeo.com/{video_id}"
