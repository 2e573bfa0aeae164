"""
Broker Constants

Vimeo API details used when creating an upload session.
Following the same pattern as upload/constants.py for consistency.
"""

# =============================================================================
# VIMEO API CONFIGURATION
# =============================================================================

# "Create video" endpoint for the authenticated user
# https://developer.vimeo.com/api/reference/videos#upload_video
VIMEO_CREATE_VIDEO_URL = "https://api.vimeo.com/me/videos"

# Pin the API version; also sent on every tus request
VIMEO_ACCEPT_HEADER = "application/vnd.vimeo.*+json;version=3.4"

# =============================================================================
# VIDEO METADATA CONFIGURATION
# =============================================================================

# Resumable upload approach requested from Vimeo
UPLOAD_APPROACH = "tus"

# Anyone can watch the uploaded video
PRIVACY_VIEW = "anybody"

VIDEO_DESCRIPTION = "Video uploaded with the resumable web uploader"

# =============================================================================
# HTTP ENDPOINT
# =============================================================================

CREATE_UPLOAD_PATH = "/api/vimeo/create-upload"

# Fallback when the provider error body has no "error" field
UNKNOWN_PROVIDER_ERROR = "Unknown error"

# Gateway status for provider failures that carry no status of their own
PROVIDER_UNREACHABLE_STATUS = 502
