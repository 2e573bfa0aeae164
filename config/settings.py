"""
Central Configuration File

Deployment configuration lives here. Protocol constants (Vimeo endpoints,
headers, retry schedule) live in broker/constants.py and upload/constants.py.

Guidelines:
- Secrets (the Vimeo access token) should be in .env, NOT here
- Import these settings in modules: from config.settings import BROKER_PORT
- Every value can be overridden from the environment
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# PROVIDER CREDENTIALS
# =============================================================================

# Name of the environment variable holding the Vimeo access token.
# The token itself is read at request time, never stored in this module.
VIMEO_ACCESS_TOKEN_ENV = "VIMEO_ACCESS_TOKEN"

# Timeout for the "create video" call to the Vimeo API (seconds)
PROVIDER_HTTP_TIMEOUT = float(os.getenv("PROVIDER_HTTP_TIMEOUT", "30"))

# =============================================================================
# SESSION BROKER
# =============================================================================

BROKER_HOST = os.getenv("BROKER_HOST", "127.0.0.1")
BROKER_PORT = int(os.getenv("BROKER_PORT", "8000"))

# Where the uploader front-end finds the broker
BROKER_BASE_URL = os.getenv("BROKER_BASE_URL", f"http://{BROKER_HOST}:{BROKER_PORT}")

# Timeout for the orchestrator's session request to the broker (seconds)
BROKER_REQUEST_TIMEOUT = float(os.getenv("BROKER_REQUEST_TIMEOUT", "30"))

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_FILE = os.getenv("LOG_FILE", "uploader.log")
LOG_BACKUP_COUNT = 7  # days of rotated logs to keep
