"""
Core utilities and modules.

Public API:
    - TransferState / TransferStatus: Upload state snapshot
    - UploaderError and subclasses: Error taxonomy
    - setup_logging: Console + rotating file logging

Usage:
    from core.state_machine import TransferState, progress_reported

    state = progress_reported(state, 5_242_880, 10_485_760)
"""

from core.exceptions import (
    CancellationError,
    ConfigError,
    NoFileSelected,
    ProviderError,
    SessionRequestError,
    TransferError,
    UploaderError,
    ValidationError,
)
from core.logging_config import setup_logging
from core.state_machine import TransferState, TransferStatus

__all__ = [
    "CancellationError",
    "ConfigError",
    "NoFileSelected",
    "ProviderError",
    "SessionRequestError",
    "TransferError",
    "TransferState",
    "TransferStatus",
    "UploaderError",
    "ValidationError",
    "setup_logging",
]
