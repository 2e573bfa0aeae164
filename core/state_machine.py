"""
Transfer State Machine

Explicit state for one upload, plus the pure transition functions that
advance it in response to UI actions and transfer-client callbacks.

State Flow:
    IDLE → UPLOADING → SUCCESS
              ↓  ↑
      ERROR / CANCELLED  (back to UPLOADING only via a fresh start)

Selecting a new file resets to a fresh IDLE state from anywhere.

Every function takes the current state and returns a new one. Events that
are not valid in the current state return the state unchanged, which is how
late callbacks (for example a success after a cancel) are discarded.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class TransferStatus(Enum):
    """Lifecycle of a single upload"""

    IDLE = "idle"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class TransferState:
    """
    Snapshot of the upload as the UI sees it.

    Attributes:
        bytes_uploaded: Bytes acknowledged by the upload server
        bytes_total: Size of the file being uploaded
        percentage: Progress in percent, rounded to 2 decimals
        status: Current lifecycle status
        error_message: Error (or cancellation) text for the banner
        video_id: Vimeo video ID of the current session
    """

    bytes_uploaded: int = 0
    bytes_total: int = 0
    percentage: float = 0.0
    status: TransferStatus = TransferStatus.IDLE
    error_message: Optional[str] = None
    video_id: Optional[str] = None

    @property
    def is_uploading(self) -> bool:
        return self.status == TransferStatus.UPLOADING


def compute_percentage(bytes_uploaded: int, bytes_total: int) -> float:
    """
    Percentage of bytes_total uploaded, rounded to 2 decimal places.

    Example:
        compute_percentage(5_242_880, 10_485_760)  # 50.0
    """
    if bytes_total <= 0:
        return 0.0
    return round(bytes_uploaded / bytes_total * 100, 2)


def file_selected(state: TransferState) -> TransferState:
    """New file picked: discard everything about the previous upload"""
    return TransferState()


def upload_started(state: TransferState, bytes_total: int = 0) -> TransferState:
    return TransferState(
        bytes_total=bytes_total,
        status=TransferStatus.UPLOADING,
    )


def session_created(state: TransferState, video_id: str) -> TransferState:
    if not state.is_uploading:
        return state
    return replace(state, video_id=video_id)


def session_failed(state: TransferState, message: str) -> TransferState:
    if not state.is_uploading:
        return state
    return replace(state, status=TransferStatus.ERROR, error_message=message)


def progress_reported(
    state: TransferState,
    bytes_uploaded: int,
    bytes_total: int,
) -> TransferState:
    """
    Record a progress callback.

    Percentage never moves backwards while uploading, even if the server
    offset is re-read lower after a retry.
    """
    if not state.is_uploading:
        return state

    percentage = max(state.percentage, compute_percentage(bytes_uploaded, bytes_total))
    return replace(
        state,
        bytes_uploaded=bytes_uploaded,
        bytes_total=bytes_total,
        percentage=percentage,
    )


def transfer_failed(state: TransferState, message: str) -> TransferState:
    if not state.is_uploading:
        return state
    return replace(state, status=TransferStatus.ERROR, error_message=message)


def transfer_succeeded(state: TransferState) -> TransferState:
    """Completion signalled by the transfer client: force 100%"""
    if not state.is_uploading:
        return state
    return replace(
        state,
        status=TransferStatus.SUCCESS,
        percentage=100.0,
        bytes_uploaded=state.bytes_total,
        error_message=None,
    )


def upload_cancelled(state: TransferState, message: str) -> TransferState:
    if not state.is_uploading:
        return state
    return replace(
        state,
        status=TransferStatus.CANCELLED,
        percentage=0.0,
        bytes_uploaded=0,
        error_message=message,
    )


def validation_failed(state: TransferState, message: str) -> TransferState:
    """Local validation error (no network call was made)"""
    return replace(state, status=TransferStatus.ERROR, error_message=message)
