"""
Uploader View

Pure mapping from (TransferState, SelectedFile) to what the uploader UI
shows. Front-ends render an UploaderView; they never inspect state rules
themselves.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.state_machine import TransferState, TransferStatus
from upload.constants import ACCEPTED_MIME_PREFIX, VIMEO_VIDEO_PAGE_URL
from upload.models import SelectedFile


class BannerKind(Enum):
    """Banner styles: failures and cancellations must look different"""

    ERROR = "error"
    INFO = "info"
    SUCCESS = "success"


@dataclass(frozen=True)
class Banner:
    kind: BannerKind
    text: str
    link: Optional[str] = None


@dataclass(frozen=True)
class UploaderView:
    """
    Everything the uploader UI displays.

    Attributes:
        picker_accept: MIME pattern the file picker accepts
        picker_enabled: File picker usable (disabled while uploading)
        file_label: "name (X.XX MB)" for the selected file
        upload_enabled: Upload button clickable
        cancel_visible: Cancel button shown (only while uploading)
        progress_visible: Progress bar shown (only while uploading)
        progress: Progress bar value, 0-100
        progress_text: "NN.N% uploaded"
        banner: Error, cancellation or success banner (if any)
    """

    picker_accept: str
    picker_enabled: bool
    file_label: Optional[str]
    upload_enabled: bool
    cancel_visible: bool
    progress_visible: bool
    progress: float
    progress_text: str
    banner: Optional[Banner]


def format_file_label(selected_file: SelectedFile) -> str:
    return f"{selected_file.name} ({selected_file.size_mb:.2f} MB)"


def format_progress(percentage: float) -> str:
    """
    Example:
        format_progress(50.0)   # "50.0% uploaded"
    """
    return f"{percentage:.1f}% uploaded"


def build_banner(state: TransferState) -> Optional[Banner]:
    if state.status == TransferStatus.ERROR and state.error_message:
        return Banner(BannerKind.ERROR, state.error_message)

    if state.status == TransferStatus.CANCELLED:
        return Banner(BannerKind.INFO, state.error_message or "Upload cancelled")

    if state.status == TransferStatus.SUCCESS and state.video_id and state.percentage == 100:
        return Banner(
            BannerKind.SUCCESS,
            f"Upload complete! Vimeo video ID: {state.video_id}",
            link=VIMEO_VIDEO_PAGE_URL.format(video_id=state.video_id),
        )

    # Unreadable pick: idle with a message
    if state.error_message:
        return Banner(BannerKind.ERROR, state.error_message)

    return None


def render_view(state: TransferState, selected_file: Optional[SelectedFile]) -> UploaderView:
    uploading = state.is_uploading
    percentage = max(0.0, min(100.0, state.percentage))

    return UploaderView(
        picker_accept=f"{ACCEPTED_MIME_PREFIX}*",
        picker_enabled=not uploading,
        file_label=format_file_label(selected_file) if selected_file else None,
        upload_enabled=selected_file is not None and not uploading,
        cancel_visible=uploading,
        progress_visible=uploading,
        progress=percentage,
        progress_text=format_progress(percentage),
        banner=build_banner(state),
    )
