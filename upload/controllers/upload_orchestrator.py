"""
Upload Orchestrator

High-level coordinator for one video upload.
Owns the UI state, requests an upload session, drives the transfer client
and folds its callbacks into TransferState.

This follows the same pattern as the session broker:
- Clean, simple API for the front-end (select / start / cancel)
- Collaborators injected (session provider, transfer factory)
- Every error converted to a user-visible message, never raised

Threading:
- Transfer callbacks arrive on the transfer's worker thread
- State changes are serialized with a lock
- The lock is never held across the session request or transfer.abort(),
  so cancel stays responsive and cannot deadlock with a callback
"""

import logging
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence, Union

from broker.interfaces.session_provider_interface import SessionProviderInterface
from core.exceptions import (
    NoFileSelected,
    TransferError,
    UploaderError,
    ValidationError,
)
from core.state_machine import (
    TransferState,
    TransferStatus,
    file_selected,
    progress_reported,
    session_created,
    session_failed,
    transfer_failed,
    transfer_succeeded,
    upload_cancelled,
    upload_started,
    validation_failed,
)
from upload.constants import (
    CANCELLED_MESSAGE,
    RETRY_DELAYS,
    SESSION_ERROR_PREFIX,
    TRANSFER_ERROR_PREFIX,
    TUS_HEADERS,
    UNKNOWN_ERROR,
    VIMEO_VIDEO_PAGE_URL,
)
from upload.factory import TransferFactory
from upload.interfaces.transfer_interface import TransferCallbacks, TransferInterface
from upload.models import SelectedFile
from upload.session_client import BrokerClient

# Type aliases
TransferFactoryFn = Callable[..., TransferInterface]
StateListener = Callable[[TransferState], None]


class UploadOrchestrator:
    """
    Upload workflow controller.

    This class:
    - Tracks the selected file and the TransferState
    - Requests one upload session per start
    - Runs at most one transfer at a time
    - Reflects progress/error/success callbacks into state
    - Discards callbacks from transfers that are no longer active

    Usage:
        orchestrator = UploadOrchestrator()

        orchestrator.select_file("/videos/match.mp4")
        orchestrator.start_upload()
        state = orchestrator.wait_for_completion()

        if state.status == TransferStatus.SUCCESS:
            print(orchestrator.video_url)
    """

    def __init__(
        self,
        session_provider: Optional[SessionProviderInterface] = None,
        transfer_factory: Optional[TransferFactoryFn] = None,
        retry_delays: Sequence[float] = RETRY_DELAYS,
        on_state_change: Optional[StateListener] = None,
    ):
        """
        Initialize upload orchestrator.

        Args:
            session_provider: Where sessions come from (default: BrokerClient
                against BROKER_BASE_URL)
            transfer_factory: Builds the transfer client (default: tus)
            retry_delays: Retry schedule handed to every transfer
            on_state_change: Called with the new TransferState after each change

        Example:
            # Normal usage - broker over HTTP, real tus transfer
            orchestrator = UploadOrchestrator()

            # Testing
            orchestrator = UploadOrchestrator(
                session_provider=fake_broker,
                transfer_factory=partial(TransferFactory.create_transfer, mode="mock"),
            )
        """
        self.logger = logging.getLogger(__name__)

        self.session_provider = session_provider or BrokerClient()
        self.transfer_factory = transfer_factory or TransferFactory.create_transfer
        self.retry_delays = tuple(retry_delays)
        self.on_state_change = on_state_change

        self._lock = threading.RLock()
        self._state = TransferState()
        self._file: Optional[SelectedFile] = None
        self._transfer: Optional[TransferInterface] = None

        # Identifies the current upload attempt; callbacks and late session
        # answers from any other attempt are dropped
        self._attempt: Optional[object] = None

        self.logger.info("Upload Orchestrator initialized")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def state(self) -> TransferState:
        with self._lock:
            return self._state

    @property
    def selected_file(self) -> Optional[SelectedFile]:
        with self._lock:
            return self._file

    @property
    def video_url(self) -> Optional[str]:
        """Hosted video page, once the upload succeeded"""
        state = self.state
        if state.status != TransferStatus.SUCCESS or not state.video_id:
            return None
        return VIMEO_VIDEO_PAGE_URL.format(video_id=state.video_id)

    # =========================================================================
    # UI ACTIONS
    # =========================================================================

    def select_file(self, file: Union[str, Path, SelectedFile]) -> TransferState:
        """
        Replace the selected file and reset progress and errors.

        No size/type validation happens here; the picker decides what can be
        chosen. A file that cannot be read leaves nothing selected.

        Args:
            file: Path to the file, or an already built SelectedFile

        Returns:
            New TransferState
        """
        with self._lock:
            if self._state.is_uploading:
                self.logger.warning("Cannot change file while uploading")
                return self._state

            try:
                selected = file if isinstance(file, SelectedFile) else SelectedFile.from_path(file)
            except OSError as e:
                self.logger.error(f"Cannot open selected file {file}: {e}")
                self._file = None
                self._set_state(
                    replace(file_selected(self._state), error_message=f"Cannot open file: {e}"),
                    "unreadable file",
                )
                return self._state

            self._file = selected
            self._transfer = None
            self._set_state(file_selected(self._state), f"file selected: {selected.name}")

            self.logger.info(
                f"Selected {selected.name} ({selected.size_mb:.2f} MB, {selected.mime_type})",
            )
            return self._state

    def start_upload(self) -> TransferState:
        """
        Request a session and start the transfer.

        - No file selected: error state, no network call
        - Already uploading, or this file already succeeded: ignored
        - Session request fails: error state
        - Otherwise the transfer runs and callbacks update the state

        Returns:
            TransferState right after the transfer was started (or failed)
        """
        attempt = object()

        with self._lock:
            try:
                selected = self._require_file()
            except ValidationError as e:
                self.logger.warning(f"Upload not started: {e.message}")
                self._set_state(validation_failed(self._state, e.message), "validation failed")
                return self._state

            if self._state.is_uploading:
                self.logger.warning("Upload already in progress, ignoring start")
                return self._state

            if self._state.status == TransferStatus.SUCCESS:
                self.logger.warning(
                    f"{selected.name} was already uploaded as video "
                    f"{self._state.video_id}; select a file to upload again",
                )
                return self._state

            self._attempt = attempt
            self._transfer = None
            self._set_state(upload_started(self._state, selected.size), "upload started")

        # Blocking call, made without holding the lock so cancel stays possible
        try:
            session = self.session_provider.create_upload_session(
                selected.to_upload_request(),
            )
        except UploaderError as e:
            return self._fail_session(attempt, e.message)
        except Exception as e:
            self.logger.error(f"Unexpected session error: {e}", exc_info=True)
            return self._fail_session(attempt, str(e) or UNKNOWN_ERROR)

        with self._lock:
            if self._attempt is not attempt:
                self.logger.info("Upload cancelled while waiting for session, not starting transfer")
                return self._state

            self._set_state(
                session_created(self._state, session.video_id),
                f"session created for video {session.video_id}",
            )

            try:
                transfer = self.transfer_factory(
                    file_path=str(selected.path),
                    upload_url=session.upload_url,
                    callbacks=self._make_callbacks(attempt),
                    headers=dict(TUS_HEADERS),
                    metadata={
                        "filename": selected.name,
                        "filetype": selected.mime_type,
                    },
                    retry_delays=self.retry_delays,
                )
            except Exception as e:
                self.logger.error(f"Could not create transfer: {e}", exc_info=True)
                self._attempt = None
                self._set_state(
                    transfer_failed(self._state, self._transfer_message(str(e))),
                    "transfer creation failed",
                )
                return self._state

            self._transfer = transfer

        # MockTransfer may run to completion (and call back) inside start()
        try:
            transfer.start()
        except Exception as e:
            self.logger.error(f"Could not start transfer: {e}", exc_info=True)
            self._on_error(attempt, TransferError(str(e) or UNKNOWN_ERROR))

        return self.state

    def cancel_upload(self) -> TransferState:
        """
        Abort the running upload.

        Sets status cancelled, percentage 0 and an informational message.
        No-op when nothing is uploading.
        """
        with self._lock:
            if not self._state.is_uploading:
                self.logger.debug("Nothing to cancel")
                return self._state

            transfer = self._transfer
            self._attempt = None
            self._set_state(
                upload_cancelled(self._state, CANCELLED_MESSAGE),
                "cancelled by user",
            )

        # Outside the lock: abort() may wait for the worker, which may be
        # blocked on the lock inside a callback
        if transfer is not None:
            transfer.abort()

        return self.state

    def wait_for_completion(self, timeout: Optional[float] = None) -> TransferState:
        """
        Block until the current transfer has stopped.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely
        """
        with self._lock:
            transfer = self._transfer

        if transfer is not None:
            transfer.wait(timeout)

        return self.state

    def get_status(self) -> Dict[str, Any]:
        """
        Get current orchestrator status.

        Example:
            status = orchestrator.get_status()
            print(f"{status['status']}: {status['percentage']}%")
        """
        with self._lock:
            return {
                "status": self._state.status.value,
                "percentage": self._state.percentage,
                "bytes_uploaded": self._state.bytes_uploaded,
                "bytes_total": self._state.bytes_total,
                "error_message": self._state.error_message,
                "video_id": self._state.video_id,
                "file": self._file.name if self._file else None,
                "transfer_type": type(self._transfer).__name__ if self._transfer else None,
                "session_provider": type(self.session_provider).__name__,
            }

    # =========================================================================
    # TRANSFER CALLBACKS
    # =========================================================================

    def _make_callbacks(self, attempt: object) -> TransferCallbacks:
        return TransferCallbacks(
            on_progress=lambda uploaded, total: self._on_progress(attempt, uploaded, total),
            on_error=lambda error: self._on_error(attempt, error),
            on_success=lambda: self._on_success(attempt),
        )

    def _on_progress(self, attempt: object, bytes_uploaded: int, bytes_total: int) -> None:
        with self._lock:
            if self._attempt is not attempt:
                return
            self._set_state(progress_reported(self._state, bytes_uploaded, bytes_total))

    def _on_error(self, attempt: object, error: TransferError) -> None:
        with self._lock:
            if self._attempt is not attempt:
                self.logger.debug(f"Discarding error from stale transfer: {error}")
                return

            self._attempt = None
            message = self._transfer_message(getattr(error, "message", str(error)))
            self.logger.error(f"❌ {message}")
            self._set_state(transfer_failed(self._state, message), "transfer failed")

    def _on_success(self, attempt: object) -> None:
        with self._lock:
            if self._attempt is not attempt:
                self.logger.debug("Discarding success from stale transfer")
                return

            self._attempt = None
            self._set_state(transfer_succeeded(self._state), "transfer complete")
            self.logger.info(
                f"✅ Upload successful: video {self._state.video_id} "
                f"({self._state.bytes_total / (1024 * 1024):.1f} MB)",
            )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _require_file(self) -> SelectedFile:
        if self._file is None:
            raise NoFileSelected()
        return self._file

    def _fail_session(self, attempt: object, message: str) -> TransferState:
        with self._lock:
            if self._attempt is not attempt:
                return self._state

            self._attempt = None
            self.logger.error(f"❌ Could not get upload session: {message}")
            self._set_state(
                session_failed(self._state, f"{SESSION_ERROR_PREFIX}: {message}"),
                "session request failed",
            )
            return self._state

    def _transfer_message(self, message: Optional[str]) -> str:
        return f"{TRANSFER_ERROR_PREFIX}: {message or UNKNOWN_ERROR}"

    def _set_state(self, new_state: TransferState, reason: str = "") -> None:
        """Store new state, log status transitions and notify the listener"""
        old_state = self._state
        if new_state == old_state:
            return

        self._state = new_state

        if new_state.status != old_state.status:
            log_msg = f"State transition: {old_state.status.value} -> {new_state.status.value}"
            if reason:
                log_msg += f" ({reason})"
            self.logger.info(log_msg)

        if self.on_state_change:
            try:
                self.on_state_change(new_state)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")
