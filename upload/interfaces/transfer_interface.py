"""
Transfer Interface

Abstract interface for resumable transfer clients.
The orchestrator only depends on this control surface (start/abort/wait)
and the callback surface (progress/error/success), so tests can swap in
MockTransfer without touching the network.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from core.exceptions import TransferError
from upload.constants import RETRY_DELAYS

# Type aliases
ProgressCallback = Callable[[int, int], None]
ErrorCallback = Callable[[TransferError], None]
SuccessCallback = Callable[[], None]


@dataclass
class TransferCallbacks:
    """
    Callbacks fired by a transfer client.

    Attributes:
        on_progress: Called with (bytes_uploaded, bytes_total) after each chunk
        on_error: Called once with the TransferError that ended the transfer
        on_success: Called once when the server acknowledged the last byte
    """

    on_progress: Optional[ProgressCallback] = None
    on_error: Optional[ErrorCallback] = None
    on_success: Optional[SuccessCallback] = None


class TransferInterface(ABC):
    """
    Abstract base class for resumable transfer clients.

    Contract:
    - start() begins the transfer (it may return before it finishes)
    - abort() stops further chunks; no callback fires after abort
    - on_success / on_error fire at most once, and never both
    """

    def __init__(
        self,
        file_path: str,
        upload_url: str,
        callbacks: Optional[TransferCallbacks] = None,
        headers: Optional[Dict[str, str]] = None,
        metadata: Optional[Dict[str, str]] = None,
        retry_delays: Sequence[float] = RETRY_DELAYS,
    ):
        """
        Initialize transfer.

        Args:
            file_path: Local file to upload
            upload_url: tus upload URL issued by the session broker
            callbacks: Progress/error/success callbacks
            headers: Extra headers for every tus request
            metadata: Upload metadata (filename, filetype)
            retry_delays: Seconds to wait before each retry of a failed chunk
        """
        self.logger = logging.getLogger(__name__)
        self.file_path = file_path
        self.upload_url = upload_url
        self.callbacks = callbacks or TransferCallbacks()
        self.headers = dict(headers or {})
        self.metadata = dict(metadata or {})
        self.retry_delays = tuple(retry_delays)

        self._abort_event = threading.Event()
        self._finished = False
        self._emit_lock = threading.RLock()

    @abstractmethod
    def start(self) -> None:
        """
        Start the transfer.

        Example:
            transfer.start()
            transfer.wait()
        """

    @abstractmethod
    def abort(self) -> None:
        """
        Stop the transfer.

        A chunk already in flight may complete, but its result is discarded
        and no further callback fires.
        """

    @abstractmethod
    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the transfer has stopped.

        Returns:
            True if the transfer is no longer running
        """

    @abstractmethod
    def is_active(self) -> bool:
        """True while chunks are still being sent"""

    @property
    def aborted(self) -> bool:
        return self._abort_event.is_set()

    # =========================================================================
    # CALLBACK DISPATCH (shared by implementations)
    # =========================================================================

    # Callbacks run under _emit_lock and _set_aborted() takes the same lock:
    # once abort() returns no callback is running or can start. Reentrant so
    # a callback may call abort() on the worker thread.

    def _set_aborted(self) -> None:
        with self._emit_lock:
            self._abort_event.set()

    def _emit_progress(self, bytes_uploaded: int, bytes_total: int) -> None:
        with self._emit_lock:
            if self.aborted or self._finished:
                return
            self._invoke("on_progress", bytes_uploaded, bytes_total)

    def _emit_error(self, error: TransferError) -> None:
        with self._emit_lock:
            if not self._finish():
                return
            self._invoke("on_error", error)

    def _emit_success(self) -> None:
        with self._emit_lock:
            if not self._finish():
                return
            self._invoke("on_success")

    def _finish(self) -> bool:
        """Mark terminal callback as sent; False if it must be dropped"""
        if self.aborted or self._finished:
            return False
        self._finished = True
        return True

    def _invoke(self, name: str, *args) -> None:
        callback = getattr(self.callbacks, name)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            self.logger.error(f"Error in {name} callback: {e}", exc_info=True)
