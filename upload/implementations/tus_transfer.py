"""
tus Transfer Implementation

Concrete implementation of TransferInterface on top of tuspy (tusclient).
Sends the file to the Vimeo upload URL in sequential PATCH chunks from a
background thread, resuming from the server offset after transient failures.

Retry behavior:
- Transient failures: network errors, 5xx, 409 (offset conflict), 423 (locked)
- Before retry N the worker waits retry_delays[N], then re-reads the server
  offset (HEAD) and continues from there
- The retry counter resets whenever a chunk moves the offset forward
- Other 4xx statuses, or an exhausted schedule, end the transfer with on_error
"""

import threading
from typing import Any, Callable, Dict, Optional, Sequence

from tusclient import client
from tusclient.exceptions import TusCommunicationError

from core.exceptions import CancellationError, TransferError
from upload.constants import (
    ABORT_JOIN_TIMEOUT,
    RETRY_DELAYS,
    RETRYABLE_CLIENT_STATUSES,
    TUS_CHUNK_SIZE,
    UNKNOWN_ERROR,
)
from upload.interfaces.transfer_interface import TransferCallbacks, TransferInterface

# Builds a tus uploader bound to the upload URL. Must resolve the current
# server offset (HEAD) and expose offset, get_file_size() and upload_chunk().
UploaderBuilder = Callable[[], Any]


class TusTransfer(TransferInterface):
    """
    Resumable transfer using the tus protocol.

    Features:
    - Chunk-based upload (memory efficient)
    - Resume from server offset after interruptions
    - Ascending retry schedule
    - Cooperative cancellation

    Usage:
        transfer = TusTransfer(
            file_path="/videos/match.mp4",
            upload_url=session.upload_url,
            callbacks=TransferCallbacks(on_progress=print),
        )
        transfer.start()
        transfer.wait()
    """

    def __init__(
        self,
        file_path: str,
        upload_url: str,
        callbacks: Optional[TransferCallbacks] = None,
        headers: Optional[Dict[str, str]] = None,
        metadata: Optional[Dict[str, str]] = None,
        retry_delays: Sequence[float] = RETRY_DELAYS,
        chunk_size: int = TUS_CHUNK_SIZE,
        uploader_builder: Optional[UploaderBuilder] = None,
    ):
        """
        Initialize tus transfer.

        Args:
            chunk_size: Bytes per PATCH request
            uploader_builder: Override how the tus uploader is built
                (tests pass a fake; default uses tusclient)

        See TransferInterface for the remaining arguments.
        """
        super().__init__(
            file_path=file_path,
            upload_url=upload_url,
            callbacks=callbacks,
            headers=headers,
            metadata=metadata,
            retry_delays=retry_delays,
        )
        self.chunk_size = chunk_size
        self._build_uploader = uploader_builder or self._create_tus_uploader
        self._thread: Optional[threading.Thread] = None
        self._retry_attempt = 0

        self.logger.debug(
            f"tus transfer prepared: {file_path} → {upload_url} "
            f"(chunk: {chunk_size} bytes, retries: {list(self.retry_delays)})",
        )

    def _create_tus_uploader(self):
        """
        Build a tusclient uploader for the existing upload URL.

        Passing url= skips creation (Vimeo already created the upload) and
        makes tusclient read the current offset from the server.
        """
        tus_client = client.TusClient(self.upload_url, headers=self.headers)
        return tus_client.uploader(
            file_path=self.file_path,
            url=self.upload_url,
            chunk_size=self.chunk_size,
            metadata=self.metadata,
        )

    # =========================================================================
    # CONTROL SURFACE
    # =========================================================================

    def start(self) -> None:
        if self._thread is not None:
            self.logger.warning("Transfer already started, ignoring start()")
            return

        self._thread = threading.Thread(
            target=self._run,
            name="tus-transfer",
            daemon=True,
        )
        self._thread.start()
        self.logger.info(f"Transfer started: {self.file_path}")

    def abort(self) -> None:
        if self.aborted:
            return

        self._set_aborted()
        self.logger.info("Transfer abort requested")

        # Callbacks run on the worker thread; never join ourselves
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=ABORT_JOIN_TIMEOUT)
            if self._thread.is_alive():
                self.logger.warning(
                    "Worker still finishing an in-flight chunk; result will be discarded",
                )

    def wait(self, timeout: Optional[float] = None) -> bool:
        if self._thread is None:
            return True
        self._thread.join(timeout=timeout)
        return not self._thread.is_alive()

    def is_active(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self.aborted
        )

    # =========================================================================
    # WORKER
    # =========================================================================

    def _run(self) -> None:
        """Worker thread entry point: every outcome ends in at most one callback"""
        try:
            self._transfer()

        except CancellationError:
            self.logger.info("Transfer stopped after abort")

        except TransferError as e:
            self.logger.error(f"❌ Transfer failed: {e.message}")
            self._emit_error(e)

        except OSError as e:
            self.logger.error(f"❌ Cannot read {self.file_path}: {e}")
            self._emit_error(TransferError(f"Cannot read file: {e}"))

        except Exception as e:
            self.logger.error(f"❌ Unexpected transfer error: {e}", exc_info=True)
            self._emit_error(TransferError(str(e) or UNKNOWN_ERROR))

    def _transfer(self) -> None:
        """
        Send the whole file, retrying transient failures.

        Raises:
            CancellationError: abort() was called
            TransferError: Non-retryable failure or retries exhausted
        """
        while True:
            self._check_aborted()

            try:
                uploader = self._build_uploader()
                self._upload_chunks(uploader)
                break

            except TusCommunicationError as e:
                self._wait_before_retry(e)

        self._check_aborted()
        self.logger.info(f"✅ Transfer complete: {self.file_path}")
        self._emit_success()

    def _upload_chunks(self, uploader) -> None:
        bytes_total = uploader.get_file_size()

        while uploader.offset < bytes_total:
            self._check_aborted()

            offset_before = uploader.offset
            uploader.upload_chunk()

            # In-flight chunk finished after abort: discard its result
            self._check_aborted()

            if uploader.offset > offset_before:
                self._retry_attempt = 0

            self._emit_progress(uploader.offset, bytes_total)

    def _wait_before_retry(self, error: TusCommunicationError) -> None:
        """
        Sleep for the next delay of the schedule, or give up.

        Raises:
            TransferError: Error is not retryable or schedule exhausted
            CancellationError: abort() called while waiting
        """
        status_code = getattr(error, "status_code", None)
        message = str(error) or UNKNOWN_ERROR

        if not self._is_retryable(status_code):
            raise TransferError(message, status_code=status_code) from error

        if self._retry_attempt >= len(self.retry_delays):
            raise TransferError(
                f"{message} (gave up after {len(self.retry_delays)} retries)",
                status_code=status_code,
            ) from error

        delay = self.retry_delays[self._retry_attempt]
        self._retry_attempt += 1

        self.logger.warning(
            f"Transient transfer error ({status_code or 'network'}): {message}. "
            f"Retry {self._retry_attempt}/{len(self.retry_delays)} in {delay}s",
        )

        # Event.wait returns True as soon as abort() is called
        if self._abort_event.wait(delay):
            raise CancellationError()

    def _is_retryable(self, status_code: Optional[int]) -> bool:
        if status_code is None:
            return True
        return status_code >= 500 or status_code in RETRYABLE_CLIENT_STATUSES

    def _check_aborted(self) -> None:
        if self.aborted:
            raise CancellationError()
