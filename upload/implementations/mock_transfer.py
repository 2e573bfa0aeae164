"""
Mock Transfer Implementation

Simulated transfer for testing without a tus server.
Same callback and control contract as TusTransfer, but runs synchronously
inside start() (or not at all, when driven manually by a test).
"""

import os
import time
from typing import Dict, List, Optional, Sequence, Tuple

from core.exceptions import TransferError
from upload.constants import RETRY_DELAYS, TUS_CHUNK_SIZE
from upload.interfaces.transfer_interface import TransferCallbacks, TransferInterface


class MockTransfer(TransferInterface):
    """
    Mock transfer for testing.

    Useful for:
    - Unit tests of the orchestrator
    - Running the uploader front-end without Vimeo (--mock)

    Example:
        # Completes immediately, one progress event per chunk
        transfer = MockTransfer("/videos/a.mp4", "https://files.vimeo.com/x",
                                callbacks, file_size=10_485_760)

        # Fails once 5 MB have been sent
        transfer = MockTransfer(..., fail_at_offset=5 * 1024 * 1024)

        # Driven by the test
        transfer = MockTransfer(..., auto_complete=False)
        transfer.start()
        transfer.emit_progress(1024, 2048)
        transfer.emit_success()
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
        file_size: Optional[int] = None,
        auto_complete: bool = True,
        fail_at_offset: Optional[int] = None,
        simulate_timing: bool = False,
    ):
        """
        Initialize mock transfer.

        Args:
            chunk_size: Simulated bytes per chunk
            file_size: Size to report, or None to stat file_path
            auto_complete: Run the simulated upload inside start()
            fail_at_offset: Emit on_error once this offset is reached
            simulate_timing: Sleep briefly between chunks (front-end demos)
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
        self.file_size = file_size if file_size is not None else os.path.getsize(file_path)
        self.auto_complete = auto_complete
        self.fail_at_offset = fail_at_offset
        self.simulate_timing = simulate_timing

        self.started = False
        self.offset = 0

        # Track emitted progress for testing
        self.progress_history: List[Tuple[int, int]] = []

    def start(self) -> None:
        self.started = True
        self.logger.info(
            f"[MOCK] Starting transfer: {self.file_path} ({self.file_size} bytes)",
        )

        if self.auto_complete:
            self.run()

    def run(self) -> None:
        """Simulate the chunk loop until done, failed or aborted"""
        while self.offset < self.file_size:
            if self.aborted:
                self.logger.info("[MOCK] Transfer stopped after abort")
                return

            self.offset = min(self.offset + self.chunk_size, self.file_size)

            if self.fail_at_offset is not None and self.offset >= self.fail_at_offset:
                self.emit_error(TransferError("Simulated transfer failure"))
                return

            self.emit_progress(self.offset, self.file_size)

            if self.simulate_timing:
                time.sleep(0.05)

        self.emit_success()

    def abort(self) -> None:
        self._set_aborted()
        self.logger.info("[MOCK] Transfer aborted")

    def wait(self, timeout: Optional[float] = None) -> bool:
        return True

    def is_active(self) -> bool:
        return self.started and not self._finished and not self.aborted

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def emit_progress(self, bytes_uploaded: int, bytes_total: int) -> None:
        if not self.aborted:
            self.progress_history.append((bytes_uploaded, bytes_total))
        self._emit_progress(bytes_uploaded, bytes_total)

    def emit_error(self, error: TransferError) -> None:
        self._emit_error(error)

    def emit_success(self) -> None:
        self._emit_success()
