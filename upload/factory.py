"""
Transfer Factory

Factory pattern for creating transfer implementations.
The orchestrator receives a transfer factory, so tests and the --mock
front-end can swap the network transfer for MockTransfer.
"""

import logging
from typing import Any, Dict, Literal, Optional, Sequence

from upload.constants import RETRY_DELAYS
from upload.implementations.mock_transfer import MockTransfer
from upload.implementations.tus_transfer import TusTransfer
from upload.interfaces.transfer_interface import TransferCallbacks, TransferInterface

# Type alias
TransferMode = Literal["tus", "mock"]


class TransferFactory:
    """
    Factory for creating transfer implementations.

    Usage:
        # Real tus transfer
        transfer = TransferFactory.create_transfer(path, upload_url, callbacks)

        # Force mock for testing
        transfer = TransferFactory.create_transfer(path, upload_url, callbacks,
                                                   mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_transfer(
        cls,
        file_path: str,
        upload_url: str,
        callbacks: Optional[TransferCallbacks] = None,
        headers: Optional[Dict[str, str]] = None,
        metadata: Optional[Dict[str, str]] = None,
        retry_delays: Sequence[float] = RETRY_DELAYS,
        mode: TransferMode = "tus",
        **options: Any,
    ) -> TransferInterface:
        """
        Create a transfer instance.

        Args:
            file_path: Local file to upload
            upload_url: tus upload URL from the session broker
            callbacks: Progress/error/success callbacks
            headers: Headers for every tus request
            metadata: Upload metadata (filename, filetype)
            retry_delays: Retry schedule in seconds
            mode: "tus" (real network) or "mock" (simulated)
            **options: Implementation-specific options (chunk_size, ...)

        Returns:
            TransferInterface implementation

        Raises:
            ValueError: Unknown mode
        """
        common = {
            "file_path": file_path,
            "upload_url": upload_url,
            "callbacks": callbacks,
            "headers": headers,
            "metadata": metadata,
            "retry_delays": retry_delays,
        }

        if mode == "mock":
            cls._logger.info("Creating Mock Transfer")
            return MockTransfer(**common, **options)

        if mode == "tus":
            cls._logger.debug("Creating tus Transfer")
            return TusTransfer(**common, **options)

        raise ValueError(f"Unknown transfer mode: {mode}")


# Convenience function for quick creation
def create_transfer(
    file_path: str,
    upload_url: str,
    callbacks: Optional[TransferCallbacks] = None,
    force_mock: bool = False,
    **kwargs: Any,
) -> TransferInterface:
    """
    Quick transfer creation with simple mock override.

    Example:
        transfer = create_transfer(path, url, callbacks)
        transfer = create_transfer(path, url, callbacks, force_mock=True)
    """
    mode = "mock" if force_mock else "tus"
    return TransferFactory.create_transfer(
        file_path,
        upload_url,
        callbacks,
        mode=mode,
        **kwargs,
    )
