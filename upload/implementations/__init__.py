"""
Implementations Package

Concrete transfer implementations.
"""

from upload.implementations.mock_transfer import MockTransfer
from upload.implementations.tus_transfer import TusTransfer

__all__ = [
    "MockTransfer",
    "TusTransfer",
]
