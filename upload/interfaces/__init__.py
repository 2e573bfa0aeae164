"""
Interfaces Package

Abstract interfaces for transfer implementations.
"""

from upload.interfaces.transfer_interface import (
    TransferCallbacks,
    TransferInterface,
)

__all__ = [
    "TransferCallbacks",
    "TransferInterface",
]
