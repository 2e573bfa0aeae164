"""
Interfaces Package

Abstract interfaces for session providers.
"""

from broker.interfaces.session_provider_interface import SessionProviderInterface

__all__ = [
    "SessionProviderInterface",
]
