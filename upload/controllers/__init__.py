"""
Controllers Package

High-level upload coordinators.
"""

from upload.controllers.upload_orchestrator import UploadOrchestrator

__all__ = [
    "UploadOrchestrator",
]
