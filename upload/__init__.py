"""
Upload Module

Resumable video upload to Vimeo over the tus protocol.

Public API:
    - UploadOrchestrator: High-level upload coordinator
    - BrokerClient: Requests upload sessions from the broker
    - SelectedFile: File picked for upload
    - render_view: UI view model from the current state
    - create_transfer: Factory function

Usage:
    from upload import UploadOrchestrator

    orchestrator = UploadOrchestrator()
    orchestrator.select_file("/path/to/video.mp4")
    orchestrator.start_upload()
    state = orchestrator.wait_for_completion()
"""

from upload.controllers.upload_orchestrator import UploadOrchestrator
from upload.factory import TransferFactory, create_transfer
from upload.interfaces.transfer_interface import TransferCallbacks, TransferInterface
from upload.models import SelectedFile
from upload.session_client import BrokerClient
from upload.view import UploaderView, render_view

# Public API
__all__ = [
    "BrokerClient",
    "SelectedFile",
    "TransferCallbacks",
    "TransferFactory",
    "TransferInterface",
    "UploadOrchestrator",
    "UploaderView",
    "create_transfer",
    "render_view",
]
