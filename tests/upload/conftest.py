"""
Upload Test Configuration and Fixtures

Shared fixtures for upload module tests. Sessions come from a fake provider
and transfers are MockTransfer instances, so nothing touches the network.
"""

from pathlib import Path

import pytest

from broker.interfaces.session_provider_interface import SessionProviderInterface
from broker.models import UploadSession
from upload.implementations.mock_transfer import MockTransfer
from upload.models import SelectedFile

TEN_MIB = 10 * 1024 * 1024

SCENARIO_SESSION = UploadSession(
    upload_url="https://files.vimeo.com/x",
    video_uri="/videos/123456789",
    video_id="123456789",
)


class FakeSessionProvider(SessionProviderInterface):
    """
    Session provider returning a canned session (or raising).

    Attributes:
        requests: Every UploadRequest received
    """

    def __init__(self, session=SCENARIO_SESSION, error=None):
        self.session = session
        self.error = error
        self.requests = []

    def create_upload_session(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.session


class RecordingTransferFactory:
    """
    Transfer factory building MockTransfer and remembering each one.

    Usage:
        factory = RecordingTransferFactory(auto_complete=False)
        orchestrator = UploadOrchestrator(transfer_factory=factory, ...)
        factory.last.emit_success()
    """

    def __init__(self, **options):
        self.options = options
        self.created = []
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        transfer = MockTransfer(**kwargs, **self.options)
        self.created.append(transfer)
        return transfer

    @property
    def last(self):
        return self.created[-1] if self.created else None


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def session_provider():
    """Provider answering with the scenario session"""
    return FakeSessionProvider()


@pytest.fixture
def auto_transfers():
    """Factory whose transfers complete inside start()"""
    return RecordingTransferFactory(file_size=TEN_MIB)


@pytest.fixture
def manual_transfers():
    """Factory whose transfers wait for the test to emit events"""
    return RecordingTransferFactory(file_size=TEN_MIB, auto_complete=False)


@pytest.fixture
def scenario_file():
    """10 MiB video that does not need to exist on disk"""
    return SelectedFile(
        path=Path("/videos/match.mp4"),
        name="match.mp4",
        size=TEN_MIB,
        mime_type="video/mp4",
    )


@pytest.fixture
def temp_video_file(tmp_path):
    """
    Small real .mp4 file on disk.

    Usage:
        def test_pick(temp_video_file):
            SelectedFile.from_path(temp_video_file)
    """
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"0" * 2048)
    return path


@pytest.fixture
def make_provider():
    """
    Build providers with a custom session or error.

    Usage:
        def test_fail(make_provider):
            provider = make_provider(error=SessionRequestError())
    """
    return FakeSessionProvider


@pytest.fixture
def make_transfers():
    """
    Build recording transfer factories with custom MockTransfer options.

    Usage:
        def test_fail(make_transfers):
            factory = make_transfers(file_size=TEN_MIB, fail_at_offset=1024)
    """
    return RecordingTransferFactory
