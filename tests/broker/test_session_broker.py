"""
Session Broker Tests

Tests cover:
1. Successful session creation and video ID extraction
2. Request sent to Vimeo (headers, payload)
3. Missing token: ConfigError, no outbound call
4. Provider errors carry the provider status
5. BrokerConfig never exposes the token
"""

import httpx
import pytest

from broker.constants import VIMEO_ACCEPT_HEADER, VIMEO_CREATE_VIDEO_URL
from broker.models import BrokerConfig
from broker.session_broker import SessionBroker, extract_video_id
from core.exceptions import ConfigError, ProviderError

# =============================================================================
# SUCCESS
# =============================================================================


class TestCreateUploadSession:
    """Test successful session creation"""

    def test_returns_session(self, fake_vimeo, broker_config, upload_request):
        """Session holds upload link, URI and trailing ID"""
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        session = broker.create_upload_session(upload_request)

        assert session.upload_url == "https://files.vimeo.com/x"
        assert session.video_uri == "/videos/123456789"
        assert session.video_id == "123456789"

    def test_single_outbound_call(self, fake_vimeo, broker_config, upload_request):
        """Exactly one POST to the create-video endpoint"""
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        broker.create_upload_session(upload_request)

        assert len(fake_vimeo.requests) == 1
        request = fake_vimeo.requests[0]
        assert request.method == "POST"
        assert str(request.url) == VIMEO_CREATE_VIDEO_URL

    def test_request_headers(self, fake_vimeo, broker_config, upload_request):
        """Bearer token, JSON body and pinned API version"""
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        broker.create_upload_session(upload_request)

        headers = fake_vimeo.requests[0].headers
        assert headers["Authorization"] == f"bearer {broker_config.access_token}"
        assert headers["Content-Type"] == "application/json"
        assert headers["Accept"] == VIMEO_ACCEPT_HEADER

    def test_request_payload(self, fake_vimeo, broker_config, upload_request):
        """tus approach sized to the file, public, named after the file"""
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        broker.create_upload_session(upload_request)

        payload = fake_vimeo.last_json
        assert payload["upload"] == {"approach": "tus", "size": 10_485_760}
        assert payload["privacy"] == {"view": "anybody"}
        assert payload["name"] == "match.mp4"
        assert payload["description"]

    @pytest.mark.parametrize(
        "uri,expected",
        [
            ("/videos/123456789", "123456789"),
            ("/videos/1", "1"),
            ("/users/42/videos/987654321", "987654321"),
        ],
    )
    def test_video_id_is_trailing_segment(
        self, fake_vimeo, broker_config, upload_request, uri, expected
    ):
        """Video ID equals the trailing segment of the returned URI"""
        fake_vimeo.body = {"uri": uri, "upload": {"upload_link": "https://files.vimeo.com/y"}}
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        session = broker.create_upload_session(upload_request)

        assert session.video_id == expected
        assert session.video_id == extract_video_id(uri)


# =============================================================================
# ERRORS
# =============================================================================


class TestBrokerErrors:
    """Test error handling"""

    def test_missing_token(self, fake_vimeo, upload_request):
        """No token: ConfigError and no outbound call"""
        broker = SessionBroker(BrokerConfig(access_token=None), http_client=fake_vimeo.client())

        with pytest.raises(ConfigError) as exc_info:
            broker.create_upload_session(upload_request)

        assert exc_info.value.status_code == 500
        assert exc_info.value.message
        assert fake_vimeo.requests == []

    def test_empty_token(self, fake_vimeo, upload_request):
        """Empty string counts as missing"""
        broker = SessionBroker(BrokerConfig(access_token=""), http_client=fake_vimeo.client())

        with pytest.raises(ConfigError):
            broker.create_upload_session(upload_request)

        assert fake_vimeo.requests == []

    @pytest.mark.parametrize("status_code", [400, 401, 403, 429, 500, 503])
    def test_provider_status_passthrough(
        self, fake_vimeo, broker_config, upload_request, status_code
    ):
        """ProviderError carries Vimeo's status and error text"""
        fake_vimeo.status_code = status_code
        fake_vimeo.body = {"error": "Something went wrong"}
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        with pytest.raises(ProviderError) as exc_info:
            broker.create_upload_session(upload_request)

        assert exc_info.value.status_code == status_code
        assert exc_info.value.message == "Vimeo API error: Something went wrong"

    def test_provider_error_without_message(self, fake_vimeo, broker_config, upload_request):
        """Non-JSON error body falls back to a generic message"""
        fake_vimeo.status_code = 502
        fake_vimeo.raw_body = b"<html>Bad Gateway</html>"
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        with pytest.raises(ProviderError) as exc_info:
            broker.create_upload_session(upload_request)

        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Vimeo API error: Unknown error"

    def test_network_error(self, fake_vimeo, broker_config, upload_request):
        """Unreachable Vimeo API becomes a 502 ProviderError"""
        fake_vimeo.error = httpx.ConnectError
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        with pytest.raises(ProviderError) as exc_info:
            broker.create_upload_session(upload_request)

        assert exc_info.value.status_code == 502

    def test_success_without_upload_link(self, fake_vimeo, broker_config, upload_request):
        """2xx response missing the upload link is a provider error"""
        fake_vimeo.body = {"uri": "/videos/1"}
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        with pytest.raises(ProviderError) as exc_info:
            broker.create_upload_session(upload_request)

        assert exc_info.value.status_code == 502

    @pytest.mark.parametrize(
        "body",
        [
            {"uri": "/videos/1", "upload": {"upload_link": None}},
            {"uri": "/videos/1", "upload": {"upload_link": ""}},
            {"uri": "/videos/1", "upload": {"upload_link": 42}},
            {"uri": None, "upload": {"upload_link": "https://files.vimeo.com/y"}},
            {"uri": 123, "upload": {"upload_link": "https://files.vimeo.com/y"}},
            {"uri": "/videos/", "upload": {"upload_link": "https://files.vimeo.com/y"}},
        ],
    )
    def test_success_with_unusable_fields(
        self, fake_vimeo, broker_config, upload_request, body
    ):
        """Null, empty or non-string link/URI is a 502 provider error"""
        fake_vimeo.status_code = 201
        fake_vimeo.body = body
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        with pytest.raises(ProviderError) as exc_info:
            broker.create_upload_session(upload_request)

        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Unexpected response from Vimeo API"

    def test_token_not_in_error(self, fake_vimeo, broker_config, upload_request):
        """Error messages never contain the token"""
        fake_vimeo.status_code = 401
        fake_vimeo.body = {"error": "Unauthorized"}
        broker = SessionBroker(broker_config, http_client=fake_vimeo.client())

        with pytest.raises(ProviderError) as exc_info:
            broker.create_upload_session(upload_request)

        assert broker_config.access_token not in str(exc_info.value)


# =============================================================================
# CONFIG
# =============================================================================


class TestBrokerConfig:
    """Test broker configuration"""

    def test_from_env(self, monkeypatch):
        """Token read from VIMEO_ACCESS_TOKEN"""
        monkeypatch.setenv("VIMEO_ACCESS_TOKEN", "env-token")

        config = BrokerConfig.from_env()

        assert config.access_token == "env-token"
        assert config.has_token is True

    def test_from_env_missing(self, monkeypatch):
        """Missing variable gives a config without token"""
        monkeypatch.delenv("VIMEO_ACCESS_TOKEN", raising=False)

        config = BrokerConfig.from_env()

        assert config.access_token is None
        assert config.has_token is False

    def test_repr_hides_token(self, broker_config):
        """Token never appears in repr"""
        assert broker_config.access_token not in repr(broker_config)
        assert "set" in repr(broker_config)
