"""
Broker HTTP API Tests

Tests cover:
1. POST /api/vimeo/create-upload success body
2. Status mapping (missing token, provider errors, invalid body, crashes)
3. Token read at request time and never leaked
4. GET /health
"""

import pytest
from fastapi.testclient import TestClient

from broker.api import create_app
from broker.models import BrokerConfig

ENDPOINT = "/api/vimeo/create-upload"

REQUEST_BODY = {
    "fileName": "match.mp4",
    "fileSize": 10_485_760,
    "fileType": "video/mp4",
}


@pytest.fixture
def api_client(fake_vimeo, broker_config):
    """TestClient for a broker with a test token and fake Vimeo API"""
    app = create_app(
        config_loader=lambda: broker_config,
        http_client=fake_vimeo.client(),
    )
    return TestClient(app)


# =============================================================================
# SUCCESS
# =============================================================================


class TestCreateUploadEndpoint:
    """Test the create-upload endpoint"""

    def test_success(self, api_client):
        """200 with only uploadUrl, videoUri and videoId"""
        response = api_client.post(ENDPOINT, json=REQUEST_BODY)

        assert response.status_code == 200
        assert response.json() == {
            "uploadUrl": "https://files.vimeo.com/x",
            "videoUri": "/videos/123456789",
            "videoId": "123456789",
        }

    def test_forwards_file_metadata(self, api_client, fake_vimeo):
        """File name and size reach the Vimeo request"""
        api_client.post(ENDPOINT, json=REQUEST_BODY)

        payload = fake_vimeo.last_json
        assert payload["name"] == "match.mp4"
        assert payload["upload"]["size"] == 10_485_760

    def test_token_not_leaked(self, api_client, broker_config):
        """Response never contains the token"""
        response = api_client.post(ENDPOINT, json=REQUEST_BODY)

        assert broker_config.access_token not in response.text

    def test_token_read_at_request_time(self, fake_vimeo, monkeypatch):
        """Token set after app creation is picked up by the next request"""
        monkeypatch.delenv("VIMEO_ACCESS_TOKEN", raising=False)
        client = TestClient(create_app(http_client=fake_vimeo.client()))

        assert client.post(ENDPOINT, json=REQUEST_BODY).status_code == 500

        monkeypatch.setenv("VIMEO_ACCESS_TOKEN", "late-token")

        assert client.post(ENDPOINT, json=REQUEST_BODY).status_code == 200


# =============================================================================
# ERRORS
# =============================================================================


class TestCreateUploadErrors:
    """Test error responses"""

    def test_missing_token(self, fake_vimeo):
        """500 with error message and no outbound call"""
        app = create_app(
            config_loader=lambda: BrokerConfig(access_token=None),
            http_client=fake_vimeo.client(),
        )
        client = TestClient(app)

        response = client.post(ENDPOINT, json=REQUEST_BODY)

        assert response.status_code == 500
        assert response.json()["error"]
        assert fake_vimeo.requests == []

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404, 429, 500, 503])
    def test_provider_status_passthrough(self, api_client, fake_vimeo, status_code):
        """Response status equals Vimeo's status, body has an error string"""
        fake_vimeo.status_code = status_code
        fake_vimeo.body = {"error": "Rejected by Vimeo"}

        response = api_client.post(ENDPOINT, json=REQUEST_BODY)

        assert response.status_code == status_code
        assert response.json() == {"error": "Vimeo API error: Rejected by Vimeo"}

    def test_invalid_body(self, api_client, fake_vimeo):
        """Missing fields rejected with 400 before calling Vimeo"""
        response = api_client.post(ENDPOINT, json={"fileName": "match.mp4"})

        assert response.status_code == 400
        assert "fileSize" in response.json()["error"]
        assert fake_vimeo.requests == []

    def test_negative_size(self, api_client):
        """Negative file size rejected"""
        body = dict(REQUEST_BODY, fileSize=-1)

        response = api_client.post(ENDPOINT, json=body)

        assert response.status_code == 400
        assert response.json()["error"]

    def test_null_upload_link(self, fake_vimeo, broker_config):
        """Unusable Vimeo success body still answers with a JSON error"""
        fake_vimeo.status_code = 201
        fake_vimeo.body = {"upload": {"upload_link": None}, "uri": "/videos/1"}
        app = create_app(
            config_loader=lambda: broker_config,
            http_client=fake_vimeo.client(),
        )
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post(ENDPOINT, json=REQUEST_BODY)

        assert response.status_code == 502
        assert response.json() == {"error": "Unexpected response from Vimeo API"}

    def test_unexpected_error(self):
        """Crash inside the broker becomes 500 "Server error" """

        class ExplodingBroker:
            def create_upload_session(self, request):
                raise RuntimeError("disk on fire")

        client = TestClient(create_app(broker_factory=ExplodingBroker))

        response = client.post(ENDPOINT, json=REQUEST_BODY)

        assert response.status_code == 500
        assert response.json() == {"error": "Server error: disk on fire"}


# =============================================================================
# HEALTH
# =============================================================================


class TestHealth:
    """Test health endpoint"""

    def test_health_with_token(self, api_client, broker_config):
        """Reports token presence, never the token"""
        response = api_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "token_configured": True}
        assert broker_config.access_token not in response.text

    def test_health_without_token(self):
        """Broker stays up without a token"""
        client = TestClient(create_app(config_loader=lambda: BrokerConfig()))

        assert client.get("/health").json()["token_configured"] is False
