"""
Tests for the HTTP surface: /webhook (TwiML), /intent, /health, /test-api.

The app is built with create_app() around a PatrolAPIClient that talks
to the fake guard-tour API, so every request runs the real classifier,
service, client and formatter.
"""

import xml.etree.ElementTree as ET
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from askari.ai.intent import PatternIntentClassifier
from askari.core.config import Settings
from askari.environments.guardtour.auth import StaticTokenAuth
from askari.environments.guardtour.client import PatrolAPIClient
from askari.main import create_app
from askari.routers.webhook import FALLBACK_REPLY, sanitize_for_xml

from conftest import ATOM_SITE, BASE_URL, make_jwt


@pytest.fixture
def settings(tmp_path):
    return Settings(
        SERVICE_NAME="Askari WhatsApp Integration",
        TOKEN_FILE_PATH=str(tmp_path / "auth_token.json"),
        STARTUP_CONNECTION_CHECK=False,
    )


@pytest.fixture
def patrol_client(fake_api):
    return PatrolAPIClient(
        base_url=BASE_URL,
        auth=StaticTokenAuth(make_jwt()),
        transport=fake_api.transport,
    )


@pytest.fixture
def http(settings, patrol_client):
    app = create_app(settings=settings, patrol_client=patrol_client, classifier=PatternIntentClassifier())
    with TestClient(app) as test_client:
        yield test_client


def twiml_messages(response) -> list:
    root = ET.fromstring(response.text)
    assert root.tag == "Response"
    return [message.text for message in root.findall("Message")]


# ===========================================================================
# WEBHOOK
# ===========================================================================

class TestWebhook:

    def test_site_info_form_request(self, http, fake_api):
        fake_api.add("GET", "/sites", [ATOM_SITE])
        fake_api.add("GET", "/sites/7", ATOM_SITE)

        response = http.post("/webhook", data={"Body": "Tell me about site Atom", "From": "whatsapp:+256700000000"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/xml")
        messages = twiml_messages(response)
        assert len(messages) == 1
        assert "*Name:* Atom" in messages[0]
        assert "🏢" in messages[0]

    def test_site_not_found(self, http, fake_api):
        fake_api.add("GET", "/sites", [])

        response = http.post("/webhook", data={"Body": "Tell me about site Atom", "From": "whatsapp:+1"})

        assert twiml_messages(response) == [
            'Site "Atom" not found. Please check the site name and try again.'
        ]

    def test_json_request(self, http):
        response = http.post("/webhook", json={"Body": "help", "From": "tester"})

        messages = twiml_messages(response)
        assert messages[0].startswith("🤖 *Askari WhatsApp Assistant*")

    def test_api_failure_is_friendly(self, http, fake_api):
        fake_api.add("GET", "/stats", status_code=500)

        response = http.post("/webhook", data={"Body": "system stats"})

        assert twiml_messages(response) == [
            "❌ Sorry, I couldn't fetch system statistics. "
            "Failed to fetch system statistics. Please try again."
        ]

    def test_markup_characters_are_escaped(self, http, fake_api):
        fake_api.add("GET", "/sites", [{"id": 1, "name": "Smith & Sons <HQ>"}])

        response = http.post("/webhook", data={"Body": "list all sites"})

        assert "&amp;" in response.text
        assert twiml_messages(response) == ["🏢 *All Sites:*\n\n1. Smith & Sons <HQ>"]

    def test_unexpected_error_returns_fallback(self, settings, patrol_client):
        classifier = PatternIntentClassifier()
        classifier.classify = AsyncMock(side_effect=RuntimeError("boom"))
        app = create_app(settings=settings, patrol_client=patrol_client, classifier=classifier)

        with TestClient(app) as http:
            response = http.post("/webhook", data={"Body": "anything"})

        assert response.status_code == 200
        assert twiml_messages(response) == [FALLBACK_REPLY]

    def test_empty_body(self, http):
        response = http.post("/webhook", data={})

        assert response.status_code == 200
        assert len(twiml_messages(response)) == 1


def test_sanitize_for_xml_keeps_emoji_and_drops_control_chars():
    assert sanitize_for_xml("ok ✅\x00\x08 done\n") == "ok ✅ done\n"


# ===========================================================================
# INTENT / HEALTH / TEST-API
# ===========================================================================

class TestJSONEndpoints:

    def test_intent_endpoint(self, http, fake_api):
        fake_api.add("GET", "/sites", [ATOM_SITE])

        response = http.post("/intent", json={"text": "list all sites"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["intent"] == "list_sites"
        assert body["intent_type"] == "query"
        assert "1. Atom (active)" in body["message"]
        assert body["data"]["count"] == 1
        assert body["request_id"]

    def test_intent_endpoint_rejects_empty_text(self, http):
        response = http.post("/intent", json={"text": ""})
        assert response.status_code == 422

    def test_health(self, http):
        response = http.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "Askari WhatsApp Integration"
        assert body["timestamp"].endswith("Z")

    def test_test_api_success(self, http, fake_api):
        fake_api.add("GET", "/stats", {"totalSites": 1})

        response = http.get("/test-api")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "API connection successful"}

    def test_test_api_failure(self, http, fake_api):
        fake_api.add("GET", "/stats", status_code=503)

        response = http.get("/test-api")

        assert response.status_code == 500
        assert response.json()["success"] is False
