"""Tests for the HTTP transport and the application wiring."""

import json
import time
from urllib.parse import urlencode

import pytest
from fastapi.testclient import TestClient
from slack_sdk.signature import SignatureVerifier

from solvook_bot.main import create_app
from solvook_bot.policy.actions import AddReaction, PostMessage
from solvook_bot.policy.workflow import TASK_MODAL_ID
from tests.conftest import FakeAdapter, SlackPayloadFactory

SIGNING_SECRET = "test-secret"
FORM = "application/x-www-form-urlencoded"


def signed_headers(body: bytes, content_type: str, timestamp: int = None):
    timestamp = str(timestamp if timestamp is not None else int(time.time()))
    signature = SignatureVerifier(SIGNING_SECRET).generate_signature(timestamp=timestamp, body=body)
    return {
        "Content-Type": content_type,
        "X-Slack-Request-Timestamp": timestamp,
        "X-Slack-Signature": signature,
    }


def post_signed(client, path, body: bytes, content_type: str):
    return client.post(path, content=body, headers=signed_headers(body, content_type))


@pytest.fixture
def app(config, adapter):
    return create_app(config, adapter=adapter)


class TestSlackEvents:

    def test_url_verification(self, app):
        body = json.dumps({"type": "url_verification", "challenge": "abc123"}).encode()

        with TestClient(app) as client:
            response = post_signed(client, "/slack/events", body, "application/json")

        assert response.status_code == 200
        assert response.json() == {"challenge": "abc123"}

    def test_bad_signature_is_rejected(self, app, adapter):
        body = json.dumps(SlackPayloadFactory.message(text="urgent")).encode()
        headers = signed_headers(body, "application/json")
        headers["X-Slack-Signature"] = "v0=deadbeef"

        with TestClient(app) as client:
            response = client.post("/slack/events", content=body, headers=headers)

        assert response.status_code == 401
        assert adapter.executed == []

    def test_stale_timestamp_is_rejected(self, app):
        body = json.dumps(SlackPayloadFactory.message(text="urgent")).encode()
        headers = signed_headers(body, "application/json", timestamp=int(time.time()) - 3600)

        with TestClient(app) as client:
            response = client.post("/slack/events", content=body, headers=headers)

        assert response.status_code == 401

    def test_invalid_json(self, app):
        with TestClient(app) as client:
            response = post_signed(client, "/slack/events", b"{not json", "application/json")

        assert response.status_code == 400

    def test_event_is_acknowledged_then_processed(self, app, adapter):
        body = json.dumps(SlackPayloadFactory.message(text="urgent please", channel="C1")).encode()

        with TestClient(app) as client:
            response = post_signed(client, "/slack/events", body, "application/json")
            assert response.status_code == 200
            assert response.content == b""

        # Shutdown waits for deferred processing
        assert len(adapter.executed) == 2
        assert all(isinstance(action, AddReaction) for action in adapter.executed)


class TestSlashCommands:

    def test_command_is_acknowledged_then_answered(self, app, adapter):
        body = urlencode(SlackPayloadFactory.slash_command("/hello", user="U1")).encode()

        with TestClient(app) as client:
            response = post_signed(client, "/slack/commands", body, FORM)
            assert response.status_code == 200

        assert len(adapter.executed) == 1
        assert isinstance(adapter.executed[0], PostMessage)
        assert "U1" in adapter.executed[0].text

    def test_missing_command(self, app):
        body = urlencode({"user_id": "U1"}).encode()

        with TestClient(app) as client:
            response = post_signed(client, "/slack/commands", body, FORM)

        assert response.status_code == 400


class TestInteractions:

    def test_modal_step_one_answers_in_the_response(self, app, adapter):
        state = {"task_title": {"title_input": {"type": "plain_text_input", "value": ""}}}
        payload = SlackPayloadFactory.view_submission(TASK_MODAL_ID, state)
        body = urlencode({"payload": json.dumps(payload)}).encode()

        with TestClient(app) as client:
            response = post_signed(client, "/slack/interactions", body, FORM)

        assert response.status_code == 200
        assert response.json()["response_action"] == "errors"
        assert adapter.executed == []

    def test_button_click_is_acknowledged_empty(self, app, adapter):
        body = urlencode({"payload": json.dumps(SlackPayloadFactory.button("view_help"))}).encode()

        with TestClient(app) as client:
            response = post_signed(client, "/slack/interactions", body, FORM)
            assert response.status_code == 200
            assert response.content == b""

        assert adapter.executed[0].kind.value == "open_modal"

    def test_missing_payload(self, app):
        body = urlencode({"nothing": "here"}).encode()

        with TestClient(app) as client:
            response = post_signed(client, "/slack/interactions", body, FORM)

        assert response.status_code == 400

    def test_invalid_payload(self, app):
        body = urlencode({"payload": "{oops"}).encode()

        with TestClient(app) as client:
            response = post_signed(client, "/slack/interactions", body, FORM)

        assert response.status_code == 400


class TestApplication:

    def test_health(self, app):
        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["slack"]["bot_user_id"] == "UBOT"
        assert data["components"]["tasks"]["failures"] == 0

    def test_ping(self, app):
        with TestClient(app) as client:
            assert client.get("/ping").json() == {"ping": "pong"}

    def test_lifespan_connects_and_closes(self, app, adapter):
        with TestClient(app):
            assert adapter.connected is True

        assert adapter.closed is True

    def test_failed_connection_aborts_startup(self, config):
        class RejectedAdapter(FakeAdapter):
            async def initialize(self) -> bool:
                return False

        app = create_app(config, adapter=RejectedAdapter())

        with pytest.raises(Exception):
            with TestClient(app):
                pass
