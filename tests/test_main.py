"""Tests for the application entry points."""

import pytest

from solvook_bot import main
from solvook_bot.errors import BotError
from solvook_bot.utils.config import Config
from tests.conftest import FakeAdapter


class RecordingListener:
    """Stands in for SocketModeListener; returns from start() immediately."""

    instances = []

    def __init__(self, app_token, dispatcher, web_client=None, client=None):
        self.app_token = app_token
        self.dispatcher = dispatcher
        self.web_client = web_client
        self.started = False
        self.stopped = False
        RecordingListener.instances.append(self)

    async def start(self):
        self.started = True

    async def stop(self):
        self.stopped = True


class RejectedAdapter(FakeAdapter):
    async def initialize(self) -> bool:
        return False


@pytest.fixture
def socket_config():
    return Config(slack_bot_token="xoxb-test", slack_signing_secret="test-secret", slack_app_token="xapp-test")


@pytest.fixture
def recording_listener(monkeypatch):
    RecordingListener.instances = []
    monkeypatch.setattr(main, "SocketModeListener", RecordingListener)
    return RecordingListener


class TestServeSocketMode:

    @pytest.mark.asyncio
    async def test_connects_listens_and_shuts_down(self, socket_config, recording_listener):
        adapter = FakeAdapter()
        adapter.client = object()

        await main.serve_socket_mode(socket_config, adapter)

        [listener] = recording_listener.instances
        assert listener.app_token == "xapp-test"
        assert listener.web_client is adapter.client
        assert listener.started and listener.stopped
        assert listener.dispatcher.runner.pending == 0
        assert adapter.closed

    @pytest.mark.asyncio
    async def test_rejected_credentials(self, socket_config, recording_listener):
        with pytest.raises(BotError):
            await main.serve_socket_mode(socket_config, RejectedAdapter())

        assert recording_listener.instances == []


class TestRun:

    def test_missing_tokens_exit_with_status_one(self, monkeypatch):
        for name in ("SLACK_BOT_TOKEN", "SLACK_SIGNING_SECRET", "SLACK_APP_TOKEN"):
            monkeypatch.delenv(name, raising=False)

        with pytest.raises(SystemExit) as exc_info:
            main.run()

        assert exc_info.value.code == 1

    def test_app_token_selects_socket_mode(self, monkeypatch):
        monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-test")
        monkeypatch.setenv("SLACK_SIGNING_SECRET", "test-secret")
        monkeypatch.setenv("SLACK_APP_TOKEN", "xapp-test")
        served = []

        async def fake_serve(config, adapter=None):
            served.append(config)

        monkeypatch.setattr(main, "serve_socket_mode", fake_serve)

        main.run()

        assert served[0].socket_mode is True

    def test_failed_connection_exits_with_status_one(self, monkeypatch):
        monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-test")
        monkeypatch.setenv("SLACK_SIGNING_SECRET", "test-secret")
        monkeypatch.setenv("SLACK_APP_TOKEN", "xapp-test")

        async def failing_serve(config, adapter=None):
            raise BotError("Could not connect to slack")

        monkeypatch.setattr(main, "serve_socket_mode", failing_serve)

        with pytest.raises(SystemExit) as exc_info:
            main.run()

        assert exc_info.value.code == 1
