"""Tests for the Socket Mode transport."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from slack_sdk.socket_mode.request import SocketModeRequest

from solvook_bot.connectors.slack_connector.socket_mode import SocketModeListener
from solvook_bot.policy.workflow import TASK_MODAL_ID
from tests.conftest import SlackPayloadFactory


class FakeSocketModeClient:
    def __init__(self):
        self.socket_mode_request_listeners = []
        self.send_socket_mode_response = AsyncMock()
        self.connect = AsyncMock()
        self.disconnect = AsyncMock()
        self.close = AsyncMock()


@pytest.fixture
def socket_client():
    return FakeSocketModeClient()


@pytest.fixture
def listener(dispatcher, socket_client):
    return SocketModeListener("xapp-test", dispatcher, client=socket_client)


class TestSocketModeListener:

    def test_registers_itself(self, listener, socket_client):
        assert socket_client.socket_mode_request_listeners == [listener.handle]

    @pytest.mark.asyncio
    async def test_slash_command_is_acknowledged_then_processed(self, listener, socket_client, dispatcher, adapter):
        request = SocketModeRequest(
            type="slash_commands", envelope_id="env-1", payload=SlackPayloadFactory.slash_command("/hello", user="U1")
        )

        await listener.handle(socket_client, request)

        response = socket_client.send_socket_mode_response.await_args.args[0]
        assert response.envelope_id == "env-1"
        assert response.payload is None

        await dispatcher.runner.drain()
        assert len(adapter.executed) == 1
        assert "U1" in adapter.executed[0].text

    @pytest.mark.asyncio
    async def test_acknowledgment_body_is_sent(self, listener, socket_client):
        state = {"task_title": {"title_input": {"type": "plain_text_input", "value": "Ship"}}}
        request = SocketModeRequest(
            type="interactive", envelope_id="env-2", payload=SlackPayloadFactory.view_submission(TASK_MODAL_ID, state)
        )

        await listener.handle(socket_client, request)

        response = socket_client.send_socket_mode_response.await_args.args[0]
        assert response.payload["response_action"] == "update"

    @pytest.mark.asyncio
    async def test_other_envelopes_are_acknowledged_only(self, listener, socket_client, adapter):
        request = SocketModeRequest(type="hello", envelope_id="env-3", payload={})

        await listener.handle(socket_client, request)

        socket_client.send_socket_mode_response.assert_awaited_once()
        assert adapter.executed == []

    @pytest.mark.asyncio
    async def test_start_and_stop(self, listener, socket_client):
        serving = asyncio.ensure_future(listener.start())
        await asyncio.sleep(0)

        await listener.stop()
        await asyncio.wait_for(serving, timeout=1)

        socket_client.connect.assert_awaited_once()
        socket_client.disconnect.assert_awaited_once()
        socket_client.close.assert_awaited_once()
