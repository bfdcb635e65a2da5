"""
Socket Mode transport.

Used instead of the HTTP routes when an app-level token is configured. Every
envelope is handed to the dispatcher and acknowledged on the socket with the
dispatcher's acknowledgment body.
"""

import asyncio
from typing import Optional

from slack_sdk.socket_mode.aiohttp import SocketModeClient
from slack_sdk.socket_mode.request import SocketModeRequest
from slack_sdk.socket_mode.response import SocketModeResponse
from slack_sdk.web.async_client import AsyncWebClient

from solvook_bot.dispatch.dispatcher import Dispatcher
from solvook_bot.events.classifier import EVENTS_API, INTERACTIVE, SLASH_COMMANDS
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)

DISPATCHED_TYPES = frozenset({EVENTS_API, SLASH_COMMANDS, INTERACTIVE})


class SocketModeListener:
    """Receives Slack envelopes over a Socket Mode connection."""

    def __init__(
        self,
        app_token: str,
        dispatcher: Dispatcher,
        web_client: Optional[AsyncWebClient] = None,
        client: Optional[SocketModeClient] = None,
    ):
        """
        Initialize the listener.

        Args:
            app_token: App-level token (``xapp-…``)
            dispatcher: Dispatcher that receives every envelope
            web_client: Web client shared with the connector
            client: Optional pre-built Socket Mode client (used by tests)
        """
        self.dispatcher = dispatcher
        self.client = client or SocketModeClient(app_token=app_token, web_client=web_client)
        self.client.socket_mode_request_listeners.append(self.handle)
        self._stopped = asyncio.Event()

    async def handle(self, client: SocketModeClient, req: SocketModeRequest) -> None:
        """
        Acknowledge one envelope, scheduling its processing first.

        Args:
            client: The Socket Mode client that received the envelope
            req: The envelope
        """
        ack = None
        if req.type in DISPATCHED_TYPES:
            ack = self.dispatcher.dispatch(req.type, req.payload)
        else:
            logger.debug(f"Ignoring Socket Mode envelope type: {req.type}")

        await client.send_socket_mode_response(SocketModeResponse(envelope_id=req.envelope_id, payload=ack))

    async def start(self) -> None:
        """Connect and serve until ``stop`` is called."""
        await self.client.connect()
        logger.info("Connected to Slack over Socket Mode")
        await self._stopped.wait()

    async def stop(self) -> None:
        """Disconnect from Slack."""
        self._stopped.set()
        await self.client.disconnect()
        await self.client.close()
        logger.info("Socket Mode connection closed")
