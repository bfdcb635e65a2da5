"""
Solvook Bot: Main Application Entry Point

This module wires the bot together: it connects to Slack, builds the
dispatcher with its handler table, lookup cache and task runner, and serves
deliveries either over HTTP (FastAPI + uvicorn) or over Socket Mode when an
app-level token is configured.
"""

import asyncio
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from slack_sdk.signature import SignatureVerifier

from solvook_bot import __version__
from solvook_bot.api import routers
from solvook_bot.connectors.platform_adapter import PlatformAdapter
from solvook_bot.connectors.slack_connector.slack_client import SlackConnector
from solvook_bot.connectors.slack_connector.socket_mode import SocketModeListener
from solvook_bot.dispatch import Directory, Dispatcher, InMemoryLRUCache, TaskRunner
from solvook_bot.errors import BotError, ConfigurationError
from solvook_bot.handlers import build_handler_table
from solvook_bot.utils.config import Config, load_config
from solvook_bot.utils.logger import configure_logging, setup_logger

# Initialize logger
logger = setup_logger(__name__)

# Seconds to wait for in-flight processing on shutdown
SHUTDOWN_GRACE = 10.0


def build_dispatcher(config: Config, adapter: PlatformAdapter) -> Dispatcher:
    """
    Build the dispatcher and its collaborators.

    Args:
        config: Application configuration
        adapter: Connected platform adapter

    Returns:
        Dispatcher: Ready to receive deliveries
    """
    cache = InMemoryLRUCache(max_size=config.lookup_cache_size, ttl=config.lookup_cache_ttl)
    return Dispatcher(
        adapter=adapter,
        handlers=build_handler_table(),
        directory=Directory(adapter, cache),
        runner=TaskRunner(),
    )


async def connect(adapter: PlatformAdapter) -> None:
    """Initialize the adapter, raising if Slack rejects the credentials."""
    if not await adapter.initialize():
        raise BotError(f"Could not connect to {adapter.platform_name}")
    logger.info(f"Connected to {adapter.platform_name} as {adapter.bot_user_id}")


def create_app(config: Optional[Config] = None, adapter: Optional[PlatformAdapter] = None) -> FastAPI:
    """
    Create the FastAPI application serving Slack deliveries over HTTP.

    Args:
        config: Application configuration, loaded from the environment if omitted
        adapter: Platform adapter, a SlackConnector if omitted

    Returns:
        FastAPI: The application
    """
    config = config or load_config()
    adapter = adapter or SlackConnector(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Connect on startup; finish in-flight work and disconnect on shutdown.
        """
        await connect(adapter)
        dispatcher = build_dispatcher(config, adapter)

        app.state.config = config
        app.state.adapter = adapter
        app.state.dispatcher = dispatcher
        app.state.runner = dispatcher.runner
        app.state.signature_verifier = SignatureVerifier(config.slack_signing_secret)

        logger.info("Application started successfully")
        try:
            yield
        finally:
            await dispatcher.runner.drain(timeout=SHUTDOWN_GRACE)
            await adapter.close()
            logger.info("Application shutdown complete")

    app = FastAPI(
        title=config.app_name,
        description="Slack bot answering commands, mentions, buttons, shortcuts and modals",
        version=__version__,
        lifespan=lifespan,
    )

    for router in routers:
        app.include_router(router)

    return app


async def serve_socket_mode(config: Config, adapter: Optional[SlackConnector] = None) -> None:
    """
    Serve deliveries over Socket Mode until cancelled.

    Args:
        config: Application configuration with an app-level token
        adapter: Slack connector, created from ``config`` if omitted
    """
    adapter = adapter or SlackConnector(config)
    await connect(adapter)
    dispatcher = build_dispatcher(config, adapter)
    listener = SocketModeListener(config.slack_app_token, dispatcher, web_client=adapter.client)

    try:
        await listener.start()
    finally:
        await listener.stop()
        await dispatcher.runner.drain(timeout=SHUTDOWN_GRACE)
        await adapter.close()
        logger.info("Socket Mode shutdown complete")


def run() -> None:
    """Console entry point."""
    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(f"Failed to start application: {e}")
        sys.exit(1)

    configure_logging(config)

    try:
        if config.socket_mode:
            logger.info("Starting in Socket Mode")
            asyncio.run(serve_socket_mode(config))
        else:
            import uvicorn

            logger.info(f"Starting HTTP server on {config.host}:{config.port}")
            uvicorn.run(create_app(config), host=config.host, port=config.port)
    except BotError as e:
        logger.error(f"Failed to start application: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    run()
