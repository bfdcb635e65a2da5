"""
Slack Connector Package

This package provides integration with the Slack platform for the Solvook Bot.

The main components are:
- SlackConnector: Implementation of the PlatformAdapter for Slack
- event_handler: FastAPI routes for receiving Slack deliveries over HTTP
- socket_mode: Socket Mode listener used when an app-level token is configured
"""

from solvook_bot.connectors.slack_connector.slack_client import SlackConnector

__all__ = ["SlackConnector"]
