"""
Solvook Bot Connectors Package

This package provides the platform connector the bot uses to talk to Slack.
It includes the common platform adapter interface and the Slack implementation.

The connector is responsible for:
1. Authenticating with the platform
2. Performing outbound actions, one API call each
3. Answering user and channel metadata lookups
4. Receiving deliveries over HTTP or Socket Mode
"""

from solvook_bot.connectors.platform_adapter import (
    ActionContext,
    ActionResult,
    ActionStatus,
    ChannelSummary,
    PlatformAdapter,
    UserProfile,
)
from solvook_bot.connectors.slack_connector.slack_client import SlackConnector

__all__ = [
    "ActionContext",
    "ActionResult",
    "ActionStatus",
    "ChannelSummary",
    "PlatformAdapter",
    "UserProfile",
    "SlackConnector",
]
