"""
Solvook Bot API package.

HTTP routers mounted by the application: the Slack delivery endpoints and
health check functionality.
"""

from solvook_bot.api.health_check import router as health_check_router
from solvook_bot.connectors.slack_connector.event_handler import router as slack_router

# List of all routers to be included in the application
routers = [
    slack_router,
    health_check_router,
]

__all__ = [
    "health_check_router",
    "slack_router",
    "routers",
]
