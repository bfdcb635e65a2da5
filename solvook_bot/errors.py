"""
Error types for the Solvook Bot.

External API failures are not represented here: they surface as
``slack_sdk.errors.SlackApiError`` inside the connector and are converted into
``ActionResult`` statuses there.
"""

from typing import List, Optional


class BotError(Exception):
    """Base class for all bot errors."""


class ConfigurationError(BotError):
    """Raised when the process configuration is unusable (startup-fatal)."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class ActionValidationError(BotError):
    """Raised when an outbound action cannot be built from the given fields."""
