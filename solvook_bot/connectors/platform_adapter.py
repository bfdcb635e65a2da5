"""
Platform Adapter Module

This module defines the common interface for the platform connector used by
the Solvook Bot. The adapter is the Action Executor: it performs one outbound
action per call, and it answers the read-only lookups (user and channel
metadata) that some responses need.
"""

import abc
import enum
import time
import uuid
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from solvook_bot.policy.actions import ActionKind, OutboundAction


class ActionStatus(str, enum.Enum):
    """Status of an action performed on a platform."""
    SUCCESS = "success"
    FAILURE = "failure"
    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    INVALID_REQUEST = "invalid_request"


class ActionContext(BaseModel):
    """Who and what an outbound action answers, carried through to its result."""
    action_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8], description="Short id tagging log lines")
    user_id: Optional[str] = Field(None, description="User whose event triggered the action")
    category: Optional[str] = Field(None, description="Category of the triggering event")


class ActionResult(BaseModel):
    """Result of an action performed on a platform."""
    status: ActionStatus = Field(..., description="Status of the action")
    data: Optional[Any] = Field(None, description="Data returned by the action")
    error_message: Optional[str] = Field(None, description="Error message if action failed")
    platform: str = Field(..., description="Platform the action was performed on")
    action_type: ActionKind = Field(..., description="Type of action performed")
    context: ActionContext = Field(..., description="Context of the action")
    timestamp: float = Field(default_factory=time.time, description="When the result was generated")

    def is_success(self) -> bool:
        """Check if the action was successful."""
        return self.status == ActionStatus.SUCCESS


class UserProfile(BaseModel):
    """The subset of ``users.info`` the bot uses."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    real_name: Optional[str] = None


class ChannelSummary(BaseModel):
    """The subset of ``conversations.info`` the bot uses."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    created: Optional[int] = None
    purpose: Optional[str] = None
    topic: Optional[str] = None


class PlatformAdapter(abc.ABC):
    """
    Abstract base class for platform connectors.

    Each connector translates the bot's outbound actions into platform API
    calls. ``execute`` never raises for platform errors; failures come back as
    an ``ActionResult`` with a non-success status.
    """

    @property
    @abc.abstractmethod
    def platform_name(self) -> str:
        """Get the name of the platform."""
        pass

    @property
    @abc.abstractmethod
    def bot_user_id(self) -> Optional[str]:
        """The bot's own user id, known once the connector is initialized."""
        pass

    @abc.abstractmethod
    async def initialize(self) -> bool:
        """
        Initialize the connector.

        Returns:
            bool: True if initialization was successful, False otherwise
        """
        pass

    @abc.abstractmethod
    async def close(self) -> None:
        """Close the connector and clean up resources."""
        pass

    @abc.abstractmethod
    async def is_connected(self) -> bool:
        """
        Check if the connector is connected to the platform.

        Returns:
            bool: True if connected, False otherwise
        """
        pass

    @abc.abstractmethod
    async def execute(self, action: OutboundAction, context: ActionContext) -> ActionResult:
        """
        Perform exactly one outbound action.

        Args:
            action: The action to perform
            context: Context for the action

        Returns:
            ActionResult: Result of the action
        """
        pass

    @abc.abstractmethod
    async def fetch_user(self, user_id: str) -> UserProfile:
        """Look up a user's profile."""
        pass

    @abc.abstractmethod
    async def fetch_channel(self, channel_id: str) -> ChannelSummary:
        """Look up a channel's metadata."""
        pass

    @abc.abstractmethod
    async def fetch_member_count(self, channel_id: str) -> int:
        """Count the members of a channel."""
        pass
