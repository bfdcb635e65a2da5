"""
Directory Module

Read-only user and channel lookups for handlers, served through an injected
``LookupCache`` in front of the platform adapter.
"""

from typing import Optional

from solvook_bot.connectors.platform_adapter import ChannelSummary, PlatformAdapter, UserProfile
from solvook_bot.dispatch.cache import LookupCache
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)


class Directory:
    """Cached metadata lookups."""

    def __init__(self, adapter: PlatformAdapter, cache: LookupCache):
        self.adapter = adapter
        self.cache = cache

    async def user(self, user_id: Optional[str]) -> Optional[UserProfile]:
        """
        Resolve a user's profile.

        Args:
            user_id: Slack user id

        Returns:
            Optional[UserProfile]: The profile, or None if no id was given

        Raises:
            SlackApiError: If the platform lookup fails
        """
        if not user_id:
            return None

        key = ("user", user_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        logger.debug(f"Looking up user {user_id}")
        profile = await self.adapter.fetch_user(user_id)
        self.cache.set(key, profile)
        return profile

    async def channel(self, channel_id: Optional[str]) -> Optional[ChannelSummary]:
        """
        Resolve a channel's metadata.

        Raises:
            SlackApiError: If the platform lookup fails
        """
        if not channel_id:
            return None

        key = ("channel", channel_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        logger.debug(f"Looking up channel {channel_id}")
        summary = await self.adapter.fetch_channel(channel_id)
        self.cache.set(key, summary)
        return summary

    async def member_count(self, channel_id: str) -> int:
        """Member counts change often and are never cached."""
        return await self.adapter.fetch_member_count(channel_id)
