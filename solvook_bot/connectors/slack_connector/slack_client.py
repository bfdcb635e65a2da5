"""
Slack Connector Module

This module provides the connector for interacting with the Slack platform.
It implements the PlatformAdapter interface: every outbound action maps to
exactly one Slack Web API call, and Slack errors are translated into
``ActionResult`` statuses instead of being raised.
"""

from typing import Any, Awaitable, Callable, Dict, Optional

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from solvook_bot.connectors.platform_adapter import (
    ActionContext,
    ActionResult,
    ActionStatus,
    ChannelSummary,
    PlatformAdapter,
    UserProfile,
)
from solvook_bot.policy.actions import (
    ActionKind,
    AddReaction,
    OpenModal,
    OutboundAction,
    PostEphemeral,
    PostMessage,
    UpdateMessage,
    UpdateModal,
)
from solvook_bot.utils.config import Config
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)

# Page size used when counting channel members
MEMBERS_PAGE_SIZE = 1000


class SlackConnector(PlatformAdapter):
    """
    Slack connector for the Solvook Bot.

    This class implements the PlatformAdapter interface for the Slack platform
    on top of ``slack_sdk``'s ``AsyncWebClient``.
    """

    def __init__(self, config: Config, client: Optional[AsyncWebClient] = None):
        """
        Initialize the Slack connector.

        Args:
            config: Application configuration containing Slack credentials
            client: Optional pre-built web client (used by tests)
        """
        self.config = config
        self.token = config.slack_bot_token
        self.client = client
        self._connected = False
        self._bot_user_id: Optional[str] = None

        # Exactly one Web API call per action kind
        self._executors: Dict[ActionKind, Callable[[Any], Awaitable[Any]]] = {
            ActionKind.POST_MESSAGE: self._post_message,
            ActionKind.UPDATE_MESSAGE: self._update_message,
            ActionKind.ADD_REACTION: self._add_reaction,
            ActionKind.OPEN_MODAL: self._open_modal,
            ActionKind.UPDATE_MODAL: self._update_modal,
            ActionKind.POST_EPHEMERAL: self._post_ephemeral,
        }

        logger.info("Slack connector initialized")

    @property
    def platform_name(self) -> str:
        """Get the name of the platform."""
        return "slack"

    @property
    def bot_user_id(self) -> Optional[str]:
        return self._bot_user_id

    async def initialize(self) -> bool:
        """
        Initialize the Slack connector.

        Returns:
            bool: True if initialization was successful, False otherwise
        """
        if not self.token:
            logger.error("Slack bot token not provided")
            return False

        try:
            if self.client is None:
                self.client = AsyncWebClient(token=self.token)

            # Test the connection and learn our own identity
            response = await self.client.auth_test()
            if response["ok"]:
                self._connected = True
                self._bot_user_id = response.get("user_id")
                logger.info(f"Connected to Slack as {response['user']} in workspace {response['team']}")
                return True
            else:
                logger.error(f"Failed to connect to Slack: {response}")
                return False
        except SlackApiError as e:
            logger.error(f"Error initializing Slack connector: {e.response['error']}")
            return False

    async def close(self) -> None:
        """Close the connector and clean up resources."""
        # The Slack SDK doesn't require explicit cleanup
        self._connected = False
        logger.info("Slack connector closed")

    async def is_connected(self) -> bool:
        """
        Check if the connector is connected to the platform.

        Returns:
            bool: True if connected, False otherwise
        """
        if not self._connected or not self.client:
            return False

        try:
            # Re-test the connection
            response = await self.client.auth_test()
            return response["ok"]
        except SlackApiError:
            self._connected = False
            return False

    async def execute(self, action: OutboundAction, context: ActionContext) -> ActionResult:
        """
        Perform one outbound action on Slack.

        Args:
            action: The action to perform
            context: Context for the action

        Returns:
            ActionResult: Result of the action
        """
        if not self._connected:
            return self._result(action, context, ActionStatus.UNAUTHORIZED, error_message="Not connected to Slack")

        executor = self._executors.get(action.kind)
        if executor is None:
            return self._result(
                action, context, ActionStatus.INVALID_REQUEST,
                error_message=f"Unsupported action type: {action.kind}",
            )

        try:
            response = await executor(action)
            return self._result(action, context, ActionStatus.SUCCESS, data=getattr(response, "data", response))
        except SlackApiError as e:
            # Handle Slack API errors
            error = e.response["error"]
            logger.warning(f"[{context.action_id}] Slack API error performing {action.kind.value}: {error}")
            if error == "ratelimited":
                retry_after = int(e.response.headers.get("Retry-After", 60))
                return self._result(
                    action, context, ActionStatus.RATE_LIMITED,
                    error_message=f"Rate limited by Slack. Retry after {retry_after} seconds.",
                    data={"retry_after": retry_after},
                )
            elif error in ("not_authed", "invalid_auth", "token_revoked"):
                self._connected = False
                return self._result(
                    action, context, ActionStatus.UNAUTHORIZED,
                    error_message="Not authenticated with Slack",
                )
            else:
                return self._result(
                    action, context, ActionStatus.FAILURE,
                    error_message=f"Slack API error: {error}",
                    data={"slack_error": error},
                )
        except Exception as e:
            logger.exception(f"[{context.action_id}] Error performing {action.kind.value} on Slack: {e}")
            return self._result(action, context, ActionStatus.FAILURE, error_message=str(e))

    def _result(
        self,
        action: OutboundAction,
        context: ActionContext,
        status: ActionStatus,
        error_message: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> ActionResult:
        return ActionResult(
            status=status,
            data=data,
            error_message=error_message,
            platform=self.platform_name,
            action_type=action.kind,
            context=context,
        )

    # Lookups

    async def fetch_user(self, user_id: str) -> UserProfile:
        """
        Look up a user's profile.

        Raises:
            SlackApiError: If the lookup fails
        """
        response = await self.client.users_info(user=user_id)
        user = response["user"]
        return UserProfile(
            id=user["id"],
            name=user.get("name"),
            real_name=user.get("real_name") or (user.get("profile") or {}).get("real_name"),
        )

    async def fetch_channel(self, channel_id: str) -> ChannelSummary:
        """
        Look up a channel's metadata.

        Raises:
            SlackApiError: If the lookup fails
        """
        response = await self.client.conversations_info(channel=channel_id)
        channel = response["channel"]
        return ChannelSummary(
            id=channel["id"],
            name=channel.get("name"),
            created=channel.get("created"),
            purpose=(channel.get("purpose") or {}).get("value") or None,
            topic=(channel.get("topic") or {}).get("value") or None,
        )

    async def fetch_member_count(self, channel_id: str) -> int:
        """
        Count the members of a channel, following pagination.

        Raises:
            SlackApiError: If the lookup fails
        """
        count = 0
        cursor: Optional[str] = None
        while True:
            params: Dict[str, Any] = {"channel": channel_id, "limit": MEMBERS_PAGE_SIZE}
            if cursor:
                params["cursor"] = cursor
            response = await self.client.conversations_members(**params)
            count += len(response.get("members") or [])
            cursor = (response.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                return count

    # Action implementations

    async def _post_message(self, action: PostMessage):
        message_params: Dict[str, Any] = {"channel": action.channel, "text": action.text}
        if action.thread_ts:
            message_params["thread_ts"] = action.thread_ts
        if action.blocks:
            message_params["blocks"] = action.blocks
        return await self.client.chat_postMessage(**message_params)

    async def _update_message(self, action: UpdateMessage):
        message_params: Dict[str, Any] = {"channel": action.channel, "ts": action.ts, "text": action.text}
        if action.blocks:
            message_params["blocks"] = action.blocks
        return await self.client.chat_update(**message_params)

    async def _add_reaction(self, action: AddReaction):
        return await self.client.reactions_add(
            channel=action.channel, timestamp=action.timestamp, name=action.name
        )

    async def _open_modal(self, action: OpenModal):
        return await self.client.views_open(trigger_id=action.trigger_id, view=action.view)

    async def _update_modal(self, action: UpdateModal):
        view_params: Dict[str, Any] = {"view_id": action.view_id, "view": action.view}
        if action.hash:
            view_params["hash"] = action.hash
        return await self.client.views_update(**view_params)

    async def _post_ephemeral(self, action: PostEphemeral):
        message_params: Dict[str, Any] = {"channel": action.channel, "user": action.user, "text": action.text}
        if action.blocks:
            message_params["blocks"] = action.blocks
        return await self.client.chat_postEphemeral(**message_params)
