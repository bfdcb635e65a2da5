"""Shared fixtures: a recording platform adapter and Slack payload factories."""

from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

from solvook_bot.connectors.platform_adapter import (
    ActionContext,
    ActionResult,
    ActionStatus,
    ChannelSummary,
    PlatformAdapter,
    UserProfile,
)
from solvook_bot.dispatch import Directory, Dispatcher, InMemoryLRUCache, TaskRunner
from solvook_bot.events.classifier import EVENTS_API, INTERACTIVE, SLASH_COMMANDS, classify, decode
from solvook_bot.handlers import build_handler_table
from solvook_bot.policy.actions import ActionKind, OutboundAction
from solvook_bot.utils.config import Config

BOT_USER_ID = "UBOT"


class FakeAdapter(PlatformAdapter):
    """In-memory adapter that records every call instead of talking to Slack."""

    def __init__(self, bot_user_id: str = BOT_USER_ID, fail_kinds: Iterable[ActionKind] = ()):
        self._bot_user_id = bot_user_id
        self.fail_kinds = set(fail_kinds)
        self.executed: List[OutboundAction] = []
        self.lookups: List[Tuple[str, str]] = []
        self.users: Dict[str, UserProfile] = {}
        self.channels: Dict[str, ChannelSummary] = {}
        self.member_counts: Dict[str, int] = {}
        self.connected = False
        self.closed = False

    @property
    def platform_name(self) -> str:
        return "fake"

    @property
    def bot_user_id(self) -> Optional[str]:
        return self._bot_user_id

    async def initialize(self) -> bool:
        self.connected = True
        return True

    async def close(self) -> None:
        self.connected = False
        self.closed = True

    async def is_connected(self) -> bool:
        return self.connected

    async def execute(self, action: OutboundAction, context: ActionContext) -> ActionResult:
        self.executed.append(action)
        failed = action.kind in self.fail_kinds
        return ActionResult(
            status=ActionStatus.FAILURE if failed else ActionStatus.SUCCESS,
            error_message="boom" if failed else None,
            platform=self.platform_name,
            action_type=action.kind,
            context=context,
        )

    async def fetch_user(self, user_id: str) -> UserProfile:
        self.lookups.append(("user", user_id))
        return self.users.get(user_id) or UserProfile(id=user_id, name=user_id.lower(), real_name=f"User {user_id}")

    async def fetch_channel(self, channel_id: str) -> ChannelSummary:
        self.lookups.append(("channel", channel_id))
        return self.channels.get(channel_id) or ChannelSummary(id=channel_id, name="general", created=1700000000)

    async def fetch_member_count(self, channel_id: str) -> int:
        self.lookups.append(("members", channel_id))
        return self.member_counts.get(channel_id, 3)


class SlackPayloadFactory:
    """Builds raw Slack delivery bodies."""

    @staticmethod
    def event(event_type: str, **fields: Any) -> Dict[str, Any]:
        return {"type": "event_callback", "team_id": "T1", "event": {"type": event_type, **fields}}

    @staticmethod
    def message(text: Optional[str] = "hi there", user: str = "U1", channel: str = "C1", **fields: Any) -> Dict[str, Any]:
        return SlackPayloadFactory.event(
            "message", text=text, user=user, channel=channel, ts="1700000000.000100", **fields
        )

    @staticmethod
    def direct_message(text: str = "hello", user: str = "U1", channel: str = "D1") -> Dict[str, Any]:
        return SlackPayloadFactory.message(text=text, user=user, channel=channel, channel_type="im")

    @staticmethod
    def mention(text: str = f"<@{BOT_USER_ID}> hey", user: str = "U2", channel: str = "C1", **fields: Any) -> Dict[str, Any]:
        return SlackPayloadFactory.event(
            "app_mention", text=text, user=user, channel=channel, ts="1700000000.000200", **fields
        )

    @staticmethod
    def member_joined(user: str = "U3", channel: str = "C1") -> Dict[str, Any]:
        return SlackPayloadFactory.event("member_joined_channel", user=user, channel=channel)

    @staticmethod
    def slash_command(command: str = "/hello", text: str = "", user: str = "U1", channel: str = "C1") -> Dict[str, Any]:
        return {
            "command": command,
            "text": text,
            "user_id": user,
            "channel_id": channel,
            "trigger_id": "trigger-1",
            "response_url": "https://hooks.slack.com/commands/1",
        }

    @staticmethod
    def button(
        action_id: str = "view_help",
        value: Optional[str] = None,
        user: str = "U1",
        channel: Optional[str] = "C1",
        trigger_id: Optional[str] = "trigger-2",
        view_id: Optional[str] = None,
        view_hash: Optional[str] = None,
    ) -> Dict[str, Any]:
        action: Dict[str, Any] = {"action_id": action_id, "type": "button"}
        if value is not None:
            action["value"] = value
        payload: Dict[str, Any] = {
            "type": "block_actions",
            "user": {"id": user},
            "actions": [action],
            "container": {"type": "message", "message_ts": "1700000000.000300"},
        }
        if channel:
            payload["channel"] = {"id": channel}
        if trigger_id:
            payload["trigger_id"] = trigger_id
        if view_id:
            payload["view"] = {"id": view_id}
            if view_hash:
                payload["view"]["hash"] = view_hash
            payload["container"] = {"type": "view", "view_id": view_id}
        return payload

    @staticmethod
    def shortcut(callback_id: str = "create_task", user: str = "U1", trigger_id: Optional[str] = "trigger-3") -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": "shortcut", "callback_id": callback_id, "user": {"id": user}}
        if trigger_id:
            payload["trigger_id"] = trigger_id
        return payload

    @staticmethod
    def view_submission(
        callback_id: str,
        state_values: Optional[Dict[str, Any]] = None,
        private_metadata: str = "",
        user: str = "U1",
    ) -> Dict[str, Any]:
        return {
            "type": "view_submission",
            "user": {"id": user},
            "trigger_id": "trigger-4",
            "view": {
                "id": "V1",
                "hash": "h1",
                "callback_id": callback_id,
                "private_metadata": private_metadata,
                "state": {"values": state_values or {}},
            },
        }


@pytest.fixture
def payloads() -> SlackPayloadFactory:
    return SlackPayloadFactory()


@pytest.fixture
def adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def config() -> Config:
    return Config(slack_bot_token="xoxb-test", slack_signing_secret="test-secret")


@pytest.fixture
def dispatcher(adapter: FakeAdapter) -> Dispatcher:
    return Dispatcher(
        adapter=adapter,
        handlers=build_handler_table(),
        directory=Directory(adapter, InMemoryLRUCache()),
        runner=TaskRunner(),
    )


def classified_from(envelope_type: str, payload: Dict[str, Any], bot_user_id: Optional[str] = BOT_USER_ID):
    """Decode and classify a raw payload, failing the test if it is dropped."""
    event = decode(envelope_type, payload)
    assert event is not None
    classified = classify(event, bot_user_id)
    assert classified is not None
    return classified
