"""
Response Policy

Pure functions that turn a classified event (plus any metadata the handler
looked up beforehand) into the ordered list of outbound actions to perform.
Nothing in this module talks to Slack.
"""

from datetime import datetime, timezone
from typing import List, Optional

from solvook_bot.connectors.platform_adapter import ChannelSummary, UserProfile
from solvook_bot.events.models import ClassifiedEvent, EventCategory
from solvook_bot.policy import blocks
from solvook_bot.policy.actions import AddReaction, OutboundAction, PostEphemeral, PostMessage
from solvook_bot.policy.rules import Rule, all_matches, first_match

BOT_NAME = "Solvook Bot"

URGENT_KEYWORDS = ("urgent", "emergency", "important", "asap")
URGENT_REACTIONS = ("eyes", "warning")

COMMAND_LIST = (
    "• `/hello` - Get a greeting\n"
    "• `/ping` - Check my response time\n"
    "• `/help` - Show all available commands"
)


def _thread_reply(classified: ClassifiedEvent, text: str) -> List[OutboundAction]:
    event = classified.event
    return [PostMessage(channel=event.channel_id, text=text, thread_ts=event.ts)]


# Mentions

def _mention_help(classified: ClassifiedEvent) -> List[OutboundAction]:
    user = blocks.user_mention(classified.event.user_id)
    return _thread_reply(classified, f"Hi {user}! I can help you with:\n{COMMAND_LIST}")


def _mention_status(classified: ClassifiedEvent) -> List[OutboundAction]:
    user = blocks.user_mention(classified.event.user_id)
    return _thread_reply(classified, f"I'm online and ready to help, {user}! 🟢")


def _mention_thanks(classified: ClassifiedEvent) -> List[OutboundAction]:
    user = blocks.user_mention(classified.event.user_id)
    return _thread_reply(classified, f"You're welcome, {user}! Happy to help! 😊")


def _mention_default(classified: ClassifiedEvent) -> List[OutboundAction]:
    user = blocks.user_mention(classified.event.user_id)
    return _thread_reply(
        classified,
        f"Hi {user}! You mentioned me. How can I help you today?\n"
        '_Try asking for "help" or "status"_',
    )


MENTION_RULES = (
    Rule("help", ("help",), _mention_help),
    Rule("status", ("status",), _mention_status),
    Rule("thanks", ("thank",), _mention_thanks),
    Rule("default", (), _mention_default),
)


def mention_reply(classified: ClassifiedEvent) -> List[OutboundAction]:
    """Exactly one threaded reply to an app mention."""
    return first_match(MENTION_RULES, classified)


# Direct messages

def _dm_greeting(classified: ClassifiedEvent) -> List[OutboundAction]:
    user = blocks.user_mention(classified.event.user_id)
    return _thread_reply(classified, f"Hello {user}! 👋 How can I assist you today?")


def _dm_help(classified: ClassifiedEvent) -> List[OutboundAction]:
    return _thread_reply(
        classified,
        "I can help you with various tasks! Try these commands:\n"
        "• `/hello` - Get a greeting\n"
        "• `/ping` - Check bot status\n"
        "• `/help` - See all commands\n\n"
        "You can also just chat with me here in DM!",
    )


def _dm_how_are_you(classified: ClassifiedEvent) -> List[OutboundAction]:
    return _thread_reply(classified, "I'm doing great! Thanks for asking. How can I help you today? 🤖")


DIRECT_MESSAGE_RULES = (
    Rule("greeting", ("hello", "hi"), _dm_greeting),
    Rule("help", ("help",), _dm_help),
    Rule("how_are_you", ("how are you",), _dm_how_are_you),
)


def _urgent_reactions(classified: ClassifiedEvent) -> List[OutboundAction]:
    event = classified.event
    return [AddReaction(channel=event.channel_id, timestamp=event.ts, name=name) for name in URGENT_REACTIONS]


REACTION_RULES = (
    Rule("urgent", URGENT_KEYWORDS, _urgent_reactions),
)


def message_reply(classified: ClassifiedEvent) -> List[OutboundAction]:
    """
    Actions for a plain message.

    Direct messages get at most one reply (first matching rule). Reaction
    rules are independent of the reply and fire on any message.
    """
    if classified.category != EventCategory.MESSAGE:
        return []

    actions: List[OutboundAction] = []
    if classified.is_direct_message:
        actions.extend(first_match(DIRECT_MESSAGE_RULES, classified))
    actions.extend(all_matches(REACTION_RULES, classified))
    return actions


# Slash commands

def display_name(user: Optional[UserProfile], default: str) -> str:
    """Real name, then user name, then ``default``."""
    if user is None:
        return default
    return user.real_name or user.name or default


def hello_command_reply(classified: ClassifiedEvent, user: Optional[UserProfile]) -> List[OutboundAction]:
    event = classified.event
    name = display_name(user, "there")
    mention = blocks.user_mention(event.user_id)
    return [
        PostMessage(
            channel=event.channel_id,
            text=f"Hello {mention}! 👋",
            blocks=[
                blocks.section(f"Hello *{name}*! 👋"),
                blocks.section(f"You called the `/hello` command from {blocks.channel_mention(event.channel_id)}"),
                blocks.context(f'_Command text: "{event.text or "none"}"_ | Requested by {mention}'),
            ],
        )
    ]


def help_blocks() -> List[blocks.Block]:
    return [
        blocks.header(f"{BOT_NAME} Help 📚"),
        blocks.section("Here are the available commands:"),
        blocks.divider(),
        blocks.section(
            "*Slash Commands:*\n"
            "• `/hello` - Get a personalized greeting\n"
            "• `/ping` - Check if the bot is responsive\n"
            "• `/help` - Show this help message"
        ),
        blocks.section(
            "*Message Events:*\n"
            "• Mention the bot to get a response\n"
            "• Direct message the bot for assistance"
        ),
        blocks.section(
            "*Interactive Features:*\n"
            "• Click buttons in bot messages\n"
            "• Use shortcuts from the shortcuts menu"
        ),
        blocks.context("_Need more help? Contact your Slack admin._"),
    ]


def help_command_reply(classified: ClassifiedEvent) -> List[OutboundAction]:
    event = classified.event
    return [
        PostMessage(
            channel=event.channel_id,
            text=f"{BOT_NAME} help for {blocks.user_mention(event.user_id)}",
            blocks=help_blocks(),
        )
    ]


def ping_command_reply(classified: ClassifiedEvent, ack_latency_ms: int) -> List[OutboundAction]:
    event = classified.event
    mention = blocks.user_mention(event.user_id)
    return [
        PostMessage(
            channel=event.channel_id,
            text=f"Pong! {mention}",
            blocks=[
                blocks.section("🏓 *Pong!*"),
                blocks.context(f"Response time: {ack_latency_ms}ms | User: {mention}"),
            ],
        )
    ]


# Channel membership

def welcome_message(
    classified: ClassifiedEvent, user: Optional[UserProfile], channel: Optional[ChannelSummary]
) -> List[OutboundAction]:
    event = classified.event
    user_name = display_name(user, "New member")
    channel_name = channel.name if channel and channel.name else "the channel"
    return [
        PostMessage(
            channel=event.channel_id,
            text=f"Welcome to #{channel_name}, {user_name}! 🎉",
            blocks=[
                blocks.section(f"Welcome to #{channel_name}, *{user_name}*! 🎉"),
                blocks.section(
                    "We're glad to have you here. Feel free to introduce yourself and "
                    "let us know if you need any help getting started!"
                ),
                blocks.actions(
                    blocks.button("Get Channel Info", "channel_info", value=event.channel_id),
                    blocks.button("View Help", "view_help", style="primary"),
                ),
            ],
        )
    ]


def channel_info_reply(
    classified: ClassifiedEvent, channel: ChannelSummary, member_count: int
) -> List[OutboundAction]:
    created = channel.created or 0
    created_fallback = datetime.fromtimestamp(created, tz=timezone.utc).strftime("%Y-%m-%d")
    channel_label = f"#{channel.name}" if channel.name else blocks.channel_mention(channel.id)
    return [
        PostEphemeral(
            channel=channel.id,
            user=classified.event.user_id,
            text=f"Channel information for {channel_label}",
            blocks=[
                blocks.header("Channel Information 📊"),
                blocks.fields_section([
                    f"*Channel Name:*\n{channel_label}",
                    f"*Members:*\n{member_count} members",
                    f"*Created:*\n<!date^{created}^{{date_long}}|{created_fallback}>",
                    f"*Purpose:*\n{channel.purpose or 'No purpose set'}",
                ]),
                blocks.section(f"*Topic:*\n{channel.topic or 'No topic set'}"),
            ],
        )
    ]


# Failures

def _failed_request(classified: ClassifiedEvent) -> str:
    event = classified.event
    if classified.category == EventCategory.SLASH_COMMAND:
        return f"the {event.command.lstrip('/')} command"
    if classified.category == EventCategory.MODAL_SUBMIT:
        return "your submission"
    return "that action"


def error_notice(classified: ClassifiedEvent) -> List[OutboundAction]:
    """
    A short apology for a user-initiated request that could not be completed.

    Sent ephemerally in the originating channel, or as a DM when the request
    did not come from a channel (modal submissions).
    """
    event = classified.event
    if not event.user_id:
        return []

    text = f"Sorry, something went wrong with {_failed_request(classified)}."
    if event.channel_id:
        return [PostEphemeral(channel=event.channel_id, user=event.user_id, text=text)]
    return [PostMessage(channel=event.user_id, text=text)]
