"""
Event Classifier

Decodes raw Slack deliveries into ``InboundEvent`` variants and classifies
them for the response policy. Both transports (HTTP and Socket Mode) hand
their payloads over using the Socket Mode envelope type names:

- ``events_api``: an ``event_callback`` body with an ``event`` record
- ``slash_commands``: the slash command form fields
- ``interactive``: a block action, global shortcut or view submission payload

Unrecognised shapes are dropped, never raised: events are notifications, not
requests that demand an answer.
"""

from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import ValidationError

from solvook_bot.events.models import (
    ButtonClick,
    ClassifiedEvent,
    EventCategory,
    FormValue,
    InboundEvent,
    MemberJoined,
    Mention,
    Message,
    ModalSubmit,
    ShortcutInvoke,
    SlashCommand,
)
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)

EVENTS_API = "events_api"
SLASH_COMMANDS = "slash_commands"
INTERACTIVE = "interactive"


def _decode_callback_event(payload: Mapping[str, Any]) -> Optional[InboundEvent]:
    event = payload.get("event") or {}
    event_type = event.get("type")

    if event_type == "app_mention":
        return Mention(
            user_id=event.get("user"),
            channel_id=event.get("channel"),
            text=event.get("text", ""),
            ts=event.get("ts"),
            thread_ts=event.get("thread_ts"),
            bot_id=event.get("bot_id"),
        )
    if event_type == "message":
        return Message(
            user_id=event.get("user"),
            channel_id=event.get("channel"),
            text=event.get("text"),
            ts=event.get("ts"),
            thread_ts=event.get("thread_ts"),
            channel_type=event.get("channel_type"),
            subtype=event.get("subtype"),
            bot_id=event.get("bot_id"),
        )
    if event_type == "member_joined_channel":
        return MemberJoined(
            user_id=event.get("user"),
            channel_id=event.get("channel"),
            inviter=event.get("inviter"),
        )

    logger.debug(f"Ignoring unsupported event type: {event_type}")
    return None


def _decode_slash_command(payload: Mapping[str, Any]) -> Optional[InboundEvent]:
    return SlashCommand(
        command=payload.get("command"),
        user_id=payload.get("user_id"),
        channel_id=payload.get("channel_id"),
        text=payload.get("text", ""),
        trigger_id=payload.get("trigger_id"),
        response_url=payload.get("response_url"),
    )


def form_values(state_values: Mapping[str, Any]) -> Dict[str, FormValue]:
    """
    Flatten ``view.state.values`` into an ``action_id -> value`` mapping.

    Args:
        state_values: The ``values`` map of a submitted view's state

    Returns:
        Dict[str, FormValue]: Submitted value per input element
    """
    values: Dict[str, FormValue] = {}
    for block_data in state_values.values():
        for action_id, action_data in block_data.items():
            # Different element types have different value formats
            if "value" in action_data:
                values[action_id] = action_data["value"]
            elif "selected_option" in action_data:
                option = action_data["selected_option"]
                values[action_id] = option["value"] if option else None
            elif "selected_options" in action_data:
                values[action_id] = [option["value"] for option in action_data["selected_options"]]
            elif "selected_user" in action_data:
                values[action_id] = action_data["selected_user"]
            elif "selected_users" in action_data:
                values[action_id] = list(action_data["selected_users"])
            elif "selected_conversation" in action_data:
                values[action_id] = action_data["selected_conversation"]
            elif "selected_channel" in action_data:
                values[action_id] = action_data["selected_channel"]
            elif "selected_date" in action_data:
                values[action_id] = action_data["selected_date"]
            else:
                values[action_id] = None
    return values


def _decode_interaction(payload: Mapping[str, Any]) -> Optional[InboundEvent]:
    interaction_type = payload.get("type")
    user_id = (payload.get("user") or {}).get("id")
    trigger_id = payload.get("trigger_id")

    if interaction_type == "block_actions":
        actions = payload.get("actions") or []
        if not actions:
            return None
        action = actions[0]
        container = payload.get("container") or {}
        view = payload.get("view") or {}
        channel_id = (payload.get("channel") or {}).get("id") or container.get("channel_id")
        message_ts = (payload.get("message") or {}).get("ts") or container.get("message_ts")
        return ButtonClick(
            action_id=action.get("action_id"),
            value=action.get("value"),
            user_id=user_id,
            channel_id=channel_id,
            ts=message_ts,
            trigger_id=trigger_id,
            view_id=view.get("id"),
            view_hash=view.get("hash"),
        )
    if interaction_type == "shortcut":
        return ShortcutInvoke(
            callback_id=payload.get("callback_id"),
            user_id=user_id,
            trigger_id=trigger_id,
        )
    if interaction_type == "view_submission":
        view = payload.get("view") or {}
        return ModalSubmit(
            callback_id=view.get("callback_id"),
            user_id=user_id,
            trigger_id=trigger_id,
            view_id=view.get("id"),
            view_hash=view.get("hash"),
            private_metadata=view.get("private_metadata") or "",
            values=form_values((view.get("state") or {}).get("values") or {}),
        )

    logger.debug(f"Ignoring unsupported interaction type: {interaction_type}")
    return None


_DECODERS: Dict[str, Callable[[Mapping[str, Any]], Optional[InboundEvent]]] = {
    EVENTS_API: _decode_callback_event,
    SLASH_COMMANDS: _decode_slash_command,
    INTERACTIVE: _decode_interaction,
}


def decode(envelope_type: str, payload: Mapping[str, Any]) -> Optional[InboundEvent]:
    """
    Decode a raw Slack delivery into an inbound event.

    Args:
        envelope_type: One of ``events_api``, ``slash_commands`` or ``interactive``
        payload: The delivery body

    Returns:
        Optional[InboundEvent]: The decoded event, or None if the shape is not recognised
    """
    decoder = _DECODERS.get(envelope_type)
    if decoder is None or not isinstance(payload, Mapping):
        logger.debug(f"Ignoring unsupported envelope type: {envelope_type}")
        return None

    try:
        return decoder(payload)
    except (ValidationError, AttributeError, KeyError, TypeError) as e:
        logger.warning(f"Dropping malformed {envelope_type} payload: {e}")
        return None


def is_direct_message(event: InboundEvent) -> bool:
    """A message is direct when Slack says so or the channel is an IM (``D…``)."""
    if getattr(event, "channel_type", None) == "im":
        return True
    return bool(event.channel_id and event.channel_id.startswith("D"))


def classify(event: InboundEvent, bot_user_id: Optional[str] = None) -> Optional[ClassifiedEvent]:
    """
    Classify an inbound event for the response policy.

    This is a pure function: the same event and bot identity always produce an
    equal result.

    Args:
        event: The decoded inbound event
        bot_user_id: The bot's own user id, used to ignore its own messages

    Returns:
        Optional[ClassifiedEvent]: Normalized fields, or None if the event must be dropped
    """
    is_from_bot = bool(getattr(event, "bot_id", None)) or (
        bot_user_id is not None and event.user_id == bot_user_id
    )

    if event.category == EventCategory.MESSAGE:
        # Own messages, bot messages and edit/delete echoes never get a response
        if is_from_bot or event.subtype or not event.text:
            return None
    elif event.category == EventCategory.MENTION and is_from_bot:
        return None

    return ClassifiedEvent(
        category=event.category,
        event=event,
        text=(event.text or "").lower(),
        is_direct_message=is_direct_message(event),
        is_from_bot=is_from_bot,
    )
