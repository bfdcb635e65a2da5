"""
Inbound Event Models

Every Slack delivery the bot reacts to is decoded once, at the transport
boundary, into one of the variants below. Downstream code only ever sees these
closed types, never the raw Slack payload.
"""

import enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EventCategory(str, enum.Enum):
    """Category tag shared by the event variants and the handler table."""
    SLASH_COMMAND = "slash_command"
    MENTION = "app_mention"
    MESSAGE = "message"
    MEMBER_JOINED = "member_joined_channel"
    BUTTON_CLICK = "block_actions"
    SHORTCUT = "shortcut"
    MODAL_SUBMIT = "view_submission"


FormValue = Union[str, List[str], None]


class BaseEvent(BaseModel):
    """Fields common to every inbound event."""
    model_config = ConfigDict(frozen=True)

    user_id: Optional[str] = Field(None, description="User who originated the event")
    channel_id: Optional[str] = Field(None, description="Channel the event happened in")
    text: Optional[str] = Field(None, description="Free-text payload, if any")
    ts: Optional[str] = Field(None, description="Message timestamp used for threading and reactions")
    trigger_id: Optional[str] = Field(None, description="Interaction token required to open a modal")


class SlashCommand(BaseEvent):
    category: Literal[EventCategory.SLASH_COMMAND] = EventCategory.SLASH_COMMAND
    command: str
    response_url: Optional[str] = None


class Mention(BaseEvent):
    category: Literal[EventCategory.MENTION] = EventCategory.MENTION
    thread_ts: Optional[str] = None
    bot_id: Optional[str] = None


class Message(BaseEvent):
    category: Literal[EventCategory.MESSAGE] = EventCategory.MESSAGE
    thread_ts: Optional[str] = None
    channel_type: Optional[str] = None
    subtype: Optional[str] = None
    bot_id: Optional[str] = None


class MemberJoined(BaseEvent):
    category: Literal[EventCategory.MEMBER_JOINED] = EventCategory.MEMBER_JOINED
    inviter: Optional[str] = None


class ButtonClick(BaseEvent):
    category: Literal[EventCategory.BUTTON_CLICK] = EventCategory.BUTTON_CLICK
    action_id: str
    value: Optional[str] = None
    view_id: Optional[str] = None
    view_hash: Optional[str] = None


class ShortcutInvoke(BaseEvent):
    category: Literal[EventCategory.SHORTCUT] = EventCategory.SHORTCUT
    callback_id: str


class ModalSubmit(BaseEvent):
    category: Literal[EventCategory.MODAL_SUBMIT] = EventCategory.MODAL_SUBMIT
    callback_id: str
    view_id: Optional[str] = None
    view_hash: Optional[str] = None
    private_metadata: str = ""
    values: Dict[str, FormValue] = Field(default_factory=dict)


InboundEvent = Annotated[
    Union[SlashCommand, Mention, Message, MemberJoined, ButtonClick, ShortcutInvoke, ModalSubmit],
    Field(discriminator="category"),
]


class ClassifiedEvent(BaseModel):
    """An inbound event together with the normalized fields the policy decides on."""
    model_config = ConfigDict(frozen=True)

    category: EventCategory
    event: InboundEvent
    text: str = Field("", description="Lower-cased free text")
    is_direct_message: bool = False
    is_from_bot: bool = False

    @property
    def user_initiated(self) -> bool:
        """Whether the event is a direct request that deserves an error notice."""
        return self.category in (
            EventCategory.SLASH_COMMAND,
            EventCategory.BUTTON_CLICK,
            EventCategory.MODAL_SUBMIT,
        )
