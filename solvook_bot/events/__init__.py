"""
Inbound events: the closed set of event variants and the classifier that
decodes raw Slack deliveries into them.
"""

from solvook_bot.events.models import (
    ButtonClick,
    ClassifiedEvent,
    EventCategory,
    InboundEvent,
    MemberJoined,
    Mention,
    Message,
    ModalSubmit,
    ShortcutInvoke,
    SlashCommand,
)
from solvook_bot.events.classifier import EVENTS_API, INTERACTIVE, SLASH_COMMANDS, classify, decode

__all__ = [
    "ButtonClick",
    "ClassifiedEvent",
    "EventCategory",
    "InboundEvent",
    "MemberJoined",
    "Mention",
    "Message",
    "ModalSubmit",
    "ShortcutInvoke",
    "SlashCommand",
    "EVENTS_API",
    "INTERACTIVE",
    "SLASH_COMMANDS",
    "classify",
    "decode",
]
