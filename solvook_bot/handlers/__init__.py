"""
Event handlers.

``build_handler_table`` assembles the read-only ``EventCategory -> Handler``
table the dispatcher routes by. Within a category, handlers route by command
name, ``action_id`` or ``callback_id`` through their own read-only tables.
"""

from solvook_bot.dispatch.registry import Handler, HandlerTable, freeze_handler_table
from solvook_bot.events.models import EventCategory
from solvook_bot.handlers.actions import respond_to_button
from solvook_bot.handlers.commands import respond_to_command
from solvook_bot.handlers.events import respond_to_member_joined, respond_to_mention, respond_to_message
from solvook_bot.handlers.shortcuts import respond_to_shortcut
from solvook_bot.handlers.views import acknowledge_submission, respond_to_submission


def build_handler_table() -> HandlerTable:
    return freeze_handler_table({
        EventCategory.SLASH_COMMAND: Handler(respond_to_command),
        EventCategory.MENTION: Handler(respond_to_mention),
        EventCategory.MESSAGE: Handler(respond_to_message),
        EventCategory.MEMBER_JOINED: Handler(respond_to_member_joined),
        EventCategory.BUTTON_CLICK: Handler(respond_to_button),
        EventCategory.SHORTCUT: Handler(respond_to_shortcut),
        EventCategory.MODAL_SUBMIT: Handler(respond_to_submission, acknowledge_submission),
    })


__all__ = ["build_handler_table"]
