"""Button (block action) handlers."""

from types import MappingProxyType
from typing import List

from solvook_bot.dispatch.registry import HandlerContext
from solvook_bot.errors import ActionValidationError
from solvook_bot.events.models import ClassifiedEvent
from solvook_bot.policy.actions import OutboundAction
from solvook_bot.policy.responses import channel_info_reply
from solvook_bot.policy.workflow import (
    START_TASK_ACTION,
    TASK_DONE_ACTION,
    start_task_reply,
    task_done_reply,
    view_help_reply,
)
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)


async def channel_info_action(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    """Ephemeral summary of the channel named by the button (or the one it was clicked in)."""
    event = classified.event
    channel_id = event.value or event.channel_id
    if not channel_id:
        raise ActionValidationError("channel_info clicked without a channel")

    channel = await context.directory.channel(channel_id)
    member_count = await context.directory.member_count(channel_id)
    return channel_info_reply(classified, channel, member_count)


async def view_help_action(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    return view_help_reply(classified)


async def start_task_action(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    return start_task_reply(classified)


async def task_done_action(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    return task_done_reply(classified)


BUTTONS = MappingProxyType({
    "channel_info": channel_info_action,
    "view_help": view_help_action,
    START_TASK_ACTION: start_task_action,
    TASK_DONE_ACTION: task_done_action,
})


async def respond_to_button(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    """Route a block action by ``action_id``."""
    action = BUTTONS.get(classified.event.action_id)
    if action is None:
        logger.info(f"No handler for block action: {classified.event.action_id}")
        return []
    return await action(classified, context)
