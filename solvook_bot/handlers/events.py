"""Event API handlers: mentions, messages and channel joins."""

from typing import List

from solvook_bot.dispatch.registry import HandlerContext
from solvook_bot.events.models import ClassifiedEvent
from solvook_bot.policy.actions import OutboundAction
from solvook_bot.policy.responses import mention_reply, message_reply, welcome_message


async def respond_to_mention(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    return mention_reply(classified)


async def respond_to_message(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    return message_reply(classified)


async def respond_to_member_joined(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    event = classified.event
    user = await context.directory.user(event.user_id)
    channel = await context.directory.channel(event.channel_id)
    return welcome_message(classified, user, channel)
