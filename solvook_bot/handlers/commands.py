"""Slash command handlers."""

from types import MappingProxyType
from typing import List

from solvook_bot.dispatch.registry import HandlerContext
from solvook_bot.events.models import ClassifiedEvent
from solvook_bot.policy.actions import OutboundAction
from solvook_bot.policy.responses import help_command_reply, hello_command_reply, ping_command_reply
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)


async def hello_command(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    user = await context.directory.user(classified.event.user_id)
    return hello_command_reply(classified, user)


async def help_command(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    return help_command_reply(classified)


async def ping_command(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    return ping_command_reply(classified, context.ack_latency_ms)


COMMANDS = MappingProxyType({
    "/hello": hello_command,
    "/help": help_command,
    "/ping": ping_command,
})


async def respond_to_command(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    """Route a slash command by name; unknown commands are acknowledged only."""
    command = COMMANDS.get(classified.event.command)
    if command is None:
        logger.info(f"No handler for command: {classified.event.command}")
        return []
    return await command(classified, context)
