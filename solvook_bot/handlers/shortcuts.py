"""Global shortcut handlers."""

from types import MappingProxyType
from typing import List

from solvook_bot.dispatch.registry import HandlerContext
from solvook_bot.events.models import ClassifiedEvent
from solvook_bot.policy.actions import OutboundAction
from solvook_bot.policy.workflow import create_task_reply
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)


async def create_task_shortcut(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    return create_task_reply(classified)


SHORTCUTS = MappingProxyType({
    "create_task": create_task_shortcut,
})


async def respond_to_shortcut(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    """Route a global shortcut by ``callback_id``."""
    shortcut = SHORTCUTS.get(classified.event.callback_id)
    if shortcut is None:
        logger.info(f"No handler for shortcut: {classified.event.callback_id}")
        return []
    return await shortcut(classified, context)
