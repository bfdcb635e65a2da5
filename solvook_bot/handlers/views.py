"""
Modal submission handlers.

Submissions are routed by the view's ``callback_id``. The first step of the
task workflow is answered entirely in the acknowledgment (``response_action``),
the second step once the modal has closed.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Optional

from solvook_bot.dispatch.registry import HandlerContext
from solvook_bot.events.models import ClassifiedEvent
from solvook_bot.policy.actions import OutboundAction
from solvook_bot.policy.workflow import TASK_CONFIRM_ID, TASK_MODAL_ID, task_created_replies, task_step_one_ack
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)


async def task_step_one(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    # Everything happens in the acknowledgment
    return []


async def task_step_two(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    return task_created_replies(classified)


SUBMISSIONS = MappingProxyType({
    TASK_MODAL_ID: task_step_one,
    TASK_CONFIRM_ID: task_step_two,
})

SUBMISSION_ACKS = MappingProxyType({
    TASK_MODAL_ID: task_step_one_ack,
})


def acknowledge_submission(classified: ClassifiedEvent) -> Optional[Dict[str, Any]]:
    ack = SUBMISSION_ACKS.get(classified.event.callback_id)
    return ack(classified) if ack else None


async def respond_to_submission(classified: ClassifiedEvent, context: HandlerContext) -> List[OutboundAction]:
    """Route a view submission by ``callback_id``."""
    submission = SUBMISSIONS.get(classified.event.callback_id)
    if submission is None:
        logger.info(f"No handler for view submission: {classified.event.callback_id}")
        return []
    return await submission(classified, context)
