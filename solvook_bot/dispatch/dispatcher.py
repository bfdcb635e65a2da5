"""
Dispatcher Module

Connects the pieces: raw delivery -> classifier -> handler (policy) -> executor.

``dispatch`` is called by a transport for every delivery. It returns the
acknowledgment body straight away and schedules the rest of the work on the
``TaskRunner``. ``process`` is that deferred part: it asks the handler for the
actions and performs them in order through the platform adapter.
"""

import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from solvook_bot.connectors.platform_adapter import ActionContext, ActionResult, PlatformAdapter
from solvook_bot.dispatch.directory import Directory
from solvook_bot.dispatch.registry import HandlerContext, HandlerTable
from solvook_bot.dispatch.tasks import TaskRunner
from solvook_bot.events.classifier import classify, decode
from solvook_bot.events.models import ClassifiedEvent
from solvook_bot.policy.responses import error_notice
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)


class Dispatcher:
    """Routes classified events to their handler and executes the resulting actions."""

    def __init__(
        self,
        adapter: PlatformAdapter,
        handlers: HandlerTable,
        directory: Directory,
        runner: Optional[TaskRunner] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the dispatcher.

        Args:
            adapter: Platform adapter that executes actions
            handlers: Read-only category -> handler table
            directory: Cached user / channel lookups
            runner: Task runner for deferred processing
            clock: Monotonic clock used to measure acknowledgment latency
        """
        self.adapter = adapter
        self.handlers = handlers
        self.directory = directory
        self.runner = runner or TaskRunner()
        self._clock = clock

    def dispatch(self, envelope_type: str, payload: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Accept one delivery from a transport.

        Must be called from a running event loop. Processing is scheduled, not
        awaited.

        Args:
            envelope_type: ``events_api``, ``slash_commands`` or ``interactive``
            payload: The delivery body

        Returns:
            Optional[Dict[str, Any]]: Body to acknowledge with, or None for an empty acknowledgment
        """
        received_at = self._clock()

        event = decode(envelope_type, payload)
        if event is None:
            return None

        classified = classify(event, self.adapter.bot_user_id)
        if classified is None:
            logger.debug(f"Dropped {event.category.value} event")
            return None

        handler = self.handlers.get(classified.category)
        if handler is None:
            logger.info(f"No handler for event category: {classified.category.value}")
            return None

        ack_failed = False
        try:
            ack = handler.acknowledge(classified)
        except Exception as e:
            logger.exception(f"Error building acknowledgment for {classified.category.value}: {e}")
            ack, ack_failed = None, True

        context = HandlerContext(
            directory=self.directory,
            ack_latency_ms=int((self._clock() - received_at) * 1000),
        )
        self.runner.submit(self.process(classified, context), name=f"process-{classified.category.value}")
        if ack_failed:
            # An empty acknowledgment closes a submitted modal without a word
            self.runner.submit(
                self._notify_failure(classified, self._action_context(classified)),
                name=f"notify-{classified.category.value}",
            )
        return ack

    async def process(self, classified: ClassifiedEvent, context: HandlerContext) -> List[ActionResult]:
        """
        Run the handler for a classified event and execute its actions.

        Actions run in order, each at most once. The first failure stops the
        sequence; for user-initiated events a single apology notice is then
        attempted.

        Args:
            classified: The classified event
            context: Per-invocation collaborators

        Returns:
            List[ActionResult]: Results of the actions that were attempted
        """
        category = classified.category.value
        handler = self.handlers.get(classified.category)
        if handler is None:
            logger.info(f"No handler for event category: {category}")
            return []

        action_context = self._action_context(classified)

        try:
            actions = await handler.respond(classified, context)
        except Exception as e:
            logger.exception(f"Error handling {category} event: {e}")
            await self._notify_failure(classified, action_context)
            return []

        results: List[ActionResult] = []
        for action in actions:
            result = await self.adapter.execute(action, action_context)
            results.append(result)
            if not result.is_success():
                logger.error(
                    f"{action.kind.value} for {category} event failed "
                    f"({result.status.value}): {result.error_message}"
                )
                await self._notify_failure(classified, action_context)
                break

        logger.debug(f"Handled {category} event with {len(results)} action(s)")
        return results

    @staticmethod
    def _action_context(classified: ClassifiedEvent) -> ActionContext:
        return ActionContext(user_id=classified.event.user_id, category=classified.category.value)

    async def _notify_failure(self, classified: ClassifiedEvent, action_context: ActionContext) -> None:
        # Passive events had no direct request to answer
        if not classified.user_initiated:
            return

        for notice in error_notice(classified):
            result = await self.adapter.execute(notice, action_context)
            if not result.is_success():
                logger.warning(f"Could not deliver error notice: {result.error_message}")
