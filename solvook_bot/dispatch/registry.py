"""
Handler registry.

Handlers are looked up through an explicit ``EventCategory -> Handler``
mapping that is built once at startup and cannot be modified afterwards.
"""

from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping, NamedTuple, Optional

from solvook_bot.dispatch.directory import Directory
from solvook_bot.events.models import ClassifiedEvent, EventCategory
from solvook_bot.policy.actions import OutboundAction


class HandlerContext(NamedTuple):
    """Per-invocation collaborators handed to a handler."""
    directory: Directory
    ack_latency_ms: int = 0


Responder = Callable[[ClassifiedEvent, HandlerContext], Awaitable[List[OutboundAction]]]
Acknowledger = Callable[[ClassifiedEvent], Optional[Dict[str, Any]]]


def ack_only(classified: ClassifiedEvent) -> Optional[Dict[str, Any]]:
    """Plain acknowledgment with an empty body."""
    return None


class Handler(NamedTuple):
    """
    How one event category is answered.

    ``acknowledge`` runs before the acknowledgment is sent and must be pure
    and fast; ``respond`` runs afterwards and may perform lookups.
    """
    respond: Responder
    acknowledge: Acknowledger = ack_only


HandlerTable = Mapping[EventCategory, Handler]


def freeze_handler_table(handlers: Mapping[EventCategory, Handler]) -> HandlerTable:
    """Return a read-only copy of ``handlers``."""
    return MappingProxyType(dict(handlers))
