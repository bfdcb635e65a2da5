"""
Dispatch: the handler registry, the dispatcher that runs handlers and
executes their actions, cached lookups, and deferred task tracking.
"""

from solvook_bot.dispatch.cache import InMemoryLRUCache, LookupCache
from solvook_bot.dispatch.directory import Directory
from solvook_bot.dispatch.dispatcher import Dispatcher
from solvook_bot.dispatch.registry import Handler, HandlerContext, HandlerTable, ack_only, freeze_handler_table
from solvook_bot.dispatch.tasks import TaskRunner

__all__ = [
    "InMemoryLRUCache",
    "LookupCache",
    "Directory",
    "Dispatcher",
    "Handler",
    "HandlerContext",
    "HandlerTable",
    "ack_only",
    "freeze_handler_table",
    "TaskRunner",
]
