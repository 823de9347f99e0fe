"""TaskGuard Core Store -- 进程内事件存储"""

from .event_store import InMemoryEventStore
from .protocols import EventStore

__all__ = [
    "EventStore",
    "InMemoryEventStore",
]
