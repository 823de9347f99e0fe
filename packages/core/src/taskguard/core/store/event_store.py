"""EventStore 内存实现

事件日志 append-only：只允许追加，不允许修改或删除。
生命周期与进程相同，不做持久化。
"""

from ..models.event import DomainEvent


class InMemoryEventStore:
    """EventStore 的内存实现

    读取方法返回新的 list，调用方修改返回值不会影响存储；
    DomainEvent 本身不可变。
    """

    def __init__(self) -> None:
        self._events: list[DomainEvent] = []

    def append(self, event: DomainEvent) -> None:
        """追加事件到日志末尾"""
        self._events.append(event)

    def all(self) -> list[DomainEvent]:
        return list(self._events)

    def recent(self, n: int) -> list[DomainEvent]:
        """最后 n 条事件，保持追加顺序；n <= 0 返回空列表"""
        if n <= 0:
            return []
        return self._events[-n:]

    def for_aggregate(self, aggregate_id: str) -> list[DomainEvent]:
        """查询指定 Task 的所有事件，按追加顺序"""
        return [e for e in self._events if e.aggregate_id == aggregate_id]

    def __len__(self) -> int:
        return len(self._events)
