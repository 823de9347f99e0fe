"""Store Protocol 接口定义

使用 Python Protocol 实现结构化子类型（duck typing），
命令服务只依赖此接口，便于替换实现。
"""

from typing import Protocol

from ..models.event import DomainEvent


class EventStore(Protocol):
    """Event 存储接口

    事件 append-only：只允许追加，不允许修改、删除或重排。
    所有读取返回快照，而不是内部存储的引用。
    """

    def append(self, event: DomainEvent) -> None:
        """追加事件（append-only）"""
        ...

    def all(self) -> list[DomainEvent]:
        """按追加顺序返回全部事件"""
        ...

    def recent(self, n: int) -> list[DomainEvent]:
        """按追加顺序返回最后 n 条事件"""
        ...

    def for_aggregate(self, aggregate_id: str) -> list[DomainEvent]:
        """查询指定 Task 的所有事件"""
        ...

    def __len__(self) -> int:
        ...
