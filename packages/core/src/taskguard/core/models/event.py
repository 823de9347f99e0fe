"""DomainEvent 模型

事件 append-only，不允许更新或删除。
payload 为事件发生时 Task 的完整快照（不是 diff），
aggregate_id 必须等于 payload.id。
"""

from datetime import datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import EventType
from .task import Task, utc_now


class DomainEvent(BaseModel):
    """领域事件

    存储内的顺序即追加顺序，这是唯一的顺序保证（没有序号或向量时钟）。
    """

    model_config = ConfigDict(frozen=True)

    type: EventType = Field(description="事件类型")
    payload: Task = Field(description="Task 完整快照")
    timestamp: datetime = Field(default_factory=utc_now, description="事件时间戳")
    aggregate_id: str = Field(description="所属 Task ID")

    @model_validator(mode="after")
    def check_aggregate_id(self) -> Self:
        if self.payload.id != self.aggregate_id:
            raise ValueError(
                f"aggregate_id {self.aggregate_id!r} 与 payload.id {self.payload.id!r} 不一致"
            )
        return self

    @classmethod
    def for_task(cls, event_type: EventType, task: Task) -> "DomainEvent":
        """以 Task 快照构造事件，aggregate_id 取自 task.id"""
        return cls(type=event_type, payload=task, aggregate_id=task.id)
