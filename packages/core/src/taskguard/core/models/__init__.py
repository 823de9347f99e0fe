"""TaskGuard Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    CircuitState,
    EventType,
    TaskPriority,
    TaskStatus,
    event_type_for_status,
)
from .event import DomainEvent
from .metrics import TaskMetrics
from .task import Task, new_task_id, utc_now

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "EventType",
    "CircuitState",
    "event_type_for_status",
    # Task
    "Task",
    "new_task_id",
    "utc_now",
    # Event
    "DomainEvent",
    # 读侧
    "TaskMetrics",
]
