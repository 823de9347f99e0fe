"""枚举定义

包含 TaskStatus、TaskPriority、EventType 以及熔断器的 CircuitState。
Task 状态机不做流转合法性校验（任意状态可改为任意状态）。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 状态

    预期流转方向 pending -> in_progress -> completed | failed，
    但命令层不强制校验。
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class TaskPriority(StrEnum):
    """Task 优先级，创建后不变"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EventType(StrEnum):
    """领域事件类型"""

    TASK_CREATED = "TASK_CREATED"
    TASK_UPDATED = "TASK_UPDATED"
    TASK_COMPLETED = "TASK_COMPLETED"
    # 已定义但更新路径不会产生（failed 状态同样记为 TASK_UPDATED）
    TASK_FAILED = "TASK_FAILED"


class CircuitState(StrEnum):
    """熔断器状态"""

    CLOSED = "CLOSED"  # 正常放行
    OPEN = "OPEN"  # 熔断，直接拒绝
    HALF_OPEN = "HALF_OPEN"  # 探测恢复


def event_type_for_status(status: TaskStatus) -> EventType:
    """状态更新对应的事件类型

    completed -> TASK_COMPLETED，其余（包括 failed）-> TASK_UPDATED。
    """
    if status == TaskStatus.COMPLETED:
        return EventType.TASK_COMPLETED
    return EventType.TASK_UPDATED
