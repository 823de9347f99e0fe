"""TaskGuard Core -- 熔断器保护的任务命令层 + 事件日志 + 读侧投影

packages/core 的公开接口导出。
"""

from .breaker import BreakerConfig, BreakerState, CircuitBreaker, Outcome
from .exceptions import (
    BreakerOpenError,
    OperationFailedError,
    TaskGuardError,
    TaskNotFoundError,
)
from .models import (
    CircuitState,
    DomainEvent,
    EventType,
    Task,
    TaskMetrics,
    TaskPriority,
    TaskStatus,
)
from .projection import apply_event, rebuild_tasks
from .services import RemoteCall, SimulatedRemote, TaskCommandService, TaskQueryService
from .store import EventStore, InMemoryEventStore

__all__ = [
    # 熔断器
    "CircuitBreaker",
    "BreakerConfig",
    "BreakerState",
    "Outcome",
    # 异常
    "TaskGuardError",
    "BreakerOpenError",
    "OperationFailedError",
    "TaskNotFoundError",
    # 模型
    "Task",
    "TaskStatus",
    "TaskPriority",
    "DomainEvent",
    "EventType",
    "CircuitState",
    "TaskMetrics",
    # 存储与投影
    "EventStore",
    "InMemoryEventStore",
    "apply_event",
    "rebuild_tasks",
    # 服务
    "TaskCommandService",
    "TaskQueryService",
    "RemoteCall",
    "SimulatedRemote",
]
