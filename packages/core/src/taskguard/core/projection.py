"""Projection 重建模块

从事件日志重建 Task 集合（物化视图），确保事件溯源的一致性。
每条事件的 payload 都是 Task 完整快照，因此应用事件即用快照覆盖。
支持单事件应用和全量重建两种模式。
"""

import time
from collections.abc import Iterable

import structlog

from .models.event import DomainEvent
from .models.task import Task

log = structlog.get_logger()


def apply_event(tasks: dict[str, Task], event: DomainEvent) -> None:
    """将单个事件应用到 Task 集合（内存中操作）

    Args:
        tasks: task_id -> Task 的映射表（会被就地修改）
        event: 要应用的事件
    """
    tasks[event.aggregate_id] = event.payload


def rebuild_tasks(events: Iterable[DomainEvent]) -> dict[str, Task]:
    """从事件日志重建 Task 集合

    Args:
        events: 按追加顺序排列的事件

    Returns:
        task_id -> Task 映射，按 Task 首次出现的顺序排列
    """
    start_time = time.monotonic()

    tasks: dict[str, Task] = {}
    event_count = 0
    for event in events:
        apply_event(tasks, event)
        event_count += 1

    elapsed_ms = int((time.monotonic() - start_time) * 1000)
    log.debug(
        "projection_rebuild_completed",
        event_count=event_count,
        task_count=len(tasks),
        elapsed_ms=elapsed_ms,
    )
    return tasks
