"""TaskQueryService -- 读侧投影

纯函数式查询：不修改入参，不产生副作用。
"""

from collections.abc import Sequence

from ..config import get_recent_events_limit
from ..models import DomainEvent, Task, TaskMetrics, TaskPriority, TaskStatus


class TaskQueryService:
    """任务查询服务"""

    def get_task_metrics(self, tasks: Sequence[Task]) -> TaskMetrics:
        """统计任务数量

        high_priority 统计 priority == high 的任务，不区分状态。
        """
        return TaskMetrics(
            total=len(tasks),
            completed=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
            in_progress=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
            pending=sum(1 for t in tasks if t.status == TaskStatus.PENDING),
            failed=sum(1 for t in tasks if t.status == TaskStatus.FAILED),
            high_priority=sum(1 for t in tasks if t.priority == TaskPriority.HIGH),
        )

    def get_recent_events(
        self,
        events: Sequence[DomainEvent],
        limit: int | None = None,
    ) -> list[DomainEvent]:
        """最近 limit 条事件，最新的在前

        不足 limit 条时返回全部（同样倒序）；limit <= 0 返回空列表。
        limit 为 None 时取 get_recent_events_limit()。
        """
        if limit is None:
            limit = get_recent_events_limit()
        if limit <= 0:
            return []
        return list(reversed(events[-limit:]))
