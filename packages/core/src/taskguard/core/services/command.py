"""TaskCommandService -- 任务创建/状态更新业务逻辑

每个变更都经过熔断器：
1. 闸门判定（OPEN 时直接拒绝）
2. 远程调用（模拟延迟，可能失败）
3. 构建新的 Task 值
4. 追加一条领域事件并更新 Task projection

成功恰好产生一条事件；拒绝或失败不产生任何事件，异常原样抛给调用方。
"""

import structlog

from ..breaker import CircuitBreaker
from ..config import load_breaker_config, load_remote_config
from ..exceptions import TaskNotFoundError
from ..models import (
    CircuitState,
    DomainEvent,
    EventType,
    Task,
    TaskPriority,
    TaskStatus,
    event_type_for_status,
    new_task_id,
    utc_now,
)
from ..projection import apply_event
from ..store import EventStore, InMemoryEventStore
from .remote import CREATE_TASK, UPDATE_TASK_STATUS, RemoteCall, SimulatedRemote

log = structlog.get_logger()


class TaskCommandService:
    """任务命令服务

    每个实例独占一个 CircuitBreaker 和一个 EventStore，不跨实例共享。
    """

    def __init__(
        self,
        breaker: CircuitBreaker | None = None,
        event_store: EventStore | None = None,
        remote: RemoteCall | None = None,
    ) -> None:
        """
        Args:
            breaker: 熔断器，None 时按环境变量配置新建
            event_store: 事件存储，None 时新建内存存储
            remote: 远程调用，None 时使用 SimulatedRemote
        """
        self._breaker = breaker or CircuitBreaker(load_breaker_config(), name="task_commands")
        self._event_store = event_store if event_store is not None else InMemoryEventStore()
        self._remote = remote or SimulatedRemote(load_remote_config())
        # 事件日志的物化视图，只在追加事件时更新
        self._tasks: dict[str, Task] = {}

    @property
    def breaker(self) -> CircuitBreaker:
        return self._breaker

    async def create_task(self, title: str, priority: TaskPriority) -> Task:
        """创建任务

        Args:
            title: 任务标题（本层不校验非空）
            priority: 优先级

        Returns:
            新建的 Task，status=pending

        Raises:
            BreakerOpenError: 熔断器拒绝
            Exception: 远程调用失败，原样传递
        """
        priority = TaskPriority(priority)

        async def operation() -> Task:
            await self._remote(CREATE_TASK)

            now = utc_now()
            task = Task(
                id=new_task_id(),
                title=title,
                status=TaskStatus.PENDING,
                priority=priority,
                created_at=now,
                updated_at=now,
            )
            self._publish(DomainEvent.for_task(EventType.TASK_CREATED, task))
            return task

        task = await self._breaker.execute(operation)
        await log.ainfo(
            "task_created",
            task_id=task.id,
            priority=task.priority.value,
        )
        return task

    async def update_task_status(self, task: Task, status: TaskStatus) -> Task:
        """更新任务状态（按值传入 Task）

        不校验状态流转是否合法。completed 记为 TASK_COMPLETED，
        其余状态（包括 failed）记为 TASK_UPDATED。

        Returns:
            更新后的新 Task，仅 status 与 updated_at 变化
        """
        status = TaskStatus(status)

        async def operation() -> Task:
            await self._remote(UPDATE_TASK_STATUS)

            updated = task.with_status(status, updated_at=utc_now())
            self._publish(DomainEvent.for_task(event_type_for_status(status), updated))
            return updated

        updated = await self._breaker.execute(operation)
        await log.ainfo(
            "task_status_updated",
            task_id=updated.id,
            from_status=task.status.value,
            to_status=updated.status.value,
        )
        return updated

    async def update_task_status_by_id(self, task_id: str, status: TaskStatus) -> Task:
        """按 ID 更新任务状态

        Raises:
            TaskNotFoundError: ID 不存在；在进入熔断器之前抛出，不留任何痕迹
        """
        task = self.get_task(task_id)
        return await self.update_task_status(task, status)

    def get_task(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def get_tasks(self) -> list[Task]:
        """Task projection 快照，按创建顺序"""
        return list(self._tasks.values())

    def get_events(self) -> list[DomainEvent]:
        """完整事件日志快照"""
        return self._event_store.all()

    def get_circuit_breaker_state(self) -> CircuitState:
        return self._breaker.get_state()

    def _publish(self, event: DomainEvent) -> None:
        self._event_store.append(event)
        apply_event(self._tasks, event)
