"""端到端场景测试

测试内容：
1. 正常流程：创建 -> 进行中 -> 完成，事件与 projection 一致
2. 远程故障：熔断、拒绝、冷却后探测、恢复
3. 读侧投影与事件重建结果一致
"""

import pytest
from taskguard.core import (
    BreakerConfig,
    BreakerOpenError,
    CircuitBreaker,
    CircuitState,
    EventType,
    OperationFailedError,
    TaskCommandService,
    TaskPriority,
    TaskQueryService,
    TaskStatus,
    rebuild_tasks,
)


@pytest.fixture
def service(clock, remote) -> TaskCommandService:
    breaker = CircuitBreaker(
        BreakerConfig(failure_threshold=3, open_timeout_s=5.0, success_threshold=2),
        clock=clock,
        name="integration",
    )
    return TaskCommandService(breaker=breaker, remote=remote)


class TestHappyPath:
    """正常流程"""

    async def test_lifecycle(self, service):
        queries = TaskQueryService()

        report = await service.create_task("Write report", TaskPriority.HIGH)
        review = await service.create_task("Review PR", TaskPriority.LOW)
        report = await service.update_task_status(report, TaskStatus.IN_PROGRESS)
        report = await service.update_task_status(report, TaskStatus.COMPLETED)
        review = await service.update_task_status_by_id(review.id, TaskStatus.FAILED)

        events = service.get_events()
        assert [e.type for e in events] == [
            EventType.TASK_CREATED,
            EventType.TASK_CREATED,
            EventType.TASK_UPDATED,
            EventType.TASK_COMPLETED,
            EventType.TASK_UPDATED,
        ]
        assert all(e.payload.id == e.aggregate_id for e in events)

        metrics = queries.get_task_metrics(service.get_tasks())
        assert metrics.total == 2
        assert metrics.completed == 1
        assert metrics.failed == 1
        assert metrics.high_priority == 1

        recent = queries.get_recent_events(events, 2)
        assert [e.payload for e in recent] == [review, report]

    async def test_projection_matches_rebuild(self, service):
        task = await service.create_task("a", TaskPriority.MEDIUM)
        await service.create_task("b", TaskPriority.HIGH)
        await service.update_task_status(task, TaskStatus.COMPLETED)

        rebuilt = rebuild_tasks(service.get_events())

        assert list(rebuilt.values()) == service.get_tasks()


class TestOutageAndRecovery:
    """远程故障与恢复"""

    async def test_trip_reject_retry_recover(self, service, remote, clock):
        task = await service.create_task("survivor", TaskPriority.HIGH)

        remote.fail_with(OperationFailedError("update_task_status", "503"))
        for _ in range(3):
            with pytest.raises(OperationFailedError):
                await service.update_task_status(task, TaskStatus.IN_PROGRESS)
        assert service.get_circuit_breaker_state() == CircuitState.OPEN

        remote.fail_with(None)
        calls_before = len(remote.calls)
        with pytest.raises(BreakerOpenError):
            await service.create_task("rejected", TaskPriority.LOW)
        assert len(remote.calls) == calls_before

        # 故障与拒绝均未留下事件
        assert len(service.get_events()) == 1

        clock.advance(5.0)
        task = await service.update_task_status(task, TaskStatus.IN_PROGRESS)
        assert service.get_circuit_breaker_state() == CircuitState.HALF_OPEN

        await service.update_task_status(task, TaskStatus.COMPLETED)
        assert service.get_circuit_breaker_state() == CircuitState.CLOSED

        assert [e.type for e in service.get_events()] == [
            EventType.TASK_CREATED,
            EventType.TASK_UPDATED,
            EventType.TASK_COMPLETED,
        ]
        assert service.get_task(task.id).status == TaskStatus.COMPLETED

    async def test_failed_retry_reopens(self, service, remote, clock):
        remote.fail_with(OperationFailedError("create_task"))
        for _ in range(3):
            with pytest.raises(OperationFailedError):
                await service.create_task("x", TaskPriority.LOW)

        clock.advance(5.0)
        with pytest.raises(OperationFailedError):
            await service.create_task("retry", TaskPriority.LOW)

        assert service.get_circuit_breaker_state() == CircuitState.OPEN
        with pytest.raises(BreakerOpenError):
            await service.create_task("still rejected", TaskPriority.LOW)
        assert service.get_events() == []
