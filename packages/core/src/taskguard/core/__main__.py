"""CLI 入口模块 -- python -m taskguard.core <command>

支持的命令：
  simulate  对新建服务跑一遍 创建 / 更新 / 连续失败 / 恢复 的脚本场景
"""

import asyncio
import sys

from .breaker import BreakerConfig, CircuitBreaker
from .config import RemoteConfig
from .exceptions import BreakerOpenError, OperationFailedError
from .logging_config import setup_logging
from .models import TaskPriority, TaskStatus
from .services import SimulatedRemote, TaskCommandService, TaskQueryService


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m taskguard.core <command>")
        print("命令:")
        print("  simulate  运行熔断器演示场景")
        sys.exit(1)

    command = sys.argv[1]

    if command == "simulate":
        setup_logging()
        asyncio.run(simulate())
    else:
        print(f"未知命令: {command}")
        print("可用命令: simulate")
        sys.exit(1)


class FlakyRemote:
    """前 healthy_calls 次调用成功，之后持续失败，直到 recover() 被调用"""

    def __init__(self, inner: SimulatedRemote, healthy_calls: int) -> None:
        self._inner = inner
        self._remaining = healthy_calls
        self._down = False

    def recover(self) -> None:
        self._down = False
        self._remaining = -1

    async def __call__(self, operation: str) -> None:
        await self._inner(operation)
        if self._remaining == 0:
            self._down = True
        if self._remaining > 0:
            self._remaining -= 1
        if self._down:
            raise OperationFailedError(operation, "simulated outage")


async def simulate() -> None:
    """执行演示场景"""
    breaker_config = BreakerConfig(open_timeout_s=0.5)
    remote = FlakyRemote(
        SimulatedRemote(RemoteConfig(create_latency_s=0.05, update_latency_s=0.05)),
        healthy_calls=3,
    )
    commands = TaskCommandService(
        breaker=CircuitBreaker(breaker_config, name="simulate"),
        remote=remote,
    )
    queries = TaskQueryService()

    first = await commands.create_task("Write report", TaskPriority.HIGH)
    await commands.create_task("Review PR", TaskPriority.MEDIUM)
    await commands.update_task_status(first, TaskStatus.IN_PROGRESS)

    # 远程开始失败，直到熔断
    for _ in range(breaker_config.failure_threshold + 1):
        try:
            await commands.create_task("Doomed", TaskPriority.LOW)
        except (OperationFailedError, BreakerOpenError) as e:
            print(f"调用失败: {e} (state={commands.get_circuit_breaker_state()})")

    remote.recover()
    await asyncio.sleep(breaker_config.open_timeout_s)

    current = commands.get_task(first.id)
    await commands.update_task_status(current, TaskStatus.COMPLETED)
    print(f"探测后状态: {commands.get_circuit_breaker_state()}")
    await commands.create_task("After recovery", TaskPriority.LOW)
    print(f"恢复后状态: {commands.get_circuit_breaker_state()}")

    metrics = queries.get_task_metrics(commands.get_tasks())
    print(f"统计: {metrics.model_dump()}")
    for event in queries.get_recent_events(commands.get_events()):
        print(f"  {event.timestamp.isoformat()} {event.type} {event.aggregate_id} {event.payload.status}")


if __name__ == "__main__":
    main()
