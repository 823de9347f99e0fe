"""RemoteCall -- 远程操作抽象

核心层不定义真实的网络传输。每个受保护的操作在熔断器内 await 一次
RemoteCall，由它提供延迟或失败。默认的 SimulatedRemote 只模拟延迟。
"""

import asyncio
from typing import Protocol

from ..config import RemoteConfig

CREATE_TASK = "create_task"
UPDATE_TASK_STATUS = "update_task_status"


class RemoteCall(Protocol):
    """远程调用接口

    失败时应抛出异常（通常为 OperationFailedError），该异常会计入熔断器。
    """

    async def __call__(self, operation: str) -> None:
        ...


class SimulatedRemote:
    """模拟远程调用：按操作名 sleep 对应延迟

    sleep 是唯一的挂起点，不会阻塞事件循环上的其他任务。
    """

    def __init__(self, config: RemoteConfig | None = None) -> None:
        self._config = config or RemoteConfig()

    def latency_for(self, operation: str) -> float:
        if operation == CREATE_TASK:
            return self._config.create_latency_s
        if operation == UPDATE_TASK_STATUS:
            return self._config.update_latency_s
        return 0.0

    async def __call__(self, operation: str) -> None:
        latency = self.latency_for(operation)
        if latency > 0:
            await asyncio.sleep(latency)
