"""CircuitBreaker -- 远程调用的故障隔离闸门

在操作持续失败时停止调用，冷却结束后自动探测恢复。
状态计算委托给 state 模块的纯函数，本类只负责持有状态、注入时钟、
加锁以及记录日志。

用法:
    breaker = CircuitBreaker(BreakerConfig(failure_threshold=3))
    result = await breaker.execute(lambda: remote_call())
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from ..exceptions import BreakerOpenError
from ..models.enums import CircuitState
from .state import BreakerConfig, BreakerState, Outcome, admit, on_outcome

log = structlog.get_logger()

T = TypeVar("T")

Clock = Callable[[], float]


class CircuitBreaker:
    """单进程、单实例熔断器

    闸门判定与结果更新各自在锁内完成，被包装的操作在锁外执行，
    因此并发调用不会破坏计数器，但也不会被相互串行化。
    """

    def __init__(
        self,
        config: BreakerConfig | None = None,
        clock: Clock = time.monotonic,
        name: str = "default",
    ) -> None:
        """
        Args:
            config: 熔断器配置，None 时使用默认值（3 / 5.0s / 2）
            clock: 单调时钟，返回秒数
            name: 熔断器名称，仅用于日志
        """
        self._config = config or BreakerConfig()
        self._clock = clock
        self._name = name
        self._state = BreakerState()
        self._lock = asyncio.Lock()

    @property
    def config(self) -> BreakerConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._name

    def get_state(self) -> CircuitState:
        """当前状态（纯读取，供轮询展示）"""
        return self._state.state

    def snapshot(self) -> BreakerState:
        """当前完整状态值（包含计数器与 next_attempt）"""
        return self._state

    def time_until_retry(self) -> float:
        """距离允许探测的剩余秒数，非 OPEN 时为 0"""
        return self._state.time_until_retry(self._clock())

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """通过闸门执行操作

        Args:
            operation: 零参数异步操作

        Returns:
            操作结果

        Raises:
            BreakerOpenError: 闸门拒绝，操作未被调用
            Exception: 操作本身抛出的异常，原样传递（已计入失败）
        """
        with structlog.contextvars.bound_contextvars(breaker=self._name):
            async with self._lock:
                try:
                    self._set_state(admit(self._state, self._clock()))
                except BreakerOpenError as e:
                    await log.ainfo(
                        "circuit_breaker_rejected",
                        retry_in_s=round(e.retry_in_s, 3),
                    )
                    raise
                generation = self._state.generation

            try:
                result = await operation()
            except Exception as e:
                async with self._lock:
                    self._record(Outcome.FAILURE, generation)
                    failure_count = self._state.failure_count
                await log.awarning(
                    "circuit_breaker_failure_recorded",
                    error=str(e),
                    error_type=type(e).__name__,
                    failure_count=failure_count,
                    failure_threshold=self._config.failure_threshold,
                )
                raise

            async with self._lock:
                self._record(Outcome.SUCCESS, generation)
            return result

    async def reset(self) -> None:
        """手动重置为 CLOSED（管理干预用）

        重置前已放行的调用，其结果不再计入。
        """
        async with self._lock:
            if self._state.state != CircuitState.CLOSED:
                await log.ainfo(
                    "circuit_breaker_manual_reset",
                    breaker=self._name,
                    from_state=self._state.state.value,
                )
            self._state = BreakerState(generation=self._state.generation + 1)

    def _record(self, outcome: Outcome, generation: int) -> None:
        """在锁内调用"""
        self._set_state(
            on_outcome(self._state, outcome, self._clock(), self._config, admitted_generation=generation)
        )

    def _set_state(self, new_state: BreakerState) -> None:
        """在 execute 内调用，breaker 名称已绑定到 contextvars"""
        old = self._state.state
        self._state = new_state
        if new_state.state == old:
            return

        if new_state.state == CircuitState.OPEN:
            log.warning(
                "circuit_breaker_opened",
                from_state=old.value,
                failure_count=new_state.failure_count,
                open_timeout_s=self._config.open_timeout_s,
            )
        elif new_state.state == CircuitState.HALF_OPEN:
            log.info("circuit_breaker_half_open")
        else:
            log.info(
                "circuit_breaker_closed",
                from_state=old.value,
            )
