"""熔断器状态值与纯转移函数

状态以不可变的 BreakerState 表示，所有转移都是纯函数：
输入当前状态、调用结果和当前时间，返回新状态。时钟由调用方注入，
因此状态机可以在没有真实等待的情况下完整测试。

转移规则:
- CLOSED: 成功清零 failure_count；失败累加，达到 failure_threshold 转 OPEN
- OPEN: now < next_attempt 时拒绝；否则转 HALF_OPEN 并放行本次调用
- HALF_OPEN: 任一失败立即回到 OPEN（刷新 next_attempt）；
  连续成功达到 success_threshold 转 CLOSED 并清零计数

每次熔断 generation 加一。调用放行时记下当时的 generation，
结果到达时若 generation 已变化（放行后又熔断过），该结果不计入。
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import BreakerOpenError
from ..models.enums import CircuitState


class Outcome(StrEnum):
    """单次调用结果"""

    SUCCESS = "success"
    FAILURE = "failure"


class BreakerConfig(BaseModel):
    """熔断器配置，构造后不可变"""

    model_config = ConfigDict(frozen=True)

    failure_threshold: int = Field(default=3, ge=1, description="连续失败多少次后熔断")
    open_timeout_s: float = Field(default=5.0, ge=0, description="OPEN 冷却时间（秒）")
    success_threshold: int = Field(default=2, ge=1, description="HALF_OPEN 恢复所需连续成功次数")


class BreakerState(BaseModel):
    """熔断器状态值

    next_attempt 为单调时钟读数（秒），仅在 OPEN 时有意义。
    generation 为熔断次数，CLOSED 后保留，用于识别熔断前放行的调用。
    """

    model_config = ConfigDict(frozen=True)

    state: CircuitState = CircuitState.CLOSED
    failure_count: int = Field(default=0, ge=0)
    success_count: int = Field(default=0, ge=0)
    next_attempt: float | None = None
    generation: int = Field(default=0, ge=0)

    def time_until_retry(self, now: float) -> float:
        """距离允许探测的剩余秒数，非 OPEN 时为 0"""
        if self.state != CircuitState.OPEN or self.next_attempt is None:
            return 0.0
        return max(0.0, self.next_attempt - now)


def admit(state: BreakerState, now: float) -> BreakerState:
    """闸门判定

    Returns:
        放行时的状态（OPEN 且冷却结束时转为 HALF_OPEN）

    Raises:
        BreakerOpenError: OPEN 且 now < next_attempt，状态不变
    """
    if state.state != CircuitState.OPEN:
        return state
    if state.next_attempt is not None and now < state.next_attempt:
        raise BreakerOpenError(retry_in_s=state.time_until_retry(now))
    return state.model_copy(update={"state": CircuitState.HALF_OPEN})


def _trip(state: BreakerState, failure_count: int, now: float, config: BreakerConfig) -> BreakerState:
    return BreakerState(
        state=CircuitState.OPEN,
        failure_count=failure_count,
        success_count=0,
        next_attempt=now + config.open_timeout_s,
        generation=state.generation + 1,
    )


def on_outcome(
    state: BreakerState,
    outcome: Outcome,
    now: float,
    config: BreakerConfig,
    admitted_generation: int | None = None,
) -> BreakerState:
    """根据调用结果计算新状态

    Args:
        admitted_generation: 调用放行时的 generation，None 表示不做检查

    OPEN 状态下到达的结果，以及放行后又经历过熔断的调用结果，都不改变状态。
    """
    if state.state == CircuitState.OPEN:
        return state
    if admitted_generation is not None and admitted_generation != state.generation:
        return state

    if outcome == Outcome.FAILURE:
        failure_count = state.failure_count + 1
        if state.state == CircuitState.HALF_OPEN:
            return _trip(state, failure_count, now, config)
        if failure_count >= config.failure_threshold:
            return _trip(state, failure_count, now, config)
        return state.model_copy(update={"failure_count": failure_count})

    if state.state == CircuitState.HALF_OPEN:
        success_count = state.success_count + 1
        if success_count >= config.success_threshold:
            return BreakerState(state=CircuitState.CLOSED, generation=state.generation)
        return state.model_copy(update={"failure_count": 0, "success_count": success_count})

    return state.model_copy(update={"failure_count": 0})
