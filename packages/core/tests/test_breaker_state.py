"""熔断器纯转移函数测试

测试内容：
1. CLOSED 下失败累计与熔断
2. OPEN 闸门拒绝 / 冷却后转 HALF_OPEN
3. HALF_OPEN 下失败立即熔断、连续成功恢复
4. OPEN 下迟到的结果不改变状态
"""

import pytest
from pydantic import ValidationError
from taskguard.core.breaker import BreakerConfig, BreakerState, Outcome, admit, on_outcome
from taskguard.core.exceptions import BreakerOpenError
from taskguard.core.models import CircuitState

CONFIG = BreakerConfig(failure_threshold=3, open_timeout_s=5.0, success_threshold=2)


def _open_state(next_attempt: float = 105.0, failure_count: int = 3) -> BreakerState:
    return BreakerState(
        state=CircuitState.OPEN,
        failure_count=failure_count,
        next_attempt=next_attempt,
    )


class TestBreakerConfig:
    """配置校验"""

    def test_defaults(self):
        config = BreakerConfig()
        assert config.failure_threshold == 3
        assert config.open_timeout_s == 5.0
        assert config.success_threshold == 2

    @pytest.mark.parametrize(
        "field,value",
        [
            ("failure_threshold", 0),
            ("success_threshold", 0),
            ("open_timeout_s", -1.0),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            BreakerConfig(**{field: value})


class TestClosed:
    """CLOSED 状态转移"""

    def test_failures_below_threshold_stay_closed(self):
        state = BreakerState()
        state = on_outcome(state, Outcome.FAILURE, 100.0, CONFIG)
        state = on_outcome(state, Outcome.FAILURE, 100.0, CONFIG)

        assert state.state == CircuitState.CLOSED
        assert state.failure_count == 2

    def test_threshold_reached_opens(self):
        """第 failure_threshold 次失败时熔断，next_attempt = now + timeout"""
        state = BreakerState(failure_count=2)
        state = on_outcome(state, Outcome.FAILURE, 100.0, CONFIG)

        assert state.state == CircuitState.OPEN
        assert state.failure_count == 3
        assert state.next_attempt == 105.0

    def test_success_resets_failure_count(self):
        state = BreakerState(failure_count=2)
        state = on_outcome(state, Outcome.SUCCESS, 100.0, CONFIG)

        assert state.state == CircuitState.CLOSED
        assert state.failure_count == 0

    def test_transition_does_not_mutate_input(self):
        state = BreakerState(failure_count=1)
        on_outcome(state, Outcome.FAILURE, 100.0, CONFIG)
        assert state.failure_count == 1

    def test_admit_closed_is_noop(self):
        state = BreakerState(failure_count=1)
        assert admit(state, 100.0) is state


class TestOpen:
    """OPEN 闸门判定"""

    def test_rejects_before_next_attempt(self):
        with pytest.raises(BreakerOpenError) as exc_info:
            admit(_open_state(next_attempt=105.0), 101.0)
        assert exc_info.value.retry_in_s == pytest.approx(4.0)

    def test_admits_exactly_at_next_attempt(self):
        """now >= next_attempt 时放行并转 HALF_OPEN"""
        state = admit(_open_state(next_attempt=105.0), 105.0)
        assert state.state == CircuitState.HALF_OPEN

    def test_admits_after_next_attempt_keeps_counters(self):
        state = admit(_open_state(next_attempt=105.0, failure_count=3), 200.0)
        assert state.state == CircuitState.HALF_OPEN
        assert state.failure_count == 3
        assert state.success_count == 0

    @pytest.mark.parametrize("outcome", [Outcome.SUCCESS, Outcome.FAILURE])
    def test_late_outcome_ignored(self, outcome):
        """熔断前已放行的调用，其结果不改变 OPEN 状态"""
        state = _open_state()
        assert on_outcome(state, outcome, 101.0, CONFIG) == state

    def test_time_until_retry(self):
        state = _open_state(next_attempt=105.0)
        assert state.time_until_retry(103.5) == pytest.approx(1.5)
        assert state.time_until_retry(110.0) == 0.0
        assert BreakerState().time_until_retry(0.0) == 0.0


class TestHalfOpen:
    """HALF_OPEN 状态转移"""

    def test_failure_reopens_with_fresh_next_attempt(self):
        state = BreakerState(state=CircuitState.HALF_OPEN, success_count=1)
        state = on_outcome(state, Outcome.FAILURE, 200.0, CONFIG)

        assert state.state == CircuitState.OPEN
        assert state.success_count == 0
        assert state.next_attempt == 205.0

    def test_single_failure_reopens_even_with_low_failure_count(self):
        """HALF_OPEN 下一次失败即熔断，不看 failure_threshold"""
        state = BreakerState(state=CircuitState.HALF_OPEN, failure_count=0)
        state = on_outcome(state, Outcome.FAILURE, 200.0, CONFIG)
        assert state.state == CircuitState.OPEN

    def test_success_below_threshold_stays_half_open(self):
        state = BreakerState(state=CircuitState.HALF_OPEN, failure_count=3)
        state = on_outcome(state, Outcome.SUCCESS, 200.0, CONFIG)

        assert state.state == CircuitState.HALF_OPEN
        assert state.success_count == 1
        assert state.failure_count == 0

    def test_success_threshold_closes_and_resets(self):
        state = BreakerState(state=CircuitState.HALF_OPEN, success_count=1, next_attempt=105.0)
        state = on_outcome(state, Outcome.SUCCESS, 200.0, CONFIG)

        assert state == BreakerState()

    def test_success_threshold_one_closes_immediately(self):
        config = BreakerConfig(success_threshold=1)
        state = BreakerState(state=CircuitState.HALF_OPEN)
        state = on_outcome(state, Outcome.SUCCESS, 200.0, config)
        assert state.state == CircuitState.CLOSED


class TestGeneration:
    """熔断前放行的调用，结果不计入"""

    def test_trip_increments_generation(self):
        state = BreakerState(failure_count=2, generation=4)
        state = on_outcome(state, Outcome.FAILURE, 100.0, CONFIG)
        assert state.generation == 5

    def test_close_keeps_generation(self):
        state = BreakerState(state=CircuitState.HALF_OPEN, success_count=1, generation=3)
        state = on_outcome(state, Outcome.SUCCESS, 200.0, CONFIG)

        assert state.state == CircuitState.CLOSED
        assert state.generation == 3

    def test_stale_success_not_counted_in_half_open(self):
        """CLOSED 时放行的调用在 HALF_OPEN 期间成功，不算恢复探测"""
        state = BreakerState(state=CircuitState.HALF_OPEN, failure_count=3, generation=1)

        after = on_outcome(state, Outcome.SUCCESS, 200.0, CONFIG, admitted_generation=0)

        assert after == state

    def test_stale_failure_not_counted(self):
        state = BreakerState(state=CircuitState.HALF_OPEN, generation=1)
        after = on_outcome(state, Outcome.FAILURE, 200.0, CONFIG, admitted_generation=0)
        assert after.state == CircuitState.HALF_OPEN

    def test_current_generation_counted(self):
        state = BreakerState(state=CircuitState.HALF_OPEN, generation=1)
        after = on_outcome(state, Outcome.SUCCESS, 200.0, CONFIG, admitted_generation=1)
        assert after.success_count == 1
