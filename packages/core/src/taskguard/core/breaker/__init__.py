"""熔断器实现

三种状态：
- CLOSED: 正常运行，统计连续失败
- OPEN: 已熔断，调用立即失败
- HALF_OPEN: 探测恢复，连续成功后关闭
"""

from .circuit_breaker import CircuitBreaker
from .state import BreakerConfig, BreakerState, Outcome, admit, on_outcome

__all__ = [
    "CircuitBreaker",
    "BreakerConfig",
    "BreakerState",
    "Outcome",
    "admit",
    "on_outcome",
]
