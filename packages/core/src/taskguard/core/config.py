"""配置模块 -- 可通过环境变量覆盖

包含熔断器阈值、模拟远程调用延迟、最近事件窗口大小等可配置项。
构造函数显式传入的参数始终优先于环境变量。

环境变量:
    TASKGUARD_BREAKER_FAILURE_THRESHOLD: 连续失败多少次后熔断（默认 3）
    TASKGUARD_BREAKER_OPEN_TIMEOUT_S: 熔断冷却时间（秒，默认 5.0）
    TASKGUARD_BREAKER_SUCCESS_THRESHOLD: HALF_OPEN 下连续成功多少次后恢复（默认 2）
    TASKGUARD_CREATE_LATENCY_S: 模拟创建延迟（秒，默认 0.3）
    TASKGUARD_UPDATE_LATENCY_S: 模拟更新延迟（秒，默认 0.2）
    TASKGUARD_RECENT_EVENTS_LIMIT: 最近事件默认条数（默认 5）
"""

import os

import structlog
from pydantic import BaseModel, ConfigDict, Field

from .breaker.state import BreakerConfig

log = structlog.get_logger()

# 最近事件窗口默认大小
DEFAULT_RECENT_EVENTS_LIMIT = 5


def get_recent_events_limit() -> int:
    """最近事件默认条数，调用时读取环境变量

    Raises:
        ValueError: TASKGUARD_RECENT_EVENTS_LIMIT 不是整数
    """
    val = os.environ.get("TASKGUARD_RECENT_EVENTS_LIMIT")
    if not val:
        return DEFAULT_RECENT_EVENTS_LIMIT
    return int(val)


class RemoteConfig(BaseModel):
    """模拟远程调用配置"""

    model_config = ConfigDict(frozen=True)

    create_latency_s: float = Field(default=0.3, ge=0, description="创建任务的模拟延迟（秒）")
    update_latency_s: float = Field(default=0.2, ge=0, description="更新状态的模拟延迟（秒）")


def load_breaker_config() -> BreakerConfig:
    """从环境变量加载熔断器配置

    Returns:
        BreakerConfig 实例（未设置的字段取默认值）
    """
    kwargs: dict = {}

    if val := os.environ.get("TASKGUARD_BREAKER_FAILURE_THRESHOLD"):
        kwargs["failure_threshold"] = int(val)
    if val := os.environ.get("TASKGUARD_BREAKER_OPEN_TIMEOUT_S"):
        kwargs["open_timeout_s"] = float(val)
    if val := os.environ.get("TASKGUARD_BREAKER_SUCCESS_THRESHOLD"):
        kwargs["success_threshold"] = int(val)

    config = BreakerConfig(**kwargs)
    log.debug(
        "breaker_config_loaded",
        failure_threshold=config.failure_threshold,
        open_timeout_s=config.open_timeout_s,
        success_threshold=config.success_threshold,
    )
    return config


def load_remote_config() -> RemoteConfig:
    """从环境变量加载模拟远程调用配置"""
    kwargs: dict = {}

    if val := os.environ.get("TASKGUARD_CREATE_LATENCY_S"):
        kwargs["create_latency_s"] = float(val)
    if val := os.environ.get("TASKGUARD_UPDATE_LATENCY_S"):
        kwargs["update_latency_s"] = float(val)

    return RemoteConfig(**kwargs)
