"""structlog 配置模块

熔断器在 execute 期间通过 structlog.contextvars 绑定 breaker 名称，
这里的处理器链负责把它合并进每条日志，并为熔断器状态迁移事件
补充 breaker_transition 字段，便于按迁移过滤。

库代码本身不配置日志，只由入口（__main__）调用 setup_logging()。
"""

import logging
import os

import structlog
from structlog.typing import EventDict, WrappedLogger

from .models.enums import CircuitState

LOG_FORMATS = ("dev", "json")

# 熔断器状态迁移事件 -> 迁移后的状态
_TRANSITION_EVENTS: dict[str, CircuitState] = {
    "circuit_breaker_opened": CircuitState.OPEN,
    "circuit_breaker_half_open": CircuitState.HALF_OPEN,
    "circuit_breaker_closed": CircuitState.CLOSED,
    "circuit_breaker_manual_reset": CircuitState.CLOSED,
}


def add_breaker_transition(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """熔断器状态迁移日志补充 breaker_transition=<新状态>"""
    to_state = _TRANSITION_EVENTS.get(event_dict.get("event", ""))
    if to_state is not None:
        event_dict.setdefault("breaker_transition", to_state.value)
    return event_dict


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 配置

    Args:
        log_format: "dev"（pretty print）或 "json"；None 时读 TASKGUARD_LOG_FORMAT，默认 dev
        log_level: 日志级别名；None 时读 TASKGUARD_LOG_LEVEL，默认 INFO

    Raises:
        ValueError: log_format 不是 dev / json
    """
    log_format = log_format or os.environ.get("TASKGUARD_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("TASKGUARD_LOG_LEVEL", "INFO")
    if log_format not in LOG_FORMATS:
        raise ValueError(f"未知日志格式: {log_format}，可选 {', '.join(LOG_FORMATS)}")

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_breaker_transition,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    renderer: structlog.typing.Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
