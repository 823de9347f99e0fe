"""TaskGuard 异常体系

所有异常原样传递给直接调用方，核心层不做内部重试。
"""


class TaskGuardError(Exception):
    """Core 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可由调用方稍后重试恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class BreakerOpenError(TaskGuardError):
    """熔断器处于 OPEN 状态，调用被直接拒绝

    被拒绝的调用不会执行，也不会产生任何状态变更或事件。
    """

    def __init__(self, retry_in_s: float) -> None:
        """
        Args:
            retry_in_s: 距离允许探测还剩的秒数
        """
        super().__init__(
            f"Circuit breaker is OPEN. Retry in {retry_in_s:.1f}s",
            recoverable=True,
        )
        self.retry_in_s = retry_in_s


class OperationFailedError(TaskGuardError):
    """被包装的远程操作本身失败

    总是计入熔断器的失败次数。
    """

    def __init__(self, operation: str, reason: str = "") -> None:
        message = f"Operation {operation} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, recoverable=True)
        self.operation = operation
        self.reason = reason


class TaskNotFoundError(TaskGuardError):
    """按 ID 查找 Task 失败

    在进入熔断器之前抛出，不留下任何痕迹（无事件、无熔断器状态变更）。
    """

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}", recoverable=False)
        self.task_id = task_id
