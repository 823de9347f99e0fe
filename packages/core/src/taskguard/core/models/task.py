"""Task Domain Model

Task 是聚合根，其生命周期可以从事件流完整重建。
模型不可变：每次变更产生新的 Task 值（model_copy），旧值保持不变。
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

from .enums import TaskPriority, TaskStatus


def new_task_id() -> str:
    """生成 Task ID（ULID 格式，时间有序，不会复用）"""
    return str(ULID())


def utc_now() -> datetime:
    return datetime.now(UTC)


class Task(BaseModel):
    """Task 数据模型

    title / priority / created_at 创建后不再变化，
    status 与 updated_at 随每次状态更新刷新。
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_task_id, description="唯一标识，ULID 格式")
    title: str = Field(description="任务标题（本层不校验非空）")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    created_at: datetime = Field(default_factory=utc_now, description="创建时间")
    updated_at: datetime = Field(default_factory=utc_now, description="更新时间")

    def with_status(self, status: TaskStatus, updated_at: datetime | None = None) -> "Task":
        """返回状态更新后的新 Task，其余字段不变"""
        return self.model_copy(
            update={
                "status": TaskStatus(status),
                "updated_at": updated_at or utc_now(),
            }
        )
