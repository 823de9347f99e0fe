"""读侧投影结果模型"""

from pydantic import BaseModel, ConfigDict, Field


class TaskMetrics(BaseModel):
    """任务统计

    high_priority 只看 priority，不区分状态。
    """

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    in_progress: int = Field(default=0, ge=0)
    pending: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    high_priority: int = Field(default=0, ge=0)
