"""命令 / 查询服务"""

from .command import TaskCommandService
from .query import TaskQueryService
from .remote import CREATE_TASK, UPDATE_TASK_STATUS, RemoteCall, SimulatedRemote

__all__ = [
    "TaskCommandService",
    "TaskQueryService",
    "RemoteCall",
    "SimulatedRemote",
    "CREATE_TASK",
    "UPDATE_TASK_STATUS",
]
