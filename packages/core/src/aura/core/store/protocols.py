"""Store Protocol 接口定义

定义 TaskStore 的抽象接口，使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Protocol

from ..models.task import TaskRecord
from .query import FieldFilter, SortKey


class TaskStore(Protocol):
    """Action 存储接口"""

    async def save_task(self, record: TaskRecord) -> None:
        """写入或更新 Action（不覆盖 created_at）"""
        ...

    async def delete_task(self, task_id: str) -> None:
        """删除 Action"""
        ...

    async def get_task(self, task_id: str) -> TaskRecord | None:
        """根据 task_id 查询 Action"""
        ...

    async def fetch(
        self,
        filters: list[FieldFilter] | None = None,
        sort: list[SortKey] | None = None,
        limit: int | None = None,
    ) -> list[TaskRecord]:
        """按筛选条件查询 Action"""
        ...

    async def count(self, filters: list[FieldFilter] | None = None) -> int:
        """统计满足条件的 Action 数量"""
        ...

    async def list_recent_projects(self, limit: int = 40) -> list[str]:
        """最近使用过的项目名"""
        ...
