"""TaskStore SQLite 实现

此处仅提供数据库操作，不提交事务；提交与回滚由 transaction 模块负责。
"""

from datetime import datetime

import aiosqlite

from ..models.task import TaskRecord
from .query import (
    TASK_COLUMNS,
    FieldFilter,
    SortKey,
    build_order_by,
    build_where,
    to_db_value,
)

_SELECT_COLUMNS = ", ".join(TASK_COLUMNS)

# created_at 只在首次写入时设置
_UPSERT_SQL = f"""
INSERT INTO tasks ({_SELECT_COLUMNS})
VALUES ({", ".join("?" for _ in TASK_COLUMNS)})
ON CONFLICT(task_id) DO UPDATE SET
    title = excluded.title,
    due_date = excluded.due_date,
    project = excluded.project,
    labels_data = excluded.labels_data,
    priority_raw = excluded.priority_raw,
    domain = excluded.domain,
    is_completed = excluded.is_completed,
    status = excluded.status,
    created_at = COALESCE(tasks.created_at, excluded.created_at),
    notes = excluded.notes,
    reminder_time = excluded.reminder_time
"""


def _parse_datetime(raw: str | None) -> datetime | None:
    if raw is None:
        return None
    return datetime.fromisoformat(raw)


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def save_task(self, record: TaskRecord) -> None:
        """写入或更新 Action（upsert，不覆盖 created_at）

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await self._conn.execute(
            _UPSERT_SQL,
            tuple(to_db_value(getattr(record, column)) for column in TASK_COLUMNS),
        )

    async def delete_task(self, task_id: str) -> None:
        """删除 Action（不自动提交）"""
        await self._conn.execute(
            "DELETE FROM tasks WHERE task_id = ?",
            (task_id,),
        )

    async def get_task(self, task_id: str) -> TaskRecord | None:
        """根据 task_id 查询 Action"""
        cursor = await self._conn.execute(
            f"SELECT {_SELECT_COLUMNS} FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def fetch(
        self,
        filters: list[FieldFilter] | None = None,
        sort: list[SortKey] | None = None,
        limit: int | None = None,
    ) -> list[TaskRecord]:
        """按筛选条件查询 Action

        Args:
            filters: 筛选条件，AND 连接
            sort: 排序键，按顺序应用
            limit: 最多返回条数，None 表示不限制

        Raises:
            ValueError: 字段名不是 tasks 表中的列
        """
        where_sql, params = build_where(filters or [])
        sql = f"SELECT {_SELECT_COLUMNS} FROM tasks{where_sql}{build_order_by(sort or [])}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))
        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def count(self, filters: list[FieldFilter] | None = None) -> int:
        """统计满足条件的 Action 数量"""
        where_sql, params = build_where(filters or [])
        cursor = await self._conn.execute(f"SELECT COUNT(*) FROM tasks{where_sql}", params)
        row = await cursor.fetchone()
        return int(row[0]) if row else 0

    async def list_recent_projects(self, limit: int = 40) -> list[str]:
        """最近 limit 条带项目的 Action 中出现过的项目名

        去重后按小写字典序排序。
        """
        cursor = await self._conn.execute(
            """
            SELECT project FROM tasks
            WHERE project IS NOT NULL AND project != ''
            ORDER BY created_at DESC
            LIMIT ?
            """,
            (int(limit),),
        )
        rows = await cursor.fetchall()
        # dict 保持首次出现顺序
        distinct = list(dict.fromkeys(row[0] for row in rows))
        return sorted(distinct, key=str.lower)

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> TaskRecord:
        """将数据库行转换为 TaskRecord 模型"""
        labels_data = row[4]
        return TaskRecord(
            task_id=row[0],
            title=row[1],
            due_date=_parse_datetime(row[2]),
            project=row[3],
            labels_data=bytes(labels_data) if labels_data is not None else None,
            priority_raw=row[5],
            domain=row[6],
            is_completed=bool(row[7]),
            status=row[8],
            created_at=_parse_datetime(row[9]),
            notes=row[10],
            reminder_time=_parse_datetime(row[11]),
        )
