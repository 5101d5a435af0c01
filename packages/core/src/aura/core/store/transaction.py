"""Action 写入事务封装

save / delete 在单个 SQLite 事务内提交，失败时回滚并抛出 StorageError，
内存中的记录不会留下本次调用造成的修改。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog

from ..exceptions import StorageError
from ..models.task import TaskRecord
from .protocols import TaskStore

log = structlog.get_logger()


async def _safe_rollback(conn: aiosqlite.Connection, operation: str) -> None:
    """回滚当前事务；连接已关闭等情况下回滚本身失败时只记录日志"""
    try:
        await conn.rollback()
    except Exception as e:
        await log.awarning("transaction_rollback_failed", operation=operation, error=str(e))


async def save_task(
    conn: aiosqlite.Connection,
    task_store: TaskStore,
    record: TaskRecord,
    now: datetime | None = None,
) -> None:
    """保存单个 Action，首次持久化时设置 created_at

    Args:
        conn: 数据库连接（需在同一连接上操作以保证事务性）
        task_store: TaskStore 实例
        record: 要保存的 Action
        now: created_at 缺省时使用的时间

    Raises:
        StorageError: 写入或提交失败，事务已回滚
    """
    await save_tasks(conn, task_store, [record], now=now)


async def save_tasks(
    conn: aiosqlite.Connection,
    task_store: TaskStore,
    records: list[TaskRecord],
    now: datetime | None = None,
) -> None:
    """在同一事务内保存多个 Action

    Raises:
        StorageError: 任一写入失败时整体回滚
    """
    if now is None:
        now = datetime.now(UTC)

    # 记录本次新设置 created_at 的记录，失败时撤销
    stamped = [r for r in records if r.created_at is None]
    for record in stamped:
        record.ensure_created_at(now)

    try:
        for record in records:
            await task_store.save_task(record)
        await conn.commit()
    except Exception as e:
        await _safe_rollback(conn, "save")
        for record in stamped:
            record.created_at = None
        raise StorageError("save", e) from e


async def delete_task(
    conn: aiosqlite.Connection,
    task_store: TaskStore,
    record: TaskRecord,
) -> None:
    """删除 Action（终态操作）

    Raises:
        StorageError: 删除或提交失败，事务已回滚
    """
    try:
        await task_store.delete_task(record.task_id)
        await conn.commit()
    except Exception as e:
        await _safe_rollback(conn, "delete")
        raise StorageError("delete", e) from e
