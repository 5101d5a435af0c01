"""fetch 查询条件

FieldFilter / SortKey 描述筛选与排序，由 TaskStore 转换为参数化 SQL。
字段名必须是 tasks 表中的列，避免拼接任意标识符。
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

TASK_COLUMNS: tuple[str, ...] = (
    "task_id",
    "title",
    "due_date",
    "project",
    "labels_data",
    "priority_raw",
    "domain",
    "is_completed",
    "status",
    "created_at",
    "notes",
    "reminder_time",
)


class FilterOp(StrEnum):
    """筛选谓词"""

    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LE = "le"
    GT = "gt"
    GE = "ge"
    IS_NULL = "is_null"
    NOT_NULL = "not_null"
    NOT_EMPTY = "not_empty"


_BINARY_OPS: dict[FilterOp, str] = {
    FilterOp.EQ: "=",
    FilterOp.NE: "!=",
    FilterOp.LT: "<",
    FilterOp.LE: "<=",
    FilterOp.GT: ">",
    FilterOp.GE: ">=",
}


class FieldFilter(BaseModel):
    """单个字段筛选条件"""

    field: str = Field(description="列名")
    op: FilterOp = Field(default=FilterOp.EQ, description="谓词")
    value: Any = Field(default=None, description="比较值（一元谓词忽略）")


class SortKey(BaseModel):
    """排序键"""

    field: str = Field(description="列名")
    ascending: bool = Field(default=True, description="是否升序")


def _check_column(name: str) -> str:
    if name not in TASK_COLUMNS:
        raise ValueError(f"未知字段: {name}")
    return name


def to_db_value(value: Any) -> Any:
    """Python 值 -> SQLite 参数"""
    if isinstance(value, datetime):
        # naive 时间视为本地时间，统一以 UTC 保存
        return value.astimezone(UTC).isoformat()
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, StrEnum):
        return value.value
    return value


def build_where(filters: list[FieldFilter]) -> tuple[str, list[Any]]:
    """将筛选条件转换为 WHERE 子句（AND 连接）

    Returns:
        (where_sql, params)，无条件时 where_sql 为空字符串
    """
    clauses: list[str] = []
    params: list[Any] = []
    for f in filters:
        column = _check_column(f.field)
        if f.op == FilterOp.IS_NULL:
            clauses.append(f"{column} IS NULL")
        elif f.op == FilterOp.NOT_NULL:
            clauses.append(f"{column} IS NOT NULL")
        elif f.op == FilterOp.NOT_EMPTY:
            clauses.append(f"({column} IS NOT NULL AND {column} != '')")
        else:
            clauses.append(f"{column} {_BINARY_OPS[f.op]} ?")
            params.append(to_db_value(f.value))
    if not clauses:
        return "", params
    return " WHERE " + " AND ".join(clauses), params


def build_order_by(sort: list[SortKey]) -> str:
    if not sort:
        return ""
    parts = [
        f"{_check_column(key.field)} {'ASC' if key.ascending else 'DESC'}"
        for key in sort
    ]
    return " ORDER BY " + ", ".join(parts)
