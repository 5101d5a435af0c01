"""TaskRecord 字段描述表

显式声明每个字段的类型标签与读写闭包，编辑器通过描述表而不是
运行时反射来枚举和修改字段。
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..models.enums import FieldKind
from ..models.task import TaskRecord
from .values import FieldValue, wrap_value


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """单个字段的描述"""

    name: str
    kind: FieldKind
    getter: Callable[[TaskRecord], Any]
    setter: Callable[[TaskRecord, Any], None] | None
    standard: bool = False

    @property
    def read_only(self) -> bool:
        return self.setter is None

    def read(self, record: TaskRecord) -> FieldValue | None:
        return wrap_value(self.kind, self.getter(record))

    def write(self, record: TaskRecord, value: FieldValue | None) -> None:
        if self.setter is None:
            raise AttributeError(f"{self.name} 为只读字段")
        self.setter(record, None if value is None else value.value)


def _field(
    name: str,
    kind: FieldKind,
    *,
    standard: bool = False,
    read_only: bool = False,
) -> FieldDescriptor:
    def getter(record: TaskRecord) -> Any:
        return getattr(record, name)

    def setter(record: TaskRecord, value: Any) -> None:
        setattr(record, name, value)

    return FieldDescriptor(
        name=name,
        kind=kind,
        getter=getter,
        setter=None if read_only else setter,
        standard=standard,
    )


def build_task_schema() -> dict[str, FieldDescriptor]:
    """构建 TaskRecord 的字段描述表"""
    fields = [
        _field("task_id", FieldKind.ID, read_only=True),
        _field("title", FieldKind.STRING, standard=True),
        _field("due_date", FieldKind.DATE, standard=True),
        _field("project", FieldKind.STRING, standard=True),
        _field("labels_data", FieldKind.BINARY),
        _field("priority_raw", FieldKind.STRING),
        _field("domain", FieldKind.STRING, standard=True),
        _field("is_completed", FieldKind.BOOL, standard=True),
        _field("status", FieldKind.STRING, standard=True),
        # created_at 首次持久化后不可修改
        _field("created_at", FieldKind.DATE, standard=True, read_only=True),
        _field("notes", FieldKind.STRING, standard=True),
        _field("reminder_time", FieldKind.DATE),
    ]
    return {f.name: f for f in fields}


TASK_SCHEMA: dict[str, FieldDescriptor] = build_task_schema()

STANDARD_FIELDS: frozenset[str] = frozenset(
    name for name, descriptor in TASK_SCHEMA.items() if descriptor.standard
)
