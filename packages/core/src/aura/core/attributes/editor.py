"""AttributeDiffEditor -- 通用属性编辑器

维护两份 字段名 -> 属性值 映射：
- working：可编辑的工作副本
- original：load 时冻结的快照

apply 只写回发生变化的字段；若状态相关字段（due_date / status /
is_completed）变化，写回后重新运行状态引擎，最后以记录当前值刷新快照。

需要在写回与推进快照之间插入持久化时，使用两阶段接口：
stage -> 保存 -> commit；保存失败时 rollback 恢复记录，快照保持不变，
重试时看到相同的变更集合。
"""

from datetime import datetime
from typing import Any

import structlog
from pydantic import BaseModel, Field

from ..exceptions import ValidationError
from ..models.enums import STATUS_RELEVANT_FIELDS, FieldKind
from ..models.task import TaskRecord
from ..status_engine import auto_update_status
from .schema import TASK_SCHEMA, FieldDescriptor
from .values import FieldValue, StringValue, coerce_value, values_equal

log = structlog.get_logger()


class AttributeRow(BaseModel):
    """属性列表中的一行"""

    name: str
    kind: FieldKind
    value: FieldValue | None = None
    changed: bool = False
    standard: bool = False


class AttributeFilter(BaseModel):
    """属性列表筛选条件（纯谓词，不修改编辑器状态）"""

    only_changed: bool = Field(default=False, description="仅显示已修改字段")
    hide_standard: bool = Field(default=False, description="隐藏标准字段")
    show_empty: bool = Field(default=True, description="显示空值字段")

    def accepts(self, row: AttributeRow) -> bool:
        if self.hide_standard and row.standard:
            return False
        if self.only_changed and not row.changed:
            return False
        if not self.show_empty and _is_empty(row.value):
            return False
        return True


def _is_empty(value: FieldValue | None) -> bool:
    return value is None or (isinstance(value, StringValue) and value.value == "")


class AttributeDiffEditor:
    """基于字段描述表的工作副本编辑器"""

    def __init__(self, schema: dict[str, FieldDescriptor] | None = None) -> None:
        self._schema = schema if schema is not None else TASK_SCHEMA
        self._working: dict[str, FieldValue | None] = {}
        self._original: dict[str, FieldValue | None] = {}
        self._pre_image: TaskRecord | None = None

    # ---- 快照 ----

    def load(self, record: TaskRecord) -> None:
        """从记录当前值填充 original 与 working"""
        values = {name: d.read(record) for name, d in self._schema.items()}
        self._original = dict(values)
        self._working = dict(values)
        self._pre_image = None

    def reset(self) -> None:
        """丢弃未提交的修改"""
        self._working = dict(self._original)

    # ---- 编辑 ----

    def _descriptor(self, name: str) -> FieldDescriptor:
        try:
            return self._schema[name]
        except KeyError:
            raise KeyError(f"未知字段: {name}") from None

    def set_field(self, name: str, value: Any) -> None:
        """修改工作副本中的字段

        Raises:
            KeyError: 字段不存在
            ValidationError: 只读字段，或值无法转换为字段类型
        """
        descriptor = self._descriptor(name)
        if descriptor.read_only:
            raise ValidationError(f"{name} 为只读字段", field=name)
        self._working[name] = coerce_value(descriptor.kind, value, field=name)

    def working_value(self, name: str) -> FieldValue | None:
        self._descriptor(name)
        return self._working.get(name)

    def original_value(self, name: str) -> FieldValue | None:
        self._descriptor(name)
        return self._original.get(name)

    # ---- 变更检测 ----

    def changed_fields(self) -> set[str]:
        """工作副本与快照不相等的字段名集合"""
        return {
            name
            for name in self._schema
            if not values_equal(self._working.get(name), self._original.get(name))
        }

    @property
    def has_changes(self) -> bool:
        return bool(self.changed_fields())

    def rows(self, row_filter: AttributeFilter | None = None) -> list[AttributeRow]:
        """按字段名排序的属性行，经筛选条件过滤"""
        row_filter = row_filter or AttributeFilter()
        changed = self.changed_fields()
        rows = [
            AttributeRow(
                name=name,
                kind=descriptor.kind,
                value=self._working.get(name),
                changed=name in changed,
                standard=descriptor.standard,
            )
            for name, descriptor in sorted(self._schema.items())
        ]
        return [row for row in rows if row_filter.accepts(row)]

    # ---- 写回 ----

    def stage(self, record: TaskRecord, now: datetime | None = None) -> set[str]:
        """将变化的字段写入记录，快照不推进

        Returns:
            写入的字段名集合
        """
        changed = self.changed_fields()
        if not changed:
            self._pre_image = None
            return set()

        self._pre_image = record.model_copy(deep=True)
        for name in sorted(changed):
            self._schema[name].write(record, self._working[name])

        if changed & STATUS_RELEVANT_FIELDS:
            auto_update_status(record, now=now)

        log.debug(
            "attributes_staged",
            task_id=record.task_id,
            fields=sorted(changed),
        )
        return changed

    def commit(self, record: TaskRecord) -> None:
        """以记录当前值刷新快照（包括重新计算后的状态）"""
        self.load(record)

    def rollback(self, record: TaskRecord) -> None:
        """将记录恢复到 stage 之前的值，工作副本与快照保持不变"""
        if self._pre_image is None:
            return
        for descriptor in self._schema.values():
            if descriptor.read_only:
                continue
            descriptor.write(record, descriptor.read(self._pre_image))
        self._pre_image = None
        log.debug("attributes_rolled_back", task_id=record.task_id)

    def apply(self, record: TaskRecord, now: datetime | None = None) -> set[str]:
        """写回变化的字段并推进快照；再次 apply 不会产生任何修改"""
        changed = self.stage(record, now=now)
        self.commit(record)
        return changed
