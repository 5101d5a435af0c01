"""AURA Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .draft import ActionDraft, DomainContext
from .enums import (
    PROGRESS_STATES,
    STATUS_RELEVANT_FIELDS,
    ActionPriority,
    ActionStatus,
    DomainType,
    FieldKind,
)
from .labels import decode_labels, encode_labels, normalize_labels
from .task import TaskRecord, new_task_id

__all__ = [
    # 枚举
    "ActionStatus",
    "ActionPriority",
    "DomainType",
    "FieldKind",
    # 状态引擎常量
    "PROGRESS_STATES",
    "STATUS_RELEVANT_FIELDS",
    # 标签
    "normalize_labels",
    "encode_labels",
    "decode_labels",
    # Action
    "TaskRecord",
    "new_task_id",
    "ActionDraft",
    "DomainContext",
]
