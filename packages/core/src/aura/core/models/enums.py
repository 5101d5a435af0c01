"""枚举定义

包含 ActionStatus 状态、ActionPriority 优先级、DomainType 生活领域、
FieldKind 字段类型枚举，以及状态引擎使用的 PROGRESS_STATES 与
STATUS_RELEVANT_FIELDS 常量。

枚举的 value 与持久化层中保存的原始字符串一致。
"""

from enum import StrEnum


class ActionStatus(StrEnum):
    """Action 生命周期状态"""

    INBOX = "Inbox"
    TODO = "To-do"
    IN_PROGRESS = "In Progress"
    OVERDUE = "Overdue"
    NEEDS_REVIEW = "Needs Review"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, raw: str | None) -> "ActionStatus | None":
        """解析存储的原始值，无法识别时返回 None"""
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


class ActionPriority(StrEnum):
    """Action 优先级，除枚举解析外不做任何归一化"""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, raw: str | None) -> "ActionPriority | None":
        """未知字符串解码为 None（视为未设置）"""
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


class DomainType(StrEnum):
    """生活领域"""

    WORK = "Work"
    PERSONAL = "Personal"
    LEARNING = "Learning"

    @classmethod
    def parse(cls, raw: str | None) -> "DomainType | None":
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


class FieldKind(StrEnum):
    """通用属性编辑器的字段类型标签"""

    STRING = "string"
    BOOL = "bool"
    DATE = "date"
    INT = "int"
    FLOAT = "float"
    ID = "id"
    BINARY = "binary"
    OTHER = "other"


# 开启保留时，这些状态不会被自动流转覆盖
PROGRESS_STATES: set[ActionStatus] = {
    ActionStatus.IN_PROGRESS,
    ActionStatus.NEEDS_REVIEW,
}

# 任一字段变化后需要重新计算状态
STATUS_RELEVANT_FIELDS: frozenset[str] = frozenset(
    {"due_date", "status", "is_completed"}
)
