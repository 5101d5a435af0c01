"""TaskRecord 数据模型

Action（任务）实体。字段名与 tasks 表列名一致；
labels / priority 以原始存储形式保存，通过访问器读写归一化后的值。
"""

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, Field
from ulid import ULID

from .enums import ActionPriority, ActionStatus, DomainType
from .labels import decode_labels, encode_labels


def new_task_id() -> str:
    """生成 Action ID（ULID 格式，时间有序）"""
    return str(ULID())


class TaskRecord(BaseModel):
    """Action 数据模型

    task_id 在创建时分配，之后不再变化；
    created_at 在首次持久化时设置，之后不再覆盖。
    """

    task_id: str = Field(default_factory=new_task_id, description="唯一标识，ULID 格式")
    title: str = Field(default="", description="标题，编辑器保存时要求非空")
    due_date: datetime | None = Field(default=None, description="截止时间")
    project: str | None = Field(default=None, description="项目名称")
    labels_data: bytes | None = Field(default=None, description="编码后的标签")
    priority_raw: str | None = Field(default=None, description="优先级原始值")
    domain: str | None = Field(default=None, description="生活领域")
    is_completed: bool = Field(default=False, description="是否已完成")
    status: str | None = Field(default=None, description="状态原始值")
    created_at: datetime | None = Field(default=None, description="首次持久化时间")
    notes: str | None = Field(default=None, description="备注")
    reminder_time: datetime | None = Field(default=None, description="提醒时间")

    @property
    def labels(self) -> list[str]:
        """解码后的标签，格式错误时为空列表"""
        return decode_labels(self.labels_data)

    def set_labels(self, raw: Iterable[str]) -> None:
        """归一化后写入标签，无有效标签时存储为缺省"""
        self.labels_data = encode_labels(raw)

    @property
    def priority(self) -> ActionPriority | None:
        return ActionPriority.parse(self.priority_raw)

    def set_priority(self, priority: ActionPriority | None) -> None:
        self.priority_raw = priority.value if priority is not None else None

    @property
    def status_value(self) -> ActionStatus | None:
        """解析后的状态，无法识别的原始值为 None"""
        return ActionStatus.parse(self.status)

    @property
    def domain_type(self) -> DomainType | None:
        return DomainType.parse(self.domain)

    def ensure_created_at(self, now: datetime) -> None:
        """仅在 created_at 缺省时设置"""
        if self.created_at is None:
            self.created_at = now
