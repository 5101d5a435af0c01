"""编辑器草稿与领域上下文

ActionDraft 承载编辑器/新建表单中的主字段；DomainContext 显式传递
当前选中的领域，替代界面层的全局可变状态。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ActionPriority, ActionStatus, DomainType


class DomainContext(BaseModel):
    """当前选中的领域（None 表示全部领域）"""

    selected: DomainType | None = Field(default=None, description="选中的领域")


class ActionDraft(BaseModel):
    """Action 编辑草稿 -- 主字段的未提交值"""

    title: str = Field(description="标题（提交时去除首尾空白并要求非空）")
    due_date: datetime | None = Field(default=None, description="截止时间")
    project: str = Field(default="", description="项目，空白视为未设置")
    notes: str = Field(default="", description="备注，空白视为未设置")
    labels: list[str] = Field(default_factory=list, description="原始标签输入")
    priority: ActionPriority | None = Field(default=None, description="优先级")
    domain: DomainType | None = Field(default=None, description="领域")
    is_completed: bool = Field(default=False, description="是否已完成")
    status: ActionStatus | None = Field(
        default=None,
        description="手动选择的状态，None 表示保持当前状态",
    )
