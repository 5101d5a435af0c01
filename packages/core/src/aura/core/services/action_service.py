"""ActionService -- Action 新建/编辑/完成/删除/查询业务逻辑

实现编辑流程：
1. 将草稿或属性编辑写入 TaskRecord
2. 运行状态引擎
3. 通过 transaction 模块持久化
4. 持久化失败时恢复内存中的记录，编辑器快照不推进
"""

from datetime import datetime

import structlog

from ..attributes import AttributeDiffEditor
from ..config import RECENT_PROJECTS_LIMIT
from ..exceptions import StorageError, ValidationError
from ..models import (
    ActionDraft,
    ActionStatus,
    DomainContext,
    DomainType,
    TaskRecord,
)
from ..status_engine import auto_update_status, initialize_default_status, local_now
from ..store import FieldFilter, SortKey, StoreGroup
from ..store.transaction import delete_task, save_task, save_tasks
from .quick_add import parse_quick_add

log = structlog.get_logger()

_NEWEST_FIRST = [SortKey(field="created_at", ascending=False)]


def _require_title(title: str) -> str:
    """去除首尾空白并要求非空"""
    cleaned = title.strip()
    if not cleaned:
        raise ValidationError("标题不能为空", field="title")
    return cleaned


def _blank_to_none(value: str) -> str | None:
    return value if value.strip() else None


def _restore(record: TaskRecord, snapshot: TaskRecord) -> None:
    for name in TaskRecord.model_fields:
        setattr(record, name, getattr(snapshot, name))


class ActionService:
    """Action 业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def _save_or_restore(self, record: TaskRecord, snapshot: TaskRecord) -> None:
        try:
            await save_task(self._stores.conn, self._stores.task_store, record)
        except StorageError:
            _restore(record, snapshot)
            await log.awarning("action_save_failed", task_id=record.task_id)
            raise

    # ---- 新建 ----

    async def quick_add(
        self,
        text: str,
        context: DomainContext | None = None,
        *,
        project: str = "",
        due_date: datetime | None = None,
        notes: str = "",
        now: datetime | None = None,
    ) -> TaskRecord:
        """快速添加 Action

        输入中的 #project 与日期词只在未显式指定时生效。
        新建的 Action 状态为 INBOX，领域取自 context。

        Raises:
            ValidationError: 解析后标题为空
            StorageError: 持久化失败
        """
        if now is None:
            now = local_now()
        _require_title(text)
        parsed = parse_quick_add(text, now)
        title = _require_title(parsed.title)

        final_project = project.strip() or parsed.project
        record = TaskRecord(
            title=title,
            status=ActionStatus.INBOX.value,
            created_at=now,
            domain=context.selected.value if context and context.selected else None,
            project=final_project or None,
            due_date=due_date if due_date is not None else parsed.due_date,
            notes=_blank_to_none(notes),
        )

        await save_task(self._stores.conn, self._stores.task_store, record)
        await log.ainfo(
            "action_quick_added",
            task_id=record.task_id,
            domain=record.domain,
            project=record.project,
        )
        return record

    async def create_action(
        self,
        draft: ActionDraft,
        context: DomainContext | None = None,
        now: datetime | None = None,
    ) -> TaskRecord:
        """通过完整表单新建 Action，填充默认状态与截止时间

        Raises:
            ValidationError: 标题为空
            StorageError: 持久化失败
        """
        if now is None:
            now = local_now()
        domain = draft.domain or (context.selected if context else None)

        record = TaskRecord(
            title=_require_title(draft.title),
            due_date=draft.due_date,
            project=_blank_to_none(draft.project),
            notes=_blank_to_none(draft.notes),
            domain=domain.value if domain else None,
            is_completed=draft.is_completed,
            status=draft.status.value if draft.status else None,
        )
        record.set_labels(draft.labels)
        record.set_priority(draft.priority)
        initialize_default_status(record, now=now)

        await save_task(self._stores.conn, self._stores.task_store, record)
        await log.ainfo(
            "action_created",
            task_id=record.task_id,
            status=record.status,
            domain=record.domain,
        )
        return record

    # ---- 编辑 ----

    async def save_action(
        self,
        record: TaskRecord,
        draft: ActionDraft,
        now: datetime | None = None,
    ) -> TaskRecord:
        """编辑器保存：写入主字段后重新计算状态

        Raises:
            ValidationError: 标题为空（记录不做任何修改）
            StorageError: 持久化失败（记录恢复为保存前的值）
        """
        title = _require_title(draft.title)
        snapshot = record.model_copy(deep=True)

        record.title = title
        record.due_date = draft.due_date
        record.project = _blank_to_none(draft.project)
        record.notes = _blank_to_none(draft.notes)
        record.set_labels(draft.labels)
        record.set_priority(draft.priority)
        record.domain = draft.domain.value if draft.domain else None
        record.is_completed = draft.is_completed
        if draft.status is not None:
            record.status = draft.status.value
        auto_update_status(record, now=now)

        await self._save_or_restore(record, snapshot)
        await log.ainfo("action_saved", task_id=record.task_id, status=record.status)
        return record

    async def set_completed(
        self,
        record: TaskRecord,
        completed: bool,
        now: datetime | None = None,
    ) -> TaskRecord:
        """切换完成状态并重新计算状态"""
        snapshot = record.model_copy(deep=True)
        record.is_completed = completed
        auto_update_status(record, now=now)

        await self._save_or_restore(record, snapshot)
        await log.ainfo(
            "action_completion_changed",
            task_id=record.task_id,
            is_completed=completed,
            status=record.status,
        )
        return record

    async def apply_attributes(
        self,
        editor: AttributeDiffEditor,
        record: TaskRecord,
        now: datetime | None = None,
    ) -> set[str]:
        """将属性编辑器的变更写回记录并持久化

        持久化失败时记录恢复原值、编辑器快照不推进，重试看到相同的变更集合。

        Returns:
            写回的字段名集合

        Raises:
            StorageError: 持久化失败
        """
        changed = editor.stage(record, now=now)
        if not changed:
            return changed

        try:
            await save_task(self._stores.conn, self._stores.task_store, record)
        except StorageError:
            editor.rollback(record)
            await log.awarning(
                "attributes_apply_failed",
                task_id=record.task_id,
                fields=sorted(changed),
            )
            raise

        editor.commit(record)
        await log.ainfo(
            "attributes_applied",
            task_id=record.task_id,
            fields=sorted(changed),
            status=record.status,
        )
        return changed

    async def delete_action(self, record: TaskRecord) -> None:
        """删除 Action（终态）"""
        await delete_task(self._stores.conn, self._stores.task_store, record)
        await log.ainfo("action_deleted", task_id=record.task_id)

    # ---- 查询 ----

    async def inbox(self, context: DomainContext | None = None) -> list[TaskRecord]:
        """收件箱：INBOX 状态，按选中领域筛选，最新在前"""
        return await self._stores.task_store.fetch(
            self._inbox_filters(context),
            sort=_NEWEST_FIRST,
        )

    async def inbox_count(self, context: DomainContext | None = None) -> int:
        """收件箱角标数量"""
        return await self._stores.task_store.count(self._inbox_filters(context))

    async def completed(self) -> list[TaskRecord]:
        """已完成列表，最新在前"""
        return await self._stores.task_store.fetch(
            [FieldFilter(field="status", value=ActionStatus.COMPLETED)],
            sort=_NEWEST_FIRST,
        )

    async def actions_for_domain(self, domain: DomainType) -> list[TaskRecord]:
        return await self._stores.task_store.fetch(
            [FieldFilter(field="domain", value=domain)],
            sort=_NEWEST_FIRST,
        )

    async def recent_projects(self, limit: int = RECENT_PROJECTS_LIMIT) -> list[str]:
        return await self._stores.task_store.list_recent_projects(limit)

    @staticmethod
    def _inbox_filters(context: DomainContext | None) -> list[FieldFilter]:
        filters = [FieldFilter(field="status", value=ActionStatus.INBOX)]
        if context is not None and context.selected is not None:
            filters.append(FieldFilter(field="domain", value=context.selected))
        return filters

    # ---- 维护 ----

    async def refresh_statuses(self, now: datetime | None = None) -> int:
        """对所有 Action 重新运行状态引擎，单事务保存发生变化的记录

        Returns:
            状态发生变化的 Action 数量
        """
        records = await self._stores.task_store.fetch()
        changed: list[TaskRecord] = []
        for record in records:
            previous = record.status
            auto_update_status(record, now=now)
            if record.status != previous:
                changed.append(record)

        if changed:
            await save_tasks(self._stores.conn, self._stores.task_store, changed)

        await log.ainfo(
            "action_statuses_refreshed",
            scanned=len(records),
            changed=len(changed),
        )
        return len(changed)


__all__ = ["ActionService"]
