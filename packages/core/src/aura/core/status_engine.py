"""状态引擎 -- 根据 Action 当前字段计算下一个状态

compute_next_status 是纯函数，对任意输入都有定义，不抛异常。
规则按以下顺序求值：

1. due_date 缺省时按 now 比较
2. 当前状态缺省或无法识别 -> INBOX
3. 已完成 -> COMPLETED
4. 截止时间早于今天零点 -> OVERDUE
5. 开启保留且处于 IN_PROGRESS / NEEDS_REVIEW -> 保持不变
6. INBOX：截止时间在今天 -> INBOX，否则 -> TODO
7. OVERDUE（已不再逾期）-> TODO
8. 其余保持不变

日历计算使用 now 所在时区；naive datetime 视为该时区的本地时间。
"""

from datetime import datetime

import structlog

from .config import get_preserve_progress_states
from .models.enums import PROGRESS_STATES, ActionStatus
from .models.task import TaskRecord

log = structlog.get_logger()


def local_now() -> datetime:
    """当前本地时间（带时区）"""
    return datetime.now().astimezone()


def _in_zone_of(value: datetime, reference: datetime) -> datetime:
    """将 value 转换到 reference 所在时区"""
    if reference.tzinfo is None:
        if value.tzinfo is None:
            return value
        # naive 参考时间视为本地时间
        return value.astimezone().replace(tzinfo=None)
    if value.tzinfo is None:
        return value.replace(tzinfo=reference.tzinfo)
    return value.astimezone(reference.tzinfo)


def start_of_day(moment: datetime) -> datetime:
    """moment 所在日历日的零点"""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def is_same_day(value: datetime, reference: datetime) -> bool:
    """value 与 reference 是否在 reference 时区下的同一日历日"""
    return _in_zone_of(value, reference).date() == reference.date()


def compute_next_status(
    current: ActionStatus | str | None,
    is_completed: bool,
    due_date: datetime | None,
    now: datetime | None = None,
    preserve_progress_states: bool = True,
) -> ActionStatus:
    """计算 Action 的下一个状态

    Args:
        current: 当前状态（枚举或存储的原始字符串）
        is_completed: 是否已完成
        due_date: 截止时间，缺省时按 now 处理
        now: 参考时间，默认当前本地时间
        preserve_progress_states: 是否保留进行中 / 待审核状态

    Returns:
        下一个状态
    """
    if now is None:
        now = local_now()
    due = _in_zone_of(due_date, now) if due_date is not None else now

    status = current if isinstance(current, ActionStatus) else ActionStatus.parse(current)
    if status is None:
        # 先于完成检查，缺省 / 无法识别的状态一律重置为 INBOX
        return ActionStatus.INBOX

    if is_completed:
        return ActionStatus.COMPLETED

    if due < start_of_day(now):
        return ActionStatus.OVERDUE

    if preserve_progress_states and status in PROGRESS_STATES:
        return status

    if status == ActionStatus.INBOX:
        return ActionStatus.INBOX if is_same_day(due, now) else ActionStatus.TODO

    if status == ActionStatus.OVERDUE:
        return ActionStatus.TODO

    return status


def auto_update_status(
    record: TaskRecord,
    now: datetime | None = None,
    preserve_progress_states: bool | None = None,
) -> ActionStatus:
    """重新计算并写入 record.status

    不会回填 due_date；preserve_progress_states 缺省时读取配置。

    Returns:
        写入后的状态
    """
    if preserve_progress_states is None:
        preserve_progress_states = get_preserve_progress_states()

    previous = record.status
    next_status = compute_next_status(
        record.status,
        record.is_completed,
        record.due_date,
        now=now,
        preserve_progress_states=preserve_progress_states,
    )
    record.status = next_status.value

    if previous != record.status:
        log.debug(
            "action_status_updated",
            task_id=record.task_id,
            from_status=previous,
            to_status=record.status,
        )
    return next_status


def initialize_default_status(
    record: TaskRecord,
    default_due_date: datetime | None = None,
    now: datetime | None = None,
) -> None:
    """新建 Action 时填充默认值（仅在创建时调用，不用于后续编辑）

    - created_at 缺省 -> now
    - due_date 缺省 -> default_due_date（默认 now）
    - 已完成 -> COMPLETED；否则状态缺省时 -> INBOX；其余保持不变
    """
    if now is None:
        now = local_now()
    if record.created_at is None:
        record.created_at = now
    if record.due_date is None:
        record.due_date = default_due_date if default_due_date is not None else now

    if record.is_completed:
        record.status = ActionStatus.COMPLETED.value
    elif record.status is None:
        record.status = ActionStatus.INBOX.value
