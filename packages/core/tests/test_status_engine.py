"""状态引擎单元测试

测试内容：
1. 规则求值顺序（状态有效性 -> 完成 -> 逾期 -> 保留 -> 收件箱 -> 逾期恢复）
2. 时区与日历日边界
3. auto_update_status / initialize_default_status 对记录的修改
"""

from datetime import UTC, datetime, timedelta

import pytest
from aura.core.models import ActionStatus, TaskRecord
from aura.core.status_engine import (
    auto_update_status,
    compute_next_status,
    initialize_default_status,
    is_same_day,
    start_of_day,
)

ALL_STATUSES = list(ActionStatus)
NOT_COMPLETED = [s for s in ActionStatus if s != ActionStatus.COMPLETED]


class TestComputeNextStatus:
    """compute_next_status 规则"""

    @pytest.mark.parametrize("current", ALL_STATUSES)
    def test_completed_wins_for_valid_status(self, current, now):
        """已完成时任何有效状态都变为 COMPLETED"""
        yesterday = now - timedelta(days=1)
        assert compute_next_status(current, True, yesterday, now=now) == ActionStatus.COMPLETED
        assert compute_next_status(current, True, None, now=now) == ActionStatus.COMPLETED

    @pytest.mark.parametrize("current", [None, "", "Someday", "inbox"])
    def test_invalid_status_resets_to_inbox(self, current, now):
        """缺省或无法识别的状态先于完成检查重置为 INBOX"""
        assert compute_next_status(current, False, now, now=now) == ActionStatus.INBOX
        assert compute_next_status(current, True, now, now=now) == ActionStatus.INBOX

    @pytest.mark.parametrize("current", NOT_COMPLETED)
    def test_past_due_is_overdue(self, current, now):
        """截止时间早于今天零点且未完成 -> OVERDUE"""
        for due in (now - timedelta(days=1), start_of_day(now) - timedelta(seconds=1)):
            assert compute_next_status(current, False, due, now=now) == ActionStatus.OVERDUE

    def test_due_at_start_of_day_not_overdue(self, now):
        """截止时间恰为今天零点不算逾期"""
        due = start_of_day(now)
        assert compute_next_status(ActionStatus.INBOX, False, due, now=now) == ActionStatus.INBOX

    def test_overdue_precedes_preservation(self, now):
        """进行中但已逾期 -> OVERDUE"""
        yesterday = now - timedelta(days=1)
        result = compute_next_status(
            ActionStatus.IN_PROGRESS,
            False,
            yesterday,
            now=now,
            preserve_progress_states=True,
        )
        assert result == ActionStatus.OVERDUE

    @pytest.mark.parametrize("current", [ActionStatus.IN_PROGRESS, ActionStatus.NEEDS_REVIEW])
    @pytest.mark.parametrize("preserve", [True, False])
    def test_progress_states_kept(self, current, preserve, now):
        """进行中 / 待审核且未逾期时保持不变"""
        for due in (now, now + timedelta(days=3)):
            result = compute_next_status(
                current, False, due, now=now, preserve_progress_states=preserve
            )
            assert result == current

    def test_inbox_due_today_stays_inbox(self, now):
        assert compute_next_status(ActionStatus.INBOX, False, now, now=now) == ActionStatus.INBOX
        assert compute_next_status(ActionStatus.INBOX, False, None, now=now) == ActionStatus.INBOX

    def test_inbox_due_later_becomes_todo(self, now):
        """收件箱中截止时间不在今天 -> TODO"""
        tomorrow = now + timedelta(days=1)
        assert compute_next_status(ActionStatus.INBOX, False, tomorrow, now=now) == ActionStatus.TODO

    def test_overdue_recovers_to_todo(self, now):
        """截止时间被推迟后 OVERDUE -> TODO"""
        assert compute_next_status(ActionStatus.OVERDUE, False, now, now=now) == ActionStatus.TODO
        assert compute_next_status(ActionStatus.OVERDUE, False, None, now=now) == ActionStatus.TODO

    def test_todo_is_stable(self, now):
        assert compute_next_status(ActionStatus.TODO, False, now, now=now) == ActionStatus.TODO
        later = now + timedelta(days=10)
        assert compute_next_status(ActionStatus.TODO, False, later, now=now) == ActionStatus.TODO

    def test_accepts_raw_strings(self, now):
        """可直接传入存储的原始字符串"""
        assert compute_next_status("In Progress", False, now, now=now) == ActionStatus.IN_PROGRESS
        assert compute_next_status("To-do", True, now, now=now) == ActionStatus.COMPLETED

    @pytest.mark.parametrize("current", ALL_STATUSES)
    @pytest.mark.parametrize("offset_days", [-2, 0, 2])
    @pytest.mark.parametrize("completed", [True, False])
    def test_idempotent(self, current, offset_days, completed, now):
        """相同输入重复计算结果一致，结果再次输入保持不动点"""
        due = now + timedelta(days=offset_days)
        first = compute_next_status(current, completed, due, now=now)
        assert compute_next_status(current, completed, due, now=now) == first
        assert compute_next_status(first, completed, due, now=now) == first


class TestCalendarBoundaries:
    """日历日按 now 所在时区计算"""

    def test_utc_due_is_converted_to_reference_zone(self, now):
        """UTC 前一天 17:00 在 +08:00 下是今天 01:00"""
        due = datetime(2026, 3, 14, 17, 0, tzinfo=UTC)
        assert is_same_day(due, now)
        assert compute_next_status(ActionStatus.INBOX, False, due, now=now) == ActionStatus.INBOX

    def test_utc_due_before_local_midnight_is_overdue(self, now):
        """UTC 前一天 15:59 在 +08:00 下是昨天 23:59"""
        due = datetime(2026, 3, 14, 15, 59, tzinfo=UTC)
        assert not is_same_day(due, now)
        assert compute_next_status(ActionStatus.TODO, False, due, now=now) == ActionStatus.OVERDUE

    def test_naive_datetimes(self):
        """naive 时间按同一本地时区比较"""
        now = datetime(2026, 3, 15, 9, 0)
        assert compute_next_status(
            ActionStatus.INBOX, False, datetime(2026, 3, 15, 23, 0), now=now
        ) == ActionStatus.INBOX
        assert compute_next_status(
            ActionStatus.INBOX, False, datetime(2026, 3, 14, 23, 0), now=now
        ) == ActionStatus.OVERDUE


class TestAutoUpdateStatus:
    """auto_update_status 写回记录"""

    def test_writes_raw_value(self, now):
        record = TaskRecord(title="写报告", status="Inbox", due_date=now - timedelta(days=2))
        result = auto_update_status(record, now=now)
        assert result == ActionStatus.OVERDUE
        assert record.status == "Overdue"

    def test_does_not_fill_due_date(self, now):
        """due_date 缺省时按 now 计算但不回填"""
        record = TaskRecord(title="整理书架", status=ActionStatus.OVERDUE.value)
        auto_update_status(record, now=now)
        assert record.status == ActionStatus.TODO.value
        assert record.due_date is None

    def test_completed_record(self, now):
        record = TaskRecord(title="买菜", status="To-do", is_completed=True)
        auto_update_status(record, now=now)
        assert record.status == ActionStatus.COMPLETED.value

    def test_unknown_status_reset(self, now):
        record = TaskRecord(title="旧数据", status="Archived", is_completed=True)
        assert auto_update_status(record, now=now) == ActionStatus.INBOX
        assert record.status == "Inbox"


class TestInitializeDefaultStatus:
    """新建 Action 的默认值"""

    def test_new_record_due_today_is_inbox(self, now):
        """新建、未完成、截止今天 -> INBOX"""
        record = TaskRecord(title="新任务", due_date=now)
        initialize_default_status(record, now=now)
        assert record.status == ActionStatus.INBOX.value
        assert record.created_at == now

    def test_fills_missing_due_date(self, now):
        record = TaskRecord(title="新任务")
        initialize_default_status(record, now=now)
        assert record.due_date == now

    def test_default_due_date_argument(self, now):
        deadline = now + timedelta(days=5)
        record = TaskRecord(title="新任务")
        initialize_default_status(record, default_due_date=deadline, now=now)
        assert record.due_date == deadline

    def test_completed_checked_first(self, now):
        """创建时先检查完成，状态缺省的已完成记录 -> COMPLETED"""
        record = TaskRecord(title="已完成任务", is_completed=True)
        initialize_default_status(record, now=now)
        assert record.status == ActionStatus.COMPLETED.value

    def test_existing_values_kept(self, now):
        created = now - timedelta(hours=3)
        due = now + timedelta(days=1)
        record = TaskRecord(
            title="已有状态",
            status=ActionStatus.IN_PROGRESS.value,
            created_at=created,
            due_date=due,
        )
        initialize_default_status(record, now=now)
        assert record.status == ActionStatus.IN_PROGRESS.value
        assert record.created_at == created
        assert record.due_date == due
