"""快速添加解析单元测试"""

from datetime import timedelta

from aura.core.services import parse_quick_add


class TestParseQuickAdd:
    """parse_quick_add"""

    def test_plain_title(self, now):
        parsed = parse_quick_add("给妈妈打电话", now)
        assert parsed.title == "给妈妈打电话"
        assert parsed.project is None
        assert parsed.due_date is None

    def test_project_token(self, now):
        parsed = parse_quick_add("Review PR #backend", now)
        assert parsed.title == "Review PR"
        assert parsed.project == "backend"

    def test_last_project_wins(self, now):
        assert parse_quick_add("x #a #b", now).project == "b"

    def test_bare_hash_kept_in_title(self, now):
        parsed = parse_quick_add("fix # sign", now)
        assert parsed.title == "fix # sign"
        assert parsed.project is None

    def test_date_words(self, now):
        assert parse_quick_add("Pay rent today", now).due_date == now
        assert parse_quick_add("Pay rent Tomorrow", now).due_date == now + timedelta(days=1)
        assert parse_quick_add("plan nextweek", now).due_date == now + timedelta(days=7)
        assert parse_quick_add("plan next-week", now).due_date == now + timedelta(days=7)

    def test_combined(self, now):
        parsed = parse_quick_add("  Buy   milk #home tomorrow  ", now)
        assert parsed.title == "Buy milk"
        assert parsed.project == "home"
        assert parsed.due_date == now + timedelta(days=1)

    def test_only_tokens(self, now):
        parsed = parse_quick_add("#home today", now)
        assert parsed.title == ""
