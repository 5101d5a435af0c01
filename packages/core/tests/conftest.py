"""packages/core 测试配置 -- 核心层 fixture"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio

# 固定时区的参考时间，避免依赖运行环境的本地时区
TZ = timezone(timedelta(hours=8))
NOW = datetime(2026, 3, 15, 14, 30, tzinfo=TZ)


@pytest.fixture
def now() -> datetime:
    """测试用参考时间（2026-03-15 14:30 +08:00）"""
    return NOW


@pytest_asyncio.fixture
async def core_db_path(tmp_path: Path) -> Path:
    """核心层临时数据库路径"""
    return tmp_path / "core_test.db"


@pytest_asyncio.fixture
async def store_group(core_db_path: Path) -> AsyncGenerator:
    """核心层已初始化的 StoreGroup"""
    from aura.core.store import create_store_group

    group = await create_store_group(str(core_db_path))
    yield group
    await group.close()


@pytest.fixture(autouse=True)
def _clear_aura_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """隔离 AURA_* 环境变量"""
    for name in (
        "AURA_DATA_DIR",
        "AURA_DB_PATH",
        "AURA_PRESERVE_PROGRESS_STATES",
        "AURA_LOG_FORMAT",
        "AURA_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
