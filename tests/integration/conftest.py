"""集成测试共享 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from aura.core.services import ActionService
from aura.core.store import StoreGroup, create_store_group


@pytest.fixture
def integration_db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """集成测试数据库路径（同时写入 AURA_DB_PATH 供 CLI 使用）"""
    db_path = tmp_path / "sqlite" / "aura.db"
    monkeypatch.setenv("AURA_DB_PATH", str(db_path))
    monkeypatch.delenv("AURA_PRESERVE_PROGRESS_STATES", raising=False)
    return db_path


@pytest_asyncio.fixture
async def integration_stores(integration_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    store_group = await create_store_group(str(integration_db_path))
    yield store_group
    await store_group.close()


@pytest.fixture
def action_service(integration_stores: StoreGroup) -> ActionService:
    return ActionService(integration_stores)
