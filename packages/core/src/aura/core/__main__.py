"""CLI 入口模块 -- python -m aura.core <command>

支持的命令：
  refresh-statuses [--json]  对所有 Action 重新运行状态引擎（--json 输出 JSON 日志）
"""

import asyncio
import sys

from .config import get_db_path
from .logging_config import setup_logging


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m aura.core <command>")
        print("命令:")
        print("  refresh-statuses [--json]  对所有 Action 重新运行状态引擎")
        sys.exit(1)

    command = sys.argv[1]

    if command == "refresh-statuses":
        setup_logging(log_format="json" if "--json" in sys.argv[2:] else None)
        asyncio.run(refresh_statuses())
    else:
        print(f"未知命令: {command}")
        print("可用命令: refresh-statuses")
        sys.exit(1)


async def refresh_statuses() -> int:
    """执行状态刷新，返回状态变化的 Action 数量"""
    from .services import ActionService
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")
    print("开始刷新 Action 状态...")

    store_group = await create_store_group(db_path)

    try:
        changed = await ActionService(store_group).refresh_statuses()
        print(f"刷新完成，{changed} 个 Action 状态发生变化")
        return changed
    finally:
        await store_group.close()


if __name__ == "__main__":
    main()
