"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、状态引擎默认行为、最近项目数量等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("AURA_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "AURA_DB_PATH",
        str(_get_base_dir() / "sqlite" / "aura.db"),
    )


def get_preserve_progress_states() -> bool:
    """自动流转时是否保留 In Progress / Needs Review 状态（默认保留）"""
    raw = os.environ.get("AURA_PRESERVE_PROGRESS_STATES", "true")
    return raw.strip().lower() not in {"0", "false", "no", "off"}


# 最近项目查询扫描的记录上限
RECENT_PROJECTS_LIMIT: int = int(
    os.environ.get("AURA_RECENT_PROJECTS_LIMIT", "40")
)

# 日期字段判等容差（秒），吸收序列化带来的舍入误差
DATE_EQUALITY_TOLERANCE_S: float = 0.5
